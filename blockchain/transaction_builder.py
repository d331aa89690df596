"""
Transaction Builder
Constructs contract deployment payloads and transactions
"""

from typing import Dict, Optional, Sequence
from web3 import Web3
from loguru import logger


def build_deployment_payload(factory, constructor_args: Sequence, from_address: str) -> Dict:
    """
    Build the raw deployment payload without broadcasting it

    Args:
        factory: web3 contract factory
        constructor_args: Constructor arguments in ABI order
        from_address: Address that would send the deployment

    Returns:
        Call dict with 'from' and 'data' (bytecode + encoded arguments)
    """
    constructor = factory.constructor(*constructor_args)
    return {
        'from': Web3.to_checksum_address(from_address),
        'data': constructor.data_in_transaction
    }


class TransactionBuilder:
    """
    Builds unsigned contract deployment transactions
    """

    def __init__(self, w3: Web3, chain_id: Optional[int] = None):
        """
        Initialize Transaction Builder

        Args:
            w3: Web3 instance
            chain_id: Chain ID to sign for (queried from the node when None)
        """
        self.w3 = w3
        self._chain_id = chain_id

    @property
    def chain_id(self) -> int:
        if self._chain_id is None:
            self._chain_id = self.w3.eth.chain_id
        return self._chain_id

    def build_deployment_tx(
        self,
        factory,
        constructor_args: Sequence,
        from_address: str,
        gas_limit: int,
        nonce: int
    ) -> Dict:
        """
        Build deployment transaction with explicit gas limit and nonce

        Args:
            factory: web3 contract factory
            constructor_args: Constructor arguments in ABI order
            from_address: Deployer address
            gas_limit: Gas limit for the transaction
            nonce: Nonce to use

        Returns:
            Unsigned transaction dict (fee fields filled by web3)
        """
        tx = factory.constructor(*constructor_args).build_transaction({
            'from': Web3.to_checksum_address(from_address),
            'nonce': nonce,
            'gas': gas_limit,
            'chainId': self.chain_id
        })

        logger.debug(f"Built deployment tx: nonce={nonce} gas={gas_limit}")
        return tx
