"""
Wallet Manager
Loads deployer keys from the environment and exposes them as signers
"""

import os
from decimal import Decimal
from typing import Dict, List, Optional
from web3 import Web3
from eth_account import Account
from loguru import logger
from dotenv import load_dotenv

from .exceptions import SignerUnavailableError

load_dotenv()


class Signer:
    """
    Local account bound to a Web3 connection
    """

    def __init__(self, w3: Web3, account):
        self.w3 = w3
        self.account = account
        self.address = account.address

    def get_nonce(self) -> int:
        """Next nonce for this account, counting pending transactions"""
        return self.w3.eth.get_transaction_count(self.address, 'pending')

    def get_balance(self) -> Decimal:
        """Native balance in ether units"""
        balance = self.w3.eth.get_balance(self.address)
        return Decimal(self.w3.from_wei(balance, 'ether'))

    def sign_transaction(self, transaction: Dict):
        """
        Sign a transaction with this account

        Args:
            transaction: Transaction dict

        Returns:
            Signed transaction
        """
        try:
            return self.account.sign_transaction(transaction)
        except Exception as e:
            logger.error(f"Error signing transaction: {e}")
            raise

    def __repr__(self) -> str:
        return f"Signer({self.address})"


class WalletManager:
    """
    Holds the deployer accounts configured for this machine

    PRIVATE_KEY is the primary deployer; EXTRA_PRIVATE_KEYS may list more
    comma-separated keys, exposed after it in signer order.
    """

    def __init__(self, private_keys: Optional[List[str]] = None):
        """
        Initialize wallet manager

        Args:
            private_keys: Keys to use instead of the environment
        """
        if private_keys is None:
            private_keys = self._keys_from_env()

        if not private_keys:
            raise SignerUnavailableError("PRIVATE_KEY must be set in .env")

        try:
            self.accounts = [Account.from_key(key) for key in private_keys]
        except Exception as e:
            # never echo the key itself
            raise SignerUnavailableError(f"Invalid deployer private key: {type(e).__name__}") from None

        for account in self.accounts:
            logger.info(f"Deployer wallet: {account.address}")

    @staticmethod
    def _keys_from_env() -> List[str]:
        keys = []

        primary = os.getenv('PRIVATE_KEY')
        if primary:
            keys.append(primary.strip())

        extra = os.getenv('EXTRA_PRIVATE_KEYS', '')
        keys.extend(key.strip() for key in extra.split(',') if key.strip())

        return keys

    def get_signers(self, w3: Web3) -> List[Signer]:
        """
        Bind accounts to a connection

        Args:
            w3: Web3 instance

        Returns:
            Signers in configuration order
        """
        return [Signer(w3, account) for account in self.accounts]
