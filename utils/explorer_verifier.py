"""
Explorer Verifier
Submits deployed contract sources to Etherscan-compatible block explorers
"""

import json
from typing import Dict, Optional, Sequence
import requests
from loguru import logger

from deployer.exceptions import ConfigurationError, DeploymentError, VerificationError

STANDARD_JSON_INPUT = "solidity-standard-json-input"


class ExplorerVerifier:
    """
    Source verification through an explorer's Etherscan-style API

    Each deployed contract is submitted once with the compiler's standard
    JSON input and its encoded constructor arguments. The explorer queues
    the job and answers with a GUID; nothing is polled or retried here.
    """

    def __init__(
        self,
        explorer,
        contract_manager,
        session: Optional[requests.Session] = None,
        timeout: int = 30
    ):
        """
        Initialize Explorer Verifier

        Args:
            explorer: Network's ExplorerConfig (api_url, api_key)
            contract_manager: Source of artifacts and build-info
            session: HTTP session (a new requests.Session when None)
            timeout: Request timeout in seconds
        """
        if explorer is None:
            raise ConfigurationError("Network has no block explorer configured")
        if not explorer.api_key:
            raise ConfigurationError(
                f"Explorer API key missing for {explorer.api_url} (set {explorer.api_key_env or 'api_key_env'})"
            )

        self.explorer = explorer
        self.contract_manager = contract_manager
        self.session = session or requests.Session()
        self.timeout = timeout

    def verification_request(self, result) -> Dict[str, str]:
        """
        Form fields for a verifysourcecode submission

        Args:
            result: Confirmed DeploymentResult

        Returns:
            Request parameters
        """
        name = result.target.name
        artifact = self.contract_manager.load_artifact(name)
        build_info = self.contract_manager.build_info_for(name)

        return {
            'apikey': self.explorer.api_key,
            'module': 'contract',
            'action': 'verifysourcecode',
            'contractaddress': result.deployed_address,
            'sourceCode': json.dumps(build_info['input']),
            'codeformat': STANDARD_JSON_INPUT,
            'contractname': f"{artifact['sourceName']}:{artifact.get('contractName', name)}",
            'compilerversion': f"v{build_info['solcLongVersion']}",
            # the API spells it this way
            'constructorArguements': self.contract_manager.encode_constructor_args(
                name, result.target.constructor_args
            ),
        }

    def submit(self, result) -> str:
        """
        Submit one deployed contract for verification

        Args:
            result: Confirmed DeploymentResult

        Returns:
            Explorer GUID of the verification job
        """
        params = self.verification_request(result)

        try:
            response = self.session.post(self.explorer.api_url, data=params, timeout=self.timeout)
            response.raise_for_status()
            body = response.json()
        except (requests.RequestException, ValueError) as e:
            raise VerificationError(f"Explorer request for {result.target.name} failed: {e}") from e

        if str(body.get('status')) != '1':
            reason = body.get('result') or body.get('message') or 'unknown error'
            raise VerificationError(f"Explorer rejected {result.target.name}: {reason}")

        guid = body['result']
        logger.info(f"{result.target.name} submitted for verification (guid {guid})")
        return guid

    def submit_all(self, results: Sequence) -> Dict[str, Optional[str]]:
        """
        Submit every deployed contract, continuing past failures

        Args:
            results: Confirmed DeploymentResults

        Returns:
            Contract name -> GUID (None when the submission failed)
        """
        submitted = {}

        for result in results:
            try:
                submitted[result.target.name] = self.submit(result)
            except DeploymentError as e:
                logger.error(f"Verification of {result.target.name} not submitted: {e}")
                submitted[result.target.name] = None

        return submitted
