"""
Fusion Deployer CLI
Simulates and deploys a contract plan to a configured network
"""

import argparse
import os
import sys
from typing import List, Optional, Tuple
from loguru import logger
from dotenv import load_dotenv

from blockchain.client import ExecutionClient
from blockchain.contract_manager import ContractManager
from utils.explorer_verifier import ExplorerVerifier
from utils.gas_calculator import GasCalculator
from utils.network_registry import NetworkConfig, NetworkRegistry
from .config import DEFAULT_CONFIG_PATH, load_config
from .exceptions import DeploymentAborted, DeploymentError, SignerUnavailableError
from .plans import load_plan, parse_contract_list
from .sequencer import DeploymentSequencer
from .wallet_manager import WalletManager

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)


def configure_logging(level: str = "INFO", log_file: Optional[str] = None):
    """Console sink plus an optional rotating file sink"""
    logger.remove()
    logger.add(sys.stderr, format=LOG_FORMAT, level=level)

    if log_file:
        logger.add(
            log_file,
            rotation="1 day",
            retention="7 days",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function} - {message}",
            level="DEBUG"
        )


def nonce_arg(value: str) -> int:
    try:
        nonce = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"nonce must be an integer, got {value!r}") from None
    if nonce < 0:
        raise argparse.ArgumentTypeError(f"nonce cannot be negative: {nonce}")
    return nonce


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fusion-deploy",
        description="Simulate and deploy contracts with sequenced nonces"
    )
    parser.add_argument("--network", default=os.getenv("DEPLOY_NETWORK"),
                        help="Network name from the registry (default: $DEPLOY_NETWORK)")
    parser.add_argument("--plan", default=None,
                        help="Deployment plan from the config (default: config's default_plan)")
    parser.add_argument("--contracts", default=None,
                        help="Comma-separated contracts without constructor arguments (overrides --plan)")
    parser.add_argument("--nonce", type=nonce_arg, default=None,
                        help="Starting nonce (default: signer's pending nonce)")
    parser.add_argument("--config", default=DEFAULT_CONFIG_PATH)
    parser.add_argument("--networks", default="config/networks.json")
    parser.add_argument("--artifacts", default=None, help="Hardhat artifacts directory")
    parser.add_argument("--simulate-only", action="store_true",
                        help="Only run gas simulation, send nothing")
    parser.add_argument("--verify", action="store_true",
                        help="Submit deployed sources to the network's block explorer")
    parser.add_argument("--yes", action="store_true", help="Do not ask for confirmation")
    parser.add_argument("--log-level", default="INFO")
    parser.add_argument("--log-file", default=os.getenv("DEPLOY_LOG_FILE"))
    return parser


def build_session(args, config) -> Tuple[DeploymentSequencer, object, NetworkConfig]:
    """
    Connect to the network and wire the sequencer

    Returns:
        (sequencer, signer, network)
    """
    registry = NetworkRegistry(args.networks)
    network = registry.get(args.network)
    w3 = registry.connect(args.network)

    deployment = config.get('deployment', {})
    contract_manager = ContractManager(w3, args.artifacts or deployment.get('artifacts_dir', 'artifacts'))

    client = ExecutionClient(
        w3,
        contract_manager,
        WalletManager(),
        confirmation_timeout=deployment.get('confirmation_timeout', 300),
        chain_id=network.chain_id
    )

    signers = client.get_signers()
    if not signers:
        raise SignerUnavailableError("No deployer signer available")

    sequencer = DeploymentSequencer(client, GasCalculator(config))
    return sequencer, signers[0], network


def _resolve_targets(args, config):
    if args.contracts:
        return parse_contract_list(args.contracts)
    plan = args.plan or config.get('deployment', {}).get('default_plan', 'suite')
    return load_plan(config, plan)


def _print_results(results, network: NetworkConfig):
    for result in results:
        line = f"{result.target.name}: {result.deployed_address}"
        link = network.address_url(result.deployed_address)
        if link:
            line += f"  ({link})"
        print(line)

        tx_link = network.tx_url(result.tx_hash) if result.tx_hash else None
        if tx_link:
            logger.info(f"{result.target.name} deployment tx: {tx_link}")


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level, args.log_file)

    if not args.network:
        logger.error("No network selected (use --network or set DEPLOY_NETWORK)")
        return 1

    try:
        config = load_config(args.config)
        targets = _resolve_targets(args, config)
        sequencer, signer, network = build_session(args, config)

        logger.info(f"Deploying contracts with the account: {signer.address}")
        logger.info(f"Network: {network.name} | Contracts: {', '.join(t.name for t in targets)}")

        if args.simulate_only:
            estimates = sequencer.preflight(targets, signer.address)
            total_gas = 0
            for target, estimate in zip(targets, estimates):
                gas_limit = sequencer.gas_calculator.apply_safety_margin(estimate.value)
                total_gas += gas_limit
                print(f"{target.name}: estimate {estimate.value}, gas limit {gas_limit}")

            cost = sequencer.gas_calculator.estimate_deployment_cost(signer.w3, total_gas)
            if cost is not None:
                print(f"Worst-case cost: {cost} (gas limit {total_gas} at current gas price)")
            return 0

        verifier = None
        if args.verify:
            verifier = ExplorerVerifier(network.explorer, sequencer.client.contract_manager)

        if not args.yes:
            confirm = input("\nProceed with deployment? (yes/no): ")
            if confirm.strip().lower() != 'yes':
                logger.info("Deployment cancelled")
                return 0

        results = sequencer.run(targets, signer, starting_nonce=args.nonce)

    except DeploymentAborted as e:
        logger.error(f"❌ {e}")
        if e.deployed:
            logger.warning("Contracts deployed before the failure:")
            for result in e.deployed:
                logger.warning(f"  {result.target.name}: {result.deployed_address} (nonce {result.nonce})")
        return 1
    except DeploymentError as e:
        logger.error(f"❌ {e}")
        return 1
    except Exception as e:
        logger.opt(exception=e).error(f"❌ Unexpected error: {e}")
        return 1

    _print_results(results, network)
    next_nonce = results[-1].nonce + 1 if results else args.nonce
    if next_nonce is not None:
        print(f"Next nonce: {next_nonce}")

    if verifier is not None:
        submitted = verifier.submit_all(results)
        failed = [name for name, guid in submitted.items() if guid is None]
        if failed:
            logger.warning(f"Verification not submitted for: {', '.join(failed)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
