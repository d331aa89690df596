"""
System Check Script
Verifies configuration, connectivity and artifacts before deploying
"""

import os
import sys
import json
import argparse
from loguru import logger
from dotenv import load_dotenv

from blockchain.contract_manager import ContractManager
from deployer.exceptions import DeploymentError
from deployer.plans import load_plan
from deployer.wallet_manager import WalletManager
from utils.network_registry import NetworkRegistry

load_dotenv()

MIN_BALANCE = 0.01


def check_environment_variables():
    """Check if all required environment variables are set"""
    logger.info("Checking environment variables...")

    required_vars = ['PRIVATE_KEY']

    missing = [var for var in required_vars if not os.getenv(var)]

    if missing:
        logger.error(f"Missing environment variables: {', '.join(missing)}")
        return False

    logger.success("✓ All environment variables set")
    return True


def check_configuration_files(paths):
    """Check that configuration files exist and parse"""
    logger.info("Checking configuration files...")

    invalid = []
    for file_path in paths:
        try:
            with open(file_path, 'r') as f:
                json.load(f)
            logger.success(f"  ✓ {file_path}")
        except (OSError, ValueError) as e:
            logger.error(f"  ✗ {file_path}: {e}")
            invalid.append(file_path)

    if invalid:
        logger.error(f"Missing/invalid config files: {', '.join(invalid)}")
        return False

    logger.success("✓ All configuration files valid")
    return True


def check_network(registry, network_name):
    """Check RPC connection and chain ID"""
    logger.info(f"Checking {network_name} connection...")

    try:
        w3 = registry.connect(network_name)
    except Exception as e:
        logger.error(f"  ✗ {e}")
        return None

    logger.success(f"  ✓ Block: {w3.eth.block_number}")
    return w3


def check_wallet_balance(w3):
    """Check the deployer balance"""
    logger.info("Checking deployer balance...")

    if w3 is None:
        logger.warning("No connection - skipping balance check")
        return False

    try:
        signer = WalletManager().get_signers(w3)[0]
        balance = signer.get_balance()
    except DeploymentError as e:
        logger.error(f"  ✗ {e}")
        return False

    logger.info(f"  Deployer {signer.address}: {balance:.4f}")

    if balance < MIN_BALANCE:
        logger.warning(f"  ⚠ Deployer balance low (need at least {MIN_BALANCE})")
        return False

    logger.success("  ✓ Deployer balance sufficient")
    return True


def check_artifacts(contract_manager, targets):
    """Check that every planned contract is compiled and deployable"""
    logger.info("Checking compiled artifacts...")

    ok = True
    for target in targets:
        try:
            contract_manager.load_artifact(target.name)
            logger.success(f"  ✓ {target.name}")
        except DeploymentError as e:
            logger.error(f"  ✗ {e}")
            ok = False

    if not ok:
        logger.info("  Run: npx hardhat compile")
    return ok


def check_compiler_settings(contract_manager, solidity):
    """Check build-info against the configured compiler settings"""
    logger.info("Checking compiler settings...")

    mismatches = contract_manager.compiler_mismatches(solidity)
    for mismatch in mismatches:
        logger.error(f"  ✗ {mismatch}")

    if mismatches:
        return False

    logger.success(f"  ✓ solc {solidity.get('version')} settings match")
    return True


def main(argv=None):
    """Run all system checks"""
    parser = argparse.ArgumentParser(description="Pre-deployment system check")
    parser.add_argument("--network", default=os.getenv("DEPLOY_NETWORK"))
    parser.add_argument("--plan", default="suite")
    parser.add_argument("--config", default="config/deploy_config.json")
    parser.add_argument("--networks", default="config/networks.json")
    args = parser.parse_args(argv)

    logger.info("=" * 70)
    logger.info("Deployment System Check")
    logger.info("=" * 70)

    results = [
        ("Environment Variables", check_environment_variables()),
        ("Configuration Files", check_configuration_files([args.config, args.networks])),
    ]

    if results[-1][1]:
        with open(args.config, 'r') as f:
            config = json.load(f)

        contract_manager = ContractManager(None, config.get('deployment', {}).get('artifacts_dir', 'artifacts'))

        try:
            targets = load_plan(config, args.plan)
        except DeploymentError as e:
            logger.error(f"  ✗ {e}")
            targets = []
        results.append(("Compiled Artifacts", bool(targets) and check_artifacts(contract_manager, targets)))
        results.append(("Compiler Settings", check_compiler_settings(contract_manager, config.get('solidity', {}))))

        if args.network:
            w3 = check_network(NetworkRegistry(args.networks), args.network)
            results.append(("RPC Connection", w3 is not None))
            results.append(("Deployer Balance", check_wallet_balance(w3)))
        else:
            logger.warning("No --network given - skipping connection checks")

    # Summary
    logger.info("")
    logger.info("=" * 70)
    logger.info("Summary")
    logger.info("=" * 70)

    passed = sum(1 for _, result in results if result)
    total = len(results)

    for name, result in results:
        status = "✓ PASS" if result else "✗ FAIL"
        logger.info(f"  {status}: {name}")

    logger.info("")
    logger.info(f"Total: {passed}/{total} checks passed")

    if passed == total:
        logger.success("✅ Ready to deploy")
        logger.info(f"Deploy: python deploy.py --network {args.network or '<name>'} --plan {args.plan}")
        return 0

    logger.error("❌ Not ready - fix issues above")
    return 1


if __name__ == "__main__":
    sys.exit(main())
