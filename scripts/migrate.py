"""
Migration Script
Deploys the contracts in migrations/ to the development node

Run from the repo root as a module so the project packages resolve
without installing:
    python -m scripts.migrate --network development
(or `pip install -e .` first and run `python scripts/migrate.py`)
"""

import os
import sys
import argparse
from pathlib import Path
from web3 import Web3
from loguru import logger
from dotenv import load_dotenv

from blockchain.artifacts import ArtifactStore
from blockchain.deployer import Deployer
from blockchain.migration_runner import run_migrations
from utils.logging_setup import configure_logging
from utils.network_config import load_network_config

load_dotenv()


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Run contract migrations")
    parser.add_argument('--network', default='development', help="network name passed to each step")
    parser.add_argument('--from-step', type=int, default=None, help="skip migrations numbered below N")
    return parser.parse_args(argv)


def migrate(network: str = 'development', from_step=None, w3: Web3 = None) -> int:
    """
    Connect to the node and run every migration step

    Returns:
        Process exit code
    """
    config = load_network_config()['development']

    if w3 is None:
        w3 = Web3(Web3.HTTPProvider(config['rpc_url']))

    if not w3.is_connected():
        logger.error(f"Failed to connect to {config['rpc_url']} - is ganache running? (python main.py)")
        return 1

    accounts = w3.eth.accounts
    logger.info(f"Connected to '{network}' (chain {w3.eth.chain_id}), {len(accounts)} account(s)")

    try:
        deployer = Deployer(
            w3,
            network,
            ArtifactStore(config['artifacts_dir']),
            private_key=os.getenv('DEPLOYER_PRIVATE_KEY') or None
        )
        run_migrations(deployer, network, accounts, Path(config['migrations_dir']), from_step=from_step)
    except Exception as e:
        logger.error(f"Migration aborted: {e}")
        return 1

    for name, address in deployer.deployments.items():
        logger.info(f"  {name}: {address}")

    return 0


def main(argv=None) -> int:
    options = parse_args(argv)
    configure_logging("data/logs/migrate.log")
    return migrate(options.network, options.from_step)


if __name__ == "__main__":
    sys.exit(main())
