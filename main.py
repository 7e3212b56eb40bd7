"""
Ganache Fork - Main Entry Point
Starts a local node forked from Ethereum mainnet via Infura
"""

import sys
import asyncio
import argparse
from loguru import logger

from devnode.launcher import NodeLauncher, build_ganache_args, read_node_env
from utils.logging_setup import configure_logging
from utils.network_config import load_network_config


async def main(strict: bool = False):
    """Launch ganache and relay its output until it exits"""
    config = load_network_config()
    ganache_config = config['ganache']

    env = read_node_env(strict=strict)

    args = build_ganache_args(
        env['api_key'],
        env['mnemonic'],
        balance=ganache_config['default_balance_ether'],
        fork_url_template=ganache_config['fork_url_template']
    )

    launcher = NodeLauncher(args)
    return await launcher.run()


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Start a mainnet-forking ganache node")
    parser.add_argument(
        '--strict',
        action='store_true',
        help="fail when INFURA_API_KEY or MNEMONIC is unset"
    )
    return parser.parse_args(argv)


if __name__ == "__main__":
    options = parse_args()
    configure_logging("data/logs/ganache.log")

    try:
        asyncio.run(main(strict=options.strict))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    except ValueError as e:
        logger.error(str(e))
        sys.exit(1)
