"""
Ganache Launcher
Spawns a mainnet-forking ganache node and relays its output
"""

import os
import sys
import codecs
import asyncio
from typing import Callable, Dict, List, Optional
from loguru import logger
from dotenv import load_dotenv

load_dotenv()


FORK_URL_TEMPLATE = "https://mainnet.infura.io/v3/"
DEFAULT_BALANCE_ETHER = 1000

# Rendered in place of an unset environment value
PLACEHOLDER = "undefined"

REQUIRED_ENV = ('INFURA_API_KEY', 'MNEMONIC')


def _render(value: Optional[str]) -> str:
    return PLACEHOLDER if value is None else str(value)


def build_ganache_args(
    api_key: Optional[str],
    mnemonic: Optional[str],
    balance: int = DEFAULT_BALANCE_ETHER,
    fork_url_template: str = FORK_URL_TEMPLATE
) -> List[str]:
    """
    Build the ganache command-line arguments

    Args:
        api_key: Infura project key appended to the fork URL
        mnemonic: Seed phrase for the generated accounts
        balance: Ether credited to each account
        fork_url_template: RPC URL prefix the key is appended to

    Returns:
        ['-f', <fork url>, '-e', <balance>, '-m', <mnemonic>]
    """
    return [
        '-f', fork_url_template + _render(api_key),
        '-e', str(balance),
        '-m', _render(mnemonic)
    ]


def read_node_env(strict: bool = False) -> Dict[str, Optional[str]]:
    """
    Read the Infura key and mnemonic from the environment

    Args:
        strict: Raise instead of warning when a value is missing

    Returns:
        Dict with api_key and mnemonic (None when unset)
    """
    # Check required variables
    missing = [name for name in REQUIRED_ENV if not os.getenv(name)]

    if missing:
        if strict:
            raise ValueError(f"Missing environment variables: {', '.join(missing)}")
        logger.warning(f"Missing environment variables: {', '.join(missing)}")

    return {
        'api_key': os.getenv('INFURA_API_KEY'),
        'mnemonic': os.getenv('MNEMONIC')
    }


def default_executable() -> str:
    """ganache CLI name for this platform, overridable by GANACHE_EXECUTABLE"""
    override = os.getenv('GANACHE_EXECUTABLE')
    if override:
        return override

    return 'ganache-cli.cmd' if sys.platform.startswith('win') else 'ganache-cli'


def print_output(chunk: str):
    print(f"stdout: {chunk}", flush=True)


def report_spawn_error(error: Exception):
    logger.error("Failed to start subprocess.")


class NodeLauncher:
    """
    Starts the ganache child process once and echoes its stdout

    No restart, health check or timeout: a spawn failure is reported
    through on_error and the launcher carries on without a child.
    """

    def __init__(
        self,
        args: List[str],
        executable: Optional[str] = None,
        on_output: Optional[Callable[[str], None]] = None,
        on_error: Optional[Callable[[Exception], None]] = None,
        chunk_size: int = 4096
    ):
        """
        Initialize Node Launcher

        Args:
            args: Arguments passed to the executable
            executable: Program to run (platform ganache CLI by default)
            on_output: Called with each decoded stdout chunk
            on_error: Called once if the process cannot be spawned
            chunk_size: Max bytes read from stdout per chunk
        """
        self.args = list(args)
        self.executable = executable or default_executable()
        self.on_output = on_output or print_output
        self.on_error = on_error or report_spawn_error
        self.chunk_size = chunk_size

        self.process = None

    async def start(self):
        """
        Spawn the child process

        Returns:
            asyncio Process, or None if spawning failed
        """
        # Spawn once; stderr is not relayed
        try:
            self.process = await asyncio.create_subprocess_exec(
                self.executable,
                *self.args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.DEVNULL
            )
        except OSError as e:
            # No retry
            self.on_error(e)
            return None

        logger.info(f"Started {self.executable} (pid {self.process.pid})")
        return self.process

    async def relay_output(self, process):
        """Forward stdout chunks to on_output until EOF"""
        # Multi-byte characters may straddle reads
        decoder = codecs.getincrementaldecoder('utf-8')(errors='replace')

        while True:
            data = await process.stdout.read(self.chunk_size)
            if not data:
                break  # EOF

            text = decoder.decode(data)
            if text:
                self.on_output(text)

        # Flush a trailing partial character
        tail = decoder.decode(b'', final=True)
        if tail:
            self.on_output(tail)

    async def run(self) -> Optional[int]:
        """
        Spawn, relay output until the stream closes, then wait for exit

        Returns:
            Child exit code, or None if it never started
        """
        process = await self.start()
        if process is None:
            return None

        await self.relay_output(process)
        returncode = await process.wait()

        logger.info(f"{self.executable} exited with code {returncode}")
        return returncode
