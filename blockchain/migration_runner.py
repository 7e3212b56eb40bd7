"""
Migration Runner
Discovers numbered migration steps and runs them in order
"""

import re
import importlib.util
from pathlib import Path
from typing import List, Optional
from loguru import logger


MIGRATION_PATTERN = re.compile(r'^(\d+)_\w+\.py$')


def discover_migrations(directory) -> List[Path]:
    """
    Find migration files ordered by their numeric prefix

    Args:
        directory: Folder holding files like '2_deploy_router.py'

    Returns:
        Sorted list of migration paths
    """
    directory = Path(directory)

    if not directory.is_dir():
        raise FileNotFoundError(f"Migrations directory not found: {directory}")

    # (number, name) sort key keeps 2_ ahead of 10_
    found = []
    for path in directory.iterdir():
        match = MIGRATION_PATTERN.match(path.name)
        if match and path.is_file():
            found.append((int(match.group(1)), path.name, path))

    return [path for _, _, path in sorted(found)]


def migration_number(path: Path) -> int:
    return int(MIGRATION_PATTERN.match(path.name).group(1))


def load_migration(path: Path):
    """Import a migration file by path (names start with a digit)"""
    path = Path(path)
    module_name = f"migration_{path.stem}"

    # Import by path
    spec = importlib.util.spec_from_file_location(module_name, path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)

    if not callable(getattr(module, 'migrate', None)):
        raise ValueError(f"Migration {path.name} does not define migrate(deployer, network, accounts)")

    return module


def run_migrations(
    deployer,
    network: str,
    accounts: list,
    directory,
    from_step: Optional[int] = None
) -> List[Path]:
    """
    Run migration steps in order

    Args:
        deployer: Deployer passed to each step
        network: Network name
        accounts: Accounts available on the network
        directory: Migrations folder
        from_step: Skip steps numbered below this

    Returns:
        Paths of the steps that ran
    """
    migrations = discover_migrations(directory)

    # Resume from a later step
    if from_step is not None:
        migrations = [path for path in migrations if migration_number(path) >= from_step]

    if not migrations:
        logger.warning(f"No migrations to run in {directory}")
        return []

    logger.info(f"Running {len(migrations)} migration(s) on '{network}'")

    completed = []
    for path in migrations:
        logger.info(f"Migration: {path.name}")

        module = load_migration(path)

        # Run step; errors stop the run
        try:
            module.migrate(deployer, network, accounts)
        except Exception as e:
            logger.error(f"Migration {path.name} failed: {e}")
            raise

        completed.append(path)

    logger.success(f"✅ {len(completed)} migration(s) complete")
    return completed
