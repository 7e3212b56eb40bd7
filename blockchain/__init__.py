"""
Blockchain Interaction Package
Handles artifact loading, contract deployment and migration sequencing
"""

from .artifacts import ArtifactStore
from .deployer import Deployer
from .migration_runner import discover_migrations, load_migration, run_migrations

__all__ = ['ArtifactStore', 'Deployer', 'discover_migrations', 'load_migration', 'run_migrations']
