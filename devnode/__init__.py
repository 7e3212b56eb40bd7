"""
Development Node Package
Launches a local mainnet-forking ganache node
"""

from .launcher import NodeLauncher, build_ganache_args, read_node_env

__all__ = ['NodeLauncher', 'build_ganache_args', 'read_node_env']
