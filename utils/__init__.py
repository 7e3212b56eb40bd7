"""
Utilities Package
Configuration loading and logging setup
"""

from .network_config import load_network_config
from .logging_setup import configure_logging

__all__ = ['load_network_config', 'configure_logging']
