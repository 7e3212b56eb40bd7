"""
Network Configuration
Loads config/network_config.json with environment overrides
"""

import os
import json
from pathlib import Path
from typing import Dict, Optional
from dotenv import load_dotenv

load_dotenv()


DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / 'config' / 'network_config.json'

# section -> {key: env var}
ENV_OVERRIDES = {
    'development': {
        'rpc_url': 'DEV_RPC_URL',
        'artifacts_dir': 'ARTIFACTS_DIR',
        'migrations_dir': 'MIGRATIONS_DIR'
    },
    'ganache': {
        'fork_url_template': 'FORK_URL_TEMPLATE',
        'default_balance_ether': 'GANACHE_BALANCE_ETHER'
    }
}


def load_network_config(config_path: Optional[str] = None) -> Dict:
    """
    Load network settings

    Args:
        config_path: JSON file (NETWORK_CONFIG_PATH or the bundled file by default)

    Returns:
        Config dict with 'development' and 'ganache' sections
    """
    path = Path(config_path or os.getenv('NETWORK_CONFIG_PATH') or DEFAULT_CONFIG_PATH)

    with open(path, 'r') as f:
        config = json.load(f)

    for section, overrides in ENV_OVERRIDES.items():
        if section not in config:
            raise ValueError(f"Network config {path} is missing section '{section}'")

        for key, env_var in overrides.items():
            value = os.getenv(env_var)
            if value:
                config[section][key] = value

    try:
        config['ganache']['default_balance_ether'] = int(config['ganache']['default_balance_ether'])
    except (KeyError, ValueError) as e:
        raise ValueError(f"Invalid ganache default_balance_ether: {e}")

    return config
