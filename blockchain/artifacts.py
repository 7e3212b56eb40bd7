"""
Artifact Store
Loads compiled contract definitions (ABI + bytecode) by contract name
"""

import os
import json
from pathlib import Path
from typing import Dict, Optional
from loguru import logger


class ArtifactStore:
    """
    Resolves contract artifacts from a build directory

    Supports the Truffle layout (build/contracts/<Name>.json) and the
    Hardhat layout (artifacts/contracts/<Name>.sol/<Name>.json)
    """

    def __init__(self, artifacts_dir: str = "build/contracts"):
        """
        Initialize Artifact Store

        Args:
            artifacts_dir: Directory holding compiled contract JSON files
        """
        self.artifacts_dir = Path(artifacts_dir)
        self.cache: Dict[str, Dict] = {}

        logger.debug(f"Artifact Store using {self.artifacts_dir}")

    def _find_artifact(self, name: str) -> Optional[Path]:
        """Locate the JSON file for a contract name"""
        flat_path = self.artifacts_dir / f"{name}.json"
        if flat_path.is_file():
            return flat_path

        for candidate in sorted(self.artifacts_dir.glob(f"**/{name}.sol/{name}.json")):
            return candidate

        return None

    def require(self, name: str) -> Dict:
        """
        Load a contract artifact

        Args:
            name: Contract name (e.g. 'UniswapV2Router02')

        Returns:
            Dict with contract_name, abi, bytecode and path
        """
        if name in self.cache:
            return self.cache[name]

        path = self._find_artifact(name)
        if path is None:
            raise FileNotFoundError(
                f"Contract artifact not found: {name} (searched {self.artifacts_dir})"
            )

        with open(path, 'r') as f:
            contract_json = json.load(f)

        abi = contract_json.get('abi')
        bytecode = contract_json.get('bytecode')

        if abi is None or not bytecode:
            raise ValueError(f"Artifact {path} has no abi/bytecode - compile the contract first")

        artifact = {
            'contract_name': contract_json.get('contractName', name),
            'abi': abi,
            'bytecode': bytecode,
            'path': os.fspath(path)
        }

        self.cache[name] = artifact
        logger.debug(f"Loaded artifact {name} from {path}")

        return artifact
