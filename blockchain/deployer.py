"""
Deployer
Publishes compiled contracts to the connected network on behalf of migration steps
"""

from typing import Dict, Optional
from web3 import Web3
from eth_account import Account
from loguru import logger

from .artifacts import ArtifactStore


class Deployer:
    """
    Contract deployer handed to each migration step

    Uses the node's unlocked account by default. When a private key is
    given, transactions are signed locally and sent raw.
    """

    def __init__(
        self,
        w3: Web3,
        network: str,
        artifact_store: ArtifactStore,
        from_address: Optional[str] = None,
        private_key: Optional[str] = None,
        gas_buffer: float = 1.2,
        default_gas: int = 6000000,
        receipt_timeout: int = 300
    ):
        """
        Initialize Deployer

        Args:
            w3: Web3 instance
            network: Network name the migrations run against
            artifact_store: Source of compiled contract artifacts
            from_address: Deploying account (defaults to first node account)
            private_key: Optional key for local signing
            gas_buffer: Multiplier applied to the gas estimate
            default_gas: Gas limit used when estimation fails
            receipt_timeout: Seconds to wait for a deployment receipt
        """
        self.w3 = w3
        self.network = network
        self.artifact_store = artifact_store
        self.gas_buffer = gas_buffer
        self.default_gas = default_gas
        self.receipt_timeout = receipt_timeout

        # Local signer, if a key was given
        self.account = Account.from_key(private_key) if private_key else None

        if self.account:
            from_address = self.account.address
        elif from_address is None:
            accounts = w3.eth.accounts
            if not accounts:
                raise ValueError("Node exposes no unlocked accounts - set DEPLOYER_PRIVATE_KEY")
            from_address = accounts[0]

        self.from_address = Web3.to_checksum_address(from_address)

        # contract name -> address for this run
        self.deployments: Dict[str, str] = {}
        self.abis: Dict[str, list] = {}

        logger.info(f"Deployer ready on '{network}' from {self.from_address}")

    @staticmethod
    def _normalize_args(args) -> list:
        """Checksum any hex address arguments"""
        normalized = []
        for arg in args:
            if isinstance(arg, str) and Web3.is_address(arg):
                normalized.append(Web3.to_checksum_address(arg))
            else:
                normalized.append(arg)
        return normalized

    def _estimate_gas(self, constructor) -> int:
        try:
            gas_estimate = constructor.estimate_gas({'from': self.from_address})
            return int(gas_estimate * self.gas_buffer)  # 20% buffer by default
        except Exception as e:
            logger.warning(f"Gas estimation failed: {e}, using default")
            return self.default_gas

    def _send(self, constructor, gas_limit: int):
        """Send the constructor transaction and return its hash"""
        # Unlocked node account
        if self.account is None:
            return constructor.transact({
                'from': self.from_address,
                'gas': gas_limit
            })

        # Sign locally and send raw
        transaction = constructor.build_transaction({
            'from': self.from_address,
            'nonce': self.w3.eth.get_transaction_count(self.from_address),
            'gas': gas_limit,
            'gasPrice': self.w3.eth.gas_price,
            'chainId': self.w3.eth.chain_id
        })
        signed_tx = self.account.sign_transaction(transaction)
        return self.w3.eth.send_raw_transaction(signed_tx.raw_transaction)

    def deploy(self, contract_name: str, *args):
        """
        Deploy a contract artifact

        Args:
            contract_name: Artifact name
            *args: Constructor arguments

        Returns:
            Contract instance at the deployed address
        """
        # Load compiled contract
        artifact = self.artifact_store.require(contract_name)
        constructor_args = self._normalize_args(args)

        logger.info(f"Deploying '{contract_name}'...")
        for arg in constructor_args:
            logger.debug(f"  constructor arg: {arg}")

        # Create contract instance
        Contract = self.w3.eth.contract(abi=artifact['abi'], bytecode=artifact['bytecode'])
        constructor = Contract.constructor(*constructor_args)

        # Estimate gas
        gas_limit = self._estimate_gas(constructor)
        logger.info(f"Gas limit: {gas_limit}")

        # Send transaction
        tx_hash = self._send(constructor, gas_limit)
        logger.info(f"Transaction sent: {tx_hash.hex()}")

        # Wait for receipt
        receipt = self.w3.eth.wait_for_transaction_receipt(tx_hash, timeout=self.receipt_timeout)

        if receipt['status'] != 1:
            logger.error(f"❌ Deployment of '{contract_name}' failed")
            raise RuntimeError(f"Deployment of {contract_name} reverted (tx {tx_hash.hex()})")

        contract_address = receipt['contractAddress']

        # Remember for deployed()
        self.deployments[contract_name] = contract_address
        self.abis[contract_name] = artifact['abi']

        logger.success(f"✅ '{contract_name}' deployed at {contract_address}")
        logger.success(f"Gas used: {receipt['gasUsed']}")

        return self.w3.eth.contract(address=contract_address, abi=artifact['abi'])

    def deployed(self, contract_name: str):
        """Contract instance from an earlier deploy() in this run"""
        if contract_name not in self.deployments:
            raise ValueError(f"{contract_name} has not been deployed on '{self.network}'")

        return self.w3.eth.contract(
            address=self.deployments[contract_name],
            abi=self.abis[contract_name]
        )
