"""
Deploy UniswapV2Router02 against the mainnet factory and WETH
"""

ROUTER_ARTIFACT = "UniswapV2Router02"

FACTORY_ADDRESS = "0x5C69bEe701ef814a2B6a3EDD4B1652CB9cc5aA6f"
WETH_ADDRESS = "0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2"


def migrate(deployer, network, accounts):
    deployer.deploy(ROUTER_ARTIFACT, FACTORY_ADDRESS, WETH_ADDRESS)
