"""
IoTeX network configuration and well-known contract constants.

The active network is chosen with IOTEX_NETWORK (default: mainnet);
IOTEX_RPC_URL and IOTEX_CHAIN_ID override individual fields.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_NETWORK = "mainnet"

# Blocks per epoch on IoTeX mainnet/testnet
EPOCH_BLOCKS = 8640


class UnknownNetworkError(ValueError):
    exit_code: int = 2


@dataclass(frozen=True)
class NetworkConfig:
    name: str
    chain_id: int
    http_endpoint: str
    ws_endpoint: str
    explorer_url: str
    explorer_api_url: str
    currency_symbol: str = "IOTX"
    currency_decimals: int = 18

    def explorer_tx_url(self, tx_hash: str) -> str:
        return f"{self.explorer_url}/tx/{tx_hash}"

    def explorer_address_url(self, address: str) -> str:
        return f"{self.explorer_url}/address/{address}"


NETWORKS: dict[str, NetworkConfig] = {
    "mainnet": NetworkConfig(
        name="IoTeX Mainnet",
        chain_id=4689,
        http_endpoint="https://babel-api.mainnet.iotex.io",
        ws_endpoint="wss://babel-api.mainnet.iotex.io",
        explorer_url="https://iotexscan.io",
        explorer_api_url="https://iotexscan.io/api",
    ),
    "testnet": NetworkConfig(
        name="IoTeX Testnet",
        chain_id=4690,
        http_endpoint="https://babel-api.testnet.iotex.io",
        ws_endpoint="wss://babel-api.testnet.iotex.io",
        explorer_url="https://testnet.iotexscan.io",
        explorer_api_url="https://testnet.iotexscan.io/api",
        currency_symbol="IOTX-T",
    ),
}

CHAIN_ID_TO_NETWORK: dict[int, str] = {cfg.chain_id: key for key, cfg in NETWORKS.items()}

# Protocol contracts, identical on every network
SYSTEM_CONTRACTS: dict[str, str] = {
    "staking": "io1qqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqd39ym7",
}

# Hermes cross-chain bridge
BRIDGE_CONTRACTS: dict[str, str] = {
    "tube": "io1p99pprm79rftj4r6kenfjcp8jkp6zc6mytuah5",
    "validator": "io1a8r9fvu6e3vthfaqvnxlhc6eavsm6t8a2cwtud",
}


@dataclass(frozen=True)
class TokenInfo:
    name: str
    symbol: str
    decimals: int
    address: str


MAINNET_TOKENS: dict[str, TokenInfo] = {
    "WIOTX": TokenInfo("Wrapped IOTX", "WIOTX", 18, "io15qr5fzpxsnp7garl4m7k355rafzqn8grrm0grz"),
}


def get_network_config(network: str) -> NetworkConfig:
    config = NETWORKS.get(network.lower())
    if config is None:
        raise UnknownNetworkError(f"Unknown network: {network}")
    return config


def network_for_chain_id(chain_id: int) -> NetworkConfig:
    key = CHAIN_ID_TO_NETWORK.get(chain_id)
    if key is None:
        raise UnknownNetworkError(f"Unknown chain ID: {chain_id}")
    return NETWORKS[key]


def get_network_name() -> str:
    """Get the active network name from environment or default."""
    return os.environ.get("IOTEX_NETWORK", DEFAULT_NETWORK)


def get_rpc_url(network: Optional[str] = None) -> str:
    """Get the RPC URL from environment or the network table."""
    override = os.environ.get("IOTEX_RPC_URL")
    if override:
        return override
    return get_network_config(network or get_network_name()).http_endpoint


def get_chain_id(network: Optional[str] = None) -> int:
    """Get the chain ID from environment or the network table."""
    override = os.environ.get("IOTEX_CHAIN_ID")
    if override:
        return int(override)
    return get_network_config(network or get_network_name()).chain_id


def get_token(symbol: str) -> TokenInfo:
    token = MAINNET_TOKENS.get(symbol.upper())
    if token is None:
        raise KeyError(f"Unknown token: {symbol}")
    return token
