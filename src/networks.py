"""
OpenClaw Networks - Solana cluster configurations

The network is a label stored with the wallet; nothing in setup talks to
the cluster.
"""

from dataclasses import dataclass

# ============================================
# Network Configurations
# ============================================

@dataclass
class NetworkConfig:
    """Configuration for a Solana cluster."""
    name: str
    display_name: str
    rpc_url: str
    explorer_url: str
    is_testnet: bool
    native_symbol: str = "SOL"


NETWORKS = {
    "devnet": NetworkConfig(
        name="devnet",
        display_name="devnet (recommended for testing)",
        rpc_url="https://api.devnet.solana.com",
        explorer_url="https://explorer.solana.com/?cluster=devnet",
        is_testnet=True,
    ),
    "testnet": NetworkConfig(
        name="testnet",
        display_name="testnet",
        rpc_url="https://api.testnet.solana.com",
        explorer_url="https://explorer.solana.com/?cluster=testnet",
        is_testnet=True,
    ),
    "mainnet-beta": NetworkConfig(
        name="mainnet-beta",
        display_name="mainnet-beta (real money!)",
        rpc_url="https://api.mainnet-beta.solana.com",
        explorer_url="https://explorer.solana.com",
        is_testnet=False,
    ),
}

# Default network
DEFAULT_NETWORK = "devnet"


def get_network(name: str) -> NetworkConfig:
    """Get a network config by cluster name."""
    if name not in NETWORKS:
        raise ValueError(f"Unknown network: {name}")
    return NETWORKS[name]


def is_valid_network(name: str) -> bool:
    """Check if a name is a known cluster."""
    return name in NETWORKS


def network_choices() -> list[tuple[str, str]]:
    """(label, value) pairs for a network selection menu."""
    return [(n.display_name, n.name) for n in NETWORKS.values()]
