"""Consensus spec subset needed to sign deposits and withdrawal changes."""

from . import constants
from .network_config import MAINNET_GENESIS, NETWORKS, NetworkInfo, get_network, load_network

__all__ = ["constants", "NetworkInfo", "MAINNET_GENESIS", "NETWORKS", "get_network", "load_network"]
