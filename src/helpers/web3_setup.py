"""
Web3 setup helper - provider construction and connectivity checks.

Public API
----------
build_web3(rpc_url)
    Return a Web3 instance for the RPC URL, with POA middleware when available.
check_connection(w3, rpc_url)
    Fetch the latest block number; raise UnreachableEndpoint on failure.
get_nonce(w3, address)
    Transaction count for ``address``.
"""
from __future__ import annotations

import logging

from web3 import Web3

__all__ = ["UnreachableEndpoint", "build_web3", "check_connection", "get_nonce"]

logger = logging.getLogger(__name__)


class UnreachableEndpoint(ConnectionError):
    def __init__(self, rpc_url: str):
        super().__init__(f"failed to connect to {rpc_url}.")
        self.rpc_url = rpc_url


def _inject_poa_if_needed(w3: Web3) -> None:
    try:
        from web3.middleware import ExtraDataToPOAMiddleware as poa_middleware
    except ImportError:
        from web3.middleware import geth_poa_middleware as poa_middleware
    try:
        w3.middleware_onion.inject(poa_middleware, layer=0)
    except ValueError:
        # Middleware already present
        pass


def build_web3(rpc_url: str) -> Web3:
    w3 = Web3(Web3.HTTPProvider(rpc_url))
    _inject_poa_if_needed(w3)
    return w3


def check_connection(w3: Web3, rpc_url: str) -> int:
    """Return the latest block number, or raise UnreachableEndpoint.

    One attempt, no retry.
    """
    try:
        block = w3.eth.block_number
    except Exception as e:
        logger.debug("block_number failed for %s: %s", rpc_url, e)
        raise UnreachableEndpoint(rpc_url) from e
    logger.debug("connected to %s at block %s", rpc_url, block)
    return block


def get_nonce(w3: Web3, address: str) -> int:
    return w3.eth.get_transaction_count(address)
