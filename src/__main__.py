#!/usr/bin/env python3
"""
Entry point for running mev-flood scripts as a module.

Usage:
    python -m src                          # Show available commands
    python -m src liquid -p 4 -y           # Deploy and bootstrap liquidity
    python -m src swapd 0 25 -n 5          # Resolve swap parameters

Only `liquid` is driven end to end here; the other commands resolve and
print their parameters for the external bots that consume them.
"""
from __future__ import annotations

import sys
from collections.abc import Callable, Sequence
from typing import Any

from tabulate import tabulate

from src.cli import verbs
from src.cli.flags import ResolutionError
from src.config.logging_config import get_script_logger


def _cancel_params(argv: Sequence[str]) -> dict[str, Any] | None:
    tx_hash = verbs.get_cancel_private_tx_args(argv)
    return None if tx_hash is None else {"tx_hash": tx_hash}


RESOLVERS: dict[str, Callable[[Sequence[str]], Any]] = {
    "swapd": verbs.get_swap_args,
    "arbd": verbs.get_arb_args,
    "send-private-tx": verbs.get_send_private_tx_args,
    "cancel-private-tx": _cancel_params,
    "send-protect-tx": verbs.get_send_protect_tx_args,
    "fund-wallets": verbs.get_fund_wallets_args,
    "search": verbs.get_search_args,
}

AVAILABLE_COMMANDS = {
    "liquid": "Deploy a uniswap v2 environment and bootstrap liquidity",
    "swapd": "Randomly swap on every block with multiple wallets",
    "arbd": "Monitor the mempool and backrun profitable arbitrage",
    "send-private-tx": "Send a sample private tx",
    "cancel-private-tx": "Cancel a private tx",
    "send-protect-tx": "Send a sample Protect tx",
    "fund-wallets": "Fund wallets with ETH",
    "search": "Search on multiple wallets",
}


def print_params(command: str, params: Any) -> None:
    values = params if isinstance(params, dict) else params.as_dict()
    rows = [[key, value] for key, value in values.items()]
    print(f"\n{command} parameters:")
    print(tabulate(rows, headers=["Parameter", "Value"], tablefmt="grid"))


def main(argv: Sequence[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)

    if not argv:
        print("Usage: python -m src <command> [args...]")
        print("\nAvailable commands:")
        for cmd, desc in AVAILABLE_COMMANDS.items():
            print(f"  {cmd:20} - {desc}")
        print("\nExample: python -m src liquid --help")
        return 0

    command, rest = argv[0], argv[1:]

    if command == "liquid":
        from src.setup.liquid import main as run
        return run(rest)

    resolver = RESOLVERS.get(command)
    if resolver is None:
        print(f"Unknown command: {command}", file=sys.stderr)
        print("Run 'python -m src' to see available commands.", file=sys.stderr)
        return 1

    try:
        params = resolver(rest)
    except ResolutionError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    get_script_logger(command)
    if params is not None:
        print_params(command, params)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
