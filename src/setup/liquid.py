#!/usr/bin/env python3
"""
Deploy a uniswap v2 environment and bootstrap it with liquidity.

Usage
  python -m src liquid [options]
  python -m src.setup.liquid [options]

Behavior
  - Fails fast when RPC_URL is unreachable.
  - Prompts before continuing when the admin account nonce is not 0,
    unless -y is passed.
  - Calls the deployment routine named by LIQUID_ROUTINE ("module:callable")
    with (params, w3, admin_wallet, user_wallet, existing_artifact_path).
  - Signed transactions returned by the routine are written to
    <OUTPUT_DIR>/<DEPLOY_ENV>/uniBootstrap<N>.json; a fresh deploy takes a new
    N, a liquidity-only run reuses the latest file.
"""

from __future__ import annotations

import importlib
import logging
import sys
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Optional

from eth_account.signers.local import LocalAccount
from web3 import Web3

from src.cli.flags import ResolutionError
from src.cli.verbs import LiquidParams, get_liquid_args
from src.config.logging_config import get_script_logger
from src.config.settings import ConfigError, Settings, load_settings
from src.helpers.wallets import get_admin_wallet, get_test_wallet
from src.helpers.web3_setup import UnreachableEndpoint, build_web3, check_connection, get_nonce
from src.setup.deployments import ArtifactSequencer, DeploymentResult

logger = logging.getLogger(__name__)

LiquidRoutine = Callable[
    [LiquidParams, Web3, LocalAccount, LocalAccount, Optional[Path]],
    Optional[DeploymentResult],
]


def load_routine(ref: str | None) -> LiquidRoutine:
    """Import the callable named by ``package.module:callable``."""
    if not ref:
        raise ConfigError("Missing env var: LIQUID_ROUTINE")
    module_name, _, attr = ref.partition(":")
    if not module_name or not attr:
        raise ConfigError(f"LIQUID_ROUTINE must look like 'package.module:callable', got '{ref}'")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigError(f"cannot import {module_name}: {e}") from e
    routine = getattr(module, attr, None)
    if not callable(routine):
        raise ConfigError(f"{ref} is not callable")
    return routine


def run_liquid(
    params: LiquidParams,
    settings: Settings,
    routine: LiquidRoutine,
    w3: Web3 | None = None,
    prompt: Callable[[str], str] = input,
) -> Path | None:
    """Run one liquidity deployment; return the artifact written, if any."""
    if w3 is None:
        w3 = build_web3(settings.rpc_url)
    try:
        check_connection(w3, settings.rpc_url)
    except UnreachableEndpoint as e:
        print(str(e), file=sys.stderr)
        sys.exit(1)

    admin_wallet = get_admin_wallet(settings)
    user_wallet = get_test_wallet(settings)

    admin_nonce = get_nonce(w3, admin_wallet.address)
    if admin_nonce != 0 and not params.auto_accept:
        logger.warning("Your admin account nonce is currently %s.", admin_nonce)
        prompt("press Enter to continue...")

    sequencer = ArtifactSequencer(settings.output_dir, settings.deploy_env)
    deployment_file = sequencer.resolve_existing()
    logger.info(
        "running liquid: gates=%s num_pairs=%s existing=%s",
        params.gates, params.num_pairs, deployment_file or "-",
    )
    result = routine(params, w3, admin_wallet, user_wallet, deployment_file)

    if result is None or not result.signed_txs:
        logger.info("no signed transactions returned; nothing written")
        return None
    filename = sequencer.resolve_next() if params.should_deploy else sequencer.resolve_liquidity()
    return sequencer.save(filename, result)


def main(argv: Sequence[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    settings = load_settings()
    try:
        params = get_liquid_args(argv, str(settings.deployment_dir))
        get_script_logger("liquid")
        routine = load_routine(settings.liquid_routine)
        path = run_liquid(params, settings, routine)
    except (ResolutionError, ConfigError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    if path is not None:
        print(f"Wrote {path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
