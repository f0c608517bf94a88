"""
Argument resolvers for every mev-flood script.

Each ``get_*_args(argv)`` takes the user tokens (program name and verb
already stripped) and returns a frozen parameter object. Flags come from the
declarative ``*_FLAGS`` tables below and are resolved by
:func:`src.cli.flags.resolve_flags`; the functions here only add positional
handling, help behaviour and per-script post-processing.

Help behaviour differs by script:
  - liquid, swapd, arbd, fund-wallets, search: print help and exit 0
  - send-private-tx, cancel-private-tx, send-protect-tx: print help, return None
"""
from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import asdict, dataclass
from decimal import Decimal
from typing import Any, Optional

from web3 import Web3

from .flags import (
    FlagSpec,
    InvalidOptionValue,
    MissingPositionalArgument,
    Number,
    ResolutionError,
    resolve_flags,
)
from .help import TextColors, exit_with_help, gen_help_message, options_block, wants_help

logger = logging.getLogger(__name__)

PROGRAM = "mev-flood"


def amount_to_wei(amount: Number, unit: str, flag: str = "") -> int:
    """Convert an ether/gwei amount to wei; out-of-range amounts are rejected.

    Negative, non-finite and above 2**256 - 1 wei all raise InvalidOptionValue.
    """
    try:
        return Web3.to_wei(Decimal(str(amount)), unit)
    except (ValueError, ArithmeticError):
        raise InvalidOptionValue(flag, str(amount), f"a non-negative {unit} amount below 2**256 wei") from None


# =============================================================================
# EXECUTION FILTER (liquid --X-only flags)
# =============================================================================

GATES: tuple[str, ...] = ("deploy", "mint", "approve", "bootstrap")

# flag -> the one gate it keeps; every other gate is cleared
ONLY_FLAGS: dict[str, str] = {
    "--deploy-only": "deploy",
    "--mint-only": "mint",
    "--bootstrap-only": "bootstrap",
    "--approve-only": "approve",
}

ONLY_FLAGS_HELP: dict[str, str] = {
    "--deploy-only": "Only deploy contracts, don't bootstrap liquidity.",
    "--mint-only": "Only mint tokens.",
    "--bootstrap-only": "Only bootstrap liquidity, don't deploy contracts.",
    "--approve-only": "Only approve uni router to spend your tokens.",
}


@dataclass(frozen=True)
class ExecutionFilter:
    deploy: bool = True
    mint: bool = True
    approve: bool = True
    bootstrap: bool = True

    @property
    def runs_nothing(self) -> bool:
        return not (self.deploy or self.mint or self.approve or self.bootstrap)


def resolve_execution_filter(argv: Sequence[str]) -> ExecutionFilter:
    """Compute the four stage gates from the ``--X-only`` flags in ``argv``.

    Passing more than one distinct ``--X-only`` flag clears every gate, so
    nothing runs. This matches the documented CLI behaviour.
    """
    gates = dict.fromkeys(GATES, True)
    for flag, keep in ONLY_FLAGS.items():
        if flag not in argv:
            continue
        for gate in GATES:
            if gate != keep:
                gates[gate] = False
    return ExecutionFilter(**gates)


# =============================================================================
# PARAMETER OBJECTS
# =============================================================================

@dataclass(frozen=True)
class LiquidParams:
    gates: ExecutionFilter = ExecutionFilter()
    num_pairs: Number = 1
    weth_mint_amount_admin: Number = 100
    weth_mint_amount_user: Number = 5.1
    send_to_mempool: bool = False
    auto_accept: bool = False

    @property
    def should_deploy(self) -> bool:
        return self.gates.deploy

    @property
    def should_mint_tokens(self) -> bool:
        return self.gates.mint

    @property
    def should_approve_tokens(self) -> bool:
        return self.gates.approve

    @property
    def should_bootstrap_liquidity(self) -> bool:
        return self.gates.bootstrap


@dataclass(frozen=True)
class SwapParams:
    start_idx: int
    end_idx: int
    num_swaps: Number = 1
    num_pairs: Number = 1
    min_usd: Number = 100
    max_usd: Number = 5000
    exchange: Optional[str] = None
    dai_index: Number = 0
    swap_weth_for_dai: Optional[bool] = None
    mint_weth_amount: Number = 20

    @property
    def mint_weth_amount_wei(self) -> int:
        return amount_to_wei(self.mint_weth_amount, "ether", "--mint-weth")

    def as_dict(self) -> dict[str, Any]:
        return {**asdict(self), "mint_weth_amount_wei": self.mint_weth_amount_wei}


@dataclass(frozen=True)
class ArbParams:
    wallet_idx: int
    min_profit: Number = 100
    max_profit: Number = -1
    mint_weth_amount: Number = 20

    @property
    def max_profit_bound(self) -> Optional[Number]:
        """Upper profit bound in gwei, or None when unbounded (negative sentinel)."""
        return None if self.max_profit < 0 else self.max_profit

    @property
    def min_profit_wei(self) -> int:
        return amount_to_wei(self.min_profit, "gwei", "--min-profit")

    def as_dict(self) -> dict[str, Any]:
        return {
            **asdict(self),
            "max_profit_bound": self.max_profit_bound,
            "min_profit_wei": self.min_profit_wei,
        }


@dataclass(frozen=True)
class SendPrivateTxParams:
    dummy: bool = False

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ProtectTxParams:
    dummy: bool = False
    fast: bool = False

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class FundWalletsParams:
    eth: Number = 50

    @property
    def eth_wei(self) -> int:
        return amount_to_wei(self.eth, "ether", "--eth")

    def as_dict(self) -> dict[str, Any]:
        return {**asdict(self), "eth_wei": self.eth_wei}


@dataclass(frozen=True)
class SearchParams:
    start_idx: int
    end_idx: int
    use_mempool: bool = False

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


# =============================================================================
# FLAG TABLES
# =============================================================================

LIQUID_FLAGS: tuple[FlagSpec, ...] = (
    FlagSpec("num_pairs", "--num-pairs", "-p", default=1,
             help="Number of DAI pairs to deploy (if deploying). One WETH_DAI pair is deployed per DAI token on each UniswapV2 clone."),
    FlagSpec("weth_mint_amount_admin", "--weth-admin", "-w", default=100,
             help="Amount of WETH to mint for admin."),
    FlagSpec("weth_mint_amount_user", "--weth-user", "-u", default=5.1,
             help="Amount of WETH to mint for user."),
    FlagSpec("send_to_mempool", "--mempool", "-m", kind="boolean", default=False,
             help="Send transactions to mempool instead of Flashbots."),
    FlagSpec("auto_accept", "-y", kind="boolean", default=False,
             help="Auto-accept prompts (non-interactive mode)."),
)

# --buy-eth is evaluated after --buy-dai, so it wins when both are set
SWAP_FLAGS: tuple[FlagSpec, ...] = (
    FlagSpec("num_swaps", "--num-swaps", "-n", default=1,
             help="Number of swaps to execute per wallet."),
    FlagSpec("num_pairs", "--num-pairs", "-p", default=1,
             help="Number of pairs to choose from; one is selected randomly."),
    FlagSpec("min_usd", "--min-usd", "-m", default=100,
             help="Minimum amount to spend (USD value in either asset)."),
    FlagSpec("max_usd", "--max-usd", "-M", default=5000,
             help="Maximum amount to spend (USD value in either asset)."),
    FlagSpec("exchange", "--exchange", "-e", kind="string",
             help='Exchange to swap on ("A" or "B").'),
    FlagSpec("dai_index", "--dai-number", "-d", default=0,
             help="Index of deployed DAI token to trade with."),
    FlagSpec("swap_weth_for_dai", "--buy-dai", "-b", kind="boolean",
             help="Swaps WETH for DAI if set."),
    FlagSpec("swap_weth_for_dai", "--buy-eth", "-s", kind="boolean", negate=True,
             help="Swaps DAI for WETH if set."),
    FlagSpec("mint_weth_amount", "--mint-weth", "-w", default=20,
             help="Amount of WETH to mint from each wallet, if balance is lower than this amount."),
)

ARB_FLAGS: tuple[FlagSpec, ...] = (
    FlagSpec("min_profit", "--min-profit", "-m", default=100,
             help="Minimum profit an arbitrage should achieve, in gwei. (default=100)"),
    FlagSpec("max_profit", "--max-profit", "-M", default=-1,
             help="Maximum profit an arbitrage should achieve, in gwei. (default=inf)"),
    FlagSpec("mint_weth_amount", "--mint-weth", "-w", default=20,
             help="Amount of WETH to mint from each wallet, if balance is lower than this amount."),
)

FUND_WALLETS_FLAGS: tuple[FlagSpec, ...] = (
    FlagSpec("eth", "--eth", "-e", default=50,
             help="Amount of ETH to send to each wallet. (default=50)"),
)


# =============================================================================
# HELP MESSAGES
# =============================================================================

def liquid_help(artifact_dir: str = "src/output/development") -> str:
    c = TextColors
    description = (
        f"{c.Bright}liquid{c.Reset}: deploy a uniswap v2 environment w/ bootstrapped liquidity.\n"
        f"Deployment details are written to `{artifact_dir}/uniBootstrap$N.json`\n"
        f"where $N increments numerically."
    )
    usage = f"    {PROGRAM} liquid [options]\n"
    only = "".join(f"    {flag + ' *':<24}{text}\n" for flag, text in ONLY_FLAGS_HELP.items())
    options = (
        only
        + options_block(LIQUID_FLAGS)
        + "\n    (*) passing multiple --X-only params will cause none of them to execute.\n"
    )
    examples = f"""\
    # default; deploy contracts and bootstrap liquidity
    {PROGRAM} liquid

    # only deploy contracts
    {PROGRAM} liquid --deploy-only

    # deploy 4 DAI contracts without prompting
    {PROGRAM} liquid -p 4 -y
"""
    return gen_help_message(description, usage, options, examples)


def swap_help() -> str:
    description = "randomly swap on every block with multiple wallets (defined in `src/output/wallets.json`)"
    usage = f"    {PROGRAM} swapd <first_wallet_index> [last_wallet_index] [OPTIONS...]\n"
    examples = f"""\
    # run with a single wallet
    {PROGRAM} swapd 13

    # run with 25 wallets
    {PROGRAM} swapd 0 25

    # run with 10 wallets, each sending 5 swaps per block
    {PROGRAM} swapd 10 21 -n 5

    # do the same with 5 trading pairs to choose from
    {PROGRAM} swapd 10 21 -n 5 --num-pairs 5

    # swap with dai token 2 on exchange A
    {PROGRAM} swapd 13 -e A -d 2

    # swap up to $5000 worth of ETH into DAI
    {PROGRAM} swapd 13 -M 5000 --buy-dai
"""
    return gen_help_message(description, usage, options_block(SWAP_FLAGS), examples)


def arb_help() -> str:
    description = "Monitor mempool for arbitrage opportunities, backrun user when profit detected."
    usage = f"    {PROGRAM} arbd <wallet_index> [OPTIONS...]\n"
    examples = f"""\
    # run arb bot with wallet 13
    {PROGRAM} arbd 13

    # run arb bot with minimum profit threshold of 0.2 gwei
    {PROGRAM} arbd 13 -m 0.2

    # only execute opportunities that profit between 1 - 10 gwei
    {PROGRAM} arbd 13 -m 1 -M 10
"""
    return gen_help_message(description, usage, options_block(ARB_FLAGS), examples)


def fund_wallets_help() -> str:
    description = "Fund wallets with ETH."
    usage = f"    {PROGRAM} fund-wallets [OPTIONS]\n"
    examples = f"""\
    # fund wallets with 50 ETH each (default)
    {PROGRAM} fund-wallets

    # fund wallets with 1 ETH
    {PROGRAM} fund-wallets -e 1
"""
    return gen_help_message(description, usage, options_block(FUND_WALLETS_FLAGS), examples)


def search_help(program_name: str = "search") -> str:
    return f"""search on multiple wallets (defined in `src/output/wallets.json`)

Usage:
    {PROGRAM} {program_name} <first_wallet_index> <last_wallet_index> [mempool]

Example:
    # run with a single wallet
    {PROGRAM} {program_name} 13

    # run with 25 wallets on flashbots
    {PROGRAM} {program_name} 0 25

    # run with 25 wallets on mempool
    {PROGRAM} {program_name} 0 25 mempool
"""


SEND_PRIVATE_TX_HELP = f"""send a sample private tx.

Usage:
    {PROGRAM} send-private-tx [dummy]

Example:
    # send private tx to lottery contract (lottery_mev.sol must be deployed on target chain)
    {PROGRAM} send-private-tx

    # send private tx to uniswapV2 router (works on any chain)
    {PROGRAM} send-private-tx dummy
"""

CANCEL_PRIVATE_TX_HELP = f"""cancel a private tx.

Usage:
    {PROGRAM} cancel-private-tx <tx_hash>

Example:
    {PROGRAM} cancel-private-tx 0x52485869d1aa64a4fb029edaf94e6b978ad32ea1879adabab38639dd462324ac
"""

SEND_PROTECT_TX_HELP = f"""send a sample Protect tx.

Usage:
    {PROGRAM} send-protect-tx [dummy] [fast]

Example:
    # send lottery contract tx to Protect (lottery_mev.sol must be deployed on target chain)
    {PROGRAM} send-protect-tx

    # send uniswapV2 router tx to Protect (works on any chain)
    {PROGRAM} send-protect-tx dummy

    # send lottery contract tx to Protect with fast mode
    {PROGRAM} send-protect-tx fast

    # send uniswapV2 router tx to Protect w/ fast mode
    {PROGRAM} send-protect-tx fast dummy
"""


# =============================================================================
# POSITIONALS
# =============================================================================

def _parse_index(token: str) -> int:
    try:
        return int(token)
    except ValueError:
        raise ResolutionError(f"wallet index must be an integer, got '{token}'") from None


def wallet_range(argv: Sequence[str], message: str = "one or two wallet indices are required") -> tuple[int, int]:
    """Read ``<start> [end]`` from the front of ``argv``.

    A missing end index, or one that looks like a flag, defaults to start + 1.
    """
    if not argv or argv[0].startswith("-"):
        raise MissingPositionalArgument(message)
    start = _parse_index(argv[0])
    if len(argv) < 2 or argv[1].startswith("-"):
        return start, start + 1
    return start, _parse_index(argv[1])


# =============================================================================
# RESOLVERS
# =============================================================================

def get_liquid_args(argv: Sequence[str], artifact_dir: str = "src/output/development") -> LiquidParams:
    if argv and wants_help(argv):
        exit_with_help(liquid_help(artifact_dir))
    values = resolve_flags(argv, LIQUID_FLAGS)
    gates = resolve_execution_filter(argv)
    if gates.runs_nothing:
        logger.warning("multiple --X-only flags passed; no stage will execute")
    return LiquidParams(gates=gates, **values)


def get_swap_args(argv: Sequence[str]) -> SwapParams:
    help_message = swap_help()
    if argv and wants_help(argv):
        exit_with_help(help_message)
    try:
        start_idx, end_idx = wallet_range(argv)
    except MissingPositionalArgument as e:
        exit_with_help(help_message, 1, error=str(e))
    values = resolve_flags(argv, SWAP_FLAGS)
    values["num_pairs"] = max(values["num_pairs"], 1)
    amount_to_wei(values["mint_weth_amount"], "ether", "--mint-weth")
    return SwapParams(start_idx=start_idx, end_idx=end_idx, **values)


def get_arb_args(argv: Sequence[str]) -> ArbParams:
    help_message = arb_help()
    if argv and wants_help(argv):
        exit_with_help(help_message)
    try:
        wallet_idx, _ = wallet_range(argv, "a wallet index is required")
    except MissingPositionalArgument as e:
        exit_with_help(help_message, 1, error=str(e))
    logger.debug("arbd args: %s", list(argv))
    values = resolve_flags(argv, ARB_FLAGS)
    amount_to_wei(values["min_profit"], "gwei", "--min-profit")
    amount_to_wei(values["mint_weth_amount"], "ether", "--mint-weth")
    return ArbParams(wallet_idx=wallet_idx, **values)


def get_send_private_tx_args(argv: Sequence[str]) -> Optional[SendPrivateTxParams]:
    if argv:
        if wants_help(argv[:1]):
            print(SEND_PRIVATE_TX_HELP)
            return None
        if "dummy" in argv[0]:
            return SendPrivateTxParams(dummy=True)
    return SendPrivateTxParams(dummy=False)


def get_cancel_private_tx_args(argv: Sequence[str]) -> Optional[str]:
    """Return the transaction hash to cancel, or None when help was shown."""
    if argv and wants_help(argv[:1]):
        print(CANCEL_PRIVATE_TX_HELP)
        return None
    if not argv:
        exit_with_help(CANCEL_PRIVATE_TX_HELP, 1, error="a transaction hash is required")
    return argv[0]


def get_send_protect_tx_args(argv: Sequence[str]) -> Optional[ProtectTxParams]:
    if not argv:
        return ProtectTxParams()
    if wants_help(argv[:1]):
        print(SEND_PROTECT_TX_HELP)
        return None
    joined = "&".join(argv[:2])
    return ProtectTxParams(dummy="dummy" in joined, fast="fast" in joined)


def get_fund_wallets_args(argv: Sequence[str]) -> FundWalletsParams:
    if argv and wants_help(argv):
        exit_with_help(fund_wallets_help())
    values = resolve_flags(argv, FUND_WALLETS_FLAGS)
    amount_to_wei(values["eth"], "ether", "--eth")
    return FundWalletsParams(**values)


def get_search_args(argv: Sequence[str], program_name: str = "search") -> SearchParams:
    help_message = search_help(program_name)
    if argv and wants_help(argv[:1]):
        exit_with_help(help_message)
    try:
        start_idx, end_idx = wallet_range(argv)
    except MissingPositionalArgument as e:
        exit_with_help(help_message, 1, error=str(e))
    use_mempool = len(argv) > 2 and argv[2] == "mempool"
    return SearchParams(start_idx=start_idx, end_idx=end_idx, use_mempool=use_mempool)
