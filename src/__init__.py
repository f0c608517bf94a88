"""mev-flood: run-configuration engine for the liquidity, swap, arbitrage and private-tx scripts."""

__version__ = "0.1.0"
