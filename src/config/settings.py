"""
Environment configuration for the mev-flood scripts.

Values come from the process environment, optionally seeded from a `.env`
file in the working directory and an explicit env file passed by the caller.

Variables
---------
RPC_URL            JSON-RPC endpoint (default: http://localhost:8545)
DEPLOY_ENV         environment scope used to namespace deployment artifacts
OUTPUT_DIR         root directory for wallets.json and deployment artifacts
ADMIN_PRIVATE_KEY  key that signs deployment transactions
TEST_PRIVATE_KEY   key for the test (user) wallet
LIQUID_ROUTINE     "package.module:callable" building the liquidity deployment
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


DEFAULT_RPC_URL = "http://localhost:8545"
DEFAULT_DEPLOY_ENV = "development"
DEFAULT_OUTPUT_DIR = "src/output"


class ConfigError(RuntimeError):
    """Raised when a required configuration value is missing."""


@dataclass(frozen=True)
class Settings:
    rpc_url: str = DEFAULT_RPC_URL
    deploy_env: str = DEFAULT_DEPLOY_ENV
    output_dir: Path = Path(DEFAULT_OUTPUT_DIR)
    admin_private_key: Optional[str] = None
    test_private_key: Optional[str] = None
    liquid_routine: Optional[str] = None

    @property
    def deployment_dir(self) -> Path:
        return self.output_dir / self.deploy_env

    @property
    def wallets_file(self) -> Path:
        return self.output_dir / "wallets.json"


def load_env(env_file: Optional[str] = None) -> None:
    base_env = Path(".env")
    if base_env.exists():
        load_dotenv(base_env)
    if env_file:
        load_dotenv(env_file, override=True)


def require_env(name: str) -> str:
    v = os.getenv(name)
    if not v:
        raise ConfigError(f"Missing env var: {name}")
    return v


def load_settings(env_file: Optional[str] = None) -> Settings:
    """Load `.env` (and `env_file`, if given) and build a Settings snapshot."""
    load_env(env_file)
    return Settings(
        rpc_url=os.getenv("RPC_URL") or DEFAULT_RPC_URL,
        deploy_env=os.getenv("DEPLOY_ENV") or DEFAULT_DEPLOY_ENV,
        output_dir=Path(os.getenv("OUTPUT_DIR") or DEFAULT_OUTPUT_DIR),
        admin_private_key=os.getenv("ADMIN_PRIVATE_KEY") or None,
        test_private_key=os.getenv("TEST_PRIVATE_KEY") or None,
        liquid_routine=os.getenv("LIQUID_ROUTINE") or None,
    )
