"""Admin and test wallets loaded from private keys in the environment."""
from __future__ import annotations

from eth_account import Account
from eth_account.signers.local import LocalAccount

from src.config.settings import ConfigError, Settings


def _from_key(private_key: str | None, env_name: str) -> LocalAccount:
    if not private_key:
        raise ConfigError(f"Missing env var: {env_name}")
    k = private_key.strip()
    if not k.startswith("0x"):
        k = "0x" + k
    return Account.from_key(k)


def get_admin_wallet(settings: Settings) -> LocalAccount:
    return _from_key(settings.admin_private_key, "ADMIN_PRIVATE_KEY")


def get_test_wallet(settings: Settings) -> LocalAccount:
    return _from_key(settings.test_private_key, "TEST_PRIVATE_KEY")
