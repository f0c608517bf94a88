"""
Configuration package for the mev-flood scripts.
"""

from src.config.settings import (
    DEFAULT_RPC_URL,
    DEFAULT_DEPLOY_ENV,
    DEFAULT_OUTPUT_DIR,
    ConfigError,
    Settings,
    load_env,
    load_settings,
    require_env,
)

from src.config.logging_config import (
    setup_logger,
    get_script_logger,
)

__all__ = [
    # Settings
    'DEFAULT_RPC_URL',
    'DEFAULT_DEPLOY_ENV',
    'DEFAULT_OUTPUT_DIR',
    'ConfigError',
    'Settings',
    'load_env',
    'load_settings',
    'require_env',

    # Logging
    'setup_logger',
    'get_script_logger',
]
