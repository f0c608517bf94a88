import logging
from pathlib import Path

import pytest

from src.config.logging_config import setup_logger


def test_setup_logger_writes_log_and_error_files(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_DIR", str(tmp_path / "logs"))
    logger = setup_logger("logging_config_test", console=False)
    try:
        logger.info("deploying 4 pairs")
        logger.error("deployment failed")
        for handler in logger.handlers:
            handler.flush()

        main_log = (tmp_path / "logs" / "logging_config_test.log").read_text()
        error_log = (tmp_path / "logs" / "logging_config_test_errors.log").read_text()
        assert "deploying 4 pairs" in main_log
        assert "deployment failed" in main_log
        assert "deployment failed" in error_log
        assert "deploying 4 pairs" not in error_log

        # second call reuses the configured logger
        assert setup_logger("logging_config_test", console=False) is logger
        assert len(logger.handlers) == 2
    finally:
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)
