"""Unit tests for core/config.py and core/logging_setup.py.

Covers:
- Seed credential policy: dev fallback vs. production refusal
- LOG_LEVEL validation and normalization
- configure_logging(): idempotent, rotating files only when LOG_DIR is set
"""

import logging

import pytest
from pydantic import ValidationError

from core.config import Settings
from core.logging_setup import configure_logging


class TestSeedCredential:
    def test_debug_falls_back_to_dev_password(self):
        settings = Settings(debug=True, seed_username="testuser", seed_password="")
        assert settings.seed_password == "password"

    def test_production_requires_password(self):
        with pytest.raises(ValidationError, match="SEED_PASSWORD"):
            Settings(debug=False, seed_username="testuser", seed_password="")

    def test_production_with_password(self):
        settings = Settings(debug=False, seed_username="admin", seed_password="s3cret")
        assert settings.seed_password == "s3cret"

    def test_no_seed_user_needs_no_password(self):
        settings = Settings(debug=False, seed_username="", seed_password="")
        assert settings.seed_password == ""


class TestLogLevel:
    def test_normalized_to_upper(self):
        assert Settings(debug=True, log_level="debug").log_level == "DEBUG"

    def test_unknown_level_rejected(self):
        with pytest.raises(ValidationError):
            Settings(debug=True, log_level="chatty")


def _own_handlers(logger: logging.Logger) -> list[logging.Handler]:
    return [h for h in logger.handlers if getattr(h, "_noticeboard_handler", False)]


class TestConfigureLogging:
    def test_console_only_by_default(self):
        logger = configure_logging(Settings(debug=True, log_dir=""))
        assert len(_own_handlers(logger)) == 1

    def test_idempotent(self):
        settings = Settings(debug=True, log_dir="")
        configure_logging(settings)
        logger = configure_logging(settings)
        assert len(_own_handlers(logger)) == 1

    def test_rotating_files(self, tmp_path):
        settings = Settings(debug=True, log_dir=str(tmp_path / "logs"))
        logger = configure_logging(settings)
        try:
            assert len(_own_handlers(logger)) == 3
            logging.getLogger("noticeboard.test").error("disk check")
            for handler in _own_handlers(logger):
                handler.flush()
            assert "disk check" in (tmp_path / "logs" / "app.log").read_text()
            assert "disk check" in (tmp_path / "logs" / "error.log").read_text()
        finally:
            configure_logging(Settings(debug=True, log_dir=""))
