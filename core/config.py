"""
core/config.py -- Centralized application configuration via pydantic-settings.

All environment variable reads for noticeboard happen here. No module should
call os.getenv() or os.environ.get() directly -- import get_settings() instead.

Design patterns used:
  Singleton via lru_cache: get_settings() instantiates Settings once at first
      call and returns the cached instance on every subsequent call. This is
      the FastAPI dependency injection pattern for config.

  BaseSettings (pydantic-settings): Reads values from environment variables
      and an optional .env file automatically. Field names map to env var names
      (e.g. seed_password -> SEED_PASSWORD). Type coercion and validation are
      built in.

  @model_validator(mode="after"): Runs cross-field validation after all fields
      are resolved from environment. Used for the DEBUG-conditional seed
      credential: dev mode falls back to the well-known development password
      with a warning, production mode refuses to start without one.

Layer rule: core/ is the kernel. This module may not import from api/, auth/,
or board/.
"""

import logging
from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("noticeboard.config")

_DEV_SEED_PASSWORD = "password"  # noqa: S105 # nosec B105 -- development seed only


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file.

    All fields have defaults so Settings() can be instantiated in test
    environments without a real .env file. The model_validator enforces the
    seed-credential rule at startup.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Core
    # ------------------------------------------------------------------

    debug: bool = False
    app_version: str = "1.0.0"

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------

    log_level: str = "INFO"
    # Empty string disables file logging; console logging is always on.
    log_dir: str = ""
    log_backup_days: int = 14

    # ------------------------------------------------------------------
    # Seed principal (created once at startup)
    # ------------------------------------------------------------------

    seed_username: str = "testuser"
    # Empty string is the sentinel for "not configured". The model_validator
    # below either substitutes the dev credential or raises.
    seed_password: str = ""

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    host: str = "127.0.0.1"
    port: int = 5001
    allowed_hosts: list[str] = ["localhost", "127.0.0.1", "*.localhost", "testserver"]
    cors_origins: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"LOG_LEVEL must be a logging level name, got {value!r}.")
        return level

    @model_validator(mode="after")
    def validate_seed_credential(self) -> "Settings":
        """Enforce the seed credential policy.

        Dev mode (DEBUG=true): a missing SEED_PASSWORD falls back to the
            development credential with a warning.

        Production mode: refuse to start when a seed user is configured
            without a password. A blank credential would make the seed
            account unreachable through login (blank fields are rejected).
        """
        if self.seed_username and not self.seed_password:
            if self.debug:
                self.seed_password = _DEV_SEED_PASSWORD
                logger.warning(
                    "WARNING: Seeding user %r with the development password. " "Set SEED_PASSWORD outside development.",
                    self.seed_username,
                )
            else:
                raise ValueError(
                    "SEED_PASSWORD is required in production mode when SEED_USERNAME is set. "
                    "Set SEED_PASSWORD in your environment or .env file, clear SEED_USERNAME, "
                    "or set DEBUG=true for development."
                )
        return self


@lru_cache
def get_settings() -> Settings:
    """Return the application Settings singleton.

    In tests: call get_settings.cache_clear() between test cases if you need
    to inject different environment variables.
    """
    return Settings()
