"""
Runtime configuration for the engine's local server and browser producer.

Uses ``pydantic_settings.BaseSettings`` for automatic environment
variable binding, type coercion, and validation.  ``.env`` files are
loaded by the entry points with python-dotenv before settings are
read.
"""

from __future__ import annotations

import pydantic
import pydantic_settings

from network_clarity.utils import logger

log = logger.create_logger("Config")

_LOOPBACK_HOSTS = frozenset({"127.0.0.1", "localhost", "::1"})


class Settings(pydantic_settings.BaseSettings):
    """Server and browser settings.

    Attributes:
        host: Interface the HTTP surface binds to.  Loopback by
            default; observed traffic is private browsing data.
        port: HTTP port.
        environment: ``development`` or ``production``.
        browser_headless: Launch Chromium without a window.
        prefetch_response_bodies: Cache JSON/XHR bodies for search.
        navigation_timeout_ms: Page load timeout for ``scan``.
    """

    host: str = pydantic.Field(default="127.0.0.1", validation_alias="UVICORN_HOST")
    port: int = pydantic.Field(default=3001, validation_alias="UVICORN_PORT")
    environment: str = pydantic.Field(default="development", validation_alias="ENVIRONMENT")
    browser_headless: bool = pydantic.Field(default=True, validation_alias="BROWSER_HEADLESS")
    prefetch_response_bodies: bool = pydantic.Field(default=True, validation_alias="PREFETCH_RESPONSE_BODIES")
    navigation_timeout_ms: int = pydantic.Field(default=90_000, validation_alias="NAVIGATION_TIMEOUT_MS")

    @pydantic.field_validator("environment", mode="before")
    @classmethod
    def _lower(cls, value: object) -> object:
        return value.strip().lower() if isinstance(value, str) else value

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def warn_if_exposed(self) -> bool:
        """Log a warning when the server would listen beyond loopback.

        Returns:
            True when the host is not a loopback address.
        """
        exposed = self.host not in _LOOPBACK_HOSTS
        if exposed:
            log.warn("Server is bound to a non-loopback interface", {"host": self.host})
        return exposed
