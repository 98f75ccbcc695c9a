"""
Configuration for the Matomo client.
"""
import os
from collections.abc import Mapping
from dataclasses import dataclass

from .errors import ConfigurationError


DEFAULT_TIMEOUT_SECONDS = 30.0

# Checked in this order; the first missing one is reported.
REQUIRED_OPTIONS = ("site_id", "auth_token", "url")

ENV_SITE_URL = "MATOMO_SITE_URL"
ENV_AUTH_TOKEN = "MATOMO_AUTH_TOKEN"
ENV_SITE_ID = "MATOMO_SITE_ID"
ENV_TIMEOUT = "MATOMO_TIMEOUT"


@dataclass(frozen=True)
class MatomoConfig:
    """Connection settings for a single Matomo site.

    Usage:
        config = MatomoConfig(
            site_id=1,
            auth_token="anonymous",
            url="https://matomo.example.com/index.php",
        )

    The required fields default to None only so that a missing value is
    reported by name instead of as a bare TypeError.
    """

    site_id: str | int | None = None
    auth_token: str | None = None
    url: str | None = None  # Full API endpoint, e.g. https://host/index.php

    timeout: float = DEFAULT_TIMEOUT_SECONDS

    def __post_init__(self):
        """Validate configuration after initialization."""
        validate_required_options(self)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "MatomoConfig":
        """Build a configuration from MATOMO_* environment variables.

        Args:
            environ: Mapping to read from, defaults to os.environ

        Raises:
            ConfigurationError: If a required variable is unset or
                MATOMO_TIMEOUT is not a number
        """
        env = os.environ if environ is None else environ

        timeout = DEFAULT_TIMEOUT_SECONDS
        raw_timeout = env.get(ENV_TIMEOUT)
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError:
                raise ConfigurationError(
                    f"{ENV_TIMEOUT} must be a number of seconds, got {raw_timeout!r}"
                ) from None

        return cls(
            site_id=env.get(ENV_SITE_ID),
            auth_token=env.get(ENV_AUTH_TOKEN),
            url=env.get(ENV_SITE_URL),
            timeout=timeout,
        )


def validate_required_options(config: MatomoConfig | None) -> None:
    """Check the required options in a fixed order.

    Raises:
        ConfigurationError: Naming the first missing option, or the whole
            configuration when it is None
    """
    if config is None:
        raise ConfigurationError("MatomoClient: missing required options")

    for key in REQUIRED_OPTIONS:
        if getattr(config, key) is None:
            raise ConfigurationError(f"MatomoClient: missing required option: {key}")

