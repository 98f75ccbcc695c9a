"""
Typed client for the Matomo reporting API.

Usage:
    from datetime import date
    from matomo_client import DateRange, MatomoClient, MatomoConfig

    client = MatomoClient(MatomoConfig(
        site_id=1,
        auth_token="your-token",
        url="https://matomo.example.com/index.php",
    ))

    summary = await client.get_visitors()
    titles = await client.get_page_titles(
        DateRange(start=date(2024, 1, 1), end=date(2024, 1, 31))
    )
    live = await client.get_counters(30)

    summary.model_dump(by_alias=True)  # {"visits": ..., "visitsConverted": ...}
"""

from .config import MatomoConfig
from .core import (
    DateRange,
    Granularity,
    LiveCounters,
    MatomoClient,
    PageTitle,
    Period,
    ValidationIssue,
    VisitorSummary,
)
from .errors import (
    ConfigurationError,
    InvalidParameterError,
    MatomoClientError,
    MatomoResponseError,
    UnexpectedMatomoResponse,
)

__version__ = "0.1.0"
__all__ = [
    "MatomoClient", "MatomoConfig",
    "Granularity", "DateRange", "Period",
    "VisitorSummary", "PageTitle", "LiveCounters", "ValidationIssue",
    "MatomoClientError", "ConfigurationError", "InvalidParameterError",
    "UnexpectedMatomoResponse", "MatomoResponseError",
]
