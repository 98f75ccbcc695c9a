"""
Core reporting module.

Contains the report models, payload validation and the client for
querying the Matomo API.
"""

from .client import MatomoClient
from .models import (
    DateRange,
    Granularity,
    LiveCounters,
    PageTitle,
    Period,
    VisitorSummary,
)
from .validation import (
    Invalid,
    Valid,
    ValidationIssue,
    validate,
)

__all__ = [
    "Granularity", "DateRange", "Period",
    "VisitorSummary", "PageTitle", "LiveCounters",
    "Valid", "Invalid", "ValidationIssue", "validate",
    "MatomoClient",
]
