"""
HTTP client for the Matomo reporting API.

Every report method builds a query on top of the shared baseline
(module, format, idSite, token_auth), issues a single GET and validates
the decoded body before turning it into result models.
"""
import logging
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any, Optional
from urllib.parse import urlencode

import httpx
from pydantic import BaseModel

from ..config import MatomoConfig, validate_required_options
from ..errors import InvalidParameterError, MatomoResponseError, UnexpectedMatomoResponse
from .models import DateRange, Granularity, LiveCounters, PageTitle, Period, VisitorSummary
from .validation import Invalid, validate

logger = logging.getLogger(__name__)

MAX_LAST_MINUTES = 4000


def format_date(value: date) -> str:
    """Format a date (or the calendar date of a datetime) as yyyy-MM-dd."""
    if isinstance(value, datetime):
        value = value.date()
    return value.strftime("%Y-%m-%d")


def resolve_period(period: Period | str) -> Period:
    """Turn the period argument into a Granularity or DateRange."""
    if isinstance(period, (Granularity, DateRange)):
        return period
    try:
        return Granularity(period)
    except ValueError:
        choices = ", ".join(g.value for g in Granularity)
        raise InvalidParameterError(
            f"period must be one of {choices} or a DateRange, got {period!r}"
        ) from None


def period_params(period: Period | str, on: Optional[date] = None) -> dict[str, str]:
    """Build the period/date query parameters.

    A DateRange always becomes period=range with both endpoints joined by a
    comma; the `on` date is ignored in that case. Otherwise `on` (default:
    today) is sent with the granularity keyword.
    """
    period = resolve_period(period)

    if isinstance(period, DateRange):
        return {
            "period": "range",
            "date": f"{format_date(period.start)},{format_date(period.end)}",
        }

    return {
        "period": period.value,
        "date": format_date(on if on is not None else date.today()),
    }


class MatomoClient:
    """Client for querying reports from a Matomo instance."""

    def __init__(
        self,
        config: MatomoConfig | None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        validate_required_options(config)
        self.config = config
        self._transport = transport
        logger.debug(f"MatomoClient created for site {config.site_id} at {config.url}")

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "MatomoClient":
        """Create a client from MATOMO_SITE_URL, MATOMO_AUTH_TOKEN and MATOMO_SITE_ID."""
        return cls(MatomoConfig.from_env(environ), transport=transport)

    def _base_query(self) -> dict[str, Any]:
        return {
            "module": "API",
            "format": "json",
            "idSite": self.config.site_id,
            "token_auth": self.config.auth_token,
        }

    def _url(self, query: Mapping[str, Any]) -> str:
        return f"{self.config.url}?{urlencode(query)}"

    async def _fetch(self, url: str) -> Any:
        """GET a URL and return the decoded JSON body.

        httpx errors (connection failures, non-2xx status) propagate as-is.
        """
        async with httpx.AsyncClient(
            timeout=self.config.timeout,
            transport=self._transport,
        ) as client:
            response = await client.get(url)
            response.raise_for_status()
            return response.json()

    async def _report(
        self,
        method: str,
        params: Mapping[str, Any],
        model: type[BaseModel],
        many: bool = False,
    ) -> Any:
        """Request a report and return it as a model (or list of models)."""
        query = {**self._base_query(), "method": method, **params}
        logger.debug(f"Matomo request: method={method} params={dict(params)}")

        data = await self._fetch(self._url(query))

        # Matomo reports API failures with HTTP 200 and an error object
        if isinstance(data, Mapping) and data.get("result") == "error":
            raise MatomoResponseError(str(data.get("message", "")))

        result = validate(model, data, many=many)
        if isinstance(result, Invalid):
            logger.warning(
                f"Matomo {method} response failed validation with {len(result.issues)} issue(s)"
            )
            raise UnexpectedMatomoResponse(list(result.issues))
        return result.value

    # =========================================================================
    # REPORTS
    # =========================================================================

    async def get_visitors(
        self,
        period: Period | str = Granularity.DAY,
        date: Optional[date] = None,
    ) -> VisitorSummary:
        """Get the visits summary for a period.

        Args:
            period: Granularity (or its string value) or a DateRange
            date: Reference date for a granularity, defaults to today

        Raises:
            InvalidParameterError: If period is not a known granularity
            UnexpectedMatomoResponse: If the payload does not match the report shape
        """
        return await self._report(
            "VisitsSummary.get",
            period_params(period, date),
            VisitorSummary,
        )

    async def get_page_titles(
        self,
        period: Period | str = Granularity.DAY,
        date: Optional[date] = None,
    ) -> list[PageTitle]:
        """Get per-page-title statistics for a period."""
        return await self._report(
            "Actions.getPageTitles",
            period_params(period, date),
            PageTitle,
            many=True,
        )

    async def get_counters(self, last_minutes: Optional[int] = None) -> list[LiveCounters]:
        """Get live visit counters for the trailing `last_minutes` minutes.

        Raises:
            InvalidParameterError: If last_minutes is missing, not an integer
                or not in 1..4000
        """
        if last_minutes is None:
            raise InvalidParameterError("lastMinutes must be supplied")
        # bool is an int subclass
        if isinstance(last_minutes, bool) or not isinstance(last_minutes, int):
            raise InvalidParameterError(
                f"lastMinutes must be an integer, got {last_minutes!r}"
            )
        if last_minutes < 1:
            raise InvalidParameterError("lastMinutes must be greater than 0")
        if last_minutes > MAX_LAST_MINUTES:
            raise InvalidParameterError(
                f"lastMinutes can not be greater than {MAX_LAST_MINUTES}"
            )

        return await self._report(
            "Live.getCounters",
            {"lastMinutes": last_minutes},
            LiveCounters,
            many=True,
        )
