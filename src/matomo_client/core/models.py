"""
Pydantic models for Matomo report results.

Fields are validated from the upstream names (the attribute name, or a
validation_alias where the client renames the field) and serialize with
camelCase aliases, so model_dump(by_alias=True) returns the client-facing
shape.
"""
from datetime import date, datetime
from enum import Enum
from typing import Any, Union

from pydantic import AliasGenerator, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .validation import NullableNumeric, Number, Numeric, OptionalNumeric, String


# =============================================================================
# Period selectors
# =============================================================================

class Granularity(str, Enum):
    """Symbolic period lengths understood by the reporting API."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


class DateRange(BaseModel):
    """Explicit date range, sent upstream as period=range.

    datetimes are accepted and reduced to their calendar date.
    """
    model_config = ConfigDict(frozen=True)

    start: date
    end: date

    @field_validator("start", "end", mode="before")
    @classmethod
    def _calendar_date(cls, value: Any) -> Any:
        if isinstance(value, datetime):
            return value.date()
        return value


Period = Union[Granularity, DateRange]


# =============================================================================
# Report results
# =============================================================================

class ReportModel(BaseModel):
    """Base for report rows: camelCase output aliases, immutable."""
    model_config = ConfigDict(
        alias_generator=AliasGenerator(serialization_alias=to_camel),
        populate_by_name=True,
        frozen=True,
    )


class VisitorSummary(ReportModel):
    """Visit and action counters for one period (VisitsSummary.get)."""
    visits: Number = Field(validation_alias="nb_visits")
    actions: Number = Field(validation_alias="nb_actions")
    visits_converted: Number = Field(
        validation_alias="nb_visits_converted", serialization_alias="visitsConverted"
    )
    bounce_count: Number
    sum_visit_length: Number  # seconds
    max_actions: Number
    bounce_rate: String  # e.g. "60%"
    actions_per_visit: Number = Field(
        validation_alias="nb_actions_per_visit", serialization_alias="actionsPerVisit"
    )
    avg_time_on_site: Number  # seconds


class PageTitle(ReportModel):
    """One row of Actions.getPageTitles."""
    label: String

    nb_visits: Numeric
    nb_hits: Numeric
    sum_time_spent: Numeric

    # Page timing hit counts and bounds
    nb_hits_with_time_network: Numeric
    min_time_network: Numeric
    max_time_network: Numeric
    nb_hits_with_time_server: Numeric
    min_time_server: OptionalNumeric = None
    max_time_server: OptionalNumeric = None
    nb_hits_with_time_transfer: OptionalNumeric = None
    min_time_transfer: OptionalNumeric = None
    max_time_transfer: Numeric
    nb_hits_with_time_dom_processing: Numeric
    min_time_dom_processing: NullableNumeric = None
    max_time_dom_processing: NullableNumeric = None
    nb_hits_with_time_dom_completion: Numeric
    min_time_dom_completion: NullableNumeric = None
    max_time_dom_completion: NullableNumeric = None
    nb_hits_with_time_on_load: Numeric
    min_time_on_load: NullableNumeric = None
    max_time_on_load: NullableNumeric = None

    # Entry / exit
    entry_nb_visits: OptionalNumeric = None
    entry_nb_actions: OptionalNumeric = None
    entry_sum_visit_length: OptionalNumeric = None
    entry_bounce_count: OptionalNumeric = None
    exit_nb_visits: OptionalNumeric = None
    sum_daily_nb_uniq_visitors: OptionalNumeric = None
    sum_daily_entry_nb_uniq_visitors: OptionalNumeric = None
    sum_daily_exit_nb_uniq_visitors: OptionalNumeric = None

    # Averages
    avg_time_network: Numeric
    avg_time_server: Numeric
    avg_time_transfer: Numeric
    avg_time_dom_processing: Numeric
    avg_time_dom_completion: Numeric
    avg_time_on_load: Numeric
    avg_page_load_time: Numeric
    avg_time_on_page: Numeric

    bounce_rate: String
    exit_rate: String
    segment: String


class LiveCounters(ReportModel):
    """Real-time counters for the last N minutes (Live.getCounters)."""
    visits: Numeric
    actions: Numeric
    visitors: Numeric
    # Live.getCounters already answers in camelCase
    visits_converted: Numeric = Field(
        validation_alias="visitsConverted", serialization_alias="visitsConverted"
    )
