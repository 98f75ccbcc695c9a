"""Tests for payload validation and normalization."""

import math
from datetime import date, datetime

import pytest

from matomo_client.core.models import DateRange, LiveCounters, PageTitle, VisitorSummary
from matomo_client.core.validation import (
    Invalid,
    Valid,
    ValidationIssue,
    coerce_numeric,
    is_numeric,
    validate,
)

VISITS_SUMMARY = {
    "nb_visits": 11635,
    "nb_actions": 24481,
    "nb_visits_converted": 0,
    "bounce_count": 6926,
    "sum_visit_length": 1451671,
    "max_actions": 46,
    "bounce_rate": "60%",
    "nb_actions_per_visit": 2.1,
    "avg_time_on_site": 125,
}

COUNTERS_ROW = {"visits": "1", "actions": "2", "visitors": "1", "visitsConverted": "0"}

PAGE_TITLE_ROW = {
    "label": "Home",
    "nb_visits": "10",
    "nb_hits": 12,
    "sum_time_spent": "300",
    "nb_hits_with_time_network": 5,
    "min_time_network": "0.01",
    "max_time_network": "0.2",
    "nb_hits_with_time_server": 5,
    "max_time_transfer": 0,
    "nb_hits_with_time_dom_processing": 5,
    "nb_hits_with_time_dom_completion": 5,
    "nb_hits_with_time_on_load": 5,
    "avg_time_network": 0.05,
    "avg_time_server": 0.1,
    "avg_time_transfer": 0,
    "avg_time_dom_processing": 0.3,
    "avg_time_dom_completion": 0.2,
    "avg_time_on_load": 0,
    "avg_page_load_time": 0.65,
    "avg_time_on_page": 40,
    "bounce_rate": "20%",
    "exit_rate": "30%",
    "segment": "pageTitle==Home",
}


class TestNumericStrings:
    """Test the numeric-string pattern and coercion."""

    @pytest.mark.parametrize("value", ["0", "2532", "2.5", ".5", "5.", "", 7, 2.1])
    def test_accepted(self, value):
        """Numbers and ASCII digit strings with at most one point are numeric."""
        assert is_numeric(value) is True

    @pytest.mark.parametrize("value", [
        "unexpected", "-1", "1e5", "1.2.3", " 1", "60%",
        "١٢",   # Arabic-Indic digits
        "१२",   # Devanagari digits
        True, None, [1],
    ])
    def test_rejected(self, value):
        """Signs, exponents, non-ASCII digits and non-strings are not numeric."""
        assert is_numeric(value) is False

    def test_integer_string_becomes_int(self):
        """Digit strings without a point become int."""
        result = coerce_numeric("2532")
        assert result == 2532
        assert isinstance(result, int)

    def test_decimal_string_becomes_float(self):
        """Digit strings with a point become float."""
        assert coerce_numeric("2.5") == 2.5
        assert coerce_numeric(".5") == 0.5
        assert coerce_numeric("5.") == 5.0

    def test_empty_string_is_zero(self):
        """An empty string coerces to 0."""
        assert coerce_numeric("") == 0

    def test_lone_point_is_nan(self):
        """A lone decimal point coerces to nan."""
        assert math.isnan(coerce_numeric("."))

    def test_numbers_pass_through(self):
        """Native numbers are returned unchanged."""
        assert coerce_numeric(11635) == 11635
        assert coerce_numeric(2.1) == 2.1


class TestValidateRecord:
    """Test validate() on single records."""

    def test_valid_record_is_normalized(self):
        """Upstream names map to the client attributes and aliases."""
        result = validate(VisitorSummary, VISITS_SUMMARY)

        assert isinstance(result, Valid)
        assert result.value.visits == 11635
        assert set(result.value.model_dump(by_alias=True)) == {
            "visits", "actions", "visitsConverted", "bounceCount", "sumVisitLength",
            "maxActions", "bounceRate", "actionsPerVisit", "avgTimeOnSite",
        }

    def test_numeric_strings_are_coerced(self):
        """NUMERIC fields turn digit strings into numbers."""
        result = validate(PageTitle, PAGE_TITLE_ROW)

        assert isinstance(result, Valid)
        assert result.value.nb_visits == 10
        assert isinstance(result.value.nb_visits, int)
        assert result.value.min_time_network == 0.01

    def test_optional_fields_may_be_absent(self):
        """Absent optional fields come back as None."""
        result = validate(PageTitle, PAGE_TITLE_ROW)

        assert isinstance(result, Valid)
        assert result.value.entry_nb_visits is None
        assert result.value.min_time_on_load is None

    def test_nullable_field_may_be_null(self):
        """Nullable fields accept an explicit null."""
        result = validate(PageTitle, {**PAGE_TITLE_ROW, "min_time_on_load": None})

        assert isinstance(result, Valid)
        assert result.value.min_time_on_load is None

    def test_optional_non_nullable_rejects_null(self):
        """Optional fields may be absent but not null."""
        result = validate(PageTitle, {**PAGE_TITLE_ROW, "entry_nb_visits": None})

        assert isinstance(result, Invalid)
        assert [issue.path for issue in result.issues] == [("entry_nb_visits",)]
        assert "received null" in result.issues[0].message

    def test_unknown_fields_are_dropped(self):
        """Fields outside the model are ignored."""
        result = validate(PageTitle, {**PAGE_TITLE_ROW, "idsubdatatable": 4})

        assert isinstance(result, Valid)
        assert "idsubdatatable" not in result.value.model_dump(by_alias=True)

    def test_number_field_rejects_numeric_string(self):
        """NUMBER fields do not coerce strings."""
        result = validate(VisitorSummary, {**VISITS_SUMMARY, "nb_visits": "1"})

        assert isinstance(result, Invalid)
        assert len(result.issues) == 1
        assert result.issues[0].path == ("nb_visits",)
        assert "expected number, received string '1'" in result.issues[0].message

    def test_collects_every_issue(self):
        """All issues are reported, not just the first."""
        payload = {k: v for k, v in VISITS_SUMMARY.items() if k != "max_actions"}
        payload.update(nb_actions="many", bounce_rate=5)

        result = validate(VisitorSummary, payload)

        assert isinstance(result, Invalid)
        paths = {issue.path for issue in result.issues}
        assert paths == {("nb_actions",), ("max_actions",), ("bounce_rate",)}

    def test_rejects_booleans(self):
        """Booleans are not numbers, even though bool subclasses int."""
        result = validate(PageTitle, {**PAGE_TITLE_ROW, "nb_hits": True})

        assert isinstance(result, Invalid)
        assert "boolean" in result.issues[0].message

    def test_rejects_non_ascii_digits(self):
        """Digit strings outside 0-9 are rejected, not coerced."""
        result = validate(PageTitle, {**PAGE_TITLE_ROW, "nb_hits": "١٢"})

        assert isinstance(result, Invalid)
        assert [issue.path for issue in result.issues] == [("nb_hits",)]

    def test_overlong_digit_string_is_an_issue(self):
        """A digit string int() cannot convert becomes an issue, not a crash."""
        result = validate(PageTitle, {**PAGE_TITLE_ROW, "nb_hits": "1" * 5000})

        assert isinstance(result, Invalid)
        assert [issue.path for issue in result.issues] == [("nb_hits",)]

    def test_rejects_non_object(self):
        """A single-record model rejects an array payload."""
        result = validate(VisitorSummary, [1, 2])

        assert isinstance(result, Invalid)
        assert result.issues[0].path == ()

    def test_does_not_mutate_payload(self):
        """The decoded payload is left untouched."""
        payload = dict(PAGE_TITLE_ROW)
        validate(PageTitle, payload)
        assert payload == PAGE_TITLE_ROW


class TestValidateList:
    """Test validate(many=True)."""

    def test_coerces_live_counters(self):
        """String counters become numbers under their client names."""
        result = validate(LiveCounters, [{
            "visits": "2532",
            "actions": "4988",
            "visitors": "2156",
            "visitsConverted": "0",
        }], many=True)

        assert isinstance(result, Valid)
        assert [row.model_dump(by_alias=True) for row in result.value] == [
            {"visits": 2532, "actions": 4988, "visitors": 2156, "visitsConverted": 0},
        ]

    def test_empty_list_is_valid(self):
        """An empty array validates to an empty list."""
        assert validate(LiveCounters, [], many=True) == Valid([])

    def test_issue_paths_include_index(self):
        """Issue paths start with the row index."""
        bad = {**COUNTERS_ROW, "visits": True}

        result = validate(LiveCounters, [COUNTERS_ROW, bad], many=True)

        assert isinstance(result, Invalid)
        assert [issue.path for issue in result.issues] == [(1, "visits")]
        assert str(result.issues[0]).startswith("1.visits: ")

    def test_rejects_object_when_list_expected(self):
        """A list model rejects an object payload."""
        result = validate(LiveCounters, COUNTERS_ROW, many=True)

        assert isinstance(result, Invalid)
        assert result.issues[0].path == ()


class TestValidationIssue:
    """Test ValidationIssue formatting."""

    def test_field_path(self):
        """Paths are dot-joined before the message."""
        issue = ValidationIssue(("nb_actions",), "expected number")
        assert str(issue) == "nb_actions: expected number"

    def test_root_path(self):
        """An empty path is shown as <root>."""
        assert str(ValidationIssue((), "expected object")) == "<root>: expected object"


class TestDateRange:
    """Test the DateRange period model."""

    def test_accepts_dates(self):
        """Plain dates are stored as given."""
        period = DateRange(start=date(2020, 1, 1), end=date(2021, 1, 1))
        assert period.start == date(2020, 1, 1)

    def test_datetimes_reduce_to_calendar_date(self):
        """datetimes with a time of day are accepted."""
        period = DateRange(start=datetime(2020, 1, 1, 13, 45), end=datetime(2021, 1, 1, 8, 0))
        assert period.start == date(2020, 1, 1)
        assert period.end == date(2021, 1, 1)
