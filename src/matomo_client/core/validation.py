"""
Validation and normalization of Matomo report payloads.

Matomo is loose about types: the same metric can arrive as 42, 42.5 or
"42". The field types below tell pydantic how to check and coerce each
kind of metric; validate() runs a report model over a decoded payload and
returns either Valid(models) or Invalid(issues), so a caller never sees a
partially built result.
"""
import math
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Annotated, Any, Optional, Union

from pydantic import (
    BaseModel,
    BeforeValidator,
    StrictFloat,
    StrictInt,
    StrictStr,
    TypeAdapter,
    ValidationError,
)

# ASCII digits only; a bare \d also matches e.g. Arabic-Indic digits
NUMERIC_STRING = re.compile(r"^\d*\.?\d*$", re.ASCII)


def is_number(value: Any) -> bool:
    # bool is an int subclass but never a metric
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_numeric(value: Any) -> bool:
    """True for numbers and for strings matching ^[0-9]*\\.?[0-9]*$."""
    if is_number(value):
        return True
    return isinstance(value, str) and NUMERIC_STRING.fullmatch(value) is not None


def coerce_numeric(value: Any) -> int | float:
    """Convert a number or numeric string to a number.

    "" becomes 0 and "." becomes nan, matching how the upstream's own
    JavaScript clients read these values. Raises ValueError for digit
    strings too long for int().
    """
    if is_number(value):
        return value
    if value == "":
        return 0
    if value == ".":
        return math.nan
    if "." in value:
        return float(value)
    return int(value)


def _describe(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, str):
        return f"string {value!r}"
    if isinstance(value, dict):
        return "object"
    if isinstance(value, list):
        return "array"
    return type(value).__name__


def _require_number(value: Any) -> Any:
    if not is_number(value):
        raise ValueError(f"expected number, received {_describe(value)}")
    return value


def _require_numeric(value: Any) -> Any:
    if not is_numeric(value):
        raise ValueError(f"expected number or numeric string, received {_describe(value)}")
    return coerce_numeric(value)


def _reject_null(value: Any) -> Any:
    if value is None:
        raise ValueError("expected a value, received null")
    return value


# JSON number only
Number = Annotated[Union[StrictInt, StrictFloat], BeforeValidator(_require_number)]

# JSON number or numeric string, coerced to int/float
Numeric = Annotated[Union[StrictInt, StrictFloat], BeforeValidator(_require_numeric)]

# May be absent (default None) but not sent as null
OptionalNumeric = Annotated[Optional[Numeric], BeforeValidator(_reject_null)]

# May be absent or null
NullableNumeric = Optional[Numeric]

String = StrictStr


@dataclass(frozen=True)
class ValidationIssue:
    """A single mismatch between payload and report model."""
    path: tuple[str | int, ...]
    message: str

    def __str__(self) -> str:
        location = ".".join(str(part) for part in self.path) or "<root>"
        return f"{location}: {self.message}"


@dataclass(frozen=True)
class Valid:
    value: Any


@dataclass(frozen=True)
class Invalid:
    issues: tuple[ValidationIssue, ...]


ValidationResult = Union[Valid, Invalid]


@lru_cache(maxsize=None)
def _list_adapter(model: type[BaseModel]) -> TypeAdapter:
    return TypeAdapter(list[model])


def issues_from_error(exc: ValidationError) -> tuple[ValidationIssue, ...]:
    """Flatten a pydantic ValidationError into ValidationIssues."""
    return tuple(
        ValidationIssue(tuple(error["loc"]), error["msg"])
        for error in exc.errors(include_url=False)
    )


def validate(model: type[BaseModel], payload: Any, many: bool = False) -> ValidationResult:
    """Validate a payload against a report model.

    Args:
        model: Report model whose fields carry the upstream names as
            validation aliases
        payload: Decoded JSON body
        many: Expect a list of records instead of a single record

    Returns:
        Valid with the model (or list of models), or Invalid with every
        issue found
    """
    try:
        if many:
            return Valid(_list_adapter(model).validate_python(payload))
        return Valid(model.model_validate(payload))
    except ValidationError as exc:
        return Invalid(issues_from_error(exc))
