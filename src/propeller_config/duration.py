"""Go-style duration type with Pydantic validation and serialization support.

Durations are written the way the controller's Go tooling writes them
(``"30s"``, ``"1h30m"``, ``"500ms"``) and held as ``whenever.TimeDelta``,
which keeps the full nanosecond precision of the Go representation.
"""

from __future__ import annotations

import re
from datetime import timedelta
from decimal import Decimal, InvalidOperation
from typing import Annotated, Any

from pydantic import PlainSerializer, PlainValidator
from whenever import TimeDelta

# Unit → nanoseconds
_UNITS: dict[str, int] = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,  # U+00B5 micro sign
    "μs": 1_000,  # U+03BC greek mu
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60_000_000_000,
    "h": 3_600_000_000_000,
}

_COMPONENT = re.compile(r"(\d*\.?\d*)(ns|us|µs|μs|ms|s|m|h)")

_NS_PER_US = 1_000
_NS_PER_MS = 1_000_000
_NS_PER_SECOND = 1_000_000_000
_NS_PER_MINUTE = 60 * _NS_PER_SECOND
_NS_PER_HOUR = 60 * _NS_PER_MINUTE


def parse_duration(value: str) -> TimeDelta:
    """Parse a Go duration string such as ``"1h30m"`` or ``"-1.5s"``.

    Raises:
        ValueError: If the string is not a valid duration.
    """
    text = value.strip()
    if not text:
        raise ValueError("empty duration string")

    sign = 1
    body = text
    if body[0] in "+-":
        sign = -1 if body[0] == "-" else 1
        body = body[1:]

    if body == "0":
        return TimeDelta.ZERO
    if not body:
        raise ValueError(f"invalid duration {value!r}")

    total = Decimal(0)
    pos = 0
    while pos < len(body):
        match = _COMPONENT.match(body, pos)
        if match is None or match.group(1) in ("", "."):
            raise ValueError(f"invalid duration {value!r}")
        try:
            number = Decimal(match.group(1))
        except InvalidOperation:
            raise ValueError(f"invalid duration {value!r}") from None
        total += number * _UNITS[match.group(2)]
        pos = match.end()

    return TimeDelta(nanoseconds=sign * int(total))


def format_duration(value: TimeDelta) -> str:
    """Render a TimeDelta the way Go's ``time.Duration.String()`` does."""
    total_ns = value.total("nanoseconds")
    if total_ns == 0:
        return "0s"

    sign = "-" if total_ns < 0 else ""
    total_ns = abs(total_ns)

    if total_ns < _NS_PER_SECOND:
        if total_ns < _NS_PER_US:
            return f"{sign}{total_ns}ns"
        if total_ns < _NS_PER_MS:
            return f"{sign}{_with_fraction(total_ns, _NS_PER_US)}µs"
        return f"{sign}{_with_fraction(total_ns, _NS_PER_MS)}ms"

    hours, rem = divmod(total_ns, _NS_PER_HOUR)
    minutes, rem = divmod(rem, _NS_PER_MINUTE)
    seconds = _with_fraction(rem, _NS_PER_SECOND)
    if hours:
        return f"{sign}{hours}h{minutes}m{seconds}s"
    if minutes:
        return f"{sign}{minutes}m{seconds}s"
    return f"{sign}{seconds}s"


def _with_fraction(value: int, unit: int) -> str:
    whole, frac = divmod(value, unit)
    if not frac:
        return str(whole)
    width = len(str(unit)) - 1
    digits = str(frac).rjust(width, "0").rstrip("0")
    return f"{whole}.{digits}"


def _validate_duration(value: Any) -> TimeDelta:
    if isinstance(value, TimeDelta):
        return value
    if isinstance(value, str):
        if value.strip().upper().startswith(("P", "-P", "+P")):
            return TimeDelta.parse_iso(value.strip())
        return parse_duration(value)
    if isinstance(value, timedelta):
        return TimeDelta(value)
    # bool is an int subclass but never a duration
    if isinstance(value, int | float) and not isinstance(value, bool):
        return TimeDelta(seconds=value)
    raise ValueError(f"cannot parse duration from {type(value).__name__}")


def _serialize_duration(value: Any) -> str:
    # model_copy(update=...) skips validation, so the field may hold raw input
    return format_duration(_validate_duration(value))


Duration = Annotated[
    TimeDelta,
    PlainValidator(_validate_duration),
    PlainSerializer(_serialize_duration, return_type=str),
]
