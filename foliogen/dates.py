from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Optional

from .errors import MalformedDateError

MONTHS = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]


@dataclass(frozen=True)
class ParsedDate:
    raw: str
    instant: Optional[dt.datetime] = None
    error: str = ""

    @property
    def ok(self) -> bool:
        return self.instant is not None


def _split(raw: str) -> tuple[str, str, str]:
    parts = str(raw).strip().split(".")
    if len(parts) != 3:
        raise MalformedDateError(raw, "expected DD.MM.YYYY")
    day, month, year = (part.strip() for part in parts)
    for label, token in (("day", day), ("month", month), ("year", year)):
        if not token.isdigit():
            raise MalformedDateError(raw, f"{label} is not numeric")
    if len(year) != 4:
        raise MalformedDateError(raw, "year must have four digits")
    return day, month, year


def parse_published(raw: str) -> dt.datetime:
    """Parse a ``DD.MM.YYYY`` token into a UTC instant at midnight."""
    day, month, year = _split(raw)
    try:
        return dt.datetime(int(year), int(month), int(day), tzinfo=dt.timezone.utc)
    except ValueError as exc:
        raise MalformedDateError(raw, str(exc)) from exc


def try_parse_published(raw: str) -> ParsedDate:
    try:
        return ParsedDate(raw=raw, instant=parse_published(raw))
    except MalformedDateError as exc:
        return ParsedDate(raw=raw, error=exc.reason)


def readable_date(raw: str) -> str:
    day, month, year = _split(raw)
    try:
        index = int(month) - 1
    except ValueError as exc:
        raise MalformedDateError(raw, str(exc)) from exc
    if not 0 <= index < len(MONTHS):
        raise MalformedDateError(raw, "month out of range")
    return f"{MONTHS[index]} {day}. {year}"


def compare_published(a: str, b: str) -> int:
    delta = parse_published(b).timestamp() - parse_published(a).timestamp()
    return (delta > 0) - (delta < 0)


def rfc822_date(value: dt.datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=dt.timezone.utc)
    return value.astimezone(dt.timezone.utc).strftime("%a, %d %b %Y %H:%M:%S %z")


def iso_date(value: dt.datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=dt.timezone.utc)
    return value.astimezone(dt.timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
