"""Date/time coercion using invariant-culture format strings.

Synchronization rule files describe dates with the custom format strings used
by directory sync engines (``yyyy-MM-dd``, ``dd MMM yyyy HH:mm``, ``o`` ...),
not with ``strftime`` directives. This module formats and parses those
patterns directly.

Usage:
    format_datetime(datetime(2020, 1, 1), "yyyy-MM-dd")            # "2020-01-01"
    parse_exact("01/02/2020 13:45", "MM/dd/yyyy HH:mm")
    parse_best_guess("20200101120000.0Z")
    from_file_time_utc(132223104000000000)                          # 2020-01-01 UTC
"""
from __future__ import annotations
import re
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple

from .exceptions import FormatError
from .values import as_string, parse_integer

FILE_TIME_EPOCH = datetime(1601, 1, 1, tzinfo=timezone.utc)
TWO_DIGIT_YEAR_MAX = 2049

MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]
DAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

# Invariant culture standard patterns
STANDARD_FORMATS = {
    "d": "MM/dd/yyyy",
    "D": "dddd, dd MMMM yyyy",
    "f": "dddd, dd MMMM yyyy HH:mm",
    "F": "dddd, dd MMMM yyyy HH:mm:ss",
    "g": "MM/dd/yyyy HH:mm",
    "G": "MM/dd/yyyy HH:mm:ss",
    "m": "MMMM dd",
    "M": "MMMM dd",
    "o": "yyyy'-'MM'-'dd'T'HH':'mm':'ss'.'fffffffK",
    "O": "yyyy'-'MM'-'dd'T'HH':'mm':'ss'.'fffffffK",
    "r": "ddd, dd MMM yyyy HH':'mm':'ss 'GMT'",
    "R": "ddd, dd MMM yyyy HH':'mm':'ss 'GMT'",
    "s": "yyyy'-'MM'-'dd'T'HH':'mm':'ss",
    "t": "HH:mm",
    "T": "HH:mm:ss",
    "u": "yyyy'-'MM'-'dd HH':'mm':'ss'Z'",
    "y": "yyyy MMMM",
    "Y": "yyyy MMMM",
}

BEST_GUESS_FORMATS = [
    "MM/dd/yyyy HH:mm:ss",
    "M/d/yyyy h:mm:ss tt",
    "M/d/yyyy H:mm:ss",
    "M/d/yyyy h:mm tt",
    "M/d/yyyy H:mm",
    "M/d/yyyy",
    "yyyy-MM-ddTHH:mm:ss.FFFFFFFK",
    "yyyy-MM-dd HH:mm:ss.FFFFFFF",
    "yyyy/MM/dd HH:mm:ss",
    "yyyy/MM/dd",
    "dd MMM yyyy HH:mm:ss",
    "dd MMM yyyy",
    "d MMMM yyyy",
    "MMMM d, yyyy",
    "MMM d, yyyy",
    "dddd, dd MMMM yyyy HH:mm:ss",
    "dddd, dd MMMM yyyy",
    "ddd, dd MMM yyyy HH:mm:ss 'GMT'",
    "yyyyMMddHHmmss.FFFFFFFK",
    "yyyyMMddHHmmssK",
    "HH:mm:ss",
    "HH:mm",
]

_SPECIFIERS = set("dfFghHKmMstyz")
_ISO_PREFIX = re.compile(r"^\d{4}-\d{2}-\d{2}")

Token = Tuple[str, str]


def tokenize(pattern: str) -> List[Token]:
    """Split a format pattern into ("spec", run) and ("literal", text) tokens.

    Raises:
        FormatError: On an empty pattern or an unterminated quote
    """
    if not pattern:
        raise FormatError("Date format must not be empty")
    if len(pattern) == 1:
        if pattern not in STANDARD_FORMATS:
            raise FormatError(f"Unknown standard date format: {pattern!r}")
        pattern = STANDARD_FORMATS[pattern]

    tokens: List[Token] = []
    i = 0
    while i < len(pattern):
        char = pattern[i]
        if char in _SPECIFIERS:
            j = i
            while j < len(pattern) and pattern[j] == char:
                j += 1
            tokens.append(("spec", pattern[i:j]))
            i = j
        elif char in ("'", '"'):
            j = i + 1
            literal = []
            while j < len(pattern) and pattern[j] != char:
                if pattern[j] == "\\" and j + 1 < len(pattern):
                    j += 1
                literal.append(pattern[j])
                j += 1
            if j >= len(pattern):
                raise FormatError(f"Unterminated quote in date format: {pattern!r}")
            tokens.append(("literal", "".join(literal)))
            i = j + 1
        elif char == "\\":
            if i + 1 >= len(pattern):
                raise FormatError(f"Trailing escape in date format: {pattern!r}")
            tokens.append(("literal", pattern[i + 1]))
            i += 2
        elif char == "%":
            i += 1
        else:
            tokens.append(("literal", char))
            i += 1
    return tokens


def _format_offset(value: datetime, width: int) -> str:
    offset = value.utcoffset() or timedelta(0)
    sign = "-" if offset < timedelta(0) else "+"
    minutes = abs(int(offset.total_seconds())) // 60
    hours, minutes = divmod(minutes, 60)
    if width == 1:
        return f"{sign}{hours}"
    if width == 2:
        return f"{sign}{hours:02d}"
    return f"{sign}{hours:02d}:{minutes:02d}"


def _format_spec(value: datetime, spec: str, out: List[str]) -> str:
    char, count = spec[0], len(spec)
    if char == "d":
        if count == 1:
            return str(value.day)
        if count == 2:
            return f"{value.day:02d}"
        name = DAY_NAMES[value.weekday()]
        return name[:3] if count == 3 else name
    if char in "fF":
        if count > 7:
            raise FormatError(f"Too many fraction specifiers: {spec!r}")
        digits = f"{value.microsecond:06d}0"[:count]
        if char == "F":
            digits = digits.rstrip("0")
            if not digits and out and out[-1].endswith("."):
                out[-1] = out[-1][:-1]
        return digits
    if char == "g":
        return "A.D."
    if char == "h":
        hour = value.hour % 12 or 12
        return str(hour) if count == 1 else f"{hour:02d}"
    if char == "H":
        return str(value.hour) if count == 1 else f"{value.hour:02d}"
    if char == "K":
        if value.tzinfo is None:
            return ""
        if value.utcoffset() == timedelta(0):
            return "Z"
        return _format_offset(value, 3)
    if char == "m":
        return str(value.minute) if count == 1 else f"{value.minute:02d}"
    if char == "M":
        if count == 1:
            return str(value.month)
        if count == 2:
            return f"{value.month:02d}"
        name = MONTH_NAMES[value.month - 1]
        return name[:3] if count == 3 else name
    if char == "s":
        return str(value.second) if count == 1 else f"{value.second:02d}"
    if char == "t":
        marker = "AM" if value.hour < 12 else "PM"
        return marker[0] if count == 1 else marker
    if char == "y":
        if count == 1:
            return str(value.year % 100)
        if count == 2:
            return f"{value.year % 100:02d}"
        return str(value.year).zfill(count)
    if char == "z":
        return _format_offset(value, min(count, 3))
    raise FormatError(f"Unsupported date specifier: {spec!r}")


def format_datetime(value: datetime, pattern: str) -> str:
    """Render a datetime with an invariant-culture format pattern."""
    out: List[str] = []
    for kind, text in tokenize(pattern):
        if kind == "literal":
            out.append(text)
        else:
            out.append(_format_spec(value, text, out))
    return "".join(out)


def _spec_regex(spec: str, index: int) -> Tuple[str, Optional[str]]:
    """Return (regex, field) for one specifier run."""
    char, count = spec[0], len(spec)
    group = lambda field, body: (f"(?P<{field}_{index}>{body})", field)  # noqa: E731
    if char == "y":
        if count <= 2:
            return group("year2", r"\d{2}" if count == 2 else r"\d{1,2}")
        if count == 3:
            return group("year", r"\d{3,4}")
        return group("year", rf"\d{{{count}}}")
    if char == "M":
        if count == 1:
            return group("month", r"\d{1,2}")
        if count == 2:
            return group("month", r"\d{2}")
        if count == 3:
            return group("month_abbr", "|".join(name[:3] for name in MONTH_NAMES))
        return group("month_name", "|".join(MONTH_NAMES))
    if char == "d":
        if count == 1:
            return group("day", r"\d{1,2}")
        if count == 2:
            return group("day", r"\d{2}")
        if count == 3:
            return "(?:" + "|".join(name[:3] for name in DAY_NAMES) + ")", None
        return "(?:" + "|".join(DAY_NAMES) + ")", None
    if char in "Hhms":
        field = {"H": "hour", "h": "hour12", "m": "minute", "s": "second"}[char]
        return group(field, r"\d{1,2}" if count == 1 else r"\d{2}")
    if char == "t":
        return group("ampm", "A|P" if count == 1 else "AM|PM")
    if char == "f":
        return group("fraction", rf"\d{{{count}}}")
    if char == "F":
        return group("fraction", rf"\d{{0,{count}}}")
    if char == "K":
        return f"(?P<tz_{index}>Z|[+-]\\d{{2}}:\\d{{2}})?", "tz"
    if char == "z":
        body = r"[+-]\d{2}:\d{2}" if count >= 3 else (r"[+-]\d{2}" if count == 2 else r"[+-]\d{1,2}")
        return group("tz", body)
    if char == "g":
        return r"(?:A\.D\.|AD)", None
    raise FormatError(f"Unsupported date specifier: {spec!r}")


def _compile_pattern(pattern: str) -> "re.Pattern[str]":
    parts = []
    for index, (kind, text) in enumerate(tokenize(pattern)):
        if kind == "literal":
            parts.append(re.escape(text))
        else:
            parts.append(_spec_regex(text, index)[0])
    return re.compile("^" + "".join(parts) + "$", re.IGNORECASE)


def _parse_offset(text: str) -> timezone:
    if text.upper() == "Z":
        return timezone.utc
    sign = -1 if text[0] == "-" else 1
    hours, _, minutes = text[1:].partition(":")
    return timezone(sign * timedelta(hours=int(hours), minutes=int(minutes or 0)))


def parse_exact(text: str, pattern: str) -> datetime:
    """Parse text that must match an invariant-culture format pattern exactly.

    Raises:
        FormatError: If text does not match or denotes an invalid date
    """
    match = _compile_pattern(pattern).match(text)
    if not match:
        raise FormatError(f"Date {text!r} does not match format {pattern!r}")

    fields: Dict[str, str] = {}
    for key, found in match.groupdict().items():
        if found is None:
            continue
        fields.setdefault(key.rsplit("_", 1)[0], found)

    # Time-only patterns land on today's date; partial dates default to the
    # current year and the first month/day.
    today = date.today()
    year, month, day = today.year, today.month, today.day
    if any(key in fields for key in ("year", "year2", "month", "month_abbr", "month_name", "day")):
        month, day = 1, 1

    if "year" in fields:
        year = int(fields["year"])
    elif "year2" in fields:
        short = int(fields["year2"])
        century = TWO_DIGIT_YEAR_MAX - TWO_DIGIT_YEAR_MAX % 100
        year = century + short if century + short <= TWO_DIGIT_YEAR_MAX else century - 100 + short
    if "month" in fields:
        month = int(fields["month"])
    elif "month_abbr" in fields:
        month = [name[:3].lower() for name in MONTH_NAMES].index(fields["month_abbr"].lower()) + 1
    elif "month_name" in fields:
        month = [name.lower() for name in MONTH_NAMES].index(fields["month_name"].lower()) + 1
    if "day" in fields:
        day = int(fields["day"])

    hour = int(fields.get("hour", 0))
    if "hour12" in fields:
        hour = int(fields["hour12"]) % 12
        if fields.get("ampm", "A").upper().startswith("P"):
            hour += 12
    minute = int(fields.get("minute", 0))
    second = int(fields.get("second", 0))
    microsecond = int((fields.get("fraction") or "0").ljust(6, "0")[:6])
    tzinfo = _parse_offset(fields["tz"]) if fields.get("tz") else None

    try:
        return datetime(year, month, day, hour, minute, second, microsecond, tzinfo=tzinfo)
    except ValueError as exc:
        raise FormatError(f"Invalid date {text!r}: {exc}") from exc


def parse_best_guess(value: Any) -> datetime:
    """Parse a date/time without a known layout (invariant culture).

    ISO 8601 is tried first, then a fixed list of common invariant layouts.

    Raises:
        FormatError: If no layout matches
    """
    text = as_string(value).strip()
    if not text:
        raise FormatError("Cannot parse an empty date")

    if _ISO_PREFIX.match(text):
        iso = text[:-1] + "+00:00" if text.endswith(("Z", "z")) else text
        try:
            return datetime.fromisoformat(iso)
        except ValueError:
            pass

    for pattern in BEST_GUESS_FORMATS:
        try:
            return parse_exact(text, pattern)
        except FormatError:
            continue
    raise FormatError(f"Unrecognized date/time: {text!r}")


def from_file_time_utc(value: Any) -> datetime:
    """Convert a Windows file time (100-ns ticks since 1601-01-01 UTC).

    Raises:
        FormatError: If value is not a non-negative 64-bit integer in range
    """
    ticks = parse_integer(value, bits=64)
    if ticks < 0:
        raise FormatError(f"File time must not be negative: {ticks}")
    try:
        return FILE_TIME_EPOCH + timedelta(microseconds=ticks // 10)
    except OverflowError as exc:
        raise FormatError(f"File time out of range: {ticks}") from exc
