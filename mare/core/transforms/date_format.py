"""Date reformatting transform."""
from __future__ import annotations
import enum
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from .. import dates
from ..context import ExecutionContext
from ..exceptions import ConfigError, FormatError
from ..values import as_string
from .base import Transform, param


class DateType(enum.Enum):
    BEST_GUESS = "BestGuess"
    DATE_TIME = "DateTime"
    FILE_TIME_UTC = "FileTimeUTC"


@dataclass(frozen=True)
class FormatDate(Transform):
    """Parse a date according to DateType and render it with ToFormat.

    BestGuess parses any common invariant layout, DateTime requires the input
    to match FromFormat exactly, FileTimeUTC reads a 64-bit file time.
    """
    name = "FormatDate"

    to_format: str = param("ToFormat", str)
    date_type: DateType = param("DateType", DateType, default=DateType.BEST_GUESS)
    from_format: Optional[str] = param("FromFormat", str, default=None)

    def __post_init__(self):
        if not self.to_format:
            raise ConfigError("FormatDate: ToFormat must not be empty")
        if self.date_type is DateType.DATE_TIME and not self.from_format:
            raise ConfigError("FormatDate: FromFormat is required when DateType is DateTime")
        for label, pattern in (("FromFormat", self.from_format), ("ToFormat", self.to_format)):
            if pattern:
                try:
                    dates.tokenize(pattern)
                except FormatError as exc:
                    raise ConfigError(f"FormatDate: invalid {label}: {exc}") from exc

    def parse(self, value: Any) -> datetime:
        if self.date_type is DateType.FILE_TIME_UTC:
            return dates.from_file_time_utc(value)
        if isinstance(value, datetime):
            return value
        if self.date_type is DateType.DATE_TIME:
            return dates.parse_exact(as_string(value), self.from_format)
        return dates.parse_best_guess(value)

    def convert(self, value: Any, context: Optional[ExecutionContext] = None) -> Any:
        if value is None:
            return value
        return dates.format_datetime(self.parse(value), self.to_format)
