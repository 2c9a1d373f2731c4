"""Case, whitespace, replacement, padding and substring transforms."""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Optional

from ..context import ExecutionContext
from ..exceptions import ConfigError
from ..values import as_string
from .base import StringTransform, Transform, param


@dataclass(frozen=True)
class ToUpper(StringTransform):
    name = "ToUpper"

    def convert_text(self, text: str) -> str:
        return text.upper()


@dataclass(frozen=True)
class ToLower(StringTransform):
    name = "ToLower"

    def convert_text(self, text: str) -> str:
        return text.lower()


@dataclass(frozen=True)
class Trim(StringTransform):
    name = "Trim"

    def convert_text(self, text: str) -> str:
        return text.strip()


@dataclass(frozen=True)
class TrimStart(StringTransform):
    name = "TrimStart"

    def convert_text(self, text: str) -> str:
        return text.lstrip()


@dataclass(frozen=True)
class TrimEnd(StringTransform):
    name = "TrimEnd"

    def convert_text(self, text: str) -> str:
        return text.rstrip()


@dataclass(frozen=True)
class Replace(StringTransform):
    """Literal replacement of every occurrence of OldValue."""
    name = "Replace"

    old_value: str = param("OldValue", str)
    new_value: str = param("NewValue", str, default="")

    def __post_init__(self):
        if not self.old_value:
            raise ConfigError("Replace: OldValue must not be empty")

    def convert_text(self, text: str) -> str:
        return text.replace(self.old_value, self.new_value)


@dataclass(frozen=True)
class _Pad(StringTransform):
    total_width: int = param("TotalWidth", int)
    padding_char: str = param("PaddingChar", str, default=" ")

    def __post_init__(self):
        if self.total_width < 0:
            raise ConfigError(f"{self.name}: TotalWidth must not be negative")

    @property
    def fill(self) -> str:
        # Only the first character is used; an empty value means a space
        return self.padding_char[0] if self.padding_char else " "


@dataclass(frozen=True)
class PadLeft(_Pad):
    name = "PadLeft"

    def convert_text(self, text: str) -> str:
        return text.rjust(self.total_width, self.fill)


@dataclass(frozen=True)
class PadRight(_Pad):
    name = "PadRight"

    def convert_text(self, text: str) -> str:
        return text.ljust(self.total_width, self.fill)


@dataclass(frozen=True)
class Substring(Transform):
    """Substring clamped to the input bounds.

    Returns "" when StartIndex is past the end, and the remainder of the
    string when fewer than Length characters are left.
    """
    name = "Substring"

    start_index: int = param("StartIndex", int)
    length: int = param("Length", int)

    def __post_init__(self):
        if self.start_index < 0 or self.length < 0:
            raise ConfigError("Substring: StartIndex and Length must not be negative")

    def convert(self, value: Any, context: Optional[ExecutionContext] = None) -> Any:
        if value is None:
            return value
        text = as_string(value)
        if len(text) <= self.start_index:
            return ""
        return text[self.start_index:self.start_index + self.length]
