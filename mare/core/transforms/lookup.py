"""Metaverse lookup transform."""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Optional

from ..context import ExecutionContext
from ..exceptions import ConfigError, LookupFailure, TransformError
from ..values import as_string
from .base import Transform, param

DN_MARKER = "[DN]"


@dataclass(frozen=True)
class LookupMVValue(Transform):
    """Replace a value with data from the entry it identifies.

    Finds the entry whose LookupAttributeName equals the input. With
    ExtractValueFromAttribute="[DN]" the result is the DN of the entry's only
    connector in MAName; otherwise it is the named attribute of the entry.
    No entry, several entries (only visible when the context allows more than
    one result), a missing attribute, or zero/several connectors give an
    absent value.
    """
    name = "LookupMVValue"

    lookup_attribute_name: str = param("LookupAttributeName", str)
    extract_value_from_attribute: str = param("ExtractValueFromAttribute", str)
    ma_name: Optional[str] = param("MAName", str, default=None)

    def __post_init__(self):
        if self.extract_value_from_attribute == DN_MARKER and not self.ma_name:
            raise ConfigError(f"LookupMVValue: MAName is required when extracting {DN_MARKER}")

    def convert(self, value: Any, context: Optional[ExecutionContext] = None) -> Any:
        if value is None:
            return value
        context = context or ExecutionContext()
        if context.lookup is None:
            raise LookupFailure("LookupMVValue: no external lookup configured")

        key = as_string(value)
        try:
            entries = list(context.lookup.find_entries(
                self.lookup_attribute_name, key, context.lookup_max_results
            ))
            if not entries:
                context.trace("lookup-no-match", self.lookup_attribute_name, key)
                return None
            if len(entries) > 1:
                context.trace("lookup-ambiguous", self.lookup_attribute_name, key, len(entries))
                return None

            entry = entries[0]
            if self.extract_value_from_attribute == DN_MARKER:
                connectors = list(entry.connectors(self.ma_name))
                if len(connectors) != 1:
                    context.trace("lookup-connector-count", self.ma_name, len(connectors))
                    return None
                return str(connectors[0].dn)
            return entry.get_attribute(self.extract_value_from_attribute)
        except TransformError:
            raise
        except Exception as exc:
            raise LookupFailure(f"LookupMVValue: lookup on {self.lookup_attribute_name} failed: {exc}") from exc
