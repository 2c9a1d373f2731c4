"""Transforms over multi-valued attributes."""
from __future__ import annotations
import re
from dataclasses import dataclass, field
from typing import Any, List, Optional

from ..context import ExecutionContext
from ..values import as_string, to_multi_value
from .base import Transform, compile_pattern, param, set_frozen


@dataclass(frozen=True)
class MultiValueConcatenate(Transform):
    """Join all values with Separator.

    Absent elements are skipped; an empty sequence gives "".
    """
    name = "MultiValueConcatenate"

    separator: str = param("Separator", str, default="")

    def convert(self, value: Any, context: Optional[ExecutionContext] = None) -> Any:
        if value is None:
            return value
        context = context or ExecutionContext()
        parts = []
        for item in to_multi_value(value):
            if item is None:
                continue
            text = as_string(item)
            context.trace("source-value", text)
            parts.append(text)
        return self.separator.join(parts)


@dataclass(frozen=True)
class MultiValueRemoveIfNotMatch(Transform):
    """Drop every value matching Pattern (case-insensitive), keep the rest.

    Absent elements are dropped as well.
    """
    name = "MultiValueRemoveIfNotMatch"

    pattern: str = param("Pattern", str)
    compiled: "re.Pattern[str]" = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        set_frozen(self, compiled=compile_pattern(self.name, self.pattern, re.IGNORECASE))

    def convert(self, value: Any, context: Optional[ExecutionContext] = None) -> Any:
        if value is None:
            return value
        context = context or ExecutionContext()
        kept: List[Any] = []
        for item in to_multi_value(value):
            if item is None or self.compiled.search(as_string(item)):
                context.trace("removing-value", item)
            else:
                context.trace("keeping-value", item)
                kept.append(item)
        return kept
