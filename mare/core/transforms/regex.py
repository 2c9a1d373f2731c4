"""Regular expression transforms."""
from __future__ import annotations
import re
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Union

from ..context import ExecutionContext
from ..exceptions import TransformNotImplementedError
from ..values import as_string
from .base import StringTransform, Transform, compile_pattern, param, set_frozen

ReplacementPart = Union[str, int]

_REPLACEMENT_TOKEN = re.compile(r"\$(?:(\$)|(&)|(\d+)|\{(\w+)\})")


def parse_replacement(pattern: "re.Pattern[str]", replacement: str) -> List[ReplacementPart]:
    """Split a ``$1`` / ``${name}`` style replacement into literal and group parts.

    ``$$`` is a literal dollar sign and ``$&`` the whole match. References to
    groups the pattern does not define are kept as literal text.
    """
    parts: List[ReplacementPart] = []
    position = 0
    for match in _REPLACEMENT_TOKEN.finditer(replacement):
        parts.append(replacement[position:match.start()])
        dollar, whole, number, group_name = match.groups()
        if dollar:
            parts.append("$")
        elif whole:
            parts.append(0)
        elif number is not None and int(number) <= pattern.groups:
            parts.append(int(number))
        elif group_name is not None and group_name.isdigit() and int(group_name) <= pattern.groups:
            parts.append(int(group_name))
        elif group_name is not None and group_name in pattern.groupindex:
            parts.append(pattern.groupindex[group_name])
        else:
            parts.append(match.group(0))
        position = match.end()
    parts.append(replacement[position:])
    return [part for part in parts if part != ""]


def _expander(parts: List[ReplacementPart]) -> Callable[["re.Match[str]"], str]:
    def expand(match: "re.Match[str]") -> str:
        return "".join(
            part if isinstance(part, str) else (match.group(part) or "")
            for part in parts
        )
    return expand


@dataclass(frozen=True)
class RegexReplace(StringTransform):
    """Replace every match of Pattern with Replacement."""
    name = "RegexReplace"

    pattern: str = param("Pattern", str)
    replacement: str = param("Replacement", str, default="")
    compiled: "re.Pattern[str]" = field(init=False, repr=False, compare=False)
    replacement_parts: tuple = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        compiled = compile_pattern(self.name, self.pattern)
        set_frozen(
            self,
            compiled=compiled,
            replacement_parts=tuple(parse_replacement(compiled, self.replacement)),
        )

    def convert_text(self, text: str) -> str:
        return self.compiled.sub(_expander(list(self.replacement_parts)), text)


@dataclass(frozen=True)
class RegexIsMatch(Transform):
    """Map a case-insensitive match to TrueValue, anything else to FalseValue.

    An absent value yields FalseValue.
    """
    name = "RegexIsMatch"

    pattern: str = param("Pattern", str)
    true_value: str = param("TrueValue", str)
    false_value: str = param("FalseValue", str)
    compiled: "re.Pattern[str]" = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        set_frozen(self, compiled=compile_pattern(self.name, self.pattern, re.IGNORECASE))

    def convert(self, value: Any, context: Optional[ExecutionContext] = None) -> Any:
        if value is None:
            return self.false_value
        return self.true_value if self.compiled.search(as_string(value)) else self.false_value


@dataclass(frozen=True)
class RegexSelect(Transform):
    """Reserved catalog entry; not implemented."""
    name = "RegexSelect"

    def convert(self, value: Any, context: Optional[ExecutionContext] = None) -> Any:
        raise TransformNotImplementedError("RegexSelect is reserved and not implemented")
