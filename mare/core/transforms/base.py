"""Transform base class and parameter handling.

Every catalog variant is a frozen dataclass deriving from Transform. Its
configurable parameters are dataclass fields declared with ``param()``, which
records the configuration name (PascalCase, as written in rule files) and the
expected kind. ``Transform.from_config`` validates and coerces raw
configuration values so that a bad descriptor fails at load time.
"""
from __future__ import annotations
import dataclasses
import enum
import re
from typing import Any, ClassVar, Dict, Mapping, Optional

from ..context import ExecutionContext
from ..exceptions import ConfigError
from ..values import as_string

_TRUE_STRINGS = {"true", "1", "yes", "on"}
_FALSE_STRINGS = {"false", "0", "no", "off"}
_INTEGER_PATTERN = re.compile(r"^\s*[+-]?\d+\s*$")


def param(name: str, kind: Any, default: Any = dataclasses.MISSING) -> Any:
    """Declare a configurable transform parameter.

    Args:
        name: Parameter name as it appears in configuration
        kind: str, int, bool or an Enum class
        default: Value used when the parameter is omitted (required if absent)
    """
    return dataclasses.field(default=default, metadata={"param": name, "kind": kind})


def coerce_parameter(variant: str, name: str, raw: Any, kind: Any) -> Any:
    """Convert a raw configuration value to the declared parameter kind.

    Raises:
        ConfigError: If the value cannot represent the declared kind
    """
    if kind is str:
        if isinstance(raw, (str, bool, int)):
            return as_string(raw)
        if isinstance(raw, float):
            return str(raw)
    elif kind is int:
        if isinstance(raw, int) and not isinstance(raw, bool):
            return raw
        if isinstance(raw, str) and _INTEGER_PATTERN.match(raw):
            return int(raw.strip())
    elif kind is bool:
        if isinstance(raw, bool):
            return raw
        if isinstance(raw, int) and raw in (0, 1):
            return bool(raw)
        if isinstance(raw, str):
            lowered = raw.strip().lower()
            if lowered in _TRUE_STRINGS:
                return True
            if lowered in _FALSE_STRINGS:
                return False
    elif isinstance(kind, type) and issubclass(kind, enum.Enum):
        if isinstance(raw, kind):
            return raw
        if isinstance(raw, str):
            for member in kind:
                if member.value.lower() == raw.strip().lower():
                    return member
            allowed = ", ".join(member.value for member in kind)
            raise ConfigError(f"{variant}: {name} must be one of {allowed}, got {raw!r}")

    kind_name = getattr(kind, "__name__", str(kind))
    raise ConfigError(f"{variant}: {name} must be {kind_name}, got {raw!r}")


class Transform:
    """Base class for all catalog variants.

    Subclasses set ``name`` to their catalog tag and implement ``convert``.
    Instances are immutable and safe to share across invocations.
    """

    name: ClassVar[str] = ""

    def convert(self, value: Any, context: Optional[ExecutionContext] = None) -> Any:
        raise NotImplementedError

    @classmethod
    def parameter_fields(cls) -> Dict[str, dataclasses.Field]:
        """Return configuration name -> dataclass field for this variant."""
        if not dataclasses.is_dataclass(cls):
            return {}
        return {f.metadata["param"]: f for f in dataclasses.fields(cls) if "param" in f.metadata}

    @classmethod
    def from_config(cls, parameters: Mapping[str, Any]) -> "Transform":
        """Build a validated instance from raw configuration parameters.

        Args:
            parameters: Parameter name -> raw value (``None`` means omitted)

        Raises:
            ConfigError: On unknown, missing or ill-typed parameters
        """
        known = cls.parameter_fields()
        unknown = sorted(set(parameters) - set(known))
        if unknown:
            raise ConfigError(f"{cls.name}: unknown parameter(s) {', '.join(unknown)}")

        kwargs: Dict[str, Any] = {}
        for config_name, f in known.items():
            raw = parameters.get(config_name)
            if raw is None:
                if f.default is dataclasses.MISSING:
                    raise ConfigError(f"{cls.name}: missing required parameter {config_name}")
                continue
            kwargs[f.name] = coerce_parameter(cls.name, config_name, raw, f.metadata["kind"])
        return cls(**kwargs)

    def parameters(self) -> Dict[str, Any]:
        """Return configured parameters keyed by configuration name."""
        result = {}
        for config_name, f in self.parameter_fields().items():
            value = getattr(self, f.name)
            result[config_name] = value.value if isinstance(value, enum.Enum) else value
        return result

    def describe(self) -> str:
        params = ", ".join(f"{key}={value!r}" for key, value in self.parameters().items())
        return f"{self.name}({params})"


class StringTransform(Transform):
    """Transform over one string; absent values and empty strings pass through.

    Non-string scalars are converted to their string form first.
    """

    def convert(self, value: Any, context: Optional[ExecutionContext] = None) -> Any:
        if value is None:
            return value
        text = as_string(value)
        if not text:
            return value
        return self.convert_text(text)

    def convert_text(self, text: str) -> str:
        raise NotImplementedError


def compile_pattern(variant: str, pattern: str, flags: int = 0) -> "re.Pattern[str]":
    """Compile a rule-file regular expression.

    Named groups written as ``(?<name>...)`` and back-references ``\\k<name>``
    are accepted alongside Python syntax.

    Raises:
        ConfigError: If the expression does not compile
    """
    translated = re.sub(r"(?<!\\)\(\?<(?![=!])(\w+)>", r"(?P<\1>", pattern)
    translated = re.sub(r"\\k<(\w+)>", r"(?P=\1)", translated)
    try:
        return re.compile(translated, flags)
    except re.error as exc:
        raise ConfigError(f"{variant}: invalid pattern {pattern!r}: {exc}") from exc


def set_frozen(instance: Any, **values: Any) -> None:
    """Assign derived attributes on a frozen dataclass during __post_init__."""
    for key, value in values.items():
        object.__setattr__(instance, key, value)
