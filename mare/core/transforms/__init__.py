"""Transform catalog.

The catalog is closed: TRANSFORMS lists every variant a rule file may name,
and build_transform() is the only way configuration turns into instances.

Architecture:
- base.py: Transform base class, parameter declaration and coercion
- strings.py: case, trim, replace, pad, substring
- regex.py: regex replace/match (RegexSelect is reserved)
- date_format.py: FormatDate
- identity.py: Base64ToGUID, SIDToString
- bits.py: IsBitSet, IsBitNotSet, SetBit
- lookup.py: LookupMVValue
- multivalue.py: MultiValueConcatenate, MultiValueRemoveIfNotMatch

Usage:
    from mare.core.transforms import build_transform

    step = build_transform({"type": "PadLeft", "TotalWidth": 6, "PaddingChar": "0"})
    step.convert("42")  # "000042"
"""
from __future__ import annotations
from typing import Any, Dict, Mapping, Type

from ..exceptions import ConfigError
from .base import StringTransform, Transform, param
from .bits import IsBitNotSet, IsBitSet, SetBit
from .date_format import DateType, FormatDate
from .identity import Base64ToGUID, SIDToString, SidType
from .lookup import DN_MARKER, LookupMVValue
from .multivalue import MultiValueConcatenate, MultiValueRemoveIfNotMatch
from .regex import RegexIsMatch, RegexReplace, RegexSelect
from .strings import (
    PadLeft,
    PadRight,
    Replace,
    Substring,
    ToLower,
    ToUpper,
    Trim,
    TrimEnd,
    TrimStart,
)

TYPE_KEY = "type"

TRANSFORMS: Dict[str, Type[Transform]] = {
    cls.name: cls
    for cls in (
        ToUpper,
        ToLower,
        Trim,
        TrimEnd,
        TrimStart,
        Replace,
        PadLeft,
        PadRight,
        RegexReplace,
        Substring,
        RegexSelect,
        RegexIsMatch,
        FormatDate,
        Base64ToGUID,
        IsBitSet,
        IsBitNotSet,
        SIDToString,
        SetBit,
        LookupMVValue,
        MultiValueConcatenate,
        MultiValueRemoveIfNotMatch,
    )
}


def build_transform(descriptor: Mapping[str, Any]) -> Transform:
    """Build one transform from a configuration descriptor.

    Args:
        descriptor: {"type": <variant name>, <Parameter>: <value>, ...}

    Raises:
        ConfigError: Unknown variant or invalid parameters
    """
    if not isinstance(descriptor, Mapping):
        raise ConfigError(f"Transform descriptor must be a mapping, got {type(descriptor).__name__}")
    variant = descriptor.get(TYPE_KEY)
    if not variant:
        raise ConfigError(f"Transform descriptor is missing '{TYPE_KEY}'")
    cls = TRANSFORMS.get(variant) if isinstance(variant, str) else None
    if cls is None:
        raise ConfigError(f"Unknown transform type: {variant!r}")
    parameters = {key: value for key, value in descriptor.items() if key != TYPE_KEY}
    return cls.from_config(parameters)


__all__ = [
    "TRANSFORMS",
    "TYPE_KEY",
    "build_transform",
    "Transform",
    "StringTransform",
    "param",
    "DateType",
    "SidType",
    "DN_MARKER",
    *TRANSFORMS,
]
