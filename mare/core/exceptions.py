"""Transform pipeline exceptions for error handling."""
from __future__ import annotations
from typing import Any, Dict, Optional


class TransformError(Exception):
    """Base exception for all transform pipeline operations."""
    pass


class ConfigError(TransformError):
    """Transform descriptor is malformed, incomplete or names an unknown variant."""
    pass


class TypeMismatchError(TransformError):
    """Value reached a transform in a representation it cannot handle."""
    pass


class FormatError(TransformError):
    """Scalar content is malformed (integer, date, base64, SID bytes)."""
    pass


class RangeError(TransformError):
    """Parameter is outside its valid domain (e.g. bit position)."""
    pass


class TransformNotImplementedError(TransformError, NotImplementedError):
    """Reserved catalog variant was invoked."""
    pass


class LookupFailure(TransformError):
    """External lookup collaborator is unavailable or failed.
    
    "No matching entry" is not a failure; it yields an absent value.
    """
    pass


class ChainStepError(TransformError):
    """A chain step failed; the chain was aborted at that step.
    
    Attributes:
        position: Zero-based index of the failing step in its chain
        variant: Catalog name of the failing transform
        parameters: Configured parameters of the failing transform
        cause: Original TransformError raised by the step
    """
    
    def __init__(
        self,
        position: int,
        variant: str,
        parameters: Optional[Dict[str, Any]],
        cause: TransformError,
    ):
        self.position = position
        self.variant = variant
        self.parameters = dict(parameters or {})
        self.cause = cause
        super().__init__(f"[step {position}] {variant}: {type(cause).__name__}: {cause}")
    
    def to_dict(self) -> dict:
        """Convert to a structured failure record."""
        return {
            "error": type(self.cause).__name__,
            "detail": str(self.cause),
            "position": self.position,
            "variant": self.variant,
            "parameters": self.parameters,
        }
