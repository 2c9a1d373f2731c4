"""Execution context and host collaborator interfaces.

The host synchronization engine owns the entry store and the trace output.
Transforms only see them through the small protocols below, carried on a
per-invocation ExecutionContext.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Sequence, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class Connector(Protocol):
    """Link between an entry and one connected system's object."""
    dn: str


@runtime_checkable
class Entry(Protocol):
    """Entry returned by an external lookup."""

    def get_attribute(self, name: str) -> Any:
        """Return the attribute value, or None when not present."""
        ...

    def connectors(self, ma_name: str) -> Sequence[Connector]:
        """Return the connectors the entry has in the named system."""
        ...


@runtime_checkable
class ExternalLookup(Protocol):
    """Finds entries by attribute value (blocking call)."""

    def find_entries(self, attribute_name: str, value: Any, max_results: int) -> Sequence[Entry]:
        ...


@runtime_checkable
class Diagnostics(Protocol):
    """Fire-and-forget trace sink."""

    def trace(self, message: str, *args: Any) -> None:
        ...


@dataclass(frozen=True)
class ConnectorRef:
    """Plain connector implementation for hosts and tests."""
    dn: str


@dataclass
class DirectoryEntry:
    """Plain entry implementation backed by dictionaries.

    Attributes:
        attributes: Attribute name -> value
        connected_systems: Management agent name -> connectors
    """
    attributes: Dict[str, Any] = field(default_factory=dict)
    connected_systems: Dict[str, List[ConnectorRef]] = field(default_factory=dict)

    def get_attribute(self, name: str) -> Any:
        return self.attributes.get(name)

    def connectors(self, ma_name: str) -> Sequence[ConnectorRef]:
        return self.connected_systems.get(ma_name, [])


@dataclass
class ExecutionContext:
    """Per-invocation state handed to every transform.

    Never shared across invocations.
    """
    lookup: Optional[ExternalLookup] = None
    diagnostics: Optional[Diagnostics] = None
    lookup_max_results: int = 1

    def trace(self, message: str, *args: Any) -> None:
        """Emit a trace record; sink failures never reach the caller."""
        if self.diagnostics is None:
            return
        try:
            self.diagnostics.trace(message, *args)
        except Exception:
            logger.warning("Trace sink failed for %r", message, exc_info=True)
