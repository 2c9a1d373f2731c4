"""Pytest shared fixtures for transform pipeline tests."""
import pathlib
import sys
from typing import Any, List

# Add project root to Python path
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest

from mare.core.context import ConnectorRef, DirectoryEntry, ExecutionContext


# ─────────────────────────────────────────────────────────────────────────────
# Host Collaborator Stubs
# ─────────────────────────────────────────────────────────────────────────────
class RecordingDiagnostics:
    """Trace sink that keeps every record in memory."""

    def __init__(self):
        self.records: List[tuple] = []

    def trace(self, message: str, *args: Any) -> None:
        self.records.append((message, *args))

    def messages(self) -> List[str]:
        return [record[0] for record in self.records]


class StaticLookup:
    """In-memory metaverse returning entries whose attribute equals the value."""

    def __init__(self, entries: List[DirectoryEntry]):
        self.entries = entries
        self.calls: List[tuple] = []

    def find_entries(self, attribute_name, value, max_results):
        self.calls.append((attribute_name, value, max_results))
        matches = [e for e in self.entries if e.get_attribute(attribute_name) == value]
        return matches[:max_results]


@pytest.fixture()
def diagnostics():
    return RecordingDiagnostics()


@pytest.fixture()
def metaverse():
    """Small metaverse with one employee and one shared mailbox."""
    return StaticLookup([
        DirectoryEntry(
            attributes={"employeeID": "1001", "accountName": "alice", "department": "Finance"},
            connected_systems={
                "AD": [ConnectorRef("CN=Alice,OU=Users,DC=corp,DC=example")],
                "HR": [],
            },
        ),
        DirectoryEntry(
            attributes={"employeeID": "2002", "accountName": "shared-mailbox"},
            connected_systems={
                "AD": [
                    ConnectorRef("CN=Shared,OU=Resources,DC=corp,DC=example"),
                    ConnectorRef("CN=Shared,OU=Legacy,DC=corp,DC=example"),
                ],
            },
        ),
    ])


@pytest.fixture()
def context(metaverse, diagnostics):
    return ExecutionContext(lookup=metaverse, diagnostics=diagnostics)


# ─────────────────────────────────────────────────────────────────────────────
# Pytest Configuration
# ─────────────────────────────────────────────────────────────────────────────
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "critical: marks tests pinning documented transform contracts"
    )
