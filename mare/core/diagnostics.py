"""Trace sinks for transform execution.

Two sinks are provided:
    - LoggingDiagnostics: forwards trace records to the ``mare.trace`` logger
    - JsonlTraceSink: appends one JSON object per record to a JSON Lines file,
      optionally signed with HMAC-SHA256 so the trail can be verified later

Both satisfy the Diagnostics protocol (``trace(message, *args)``).
"""
from __future__ import annotations
import datetime
import hashlib
import hmac
import json
import logging
import threading
from pathlib import Path
from typing import Any

TRACE_LOGGER_NAME = "mare.trace"


class LoggingDiagnostics:
    """Trace sink writing to the standard logging system."""

    def __init__(self, logger: logging.Logger | None = None, level: int = logging.DEBUG):
        self.logger = logger or logging.getLogger(TRACE_LOGGER_NAME)
        self.level = level

    def trace(self, message: str, *args: Any) -> None:
        if not self.logger.isEnabledFor(self.level):
            return
        if args:
            self.logger.log(self.level, "%s %s", message, " ".join(repr(arg) for arg in args))
        else:
            self.logger.log(self.level, "%s", message)


def _sign_record(record: dict[str, Any], signing_key: bytes) -> str:
    """Generate HMAC-SHA256 signature for a trace record."""
    if not signing_key:
        return ""
    # Canonical JSON representation for signing
    canonical = json.dumps(record, sort_keys=True, separators=(",", ":"), default=str)
    return hmac.new(signing_key, canonical.encode("utf-8"), hashlib.sha256).hexdigest()


class JsonlTraceSink:
    """Append-only JSON Lines trace file.

    Usage:
        sink = JsonlTraceSink(Path(".runtime/trace/transforms.jsonl"), signing_key=b"key")
        invoker = PipelineInvoker(diagnostics=sink)
    """

    def __init__(self, path: Path, signing_key: bytes = b""):
        self.path = Path(path)
        self.signing_key = signing_key
        self._lock = threading.Lock()

    def _ensure_dir(self) -> None:
        """Create trace directory if missing."""
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def trace(self, message: str, *args: Any) -> None:
        record = {
            "timestamp": datetime.datetime.now(datetime.timezone.utc).isoformat(),
            "message": message,
            "args": [arg if isinstance(arg, (str, int, float, bool, type(None))) else repr(arg) for arg in args],
        }
        signature = _sign_record(record, self.signing_key)
        if signature:
            record["signature"] = signature

        line = json.dumps(record, ensure_ascii=False, default=str) + "\n"
        with self._lock:
            self._ensure_dir()
            with self.path.open("a", encoding="utf-8") as f:
                f.write(line)
            self.path.chmod(0o600)


def verify_trace_file(path: Path, signing_key: bytes) -> tuple[int, int]:
    """Verify all signatures in a trace file.

    Returns:
        Tuple of (total_records, valid_signatures)
    """
    path = Path(path)
    if not path.exists():
        return 0, 0

    total = 0
    valid = 0

    with path.open("r", encoding="utf-8") as f:
        for line in f:
            if not line.strip():
                continue
            total += 1
            try:
                record = json.loads(line)
            except json.JSONDecodeError:
                continue
            stored_sig = record.pop("signature", "")
            if not stored_sig:
                continue
            computed_sig = _sign_record(record, signing_key)
            if computed_sig and hmac.compare_digest(stored_sig, computed_sig):
                valid += 1

    return total, valid
