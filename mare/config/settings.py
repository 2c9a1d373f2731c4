"""Settings loader with environment variable and Docker secrets integration."""
from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from mare.core.context import Diagnostics
from mare.core.diagnostics import JsonlTraceSink, LoggingDiagnostics
from mare.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

SECRETS_DIR = Path("/run/secrets")


def _load_secret_from_file(secret_name: str, env_var: str | None = None) -> str | None:
    """
    Load secret from /run/secrets (Docker secrets pattern).

    Priority:
    1. /run/secrets/{secret_name} (Docker secrets mount)
    2. Environment variable (fallback)

    Args:
        secret_name: Name of the secret file in /run/secrets
        env_var: Optional environment variable name to check as fallback

    Returns:
        Secret value or None if not found
    """
    secret_file = SECRETS_DIR / secret_name

    # Priority 1: Read from /run/secrets
    if secret_file.exists() and secret_file.is_file():
        try:
            secret_value = secret_file.read_text().strip()
            if secret_value:
                logger.info("[settings] ✓ Loaded %s from %s", secret_name, SECRETS_DIR)
                return secret_value
        except OSError as e:
            logger.warning("[settings] ✗ Failed to read %s: %s", secret_file, e)

    # Priority 2: Fallback to environment variable
    if env_var:
        secret_value = os.getenv(env_var)
        if secret_value:
            logger.info("[settings] ✓ Loaded %s from environment (fallback)", env_var)
            return secret_value

    return None


def _env_flag(var_name: str, default: bool = False) -> bool:
    return os.environ.get(var_name, str(default)).strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class MareConfig:
    """Pipeline configuration container."""
    # Rule file
    config_path: Path = Path("mare.yaml")

    # Logging
    log_level: str = "INFO"

    # Tracing
    trace_enabled: bool = False
    trace_file: Optional[Path] = None
    trace_signing_key: str = ""

    # Lookup
    lookup_max_results: int = 1

    def build_diagnostics(self) -> Optional[Diagnostics]:
        """Return the configured trace sink, or None when tracing is off.

        Priority:
        1. trace_file set: JSON Lines sink (signed when a key is configured)
        2. trace_enabled: logging sink on the ``mare.trace`` logger
        """
        if self.trace_file is not None:
            return JsonlTraceSink(self.trace_file, signing_key=self.trace_signing_key.encode("utf-8"))
        if self.trace_enabled:
            return LoggingDiagnostics()
        return None


def configure_logging(level: str = "INFO") -> None:
    """Basic console logging for command-line use."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def load_settings() -> MareConfig:
    """Load pipeline settings from environment and /run/secrets."""
    config_path = Path(os.environ.get("MARE_CONFIG_PATH", "mare.yaml"))
    log_level = os.environ.get("MARE_LOG_LEVEL", "INFO").strip().upper() or "INFO"

    trace_enabled = _env_flag("MARE_TRACE_ENABLED")
    trace_file_str = os.environ.get("MARE_TRACE_FILE", "").strip()
    trace_file = Path(trace_file_str) if trace_file_str else None
    trace_signing_key = _load_secret_from_file("mare_trace_signing_key", "MARE_TRACE_SIGNING_KEY") or ""

    max_results_str = os.environ.get("MARE_LOOKUP_MAX_RESULTS", "1").strip()
    try:
        lookup_max_results = int(max_results_str)
    except ValueError:
        raise ConfigError(f"MARE_LOOKUP_MAX_RESULTS must be an integer, got {max_results_str!r}") from None
    if lookup_max_results < 1:
        raise ConfigError("MARE_LOOKUP_MAX_RESULTS must be at least 1")

    logger.info(
        "[settings] config=%s; trace=%s; lookup_max_results=%d",
        config_path,
        trace_file or ("logging" if trace_enabled else "off"),
        lookup_max_results,
    )

    return MareConfig(
        config_path=config_path,
        log_level=log_level,
        trace_enabled=trace_enabled,
        trace_file=trace_file,
        trace_signing_key=trace_signing_key,
        lookup_max_results=lookup_max_results,
    )


# Global settings instance (loaded on first import)
settings: MareConfig = load_settings()
