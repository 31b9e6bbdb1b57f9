"""Centralized environment-based settings for recordbase.

Reads configuration from environment variables with sensible defaults.

Usage:
    from recordbase.config.settings import get_settings
    settings = get_settings()
"""

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class RecordbaseSettings:
    """Immutable store settings loaded from environment."""

    # Logging
    log_level: str = "INFO"

    # Storage
    data_dir: Path = Path("data")
    namespace: str = "default"

    # Hook dispatch
    hook_workers: int = 4

    # Sorting: keep the "equal values compare as less" tie behaviour
    legacy_tie_order: bool = False


def get_settings() -> RecordbaseSettings:
    """Load settings from environment variables.

    Environment variables (all optional):
        RECORDBASE_LOG_LEVEL: Logging level (default: INFO)
        RECORDBASE_DATA_DIR: Storage root directory (default: data)
        RECORDBASE_NAMESPACE: Application namespace (default: default)
        RECORDBASE_HOOK_WORKERS: Max concurrent hook invocations (default: 4)
        RECORDBASE_LEGACY_TIE_ORDER: Legacy tie ordering when sorting (default: false)
    """
    def _bool(key: str, default: bool = False) -> bool:
        val = os.environ.get(key, "").lower()
        if val in ("1", "true", "yes"):
            return True
        if val in ("0", "false", "no"):
            return False
        return default

    workers = int(os.environ.get("RECORDBASE_HOOK_WORKERS", "4"))
    if workers < 1:
        raise ValueError(f"RECORDBASE_HOOK_WORKERS must be >= 1, got: {workers}")

    return RecordbaseSettings(
        log_level=os.environ.get("RECORDBASE_LOG_LEVEL", "INFO").upper(),
        data_dir=Path(os.environ.get("RECORDBASE_DATA_DIR", "data")),
        namespace=os.environ.get("RECORDBASE_NAMESPACE", "default"),
        hook_workers=workers,
        legacy_tie_order=_bool("RECORDBASE_LEGACY_TIE_ORDER", False),
    )
