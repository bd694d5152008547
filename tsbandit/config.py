from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
import os


def _env_int(key: str) -> Optional[int]:
    value = os.getenv(key)
    if value is None or not value.strip():
        return None
    return int(value)


def _env_float(key: str) -> Optional[float]:
    value = os.getenv(key)
    if value is None or not value.strip():
        return None
    return float(value)


@dataclass(frozen=True)
class RuntimeSettings:
    # Seed for the uniform source; None draws fresh OS entropy each invocation.
    seed: Optional[int] = field(default_factory=lambda: _env_int("TSBANDIT_SEED"))
    steps: int = field(default_factory=lambda: _env_int("TSBANDIT_STEPS") or 10)
    # Per-script timeout in seconds; None waits indefinitely.
    timeout_s: Optional[float] = field(default_factory=lambda: _env_float("TSBANDIT_TIMEOUT"))
    output_path: Path = field(
        default_factory=lambda: Path(os.getenv("TSBANDIT_OUTPUT", "./new-config.json"))
    )
    log_level: str = field(default_factory=lambda: os.getenv("TSBANDIT_LOG_LEVEL", "WARNING").upper())


def load_runtime_settings() -> RuntimeSettings:
    """Return runtime settings (seed, step budget, timeout, output, log level) from the environment."""
    return RuntimeSettings()
