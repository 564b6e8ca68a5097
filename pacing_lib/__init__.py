from __future__ import annotations

from .config import Config
from .errors import ValidationError

__all__ = ["Config", "ValidationError", "run_pacing"]


def __getattr__(name: str):
    if name == "run_pacing":
        from .pacing_runner import run_pacing

        return run_pacing
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
