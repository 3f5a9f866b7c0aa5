"""Colored versioning logger — ANSI-colored console logging for the write pipeline.

Each stage of a versioned write (stamp, validation, persistence, removal)
gets its own color so a record's path through the pipeline can be traced
in the terminal.

Color scheme:
    🟢 Green   — Persist / Complete
    🟡 Yellow  — Stamp
    🔵 Blue    — Uniqueness / reference validation
    🟣 Magenta — Close / Destroy
    🟠 Cyan    — Point-in-time lookups
    🔴 Red     — Rejected writes
"""

import logging
import time
from contextlib import contextmanager
from typing import Any


class _Colors:
    """ANSI escape codes for terminal colors."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    BLUE = "\033[94m"
    MAGENTA = "\033[95m"
    CYAN = "\033[96m"
    GRAY = "\033[90m"


class VersionStage:
    """Write-pipeline stages with their colors and icons."""

    STAMP = ("STAMP", _Colors.YELLOW, "🕒")
    VALIDATE = ("VALIDATE", _Colors.BLUE, "🔍")
    PERSIST = ("PERSIST", _Colors.GREEN, "💾")
    CLOSE = ("CLOSE", _Colors.MAGENTA, "🔒")
    DESTROY = ("DESTROY", _Colors.MAGENTA, "🗑️")
    LOOKUP = ("AS_OF", _Colors.CYAN, "⏪")
    REJECTED = ("REJECTED", _Colors.RED, "❌")


def _format_details(kwargs: dict[str, Any]) -> str:
    if not kwargs:
        return ""
    details = " | ".join(f"{k}={v}" for k, v in kwargs.items())
    return f" {_Colors.GRAY}({details}){_Colors.RESET}"


class VersioningLogger:
    """Color-coded logger for versioned writes.

    Usage:
        log = VersioningLogger("asof.versioning")
        with log.timed_step(VersionStage.PERSIST, "Saving Product", sku="X-1"):
            await session.flush()
    """

    def __init__(self, component_name: str):
        self._logger = logging.getLogger(component_name)

    def step_start(self, stage: tuple[str, str, str], message: str, **kwargs: Any) -> None:
        label, color, icon = stage
        self._logger.debug(
            f"{color}{_Colors.BOLD}{icon} [{label}]{_Colors.RESET} "
            f"{color}{message}{_Colors.RESET}{_format_details(kwargs)}"
        )

    def step_complete(self, stage: tuple[str, str, str], message: str, **kwargs: Any) -> None:
        label, color, icon = stage
        self._logger.info(
            f"{color}{icon} [{label}]{_Colors.RESET} "
            f"{_Colors.GREEN}✓ {message}{_Colors.RESET}{_format_details(kwargs)}"
        )

    def rejected(self, message: str, errors: list[Any]) -> None:
        """Log a write or removal blocked by validation errors."""
        label, color, icon = VersionStage.REJECTED
        reasons = "; ".join(str(e) for e in errors)
        self._logger.warning(
            f"{color}{_Colors.BOLD}{icon} [{label}]{_Colors.RESET} "
            f"{color}{message}{_Colors.RESET} {_Colors.DIM}→ {reasons}{_Colors.RESET}"
        )

    def detail(self, message: str, **kwargs: Any) -> None:
        self._logger.debug(f"   {_Colors.GRAY}├─ {message}{_Colors.RESET}{_format_details(kwargs)}")

    @contextmanager
    def timed_step(self, stage: tuple[str, str, str], message: str, **kwargs: Any):
        """Log start/end of a stage with elapsed time; failures propagate."""
        self.step_start(stage, message, **kwargs)
        start = time.perf_counter()
        try:
            yield
        except Exception as e:
            elapsed = time.perf_counter() - start
            label, _, icon = stage
            self._logger.debug(
                f"{_Colors.RED}{icon} [{label}] {message} — failed after {elapsed:.3f}s"
                f" → {type(e).__name__}{_Colors.RESET}"
            )
            raise
        else:
            elapsed = time.perf_counter() - start
            self.step_complete(stage, f"{message} — {elapsed:.3f}s", **kwargs)
