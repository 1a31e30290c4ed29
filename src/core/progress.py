"""Progress reporting sinks for export and import pipelines.

Pipelines receive a sink object and call ``report`` at named stages.
Reports are synchronous best-effort notifications.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional, Protocol

from core.constants import STAGE_IMPORT
from core.logging_config import get_logger

_LOGGER = get_logger(__name__)

ProgressCallback = Callable[[str, float, Optional[str]], None]


class ProgressSink(Protocol):
    """Receiver of pipeline stage progress."""

    def report(self, stage: str, fraction: float, message: str | None = None) -> None:
        """Record that a stage reached a fraction of overall progress."""


class NullProgressSink:
    """Sink that discards every report."""

    def report(self, stage: str, fraction: float, message: str | None = None) -> None:
        return None


@dataclass(frozen=True)
class CallbackProgressSink:
    """Adapter forwarding reports to a plain callable."""

    callback: ProgressCallback

    def report(self, stage: str, fraction: float, message: str | None = None) -> None:
        self.callback(stage, clamp_fraction(fraction), message)


@dataclass
class LoggingProgressSink:
    """Sink that emits one structured log event per report.

    Row-level import reports are throttled: the first one is logged, then
    every ``row_log_interval``-th call.
    """

    operation: str
    row_log_interval: int = 500
    _import_reports: int = field(default=0, init=False, repr=False)

    def report(self, stage: str, fraction: float, message: str | None = None) -> None:
        """Log a progress event for the current stage."""
        if stage == STAGE_IMPORT:
            self._import_reports += 1
            if self._import_reports > 1 and self._import_reports % self.row_log_interval != 0:
                return
        _LOGGER.info(
            "transfer_progress",
            operation=self.operation,
            stage=stage,
            progress=round(clamp_fraction(fraction), 3),
            detail=message,
        )


def clamp_fraction(fraction: float) -> float:
    """Bound a progress fraction to [0, 1]."""
    return min(1.0, max(0.0, fraction))


def resolve_sink(progress: ProgressSink | ProgressCallback | None) -> ProgressSink:
    """Normalize an optional sink or callable into a sink instance.

    Args:
        progress: Sink, bare callable, or None.

    Returns:
        A sink that is always safe to call.
    """
    if progress is None:
        return NullProgressSink()
    if hasattr(progress, "report"):
        return progress  # type: ignore[return-value]
    return CallbackProgressSink(progress)  # type: ignore[arg-type]
