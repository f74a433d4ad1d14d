"""Run state tracking for a single sync.

A sync run moves through its phases strictly forward:

    IDLE -> ENUMERATING_LOCAL -> ENUMERATING_REMOTE -> DIFFING -> EXECUTING -> DONE

The first error moves the run to FAILED from any non-terminal phase.
Nothing is persisted; every run starts from IDLE.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ..exceptions import S3SyncError

logger = logging.getLogger(__name__)


class SyncPhase(str, Enum):
    """Phases of a sync run."""

    IDLE = "idle"
    ENUMERATING_LOCAL = "enumerating_local"
    ENUMERATING_REMOTE = "enumerating_remote"
    DIFFING = "diffing"
    EXECUTING = "executing"
    DONE = "done"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        """True for DONE and FAILED."""
        return self in (SyncPhase.DONE, SyncPhase.FAILED)


PHASE_ORDER = (
    SyncPhase.IDLE,
    SyncPhase.ENUMERATING_LOCAL,
    SyncPhase.ENUMERATING_REMOTE,
    SyncPhase.DIFFING,
    SyncPhase.EXECUTING,
    SyncPhase.DONE,
)


@dataclass
class SyncRun:
    """Tracks the phase of one sync run."""

    phase: SyncPhase = SyncPhase.IDLE
    """Current phase"""

    history: list[SyncPhase] = field(default_factory=lambda: [SyncPhase.IDLE])
    """Every phase entered, in order"""

    error: Optional[BaseException] = None
    """Error that failed the run, if any"""

    def advance(self, phase: SyncPhase) -> None:
        """Move to the next phase.

        Raises:
            S3SyncError: If ``phase`` is not the phase that follows the
                current one
        """
        if self.phase.is_terminal:
            raise S3SyncError(
                f"Cannot enter {phase.value}: run already {self.phase.value}"
            )
        expected = PHASE_ORDER[PHASE_ORDER.index(self.phase) + 1]
        if phase != expected:
            raise S3SyncError(
                f"Invalid transition {self.phase.value} -> {phase.value} "
                f"(expected {expected.value})"
            )
        self._enter(phase)

    def fail(self, error: BaseException) -> None:
        """Mark the run as failed.

        Raises:
            S3SyncError: If the run already finished
        """
        if self.phase.is_terminal:
            raise S3SyncError(f"Cannot fail: run already {self.phase.value}")
        self.error = error
        self._enter(SyncPhase.FAILED)

    def _enter(self, phase: SyncPhase) -> None:
        logger.debug(f"Sync phase: {self.phase.value} -> {phase.value}")
        self.phase = phase
        self.history.append(phase)
