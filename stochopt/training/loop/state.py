"""Run state reported by the training loop."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class StopReason(Enum):
    """Why a run ended."""

    CONVERGED_OR_LIMIT = 'converged_or_limit'
    STREAM_EXHAUSTED = 'stream_exhausted'
    OBJECTIVE_FAILURE = 'objective_failure'


@dataclass
class LearnState:
    """
    State of one run.

    `iteration` is the number of completed iterations. Once the run ends,
    `running` is False and `reason` says why; `detail` carries the error
    message for objective failures.
    """

    iteration: int = 0
    running: bool = False
    reason: Optional[StopReason] = None
    detail: Optional[str] = None
    value: Optional[float] = None
    elapsed: float = 0.0

    @property
    def stopped(self) -> bool:
        return self.reason is not None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'iteration': self.iteration,
            'running': self.running,
            'reason': self.reason.value if self.reason is not None else None,
            'detail': self.detail,
            'value': self.value,
            'elapsed': self.elapsed,
        }
