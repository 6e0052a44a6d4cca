"""
Error taxonomy for stochopt.

Every error raised by the library derives from StochOptError, and also from
the builtin exception a caller would naturally catch (ValueError, IndexError,
RuntimeError), so existing handlers keep working.
"""

from typing import Any, Optional


class StochOptError(Exception):
    """Base class for all stochopt errors."""


class SizeMismatch(StochOptError, ValueError):
    """Paired data containers disagree on their number of observations."""


class OutOfRange(StochOptError, IndexError):
    """An observation index lies outside the valid bounds."""


class ShapeMismatch(StochOptError, ValueError):
    """A gradient does not match the parameter vector an update rule tracks."""


class ObjectiveError(StochOptError, RuntimeError):
    """Raised by an objective when it cannot compute a value or gradient."""


class ObjectiveFailure(StochOptError, RuntimeError):
    """
    Raised by the training loop when the objective failed mid-run.

    Args:
        detail: Description of the underlying failure
        state: The terminal LearnState (parameters keep all updates applied
               before the failing iteration)
    """

    def __init__(self, detail: str, state: Optional[Any] = None):
        super().__init__(detail)
        self.detail = detail
        self.state = state
