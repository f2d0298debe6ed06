"""
Cooperative cancellation for long solves.

The solvers poll ``token.cancelled`` once per time step and raise
ComputationCancelledError when it is set. A token can be tripped from a
snapshot callback, another thread, or a UI handler.
"""

from .errors import ComputationCancelledError


class CancellationToken:
    """Boolean flag checked by the solvers between steps."""

    def __init__(self):
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self):
        self._cancelled = True

    def raise_if_cancelled(self, step: int):
        if self._cancelled:
            raise ComputationCancelledError(step)
