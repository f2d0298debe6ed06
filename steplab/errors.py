"""
Solver Errors
=============
Exceptions raised by the trajectory and heat solvers.

  - InvalidParameterError    — bad input, raised before any work is done
  - ExcessiveWorkloadError   — heat grid too fine for the configured budget
  - ComputationCancelledError — a CancellationToken was tripped mid-solve

A trajectory stopped by the distance cutoff is not an error; the result
comes back with ``impacted=False``.
"""


class SteplabError(Exception):
    """Base class for all solver errors."""


class InvalidParameterError(SteplabError, ValueError):
    """A parameter is non-finite, non-positive or otherwise out of range."""


class ExcessiveWorkloadError(SteplabError):
    """The requested grid would need more node updates than allowed."""

    def __init__(self, work: float, max_work: int):
        self.work = work
        self.max_work = max_work
        super().__init__(
            f"Heat solve needs {work:,} node updates, limit is {max_work:,}. "
            f"Increase dt or dx, or raise max_work."
        )


class ComputationCancelledError(SteplabError):
    """The solve was cancelled through its CancellationToken."""

    def __init__(self, step: int):
        self.step = step
        super().__init__(f"Computation cancelled after {step} steps")
