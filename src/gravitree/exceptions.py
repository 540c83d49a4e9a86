"""
Exception types raised by the Gravitree package.

All errors are synchronous programming or input errors, detected locally
and surfaced to the caller immediately. Each one also derives from the
closest built-in exception so callers catching ``KeyError`` or
``ValueError`` keep working.
"""


class GravitreeError(Exception):
    """Base class for all Gravitree errors."""


class UnknownBodyError(GravitreeError, KeyError):
    """An operation referenced a body id that is not in the solar system."""

    def __init__(self, body_id):
        self.body_id = body_id
        super().__init__(f"No body with id '{body_id}' in the solar system")

    def __str__(self):
        # KeyError quotes its argument, use the plain message instead
        return self.args[0]


class DuplicateBodyError(GravitreeError, ValueError):
    """A body was inserted with an id that is already in use."""

    def __init__(self, body_id):
        self.body_id = body_id
        super().__init__(f"A body with id '{body_id}' already exists")


class InvalidOperationError(GravitreeError, RuntimeError):
    """The requested operation is not allowed, e.g. removing the root."""


class DegenerateOrbitError(GravitreeError, ValueError):
    """State vectors do not define a Keplerian orbit."""


class UndefinedPeriodError(GravitreeError, ValueError):
    """Period or time propagation requested for an open (e >= 1) orbit."""


class ConvergenceError(GravitreeError, RuntimeError):
    """Kepler's equation did not converge within the iteration cap."""
