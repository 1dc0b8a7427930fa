class TrackerError(ValueError):
    """Base class for errors raised by the workout engine."""


class NotFoundError(TrackerError):
    """An exercise, workout, template or session does not exist."""


class IndexOutOfRangeError(TrackerError):
    """An exercise or set position is not valid."""


class EmptySessionError(TrackerError):
    """The session has no exercises."""


class InvalidInputError(TrackerError):
    """A value was rejected, e.g. a blank name or non-positive weight."""


class SessionActiveError(TrackerError):
    """A session is already in progress."""
