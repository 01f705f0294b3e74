class PollError(Exception):
    """Base class for poll errors."""


class ValidationError(PollError):
    """Poll creation input was rejected. Surfaced as a client error."""


class NotFoundError(PollError):
    """No poll is stored under the requested id."""


class SilentRejection(PollError):
    """A realtime message that is dropped without any reply to the sender."""
