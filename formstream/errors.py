class FormStreamError(Exception):
    """Base error for formstream."""


class ConfigurationError(FormStreamError):
    """Raised when a builder is wired with an unusable collaborator."""


class StreamError(FormStreamError):
    """Raised when a resource cannot be turned into a stream."""


class StreamConsumedError(StreamError):
    """Raised when a one-shot stream is read after it was exhausted."""
