# core/errors.py
LOAD_FAILED_MESSAGE = "Failed to load market data. Please try again later."


class SourceUnavailable(RuntimeError):
    """
    A provider could not be reached or answered with something unusable.
    Carries the name of the source so callers can record it per-source.
    """

    def __init__(self, source: str, reason: str):
        super().__init__(f"{source} unavailable: {reason}")
        self.source = source
        self.reason = reason


class LoadFailed(RuntimeError):
    """The catalog could not be loaded; nothing was committed."""

    def __init__(self, message: str = LOAD_FAILED_MESSAGE):
        super().__init__(message)
        self.message = message
