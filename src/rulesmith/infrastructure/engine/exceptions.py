"""
Engine-specific exceptions.

These abstract away subprocess and JSON errors from the callers.
"""


class EngineError(Exception):
    """Base class for failures while running the matching engine."""
    pass


class EngineNotFoundError(EngineError):
    """Raised when the engine binary cannot be launched."""
    pass


class EngineTimeoutError(EngineError):
    """Raised when an engine run exceeds its timeout."""
    pass


class EngineOutputError(EngineError):
    """
    Raised when a JSON run prints output that doesn't match the result schema.

    This usually means the engine crashed before producing results; the
    message carries its stderr.
    """
    pass
