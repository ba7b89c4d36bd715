"""
Errors raised by callchains.
"""


class ChainError(Exception):
    """Base class for errors originating in callchains itself."""


class RejectedError(ChainError):
    """
    Generic rejection reason.

    Used when a chain is rejected without a reason, and as the pending error
    of a chain started already failed without one.
    """

    def __init__(self, message="No reason given"):
        super().__init__(message)


class AdapterError(ChainError, TypeError):
    """Raised when a call adapter is given something that is not callable."""
