"""
Result - Represents the outcome of one step handler invocation.
"""


class _CarryPrevious:
    """Marker for "no new arguments": the chain keeps its current value."""

    def __repr__(self):
        return "CARRY_PREVIOUS"


CARRY_PREVIOUS = _CarryPrevious()


def to_args(value):
    """
    Convert a handler's return value into the arguments carried forward.

    Args:
        value: Whatever the handler returned

    Returns:
        Tuple of arguments: empty for None, the items of a list or tuple,
        otherwise the value on its own
    """
    if value is None:
        return ()
    if isinstance(value, (list, tuple)):
        return tuple(value)
    return (value,)


class Result:
    """
    Represents the outcome of a step handler invocation.
    Either the handler returned a value, or it failed with an error.
    """

    def __init__(self, success, value=None, error=None, details=()):
        """
        Initialize a Result.

        Args:
            success: Boolean indicating if the handler returned normally
            value: The handler's return value
            error: The error the handler failed with
            details: Extra information attached to the error
        """
        self.success = success
        self.value = value
        self.error = error
        self.details = tuple(details)

    @staticmethod
    def ok(value=None):
        """
        Create a successful result.

        Args:
            value: The handler's return value

        Returns:
            Result instance indicating success
        """
        return Result(True, value=value)

    @staticmethod
    def fail(error, *details):
        """
        Create a failed result.

        Args:
            error: The exception or rejection reason
            *details: Extra information attached to the error

        Returns:
            Result instance indicating failure
        """
        return Result(False, error=error, details=details)

    @property
    def args(self):
        """Arguments carried to the next step (see to_args)."""
        return to_args(self.value)

    def is_success(self):
        """Return True if the result indicates success."""
        return self.success

    def is_failure(self):
        """Return True if the result indicates failure."""
        return not self.success

    def __bool__(self):
        return self.success

    def __repr__(self):
        if self.success:
            return f"Result.ok(value={self.value!r})"
        return f"Result.fail(error={self.error!r}, details={self.details!r})"

    def __str__(self):
        if self.success:
            return "Success"
        return f"Failure: {self.error}"
