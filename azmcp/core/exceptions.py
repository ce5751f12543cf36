"""Errors raised by operations and their collaborators at execution time."""


class OperationError(Exception):
    """Execution failure carrying the status code to report to the caller.

    The message is written for callers and is always copied into the
    response envelope, regardless of the error-detail policy.
    """

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.status_code = status_code


class ServiceUnavailableError(OperationError):
    """Raised when a required service is not registered with the locator."""
    pass


class OperationCancelled(OperationError):
    """Raised when an invocation is cancelled before its handler completes."""
    pass
