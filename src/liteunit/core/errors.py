"""Exceptions raised by the harness."""


class HarnessError(Exception):
    """Base class for errors raised by LiteUnit itself."""

    pass


class NoActiveTestError(HarnessError):
    """Raised when an assertion or fixture is used while no test is running."""

    pass


class SuiteLoadError(HarnessError):
    """Raised when a test suite cannot be imported from a target."""

    pass


class HandledFault(BaseException):
    """Raised by the fault interceptor to abort a test after a fatal fault.

    The fault has already been recorded by the time this is raised, so the
    test-body boundary swallows it. It derives from ``BaseException`` so that
    ``except Exception`` blocks inside a test cannot intercept it.
    """

    def __init__(self, code: int, message: str):
        super().__init__(message)
        self.code = code
        self.message = message
