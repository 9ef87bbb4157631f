"""Base class for reports."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from liteunit.core.suite import TestSuite


class Report(ABC):
    """Renders the progress and the results of a test suite.

    A suite calls ``render_header`` before its first test, ``render_message``
    while the tests run, and ``render_body`` followed by ``render_footer``
    once every test has finished.
    """

    def __init__(self, debug: bool = False):
        """Initialize the report.

        Args:
            debug: Toggle verbose output (backtraces, operands and debug messages)
        """
        self.debug = debug

    @abstractmethod
    def render_header(self, suite: "TestSuite") -> None:
        """Render the report header."""

    @abstractmethod
    def render_message(self, message: str, debug: bool = False) -> None:
        """Render a progress message; debug messages only show in debug mode."""

    @abstractmethod
    def render_body(self, suite: "TestSuite") -> None:
        """Render the results of every test."""

    @abstractmethod
    def render_footer(self, suite: "TestSuite") -> None:
        """Render the report footer."""
