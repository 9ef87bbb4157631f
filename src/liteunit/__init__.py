"""
LiteUnit - a lightweight unit-testing harness.

This package provides tools to:
- Discover test methods on a TestSuite subclass
- Run them with setup/teardown around each test
- Intercept warnings and exceptions and attribute them to the running test
- Render pass/fail reports to the console or to HTML
"""

__version__ = "0.1.0"
__author__ = "LiteUnit Team"

from liteunit.core.faults import FaultCode, UserDeprecated, UserError, UserNotice, trigger
from liteunit.core.suite import TestSuite

__all__ = [
    "FaultCode",
    "TestSuite",
    "UserDeprecated",
    "UserError",
    "UserNotice",
    "trigger",
]
