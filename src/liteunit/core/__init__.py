"""Core test execution functionality."""

from liteunit.core.discovery import TestDiscovery
from liteunit.core.errors import HarnessError, NoActiveTestError, SuiteLoadError
from liteunit.core.faults import FaultCode, FaultInterceptor, trigger
from liteunit.core.models import AssertionRecord, AssertionTally, FaultRecord, SuiteResult, TestCase
from liteunit.core.suite import TestSuite

__all__ = [
    "AssertionRecord",
    "AssertionTally",
    "FaultCode",
    "FaultInterceptor",
    "FaultRecord",
    "HarnessError",
    "NoActiveTestError",
    "SuiteLoadError",
    "SuiteResult",
    "TestCase",
    "TestDiscovery",
    "TestSuite",
    "trigger",
]
