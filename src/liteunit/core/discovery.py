"""Test discovery functionality."""

import inspect
from types import MethodType
from typing import TYPE_CHECKING

from liteunit.core.models import TestCase

if TYPE_CHECKING:
    from liteunit.core.suite import TestSuite

LIFECYCLE_HOOKS = frozenset({"setup", "teardown"})


def display_name(method_name: str) -> str:
    """Turn a method name into a test name: ``an_example_test`` -> ``an example test``."""
    return method_name.replace("_", " ").strip()


class TestDiscovery:
    """Discovers the test methods of a concrete test suite.

    A test method is a public function defined on the suite class or one of
    its concrete ancestors, that is neither a lifecycle hook nor a member of
    the base :class:`~liteunit.core.suite.TestSuite`.
    """

    __test__ = False

    def __init__(self, base: type):
        """Initialize test discovery.

        Args:
            base: The base suite class whose own members are never tests
        """
        self.base = base

    def test_methods(self, suite_class: type) -> list[str]:
        """Get the names of all test methods of a suite class.

        Methods of the most derived class come first, each class in definition
        order, so repeated calls always return the same list.
        """
        names: list[str] = []
        seen: set[str] = set()

        for klass in suite_class.__mro__:
            if klass is self.base or not issubclass(klass, self.base):
                continue

            for name, member in vars(klass).items():
                if name in seen:
                    continue
                seen.add(name)

                if name.startswith("_") or name in LIFECYCLE_HOOKS:
                    continue
                if hasattr(self.base, name):
                    continue  # members of the base suite
                if inspect.isabstract(klass):
                    continue  # declared on an abstract class
                if not inspect.isfunction(member):
                    continue  # static/class methods, properties and attributes

                names.append(name)

        return names

    def discover(self, suite: "TestSuite") -> list[TestCase]:
        """Create a TestCase for every test method, bound to ``suite``.

        Entries are bound from the class, so instance attributes set by the
        suite (``title``, ``config``, ...) never shadow a test method.
        """
        suite_class = type(suite)
        return [
            TestCase(name=display_name(name), method=name, entry=MethodType(getattr(suite_class, name), suite))
            for name in self.test_methods(suite_class)
        ]
