#!/usr/bin/env python3
"""Example test suite showing every kind of outcome LiteUnit reports.

Run it with::

    liteunit run scripts/example_suite.py
    liteunit run scripts/example_suite.py --debug
    python scripts/example_suite.py
"""

import sys
from types import SimpleNamespace

from liteunit import FaultCode, TestSuite, trigger


class ExampleException(Exception):
    pass


class ExampleSuite(TestSuite):
    def setup(self):
        self.fixture("foobar", {"foo": "bar"})

    def this_is_a_test(self):
        self.ok(1, "the integer '1' is okay")
        self.ok(0, "the integer '0' is not okay")  # this will fail!

    def another_test(self):
        self.equal(True, 1, "the integer '1' is truthy")
        self.not_strict_equal(True, 1, "the integer '1' is NOT True")

        foobar = self.fixture("foobar")
        self.equal(foobar["foo"], "bar", "the fixture 'foobar' should have a key 'foo' equal to 'bar'")

        fooarr = {"blam": "blaz"}
        self.has("blam", fooarr, "fooarr has a key named 'blam'")

        fooobj = SimpleNamespace(blam="blaz")
        self.has("blam", fooobj, "fooobj has an attribute named 'blam'")

    def forced_failure(self):
        self.fail("This is a forced fail")

    def expected_failure(self):
        self.warn("This is a good place to describe a missing test")

    def forced_error(self):
        trigger("this notice was triggered inside a test", FaultCode.USER_NOTICE)
        trigger("this error was triggered inside a test", FaultCode.USER_ERROR)
        # a USER_ERROR interrupts and fails this test
        trigger("This will never execute", FaultCode.USER_ERROR)

    def forced_exception(self):
        raise Exception("This was raised inside a test")

    def expected_error(self):
        self.expect(FaultCode.USER_ERROR, "this function is expected to trigger an error", lambda: trigger(
            "this error is expected and will make the assertion pass", FaultCode.USER_ERROR
        ))

        self.expect(FaultCode.USER_NOTICE, "this function was expected to trigger a notice", lambda: trigger(
            "this assertion fails because a notice was expected", FaultCode.USER_ERROR
        ))

        # fails: nothing is triggered
        self.expect(FaultCode.USER_ERROR, "this function was expected to trigger an error", lambda: None)

    def expected_exception(self):
        def raise_example():
            raise ExampleException()

        self.expect("ExampleException", "this function is expected to raise an ExampleException", raise_example)

        # fails: nothing is raised
        self.expect(ExampleException, "this function was expected to raise an ExampleException", lambda: None)


if __name__ == "__main__":
    sys.exit(ExampleSuite().run())
