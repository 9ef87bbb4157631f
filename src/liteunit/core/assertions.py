"""The assertion API available to test methods.

Every assertion records an :class:`AssertionRecord` on the test that is
currently running. Assertions never raise on failure and return nothing;
a failed assertion is reported, it does not interrupt the test.
"""

import re
from collections.abc import Mapping, Sequence
from dataclasses import replace
from numbers import Number
from typing import Any, Callable, Optional, Union

from liteunit.core.errors import HandledFault
from liteunit.core.faults import (
    EXCEPTION_CODE,
    describe_code,
    exception_matches,
    fault_from_exception,
)
from liteunit.core.models import AssertionRecord, AssertionStatus, TestCase

_SCALARS = (str, bytes, bytearray, Number, type(None))

# Decimal notation only: no "inf", "nan", underscores or hex.
_NUMERIC = re.compile(r"\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*")


def _to_number(text: str) -> Optional[float]:
    if _NUMERIC.fullmatch(text) is None:
        return None
    return float(text)


def loose_equal(a: Any, b: Any) -> bool:
    """Compare two values with type coercion.

    Booleans compare by truthiness, ``None`` equals any falsy value, and a
    numeric string equals the number it spells. Two numeric strings
    compare as numbers.
    """
    if a == b:
        return True

    if isinstance(a, bool) or isinstance(b, bool):
        return bool(a) == bool(b)
    if a is None or b is None:
        return not a and not b

    if isinstance(a, str) and isinstance(b, str):
        number_a, number_b = _to_number(a), _to_number(b)
        return number_a is not None and number_b is not None and number_a == number_b

    if isinstance(a, str) and isinstance(b, Number):
        a, b = b, a
    if isinstance(a, Number) and isinstance(b, str):
        number = _to_number(b)
        return number is not None and a == number

    return False


def strict_equal(a: Any, b: Any) -> bool:
    """Compare two values without coercion: same type and equal, or identical."""
    if a is b:
        return True
    return type(a) is type(b) and a == b


def has_member(needle: Any, haystack: Any) -> bool:
    """Check for a key, index or attribute named ``needle`` in ``haystack``.

    Scalars never contain anything.
    """
    if isinstance(haystack, Mapping):
        return needle in haystack
    if isinstance(haystack, _SCALARS):
        return False
    if isinstance(haystack, Sequence):
        return isinstance(needle, int) and not isinstance(needle, bool) and 0 <= needle < len(haystack)
    if isinstance(needle, str):
        return hasattr(haystack, needle)
    return False


class Assertions:
    """Assertion methods mixed into :class:`~liteunit.core.suite.TestSuite`."""

    # Provided by the suite class this is mixed into.
    fault_labels: dict[int, str]
    _active_test: Callable[[], TestCase]
    debug_out: Callable[[str], None]

    def _record(self, record: AssertionRecord) -> None:
        self._active_test().assertions.append(record)
        if record.status == AssertionStatus.FAILED and record.description:
            self.debug_out(record.description)

    def equal(self, a: Any, b: Any, msg: Optional[str] = None) -> None:
        """Assert that ``a`` is loosely equal to ``b``."""
        self._record(
            AssertionRecord(
                "equal",
                (a, b),
                loose_equal(a, b),
                msg,
                f"Expected: {a!r} and {b!r} to be loosely equal",
            )
        )

    def not_equal(self, a: Any, b: Any, msg: Optional[str] = None) -> None:
        """Assert that ``a`` is not loosely equal to ``b``."""
        self._record(
            AssertionRecord(
                "not_equal",
                (a, b),
                not loose_equal(a, b),
                msg,
                f"Expected: {a!r} and {b!r} to be unequal",
            )
        )

    def strict_equal(self, a: Any, b: Any, msg: Optional[str] = None) -> None:
        """Assert that ``a`` and ``b`` have the same type and are equal."""
        self._record(
            AssertionRecord(
                "strict_equal",
                (a, b),
                strict_equal(a, b),
                msg,
                f"Expected: {a!r} and {b!r} to be strictly equal",
            )
        )

    def not_strict_equal(self, a: Any, b: Any, msg: Optional[str] = None) -> None:
        """Assert that ``a`` and ``b`` differ in type or in value."""
        self._record(
            AssertionRecord(
                "not_strict_equal",
                (a, b),
                not strict_equal(a, b),
                msg,
                f"Expected: {a!r} and {b!r} to be strictly unequal",
            )
        )

    def ok(self, a: Any, msg: Optional[str] = None) -> None:
        """Assert that ``a`` is truthy."""
        self._record(AssertionRecord("ok", (a,), bool(a), msg, f"Expected: {a!r} to be truthy"))

    def has(self, needle: Any, haystack: Any, msg: Optional[str] = None) -> None:
        """Assert that ``haystack`` has a key, index or attribute named ``needle``."""
        self._record(
            AssertionRecord(
                "has",
                (needle, haystack),
                has_member(needle, haystack),
                msg,
                f"Expected: {haystack!r} to contain {needle!r}",
            )
        )

    def fail(self, msg: Optional[str] = None, is_warning: bool = False) -> None:
        """Record a failed assertion, or a warning if ``is_warning`` is set."""
        self._record(AssertionRecord("fail", (), False, msg, is_warning=is_warning))

    def warn(self, msg: Optional[str] = None) -> None:
        """Record an expected failure; warnings do not fail the test."""
        self.fail(msg, True)

    def expect(
        self,
        expected: Union[int, type, str],
        msg_or_function: Union[str, Callable[[], Any], None],
        function: Optional[Callable[[], Any]] = None,
    ) -> None:
        """Assert that calling a function triggers a fault or raises an exception.

        ``expected`` is either a fault code (matched bitwise), an exception
        class, or the name of an exception class. The function is called
        first and the assertion is recorded once its outcome is known.

        A matching fault or exception is recorded with ``expected=True`` and
        does not fail the test. Anything else the function raises is recorded
        as an ordinary fault, and the assertion fails.
        """
        if function is None and callable(msg_or_function):
            function, msg = msg_or_function, None
        else:
            msg = msg_or_function

        expects_code = isinstance(expected, int) and not isinstance(expected, bool)
        if expects_code:
            label = describe_code(expected, self.fault_labels)
        else:
            type_name = expected.__name__ if isinstance(expected, type) else expected
            label = f"{type_name} exception"
        if msg is None:
            msg = f"expected {label}"

        test = self._active_test()
        first_new_fault = len(test.faults)
        result = False

        try:
            function()
        except HandledFault:
            pass  # already recorded by the fault interceptor
        except Exception as exc:
            matched = not expects_code and exception_matches(exc, expected)
            test.faults.append(fault_from_exception(exc, expected=matched))
            result = matched

        if expects_code:
            for index in range(first_new_fault, len(test.faults)):
                fault = test.faults[index]
                if fault.code != EXCEPTION_CODE and not fault.expected and fault.code & int(expected):
                    test.faults[index] = replace(fault, expected=True)
                    result = True
                    break

        self._record(
            AssertionRecord(
                "expect",
                (expected,),
                result,
                msg,
                f"Expected: {label}",
                expected_fault=expected,
            )
        )

    # Aliases
    like = equal
    unlike = not_equal
    eq = strict_equal
    ne = not_strict_equal
    check = ok
    expect_fail = warn
    fails = expect
