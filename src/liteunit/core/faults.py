"""Interception and classification of runtime faults.

Python reports non-exception runtime problems through the ``warnings``
machinery. While a suite is running, :class:`FaultInterceptor` replaces
``warnings.showwarning`` so that every warning issued by a test becomes a
:class:`~liteunit.core.models.FaultRecord` on the current test. Warnings whose
code is not in the warning-level set abort the test body by raising
:class:`~liteunit.core.errors.HandledFault`.
"""

import traceback
import warnings
from enum import IntFlag
from pathlib import Path
from typing import Callable, Iterable, Optional, Union

from liteunit.core.errors import HarnessError, HandledFault
from liteunit.core.models import FaultRecord, TestCase


class FaultCode(IntFlag):
    """Bit-flag codes for every category of runtime fault."""

    WARNING = 1
    USER_WARNING = 2
    USER_NOTICE = 4
    USER_ERROR = 8
    USER_DEPRECATED = 16
    DEPRECATION = 32
    PENDING_DEPRECATION = 64
    SYNTAX_WARNING = 128
    RUNTIME_WARNING = 256
    FUTURE_WARNING = 512
    IMPORT_WARNING = 1024
    UNICODE_WARNING = 2048
    BYTES_WARNING = 4096
    RESOURCE_WARNING = 8192
    ENCODING_WARNING = 16384


ALL_CODES = tuple(FaultCode)

EXCEPTION_CODE = 0


class UserNotice(UserWarning):
    """Informational fault raised by test code."""


class UserError(UserWarning):
    """Fatal fault raised by test code; aborts the test body by default."""


class UserDeprecated(DeprecationWarning):
    """Deprecation notice raised by test code."""


# Most specific categories first; lookups walk the category MRO.
CATEGORY_CODES: dict[type, FaultCode] = {
    UserNotice: FaultCode.USER_NOTICE,
    UserError: FaultCode.USER_ERROR,
    UserDeprecated: FaultCode.USER_DEPRECATED,
    UserWarning: FaultCode.USER_WARNING,
    DeprecationWarning: FaultCode.DEPRECATION,
    PendingDeprecationWarning: FaultCode.PENDING_DEPRECATION,
    SyntaxWarning: FaultCode.SYNTAX_WARNING,
    RuntimeWarning: FaultCode.RUNTIME_WARNING,
    FutureWarning: FaultCode.FUTURE_WARNING,
    ImportWarning: FaultCode.IMPORT_WARNING,
    UnicodeWarning: FaultCode.UNICODE_WARNING,
    BytesWarning: FaultCode.BYTES_WARNING,
    ResourceWarning: FaultCode.RESOURCE_WARNING,
    EncodingWarning: FaultCode.ENCODING_WARNING,
    Warning: FaultCode.WARNING,
}

CODE_CATEGORIES: dict[FaultCode, type] = {code: category for category, code in CATEGORY_CODES.items()}

DEFAULT_FATAL_CODES = frozenset({FaultCode.USER_ERROR})

DEFAULT_WARNING_CODES = frozenset(code for code in ALL_CODES if code not in DEFAULT_FATAL_CODES)

_CORE_DIR = Path(__file__).resolve().parent

_WARNINGS_MODULES = {"warnings.py", "_py_warnings.py"}


def default_fault_labels() -> dict[int, str]:
    """Build the classification table, mapping fault codes to display labels."""
    return {int(code): code.name.replace("_", " ") for code in ALL_CODES}


def code_for_category(category: type) -> FaultCode:
    """Get the fault code for a warning category (or the nearest ancestor)."""
    for klass in category.__mro__:
        if klass in CATEGORY_CODES:
            return CATEGORY_CODES[klass]
    return FaultCode.WARNING


def describe_code(code: int, labels: dict[int, str]) -> str:
    """Get a display label for a fault code, which may combine several flags."""
    if code in labels:
        return labels[code]
    names = [labels.get(int(flag), str(int(flag))) for flag in ALL_CODES if int(flag) & code]
    return " | ".join(names) if names else str(code)


def trigger(message: str, code: int = FaultCode.USER_NOTICE, stacklevel: int = 2) -> None:
    """Issue a runtime fault of the given code from test code.

    Args:
        message: Description of the fault
        code: A single :class:`FaultCode`; ``USER_ERROR`` aborts the test by default
        stacklevel: Passed on to :func:`warnings.warn`; the default points at the caller
    """
    category = CODE_CATEGORIES.get(FaultCode(code))
    if category is None:
        raise ValueError(f"No warning category for fault code {code}")
    warnings.warn(message, category, stacklevel=stacklevel)


def _is_internal(filename: str) -> bool:
    path = Path(filename)
    if path.name in _WARNINGS_MODULES:
        return True
    try:
        return path.resolve().parent == _CORE_DIR
    except OSError:
        return False


def format_frames(frames: Iterable[traceback.FrameSummary]) -> tuple[str, ...]:
    """Format frames as ``file#line function(...)``, innermost first.

    Frames from the harness core and from the ``warnings`` module are skipped.
    """
    lines = [
        f"{frame.filename}#{frame.lineno} {frame.name}(...)"
        for frame in frames
        if not _is_internal(frame.filename)
    ]
    lines.reverse()
    return tuple(lines)


def exception_label(exc: BaseException) -> str:
    """Classification label for an exception."""
    return f"EXCEPTION: {type(exc).__name__}"


def fault_from_exception(exc: BaseException, expected: bool = False) -> FaultRecord:
    """Convert an exception into a fault record.

    The location is taken from the innermost traceback frame.
    """
    frames = traceback.extract_tb(exc.__traceback__)
    file, line = (frames[-1].filename, frames[-1].lineno) if frames else (None, None)
    return FaultRecord(
        code=EXCEPTION_CODE,
        label=exception_label(exc),
        message=str(exc),
        file=file,
        line=line,
        expected=expected,
        backtrace=format_frames(frames),
    )


def exception_matches(exc: BaseException, expected: Union[type, str]) -> bool:
    """Check whether an exception matches a type or a type name."""
    if isinstance(expected, type):
        return isinstance(exc, expected)
    return any(expected in (klass.__name__, klass.__qualname__) for klass in type(exc).__mro__)


class FaultInterceptor:
    """Routes warnings into the current test for the duration of a run.

    Use as a context manager. On entry the current warnings state is saved,
    every warning is forced to be shown, and ``warnings.showwarning`` is
    replaced; on exit the previous state is restored.
    """

    def __init__(
        self,
        current_test: Callable[[], Optional[TestCase]],
        labels: Optional[dict[int, str]] = None,
        warning_codes: Optional[Iterable[int]] = None,
    ):
        """Initialize the interceptor.

        Args:
            current_test: Returns the test that is running, or None between tests
            labels: Classification table mapping fault codes to labels
            warning_codes: Codes that are recorded without aborting the test
        """
        self.current_test = current_test
        self.labels = labels if labels is not None else default_fault_labels()
        self.warning_codes = frozenset(
            int(code) for code in (warning_codes if warning_codes is not None else DEFAULT_WARNING_CODES)
        )
        self._catcher: Optional[warnings.catch_warnings] = None
        self._previous = None

    @property
    def installed(self) -> bool:
        """Check if the interceptor is currently installed."""
        return self._catcher is not None

    def __enter__(self) -> "FaultInterceptor":
        if self._catcher is not None:
            raise HarnessError("Fault interceptor is already installed")

        catcher = warnings.catch_warnings()
        catcher.__enter__()
        self._catcher = catcher
        self._previous = warnings.showwarning

        warnings.simplefilter("always")
        warnings.showwarning = self.handle
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        catcher, self._catcher = self._catcher, None
        self._previous = None
        if catcher is not None:
            catcher.__exit__(exc_type, exc, tb)
        return False

    def is_fatal(self, code: int) -> bool:
        """Check whether a fault code aborts the test body."""
        return int(code) not in self.warning_codes

    def handle(self, message, category, filename, lineno, file=None, line=None) -> None:
        """Record a warning on the current test; abort the test if it is fatal."""
        test = self.current_test()
        if test is None:
            # Not inside a test: leave it to whatever handler was installed before.
            if self._previous is not None:
                self._previous(message, category, filename, lineno, file, line)
            return

        code = code_for_category(category)
        text = str(message)
        test.faults.append(
            FaultRecord(
                code=int(code),
                label=self.labels.get(int(code), category.__name__),
                message=text,
                file=filename,
                line=lineno,
                backtrace=format_frames(traceback.extract_stack()),
            )
        )

        if self.is_fatal(code):
            raise HandledFault(int(code), text)
