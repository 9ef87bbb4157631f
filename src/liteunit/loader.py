"""Helpers for loading test suites from files and modules."""

import importlib
import importlib.util
import inspect
import sys
from pathlib import Path
from types import ModuleType

from liteunit.core.errors import SuiteLoadError
from liteunit.core.suite import TestSuite


def _load_source(path: Path) -> ModuleType:
    """Import a Python file as a module."""
    path = path.expanduser().resolve()
    if not path.exists():
        raise SuiteLoadError(f"Suite file not found: {path}")
    module_name = f"liteunit_suite_{path.stem}_{hash(str(path)) & 0xFFFF:x}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise SuiteLoadError(f"Unable to load module from {path}")
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as exc:
        sys.modules.pop(module_name, None)
        raise SuiteLoadError(f"Error while importing {path}: {type(exc).__name__}: {exc}") from exc
    return module


def split_target(target: str) -> tuple[str, str]:
    """Split ``path.py::Class`` or ``package.module:Class`` into its parts."""
    if "::" in target:
        location, _, class_name = target.partition("::")
    elif ":" in target and not target.endswith(".py") and not Path(target).exists():
        location, _, class_name = target.rpartition(":")
    else:
        location, class_name = target, ""
    return location, class_name


def suites_in_module(module: ModuleType) -> list[type[TestSuite]]:
    """Get the concrete suite classes defined in a module, in definition order."""
    return [
        member
        for member in vars(module).values()
        if inspect.isclass(member)
        and issubclass(member, TestSuite)
        and member is not TestSuite
        and member.__module__ == module.__name__
        and not inspect.isabstract(member)
    ]


def load_suites(target: str) -> list[type[TestSuite]]:
    """Load suite classes from a file path or module name.

    Supports ``path/to/file.py``, ``path/to/file.py::ClassName``,
    ``package.module`` and ``package.module:ClassName``.
    """
    if not target:
        raise SuiteLoadError("Empty suite target provided")

    location, class_name = split_target(target)
    if location.endswith(".py") or Path(location).is_file():
        module = _load_source(Path(location))
    else:
        try:
            module = importlib.import_module(location)
        except Exception as exc:
            raise SuiteLoadError(f"Unable to import module '{location}': {type(exc).__name__}: {exc}") from exc

    if class_name:
        suite_class = getattr(module, class_name, None)
        if not (inspect.isclass(suite_class) and issubclass(suite_class, TestSuite)):
            raise SuiteLoadError(f"'{class_name}' in {location} is not a TestSuite subclass")
        return [suite_class]

    suites = suites_in_module(module)
    if not suites:
        raise SuiteLoadError(f"No test suites found in {location}")
    return suites
