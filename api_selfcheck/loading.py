"""Loading of suites from import paths and entry points."""

import importlib
from importlib.metadata import entry_points

from api_selfcheck.suite import Suite

ENTRY_POINT_GROUP = "api_selfcheck.suites"


class SuiteNotFoundError(Exception):
    """Raised when a suite cannot be located."""


def load_suite(target: str) -> Suite:
    """Load a suite by import path or entry point name.

    Args:
        target: Either "package.module:attribute", where the attribute is a
                Suite or a zero-argument callable returning one, or the name
                of an entry point in the "api_selfcheck.suites" group

    Returns:
        The suite instance

    Raises:
        SuiteNotFoundError: If the target cannot be resolved to a suite

    """
    if ":" in target:
        obj = _import_attribute(target)
    else:
        obj = _load_entry_point(target)

    if callable(obj) and not isinstance(obj, Suite):
        obj = obj()

    if not isinstance(obj, Suite):
        raise SuiteNotFoundError(
            f"'{target}' resolved to {type(obj).__name__}, expected Suite"
        )
    return obj


def _import_attribute(target: str) -> object:
    module_name, _, attribute = target.partition(":")
    try:
        module = importlib.import_module(module_name)
    except ModuleNotFoundError as exc:
        raise SuiteNotFoundError(f"Cannot import module '{module_name}'") from exc

    try:
        return getattr(module, attribute)
    except AttributeError as exc:
        raise SuiteNotFoundError(
            f"Module '{module_name}' has no attribute '{attribute}'"
        ) from exc


def _load_entry_point(name: str) -> object:
    entries = entry_points(group=ENTRY_POINT_GROUP)

    for entry in entries:
        if entry.name == name:
            return entry.load()

    available = [e.name for e in entries]
    raise SuiteNotFoundError(
        f"Suite '{name}' not found. Available suites: {available}"
    )
