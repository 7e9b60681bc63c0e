"""Everyday assertion helpers gathered behind one import.

Each helper computes a pass/fail outcome, records it through a suite (the bound
one unless ``suite=`` is given), adds a diagnostic on failure, and returns the
outcome. None of them raise on failure; reacting to failures is the job of the
suite's failure policy.
"""

from __future__ import annotations

import difflib
import re
import warnings
from typing import Any, Callable, Pattern

from .core import Suite, current_suite
from .diagnostics import dump


def ok(value: Any, name: str = "", *, suite: Suite | None = None) -> bool:
    """Pass when *value* is truthy."""

    return _resolve(suite).record(bool(value), name)


def is_(got: Any, expected: Any, name: str = "", *, suite: Suite | None = None) -> bool:
    """Pass when ``got == expected``."""

    target = _resolve(suite)
    passed = target.record(got == expected, name)
    if not passed:
        target.log.diag(f"         got: {got!r}", f"    expected: {expected!r}")
    return passed


def isnt(got: Any, unexpected: Any, name: str = "", *, suite: Suite | None = None) -> bool:
    """Pass when ``got != unexpected``."""

    target = _resolve(suite)
    passed = target.record(got != unexpected, name)
    if not passed:
        target.log.diag(f"         got: {got!r}", "    expected: anything else")
    return passed


def like(got: str, pattern: str | Pattern[str], name: str = "", *, suite: Suite | None = None) -> bool:
    """Pass when *pattern* matches somewhere in *got*."""

    return _match(got, pattern, name, suite, wanted=True)


def unlike(got: str, pattern: str | Pattern[str], name: str = "", *, suite: Suite | None = None) -> bool:
    """Pass when *pattern* matches nowhere in *got*."""

    return _match(got, pattern, name, suite, wanted=False)


def is_deeply(got: Any, expected: Any, name: str = "", *, suite: Suite | None = None) -> bool:
    """Pass when both structures are equal; show a unified diff of their dumps otherwise."""

    target = _resolve(suite)
    passed = target.record(got == expected, name)
    if not passed:
        target.log.diag(*_diff(got, expected))
    return passed


eq_or_diff = is_deeply


def throws_ok(
    func: Callable[[], object],
    exc_type: type[BaseException],
    name: str = "",
    *,
    suite: Suite | None = None,
) -> bool:
    """Pass when calling *func* raises *exc_type* (or a subclass)."""

    target = _resolve(suite)
    try:
        func()
    except exc_type:
        return target.record(True, name)
    except Exception as exc:  # noqa: BLE001 - the wrong exception is a test failure
        passed = target.record(False, name)
        target.log.diag(f"expecting: {exc_type.__name__}", f"found: {type(exc).__name__}: {exc}")
        return passed
    passed = target.record(False, name)
    target.log.diag(f"expecting: {exc_type.__name__}", "found: normal exit")
    return passed


def lives_ok(func: Callable[[], object], name: str = "", *, suite: Suite | None = None) -> bool:
    """Pass when calling *func* does not raise."""

    target = _resolve(suite)
    try:
        func()
    except Exception as exc:  # noqa: BLE001 - an exception is a test failure
        passed = target.record(False, name)
        target.log.diag(f"died: {type(exc).__name__}: {exc}")
        return passed
    return target.record(True, name)


def warning_like(
    func: Callable[[], object],
    pattern: str | Pattern[str],
    name: str = "",
    *,
    suite: Suite | None = None,
) -> bool:
    """Pass when *func* emits at least one warning whose message matches *pattern*."""

    target = _resolve(suite)
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        func()
    messages = [str(item.message) for item in caught]
    passed = target.record(any(re.search(pattern, message) for message in messages), name)
    if not passed:
        found = ", ".join(repr(message) for message in messages) or "no warnings"
        target.log.diag(f"expecting a warning like {_pattern_text(pattern)!r}", f"found: {found}")
    return passed


def _match(got: str, pattern: str | Pattern[str], name: str, suite: Suite | None, *, wanted: bool) -> bool:
    target = _resolve(suite)
    found = re.search(pattern, got) is not None
    passed = target.record(found is wanted, name)
    if not passed:
        verb = "matches" if wanted else "doesn't match"
        target.log.diag(f"{got!r}", f"    {verb} '{_pattern_text(pattern)}'")
    return passed


def _diff(got: Any, expected: Any) -> list[str]:
    """Return unified diff lines between the dumps of *got* and *expected*."""

    return list(
        difflib.unified_diff(
            dump(got).splitlines(),
            dump(expected).splitlines(),
            fromfile="got",
            tofile="expected",
            lineterm="",
        )
    )


def _pattern_text(pattern: str | Pattern[str]) -> str:
    return pattern if isinstance(pattern, str) else pattern.pattern


def _resolve(suite: Suite | None) -> Suite:
    return suite if suite is not None else current_suite()


__all__ = [
    "ok",
    "is_",
    "isnt",
    "like",
    "unlike",
    "is_deeply",
    "eq_or_diff",
    "throws_ok",
    "lives_ok",
    "warning_like",
]
