"""Public package surface for ``lib_test_most``.

One import gives a test file the everyday assertion helpers, TAP output, and
the behavioural controls layered on top of them: die or bail on the first
failure, and deferred plans resolved with :func:`all_done`.

A test file ends with :func:`done`. The suite also finalizes from an
:mod:`atexit` hook, but that hook runs while the interpreter is already exiting
and cannot change its status; :func:`done` exits with the TAP status (the
failure count, or 255 for a plan mismatch).

>>> from lib_test_most import start_suite, ok, all_done, done   # doctest: +SKIP
>>> suite = start_suite("die", "defer_plan")                     # doctest: +SKIP
>>> ok(1 + 1 == 2, "addition")                                   # doctest: +SKIP
>>> all_done()                                                   # doctest: +SKIP
>>> done()                                                       # doctest: +SKIP
"""

from __future__ import annotations

from .assertions import eq_or_diff, is_, is_deeply, isnt, like, lives_ok, ok, throws_ok, unlike, warning_like
from .core import (
    Suite,
    all_done,
    bail_on_fail,
    current_suite,
    die_on_fail,
    done,
    enter_deferred_plan_mode,
    restore_fail,
    set_failure_action,
    start_suite,
    use_suite,
)
from .diagnostics import dump
from .domain.errors import HardBailout, InvalidModifier, NoActiveSuite, PlanError, SuiteAbort, TestMostError
from .domain.options import SuiteOptions
from .observability import bind_suite_name, get_logger
from .testing import i_should_fail


def explain(*values: object) -> None:
    """Emit *values* as notes on the bound suite, dumping non-string values."""

    current_suite().explain(*values)


def diag(*values: object) -> None:
    """Emit *values* as diagnostics on the bound suite."""

    current_suite().diag(*values)


def note(*values: object) -> None:
    """Emit *values* as notes on the bound suite."""

    current_suite().note(*values)


__all__ = [
    "Suite",
    "SuiteOptions",
    "start_suite",
    "current_suite",
    "use_suite",
    "set_failure_action",
    "die_on_fail",
    "bail_on_fail",
    "restore_fail",
    "enter_deferred_plan_mode",
    "all_done",
    "done",
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
    "explain",
    "diag",
    "note",
    "dump",
    "TestMostError",
    "SuiteAbort",
    "HardBailout",
    "PlanError",
    "NoActiveSuite",
    "InvalidModifier",
    "bind_suite_name",
    "get_logger",
    "i_should_fail",
]
