"""Testing diagnostics that keep failure scenarios observable and predictable.

Purpose
    Provide a small, intentionally failing suite that exercises the failure
    policies and the deferred plan from the CLI and the end-to-end tests without
    writing throwaway test files.

Contents
    - ``FAILURE_MESSAGE``: stable message used when forcing a failure.
    - ``i_should_fail``: raises ``RuntimeError`` so callers can assert on the
      propagated error details.
    - ``DEMO_OUTCOMES``: the outcomes the demonstration suite records.
    - ``run_demo_suite``: runs ``[pass, fail, pass]`` under a given suite.

System Integration
    Used by ``lib_test_most demo`` / ``lib_test_most fail`` and by the CLI
    end-to-end tests.
"""

from __future__ import annotations

from typing import Final

from .core import Suite

FAILURE_MESSAGE: Final[str] = "i should fail"
"""Stable message emitted when ``i_should_fail`` triggers a failure sequence."""

DEMO_OUTCOMES: Final[tuple[tuple[bool, str], ...]] = (
    (True, "first test passes"),
    (False, "second test fails"),
    (True, "third test passes if the suite is still running"),
)


def i_should_fail() -> None:
    """Raise a deterministic :class:`RuntimeError` for failure-path testing.

    Examples
    --------
    >>> i_should_fail()
    Traceback (most recent call last):
    ...
    RuntimeError: i should fail
    """

    raise RuntimeError(FAILURE_MESSAGE)


def run_demo_suite(suite: Suite) -> int:
    """Record :data:`DEMO_OUTCOMES` on *suite*, resolve its plan, and finalize.

    Returns the suite exit status. Failure policies installed on *suite* raise
    through this function exactly as they would in a real test file; the suite
    is finalized either way.
    """

    try:
        for passed, name in DEMO_OUTCOMES:
            suite.record(passed, name)
        suite.all_done()
    finally:
        status = suite.finalize()
    return status
