"""Application-layer ports describing collaborator responsibilities.

Purpose
-------
Define the structural contracts the failure policies and the plan controller
rely on, so they never depend on a concrete harness.

Contents
--------
* :class:`ResultLog` – records outcomes and owns the plan counters.
* :class:`FailureAction` – callable fired when the previous outcome failed.
* :data:`ExitHookRegistrar` – registers code to run at process end.

System Role
-----------
:class:`~lib_test_most.adapters.result_log.tap.TapResultLog` is the default
implementation of :class:`ResultLog`; tests substitute their own.
"""

from __future__ import annotations

from typing import Callable, Protocol, runtime_checkable

ExitHookRegistrar = Callable[[Callable[[], object]], object]
"""Signature of :func:`atexit.register` and compatible registrars."""


@runtime_checkable
class ResultLog(Protocol):
    """Harness-side record of assertion outcomes and the plan.

    Why
    ----
    The interceptor only needs the recording primitive and a handful of
    counters; keeping them behind a protocol lets suites plug in any harness.

    Notes
    -----
    ``set_expected_count(None)`` declares a plan whose number is not yet known.
    ``has_expected_count()`` is true from that moment on.
    """

    @property
    def current_count(self) -> int:
        """Number of outcomes recorded so far."""

    @property
    def last_outcome(self) -> bool | None:
        """Most recent outcome or ``None`` before the first one."""

    @property
    def expected_count(self) -> int | None:
        """Planned number of outcomes, when known."""

    def record(self, passed: bool, name: str = "") -> bool:
        """Record one outcome and return ``passed`` unchanged."""

    def set_expected_count(self, count: int | None) -> None:
        """Fix the plan to *count* (``None`` declares a pending plan)."""

    def has_expected_count(self) -> bool:
        """Return whether a plan (possibly pending) has been declared."""

    def plan(self, *args: object, tests: int | None = None) -> None:
        """Declare the plan from modifier-style arguments."""

    def bail_out(self, reason: str) -> None:
        """Emit the out-of-band signal that aborts the whole run."""

    def diag(self, *lines: str) -> None:
        """Emit diagnostic lines visible in normal runs."""

    def note(self, *lines: str) -> None:
        """Emit informational lines visible in verbose runs."""

    def finalize(self) -> int:
        """Tally the run, report plan problems, and return the exit status."""


class FailureAction(Protocol):
    """Reaction invoked when the previous outcome was a failure.

    Registries also accept zero-argument callables; they are adapted on
    registration. ``log`` is ``None`` when the action fires during
    finalization for a trailing failure.
    """

    def __call__(self, log: ResultLog | None) -> object:
        """React to a failure; may return, raise, or end the process."""
