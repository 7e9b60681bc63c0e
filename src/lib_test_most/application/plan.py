"""Deferred plan accounting.

Purpose
-------
Let a suite fix its expected test count *after* running, while guaranteeing
that a suite which never confirms completion (for example because it exited
early) is reported as a plan mismatch instead of a silent pass.

Contents
--------
* :class:`DeferredPlanController` – ``enter_deferred_mode`` / ``finalize`` /
  ``finalize_at_exit`` over a :class:`~lib_test_most.domain.plan.DeferredPlanState`.
"""

from __future__ import annotations

from ..domain.errors import PlanError
from ..domain.plan import DeferredPlanState
from ..observability import log_debug, log_info, make_event
from .ports import ResultLog


class DeferredPlanController:
    """Resolve a postponed plan explicitly or force a mismatch at exit.

    Examples
    --------
    >>> from lib_test_most.adapters.result_log.tap import TapResultLog
    >>> import io
    >>> log = TapResultLog(stream=io.StringIO(), diag_stream=io.StringIO())
    >>> controller = DeferredPlanController(log)
    >>> controller.enter_deferred_mode()
    >>> _ = log.record(True)
    >>> controller.finalize()
    >>> log.expected_count
    1
    """

    def __init__(self, log: ResultLog) -> None:
        self._log = log
        self.state = DeferredPlanState()

    @property
    def deferred(self) -> bool:
        """Return whether deferred-plan mode is active."""

        return self.state.deferred

    def enter_deferred_mode(self) -> None:
        """Declare a pending plan so the harness does not report a missing one.

        Raises
        ------
        PlanError
            When the log already carries a plan (``tests=N`` or ``"no_plan"``);
            the forced ``current + 1`` count would otherwise be overridden.
        """

        if self.state.deferred:
            return
        if self._log.has_expected_count():
            raise PlanError("defer_plan cannot be combined with another plan")
        self._log.set_expected_count(None)
        self.state.deferred = True
        log_debug("plan_deferred", **make_event("plan", self._log.current_count))

    def finalize(self, count: int | None = None) -> None:
        """Fix the expected count to *count*, or to the current count when omitted.

        A no-op outside deferred mode. Calling again re-finalizes with the new
        value.
        """

        if not self.state.deferred:
            return
        expected = self._log.current_count if count is None else count
        if expected < 0:
            raise PlanError(f"expected test count must not be negative, got {expected}")
        self._log.set_expected_count(expected)
        self.state.resolved = True
        self.state.expected = expected
        log_info("plan_resolved", **make_event("plan", self._log.current_count, {"expected": expected}))

    def finalize_at_exit(self) -> None:
        """Force ``current + 1`` when deferred mode was entered but never resolved."""

        if not self.state.deferred or self.state.resolved:
            return
        expected = self._log.current_count + 1
        self._log.set_expected_count(expected)
        self.state.expected = expected
        log_info("plan_forced", **make_event("finalize", self._log.current_count, {"expected": expected}))
