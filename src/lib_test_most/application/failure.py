"""Failure reaction policy.

Purpose
-------
Turn "an assertion failed" into an externally visible reaction, exactly once per
failing outcome, without changing what an ordinary assertion returns.

Contents
--------
* :class:`FailureActionRegistry` – single slot holding the active action.
* :class:`AssertionInterceptor` – wraps the recording primitive and fires the
  action for the *previous* failure before recording the next outcome.
* :class:`DieOnFail` / :class:`BailOnFail` – the two built-in actions.

System Role
-----------
The reaction is deferred by one assertion: the pending flag is checked when the
next assertion is recorded, and once more when the suite finalizes. Arguments of
that next assertion are therefore evaluated before the reaction fires.
"""

from __future__ import annotations

import inspect
from typing import Callable

from ..domain.errors import HardBailout, SuiteAbort
from ..observability import log_debug, log_error, log_info, make_event, outcome_event
from .ports import ResultLog

RecordFn = Callable[[bool, str], bool]
Invoker = Callable[[ResultLog | None], object]


class FailureActionRegistry:
    """Hold at most one failure action; registering replaces, never stacks.

    Examples
    --------
    >>> registry = FailureActionRegistry()
    >>> registry.current_action() is None
    True
    >>> action = lambda: None
    >>> registry.set_action(action)
    >>> registry.current_action() is action
    True
    >>> registry.restore()
    >>> registry.current_action() is None
    True
    """

    def __init__(self) -> None:
        self._action: Callable[..., object] | None = None
        self._invoker: Invoker | None = None

    def set_action(self, action: Callable[..., object]) -> None:
        """Install *action*, replacing whatever was registered before."""

        self._action = action
        self._invoker = _adapt(action)
        log_debug("failure_action_set", action=_describe(action))

    def current_action(self) -> Callable[..., object] | None:
        """Return the action exactly as registered, or ``None``."""

        return self._action

    def invoker(self) -> Invoker | None:
        """Return the action adapted to the one-argument calling convention."""

        return self._invoker

    def restore(self) -> None:
        """Clear the slot, as if :meth:`set_action` had never been called."""

        if self._action is not None:
            log_debug("failure_action_restored", action=_describe(self._action))
        self._action = None
        self._invoker = None


class AssertionInterceptor:
    """Wrap ``record`` so failure actions fire before the next outcome is recorded.

    Parameters
    ----------
    record:
        Underlying recording primitive, usually ``ResultLog.record``.
    registry:
        Source of the currently active action.
    log:
        Result log handed to actions fired during normal flow.

    Attributes
    ----------
    pending_failure:
        ``True`` while the most recent outcome failed and its action has not
        fired yet.
    """

    def __init__(self, record: RecordFn, registry: FailureActionRegistry, log: ResultLog) -> None:
        self._record = record
        self._registry = registry
        self._log = log
        self.pending_failure = False

    def __call__(self, passed: bool, name: str = "") -> bool:
        """Fire any pending action, then record this outcome and return it."""

        self.fire_pending(self._log)
        outcome = bool(self._record(passed, name))
        self.pending_failure = not outcome
        log_debug("outcome_recorded", **outcome_event(self._log.current_count, outcome, name))
        return outcome

    def fire_pending(self, log: ResultLog | None) -> bool:
        """Run the registered action if the previous outcome failed.

        The flag is cleared before the action runs, so an action that raises is
        never fired twice for the same failure. Exceptions propagate untouched.
        Returns whether an action was invoked.
        """

        pending = self.pending_failure
        self.pending_failure = False
        if not pending:
            return False
        invoke = self._registry.invoker()
        if invoke is None:
            return False
        failed = log.current_count if log is not None else None
        log_info("failure_action_fired", **make_event("record", failed, {"log_available": log is not None}))
        invoke(log)
        return True


class DieOnFail:
    """Raise :class:`SuiteAbort` naming the assertion that failed."""

    def __call__(self, log: ResultLog | None) -> None:
        failed = log.current_count if log is not None else None
        raise SuiteAbort(_stop_message("Stopping suite", failed), failed_number=failed)


class BailOnFail:
    """Emit ``Bail out!`` and end the process via :class:`HardBailout`.

    ``fallback`` receives the bail-out line when the action fires without a
    log, which happens for a trailing failure seen during finalization.
    """

    def __init__(self, fallback: ResultLog | None = None) -> None:
        self._fallback = fallback

    def __call__(self, log: ResultLog | None) -> None:
        failed = log.current_count if log is not None else None
        reason = _stop_message("Bailing out", failed)
        target = log if log is not None else self._fallback
        log_error("bail_out", **make_event("record", failed, {"reason": reason}))
        if target is not None:
            target.bail_out(reason)
        raise HardBailout(reason)


def _stop_message(verb: str, failed: int | None) -> str:
    """Explain that the reaction belongs to an earlier assertion.

    Examples
    --------
    >>> _stop_message("Stopping suite", 2)
    'Stopping suite: test 2 failed (the stop happens when the next test starts)'
    >>> _stop_message("Bailing out", None)
    'Bailing out: the last test failed'
    """

    if failed is None:
        return f"{verb}: the last test failed"
    return f"{verb}: test {failed} failed (the stop happens when the next test starts)"


def _adapt(action: Callable[..., object]) -> Invoker:
    """Return a one-argument invoker for zero- or one-argument *action*."""

    try:
        signature = inspect.signature(action)
    except (TypeError, ValueError):
        return action
    try:
        signature.bind(None)
    except TypeError:
        return lambda _log: action()
    return action


def _describe(action: Callable[..., object]) -> str:
    """Return a short human-readable name for logging."""

    return getattr(action, "__qualname__", None) or type(action).__name__
