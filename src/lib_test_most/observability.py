"""Structured logging helpers distilled into tiny orchestration phrases.

Purpose
    Keep every emission of logging data predictable and contextual without
    forcing test suites to adopt a specific logging backend. TAP output is the
    user-facing channel; these logs are for whoever debugs the policies.

Contents
    - ``SUITE_NAME``: context variable storing the active suite name.
    - ``get_logger``: returns the shared package logger (quiet by default).
    - ``bind_suite_name``: binds or clears the active suite name.
    - ``suite_scope``: binds a suite name for one ``with`` block and restores
      the previous one afterwards.
    - ``log_debug`` / ``log_info`` / ``log_error``: emit structured entries via a
      single private emitter.
    - ``make_event``: convenience builder for structured event payloads.
    - ``outcome_event``: payload describing one recorded assertion.

System Integration
    Used by the failure policies, the plan controller, and the composition root
    so all diagnostics carry the same suite metadata.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Final, Iterator, Mapping

SUITE_NAME: ContextVar[str | None] = ContextVar("lib_test_most_suite_name", default=None)
"""Name of the suite whose events are currently being logged."""

_LOGGER: Final[logging.Logger] = logging.getLogger("lib_test_most")
_LOGGER.addHandler(logging.NullHandler())


def get_logger() -> logging.Logger:
    """Expose the package logger so applications may attach handlers."""

    return _LOGGER


def bind_suite_name(name: str | None) -> None:
    """Bind or clear the active suite name.

    Examples
    --------
    >>> bind_suite_name('t/basic.py')
    >>> SUITE_NAME.get()
    't/basic.py'
    >>> bind_suite_name(None)
    >>> SUITE_NAME.get() is None
    True
    """

    SUITE_NAME.set(name)


@contextmanager
def suite_scope(name: str | None) -> Iterator[None]:
    """Tag every event inside the block with *name*, then restore the outer name.

    Why
        A process may switch between suites (``use_suite``); events logged while
        one is bound must not leak its name into the next.

    Examples
    --------
    >>> bind_suite_name('outer')
    >>> with suite_scope('inner'):
    ...     SUITE_NAME.get()
    'inner'
    >>> SUITE_NAME.get()
    'outer'
    >>> bind_suite_name(None)
    """

    token = SUITE_NAME.set(name)
    try:
        yield
    finally:
        SUITE_NAME.reset(token)


def log_debug(message: str, **fields: Any) -> None:
    """Emit a structured debug log entry that includes the suite context."""

    _emit(logging.DEBUG, message, fields)


def log_info(message: str, **fields: Any) -> None:
    """Emit a structured info log entry that includes the suite context."""

    _emit(logging.INFO, message, fields)


def log_error(message: str, **fields: Any) -> None:
    """Emit a structured error log entry that includes the suite context."""

    _emit(logging.ERROR, message, fields)


def make_event(
    phase: str,
    assertion: int | None,
    payload: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Build a structured logging payload for suite lifecycle events.

    Inputs
        phase: Lifecycle phase (``"record"``, ``"plan"``, ``"finalize"``...).
        assertion: Ordinal of the assertion the event relates to, if any.
        payload: Optional mapping with extra diagnostic detail.

    Examples
    --------
    >>> make_event('plan', 3, {'expected': 4})
    {'phase': 'plan', 'assertion': 3, 'expected': 4}
    """

    event: dict[str, Any] = {"phase": phase, "assertion": assertion}
    if payload:
        event |= dict(payload)
    return event


def outcome_event(number: int, passed: bool, name: str = "") -> dict[str, Any]:
    """Describe the recorded assertion *number* and its outcome.

    Examples
    --------
    >>> outcome_event(2, False, 'parses header')
    {'phase': 'record', 'assertion': 2, 'passed': False, 'name': 'parses header'}
    """

    return make_event("record", number, {"passed": passed, "name": name})


def _emit(level: int, message: str, fields: Mapping[str, Any]) -> None:
    """Send a log entry through the shared logger with contextual metadata."""

    _LOGGER.log(level, message, extra={"context": _with_suite(fields)})


def _with_suite(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Attach the current suite name to the provided structured fields."""

    context = {"suite": SUITE_NAME.get()}
    context.update(fields)
    return context
