"""Composition root for ``lib_test_most``.

Purpose
-------
Wire the result log, the failure policies, and the deferred plan controller into
one :class:`Suite` object, and expose the module-level helpers suite authors
call.

Contents
--------
* :class:`Suite` – per-suite state: result log, failure action registry,
  assertion interceptor, deferred plan controller, ordered shutdown.
* :func:`start_suite` – resolves modifiers and environment switches, builds and
  binds a :class:`Suite`, and registers its shutdown with :mod:`atexit`.
* :func:`current_suite` / :func:`use_suite` – access to the bound suite.
* :func:`set_failure_action`, :func:`die_on_fail`, :func:`bail_on_fail`,
  :func:`restore_fail`, :func:`enter_deferred_plan_mode`, :func:`all_done`,
  :func:`done` – convenience wrappers over the bound suite.

System Role
-----------
State is owned by each :class:`Suite` rather than by module globals. The bound
suite lives in a context variable, so a test process may build several suites
as long as it binds one at a time.
"""

from __future__ import annotations

import atexit
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Callable, Iterator

from .adapters.env.default import DefaultEnvLoader
from .adapters.result_log.tap import TapResultLog
from .application.failure import AssertionInterceptor, BailOnFail, DieOnFail, FailureActionRegistry
from .application.modifiers import parse_modifiers
from .application.plan import DeferredPlanController
from .application.ports import ExitHookRegistrar, ResultLog
from .diagnostics import explain as _explain
from .domain.errors import HardBailout, NoActiveSuite, PlanError
from .domain.options import DEFAULT_OPTIONS, SuiteOptions
from .observability import bind_suite_name, log_debug, log_info, make_event, suite_scope

_ACTIVE_SUITE: ContextVar[Suite | None] = ContextVar("lib_test_most_active_suite", default=None)


class Suite:
    """One running test suite and the policies layered on its result log.

    Parameters
    ----------
    log:
        Result log to record into. Defaults to a :class:`TapResultLog` on
        stdout/stderr.
    options:
        Switches applied on construction (failure policy, deferred plan).
    name:
        Label attached to structured log events.

    Examples
    --------
    >>> import io
    >>> from lib_test_most.adapters.result_log.tap import TapResultLog
    >>> log = TapResultLog(stream=io.StringIO(), diag_stream=io.StringIO())
    >>> suite = Suite(log, options=SuiteOptions(defer_plan=True))
    >>> suite.ok(True, 'first')
    True
    >>> suite.all_done()
    >>> suite.finalize()
    0
    """

    def __init__(
        self,
        log: ResultLog | None = None,
        *,
        options: SuiteOptions = DEFAULT_OPTIONS,
        name: str | None = None,
    ) -> None:
        self.log: ResultLog = log if log is not None else TapResultLog()
        self.options = options
        self.name = name
        self.registry = FailureActionRegistry()
        self.interceptor = AssertionInterceptor(self.log.record, self.registry, self.log)
        self.plan = DeferredPlanController(self.log)
        self._status: int | None = None
        self.bailed_out = False
        self._apply(options)

    def _apply(self, options: SuiteOptions) -> None:
        policy = options.failure_policy
        if policy == "bail":
            self.bail_on_fail()
        elif policy == "die":
            self.die_on_fail()
        if options.defer_plan:
            self.enter_deferred_plan_mode()

    def record(self, passed: bool, name: str = "") -> bool:
        """Record an outcome through the interceptor and return it."""

        try:
            return self.interceptor(passed, name)
        except HardBailout:
            self.bailed_out = True
            raise

    def ok(self, value: Any, name: str = "") -> bool:
        """Record ``bool(value)`` as an outcome."""

        return self.record(bool(value), name)

    def set_failure_action(self, action: Callable[..., object]) -> None:
        """Install a custom reaction to failures, replacing any previous one."""

        self.registry.set_action(action)

    def die_on_fail(self) -> None:
        """Raise :class:`~lib_test_most.domain.errors.SuiteAbort` after a failure."""

        self.registry.set_action(DieOnFail())

    def bail_on_fail(self) -> None:
        """Bail out of the whole run after a failure."""

        self.registry.set_action(BailOnFail(fallback=self.log))

    def restore_fail(self) -> None:
        """Return to recording failures without reacting to them."""

        self.registry.restore()

    def enter_deferred_plan_mode(self) -> None:
        """Postpone the expected count until :meth:`all_done`."""

        self.plan.enter_deferred_mode()

    def all_done(self, count: int | None = None) -> None:
        """Resolve a deferred plan to *count*, or to the number of tests run."""

        if not self.plan.deferred:
            log_debug("all_done_ignored", **make_event("plan", self.log.current_count))
        self.plan.finalize(count)

    def diag(self, *values: Any) -> None:
        """Emit diagnostics, dumping non-string values."""

        self.log.diag(_explain(*values))

    def note(self, *values: Any) -> None:
        """Emit notes, dumping non-string values."""

        self.log.note(_explain(*values))

    explain = note

    @property
    def finalized(self) -> bool:
        return self._status is not None

    def finalize(self) -> int:
        """Run the shutdown sequence once and return the exit status.

        Order: fire the action for a trailing failure (with ``log=None``), force
        an unresolved deferred plan, then let the result log tally. The last two
        steps run even when the action raises; the exception then propagates.
        After a bail-out the plan is left alone and the tally prints nothing.
        """

        if self._status is not None:
            return self._status
        try:
            self.interceptor.fire_pending(None)
        except HardBailout:
            self.bailed_out = True
            raise
        finally:
            if not self.bailed_out:
                self.plan.finalize_at_exit()
            self._status = self.log.finalize()
            log_info(
                "suite_finalized",
                **make_event("finalize", self.log.current_count, {"status": self._status}),
            )
        return self._status

    def done(self) -> None:
        """Finalize and end the process with the suite's exit status.

        The :mod:`atexit` hook cannot change the status of a process that is
        already exiting, so a test file that wants failures reflected in its
        exit code ends with ``done()``.
        """

        raise SystemExit(self.finalize())


def start_suite(
    *modifiers: str,
    tests: int | None = None,
    log: ResultLog | None = None,
    options: SuiteOptions | None = None,
    environ: dict[str, str] | None = None,
    name: str | None = None,
    register_exit_hook: bool = True,
    exit_hooks: ExitHookRegistrar = atexit.register,
) -> Suite:
    """Build a :class:`Suite`, bind it, and schedule its shutdown.

    Parameters
    ----------
    modifiers:
        ``"die"``, ``"bail"`` and ``"defer_plan"`` select behaviour; anything
        else (``"no_plan"``) is forwarded to :meth:`ResultLog.plan`.
    tests:
        Fixed plan forwarded to :meth:`ResultLog.plan`.
    log:
        Result log to use; defaults to a :class:`TapResultLog`.
    options:
        Extra switches merged with the modifiers and the environment.
    environ:
        Mapping consulted for ``DIE_ON_FAIL`` / ``BAIL_ON_FAIL``; defaults to
        :data:`os.environ`. Read once, here.
    name:
        Suite label for structured logs.
    register_exit_hook:
        Register :meth:`Suite.finalize` with *exit_hooks* (default
        :func:`atexit.register`).

    Raises
    ------
    PlanError
        When ``defer_plan`` is combined with another plan.
    InvalidModifier
        When a modifier is not a string.
    """

    requested, plan_args = parse_modifiers(modifiers)
    resolved = DefaultEnvLoader(environ=environ).load().merge(requested)
    if options is not None:
        resolved = resolved.merge(options)
    if resolved.defer_plan and (plan_args or tests is not None):
        raise PlanError("defer_plan cannot be combined with another plan")

    result_log = log if log is not None else TapResultLog()
    result_log.plan(*plan_args, tests=tests)
    bind_suite_name(name)
    suite = Suite(result_log, options=resolved, name=name)
    _ACTIVE_SUITE.set(suite)
    if register_exit_hook:
        exit_hooks(suite.finalize)
    log_info(
        "suite_started",
        **make_event("start", None, {"policy": resolved.failure_policy, "defer_plan": resolved.defer_plan}),
    )
    return suite


def current_suite() -> Suite:
    """Return the bound suite or raise :class:`NoActiveSuite`."""

    suite = _ACTIVE_SUITE.get()
    if suite is None:
        raise NoActiveSuite("no suite is active; call start_suite() first")
    return suite


@contextmanager
def use_suite(suite: Suite) -> Iterator[Suite]:
    """Bind *suite*, and its name for structured logs, for the ``with`` block."""

    token = _ACTIVE_SUITE.set(suite)
    try:
        with suite_scope(suite.name):
            yield suite
    finally:
        _ACTIVE_SUITE.reset(token)


def set_failure_action(action: Callable[..., object]) -> None:
    """Install a custom failure reaction on the bound suite."""

    current_suite().set_failure_action(action)


def die_on_fail() -> None:
    """Make the bound suite raise ``SuiteAbort`` after the next failure."""

    current_suite().die_on_fail()


def bail_on_fail() -> None:
    """Make the bound suite bail out after the next failure."""

    current_suite().bail_on_fail()


def restore_fail() -> None:
    """Remove any failure reaction from the bound suite."""

    current_suite().restore_fail()


def enter_deferred_plan_mode() -> None:
    """Put the bound suite into deferred-plan mode."""

    current_suite().enter_deferred_plan_mode()


def all_done(count: int | None = None) -> None:
    """Resolve the bound suite's deferred plan."""

    current_suite().all_done(count)


def done() -> None:
    """Finalize the bound suite and exit with its status."""

    current_suite().done()


__all__ = [
    "Suite",
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
]
