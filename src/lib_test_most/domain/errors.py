"""Domain-level exception hierarchy.

Purpose
-------
Expose the stable error taxonomy shared by the failure policies, the plan
controller, the result log adapter, and consuming test suites. The hierarchy
lives in the domain layer so outer layers may depend on it without creating
cycles.

Contents
--------
* :class:`TestMostError` – umbrella base class for every library error.
* :class:`SuiteAbort` – raised by the die-on-fail policy to stop a suite.
* :class:`HardBailout` – raised by the bail-on-fail policy to end the process.
* :class:`PlanError` – invalid plan declarations.
* :class:`NoActiveSuite` – module-level helpers used without a bound suite.
* :class:`InvalidModifier` – unusable entries in a ``start_suite`` modifier list.

System Role
-----------
A failing assertion is *recorded*, never raised. Only the failure policies turn
a recorded failure into an exception, which is why :class:`SuiteAbort` is kept
apart from :class:`AssertionError`: harness code can tell "a test failed" from
"the suite chose to stop".
"""

from __future__ import annotations

from typing import Final

BAIL_OUT_STATUS: Final[int] = 255
"""Process exit status used when a suite bails out."""


class TestMostError(Exception):
    """Base type for all exceptions emitted by ``lib_test_most``.

    Why
    ----
    Provide a single catch-all type for consumers that do not need fine-grained
    handling.
    """

    __test__ = False


class SuiteAbort(TestMostError):
    """Raised by die-on-fail when a *previous* assertion failed.

    Why
    ----
    The policy reacts one assertion late, so the traceback points at the call
    after the failing one. The message and :attr:`failed_number` name the
    assertion that really failed.

    Attributes
    ----------
    failed_number:
        Ordinal of the failing assertion, or ``None`` when the log was not
        available (trailing failure seen during finalization).
    """

    def __init__(self, message: str, *, failed_number: int | None = None) -> None:
        super().__init__(message)
        self.failed_number = failed_number


class HardBailout(SystemExit):
    """Out-of-band termination raised by bail-on-fail.

    Derives from :class:`SystemExit` so ``except Exception`` blocks in suite
    code cannot swallow it; the interpreter exits with :data:`BAIL_OUT_STATUS`.
    """

    def __init__(self, reason: str) -> None:
        super().__init__(BAIL_OUT_STATUS)
        self.reason = reason

    def __str__(self) -> str:
        return self.reason


class PlanError(TestMostError):
    """Signals an invalid plan request (negative count, planning twice, unknown argument)."""


class NoActiveSuite(TestMostError):
    """Raised when a module-level helper runs before :func:`start_suite`."""


class InvalidModifier(TestMostError):
    """Raised when a modifier list contains an entry that is neither a flag nor a plan argument."""
