"""TAP result log adapter.

Purpose
-------
Provide the harness side the failure policies and the plan controller work
against: an ordered record of outcomes, the plan counters, and Test Anything
Protocol output that ``prove`` style consumers understand.

Key behaviours
--------------
* ``ok N - name`` / ``not ok N - name`` lines on the output stream, failure
  diagnostics on the diagnostic stream.
* A plan can be fixed up front (``tests=N``), computed at the end
  (``"no_plan"``), or declared as pending and filled in later through
  :meth:`TapResultLog.set_expected_count` (deferred plans).
* :meth:`TapResultLog.finalize` reports plan mismatches and failure totals and
  returns the process exit status. After ``Bail out!`` it prints nothing and
  returns 255.
"""

from __future__ import annotations

import sys
from typing import Final, TextIO

from ...domain.errors import PlanError
from ...domain.plan import Outcome
from ...observability import log_debug, make_event

NO_PLAN: Final[str] = "no_plan"
MAX_FAILURE_STATUS: Final[int] = 254
NO_PLAN_STATUS: Final[int] = 254
MISMATCH_STATUS: Final[int] = 255


class TapResultLog:
    """Record outcomes and emit TAP.

    Parameters
    ----------
    stream:
        Destination for test lines and notes. Defaults to :data:`sys.stdout`
        looked up at write time.
    diag_stream:
        Destination for diagnostics. Defaults to :data:`sys.stderr`.

    Examples
    --------
    >>> import io
    >>> out = io.StringIO()
    >>> log = TapResultLog(stream=out, diag_stream=io.StringIO())
    >>> log.plan(tests=2)
    >>> log.record(True, 'first')
    True
    >>> log.record(True, 'second')
    True
    >>> log.finalize()
    0
    >>> print(out.getvalue(), end='')
    1..2
    ok 1 - first
    ok 2 - second
    """

    def __init__(self, *, stream: TextIO | None = None, diag_stream: TextIO | None = None) -> None:
        self._stream = stream
        self._diag_stream = diag_stream
        self._outcomes: list[Outcome] = []
        self._expected: int | None = None
        self._plan_declared = False
        self._plan_printed = False
        self._no_plan = False
        self._bailed_out = False
        self._status: int | None = None

    @property
    def current_count(self) -> int:
        return len(self._outcomes)

    @property
    def last_outcome(self) -> bool | None:
        return self._outcomes[-1].passed if self._outcomes else None

    @property
    def expected_count(self) -> int | None:
        return self._expected

    @property
    def outcomes(self) -> tuple[Outcome, ...]:
        """All recorded outcomes in execution order."""

        return tuple(self._outcomes)

    @property
    def failed_count(self) -> int:
        return sum(1 for outcome in self._outcomes if not outcome.passed)

    @property
    def finalized(self) -> bool:
        return self._status is not None

    @property
    def bailed_out(self) -> bool:
        """Whether a ``Bail out!`` line has been printed."""

        return self._bailed_out

    def record(self, passed: bool, name: str = "") -> bool:
        """Append an outcome, print its TAP line, and return ``passed``."""

        passed = bool(passed)
        number = len(self._outcomes) + 1
        self._outcomes.append(Outcome(number=number, passed=passed, name=name))
        status = "ok" if passed else "not ok"
        suffix = f" - {name}" if name else ""
        self._write(f"{status} {number}{suffix}")
        if not passed:
            label = f"'{name}'" if name else str(number)
            self.diag(f"  Failed test {label}")
        return passed

    def set_expected_count(self, count: int | None) -> None:
        """Fix the plan to *count*; ``None`` declares a plan that is still pending."""

        if count is not None and count < 0:
            raise PlanError(f"expected test count must not be negative, got {count}")
        self._plan_declared = True
        self._expected = count
        log_debug("expected_count_set", **make_event("plan", self.current_count, {"expected": count}))

    def has_expected_count(self) -> bool:
        return self._plan_declared

    def plan(self, *args: object, tests: int | None = None) -> None:
        """Declare the plan from ``tests=N`` or the ``"no_plan"`` argument.

        Raises
        ------
        PlanError
            When a plan already exists, the arguments conflict, the count is
            negative, or an argument is not understood.
        """

        if not args and tests is None:
            return
        if self._plan_declared:
            raise PlanError("You tried to plan twice")
        for arg in args:
            if arg != NO_PLAN:
                raise PlanError(f"plan() doesn't understand {arg!r}")
        if args and tests is not None:
            raise PlanError("A test count and no_plan are mutually exclusive")
        if tests is None:
            self._no_plan = True
            self._plan_declared = True
            return
        self.set_expected_count(tests)
        self._print_plan(tests)

    def bail_out(self, reason: str) -> None:
        """Print the TAP ``Bail out!`` line; the run ends here, so the tally stays silent."""

        self._bailed_out = True
        self._write(f"Bail out!  {reason}")

    def diag(self, *lines: str) -> None:
        """Print ``#`` prefixed diagnostics on the diagnostic stream."""

        for line in _split_lines(lines):
            self._write(f"# {line}", diagnostic=True)

    def note(self, *lines: str) -> None:
        """Print ``#`` prefixed notes on the output stream."""

        for line in _split_lines(lines):
            self._write(f"# {line}")

    def finalize(self) -> int:
        """Print the trailing plan, report problems, and return the exit status.

        Repeated calls return the first result without printing again.
        """

        if self._status is not None:
            return self._status
        self._status = self._tally()
        log_debug(
            "result_log_finalized",
            **make_event("finalize", self.current_count, {"expected": self._expected, "status": self._status}),
        )
        return self._status

    def _tally(self) -> int:
        if self._bailed_out:
            return MISMATCH_STATUS
        ran = self.current_count
        if self._no_plan:
            self._expected = ran
        if not self._plan_declared:
            if ran == 0:
                self.diag("No tests run!")
                return MISMATCH_STATUS
            self.diag("Tests were run but no plan was declared.")
            return NO_PLAN_STATUS
        if self._expected is None:
            self.diag("Tests were run but the deferred plan was never resolved.")
            return NO_PLAN_STATUS
        if not self._plan_printed:
            self._print_plan(self._expected)

        failed = self.failed_count
        mismatch = ran != self._expected
        if mismatch:
            self.diag(f"Looks like you planned {_tests(self._expected)} but ran {ran}.")
        if failed:
            qualifier = " run" if mismatch else ""
            self.diag(f"Looks like you failed {_tests(failed)} of {ran}{qualifier}.")
            return min(failed, MAX_FAILURE_STATUS)
        if mismatch:
            return MISMATCH_STATUS
        return 0

    def _print_plan(self, count: int) -> None:
        self._write(f"1..{count}")
        self._plan_printed = True

    def _write(self, line: str, *, diagnostic: bool = False) -> None:
        if diagnostic:
            target = self._diag_stream if self._diag_stream is not None else sys.stderr
        else:
            target = self._stream if self._stream is not None else sys.stdout
        target.write(line + "\n")
        target.flush()


def _split_lines(chunks: tuple[str, ...]) -> list[str]:
    """Flatten multi-line chunks into individual lines."""

    lines: list[str] = []
    for chunk in chunks:
        lines.extend(str(chunk).splitlines() or [""])
    return lines


def _tests(count: int) -> str:
    """Pluralise "test".

    >>> _tests(1), _tests(3)
    ('1 test', '3 tests')
    """

    return f"{count} test" if count == 1 else f"{count} tests"
