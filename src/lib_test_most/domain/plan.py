"""Deferred plan state and recorded outcomes.

Both types are plain data holders without I/O; the application layer mutates
:class:`DeferredPlanState` and the result log adapter produces
:class:`Outcome` records.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class DeferredPlanState:
    """Bookkeeping for a suite that fixes its expected count after running.

    Attributes
    ----------
    deferred:
        The suite opted into deferred-plan mode.
    resolved:
        The expected count was fixed by an explicit ``all_done`` call.
    expected:
        The fixed count once resolved (or forced at exit).
    """

    deferred: bool = False
    resolved: bool = False
    expected: int | None = None


@dataclass(frozen=True, slots=True)
class Outcome:
    """A single recorded pass/fail result."""

    number: int
    passed: bool
    name: str = ""
