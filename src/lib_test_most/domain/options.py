"""Suite behaviour options.

Purpose
-------
Hold the three switches a suite can opt into at start-up (die on failure, bail
on failure, deferred plan) as an immutable value object, resolved before the
suite is constructed.

Contents
--------
* :class:`SuiteOptions` – frozen dataclass with ``merge`` and ``failure_policy``.
* :data:`DEFAULT_OPTIONS` – canonical "nothing requested" instance.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Literal

FailurePolicy = Literal["die", "bail"]


@dataclass(frozen=True, slots=True)
class SuiteOptions:
    """Switches requested through modifiers, environment variables, or code.

    Attributes
    ----------
    die_on_fail:
        Raise :class:`~lib_test_most.domain.errors.SuiteAbort` once a test fails.
    bail_on_fail:
        Bail out of the whole run once a test fails. Wins over ``die_on_fail``.
    defer_plan:
        Postpone the expected test count until :func:`all_done`.

    Examples
    --------
    >>> SuiteOptions(die_on_fail=True).merge(SuiteOptions(bail_on_fail=True)).failure_policy
    'bail'
    >>> SuiteOptions().failure_policy is None
    True
    """

    die_on_fail: bool = False
    bail_on_fail: bool = False
    defer_plan: bool = False

    def merge(self, other: SuiteOptions) -> SuiteOptions:
        """Return the union of both option sets (a switch set anywhere stays set)."""

        return SuiteOptions(
            die_on_fail=self.die_on_fail or other.die_on_fail,
            bail_on_fail=self.bail_on_fail or other.bail_on_fail,
            defer_plan=self.defer_plan or other.defer_plan,
        )

    @property
    def failure_policy(self) -> FailurePolicy | None:
        """Name the failure policy to install; bail takes precedence over die."""

        if self.bail_on_fail:
            return "bail"
        if self.die_on_fail:
            return "die"
        return None

    def as_dict(self) -> dict[str, bool]:
        """Return a JSON-friendly dictionary (used by the CLI)."""

        return asdict(self)


DEFAULT_OPTIONS = SuiteOptions()
