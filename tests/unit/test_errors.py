from __future__ import annotations

import pytest

from lib_test_most.domain.errors import (
    BAIL_OUT_STATUS,
    HardBailout,
    InvalidModifier,
    NoActiveSuite,
    PlanError,
    SuiteAbort,
    TestMostError,
)


def test_error_hierarchy() -> None:
    for error_cls in (SuiteAbort, PlanError, NoActiveSuite, InvalidModifier):
        assert issubclass(error_cls, TestMostError)
    assert not issubclass(SuiteAbort, AssertionError)


def test_suite_abort_carries_failed_number() -> None:
    error = SuiteAbort("stop", failed_number=4)
    assert error.failed_number == 4
    assert str(error) == "stop"


def test_hard_bailout_escapes_except_exception() -> None:
    """A bail-out must not be swallowed by ordinary ``except Exception`` handlers."""

    with pytest.raises(HardBailout) as info:
        try:
            raise HardBailout("enough")
        except Exception:  # pragma: no cover - must not be reached
            pytest.fail("HardBailout was caught as an Exception")
    assert info.value.code == BAIL_OUT_STATUS
    assert info.value.reason == "enough"
    assert str(info.value) == "enough"
