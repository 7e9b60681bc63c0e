from __future__ import annotations

import pytest

from lib_test_most.core import Suite
from lib_test_most.domain.errors import SuiteAbort
from lib_test_most.domain.options import SuiteOptions
from lib_test_most.testing import DEMO_OUTCOMES, i_should_fail, run_demo_suite
from tests.support import CapturedLog


def test_i_should_fail_raises_runtime_error() -> None:
    with pytest.raises(RuntimeError, match="^i should fail$"):
        i_should_fail()


def test_i_should_fail_reexported() -> None:
    from lib_test_most import i_should_fail as exported

    assert exported is i_should_fail


def test_demo_suite_without_policy_records_everything(captured: CapturedLog) -> None:
    suite = Suite(captured.log, options=SuiteOptions(defer_plan=True))
    status = run_demo_suite(suite)
    assert [outcome.passed for outcome in captured.log.outcomes] == [passed for passed, _ in DEMO_OUTCOMES]
    assert status == 1
    assert captured.log.expected_count == 3


def test_demo_suite_finalizes_when_policy_aborts(captured: CapturedLog) -> None:
    suite = Suite(captured.log, options=SuiteOptions(die_on_fail=True, defer_plan=True))
    with pytest.raises(SuiteAbort):
        run_demo_suite(suite)
    assert suite.finalized
    assert captured.log.expected_count == 3
    assert "Looks like you planned 3 tests but ran 2." in captured.stderr
