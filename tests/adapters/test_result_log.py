"""TAP result log tests: line format, plan styles, and the exit status table."""

from __future__ import annotations

import pytest

from lib_test_most.adapters.result_log.tap import TapResultLog
from lib_test_most.domain.errors import PlanError
from tests.support import CapturedLog


def test_record_prints_tap_lines(captured: CapturedLog) -> None:
    log = captured.log
    assert log.record(True, "works") is True
    assert log.record(False, "broken") is False
    assert log.record(0) is False
    assert captured.stdout.splitlines() == ["ok 1 - works", "not ok 2 - broken", "not ok 3"]
    assert "#   Failed test 'broken'" in captured.stderr
    assert "#   Failed test 3" in captured.stderr
    assert log.current_count == 3
    assert log.last_outcome is False
    assert log.failed_count == 2


def test_fixed_plan_prints_header_first(captured: CapturedLog) -> None:
    captured.log.plan(tests=1)
    captured.log.record(True)
    assert captured.log.finalize() == 0
    assert captured.stdout.splitlines() == ["1..1", "ok 1"]


def test_no_plan_prints_trailing_plan(captured: CapturedLog) -> None:
    captured.log.plan("no_plan")
    captured.log.record(True)
    captured.log.record(True)
    assert captured.log.finalize() == 0
    assert captured.stdout.splitlines()[-1] == "1..2"


def test_plan_twice_is_rejected(captured: CapturedLog) -> None:
    captured.log.plan(tests=2)
    with pytest.raises(PlanError, match="plan twice"):
        captured.log.plan("no_plan")


@pytest.mark.parametrize(
    ("args", "kwargs"),
    [(("skip_all",), {}), (("no_plan",), {"tests": 3}), ((), {"tests": -1})],
)
def test_invalid_plans_are_rejected(captured: CapturedLog, args: tuple, kwargs: dict) -> None:
    with pytest.raises(PlanError):
        captured.log.plan(*args, **kwargs)


def test_plan_without_arguments_is_noop(captured: CapturedLog) -> None:
    captured.log.plan()
    assert not captured.log.has_expected_count()


def test_failures_set_exit_status(captured: CapturedLog) -> None:
    captured.log.plan(tests=3)
    for outcome in (True, False, False):
        captured.log.record(outcome)
    assert captured.log.finalize() == 2
    assert "Looks like you failed 2 tests of 3." in captured.stderr


def test_failure_status_is_capped() -> None:
    log = TapResultLog(stream=_Sink(), diag_stream=_Sink())
    log.plan("no_plan")
    for _ in range(300):
        log.record(False)
    assert log.finalize() == 254


def test_mismatch_without_failures(captured: CapturedLog) -> None:
    captured.log.plan(tests=2)
    captured.log.record(True)
    assert captured.log.finalize() == 255
    assert "Looks like you planned 2 tests but ran 1." in captured.stderr


def test_mismatch_with_failures_reports_both(captured: CapturedLog) -> None:
    captured.log.plan(tests=3)
    captured.log.record(False)
    assert captured.log.finalize() == 1
    assert "Looks like you planned 3 tests but ran 1." in captured.stderr
    assert "Looks like you failed 1 test of 1 run." in captured.stderr


def test_missing_plan(captured: CapturedLog) -> None:
    captured.log.record(True)
    assert captured.log.finalize() == 254
    assert "no plan was declared" in captured.stderr


def test_no_tests_run(captured: CapturedLog) -> None:
    assert captured.log.finalize() == 255
    assert "No tests run!" in captured.stderr


def test_pending_plan_printed_at_finalize(captured: CapturedLog) -> None:
    captured.log.set_expected_count(None)
    captured.log.record(True)
    captured.log.set_expected_count(1)
    assert captured.log.finalize() == 0
    assert captured.stdout.splitlines() == ["ok 1", "1..1"]


def test_unresolved_pending_plan(captured: CapturedLog) -> None:
    captured.log.set_expected_count(None)
    captured.log.record(True)
    assert captured.log.finalize() == 254


def test_finalize_is_idempotent(captured: CapturedLog) -> None:
    captured.log.plan(tests=1)
    captured.log.record(False)
    first = captured.log.finalize()
    output = captured.stderr
    assert captured.log.finalize() == first
    assert captured.stderr == output
    assert captured.log.finalized


def test_diag_and_note_split_lines(captured: CapturedLog) -> None:
    captured.log.diag("one\ntwo")
    captured.log.note("three")
    assert captured.stderr.splitlines() == ["# one", "# two"]
    assert captured.stdout.splitlines() == ["# three"]


def test_bail_out_line(captured: CapturedLog) -> None:
    captured.log.bail_out("stop")
    assert captured.stdout == "Bail out!  stop\n"


def test_defaults_to_process_streams(capsys: pytest.CaptureFixture[str]) -> None:
    log = TapResultLog()
    log.record(False, "visible")
    out, err = capsys.readouterr()
    assert out == "not ok 1 - visible\n"
    assert "Failed test 'visible'" in err


class _Sink:
    def write(self, _text: str) -> int:
        return 0

    def flush(self) -> None:
        return None


def test_tally_is_silent_after_bail_out(captured: CapturedLog) -> None:
    captured.log.plan(tests=5)
    captured.log.record(False, "broken")
    captured.log.bail_out("stop")
    assert captured.log.bailed_out
    assert captured.log.finalize() == 255
    assert captured.stdout.splitlines()[-1] == "Bail out!  stop"
    assert "Looks like" not in captured.stderr
