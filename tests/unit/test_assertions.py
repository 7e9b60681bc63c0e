from __future__ import annotations

import re
import warnings

import pytest

from lib_test_most import assertions
from lib_test_most.core import Suite, use_suite
from lib_test_most.domain.errors import NoActiveSuite
from tests.support import CapturedLog


@pytest.fixture()
def suite(captured: CapturedLog) -> Suite:
    return Suite(captured.log)


def test_helpers_use_bound_suite(captured: CapturedLog, suite: Suite) -> None:
    with use_suite(suite):
        assert assertions.ok(1, "truthy") is True
    assert captured.stdout == "ok 1 - truthy\n"


def test_helpers_without_suite_raise() -> None:
    with pytest.raises(NoActiveSuite):
        assertions.ok(True)


def test_is_and_isnt(captured: CapturedLog, suite: Suite) -> None:
    assert assertions.is_(2, 2, "equal", suite=suite) is True
    assert assertions.is_("a", "b", "differs", suite=suite) is False
    assert assertions.isnt(1, 2, suite=suite) is True
    assert assertions.isnt(1, 1, suite=suite) is False
    assert "#          got: 'a'" in captured.stderr
    assert "#     expected: 'b'" in captured.stderr
    assert "#     expected: anything else" in captured.stderr


def test_like_and_unlike(captured: CapturedLog, suite: Suite) -> None:
    assert assertions.like("hello world", r"wor", suite=suite) is True
    assert assertions.like("hello", re.compile(r"^bye"), suite=suite) is False
    assert assertions.unlike("hello", r"bye", suite=suite) is True
    assert assertions.unlike("hello", r"ell", suite=suite) is False
    assert "matches '^bye'" in captured.stderr
    assert "doesn't match 'ell'" in captured.stderr


def test_is_deeply_shows_diff(captured: CapturedLog, suite: Suite) -> None:
    assert assertions.is_deeply({"a": [1, 2]}, {"a": [1, 2]}, suite=suite) is True
    assert assertions.eq_or_diff([3], [4], "lists", suite=suite) is False
    assert "# --- got" in captured.stderr
    assert "# +++ expected" in captured.stderr
    assert "# -[3]" in captured.stderr
    assert "# +[4]" in captured.stderr


def test_throws_ok(captured: CapturedLog, suite: Suite) -> None:
    def boom() -> None:
        raise KeyError("missing")

    assert assertions.throws_ok(boom, LookupError, suite=suite) is True
    assert assertions.throws_ok(boom, ValueError, suite=suite) is False
    assert assertions.throws_ok(lambda: None, ValueError, suite=suite) is False
    assert "found: KeyError" in captured.stderr
    assert "found: normal exit" in captured.stderr


def test_lives_ok(captured: CapturedLog, suite: Suite) -> None:
    assert assertions.lives_ok(lambda: None, suite=suite) is True
    assert assertions.lives_ok(lambda: 1 / 0, suite=suite) is False
    assert "died: ZeroDivisionError" in captured.stderr


def test_warning_like(captured: CapturedLog, suite: Suite) -> None:
    def noisy() -> None:
        warnings.warn("deprecated thing", DeprecationWarning)

    assert assertions.warning_like(noisy, r"deprecated", suite=suite) is True
    assert assertions.warning_like(noisy, r"other", suite=suite) is False
    assert assertions.warning_like(lambda: None, r"other", suite=suite) is False
    assert "found: no warnings" in captured.stderr


def test_helpers_go_through_failure_policy(captured: CapturedLog, suite: Suite) -> None:
    fired: list[int] = []
    suite.set_failure_action(lambda log: fired.append(log.current_count))
    assertions.is_(1, 2, suite=suite)
    assert fired == []
    assertions.ok(True, suite=suite)
    assert fired == [1]
