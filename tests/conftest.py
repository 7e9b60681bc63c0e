from __future__ import annotations

import pytest
from hypothesis import HealthCheck, settings

from lib_test_most import core
from lib_test_most.observability import bind_suite_name
from tests.support import CapturedLog, make_log

# The autouse isolation fixture only resets state, so hypothesis examples may
# share it within one test function.
settings.register_profile("lib_test_most", suppress_health_check=[HealthCheck.function_scoped_fixture])
settings.load_profile("lib_test_most")


@pytest.fixture(autouse=True)
def _isolate_suite_state(monkeypatch: pytest.MonkeyPatch):
    """Start every test without a bound suite or environment switches."""

    monkeypatch.delenv("DIE_ON_FAIL", raising=False)
    monkeypatch.delenv("BAIL_ON_FAIL", raising=False)
    token = core._ACTIVE_SUITE.set(None)
    yield
    core._ACTIVE_SUITE.reset(token)
    bind_suite_name(None)


@pytest.fixture()
def captured() -> CapturedLog:
    return make_log()
