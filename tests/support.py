"""Shared helpers for the test suite.

Keeps result logs, recording actions, and subprocess runs uniform so each test
reads as a scenario rather than as plumbing.
"""

from __future__ import annotations

import io
import os
import subprocess
import sys
import textwrap
from dataclasses import dataclass, field
from pathlib import Path

from lib_test_most.adapters.result_log.tap import TapResultLog

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"


@dataclass
class CapturedLog:
    """A :class:`TapResultLog` wired to in-memory streams."""

    log: TapResultLog
    out: io.StringIO
    err: io.StringIO

    @property
    def stdout(self) -> str:
        return self.out.getvalue()

    @property
    def stderr(self) -> str:
        return self.err.getvalue()


def make_log() -> CapturedLog:
    out = io.StringIO()
    err = io.StringIO()
    return CapturedLog(TapResultLog(stream=out, diag_stream=err), out, err)


@dataclass
class RecordingAction:
    """Failure action that remembers every invocation and what the log looked like."""

    calls: list[object] = field(default_factory=list)
    counts_seen: list[int | None] = field(default_factory=list)

    def __call__(self, log) -> None:
        self.calls.append(log)
        self.counts_seen.append(log.current_count if log is not None else None)


def run_script(source: str, *, env: dict[str, str] | None = None) -> subprocess.CompletedProcess[str]:
    """Run *source* in a fresh interpreter with ``src`` importable."""

    pythonpath = os.pathsep.join(filter(None, [str(SRC_PATH), os.environ.get("PYTHONPATH")]))
    base = {key: value for key, value in os.environ.items() if key not in {"DIE_ON_FAIL", "BAIL_ON_FAIL"}}
    full_env = base | {"PYTHONPATH": pythonpath} | (env or {})
    return subprocess.run(
        [sys.executable, "-c", textwrap.dedent(source)],
        capture_output=True,
        text=True,
        env=full_env,
        check=False,
        timeout=60,
    )
