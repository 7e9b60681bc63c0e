"""Environment variable adapter.

Purpose
-------
Read the two process-wide switches that turn on a failure policy without
touching the test file: ``BAIL_ON_FAIL`` and ``DIE_ON_FAIL``.

Key behaviours
--------------
* Values are read once, when a suite starts.
* Empty, ``0``, ``false``, ``no`` and ``off`` (any case) count as unset; any
  other value counts as set.
* Emits structured logging via :mod:`lib_test_most.observability` to aid
  troubleshooting.
"""

from __future__ import annotations

import os
from typing import Final, Mapping

from ...domain.options import SuiteOptions
from ...observability import log_debug

DIE_ON_FAIL_VAR: Final[str] = "DIE_ON_FAIL"
BAIL_ON_FAIL_VAR: Final[str] = "BAIL_ON_FAIL"

_FALSY: Final[frozenset[str]] = frozenset({"", "0", "false", "no", "off"})


class DefaultEnvLoader:
    """Translate environment switches into :class:`SuiteOptions`."""

    def __init__(self, *, environ: Mapping[str, str] | None = None) -> None:
        """Initialise the loader with a specific ``environ`` mapping for testability.

        Parameters
        ----------
        environ:
            Mapping to read from. Defaults to :data:`os.environ`.
        """

        self._environ = os.environ if environ is None else environ

    def load(self) -> SuiteOptions:
        """Return the options requested by the environment.

        Examples
        --------
        >>> DefaultEnvLoader(environ={'DIE_ON_FAIL': '1'}).load().failure_policy
        'die'
        >>> DefaultEnvLoader(environ={'DIE_ON_FAIL': 'yes', 'BAIL_ON_FAIL': 'on'}).load().failure_policy
        'bail'
        >>> DefaultEnvLoader(environ={'BAIL_ON_FAIL': '0'}).load().failure_policy is None
        True
        """

        options = SuiteOptions(
            die_on_fail=is_enabled(self._environ.get(DIE_ON_FAIL_VAR)),
            bail_on_fail=is_enabled(self._environ.get(BAIL_ON_FAIL_VAR)),
        )
        log_debug("env_switches_loaded", phase="start", assertion=None, policy=options.failure_policy)
        return options


def is_enabled(value: str | None) -> bool:
    """Return whether an environment switch value counts as set.

    Examples
    --------
    >>> is_enabled('1'), is_enabled('TRUE'), is_enabled('Off'), is_enabled(None)
    (True, True, False, False)
    """

    if value is None:
        return False
    return value.strip().lower() not in _FALSY
