"""Modifier list parsing.

``start_suite("die", "no_plan")`` mixes behaviour flags with plan arguments.
The flags are turned into :class:`SuiteOptions` here; everything else is handed
back untouched so the result log can interpret it.
"""

from __future__ import annotations

from typing import Final, Iterable

from ..domain.errors import InvalidModifier
from ..domain.options import SuiteOptions

MODIFIER_FLAGS: Final[dict[str, str]] = {
    "die": "die_on_fail",
    "bail": "bail_on_fail",
    "defer_plan": "defer_plan",
}


def parse_modifiers(modifiers: Iterable[object]) -> tuple[SuiteOptions, tuple[str, ...]]:
    """Split *modifiers* into options and the arguments forwarded to the harness.

    Order of the remaining arguments is preserved.

    Examples
    --------
    >>> options, rest = parse_modifiers(["no_plan", "die"])
    >>> options.die_on_fail, rest
    (True, ('no_plan',))
    >>> parse_modifiers(["defer_plan", "bail"])[0].failure_policy
    'bail'
    """

    flags: dict[str, bool] = {}
    remaining: list[str] = []
    for modifier in modifiers:
        if not isinstance(modifier, str):
            raise InvalidModifier(f"modifiers must be strings, got {modifier!r}")
        field_name = MODIFIER_FLAGS.get(modifier)
        if field_name is None:
            remaining.append(modifier)
        else:
            flags[field_name] = True
    return SuiteOptions(**flags), tuple(remaining)
