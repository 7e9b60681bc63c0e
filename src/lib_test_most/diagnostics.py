"""Human-readable dumps of arbitrary values for test diagnostics."""

from __future__ import annotations

import pprint
from typing import Any, Final

DUMP_WIDTH: Final[int] = 79


def dump(value: Any) -> str:
    """Render *value* with sorted keys and one level of indentation per nesting.

    Examples
    --------
    >>> print(dump({'b': [1, 2], 'a': 'x'}))
    {'a': 'x', 'b': [1, 2]}
    """

    return pprint.pformat(value, indent=1, width=DUMP_WIDTH, sort_dicts=True)


def explain(*values: Any) -> str:
    """Join *values*, passing strings through and dumping everything else.

    Examples
    --------
    >>> explain('I was just created: ', {'id': 2, 'stack': []})
    "I was just created: {'id': 2, 'stack': []}"
    """

    return "".join(value if isinstance(value, str) else dump(value) for value in values)
