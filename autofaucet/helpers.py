"""String formatting and validation helpers."""

from __future__ import annotations

import re
from typing import Any, Optional

_PLACEHOLDER = re.compile(r"{(\d+)}")


def format_string(template: str, *args: Any) -> str:
    """Replace ``{0}``, ``{1}``... in ``template`` with positional ``args``.

    Placeholders without a matching argument are left untouched, as are
    arguments that are None.
    """

    def _replace(match: re.Match) -> str:
        index = int(match.group(1))
        if index < len(args) and args[index] is not None:
            return str(args[index])
        return match.group(0)

    return _PLACEHOLDER.sub(_replace, template)


def non_null_empty(*values: Optional[str]) -> bool:
    """Return True if no value is None or an empty string."""
    for value in values:
        if value is None or value == "":
            return False
    return True
