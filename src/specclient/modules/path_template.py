"""Path Templater.

Renders path patterns like ``/pets/{id}`` with bound path values.
Values are substituted verbatim: no percent-encoding is applied.
"""

import re
from typing import Any


PLACEHOLDER_PATTERN = re.compile(r"\{([^{}/]+)\}")

# Rendered for a placeholder with no bound value
MISSING_VALUE = "undefined"


def path_param_names(pattern: str) -> list[str]:
    """Get placeholder names in order of appearance.

    Examples:
        path_param_names("/users/{user_id}/posts/{post_id}") -> ["user_id", "post_id"]
        path_param_names("/users") -> []
    """
    return PLACEHOLDER_PATTERN.findall(pattern)


def stringify_path_value(value: Any) -> str:
    """Coerce a bound path value to its string form."""
    if value is None:
        return MISSING_VALUE
    if isinstance(value, bool):
        return str(value).lower()
    return str(value)


def render_path(pattern: str, path_params: dict[str, Any]) -> str:
    """Substitute every placeholder in a path pattern.

    Placeholders without a bound value render as ``undefined``.

    Args:
        pattern: Path pattern from the description (e.g. "/pets/{id}").
        path_params: Bound values by placeholder name.

    Returns:
        The concrete path.
    """
    return PLACEHOLDER_PATTERN.sub(
        lambda match: stringify_path_value(path_params.get(match.group(1))),
        pattern,
    )
