from __future__ import annotations

from typing import Any, Mapping, Sequence

_MISSING = object()


def is_non_empty_string(value: Any) -> bool:
    """Return True for a str that is not blank after stripping whitespace."""
    return isinstance(value, str) and len(value.strip()) > 0


def has_non_empty_string(value: Any) -> bool:
    """Return True for a list/tuple holding at least one non-empty string.

    Strings are sequences too; they never count as string-arrays here.
    """
    if not isinstance(value, (list, tuple)):
        return False
    return any(is_non_empty_string(v) for v in value)


def is_non_empty_list(value: Any) -> bool:
    return isinstance(value, (list, tuple)) and len(value) > 0


def is_truthy(value: Any) -> bool:
    """JavaScript truthiness over JSON values.

    Only null, false, 0 (or NaN) and "" are falsy; empty objects and arrays
    are truthy.
    """
    if value is None or value is False:
        return False
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value == value and value != 0
    if isinstance(value, str):
        return value != ""
    return True


def has_keys(value: Any) -> bool:
    return isinstance(value, Mapping) and len(value) > 0


def get_path(manifest: Any, path: str, default: Any = None) -> Any:
    """Resolve a dotted manifest path such as ``"action.default_popup"``.

    Walking through a non-object value yields ``default``; lookups never raise.

    Time:  O(d) where d is the path depth
    Space: O(1)
    """

    node: Any = manifest
    for part in path.split("."):
        if not isinstance(node, Mapping):
            return default
        node = node.get(part, _MISSING)
        if node is _MISSING:
            return default
    return node


def any_non_empty_string(manifest: Any, paths: Sequence[str]) -> bool:
    """True when any of the alias paths holds a non-empty string."""
    return any(is_non_empty_string(get_path(manifest, p)) for p in paths)
