"""Read and write values at dotted/bracketed paths inside nested records.

Grammar: segments are separated by ``.``; a segment may end in ``[N]``, which
means "navigate into the property, then into list index N". Only one index
per segment is recognised. Anything that does not fit (``a[``, ``a[0][1]``,
``a[x]``) is treated as a plain property name, so neither helper raises
on path syntax.
"""

import logging
import re
from typing import Any, List, Optional, Tuple

from fieldfill.core.exceptions import AddressingError
from fieldfill.models.field import UNDEFINED

logger = logging.getLogger(__name__)

_INDEXED_SEGMENT = re.compile(r"^(.+)\[(\d+)\]$")


def parse_segment(segment: str) -> Tuple[str, Optional[int]]:
    """Split a segment into its property name and optional list index."""
    match = _INDEXED_SEGMENT.match(segment)
    if match and "[" not in match.group(1):
        return match.group(1), int(match.group(2))
    return segment, None


def split_path(path: str) -> List[str]:
    """Split a path into raw segments."""
    return path.split(".")


def _child(container: Any, name: str) -> Any:
    """Look up one property, or one element when the container is a list."""
    if isinstance(container, dict):
        return container.get(name, UNDEFINED)
    if isinstance(container, list) and name.isdigit():
        index = int(name)
        return container[index] if index < len(container) else UNDEFINED
    return UNDEFINED


def get_path(root: Any, path: str) -> Any:
    """Get the value at ``path``.

    Args:
        root: Record to read from.
        path: Dotted/bracketed address, e.g. ``"orders[0].total"``.

    Returns:
        The stored value, or ``UNDEFINED`` when any part of the path does not
        resolve.
    """
    current = root
    for segment in split_path(path):
        if current is None or current is UNDEFINED:
            return UNDEFINED

        name, index = parse_segment(segment)
        current = _child(current, name)

        if index is not None:
            if not isinstance(current, list) or index >= len(current):
                return UNDEFINED
            current = current[index]

    return current


def _ensure_list(container: Any, name: str) -> List[Any]:
    existing = _child(container, name)
    if isinstance(existing, list):
        return existing
    fresh: List[Any] = []
    _assign(container, name, fresh)
    return fresh


def _fits(value: Any, list_ok: bool) -> bool:
    """Whether ``value`` can hold the next segment without being replaced."""
    return isinstance(value, dict) or (list_ok and isinstance(value, list))


def _ensure_container(container: Any, name: str, list_ok: bool) -> Any:
    existing = _child(container, name)
    if _fits(existing, list_ok):
        return existing
    if existing is not UNDEFINED and existing is not None:
        logger.debug(f"Replacing {type(existing).__name__} at '{name}' with a dict")
    fresh: dict = {}
    _assign(container, name, fresh)
    return fresh


def _assign(container: Any, name: str, value: Any) -> None:
    if isinstance(container, list) and name.isdigit():
        _set_index(container, int(name), value)
    else:
        container[name] = value


def _set_index(items: List[Any], index: int, value: Any) -> None:
    if index >= len(items):
        items.extend([None] * (index + 1 - len(items)))
    items[index] = value


def set_path(root: Any, path: str, value: Any) -> None:
    """Set ``value`` at ``path``, creating missing containers on the way.

    Missing, null or conflicting intermediates become dicts, or lists for
    indexed segments. An existing list is only descended into when the next
    segment is numeric; otherwise it is replaced like a scalar. Lists are
    padded with ``None`` up to the requested index.

    Args:
        root: Record to mutate in place.
        path: Dotted/bracketed address.
        value: Value to store.

    Raises:
        AddressingError: If ``root`` is a list and the first segment is not
            a numeric index, since the root itself cannot be replaced.
    """
    segments = split_path(path)
    if isinstance(root, list) and not parse_segment(segments[0])[0].isdigit():
        raise AddressingError(path)

    current = root

    for position, segment in enumerate(segments[:-1]):
        name, index = parse_segment(segment)
        list_ok = parse_segment(segments[position + 1])[0].isdigit()

        if index is None:
            current = _ensure_container(current, name, list_ok)
            continue

        items = _ensure_list(current, name)
        if index >= len(items) or not _fits(items[index], list_ok):
            _set_index(items, index, {})
        current = items[index]

    name, index = parse_segment(segments[-1])
    if index is None:
        _assign(current, name, value)
    else:
        _set_index(_ensure_list(current, name), index, value)
