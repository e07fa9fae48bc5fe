"""Discover the fields of a record that need filling."""

from typing import Any, List, Optional

from fieldfill.models.field import UNDEFINED, FieldDescriptor


def is_nullish(value: Any) -> bool:
    """Check if a value is None or UNDEFINED."""
    return value is None or value is UNDEFINED


def is_empty(value: Any) -> bool:
    """Check if a value is empty (null, undefined, blank string, empty list or dict)."""
    if is_nullish(value):
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple, dict)):
        return len(value) == 0
    return False


def value_type(value: Any) -> str:
    """Get the semantic type name of a value."""
    if value is None:
        return "null"
    if value is UNDEFINED:
        return "undefined"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, dict):
        return "object"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    return type(value).__name__


def _describe(key: str, path: str, value: Any, parent_key: Optional[str]) -> FieldDescriptor:
    return FieldDescriptor(
        key=key,
        path=path,
        value=value,
        type=value_type(value),
        parent_key=parent_key,
        is_null=value is None,
        is_undefined=value is UNDEFINED,
        is_empty=is_empty(value),
    )


def extract_empty_fields(
    record: Any,
    path: str = "",
    parent_key: Optional[str] = None,
) -> List[FieldDescriptor]:
    """Extract all fields that need to be filled.

    Walks depth-first in key order. None, UNDEFINED and ``""`` are emitted
    without recursing. Dicts are always recursed into. An empty list is
    emitted as a field of its own; a non-empty list is recursed into only for
    its dict elements, using ``key[i]`` segments. Lists of scalars are left
    alone, as are ``0``, ``False`` and non-empty strings.

    Args:
        record: Dict (or list of dicts) to walk.
        path: Path prefix of ``record`` inside the root.
        parent_key: Key of the object enclosing ``record``.

    Returns:
        Descriptors in deterministic walk order.
    """
    fields: List[FieldDescriptor] = []

    if isinstance(record, list):
        for index, item in enumerate(record):
            if isinstance(item, dict):
                item_path = f"{path}.{index}" if path else str(index)
                fields.extend(extract_empty_fields(item, item_path, parent_key))
        return fields

    if not isinstance(record, dict):
        return fields

    for key, value in record.items():
        key = str(key)
        current_path = f"{path}.{key}" if path else key

        if is_nullish(value) or (isinstance(value, str) and value == ""):
            fields.append(_describe(key, current_path, value, parent_key))

        elif isinstance(value, dict):
            fields.extend(extract_empty_fields(value, current_path, key))

        elif isinstance(value, list):
            if not value:
                fields.append(_describe(key, current_path, value, parent_key))
                continue
            for index, item in enumerate(value):
                if isinstance(item, dict):
                    fields.extend(
                        extract_empty_fields(item, f"{current_path}[{index}]", key)
                    )

    return fields
