"""Dotted-path access into nested records.

This module reads, writes, and deletes values addressed by paths such as
"a.b.0.c". Digit-only segments index into lists; every other segment is
an opaque mapping key. Tuples are read like lists but never written.
Reads and deletes tolerate missing segments; writes create missing
intermediate mappings and resolve scalar collisions through an explicit
conflict policy.
"""

from __future__ import annotations

from typing import Any, Mapping, MutableMapping, Sequence

from core.constants import PATH_SEPARATOR
from core.errors import RecordForgePathError
from core.types import PathConflictPolicy, ValueKind


class _Missing:
    """Sentinel type for values absent from a record."""

    _instance: "_Missing | None" = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


def classify_value(value: Any) -> ValueKind:
    """Classify a record value as mapping, sequence, or scalar."""
    if isinstance(value, Mapping):
        return "mapping"
    if isinstance(value, (list, tuple)):
        return "sequence"
    return "scalar"


def split_path(path: str) -> list[str]:
    """Split a dotted path into its segments."""
    return path.split(PATH_SEPARATOR)


def get_path(record: Any, path: str, default: Any = MISSING) -> Any:
    """Read the value at a dotted path.

    Args:
        record: Record to read from.
        path: Dotted path.
        default: Value returned when any segment is missing.

    Returns:
        The addressed value, or default.
    """
    current = record
    for segment in split_path(path):
        found, current = _child(current, segment)
        if not found:
            return default
    return current


def has_path(record: Any, path: str) -> bool:
    """Return whether a dotted path resolves to a value, including None."""
    return get_path(record, path) is not MISSING


def set_path(
    record: MutableMapping[str, Any],
    path: str,
    value: Any,
    on_conflict: PathConflictPolicy = "error",
) -> bool:
    """Write a value at a dotted path, creating missing mappings.

    Args:
        record: Record to write into.
        path: Dotted path.
        value: Value to assign at the final segment.
        on_conflict: Policy when a scalar blocks the path.

    Returns:
        True if the value was written, False if a conflict was skipped.

    Raises:
        RecordForgePathError: If a scalar blocks the path and policy is "error".
    """
    segments = split_path(path)
    parent: Any = None
    parent_segment = ""
    container: Any = record
    for depth, segment in enumerate(segments):
        if not _can_hold(container, segment):
            blocked_path = PATH_SEPARATOR.join(segments[:depth])
            if not _resolve_conflict(path, blocked_path, on_conflict) or parent is None:
                return False
            container = {}
            _assign(parent, parent_segment, container)
        if depth == len(segments) - 1:
            return _assign(container, segment, value)
        found, child = _child(container, segment)
        if not found:
            child = {}
            _assign(container, segment, child)
        parent, parent_segment, container = container, segment, child
    return False


def delete_path(record: Any, path: str) -> bool:
    """Remove the value at a dotted path.

    Mapping keys are removed. List elements are replaced by None so that
    sibling indices stay stable and repeated deletes stay idempotent.

    Returns:
        True if a value was removed.
    """
    segments = split_path(path)
    container = record
    if len(segments) > 1:
        container = get_path(record, PATH_SEPARATOR.join(segments[:-1]))
    leaf = segments[-1]
    kind = classify_value(container)
    if kind == "mapping" and leaf in container:
        del container[leaf]
        return True
    if kind == "sequence" and isinstance(container, list):
        index = _list_index(container, leaf)
        if index is not None and container[index] is not None:
            container[index] = None
            return True
    return False


def _child(container: Any, segment: str) -> tuple[bool, Any]:
    """Return (found, value) for one path segment."""
    kind = classify_value(container)
    if kind == "mapping":
        if segment in container:
            return True, container[segment]
        return False, None
    if kind == "sequence":
        index = _list_index(container, segment)
        if index is not None:
            return True, container[index]
    return False, None


def _list_index(container: Sequence[Any], segment: str) -> int | None:
    """Parse a list index segment that lies within range."""
    if not segment.isdigit():
        return None
    index = int(segment)
    return index if index < len(container) else None


def _can_hold(container: Any, segment: str) -> bool:
    """Return whether container can receive a new child at segment."""
    kind = classify_value(container)
    if kind == "mapping":
        return True
    if kind == "sequence" and isinstance(container, list):
        return segment.isdigit() and int(segment) <= len(container)
    return False


def _assign(container: Any, segment: str, value: Any) -> bool:
    """Assign value under segment; False if container cannot hold it."""
    kind = classify_value(container)
    if kind == "mapping":
        container[segment] = value
        return True
    if kind == "sequence" and isinstance(container, list) and segment.isdigit():
        index = int(segment)
        if index < len(container):
            container[index] = value
            return True
        if index == len(container):
            container.append(value)
            return True
    return False


def _resolve_conflict(path: str, blocked_path: str, on_conflict: PathConflictPolicy) -> bool:
    """Apply the conflict policy; True means overwrite and continue."""
    if on_conflict == "overwrite":
        return True
    if on_conflict == "skip":
        return False
    raise RecordForgePathError(
        f"Cannot write path '{path}': value at '{blocked_path}' is not a container. "
        "Use path_conflict='overwrite' or 'skip' to resolve this automatically."
    )
