"""Path-based record projection.

This module implements the whitelist, blacklist, and rename transforms.
Each one is driven by dotted paths and applies its entries in order.
"""

from __future__ import annotations

from typing import Iterable

from core.constants import PATH_SEPARATOR
from core.logging_config import get_logger
from core.types import PathConflictPolicy, Record, RenameRule
from transforms.path_access import MISSING, delete_path, get_path, set_path

_LOGGER = get_logger(__name__)


def whitelist(
    record: Record,
    paths: Iterable[str],
    on_conflict: PathConflictPolicy = "skip",
) -> Record:
    """Build a new record holding only the listed paths.

    Paths absent from the source are skipped. Leaf values are shared with
    the source record, not copied.

    Args:
        record: Source record.
        paths: Paths to keep, in order.
        on_conflict: Policy when two paths collide on a scalar.

    Returns:
        A new sparse record.
    """
    projected: Record = {}
    for path in paths:
        value = get_path(record, path)
        if value is MISSING:
            continue
        _write(projected, path, value, on_conflict)
    return projected


def blacklist(record: Record, paths: Iterable[str]) -> Record:
    """Remove the listed paths from the record in place.

    Returns:
        The same record, mutated.
    """
    for path in paths:
        delete_path(record, path)
    return record


def rename(
    record: Record,
    rules: Iterable[RenameRule],
    on_conflict: PathConflictPolicy = "skip",
) -> Record:
    """Move values between paths in place, applying rules in order.

    A rule whose source is absent is a no-op. A rule whose destination
    write is skipped keeps its source value. A rule whose destination lies
    inside its own source is skipped. When the source lies inside the
    destination, the write replaces the source's ancestor, so nothing is
    deleted afterwards.

    Returns:
        The same record, mutated.
    """
    for rule in rules:
        if rule.source == rule.destination:
            continue
        if _is_descendant(rule.destination, rule.source):
            _LOGGER.warning(
                "path_conflict_skipped",
                path=rule.destination,
                reason="destination inside source",
            )
            continue
        value = get_path(record, rule.source)
        if value is MISSING:
            continue
        written = _write(record, rule.destination, value, on_conflict)
        if written and not _is_descendant(rule.source, rule.destination):
            delete_path(record, rule.source)
    return record


def _is_descendant(path: str, ancestor: str) -> bool:
    return path.startswith(ancestor + PATH_SEPARATOR)


def _write(record: Record, path: str, value: object, on_conflict: PathConflictPolicy) -> bool:
    written = set_path(record, path, value, on_conflict=on_conflict)
    if not written:
        _LOGGER.warning("path_conflict_skipped", path=path)
    return written
