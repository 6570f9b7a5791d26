"""Unit tests for whitelist, blacklist, and rename transforms."""

from __future__ import annotations

import copy

from core.types import RenameRule
from transforms.path_access import get_path
from transforms.projection import blacklist, rename, whitelist


def _sample_record() -> dict[str, object]:
    return {
        "name": "Ada",
        "profile": {"email": "ada@example.com", "age": 36, "tags": ["a", "b"]},
        "secret": "x",
    }


def test_whitelist_keeps_only_listed_paths() -> None:
    """Whitelist should build a sparse record from the listed paths."""
    record = _sample_record()

    projected = whitelist(record, ["name", "profile.email", "missing.path"])

    assert projected == {"name": "Ada", "profile": {"email": "ada@example.com"}}
    assert record == _sample_record()


def test_whitelist_preserves_values_at_listed_paths() -> None:
    """Every listed path with a value should read back identically."""
    record = _sample_record()
    paths = ["profile.age", "profile.tags", "secret"]

    projected = whitelist(record, paths)

    for path in paths:
        assert get_path(projected, path) == get_path(record, path)


def test_whitelist_keeps_explicit_none() -> None:
    """A None value is defined and should be kept."""
    projected = whitelist({"a": None, "b": 1}, ["a"])

    assert projected == {"a": None}


def test_blacklist_removes_listed_paths_in_place() -> None:
    """Blacklist should delete listed keys and leave the rest."""
    record = _sample_record()

    result = blacklist(record, ["secret", "profile.age", "not.there"])

    assert result is record
    assert record == {
        "name": "Ada",
        "profile": {"email": "ada@example.com", "tags": ["a", "b"]},
    }


def test_blacklist_is_idempotent() -> None:
    """Applying the blacklist twice should match applying it once."""
    once = blacklist(_sample_record(), ["secret", "profile.tags.0"])
    twice = blacklist(copy.deepcopy(once), ["secret", "profile.tags.0"])

    assert once == twice


def test_rename_moves_values_and_removes_source() -> None:
    """Rename should write the destination and delete the source."""
    record = {"a": {"b": 1}}

    rename(record, [RenameRule(source="a.b", destination="c")])

    assert record == {"a": {}, "c": 1}


def test_rename_skips_absent_sources() -> None:
    """A rule whose source is missing should change nothing."""
    record = {"a": 1}

    rename(record, [RenameRule(source="missing", destination="b")])

    assert record == {"a": 1}


def test_rename_applies_rules_in_order() -> None:
    """Chained rules should see the effect of earlier rules."""
    record = {"a": 1}

    rename(
        record,
        [RenameRule(source="a", destination="b"), RenameRule(source="b", destination="c")],
    )

    assert record == {"c": 1}


def test_rename_keeps_source_when_destination_conflicts() -> None:
    """A skipped destination write should not lose the source value."""
    record = {"a": 1, "b": "scalar"}

    rename(record, [RenameRule(source="a", destination="b.c")], on_conflict="skip")

    assert record == {"a": 1, "b": "scalar"}


def test_rename_to_same_path_is_noop() -> None:
    """Renaming a path onto itself should keep the value."""
    record = {"a": 1}

    rename(record, [RenameRule(source="a", destination="a")])

    assert record == {"a": 1}


def test_rename_into_own_subtree_is_skipped() -> None:
    """A destination nested under its own source should leave the record intact."""
    record = {"a": {"x": 1}}

    rename(record, [RenameRule(source="a", destination="a.b")])

    assert record == {"a": {"x": 1}}


def test_rename_onto_ancestor_replaces_it() -> None:
    """Moving a value onto its own ancestor should keep the moved value."""
    record = {"a": {"b": {"c": 1}, "d": 2}}

    rename(record, [RenameRule(source="a.b", destination="a")])

    assert record == {"a": {"c": 1}}


def test_whitelist_reads_through_tuples() -> None:
    """Tuple values should be indexable the same way lists are."""
    record = {"pair": ("left", "right")}

    assert whitelist(record, ["pair.1"]) == {"pair": {"1": "right"}}
