"""Deep merge for nested records.

This module combines two records into a new one. Nested mappings merge
key by key; on any other conflict the overlay value wins. Lists are
replaced as a whole rather than concatenated.
"""

from __future__ import annotations

import copy
from typing import Any, Mapping

from core.types import Record


def deep_merge(base: Mapping[str, Any] | None, overlay: Mapping[str, Any] | None) -> Record:
    """Merge overlay on top of base.

    Args:
        base: Record providing fallback values.
        overlay: Record whose values win on conflict.

    Returns:
        A new record sharing no containers with either input.
    """
    merged: Record = {key: copy.deepcopy(value) for key, value in (base or {}).items()}
    for key, overlay_value in (overlay or {}).items():
        base_value = merged.get(key)
        if isinstance(base_value, Mapping) and isinstance(overlay_value, Mapping):
            merged[key] = deep_merge(base_value, overlay_value)
        else:
            merged[key] = copy.deepcopy(overlay_value)
    return merged
