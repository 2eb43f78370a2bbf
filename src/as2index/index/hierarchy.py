"""Tree-level reconstruction for the flat record list.

Records carry only a parent pointer, so depth is recovered in one forward
pass that compares each record with its predecessor:

* parent equals the previous record's index (and is not the root): one level deeper;
* parent differs from the previous record's parent: one level shallower;
* otherwise: a sibling at the same level.

Returning several levels at once only counts as a single step back, and the
level is not rebuilt from the parent pointers.
"""

from __future__ import annotations

from typing import List, Sequence

from .models import IndexRecord


def compute_tree_levels(records: Sequence[IndexRecord]) -> List[int]:
    """Return the tree level of each record, parallel to ``records``."""
    levels: List[int] = []
    previous_index = 0
    previous_parent_index = 0
    indent_level = 0

    for record in records:
        if record.parent == previous_index and record.parent > 0:
            indent_level += 1
        elif record.parent != previous_parent_index:
            indent_level -= 1

        levels.append(indent_level)
        previous_index = record.index
        previous_parent_index = record.parent

    return levels


def apply_tree_levels(records: Sequence[IndexRecord]) -> List[IndexRecord]:
    """Return copies of ``records`` with ``tree_level`` filled in."""
    return [
        record.model_copy(update={"tree_level": level})
        for record, level in zip(records, compute_tree_levels(records))
    ]


__all__ = ["compute_tree_levels", "apply_tree_levels"]
