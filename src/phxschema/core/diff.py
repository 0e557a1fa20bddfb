"""Structural differences between two ordered collections."""

from __future__ import annotations

from typing import Hashable, Iterable, TypeVar

T = TypeVar("T", bound=Hashable)


def symmetric_difference(left: Iterable[T], right: Iterable[T]) -> list[T]:
    """
    Return the items present in exactly one of `left` and `right`.

    Items only in `left` come first (in `left` order), followed by items only
    in `right` (in `right` order). Duplicates collapse to one entry.
    """
    left_items = list(dict.fromkeys(left))
    right_items = list(dict.fromkeys(right))
    left_set = set(left_items)
    right_set = set(right_items)
    return [item for item in left_items if item not in right_set] + [
        item for item in right_items if item not in left_set
    ]
