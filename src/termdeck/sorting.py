"""Ordering strategies for the project sidebar."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from functools import cmp_to_key

from .models import Project, SortMode

LOG = logging.getLogger(__name__)

Comparator = Callable[[Project, Project], int]

SORT_LABELS: dict[SortMode, str] = {
    SortMode.MANUAL: "Sort: Manual",
    SortMode.ALPHABETICAL: "Sort: A-Z",
    SortMode.MOST_RECENTLY_USED: "Sort: Recent",
}

_CYCLE = (SortMode.MANUAL, SortMode.ALPHABETICAL, SortMode.MOST_RECENTLY_USED)


def compare_manual(a: Project, b: Project) -> int:
    return a.insert_order - b.insert_order


def compare_alphabetical(a: Project, b: Project) -> int:
    left = a.name.casefold()
    right = b.name.casefold()
    return (left > right) - (left < right)


def compare_most_recently_used(a: Project, b: Project) -> int:
    # Descending; equal timestamps compare equal and keep their prior order.
    return (a.last_used < b.last_used) - (a.last_used > b.last_used)


COMPARATORS: dict[SortMode, Comparator] = {
    SortMode.MANUAL: compare_manual,
    SortMode.ALPHABETICAL: compare_alphabetical,
    SortMode.MOST_RECENTLY_USED: compare_most_recently_used,
}


def sort_projects(projects: Iterable[Project], mode: SortMode) -> list[Project]:
    """Return ``projects`` in display order for ``mode``.

    The input is never mutated; ``insert_order`` and ``last_used`` are only read.
    """

    ordered = sorted(projects, key=cmp_to_key(COMPARATORS[mode]))
    LOG.debug("Sorted %d project(s) by %s", len(ordered), mode.name)
    return ordered


def next_sort_mode(mode: SortMode) -> SortMode:
    """Manual -> Alphabetical -> MostRecentlyUsed -> Manual."""

    return _CYCLE[(_CYCLE.index(mode) + 1) % len(_CYCLE)]
