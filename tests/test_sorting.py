from __future__ import annotations

from termdeck.models import Project, SortMode
from termdeck.sorting import SORT_LABELS, next_sort_mode, sort_projects


def make(name: str, insert_order: int, last_used: int = 0) -> Project:
    return Project(name=name, path=f"/src/{name}", insert_order=insert_order, last_used=last_used)


def names(projects: list[Project]) -> list[str]:
    return [project.name for project in projects]


def test_modes_order_two_projects() -> None:
    a = make("beta", 0, last_used=10)
    b = make("Alpha", 1, last_used=20)

    assert names(sort_projects([a, b], SortMode.ALPHABETICAL)) == ["Alpha", "beta"]
    assert names(sort_projects([a, b], SortMode.MOST_RECENTLY_USED)) == ["Alpha", "beta"]
    assert names(sort_projects([b, a], SortMode.MANUAL)) == ["beta", "Alpha"]


def test_alphabetical_ignores_case() -> None:
    projects = [make("zeta", 0), make("Mu", 1), make("alpha", 2)]

    assert names(sort_projects(projects, SortMode.ALPHABETICAL)) == ["alpha", "Mu", "zeta"]


def test_most_recently_used_keeps_prior_order_on_ties() -> None:
    first = make("first", 0, last_used=5)
    second = make("second", 1, last_used=5)
    newest = make("newest", 2, last_used=9)

    ordered = sort_projects([first, second, newest], SortMode.MOST_RECENTLY_USED)

    assert names(ordered) == ["newest", "first", "second"]


def test_sorting_leaves_inputs_untouched() -> None:
    projects = [make("b", 3, last_used=1), make("a", 7, last_used=2)]
    original = list(projects)

    sort_projects(projects, SortMode.ALPHABETICAL)

    assert projects == original
    assert [p.insert_order for p in projects] == [3, 7]
    assert [p.last_used for p in projects] == [1, 2]


def test_cycle_wraps_around() -> None:
    assert next_sort_mode(SortMode.MANUAL) is SortMode.ALPHABETICAL
    assert next_sort_mode(SortMode.ALPHABETICAL) is SortMode.MOST_RECENTLY_USED
    assert next_sort_mode(SortMode.MOST_RECENTLY_USED) is SortMode.MANUAL


def test_parse_falls_back_to_manual() -> None:
    assert SortMode.parse("alpha") is SortMode.ALPHABETICAL
    assert SortMode.parse("mru") is SortMode.MOST_RECENTLY_USED
    assert SortMode.parse("recent") is SortMode.MANUAL
    assert SortMode.parse(None) is SortMode.MANUAL


def test_every_mode_has_an_indicator_label() -> None:
    assert SORT_LABELS[SortMode.MANUAL] == "Sort: Manual"
    assert SORT_LABELS[SortMode.ALPHABETICAL] == "Sort: A-Z"
    assert SORT_LABELS[SortMode.MOST_RECENTLY_USED] == "Sort: Recent"
