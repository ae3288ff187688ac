"""Tests for data-quality validation."""

from graph import build_graph
from models import Bounds, LayoutNode, Person, Relationship, TreeLayout
from validation import find_overlaps, validate_graph


def P(pid, birth=None, death=None):
    return Person(id=pid, name=pid.title(), birth_year=birth, death_year=death)


def parent(p, c):
    return Relationship(p, c, "parent")


def test_clean_data_has_no_warnings():
    G = build_graph(
        [P("a", 1900), P("b", 1930)], [parent("a", "b"), Relationship("a", "b", "spouse")]
    )
    assert validate_graph(G) == []


def test_cycle_detected():
    warnings = validate_graph(build_graph([P("a"), P("b")], [parent("a", "b"), parent("b", "a")]))

    assert len(warnings) == 1
    assert warnings[0].startswith("Cycle detected")


def test_child_born_before_parent():
    warnings = validate_graph(build_graph([P("a", 1950), P("b", 1940)], [parent("a", "b")]))
    assert warnings == ["Impossible: B born before parent A"]


def test_young_parent_is_suspicious():
    warnings = validate_graph(build_graph([P("a", 1950), P("b", 1960)], [parent("a", "b")]))
    assert warnings == ["Suspicious: A was less than 12 years old when B was born"]


def test_death_before_birth():
    warnings = validate_graph(build_graph([P("a", 1950, 1900)], []))
    assert warnings == ["Impossible: A died before being born"]


def test_more_than_two_parents():
    people = [P("p1"), P("p2"), P("p3"), P("c")]
    rels = [parent(p, "c") for p in ("p1", "p2", "p3")]

    assert validate_graph(build_graph(people, rels)) == ["Unusual: C has 3 recorded parents"]


def make_layout(*nodes):
    return TreeLayout(nodes=list(nodes), bounds=Bounds(0, 0), generations=1)


def test_find_overlaps_reports_same_row_pairs():
    layout = make_layout(
        LayoutNode("a", 0.0, 0.0, 0),
        LayoutNode("b", 100.0, 0.0, 0),
        LayoutNode("c", 400.0, 0.0, 0),
        LayoutNode("d", 50.0, 210.0, 1),
    )
    assert find_overlaps(layout, 150) == [("a", "b")]


def test_touching_cards_do_not_overlap():
    layout = make_layout(LayoutNode("a", 0.0, 0.0, 0), LayoutNode("b", 150.0, 0.0, 0))
    assert find_overlaps(layout, 150) == []
