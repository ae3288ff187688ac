"""Tests for family grouping within a generation."""

from grouping import birth_year_key, group_by_depth, group_generation, order_units
from models import FamilyGroup, Person, Relationship
from relationship_index import build_index


def setup(specs, rels):
    persons = [Person(id=pid, name=pid, birth_year=year) for pid, year in specs]
    return {p.id: p for p in persons}, build_index(persons, rels)


def test_singleton_group_for_unrelated_person():
    _, index = setup([("d", None)], [])
    groups = group_generation(["d"], index)

    assert groups == [FamilyGroup(depth=0, units=[("d",)])]


def test_spouses_form_one_unit():
    _, index = setup([("a", None), ("b", None)], [Relationship("a", "b", "spouse")])
    groups = group_generation(["a", "b"], index)

    assert [g.units for g in groups] == [[("a", "b")]]


def test_divorced_and_remarried_pair_is_not_doubled():
    rels = [Relationship("a", "b", "divorced"), Relationship("b", "a", "spouse")]
    _, index = setup([("a", None), ("b", None)], rels)

    assert group_generation(["a", "b"], index)[0].members == ["a", "b"]


def test_siblings_and_their_spouses_join_the_seed_group():
    rels = [
        Relationship("p", "e", "parent"),
        Relationship("p", "f", "parent"),
        Relationship("f", "g", "spouse"),
    ]
    _, index = setup([("p", None), ("e", None), ("f", None), ("g", None), ("h", None)], rels)
    groups = group_generation(["e", "f", "g", "h"], index, depth=1)

    assert [g.units for g in groups] == [[("e",), ("f", "g")], [("h",)]]
    assert all(g.depth == 1 for g in groups)


def test_half_siblings_share_a_group():
    rels = [
        Relationship("a", "e", "parent"),
        Relationship("a", "f", "parent"),
        Relationship("b", "f", "parent"),
    ]
    _, index = setup([("a", None), ("b", None), ("e", None), ("f", None)], rels)

    assert group_generation(["e", "f"], index)[0].members == ["e", "f"]


def test_spouse_outside_generation_is_not_pulled_in():
    _, index = setup([("a", None), ("b", None)], [Relationship("a", "b", "spouse")])

    assert [g.units for g in group_generation(["a"], index)] == [[("a",)]]


def test_units_ordered_by_birth_year_unknown_last():
    people, _ = setup([("x", None), ("y", 1960), ("z", 1950)], [])
    group = FamilyGroup(depth=0, units=[("x",), ("y",), ("z",)])

    assert order_units(group, people).units == [("z",), ("y",), ("x",)]
    assert group.units == [("x",), ("y",), ("z",)]


def test_birth_year_key_handles_missing_person():
    assert birth_year_key(None) == (True, 0)
    assert birth_year_key(Person(id="a", name="a", birth_year=1900)) == (False, 1900)


def test_group_by_depth_splits_rows():
    rels = [Relationship("p", "f", "parent"), Relationship("p", "e", "parent")]
    people, index = setup([("p", 1930), ("e", 1960), ("f", 1955)], rels)
    depths = {"p": 0, "e": 1, "f": 1}

    rows = group_by_depth(depths, ["p", "e", "f"], index, people)

    assert list(rows) == [0, 1]
    assert rows[0][0].members == ["p"]
    assert rows[1][0].units == [("f",), ("e",)]


def test_married_in_partner_listed_first_still_gathers_siblings():
    rels = [
        Relationship("g", "s", "parent"),
        Relationship("g", "b", "parent"),
        Relationship("m", "s", "spouse"),
    ]
    _, index = setup([("g", None), ("m", None), ("s", None), ("b", None)], rels)

    assert [g.units for g in group_generation(["m", "s", "b"], index, depth=1)] == [
        [("m", "s"), ("b",)]
    ]


def test_person_with_two_partners_sits_between_them():
    rels = [Relationship("a", "b", "spouse"), Relationship("a", "c", "divorced")]
    _, index = setup([("a", None), ("b", None), ("c", None)], rels)

    assert [g.units for g in group_generation(["a", "b", "c"], index)] == [[("b", "a", "c")]]
