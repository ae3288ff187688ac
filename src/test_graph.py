"""Tests for the NetworkX graph view and union nodes."""

import pytest

from graph import build_graph, build_union_graph, get_ego_subgraph, neighborhood, place_unions
from models import LayoutNode, Person, Relationship


def P(pid, **kwargs):
    return Person(id=pid, name=pid.title(), **kwargs)


def test_build_graph_adds_people_and_typed_edges():
    G = build_graph(
        [P("a", sex="F", birth_year=1900), P("b")],
        [Relationship("a", "b", "parent"), Relationship("a", "b", "parent")],
    )

    assert set(G.nodes()) == {"a", "b"}
    assert G.nodes["a"]["person_name"] == "A"
    assert G.nodes["a"]["birth_year"] == 1900
    assert list(G.edges(keys=True)) == [("a", "b", "parent")]


def test_build_graph_skips_what_the_engine_skips():
    G = build_graph(
        [P("a"), P("b")],
        [
            Relationship("a", "ghost", "parent"),
            Relationship("a", "a", "spouse"),
            Relationship("a", "b", "friend"),
        ],
    )

    assert set(G.nodes()) == {"a", "b"}
    assert G.number_of_edges() == 0


def test_build_graph_respects_max_parents():
    rels = [Relationship(p, "c", "parent") for p in ("p1", "p2", "p3")]
    G = build_graph([P("p1"), P("p2"), P("p3"), P("c")], rels, max_parents=2)

    assert sorted(u for u, _ in G.in_edges("c")) == ["p1", "p2"]


def test_union_graph_attaches_children_to_couple():
    G = build_graph(
        [P("a"), P("b"), P("c")],
        [
            Relationship("b", "a", "spouse"),
            Relationship("a", "c", "parent"),
            Relationship("b", "c", "parent"),
        ],
    )
    H = build_union_graph(G)
    fam = ("union", "a", "b")

    assert H.nodes[fam]["node_type"] == "family"
    assert H.nodes[fam]["explicit"] is True
    assert H.nodes[fam]["divorced"] is False
    assert H.has_edge("a", fam) and H.has_edge("b", fam)
    assert list(H.successors(fam)) == ["c"]


def test_union_graph_single_parent_and_divorced_pair():
    G = build_graph(
        [P("a"), P("b"), P("c")],
        [Relationship("a", "b", "divorced"), Relationship("a", "c", "parent")],
    )
    H = build_union_graph(G)

    assert H.nodes[("union", "a", "b")]["divorced"] is True
    single = H.nodes[("union", "a")]
    assert single["explicit"] is False
    assert single["spouses"] == ("a",)
    assert list(H.successors(("union", "a"))) == ["c"]


def test_divorced_then_remarried_is_not_divorced():
    G = build_graph(
        [P("a"), P("b")],
        [Relationship("a", "b", "divorced"), Relationship("b", "a", "spouse")],
    )
    H = build_union_graph(G)

    assert H.nodes[("union", "a", "b")]["divorced"] is False


def test_place_unions_uses_partner_midpoint():
    G = build_graph(
        [P("a"), P("b"), P("c")],
        [
            Relationship("a", "b", "spouse"),
            Relationship("a", "c", "parent"),
            Relationship("b", "c", "parent"),
        ],
    )
    nodes = {
        "a": LayoutNode("a", -90.0, 0.0, 0),
        "b": LayoutNode("b", 90.0, 0.0, 0),
        "c": LayoutNode("c", 0.0, 210.0, 1),
    }
    [union] = place_unions(build_union_graph(G), nodes)

    assert union.partners == ("a", "b")
    assert union.children == ("c",)
    assert (union.x, union.y, union.depth) == (0.0, 0.0, 0)


def test_ego_subgraph_unknown_center():
    with pytest.raises(ValueError):
        get_ego_subgraph(build_graph([P("a")], []), "missing")


def test_neighborhood_filters_records():
    people = [P("a"), P("b"), P("c"), P("d")]
    rels = [
        Relationship("a", "b", "parent"),
        Relationship("b", "c", "parent"),
        Relationship("c", "d", "parent"),
    ]
    kept_people, kept_rels = neighborhood(people, rels, "a", radius=1)

    assert [p.id for p in kept_people] == ["a", "b"]
    assert kept_rels == [Relationship("a", "b", "parent")]
