"""NetworkX graph building and operations."""

import itertools
from typing import Iterable, Mapping

import networkx as nx

from models import (
    DIVORCED,
    PARENT,
    PARTNER_TYPES,
    RELATIONSHIP_TYPES,
    LayoutNode,
    Person,
    Relationship,
    UnionNode,
)


def build_graph(
    people: Iterable[Person],
    relationships: Iterable[Relationship],
    max_parents: int | None = None,
) -> nx.MultiDiGraph:
    """
    Build a NetworkX multigraph from person and relationship records.

    Edges are keyed by relationship type, so a pair recorded as both divorced
    and spouse keeps both edges while repeated records of one type collapse.
    Relationships the layout engine would skip (dangling ids, self links,
    unknown types, parents beyond `max_parents`) are left out silently.
    """
    G = nx.MultiDiGraph()

    for person in people:
        if person.id in G:
            continue
        G.add_node(
            person.id,
            person_name=person.name,
            sex=person.sex,
            birth_year=person.birth_year,
            death_year=person.death_year,
            given_name=person.given_name,
            surname=person.surname,
        )

    for rel in relationships:
        a, b, kind = rel.person1_id, rel.person2_id, rel.relationship_type
        if a not in G or b not in G or a == b or kind not in RELATIONSHIP_TYPES:
            continue
        if kind == PARENT and max_parents is not None:
            parents = [u for u, _, k in G.in_edges(b, keys=True) if k == PARENT]
            if a not in parents and len(parents) >= max_parents:
                continue
        G.add_edge(a, b, key=kind, relationship_type=kind)

    return G


def get_ego_subgraph(G: nx.MultiDiGraph, center_id: str, radius: int = 2) -> nx.MultiDiGraph:
    """
    Extract a subgraph containing nodes within a given degree of a center node.

    Args:
        G: The full graph
        center_id: The person ID to center the subgraph on
        radius: Maximum distance from center (default 2)

    Returns:
        A subgraph containing only nodes within `radius` edges of `center_id`
    """
    if center_id not in G:
        raise ValueError(f"Person ID {center_id} not found in graph")

    # Undirected view so parents, children and spouses all count as neighbours
    undirected = G.to_undirected()
    ego = nx.ego_graph(undirected, center_id, radius=radius)

    return G.subgraph(ego.nodes()).copy()


def neighborhood(
    people: list[Person],
    relationships: list[Relationship],
    center_id: str,
    radius: int = 2,
) -> tuple[list[Person], list[Relationship]]:
    """Restrict input records to the people within `radius` relationships of `center_id`."""
    sub = get_ego_subgraph(build_graph(people, relationships), center_id, radius=radius)
    keep = set(sub.nodes())
    return (
        [p for p in people if p.id in keep],
        [r for r in relationships if r.person1_id in keep and r.person2_id in keep],
    )


def _pair(a: str, b: str) -> tuple[str, str]:
    return tuple(sorted([a, b], key=str))


def build_union_graph(G: nx.MultiDiGraph) -> nx.DiGraph:
    """
    Build a layout graph using the union-node model.

    Creates "family nodes" (union nodes) that connect partners to their
    children:
    - every spouse/divorced pair gets a family node, children or not
    - each child hangs from the family node of a partner pair among its
      parents, or else from a family node made of all its recorded parents

    Family node ids are tuples ("union", *partners) so they never clash with
    person ids.

    Args:
        G: Graph from build_graph with parent/spouse/divorced edges

    Returns:
        A new graph; family nodes carry `spouses`, `explicit` and `divorced`
    """
    H = nx.DiGraph()

    for n, data in G.nodes(data=True):
        H.add_node(n, node_type="person", **data)

    # Partner pairs in edge order, with every type recorded for the pair
    pair_types: dict[tuple[str, str], set[str]] = {}
    for u, v, kind in G.edges(keys=True):
        if kind in PARTNER_TYPES:
            pair_types.setdefault(_pair(u, v), set()).add(kind)

    fam_for_pair: dict[tuple[str, str], tuple] = {}
    for (a, b), kinds in pair_types.items():
        fam_id = ("union", a, b)
        fam_for_pair[(a, b)] = fam_id
        H.add_node(
            fam_id,
            node_type="family",
            spouses=(a, b),
            explicit=True,
            divorced=kinds == {DIVORCED},
        )
        H.add_edge(a, fam_id, edge_type="spouse_to_family")
        H.add_edge(b, fam_id, edge_type="spouse_to_family")

    parents_by_child: dict[str, list[str]] = {}
    for u, v, kind in G.edges(keys=True):
        if kind == PARENT:
            parents_by_child.setdefault(v, []).append(u)

    for child, parents in parents_by_child.items():
        parents = list(dict.fromkeys(parents))

        fam_id = None
        if len(parents) >= 2:
            for p1, p2 in itertools.combinations(parents, 2):
                if _pair(p1, p2) in fam_for_pair:
                    fam_id = fam_for_pair[_pair(p1, p2)]
                    break

        if fam_id is None:
            members = tuple(sorted(parents, key=str))
            fam_id = ("union",) + members
            if fam_id not in H:
                H.add_node(fam_id, node_type="family", spouses=members, explicit=False, divorced=False)
                for p in members:
                    H.add_edge(p, fam_id, edge_type="spouse_to_family")

        H.add_edge(fam_id, child, edge_type="family_to_child")

    return H


def place_unions(H: nx.DiGraph, nodes: Mapping[str, LayoutNode]) -> list[UnionNode]:
    """
    Position every family node of a union graph against placed person nodes.

    The union sits at the mean x of its placed partners, on the row of the
    deepest of them. Unions without any placed partner are dropped.
    """
    unions: list[UnionNode] = []
    for fam_id, data in H.nodes(data=True):
        if data.get("node_type") != "family":
            continue

        partners = tuple(p for p in data["spouses"] if p in nodes)
        if not partners:
            continue

        placed = [nodes[p] for p in partners]
        deepest = max(placed, key=lambda node: node.depth)
        children = tuple(
            c
            for c in H.successors(fam_id)
            if c in nodes and H.edges[fam_id, c].get("edge_type") == "family_to_child"
        )
        unions.append(
            UnionNode(
                partners=partners,
                children=children,
                x=sum(node.x for node in placed) / len(placed),
                y=deepest.y,
                depth=deepest.depth,
                explicit=data["explicit"],
                divorced=data["divorced"],
            )
        )

    return unions
