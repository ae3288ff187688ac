"""Coordinate placement of family groups into generation rows."""

from typing import Mapping

from grouping import birth_year_key
from models import Bounds, FamilyGroup, LayoutNode, LayoutOptions, Person, TreeLayout
from relationship_index import RelationshipIndex

DEFAULT_BOUNDS = Bounds(width=800, height=600)


def order_groups(
    groups: list[FamilyGroup], people_by_id: Mapping[str, Person]
) -> list[FamilyGroup]:
    """Sort groups by the earliest known birth year among their members, unknown last."""

    def key(group: FamilyGroup) -> tuple[bool, int]:
        return min(birth_year_key(people_by_id.get(pid)) for pid in group.members)

    return sorted(groups, key=key)


def place_row(
    groups: list[FamilyGroup],
    depth: int,
    options: LayoutOptions,
    index: RelationshipIndex | None = None,
) -> list[LayoutNode]:
    """
    Walk one generation left to right.

    Partners inside a unit sit `spouse_gap` apart, units of the same group
    `h_gap` apart, and separate groups get an extra `h_gap` between them.
    With an index, neighbours in a unit who are not partners of each other
    (two spouses of the same person) get `h_gap` instead of `spouse_gap`.
    The first card is centred on x = 0; members keep their group order.
    """
    y = depth * options.vertical_gap
    nodes: list[LayoutNode] = []
    x: float | None = None

    for group in groups:
        for unit_pos, unit in enumerate(group.units):
            for member_pos, person_id in enumerate(unit):
                if x is None:
                    x = 0.0
                elif member_pos > 0:
                    left = unit[member_pos - 1]
                    if index is None or left in index.spouses(person_id):
                        x += options.card_width + options.spouse_gap
                    else:
                        x += options.card_width + options.h_gap
                elif unit_pos > 0:
                    x += options.card_width + options.h_gap
                else:
                    x += options.card_width + 2 * options.h_gap
                nodes.append(LayoutNode(person_id=person_id, x=x, y=y, depth=depth))

    return nodes


def place(
    groups_by_depth: Mapping[int, list[FamilyGroup]],
    options: LayoutOptions,
    people_by_id: Mapping[str, Person] | None = None,
    index: RelationshipIndex | None = None,
) -> TreeLayout:
    """
    Lay out every generation and centre the diagram on x = 0.

    Args:
        groups_by_depth: Family groups per depth, members already ordered
        options: Gaps and card size
        people_by_id: Birth years for ordering groups; groups keep their
            given order when omitted
        index: Partner lookups for spacing inside units; every neighbour in a
            unit counts as a partner when omitted

    Returns:
        A TreeLayout with nodes in placement order (row by row)
    """
    nodes: list[LayoutNode] = []
    for depth in sorted(groups_by_depth):
        groups = groups_by_depth[depth]
        if people_by_id is not None:
            groups = order_groups(groups, people_by_id)
        nodes.extend(place_row(groups, depth, options, index))

    if not nodes:
        return TreeLayout(nodes=[], bounds=Bounds(DEFAULT_BOUNDS.width, DEFAULT_BOUNDS.height), generations=0)

    min_x = min(node.x for node in nodes)
    max_x = max(node.x for node in nodes)
    offset = -(min_x + max_x) / 2
    for node in nodes:
        node.x += offset

    generations = len({node.depth for node in nodes})
    bounds = Bounds(
        width=max_x - min_x + options.card_width,
        height=generations * options.vertical_gap + options.card_height,
    )
    return TreeLayout(nodes=nodes, bounds=bounds, generations=generations)
