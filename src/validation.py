"""Data-quality checks for family tree input and finished layouts."""

import networkx as nx

from models import PARENT, TreeLayout

MIN_PARENT_AGE = 12


def validate_graph(G: nx.MultiDiGraph) -> list[str]:
    """
    Validate the family tree graph for:
    - Cycles in parent-child relationships
    - Impossible ages (child born before parent)
    - Suspiciously young parents
    - Death before birth
    - More than two recorded parents

    Returns a list of warning messages.
    """
    warnings: list[str] = []

    # Parent edges only; spouse edges are symmetric and would always cycle
    parent_graph = nx.DiGraph()
    parent_graph.add_nodes_from(G.nodes())
    parent_graph.add_edges_from((u, v) for u, v, k in G.edges(keys=True) if k == PARENT)

    try:
        cycle = nx.find_cycle(parent_graph, orientation="original")
        cycle_nodes = [edge[0] for edge in cycle]
        warnings.append(f"Cycle detected in parent-child relationships: {cycle_nodes}")
    except nx.NetworkXNoCycle:
        pass

    for parent, child in parent_graph.edges():
        parent_data = G.nodes[parent]
        child_data = G.nodes[child]

        parent_birth = parent_data.get("birth_year")
        child_birth = child_data.get("birth_year")

        if parent_birth is None or child_birth is None:
            continue
        if child_birth < parent_birth:
            warnings.append(
                f"Impossible: {child_data.get('person_name')} born before parent "
                f"{parent_data.get('person_name')}"
            )
        elif child_birth - parent_birth < MIN_PARENT_AGE:
            warnings.append(
                f"Suspicious: {parent_data.get('person_name')} was less than {MIN_PARENT_AGE} "
                f"years old when {child_data.get('person_name')} was born"
            )

    for node, data in G.nodes(data=True):
        birth = data.get("birth_year")
        death = data.get("death_year")
        if birth is not None and death is not None and death < birth:
            warnings.append(f"Impossible: {data.get('person_name')} died before being born")

        parent_count = parent_graph.in_degree(node)
        if parent_count > 2:
            warnings.append(
                f"Unusual: {data.get('person_name')} has {parent_count} recorded parents"
            )

    return warnings


def find_overlaps(layout: TreeLayout, card_width: float) -> list[tuple[str, str]]:
    """
    Return pairs of same-generation nodes whose cards overlap horizontally.

    Cards are `card_width` wide and centred on their node x. Cards that only
    touch do not count as overlapping.
    """
    rows: dict[int, list] = {}
    for node in layout.nodes:
        rows.setdefault(node.depth, []).append(node)

    overlaps: list[tuple[str, str]] = []
    for depth in sorted(rows):
        row = sorted(rows[depth], key=lambda node: node.x)
        for i, left in enumerate(row):
            for right in row[i + 1 :]:
                if right.x - left.x >= card_width:
                    break
                overlaps.append((left.person_id, right.person_id))

    return overlaps
