"""Generation (depth) assignment by constraint propagation over parent and spouse edges."""

from typing import Iterable

from diagnostics import DiagnosticSink
from relationship_index import RelationshipIndex


def _propagate(
    frontier: list[str], depths: dict[str, int], index: RelationshipIndex, budget: int
) -> tuple[int, bool]:
    """
    Push depths outward from `frontier` until nothing changes.

    A child is raised to one below its deepest placed parent and a partner is
    raised to the deeper partner's row. Depths only ever grow, so the larger
    depth wins whenever the data implies two different rows for one person.

    Returns the number of rounds used and whether propagation settled before
    `budget` rounds ran out.
    """
    rounds = 0
    while frontier:
        if rounds >= budget:
            return rounds, False
        rounds += 1

        changed: dict[str, None] = {}
        for person_id in frontier:
            depth = depths[person_id]
            for child_id in index.children(person_id):
                if depths.get(child_id, -1) < depth + 1:
                    depths[child_id] = depth + 1
                    changed[child_id] = None
            for spouse_id in index.spouses(person_id):
                if depths.get(spouse_id, -1) < depth:
                    depths[spouse_id] = depth
                    changed[spouse_id] = None
        frontier = list(changed)

    return rounds, True


def compact_depths(depths: dict[str, int]) -> dict[str, int]:
    """Renumber depths to 0..n-1 keeping their relative order."""
    rank = {value: i for i, value in enumerate(sorted(set(depths.values())))}
    return {person_id: rank[depth] for person_id, depth in depths.items()}


def assign_generations(
    person_ids: Iterable[str],
    index: RelationshipIndex,
    sink: DiagnosticSink | None = None,
) -> dict[str, int]:
    """
    Compute a generation row for every person.

    Roots (people without recorded parents) start at depth 0. Depth then flows
    down parent edges as max(depth(parent) + 1) and across spouse/divorced
    edges so that partners share a row. When nobody lacks parents the data is
    fully cyclic and everyone starts as a root.

    Anyone left unplaced once propagation settles can only be reached through
    a parent cycle; they are seeded at depth 0 and propagation resumes.

    Propagation is capped at len(person_ids) + 1 rounds, which any acyclic
    input settles within. Hitting the cap keeps the last snapshot and reports
    a `non_convergence` warning instead of raising.

    Args:
        person_ids: Ids to place, in input order
        index: Relationship lookups for the same people
        sink: Receives diagnostics

    Returns:
        Mapping of person id to depth, compacted so rows are 0..n-1
    """
    sink = sink or DiagnosticSink()
    order = list(dict.fromkeys(person_ids))
    if not order:
        return {}

    budget = len(order) + 1

    roots = [pid for pid in order if not index.parents(pid)]
    if not roots:
        sink.info(
            "no_roots",
            "Every person has recorded parents; treating all people as roots at depth 0",
        )
        roots = order

    depths = {pid: 0 for pid in roots}
    used, converged = _propagate(roots, depths, index, budget)

    if converged:
        unplaced = [pid for pid in order if pid not in depths]
        if unplaced:
            sink.warning(
                "unreachable_people",
                f"{len(unplaced)} people are only reachable through a parent cycle; "
                f"seeding them at depth 0",
            )
            for pid in unplaced:
                depths[pid] = 0
            _, converged = _propagate(unplaced, depths, index, budget - used)

    if not converged:
        sink.warning(
            "non_convergence",
            f"Generation assignment did not settle within {budget} rounds; "
            f"parent/spouse relationships are likely cyclic, using the last computed depths",
        )

    return compact_depths({pid: depths.get(pid, 0) for pid in order})
