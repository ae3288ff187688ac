"""Clustering of one generation into spouse pairs and sibling sets."""

from typing import Iterable, Mapping

from models import FamilyGroup, Person
from relationship_index import RelationshipIndex


def birth_year_key(person: Person | None) -> tuple[bool, int]:
    """Sort key placing earlier birth years first and unknown years last."""
    year = person.birth_year if person is not None else None
    return (year is None, year if year is not None else 0)


def group_generation(
    person_ids: list[str], index: RelationshipIndex, depth: int = 0
) -> list[FamilyGroup]:
    """
    Split the people of one generation into family groups.

    Single greedy pass in the given order. Each unvisited person seeds a group
    and pulls in, as one unit, their spouses from the same generation. Every
    other unvisited person who shares at least one parent with a member of
    the seed unit joins as a further unit together with their own spouses.

    A person with two partners sits between them. Any further partners follow
    on the right.

    Groups come back in the order they were discovered.
    """
    in_generation = set(person_ids)
    visited: set[str] = set()
    groups: list[FamilyGroup] = []

    def take_unit(person_id: str) -> tuple[str, ...]:
        partners = [
            spouse_id
            for spouse_id in index.spouses(person_id)
            if spouse_id in in_generation and spouse_id not in visited
        ]
        visited.add(person_id)
        visited.update(partners)
        if len(partners) >= 2:
            return (partners[0], person_id, *partners[1:])
        return (person_id, *partners)

    for person_id in person_ids:
        if person_id in visited:
            continue

        seed_unit = take_unit(person_id)
        group = FamilyGroup(depth=depth, units=[seed_unit])

        # married-in partners bring no parents, so look through the whole unit
        parents = {p for member in seed_unit for p in index.parents(member)}
        if parents:
            for other_id in person_ids:
                if other_id in visited:
                    continue
                if parents.intersection(index.parents(other_id)):
                    group.units.append(take_unit(other_id))

        groups.append(group)

    return groups


def order_units(group: FamilyGroup, people_by_id: Mapping[str, Person]) -> FamilyGroup:
    """Return a copy of `group` with units sorted by the birth year of their first member."""
    units = sorted(group.units, key=lambda unit: birth_year_key(people_by_id.get(unit[0])))
    return FamilyGroup(depth=group.depth, units=units)


def group_by_depth(
    depths: Mapping[str, int],
    order: Iterable[str],
    index: RelationshipIndex,
    people_by_id: Mapping[str, Person],
) -> dict[int, list[FamilyGroup]]:
    """
    Group every generation, keeping input order inside each row.

    Returns:
        Mapping of depth (ascending) to its family groups, units already
        ordered by birth year
    """
    rows: dict[int, list[str]] = {}
    for person_id in order:
        rows.setdefault(depths[person_id], []).append(person_id)

    return {
        depth: [order_units(g, people_by_id) for g in group_generation(rows[depth], index, depth)]
        for depth in sorted(rows)
    }
