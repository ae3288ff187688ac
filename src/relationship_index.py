"""Adjacency lookups (parents, children, spouses) built from a flat relationship list."""

from dataclasses import dataclass, field
from typing import Iterable

from diagnostics import DiagnosticSink
from models import PARENT, PARTNER_TYPES, Person, Relationship


@dataclass
class RelationshipIndex:
    parents_of: dict[str, list[str]] = field(default_factory=dict)
    children_of: dict[str, list[str]] = field(default_factory=dict)
    spouses_of: dict[str, list[str]] = field(default_factory=dict)

    def parents(self, person_id: str) -> list[str]:
        return self.parents_of.get(person_id, [])

    def children(self, person_id: str) -> list[str]:
        return self.children_of.get(person_id, [])

    def spouses(self, person_id: str) -> list[str]:
        return self.spouses_of.get(person_id, [])


def _append_unique(mapping: dict[str, list[str]], key: str, value: str) -> bool:
    values = mapping.setdefault(key, [])
    if value in values:
        return False
    values.append(value)
    return True


def build_index(
    people: Iterable[Person],
    relationships: Iterable[Relationship],
    max_parents: int | None = None,
    sink: DiagnosticSink | None = None,
) -> RelationshipIndex:
    """
    Build parent, child and spouse lookups for the given people.

    Every person id gets an entry (possibly empty) in each mapping. Lists keep
    the order in which relationships were supplied and never hold duplicates,
    so a pair that was divorced and then remarried counts once.

    Relationships that cannot be honoured are skipped and reported:
    - an endpoint that is not one of `people` (dangling reference)
    - a person related to themself
    - an unknown relationship type
    - a parent beyond `max_parents` for the same child, when a limit is set

    Args:
        people: Person records; ids must be unique
        relationships: Typed edges between person ids
        max_parents: Number of recorded parents that count per child (None = all)
        sink: Receives diagnostics for skipped relationships

    Returns:
        A RelationshipIndex. The inputs are not modified.
    """
    sink = sink or DiagnosticSink()
    index = RelationshipIndex()

    known: set[str] = set()
    for person in people:
        known.add(person.id)
        index.parents_of.setdefault(person.id, [])
        index.children_of.setdefault(person.id, [])
        index.spouses_of.setdefault(person.id, [])

    for rel in relationships:
        a, b = rel.person1_id, rel.person2_id
        missing = [pid for pid in (a, b) if pid not in known]
        if missing:
            sink.warning(
                "dangling_reference",
                f"Skipping {rel.relationship_type} relationship {a} -> {b}: "
                f"unknown person id(s) {', '.join(map(str, missing))}",
            )
            continue
        if a == b:
            sink.warning(
                "self_reference",
                f"Skipping {rel.relationship_type} relationship of {a} to themself",
            )
            continue

        if rel.relationship_type == PARENT:
            if a in index.parents_of[b]:
                continue
            if max_parents is not None and len(index.parents_of[b]) >= max_parents:
                sink.warning(
                    "extra_parent",
                    f"Ignoring parent {a} of {b}: only the first {max_parents} "
                    f"recorded parent(s) count",
                )
                continue
            _append_unique(index.parents_of, b, a)
            _append_unique(index.children_of, a, b)
        elif rel.relationship_type in PARTNER_TYPES:
            _append_unique(index.spouses_of, a, b)
            _append_unique(index.spouses_of, b, a)
        else:
            sink.warning(
                "unknown_relationship_type",
                f"Skipping relationship {a} -> {b} of unknown type {rel.relationship_type!r}",
            )

    return index
