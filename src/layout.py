"""Layout facade: people and relationships in, generational tree layout out."""

import logging
import math
from dataclasses import fields, replace
from typing import Any, Callable, Iterable, Mapping

from diagnostics import WARNING, DiagnosticSink
from generations import assign_generations
from graph import build_graph, build_union_graph, place_unions
from grouping import group_by_depth
from models import Bounds, Diagnostic, LayoutOptions, Person, Relationship, TreeLayout
from placement import DEFAULT_BOUNDS, place
from relationship_index import build_index

logger = logging.getLogger(__name__)

# camelCase spellings accepted in override mappings (e.g. from JSON config)
OPTION_ALIASES = {
    "hGap": "h_gap",
    "vGap": "v_gap",
    "cardWidth": "card_width",
    "cardHeight": "card_height",
    "spouseGap": "spouse_gap",
    "generationSpacing": "generation_spacing",
    "maxParents": "max_parents",
}

_NON_NEGATIVE = ("h_gap", "spouse_gap")
_POSITIVE = ("v_gap", "card_width", "card_height", "generation_spacing")


def resolve_options(options: LayoutOptions | Mapping[str, Any] | None = None) -> LayoutOptions:
    """
    Merge caller overrides onto the default options and check them.

    Raises:
        TypeError: options of the wrong type, unknown option names, or
            non-numeric values
        ValueError: negative gaps, non-positive sizes, or max_parents < 1
    """
    if options is None:
        resolved = LayoutOptions()
    elif isinstance(options, LayoutOptions):
        resolved = replace(options)
    elif isinstance(options, Mapping):
        known = {f.name for f in fields(LayoutOptions)}
        overrides = {OPTION_ALIASES.get(k, k): v for k, v in options.items()}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise TypeError(f"Unknown layout option(s): {', '.join(unknown)}")
        resolved = LayoutOptions(**overrides)
    else:
        raise TypeError(
            f"Layout options must be LayoutOptions or a mapping, got {type(options).__name__}"
        )

    for name in _NON_NEGATIVE + _POSITIVE:
        value = getattr(resolved, name)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise TypeError(f"Layout option {name} must be a number, got {type(value).__name__}")
        if not math.isfinite(value):
            raise ValueError(f"Layout option {name} must be finite, got {value}")
        if name in _POSITIVE and value <= 0:
            raise ValueError(f"Layout option {name} must be positive, got {value}")
        if value < 0:
            raise ValueError(f"Layout option {name} must not be negative, got {value}")

    max_parents = resolved.max_parents
    if max_parents is not None:
        if isinstance(max_parents, bool) or not isinstance(max_parents, int):
            raise TypeError(
                f"Layout option max_parents must be an int or None, got {type(max_parents).__name__}"
            )
        if max_parents < 1:
            raise ValueError(f"Layout option max_parents must be at least 1, got {max_parents}")

    return resolved


class LayoutEngine:
    """
    Generational family-tree layout.

    The engine only holds its options. Every call to `generate` builds its
    own lookups, so one engine can serve several callers at once.
    """

    def __init__(self, options: LayoutOptions | Mapping[str, Any] | None = None):
        self.options = resolve_options(options)

    def generate(
        self,
        people: Iterable[Person],
        relationships: Iterable[Relationship],
        diagnostics: Callable[[Diagnostic], None] | None = None,
    ) -> TreeLayout:
        sink = DiagnosticSink(diagnostics)

        people_by_id: dict[str, Person] = {}
        for person in people:
            if person.id in people_by_id:
                sink.warning(
                    "duplicate_person",
                    f"Person id {person.id} appears more than once; keeping the first record",
                )
                continue
            people_by_id[person.id] = person

        if not people_by_id:
            return TreeLayout(
                nodes=[],
                bounds=Bounds(DEFAULT_BOUNDS.width, DEFAULT_BOUNDS.height),
                generations=0,
                diagnostics=list(sink.items),
            )

        unique_people = list(people_by_id.values())
        relationships = list(relationships)

        index = build_index(unique_people, relationships, self.options.max_parents, sink)
        depths = assign_generations(people_by_id, index, sink)
        groups_by_depth = group_by_depth(depths, people_by_id, index, people_by_id)
        placed = place(groups_by_depth, self.options, people_by_id, index)

        nodes_by_id = {node.person_id: node for node in placed.nodes}
        union_graph = build_union_graph(
            build_graph(unique_people, relationships, self.options.max_parents)
        )

        logger.debug(
            "Laid out %d people in %d generations (%d warnings)",
            len(nodes_by_id),
            placed.generations,
            sum(1 for d in sink.items if d.severity == WARNING),
        )

        return TreeLayout(
            nodes=[nodes_by_id[pid] for pid in people_by_id],
            bounds=placed.bounds,
            generations=placed.generations,
            unions=place_unions(union_graph, nodes_by_id),
            diagnostics=list(sink.items),
        )


def generate_layout(
    people: Iterable[Person],
    relationships: Iterable[Relationship],
    options: LayoutOptions | Mapping[str, Any] | None = None,
    diagnostics: Callable[[Diagnostic], None] | None = None,
) -> TreeLayout:
    """
    Compute a generational layout for a family tree.

    Pure function: identical inputs (including order) give identical output.
    Malformed genealogical data never raises; problems are reported through
    `diagnostics` and in `TreeLayout.diagnostics`. Only invalid options raise.

    Args:
        people: Person records
        relationships: parent/spouse/divorced edges between person ids
        options: LayoutOptions or a mapping of overrides (snake_case or camelCase)
        diagnostics: Optional callable receiving each Diagnostic

    Returns:
        TreeLayout with one node per distinct person, in input order
    """
    return LayoutEngine(options).generate(people, relationships, diagnostics=diagnostics)
