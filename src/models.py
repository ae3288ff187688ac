"""Data classes for family tree layout entities."""

from dataclasses import asdict, dataclass, field
from typing import Any

PARENT = "parent"
SPOUSE = "spouse"
DIVORCED = "divorced"

RELATIONSHIP_TYPES = (PARENT, SPOUSE, DIVORCED)
PARTNER_TYPES = (SPOUSE, DIVORCED)


@dataclass(frozen=True)
class Person:
    id: str
    name: str
    given_name: str | None = None
    surname: str | None = None
    sex: str | None = None  # styling only, never used for layout
    birth_year: int | None = None
    death_year: int | None = None


@dataclass(frozen=True)
class Relationship:
    person1_id: str  # parent for "parent" edges
    person2_id: str  # child for "parent" edges
    relationship_type: str  # parent, spouse, divorced


@dataclass
class LayoutOptions:
    h_gap: float = 100
    v_gap: float = 140
    card_width: float = 150
    card_height: float = 180
    spouse_gap: float = 30
    generation_spacing: float = 1.5  # rows sit further apart than v_gap
    max_parents: int | None = None  # None counts every recorded parent

    @property
    def vertical_gap(self) -> float:
        return self.v_gap * self.generation_spacing


@dataclass(frozen=True)
class Diagnostic:
    severity: str  # "info" or "warning"
    code: str
    message: str


@dataclass
class LayoutNode:
    person_id: str
    x: float  # horizontal centre of the card
    y: float  # top of the generation row
    depth: int


@dataclass
class FamilyGroup:
    depth: int
    units: list[tuple[str, ...]] = field(default_factory=list)

    @property
    def members(self) -> list[str]:
        return [pid for unit in self.units for pid in unit]


@dataclass
class UnionNode:
    partners: tuple[str, ...]
    children: tuple[str, ...]
    x: float
    y: float
    depth: int
    explicit: bool  # partners have a recorded spouse/divorced relationship
    divorced: bool = False


@dataclass
class Bounds:
    width: float
    height: float


@dataclass
class TreeLayout:
    nodes: list[LayoutNode]
    bounds: Bounds
    generations: int
    unions: list[UnionNode] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)

    def depths(self) -> dict[str, int]:
        return {node.person_id: node.depth for node in self.nodes}

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
