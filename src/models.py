"""Data classes for family graph entities."""

from dataclasses import dataclass, field

# Roles (drive banding and border styling)
ROLE_ME = "me"
ROLE_SPOUSE = "spouse"
ROLE_PARENT = "parent"
ROLE_GRANDPARENT = "grandparent"
ROLE_GREAT_GRANDPARENT = "great_grandparent"
ROLE_CHILD = "child"
ROLE_SIBLING = "sibling"
ROLE_PET = "pet"

ROLES = (
    ROLE_ME,
    ROLE_SPOUSE,
    ROLE_PARENT,
    ROLE_GRANDPARENT,
    ROLE_GREAT_GRANDPARENT,
    ROLE_CHILD,
    ROLE_SIBLING,
    ROLE_PET,
)
ANCESTOR_ROLES = (ROLE_PARENT, ROLE_GRANDPARENT, ROLE_GREAT_GRANDPARENT)

# Node types (drive node size)
TYPE_HUMAN = "human"
TYPE_PET = "pet"

LIVING = "living"
DECEASED = "deceased"

# Edge types
PARENT_CHILD = "parent_child"  # source is the parent, target is the child
SPOUSE = "spouse"
SIBLING = "sibling"
PET_OWNER = "pet_owner"
GRANDPARENT_GRANDCHILD = "grandparent_grandchild"
SIBLING_INFERRED = "sibling_inferred"

EDGE_TYPES = (PARENT_CHILD, SPOUSE, SIBLING, PET_OWNER, GRANDPARENT_GRANDCHILD)

AVATAR_URL = "https://api.dicebear.com/7.x/avataaars/svg?seed={seed}"


@dataclass
class Profile:
    """A stored family member record, as held by the data source."""

    id: str | None
    name: str
    role: str
    type: str = TYPE_HUMAN
    life_status: str = LIVING
    photo_url: str | None = None
    age: int | None = None


@dataclass
class Relationship:
    """A stored relationship record. Endpoints are profile foreign keys."""

    id: str | None
    source_id: str
    target_id: str
    type: str  # parent_child, spouse, sibling, pet_owner, grandparent_grandchild
    strength: float = 1.0


@dataclass
class RelationshipHint:
    """Which existing node a new profile attaches to, and how."""

    target_id: str
    type: str  # spouse, child, parent, sibling, pet, grandparent


@dataclass
class Node:
    id: str
    name: str
    role: str
    type: str = TYPE_HUMAN
    life_status: str = LIVING
    photo_url: str | None = None
    extra: dict = field(default_factory=dict)

    @property
    def short_label(self) -> str:
        """First token of the display name."""
        parts = self.name.split(" ")
        return parts[0] if parts else ""

    @property
    def image_href(self) -> str:
        return self.photo_url or AVATAR_URL.format(seed=self.name)


@dataclass
class Edge:
    id: str
    source: str  # node id
    target: str  # node id
    type: str
    strength: float = 1.0

    @property
    def pair(self) -> frozenset:
        """Unordered endpoint pair."""
        return frozenset((self.source, self.target))


@dataclass
class GraphData:
    nodes: list[Node]
    edges: list[Edge]

    def me(self) -> Node | None:
        for n in self.nodes:
            if n.role == ROLE_ME:
                return n
        return None
