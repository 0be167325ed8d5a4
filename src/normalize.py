"""Normalize raw profile/relationship records into graph nodes and edges."""

import dataclasses
import uuid
from collections.abc import Iterable, Mapping
from typing import Any

import networkx as nx

from logger import get_logger
from models import (
    DECEASED,
    EDGE_TYPES,
    LIVING,
    PARENT_CHILD,
    ROLES,
    SPOUSE,
    TYPE_HUMAN,
    TYPE_PET,
    Edge,
    GraphData,
    Node,
)

log = get_logger(__name__)

NODE_FIELDS = ("id", "name", "role", "type", "life_status", "photo_url")


def fallback_data() -> GraphData:
    """Three-node starter tree shown until the first real profile exists."""
    return GraphData(
        nodes=[
            Node(id="dummy-me", name="You (Add someone!)", role="me"),
            Node(id="dummy-father", name="Father (Example)", role="parent"),
            Node(id="dummy-mother", name="Mother (Example)", role="parent"),
        ],
        edges=[
            Edge("dummy-l1", "dummy-father", "dummy-me", PARENT_CHILD, 1.2),
            Edge("dummy-l2", "dummy-mother", "dummy-me", PARENT_CHILD, 1.2),
            Edge("dummy-l3", "dummy-father", "dummy-mother", SPOUSE, 1.5),
        ],
    )


def _as_dict(record: Any) -> dict:
    # Always a fresh dict; nothing downstream may alias the caller's record
    if dataclasses.is_dataclass(record) and not isinstance(record, type):
        return dataclasses.asdict(record)
    if isinstance(record, Mapping):
        return dict(record)
    raise TypeError(f"Unsupported record type: {type(record).__name__}")


def normalize_profile(record: Any) -> Node:
    """Build a Node from a profile record, guaranteeing an id."""
    data = _as_dict(record)

    node_id = data.get("id")
    if not node_id:
        node_id = str(uuid.uuid4())

    role = data.get("role") or ""
    if role not in ROLES:
        log.warning("Unknown role", extra={"node_id": str(node_id), "role": role})

    node_type = data.get("type") or TYPE_HUMAN
    if node_type not in (TYPE_HUMAN, TYPE_PET):
        node_type = TYPE_HUMAN

    life_status = data.get("life_status") or LIVING
    if life_status not in (LIVING, DECEASED):
        life_status = LIVING

    extra = {k: v for k, v in data.items() if k not in NODE_FIELDS}

    return Node(
        id=str(node_id),
        name=str(data.get("name") or ""),
        role=role,
        type=node_type,
        life_status=life_status,
        photo_url=data.get("photo_url") or None,
        extra=extra,
    )


def normalize_relationship(record: Any, index: int = 0) -> Edge:
    """Build an Edge from a relationship record, rewriting source_id/target_id."""
    data = _as_dict(record)

    source = data.get("source_id", data.get("source"))
    target = data.get("target_id", data.get("target"))
    edge_type = data.get("type") or PARENT_CHILD
    if edge_type not in EDGE_TYPES:
        log.warning("Unknown relationship type", extra={"type": edge_type})

    edge_id = data.get("id") or f"rel-{index}-{source}-{target}"
    strength = data.get("strength")

    return Edge(
        id=str(edge_id),
        source=str(source),
        target=str(target),
        type=edge_type,
        strength=float(strength) if strength is not None else 1.0,
    )


def normalize_data(profiles: Iterable[Any], relationships: Iterable[Any]) -> GraphData:
    """
    Convert profile and relationship records into a fresh GraphData.

    If there are no profiles at all, the fallback starter tree is returned instead so the
    view is never empty.
    """
    profiles = list(profiles)
    if not profiles:
        return fallback_data()

    nodes = [normalize_profile(p) for p in profiles]
    edges = [normalize_relationship(r, i) for i, r in enumerate(relationships)]
    return GraphData(nodes=nodes, edges=edges)


def build_graph(graph: GraphData) -> nx.MultiDiGraph:
    """Build a NetworkX multigraph view of the normalized data."""
    G = nx.MultiDiGraph()

    # Add nodes (people and pets)
    # Note: use 'person_name' instead of 'name' to avoid clashing with graph exporters
    for n in graph.nodes:
        G.add_node(
            n.id,
            person_name=n.name,
            role=n.role,
            node_type=n.type,
            life_status=n.life_status,
        )

    # Add edges (relationships); unknown endpoints become bare nodes, flagged by validation
    for e in graph.edges:
        G.add_edge(e.source, e.target, key=e.id, relationship_type=e.type, strength=e.strength)

    return G
