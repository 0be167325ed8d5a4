"""Derive implicit relationships from explicit ones."""

import itertools
from collections.abc import Collection, Iterable

from models import PARENT_CHILD, SIBLING_INFERRED, Edge


def inferred_edge_id(a: str, b: str) -> str:
    """Order-independent id for an inferred sibling edge."""
    lo, hi = sorted((a, b))
    return f"inferred-{lo}-{hi}"


def children_by_parent(edges: Iterable[Edge]) -> dict[str, list[str]]:
    """Group parent_child targets by source, keeping first-seen order and no repeats."""
    children: dict[str, list[str]] = {}
    for e in edges:
        if e.type != PARENT_CHILD:
            continue
        kids = children.setdefault(e.source, [])
        if e.target not in kids:
            kids.append(e.target)
    return children


def infer_sibling_edges(
    edges: Iterable[Edge], known: Collection[str] | None = None
) -> list[Edge]:
    """
    Synthesize sibling edges between children that share a parent.

    A pair is skipped when any edge already joins it, in either direction and of any type,
    including a sibling edge inferred earlier from another shared parent.

    Args:
        edges: The explicit edge set
        known: Node ids that exist; children outside it get no inferred siblings

    Returns:
        New `sibling_inferred` edges, in parent order then i < j over each parent's children
    """
    edges = list(edges)
    existing: set[frozenset] = {e.pair for e in edges}

    inferred: list[Edge] = []
    for kids in children_by_parent(edges).values():
        if known is not None:
            kids = [k for k in kids if k in known]
        for a, b in itertools.combinations(kids, 2):
            pair = frozenset((a, b))
            if pair in existing:
                continue
            existing.add(pair)
            inferred.append(
                Edge(id=inferred_edge_id(a, b), source=a, target=b, type=SIBLING_INFERRED)
            )
    return inferred


def with_inferred_edges(
    edges: Iterable[Edge], known: Collection[str] | None = None
) -> list[Edge]:
    """Explicit edges followed by the inferred sibling edges. Inputs are not modified."""
    edges = list(edges)
    return edges + infer_sibling_edges(edges, known)
