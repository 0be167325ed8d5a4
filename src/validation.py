"""Graph validation for family graph data."""

import networkx as nx

from layout import BANDS
from models import PARENT_CHILD, GraphData
from normalize import build_graph


def validate_edges(graph: GraphData) -> list[str]:
    """
    Validate the family graph for:
    - Edges whose endpoints are not in the node set
    - Self-referencing edges
    - Cycles in parent-child relationships
    - Parent-child edges pointing up the generations (source must be the parent)

    Returns a list of warning messages.
    """
    warnings: list[str] = []
    known = {n.id for n in graph.nodes}
    G = build_graph(graph)

    for e in graph.edges:
        missing = [end for end in (e.source, e.target) if end not in known]
        if missing:
            warnings.append(f"Unresolved: edge {e.id} references unknown node(s) {missing}")
        if e.source == e.target:
            warnings.append(f"Impossible: edge {e.id} connects {e.source} to itself")

    # Create a graph with only PARENT_CHILD edges for cycle detection
    parent_edges = [
        (u, v)
        for u, v, d in G.edges(data=True)
        if d.get("relationship_type") == PARENT_CHILD and u != v
    ]
    parent_graph = nx.DiGraph(parent_edges)

    try:
        cycle = nx.find_cycle(parent_graph, orientation="original")
        cycle_nodes = [edge[0] for edge in cycle]
        warnings.append(f"Cycle detected in parent-child relationships: {cycle_nodes}")
    except nx.NetworkXNoCycle:
        pass

    # Parent must sit on a higher band than the child
    for parent, child in parent_edges:
        if parent not in known or child not in known:
            continue
        parent_data = G.nodes[parent]
        child_data = G.nodes[child]
        parent_band = BANDS.get(parent_data.get("role"))
        child_band = BANDS.get(child_data.get("role"))
        if parent_band is None or child_band is None:
            continue
        if parent_band >= child_band:
            warnings.append(
                f"Suspicious: {parent_data.get('person_name')} ({parent_data.get('role')}) is "
                f"recorded as parent of {child_data.get('person_name')} ({child_data.get('role')})"
            )

    return warnings
