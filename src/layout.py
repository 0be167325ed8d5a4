"""Settings-driven force selection for the family graph simulation."""

from forces import CenterForce, CollideForce, Link, LinkForce, ManyBodyForce, SimNode, YForce
from inference import with_inferred_edges
from models import (
    ROLE_CHILD,
    ROLE_GRANDPARENT,
    ROLE_GREAT_GRANDPARENT,
    ROLE_ME,
    ROLE_PARENT,
    ROLE_PET,
    ROLE_SIBLING,
    ROLE_SPOUSE,
    SIBLING,
    SIBLING_INFERRED,
    SPOUSE,
    GraphData,
)
from simulation import Simulation
from view_settings import LAYOUT_TREE, ViewSettings

# Link rest lengths
SPOUSE_DISTANCE = 60
SIBLING_DISTANCE = 180
DEFAULT_DISTANCE = 120

CHARGE_STRENGTH = -1000
COLLIDE_RADIUS = 70

# Center pull
TREE_CENTER_STRENGTH = 0.05
ORGANIC_ANCHORED_CENTER_STRENGTH = 0.05
ORGANIC_FREE_CENTER_STRENGTH = 0.8
BAND_STRENGTH = 1.0

# Generational bands, as a fraction of viewport height (ancestors on top)
BANDS = {
    ROLE_GREAT_GRANDPARENT: 0.1,
    ROLE_GRANDPARENT: 0.2,
    ROLE_PARENT: 0.35,
    ROLE_ME: 0.55,
    ROLE_SPOUSE: 0.55,
    ROLE_SIBLING: 0.55,
    ROLE_PET: 0.55,
    ROLE_CHILD: 0.8,
}
DEFAULT_BAND = 0.5


def link_distance(link: Link) -> float:
    if link.type == SPOUSE:
        return SPOUSE_DISTANCE
    if link.type in (SIBLING, SIBLING_INFERRED):
        return SIBLING_DISTANCE
    return DEFAULT_DISTANCE


def band_y(role: str, height: float) -> float:
    """Target vertical position for a role in the tree layout."""
    return height * BANDS.get(role, DEFAULT_BAND)


def center_strength(layout: str, has_me: bool) -> float:
    if layout == LAYOUT_TREE:
        return TREE_CENTER_STRENGTH
    # An anchored graph already coheres around the pinned node
    return ORGANIC_ANCHORED_CENTER_STRENGTH if has_me else ORGANIC_FREE_CENTER_STRENGTH


def apply_forces(sim: Simulation, settings: ViewSettings):
    """Register link, charge, collision, centering and (tree only) banding forces."""
    sim.force("link", LinkForce(sim.links, distance=link_distance))
    sim.force("charge", ManyBodyForce(strength=CHARGE_STRENGTH))
    sim.force("collide", CollideForce(radius=COLLIDE_RADIUS))

    cx, cy = sim.center
    strength = center_strength(settings.layout, sim.me is not None)
    sim.force("center", CenterForce(cx, cy, strength=strength))

    if settings.layout == LAYOUT_TREE:

        def target_y(node: SimNode) -> float:
            return band_y(node.node.role, sim.height)

        sim.force("y", YForce(target_y, strength=BAND_STRENGTH))
    else:
        sim.force("y", None)


def build_simulation(
    graph: GraphData,
    settings: ViewSettings,
    width: float,
    height: float,
    seed: int | None = None,
) -> Simulation:
    """
    Build a fresh simulation for the graph: inferred sibling edges are added to the explicit
    ones, the `me` node is pinned at the viewport center, and forces follow the settings.
    The returned simulation is not started.
    """
    edges = with_inferred_edges(graph.edges, known={n.id for n in graph.nodes})
    sim = Simulation(graph.nodes, edges, width, height, seed=seed)
    apply_forces(sim, settings)
    return sim
