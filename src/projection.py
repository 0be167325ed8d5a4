"""
Project simulation state onto drawable primitives.

A Projector is attached to one simulation. On every tick it advances the particle overlay
and rebuilds the current Frame: one EdgePrimitive per resolved link, one NodePrimitive per
node, and the particle positions. Colors are resolved from the palette the projector holds,
so a theme change only needs a new palette and a re-projection.
"""

import random
from collections.abc import Callable
from dataclasses import dataclass, field

from forces import Link, SimNode
from geometry import arc_path, hexagon_path, line_path
from models import ANCESTOR_ROLES, ROLE_ME, SIBLING, SIBLING_INFERRED, SPOUSE, TYPE_PET
from simulation import Simulation
from theme import WHITE, Palette
from view_settings import LINK_STRAIGHT, SHAPE_CIRCLE, SHAPE_HEXAGON, ViewSettings

PARTICLE_COUNT = 20
PARTICLE_MAX_SPEED = 0.25
PARTICLE_OPACITY = 0.3

HUMAN_SIZE = 35
PET_SIZE = 25
HUMAN_LABEL_OFFSET = 52
PET_LABEL_OFFSET = 40
NODE_STROKE_WIDTH = 2


@dataclass
class EdgePrimitive:
    id: str
    type: str
    source_id: str
    target_id: str
    x0: float
    y0: float
    x1: float
    y1: float
    curved: bool
    path: str
    stroke: str
    width: float
    opacity: float
    dasharray: str | None


@dataclass
class NodePrimitive:
    id: str
    role: str
    x: float
    y: float
    shape: str
    size: float
    shape_path: str | None
    fill: str
    stroke: str
    glow: bool
    image_href: str
    clip_id: str
    label: str
    label_y: float
    stroke_width: float = NODE_STROKE_WIDTH


@dataclass
class Particle:
    x: float
    y: float
    vx: float
    vy: float
    size: float

    def advance(self, width: float, height: float):
        """Drift by one velocity step, wrapping around the viewport edges."""
        self.x += self.vx
        if self.x > width:
            self.x = 0
        if self.x < 0:
            self.x = width
        self.y += self.vy
        if self.y > height:
            self.y = 0
        if self.y < 0:
            self.y = height


def make_particles(
    count: int, width: float, height: float, rng: random.Random | None = None
) -> list[Particle]:
    rng = rng or random.Random()
    return [
        Particle(
            x=rng.random() * width,
            y=rng.random() * height,
            vx=(rng.random() - 0.5) * 2 * PARTICLE_MAX_SPEED,
            vy=(rng.random() - 0.5) * 2 * PARTICLE_MAX_SPEED,
            size=rng.random() * 2 + 1,
        )
        for _ in range(count)
    ]


@dataclass
class Frame:
    width: float
    height: float
    palette: Palette
    edges: list[EdgePrimitive] = field(default_factory=list)
    nodes: list[NodePrimitive] = field(default_factory=list)
    particles: list[Particle] = field(default_factory=list)
    tick: int = 0
    settled: bool = False


def node_size(node: SimNode) -> float:
    return PET_SIZE if node.node.type == TYPE_PET else HUMAN_SIZE


def node_stroke(node: SimNode, palette: Palette) -> str:
    if node.node.role == ROLE_ME:
        return WHITE
    if node.node.type == TYPE_PET:
        return palette.gold
    if node.node.role in ANCESTOR_ROLES:
        return palette.accent_secondary
    return palette.accent_primary


def edge_style(edge_type: str, palette: Palette) -> tuple[str, float, float, str | None]:
    """(stroke, width, opacity, dasharray) for an edge type."""
    if edge_type == SPOUSE:
        return palette.gold, 3, 0.8, None
    if edge_type == SIBLING:
        return palette.accent_primary, 2, 0.8, "4,4"
    if edge_type == SIBLING_INFERRED:
        return palette.accent_primary, 2, 0.6, "4,4"
    return palette.text_secondary, 1.5, 0.8, None


class Projector:
    def __init__(
        self,
        sim: Simulation,
        settings: ViewSettings,
        palette: Palette,
        particle_count: int = PARTICLE_COUNT,
        rng: random.Random | None = None,
    ):
        self.sim = sim
        self.settings = settings
        self.palette = palette
        self._release: list[Callable[[], None]] = []
        self.particles: list[Particle] = []
        if settings.particles:
            self.particles = make_particles(particle_count, sim.width, sim.height, rng or sim.rng)
        self.frame = self.project()

    def attach(self) -> "Projector":
        """Re-project on every simulation tick."""
        self._release.append(self.sim.on_tick(self._on_tick))
        self._release.append(self.sim.on_end(self._on_end))
        return self

    def detach(self):
        for release in self._release:
            release()
        self._release.clear()

    def reskin(self, palette: Palette):
        """Swap the palette and re-project the current positions. The simulation is untouched."""
        self.palette = palette
        self.frame = self.project(settled=self.frame.settled)

    def _on_tick(self, sim: Simulation):
        for particle in self.particles:
            particle.advance(sim.width, sim.height)
        self.frame = self.project()

    def _on_end(self, sim: Simulation):
        self.frame.settled = True

    def project_link(self, link: Link) -> EdgePrimitive:
        s, t = link.source, link.target
        curved = self.settings.link_style != LINK_STRAIGHT
        path = arc_path(s.x, s.y, t.x, t.y) if curved else line_path(s.x, s.y, t.x, t.y)
        stroke, width, opacity, dash = edge_style(link.type, self.palette)
        return EdgePrimitive(
            id=link.edge.id,
            type=link.type,
            source_id=s.id,
            target_id=t.id,
            x0=s.x,
            y0=s.y,
            x1=t.x,
            y1=t.y,
            curved=curved,
            path=path,
            stroke=stroke,
            width=width,
            opacity=opacity,
            dasharray=dash,
        )

    def project_node(self, node: SimNode) -> NodePrimitive:
        size = node_size(node)
        hexagon = self.settings.node_shape == SHAPE_HEXAGON
        return NodePrimitive(
            id=node.id,
            role=node.node.role,
            x=node.x,
            y=node.y,
            shape=SHAPE_HEXAGON if hexagon else SHAPE_CIRCLE,
            size=size,
            shape_path=hexagon_path(size) if hexagon else None,
            fill=self.palette.bg_deep,
            stroke=node_stroke(node, self.palette),
            glow=node.node.role == ROLE_ME,
            image_href=node.node.image_href,
            clip_id=f"clip-{node.id}",
            label=node.node.short_label,
            label_y=PET_LABEL_OFFSET if node.node.type == TYPE_PET else HUMAN_LABEL_OFFSET,
        )

    def project(self, settled: bool = False) -> Frame:
        return Frame(
            width=self.sim.width,
            height=self.sim.height,
            palette=self.palette,
            edges=[self.project_link(link) for link in self.sim.links],
            nodes=[self.project_node(node) for node in self.sim.nodes],
            particles=self.particles,
            tick=self.sim.ticks,
            settled=settled,
        )
