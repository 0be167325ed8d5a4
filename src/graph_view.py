"""
The family graph view: ties data, settings, simulation and projection together.

Exactly one simulation is active at a time. Any change to the data or to the settings
disposes the active simulation before the next one is built, so a stale tick can never
reach the new node buffer. A change confined to the theme only re-skins the projector.
"""

from dataclasses import dataclass

from errors import DataSourceError
from layout import build_simulation
from logger import get_logger
from models import GraphData
from normalize import fallback_data, normalize_data
from projection import PARTICLE_COUNT, Frame, Projector
from simulation import Simulation
from svg import render_svg
from theme import palette_for
from validation import validate_edges
from view_settings import ViewSettings, ViewSettingsStore

log = get_logger(__name__)

DEFAULT_WIDTH = 1280
DEFAULT_HEIGHT = 800


@dataclass
class Notification:
    level: str  # "info" | "warning" | "error"
    message: str


class GraphView:
    def __init__(
        self,
        source=None,
        settings: ViewSettingsStore | None = None,
        width: float = DEFAULT_WIDTH,
        height: float = DEFAULT_HEIGHT,
        particle_count: int = PARTICLE_COUNT,
        seed: int | None = None,
        max_settle_ticks: int = 1000,
    ):
        """
        Args:
            source: Data source exposing fetch_all() and subscribe(callback); optional
            settings: Settings store; a default one is created when omitted
            width, height: Viewport size, read once per (re)build
            particle_count: Number of ambient particles when the overlay is on
            seed: Seed for the simulation's jiggle and the particle field
            max_settle_ticks: Upper bound used by settle()
        """
        self.source = source
        self.settings = settings or ViewSettingsStore()
        self.width = width
        self.height = height
        self.particle_count = particle_count
        self.seed = seed
        self.max_settle_ticks = max_settle_ticks

        self.graph: GraphData = fallback_data()
        self.simulation: Simulation | None = None
        self.projector: Projector | None = None
        self.notifications: list[Notification] = []
        self.warnings: list[str] = []
        self.builds = 0

        self._unsubscribe = [self.settings.subscribe(self._on_settings_change)]
        if source is not None:
            self._unsubscribe.append(source.subscribe(self.refresh))
            self.refresh()
        else:
            self.rebuild()

    # ------------------------------------------------------------------
    # Data
    # ------------------------------------------------------------------

    def refresh(self) -> bool:
        """
        Re-fetch the full snapshot from the data source and rebuild.

        On failure the current graph stays on screen and an error notification is queued.
        """
        try:
            profiles, relationships = self.source.fetch_all()
        except DataSourceError as e:
            log.error("Error fetching family data", extra={"error": str(e)})
            self.notifications.append(Notification("error", f"Could not load family data: {e}"))
            if self.simulation is None:
                self.rebuild()
            return False

        self.set_data(normalize_data(profiles, relationships))
        return True

    def set_data(self, graph: GraphData):
        self.graph = graph
        self.warnings = validate_edges(graph)
        for warning in self.warnings:
            log.warning(warning)
        self.rebuild()

    # ------------------------------------------------------------------
    # Simulation lifecycle
    # ------------------------------------------------------------------

    def _dispose(self):
        if self.projector is not None:
            self.projector.detach()
            self.projector = None
        if self.simulation is not None:
            self.simulation.dispose()
            self.simulation = None

    def rebuild(self):
        """Dispose the active simulation, then build, attach and start a new one."""
        self._dispose()

        settings = self.settings.get()
        sim = build_simulation(self.graph, settings, self.width, self.height, seed=self.seed)
        self.projector = Projector(
            sim, settings, palette_for(settings.theme), particle_count=self.particle_count
        ).attach()
        self.simulation = sim.start()
        self.builds += 1

        log.info(
            "Simulation started",
            extra={
                "build": self.builds,
                "nodes": len(sim.nodes),
                "links": len(sim.links),
                "layout": settings.layout,
            },
        )

    def _on_settings_change(self, old: ViewSettings, new: ViewSettings):
        if new.differs_only_in_theme(old) and self.projector is not None:
            self.projector.reskin(palette_for(new.theme))
            return
        self.rebuild()

    def close(self):
        self._dispose()
        for unsubscribe in self._unsubscribe:
            unsubscribe()
        self._unsubscribe.clear()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    # ------------------------------------------------------------------
    # Frames
    # ------------------------------------------------------------------

    @property
    def frame(self) -> Frame:
        return self.projector.frame

    def step(self, frames: int = 1) -> Frame:
        """Advance the active simulation by up to `frames` ticks."""
        for _ in range(frames):
            if not self.simulation.step():
                break
        return self.frame

    def settle(self) -> Frame:
        """Run to equilibrium and return the settled frame."""
        self.simulation.settle(self.max_settle_ticks)
        self.projector.frame.settled = not self.simulation.running
        return self.frame

    def render_svg(self) -> str:
        return render_svg(self.frame)

    # ------------------------------------------------------------------
    # Dragging
    # ------------------------------------------------------------------

    def drag_start(self, node_id: str):
        self.simulation.drag_start(node_id)

    def drag_move(self, node_id: str, x: float, y: float):
        self.simulation.drag_move(node_id, x, y)

    def drag_end(self, node_id: str):
        self.simulation.drag_end(node_id)
