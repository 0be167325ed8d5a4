"""
Force layout simulation.

The simulation owns a private buffer of SimNode objects, indexed by node id, built from the
graph it is given. Edges are resolved to those objects once, up front; edges whose
endpoints are unknown are left out and recorded as diagnostics.

Lifecycle: uninitialized -> running -> stopped. A stopped simulation can be restarted (for
example by a drag). A disposed simulation is stopped for good: its listeners are released
and stepping it does nothing.
"""

import dataclasses
import math
import random
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from errors import SimulationStateError, UnknownNodeError
from forces import Force, Link, SimNode
from logger import get_logger
from models import ROLE_ME, Edge, Node

log = get_logger(__name__)

UNINITIALIZED = "uninitialized"
RUNNING = "running"
STOPPED = "stopped"

ALPHA_MIN = 0.001
ALPHA_DECAY = 1 - ALPHA_MIN ** (1 / 300)
VELOCITY_DECAY = 0.4
DRAG_ALPHA_TARGET = 0.3

INITIAL_RADIUS = 10
INITIAL_ANGLE = math.pi * (3 - math.sqrt(5))


@dataclass
class Diagnostic:
    edge_id: str
    message: str


class Simulation:
    def __init__(
        self,
        nodes: Iterable[Node],
        edges: Iterable[Edge],
        width: float,
        height: float,
        seed: int | None = None,
    ):
        self.width = width
        self.height = height
        self.center = (width / 2, height / 2)
        self.rng = random.Random(seed)

        self.alpha = 1.0
        self.alpha_min = ALPHA_MIN
        self.alpha_decay = ALPHA_DECAY
        self.alpha_target = 0.0
        self.velocity_decay = 1 - VELOCITY_DECAY

        self.state = UNINITIALIZED
        self.disposed = False
        self.ticks = 0
        self.diagnostics: list[Diagnostic] = []

        self._forces: dict[str, Force] = {}
        self._tick_listeners: list[Callable[["Simulation"], None]] = []
        self._end_listeners: list[Callable[["Simulation"], None]] = []
        self._active_drags = 0

        # Private copies; the caller's nodes are never touched
        self.nodes = [SimNode(i, dataclasses.replace(n)) for i, n in enumerate(nodes)]
        self.by_id: dict[str, SimNode] = {}
        for sim_node in self.nodes:
            if sim_node.id in self.by_id:
                log.warning("Duplicate node id", extra={"node_id": sim_node.id})
                continue
            self.by_id[sim_node.id] = sim_node

        self.me = next((n for n in self.nodes if n.node.role == ROLE_ME), None)
        if self.me is not None:
            self.me.fx, self.me.fy = self.center

        self.links = self._resolve_links(edges)
        self._initialize_nodes()

    def _resolve_links(self, edges: Iterable[Edge]) -> list[Link]:
        links: list[Link] = []
        for edge in edges:
            source = self.by_id.get(edge.source)
            target = self.by_id.get(edge.target)
            if source is None or target is None:
                missing = [end for end in (edge.source, edge.target) if end not in self.by_id]
                message = f"Edge {edge.id} references unknown node(s): {', '.join(missing)}"
                self.diagnostics.append(Diagnostic(edge.id, message))
                log.warning(message, extra={"edge_id": edge.id, "edge_type": edge.type})
                continue
            links.append(Link(len(links), source, target, edge))
        return links

    def _initialize_nodes(self):
        # Phyllotaxis placement; pinned nodes start at their pin
        for i, node in enumerate(self.nodes):
            if node.fx is not None:
                node.x = node.fx
            if node.fy is not None:
                node.y = node.fy
            if math.isnan(node.x) or math.isnan(node.y):
                radius = INITIAL_RADIUS * math.sqrt(0.5 + i)
                angle = i * INITIAL_ANGLE
                node.x = radius * math.cos(angle)
                node.y = radius * math.sin(angle)
            if math.isnan(node.vx) or math.isnan(node.vy):
                node.vx = node.vy = 0.0

    # ------------------------------------------------------------------
    # Forces
    # ------------------------------------------------------------------

    def force(self, name: str, force: Force | None = None) -> Force | None:
        """Get, set or (with None) remove a named force."""
        if force is None:
            return self._forces.pop(name, None)
        force.initialize(self.nodes, self.rng)
        self._forces[name] = force
        return force

    def get_force(self, name: str) -> Force | None:
        return self._forces.get(name)

    @property
    def force_names(self) -> list[str]:
        return list(self._forces)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> "Simulation":
        if self.disposed:
            raise SimulationStateError("Simulation has been disposed")
        self.state = RUNNING
        return self

    restart = start

    def stop(self):
        """Halt ticking. Listeners stay registered so the simulation can restart."""
        if self.state == RUNNING:
            self.state = STOPPED

    def dispose(self):
        """Stop permanently and release every tick registration."""
        if self.disposed:
            return
        self.state = STOPPED
        self.disposed = True
        self._tick_listeners.clear()
        self._end_listeners.clear()
        log.debug("Simulation disposed", extra={"ticks": self.ticks})

    def __enter__(self):
        return self.start()

    def __exit__(self, exc_type, exc, tb):
        self.dispose()
        return False

    @property
    def running(self) -> bool:
        return self.state == RUNNING

    def on_tick(self, listener: Callable[["Simulation"], None]) -> Callable[[], None]:
        self._tick_listeners.append(listener)
        return lambda: self._discard(self._tick_listeners, listener)

    def on_end(self, listener: Callable[["Simulation"], None]) -> Callable[[], None]:
        self._end_listeners.append(listener)
        return lambda: self._discard(self._end_listeners, listener)

    @staticmethod
    def _discard(listeners: list, listener):
        if listener in listeners:
            listeners.remove(listener)

    # ------------------------------------------------------------------
    # Stepping
    # ------------------------------------------------------------------

    def tick(self, iterations: int = 1):
        """Advance the physics without emitting events or checking state."""
        for _ in range(iterations):
            self.alpha += (self.alpha_target - self.alpha) * self.alpha_decay

            for force in self._forces.values():
                force(self.alpha)

            for node in self.nodes:
                if node.fx is None:
                    node.vx *= self.velocity_decay
                    node.x += node.vx
                else:
                    node.x = node.fx
                    node.vx = 0.0
                if node.fy is None:
                    node.vy *= self.velocity_decay
                    node.y += node.vy
                else:
                    node.y = node.fy
                    node.vy = 0.0
            self.ticks += 1

    def step(self) -> bool:
        """
        One frame: tick once and notify listeners.

        Returns False (and does nothing) unless the simulation is running. Stops the
        simulation once alpha falls below alpha_min.
        """
        if self.state != RUNNING or self.disposed:
            return False

        self.tick()
        for listener in list(self._tick_listeners):
            listener(self)

        if self.alpha < self.alpha_min:
            self.state = STOPPED
            for listener in list(self._end_listeners):
                listener(self)
        return True

    def settle(self, max_ticks: int = 1000) -> int:
        """Step until equilibrium (or max_ticks). Returns the number of steps taken."""
        if self.state == UNINITIALIZED:
            self.start()
        steps = 0
        while steps < max_ticks and self.step():
            steps += 1
        return steps

    # ------------------------------------------------------------------
    # Dragging
    # ------------------------------------------------------------------

    def node(self, node_id: str) -> SimNode:
        try:
            return self.by_id[node_id]
        except KeyError:
            raise UnknownNodeError(node_id) from None

    def drag_start(self, node_id: str):
        node = self.node(node_id)
        if self._active_drags == 0:
            self.alpha_target = DRAG_ALPHA_TARGET
            self.restart()
        self._active_drags += 1
        if node is not self.me:
            node.fx = node.x
            node.fy = node.y

    def drag_move(self, node_id: str, x: float, y: float):
        node = self.node(node_id)
        if node is self.me:
            return
        node.fx = x
        node.fy = y

    def drag_end(self, node_id: str):
        node = self.node(node_id)
        self._active_drags = max(0, self._active_drags - 1)
        if self._active_drags == 0:
            self.alpha_target = 0.0
        if node is self.me:
            # The anchor never floats
            node.fx, node.fy = self.center
        else:
            node.fx = None
            node.fy = None

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    def positions(self) -> dict[str, tuple[float, float]]:
        return {n.id: (n.x, n.y) for n in self.nodes}
