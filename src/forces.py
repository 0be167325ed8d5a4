"""
Forces for the layout simulation.

Each force is initialized with the simulation's node buffer and then called once per tick
with the current alpha. Forces only add to node velocities (or, for centering, shift
positions); integration happens in the simulation.
"""

import math
import random
from collections.abc import Callable, Sequence

from models import Edge, Node


class SimNode:
    """Mutable per-simulation state for one node. Never shared across simulations."""

    __slots__ = ("index", "node", "x", "y", "vx", "vy", "fx", "fy")

    def __init__(self, index: int, node: Node):
        self.index = index
        self.node = node
        self.x = math.nan
        self.y = math.nan
        self.vx = math.nan
        self.vy = math.nan
        self.fx: float | None = None
        self.fy: float | None = None

    @property
    def id(self) -> str:
        return self.node.id

    @property
    def pinned(self) -> bool:
        return self.fx is not None or self.fy is not None

    def __repr__(self):
        return f"SimNode({self.id!r}, x={self.x:.1f}, y={self.y:.1f})"


class Link:
    """An edge resolved to the simulation's own node objects."""

    __slots__ = ("index", "source", "target", "edge")

    def __init__(self, index: int, source: SimNode, target: SimNode, edge: Edge):
        self.index = index
        self.source = source
        self.target = target
        self.edge = edge

    @property
    def type(self) -> str:
        return self.edge.type


def jiggle(rng: random.Random) -> float:
    return (rng.random() - 0.5) * 1e-6


class Force:
    def initialize(self, nodes: Sequence[SimNode], rng: random.Random):
        self.nodes = nodes
        self.rng = rng

    def __call__(self, alpha: float):
        raise NotImplementedError


class LinkForce(Force):
    """Spring toward a per-link rest length, weighted toward the less connected end."""

    def __init__(
        self,
        links: Sequence[Link],
        distance: Callable[[Link], float],
        strength: Callable[[Link], float] | None = None,
        iterations: int = 1,
    ):
        self.links = list(links)
        self.distance = distance
        self.strength = strength
        self.iterations = iterations

    def initialize(self, nodes, rng):
        super().initialize(nodes, rng)
        count = [0] * len(nodes)
        for link in self.links:
            count[link.source.index] += 1
            count[link.target.index] += 1

        self.bias = []
        self.strengths = []
        for link in self.links:
            s, t = count[link.source.index], count[link.target.index]
            self.bias.append(s / (s + t))
            if self.strength is None:
                self.strengths.append(1 / min(s, t))
            else:
                self.strengths.append(self.strength(link))
        self.distances = [self.distance(link) for link in self.links]

    def __call__(self, alpha):
        for _ in range(self.iterations):
            for i, link in enumerate(self.links):
                source, target = link.source, link.target
                x = target.x + target.vx - source.x - source.vx or jiggle(self.rng)
                y = target.y + target.vy - source.y - source.vy or jiggle(self.rng)
                length = math.sqrt(x * x + y * y)
                length = (length - self.distances[i]) / length * alpha * self.strengths[i]
                x *= length
                y *= length
                b = self.bias[i]
                target.vx -= x * b
                target.vy -= y * b
                source.vx += x * (1 - b)
                source.vy += y * (1 - b)


class ManyBodyForce(Force):
    """Uniform charge between every pair of nodes (negative strength repels)."""

    def __init__(self, strength: float = -30.0, distance_min: float = 1.0):
        self.strength = strength
        self.distance_min2 = distance_min * distance_min

    def __call__(self, alpha):
        w_base = self.strength * alpha
        for node in self.nodes:
            for other in self.nodes:
                if other is node:
                    continue
                x = other.x - node.x
                y = other.y - node.y
                dist2 = x * x + y * y
                if x == 0:
                    x = jiggle(self.rng)
                    dist2 += x * x
                if y == 0:
                    y = jiggle(self.rng)
                    dist2 += y * y
                if dist2 < self.distance_min2:
                    dist2 = math.sqrt(self.distance_min2 * dist2)
                w = w_base / dist2
                node.vx += x * w
                node.vy += y * w


class CollideForce(Force):
    """Push apart any two nodes closer than the sum of their radii."""

    def __init__(self, radius: float, strength: float = 1.0, iterations: int = 1):
        self.radius = radius
        self.strength = strength
        self.iterations = iterations

    def __call__(self, alpha):
        r = self.radius + self.radius
        ri2 = self.radius * self.radius
        rj2 = ri2
        share = rj2 / (ri2 + rj2)
        for _ in range(self.iterations):
            for i, node in enumerate(self.nodes):
                xi = node.x + node.vx
                yi = node.y + node.vy
                for other in self.nodes[i + 1 :]:
                    x = xi - other.x - other.vx
                    y = yi - other.y - other.vy
                    dist2 = x * x + y * y
                    if dist2 >= r * r:
                        continue
                    if x == 0:
                        x = jiggle(self.rng)
                        dist2 += x * x
                    if y == 0:
                        y = jiggle(self.rng)
                        dist2 += y * y
                    dist = math.sqrt(dist2)
                    push = (r - dist) / dist * self.strength
                    x *= push
                    y *= push
                    node.vx += x * share
                    node.vy += y * share
                    other.vx -= x * (1 - share)
                    other.vy -= y * (1 - share)


class CenterForce(Force):
    """Translate the whole node set so its mean drifts toward (x, y)."""

    def __init__(self, x: float, y: float, strength: float = 1.0):
        self.x = x
        self.y = y
        self.strength = strength

    def __call__(self, alpha):
        n = len(self.nodes)
        if not n:
            return
        sx = (sum(node.x for node in self.nodes) / n - self.x) * self.strength
        sy = (sum(node.y for node in self.nodes) / n - self.y) * self.strength
        for node in self.nodes:
            node.x -= sx
            node.y -= sy


class YForce(Force):
    """Pull each node toward its own target y."""

    def __init__(self, y: Callable[[SimNode], float], strength: float = 0.1):
        self.y = y
        self.strength = strength

    def initialize(self, nodes, rng):
        super().initialize(nodes, rng)
        self.targets = [self.y(node) for node in nodes]

    def __call__(self, alpha):
        for node, target in zip(self.nodes, self.targets):
            node.vy += (target - node.y) * self.strength * alpha
