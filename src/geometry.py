"""Path geometry for links and node shapes."""

import math

EPS = 1e-9
ARC_RADIUS_FACTOR = 1.5
ARC_SWEEP = 1


def fmt(v: float) -> str:
    """Compact number for SVG path data."""
    s = f"{v:.2f}".rstrip("0").rstrip(".")
    return "0" if s in ("-0", "") else s


def line_path(x0: float, y0: float, x1: float, y1: float) -> str:
    return f"M{fmt(x0)},{fmt(y0)}L{fmt(x1)},{fmt(y1)}"


def arc_radius(x0: float, y0: float, x1: float, y1: float) -> float:
    return math.hypot(x1 - x0, y1 - y0) * ARC_RADIUS_FACTOR


def arc_path(x0: float, y0: float, x1: float, y1: float) -> str:
    """Circular arc, radius 1.5x the chord, always drawn with the same sweep."""
    r = fmt(arc_radius(x0, y0, x1, y1))
    return f"M{fmt(x0)},{fmt(y0)}A{r},{r} 0 0,{ARC_SWEEP} {fmt(x1)},{fmt(y1)}"


def arc_center(x0: float, y0: float, x1: float, y1: float) -> tuple[float, float] | None:
    """
    Center of the small, positive-sweep arc of radius 1.5x the chord from (x0, y0) to
    (x1, y1). Returns None for a zero-length chord.
    """
    dx, dy = x0 - x1, y0 - y1
    h2 = (dx * dx + dy * dy) / 4
    if h2 < EPS:
        return None
    r = arc_radius(x0, y0, x1, y1)
    k = math.sqrt(max(0.0, (r * r - h2) / h2))
    mx, my = (x0 + x1) / 2, (y0 + y1) / 2
    # Large-arc flag 0 with sweep flag 1 puts the center on the + side
    return mx + k * dy / 2, my - k * dx / 2


def arc_points(
    x0: float, y0: float, x1: float, y1: float, segments: int = 24
) -> list[tuple[float, float]]:
    """Polyline approximation of arc_path, for renderers without SVG arcs."""
    center = arc_center(x0, y0, x1, y1)
    if center is None:
        return [(x0, y0), (x1, y1)]
    cx, cy = center
    r = math.hypot(x0 - cx, y0 - cy)
    a0 = math.atan2(y0 - cy, x0 - cx)
    a1 = math.atan2(y1 - cy, x1 - cx)
    sweep = (a1 - a0) % (2 * math.pi)
    points = [
        (cx + r * math.cos(a0 + sweep * i / segments), cy + r * math.sin(a0 + sweep * i / segments))
        for i in range(segments)
    ]
    points.append((x1, y1))
    return points


def hexagon_points(r: float) -> list[tuple[float, float]]:
    """Six vertices at 60 degree steps, starting on the +x axis."""
    return [(r * math.cos(math.pi / 3 * i), r * math.sin(math.pi / 3 * i)) for i in range(6)]


def hexagon_path(r: float) -> str:
    return "M" + "L".join(f"{fmt(x)},{fmt(y)}" for x, y in hexagon_points(r)) + "Z"
