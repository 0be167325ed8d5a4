"""Raster and paginated snapshots of a settled family graph frame."""

from pathlib import Path

from matplotlib.backends.backend_pdf import PdfPages
from matplotlib.figure import Figure
from matplotlib.patches import Circle, Patch, Polygon, Rectangle

from geometry import arc_points, hexagon_points
from logger import get_logger
from projection import PARTICLE_OPACITY, Frame, NodePrimitive
from view_settings import SHAPE_HEXAGON

log = get_logger(__name__)

# frame style -> (border color, border width in px)
FRAME_STYLES = {
    "none": None,
    "vintage": ("#8b5a2b", 14),
    "modern": ("#e2e8f0", 6),
    "floral": ("#db2777", 10),
    "neon": ("#22d3ee", 8),
}

BASE_DPI = 100
PX_TO_PT = 72 / BASE_DPI


def _figure(frame: Frame) -> Figure:
    fig = Figure(figsize=(frame.width / BASE_DPI, frame.height / BASE_DPI), dpi=BASE_DPI)
    ax = fig.add_axes((0, 0, 1, 1))
    ax.set_xlim(0, frame.width)
    ax.set_ylim(frame.height, 0)  # screen coordinates, y grows downwards
    ax.set_aspect("equal")
    ax.axis("off")
    return fig


def _node_patch(node: NodePrimitive, **kwargs) -> Patch:
    if node.shape == SHAPE_HEXAGON:
        points = [(node.x + x, node.y + y) for x, y in hexagon_points(node.size)]
        return Polygon(points, closed=True, **kwargs)
    return Circle((node.x, node.y), node.size, **kwargs)


def draw_frame(frame: Frame, frame_style: str = "none") -> Figure:
    """
    Draw a projected frame onto a new matplotlib figure.

    Photos are not fetched; each node is drawn as its bordered shape with the short label.
    """
    if not frame.settled:
        log.warning("Exporting a frame that has not settled", extra={"tick": frame.tick})

    palette = frame.palette
    fig = _figure(frame)
    ax = fig.axes[0]

    ax.add_patch(
        Rectangle((0, 0), frame.width, frame.height, facecolor=palette.gradient_outer, zorder=0)
    )

    # Links
    for edge in frame.edges:
        if edge.curved:
            points = arc_points(edge.x0, edge.y0, edge.x1, edge.y1)
        else:
            points = [(edge.x0, edge.y0), (edge.x1, edge.y1)]
        xs, ys = zip(*points)
        ax.plot(
            xs,
            ys,
            color=edge.stroke,
            linewidth=edge.width * PX_TO_PT,
            alpha=edge.opacity,
            linestyle=(0, (4, 4)) if edge.dasharray else "-",
            zorder=1,
        )

    # Particles
    if frame.particles:
        ax.scatter(
            [p.x for p in frame.particles],
            [p.y for p in frame.particles],
            s=[(p.size * 2 * PX_TO_PT) ** 2 for p in frame.particles],
            color=palette.accent_primary,
            alpha=PARTICLE_OPACITY,
            linewidths=0,
            zorder=2,
        )

    # Nodes
    for node in frame.nodes:
        if node.glow:
            ax.add_patch(
                _node_patch(
                    node,
                    facecolor="none",
                    edgecolor=node.stroke,
                    linewidth=node.stroke_width * 4 * PX_TO_PT,
                    alpha=0.3,
                    zorder=3,
                )
            )
        ax.add_patch(
            _node_patch(
                node,
                facecolor=node.fill,
                edgecolor=node.stroke,
                linewidth=node.stroke_width * PX_TO_PT,
                zorder=4,
            )
        )
        ax.text(
            node.x,
            node.y + node.label_y,
            node.label,
            ha="center",
            va="center",
            color=palette.text_primary,
            fontsize=11 * PX_TO_PT,
            zorder=5,
        )

    style = FRAME_STYLES.get(frame_style)
    if style is not None:
        color, width = style
        ax.add_patch(
            Rectangle(
                (width / 2, width / 2),
                frame.width - width,
                frame.height - width,
                facecolor="none",
                edgecolor=color,
                linewidth=width * PX_TO_PT,
                zorder=6,
            )
        )

    return fig


def export_png(frame: Frame, output_path: Path, frame_style: str = "none", scale: int = 2) -> Path:
    """Write a PNG snapshot at `scale` times the viewport resolution."""
    output_path = Path(output_path)
    fig = draw_frame(frame, frame_style)
    fig.savefig(output_path, format="png", dpi=BASE_DPI * scale)
    log.info("Graph saved", extra={"path": str(output_path), "format": "png"})
    return output_path


def export_pdf(
    frames: Frame | list[Frame],
    output_path: Path,
    frame_style: str = "none",
    title: str | None = None,
) -> Path:
    """
    Write one PDF page per frame, optionally preceded by a title page.
    """
    output_path = Path(output_path)
    if isinstance(frames, Frame):
        frames = [frames]

    with PdfPages(output_path) as pdf:
        if title:
            first = frames[0]
            cover = _figure(first)
            ax = cover.axes[0]
            ax.add_patch(
                Rectangle(
                    (0, 0),
                    first.width,
                    first.height,
                    facecolor=first.palette.gradient_outer,
                    zorder=0,
                )
            )
            ax.text(
                first.width / 2,
                first.height / 2,
                title,
                ha="center",
                va="center",
                fontsize=28,
                color=first.palette.text_primary,
                zorder=1,
            )
            pdf.savefig(cover)
        for frame in frames:
            pdf.savefig(draw_frame(frame, frame_style))

    log.info(
        "Graph saved", extra={"path": str(output_path), "format": "pdf", "pages": len(frames)}
    )
    return output_path
