"""Serialize a projected frame to an SVG document."""

import xml.etree.ElementTree as ET
from pathlib import Path

from geometry import fmt
from projection import PARTICLE_OPACITY, Frame, NodePrimitive
from view_settings import SHAPE_HEXAGON

SVG_NS = "http://www.w3.org/2000/svg"
XLINK_NS = "http://www.w3.org/1999/xlink"

GLOW_FILTER_ID = "soft-glow"
BACKGROUND_ID = "bg-gradient"
LABEL_STYLE = (
    "font-size:11px;font-family:sans-serif;font-weight:400;letter-spacing:0.5px;"
    "pointer-events:none;text-shadow:0 2px 4px rgba(0,0,0,0.5)"
)


def _defs(root: ET.Element, frame: Frame):
    defs = ET.SubElement(root, "defs")

    gradient = ET.SubElement(defs, "radialGradient", id=BACKGROUND_ID, cx="50%", cy="50%", r="75%")
    ET.SubElement(
        gradient, "stop", offset="0%", attrib={"stop-color": frame.palette.gradient_inner}
    )
    ET.SubElement(
        gradient, "stop", offset="100%", attrib={"stop-color": frame.palette.gradient_outer}
    )

    glow = ET.SubElement(defs, "filter", id=GLOW_FILTER_ID)
    ET.SubElement(glow, "feGaussianBlur", stdDeviation="2", result="coloredBlur")
    merge = ET.SubElement(glow, "feMerge")
    ET.SubElement(merge, "feMergeNode", attrib={"in": "coloredBlur"})
    ET.SubElement(merge, "feMergeNode", attrib={"in": "SourceGraphic"})


def _shape(parent: ET.Element, node: NodePrimitive, **attrib) -> ET.Element:
    if node.shape == SHAPE_HEXAGON:
        return ET.SubElement(parent, "path", d=node.shape_path, attrib=attrib)
    return ET.SubElement(parent, "circle", r=fmt(node.size), attrib=attrib)


def _node(parent: ET.Element, node: NodePrimitive, frame: Frame):
    outer = ET.SubElement(
        parent,
        "g",
        transform=f"translate({fmt(node.x)},{fmt(node.y)})",
        attrib={"data-id": node.id},
    )
    group = ET.SubElement(outer, "g", attrib={"class": "node-group"})

    border = {
        "fill": node.fill,
        "stroke": node.stroke,
        "stroke-width": fmt(node.stroke_width),
    }
    if node.glow:
        border["filter"] = f"url(#{GLOW_FILTER_ID})"
    _shape(group, node, **border)

    clip = ET.SubElement(group, "clipPath", id=node.clip_id)
    _shape(clip, node)

    ET.SubElement(
        group,
        "image",
        x=fmt(-node.size),
        y=fmt(-node.size),
        width=fmt(node.size * 2),
        height=fmt(node.size * 2),
        preserveAspectRatio="xMidYMid slice",
        attrib={"xlink:href": node.image_href, "clip-path": f"url(#{node.clip_id})"},
    )

    label = ET.SubElement(
        group,
        "text",
        y=fmt(node.label_y),
        fill=frame.palette.text_primary,
        style=LABEL_STYLE,
        attrib={"text-anchor": "middle"},
    )
    label.text = node.label


def build_svg(frame: Frame) -> ET.Element:
    root = ET.Element(
        "svg",
        attrib={
            "xmlns": SVG_NS,
            "xmlns:xlink": XLINK_NS,
            "class": "family-graph",
            "width": fmt(frame.width),
            "height": fmt(frame.height),
            "viewBox": f"0 0 {fmt(frame.width)} {fmt(frame.height)}",
        },
    )
    _defs(root, frame)
    ET.SubElement(root, "rect", width="100%", height="100%", fill=f"url(#{BACKGROUND_ID})")

    links = ET.SubElement(root, "g", attrib={"class": "links"})
    for edge in frame.edges:
        attrib = {
            "d": edge.path,
            "fill": "none",
            "stroke": edge.stroke,
            "stroke-width": fmt(edge.width),
            "stroke-opacity": fmt(edge.opacity),
            "data-id": edge.id,
            "data-type": edge.type,
        }
        if edge.dasharray:
            attrib["stroke-dasharray"] = edge.dasharray
        ET.SubElement(links, "path", attrib=attrib)

    if frame.particles:
        particles = ET.SubElement(root, "g", attrib={"class": "particles"})
        for p in frame.particles:
            ET.SubElement(
                particles,
                "circle",
                cx=fmt(p.x),
                cy=fmt(p.y),
                r=fmt(p.size),
                fill=frame.palette.accent_primary,
                opacity=fmt(PARTICLE_OPACITY),
            )

    nodes = ET.SubElement(root, "g", attrib={"class": "nodes"})
    for node in frame.nodes:
        _node(nodes, node, frame)

    return root


def render_svg(frame: Frame) -> str:
    """SVG markup for a frame."""
    return ET.tostring(build_svg(frame), encoding="unicode")


def write_svg(frame: Frame, path: Path) -> Path:
    path = Path(path)
    path.write_text(render_svg(frame), encoding="utf-8")
    return path
