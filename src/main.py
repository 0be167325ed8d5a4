"""
1) Open the family store (SQLite), optionally seeding it from a GEDCOM file.
2) Normalize profiles and relationships into graph nodes and edges.
3) Infer sibling links and run the force layout to equilibrium.
4) Validate the relationship data.
5) Write the settled frame as SVG, and optionally PNG/PDF snapshots.
"""

import argparse
from contextlib import closing
from pathlib import Path

from config import get_settings
from database import FamilyStore
from errors import FamGraphError
from export import FRAME_STYLES, export_pdf, export_png
from gedcom import import_gedcom
from graph_view import GraphView
from logger import get_logger
from svg import write_svg
from view_settings import CHOICES, ViewSettings, ViewSettingsStore


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="famgraph", description="Render a family graph.")
    parser.add_argument("--db", help="SQLite database path (default from FAMGRAPH_DATABASE_PATH)")
    parser.add_argument("--gedcom", type=Path, help="Import this GEDCOM file before rendering")
    parser.add_argument("--home", help="GEDCOM id of the person shown as 'me'")
    parser.add_argument("--layout", choices=CHOICES["layout"], default="tree")
    parser.add_argument("--link-style", choices=CHOICES["link_style"], default="curved")
    parser.add_argument("--theme", choices=CHOICES["theme"], default="midnight")
    parser.add_argument("--shape", choices=CHOICES["node_shape"], default="circle")
    parser.add_argument("--particles", action="store_true")
    parser.add_argument("--png", action="store_true", help="Also write a PNG snapshot")
    parser.add_argument("--pdf", action="store_true", help="Also write a PDF snapshot")
    parser.add_argument("--frame", choices=list(FRAME_STYLES), default="none")
    parser.add_argument("--title", default="My Family Tree")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    config = get_settings()
    log = get_logger("famgraph", config.LOG_LEVEL)
    args = parse_args(argv)

    output_dir = Path(config.OUTPUT_DIR)
    output_dir.mkdir(parents=True, exist_ok=True)
    svg_path = output_dir / "family_graph.svg"

    view_settings = ViewSettingsStore(
        ViewSettings(
            layout=args.layout,
            link_style=args.link_style,
            theme=args.theme,
            node_shape=args.shape,
            particles=args.particles,
        )
    )

    try:
        store = FamilyStore(args.db or config.DATABASE_PATH)
    except FamGraphError as e:
        log.error("Could not open family store", extra={"error": str(e)})
        return 1

    with closing(store):
        if args.gedcom:
            log.info("Importing GEDCOM file", extra={"path": str(args.gedcom)})
            try:
                profiles, relationships = import_gedcom(args.gedcom, args.home)
                store.store_data(profiles, relationships)
            except FamGraphError as e:
                log.error("Could not import GEDCOM file", extra={"error": str(e)})
                return 1

        with GraphView(
            source=store,
            settings=view_settings,
            width=config.VIEWPORT_WIDTH,
            height=config.VIEWPORT_HEIGHT,
            particle_count=config.PARTICLE_COUNT,
            seed=config.RANDOM_SEED,
            max_settle_ticks=config.MAX_SETTLE_TICKS,
        ) as view:
            for note in view.notifications:
                log.warning(note.message)

            # Show the first 10 validation warnings
            for warning in view.warnings[:10]:
                log.warning(warning)
            if len(view.warnings) > 10:
                log.warning(f"... and {len(view.warnings) - 10} more validation warnings")

            frame = view.settle()
            log.info(
                "Layout settled",
                extra={"ticks": frame.tick, "nodes": len(frame.nodes), "links": len(frame.edges)},
            )
            for diagnostic in view.simulation.diagnostics:
                log.warning(diagnostic.message, extra={"edge_id": diagnostic.edge_id})

            write_svg(frame, svg_path)
            log.info("Graph saved", extra={"path": str(svg_path), "format": "svg"})

            if args.png:
                export_png(frame, output_dir / "family_graph.png", frame_style=args.frame)
            if args.pdf:
                export_pdf(
                    frame,
                    output_dir / "family_graph.pdf",
                    frame_style=args.frame,
                    title=args.title,
                )

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
