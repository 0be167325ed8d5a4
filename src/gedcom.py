"""GEDCOM import: turn a genealogy file into profile and relationship records."""

from pathlib import Path

import networkx as nx
from ged4py import GedcomReader

from errors import DataSourceError
from logger import get_logger
from models import (
    DECEASED,
    LIVING,
    PARENT_CHILD,
    ROLE_CHILD,
    ROLE_GRANDPARENT,
    ROLE_GREAT_GRANDPARENT,
    ROLE_ME,
    ROLE_PARENT,
    ROLE_SIBLING,
    ROLE_SPOUSE,
    SPOUSE,
    Profile,
    Relationship,
)

log = get_logger(__name__)


def xref_to_id(xref_id: str) -> str:
    """'@I123@' -> 'I123'."""
    return xref_id.strip("@")


def parse_gedcom(filepath: Path) -> GedcomReader:
    """Parse a GEDCOM file and return the reader object."""
    try:
        return GedcomReader(str(filepath))
    except (OSError, ValueError) as e:
        raise DataSourceError(f"Could not read GEDCOM file {filepath}: {e}") from e


def extract_name(indi) -> str:
    """Full display name of an individual record."""
    name_rec = indi.sub_tag("NAME")
    if name_rec is None or name_rec.value is None:
        return "Unknown"

    name_value = name_rec.value

    # ged4py returns NAME as tuple: (given, surname, suffix)
    if isinstance(name_value, tuple):
        parts = [p for p in name_value if p]
        return " ".join(parts) if parts else "Unknown"

    # Fallback: string format "Given /Surname/"
    return " ".join(str(name_value).replace("/", " ").split()) or "Unknown"


def read_family(
    reader: GedcomReader,
) -> tuple[dict[str, dict], list[tuple[str, str]], list[tuple[str, str]]]:
    """
    Extract individuals, parent->child links and spouse pairs.

    Returns:
        (people, parent_links, spouse_pairs) where people maps id -> {"name", "deceased"}
    """
    people: dict[str, dict] = {}
    parent_links: list[tuple[str, str]] = []
    spouse_pairs: list[tuple[str, str]] = []

    # First pass: extract all individuals
    for rec in reader.records0("INDI"):
        if rec.xref_id is None:
            continue
        people[xref_to_id(rec.xref_id)] = {
            "name": extract_name(rec),
            "deceased": rec.sub_tag("DEAT") is not None,
        }

    # Second pass: extract family records
    for rec in reader.records0("FAM"):
        husb = rec.sub_tag("HUSB")
        wife = rec.sub_tag("WIFE")
        parents = [xref_to_id(p.xref_id) for p in (husb, wife) if p is not None and p.xref_id]

        if len(parents) == 2:
            spouse_pairs.append((parents[0], parents[1]))

        for child in rec.sub_tags("CHIL"):
            if not child.xref_id:
                continue
            for parent in parents:
                parent_links.append((parent, xref_to_id(child.xref_id)))

    return people, parent_links, spouse_pairs


def generation_offsets(
    home_id: str, parent_links: list[tuple[str, str]], spouse_pairs: list[tuple[str, str]]
) -> dict[str, int]:
    """
    Generation of every person connected to `home_id`, relative to it.

    Parents are -1, children +1, spouses share a generation. People with no path to the home
    person are left out.
    """
    G = nx.Graph()
    G.add_node(home_id)
    for parent, child in parent_links:
        G.add_edge(parent, child, parent=parent)
    for a, b in spouse_pairs:
        if not G.has_edge(a, b):
            G.add_edge(a, b, parent=None)

    offsets = {home_id: 0}
    for u, v in nx.bfs_edges(G, home_id):
        parent = G.edges[u, v]["parent"]
        if parent is None:
            delta = 0
        elif parent == u:
            delta = 1
        else:
            delta = -1
        offsets[v] = offsets[u] + delta
    return offsets


def role_for(person_id: str, offset: int, home_id: str, home_spouses: set[str]) -> str:
    if person_id == home_id:
        return ROLE_ME
    if offset == 0:
        return ROLE_SPOUSE if person_id in home_spouses else ROLE_SIBLING
    if offset == -1:
        return ROLE_PARENT
    if offset == -2:
        return ROLE_GRANDPARENT
    if offset < -2:
        return ROLE_GREAT_GRANDPARENT
    return ROLE_CHILD


def import_gedcom(
    filepath: Path, home_id: str | None = None
) -> tuple[list[Profile], list[Relationship]]:
    """
    Read a GEDCOM file into profile and relationship records.

    Roles are assigned relative to `home_id` (default: the first individual in the file).
    Individuals with no family path to the home person are skipped.
    """
    people, parent_links, spouse_pairs = read_family(parse_gedcom(filepath))
    if not people:
        return [], []

    if home_id is None:
        home_id = next(iter(people))
    elif home_id not in people:
        raise DataSourceError(f"Home person {home_id} not found in {filepath}")

    offsets = generation_offsets(home_id, parent_links, spouse_pairs)
    home_spouses = {b if a == home_id else a for a, b in spouse_pairs if home_id in (a, b)}
    included = {pid for pid in people if pid in offsets}

    profiles = [
        Profile(
            id=pid,
            name=person["name"],
            role=role_for(pid, offsets[pid], home_id, home_spouses),
            life_status=DECEASED if person["deceased"] else LIVING,
        )
        for pid, person in people.items()
        if pid in included
    ]

    relationships: list[Relationship] = []
    for a, b in spouse_pairs:
        if a in included and b in included:
            relationships.append(Relationship(f"{a}-{b}-spouse", a, b, SPOUSE, 1.5))
    for parent, child in parent_links:
        if parent in included and child in included:
            relationships.append(
                Relationship(f"{parent}-{child}-parent", parent, child, PARENT_CHILD, 1.2)
            )

    skipped = len(people) - len(profiles)
    if skipped:
        log.info("Skipped unconnected individuals", extra={"count": skipped})

    return profiles, relationships
