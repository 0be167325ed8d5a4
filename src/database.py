"""SQLite storage for family profiles and relationships."""

import dataclasses
import sqlite3
import uuid
from collections.abc import Callable, Iterable
from pathlib import Path

from errors import DataSourceError
from logger import get_logger
from models import (
    GRANDPARENT_GRANDCHILD,
    PARENT_CHILD,
    PET_OWNER,
    SIBLING,
    SPOUSE,
    Profile,
    Relationship,
    RelationshipHint,
)

log = get_logger(__name__)

# hint type -> (edge type, strength)
HINT_RULES = {
    "spouse": (SPOUSE, 1.5),
    "child": (PARENT_CHILD, 1.2),
    "parent": (PARENT_CHILD, 1.2),
    "sibling": (SIBLING, 1.0),
    "pet": (PET_OWNER, 0.8),
    "grandparent": (GRANDPARENT_GRANDCHILD, 0.5),
}
DEFAULT_RULE = (PARENT_CHILD, 1.0)


def create_database(db_path: Path | str) -> sqlite3.Connection:
    """Create SQLite database with profile and relationship tables."""
    conn = sqlite3.connect(str(db_path))
    cursor = conn.cursor()

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS profile (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            role TEXT NOT NULL,
            type TEXT NOT NULL DEFAULT 'human',
            life_status TEXT NOT NULL DEFAULT 'living',
            photo_url TEXT,
            age INTEGER
        )
    """)

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS relationship (
            id TEXT PRIMARY KEY,
            source_id TEXT NOT NULL,
            target_id TEXT NOT NULL,
            type TEXT NOT NULL,
            strength REAL NOT NULL DEFAULT 1.0,
            FOREIGN KEY (source_id) REFERENCES profile(id),
            FOREIGN KEY (target_id) REFERENCES profile(id)
        )
    """)

    conn.commit()
    return conn


def relationship_for(new_profile_id: str, hint: RelationshipHint) -> Relationship:
    """
    Build the relationship record that attaches a new profile to an existing one.

    parent_child edges always run parent -> child: for a "child" hint the existing profile is
    the parent, for a "parent" hint the new profile is. Every other type runs new -> existing.
    """
    rel_type, strength = HINT_RULES.get(hint.type, DEFAULT_RULE)

    source, target = new_profile_id, hint.target_id
    if hint.type == "child":
        source, target = hint.target_id, new_profile_id

    return Relationship(
        id=str(uuid.uuid4()),
        source_id=source,
        target_id=target,
        type=rel_type,
        strength=strength,
    )


class FamilyStore:
    """Profile/relationship data source with change notification."""

    def __init__(self, db_path: Path | str = ":memory:"):
        try:
            self.conn = create_database(db_path)
        except sqlite3.Error as e:
            raise DataSourceError(f"Could not open database {db_path}: {e}") from e
        self._listeners: list[Callable[[], None]] = []

    def close(self):
        self.conn.close()

    def subscribe(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Call `callback` after every change. Returns an unsubscribe function."""
        self._listeners.append(callback)

        def unsubscribe():
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _notify(self):
        for callback in list(self._listeners):
            callback()

    def fetch_all(self) -> tuple[list[Profile], list[Relationship]]:
        """Full snapshot of profiles and relationships."""
        try:
            cursor = self.conn.cursor()
            cursor.execute(
                "SELECT id, name, role, type, life_status, photo_url, age "
                "FROM profile ORDER BY rowid"
            )
            profiles = [Profile(*row) for row in cursor.fetchall()]
            cursor.execute(
                "SELECT id, source_id, target_id, type, strength FROM relationship ORDER BY rowid"
            )
            relationships = [Relationship(*row) for row in cursor.fetchall()]
        except sqlite3.Error as e:
            raise DataSourceError(f"Could not read family data: {e}") from e
        return profiles, relationships

    def store_data(self, profiles: Iterable[Profile], relationships: Iterable[Relationship]):
        """Bulk insert profiles and relationships, then notify once."""
        profiles = [self._with_id(p) for p in profiles]
        relationships = [self._with_id(r) for r in relationships]
        try:
            cursor = self.conn.cursor()
            cursor.executemany(
                """
                INSERT OR REPLACE INTO profile
                (id, name, role, type, life_status, photo_url, age)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                [
                    (p.id, p.name, p.role, p.type, p.life_status, p.photo_url, p.age)
                    for p in profiles
                ],
            )
            cursor.executemany(
                """
                INSERT OR REPLACE INTO relationship (id, source_id, target_id, type, strength)
                VALUES (?, ?, ?, ?, ?)
                """,
                [(r.id, r.source_id, r.target_id, r.type, r.strength) for r in relationships],
            )
            self.conn.commit()
        except sqlite3.Error as e:
            self.conn.rollback()
            raise DataSourceError(f"Could not store family data: {e}") from e

        log.info(
            "Stored family data",
            extra={"profiles": len(profiles), "relationships": len(relationships)},
        )
        self._notify()

    def add_profile(self, profile: Profile, hint: RelationshipHint | None = None) -> Profile:
        """
        Insert a profile and, if a hint names an existing profile, the relationship that
        attaches it. Returns the stored profile (with its id).
        """
        profile = self._with_id(profile)
        relationships = []
        if hint is not None and hint.target_id:
            relationships.append(relationship_for(profile.id, hint))
        self.store_data([profile], relationships)
        return profile

    def add_relationship(self, relationship: Relationship) -> Relationship:
        relationship = self._with_id(relationship)
        self.store_data([], [relationship])
        return relationship

    @staticmethod
    def _with_id(record):
        if not record.id:
            record = dataclasses.replace(record, id=str(uuid.uuid4()))
        return record
