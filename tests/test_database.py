import unittest

from database import FamilyStore, relationship_for
from errors import DataSourceError
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


class TestRelationshipFor(unittest.TestCase):

    def test_child_hint_runs_from_existing_parent(self):
        rel = relationship_for("new", RelationshipHint(target_id="old", type="child"))
        self.assertEqual((rel.source_id, rel.target_id), ("old", "new"))
        self.assertEqual((rel.type, rel.strength), (PARENT_CHILD, 1.2))

    def test_parent_hint_runs_from_new_parent(self):
        rel = relationship_for("new", RelationshipHint(target_id="old", type="parent"))
        self.assertEqual((rel.source_id, rel.target_id), ("new", "old"))
        self.assertEqual(rel.type, PARENT_CHILD)

    def test_type_and_strength_rules(self):
        cases = {
            "spouse": (SPOUSE, 1.5),
            "sibling": (SIBLING, 1.0),
            "pet": (PET_OWNER, 0.8),
            "grandparent": (GRANDPARENT_GRANDCHILD, 0.5),
            "cousin": (PARENT_CHILD, 1.0),
        }
        for hint_type, expected in cases.items():
            with self.subTest(hint=hint_type):
                rel = relationship_for("new", RelationshipHint("old", hint_type))
                self.assertEqual((rel.type, rel.strength), expected)
                self.assertTrue(rel.id)


class TestFamilyStore(unittest.TestCase):

    def setUp(self):
        self.store = FamilyStore(":memory:")
        self.notified = []
        self.store.subscribe(lambda: self.notified.append(1))

    def tearDown(self):
        self.store.close()

    def test_empty(self):
        self.assertEqual(self.store.fetch_all(), ([], []))

    def test_add_profile_with_hint(self):
        me = self.store.add_profile(Profile(id="me", name="Ada", role="me"))
        mom = self.store.add_profile(
            Profile(id=None, name="Anne", role="parent"), RelationshipHint("me", "parent")
        )

        profiles, relationships = self.store.fetch_all()

        self.assertEqual([p.id for p in profiles], [me.id, mom.id])
        self.assertTrue(mom.id)
        self.assertEqual(len(relationships), 1)
        self.assertEqual((relationships[0].source_id, relationships[0].target_id), (mom.id, "me"))
        self.assertEqual(len(self.notified), 2)

    def test_store_data_round_trip_fields(self):
        self.store.store_data(
            [Profile("p1", "Rex", "pet", type="pet", life_status="deceased", age=9)],
            [Relationship("r1", "me", "p1", PET_OWNER, 0.8)],
        )

        profiles, relationships = self.store.fetch_all()

        self.assertEqual(profiles[0], Profile("p1", "Rex", "pet", "pet", "deceased", None, 9))
        self.assertEqual(relationships[0], Relationship("r1", "me", "p1", PET_OWNER, 0.8))
        self.assertEqual(len(self.notified), 1)

    def test_add_relationship_assigns_id(self):
        rel = self.store.add_relationship(Relationship(None, "a", "b", SPOUSE, 1.5))
        self.assertTrue(rel.id)
        self.assertEqual(self.store.fetch_all()[1][0].id, rel.id)

    def test_unsubscribe(self):
        calls = []
        unsubscribe = self.store.subscribe(lambda: calls.append(1))
        unsubscribe()
        self.store.add_profile(Profile("x", "X", "sibling"))
        self.assertEqual(calls, [])

    def test_closed_store_raises(self):
        self.store.close()
        with self.assertRaises(DataSourceError):
            self.store.fetch_all()


if __name__ == "__main__":
    unittest.main()
