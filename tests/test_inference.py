import unittest

from inference import (
    children_by_parent,
    infer_sibling_edges,
    inferred_edge_id,
    with_inferred_edges,
)
from models import PARENT_CHILD, SIBLING, SIBLING_INFERRED, SPOUSE, Edge


def parent_of(parent, child, edge_id=None):
    return Edge(edge_id or f"{parent}-{child}", parent, child, PARENT_CHILD, 1.2)


class TestSiblingInference(unittest.TestCase):

    def test_two_children_of_one_parent(self):
        edges = [parent_of("P", "A"), parent_of("P", "B")]

        inferred = infer_sibling_edges(edges)

        self.assertEqual(len(inferred), 1)
        self.assertEqual(inferred[0].id, "inferred-A-B")
        self.assertEqual(inferred[0].type, SIBLING_INFERRED)
        self.assertEqual(inferred[0].pair, frozenset(("A", "B")))

    def test_three_children_get_every_pair(self):
        edges = [parent_of("P", "A"), parent_of("P", "B"), parent_of("P", "C")]

        pairs = {e.pair for e in infer_sibling_edges(edges)}

        self.assertEqual(
            pairs,
            {frozenset(("A", "B")), frozenset(("A", "C")), frozenset(("B", "C"))},
        )

    def test_shared_parents_produce_one_edge(self):
        edges = [
            parent_of("F", "A"),
            parent_of("F", "B"),
            parent_of("M", "A"),
            parent_of("M", "B"),
        ]

        inferred = infer_sibling_edges(edges)

        self.assertEqual([e.id for e in inferred], ["inferred-A-B"])

    def test_existing_edge_in_either_direction_blocks_inference(self):
        for existing in (
            Edge("s1", "B", "A", SIBLING),
            Edge("s2", "A", "B", SPOUSE),
        ):
            with self.subTest(existing=existing.type):
                edges = [parent_of("P", "A"), parent_of("P", "B"), existing]
                self.assertEqual(infer_sibling_edges(edges), [])

    def test_idempotent(self):
        edges = [parent_of("P", "A"), parent_of("P", "B"), parent_of("P", "C")]

        once = with_inferred_edges(edges)

        self.assertEqual(infer_sibling_edges(once), [])

    def test_no_parent_child_edges(self):
        edges = [Edge("s", "A", "B", SPOUSE)]
        self.assertEqual(infer_sibling_edges(edges), [])
        self.assertEqual(infer_sibling_edges([]), [])

    def test_inputs_are_not_modified(self):
        edges = [parent_of("P", "A"), parent_of("P", "B")]

        combined = with_inferred_edges(edges)

        self.assertEqual(len(edges), 2)
        self.assertEqual(len(combined), 3)
        self.assertIs(combined[0], edges[0])

    def test_inferred_id_is_order_independent(self):
        self.assertEqual(inferred_edge_id("x", "a"), inferred_edge_id("a", "x"))

    def test_children_grouped_without_repeats(self):
        edges = [parent_of("P", "A", "e1"), parent_of("P", "A", "e2"), parent_of("P", "B")]
        self.assertEqual(children_by_parent(edges), {"P": ["A", "B"]})

    def test_children_outside_known_nodes_are_skipped(self):
        edges = [parent_of("P", "A"), parent_of("P", "GHOST"), parent_of("P", "B")]

        inferred = infer_sibling_edges(edges, known={"P", "A", "B"})

        self.assertEqual([e.id for e in inferred], ["inferred-A-B"])
        self.assertEqual(infer_sibling_edges(edges[:2], known={"P", "A"}), [])
        self.assertEqual(len(infer_sibling_edges(edges[:2])), 1)


if __name__ == "__main__":
    unittest.main()
