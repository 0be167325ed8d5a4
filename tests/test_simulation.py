import unittest

from errors import SimulationStateError, UnknownNodeError
from forces import CenterForce, Link, LinkForce, SimNode
from layout import (
    BANDS,
    ORGANIC_ANCHORED_CENTER_STRENGTH,
    ORGANIC_FREE_CENTER_STRENGTH,
    TREE_CENTER_STRENGTH,
    band_y,
    build_simulation,
    center_strength,
    link_distance,
)
from models import (
    PARENT_CHILD,
    ROLE_CHILD,
    ROLE_GRANDPARENT,
    ROLE_PARENT,
    SPOUSE,
    Edge,
    GraphData,
    Node,
)
from simulation import DRAG_ALPHA_TARGET, RUNNING, STOPPED, UNINITIALIZED, Simulation
from view_settings import LAYOUT_ORGANIC, LAYOUT_TREE, ViewSettings

WIDTH, HEIGHT = 800, 600


def family() -> GraphData:
    """me with two parents and two children."""
    return GraphData(
        nodes=[
            Node("me", "Me Myself", "me"),
            Node("dad", "Dad", "parent"),
            Node("mom", "Mom", "parent"),
            Node("kid1", "Kid One", "child"),
            Node("kid2", "Kid Two", "child"),
        ],
        edges=[
            Edge("e1", "dad", "me", PARENT_CHILD),
            Edge("e2", "mom", "me", PARENT_CHILD),
            Edge("e3", "dad", "mom", SPOUSE),
            Edge("e4", "me", "kid1", PARENT_CHILD),
            Edge("e5", "me", "kid2", PARENT_CHILD),
        ],
    )


class TestBuildSimulation(unittest.TestCase):

    def test_not_started(self):
        sim = build_simulation(family(), ViewSettings(), WIDTH, HEIGHT, seed=1)
        self.assertEqual(sim.state, UNINITIALIZED)
        self.assertFalse(sim.step())

    def test_inferred_edges_included_once(self):
        sim = build_simulation(family(), ViewSettings(), WIDTH, HEIGHT, seed=1)

        ids = [link.edge.id for link in sim.links]

        self.assertEqual(len(ids), 6)
        self.assertEqual(len(set(ids)), 6)
        self.assertIn("inferred-kid1-kid2", ids)

    def test_tree_forces(self):
        sim = build_simulation(family(), ViewSettings(layout=LAYOUT_TREE), WIDTH, HEIGHT)
        self.assertEqual(sim.force_names, ["link", "charge", "collide", "center", "y"])
        self.assertEqual(sim.get_force("center").strength, TREE_CENTER_STRENGTH)

    def test_organic_forces(self):
        sim = build_simulation(family(), ViewSettings(layout=LAYOUT_ORGANIC), WIDTH, HEIGHT)
        self.assertNotIn("y", sim.force_names)
        self.assertEqual(sim.get_force("center").strength, ORGANIC_ANCHORED_CENTER_STRENGTH)

    def test_organic_without_me_centers_harder(self):
        graph = family()
        graph.nodes[0].role = "sibling"

        sim = build_simulation(graph, ViewSettings(layout=LAYOUT_ORGANIC), WIDTH, HEIGHT)

        self.assertIsNone(sim.me)
        self.assertEqual(sim.get_force("center").strength, ORGANIC_FREE_CENTER_STRENGTH)

    def test_center_strength(self):
        self.assertEqual(center_strength(LAYOUT_TREE, False), TREE_CENTER_STRENGTH)
        self.assertEqual(center_strength(LAYOUT_ORGANIC, True), 0.05)
        self.assertEqual(center_strength(LAYOUT_ORGANIC, False), 0.8)

    def test_caller_nodes_untouched(self):
        graph = family()

        sim = build_simulation(graph, ViewSettings(), WIDTH, HEIGHT, seed=1)
        sim.settle()

        self.assertIsNot(sim.nodes[0].node, graph.nodes[0])
        self.assertEqual(len(graph.edges), 5)


class TestBanding(unittest.TestCase):

    def test_parent_band_above_child_band(self):
        self.assertLess(band_y(ROLE_PARENT, HEIGHT), band_y(ROLE_CHILD, HEIGHT))
        self.assertLess(band_y(ROLE_GRANDPARENT, HEIGHT), band_y(ROLE_PARENT, HEIGHT))

    def test_band_order(self):
        order = ["great_grandparent", "grandparent", "parent", "me", "child"]
        fractions = [BANDS[role] for role in order]
        self.assertEqual(fractions, sorted(fractions))
        self.assertEqual(BANDS["me"], BANDS["spouse"])
        self.assertEqual(BANDS["me"], BANDS["sibling"])
        self.assertEqual(BANDS["me"], BANDS["pet"])

    def test_unknown_role_gets_default_band(self):
        self.assertEqual(band_y("cousin", 1000), 500)

    def test_y_force_targets(self):
        sim = build_simulation(family(), ViewSettings(layout=LAYOUT_TREE), WIDTH, HEIGHT)

        targets = dict(zip((n.id for n in sim.nodes), sim.get_force("y").targets))

        self.assertLess(targets["dad"], targets["kid1"])
        self.assertAlmostEqual(targets["dad"], 0.35 * HEIGHT)

    def test_link_distances(self):
        sim = build_simulation(family(), ViewSettings(), WIDTH, HEIGHT)
        distances = {link.edge.id: link_distance(link) for link in sim.links}
        self.assertEqual(distances["e3"], 60)
        self.assertEqual(distances["e1"], 120)
        self.assertEqual(distances["inferred-kid1-kid2"], 180)


class TestSimulation(unittest.TestCase):

    def setUp(self):
        self.sim = build_simulation(family(), ViewSettings(), WIDTH, HEIGHT, seed=7)

    def test_me_pinned_at_center(self):
        self.sim.settle()
        me = self.sim.node("me")
        self.assertEqual((me.x, me.y), (WIDTH / 2, HEIGHT / 2))

    def test_me_pinned_in_organic_layout(self):
        sim = build_simulation(family(), ViewSettings(layout=LAYOUT_ORGANIC), WIDTH, HEIGHT)
        sim.settle()
        self.assertEqual(sim.positions()["me"], (WIDTH / 2, HEIGHT / 2))

    def test_settle_reaches_equilibrium(self):
        steps = self.sim.settle(max_ticks=1000)

        self.assertEqual(self.sim.state, STOPPED)
        self.assertLess(self.sim.alpha, self.sim.alpha_min)
        self.assertLess(steps, 1000)
        self.assertEqual(self.sim.ticks, steps)

    def test_same_seed_same_layout(self):
        other = build_simulation(family(), ViewSettings(), WIDTH, HEIGHT, seed=7)
        self.sim.settle()
        other.settle()
        self.assertEqual(self.sim.positions(), other.positions())

    def test_malformed_edge_is_excluded(self):
        graph = family()
        graph.edges.append(Edge("bad", "me", "ghost", SPOUSE))

        sim = build_simulation(graph, ViewSettings(), WIDTH, HEIGHT)

        self.assertNotIn("bad", [link.edge.id for link in sim.links])
        self.assertEqual(len(sim.diagnostics), 1)
        self.assertEqual(sim.diagnostics[0].edge_id, "bad")
        self.assertIn("ghost", sim.diagnostics[0].message)

    def test_dangling_child_gets_no_inferred_siblings(self):
        graph = family()
        graph.edges.append(Edge("lost", "me", "ghost", PARENT_CHILD))

        sim = build_simulation(graph, ViewSettings(), WIDTH, HEIGHT)

        self.assertEqual([d.edge_id for d in sim.diagnostics], ["lost"])
        self.assertNotIn("inferred-ghost-kid1", [link.edge.id for link in sim.links])

    def test_tick_and_end_listeners(self):
        ticks = []
        ends = []
        self.sim.on_tick(lambda s: ticks.append(s.ticks))
        self.sim.on_end(lambda s: ends.append(s.ticks))

        self.sim.settle()

        self.assertEqual(len(ticks), self.sim.ticks)
        self.assertEqual(ends, [self.sim.ticks])

    def test_unsubscribe(self):
        calls = []
        unsubscribe = self.sim.on_tick(lambda s: calls.append(1))
        self.sim.start()
        self.sim.step()
        unsubscribe()
        self.sim.step()
        self.assertEqual(calls, [1])

    def test_dispose_releases_listeners(self):
        calls = []
        self.sim.on_tick(lambda s: calls.append(1))
        self.sim.start()

        self.sim.dispose()

        self.assertFalse(self.sim.step())
        self.assertEqual(calls, [])
        with self.assertRaises(SimulationStateError):
            self.sim.start()

    def test_context_manager_disposes(self):
        with build_simulation(family(), ViewSettings(), WIDTH, HEIGHT) as sim:
            self.assertTrue(sim.running)
        self.assertTrue(sim.disposed)


class TestDrag(unittest.TestCase):

    def setUp(self):
        self.sim = build_simulation(family(), ViewSettings(), WIDTH, HEIGHT, seed=3)
        self.sim.settle()

    def test_drag_cycle_releases_pin(self):
        self.sim.drag_start("kid1")
        self.assertEqual(self.sim.state, RUNNING)
        self.assertEqual(self.sim.alpha_target, DRAG_ALPHA_TARGET)

        self.sim.drag_move("kid1", 10, 20)
        self.sim.step()
        kid = self.sim.node("kid1")
        self.assertEqual((kid.x, kid.y), (10, 20))

        self.sim.drag_end("kid1")
        self.assertFalse(kid.pinned)
        self.assertEqual(self.sim.alpha_target, 0)

    def test_me_returns_to_center(self):
        self.sim.drag_start("me")
        self.sim.drag_move("me", 5, 5)
        self.sim.step()
        self.sim.drag_end("me")
        self.sim.step()

        me = self.sim.node("me")
        self.assertEqual((me.fx, me.fy), (WIDTH / 2, HEIGHT / 2))
        self.assertEqual((me.x, me.y), (WIDTH / 2, HEIGHT / 2))

    def test_me_stays_put_while_dragged(self):
        self.sim.drag_start("me")
        self.sim.drag_move("me", 10, 10)
        self.sim.step()

        me = self.sim.node("me")
        self.assertEqual(self.sim.state, RUNNING)
        self.assertEqual((me.fx, me.fy), (WIDTH / 2, HEIGHT / 2))
        self.assertEqual((me.x, me.y), (WIDTH / 2, HEIGHT / 2))

    def test_overlapping_drags_keep_budget(self):
        self.sim.drag_start("kid1")
        self.sim.drag_start("kid2")
        self.sim.drag_end("kid1")
        self.assertEqual(self.sim.alpha_target, DRAG_ALPHA_TARGET)
        self.sim.drag_end("kid2")
        self.assertEqual(self.sim.alpha_target, 0)

    def test_unknown_node(self):
        with self.assertRaises(UnknownNodeError) as ctx:
            self.sim.drag_start("nobody")
        self.assertIsInstance(ctx.exception, KeyError)
        self.assertEqual(ctx.exception.node_id, "nobody")


class TestForces(unittest.TestCase):

    def make_nodes(self, *points):
        nodes = []
        for i, (x, y) in enumerate(points):
            node = SimNode(i, Node(f"n{i}", f"Node {i}", "sibling"))
            node.x, node.y, node.vx, node.vy = x, y, 0.0, 0.0
            nodes.append(node)
        return nodes

    def test_link_pulls_stretched_pair_together(self):
        a, b = self.make_nodes((0, 0), (300, 0))
        link = Link(0, a, b, Edge("e", "n0", "n1", PARENT_CHILD))
        force = LinkForce([link], distance=lambda _: 100)
        force.initialize([a, b], Simulation([], [], 1, 1, seed=0).rng)

        force(1.0)

        self.assertGreater(a.vx, 0)
        self.assertLess(b.vx, 0)
        self.assertAlmostEqual(a.vx, -b.vx)

    def test_center_shifts_mean(self):
        nodes = self.make_nodes((0, 0), (10, 0))
        force = CenterForce(100, 100, strength=1.0)
        force.initialize(nodes, None)

        force(1.0)

        self.assertAlmostEqual(sum(n.x for n in nodes) / 2, 100)
        self.assertAlmostEqual(sum(n.y for n in nodes) / 2, 100)


if __name__ == "__main__":
    unittest.main()
