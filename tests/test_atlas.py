import unittest
import sys
import os

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
sys.path.append(os.path.abspath(os.path.dirname(__file__)))

from stoneend.atlas import Coord, DIRECTIONS, link_cells, missing_room_issues, render_map_pointer, scan_cells
from stoneend.errors import ContentError
from market_fixtures import level_data

OPPOSITE = {"north": "south", "south": "north", "east": "west", "west": "east"}


class TestCoord(unittest.TestCase):
    def test_apply_stops_at_grid_edge(self):
        self.assertIsNone(Coord(0, 0, 0).apply("north"))
        self.assertIsNone(Coord(0, 0, 0).apply("west"))
        self.assertEqual(Coord(0, 0, 0).apply("east"), Coord(1, 0, 0))
        self.assertEqual(Coord(0, 0, 0).apply("south"), Coord(0, 1, 0))

    def test_from_state_rejects_negative_and_short(self):
        with self.assertRaises(ValueError):
            Coord.from_state([1, -1, 0])
        with self.assertRaises(ValueError):
            Coord.from_state([1, 2])
        self.assertEqual(str(Coord.from_state([15, 10, 0])), "[15, 10, 0]")


class TestMapResolution(unittest.TestCase):
    def setUp(self):
        self.maps = level_data()["maps"]

    def test_scan_finds_every_room_cell(self):
        self.assertEqual(
            scan_cells(self.maps),
            {Coord(1, 1, 0), Coord(2, 1, 0), Coord(3, 1, 0), Coord(2, 2, 0)},
        )

    def test_trailing_comment_is_ignored(self):
        self.assertEqual(scan_cells([["-.- ##x ."]]), {Coord(1, 0, 0)})

    def test_links_are_symmetric(self):
        links = link_cells(scan_cells(self.maps))
        for coord, record in links.items():
            for direction in DIRECTIONS:
                neighbour = record[direction]
                if neighbour is not None:
                    self.assertEqual(links[neighbour][OPPOSITE[direction]], coord)

    def test_links_block_walls_and_edges(self):
        links = link_cells(scan_cells(self.maps))
        self.assertEqual(links[Coord(2, 2, 0)], {
            "north": Coord(2, 1, 0), "east": None, "south": None, "west": None,
        })
        # Rooms on the top row and left column have no neighbours off the grid.
        edge = link_cells(scan_cells([[".."]]))
        self.assertIsNone(edge[Coord(0, 0, 0)]["north"])
        self.assertIsNone(edge[Coord(0, 0, 0)]["west"])
        self.assertEqual(edge[Coord(0, 0, 0)]["east"], Coord(1, 0, 0))

    def test_layers_do_not_connect(self):
        links = link_cells(scan_cells([["."], ["."]]))
        self.assertEqual(set(links), {Coord(0, 0, 0), Coord(0, 0, 1)})
        self.assertTrue(all(n is None for n in links[Coord(0, 0, 0)].values()))

    def test_unknown_character_points_at_cell(self):
        with self.assertRaises(ContentError) as ctx:
            scan_cells([["---", "-x-"]])
        report = ctx.exception.report()
        self.assertIn("'x'", report)
        self.assertIn("[1, 1, 0]", report)
        self.assertIn("---\n-x-\n ^", report)

    def test_every_missing_room_is_reported(self):
        issues = missing_room_issues(self.maps, scan_cells(self.maps), {Coord(2, 1, 0)})
        self.assertEqual(len(issues), 3)
        self.assertTrue(all("title: TODO" in issue for issue in issues))
        self.assertIn("coord: [1, 1, 0]", issues[0])
        self.assertIn("-----\n-...- 1\n ^", issues[0])

    def test_no_issues_when_every_cell_has_a_room(self):
        passable = scan_cells(self.maps)
        self.assertEqual(missing_room_issues(self.maps, passable, passable), [])

    def test_pointer_for_missing_layer(self):
        self.assertEqual(render_map_pointer(self.maps, Coord(0, 0, 4)), "No map was found at layer: 4")


if __name__ == '__main__':
    unittest.main()
