"""
The Atlas: turns the layered ASCII maps of a level into room adjacency.

A level carries one grid per layer (z), each a list of rows (y), each row a
string of cells (x):

    "--###--"     '.'  a room
    "--#.#--"     '#'  wall
    "--#..## 3"   '-'  void
                  ' '  ends the row, anything after it is a comment
"""
import logging
from collections import namedtuple

from stoneend.errors import ContentError

logger = logging.getLogger(__name__)

DIRECTIONS = ("north", "east", "south", "west")

DIRECTION_DELTAS = {
    "north": (0, -1),
    "east": (1, 0),
    "south": (0, 1),
    "west": (-1, 0),
}

ROOM_CELL = "."
WALL_CELLS = ("#", "-")
COMMENT_START = " "


class Coord(namedtuple("Coord", ["x", "y", "z"])):
    __slots__ = ()

    def apply(self, direction):
        """The neighbouring coordinate, or None when it would fall off the grid."""
        dx, dy = DIRECTION_DELTAS[direction]
        if self.x + dx < 0 or self.y + dy < 0:
            return None
        return Coord(self.x + dx, self.y + dy, self.z)

    def to_state(self):
        return [self.x, self.y, self.z]

    @classmethod
    def from_state(cls, data):
        if not isinstance(data, (list, tuple)) or len(data) != 3:
            raise ValueError(f"A coordinate must be [x, y, z], got {data!r}")
        if not all(isinstance(n, int) and not isinstance(n, bool) and n >= 0 for n in data):
            raise ValueError(f"Coordinates must be non-negative integers, got {data!r}")
        return cls(*data)

    def __str__(self):
        return f"[{self.x}, {self.y}, {self.z}]"


# ==========================================================
# 1. CELL SCAN
# ==========================================================
def scan_cells(maps):
    """
    First pass: every passable coordinate in every layer.
    An unknown character stops the scan right away with a pointer at the cell.
    """
    passable = set()
    for z, layer in enumerate(maps):
        for y, row in enumerate(layer):
            for x, ch in enumerate(row):
                if ch == COMMENT_START:
                    break
                if ch == ROOM_CELL:
                    passable.add(Coord(x, y, z))
                elif ch not in WALL_CELLS:
                    coord = Coord(x, y, z)
                    raise ContentError(
                        f"Unknown character {ch!r} in the map at {coord}.\n"
                        + render_map_pointer(maps, coord)
                    )
    return passable


# ==========================================================
# 2. ADJACENCY
# ==========================================================
def link_cells(passable):
    """
    Second pass: a {direction: Coord | None} record for each passable coordinate.
    """
    links = {}
    for coord in passable:
        record = {}
        for direction in DIRECTIONS:
            neighbour = coord.apply(direction)
            record[direction] = neighbour if neighbour in passable else None
        links[coord] = record
    return links


def missing_room_issues(maps, passable, room_coords):
    """One issue per passable cell with no room, each with a stub to paste in."""
    issues = []
    for coord in sorted(passable, key=lambda c: (c.z, c.y, c.x)):
        if coord in room_coords:
            continue
        issues.append(
            f"No room is defined for the map cell {coord}. Add the following:\n\n"
            f"  - title: TODO\n"
            f"    coord: [{coord.x}, {coord.y}, {coord.z}]\n"
            f"    description: TODO\n\n"
            + render_map_pointer(maps, coord)
        )
    if issues:
        logger.debug("%d map cells have no room", len(issues))
    return issues


def render_map_pointer(maps, coord):
    """The rows of the coordinate's layer down to its row, with a caret under the cell."""
    if coord.z >= len(maps):
        return f"No map was found at layer: {coord.z}"

    lines = []
    for y, row in enumerate(maps[coord.z]):
        lines.append(row)
        if y == coord.y:
            lines.append(" " * coord.x + "^")
            break
    return "\n".join(lines)
