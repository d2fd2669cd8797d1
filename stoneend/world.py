"""
The World Model: rooms on the map grid, the regions they share, and the NPCs
standing in them.

Everything here is read-only once the level is loaded. Player progress lives
in the SessionState, keyed by the same coordinates.
"""
import logging
from collections import namedtuple

from stoneend.atlas import Coord, link_cells, missing_room_issues, render_map_pointer, scan_cells
from stoneend.errors import ContentError
from stoneend.inventory import RoomItem
from stoneend.session import STARTING_ITEMS

logger = logging.getLogger(__name__)

VERBS = ("Look", "Talk", "Help")

SaleItem = namedtuple("SaleItem", ["id", "cost"])


class Action:
    def __init__(self, data):
        self.verb = data['verb']
        self.targets = {target.lower() for target in data['targets']}
        self.value = data['value']

    def matches(self, verb, target):
        return self.verb == verb and target in self.targets


class Region:
    def __init__(self, region_id, data):
        self.id = region_id
        self.actions = [Action(a) for a in data.get('actions') or []]


class NPC:
    def __init__(self, npc_id, data):
        self.id = npc_id
        self.name = data['name']
        self.description = data['description']
        self.targets = {target.lower() for target in data.get('targets') or []}
        self.talk = data.get('talk', "")
        self.items = [SaleItem(s['id'], s['cost']) for s in data.get('items') or []]


class Room:
    def __init__(self, data):
        self.title = data['title']
        self.coord = Coord.from_state(data['coord'])
        self.description = data['description']
        self.actions = [Action(a) for a in data.get('actions') or []]
        self.items = [RoomItem(i) for i in data.get('items') or []]
        self.npcs = list(data.get('npcs') or [])
        self.regions = list(data.get('regions') or [])

    def __repr__(self):
        return f"Room({self.title!r}, {self.coord})"


class World:
    def __init__(self, data):
        self.maps = [list(layer) for layer in data['maps']]
        self.entry = Coord.from_state(data['entry'])
        self.npcs = {npc_id: NPC(npc_id, npc) for npc_id, npc in (data.get('npcs') or {}).items()}
        self.regions = {rid: Region(rid, region) for rid, region in (data.get('regions') or {}).items()}
        self.rooms = [Room(r) for r in data['rooms']]

        # Rooms are addressed by coordinate; the first room on a coordinate wins.
        self._rooms_by_coord = {}
        for room in self.rooms:
            self._rooms_by_coord.setdefault(room.coord, room)

    def room_at(self, coord):
        return self._rooms_by_coord.get(coord)

    def room_coords(self):
        return list(self._rooms_by_coord)

    # ==========================================================
    # ACTION LOOKUP
    # ==========================================================
    def find_action(self, room, verb, target):
        """
        The room's own actions win; otherwise each of the room's regions is
        searched in the order the room lists them.
        """
        target = target.lower()
        for action in room.actions:
            if action.matches(verb, target):
                return action

        for region in self.regions_of(room):
            for action in region.actions:
                if action.matches(verb, target):
                    return action
        return None

    def regions_of(self, room):
        for region_id in room.regions:
            if region_id not in self.regions:
                raise ContentError(
                    f"Unable to find a region from the id {region_id!r} in {room.title!r} {room.coord}. "
                    f"Available ids: {', '.join(sorted(self.regions))}"
                )
            yield self.regions[region_id]

    # ==========================================================
    # NPC LOOKUP
    # ==========================================================
    def npcs_in(self, room):
        for npc_id in room.npcs:
            if npc_id not in self.npcs:
                raise ContentError(
                    f"Unable to find an npc by the id {npc_id!r} in {room.title!r} {room.coord}. "
                    f"The available NPCs are: {', '.join(sorted(self.npcs))}"
                )
            yield self.npcs[npc_id]

    def resolve_npc(self, room, target):
        target = target.lower()
        for npc in self.npcs_in(room):
            if target in npc.targets:
                return npc
        return None

    def npc_sale_listing(self, npc, catalog):
        """Input: an NPC. Returns: [(catalog item, price), ...] in the NPC's order."""
        return [(catalog.get(sale.id), sale.cost) for sale in npc.items]


# ==========================================================
# VALIDATION
# ==========================================================
def validate_world(world, catalog):
    """
    Checks the whole level against itself and the catalog in one pass.
    Returns: the room adjacency records.
    Raises: ContentError listing every problem found.
    """
    passable = scan_cells(world.maps)
    issues = missing_room_issues(world.maps, passable, set(world.room_coords()))

    seen = set()
    for room in world.rooms:
        where = f"The room {room.title!r} at {room.coord}"
        if room.coord in seen:
            issues.append(f"{where} shares its coordinate with an earlier room.")
        seen.add(room.coord)

        if room.coord not in passable:
            issues.append(
                f"{where} is not on a '.' cell of the map.\n"
                + render_map_pointer(world.maps, room.coord)
            )
        for npc_id in room.npcs:
            if npc_id not in world.npcs:
                issues.append(
                    f"{where} references an unknown npc {npc_id!r}. "
                    f"The available NPCs are: {', '.join(sorted(world.npcs)) or '(none)'}"
                )
        for region_id in room.regions:
            if region_id not in world.regions:
                issues.append(
                    f"{where} references an unknown region {region_id!r}. "
                    f"Available ids: {', '.join(sorted(world.regions)) or '(none)'}"
                )
        for stub in room.items:
            if stub.id not in catalog:
                issues.append(f"{where} places an unknown item {stub.id!r}.")

    for npc in world.npcs.values():
        for sale in npc.items:
            if sale.id not in catalog:
                issues.append(f"The npc {npc.id!r} sells an unknown item {sale.id!r}.")

    for item_id in STARTING_ITEMS:
        if item_id not in catalog:
            issues.append(f"The starting item {item_id!r} is missing from the item catalog.")

    if world.room_at(world.entry) is None or world.entry not in passable:
        issues.append(
            f"The entry {world.entry} is not a room on the map.\n"
            + render_map_pointer(world.maps, world.entry)
        )

    if issues:
        logger.debug("World validation found %d issues", len(issues))
        raise ContentError(issues)

    logger.debug("World validated: %d rooms, %d npcs, %d regions",
                 len(world.rooms), len(world.npcs), len(world.regions))
    return link_cells(passable)
