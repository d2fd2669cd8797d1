"""
Session state: where the player stands and who holds what.

This is the save file in memory. It is created once from the world and the
item catalog, then only changed by the Director, one command at a time.
"""
import logging
import os
import tempfile

import yaml

from stoneend.atlas import Coord
from stoneend.errors import ContentError, SaveStateError
from stoneend.inventory import Inventory, RoomInventory, RoomItem

logger = logging.getLogger(__name__)

# Every adventurer starts with a weapon and some coin.
STARTING_ITEMS = ("sword", "gold")


class SessionState:
    def __init__(self, coord, debug=False, inventory=None, room_inventories=None):
        self.coord = coord
        self.debug = debug
        self.inventory = inventory if inventory is not None else Inventory()
        self.room_inventories = room_inventories if room_inventories is not None else {}

    @classmethod
    def initialize(cls, catalog, world):
        """
        A fresh game: the player at the entry, carrying the starting items,
        and every room stocked from its item placements.
        """
        inventory = Inventory([catalog.get(item_id).clone() for item_id in STARTING_ITEMS])

        room_inventories = {}
        for room in world.rooms:
            if room.coord in room_inventories:
                continue
            entries = []
            for stub in room.items:
                item = catalog.get(stub.id).clone(quantity=stub.quantity)
                entries.append((RoomItem(stub.to_state()), item))
            room_inventories[room.coord] = RoomInventory(entries)

        logger.debug("New session at %s with %d room inventories", world.entry, len(room_inventories))
        return cls(world.entry, False, inventory, room_inventories)

    def room_inventory(self, coord=None):
        coord = self.coord if coord is None else coord
        try:
            return self.room_inventories[coord]
        except KeyError:
            raise ContentError(f"Could not find a room inventory for {coord}.") from None

    def check_against(self, world):
        """
        A restored session must hold exactly one inventory per room of the
        loaded world, and stand in one of those rooms.
        """
        issues = []
        if world.room_at(self.coord) is None:
            issues.append(f"The saved position {self.coord} is not a room in this world.")
        for coord in self.room_inventories:
            if world.room_at(coord) is None:
                issues.append(f"The save file holds an inventory for {coord}, which is not a room.")
        for coord in world.room_coords():
            if coord not in self.room_inventories:
                room = world.room_at(coord)
                issues.append(f"The save file has no inventory for the room {room.title!r} at {coord}.")
        if issues:
            raise SaveStateError(issues)

    # ==========================================================
    # STATE ROUND-TRIP
    # ==========================================================
    def to_state(self):
        return {
            'coord': self.coord.to_state(),
            'debug': self.debug,
            'inventory': self.inventory.to_state(),
            'room_inventories': [
                {'coord': coord.to_state(), 'items': room_inventory.to_state()}
                for coord, room_inventory in self.room_inventories.items()
            ],
        }

    @classmethod
    def from_state(cls, data):
        try:
            return cls(
                Coord.from_state(data['coord']),
                bool(data['debug']),
                Inventory.from_state(data['inventory']),
                {
                    Coord.from_state(entry['coord']): RoomInventory.from_state(entry['items'])
                    for entry in data['room_inventories']
                },
            )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise SaveStateError(f"The save file is malformed: {e!r}") from e

    def __eq__(self, other):
        if not isinstance(other, SessionState):
            return NotImplemented
        return self.to_state() == other.to_state()


class SaveStore:
    """Reads, writes and removes the save file."""

    def __init__(self, path):
        self.path = path

    def exists(self):
        return os.path.exists(self.path)

    def load(self):
        """Returns: the saved SessionState, or None when there is no save."""
        if not self.exists():
            return None
        try:
            with open(self.path, "r") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise SaveStateError(f"Unable to read the save file {self.path}: {e}") from e
        session = SessionState.from_state(data)
        logger.debug("Restored session from %s", self.path)
        return session

    def save(self, session):
        # Write next to the target then swap, so a crash never leaves half a save.
        directory = os.path.dirname(os.path.abspath(self.path))
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".save-", suffix=".tmp")
        except OSError as e:
            raise SaveStateError(f"Unable to write the save file {self.path}: {e}") from e

        try:
            with os.fdopen(fd, "w") as f:
                yaml.safe_dump(session.to_state(), f, sort_keys=False, allow_unicode=True)
            os.replace(tmp_path, self.path)
        except OSError as e:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise SaveStateError(f"Unable to write the save file {self.path}: {e}") from e
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise
        logger.debug("Saved session to %s", self.path)

    def discard(self):
        if self.exists():
            os.remove(self.path)
            logger.debug("Discarded save file %s", self.path)
