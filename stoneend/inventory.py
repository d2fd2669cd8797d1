"""
Inventories: the player's pack and one container per room.

Items change owner by moving whole entries between containers. Quantities are
only ever summed, when an entry lands in a container that already holds the
same item type.
"""
from stoneend.catalog import InventoryItem

# drop_item outcomes
DROPPED = "DROPPED"
STICKY = "STICKY"
NOT_FOUND = "NOT_FOUND"


class RoomItem:
    """
    Where an item starts out in a room. Overrides for name, aliases and
    pickup text belong to this placement, not to the item type.
    """

    def __init__(self, data):
        self.id = data['id']
        self.quantity = data.get('quantity', 0)
        self.name = data.get('name')
        self.targets = {target.lower() for target in data.get('targets') or []}
        self.pickup = data.get('pickup')

    @classmethod
    def from_item(cls, item):
        return cls({'id': item.id, 'quantity': item.quantity})

    def to_state(self):
        return {
            'id': self.id,
            'quantity': self.quantity,
            'name': self.name,
            'targets': sorted(self.targets),
            'pickup': self.pickup,
        }

    def __eq__(self, other):
        if not isinstance(other, RoomItem):
            return NotImplemented
        return self.to_state() == other.to_state()


class Inventory:
    """The player's pack. Order of first pickup is kept for display."""

    def __init__(self, items=None):
        self.items = list(items or [])

    def add_item(self, new_item):
        for item in self.items:
            if item.id == new_item.id:
                item.quantity += new_item.quantity
                return
        self.items.append(new_item)

    def drop_item(self, name):
        """
        Input: a display name or alias, as typed.
        Returns: (DROPPED, removed item) | (STICKY, None) | (NOT_FOUND, None)
        """
        for index, item in enumerate(self.items):
            if item.matches_name(name):
                if item.sticky:
                    return STICKY, None
                return DROPPED, self.items.pop(index)
        return NOT_FOUND, None

    def find(self, target):
        for item in self.items:
            if item.matches_target(target):
                return item
        return None

    def display_names(self):
        return [item.display_name() for item in self.items]

    def to_state(self):
        return [item.to_state() for item in self.items]

    @classmethod
    def from_state(cls, data):
        return cls([InventoryItem(entry) for entry in data])

    def __len__(self):
        return len(self.items)


class RoomInventory:
    """What is lying around in one room, each entry paired with its placement."""

    def __init__(self, entries=None):
        self.entries = list(entries or [])

    def take_item(self, target):
        """
        Removes and returns the first (placement, item) pair answering to the
        target, checking the placement's aliases before the item's own.
        """
        target = target.lower()
        for index, (room_item, item) in enumerate(self.entries):
            if target in room_item.targets:
                return self.entries.pop(index)
            if target in item.targets:
                return self.entries.pop(index)
        return None

    def add_item(self, new_item):
        for index, (room_item, item) in enumerate(self.entries):
            if item.id == new_item.id:
                item.quantity += new_item.quantity
                # Authored text only describes the original placement, not the merged pile.
                self.entries[index] = (RoomItem.from_item(item), item)
                return
        self.entries.append((RoomItem.from_item(new_item), new_item))

    def item_names(self):
        return [room_item.name or item.display_name() for room_item, item in self.entries]

    def to_state(self):
        return [
            {'placement': room_item.to_state(), 'item': item.to_state()}
            for room_item, item in self.entries
        ]

    @classmethod
    def from_state(cls, data):
        return cls([(RoomItem(entry['placement']), InventoryItem(entry['item'])) for entry in data])

    def __len__(self):
        return len(self.entries)
