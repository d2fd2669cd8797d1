"""
The Item Catalog.

Catalog entries are templates. Sessions hold clones of them (instances) that
carry their own quantity; the catalog itself is never mutated after load.
"""
from stoneend.errors import ContentError

ITEM_VARIANTS = ("Consumable", "Weapon", "Money")


class InventoryItem:
    """One item type, or one session instance of it."""

    def __init__(self, data):
        self.id = data['id']
        self.name = data['name']
        self.targets = {target.lower() for target in data.get('targets') or []}
        self.sticky = data.get('sticky', False)
        self.variant = data['variant']
        self.quantity = data.get('quantity', 0)
        self.max_quantity = data.get('max_quantity')
        self.description = data['description']

    def clone(self, quantity=None):
        item = InventoryItem(self.to_state())
        if quantity is not None:
            item.quantity = quantity
        return item

    def matches_name(self, name):
        """Display name first, then the alias set."""
        name = name.lower()
        return self.name.lower() == name or name in self.targets

    def matches_target(self, target):
        target = target.lower()
        return target == self.id or target in self.targets

    def display_name(self):
        # Only stackable items show a count.
        if self.max_quantity is None:
            return self.name
        return f"{self.name} ({self.quantity})"

    def to_state(self):
        return {
            'id': self.id,
            'name': self.name,
            'targets': sorted(self.targets),
            'sticky': self.sticky,
            'variant': self.variant,
            'quantity': self.quantity,
            'max_quantity': self.max_quantity,
            'description': self.description,
        }

    def __eq__(self, other):
        if not isinstance(other, InventoryItem):
            return NotImplemented
        return self.to_state() == other.to_state()

    def __repr__(self):
        return f"InventoryItem({self.id!r}, quantity={self.quantity})"


class ItemCatalog:
    def __init__(self, items):
        self._items = {item.id: item for item in items}

    @classmethod
    def from_data(cls, data):
        return cls([InventoryItem(entry) for entry in data])

    def get(self, item_id):
        """The template for an id. A missing id is a content bug, never a player mistake."""
        try:
            return self._items[item_id]
        except KeyError:
            raise ContentError(
                f"Unable to find the item with the id {item_id!r}. "
                f"Known ids: {', '.join(sorted(self._items))}"
            ) from None

    def __contains__(self, item_id):
        return item_id in self._items

    def __iter__(self):
        return iter(self._items.values())

    def __len__(self):
        return len(self._items)
