import logging

from stoneend.atlas import DIRECTIONS
from stoneend.errors import ContentError
from stoneend.inventory import DROPPED, STICKY

logger = logging.getLogger(__name__)


class Director:
    def __init__(self, world, catalog, links, session):
        """
        The Director is the STATE MACHINE.
        It does not format text. It looks things up in the world, moves items
        between inventories and returns events for the Narrator.
        """
        self.world = world
        self.catalog = catalog
        self.links = links
        self.session = session

    @property
    def current_room(self):
        room = self.world.room_at(self.session.coord)
        if room is None:
            raise ContentError(f"The player is standing at {self.session.coord}, which is not a room.")
        return room

    # ==========================================================
    # 1. LOOKING AROUND
    # ==========================================================
    def look(self, params):
        """
        Input: {"target": "banner"} or {"target": None} for the whole room.
        Search order: room/region actions, NPCs, NPC wares, the player's items.
        """
        target = params.get('target')
        if target is None:
            return [self.describe_room()]

        room = self.current_room
        action = self.world.find_action(room, "Look", target)
        if action:
            return [self._return_message(action.value)]

        npc = self.world.resolve_npc(room, target)
        if npc:
            listing = self.world.npc_sale_listing(npc, self.catalog)
            return [{
                "event_type": "npc_listing",
                "data": {
                    "name": npc.name,
                    "description": npc.description,
                    "items": [(item.name, cost) for item, cost in listing],
                },
            }]

        for npc in self.world.npcs_in(room):
            for item, _cost in self.world.npc_sale_listing(npc, self.catalog):
                if item.matches_target(target):
                    return [self._return_message(item.description)]

        held = self.session.inventory.find(target)
        if held:
            return [self._return_message(self.catalog.get(held.id).description)]

        return [self._return_error("not_found", f"You don't see a {target}.")]

    def describe_room(self):
        room = self.current_room
        exits = self.links[room.coord]
        return {
            "event_type": "room_view",
            "data": {
                "coord": room.coord,
                "title": room.title,
                "description": room.description,
                "items": self.session.room_inventory().item_names(),
                "exits": {direction: exits[direction] is not None for direction in DIRECTIONS},
                "debug": self.session.debug,
            },
        }

    # ==========================================================
    # 2. CONVERSATION & HELP
    # ==========================================================
    def talk(self, params):
        target = params.get('target')
        if target is None:
            return [self._return_message("You talk outloud for a bit and feel much better, thank you.")]

        room = self.current_room
        action = self.world.find_action(room, "Talk", target)
        if action:
            return [self._return_message(action.value)]

        npc = self.world.resolve_npc(room, target)
        if npc and npc.talk:
            return [self._return_message(npc.talk)]

        return [self._return_error("cannot_talk", f'You can\'t talk to "{target}"')]

    def help(self, params):
        target = params.get('target')
        if target is None:
            return [{"event_type": "help_text"}]

        action = self.world.find_action(self.current_room, "Help", target)
        if action:
            return [self._return_message(action.value)]
        return [self._return_error("cannot_help", f"You can't help {target}.")]

    # ==========================================================
    # 3. THE SCENE SHIFTER
    # ==========================================================
    def move(self, params):
        """
        Input: {"direction": "north"}
        """
        direction = params.get('direction')
        next_coord = self.links[self.session.coord].get(direction)
        if next_coord is None:
            return [self._return_error("no_exit_that_way", f"You cannot move {direction}.")]

        self.session.coord = next_coord
        return [self.describe_room()]

    # ==========================================================
    # 4. THE INVENTORY MANAGER
    # ==========================================================
    def take(self, params):
        target = params['target']
        taken = self.session.room_inventory().take_item(target)
        if taken is None:
            return [self._return_error("item_not_in_room", f"You couldn't find a {target} to take.")]

        room_item, item = taken
        self.session.inventory.add_item(item)
        if room_item.pickup:
            return [self._return_message(room_item.pickup)]
        return [self._return_message(f"You place the {target} in your inventory.")]

    def drop(self, params):
        target = params['target']
        outcome, item = self.session.inventory.drop_item(target)
        if outcome == DROPPED:
            self.session.room_inventory().add_item(item)
            return [self._return_message(f"You dropped the {item.name}.")]
        if outcome == STICKY:
            return [self._return_error("sticky_item", f"The {target} appear(s) to be sticking to your hand.")]
        return [self._return_error("item_not_in_inventory", f"It does not look like you have a {target}.")]

    def report_inventory(self, params):
        return [{
            "event_type": "inventory_listing",
            "data": {"items": self.session.inventory.display_names()},
        }]

    def toggle_debug(self, params):
        self.session.debug = not self.session.debug
        if self.session.debug:
            return [self._return_message("Debug mode activated.")]
        return [self._return_message("Debug mode de-activated.")]

    # ==========================================================
    # 5. INTERNAL HELPERS
    # ==========================================================
    def execute(self, tool_command):
        """
        Master Router: Takes a tool call from the Listener -> Runs Function
        Returns a LIST of events.
        """
        tool = tool_command.get('tool')
        params = tool_command.get('parameters', {})
        logger.debug("Executing %s %s", tool, params)

        if tool == 'look':
            return self.look(params)
        elif tool == 'talk':
            return self.talk(params)
        elif tool == 'help':
            return self.help(params)
        elif tool == 'move':
            return self.move(params)
        elif tool == 'take':
            return self.take(params)
        elif tool == 'drop':
            return self.drop(params)
        elif tool == 'inventory':
            return self.report_inventory(params)
        elif tool == 'debug':
            return self.toggle_debug(params)
        elif tool in ('quit', 'restart'):
            return [{"event_type": tool}]
        elif tool == 'message':
            return [self._return_message(params.get('text', ""))]
        elif tool == 'error':
            return [self._return_error(tool_command.get('reason'), tool_command.get('details'))]
        else:
            return [self._return_error("unknown_tool_call", f"Unknown tool: {tool!r}")]

    def _return_message(self, text):
        return {"event_type": "message", "text": text}

    def _return_error(self, reason, message):
        return {
            "event_type": "error",
            "status": "FAILURE",
            "reason": reason,
            "details": {"message": message},
        }
