import unittest
import sys
import os

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
sys.path.append(os.path.abspath(os.path.dirname(__file__)))

from stoneend.atlas import Coord
from stoneend.catalog import ItemCatalog
from stoneend.director import Director
from stoneend.listener import Listener
from stoneend.session import SessionState
from stoneend.world import World, validate_world
from market_fixtures import item_data, level_data


class TestDirector(unittest.TestCase):
    def setUp(self):
        world = World(level_data())
        catalog = ItemCatalog.from_data(item_data())
        self.session = SessionState.initialize(catalog, world)
        self.director = Director(world, catalog, validate_world(world, catalog), self.session)
        self.listener = Listener()

    def play(self, text):
        events = self.director.execute(self.listener.parse(text))
        self.assertEqual(len(events), 1)
        return events[0]

    def message(self, text):
        event = self.play(text)
        self.assertEqual(event["event_type"], "message", event)
        return event["text"]

    def error(self, text):
        event = self.play(text)
        self.assertEqual(event["event_type"], "error", event)
        return event["reason"], event["details"]["message"]

    def test_walls_block_movement(self):
        self.assertEqual(self.error("west"), ("no_exit_that_way", "You cannot move west."))
        self.assertEqual(self.session.coord, Coord(2, 2, 0))

    def test_move_and_describe(self):
        view = self.play("go north")
        self.assertEqual(view["event_type"], "room_view")
        self.assertEqual(view["data"]["title"], "Square")
        self.assertEqual(view["data"]["exits"], {"north": False, "east": True, "south": True, "west": True})
        self.assertEqual(view["data"]["items"], ["Something shiny glints in the gutter."])
        self.assertEqual(self.play("")["data"]["title"], "Square")

    def test_take_and_drop(self):
        self.assertEqual(self.message("take apple"), "You place the apple in your inventory.")
        self.assertEqual(self.error("take apple")[0], "item_not_in_room")
        self.play("north")
        self.assertEqual(self.message("pick up shiny"), "Three gold pieces!")
        self.assertEqual(self.session.inventory.find("gold").quantity, 13)

        self.assertEqual(self.message("drop coins"), "You dropped the Gold.")
        self.assertEqual(self.session.room_inventory().item_names(), ["Gold (13)"])
        self.assertEqual(self.session.inventory.display_names(), ["Sword", "Apple"])

    def test_take_then_drop_restores_room(self):
        def contents():
            return [(item.id, item.quantity) for _stub, item in self.session.room_inventory().entries]

        before = contents()
        self.message("take apple")
        self.assertEqual(contents(), [])
        self.assertEqual(self.message("drop apple"), "You dropped the Apple.")
        self.assertEqual(contents(), before)

    def test_sticky_and_missing_drops(self):
        self.assertEqual(
            self.error("drop sword"),
            ("sticky_item", "The sword appear(s) to be sticking to your hand."),
        )
        self.assertEqual(
            self.error("drop bread"),
            ("item_not_in_inventory", "It does not look like you have a bread."),
        )
        self.assertEqual(len(self.session.inventory), 2)

    def test_look_search_order(self):
        self.play("north")
        self.assertEqual(self.message("look at fountain"), "The fountain up close.")
        self.assertEqual(self.message("look sky"), "The town fountain.")

        listing = self.play("look at baker")
        self.assertEqual(listing["event_type"], "npc_listing")
        self.assertEqual(listing["data"]["items"], [("Bread", 3)])

        self.assertEqual(self.message("look loaf"), "A warm loaf.")
        self.assertEqual(self.message("look blade"), "Your trusty sword.")
        self.assertEqual(self.error("look dragon"), ("not_found", "You don't see a dragon."))

    def test_talk_and_help(self):
        self.play("north")
        self.assertEqual(self.message("talk to merchant"), "Fresh bread!")
        self.assertEqual(self.error("talk to fountain"), ("cannot_talk", 'You can\'t talk to "fountain"'))
        self.assertEqual(self.message("help baker"), "You knead some dough.")
        self.assertEqual(self.error("help fountain"), ("cannot_help", "You can't help fountain."))
        self.assertEqual(self.play("help")["event_type"], "help_text")
        self.assertEqual(
            self.message("talk"), "You talk outloud for a bit and feel much better, thank you."
        )

    def test_debug_toggle(self):
        self.assertEqual(self.message("debug"), "Debug mode activated.")
        self.assertTrue(self.play("look")["data"]["debug"])
        self.assertEqual(self.message("debug"), "Debug mode de-activated.")
        self.assertFalse(self.session.debug)

    def test_inventory_listing(self):
        event = self.play("i")
        self.assertEqual(event["event_type"], "inventory_listing")
        self.assertEqual(event["data"]["items"], ["Sword", "Gold (10)"])

    def test_signals_and_parse_errors(self):
        self.assertEqual(self.play("quit"), {"event_type": "quit"})
        self.assertEqual(self.play("restart"), {"event_type": "restart"})
        self.assertEqual(self.error("look at"), ("incomplete_command", "look at... what?"))
        self.assertEqual(self.message("go"), "Where do you want to go?")
        self.assertEqual(self.director.execute({"tool": "fly"})[0]["reason"], "unknown_tool_call")


if __name__ == '__main__':
    unittest.main()
