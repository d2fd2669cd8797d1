import textwrap

from rich import box
from rich.markup import escape
from rich.panel import Panel
from rich.theme import Theme

from stoneend.atlas import DIRECTIONS

LINE_WIDTH = 90
INDENT = 4

custom_theme = Theme({
    "info": "bold #b0d8e3",       # Pale Cyan
    "text": "default",            # Adaptive
    "dim": "dim",                 # Grey
    "warning": "bold #ffafaf",    # Soft red
    "success": "bold #a3be8c",    # Soft green
})


class Narrator:
    def __init__(self, console, help_text=""):
        """
        The Narrator is the PRESENTATION LAYER.
        It takes the Director's events and prints them. It never touches game state.
        """
        self.console = console
        self.help_text = help_text
        # Wrapped room descriptions, keyed by coordinate. Rooms never change
        # after load, so entries are never invalidated.
        self._wrapped = {}

    def render(self, events):
        for event in events:
            event_type = event.get('event_type')
            if event_type == 'room_view':
                self.print_room(event['data'])
            elif event_type == 'message':
                self.print_text(event['text'])
            elif event_type == 'error':
                message = event.get('details', {}).get('message') or event.get('reason', "")
                self.console.print(escape(message.strip()), style="warning")
                self.console.print()
            elif event_type == 'inventory_listing':
                self.print_inventory(event['data']['items'])
            elif event_type == 'npc_listing':
                self.print_npc(event['data'])
            elif event_type == 'help_text':
                self.print_text(self.help_text)

    # ==========================================================
    # ROOMS
    # ==========================================================
    def wrap_description(self, coord, description):
        if coord not in self._wrapped:
            paragraphs = [p.replace("\n", " ").strip() for p in description.split("\n\n")]
            self._wrapped[coord] = "\n\n".join(
                textwrap.fill(p, width=LINE_WIDTH, initial_indent=" " * INDENT,
                              subsequent_indent=" " * INDENT)
                for p in paragraphs if p
            )
        return self._wrapped[coord]

    def print_room(self, data):
        self.console.print(f"[bold]{escape(data['title'])}[/bold]")
        self.console.print()
        self.console.print(escape(self.wrap_description(data['coord'], data['description'])))
        self.console.print()

        for name in data['items']:
            self.console.print(escape(name.strip()))
        if data['items']:
            self.console.print()

        if data['debug']:
            self.console.print(escape(f"Coord: {data['coord']}"), style="dim")

        self.console.print(self.format_exits(data['exits']), style="info")

    def format_exits(self, exits):
        line = "Exits:"
        for direction in DIRECTIONS:
            line += f" {direction[0]}" if exits[direction] else " _"
        return line

    # ==========================================================
    # LISTINGS
    # ==========================================================
    def print_inventory(self, names):
        self.console.print(Panel("Your inventory:", box=box.DOUBLE, expand=False))
        if not names:
            self.console.print("    (empty)")
        for name in names:
            self.console.print(f"  ‣ {escape(name)}")
        self.console.print()

    def print_npc(self, data):
        self.print_text(data['description'])
        for name, cost in data['items']:
            self.console.print(f"  ‣ {escape(name)} ({cost} gp)")
        self.console.print()

    def print_text(self, text):
        self.console.print(escape(text.rstrip()))
        self.console.print()

    def print_report(self, error, title="CONTENT ERROR"):
        """A content or save-file failure, shown once before the game gives up."""
        self.console.print(Panel(escape(error.report()), title=f"[warning]{title}[/warning]", border_style="warning"))
