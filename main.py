import logging
import sys

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.prompt import Prompt

# Import Engine Components
from stoneend.config import load_config
from stoneend.director import Director
from stoneend.errors import ContentError, SaveStateError
from stoneend.listener import Listener
from stoneend.loader import load_catalog, load_text, load_world
from stoneend.narrator import Narrator, custom_theme
from stoneend.session import SaveStore, SessionState
from stoneend.world import validate_world

console = Console(theme=custom_theme)
logger = logging.getLogger("stoneend")


def setup_logging(config):
    level = logging.DEBUG if config.get('debug_mode', False) else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


def load_content(config):
    """
    Loads and cross-checks every content file. Any problem here stops the
    game before the first prompt.
    """
    catalog = load_catalog(config['items_path'])
    world = load_world(config['level_path'])
    links = validate_world(world, catalog)
    intro = load_text(config['intro_path'])
    help_text = load_text(config['help_path'])
    return world, catalog, links, intro, help_text


def start_session(store, world, catalog):
    session = store.load()
    if session is None:
        logger.debug("No save file found, starting a new game")
        return SessionState.initialize(catalog, world)
    session.check_against(world)
    return session


def prompt_yes_no(message):
    answer = Prompt.ask(f"{message} (yes, no)", choices=["yes", "y", "no", "n"],
                        case_sensitive=False, show_choices=False, console=console)
    return answer.strip().lower() in ("yes", "y")


# ============================================
# GAME LOOP
# ============================================
def game_loop(content, store):
    world, catalog, links, intro, help_text = content

    session = start_session(store, world, catalog)
    director = Director(world, catalog, links, session)
    listener = Listener()
    narrator = Narrator(console, help_text=help_text)

    narrator.print_text(intro)
    narrator.render([director.describe_room()])

    while True:
        try:
            user_input = Prompt.ask("[info]»[/info]", console=console)
        except (EOFError, KeyboardInterrupt):
            store.save(session)
            return "quit"
        console.print()

        command = listener.parse(user_input.strip().lower())
        results = director.execute(command)

        signal = results[0].get('event_type') if results else None
        if signal == 'quit':
            store.save(session)
            return "quit"
        if signal == 'restart':
            if prompt_yes_no("Are you sure you want to erase your game and restart?"):
                return "restart"
            narrator.print_text("Let's keep playing!")
            continue

        narrator.render(results)


# ============================================
# MAIN
# ============================================
def main():
    try:
        config = load_config()
        setup_logging(config)
        store = SaveStore(config['save_path'])
        content = load_content(config)

        while True:
            if game_loop(content, store) == "restart":
                store.discard()
                continue
            console.print("Thanks for playing!")
            return
    except SaveStateError as e:
        Narrator(console).print_report(e, title="SAVE FILE ERROR")
        console.print(f"[dim]Save file: {escape(store.path)}[/dim]")
        sys.exit(1)
    except ContentError as e:
        Narrator(console).print_report(e)
        sys.exit(1)


if __name__ == "__main__":
    main()
