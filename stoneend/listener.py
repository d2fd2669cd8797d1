"""
The Listener turns a line of player input into a tool call for the Director:

    {"tool": "look", "parameters": {"target": "banner"}}

Input reaches it already trimmed and lower-cased. Nothing here touches game
state, so a bad command costs the player nothing but a message.
"""
import logging

from stoneend.atlas import DIRECTIONS

logger = logging.getLogger(__name__)

PREPOSITIONS = ("at", "to", "in", "up")

MOVE_WORDS = {
    "north": "north", "n": "north",
    "east": "east", "e": "east",
    "south": "south", "s": "south",
    "west": "west", "w": "west",
}

LOOK_WORDS = ("look", "l")
TALK_WORDS = ("talk", "t")
INVENTORY_WORDS = ("inventory", "inv", "i", "items")
HELP_WORDS = ("help", "h")
TAKE_WORDS = ("pick", "pickup", "take", "grab")
QUIT_WORDS = ("quit", "q", "exit")


class Listener:

    def parse(self, user_input):
        """
        Input: "look at the banner"
        Returns: a tool call dict. Incomplete commands come back as
        {"tool": "error", ...}, unknown ones as {"tool": "message", ...}.
        """
        words = user_input.split()
        if not words:
            return self._command("look", target=None)

        verb, rest = words[0], words[1:]

        if verb in MOVE_WORDS:
            return self._command("move", direction=MOVE_WORDS[verb])
        if verb in INVENTORY_WORDS:
            return self._command("inventory")
        if verb == "debug":
            return self._command("debug")
        if verb in QUIT_WORDS:
            return self._command("quit")
        if verb == "restart":
            return self._command("restart")

        if verb not in LOOK_WORDS + TALK_WORDS + HELP_WORDS + TAKE_WORDS + ("go", "drop"):
            return self._message(
                f'You don\'t know how to "{verb}". Type "help" for help.', input=user_input
            )

        target, error = self._parse_target(verb, rest)
        if error:
            return error

        if verb in LOOK_WORDS:
            return self._command("look", target=target)
        if verb in TALK_WORDS:
            return self._command("talk", target=target)
        if verb in HELP_WORDS:
            return self._command("help", target=target)

        if verb == "go":
            if target is None:
                return self._message("Where do you want to go?")
            if target in DIRECTIONS:
                return self._command("move", direction=target)
            return self._return_error("unknown_direction", f'You don\'t know how to go "{target}"')

        if verb == "drop":
            if target is None:
                return self._message("You stop drop and roll.")
            return self._command("drop", target=target)

        # take, grab, pick, pickup
        if target is not None:
            return self._command("take", target=target)
        if verb == "pick":
            return self._return_error("missing_target", "You pick your nose. Gross.")
        return self._return_error(
            "missing_target", "This relationship is on the rocks, all you do is take take take."
        )

    def _parse_target(self, verb, words):
        """
        Returns: (target or None, error or None). A leading preposition is
        dropped, but only when something follows it.
        """
        if not words:
            return None, None
        if words[0] in PREPOSITIONS:
            if len(words) == 1:
                return None, self._return_error(
                    "incomplete_command", f"{verb} {words[0]}... what?", preposition=words[0]
                )
            words = words[1:]
        return " ".join(words), None

    def _command(self, tool, **parameters):
        return {"tool": tool, "parameters": parameters}

    def _message(self, text, **parameters):
        return {"tool": "message", "parameters": dict(parameters, text=text)}

    def _return_error(self, reason, details, **parameters):
        logger.debug("Rejected command: %s (%s)", reason, details)
        return {"tool": "error", "reason": reason, "details": details, "parameters": parameters}
