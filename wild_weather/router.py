"""
Command Router
==============

The routing table for Wild Weather chat commands.

Role in the System
------------------
Every chat message the host delivers passes through route(). The
router examines the first token of the line and, if it carries the
command prefix, hands the remaining tokens to the matching handler.
Anything else is ignored without a trace: ordinary table talk must
never produce output from this plugin.

    Player types: "!wild-weather-temp 40"
                  ↓
    Message type is "api" and content starts with "!wild-weather-"
                  ↓
    Command name "temp", arguments ["40"]
                  ↓
    Looks up "temp" in the route table → found!
                  ↓
    Calls handler("40")

    Player types: "hello there"
                  ↓
    Not an api message / no prefix → nothing happens

Design Decisions
----------------
- The prefix must match exactly; only the command name after it
  is case-insensitive (!wild-weather-TEMP works,
  !Wild-Weather-temp does not).
- Unknown command names are silently ignored, same as unprefixed
  chat. No error is ever surfaced to the table.
- Arguments are split on single spaces. Quoted strings and
  arguments containing whitespace are not supported; a quoted
  phrase arrives as several arguments. Handlers that care must
  cope with that themselves.
- The route table is built once at startup and read-only after.

Classes
-------
ChatMessage
    The host's chat payload: message type and raw content.

Command
    A parsed command line: name plus argument tuple.

CommandRouter
    The registry and router. Register handlers, then subscribe
    route() to the host's chat event.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional


logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "wild-weather-"

# Host message type for "!"-commands, as opposed to ordinary chat
API_MESSAGE_TYPE = "api"


@dataclass(frozen=True)
class ChatMessage:
    """A chat message as delivered by the host.

    Attributes
    ----------
    type : str
        "api" for command-channel messages; anything else
        ("general", "emote", "whisper", ...) is ordinary chat.
    content : str
        The raw text of the line.
    who : str
        Display name of the sender, when the host supplies one.
    """
    type: str
    content: str
    who: str = ""


@dataclass(frozen=True)
class Command:
    """One parsed command line, consumed immediately by its handler."""
    name: str
    arguments: tuple[str, ...] = field(default_factory=tuple)


class CommandRouter:
    """Routes prefixed chat commands to registered handlers.

    Usage
    -----
        router = CommandRouter()
        router.register("temp", commands.roll_temp, "Roll temperature")
        host.on("chat:message", router.route)
    """

    def __init__(self, prefix: str = DEFAULT_PREFIX):
        self.prefix = prefix
        self.command_prefix = f"!{prefix}"
        self._routes: dict[str, Callable] = {}
        self._help: dict[str, str] = {}

    def register(self, name: str, handler: Callable, help_text: str = "") -> None:
        """Register a handler under a command name.

        Raises
        ------
        ValueError
            If the name is already registered.
        """
        key = name.lower()
        if key in self._routes:
            raise ValueError(f"Command name collision: '{key}' is already registered")
        self._routes[key] = handler
        self._help[key] = help_text

    def register_all(self, routes: dict[str, Callable], help_texts: Optional[dict[str, str]] = None) -> None:
        help_texts = help_texts or {}
        for name, handler in routes.items():
            self.register(name, handler, help_texts.get(name, ""))

    # ─── Parsing ────────────────────────────────────────────────────

    def is_command(self, message: ChatMessage) -> bool:
        """True if the message came through the command channel with our prefix."""
        return (
            message.type == API_MESSAGE_TYPE
            and message.content.startswith(self.command_prefix)
        )

    def parse_command_name(self, message: ChatMessage) -> str:
        """Bare command name: first token, prefix stripped, lowercased.

        The prefix is matched in its configured case; only the part
        after it is case-insensitive.
        """
        first = message.content.split(" ")[0]
        if first.startswith(self.command_prefix):
            first = first[len(self.command_prefix):]
        return first.lower()

    def parse_arguments(self, message: ChatMessage) -> list[str]:
        """Every token after the first, in order.

        Splits on single spaces, so "a  b" yields an empty-string
        argument between them. Quoting is not understood.
        """
        return message.content.split(" ")[1:]

    def parse(self, message: ChatMessage) -> Optional[Command]:
        """Parse a message into a Command, or None if it is not one of ours."""
        if not self.is_command(message):
            return None
        return Command(
            name=self.parse_command_name(message),
            arguments=tuple(self.parse_arguments(message)),
        )

    # ─── Dispatch ───────────────────────────────────────────────────

    def dispatch(self, command_name: str, arguments=()) -> None:
        """Invoke the handler for command_name with the arguments spread.

        Unknown names, and entries that are not callable, are ignored.
        """
        handler = self._routes.get(command_name)
        if handler is None or not callable(handler):
            return

        logger.debug(f"Dispatching '{command_name}' with arguments {list(arguments)}")
        handler(*arguments)

    def route(self, message: ChatMessage) -> None:
        """Chat event subscriber: parse and dispatch, or do nothing."""
        command = self.parse(message)
        if command is None:
            return
        self.dispatch(command.name, command.arguments)

    def list_commands(self) -> list[tuple[str, str]]:
        """Return (full command, help_text) for every registered command, sorted."""
        return sorted(
            (f"{self.command_prefix}{name}", self._help[name])
            for name in self._routes
        )
