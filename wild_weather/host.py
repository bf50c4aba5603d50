"""
Host Binding
============

The plugin lives inside a virtual tabletop that owns the chat log.
The tabletop delivers every chat line as an event, and the plugin
answers through a single "send chat" call:

    ┌──────────────┐  chat:message  ┌──────────────┐      ┌──────────────────┐
    │  Tabletop    │───────────────►│  Command     │─────►│ WeatherCommands  │
    │  chat log    │                │  Router      │      │ generator +      │
    │              │◄───────────────┼──────────────┼──────│ formatter        │
    └──────────────┘   send_chat    └──────────────┘      └──────────────────┘

ChatHost is that contract. ConsoleHost is an in-process stand-in
that prints chat output to the terminal; it backs the interactive
loop in __main__ and the tests.

install() does the composition: it builds the generator, picks the
formatter from configuration, registers the routes, subscribes the
router to chat:message and logs a line when the host reports ready.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections import defaultdict
from typing import Any, Callable, Optional

from wild_weather.commands import WeatherCommands
from wild_weather.config import WildWeatherConfig
from wild_weather.formatters import PowerCardFormatter, create_formatter
from wild_weather.router import API_MESSAGE_TYPE, ChatMessage, CommandRouter
from wild_weather.weather import RandomInteger, WeatherGenerator


logger = logging.getLogger(__name__)

CHAT_MESSAGE_EVENT = "chat:message"
READY_EVENT = "ready"

LOADED_MESSAGE = "[WILD Weather] Loaded."
POWERCARD_LOADED_MESSAGE = "[WILD Weather] PowerCards proxy module loaded."


class ChatHost(ABC):
    """What the plugin needs from the tabletop."""

    @abstractmethod
    def on(self, event: str, handler: Callable) -> None:
        """Subscribe handler to a host event."""
        ...

    @abstractmethod
    def emit(self, event: str, payload: Any = None) -> None:
        """Deliver an event to its subscribers."""
        ...

    @abstractmethod
    def send_chat(self, speaking_as: str, body: str) -> None:
        """Post a message to the shared chat log."""
        ...


class ConsoleHost(ChatHost):
    """Terminal stand-in for the tabletop.

    Chat output goes through writer (print by default) as
    "<speaker>: <body>" and is also kept in self.sent.
    """

    def __init__(self, writer: Callable[[str], None] = print):
        self.writer = writer
        self.sent: list[tuple[str, str]] = []
        self._handlers: dict[str, list[Callable]] = defaultdict(list)

    def on(self, event: str, handler: Callable) -> None:
        self._handlers[event].append(handler)

    def emit(self, event: str, payload: Any = None) -> None:
        for handler in self._handlers.get(event, []):
            if payload is None:
                handler()
            else:
                handler(payload)

    def send_chat(self, speaking_as: str, body: str) -> None:
        self.sent.append((speaking_as, body))
        self.writer(f"{speaking_as}: {body}")


def message_from_line(line: str, who: str = "") -> ChatMessage:
    """Wrap a typed line the way the tabletop would: "!" lines are api messages."""
    message_type = API_MESSAGE_TYPE if line.startswith("!") else "general"
    return ChatMessage(type=message_type, content=line, who=who)


def install(
    host: ChatHost,
    config: Optional[WildWeatherConfig] = None,
    random_integer: Optional[RandomInteger] = None,
) -> CommandRouter:
    """Wire the weather commands into a host.

    Parameters
    ----------
    host : ChatHost
        The tabletop to subscribe to.
    config : WildWeatherConfig, optional
        Effective configuration; defaults when omitted.
    random_integer : callable, optional
        Die source for the generator (tests pass a scripted one).

    Returns
    -------
    CommandRouter
        The router subscribed to chat:message.
    """
    config = config or WildWeatherConfig()

    formatter = create_formatter(config.chat.output_format, config.chat.power_format)
    commands = WeatherCommands(
        generator=WeatherGenerator(random_integer),
        formatter=formatter,
        send_chat=host.send_chat,
        speaking_as=config.chat.speaking_as,
        default_base_temp=config.weather.base_temperature,
    )

    router = CommandRouter(prefix=config.command.prefix)
    router.register_all(commands.routes(), commands.help_texts())

    loaded_message = (
        POWERCARD_LOADED_MESSAGE if isinstance(formatter, PowerCardFormatter)
        else LOADED_MESSAGE
    )

    host.on(CHAT_MESSAGE_EVENT, router.route)
    host.on(READY_EVENT, lambda: logger.info(loaded_message))

    return router
