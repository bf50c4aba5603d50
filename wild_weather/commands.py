"""
Weather Commands
================

The chat-facing handlers behind !wild-weather-<command>. Each one
rolls through the generator, renders through the configured
formatter and sends the result to chat as "Weather".

    !wild-weather-all [base]     Wind, precipitation and temperature
    !wild-weather-temp [base]    Temperature around base (default 75F)
    !wild-weather-wind           Wind strength
    !wild-weather-precip         Precipitation level

Arguments arrive exactly as the router split them, so every handler
accepts and ignores extra positional tokens.
"""

from __future__ import annotations

import logging
from typing import Callable

from wild_weather.formatters import WeatherFormatter
from wild_weather.weather import (
    DEFAULT_BASE_TEMPERATURE,
    WeatherGenerator,
    coerce_base_temperature,
)


logger = logging.getLogger(__name__)

# Sender used for chat messages
SPEAKING_AS = "Weather"

SendChat = Callable[[str, str], None]


class WeatherCommands:
    """Binds the generator, a formatter and the host's chat output."""

    def __init__(
        self,
        generator: WeatherGenerator,
        formatter: WeatherFormatter,
        send_chat: SendChat,
        speaking_as: str = SPEAKING_AS,
        default_base_temp: int = DEFAULT_BASE_TEMPERATURE,
    ):
        self.generator = generator
        self.formatter = formatter
        self.send_chat = send_chat
        self.speaking_as = speaking_as
        self.default_base_temp = default_base_temp

    def _send(self, bodies: list[str]) -> None:
        for body in bodies:
            self.send_chat(self.speaking_as, body)

    def _base(self, base_temp) -> int:
        return coerce_base_temperature(base_temp, self.default_base_temp)

    def roll_all(self, base_temp=None, *_ignored) -> None:
        roll = self.generator.all(self._base(base_temp))
        logger.debug(f"Rolled weather: {roll.to_dict()}")
        self._send(self.formatter.all(roll))

    def roll_temp(self, base_temp=None, *_ignored) -> None:
        self._send(self.formatter.temperature(self.generator.temperature(self._base(base_temp))))

    def roll_wind(self, *_ignored) -> None:
        self._send(self.formatter.wind(self.generator.wind()))

    def roll_precip(self, *_ignored) -> None:
        self._send(self.formatter.precipitation(self.generator.precipitation()))

    def routes(self) -> dict[str, Callable]:
        """The static command-name → handler table."""
        return {
            "all": self.roll_all,
            "precip": self.roll_precip,
            "temp": self.roll_temp,
            "wind": self.roll_wind,
        }

    def help_texts(self) -> dict[str, str]:
        base = self.default_base_temp
        return {
            "all": f"[base] — Roll wind, precipitation and temperature (base default {base}F)",
            "precip": "— Roll precipitation level",
            "temp": f"[base] — Roll temperature around a seasonal base (default {base}F)",
            "wind": "— Roll wind strength",
        }
