"""
Result Formatters
=================

Turns rolled weather into chat message bodies. Two interchangeable
renderers share the same label tables:

    ChatFormatter        Plain text, one line per condition
                             Wind: Light
                             Precipitation: None
                             Temperature: 85F

    PowerCardFormatter   A "!power {{ ... }}" block for the PowerCards
                         chat display extension, one block per command

Which one is used is decided once, at startup, from configuration.
Every method returns a list of bodies; the caller sends each one
as its own chat message.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from wild_weather.weather import Precip, WeatherRoll, Winds


# Display names for wind speeds
WIND_LABELS = {
    Winds.NONE: "None",
    Winds.LIGHT: "Light",
    Winds.STRONG: "Strong",
}

# Display names for precipitation levels
PRECIP_LABELS = {
    Precip.NONE: "None",
    Precip.LIGHT: "Light",
    Precip.HEAVY: "Heavy",
}

TEMPERATURE_UNIT = "F"

DEFAULT_POWER_FORMAT = "weather"


def format_temperature(value: int) -> str:
    return f"{value}{TEMPERATURE_UNIT}"


class WeatherFormatter(ABC):
    """Renders weather results into chat message bodies."""

    name: str = ""

    @abstractmethod
    def temperature(self, value: int) -> list[str]:
        ...

    @abstractmethod
    def wind(self, value: Winds) -> list[str]:
        ...

    @abstractmethod
    def precipitation(self, value: Precip) -> list[str]:
        ...

    @abstractmethod
    def all(self, roll: WeatherRoll) -> list[str]:
        ...


class ChatFormatter(WeatherFormatter):
    """Plain text, "<Label>: <value>"."""

    name = "chat"

    def temperature(self, value: int) -> list[str]:
        return [f"Temperature: {format_temperature(value)}"]

    def wind(self, value: Winds) -> list[str]:
        return [f"Wind: {WIND_LABELS[value]}"]

    def precipitation(self, value: Precip) -> list[str]:
        return [f"Precipitation: {PRECIP_LABELS[value]}"]

    def all(self, roll: WeatherRoll) -> list[str]:
        # Fixed order: wind, precipitation, temperature
        return (
            self.wind(roll.wind)
            + self.precipitation(roll.precipitation)
            + self.temperature(roll.temperature)
        )


class PowerCardFormatter(WeatherFormatter):
    """PowerCards template blocks.

    The extension picks up any chat line starting with "!power" and
    renders the "--key|value" pairs inside the braces as a card.
    "--format" selects a card style defined in the extension, and
    "--!tag" is a value line without a visible key.
    """

    name = "powercard"

    def __init__(self, power_format: str = DEFAULT_POWER_FORMAT):
        self.power_format = power_format

    def _card(self, title: str, fields: list[tuple[str, str]]) -> str:
        lines = ["!power {{", f"--format|{self.power_format}", f"--name|{title}"]
        lines.extend(f"--{key}|{value}" for key, value in fields)
        lines.append("}}")
        return "\n".join(lines)

    def temperature(self, value: int) -> list[str]:
        return [self._card("Current Temperature", [("!tag", format_temperature(value))])]

    def wind(self, value: Winds) -> list[str]:
        return [self._card("Current Wind Speed", [("!tag", WIND_LABELS[value])])]

    def precipitation(self, value: Precip) -> list[str]:
        return [self._card("Current Precipitation", [("!tag", PRECIP_LABELS[value])])]

    def all(self, roll: WeatherRoll) -> list[str]:
        return [self._card("Current Weather", [
            ("Temperature", format_temperature(roll.temperature)),
            ("Wind Speed", WIND_LABELS[roll.wind]),
            ("Precipitation", PRECIP_LABELS[roll.precipitation]),
        ])]


FORMATTERS = {
    ChatFormatter.name: ChatFormatter,
    PowerCardFormatter.name: PowerCardFormatter,
}


def create_formatter(name: str, power_format: str = DEFAULT_POWER_FORMAT) -> WeatherFormatter:
    """Build the formatter named in configuration ("chat" or "powercard")."""
    if name == PowerCardFormatter.name:
        return PowerCardFormatter(power_format)
    if name == ChatFormatter.name:
        return ChatFormatter()
    raise ValueError(
        f"Unknown output format '{name}'. Must be one of: {', '.join(sorted(FORMATTERS))}"
    )
