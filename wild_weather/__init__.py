"""
Wild Weather
============

Random D&D 5e weather for a virtual tabletop chat log, following
the weather tables on DMG p.109. Players and GMs type commands into
chat and the plugin answers as "Weather":

    !wild-weather-all 30    →  Wind: None
                               Precipitation: Light
                               Temperature: 10F
    !wild-weather-temp      →  Temperature: 75F
    !wild-weather-wind      →  Wind: Strong
    !wild-weather-precip    →  Precipitation: None

With output_format set to "powercard" the same commands produce
"!power {{ ... }}" blocks for the PowerCards display extension.

Architecture Overview
---------------------
    ┌──────────────┐     ┌──────────────┐     ┌──────────────────┐
    │  Host chat   │────►│  Command     │────►│  WeatherCommands │
    │  (tabletop)  │     │  Router      │     └───────┬──────────┘
    └──────▲───────┘     └──────────────┘             │
           │                                  ┌───────▼──────────┐
           │                                  │ WeatherGenerator │ d20 tables
           │                                  └───────┬──────────┘
           │                                  ┌───────▼──────────┐
           └──────────── send_chat ◄──────────│ WeatherFormatter │ chat / card
                                              └──────────────────┘

Module Structure
----------------
    wild_weather/
    ├── __init__.py      ← This file.
    ├── weather.py       ← WeatherGenerator, Winds, Precip, WeatherRoll.
    ├── router.py        ← CommandRouter, ChatMessage, Command.
    ├── formatters.py    ← ChatFormatter, PowerCardFormatter.
    ├── commands.py      ← WeatherCommands: the !wild-weather-* handlers.
    ├── host.py          ← ChatHost, ConsoleHost, install().
    ├── config.py        ← YAML configuration and CLI arguments.
    └── __main__.py      ← Interactive console chat loop.

Usage
-----
    from wild_weather import ConsoleHost, install, message_from_line

    host = ConsoleHost()
    install(host)
    host.emit("ready")
    host.emit("chat:message", message_from_line("!wild-weather-temp 40"))

License
-------
MIT
"""

from wild_weather.commands import WeatherCommands
from wild_weather.config import ConfigurationManager, WildWeatherConfig
from wild_weather.formatters import ChatFormatter, PowerCardFormatter, create_formatter
from wild_weather.host import ChatHost, ConsoleHost, install, message_from_line
from wild_weather.router import ChatMessage, Command, CommandRouter
from wild_weather.weather import Precip, WeatherGenerator, WeatherRoll, Winds

__version__ = "1.0.0"

__all__ = [
    'ChatFormatter',
    'ChatHost',
    'ChatMessage',
    'Command',
    'CommandRouter',
    'ConfigurationManager',
    'ConsoleHost',
    'PowerCardFormatter',
    'Precip',
    'WeatherCommands',
    'WeatherGenerator',
    'WeatherRoll',
    'WildWeatherConfig',
    'Winds',
    'create_formatter',
    'install',
    'message_from_line',
]
