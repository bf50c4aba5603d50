"""
Weather Generator
=================

Random weather conditions for D&D 5e, following the tables on
DMG p.109. Each condition is a single d20 roll mapped through a
fixed decision table:

    Temperature                     Wind / Precipitation
    -----------                     --------------------
     1-14   normal for the season    1-12   none
    15-17   colder by 1d4 x 10F     13-17   light
    18-20   warmer by 1d4 x 10F     18-20   strong / heavy

Normal weather is the common case. Extremes are rare, and the
tier of the roll decides the direction of the swing while the
d4 decides the magnitude.

Random Number Generation
------------------------
The die source is injectable: any callable taking the number of
sides and returning a uniform integer in [1, sides]. The default
is random.randint (Mersenne Twister), which is fine for gaming.
Tests pass a scripted source so every table boundary can be hit
deterministically.

    generator = WeatherGenerator()                    # real dice
    generator = WeatherGenerator(lambda sides: 20)    # always a nat 20

Module Contents
---------------
    Winds                      Enum: NONE, LIGHT, STRONG
    Precip                     Enum: NONE, LIGHT, HEAVY
    WeatherRoll                Frozen dataclass: one roll of everything
    coerce_base_temperature()  Chat argument → int (falls back to 75)
    WeatherGenerator           The decision tables
"""

from __future__ import annotations

import random
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable


# ─── Domain Model ───────────────────────────────────────────────────

DEFAULT_BASE_TEMPERATURE = 75   # degrees Fahrenheit

RandomInteger = Callable[[int], int]

# ASCII digits only: int() alone would also take "1_000" and "٤٠"
_WHOLE_NUMBER = re.compile(r'^[+-]?[0-9]+$')


class Winds(Enum):
    """Wind strength levels."""
    NONE = 0
    LIGHT = 1
    STRONG = 2


class Precip(Enum):
    """Precipitation levels."""
    NONE = 0
    LIGHT = 1
    HEAVY = 2


@dataclass(frozen=True)
class WeatherRoll:
    """The outcome of rolling all three weather conditions at once.

    Each field comes from its own die draw; the generator does not
    model any correlation between them (a heavy storm with no wind
    is a perfectly legal result).
    """
    temperature: int
    wind: Winds
    precipitation: Precip

    def to_dict(self) -> dict:
        return {
            "temperature": self.temperature,
            "wind": self.wind.name.lower(),
            "precipitation": self.precipitation.name.lower(),
        }


def default_random_integer(sides: int) -> int:
    """Uniform integer in [1, sides]."""
    return random.randint(1, sides)


def coerce_base_temperature(value: Any, default: int = DEFAULT_BASE_TEMPERATURE) -> int:
    """Turn a caller-supplied base temperature into an integer.

    Chat arguments arrive as strings, so "40" and " -5 " are accepted.
    Anything that is not a whole number ("warm", "", "72.5", None)
    quietly becomes the default instead of failing; players never see
    an error for a typo here.
    """
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, str) and _WHOLE_NUMBER.match(value.strip()):
        return int(value.strip(), 10)
    return default


# ─── Decision Tables ────────────────────────────────────────────────

class WeatherGenerator:
    """Rolls weather conditions against the DMG p.109 tables.

    Stateless apart from the injected die source; every method
    consumes fresh rolls and returns a plain value.
    """

    def __init__(self, random_integer: RandomInteger | None = None):
        self._random_integer = random_integer or default_random_integer

    def temperature(self, base: Any = DEFAULT_BASE_TEMPERATURE) -> int:
        """Roll a temperature around the seasonal base.

        Parameters
        ----------
        base : int or str, optional
            The "normal" temperature for the season, in degrees
            Fahrenheit. Strings are parsed; anything unparseable
            falls back to 75.

        Returns
        -------
        int
            base on 1-14, base - d4*10 on 15-17, base + d4*10 on 18-20.
        """
        base = coerce_base_temperature(base)
        roll = self._random_integer(20)

        if roll < 15:
            return base
        if roll < 18:
            return base - self._random_integer(4) * 10
        return base + self._random_integer(4) * 10

    def wind(self) -> Winds:
        roll = self._random_integer(20)

        if roll < 13:
            return Winds.NONE
        if roll < 18:
            return Winds.LIGHT
        return Winds.STRONG

    def precipitation(self) -> Precip:
        roll = self._random_integer(20)

        if roll < 13:
            return Precip.NONE
        if roll < 18:
            return Precip.LIGHT
        return Precip.HEAVY

    def all(self, base: Any = DEFAULT_BASE_TEMPERATURE) -> WeatherRoll:
        """Roll every condition, each on its own die."""
        return WeatherRoll(
            temperature=self.temperature(base),
            wind=self.wind(),
            precipitation=self.precipitation(),
        )
