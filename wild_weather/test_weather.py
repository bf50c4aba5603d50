"""
Tests for the Wild Weather generator, router and chat commands.

Run with:  python -m pytest wild_weather -v
"""

import logging
import re

import pytest

from wild_weather.commands import WeatherCommands
from wild_weather.config import WildWeatherConfig
from wild_weather.formatters import (
    ChatFormatter,
    PowerCardFormatter,
    create_formatter,
)
from wild_weather.host import (
    LOADED_MESSAGE,
    POWERCARD_LOADED_MESSAGE,
    ConsoleHost,
    install,
    message_from_line,
)
from wild_weather.router import ChatMessage, Command, CommandRouter
from wild_weather.weather import (
    Precip,
    WeatherGenerator,
    WeatherRoll,
    Winds,
    coerce_base_temperature,
)


class ScriptedDice:
    """Die source that returns preset values in order."""

    def __init__(self, *values):
        self.values = list(values)
        self.requested = []

    def __call__(self, sides):
        self.requested.append(sides)
        value = self.values.pop(0)
        assert 1 <= value <= sides
        return value


def max_dice(sides):
    return sides


def min_dice(sides):
    return 1


def api(content):
    return ChatMessage(type="api", content=content)


# ============================================================
# Temperature
# ============================================================

class TestTemperature:
    """Tests for the temperature decision table."""

    @pytest.mark.parametrize("roll", range(1, 15))
    def test_normal_rolls_return_base(self, roll):
        dice = ScriptedDice(roll)
        assert WeatherGenerator(dice).temperature(60) == 60
        assert dice.requested == [20]

    @pytest.mark.parametrize("roll", [15, 16, 17])
    @pytest.mark.parametrize("d4", [1, 2, 3, 4])
    def test_cold_rolls_drop_by_tens(self, roll, d4):
        dice = ScriptedDice(roll, d4)
        assert WeatherGenerator(dice).temperature(60) == 60 - d4 * 10
        assert dice.requested == [20, 4]

    @pytest.mark.parametrize("roll", [18, 19, 20])
    @pytest.mark.parametrize("d4", [1, 2, 3, 4])
    def test_hot_rolls_rise_by_tens(self, roll, d4):
        dice = ScriptedDice(roll, d4)
        assert WeatherGenerator(dice).temperature(60) == 60 + d4 * 10

    def test_default_base_is_75(self):
        assert WeatherGenerator(ScriptedDice(1)).temperature() == 75
        assert WeatherGenerator(ScriptedDice(18, 1)).temperature() == 85

    def test_unparseable_base_falls_back_to_75(self):
        assert WeatherGenerator(ScriptedDice(1)).temperature("notanumber") == 75
        assert WeatherGenerator(ScriptedDice(15, 2)).temperature("notanumber") == 55

    def test_string_base_is_parsed(self):
        assert WeatherGenerator(ScriptedDice(20, 4)).temperature("40") == 80

    def test_can_go_below_zero(self):
        assert WeatherGenerator(ScriptedDice(17, 4)).temperature(10) == -30

    def test_real_dice_stay_in_range(self):
        generator = WeatherGenerator()
        allowed = {40, 30, 20, 10, 0, 50, 60, 70, 80}
        for _ in range(200):
            assert generator.temperature(40) in allowed


class TestCoerceBaseTemperature:
    """Tests for chat argument → base temperature."""

    def test_integers_pass_through(self):
        assert coerce_base_temperature(40) == 40
        assert coerce_base_temperature(0) == 0
        assert coerce_base_temperature(-10) == -10

    def test_numeric_strings(self):
        assert coerce_base_temperature("40") == 40
        assert coerce_base_temperature(" -5 ") == -5

    def test_garbage_becomes_default(self):
        assert coerce_base_temperature("warm") == 75
        assert coerce_base_temperature("") == 75
        assert coerce_base_temperature("72.5") == 75
        assert coerce_base_temperature(None) == 75
        assert coerce_base_temperature(True) == 75

    def test_custom_default(self):
        assert coerce_base_temperature("warm", default=30) == 30

    def test_only_plain_ascii_digits(self):
        assert coerce_base_temperature("+40") == 40
        assert coerce_base_temperature("1_000") == 75
        assert coerce_base_temperature("٤٠") == 75
        assert coerce_base_temperature("4 0") == 75


# ============================================================
# Wind and precipitation
# ============================================================

class TestWind:

    @pytest.mark.parametrize("roll,expected", (
        [(r, Winds.NONE) for r in range(1, 13)]
        + [(r, Winds.LIGHT) for r in range(13, 18)]
        + [(r, Winds.STRONG) for r in range(18, 21)]
    ))
    def test_table(self, roll, expected):
        assert WeatherGenerator(ScriptedDice(roll)).wind() is expected

    def test_real_dice_give_a_wind_level(self):
        generator = WeatherGenerator()
        assert all(generator.wind() in Winds for _ in range(100))


class TestPrecipitation:

    @pytest.mark.parametrize("roll,expected", (
        [(r, Precip.NONE) for r in range(1, 13)]
        + [(r, Precip.LIGHT) for r in range(13, 18)]
        + [(r, Precip.HEAVY) for r in range(18, 21)]
    ))
    def test_table(self, roll, expected):
        assert WeatherGenerator(ScriptedDice(roll)).precipitation() is expected


class TestRollAll:

    def test_each_condition_gets_its_own_d20(self):
        dice = ScriptedDice(1, 1, 1)
        WeatherGenerator(dice).all()
        assert dice.requested == [20, 20, 20]

    def test_all_maximum(self):
        roll = WeatherGenerator(max_dice).all(50)
        assert roll == WeatherRoll(temperature=90, wind=Winds.STRONG, precipitation=Precip.HEAVY)

    def test_all_minimum(self):
        roll = WeatherGenerator(min_dice).all()
        assert roll == WeatherRoll(temperature=75, wind=Winds.NONE, precipitation=Precip.NONE)

    def test_to_dict(self):
        roll = WeatherRoll(temperature=82, wind=Winds.LIGHT, precipitation=Precip.HEAVY)
        assert roll.to_dict() == {"temperature": 82, "wind": "light", "precipitation": "heavy"}


# ============================================================
# Formatting
# ============================================================

class TestChatFormatter:

    def test_single_conditions(self):
        formatter = ChatFormatter()
        assert formatter.temperature(82) == ["Temperature: 82F"]
        assert formatter.wind(Winds.LIGHT) == ["Wind: Light"]
        assert formatter.wind(Winds.STRONG) == ["Wind: Strong"]
        assert formatter.precipitation(Precip.NONE) == ["Precipitation: None"]
        assert formatter.precipitation(Precip.HEAVY) == ["Precipitation: Heavy"]

    def test_all_is_wind_precip_temp(self):
        roll = WeatherRoll(temperature=-5, wind=Winds.NONE, precipitation=Precip.LIGHT)
        assert ChatFormatter().all(roll) == [
            "Wind: None",
            "Precipitation: Light",
            "Temperature: -5F",
        ]


class TestPowerCardFormatter:

    def test_single_condition_card(self):
        [card] = PowerCardFormatter().wind(Winds.STRONG)
        assert card.splitlines() == [
            "!power {{",
            "--format|weather",
            "--name|Current Wind Speed",
            "--!tag|Strong",
            "}}",
        ]

    def test_temperature_and_precip_titles(self):
        [temp] = PowerCardFormatter().temperature(65)
        [precip] = PowerCardFormatter().precipitation(Precip.LIGHT)
        assert "--name|Current Temperature" in temp
        assert "--!tag|65F" in temp
        assert "--name|Current Precipitation" in precip
        assert "--!tag|Light" in precip

    def test_all_is_one_block(self):
        roll = WeatherRoll(temperature=85, wind=Winds.LIGHT, precipitation=Precip.NONE)
        [card] = PowerCardFormatter("storm").all(roll)
        assert card.splitlines() == [
            "!power {{",
            "--format|storm",
            "--name|Current Weather",
            "--Temperature|85F",
            "--Wind Speed|Light",
            "--Precipitation|None",
            "}}",
        ]

    def test_create_formatter(self):
        assert isinstance(create_formatter("chat"), ChatFormatter)
        card = create_formatter("powercard", "weather2")
        assert isinstance(card, PowerCardFormatter)
        assert card.power_format == "weather2"

    def test_unknown_formatter_raises(self):
        with pytest.raises(ValueError, match="Unknown output format"):
            create_formatter("html")


# ============================================================
# Command routing
# ============================================================

class TestRouterParsing:

    def setup_method(self):
        self.router = CommandRouter()

    def test_is_command(self):
        assert self.router.is_command(api("!wild-weather-temp 40"))
        assert not self.router.is_command(api("hello there"))
        assert not self.router.is_command(api("!other-thing"))

    def test_non_api_messages_are_not_commands(self):
        msg = ChatMessage(type="general", content="!wild-weather-temp 40")
        assert not self.router.is_command(msg)

    def test_parse_command_name(self):
        assert self.router.parse_command_name(api("!wild-weather-temp 40")) == "temp"
        assert self.router.parse_command_name(api("!wild-weather-all")) == "all"

    def test_command_name_is_lowercased(self):
        assert self.router.parse_command_name(api("!wild-weather-PRECIP")) == "precip"

    def test_parse_arguments(self):
        assert self.router.parse_arguments(api("!wild-weather-temp 40")) == ["40"]
        assert self.router.parse_arguments(api("!wild-weather-temp 40 extra")) == ["40", "extra"]
        assert self.router.parse_arguments(api("!wild-weather-wind")) == []

    def test_quoted_arguments_are_not_understood(self):
        args = self.router.parse_arguments(api('!wild-weather-temp "very hot"'))
        assert args == ['"very', 'hot"']

    def test_parse(self):
        assert self.router.parse(api("!wild-weather-temp 40")) == Command("temp", ("40",))
        assert self.router.parse(api("hello there")) is None

    def test_custom_prefix(self):
        router = CommandRouter(prefix="ww-")
        assert router.is_command(api("!ww-temp"))
        assert not router.is_command(api("!wild-weather-temp"))
        assert router.parse_command_name(api("!ww-temp")) == "temp"

    def test_mixed_case_prefix(self):
        router = CommandRouter(prefix="WW-")
        assert router.is_command(api("!WW-temp 40"))
        assert router.parse_command_name(api("!WW-temp 40")) == "temp"
        assert router.parse_command_name(api("!WW-TEMP")) == "temp"

    def test_prefix_is_case_sensitive(self):
        assert self.router.parse(api("!wild-weather-TEMP")) == Command("temp", ())
        assert not self.router.is_command(api("!Wild-Weather-TEMP"))


class TestRouterDispatch:

    def setup_method(self):
        self.calls = []
        self.router = CommandRouter()
        self.router.register("temp", lambda *args: self.calls.append(("temp", args)), "temp help")
        self.router.register("wind", lambda *args: self.calls.append(("wind", args)), "wind help")

    def test_dispatch_spreads_arguments(self):
        self.router.dispatch("temp", ["40", "x"])
        assert self.calls == [("temp", ("40", "x"))]

    def test_unknown_command_is_ignored(self):
        self.router.dispatch("bogus", ["40"])
        assert self.calls == []

    def test_unknown_command_is_not_logged(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="wild_weather.router"):
            self.router.route(api("!wild-weather-bogus 40"))
            self.router.route(ChatMessage(type="general", content="hello there"))
        assert caplog.records == []

    def test_non_callable_entry_is_ignored(self):
        self.router.register("broken", 42)
        self.router.dispatch("broken", [])
        assert self.calls == []

    def test_route(self):
        self.router.route(api("!wild-weather-temp 40"))
        self.router.route(api("!wild-weather-wind"))
        assert self.calls == [("temp", ("40",)), ("wind", ())]

    def test_route_ignores_chat(self):
        self.router.route(ChatMessage(type="general", content="hello there"))
        self.router.route(api("!wild-weather-bogus"))
        assert self.calls == []

    def test_register_collision_raises(self):
        with pytest.raises(ValueError, match="collision"):
            self.router.register("TEMP", print)

    def test_list_commands(self):
        assert self.router.list_commands() == [
            ("!wild-weather-temp", "temp help"),
            ("!wild-weather-wind", "wind help"),
        ]


# ============================================================
# Commands
# ============================================================

class TestWeatherCommands:

    def setup_method(self):
        self.sent = []

    def make(self, dice, formatter=None, default_base_temp=75):
        return WeatherCommands(
            generator=WeatherGenerator(dice),
            formatter=formatter or ChatFormatter(),
            send_chat=lambda who, body: self.sent.append((who, body)),
            default_base_temp=default_base_temp,
        )

    def test_roll_temp(self):
        self.make(ScriptedDice(16, 3)).roll_temp("40")
        assert self.sent == [("Weather", "Temperature: 10F")]

    def test_roll_temp_without_argument_uses_default(self):
        self.make(ScriptedDice(1), default_base_temp=30).roll_temp()
        assert self.sent == [("Weather", "Temperature: 30F")]

    def test_roll_temp_bad_argument_uses_default(self):
        self.make(ScriptedDice(1)).roll_temp("tropical")
        assert self.sent == [("Weather", "Temperature: 75F")]

    def test_roll_wind_ignores_extra_arguments(self):
        self.make(ScriptedDice(13)).roll_wind("gusty", "today")
        assert self.sent == [("Weather", "Wind: Light")]

    def test_roll_precip(self):
        self.make(ScriptedDice(20)).roll_precip()
        assert self.sent == [("Weather", "Precipitation: Heavy")]

    def test_roll_all_plain_sends_three_messages(self):
        self.make(max_dice).roll_all("30")
        assert self.sent == [
            ("Weather", "Wind: Strong"),
            ("Weather", "Precipitation: Heavy"),
            ("Weather", "Temperature: 70F"),
        ]

    def test_roll_all_card_sends_one_message(self):
        self.make(min_dice, PowerCardFormatter()).roll_all()
        assert len(self.sent) == 1
        assert "--Temperature|75F" in self.sent[0][1]

    def test_routes(self):
        commands = self.make(min_dice)
        routes = commands.routes()
        assert set(routes) == {"all", "temp", "wind", "precip"}
        assert set(commands.help_texts()) == set(routes)


# ============================================================
# Integration: host → router → commands → chat
# ============================================================

class TestIntegration:
    """End-to-end through install() and ConsoleHost."""

    def setup_method(self):
        self.lines = []
        self.host = ConsoleHost(writer=self.lines.append)

    def say(self, line):
        self.host.emit("chat:message", message_from_line(line))

    def test_temp_40(self):
        install(self.host)
        self.say("!wild-weather-temp 40")
        assert len(self.host.sent) == 1
        speaker, body = self.host.sent[0]
        assert speaker == "Weather"
        match = re.fullmatch(r"Temperature: (-?\d+)F", body)
        assert match is not None
        assert int(match.group(1)) in {40, 30, 20, 10, 0, 50, 60, 70, 80}
        assert self.lines == [f"Weather: {body}"]

    def test_all_plain(self):
        install(self.host)
        self.say("!wild-weather-all")
        bodies = [body for _, body in self.host.sent]
        assert len(bodies) == 3
        assert bodies[0].startswith("Wind: ")
        assert bodies[1].startswith("Precipitation: ")
        assert bodies[2].startswith("Temperature: ")

    def test_all_powercard(self):
        config = WildWeatherConfig()
        config.chat.output_format = "powercard"
        install(self.host, config)
        self.say("!wild-weather-all")
        assert len(self.host.sent) == 1
        card = self.host.sent[0][1]
        assert card.startswith("!power {{")
        for label in ("--format|weather", "--Temperature|", "--Wind Speed|", "--Precipitation|"):
            assert label in card

    def test_plain_chat_is_ignored(self):
        install(self.host)
        self.say("hello there")
        assert self.host.sent == []
        assert self.lines == []

    def test_unknown_command_is_ignored(self):
        install(self.host)
        self.say("!wild-weather-bogus")
        assert self.host.sent == []

    def test_configured_defaults(self):
        config = WildWeatherConfig()
        config.weather.base_temperature = 40
        config.chat.speaking_as = "Sky"
        install(self.host, config, random_integer=min_dice)
        self.say("!wild-weather-temp")
        assert self.host.sent == [("Sky", "Temperature: 40F")]

    def test_mixed_case_prefix_from_config(self):
        config = WildWeatherConfig()
        config.command.prefix = "WW-"
        install(self.host, config, random_integer=min_dice)
        self.say("!WW-temp 40")
        assert self.host.sent == [("Weather", "Temperature: 40F")]

    def test_double_space_gives_empty_argument_and_default_base(self):
        install(self.host, random_integer=min_dice)
        self.say("!wild-weather-temp  40")
        assert self.host.sent == [("Weather", "Temperature: 75F")]

    def test_message_from_line(self):
        assert message_from_line("!wild-weather-all").type == "api"
        assert message_from_line("hello").type == "general"

    def test_ready_logs_loaded(self, caplog):
        install(self.host)
        with caplog.at_level(logging.INFO, logger="wild_weather.host"):
            self.host.emit("ready")
        assert LOADED_MESSAGE in caplog.text

    def test_ready_logs_powercard_loaded(self, caplog):
        config = WildWeatherConfig()
        config.chat.output_format = "powercard"
        install(self.host, config)
        with caplog.at_level(logging.INFO, logger="wild_weather.host"):
            self.host.emit("ready")
        assert POWERCARD_LOADED_MESSAGE in caplog.text
