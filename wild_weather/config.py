"""
Configuration system for Wild Weather
Supports YAML files, CLI overrides, and programmatic access
"""

from __future__ import annotations

import argparse
import logging
from copy import deepcopy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from wild_weather.commands import SPEAKING_AS
from wild_weather.formatters import DEFAULT_POWER_FORMAT, FORMATTERS
from wild_weather.router import DEFAULT_PREFIX
from wild_weather.weather import DEFAULT_BASE_TEMPERATURE


CONFIG_VERSION = "1.0"
DEFAULT_CONFIG_NAME = "wild_weather.yaml"


@dataclass
class CommandConfig:
    """Chat command recognition"""
    prefix: str = DEFAULT_PREFIX    # commands are "!" + prefix + name

    def to_dict(self) -> Dict[str, Any]:
        return {'prefix': self.prefix}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CommandConfig':
        return cls(prefix=data.get('prefix', DEFAULT_PREFIX))


@dataclass
class ChatConfig:
    """Chat output settings"""
    speaking_as: str = SPEAKING_AS
    output_format: str = "chat"              # "chat" or "powercard"
    power_format: str = DEFAULT_POWER_FORMAT  # PowerCards --format tag

    def to_dict(self) -> Dict[str, Any]:
        return {
            'speaking_as': self.speaking_as,
            'output_format': self.output_format,
            'power_format': self.power_format,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ChatConfig':
        return cls(
            speaking_as=data.get('speaking_as', SPEAKING_AS),
            output_format=data.get('output_format', 'chat'),
            power_format=data.get('power_format', DEFAULT_POWER_FORMAT),
        )


@dataclass
class WeatherConfig:
    """Weather roll defaults"""
    base_temperature: int = DEFAULT_BASE_TEMPERATURE  # degrees Fahrenheit

    def to_dict(self) -> Dict[str, Any]:
        return {'base_temperature': self.base_temperature}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'WeatherConfig':
        return cls(base_temperature=data.get('base_temperature', DEFAULT_BASE_TEMPERATURE))


@dataclass
class ConsoleConfig:
    """Console messages logging level configuration"""
    verbose: bool = False
    quiet: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {'verbose': self.verbose, 'quiet': self.quiet}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ConsoleConfig':
        return cls(
            verbose=data.get('verbose', False),
            quiet=data.get('quiet', False),
        )


SECTIONS = {
    'command': CommandConfig,
    'chat': ChatConfig,
    'weather': WeatherConfig,
    'console': ConsoleConfig,
}


@dataclass
class WildWeatherConfig:
    """Complete Wild Weather configuration"""
    command: CommandConfig = field(default_factory=CommandConfig)
    chat: ChatConfig = field(default_factory=ChatConfig)
    weather: WeatherConfig = field(default_factory=WeatherConfig)
    console: ConsoleConfig = field(default_factory=ConsoleConfig)

    config_version: str = CONFIG_VERSION
    description: str = "Wild Weather Configuration"

    def to_dict(self) -> Dict[str, Any]:
        data = {name: getattr(self, name).to_dict() for name in SECTIONS}
        data['config_version'] = self.config_version
        data['description'] = self.description
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'WildWeatherConfig':
        config = cls()
        for name, section_type in SECTIONS.items():
            section = data.get(name)
            if isinstance(section, dict):
                setattr(config, name, section_type.from_dict(section))
        config.config_version = str(data.get('config_version', CONFIG_VERSION))
        config.description = data.get('description', config.description)
        return config


class ConfigurationManager:
    """
    Manages configuration loading, merging, and validation
    """

    def __init__(self):
        self.config = None
        self.config_file_path = None

        self.logger = logging.getLogger(__name__)

        # Standard config file locations (in order of preference)
        self.config_search_paths = [
            Path.cwd() / DEFAULT_CONFIG_NAME,  # Current directory
            Path.cwd() / "config" / DEFAULT_CONFIG_NAME,  # Config subdirectory
            Path.home() / ".config" / "wild_weather" / "config.yaml",  # User config
            Path("/etc/wild_weather/config.yaml"),  # System config (Linux)
        ]

    def load_config(self, config_file: Optional[str] = None) -> WildWeatherConfig:
        """
        Load configuration from file with fallback chain

        Args:
            config_file: Specific config file path, or None for auto-discovery

        Returns:
            Loaded configuration object (defaults if nothing was found)
        """
        if config_file:
            config_path = Path(config_file)
            if config_path.exists():
                self.config = self._load_yaml_file(config_path)
                self.config_file_path = config_path
                self.logger.info(f"Loaded config from: {config_path}")
            else:
                self.logger.warning(f"Config file not found: {config_path}")
                self.logger.info("Using default configuration")
        else:
            for path in self.config_search_paths:
                if path.exists():
                    self.config = self._load_yaml_file(path)
                    self.config_file_path = path
                    self.logger.info(f"Auto-discovered config: {path}")
                    break
            else:
                self.logger.info("No config file found, using defaults")

        if self.config is None:
            self.config = WildWeatherConfig()
        return self.config

    def _load_yaml_file(self, file_path: Path) -> WildWeatherConfig:
        """Load configuration from YAML file"""
        try:
            with open(file_path, 'r') as f:
                yaml_data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            self.logger.error(f"Error loading config file {file_path}: {e}")
            return WildWeatherConfig()

        if not isinstance(yaml_data, dict):
            self.logger.error(f"Error loading config file {file_path}: top level must be a mapping")
            return WildWeatherConfig()

        self._warn_unknown_keys(yaml_data)
        return WildWeatherConfig.from_dict(yaml_data)

    def _warn_unknown_keys(self, yaml_data: Dict[str, Any]):
        """Unknown keys are ignored, but say so"""
        known_top = set(SECTIONS) | {'config_version', 'description'}
        for key, value in yaml_data.items():
            if key not in known_top:
                self.logger.warning(f"Unknown config key '{key}'")
                continue
            section_type = SECTIONS.get(key)
            if section_type and isinstance(value, dict):
                defaults = section_type()
                for sub_key in value:
                    if not hasattr(defaults, sub_key):
                        self.logger.warning(f"Unknown config key '{sub_key}' in {section_type.__name__}")

    def merge_cli_args(self, args: argparse.Namespace) -> WildWeatherConfig:
        """
        Merge CLI arguments into configuration (CLI takes precedence)

        Args:
            args: Parsed command line arguments

        Returns:
            Updated configuration
        """
        if self.config is None:
            self.config = WildWeatherConfig()

        if getattr(args, 'prefix', None):
            self.config.command.prefix = args.prefix
        if getattr(args, 'output_format', None):
            self.config.chat.output_format = args.output_format
        if getattr(args, 'power_format', None):
            self.config.chat.power_format = args.power_format
        if getattr(args, 'speaking_as', None):
            self.config.chat.speaking_as = args.speaking_as
        if getattr(args, 'base_temp', None) is not None:
            self.config.weather.base_temperature = args.base_temp

        if getattr(args, 'verbose', False):
            self.config.console.verbose = True
        if getattr(args, 'quiet', False):
            self.config.console.quiet = True

        return self.config

    def save_config(self, file_path: Optional[str] = None) -> bool:
        """
        Save current configuration to YAML file

        Args:
            file_path: Target file path, or None to use loaded file path

        Returns:
            True if saved successfully
        """
        if file_path:
            target_path = Path(file_path)
        elif self.config_file_path:
            target_path = self.config_file_path
        else:
            target_path = Path(DEFAULT_CONFIG_NAME)

        try:
            target_path.parent.mkdir(parents=True, exist_ok=True)

            with open(target_path, 'w') as f:
                f.write("# Wild Weather Configuration\n")
                f.write("# Generated configuration file\n")
                f.write(f"# Version: {self.config.config_version}\n\n")

                yaml.dump(self.config.to_dict(), f,
                          default_flow_style=False,
                          sort_keys=False,
                          indent=2)

            self.logger.info(f"Configuration saved to: {target_path}")
            return True

        except OSError as e:
            self.logger.error(f"Error saving config to {target_path}: {e}")
            return False

    def create_sample_config(self, file_path: str = "wild_weather_sample.yaml") -> bool:
        """Create a sample configuration file with comments"""
        try:
            with open(file_path, 'w') as f:
                f.write(self._generate_sample_yaml())
            self.logger.info(f"Sample configuration created: {file_path}")
            return True
        except OSError as e:
            self.logger.error(f"Error creating sample config: {e}")
            return False

    def _generate_sample_yaml(self) -> str:
        """Generate sample YAML with comments"""
        return f"""# Wild Weather Configuration File
# Random D&D 5e weather (DMG p.109) for the chat log

# =============================================================================
# COMMAND SETTINGS
# =============================================================================
command:
  prefix: "{DEFAULT_PREFIX}"         # Commands look like !{DEFAULT_PREFIX}temp 40

# =============================================================================
# CHAT OUTPUT SETTINGS
# =============================================================================
chat:
  speaking_as: "{SPEAKING_AS}"            # Sender name shown in the chat log
  output_format: "chat"             # chat: plain text lines
                                    # powercard: PowerCards display blocks
  power_format: "{DEFAULT_POWER_FORMAT}"           # PowerCards --format tag (powercard only)

# =============================================================================
# WEATHER SETTINGS
# =============================================================================
weather:
  base_temperature: {DEFAULT_BASE_TEMPERATURE}              # Seasonal "normal" in F when no argument is given

# =============================================================================
# CONSOLE MESSAGES LOGGING LEVEL
# =============================================================================
console:
  verbose: false                    # Verbose output (more detail)
  quiet: false                      # Quiet mode (minimal output)

config_version: "{CONFIG_VERSION}"
description: "Wild Weather Configuration"
"""

    def validate_config(self) -> tuple[bool, list[str]]:
        """
        Validate configuration for common issues

        Returns:
            (is_valid, list_of_errors)
        """
        errors = []
        config = self.config or WildWeatherConfig()

        prefix = config.command.prefix
        if not isinstance(prefix, str) or not prefix:
            errors.append("Command prefix must be set")
        elif any(ch.isspace() for ch in prefix):
            errors.append(f"Command prefix cannot contain whitespace: '{prefix}'")

        if config.chat.output_format not in FORMATTERS:
            errors.append(
                f"Invalid output_format: {config.chat.output_format}. "
                f"Must be one of: {', '.join(sorted(FORMATTERS))}"
            )

        if not isinstance(config.chat.speaking_as, str) or not config.chat.speaking_as.strip():
            errors.append("speaking_as must be set")

        base = config.weather.base_temperature
        if isinstance(base, bool) or not isinstance(base, int):
            errors.append(f"Invalid base_temperature: {base}. Must be a whole number")

        return len(errors) == 0, errors

    def get_config(self) -> WildWeatherConfig:
        """Get a copy of the current configuration"""
        return deepcopy(self.config)


def create_argument_parser() -> argparse.ArgumentParser:
    """Argument parser for the console chat loop"""
    parser = argparse.ArgumentParser(
        prog='wild-weather',
        description='Wild Weather: random D&D 5e weather for the chat log',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
  %(prog)s                                 # Plain chat output, 75F base
  %(prog)s --format powercard              # PowerCards output
  %(prog)s --base-temp 40                  # Winter default
  %(prog)s -c my_config.yaml               # Use specific config file
  %(prog)s --create-config sample.yaml     # Create sample config file

Configuration:
  Configuration is loaded in this order (later overrides earlier):
  1. Built-in defaults
  2. Configuration file (YAML)
  3. Command line arguments

  Config file search order:
  - {DEFAULT_CONFIG_NAME} (current directory)
  - config/{DEFAULT_CONFIG_NAME}
  - ~/.config/wild_weather/config.yaml
  - /etc/wild_weather/config.yaml
        """
    )

    config_group = parser.add_argument_group('Configuration')
    config_group.add_argument('-c', '--config', help='Configuration file path')
    config_group.add_argument('--create-config', metavar='FILE',
                              help='Create sample configuration file and exit')
    config_group.add_argument('--save-config', metavar='FILE',
                              help='Save effective configuration to file')

    chat_group = parser.add_argument_group('Chat')
    chat_group.add_argument('--format', dest='output_format', choices=sorted(FORMATTERS),
                            help='Output format for weather results')
    chat_group.add_argument('--power-format', help='PowerCards --format tag')
    chat_group.add_argument('--speaking-as', help='Sender name for chat output')
    chat_group.add_argument('--prefix', help=f'Command prefix (default: {DEFAULT_PREFIX})')
    chat_group.add_argument('--base-temp', type=int,
                            help=f'Default base temperature in F (default: {DEFAULT_BASE_TEMPERATURE})')

    console_group = parser.add_mutually_exclusive_group()
    console_group.add_argument('-v', '--verbose', action='store_true', help='Verbose output')
    console_group.add_argument('-q', '--quiet', action='store_true', help='Quiet mode')

    return parser


def setup_configuration(argv=None) -> tuple[Optional[WildWeatherConfig], Optional[int]]:
    """
    Setup configuration system with CLI integration

    Args:
        argv: Command line arguments (None for sys.argv)

    Returns:
        (config_object, exit_status). exit_status is None when the
        caller should carry on, otherwise the process exit code.
    """
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    manager = ConfigurationManager()

    if args.create_config:
        if not manager.create_sample_config(args.create_config):
            return None, 1
        print(f"Sample configuration created: {args.create_config}")
        print(f"Edit the file and run again with: -c {args.create_config}")
        return None, 0

    manager.load_config(args.config)
    config = manager.merge_cli_args(args)

    is_valid, errors = manager.validate_config()
    if not is_valid:
        print("Configuration errors:")
        for error in errors:
            print(f"  ✗ {error}")
        return None, 1

    if args.save_config:
        if manager.save_config(args.save_config):
            print(f"Configuration saved to: {args.save_config}")

    return config, None
