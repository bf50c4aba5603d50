#!/usr/bin/env python3
"""
Wild Weather — Console Chat Loop

Simulates the tabletop chat log in a terminal. Type chat lines or
weather commands. Try:

    !wild-weather-all
    !wild-weather-temp 40
    !wild-weather-wind
    !wild-weather-precip
    /help
    hello this is normal chat
    /quit

"""

import logging
import sys

from wild_weather.config import setup_configuration
from wild_weather.host import CHAT_MESSAGE_EVENT, READY_EVENT, ConsoleHost, install, message_from_line


def configure_logging(verbose: bool = False, quiet: bool = False):
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format='🐛 %(message)s')
    elif quiet:
        logging.basicConfig(level=logging.WARNING, format='⚠️  %(message)s')
    else:
        logging.basicConfig(level=logging.INFO, format='ℹ️  %(message)s')


def main(argv=None) -> int:
    config, exit_status = setup_configuration(argv)
    if exit_status is not None:
        return exit_status

    configure_logging(config.console.verbose, config.console.quiet)

    host = ConsoleHost()
    router = install(host, config)

    print("=" * 60)
    print("  Wild Weather — Console Chat")
    print("  Type /help for commands, /quit to exit")
    print("=" * 60)
    print()

    host.emit(READY_EVENT)

    while True:
        try:
            line = input("you> ").strip()
        except (EOFError, KeyboardInterrupt):
            print()
            break

        if not line:
            continue

        if line.lower() == "/quit":
            break

        if line.lower() == "/help":
            print("\nAvailable commands:")
            for command, help_text in router.list_commands():
                print(f"  {command} {help_text}")
            print()
            continue

        message = message_from_line(line, who="you")
        if not router.is_command(message):
            print(f"  [chat] {line}")
            continue

        host.emit(CHAT_MESSAGE_EVENT, message)

    return 0


if __name__ == "__main__":
    sys.exit(main())
