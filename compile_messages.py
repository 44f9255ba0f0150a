#!/usr/bin/env python3

import argparse
import logging
import sys

from message_extractor.compile import compile_catalogues
from message_extractor.config import load_config
from message_extractor.errors import MessageExtractorError
from message_extractor.helper import configure_logging


log = logging.getLogger("compile_messages")


def main_entry(argv):
    parser = argparse.ArgumentParser(
        description="Compile extracted messages into runtime-ready locale "
        "files.")
    parser.add_argument(
        "-c", "--config",
        help="Path of messages.config.json. By default it is looked up "
        "from the working directory upwards.",
        default=None)
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true",
                           help="Enable verbose logging.")
    verbosity.add_argument("-q", "--quiet", action="store_true",
                           help="Only log warnings and errors.")

    arguments = parser.parse_args(argv[1:])
    configure_logging(arguments.verbose, arguments.quiet)

    try:
        config = load_config(arguments.config)
        compile_catalogues(config)
    except (MessageExtractorError, OSError) as E:
        log.error(str(E))
        return 1
    return 0


def main():
    sys.exit(main_entry(sys.argv))


if __name__ == "__main__":
    main()
