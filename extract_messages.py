#!/usr/bin/env python3

import argparse
import logging
import sys

from message_extractor.config import load_config
from message_extractor.errors import MessageExtractorError
from message_extractor.extract import (extract_catalogues, read_source,
                                       run_watch)
from message_extractor.helper import configure_logging
from message_extractor.transform import transform_code


log = logging.getLogger("extract_messages")


def main_entry(argv):
    parser = argparse.ArgumentParser(
        description="Extract messages from source files into translation "
        "catalogues.")
    parser.add_argument(
        "-c", "--config",
        help="Path of messages.config.json. By default it is looked up "
        "from the working directory upwards.",
        default=None)
    parser.add_argument(
        "-w", "--watch",
        action="store_true",
        help="Keep running and re-extract source files when they change.")
    parser.add_argument(
        "--prune",
        action="store_true",
        help="Drop catalogue entries that are no longer found in the "
        "sources instead of keeping them as obsolete.")
    parser.add_argument(
        "--transform",
        metavar="FILE",
        help="Print FILE with every message replaced by its runtime call "
        "and exit.",
        default=None)
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true",
                           help="Enable verbose logging.")
    verbosity.add_argument("-q", "--quiet", action="store_true",
                           help="Only log warnings and errors.")

    arguments = parser.parse_args(argv[1:])
    configure_logging(arguments.verbose, arguments.quiet)
    log.debug(f"Commandline Arguments (+defaults): {arguments}")

    try:
        if arguments.transform:
            code = read_source(arguments.transform)
            sys.stdout.write(transform_code(arguments.transform, code))
            return 0

        config = load_config(arguments.config)
        extractions = extract_catalogues(config, prune=arguments.prune)
        if arguments.watch:
            run_watch(extractions)
    except (MessageExtractorError, OSError) as E:
        log.error(str(E))
        return 1
    return 0


def main():
    sys.exit(main_entry(sys.argv))


if __name__ == "__main__":
    main()
