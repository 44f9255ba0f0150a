"""
Extract messages from source files into per-locale catalogue files.
"""
import asyncio
import fnmatch
import glob
import logging
import os

from .catalogue import (entry_from_message, map_messages, merge_entries,
                        read_catalogue, resolve_output_path, write_atomic)
from .errors import MessageExtractorError, SourceParseError
from .formats import formatters
from .transform import extract_messages
from .watch import debounce, watch_paths


log = logging.getLogger(__name__)


def normalize_pattern(pattern):
    pattern = pattern.replace("\\", "/")
    while pattern.startswith("./"):
        pattern = pattern[2:]
    return pattern


def matches(path, patterns):
    """Whether a root-relative path matches one of the glob patterns."""
    path = path.replace(os.sep, "/")
    for pattern in patterns:
        pattern = normalize_pattern(pattern)
        if fnmatch.fnmatchcase(path, pattern):
            return True
        # `**/` also matches no directory at all
        if "**/" in pattern and \
                fnmatch.fnmatchcase(path, pattern.replace("**/", "")):
            return True
    return False


def find_files(catalogue, root):
    """Files of a catalogue as sorted root-relative paths."""
    found = set()
    for pattern in catalogue.include:
        for path in glob.glob(os.path.join(root, pattern), recursive=True):
            if not os.path.isfile(path):
                continue
            relative = os.path.relpath(path, root).replace(os.sep, "/")
            if not matches(relative, catalogue.exclude):
                found.add(relative)
    return sorted(found)


def read_source(path):
    """Text of a source file with text-mode line endings."""
    with open(path, "rb") as fp:
        data = fp.read()
    try:
        code = data.decode("utf-8")
    except UnicodeDecodeError as E:
        line = E.object[:E.start].count(b"\n") + 1
        raise SourceParseError(path, line, f"not valid UTF-8 ({E.reason})")
    return code.replace("\r\n", "\n").replace("\r", "\n")


def extract_file(path, root):
    """Catalogue entries of one source file; a missing file has none."""
    try:
        code = read_source(os.path.join(root, path))
    except FileNotFoundError:
        return []

    result = extract_messages(os.path.join(root, path), code, root=root)
    for diagnostic in result.diagnostics:
        log.warning(str(diagnostic))
    return [entry_from_message(message) for message in result.messages]


class CatalogueExtraction:
    """Extraction state of one catalogue: entries per source file."""

    def __init__(self, config, catalogue, prune=False):
        self.config = config
        self.catalogue = catalogue
        self.prune = prune
        self.root = config.root or os.getcwd()
        self.formatter = formatters[catalogue.format]
        self.entries_by_file = dict()

    def process_file(self, path):
        entries = extract_file(path, self.root)
        if entries:
            self.entries_by_file[path] = entries
            log.info(f"Found {len(entries)} message(s) in {path}")
        else:
            self.entries_by_file.pop(path, None)
        return entries

    def process_all(self):
        log.info(f"Processing catalogue: {', '.join(self.catalogue.include)}")
        paths = find_files(self.catalogue, self.root)
        log.info(f"Found {len(paths)} file(s)")
        for path in paths:
            log.debug(f"Processing {path}")
            self.process_file(path)

    def is_source_file(self, path):
        return matches(path, self.catalogue.include) and \
            not matches(path, self.catalogue.exclude)

    def output_path(self, locale):
        return resolve_output_path(
            os.path.join(self.root, self.catalogue.output), locale,
            self.formatter.extension)

    def render(self):
        """(path, content) of every locale file, before anything is written."""
        extracted = map_messages(
            entry for path in sorted(self.entries_by_file)
            for entry in self.entries_by_file[path])
        log.info(f"Extracted {len(extracted)} message(s)")

        outputs = []
        for locale in self.config.locales:
            path = self.output_path(locale)
            previous, existing = read_catalogue(path, self.formatter, locale)
            merged = merge_entries(
                existing, extracted,
                is_source=locale == self.config.source_locale,
                prune=self.prune)
            outputs.append((path, self.formatter.stringify(
                list(merged.values()), locale, previous_content=previous)))
        return outputs

    def write(self):
        write_outputs(self.render(), self.root)


def write_outputs(outputs, root):
    for path, content in outputs:
        write_atomic(path, content)
        log.info(f"Wrote {os.path.relpath(path, root)}")


def extract_catalogues(config, prune=False):
    """Extract every catalogue; nothing is written if one of them fails."""
    extractions = []
    outputs = []
    for catalogue in config.catalogues:
        extraction = CatalogueExtraction(config, catalogue, prune=prune)
        extraction.process_all()
        outputs.extend(extraction.render())
        extractions.append(extraction)
    write_outputs(outputs, config.root or os.getcwd())
    return extractions


async def watch_catalogues(extractions, changes=None):
    """
    Re-extract changed source files until cancelled.

    `changes` is an async iterable of changed paths; the working directory
    is watched when it is not given.
    """
    if changes is None:
        root = extractions[0].root if extractions else os.getcwd()
        changes = watch_paths(root)

    async for path in debounce(changes):
        for extraction in extractions:
            relative = os.path.relpath(os.path.abspath(path),
                                       extraction.root).replace(os.sep, "/")
            if not extraction.is_source_file(relative):
                continue
            log.info(f"Detected change in {relative}")
            try:
                extraction.process_file(relative)
                extraction.write()
            except (MessageExtractorError, OSError) as E:
                log.error(str(E))


def run_watch(extractions):
    log.info("Watching for changes, press Ctrl+C to stop")
    try:
        asyncio.run(watch_catalogues(extractions))
    except KeyboardInterrupt:
        log.info("Stopped watching")
