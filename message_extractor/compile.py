"""
Compile locale catalogues into runtime files mapping message ids to
translations, filling gaps from each locale's fallback chain.
"""
import asyncio
import json
import logging
import os

from .catalogue import read_catalogue, resolve_output_path, write_atomic
from .errors import MessageExtractorError
from .formats import formatters


log = logging.getLogger(__name__)

COMPILED_EXTENSION = "json"


def compiled_extension(formatter):
    if formatter.extension == COMPILED_EXTENSION:
        return f"compiled.{COMPILED_EXTENSION}"
    return COMPILED_EXTENSION


class CompileRun:
    """
    Fallback resolution for one catalogue.

    A locale is resolved along a chain of locales that led to it. A fallback
    already on that chain contributes nothing, so a cycle in the
    configuration ends the same way whatever order the reads complete in.
    Results are shared between requests with the same chain, and every
    catalogue is read at most once per run.
    """

    def __init__(self, config, catalogue, read=read_catalogue):
        self.config = config
        self.catalogue = catalogue
        self.formatter = formatters[catalogue.format]
        self.read = read
        self.root = config.root or os.getcwd()
        self.source = None
        self._loads = dict()
        # (locale, chain) -> task
        self._tasks = dict()

    def catalogue_path(self, locale):
        return resolve_output_path(
            os.path.join(self.root, self.catalogue.output), locale,
            self.formatter.extension)

    def load(self, locale):
        """Content and non-obsolete entries of a locale catalogue."""
        task = self._loads.get(locale)
        if task is None:
            task = asyncio.ensure_future(self._load(locale))
            self._loads[locale] = task
        return task

    async def _load(self, locale):
        path = self.catalogue_path(locale)
        content, entries = await asyncio.to_thread(
            self.read, path, self.formatter, locale)
        return content, {id: entry for id, entry in entries.items()
                         if not entry.obsolete}

    def load_source(self):
        """Non-obsolete source locale entries, read once per run."""
        if self.source is None:
            self.source = asyncio.ensure_future(self._load_source())
        return self.source

    async def _load_source(self):
        content, entries = await self.load(self.config.source_locale)
        if content is None:
            raise MessageExtractorError(
                f"No catalogue for the source locale at "
                f"{self.catalogue_path(self.config.source_locale)}, "
                "run extract_messages.py first")
        return entries

    def resolve(self, locale, chain=frozenset()):
        """
        Awaitable mapping of message id to translation for a locale.

        `chain` holds the locales whose fallback led here.
        """
        key = (locale, chain)
        task = self._tasks.get(key)
        if task is None:
            task = asyncio.ensure_future(self._resolve(locale, chain))
            self._tasks[key] = task
        return task

    async def _resolve(self, locale, chain):
        source = await self.load_source()
        if locale == self.config.source_locale:
            entries = source
        else:
            _, entries = await self.load(locale)

        result = dict()
        missing = []
        for id, entry in source.items():
            existing = entries.get(id)
            if existing is not None and existing.translation:
                result[id] = existing.translation
            else:
                missing.append(id)

        inner = chain | {locale}
        for fallback in self.config.fallbacks_for(locale):
            if not missing:
                break
            if fallback in inner:
                log.debug(f"Fallback cycle {locale} -> {fallback}, skipped")
                continue
            translations = await self.resolve(fallback, inner)
            missing = [id for id in missing
                       if not self._take(result, translations, id)]

        if locale == self.config.source_locale:
            # the source text is the last resort of every chain
            for id in missing:
                result[id] = source[id].message
            missing = []

        if missing:
            log.debug(f"{locale}: {len(missing)} message(s) untranslated")
        return {id: result[id] for id in source if id in result}

    @staticmethod
    def _take(result, translations, id):
        if translations.get(id):
            result[id] = translations[id]
            return True
        return False

    def output_path(self, locale):
        return resolve_output_path(
            os.path.join(self.root, self.catalogue.output), locale,
            compiled_extension(self.formatter))

    async def compile(self):
        """(path, content) of the runtime file of every locale."""
        await self.load_source()
        mappings = await asyncio.gather(
            *(self.resolve(locale) for locale in self.config.locales))
        outputs = []
        for locale, mapping in zip(self.config.locales, mappings):
            log.info(f"{locale}: {len(mapping)} message(s)")
            outputs.append((self.output_path(locale),
                            json.dumps(mapping, indent=2,
                                       ensure_ascii=False) + "\n"))
        return outputs


async def compile_catalogues_async(config):
    outputs = []
    for catalogue in config.catalogues:
        log.info(f"Processing catalogue: {', '.join(catalogue.include)}")
        outputs.extend(await CompileRun(config, catalogue).compile())
    return outputs


def compile_catalogues(config):
    """Compile every catalogue; nothing is written if one of them fails."""
    outputs = asyncio.run(compile_catalogues_async(config))
    root = config.root or os.getcwd()
    for path, content in outputs:
        write_atomic(path, content)
        log.info(f"Wrote {os.path.relpath(path, root)}")
    return outputs
