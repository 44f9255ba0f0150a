"""
Catalogue entries and the rules for merging freshly extracted messages
into what is already on disk.
"""
import logging
import os
import tempfile
from dataclasses import dataclass, field, replace
from typing import List, Optional

from .errors import CatalogueParseError, IdentifierCollisionError
from .helper import append_unique


log = logging.getLogger(__name__)


@dataclass
class CatalogueEntry:
    """
    One message of a locale catalogue.

    Parameters:
        id (str): Generated hash or the override id of the message
        message (str): Canonical ICU text
        translation (str): Translated ICU text, empty when untranslated
        context (str): "context" as in GNU gettext
        comments: Translator comments
        references: `file:line` locations of the message
        obsolete (bool): Kept on disk but no longer found in the sources
    """
    id: str
    message: str
    translation: Optional[str] = None
    context: Optional[str] = None
    comments: List[str] = field(default_factory=list)
    references: List[str] = field(default_factory=list)
    obsolete: bool = False


def entry_from_message(message):
    text = message.to_icu()
    return CatalogueEntry(
        id=message.message_id(),
        message=text,
        translation=text,
        context=message.context,
        comments=list(message.comments),
        references=list(message.references))


def map_messages(entries):
    """
    Index entries by id, uniting comments and references of duplicates.

    Raises IdentifierCollisionError when one id stands for two different
    (message, context) pairs.
    """
    mapped = dict()
    for entry in entries:
        existing = mapped.get(entry.id)
        if existing is None:
            mapped[entry.id] = replace(entry, comments=list(entry.comments),
                                       references=list(entry.references))
            continue
        if (existing.message, existing.context or "") != \
                (entry.message, entry.context or ""):
            raise IdentifierCollisionError(entry.id, existing, entry)
        append_unique(existing.comments, entry.comments)
        append_unique(existing.references, entry.references)
    return mapped


def merge_entries(existing, extracted, is_source, prune=False):
    """
    Merge extracted entries into a locale's existing entries.

    For the source locale the extracted text is written as the translation.
    Other locales keep their translations and only take the message text,
    context, comments and references from the extraction. Entries that are
    no longer extracted are kept as obsolete unless `prune` is set.
    """
    merged = dict()
    for id, new in extracted.items():
        old = existing.get(id)
        if is_source:
            translation = new.message
        elif old is not None:
            translation = old.translation
        else:
            translation = ""
        merged[id] = replace(new, translation=translation,
                             comments=list(new.comments),
                             references=list(new.references),
                             obsolete=False)

    for id, old in existing.items():
        if id in merged:
            continue
        if prune:
            log.debug(f"Dropping stale message {id}")
            continue
        merged[id] = replace(old, obsolete=True)
    return merged


def resolve_output_path(pattern, locale, extension):
    return os.path.abspath(pattern.replace("{locale}", locale)
                           .replace("{extension}", extension))


def read_catalogue(path, formatter, locale):
    """
    Entries of one catalogue file, by id.

    A missing file has no entries; a file that cannot be parsed raises
    CatalogueParseError.
    """
    try:
        with open(path, encoding="utf-8") as fp:
            content = fp.read()
    except FileNotFoundError:
        return None, dict()
    try:
        entries = formatter.parse(content, locale)
    except ValueError as E:
        raise CatalogueParseError(path, str(E)) from E
    return content, {entry.id: entry for entry in entries}


def write_atomic(path, content):
    """Write a file so that readers see either the old or the new content."""
    directory = os.path.dirname(os.path.abspath(path))
    os.makedirs(directory, exist_ok=True)
    fd, temp_path = tempfile.mkstemp(dir=directory, prefix=".",
                                     suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as fp:
            fp.write(content)
        os.replace(temp_path, path)
    except BaseException:
        os.unlink(temp_path)
        raise
