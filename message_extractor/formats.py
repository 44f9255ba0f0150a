"""
Catalogue codecs.

Each formatter turns file content into CatalogueEntry objects (`parse`)
and back (`stringify`). Parse failures raise ValueError.
"""
import json
from datetime import datetime, timezone

import polib

from .catalogue import CatalogueEntry
from .identifier import generate_id


ID_FLAG = "id="


def split_reference(reference):
    path, _, line = reference.rpartition(":")
    if not path or not line.isdigit():
        return reference, ""
    return path, line


def join_reference(occurrence):
    path, line = occurrence
    return f"{path}:{line}" if line else path


class PoFormatter:
    extension = "po"

    def metadata(self, locale):
        tzinfo = datetime.now(timezone.utc).astimezone().tzinfo
        tztime = datetime.now(tzinfo).strftime('%Y-%m-%d %H:%M%z')
        return {
            "Project-Id-Version": "PACKAGE VERSION",
            "POT-Creation-Date": f"{tztime}",
            "Last-Translator": "None",
            "Language-Team": "None",
            "Language": locale,
            "MIME-Version": "1.0",
            "Content-Type": "text/plain; charset=UTF-8",
            "Content-Transfer-Encoding": "8bit",
        }

    def parse(self, content, locale):
        try:
            pofile = polib.pofile(content)
        except (OSError, UnicodeDecodeError) as E:
            raise ValueError(str(E)) from E

        entries = []
        for po_entry in pofile:
            if not po_entry.msgid:
                continue
            context = po_entry.msgctxt or None
            id = None
            for flag in po_entry.flags:
                if flag.startswith(ID_FLAG):
                    id = flag[len(ID_FLAG):]
            entries.append(CatalogueEntry(
                id=id or generate_id(po_entry.msgid, context),
                message=po_entry.msgid,
                translation=po_entry.msgstr,
                context=context,
                comments=po_entry.comment.splitlines()
                if po_entry.comment else [],
                references=[join_reference(o) for o in po_entry.occurrences],
                obsolete=bool(po_entry.obsolete)))
        return entries

    def stringify(self, entries, locale, previous_content=None):
        pofile = polib.POFile(wrapwidth=0)
        previous = None
        if previous_content:
            try:
                previous = polib.pofile(previous_content)
            except (OSError, UnicodeDecodeError):
                previous = None
        if previous is not None and previous.metadata:
            pofile.metadata = dict(previous.metadata)
            pofile.header = previous.header
        else:
            pofile.metadata = self.metadata(locale)
        pofile.metadata["Language"] = locale

        for entry in entries:
            flags = []
            if entry.id != generate_id(entry.message, entry.context):
                flags.append(f"{ID_FLAG}{entry.id}")
            pofile.append(polib.POEntry(
                msgid=entry.message,
                msgstr=entry.translation or "",
                msgctxt=entry.context,
                comment="\n".join(entry.comments),
                occurrences=[split_reference(r) for r in entry.references],
                flags=flags,
                obsolete=entry.obsolete))
        return str(pofile)


class JsonFormatter:
    extension = "json"

    def parse(self, content, locale):
        data = json.loads(content)
        if type(data) is not dict:
            raise ValueError("expected an object keyed by message id")

        entries = []
        for id, value in data.items():
            if type(value) is not dict or \
                    type(value.get("message")) is not str:
                raise ValueError(f"entry \"{id}\" has no message")
            entries.append(CatalogueEntry(
                id=id,
                message=value["message"],
                translation=value.get("translation"),
                context=value.get("context"),
                comments=list(value.get("comments", [])),
                references=list(value.get("references", [])),
                obsolete=bool(value.get("obsolete", False))))
        return entries

    def stringify(self, entries, locale, previous_content=None):
        data = dict()
        for entry in entries:
            value = {
                "message": entry.message,
                "translation": entry.translation or "",
            }
            if entry.context is not None:
                value["context"] = entry.context
            value["comments"] = entry.comments
            value["references"] = entry.references
            if entry.obsolete:
                value["obsolete"] = True
            data[entry.id] = value
        return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


formatters = {
    "po": PoFormatter(),
    "json": JsonFormatter(),
}
