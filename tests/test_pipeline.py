import asyncio
import json
import logging

import polib
import pytest

import compile_messages
import extract_messages
from message_extractor.config import CONFIG_FILE_NAME, load_config
from message_extractor.extract import (CatalogueExtraction, find_files,
                                       matches, watch_catalogues)
from message_extractor.identifier import generate_id


APP = """\
import { say } from "./i18n";

export function greet(name, count) {
  // TRANSLATORS: shown after login
  const welcome = say`Welcome back, ${name}!`;
  const unread = say.plural(count, { one: "# new message", other: "# new messages" });
  return [welcome, unread];
}
"""

MENU = """\
export const open = say({ context: "file menu" })`Open`;
export const save = say`Save`;
"""


@pytest.fixture
def project(tmp_path, monkeypatch):
    (tmp_path / "src" / "vendor").mkdir(parents=True)
    (tmp_path / "src" / "app.js").write_text(APP, encoding="utf-8")
    (tmp_path / "src" / "menu.js").write_text(MENU, encoding="utf-8")
    (tmp_path / "src" / "vendor" / "lib.js").write_text(
        "say`Vendored`;\n", encoding="utf-8")
    (tmp_path / CONFIG_FILE_NAME).write_text(json.dumps({
        "source_locale": "en",
        "locales": ["en", "fr"],
        "catalogues": [{
            "include": ["src/**/*.js"],
            "exclude": ["src/vendor/**"],
            "output": "locales/{locale}/messages.{extension}",
        }],
    }), encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    return tmp_path


def read_po(project, locale):
    return polib.pofile(str(project / "locales" / locale / "messages.po"))


def test_matches():
    assert matches("src/app.js", ["src/**/*.js"])
    assert matches("src/a/b/app.js", ["./src/**/*.js"])
    assert matches("src/vendor/lib.js", ["src/vendor/**"])
    assert not matches("lib/app.js", ["src/**/*.js"])


def test_find_files(project):
    config = load_config()
    assert find_files(config.catalogues[0], config.root) == \
        ["src/app.js", "src/menu.js"]


def test_extract_writes_every_locale(project):
    assert extract_messages.main_entry(["extract_messages.py"]) == 0

    en = read_po(project, "en")
    welcome = en.find("Welcome back, {name}!")
    assert welcome.msgstr == "Welcome back, {name}!"
    assert welcome.comment == "shown after login"
    assert welcome.occurrences == [("src/app.js", "5")]
    assert en.find("Open", msgctxt="file menu") is not None
    assert en.find("Vendored") is None
    assert en.metadata["Language"] == "en"

    fr = read_po(project, "fr")
    assert fr.find("Save").msgstr == ""
    assert fr.metadata["Language"] == "fr"


def test_translations_survive_reextraction(project):
    extract_messages.main_entry(["extract_messages.py"])
    fr = read_po(project, "fr")
    fr.find("Save").msgstr = "Enregistrer"
    fr.save()

    # the message moves to another line
    menu = project / "src" / "menu.js"
    menu.write_text("\n" + MENU.replace("Open", "Open file"),
                    encoding="utf-8")
    extract_messages.main_entry(["extract_messages.py"])

    fr = read_po(project, "fr")
    save = fr.find("Save")
    assert save.msgstr == "Enregistrer"
    assert save.occurrences == [("src/menu.js", "3")]
    stale = fr.find("Open", msgctxt="file menu", include_obsolete_entries=True)
    assert stale.obsolete

    extract_messages.main_entry(["extract_messages.py", "--prune"])
    fr = read_po(project, "fr")
    assert fr.find("Open", msgctxt="file menu",
                   include_obsolete_entries=True) is None


def test_compile_after_extract(project):
    extract_messages.main_entry(["extract_messages.py"])
    fr = read_po(project, "fr")
    fr.find("Save").msgstr = "Enregistrer"
    fr.save()

    assert compile_messages.main_entry(["compile_messages.py"]) == 0

    compiled = json.loads((project / "locales" / "fr" / "messages.json")
                          .read_text(encoding="utf-8"))
    assert compiled[generate_id("Save")] == "Enregistrer"
    assert compiled[generate_id("Open", "file menu")] == "Open"
    assert len(compiled) == 4


def test_compile_before_extract_fails(project, caplog):
    with caplog.at_level(logging.ERROR):
        assert compile_messages.main_entry(["compile_messages.py"]) == 1
    assert "extract" in caplog.text


def test_syntax_error_aborts_without_writing(project):
    (project / "src" / "broken.js").write_text("const = ;\n",
                                               encoding="utf-8")
    assert extract_messages.main_entry(["extract_messages.py"]) == 1
    assert not (project / "locales").exists()


def test_collision_aborts(project, monkeypatch):
    monkeypatch.setattr("message_extractor.message.CompositeMessage"
                        ".message_id", lambda self: "same")
    assert extract_messages.main_entry(["extract_messages.py"]) == 1
    assert not (project / "locales").exists()


def test_transform_option(project, capsys):
    assert extract_messages.main_entry(
        ["extract_messages.py", "--transform", "src/menu.js"]) == 0
    out = capsys.readouterr().out
    assert f'say.call({{ id: "{generate_id("Open", "file menu")}" }})' in out
    assert f'say.call({{ id: "{generate_id("Save")}" }})' in out


def test_json_catalogue(project):
    config_path = project / CONFIG_FILE_NAME
    data = json.loads(config_path.read_text(encoding="utf-8"))
    data["catalogues"][0]["format"] = "json"
    config_path.write_text(json.dumps(data), encoding="utf-8")

    extract_messages.main_entry(["extract_messages.py"])
    en = json.loads((project / "locales" / "en" / "messages.json")
                    .read_text(encoding="utf-8"))
    assert en[generate_id("Save")]["translation"] == "Save"

    compile_messages.main_entry(["compile_messages.py"])
    assert (project / "locales" / "en" / "messages.compiled.json").exists()


@pytest.mark.asyncio
async def test_watch_reextracts_changed_file(project):
    config = load_config()
    extraction = CatalogueExtraction(config, config.catalogues[0])
    extraction.process_all()
    extraction.write()

    (project / "src" / "menu.js").write_text("say`Quit`;\n",
                                             encoding="utf-8")
    (project / "src" / "app.js").unlink()

    async def changes():
        yield str(project / "src" / "menu.js")
        yield str(project / "src" / "menu.js")
        yield str(project / "src" / "app.js")
        yield str(project / "README.md")

    await asyncio.wait_for(watch_catalogues([extraction], changes()),
                           timeout=10)

    en = read_po(project, "en")
    assert en.find("Quit") is not None
    assert en.find("Save") is None
    assert en.find("Save", include_obsolete_entries=True).obsolete
    assert en.find("Welcome back, {name}!",
                   include_obsolete_entries=True).obsolete


@pytest.mark.asyncio
async def test_watch_survives_syntax_errors(project):
    config = load_config()
    extraction = CatalogueExtraction(config, config.catalogues[0])
    extraction.process_all()
    extraction.write()

    (project / "src" / "menu.js").write_text("say`unterminated\n",
                                             encoding="utf-8")
    (project / "src" / "app.js").write_text("say`Still here`;\n",
                                            encoding="utf-8")

    async def changes():
        yield str(project / "src" / "menu.js")
        yield str(project / "src" / "app.js")

    await asyncio.wait_for(watch_catalogues([extraction], changes()),
                           timeout=10)
    assert read_po(project, "en").find("Still here") is not None


def test_undecodable_source_aborts_without_writing(project, caplog):
    (project / "src" / "menu.js").write_bytes(b"say`caf\xe9`;\n")
    with caplog.at_level(logging.ERROR):
        assert extract_messages.main_entry(["extract_messages.py"]) == 1
    assert "src/menu.js:1" in caplog.text
    assert not (project / "locales").exists()


@pytest.mark.asyncio
async def test_watch_survives_undecodable_sources(project):
    config = load_config()
    extraction = CatalogueExtraction(config, config.catalogues[0])
    extraction.process_all()
    extraction.write()

    (project / "src" / "menu.js").write_bytes(b"say`caf\xe9`;\n")
    (project / "src" / "app.js").write_text("say`Still here`;\n",
                                            encoding="utf-8")

    async def changes():
        yield str(project / "src" / "menu.js")
        yield str(project / "src" / "app.js")

    await asyncio.wait_for(watch_catalogues([extraction], changes()),
                           timeout=10)
    assert read_po(project, "en").find("Still here") is not None
