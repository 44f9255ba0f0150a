import json
import os

import pytest

from message_extractor.config import (CONFIG_FILE_NAME, Configuration,
                                      find_config, load_config)
from message_extractor.errors import ConfigError


VALID = {
    "source_locale": "en",
    "locales": ["en", "fr", "fr-CA"],
    "fallback_locales": {"fr-CA": ["fr"]},
    "catalogues": [{
        "include": ["src/**/*.js"],
        "output": "locales/{locale}.{extension}",
    }],
}


def write_config(directory, data):
    path = directory / CONFIG_FILE_NAME
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_load_valid_config(tmp_path):
    config = load_config(str(write_config(tmp_path, VALID)))
    assert config.source_locale == "en"
    assert config.catalogues[0].format == "po"
    assert config.catalogues[0].exclude == []
    assert config.root == str(tmp_path)


def test_fallback_chain_ends_with_source_locale(tmp_path):
    config = load_config(str(write_config(tmp_path, VALID)))
    assert config.fallbacks_for("fr-CA") == ["fr", "en"]
    assert config.fallbacks_for("fr") == ["en"]
    assert config.fallbacks_for("en") == []


def test_find_config_walks_up(tmp_path, monkeypatch):
    path = write_config(tmp_path, VALID)
    nested = tmp_path / "src" / "deep"
    nested.mkdir(parents=True)
    assert find_config(str(nested)) == str(path)

    monkeypatch.chdir(nested)
    assert load_config().root == str(tmp_path)


def test_missing_config(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    if find_config() is not None:
        pytest.skip("a parent directory has a configuration file")
    with pytest.raises(ConfigError, match=CONFIG_FILE_NAME):
        load_config()


def test_unreadable_json(tmp_path):
    path = tmp_path / CONFIG_FILE_NAME
    path.write_text("{ nope", encoding="utf-8")
    with pytest.raises(ConfigError, match="Invalid JSON"):
        load_config(str(path))


@pytest.mark.parametrize("change", [
    {"locales": ["fr", "en"]},
    {"locales": []},
    {"catalogues": [{"include": ["src/*.js"], "output": "out.po"}]},
    {"catalogues": [{"include": [], "output": "{locale}.po"}]},
    {"catalogues": [{"include": ["src/*.js"], "output": "{locale}.xml",
                     "format": "xml"}]},
    {"source_locale": None},
])
def test_invalid_config(tmp_path, change):
    data = dict(VALID, **change)
    path = write_config(tmp_path, data)
    with pytest.raises(ConfigError) as error:
        load_config(str(path))
    assert str(path) in str(error.value)


def test_paths_resolve_from_config_directory(tmp_path, monkeypatch):
    path = write_config(tmp_path, VALID)
    monkeypatch.chdir(os.path.dirname(tmp_path))
    config = load_config(str(path))
    assert isinstance(config, Configuration)
    assert config.root == str(tmp_path)
