import json
import os
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ValidationError, field_validator, \
    model_validator

from .errors import ConfigError


CONFIG_FILE_NAME = "messages.config.json"


class Catalogue(BaseModel):
    """A group of source files sharing one set of locale files."""

    include: List[str]
    exclude: List[str] = []
    output: str
    format: Literal["po", "json"] = "po"

    @field_validator("include")
    @classmethod
    def validate_include(cls, v):
        if not v:
            raise ValueError("include must list at least one pattern")
        return v

    @field_validator("output")
    @classmethod
    def validate_output(cls, v):
        if "{locale}" not in v:
            raise ValueError("output must contain the {locale} placeholder")
        return v


class Configuration(BaseModel):
    source_locale: str
    locales: List[str]
    fallback_locales: Dict[str, List[str]] = {}
    catalogues: List[Catalogue]

    # directory of the configuration file, used to resolve relative paths
    root: Optional[str] = None

    @model_validator(mode="after")
    def validate_locales(self):
        if not self.locales:
            raise ValueError("locales must not be empty")
        if self.locales[0] != self.source_locale:
            raise ValueError(
                f"the first locale must be the source locale "
                f"\"{self.source_locale}\", got \"{self.locales[0]}\"")
        return self

    def fallbacks_for(self, locale):
        """Fallback chain of a locale, ending with the source locale."""
        chain = [f for f in self.fallback_locales.get(locale, [])
                 if f != locale]
        if locale != self.source_locale and self.source_locale not in chain:
            chain.append(self.source_locale)
        return chain


def find_config(start=None):
    """Closest messages.config.json in `start` or one of its parents."""
    directory = os.path.abspath(start or os.getcwd())
    while True:
        path = os.path.join(directory, CONFIG_FILE_NAME)
        if os.path.isfile(path):
            return path
        parent = os.path.dirname(directory)
        if parent == directory:
            return None
        directory = parent


def load_config(path=None):
    if path is None:
        path = find_config()
        if path is None:
            raise ConfigError(f"Cannot find {CONFIG_FILE_NAME} in "
                              f"{os.getcwd()} or any parent directory")
    try:
        with open(path, encoding="utf-8") as fp:
            data = json.load(fp)
    except OSError as E:
        raise ConfigError(f"Cannot read {path}: {E}") from E
    except ValueError as E:
        raise ConfigError(f"Invalid JSON in {path}: {E}") from E

    if type(data) is not dict:
        raise ConfigError(f"Invalid configuration in {path}: "
                          "expected an object")
    data.pop("root", None)
    try:
        config = Configuration(**data)
    except ValidationError as E:
        raise ConfigError(f"Invalid configuration in {path}:\n{E}") from E
    config.root = os.path.dirname(os.path.abspath(path))
    return config
