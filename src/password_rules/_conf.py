import logging
import pathlib
from typing import Annotated, Any, Literal, Optional

import annotated_types
import pydantic
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)
from ruamel import yaml
from ruamel.yaml.error import YAMLError

from ._cli.exc import ConfigError, ConfigSyntaxError
from .util.model import convert_errors

__all__ = ("OutputFormat", "Settings", "load_settings")

logger = logging.getLogger(__name__)

OutputFormat = Literal["table", "json"]


class Settings(BaseSettings):
    """
    Command line settings, read from ``PASSWORD_RULES_*`` environment variables and
    an optional YAML configuration file. Environment variables take precedence.
    """

    model_config = SettingsConfigDict(
        env_prefix="PASSWORD_RULES_",
        extra="forbid",
        validate_default=False,
    )

    output_format: OutputFormat = "table"
    json_indent: Optional[Annotated[int, annotated_types.Ge(0)]] = 2

    @classmethod
    def settings_customise_sources(
        cls,
        _: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return env_settings, init_settings


def _read_config_file(fn: pathlib.Path) -> dict[str, Any]:
    ctx = ConfigError.Context(filename=fn)

    try:
        payload = yaml.YAML(typ="safe").load(fn.read_bytes())
    except YAMLError as ex:
        raise ConfigSyntaxError(str(ex), ctx) from ex

    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ConfigError("Input must be a valid mapping", ctx)
    if keys := [key for key in payload if not isinstance(key, str)]:
        raise ConfigError("Keys must be strings, got %r" % keys, ctx)

    return payload


def load_settings(fn: Optional[pathlib.Path] = None) -> Settings:
    """
    Builds the settings from the environment and, when given, the YAML file at
    ``fn``.

    Raises:
        ConfigSyntaxError: The file is not valid YAML.
        ConfigError: The file is not a mapping with string keys, or the merged
            values fail validation.
    """
    payload = _read_config_file(fn) if fn is not None else {}
    logger.debug("loading settings with %r", payload)

    try:
        return Settings(**payload)
    except pydantic.ValidationError as ex:
        raise ConfigError(
            str(convert_errors(ex)), ConfigError.Context(filename=fn)
        ) from ex
