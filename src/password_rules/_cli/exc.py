import os
import pathlib
from dataclasses import dataclass, field
from typing import TypedDict

import click
from typing_extensions import override

__all__ = ("ConfigError", "ConfigSyntaxError")


@dataclass(slots=True)
class ConfigError(click.ClickException):
    """
    Raised when the command line settings cannot be built, either from the
    ``PASSWORD_RULES_*`` environment variables or from the ``-c`` file.

    Exits with ``EX_CONFIG`` (78), so scripts can tell a broken configuration apart
    from a usage error (2).
    """

    class Context(TypedDict):
        """
        Attributes:
            filename: The configuration file, or ``None`` when the settings came
                from the environment only.
        """

        filename: pathlib.Path | None

    message: str
    ctx: Context = field(default_factory=lambda: ConfigError.Context(filename=None))
    exit_code: int = getattr(os, "EX_CONFIG", 78)

    def _source(self) -> str:
        if (filename := self.ctx["filename"]) is None:
            return "environment"
        return "configuration file %r" % str(filename)

    @override
    def format_message(self) -> str:
        return "Invalid settings in %s.\n\n%s" % (self._source(), self.message)


@dataclass(slots=True)
class ConfigSyntaxError(ConfigError):
    """Raised when the ``-c`` file is not valid YAML."""

    @override
    def format_message(self) -> str:
        return "Decoding failed for %s.\n\n%s" % (self._source(), self.message)
