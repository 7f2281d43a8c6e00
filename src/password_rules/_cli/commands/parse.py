import json
from logging import getLogger
from typing import Optional

import click
from pydantic.json_schema import model_json_schema
from rich.console import Console

from ... import _conf
from ...rule import Rule
from ...tokenizer import tokenize
from ...util.model import model_dump_json
from ..render import compose_rule_table

__all__ = ["parse", "schema", "tokenize_"]

logger = getLogger(__name__)


def get_settings(ctx: click.Context) -> _conf.Settings:
    if not (settings := ctx.find_object(_conf.Settings)):
        raise RuntimeError("Configuration not found")
    return settings


@click.command()
@click.argument("rule")
@click.option(
    "-o",
    "--format",
    "output_format",
    type=click.Choice(["table", "json"]),
    help=(
        "Output format. Defaults to the `output_format` configuration value, which "
        "is `table` unless configured otherwise."
    ),
)
@click.pass_context
def parse(ctx: click.Context, rule: str, output_format: Optional[str]) -> None:
    """
    Parse a password rule and print the resulting policy.

    Examples:

    \b
      # Show the policy as a table
      $ password-rules parse "minlength: 8; required: lower; required: [!@];"
    \b
      # Dump the policy as JSON
      $ password-rules parse -o json "maxlength: 64; x-expires-after: 3-months;"
    """
    settings = get_settings(ctx)
    res = Rule.from_string(rule)
    logger.debug("parsed %r", res)

    match output_format or settings.output_format:
        case "json":
            click.echo(res.model_dump_json(indent=settings.json_indent))
        case _:
            Console().print(compose_rule_table(res))


@click.command("tokenize")
@click.argument("rule")
@click.pass_context
def tokenize_(ctx: click.Context, rule: str) -> None:
    """
    Print the properties of a password rule as a JSON mapping, without
    interpreting them.

    \b
      $ password-rules tokenize "required: upper; required: [,;]"
    """
    settings = get_settings(ctx)
    click.echo(model_dump_json(tokenize(rule), indent=settings.json_indent))


SCHEMA_BUILDERS = {
    "rule": Rule,
    "configuration": _conf.Settings,
}


@click.command()
@click.argument(
    "name", type=click.Choice(list(SCHEMA_BUILDERS)), default="rule", required=False
)
@click.pass_context
def schema(ctx: click.Context, name: str) -> None:
    """
    Print the JSON schema of the parsed rule or of the configuration file.
    """
    settings = get_settings(ctx)
    click.echo(
        json.dumps(
            model_json_schema(SCHEMA_BUILDERS[name]), indent=settings.json_indent
        )
    )
