#!/usr/bin/env python3

import logging
import pathlib
from typing import Optional

import click
import lazy_object_proxy

from password_rules._cli.commands.parse import parse, schema, tokenize_
from password_rules._conf import load_settings


@click.group()
@click.option("-D", "--debug/--no-debug", default=False, help="Enable debug mode.")
@click.option(
    "-c",
    "--config",
    type=click.Path(
        dir_okay=False,
        exists=True,
        readable=True,
        path_type=pathlib.Path,
    ),
    help=(
        "Path to a YAML file with `output_format` and `json_indent` settings. "
        "`PASSWORD_RULES_*` environment variables override its values."
    ),
)
@click.version_option(package_name="password-rules")
@click.pass_context
def cli(ctx: click.Context, debug: bool, config: Optional[pathlib.Path]) -> None:
    """Parse password rules such as ``minlength: 8; required: lower;``."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
    )
    # commands that never read the settings never validate them
    ctx.obj = lazy_object_proxy.Proxy(lambda: load_settings(config))


cli.add_command(parse)
cli.add_command(tokenize_)
cli.add_command(schema)

if __name__ == "__main__":
    cli(auto_envvar_prefix="PASSWORD_RULES")
