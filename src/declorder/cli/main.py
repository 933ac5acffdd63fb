"""declorder CLI."""

import click

from declorder import __version__
from declorder.cli.order import order_command
from declorder.config import load_config
from declorder.core.errors import ConfigError
from declorder.core.logging import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="declorder")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """declorder - recover method declaration order from JVM class files."""
    try:
        config = load_config()
    except ConfigError as e:
        raise click.ClickException(str(e)) from e
    if verbose:
        config.logging.level = "DEBUG"
    configure_logging(config=config.logging)
    ctx.ensure_object(dict)
    ctx.obj["config"] = config


cli.add_command(order_command, name="order")


if __name__ == "__main__":
    cli()
