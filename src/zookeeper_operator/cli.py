"""Command-line interface for the ZooKeeper operator."""

from __future__ import annotations

from pathlib import Path

import click
import kopf
from safir.asyncio import run_with_asyncio
from safir.click import display_help
from safir.logging import configure_logging
from safir.sentry import initialize_sentry

from . import __version__
from .constants import CONFIGURATION_PATH, CONFIGURATION_PATH_ENV_VAR
from .dependencies.config import config_dependency

__all__ = ["help", "main", "run"]


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, message="%(version)s")
def main() -> None:
    """ZooKeeper operator command-line interface."""


@main.command()
@click.argument("topic", default=None, required=False, nargs=1)
@click.argument("subtopic", default=None, required=False, nargs=1)
@click.pass_context
def help(ctx: click.Context, topic: str | None, subtopic: str | None) -> None:
    """Show help for any command."""
    display_help(main, ctx, topic, subtopic)


@main.command()
@click.option(
    "--config-path",
    "-c",
    envvar=CONFIGURATION_PATH_ENV_VAR,
    type=click.Path(path_type=Path),
    default=CONFIGURATION_PATH,
    help="Operator configuration file",
)
@click.option(
    "--namespace",
    "-n",
    "namespaces",
    multiple=True,
    help="Only watch this namespace (may be repeated)",
)
@run_with_asyncio
async def run(config_path: Path, namespaces: tuple[str, ...]) -> None:
    """Run the operator until interrupted.

    Without ``--namespace``, custom resources in all namespaces are watched.
    """
    config_dependency.set_path(config_path)
    config = config_dependency.config
    configure_logging(
        name="zookeeper_operator",
        profile=config.profile,
        log_level=config.log_level,
    )

    initialize_sentry(release=__version__)

    # Registers the handlers with kopf.
    from . import handlers  # noqa: F401

    if namespaces:
        await kopf.operator(namespaces=list(namespaces))
    else:
        await kopf.operator(clusterwide=True)
