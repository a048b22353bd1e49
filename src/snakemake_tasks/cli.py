"""Command-line interface for Snakemake Task Detector."""

import asyncio
import logging
from pathlib import Path

import click

from .core.host import Host
from .core.models import TaskListing
from .core.reporting import JsonReporter, TextReporter
from .providers.snakemake.provider import GROUP_RULES_SETTING


def _report(listing: TaskListing, format: str) -> None:
    if format == "text":
        reporter = TextReporter()
        reporter.report(listing)
    elif format == "json":
        reporter = JsonReporter()
        click.echo(reporter.report(listing))


async def _run(host: Host, format: str, watch: bool, settle: float) -> None:
    host.attach_loop(asyncio.get_running_loop())
    _report(await host.fetch_tasks(), format)

    # Snakefile edits invalidate the provider cache through its watcher
    while watch:
        await host.wait_for_change(settle)
        _report(await host.fetch_tasks(), format)


@click.command()
@click.argument(
    "workspace",
    type=click.Path(exists=True, file_okay=False, dir_okay=True, path_type=Path),
    default=".",
)
@click.option(
    "--format",
    "-f",
    type=click.Choice(["text", "json"], case_sensitive=False),
    default="text",
    help="Output format (default: text)",
)
@click.option(
    "--groups",
    "-g",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML file with task group rules (default: bundled rules)",
)
@click.option(
    "--watch", "-w", is_flag=True, help="Keep running and list again when the Snakefile changes"
)
@click.option(
    "--settle",
    type=click.FloatRange(min=0.0),
    default=0.5,
    show_default=True,
    help="Seconds to let Snakefile edits settle before listing again in watch mode",
)
@click.option(
    "--verbose", "-v", count=True, help="Increase verbosity (-v for INFO, -vv for DEBUG)"
)
@click.option(
    "--list-providers", is_flag=True, help="List available task providers and exit"
)
def main(workspace, format, groups, watch, settle, verbose, list_providers):
    """
    Snakemake Task Detector - list Snakemake rules as build and test tasks.

    Looks for a Snakefile in WORKSPACE, asks `snakemake --list` for its
    rules and groups them into build, test and other tasks.
    """
    # Setup logging
    if verbose == 1:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    elif verbose >= 2:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")

    configuration = {}
    if groups is not None:
        configuration[GROUP_RULES_SETTING] = str(groups)

    host = Host(workspace.resolve(), configuration=configuration)
    host.activate_extensions()

    try:
        # List providers and exit
        if list_providers:
            click.echo("Available providers:")
            for provider_meta in host.list_providers():
                click.echo(f"  - {provider_meta['name']}: {provider_meta['description']}")
            return

        try:
            asyncio.run(_run(host, format, watch, settle))
        except KeyboardInterrupt:
            pass
    finally:
        host.dispose()


if __name__ == "__main__":
    main()
