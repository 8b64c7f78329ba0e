"""
Module Update Checker CLI — PowerShell gallery module status.

Usage:
    module-update-checker check Pester PSReadLine
    module-update-checker check Pester --show-full --format json
    module-update-checker check Pester --update --disable-progress-bar
    module-update-checker inventory Pester
    muc check Pester            # short alias, same commands
"""

import asyncio
import json
import logging
from pathlib import Path

import click
from rich.console import Console

from module_update_checker.core.config import (
    DEFAULT_MODULE,
    DEFAULT_REPOSITORY,
    CheckOptions,
    resolve_repository_url,
)


def _configure_logging(verbose: bool) -> None:
    log_level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@click.group()
@click.version_option(package_name="module-update-checker")
def cli():
    """Module Update Checker — compare installed PowerShell modules with the gallery."""
    pass


@cli.command()
@click.argument("names", nargs=-1)
@click.option(
    "--repository",
    "-r",
    default=DEFAULT_REPOSITORY,
    show_default=True,
    help="Gallery name or NuGet v2 feed URL.",
)
@click.option("--show-full", is_flag=True, help="Show every column instead of the summary.")
@click.option("--disable-progress-bar", is_flag=True, help="Do not display the progress bar.")
@click.option("--update", is_flag=True, help="Install the gallery version over outdated copies.")
@click.option("--enable-exception", is_flag=True, help="Raise errors instead of printing a warning.")
@click.option(
    "--format",
    "-f",
    "fmt",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Console output format.",
)
@click.option("--output", "-o", type=click.Path(dir_okay=False), default=None, help="Also write the report to a file.")
@click.option(
    "--output-format",
    type=click.Choice(["json", "csv"]),
    default="json",
    help="Format of the --output file.",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging.")
def check(
    names,
    repository,
    show_full,
    disable_progress_bar,
    update,
    enable_exception,
    fmt,
    output,
    output_format,
    verbose,
):
    """Check module NAMES against the gallery (default: PowerShellGet)."""
    from module_update_checker.core.reconciler import project

    _configure_logging(verbose)
    console = Console(stderr=True)

    try:
        resolve_repository_url(repository)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--repository") from e

    options = CheckOptions(
        repository=repository,
        show_full=show_full,
        disable_progress_bar=disable_progress_bar,
        update=update,
        enable_exception=enable_exception,
    )
    result = asyncio.run(_run_check(list(names) or [DEFAULT_MODULE], options, console))

    if not result.ok:
        if options.enable_exception:
            raise result.error
        console.print(f"[bold yellow]WARNING:[/bold yellow] Module check failed: {result.error}")
        raise SystemExit(1)

    rows = project(result.rows, full=options.show_full)
    if fmt == "json":
        click.echo(json.dumps(rows, indent=2))
    else:
        from module_update_checker.cli.table import report_table

        Console().print(report_table(rows))

    if output:
        try:
            asyncio.run(_export_rows(result.rows, Path(output), output_format, options.show_full))
        except OSError as e:
            if options.enable_exception:
                raise
            console.print(f"[bold yellow]WARNING:[/bold yellow] Could not write report to {output}: {e}")
            raise SystemExit(1)
        console.print(f"[green]Report written to {output}[/green]")

    console.print("[bold green][DONE] Module check complete[/bold green]")


async def _run_check(names, options, console):
    """Run the check against the gallery."""
    from module_update_checker.core.gallery import GalleryClient
    from module_update_checker.core.installer import NupkgInstaller
    from module_update_checker.core.inventory import LocalInventory
    from module_update_checker.core.reconciler import ModuleReconciler

    async with GalleryClient(options.repository) as gallery:
        reconciler = ModuleReconciler(
            registry=gallery,
            inventory=LocalInventory(),
            installer=NupkgInstaller(gallery),
            console=console,
        )
        return await reconciler.run(names, options)


async def _export_rows(rows, output, output_format, full):
    from module_update_checker.core.reconciler import sort_rows
    from module_update_checker.exporters import get_exporter

    exporter = get_exporter(output_format, output, full=full)
    for row in sort_rows(rows):
        await exporter.export(row)
    await exporter.finalize()


@cli.command()
@click.argument("names", nargs=-1)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging.")
def inventory(names, verbose):
    """List locally installed modules (all, or only NAMES)."""
    from module_update_checker.cli.table import inventory_table
    from module_update_checker.core.errors import InventoryQueryError
    from module_update_checker.core.inventory import LocalInventory
    from module_update_checker.core.reconciler import dedupe_names

    _configure_logging(verbose)
    local = LocalInventory()
    try:
        if names:
            records = [r for name in dedupe_names(names) for r in local.find(name)]
        else:
            records = local.list_all()
    except InventoryQueryError as e:
        raise click.ClickException(str(e)) from e

    Console().print(inventory_table(records))


if __name__ == "__main__":
    cli()
