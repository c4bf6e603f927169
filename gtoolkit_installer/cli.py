"""Thin CLI wrapper for gtoolkit_installer.

This module provides the command-line interface using Typer.
All business logic is delegated to core modules.
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from gtoolkit_installer import __version__
from gtoolkit_installer.config import Settings, get_settings, print_settings_json
from gtoolkit_installer.errors import InstallerError
from gtoolkit_installer.types import Loader

app = typer.Typer(
    name="gt-installer",
    help="Glamorous Toolkit installer - build a Glamorous Toolkit image",
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"gtoolkit-installer version {__version__}")
        raise typer.Exit()


def configure_logging(settings: Settings) -> None:
    """Configure root logging from settings."""
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Glamorous Toolkit installer - build a Glamorous Toolkit image."""


@app.command()
def config(
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
) -> None:
    """Show effective configuration."""
    settings = get_settings()
    if json_output:
        typer.echo(print_settings_json(settings))
        return

    console.print("[bold]Effective Configuration:[/bold]")
    console.print()
    console.print("[bold]Paths:[/bold]")
    console.print(f"  Workspace:           {settings.workspace}")
    console.print(f"  Image:               {settings.gtoolkit_image()}")
    console.print(f"  Pharo VM:            {settings.resolved_pharo_executable()}")
    console.print(f"  GT VM:               {settings.resolved_gtoolkit_executable()}")
    console.print()
    console.print("[bold]Artifacts:[/bold]")
    console.print(f"  Pharo image URL:     {settings.pharo_image_url}")
    console.print(f"  Pharo VM URL:        {settings.pharo_vm_url}")
    console.print(f"  GT VM URL:           {settings.gtoolkit_vm_url or '(not used)'}")
    console.print()
    console.print("[bold]Operational:[/bold]")
    console.print(f"  Log level:           {settings.log_level}")
    console.print(f"  Max downloads:       {settings.max_concurrent_downloads}")
    console.print(f"  Download timeout:    {settings.download_timeout}")


@app.command()
def loaders() -> None:
    """List available loaders."""
    for loader in Loader:
        console.print(f"  [green]{loader.value}[/green]  {loader.description}")


@app.command()
def build(
    overwrite: Annotated[
        bool,
        typer.Option(
            "--overwrite",
            help="Delete existing installation of the gtoolkit if present",
        ),
    ] = False,
    loader: Annotated[
        str,
        typer.Option(
            "--loader",
            "-l",
            help="Loader used to install GToolkit code in a Pharo image: "
            + ", ".join(item.value for item in Loader),
        ),
    ] = Loader.CLONER.value,
    image_url: Annotated[
        str | None,
        typer.Option("--image-url", help="URL of a clean seed image archive"),
    ] = None,
    image_path: Annotated[
        Path | None,
        typer.Option("--image-path", help="Path to a clean seed image archive"),
    ] = None,
    public_key: Annotated[
        Path | None,
        typer.Option("--public-key", help="Public ssh key for pushing to repositories"),
    ] = None,
    private_key: Annotated[
        Path | None,
        typer.Option(
            "--private-key", help="Private ssh key for pushing to repositories"
        ),
    ] = None,
    workspace: Annotated[
        Path | None,
        typer.Option("--workspace", "-w", help="Directory to build in"),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output the build report as JSON"),
    ] = False,
) -> None:
    """Build a Glamorous Toolkit image."""
    from gtoolkit_installer.builder import Builder
    from gtoolkit_installer.options import BuildOptions
    from gtoolkit_installer.progress import PLAIN_ICONS, STEP_ICONS

    overrides: dict[str, object] = {}
    if workspace is not None:
        overrides["workspace"] = workspace.resolve()
    settings = get_settings(**overrides)
    configure_logging(settings)

    try:
        selected_loader = Loader.parse(loader)
    except ValueError as e:
        err_console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(code=1) from None

    try:
        options = BuildOptions(
            overwrite=overwrite,
            loader=selected_loader,
            image_url=image_url,
            image_path=image_path,
            public_key=public_key,
            private_key=private_key,
        )
    except ValidationError as e:
        err_console.print(f"[red]Invalid build options: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from None

    builder = (
        Builder(console=err_console, icons=PLAIN_ICONS)
        if json_output
        else Builder(console=console, icons=STEP_ICONS)
    )

    try:
        report = asyncio.run(builder.build(settings, options))
    except InstallerError as e:
        if json_output:
            typer.echo(json.dumps({"code": e.code, "message": e.message}, indent=2))
        else:
            err_console.print(f"[red]{escape(e.message)}[/red]")
        raise typer.Exit(code=1) from None

    if json_output:
        typer.echo(json.dumps(report.to_dict(), indent=2))


if __name__ == "__main__":
    app()
