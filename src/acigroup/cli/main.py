"""Main CLI implementation using Typer."""

import asyncio
from pathlib import Path
from typing import Any, Callable, Optional

import typer
from pydantic import ValidationError
from rich.console import Console

from acigroup.cli.commands import (
    apply_groups,
    destroy_group,
    import_group,
    list_groups,
    refresh_group,
    show_group,
    validate_config,
)
from acigroup.cli.client import open_engine
from acigroup.errors import AcigroupError


# Create Typer app
app = typer.Typer(
    name="acigroupctl",
    help="Manage Azure Container Instances container groups from YAML documents",
    add_completion=False,
)

# Console for rich output
console = Console()

DEFAULT_CONFIG_DIR = Path("./config")


def _config_dir_option() -> Any:
    return typer.Option(
        DEFAULT_CONFIG_DIR, "--config-dir", "-c",
        envvar="ACIGROUP_CONFIG_DIR", help="Configuration directory",
    )


def _run_cli_command(handler: Callable[..., Any], config_dir: Path, **kwargs: Any):
    """Helper to run a CLI command against a lifecycle engine with error handling."""

    async def run():
        async with open_engine(config_dir) as engine:
            await handler(engine, **kwargs)

    try:
        asyncio.run(run())
    except (AcigroupError, FileNotFoundError, ValidationError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e


@app.command("validate")
def validate_command(config_dir: Path = _config_dir_option()):
    """Validate container group documents without calling Azure."""
    _run_cli_command(validate_config, config_dir)


@app.command("apply")
def apply_command(
    name: Optional[str] = typer.Argument(None, help="Container group name to apply"),
    all: bool = typer.Option(False, "--all", help="Apply all configured container groups"),
    config_dir: Path = _config_dir_option(),
):
    """Create container group(s) or update their tags."""
    if not name and not all:
        console.print("[red]Error:[/red] Specify container group name or use --all")
        raise typer.Exit(1)
    _run_cli_command(apply_groups, config_dir, name=name, all_groups=all)


@app.command("refresh")
def refresh_command(
    name: str = typer.Argument(..., help="Container group name"),
    config_dir: Path = _config_dir_option(),
):
    """Re-read a container group from Azure."""
    _run_cli_command(refresh_group, config_dir, name=name)


@app.command("show")
def show_command(
    name: str = typer.Argument(..., help="Container group name"),
    config_dir: Path = _config_dir_option(),
):
    """Show the recorded state of a container group."""
    _run_cli_command(show_group, config_dir, name=name)


@app.command("destroy")
def destroy_command(
    name: str = typer.Argument(..., help="Container group name"),
    force: bool = typer.Option(
        False, "--force", "-f", help="Destroy without confirmation"
    ),
    config_dir: Path = _config_dir_option(),
):
    """Delete a container group."""
    if not force:
        confirm = typer.confirm(f"Destroy container group {name}?")
        if not confirm:
            raise typer.Abort()
    _run_cli_command(destroy_group, config_dir, name=name)


@app.command("import")
def import_command(
    name: str = typer.Argument(..., help="Container group name"),
    resource_id: str = typer.Argument(..., help="Azure resource ID of the container group"),
    config_dir: Path = _config_dir_option(),
):
    """Start managing an existing container group."""
    _run_cli_command(import_group, config_dir, name=name, resource_id=resource_id)


@app.command("list")
def list_command(config_dir: Path = _config_dir_option()):
    """List configured and tracked container groups."""
    _run_cli_command(list_groups, config_dir)


def main():
    """Main entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
