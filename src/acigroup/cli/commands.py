"""Command implementations for CLI."""

from typing import Any, Awaitable, Optional

from rich.console import Console
from rich.table import Table
from rich.progress import Progress, SpinnerColumn, TextColumn

from acigroup.engine import LifecycleEngine
from acigroup.errors import AcigroupError, ConfigValidationError
from acigroup.models.container_group import ContainerGroupState


console = Console()
stderr_console = Console(stderr=True)


async def _run_action(description: str, action: Awaitable[Any], success_msg: Optional[str] = None) -> Any:
    """Helper to await an engine action with a progress spinner."""
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=stderr_console,
        transient=True,
    ) as progress:
        task = progress.add_task(description, total=None)
        result = await action
        progress.update(task, completed=True)

    if success_msg:
        console.print(success_msg)

    return result


def _print_state(state: ContainerGroupState):
    """Print a container group state without its write-only values."""
    console.print(f"[bold]Container group: {state.name}[/bold]")
    console.print(f"  ID: {state.id}")
    console.print(f"  Resource group: {state.resource_group_name}")
    console.print(f"  Location: {state.location}")
    console.print(f"  OS type: {state.os_type}")
    console.print(f"  Restart policy: {state.restart_policy}")
    console.print(f"  IP address: {state.ip_address or '-'} ({state.ip_address_type})")
    if state.fqdn:
        console.print(f"  FQDN: {state.fqdn}")
    if state.network_profile_id:
        console.print(f"  Network profile: {state.network_profile_id}")
    if state.tags:
        tags = ", ".join(f"{key}={value}" for key, value in sorted(state.tags.items()))
        console.print(f"  Tags: {tags}")

    table = Table(title="Containers")
    table.add_column("Name", style="cyan")
    table.add_column("Image", style="magenta")
    table.add_column("CPU")
    table.add_column("Memory (GB)")
    table.add_column("Ports")

    for container in state.containers:
        ports = ", ".join(f"{port.port}/{port.protocol}" for port in container.ports)
        table.add_row(container.name, container.image, str(container.cpu), str(container.memory), ports or "-")

    console.print(table)


async def validate_config(engine: LifecycleEngine):
    """Validate configuration locally."""
    config_manager = engine.config_manager
    invalid = dict(config_manager.errors)

    for name, spec in config_manager.groups.items():
        if not await engine.provider.validate_spec(spec):
            invalid[name] = "failed validation, see log output"

    if invalid:
        console.print("[red]✗[/red] Configuration is invalid")
        for name, error in invalid.items():
            console.print(f"  {name}: {error}")
        raise ConfigValidationError(f"{len(invalid)} invalid container group document(s)")

    console.print("[green]✓[/green] Configuration is valid")
    console.print(f"  Container groups: {len(config_manager.groups)}")


async def apply_groups(engine: LifecycleEngine, name: Optional[str], all_groups: bool):
    """Apply one or all container groups."""
    if not all_groups:
        state = await _run_action(
            f"Applying container group {name}...",
            engine.apply(name),
            success_msg=f"[green]✓[/green] Container group {name} applied",
        )
        _print_state(state)
        return

    outcome = await _run_action("Applying all container groups...", engine.apply_all())
    failed = 0
    for group, error in outcome.items():
        if error is None:
            console.print(f"[green]✓[/green] {group}")
        else:
            failed += 1
            console.print(f"[red]✗[/red] {group}: {error}")

    if failed:
        raise AcigroupError(f"{failed} container group(s) failed to apply")


async def refresh_group(engine: LifecycleEngine, name: str):
    """Refresh the recorded state of a container group."""
    state = await _run_action(f"Refreshing container group {name}...", engine.refresh(name))
    if state is None:
        console.print(f"[yellow]Container group {name} no longer exists and was removed from state[/yellow]")
        return
    _print_state(state)


async def show_group(engine: LifecycleEngine, name: str):
    """Show the recorded state of a container group."""
    state = await engine.state_store.load(name)
    if state is None:
        console.print(f"[red]Container group {name} is not tracked[/red]")
        return
    _print_state(state)


async def destroy_group(engine: LifecycleEngine, name: str):
    """Destroy a container group."""
    destroyed = await _run_action(f"Destroying container group {name}...", engine.destroy(name))
    if destroyed:
        console.print(f"[green]✓[/green] Container group {name} destroyed")
    else:
        console.print(f"[yellow]Container group {name} is not tracked, nothing to destroy[/yellow]")


async def import_group(engine: LifecycleEngine, name: str, resource_id: str):
    """Import an existing container group."""
    state = await _run_action(
        f"Importing container group {name}...",
        engine.import_group(name, resource_id),
        success_msg=f"[green]✓[/green] Container group {name} imported",
    )
    _print_state(state)


async def list_groups(engine: LifecycleEngine):
    """List configured and tracked container groups."""
    table = Table(title="Container Groups")
    table.add_column("Name", style="cyan")
    table.add_column("Configured")
    table.add_column("Tracked")
    table.add_column("Resource Group", style="magenta")
    table.add_column("Location")
    table.add_column("IP Address")
    table.add_column("FQDN", style="dim", max_width=50)

    for status in await engine.get_all_statuses():
        table.add_row(
            status["name"],
            "[green]●[/green]" if status["configured"] else "[red]○[/red]",
            "[green]●[/green]" if status["tracked"] else "[red]○[/red]",
            status["resource_group"] or "-",
            status["location"] or "-",
            status["ip_address"] or "-",
            status["fqdn"] or "-",
        )

    console.print(table)
