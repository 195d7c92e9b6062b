"""
slashcmd CLI - inspect and exercise the command namespace

Usage:
    slashcmd list [--scope S] [--category C]   # Table of registered commands
    slashcmd show NAME                         # Details of one command
    slashcmd run NAME [ARGS...]                # Print the outcome (never executes shell)
    slashcmd watch                             # Hot reload until interrupted
    slashcmd version                           # Version information
"""

import asyncio
import json
import time
from dataclasses import asdict
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich import box

from slashcmd import __version__
from slashcmd.commands.command_service import CommandService
from slashcmd.commands.dispatch import classify, execute_async, resolve_invocation, ParentCommand
from slashcmd.commands.types import (
    CommandContext,
    CommandScope,
    CommandServices,
    CommandUI,
    SlashCommand,
    SlashCommandActionReturn,
)
from slashcmd.shared.domain.exceptions import ConfigurationError
from slashcmd.shared.infrastructure.config import get_settings
from slashcmd.shared.infrastructure.logging import configure_logging, get_logger

app = typer.Typer(
    name="slashcmd",
    help="slashcmd - discover, validate and run custom slash commands",
    add_completion=False,
    no_args_is_help=True,
)
console = Console()
logger = get_logger(__name__)

PROJECT_OPTION_HELP = "Project root (default: current directory)"


def resolve_project_root(project: Optional[Path]) -> Path:
    """Validate the --project option."""
    root = (project or Path.cwd()).resolve()
    if not root.is_dir():
        raise ConfigurationError(f"Project root is not a directory: {root}", {"project": str(root)})
    return root


def _build_service(project: Optional[Path]) -> CommandService:
    try:
        root = resolve_project_root(project)
    except ConfigurationError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)
    return CommandService.create_default(root, settings=get_settings())


def _build_context(service: CommandService) -> CommandContext:
    custom_loader = service.custom_loader
    return CommandContext(
        services=CommandServices(
            project_root=custom_loader.project_root if custom_loader else None,
            settings=service.settings,
            logger=logger,
        ),
        ui=CommandUI(
            add_item=lambda item, timestamp: console.print(f"[dim]{item.get('text', item)}[/dim]"),
            clear=console.clear,
            set_debug_message=lambda message: logger.debug("command_ui_message", message=message),
        ),
    )


def _scope_style(scope: CommandScope) -> str:
    return {
        CommandScope.BUILTIN: "cyan",
        CommandScope.PROJECT: "green",
        CommandScope.PERSONAL: "magenta",
    }[scope]


def _commands_table(commands: list[SlashCommand], title: str) -> Table:
    table = Table(title=title, box=box.ROUNDED)
    table.add_column("Name", style="bold")
    table.add_column("Alias", style="dim")
    table.add_column("Scope")
    table.add_column("Category")
    table.add_column("Description")

    for command in sorted(commands, key=lambda c: c.name):
        style = _scope_style(command.scope)
        table.add_row(
            f"/{command.name}",
            f"/{command.alt_name}" if command.alt_name else "",
            f"[{style}]{command.scope.value}[/{style}]",
            command.category or "",
            command.description or "",
        )
    return table


def render_outcome(outcome: SlashCommandActionReturn | None) -> None:
    """Print an action outcome without acting on it."""
    if outcome is None:
        console.print("[dim]Command completed with no outcome.[/dim]")
        return

    if outcome.type == "message":
        color = "red" if outcome.message_type == "error" else "cyan"
        console.print(Panel(outcome.content, title=outcome.message_type, border_style=color))
    elif outcome.type == "tool":
        console.print(
            Panel(
                json.dumps(outcome.tool_args, indent=2, default=str),
                title=f"tool: {outcome.tool_name}",
                border_style="yellow",
            )
        )
    elif outcome.type == "dialog":
        console.print(f"[cyan]Open dialog:[/cyan] {outcome.dialog}")
    elif outcome.type == "ai-prompt":
        console.print(Panel(outcome.content, title="ai-prompt", border_style="magenta"))
    else:
        console.print(asdict(outcome))


@app.command("list")
def list_commands(
    scope: Optional[CommandScope] = typer.Option(None, "--scope", "-s", help="Only show one scope"),
    category: Optional[str] = typer.Option(None, "--category", "-c", help="Only show one category"),
    project: Optional[Path] = typer.Option(None, "--project", "-p", help=PROJECT_OPTION_HELP),
):
    """List registered commands after override resolution."""
    configure_logging()
    service = _build_service(project)
    asyncio.run(service.load_commands_async())

    commands = service.get_commands()
    if scope is not None:
        commands = [c for c in commands if c.scope == scope]
    if category is not None:
        commands = [c for c in commands if c.category == category]

    if not commands:
        console.print("[yellow]No commands found.[/yellow]")
        return

    console.print(_commands_table(commands, f"Commands ({len(commands)})"))


@app.command()
def show(
    name: str = typer.Argument(..., help="Command name or alias"),
    project: Optional[Path] = typer.Option(None, "--project", "-p", help=PROJECT_OPTION_HELP),
):
    """Show details of one command."""
    configure_logging()
    service = _build_service(project)
    asyncio.run(service.load_commands_async())

    command = service.get_command(name.lstrip("/"))
    if command is None:
        console.print(f"[red]Error:[/red] Unknown command: /{name.lstrip('/')}")
        raise typer.Exit(code=1)

    metadata = command.metadata
    lines = [
        f"[bold cyan]/{command.name}[/bold cyan]",
        f"[dim]Alias:[/dim] {'/' + command.alt_name if command.alt_name else '-'}",
        f"[dim]Description:[/dim] {command.description or '-'}",
        f"[dim]Scope:[/dim] {command.scope.value}",
    ]
    if metadata is not None:
        lines.extend([
            f"[dim]Category:[/dim] {metadata.category or '-'}",
            f"[dim]Tags:[/dim] {', '.join(sorted(metadata.tags)) or '-'}",
            f"[dim]Source:[/dim] {metadata.source_path or '-'}"
            + (f" ({metadata.source_format.value})" if metadata.source_format else ""),
            f"[dim]Shell:[/dim] {'yes' if metadata.can_execute_shell else 'no'}",
        ])
    if isinstance(classify(command), ParentCommand):
        lines.append("[dim]Sub-commands:[/dim] " + ", ".join(sub.name for sub in command.sub_commands))

    console.print(Panel.fit("\n".join(lines), title="Command", border_style="cyan"))


@app.command()
def run(
    name: str = typer.Argument(..., help="Command name, optionally followed by sub-commands"),
    args: Optional[list[str]] = typer.Argument(None, help="Arguments passed to the command"),
    project: Optional[Path] = typer.Option(None, "--project", "-p", help=PROJECT_OPTION_HELP),
):
    """Invoke a command and print its outcome (shell requests are only displayed)."""
    configure_logging()
    service = _build_service(project)
    asyncio.run(_run_async(service, name, args or []))


async def _run_async(service: CommandService, name: str, args: list[str]) -> None:
    registry = await service.load_commands_async()
    line = " ".join([name.lstrip("/"), *args])

    invocation = resolve_invocation(registry, line)
    if invocation is None:
        console.print(f"[red]Error:[/red] Unknown command: /{name.lstrip('/')}")
        raise typer.Exit(code=1)

    outcome = await execute_async(invocation, _build_context(service))
    render_outcome(outcome)


@app.command()
def watch(
    force: bool = typer.Option(False, "--force", help="Watch even when hot reload is disabled"),
    project: Optional[Path] = typer.Option(None, "--project", "-p", help=PROJECT_OPTION_HELP),
):
    """Watch command directories and reload on change (Ctrl+C to stop)."""
    settings = get_settings()
    configure_logging(settings=settings)

    if not settings.watch_enabled and not force:
        console.print(
            "[yellow]Hot reload is disabled (set SLASHCMD_HOT_RELOAD=true or pass --force).[/yellow]"
        )
        raise typer.Exit(code=1)

    service = _build_service(project)
    try:
        asyncio.run(_watch_async(service))
    except KeyboardInterrupt:
        console.print("\n[cyan]Stopped watching.[/cyan]")


async def _watch_async(service: CommandService) -> None:
    registry = await service.load_commands_async()
    await service.start_watching_async()

    directories = [str(d.path) for d in service.custom_loader.directories if d.enabled]
    console.print(Panel.fit(
        "[bold cyan]Watching command directories[/bold cyan]\n"
        + "\n".join(f"[dim]-[/dim] {d}" for d in directories),
        title="Hot reload",
        border_style="cyan",
    ))
    console.print(_commands_table(registry.commands(), f"Commands ({len(registry.commands())})"))

    try:
        while True:
            await asyncio.sleep(0.5)
            if service.registry is not registry:
                registry = service.registry
                console.print(
                    f"[green]Reloaded[/green] at {time.strftime('%H:%M:%S')}: "
                    f"{len(registry.commands())} commands"
                )
    finally:
        service.dispose()


@app.command()
def version():
    """Show slashcmd version information"""
    console.print(Panel.fit(
        "[bold cyan]slashcmd[/bold cyan]\n"
        f"[dim]Version:[/dim] {__version__}\n",
        title="About slashcmd",
        border_style="cyan",
    ))


def main():
    """Main entry point"""
    app()


if __name__ == "__main__":
    main()
