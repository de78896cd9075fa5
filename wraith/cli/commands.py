"""CLI commands for wraith."""

import asyncio
import shlex
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from wraith import __logo__, __version__

app = typer.Typer(
    name="wraith",
    help=f"{__logo__} wraith - command routing for chat bots",
    no_args_is_help=True,
)

console = Console()


def version_callback(value: bool):
    if value:
        console.print(f"{__logo__} wraith v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", "-v", callback=version_callback, is_eager=True
    ),
):
    """wraith - command routing for chat bots."""
    pass


# ============================================================================
# Config
# ============================================================================


@app.command()
def init(
    path: Path = typer.Option(None, "--config", "-c", help="Config file path"),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing config"),
):
    """Write a default configuration file."""
    from wraith.config.loader import get_config_path, save_config
    from wraith.config.schema import Config

    config_path = path or get_config_path()
    if config_path.exists() and not force:
        console.print(f"[yellow]Config already exists at {config_path}[/yellow]")
        if not typer.confirm("Overwrite?"):
            raise typer.Exit()

    save_config(Config(), config_path)
    console.print(f"[green]✓[/green] Created config at {config_path}")


# ============================================================================
# Parameter tools
# ============================================================================


@app.command()
def params(
    definitions: list[str] = typer.Argument(..., help="Parameter definitions, in order"),
):
    """Parse parameter definitions and show the resulting rules."""
    from wraith.commands.parameters import validate_parameters
    from wraith.errors import ParameterParserError

    try:
        rules = validate_parameters(*definitions)
    except ParameterParserError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    table = Table(title="Parameters")
    table.add_column("Name", style="cyan")
    table.add_column("Type")
    table.add_column("Required")
    table.add_column("Repeatable")
    table.add_column("Literal")
    table.add_column("Default", style="yellow")
    table.add_column("Description")
    table.add_column("Canonical", style="dim")

    for rule in rules:
        table.add_row(
            rule.name,
            rule.type.value,
            "✓" if rule.required else "",
            "✓" if rule.repeatable else "",
            "✓" if rule.literal else "",
            "" if rule.default is None else repr(rule.default),
            rule.description or "",
            rule.to_definition(),
        )

    console.print(table)


@app.command()
def resolve(
    param: list[str] = typer.Option([], "--param", "-p", help="Parameter definition (repeatable)"),
    args: list[str] = typer.Argument(None, help="Arguments to resolve, after --"),
):
    """Resolve arguments against parameter definitions."""
    from wraith.commands.arguments import resolve_arguments
    from wraith.commands.parameters import validate_parameters
    from wraith.errors import ArgumentParserError, ParameterParserError

    try:
        rules = validate_parameters(*param)
    except ParameterParserError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    # the shell already split the arguments; quote them back into one string
    raw_args = shlex.join(args or [])

    try:
        resolved = resolve_arguments(rules, raw_args)
    except ArgumentParserError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    console.print_json(data=resolved)


# ============================================================================
# Console bot
# ============================================================================


@app.command()
def run(
    prefix: str = typer.Option(None, "--prefix", "-p", help="Command prefix (overrides config)"),
    message: str = typer.Option(None, "--message", "-m", help="Dispatch a single message and exit"),
    path: Path = typer.Option(None, "--config", "-c", help="Config file path"),
    verbose: bool = typer.Option(False, "--verbose", help="Debug logging"),
):
    """Run the demo bot on the console."""
    from wraith.channels.console import ConsoleAuthor, ConsoleChannel, ConsoleMessage
    from wraith.cli.demo import DEMO_COMMANDS
    from wraith.client import Client
    from wraith.config.loader import load_config
    from wraith.dispatch.dispatcher import DispatchFailure, FailureKind
    from wraith.errors import WraithError
    from wraith.logging import setup_logging

    try:
        config = load_config(path)
    except WraithError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if prefix:
        config.dispatcher.prefix = prefix
    if verbose:
        config.logging.level = "DEBUG"
    setup_logging(config.logging)

    client = Client(config)
    client.load_commands(*DEMO_COMMANDS)

    bot = ConsoleAuthor(id=config.dispatcher.self_id or "wraith", username="wraith", bot=True)
    user = ConsoleAuthor(username=config.console.username)
    channel = ConsoleChannel(type=config.console.channel_type, author=bot, console=console)

    def report_failure(failure: DispatchFailure):
        if failure.kind in (FailureKind.EVENT_FILTERED, FailureKind.PREFIX_FILTERED):
            return
        reason = f": {failure.error}" if failure.error else ""
        console.print(f"[dim]{failure.kind.value}{reason}[/dim]")

    client.on("dispatch_fail", report_failure)

    async def send(content: str):
        await client.receive(ConsoleMessage(content=content, author=user, channel=channel))

    async def run_once():
        await client.ready(bot)
        await send(message)

    async def run_interactive():
        await client.ready(bot)
        console.print(
            f"{__logo__} Console bot (prefix {config.dispatcher.prefix!r}, Ctrl+C to exit)\n"
        )
        while True:
            try:
                user_input = console.input("[bold blue]You:[/bold blue] ")
                if not user_input.strip():
                    continue
                await send(user_input)
            except (KeyboardInterrupt, EOFError):
                console.print("\nGoodbye!")
                break

    if message:
        asyncio.run(run_once())
    else:
        asyncio.run(run_interactive())


if __name__ == "__main__":
    app()
