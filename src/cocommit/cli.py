"""CLI commands for cocommit."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table

from cocommit import __version__
from cocommit.config import PROVIDER_LABELS, PROVIDER_MODELS, AIConfig, load_config, save_config
from cocommit.errors import CocommitError, ConfigurationMissing
from cocommit.generator import StructuredGenerator
from cocommit.git_ops import collect_changes, get_identity, get_repo
from cocommit.models import ChangeStatus
from cocommit.pipeline import CommitOptions, OutcomeStatus, run_commit

app = typer.Typer(
    name="cocommit",
    help="AI-powered git commit message generator",
    no_args_is_help=True,
)
console = Console()

STATUS_COLORS = {
    ChangeStatus.ADDED: "green",
    ChangeStatus.MODIFIED: "yellow",
    ChangeStatus.DELETED: "red",
}


def _print_error(message: str) -> None:
    """Print an error message and exit."""
    console.print(f"[red]✗[/red] {escape(message)}")
    raise typer.Exit(1)


def _print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]✓[/green] {message}")


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"cocommit {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version and exit"
    ),
) -> None:
    """AI-powered git commit message generator."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def _ask_user(generated: str) -> str | None:
    """Show the generated message; None keeps it, a string replaces it."""
    console.print("\n[green]Generated commit message:[/green]")
    console.print(f"[cyan]{escape(generated)}[/cyan]")

    if Confirm.ask("Do you want to commit with this message?", default=True, console=console):
        return None

    while True:
        custom = Prompt.ask("Enter your custom commit message", console=console)
        if custom.strip():
            return custom
        console.print("[red]Commit message cannot be empty[/red]")


@app.command()
def commit(
    message: Optional[str] = typer.Option(
        None, "--message", "-m", help="Custom commit message (skips AI generation)"
    ),
    add_all: bool = typer.Option(False, "--add-all", "-a", help="Add all changed files before committing"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show what would be committed without committing"),
    no_verify: bool = typer.Option(False, "--no-verify", help="Skip git hooks"),
) -> None:
    """Generate an AI commit message and commit staged changes."""
    generator = None
    if not message:
        config = load_config()
        if config is None:
            _print_error(str(ConfigurationMissing()))
            return
        generator = StructuredGenerator(config)

    options = CommitOptions(message=message, add_all=add_all, dry_run=dry_run, no_verify=no_verify)
    try:
        repo = get_repo()
        outcome = run_commit(repo, options, generator, _ask_user, console)
    except CocommitError as e:
        _print_error(str(e))
        return

    if outcome.status is OutcomeStatus.NO_CHANGES:
        console.print("[yellow]No changes detected.[/yellow]")
        console.print("[yellow]No files to commit. Use -a flag to add all changes.[/yellow]")
        return

    if outcome.status is OutcomeStatus.DRY_RUN:
        console.print("[yellow]Dry run - would commit:[/yellow]")
        console.print(f"[cyan]{escape(outcome.message or '')}[/cyan]")
        return

    _print_success(f"Successfully committed {outcome.file_count} file(s) ([cyan]{outcome.commit_hash}[/cyan])")


def _choose_provider() -> str:
    choices = list(PROVIDER_MODELS)
    for name in choices:
        console.print(f"  [cyan]{name}[/cyan] - {PROVIDER_LABELS[name]} ({', '.join(PROVIDER_MODELS[name])})")
    return Prompt.ask("Select AI provider", choices=choices, default="openai", console=console)


@app.command("config")
def configure(
    provider: Optional[str] = typer.Option(None, "--provider", "-p", help="openai, anthropic or google"),
    model: Optional[str] = typer.Option(None, "--model", help="Model name for the provider"),
    api_key: Optional[str] = typer.Option(None, "--api-key", help="API key for the provider"),
) -> None:
    """Configure AI settings."""
    console.print(Panel.fit("⚙ [bold]AI Git Commit Configuration[/bold]", border_style="blue"))

    if provider is None:
        provider = _choose_provider()
    if provider not in PROVIDER_MODELS:
        _print_error(f"Unsupported AI provider: {provider}. Choose one of: {', '.join(PROVIDER_MODELS)}")
        return

    if model is None:
        models = PROVIDER_MODELS[provider]
        model = Prompt.ask(f"Select {PROVIDER_LABELS[provider]} model", choices=models, default=models[0], console=console)

    while not api_key or not api_key.strip():
        api_key = typer.prompt(f"Enter your {PROVIDER_LABELS[provider]} API key", hide_input=True)

    try:
        config = AIConfig(provider=provider, model=model.strip(), api_key=api_key.strip())
    except ValidationError as e:
        _print_error(f"Invalid configuration: {e.errors()[0]['msg']} ({e.errors()[0]['loc'][0]})")
        return

    path = save_config(config)
    _print_success(f"Configuration saved to {path}")
    console.print(f"[cyan]Provider:[/cyan] {provider}")
    console.print(f"[cyan]Model:[/cyan] {model}")


@app.command()
def status(
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """Show git status of the staged changes."""
    try:
        repo = get_repo()
        identity = asyncio.run(get_identity(repo))
        changes = asyncio.run(collect_changes(repo))
    except CocommitError as e:
        _print_error(str(e))
        return

    if json_output:
        output = {
            "branch": identity.branch,
            "user": {"name": identity.author_name, "email": identity.author_email},
            "remote": identity.remote_url or None,
            "files": [{"path": c.path, "status": c.status.value} for c in changes],
            "count": len(changes),
        }
        print(json.dumps(output, indent=2))
        return

    console.print("[blue]Git Status[/blue]")
    console.print("[dim]" + "─" * 50 + "[/dim]")
    console.print(f"[cyan]Branch:[/cyan] {escape(identity.branch)}")
    console.print(f"[cyan]User:[/cyan] {escape(identity.author_name)} <{escape(identity.author_email)}>")
    if identity.remote_url:
        console.print(f"[cyan]Remote:[/cyan] {escape(identity.remote_url)}")
    console.print(f"[cyan]Changed files:[/cyan] {len(changes)}")

    if not changes:
        return

    table = Table(title=f"📂 Files to be committed ({len(changes)} files)")
    table.add_column("Status", style="cyan", width=8)
    table.add_column("File", style="white")
    for change in changes:
        color = STATUS_COLORS.get(change.status, "white")
        table.add_row(f"[{color}]{change.status.value}[/{color}]", escape(change.path))
    console.print(table)


app.command("c", hidden=True, help="Alias for commit")(commit)
app.command("s", hidden=True, help="Alias for status")(status)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
