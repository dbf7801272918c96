"""The commit pipeline: collect, describe, confirm, commit."""

from __future__ import annotations

import asyncio
import logging
from enum import Enum

from git import Repo
from pydantic import BaseModel, Field
from rich.console import Console
from rich.live import Live
from rich.markup import escape
from rich.spinner import Spinner

from cocommit.context import build_context
from cocommit.fallback import classify
from cocommit.formatter import format_message
from cocommit.generator import GenerationFailed, StructuredGenerator
from cocommit.git_ops import collect_changes, create_commit, get_identity
from cocommit.models import ChangedFile, RepositoryIdentity
from cocommit.workflow import AskUser, ConfirmationWorkflow

logger = logging.getLogger(__name__)


class CommitOptions(BaseModel):
    """Options of the ``commit`` command."""

    message: str | None = Field(default=None, description="Literal message, skips generation")
    add_all: bool = Field(default=False, description="Stage all changes first")
    dry_run: bool = Field(default=False, description="Show the message without committing")
    no_verify: bool = Field(default=False, description="Skip git hooks")


class OutcomeStatus(str, Enum):
    NO_CHANGES = "no_changes"
    DRY_RUN = "dry_run"
    COMMITTED = "committed"


class CommitOutcome(BaseModel):
    """What a pipeline run did."""

    status: OutcomeStatus
    file_count: int = 0
    message: str | None = None
    commit_hash: str | None = None
    used_fallback: bool = False
    replaced: bool = False


async def _gather_inputs(repo: Repo, add_all: bool) -> tuple[RepositoryIdentity, list[ChangedFile]]:
    # Identity first so a failed branch read aborts before anything is staged
    identity = await get_identity(repo)
    files = await collect_changes(repo, add_all)
    return identity, files


def describe_changes(
    files: list[ChangedFile],
    identity: RepositoryIdentity,
    generator: StructuredGenerator,
    console: Console,
) -> tuple[str, bool]:
    """Produce a formatted message for the changes.

    Returns:
        The formatted message and whether the fallback classifier was used.
    """
    context = build_context(files, identity, max_files=generator.config.max_context_files)
    with Live(
        Spinner("dots", text=f"[cyan]Generating commit message for {len(files)} file(s)...[/cyan]"),
        console=console,
        transient=True,
    ):
        result = generator.generate(context)

    if isinstance(result, GenerationFailed):
        console.print("[yellow]⚠ AI generation failed, falling back to basic analysis...[/yellow]")
        console.print(f"[dim]Error: {escape(result.reason)}[/dim]")
        return format_message(classify(context)), True

    return format_message(result.message), False


def run_commit(
    repo: Repo,
    options: CommitOptions,
    generator: StructuredGenerator | None,
    ask: AskUser,
    console: Console | None = None,
) -> CommitOutcome:
    """Run the whole pipeline once.

    Args:
        repo: The git Repo object.
        options: Command options.
        generator: Structured generator; may be None only when
            ``options.message`` is given.
        ask: Shows the generated message and returns None to accept it
            or the replacement text.
        console: Where progress is printed.

    Raises:
        RepositoryError: If collecting changes fails.
        CommitError: If the commit fails.
        EmptyMessageError: If the replacement message is blank.
    """
    console = console or Console()

    identity, files = asyncio.run(_gather_inputs(repo, options.add_all))
    if not files:
        return CommitOutcome(status=OutcomeStatus.NO_CHANGES)

    used_fallback = False
    replaced = False
    if options.message:
        message = options.message
        console.print(f"[blue]Using provided commit message:[/blue] {escape(message)}")
    else:
        if generator is None:
            raise ValueError("A generator is required when no message is given")
        generated, used_fallback = describe_changes(files, identity, generator, console)
        workflow = ConfirmationWorkflow(generated)
        message = workflow.run(ask)
        replaced = workflow.replaced

    outcome = CommitOutcome(
        status=OutcomeStatus.DRY_RUN,
        file_count=len(files),
        message=message,
        used_fallback=used_fallback,
        replaced=replaced,
    )
    if options.dry_run:
        return outcome

    commit_hash = create_commit(repo, message, skip_hooks=options.no_verify)
    logger.debug("Committed %d file(s) as %s", len(files), commit_hash)
    return outcome.model_copy(update={"status": OutcomeStatus.COMMITTED, "commit_hash": commit_hash})
