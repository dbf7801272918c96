"""Git operations layer for cocommit."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from git import Repo
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from cocommit.errors import CommitError, RepositoryError
from cocommit.models import ChangedFile, ChangeStatus, RepositoryIdentity

logger = logging.getLogger(__name__)

# Upper bound on concurrent per-file git processes
DIFF_CONCURRENCY = 4


def get_repo(path: str | Path = ".") -> Repo:
    """Get the git repository at the given path.

    Args:
        path: Path inside the repository. Defaults to current directory.

    Returns:
        The git Repo object.

    Raises:
        RepositoryError: If the path is not inside a git repository.
    """
    try:
        return Repo(path, search_parent_directories=True)
    except (InvalidGitRepositoryError, NoSuchPathError):
        raise RepositoryError(f"Not a git repository: {path}")


def get_repo_root(repo: Repo) -> Path:
    """Get the root directory of the repository."""
    return Path(repo.working_dir)


def stage_all(repo: Repo) -> None:
    """Stage every working-tree change, including deletions and new files.

    Raises:
        RepositoryError: If staging fails.
    """
    try:
        repo.git.add("--all")
    except GitCommandError as e:
        raise RepositoryError(f"Failed to stage changes: {e}")


def list_staged_names(repo: Repo) -> list[str]:
    """List staged paths in the order git reports them.

    Raises:
        RepositoryError: If the listing cannot be obtained.
    """
    # NUL-separated output keeps non-ASCII paths unquoted
    try:
        output = repo.git.diff("--cached", "--name-only", "-z")
    except GitCommandError as e:
        raise RepositoryError(f"Failed to get changed files: {e}")
    return [name for name in output.split("\0") if name]


def _staged_status(repo: Repo, path: str) -> ChangeStatus:
    try:
        output = repo.git.diff("--cached", "--name-status", "--", path)
    except GitCommandError as e:
        raise RepositoryError(f"Failed to get status of {path}: {e}")
    if output.startswith("A"):
        return ChangeStatus.ADDED
    if output.startswith("D"):
        return ChangeStatus.DELETED
    return ChangeStatus.MODIFIED


def _staged_diff(repo: Repo, path: str) -> str:
    return repo.git.diff("--cached", "--", path)


def _collect_file(repo: Repo, path: str) -> ChangedFile:
    status = _staged_status(repo, path)
    if status is ChangeStatus.DELETED:
        return ChangedFile(path=path, status=status)

    try:
        diff = _staged_diff(repo, path)
    except Exception as e:
        # One unreadable file must not abort the whole collection
        logger.warning("Could not read staged diff for %s: %s", path, e)
        diff = ""
    return ChangedFile(path=path, status=status, diff=diff)


async def collect_changes(repo: Repo, include_all: bool = False) -> list[ChangedFile]:
    """Collect staged files with their status and diff.

    Args:
        repo: The git Repo object.
        include_all: Stage every working-tree change before collecting.

    Returns:
        Staged files in the order ``git diff --cached --name-only`` lists
        them. Empty when nothing is staged.

    Raises:
        RepositoryError: If staging or the staged listing fails.
    """
    if include_all:
        await asyncio.to_thread(stage_all, repo)

    paths = await asyncio.to_thread(list_staged_names, repo)
    if not paths:
        return []

    semaphore = asyncio.Semaphore(DIFF_CONCURRENCY)

    async def _bounded(path: str) -> ChangedFile:
        async with semaphore:
            return await asyncio.to_thread(_collect_file, repo, path)

    files = await asyncio.gather(*(_bounded(path) for path in paths))
    logger.debug("Collected %d staged file(s)", len(files))
    return list(files)


def _read_config_value(repo: Repo, key: str) -> str:
    try:
        return repo.git.config("--get", key).strip()
    except GitCommandError:
        return ""


def _read_branch(repo: Repo) -> str:
    try:
        branch = repo.git.branch("--show-current").strip()
    except GitCommandError as e:
        raise RepositoryError(f"Failed to get current branch: {e}")
    return branch or "HEAD"


async def get_identity(repo: Repo) -> RepositoryIdentity:
    """Read author, branch and remote facts concurrently.

    Only the branch is mandatory; the other values fall back to empty
    strings when git cannot provide them.

    Raises:
        RepositoryError: If the current branch cannot be read.
    """
    name, email, branch, remote = await asyncio.gather(
        asyncio.to_thread(_read_config_value, repo, "user.name"),
        asyncio.to_thread(_read_config_value, repo, "user.email"),
        asyncio.to_thread(_read_branch, repo),
        asyncio.to_thread(_read_config_value, repo, "remote.origin.url"),
    )
    return RepositoryIdentity(
        branch=branch,
        author_name=name,
        author_email=email,
        remote_url=remote,
    )


def create_commit(repo: Repo, message: str, skip_hooks: bool = False) -> str:
    """Create a commit with the staged changes.

    Args:
        repo: The git Repo object.
        message: The literal commit message.
        skip_hooks: Pass ``--no-verify`` to bypass commit hooks.

    Returns:
        The short hash of the new commit.

    Raises:
        CommitError: If the commit fails.
    """
    args = ["-m", message]
    if skip_hooks:
        args.append("--no-verify")
    try:
        repo.git.commit(*args)
        return repo.git.rev_parse("HEAD", short=7)
    except GitCommandError as e:
        raise CommitError(f"Failed to commit changes: {e}")
