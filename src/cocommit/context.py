"""Prompt context built from staged changes.

The context is the only view of the repository the generation backend
and the fallback classifier get. Its size is bounded per file by cutting
each diff to ``MAX_DIFF_LINES`` lines; a cap on the number of files is
optional.
"""

from __future__ import annotations

from collections.abc import Sequence

from cocommit.models import ChangedFile, RepositoryIdentity

MAX_DIFF_LINES = 20
TRUNCATION_MARKER = "... (truncated)"


def _render_file(file: ChangedFile) -> list[str]:
    lines = ["", f"{file.status.value} {file.path}"]
    if file.diff:
        diff_lines = file.diff.splitlines()
        lines.extend(diff_lines[:MAX_DIFF_LINES])
        if len(diff_lines) > MAX_DIFF_LINES:
            lines.append(TRUNCATION_MARKER)
    return lines


def build_context(
    files: Sequence[ChangedFile],
    identity: RepositoryIdentity,
    max_files: int | None = None,
) -> str:
    """Render staged changes and repository facts into one text block.

    Args:
        files: Changed files in collection order. Order is preserved.
        identity: Repository identity facts.
        max_files: Render at most this many files; the rest are counted
            on a single summary line. None renders every file.

    Returns:
        The context text.
    """
    lines = [
        f"Repository: {identity.remote_url or 'local'}",
        f"Branch: {identity.branch}",
        f"Changed files: {len(files)}",
        "",
        "File changes:",
    ]

    shown = files if max_files is None else files[:max_files]
    for file in shown:
        lines.extend(_render_file(file))

    hidden = len(files) - len(shown)
    if hidden > 0:
        lines.extend(["", f"... and {hidden} more file(s)"])

    return "\n".join(lines) + "\n"
