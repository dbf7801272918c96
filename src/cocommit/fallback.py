"""Rule-based commit message used when structured generation fails.

The rules look only for substrings in the rendered context, so they work
without any external service. Order matters: the first rule that matches
decides the message.
"""

from __future__ import annotations

from cocommit.models import ChangeStatus, CommitType, StructuredMessage

ADDED_MARKER = f"\n{ChangeStatus.ADDED.value} "
MODIFIED_MARKER = f"\n{ChangeStatus.MODIFIED.value} "
DELETED_MARKER = f"\n{ChangeStatus.DELETED.value} "

TEST_MARKERS = ("test", "spec")
DOC_MARKERS = ("README", ".md")
CONFIG_MARKERS = (".env", "config")
CI_MARKERS = (".github", ".yml", ".yaml")
DEPENDENCY_MARKERS = (
    "package.json",
    "pyproject.toml",
    "requirements.txt",
    "Pipfile",
    "poetry.lock",
    "Cargo.toml",
    "go.mod",
    "Gemfile",
    "pom.xml",
    "build.gradle",
)


def _contains_any(context: str, markers: tuple[str, ...]) -> bool:
    return any(marker in context for marker in markers)


def classify(context: str) -> StructuredMessage:
    """Derive a commit message from the context text alone.

    Never fails, and returns the same message for the same context.
    """
    has_new = ADDED_MARKER in context
    has_modified = MODIFIED_MARKER in context
    has_deleted = DELETED_MARKER in context
    has_tests = _contains_any(context, TEST_MARKERS)

    scope = None
    if _contains_any(context, CI_MARKERS):
        commit_type, description = CommitType.CI, "update CI configuration"
    elif has_tests and has_new:
        commit_type, description = CommitType.TEST, "add new tests"
    elif has_tests:
        commit_type, description = CommitType.TEST, "update tests"
    elif _contains_any(context, DOC_MARKERS):
        commit_type, description = CommitType.DOCS, "update documentation"
    elif _contains_any(context, DEPENDENCY_MARKERS):
        commit_type, description = CommitType.BUILD, "update dependencies"
    elif _contains_any(context, CONFIG_MARKERS):
        commit_type, description = CommitType.CHORE, "update configuration"
        scope = "config"
    elif has_new:
        commit_type, description = CommitType.FEAT, "add new functionality"
    elif has_deleted and has_modified:
        commit_type, description = CommitType.REFACTOR, "refactor code structure"
    elif has_deleted:
        commit_type, description = CommitType.REFACTOR, "remove unused code"
    elif has_modified:
        commit_type, description = CommitType.FIX, "improve code implementation"
    else:
        commit_type, description = CommitType.CHORE, "update files"

    return StructuredMessage(type=commit_type, scope=scope, description=description)
