"""Data models for cocommit."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ChangeStatus(str, Enum):
    """Staged status of a file, stored as the letter git prints."""

    ADDED = "A"
    MODIFIED = "M"
    DELETED = "D"


class CommitType(str, Enum):
    """Conventional commit types accepted in a structured reply."""

    FEAT = "feat"
    FIX = "fix"
    DOCS = "docs"
    STYLE = "style"
    REFACTOR = "refactor"
    PERF = "perf"
    TEST = "test"
    BUILD = "build"
    CI = "ci"
    CHORE = "chore"
    REVERT = "revert"


class ChangedFile(BaseModel):
    """A single staged file change."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(description="Path to the file relative to repo root")
    status: ChangeStatus = Field(description="Staged status: added, modified or deleted")
    diff: str | None = Field(default=None, description="Staged diff text, None for deletions")


class RepositoryIdentity(BaseModel):
    """Facts about the repository and its author, read once per run."""

    model_config = ConfigDict(frozen=True)

    branch: str = Field(description="Current branch name")
    author_name: str = Field(default="", description="git user.name")
    author_email: str = Field(default="", description="git user.email")
    remote_url: str = Field(default="", description="remote.origin.url, empty for local repos")


class StructuredMessage(BaseModel):
    """A commit message as returned by the generation backend."""

    type: CommitType = Field(description="Conventional commit type")
    scope: str | None = Field(default=None, description="Area of the codebase affected, e.g. auth, api, deps")
    description: str = Field(
        min_length=1,
        max_length=200,
        description="Short imperative summary, lowercase, no trailing period",
    )
    body: str | None = Field(
        default=None,
        min_length=1,
        max_length=200,
        description="Optional longer explanation of why the change was made",
    )
    breaking: bool = Field(default=False, description="True if the change breaks backwards compatibility")
