"""Exceptions raised by cocommit."""


class CocommitError(Exception):
    """Base class for errors that abort the current invocation."""
    pass


class RepositoryError(CocommitError):
    """A git repository operation failed."""
    pass


class CommitError(CocommitError):
    """The final ``git commit`` failed."""
    pass


class ConfigurationError(CocommitError):
    """The stored configuration is not usable."""
    pass


class ConfigurationMissing(ConfigurationError):
    """No AI provider has been configured yet."""

    def __init__(self, message: str = "AI provider not configured. Please run: cocommit config") -> None:
        super().__init__(message)


class EmptyMessageError(CocommitError):
    """A replacement commit message was blank."""

    def __init__(self, message: str = "Commit message cannot be empty") -> None:
        super().__init__(message)
