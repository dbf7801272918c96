"""cocommit: AI-powered Conventional Commits messages for staged git changes."""

__version__ = "1.0.0"
