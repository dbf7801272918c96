"""Render a structured message as a Conventional Commits string."""

from cocommit.models import StructuredMessage


def format_message(message: StructuredMessage) -> str:
    """Format as ``type[(scope)][!]: description`` plus an optional body.

    The message was validated when it was built, so nothing is checked here.
    """
    header = message.type.value
    if message.scope:
        header += f"({message.scope})"
    if message.breaking:
        header += "!"
    header += f": {message.description}"

    if message.body:
        return f"{header}\n\n{message.body}"
    return header
