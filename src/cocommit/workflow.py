"""Confirm-or-replace step between generation and commit."""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum

from cocommit.errors import EmptyMessageError

# Returns None when the user accepts the shown message, otherwise the
# literal replacement text.
AskUser = Callable[[str], "str | None"]


class ConfirmState(str, Enum):
    GENERATED = "generated"
    ACCEPTED = "accepted"
    REPLACING = "replacing"
    FINAL = "final"


class ConfirmationWorkflow:
    """One round of "keep this message or type your own".

    ``GENERATED -> ACCEPTED | REPLACING -> FINAL``. A replacement is used
    verbatim and is not reviewed again.
    """

    def __init__(self, generated: str) -> None:
        self.generated = generated
        self.state = ConfirmState.GENERATED
        self.replaced = False
        self._final: str | None = None

    def accept(self) -> None:
        self._require(ConfirmState.GENERATED)
        self.state = ConfirmState.ACCEPTED
        self._finish(self.generated)

    def reject(self) -> None:
        self._require(ConfirmState.GENERATED)
        self.state = ConfirmState.REPLACING

    def replace(self, text: str) -> None:
        self._require(ConfirmState.REPLACING)
        if not text or not text.strip():
            raise EmptyMessageError()
        self.replaced = True
        self._finish(text)

    def run(self, ask: AskUser) -> str:
        """Drive the machine to ``FINAL`` with a single question."""
        reply = ask(self.generated)
        if reply is None:
            self.accept()
        else:
            self.reject()
            self.replace(reply)
        return self.final_message

    @property
    def final_message(self) -> str:
        if self._final is None:
            raise RuntimeError(f"No final message yet (state: {self.state.value})")
        return self._final

    def _finish(self, message: str) -> None:
        self._final = message
        self.state = ConfirmState.FINAL

    def _require(self, expected: ConfirmState) -> None:
        if self.state is not expected:
            raise RuntimeError(f"Cannot leave state {self.state.value}, expected {expected.value}")
