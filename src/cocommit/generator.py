"""Structured commit message generation with a tagged result."""

from __future__ import annotations

import logging
from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, ValidationError

from cocommit.config import AIConfig
from cocommit.models import StructuredMessage
from cocommit.prompts import SYSTEM_PROMPT, build_task_prompt
from cocommit.providers import GenerationBackend, create_backend

logger = logging.getLogger(__name__)


class Generated(BaseModel):
    """The backend returned a schema-conformant message."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["generated"] = "generated"
    message: StructuredMessage


class GenerationFailed(BaseModel):
    """Generation did not produce a usable message, for whatever reason."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["failed"] = "failed"
    reason: str


GenerationResult = Union[Generated, GenerationFailed]


class StructuredGenerator:
    """Ask a generation backend for a ``StructuredMessage``.

    The configuration is given explicitly and never re-read. Each call to
    :meth:`generate` makes exactly one request; network errors, timeouts,
    authentication errors and replies that fail validation all come back
    as :class:`GenerationFailed`.
    """

    def __init__(self, config: AIConfig, backend: GenerationBackend | None = None) -> None:
        self.config = config
        self._backend = backend

    def _get_backend(self) -> GenerationBackend:
        if self._backend is None:
            self._backend = create_backend(self.config)
        return self._backend

    def generate(self, context: str) -> GenerationResult:
        try:
            backend = self._get_backend()
            message = backend.generate_structured(
                SYSTEM_PROMPT,
                build_task_prompt(context),
                StructuredMessage,
            )
        except Exception as e:
            reason = str(e) or type(e).__name__
            logger.info("Generation with %s failed: %s", self.config.provider, reason)
            return GenerationFailed(reason=reason)

        # A backend may hand back a plain dict or another model instance
        if not isinstance(message, StructuredMessage):
            try:
                message = StructuredMessage.model_validate(message)
            except ValidationError as e:
                return GenerationFailed(reason=str(e))

        return Generated(message=message)
