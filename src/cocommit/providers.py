"""Text-generation backends that return schema-validated objects."""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from typing import TypeVar

from pydantic import BaseModel

from cocommit.config import AIConfig
from cocommit.errors import ConfigurationError

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)

MAX_OUTPUT_TOKENS = 1024


def parse_structured(text: str | None, schema: type[SchemaT]) -> SchemaT:
    """Cut the outermost JSON object out of a reply and validate it.

    Raises:
        ValueError: If the reply holds no JSON object.
        pydantic.ValidationError: If the object does not match the schema.
    """
    text = text or ""
    json_start = text.find("{")
    json_end = text.rfind("}") + 1
    if json_start == -1 or json_end == 0:
        raise ValueError(f"Backend did not return a JSON object: {text[:200]!r}")
    return schema.model_validate_json(text[json_start:json_end])


class GenerationBackend(ABC):
    """A provider able to produce a structured object from a prompt."""

    name: str = ""

    def __init__(self, config: AIConfig) -> None:
        self.model = config.model
        self.timeout = config.timeout

    @abstractmethod
    def generate_structured(self, system: str, prompt: str, schema: type[SchemaT]) -> SchemaT:
        """Ask the model for an object matching ``schema``.

        May raise any exception; callers treat every failure alike.
        """


class OpenAIBackend(GenerationBackend):
    name = "openai"

    def __init__(self, config: AIConfig) -> None:
        super().__init__(config)
        from openai import OpenAI

        self._client = OpenAI(api_key=config.api_key, timeout=config.timeout, max_retries=0)

    def generate_structured(self, system: str, prompt: str, schema: type[SchemaT]) -> SchemaT:
        response = self._client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
            response_format={
                "type": "json_schema",
                "json_schema": {
                    "name": schema.__name__,
                    "schema": schema.model_json_schema(),
                },
            },
            max_tokens=MAX_OUTPUT_TOKENS,
        )
        return parse_structured(response.choices[0].message.content, schema)


class AnthropicBackend(GenerationBackend):
    name = "anthropic"

    def __init__(self, config: AIConfig) -> None:
        super().__init__(config)
        from anthropic import Anthropic

        self._client = Anthropic(api_key=config.api_key, timeout=config.timeout, max_retries=0)

    def generate_structured(self, system: str, prompt: str, schema: type[SchemaT]) -> SchemaT:
        schema_hint = json.dumps(schema.model_json_schema())
        response = self._client.messages.create(
            model=self.model,
            max_tokens=MAX_OUTPUT_TOKENS,
            system=f"{system}\n\nThe JSON object MUST validate against this JSON schema:\n{schema_hint}",
            messages=[{"role": "user", "content": prompt}],
        )
        text = "".join(block.text for block in response.content if block.type == "text")
        return parse_structured(text, schema)


class GeminiBackend(GenerationBackend):
    name = "google"

    def __init__(self, config: AIConfig) -> None:
        super().__init__(config)
        import google.genai as genai
        from google.genai import types

        self._types = types
        self._client = genai.Client(
            api_key=config.api_key,
            http_options=types.HttpOptions(timeout=int(config.timeout * 1000)),
        )

    def generate_structured(self, system: str, prompt: str, schema: type[SchemaT]) -> SchemaT:
        response = self._client.models.generate_content(
            model=self.model,
            contents=prompt,
            config=self._types.GenerateContentConfig(
                system_instruction=system,
                response_mime_type="application/json",
                response_schema=schema,
                max_output_tokens=MAX_OUTPUT_TOKENS,
            ),
        )
        return parse_structured(response.text, schema)


BACKENDS: dict[str, type[GenerationBackend]] = {
    OpenAIBackend.name: OpenAIBackend,
    AnthropicBackend.name: AnthropicBackend,
    GeminiBackend.name: GeminiBackend,
}


def create_backend(config: AIConfig) -> GenerationBackend:
    """Build the backend selected by ``config.provider``.

    Raises:
        ConfigurationError: If the provider is not supported.
    """
    try:
        backend_class = BACKENDS[config.provider]
    except KeyError:
        raise ConfigurationError(f"Unsupported AI provider: {config.provider}")
    logger.debug("Using %s backend with model %s", backend_class.name, config.model)
    return backend_class(config)
