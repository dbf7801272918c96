"""Unit tests for generator and providers modules."""

import pytest
from pydantic import ValidationError

from cocommit import providers
from cocommit.config import AIConfig
from cocommit.errors import ConfigurationError
from cocommit.generator import Generated, GenerationFailed, StructuredGenerator
from cocommit.models import CommitType, StructuredMessage
from cocommit.prompts import SYSTEM_PROMPT
from cocommit.providers import (
    AnthropicBackend,
    GeminiBackend,
    GenerationBackend,
    OpenAIBackend,
    create_backend,
    parse_structured,
)


class FakeBackend(GenerationBackend):
    """Backend returning a canned reply or raising a canned error."""

    name = "fake"

    def __init__(self, config, reply=None, error=None):
        super().__init__(config)
        self.reply = reply
        self.error = error
        self.calls = []

    def generate_structured(self, system, prompt, schema):
        self.calls.append((system, prompt, schema))
        if self.error is not None:
            raise self.error
        if isinstance(self.reply, str):
            return parse_structured(self.reply, schema)
        return self.reply


class TestParseStructured:
    """Tests for parse_structured function."""

    def test_plain_json(self):
        message = parse_structured('{"type": "fix", "description": "handle empty input"}', StructuredMessage)

        assert message.type is CommitType.FIX
        assert message.description == "handle empty input"

    def test_json_inside_prose(self):
        """Should cut the object out of surrounding text and code fences."""
        text = 'Here you go:\n```json\n{"type": "docs", "scope": "readme", "description": "fix typo"}\n```'

        message = parse_structured(text, StructuredMessage)

        assert message.scope == "readme"

    def test_no_json(self):
        with pytest.raises(ValueError, match="did not return a JSON object"):
            parse_structured("feat: add thing", StructuredMessage)

    def test_none_reply(self):
        with pytest.raises(ValueError):
            parse_structured(None, StructuredMessage)

    def test_schema_violation(self):
        with pytest.raises(ValidationError):
            parse_structured('{"type": "feature", "description": "x"}', StructuredMessage)


class TestStructuredGenerator:
    """Tests for StructuredGenerator."""

    def test_success(self, ai_config):
        """Should return Generated with the backend's message."""
        reply = StructuredMessage(type="feat", scope="api", description="add endpoint")
        backend = FakeBackend(ai_config, reply=reply)

        result = StructuredGenerator(ai_config, backend=backend).generate("Branch: main\n")

        assert isinstance(result, Generated)
        assert result.message == reply

    def test_sends_system_prompt_and_context(self, ai_config):
        """Should send the fixed instruction and the context in the task prompt."""
        backend = FakeBackend(ai_config, reply=StructuredMessage(type="fix", description="x"))

        StructuredGenerator(ai_config, backend=backend).generate("CONTEXT-MARKER")

        system, prompt, schema = backend.calls[0]
        assert system == SYSTEM_PROMPT
        assert "CONTEXT-MARKER" in prompt
        assert prompt.startswith("Analyze the following code changes")
        assert schema is StructuredMessage

    @pytest.mark.parametrize(
        "error",
        [
            ConnectionError("network unreachable"),
            TimeoutError("request timed out"),
            PermissionError("401 invalid api key"),
            RuntimeError(""),
        ],
    )
    def test_any_backend_error_is_a_failure(self, ai_config, error):
        """Should fold every backend exception into GenerationFailed."""
        backend = FakeBackend(ai_config, error=error)

        result = StructuredGenerator(ai_config, backend=backend).generate("ctx")

        assert isinstance(result, GenerationFailed)
        assert result.reason

    def test_invalid_reply_is_a_failure(self, ai_config):
        """Should treat a schema violation like any other failure."""
        backend = FakeBackend(ai_config, reply='{"type": "fix", "description": ""}')

        result = StructuredGenerator(ai_config, backend=backend).generate("ctx")

        assert isinstance(result, GenerationFailed)

    def test_dict_reply_is_validated(self, ai_config):
        """Should validate a plain dict returned by a backend."""
        backend = FakeBackend(ai_config, reply={"type": "perf", "description": "cache lookups"})

        result = StructuredGenerator(ai_config, backend=backend).generate("ctx")

        assert isinstance(result, Generated)
        assert result.message.type is CommitType.PERF

    def test_bad_dict_reply_is_a_failure(self, ai_config):
        backend = FakeBackend(ai_config, reply={"type": "nope"})

        result = StructuredGenerator(ai_config, backend=backend).generate("ctx")

        assert isinstance(result, GenerationFailed)

    def test_single_attempt(self, ai_config):
        """Should not retry a failed request."""
        backend = FakeBackend(ai_config, error=ConnectionError("down"))

        StructuredGenerator(ai_config, backend=backend).generate("ctx")

        assert len(backend.calls) == 1

    def test_backend_creation_failure_is_a_failure(self, ai_config, monkeypatch):
        """Should report a backend that cannot be built as a failure."""

        def broken_backend(config):
            raise ImportError("No module named 'openai'")

        monkeypatch.setattr("cocommit.generator.create_backend", broken_backend)

        result = StructuredGenerator(ai_config).generate("ctx")

        assert isinstance(result, GenerationFailed)
        assert "openai" in result.reason


class TestCreateBackend:
    """Tests for create_backend function."""

    @pytest.mark.parametrize(
        "provider, backend_class",
        [("openai", OpenAIBackend), ("anthropic", AnthropicBackend), ("google", GeminiBackend)],
    )
    def test_maps_provider(self, provider, backend_class, monkeypatch):
        """Should pick the backend class registered for the provider."""
        built = []

        class Recorder:
            name = provider

            def __init__(self, config):
                built.append(config)

        monkeypatch.setitem(providers.BACKENDS, provider, Recorder)
        config = AIConfig(provider=provider, model="m", api_key="k")

        backend = create_backend(config)

        assert isinstance(backend, Recorder)
        assert built == [config]
        assert backend_class.name == provider

    def test_unknown_provider(self):
        config = AIConfig.model_construct(provider="mistral", model="m", api_key="k", timeout=30.0)

        with pytest.raises(ConfigurationError, match="Unsupported AI provider"):
            create_backend(config)
