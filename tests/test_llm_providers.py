import json
from types import SimpleNamespace

import pytest

from LLM_API import (
    StructuredOutputRequest,
    canonical_provider,
    create_llm_client,
    describe_api_key_format,
)
from LLM_API.exceptions import (
    LLMAuthenticationError,
    LLMProviderNotFoundError,
    LLMValidationError,
)
from text2deck.text_understanding import SCHEMA_NAME, LLMTextUnderstanding, build_schema

DECK = {"slides": [{"kind": "title", "heading": "Roadmap", "body": [{"text": "2025", "bullet": False}]}]}


def _request(prompt="Split this text"):
    return StructuredOutputRequest(
        prompt=prompt,
        schema=build_schema(),
        schema_name=SCHEMA_NAME,
        instructions="JSON only",
    )


@pytest.mark.parametrize(
    "name, expected",
    [("OpenAI", "openai"), ("gpt", "openai"), ("claude", "anthropic"), ("google", "gemini")],
)
def test_canonical_provider_aliases(name, expected):
    assert canonical_provider(name) == expected


def test_unknown_provider_raises():
    with pytest.raises(LLMProviderNotFoundError):
        canonical_provider("watson")


def test_key_format_hints():
    assert "sk-ant-" in describe_api_key_format("anthropic")
    assert "AIza" in describe_api_key_format("gemini")
    assert describe_api_key_format("unknown") == "Your API key will be used only for this session"


class TestOpenAI:
    @pytest.fixture
    def model(self):
        pytest.importorskip("openai")
        return create_llm_client("openai", api_key="sk-test-1234567890")

    def test_missing_key_is_rejected(self, monkeypatch, tmp_path):
        pytest.importorskip("openai")
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        monkeypatch.chdir(tmp_path)

        with pytest.raises(LLMAuthenticationError):
            create_llm_client("openai")

    def test_structured_output_uses_json_schema_format(self, model):
        calls = []

        def create(**kwargs):
            calls.append(kwargs)
            return SimpleNamespace(output_text=json.dumps(DECK))

        model.client = SimpleNamespace(responses=SimpleNamespace(create=create))

        response = model.generate_structured_output(_request())

        assert response.parsed_output == DECK
        assert response.success
        fmt = calls[0]["text"]["format"]
        assert fmt["type"] == "json_schema"
        assert fmt["name"] == SCHEMA_NAME
        assert calls[0]["instructions"] == "JSON only"

    def test_falls_back_to_plain_prompt(self, model):
        calls = []

        def create(**kwargs):
            calls.append(kwargs)
            if "text" in kwargs:
                raise RuntimeError("json_schema unsupported")
            return SimpleNamespace(output_text=json.dumps(DECK))

        model.client = SimpleNamespace(responses=SimpleNamespace(create=create))

        response = model.generate_structured_output(_request())

        assert response.parsed_output == DECK
        assert "json_schema unsupported" in response.validation_error
        assert "respond in JSON format" in calls[1]["input"]

    def test_empty_prompt_is_rejected(self, model):
        with pytest.raises(LLMValidationError):
            model.generate_structured_output(_request(prompt=""))

    def test_feeds_text_understanding(self, model):
        model.client = SimpleNamespace(
            responses=SimpleNamespace(
                create=lambda **kwargs: SimpleNamespace(output_text=json.dumps(DECK))
            )
        )

        units = LLMTextUnderstanding(model)("Our roadmap for next year")

        assert [u.heading for u in units] == ["Roadmap"]


class TestClaude:
    @pytest.fixture
    def model(self):
        pytest.importorskip("anthropic")
        return create_llm_client("claude", api_key="sk-ant-test-123456")

    def test_structured_output_reads_tool_input(self, model):
        calls = []

        def create(**kwargs):
            calls.append(kwargs)
            return SimpleNamespace(
                content=[
                    SimpleNamespace(type="text", text="Here you go"),
                    SimpleNamespace(type="tool_use", name=SCHEMA_NAME, input=DECK),
                ],
                usage=SimpleNamespace(input_tokens=12, output_tokens=30),
            )

        model.client = SimpleNamespace(messages=SimpleNamespace(create=create))

        response = model.generate_structured_output(_request())

        assert response.parsed_output == DECK
        assert response.usage == {"prompt_tokens": 12, "completion_tokens": 30, "total_tokens": 42}
        assert calls[0]["tool_choice"] == {"type": "tool", "name": SCHEMA_NAME}
        assert calls[0]["system"] == "JSON only"

    def test_api_failure_becomes_error_response(self, model):
        def create(**kwargs):
            raise RuntimeError("overloaded")

        model.client = SimpleNamespace(messages=SimpleNamespace(create=create))

        response = model.generate_structured_output(_request())

        assert response.error == "overloaded"
        assert not response.success


class TestGemini:
    @pytest.fixture
    def model(self):
        pytest.importorskip("google.genai")
        return create_llm_client("gemini", api_key="AIza-test-123456")

    def test_structured_output_prefers_parsed(self, model):
        response_obj = SimpleNamespace(text=json.dumps(DECK), parsed=DECK)
        model.client = SimpleNamespace(
            models=SimpleNamespace(generate_content=lambda **kwargs: response_obj)
        )

        response = model.generate_structured_output(_request())

        assert response.parsed_output == DECK
        assert response.model_used == "gemini-2.5-flash"

    def test_text_is_parsed_when_parsed_is_missing(self, model):
        response_obj = SimpleNamespace(text=json.dumps(DECK), parsed=None)
        model.client = SimpleNamespace(
            models=SimpleNamespace(generate_content=lambda **kwargs: response_obj)
        )

        assert model.generate_structured_output(_request()).parsed_output == DECK
