from typing import Optional

from google import genai
from google.genai import types

from ..data_classes import (
    StructuredOutputRequest, StructuredOutputResponse,
    ProviderConfig
)
from ..decorators import log_request
from ._base_provider import BaseProvider


class GeminiModel(BaseProvider):
    """Google Gen AI SDK implementation of CallModel"""

    default_model = "gemini-2.5-flash"

    def __init__(self, api_key: Optional[str] = None, model_name: Optional[str] = None):
        super().__init__(api_key=api_key, model_name=model_name)

    def _get_provider_config(self) -> ProviderConfig:
        return ProviderConfig(
            provider_name="Gemini",
            model_name=self.model_name,
            api_key_env="GEMINI_API_KEY",
            max_tokens_limit=8192,
        )

    def setup_client(self):
        self.client = genai.Client(api_key=self._get_api_key(self.provider_config.api_key_env))

    @log_request
    def generate_structured_output(self, request: StructuredOutputRequest) -> StructuredOutputResponse:
        self._validate_request(request)
        try:
            response = self.client.models.generate_content(
                model=self._model_for(request),
                contents=request.prompt,
                config=types.GenerateContentConfig(
                    system_instruction=request.instructions,
                    response_mime_type="application/json",
                    response_schema=request.schema,
                )
            )
            text = getattr(response, 'text', '') or ""
            parsed = getattr(response, 'parsed', None)
            if not isinstance(parsed, dict):
                parsed = self._loads_or_none(text)
            return StructuredOutputResponse(
                text=text,
                parsed_output=parsed,
                model_used=self._model_for(request),
                raw_response=response
            )
        except Exception as e:
            try:
                fallback_response = self.client.models.generate_content(
                    model=self._model_for(request),
                    contents=self._json_fallback_prompt(request.prompt, request.schema)
                )
                text = getattr(fallback_response, 'text', '') or ""
                return StructuredOutputResponse(
                    text=text,
                    parsed_output=self._loads_or_none(text),
                    model_used=self._model_for(request),
                    validation_error=f"Schema validation bypassed due to: {e}",
                    raw_response=fallback_response
                )
            except Exception as fallback_error:
                return StructuredOutputResponse(
                    text="",
                    model_used=self._model_for(request),
                    error=f"Structured output failed: {e}, Fallback failed: {fallback_error}"
                )
