from typing import Optional, Dict, Any

from openai import OpenAI

from ..data_classes import (
    StructuredOutputRequest, StructuredOutputResponse,
    ProviderConfig
)
from ..decorators import log_request
from ._base_provider import BaseProvider


class OpenAIModel(BaseProvider):
    """OpenAI Responses API implementation of CallModel"""

    default_model = "gpt-4o-mini"

    def __init__(self, api_key: Optional[str] = None, model_name: Optional[str] = None):
        super().__init__(api_key=api_key, model_name=model_name)

    def _get_provider_config(self) -> ProviderConfig:
        return ProviderConfig(
            provider_name="OpenAI",
            model_name=self.model_name,
            api_key_env="OPENAI_API_KEY",
            max_tokens_limit=128000,
        )

    def setup_client(self):
        self.client = OpenAI(api_key=self._get_api_key(self.provider_config.api_key_env))

    @log_request
    def generate_structured_output(self, request: StructuredOutputRequest) -> StructuredOutputResponse:
        self._validate_request(request)
        request_data: Dict[str, Any] = {
            "model": self._model_for(request),
            "input": request.prompt,
            "text": {
                "format": {
                    "type": "json_schema",
                    "name": request.schema_name,
                    "schema": request.schema,
                    "strict": request.strict
                }
            }
        }
        if request.instructions:
            request_data["instructions"] = request.instructions
        try:
            response = self.client.responses.create(**request_data)
            text = getattr(response, 'output_text', '') or ""
            parsed = self._loads_or_none(text)
            return StructuredOutputResponse(
                text=text,
                parsed_output=parsed,
                model_used=self._model_for(request),
                validation_error=None if parsed is not None else "Response was not a JSON object",
                raw_response=response,
            )
        except Exception as e:
            try:
                fallback_response = self.client.responses.create(
                    model=self._model_for(request),
                    input=self._json_fallback_prompt(request.prompt, request.schema)
                )
                text = getattr(fallback_response, 'output_text', '') or ""
                return StructuredOutputResponse(
                    text=text,
                    parsed_output=self._loads_or_none(text),
                    model_used=self._model_for(request),
                    validation_error=f"Structured output parse failed: {e}",
                    raw_response=fallback_response
                )
            except Exception as fallback_error:
                return StructuredOutputResponse(
                    text="",
                    model_used=self._model_for(request),
                    error=f"Structured output failed: {e}, Fallback failed: {fallback_error}"
                )
