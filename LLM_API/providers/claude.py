from typing import Optional, Dict, Any

import anthropic

from ..data_classes import (
    StructuredOutputRequest, StructuredOutputResponse,
    ProviderConfig
)
from ..decorators import log_request
from ._base_provider import BaseProvider


class ClaudeModel(BaseProvider):
    """Anthropic Messages API implementation of CallModel"""

    default_model = "claude-3-5-sonnet-latest"

    def __init__(self, api_key: Optional[str] = None, model_name: Optional[str] = None):
        super().__init__(api_key=api_key, model_name=model_name)

    def _get_provider_config(self) -> ProviderConfig:
        return ProviderConfig(
            provider_name="Claude",
            model_name=self.model_name,
            api_key_env="ANTHROPIC_API_KEY",
            max_tokens_limit=200000,
        )

    def setup_client(self):
        self.client = anthropic.Anthropic(
            api_key=self._get_api_key(self.provider_config.api_key_env)
        )

    @log_request
    def generate_structured_output(self, request: StructuredOutputRequest) -> StructuredOutputResponse:
        """Force a single tool call whose input schema is the requested schema"""
        self._validate_request(request)
        try:
            tools = [{
                "name": request.schema_name,
                "description": request.schema_description or f"Structured output for {request.schema_name}",
                "input_schema": request.schema
            }]
            request_params: Dict[str, Any] = {
                "model": self._model_for(request),
                "max_tokens": request.max_tokens or 4096,
                "tools": tools,
                "tool_choice": {"type": "tool", "name": request.schema_name},
                "messages": [{"role": "user", "content": request.prompt}]
            }
            if request.instructions:
                request_params["system"] = request.instructions

            response = self.client.messages.create(**request_params)

            parsed_output: Optional[Dict[str, Any]] = None
            text_content = ""
            for content in response.content:
                if content.type == "text":
                    text_content += content.text
                elif content.type == "tool_use" and content.name == request.schema_name:
                    parsed_output = content.input

            return StructuredOutputResponse(
                text=text_content,
                parsed_output=parsed_output,
                model_used=self._model_for(request),
                usage=_usage(response),
                raw_response=response
            )
        except Exception as e:
            return StructuredOutputResponse(
                text="",
                model_used=self._model_for(request),
                error=str(e)
            )


def _usage(response) -> Optional[Dict[str, int]]:
    usage = getattr(response, 'usage', None)
    if usage is None:
        return None
    prompt_tokens = getattr(usage, 'input_tokens', 0) or 0
    completion_tokens = getattr(usage, 'output_tokens', 0) or 0
    return {
        "prompt_tokens": prompt_tokens,
        "completion_tokens": completion_tokens,
        "total_tokens": prompt_tokens + completion_tokens
    }
