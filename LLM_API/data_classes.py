from dataclasses import dataclass, field
from typing import Optional, Dict, Any


# ========== Base Classes ==========

@dataclass
class BaseRequest:
    """Base class for every provider request"""
    prompt: str = ""
    model_name: Optional[str] = None
    max_tokens: Optional[int] = None


@dataclass
class BaseResponse:
    """Base class for every provider response"""
    text: str = ""
    model_used: Optional[str] = None
    usage: Optional[Dict[str, int]] = None
    error: Optional[str] = None
    raw_response: Optional[Any] = None

    @property
    def success(self) -> bool:
        return self.error is None


# ========== Structured Output ==========

@dataclass
class StructuredOutputRequest(BaseRequest):
    """Request for JSON output matching ``schema``"""
    schema: Dict[str, Any] = field(default_factory=dict)  # JSON Schema
    schema_name: str = "response"
    schema_description: Optional[str] = None
    strict: bool = True  # OpenAI only
    instructions: Optional[str] = None


@dataclass
class StructuredOutputResponse(BaseResponse):
    """Structured output; ``parsed_output`` holds the decoded JSON"""
    parsed_output: Optional[Dict[str, Any]] = None
    validation_error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.error is None and self.validation_error is None and self.parsed_output is not None


# ========== Provider Metadata ==========

@dataclass
class ProviderConfig:
    """Provider specific settings"""
    provider_name: str = ""
    model_name: str = ""
    api_key_env: str = ""
    max_tokens_limit: Optional[int] = None
