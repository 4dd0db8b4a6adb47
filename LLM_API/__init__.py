"""
LLM API Package - Unified interface for multiple LLM providers
"""

from .base import CallModel
from .data_classes import (
    BaseRequest, BaseResponse,
    StructuredOutputRequest, StructuredOutputResponse,
    ProviderConfig
)
from .exceptions import (
    LLMError, LLMAPIError, LLMValidationError,
    LLMAuthenticationError, LLMProviderNotFoundError
)
from .factory import (
    API_KEY_FORMATS,
    canonical_provider,
    create_llm_client,
    describe_api_key_format,
)

__version__ = "1.1.0"
__all__ = [
    # Base
    'CallModel',
    # Data Classes
    'BaseRequest', 'BaseResponse',
    'StructuredOutputRequest', 'StructuredOutputResponse',
    'ProviderConfig',
    # Exceptions
    'LLMError', 'LLMAPIError', 'LLMValidationError',
    'LLMAuthenticationError', 'LLMProviderNotFoundError',
    # Provider selection
    'API_KEY_FORMATS', 'canonical_provider',
    'create_llm_client', 'describe_api_key_format',
]
