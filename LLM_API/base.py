"""Abstract base class that normalises the provider interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from .data_classes import ProviderConfig, StructuredOutputRequest, StructuredOutputResponse


class CallModel(ABC):
    """A provider client able to answer structured output requests."""

    default_model: str = ""

    def __init__(self, api_key: Optional[str] = None, model_name: Optional[str] = None):
        self.api_key = api_key
        self.model_name = model_name or self.default_model
        self.client = None
        self.provider_config = self._get_provider_config()
        self.setup_client()

    @abstractmethod
    def setup_client(self) -> None:
        """Initialise the provider SDK client."""

    @abstractmethod
    def _get_provider_config(self) -> ProviderConfig:
        """Return provider specific configuration metadata."""

    @abstractmethod
    def generate_structured_output(
        self, request: StructuredOutputRequest
    ) -> StructuredOutputResponse:
        """Return JSON output matching ``request.schema``.

        Provider failures are reported through ``response.error`` rather than
        raised; only request validation and missing credentials raise.
        """
