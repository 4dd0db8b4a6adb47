"""Pluggable text-understanding step.

A text-understanding capability is any callable ``(text, guidance)`` returning
a sequence of :class:`SlideUnit`. Two implementations are shipped: local
markup parsing and a model-backed variant whose structured output is
normalised into the same shape.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Dict, List, Optional, Sequence

from LLM_API import StructuredOutputRequest, StructuredOutputResponse, create_llm_client
from LLM_API.exceptions import LLMError

from .errors import UpstreamCapabilityError
from .segmentation import parse_text_to_slides
from .slide_models import SlideKind, SlideUnit

LOGGER = logging.getLogger(__name__)

TextUnderstanding = Callable[[str, str], Sequence[SlideUnit]]

LOCAL_PROVIDERS = frozenset({"", "local", "markup", "none"})
SCHEMA_NAME = "slide_deck"


class MarkupTextUnderstanding:
    """Understand text by its heading/bullet markup, without any model call."""

    def __call__(self, text: str, guidance: str = "") -> List[SlideUnit]:
        return parse_text_to_slides(text, guidance)


class LLMTextUnderstanding:
    """Ask an LLM to structure the text into slides."""

    def __init__(self, llm_client, *, max_input_chars: int = 20000) -> None:
        self.llm_client = llm_client
        self.max_input_chars = max_input_chars

    def __call__(self, text: str, guidance: str = "") -> List[SlideUnit]:
        if self.llm_client is None:
            raise UpstreamCapabilityError(
                "LLM client is required for model-based text understanding",
                capability="text-understanding",
            )

        request = StructuredOutputRequest(
            prompt=self._build_prompt(text, guidance),
            schema=build_schema(),
            schema_name=SCHEMA_NAME,
            instructions=(
                "Split the text into presentation slides. Output JSON only, "
                "with the slides array in presentation order."
            ),
        )
        try:
            response = self.llm_client.generate_structured_output(request)
        except LLMError as exc:
            raise UpstreamCapabilityError(
                str(exc), capability="text-understanding", original_error=exc
            ) from exc

        if response is not None and response.error:
            raise UpstreamCapabilityError(
                response.error, capability="text-understanding"
            )

        slides = normalise_slides(_extract_parsed_output(response))
        if not slides:
            LOGGER.warning("Model returned no usable slides; using markup segmentation")
            return parse_text_to_slides(text, guidance)
        return slides

    # ------------------------------------------------------------------
    # internal helpers
    # ------------------------------------------------------------------
    def _build_prompt(self, text: str, guidance: str) -> str:
        sections = [
            "You turn prose into a slide deck outline.",
            "Rules:",
            "1. The first slide is a 'title' slide with the presentation title.",
            "2. Use 'section' slides to open major parts and 'content' slides for details.",
            "3. Body lines are plain text without markup; set bullet=true for list items.",
            "4. Keep the source language. Do not invent facts.",
        ]
        if guidance and guidance.strip():
            sections.extend(["", "[Guidance]", guidance.strip()])
        sections.extend(["", "[Text]", text[: self.max_input_chars]])
        return "\n".join(sections)


def build_schema() -> Dict[str, Any]:
    return {
        "type": "object",
        "properties": {
            "slides": {
                "type": "array",
                "items": {
                    "type": "object",
                    "properties": {
                        "kind": {
                            "type": "string",
                            "enum": [kind.value for kind in SlideKind],
                        },
                        "heading": {"type": "string"},
                        "body": {
                            "type": "array",
                            "items": {
                                "type": "object",
                                "properties": {
                                    "text": {"type": "string"},
                                    "bullet": {"type": "boolean"},
                                },
                                "required": ["text", "bullet"],
                                "additionalProperties": False,
                            },
                        },
                    },
                    "required": ["kind", "heading", "body"],
                    "additionalProperties": False,
                },
            },
        },
        "required": ["slides"],
        "additionalProperties": False,
    }


def normalise_slides(payload: Optional[Dict[str, Any]]) -> List[SlideUnit]:
    """Convert model output into slide units, dropping entries without a heading."""

    raw_slides = payload.get("slides", []) if isinstance(payload, dict) else []
    slides: List[SlideUnit] = []
    for raw in raw_slides:
        if not isinstance(raw, dict):
            continue
        unit = SlideUnit.from_dict(raw)
        if not unit.heading:
            LOGGER.debug("Dropping slide without heading: %s", raw)
            continue
        slides.append(unit)
    return slides


def create_text_understanding(
    provider: Optional[str],
    api_key: Optional[str] = None,
    *,
    model_name: Optional[str] = None,
) -> TextUnderstanding:
    """Return the capability matching the provider selector."""

    if (provider or "").strip().lower() in LOCAL_PROVIDERS:
        return MarkupTextUnderstanding()
    try:
        client = create_llm_client(provider, api_key=api_key, model_name=model_name)
    except LLMError as exc:
        raise UpstreamCapabilityError(
            str(exc), capability="text-understanding", original_error=exc
        ) from exc
    return LLMTextUnderstanding(client)


def _extract_parsed_output(
    response: Optional[StructuredOutputResponse],
) -> Optional[Dict[str, Any]]:
    if response is None:
        return None
    if response.parsed_output:
        return response.parsed_output
    if response.text:
        try:
            return json.loads(response.text)
        except json.JSONDecodeError:
            LOGGER.debug("Failed to parse structured output text: %s", response.text)
    if response.validation_error:
        LOGGER.warning("Validation error: %s", response.validation_error)
    return None
