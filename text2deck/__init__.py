"""Turn prose into styled slide decks."""

from .deck_builder import build
from .document_assembler import (
    DocumentHandle,
    DocumentWriter,
    PptxDocumentWriter,
    TextRegion,
    TextStyle,
    assemble,
)
from .errors import (
    DeckError,
    EmptyDeckError,
    InsufficientPaletteError,
    PipelineAbort,
    TemplateError,
    UpstreamCapabilityError,
    ValidationError,
)
from .config import PipelineSettings
from .pipeline import (
    GenerationRequest,
    PipelineOrchestrator,
    PipelineResult,
    PipelineRun,
    RunStatus,
    Stage,
)
from .segmentation import fallback, parse_text_to_slides, segment
from .slide_models import (
    BodyLine,
    Deck,
    DeckSlide,
    SlideKind,
    SlideUnit,
    StyledSlide,
    TemplateDescriptor,
)
from .style_binder import bind
from .templates import TemplateFile, analyze_template
from .text_understanding import (
    LLMTextUnderstanding,
    MarkupTextUnderstanding,
    create_text_understanding,
)

__all__ = [
    "BodyLine",
    "Deck",
    "DeckSlide",
    "SlideKind",
    "SlideUnit",
    "StyledSlide",
    "TemplateDescriptor",
    "segment",
    "fallback",
    "parse_text_to_slides",
    "build",
    "bind",
    "assemble",
    "DocumentHandle",
    "DocumentWriter",
    "PptxDocumentWriter",
    "TextRegion",
    "TextStyle",
    "TemplateFile",
    "analyze_template",
    "MarkupTextUnderstanding",
    "LLMTextUnderstanding",
    "create_text_understanding",
    "PipelineSettings",
    "GenerationRequest",
    "PipelineOrchestrator",
    "PipelineResult",
    "PipelineRun",
    "RunStatus",
    "Stage",
    "DeckError",
    "ValidationError",
    "EmptyDeckError",
    "TemplateError",
    "InsufficientPaletteError",
    "UpstreamCapabilityError",
    "PipelineAbort",
]
