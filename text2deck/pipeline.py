"""Staged execution of the text-to-deck transformation.

The orchestrator runs a fixed sequence of stages. Every stage is a plain
function of explicit inputs; :class:`PipelineOrchestrator` threads a
:class:`PipelineRun` between them, reports progress on entering each stage
and stops at the first failure or at a requested cancellation.
"""

from __future__ import annotations

import functools
import logging
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Sequence, Union

from LLM_API import describe_api_key_format

from .config import PipelineSettings
from .deck_builder import build
from .document_assembler import DocumentHandle, PptxDocumentWriter, WriterFactory, assemble
from .errors import DeckError, PipelineAbort, TemplateError, UpstreamCapabilityError, ValidationError
from .slide_models import (
    Deck,
    GenerationSummary,
    SlidePreview,
    SlideUnit,
    StyledSlide,
    TemplateDescriptor,
)
from .style_binder import bind
from .templates import TemplateFile, analyze_template
from .text_understanding import LOCAL_PROVIDERS, TextUnderstanding, create_text_understanding

LOGGER = logging.getLogger(__name__)

PREVIEW_LIMIT = 100


class Stage(Enum):
    """Pipeline stages in execution order."""

    VALIDATE_INPUTS = ("ValidateInputs", "Validating inputs")
    ANALYZE_TEMPLATE = ("AnalyzeTemplate", "Analyzing template structure")
    UNDERSTAND_TEXT = ("UnderstandText", "Processing text with AI")
    BUILD_DECK = ("BuildDeck", "Generating slide structure")
    APPLY_STYLE = ("ApplyStyle", "Applying template styling")
    ASSEMBLE_DOCUMENT = ("AssembleDocument", "Creating PowerPoint file")
    FINALIZE_OUTPUT = ("FinalizeOutput", "Preparing download")

    def __init__(self, stage_name: str, label: str) -> None:
        self.stage_name = stage_name
        self.label = label


STAGES: Sequence[Stage] = tuple(Stage)


class RunStatus(Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


ProgressCallback = Callable[[Stage, float], None]
TemplateAnalyzer = Callable[[TemplateFile], TemplateDescriptor]
TemplateInput = Union[TemplateFile, TemplateDescriptor, None]


@dataclass
class GenerationRequest:
    """Everything a caller supplies for one generation."""

    text: str
    credential: str
    template: TemplateInput = None
    guidance: str = ""
    provider: str = "local"
    model_name: Optional[str] = None


@dataclass
class PipelineRun:
    """Working state of a single run; owned by the orchestrator."""

    text: str
    guidance: str
    template: Optional[TemplateDescriptor] = None
    stage_index: int = -1
    units: Optional[List[SlideUnit]] = None
    deck: Optional[Deck] = None
    styled_slides: Optional[Sequence[StyledSlide]] = None
    document: Optional[DocumentHandle] = None
    summary: Optional[GenerationSummary] = None
    status: RunStatus = RunStatus.NOT_STARTED
    failure: Optional[PipelineAbort] = None

    @property
    def current_stage(self) -> Optional[Stage]:
        if 0 <= self.stage_index < len(STAGES):
            return STAGES[self.stage_index]
        return None


@dataclass
class PipelineResult:
    """Terminal outcome of a run. Deck and document are only set on success."""

    status: RunStatus
    completed_stages: List[Stage] = field(default_factory=list)
    deck: Optional[Deck] = None
    document: Optional[DocumentHandle] = None
    summary: Optional[GenerationSummary] = None
    failure: Optional[PipelineAbort] = None
    stopped_at: Optional[Stage] = None

    @property
    def succeeded(self) -> bool:
        return self.status is RunStatus.COMPLETED

    @property
    def failed_stage(self) -> Optional[str]:
        return self.failure.stage if self.failure else None

    @property
    def reason(self) -> Optional[str]:
        return self.failure.reason if self.failure else None

    def raise_for_status(self) -> "PipelineResult":
        if self.failure is not None:
            raise self.failure
        if self.status is RunStatus.CANCELLED:
            stage = self.stopped_at.stage_name if self.stopped_at else "Pipeline"
            raise PipelineAbort(stage, DeckError("Run was cancelled."))
        return self


class PipelineOrchestrator:
    """Run the generation stages in order for one request at a time."""

    def __init__(
        self,
        *,
        settings: Optional[PipelineSettings] = None,
        text_understanding: Optional[TextUnderstanding] = None,
        template_analyzer: Optional[TemplateAnalyzer] = None,
        writer_factory: Optional[WriterFactory] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.settings = settings or PipelineSettings()
        self.text_understanding = text_understanding
        self.template_analyzer = template_analyzer or functools.partial(
            analyze_template, max_bytes=self.settings.max_template_bytes
        )
        self.writer_factory: WriterFactory = writer_factory or PptxDocumentWriter
        self._sleep = sleep

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def run(
        self,
        request: GenerationRequest,
        *,
        progress: Optional[ProgressCallback] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> PipelineResult:
        """Execute every stage for ``request`` and return the outcome."""

        run = PipelineRun(text=request.text, guidance=request.guidance)
        run.status = RunStatus.RUNNING

        for index, stage in enumerate(STAGES):
            if cancel_event is not None and cancel_event.is_set():
                LOGGER.info("Run cancelled before %s", stage.stage_name)
                run.stage_index = index
                run.status = RunStatus.CANCELLED
                break

            run.stage_index = index
            self._report(progress, stage, index)
            if self.settings.stage_delay > 0:
                self._sleep(self.settings.stage_delay)

            LOGGER.info("[%d/%d] %s", index + 1, len(STAGES), stage.label)
            try:
                self._execute(stage, run, request)
            except Exception as exc:
                run.failure = PipelineAbort(stage.stage_name, exc)
                run.status = RunStatus.FAILED
                if isinstance(exc, DeckError):
                    LOGGER.warning("%s", run.failure)
                else:
                    LOGGER.exception("Unexpected error during %s", stage.stage_name)
                break
        else:
            run.status = RunStatus.COMPLETED

        return _to_result(run)

    def generate(self, request: GenerationRequest, **kwargs) -> DocumentHandle:
        """Run the pipeline and return the document, raising :class:`PipelineAbort` on failure."""

        return self.run(request, **kwargs).raise_for_status().document

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _execute(self, stage: Stage, run: PipelineRun, request: GenerationRequest) -> None:
        if stage is Stage.VALIDATE_INPUTS:
            validate_inputs(request, self.settings)
        elif stage is Stage.ANALYZE_TEMPLATE:
            run.template = resolve_template(request.template, self.template_analyzer)
        elif stage is Stage.UNDERSTAND_TEXT:
            run.units = understand_text(
                request.text, request.guidance, self._understanding_for(request)
            )
        elif stage is Stage.BUILD_DECK:
            run.deck = build(run.units or [])
        elif stage is Stage.APPLY_STYLE:
            run.styled_slides = bind(run.deck, run.template)
        elif stage is Stage.ASSEMBLE_DOCUMENT:
            run.document = assemble_document(run.styled_slides, self.writer_factory)
        elif stage is Stage.FINALIZE_OUTPUT:
            run.summary = summarize(run.deck, run.document)
        else:
            raise TypeError(f"Unhandled stage: {stage!r}")

    def _understanding_for(self, request: GenerationRequest) -> TextUnderstanding:
        if self.text_understanding is not None:
            return self.text_understanding
        return create_text_understanding(
            request.provider, request.credential, model_name=request.model_name
        )

    def _report(self, progress: Optional[ProgressCallback], stage: Stage, index: int) -> None:
        if progress is None:
            return
        try:
            progress(stage, (index + 1) / len(STAGES))
        except Exception as exc:
            LOGGER.warning("Progress callback failed at %s: %s", stage.stage_name, exc)


# ----------------------------------------------------------------------
# Stage functions
# ----------------------------------------------------------------------

def validate_inputs(request: GenerationRequest, settings: PipelineSettings) -> None:
    """Check text and credential length, stopping at the first violation."""

    if len(request.text or "") < settings.min_text_length:
        raise ValidationError(
            "Text content is too short. Please provide at least "
            f"{settings.min_text_length} characters.",
            details={"field": "text", "length": len(request.text or "")},
        )
    if len(request.credential or "") < settings.min_credential_length:
        message = "Invalid API key format."
        if (request.provider or "").strip().lower() not in LOCAL_PROVIDERS:
            message = f"{message} {describe_api_key_format(request.provider)}"
        raise ValidationError(message, details={"field": "credential"})


def resolve_template(template: TemplateInput, analyzer: TemplateAnalyzer) -> TemplateDescriptor:
    """Return the descriptor for ``template``, analysing uploaded files."""

    if template is None:
        raise TemplateError("Please upload a PowerPoint template file")
    if isinstance(template, TemplateDescriptor):
        descriptor = template
    else:
        descriptor = analyzer(template)
    if not descriptor.font:
        raise TemplateError("Template descriptor has no font.")
    return descriptor


def understand_text(
    text: str, guidance: str, understanding: TextUnderstanding
) -> List[SlideUnit]:
    """Invoke the text-understanding capability and check its output shape."""

    units = list(understanding(text, guidance) or [])
    for unit in units:
        if not isinstance(unit, SlideUnit) or not unit.heading:
            raise UpstreamCapabilityError(
                f"Text understanding returned an invalid slide: {unit!r}",
                capability="text-understanding",
            )
    return units


def assemble_document(
    styled_slides: Sequence[StyledSlide], writer_factory: WriterFactory
) -> DocumentHandle:
    """Assemble the slides with a writer that is released when the stage ends."""

    with writer_factory() as writer:
        return assemble(styled_slides, writer)


def summarize(deck: Deck, document: DocumentHandle) -> GenerationSummary:
    """Return slide previews the way a results list would show them."""

    previews = []
    for slide in deck:
        joined = " ".join(slide.lines)
        excerpt = " ".join(slide.lines[:2])[:PREVIEW_LIMIT]
        if len(joined) > PREVIEW_LIMIT:
            excerpt += "..."
        previews.append(
            SlidePreview(position=slide.position, heading=slide.heading, excerpt=excerpt)
        )
    return GenerationSummary(
        slide_count=len(deck), file_name=document.file_name, previews=previews
    )


def _to_result(run: PipelineRun) -> PipelineResult:
    completed = run.stage_index if run.status is not RunStatus.COMPLETED else len(STAGES)
    result = PipelineResult(
        status=run.status,
        completed_stages=list(STAGES[: max(completed, 0)]),
        failure=run.failure,
        stopped_at=None if run.status is RunStatus.COMPLETED else run.current_stage,
    )
    if run.status is RunStatus.COMPLETED:
        result.deck = run.deck
        result.document = run.document
        result.summary = run.summary
    return result
