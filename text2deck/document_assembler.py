"""Turn styled slides into presentation documents.

:func:`assemble` walks the styled slides and drives a :class:`DocumentWriter`.
The writer is the only part that knows about a concrete file format;
:class:`PptxDocumentWriter` produces PPTX files with python-pptx.
"""

from __future__ import annotations

import io
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, Iterable, Optional

from pptx import Presentation
from pptx.dml.color import RGBColor
from pptx.enum.text import MSO_ANCHOR, PP_ALIGN
from pptx.util import Inches, Pt

from .errors import UpstreamCapabilityError
from .slide_models import SlideKind, StyledSlide
from .templates import normalise_template_bytes

LOGGER = logging.getLogger(__name__)

PPTX_MEDIA_TYPE = (
    "application/vnd.openxmlformats-officedocument.presentationml.presentation"
)
DOCUMENT_AUTHOR = "Text to Presentation Generator"
DOCUMENT_TITLE = "Generated Presentation"
BULLET_GLYPH = "•"


class HorizontalAlign(Enum):
    LEFT = "left"
    CENTER = "center"


class VerticalAnchor(Enum):
    TOP = "top"
    MIDDLE = "middle"


@dataclass(frozen=True, slots=True)
class TextRegion:
    """Rectangle on a 10 x 7.5 inch slide, in inches."""

    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True, slots=True)
class TextStyle:
    font_size: int
    color: str
    font: str
    bold: bool = False
    align: HorizontalAlign = HorizontalAlign.LEFT
    anchor: VerticalAnchor = VerticalAnchor.TOP


TITLE_HEADING_REGION = TextRegion(1.0, 2.5, 8.0, 2.0)
TITLE_BODY_REGION = TextRegion(1.0, 4.5, 8.0, 1.0)
SECTION_HEADING_REGION = TextRegion(1.0, 3.0, 8.0, 1.5)
CONTENT_HEADING_REGION = TextRegion(0.5, 0.5, 9.0, 1.0)
CONTENT_BODY_REGION = TextRegion(0.5, 1.5, 9.0, 5.0)


@dataclass(slots=True)
class DocumentHandle:
    """A finished document that can be streamed or written to disk."""

    payload: bytes
    slide_count: int
    file_name: str
    media_type: str = PPTX_MEDIA_TYPE

    def to_stream(self) -> io.BytesIO:
        buffer = io.BytesIO(self.payload)
        buffer.seek(0)
        return buffer

    def save(self, path: Path) -> Path:
        target = Path(path)
        if target.is_dir():
            target = target / self.file_name
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(self.payload)
        return target


class DocumentWriter(ABC):
    """Capability used by :func:`assemble` to emit slides.

    Writers are context managers so that an abandoned run releases whatever
    the writer holds.
    """

    @abstractmethod
    def start_slide(self) -> None:
        """Begin a new, empty slide; later calls target it."""

    @abstractmethod
    def place_text(self, region: TextRegion, style: TextStyle, text: str) -> None:
        """Place a text block on the current slide."""

    @abstractmethod
    def set_background(self, color: str) -> None:
        """Fill the current slide's background with ``color``."""

    @abstractmethod
    def finalize(self) -> DocumentHandle:
        """Serialise everything written so far."""

    def close(self) -> None:
        """Release resources held by the writer."""

    def __enter__(self) -> "DocumentWriter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


WriterFactory = Callable[[], DocumentWriter]


# ----------------------------------------------------------------------
# Assembly
# ----------------------------------------------------------------------

def assemble(styled_slides: Iterable[StyledSlide], writer: DocumentWriter) -> DocumentHandle:
    """Emit every slide through ``writer`` and return the finished document."""

    for slide in styled_slides:
        render = _RENDERERS.get(slide.kind)
        if render is None:
            raise TypeError(f"Unsupported slide kind: {slide.kind!r}")
        writer.start_slide()
        render(slide, writer)
        writer.set_background(slide.background)
    return writer.finalize()


def _render_title(slide: StyledSlide, writer: DocumentWriter) -> None:
    writer.place_text(
        TITLE_HEADING_REGION,
        TextStyle(
            font_size=36,
            color=slide.title_color,
            font=slide.font,
            bold=True,
            align=HorizontalAlign.CENTER,
            anchor=VerticalAnchor.MIDDLE,
        ),
        slide.heading,
    )
    if slide.body:
        writer.place_text(
            TITLE_BODY_REGION,
            TextStyle(
                font_size=18,
                color=slide.body_color,
                font=slide.font,
                align=HorizontalAlign.CENTER,
            ),
            " ".join(slide.lines),
        )


def _render_section(slide: StyledSlide, writer: DocumentWriter) -> None:
    writer.place_text(
        SECTION_HEADING_REGION,
        TextStyle(
            font_size=32,
            color=slide.title_color,
            font=slide.font,
            bold=True,
            align=HorizontalAlign.CENTER,
            anchor=VerticalAnchor.MIDDLE,
        ),
        slide.heading,
    )


def _render_content(slide: StyledSlide, writer: DocumentWriter) -> None:
    writer.place_text(
        CONTENT_HEADING_REGION,
        TextStyle(font_size=24, color=slide.title_color, font=slide.font, bold=True),
        slide.heading,
    )
    if slide.body:
        text = "\n".join(
            f"{BULLET_GLYPH} {line.text}" if line.bullet else line.text
            for line in slide.body
        )
        writer.place_text(
            CONTENT_BODY_REGION,
            TextStyle(font_size=16, color=slide.body_color, font=slide.font),
            text,
        )


_RENDERERS: Dict[SlideKind, Callable[[StyledSlide, DocumentWriter], None]] = {
    SlideKind.TITLE: _render_title,
    SlideKind.SECTION: _render_section,
    SlideKind.CONTENT: _render_content,
}


# ----------------------------------------------------------------------
# python-pptx writer
# ----------------------------------------------------------------------

_ALIGNMENTS = {
    HorizontalAlign.LEFT: PP_ALIGN.LEFT,
    HorizontalAlign.CENTER: PP_ALIGN.CENTER,
}
_ANCHORS = {
    VerticalAnchor.TOP: MSO_ANCHOR.TOP,
    VerticalAnchor.MIDDLE: MSO_ANCHOR.MIDDLE,
}


class PptxDocumentWriter(DocumentWriter):
    """Write slides into a PPTX presentation, optionally based on a template."""

    def __init__(
        self,
        template_data: Optional[bytes] = None,
        *,
        template_name: str = "template.pptx",
        file_name: Optional[str] = None,
    ) -> None:
        self.file_name = file_name or default_file_name()
        self._presentation = _open_presentation(template_data, template_name)
        self._layout = _blank_layout(self._presentation)
        self._slide = None

    # ------------------------------------------------------------------
    # DocumentWriter API
    # ------------------------------------------------------------------
    def start_slide(self) -> None:
        self._slide = self._require_presentation().slides.add_slide(self._layout)

    def place_text(self, region: TextRegion, style: TextStyle, text: str) -> None:
        shape = self._require_slide().shapes.add_textbox(
            Inches(region.x), Inches(region.y), Inches(region.width), Inches(region.height)
        )
        text_frame = shape.text_frame
        text_frame.word_wrap = True
        text_frame.vertical_anchor = _ANCHORS[style.anchor]
        color = to_rgb(style.color)

        for idx, line in enumerate(text.split("\n")):
            paragraph = text_frame.paragraphs[0] if idx == 0 else text_frame.add_paragraph()
            paragraph.alignment = _ALIGNMENTS[style.align]
            run = paragraph.add_run()
            run.text = line
            font = run.font
            font.size = Pt(style.font_size)
            font.bold = style.bold
            font.name = style.font
            font.color.rgb = color

    def set_background(self, color: str) -> None:
        fill = self._require_slide().background.fill
        fill.solid()
        fill.fore_color.rgb = to_rgb(color)

    def finalize(self) -> DocumentHandle:
        presentation = self._require_presentation()
        presentation.core_properties.author = DOCUMENT_AUTHOR
        presentation.core_properties.title = DOCUMENT_TITLE

        buffer = io.BytesIO()
        presentation.save(buffer)
        handle = DocumentHandle(
            payload=buffer.getvalue(),
            slide_count=len(presentation.slides),
            file_name=self.file_name,
        )
        LOGGER.info("Finalized %s with %d slides", handle.file_name, handle.slide_count)
        return handle

    def close(self) -> None:
        self._slide = None
        self._presentation = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _require_presentation(self):
        if self._presentation is None:
            raise UpstreamCapabilityError(
                "Document writer has already been closed.",
                capability="document-writer",
            )
        return self._presentation

    def _require_slide(self):
        self._require_presentation()
        if self._slide is None:
            raise UpstreamCapabilityError(
                "start_slide() must be called before writing to a slide.",
                capability="document-writer",
            )
        return self._slide


def default_file_name(today: Optional[date] = None) -> str:
    return f"Generated_Presentation_{(today or date.today()).isoformat()}.pptx"


def to_rgb(color: str) -> RGBColor:
    """Convert ``#rgb`` / ``#rrggbb`` strings into :class:`RGBColor`."""

    value = (color or "").strip().lstrip("#")
    if len(value) == 3:
        value = "".join(ch * 2 for ch in value)
    try:
        return RGBColor.from_string(value.upper())
    except ValueError as exc:
        raise UpstreamCapabilityError(
            f"Invalid color value: {color!r}",
            capability="document-writer",
            original_error=exc,
        ) from exc


# ----------------------------------------------------------------------
# Helper functions
# ----------------------------------------------------------------------

def _open_presentation(template_data: Optional[bytes], template_name: str):
    if template_data is None:
        return Presentation()
    try:
        presentation = Presentation(
            io.BytesIO(normalise_template_bytes(template_data, template_name))
        )
    except Exception as exc:
        raise UpstreamCapabilityError(
            f"Unable to open template '{template_name}' for writing.",
            capability="document-writer",
            original_error=exc,
        ) from exc
    _clear_existing_slides(presentation)
    return presentation


def _clear_existing_slides(presentation) -> None:
    for idx in range(len(presentation.slides) - 1, -1, -1):
        slide_id = presentation.slides._sldIdLst[idx].rId
        presentation.part.drop_rel(slide_id)
        del presentation.slides._sldIdLst[idx]


def _blank_layout(presentation):
    layouts = presentation.slide_layouts
    layout = layouts.get_by_name("Blank")
    if layout is not None:
        return layout
    return layouts[len(layouts) - 1]
