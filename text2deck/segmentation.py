"""Split raw prose into typed slide units.

Two strategies are provided. :func:`segment` understands a small markdown-like
markup (``#``, ``##`` and ``###`` headings plus ``-`` bullets). When the text
carries no headings at all, :func:`fallback` cuts it into blank-line separated
paragraphs instead. :func:`parse_text_to_slides` combines both.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Tuple

from .slide_models import BodyLine, SlideKind, SlideUnit

LOGGER = logging.getLogger(__name__)

FALLBACK_TITLE = "Presentation"
BULLET_MARKER = "- "

HEADING_MARKERS: Tuple[Tuple[str, SlideKind], ...] = (
    ("# ", SlideKind.TITLE),
    ("## ", SlideKind.SECTION),
    ("### ", SlideKind.CONTENT),
)

_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")


def segment(text: str) -> List[SlideUnit]:
    """Return the slide units described by heading/bullet markup in ``text``."""

    slides: List[SlideUnit] = []
    kind: Optional[SlideKind] = None
    heading = ""
    body: List[BodyLine] = []

    for raw_line in _normalise_newlines(text).split("\n"):
        line = raw_line.strip()
        if not line:
            continue

        marker = _match_heading(line)
        if marker is not None:
            if kind is not None:
                slides.append(SlideUnit(kind=kind, heading=heading, body=tuple(body)))
            kind, heading = marker
            body = []
            continue

        if kind is None:
            continue
        if line.startswith(BULLET_MARKER):
            item = line[len(BULLET_MARKER):].strip()
            if item:
                body.append(BodyLine(text=item, bullet=True))
        else:
            body.append(BodyLine(text=line))

    if kind is not None:
        slides.append(SlideUnit(kind=kind, heading=heading, body=tuple(body)))
    return slides


def fallback(text: str) -> List[SlideUnit]:
    """Build slides from blank-line separated paragraphs.

    The first paragraph is considered covered by the generic title slide and
    is skipped. Content slides are labelled ``Slide N`` where ``N`` is the
    paragraph's 1-based index, so the first content slide is ``Slide 2``.
    """

    paragraphs = [
        paragraph.strip()
        for paragraph in _PARAGRAPH_BREAK.split(_normalise_newlines(text))
        if paragraph.strip()
    ]
    slides = [SlideUnit(kind=SlideKind.TITLE, heading=FALLBACK_TITLE)]
    for index, paragraph in enumerate(paragraphs[1:], start=2):
        slides.append(
            SlideUnit(
                kind=SlideKind.CONTENT,
                heading=f"Slide {index}",
                body=(BodyLine(text=paragraph),),
            )
        )
    return slides


def parse_text_to_slides(text: str, guidance: str = "") -> List[SlideUnit]:
    """Segment ``text`` by markup, falling back to paragraphs when none is found."""

    if guidance:
        LOGGER.debug("Guidance is not used by markup segmentation: %s", guidance)
    slides = segment(text)
    if slides:
        return slides
    LOGGER.debug("No heading markers found; using paragraph segmentation")
    return fallback(text)


def _match_heading(line: str) -> Optional[Tuple[SlideKind, str]]:
    for marker, kind in HEADING_MARKERS:
        if line.startswith(marker):
            heading = line[len(marker):].strip()
            if heading:
                return kind, heading
            return None
    return None


def _normalise_newlines(text: str) -> str:
    return (text or "").replace("\r\n", "\n").replace("\r", "\n")
