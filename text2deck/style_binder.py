"""Bind template colors and fonts to deck slides."""

from __future__ import annotations

from typing import Tuple

from .errors import InsufficientPaletteError
from .slide_models import Deck, StyledSlide, TemplateDescriptor

BODY_TEXT_COLOR = "#333333"
MIN_PALETTE_SIZE = 2


def bind(deck: Deck, template: TemplateDescriptor) -> Tuple[StyledSlide, ...]:
    """Apply ``template`` to every slide of ``deck``.

    Every slide gets the same styling regardless of its kind: the first
    palette color is the background, the second one colors headings and body
    text uses a fixed dark gray.
    """

    if len(template.palette) < MIN_PALETTE_SIZE:
        raise InsufficientPaletteError(
            f"Template palette needs at least {MIN_PALETTE_SIZE} colors, "
            f"got {len(template.palette)}.",
            details={"palette": list(template.palette)},
        )

    background, title_color = template.palette[0], template.palette[1]
    return tuple(
        StyledSlide(
            slide=slide,
            background=background,
            title_color=title_color,
            body_color=BODY_TEXT_COLOR,
            font=template.font,
        )
        for slide in deck
    )
