"""Assign deck positions to parsed slide units."""

from __future__ import annotations

from typing import Sequence

from .errors import EmptyDeckError
from .slide_models import Deck, DeckSlide, SlideUnit


def build(units: Sequence[SlideUnit]) -> Deck:
    """Return a :class:`Deck` numbering ``units`` from 1 in the given order."""

    if not units:
        raise EmptyDeckError("Cannot build a deck without slides.")
    return Deck(
        slides=tuple(
            DeckSlide(unit=unit, position=index)
            for index, unit in enumerate(units, start=1)
        )
    )
