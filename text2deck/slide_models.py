"""Data models representing parsed slides, decks and template styling."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple


DEFAULT_PALETTE: Tuple[str, ...] = ("#1f4e79", "#70ad47", "#ffc000", "#c5504b")
DEFAULT_FONT = "Calibri"
DEFAULT_LAYOUTS: Tuple[str, ...] = (
    "Title Slide",
    "Title and Content",
    "Section Header",
    "Two Content",
    "Comparison",
)


class SlideKind(Enum):
    """Structural role of a slide."""

    TITLE = "title"
    SECTION = "section"
    CONTENT = "content"

    @classmethod
    def parse(cls, value: Any) -> "SlideKind":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value or "").strip().lower())
        except ValueError:
            return cls.CONTENT


@dataclass(frozen=True, slots=True)
class BodyLine:
    """A single body line; ``bullet`` marks lines written with a bullet marker."""

    text: str
    bullet: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"text": self.text, "bullet": self.bullet}

    @classmethod
    def from_dict(cls, data: Any) -> "BodyLine":
        if isinstance(data, str):
            return cls(text=data.strip())
        return cls(
            text=str(data.get("text", "")).strip(),
            bullet=bool(data.get("bullet", False)),
        )


@dataclass(frozen=True, slots=True)
class SlideUnit:
    """One slide's structural content prior to numbering and styling."""

    kind: SlideKind
    heading: str
    body: Tuple[BodyLine, ...] = ()

    @property
    def lines(self) -> List[str]:
        return [line.text for line in self.body]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "heading": self.heading,
            "body": [line.to_dict() for line in self.body],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SlideUnit":
        body = tuple(
            line
            for line in (BodyLine.from_dict(item) for item in data.get("body") or [])
            if line.text
        )
        return cls(
            kind=SlideKind.parse(data.get("kind")),
            heading=str(data.get("heading") or data.get("title") or "").strip(),
            body=body,
        )


@dataclass(frozen=True, slots=True)
class DeckSlide:
    """A slide unit with its 1-based position inside the deck."""

    unit: SlideUnit
    position: int

    @property
    def kind(self) -> SlideKind:
        return self.unit.kind

    @property
    def heading(self) -> str:
        return self.unit.heading

    @property
    def body(self) -> Tuple[BodyLine, ...]:
        return self.unit.body

    @property
    def lines(self) -> List[str]:
        return self.unit.lines


@dataclass(frozen=True, slots=True)
class Deck:
    """Ordered, numbered sequence of slides."""

    slides: Tuple[DeckSlide, ...]

    def __len__(self) -> int:
        return len(self.slides)

    def __iter__(self) -> Iterator[DeckSlide]:
        return iter(self.slides)

    def __getitem__(self, index: int) -> DeckSlide:
        return self.slides[index]

    def units(self) -> List[SlideUnit]:
        return [slide.unit for slide in self.slides]


@dataclass(frozen=True, slots=True)
class TemplateDescriptor:
    """Visual identity extracted from an uploaded template."""

    palette: Tuple[str, ...]
    font: str
    layouts: Tuple[str, ...] = ()
    source_name: Optional[str] = None

    @classmethod
    def default(cls, source_name: Optional[str] = None) -> "TemplateDescriptor":
        return cls(
            palette=DEFAULT_PALETTE,
            font=DEFAULT_FONT,
            layouts=DEFAULT_LAYOUTS,
            source_name=source_name,
        )

    @classmethod
    def from_values(
        cls,
        palette: Sequence[str],
        font: str,
        layouts: Sequence[str] = (),
        source_name: Optional[str] = None,
    ) -> "TemplateDescriptor":
        return cls(
            palette=tuple(palette),
            font=font,
            layouts=tuple(layouts),
            source_name=source_name,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "palette": list(self.palette),
            "font": self.font,
            "layouts": list(self.layouts),
            "source_name": self.source_name,
        }


@dataclass(frozen=True, slots=True)
class StyledSlide:
    """A deck slide augmented with template-derived visual attributes."""

    slide: DeckSlide
    background: str
    title_color: str
    body_color: str
    font: str

    @property
    def kind(self) -> SlideKind:
        return self.slide.kind

    @property
    def heading(self) -> str:
        return self.slide.heading

    @property
    def body(self) -> Tuple[BodyLine, ...]:
        return self.slide.body

    @property
    def lines(self) -> List[str]:
        return self.slide.lines

    @property
    def position(self) -> int:
        return self.slide.position


@dataclass(slots=True)
class SlidePreview:
    """Short textual summary of a generated slide."""

    position: int
    heading: str
    excerpt: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "position": self.position,
            "heading": self.heading,
            "excerpt": self.excerpt,
        }


@dataclass(slots=True)
class GenerationSummary:
    """Metadata describing a finished generation run."""

    slide_count: int
    file_name: str
    previews: List[SlidePreview] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "slide_count": self.slide_count,
            "file_name": self.file_name,
            "previews": [preview.to_dict() for preview in self.previews],
        }
