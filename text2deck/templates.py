"""Validate uploaded templates and extract their visual identity."""

from __future__ import annotations

import io
import logging
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from pptx import Presentation
from pptx.opc.constants import RELATIONSHIP_TYPE as RT
from pptx.oxml import parse_xml

from .errors import TemplateError
from .slide_models import DEFAULT_FONT, DEFAULT_PALETTE, TemplateDescriptor

LOGGER = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = (".pptx", ".potx")
MAX_TEMPLATE_BYTES = 50 * 1024 * 1024

# Theme slots read into the palette, in palette order. The first entry becomes
# the slide background and the second the heading color.
PALETTE_SLOTS = ("dk2", "accent1", "accent2", "accent3", "accent4", "accent5", "accent6")

_DRAWINGML_NS = {"a": "http://schemas.openxmlformats.org/drawingml/2006/main"}
_CONTENT_TYPES = "[Content_Types].xml"
_TEMPLATE_MAIN_CT = b"application/vnd.openxmlformats-officedocument.presentationml.template.main+xml"
_PRESENTATION_MAIN_CT = b"application/vnd.openxmlformats-officedocument.presentationml.presentation.main+xml"


@dataclass(slots=True)
class TemplateFile:
    """An uploaded template: original file name plus raw bytes."""

    name: str
    data: bytes

    @classmethod
    def from_path(cls, path: Path) -> "TemplateFile":
        path = Path(path)
        return cls(name=path.name, data=path.read_bytes())

    @property
    def extension(self) -> str:
        return Path(self.name).suffix.lower()

    @property
    def size(self) -> int:
        return len(self.data)

    def validate(self, max_bytes: int = MAX_TEMPLATE_BYTES) -> None:
        if self.extension not in ALLOWED_EXTENSIONS:
            raise TemplateError(
                "Please upload a valid PowerPoint file (.pptx or .potx)",
                details={"file_name": self.name},
            )
        if self.size > max_bytes:
            raise TemplateError(
                f"File size must be less than {format_file_size(max_bytes)}",
                details={"file_name": self.name, "size": self.size},
            )


def analyze_template(
    template: TemplateFile, *, max_bytes: int = MAX_TEMPLATE_BYTES
) -> TemplateDescriptor:
    """Return the palette, heading font and layout names of ``template``."""

    template.validate(max_bytes)
    try:
        presentation = Presentation(
            io.BytesIO(normalise_template_bytes(template.data, template.name))
        )
    except Exception as exc:
        raise TemplateError(
            f"Unable to read template '{template.name}': {exc}",
            details={"file_name": template.name},
        ) from exc

    palette: List[str] = []
    font: Optional[str] = None
    theme = _load_theme(presentation)
    if theme is not None:
        palette = _theme_palette(theme)
        font = _theme_major_font(theme)

    if len(palette) < 2:
        LOGGER.warning(
            "Template %s has no usable color scheme; using default palette",
            template.name,
        )
        palette = list(DEFAULT_PALETTE)

    layouts = tuple(layout.name for layout in presentation.slide_layouts)
    descriptor = TemplateDescriptor.from_values(
        palette=palette,
        font=font or DEFAULT_FONT,
        layouts=layouts,
        source_name=template.name,
    )
    LOGGER.info(
        "Analyzed template %s: %d colors, font %s, %d layouts",
        template.name,
        len(descriptor.palette),
        descriptor.font,
        len(descriptor.layouts),
    )
    return descriptor


def format_file_size(size: int) -> str:
    """Return ``size`` in human readable units (``"1.5 MB"``)."""

    if size <= 0:
        return "0 Bytes"
    units = ("Bytes", "KB", "MB", "GB")
    value = float(size)
    unit = units[0]
    for unit in units:
        if value < 1024 or unit == units[-1]:
            break
        value /= 1024
    return f"{round(value, 2):g} {unit}"


def normalise_template_bytes(data: bytes, name: str) -> bytes:
    """Return ``data`` in a form python-pptx accepts.

    ``.potx`` packages declare a template content type for the main part,
    which python-pptx refuses to open. The declaration is rewritten to the
    regular presentation type; all other parts are copied unchanged.
    """

    if Path(name).suffix.lower() != ".potx":
        return data

    source = io.BytesIO(data)
    target = io.BytesIO()
    with zipfile.ZipFile(source) as zin, zipfile.ZipFile(
        target, "w", compression=zipfile.ZIP_DEFLATED
    ) as zout:
        for item in zin.infolist():
            payload = zin.read(item.filename)
            if item.filename == _CONTENT_TYPES:
                payload = payload.replace(_TEMPLATE_MAIN_CT, _PRESENTATION_MAIN_CT)
            zout.writestr(item, payload)
    return target.getvalue()


# ----------------------------------------------------------------------
# Helper functions
# ----------------------------------------------------------------------

def _load_theme(presentation):
    try:
        theme_part = presentation.slide_master.part.part_related_by(RT.THEME)
    except KeyError:
        return None
    return parse_xml(theme_part.blob)


def _theme_palette(theme) -> List[str]:
    palette: List[str] = []
    for slot in PALETTE_SLOTS:
        element = theme.find(f".//a:clrScheme/a:{slot}", _DRAWINGML_NS)
        if element is None:
            continue
        color = _element_color(element)
        if color:
            palette.append(color)
    return palette


def _element_color(element) -> Optional[str]:
    srgb = element.find("a:srgbClr", _DRAWINGML_NS)
    if srgb is not None and srgb.get("val"):
        return f"#{srgb.get('val').lower()}"
    system = element.find("a:sysClr", _DRAWINGML_NS)
    if system is not None and system.get("lastClr"):
        return f"#{system.get('lastClr').lower()}"
    return None


def _theme_major_font(theme) -> Optional[str]:
    latin = theme.find(".//a:fontScheme/a:majorFont/a:latin", _DRAWINGML_NS)
    if latin is None:
        return None
    typeface = (latin.get("typeface") or "").strip()
    # "+mj-lt" style references point back into the theme itself
    if not typeface or typeface.startswith("+"):
        return None
    return typeface
