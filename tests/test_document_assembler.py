import io

import pytest

pytest.importorskip("pptx")
from pptx import Presentation
from pptx.dml.color import RGBColor

from text2deck.deck_builder import build
from text2deck.document_assembler import (
    CONTENT_BODY_REGION,
    SECTION_HEADING_REGION,
    TITLE_BODY_REGION,
    TITLE_HEADING_REGION,
    HorizontalAlign,
    PptxDocumentWriter,
    assemble,
    default_file_name,
    to_rgb,
)
from text2deck.errors import UpstreamCapabilityError
from text2deck.segmentation import segment
from text2deck.slide_models import TemplateDescriptor
from text2deck.style_binder import BODY_TEXT_COLOR, bind
from tests.llm_stubs import RecordingWriter

MARKUP = (
    "# Launch plan\nQ3 kickoff\nall hands\n"
    "## Market\nsection body is not rendered\n"
    "### Findings\nIntro line\n- first point\n- second point\n"
    "### Empty detail"
)


@pytest.fixture
def styled_slides():
    template = TemplateDescriptor.from_values(["#1f4e79", "#70ad47"], "Calibri")
    return bind(build(segment(MARKUP)), template)


def test_title_slide_places_heading_and_joined_body(styled_slides):
    writer = RecordingWriter()
    assemble(styled_slides, writer)

    title_ops = writer.slides()[0]
    assert [op[0] for op in title_ops] == ["text", "text", "background"]
    _, region, style, text = title_ops[0]
    assert (region, text) == (TITLE_HEADING_REGION, "Launch plan")
    assert style.font_size == 36 and style.bold
    assert style.align is HorizontalAlign.CENTER
    assert style.color == "#70ad47"
    _, region, style, text = title_ops[1]
    assert (region, text) == (TITLE_BODY_REGION, "Q3 kickoff all hands")
    assert style.color == BODY_TEXT_COLOR


def test_section_slide_ignores_body(styled_slides):
    writer = RecordingWriter()
    assemble(styled_slides, writer)

    section_ops = writer.slides()[1]
    assert len(section_ops) == 2
    assert section_ops[0][1] == SECTION_HEADING_REGION
    assert section_ops[0][3] == "Market"
    assert section_ops[1] == ("background", "#1f4e79")


def test_content_slide_prefixes_bullets_and_breaks_lines(styled_slides):
    writer = RecordingWriter()
    assemble(styled_slides, writer)

    content_ops = writer.slides()[2]
    assert content_ops[0][3] == "Findings"
    assert content_ops[0][2].font_size == 24
    _, region, style, text = content_ops[1]
    assert region == CONTENT_BODY_REGION
    assert text == "Intro line\n• first point\n• second point"
    assert style.font_size == 16


def test_content_slide_without_body_has_heading_only(styled_slides):
    writer = RecordingWriter()
    assemble(styled_slides, writer)

    last_ops = writer.slides()[3]
    assert [op[0] for op in last_ops] == ["text", "background"]


def test_assemble_finalizes_once(styled_slides):
    writer = RecordingWriter()

    handle = assemble(styled_slides, writer)

    assert writer.finalized == 1
    assert handle.slide_count == 4


def test_pptx_writer_produces_readable_presentation(styled_slides):
    with PptxDocumentWriter(file_name="deck.pptx") as writer:
        handle = assemble(styled_slides, writer)

    assert handle.file_name == "deck.pptx"
    prs = Presentation(handle.to_stream())
    assert len(prs.slides) == 4
    assert prs.core_properties.title == "Generated Presentation"

    texts = [
        shape.text_frame.text
        for shape in prs.slides[2].shapes
        if getattr(shape, "has_text_frame", False)
    ]
    assert "Findings" in texts
    assert "Intro line\n• first point\n• second point" in texts

    fill = prs.slides[0].background.fill
    assert fill.fore_color.rgb == RGBColor.from_string("1F4E79")


def test_pptx_writer_clears_slides_of_base_template(styled_slides):
    base = Presentation()
    base.slides.add_slide(base.slide_layouts[0])
    base.slides.add_slide(base.slide_layouts[1])
    buffer = io.BytesIO()
    base.save(buffer)

    with PptxDocumentWriter(buffer.getvalue(), template_name="base.pptx") as writer:
        handle = assemble(styled_slides[:1], writer)

    assert handle.slide_count == 1
    assert len(Presentation(handle.to_stream()).slides) == 1


def test_closed_writer_refuses_work():
    writer = PptxDocumentWriter()
    writer.close()

    with pytest.raises(UpstreamCapabilityError):
        writer.start_slide()


def test_writing_before_start_slide_fails():
    with PptxDocumentWriter() as writer:
        with pytest.raises(UpstreamCapabilityError):
            writer.set_background("#ffffff")


def test_document_handle_save_uses_file_name_for_directories(tmp_path, styled_slides):
    with PptxDocumentWriter(file_name="out.pptx") as writer:
        handle = assemble(styled_slides, writer)

    path = handle.save(tmp_path)

    assert path == tmp_path / "out.pptx"
    assert path.read_bytes() == handle.payload


def test_color_helpers():
    assert to_rgb("#333") == RGBColor.from_string("333333")
    assert to_rgb("c5504b") == RGBColor.from_string("C5504B")
    with pytest.raises(UpstreamCapabilityError):
        to_rgb("not-a-color")
    assert default_file_name().startswith("Generated_Presentation_")
