"""Stubs standing in for LLM clients and document writers in tests."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Tuple

from LLM_API.data_classes import StructuredOutputResponse

from text2deck.document_assembler import DocumentHandle, DocumentWriter
from text2deck.errors import UpstreamCapabilityError


class StubStructuredLLM:
    """LLM stub that answers every structured output request with ``payload``."""

    model_name = "stub-structured"

    def __init__(
        self,
        *,
        payload: Optional[Dict[str, Any]] = None,
        error: Optional[str] = None,
        text: Optional[str] = None,
    ) -> None:
        self.payload = payload
        self.error = error
        self.text = text
        self.requests: List[Any] = []

    def generate_structured_output(self, request: Any) -> StructuredOutputResponse:
        self.requests.append(request)
        if self.error:
            return StructuredOutputResponse(model_used=self.model_name, error=self.error)
        text = self.text
        if text is None and self.payload is not None:
            text = json.dumps(self.payload, ensure_ascii=False)
        return StructuredOutputResponse(
            text=text or "",
            parsed_output=self.payload,
            model_used=self.model_name,
        )


class RecordingUnderstanding:
    """Text-understanding capability that records calls and returns fixed units."""

    def __init__(self, units=None, error: Optional[Exception] = None) -> None:
        self.units = list(units or [])
        self.error = error
        self.calls: List[Tuple[str, str]] = []

    def __call__(self, text: str, guidance: str = ""):
        self.calls.append((text, guidance))
        if self.error is not None:
            raise self.error
        return list(self.units)


class RecordingWriter(DocumentWriter):
    """Document writer that keeps every operation in memory."""

    def __init__(self, *, fail_on_text: bool = False) -> None:
        self.fail_on_text = fail_on_text
        self.operations: List[Tuple[Any, ...]] = []
        self.finalized = 0
        self.closed = False

    def start_slide(self) -> None:
        self.operations.append(("start_slide",))

    def place_text(self, region, style, text: str) -> None:
        if self.fail_on_text:
            raise UpstreamCapabilityError("writer failure", capability="document-writer")
        self.operations.append(("text", region, style, text))

    def set_background(self, color: str) -> None:
        self.operations.append(("background", color))

    def finalize(self) -> DocumentHandle:
        self.finalized += 1
        return DocumentHandle(
            payload=b"recorded",
            slide_count=len(self.slides()),
            file_name="recorded.pptx",
        )

    def close(self) -> None:
        self.closed = True

    def slides(self) -> List[List[Tuple[Any, ...]]]:
        grouped: List[List[Tuple[Any, ...]]] = []
        for operation in self.operations:
            if operation[0] == "start_slide":
                grouped.append([])
            else:
                grouped[-1].append(operation)
        return grouped

    def texts(self) -> List[str]:
        return [operation[3] for operation in self.operations if operation[0] == "text"]


class WriterFactory:
    """Callable factory that remembers the writers it created."""

    def __init__(self, **writer_kwargs: Any) -> None:
        self.writer_kwargs = writer_kwargs
        self.created: List[RecordingWriter] = []

    def __call__(self) -> RecordingWriter:
        writer = RecordingWriter(**self.writer_kwargs)
        self.created.append(writer)
        return writer


__all__ = ["StubStructuredLLM", "RecordingUnderstanding", "RecordingWriter", "WriterFactory"]
