import io
from typing import Any, List, Optional, Tuple

import pikepdf
import pytest

from pdf_compressor.processor import InputArtifact


def make_pdf(pages: int = 3) -> bytes:
    """Build a PDF whose page i has width 200+i and content "% page i"."""
    pdf = pikepdf.Pdf.new()
    for i in range(pages):
        page = pdf.add_blank_page(page_size=(200 + i, 300))
        page.obj[pikepdf.Name.Contents] = pdf.make_stream(f"% page {i}\n".encode())
    buf = io.BytesIO()
    pdf.save(buf)
    pdf.close()
    return buf.getvalue()


def page_markers(data: bytes) -> List[Tuple[bytes, float]]:
    with pikepdf.Pdf.open(io.BytesIO(data)) as pdf:
        return [
            (page.obj.Contents.read_bytes(), float(page.obj.MediaBox[2]))
            for page in pdf.pages
        ]


class SpyModel:
    """DocumentModel double that records every call."""

    def __init__(self, pages: int = 3, fail_on: Optional[str] = None) -> None:
        self.pages = pages
        self.fail_on = fail_on
        self.calls: List[Tuple[str, Any]] = []
        self.saved_with = None

    def _step(self, name: str, arg: Any = None) -> None:
        self.calls.append((name, arg))
        if self.fail_on == name:
            raise RuntimeError(f"{name} exploded")

    def names(self) -> List[str]:
        return [name for name, _ in self.calls]

    def load(self, data: bytes) -> Any:
        self._step("load", len(data))
        return {"role": "src"}

    def create(self) -> Any:
        self._step("create")
        return {"role": "dst", "pages": 0}

    def copy_pages(self, src: Any, dst: Any, objects_per_tick: int) -> int:
        self._step("copy_pages", objects_per_tick)
        dst["pages"] = self.pages
        return self.pages

    def add_blank_page(self, doc: Any) -> None:
        self._step("add_blank_page")
        doc["pages"] += 1

    def save(self, doc: Any, settings) -> bytes:
        self._step("save", settings)
        self.saved_with = settings
        return b"%PDF-1.7 spy"

    def close(self, doc: Any) -> None:
        self.calls.append(("close", doc["role"]))


@pytest.fixture
def pdf3() -> bytes:
    return make_pdf(3)


@pytest.fixture
def pdf_artifact(pdf3: bytes) -> InputArtifact:
    return InputArtifact(media_type="application/pdf", data=pdf3, filename="three.pdf")
