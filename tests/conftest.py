"""
Test Configuration and Fixtures
"""
import os
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("OPENAI_API_KEY", "")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from core.config import settings
from dependencies.services import get_document_service
from main import app
from qa_services.documents import DocumentService
from qa_services.llm import LLMService
from qa_services.pdf_processor import PDFProcessor
from qa_services.store import DocumentStore


def make_pdf(*pages: str) -> bytes:
    """Build a minimal PDF with one line of Helvetica text per page."""
    count = len(pages)
    kids = " ".join(f"{4 + 2 * i} 0 R" for i in range(count))
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        f"<< /Type /Pages /Kids [{kids}] /Count {count} >>".encode(),
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]
    for i, text in enumerate(pages):
        escaped = text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")
        stream = f"BT /F1 12 Tf 72 720 Td ({escaped}) Tj ET".encode("latin-1")
        objects.append(
            f"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
            f"/Resources << /Font << /F1 3 0 R >> >> /Contents {5 + 2 * i} 0 R >>".encode()
        )
        objects.append(b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream")

    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % number + body + b"\nendobj\n"
    xref_offset = len(out)
    out += b"xref\n0 %d\n" % (len(objects) + 1)
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += b"%010d 00000 n \n" % offset
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (len(objects) + 1, xref_offset)
    return bytes(out)


class FakeCompletions:
    """Stands in for ``client.chat.completions`` and records every call."""

    def __init__(self):
        self.calls = []
        self.content = "The answer."
        self.no_choices = False
        self.error = None

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        if self.no_choices:
            return SimpleNamespace(choices=[])
        message = SimpleNamespace(role="assistant", content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(index=0, message=message)])


class FakeOpenAI:
    def __init__(self):
        self.completions = FakeCompletions()
        self.chat = SimpleNamespace(completions=self.completions)


@pytest.fixture
def store(tmp_path):
    return DocumentStore(str(tmp_path / "data"))


@pytest.fixture
def fake_openai():
    return FakeOpenAI()


@pytest.fixture
def completions(fake_openai):
    return fake_openai.completions


@pytest.fixture
def service(store, fake_openai):
    llm_service = LLMService(model="gpt-4", client=fake_openai)
    return DocumentService(store, PDFProcessor(), llm_service)


@pytest.fixture
def client(service, monkeypatch):
    """Test client wired to a temporary slot store and a fake completion client."""
    monkeypatch.setattr(settings, "AWAIT_EXTRACTION", True)
    app.dependency_overrides[get_document_service] = lambda: service
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def upload(client):
    def _upload(data: bytes, filename: str = "report.pdf", slot: str = None):
        params = {"slot": slot} if slot is not None else None
        return client.post(
            "/upload",
            files={"pdf": (filename, data, "application/pdf")},
            params=params,
        )
    return _upload
