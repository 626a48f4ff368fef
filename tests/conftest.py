"""Pytest configuration and fixtures."""

import base64
import os
from types import SimpleNamespace
from typing import Any, Callable, Generator

import pytest
from fastapi.testclient import TestClient

# Settings are validated at import time; tests never reach the real API.
os.environ.setdefault("GEMINI_API_KEY", "test-key")

from app.backend.main import app  # noqa: E402
from app.backend.services.ai import AIService, get_ai_service  # noqa: E402
from app.backend.services.pdf_service import get_pdf_service  # noqa: E402


class FakeCompletions:
    """Stands in for ``client.chat.completions`` and records each call."""

    def __init__(self, content: str | None = None, error: Exception | None = None):
        self.content = content
        self.error = error
        self.calls: list[dict[str, Any]] = []

    async def create(self, **kwargs: Any) -> SimpleNamespace:
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])

    @property
    def last_prompt(self) -> str:
        return self.calls[-1]["messages"][-1]["content"]


class FakeOpenAIClient:
    """Minimal AsyncOpenAI replacement exposing ``chat.completions``."""

    def __init__(self, content: str | None = None, error: Exception | None = None):
        self.completions = FakeCompletions(content=content, error=error)
        self.chat = SimpleNamespace(completions=self.completions)


class FakePDFService:
    """PDF service returning fixed text, or raising a fixed error."""

    def __init__(self, text: str = "", error: Exception | None = None):
        self.text = text
        self.error = error
        self.received: list[bytes] = []

    def extract_text(self, file_bytes: bytes) -> str:
        self.received.append(file_bytes)
        if self.error is not None:
            raise self.error
        return self.text


def make_ai_service(client: FakeOpenAIClient) -> AIService:
    """Build an AIService wired to a fake client."""
    return AIService(
        api_key="test-key",
        model="gemini-test",
        base_url="https://example.test/v1beta/openai/",
        timeout=5.0,
        client=client,
    )


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """Create a test client for the FastAPI application."""
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def gemini_service() -> Callable[..., tuple[AIService, FakeOpenAIClient]]:
    """Factory returning an AIService and the fake client behind it."""

    def _build(
        content: str | None = None, error: Exception | None = None
    ) -> tuple[AIService, FakeOpenAIClient]:
        fake = FakeOpenAIClient(content=content, error=error)
        return make_ai_service(fake), fake

    return _build


@pytest.fixture
def pdf_service() -> FakePDFService:
    """Fake PDF service installed as the endpoint's dependency."""
    service = FakePDFService(text="A1 Widget PC 3 10,00 30,00")
    app.dependency_overrides[get_pdf_service] = lambda: service
    return service


@pytest.fixture
def ai_client() -> FakeOpenAIClient:
    """Fake Gemini client installed behind the endpoint's AI service."""
    fake = FakeOpenAIClient(content="[]")
    service = make_ai_service(fake)
    app.dependency_overrides[get_ai_service] = lambda: service
    return fake


@pytest.fixture
def dummy_pdf_data() -> str:
    """Base64 payload for the literal bytes b'dummy'."""
    return base64.b64encode(b"dummy").decode("ascii")


@pytest.fixture
def sample_pdf_bytes() -> bytes:
    """
    Create a minimal valid PDF for testing.

    One page, Helvetica, with the text "A1 Widget PC 3". The xref
    offsets match the byte layout below.
    """
    body = (
        b"%PDF-1.4\n"
        b"1 0 obj\n<< /Type /Catalog /Pages 2 0 R >>\nendobj\n"
        b"2 0 obj\n<< /Type /Pages /Kids [3 0 R] /Count 1 >>\nendobj\n"
        b"3 0 obj\n<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
        b"/Resources << /Font << /F1 5 0 R >> >> /Contents 4 0 R >>\nendobj\n"
        b"4 0 obj\n<< /Length 46 >>\nstream\n"
        b"BT\n/F1 12 Tf\n100 700 Td\n(A1 Widget PC 3) Tj\nET"
        b"\nendstream\nendobj\n"
        b"5 0 obj\n<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>\nendobj\n"
    )
    xref = (
        b"xref\n0 6\n"
        b"0000000000 65535 f \n"
        b"0000000009 00000 n \n"
        b"0000000058 00000 n \n"
        b"0000000115 00000 n \n"
        b"0000000241 00000 n \n"
        b"0000000337 00000 n \n"
        b"trailer\n<< /Size 6 /Root 1 0 R >>\n"
        b"startxref\n%d\n%%%%EOF\n" % len(body)
    )
    return body + xref


@pytest.fixture
def invalid_file_bytes() -> bytes:
    """Create invalid (non-PDF) file bytes for testing."""
    return b"This is not a PDF file"
