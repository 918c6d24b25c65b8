"""
Pytest configuration and shared test helpers for backend tests.
"""
import io
import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

BACKEND_DIR = Path(__file__).resolve().parent.parent
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

import pytest
from PIL import Image

# Shared TestClient fixture so tests can use in-process requests without a running server.
from fastapi.testclient import TestClient
from server import app

from genia.models.generation import Section


class FakeContentProvider:
    """Content provider double recording every call in order."""

    def __init__(self, sections=None, image=None, fail_write_at=None, fail_images=False):
        self.sections = sections if sections is not None else [
            Section(title=f"Chapitre {i + 1}", brief=f"Brief {i + 1}", image_prompt=f"Image {i + 1}")
            for i in range(3)
        ]
        self.image = image
        self.fail_write_at = fail_write_at
        self.fail_images = fail_images
        self.calls = []
        self.outline_args = None

    async def outline(self, subject, kind, language, count, style=None):
        self.calls.append(("outline", subject))
        self.outline_args = {
            "subject": subject,
            "kind": kind,
            "language": language,
            "count": count,
            "style": style,
        }
        return list(self.sections)

    async def write_section(self, title, brief, language, depth):
        index = sum(1 for name, _ in self.calls if name == "write")
        self.calls.append(("write", title))
        if self.fail_write_at is not None and index == self.fail_write_at:
            raise RuntimeError("provider rejected the request")
        return f"{title}. " + ("Lorem ipsum dolor sit amet, consectetur adipiscing elit. " * 40)

    async def render_image(self, prompt):
        self.calls.append(("image", prompt))
        if self.fail_images:
            raise RuntimeError("image quota exceeded")
        return self.image


def make_png(width=16, height=9, color="red") -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), color).save(buffer, "PNG")
    return buffer.getvalue()


@pytest.fixture
def png_bytes():
    return make_png()


@pytest.fixture
def fake_provider(png_bytes):
    return FakeContentProvider(image=png_bytes)


@pytest.fixture
def store():
    """Session store double: nothing stored, every write succeeds."""
    mock_store = MagicMock()
    mock_store.load = AsyncMock(return_value=None)
    mock_store.save = AsyncMock(return_value=True)
    return mock_store


@pytest.fixture
def client():
    """Return a TestClient for the main FastAPI app (server:app). Use for unit-style API tests."""
    return TestClient(app)
