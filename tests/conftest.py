import io
from pathlib import Path

import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from legallens.storage.backend import LocalStore


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page contract PDF."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "SERVICE AGREEMENT")
    c.drawString(72, 700, "1. Either party may terminate with 30 days notice.")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def store(tmp_path: Path) -> LocalStore:
    """A local store with plenty of room."""
    return LocalStore(tmp_path / "store", quota_bytes=1_000_000)
