import base64
from pathlib import Path

import pytest

from legallens.ingestion.exceptions import ConversionError, FileReadError
from legallens.ingestion.file_loader import FileLoader, encode_for_transport


class TestEncodeForTransport:
    def test_encodes_base64(self) -> None:
        assert encode_for_transport(b"%PDF") == base64.b64encode(b"%PDF").decode("ascii")

    def test_empty_content_raises(self) -> None:
        with pytest.raises(ConversionError, match="File is empty"):
            encode_for_transport(b"")


class TestFileLoader:
    def test_loads_pdf(self, tmp_path: Path, sample_pdf_bytes: bytes) -> None:
        path = tmp_path / "contract.pdf"
        path.write_bytes(sample_pdf_bytes)

        candidate = FileLoader().load(path)

        assert candidate.name == "contract.pdf"
        assert candidate.media_type == "application/pdf"
        assert candidate.content == sample_pdf_bytes

    @pytest.mark.parametrize(
        ("file_name", "media_type"),
        [("scan.png", "image/png"), ("scan.jpg", "image/jpeg"), ("scan.webp", "image/webp")],
    )
    def test_guesses_image_types(self, tmp_path: Path, file_name: str, media_type: str) -> None:
        path = tmp_path / file_name
        path.write_bytes(b"\x00\x01")
        assert FileLoader().load(path).media_type == media_type

    def test_unknown_extension_falls_back(self, tmp_path: Path) -> None:
        path = tmp_path / "blob.unknownext"
        path.write_bytes(b"data")
        assert FileLoader().load(path).media_type == FileLoader.FALLBACK_MEDIA_TYPE

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileReadError, match="Cannot read"):
            FileLoader().load(tmp_path / "missing.pdf")
