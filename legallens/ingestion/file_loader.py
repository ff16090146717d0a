import base64
import binascii
import mimetypes
from pathlib import Path

from legallens.ingestion.exceptions import ConversionError, FileReadError
from legallens.ingestion.models import CandidateFile

mimetypes.add_type("image/webp", ".webp")


def encode_for_transport(content: bytes) -> str:
    """Encode file bytes as base64 text for the analysis request.

    Raises:
        ConversionError: if the content is empty or cannot be encoded.
    """
    if not content:
        raise ConversionError("File is empty")
    try:
        return base64.b64encode(content).decode("ascii")
    except (TypeError, binascii.Error) as exc:
        raise ConversionError(f"Could not encode file content: {exc}") from exc


class FileLoader:
    """Reads files from disk into submission candidates."""

    FALLBACK_MEDIA_TYPE = "application/octet-stream"

    def load(self, path: Path) -> CandidateFile:
        """Read a file and guess its media type from the extension.

        The guessed type is not validated here; submission rejects it later.

        Raises:
            FileReadError: if the file cannot be read.
        """
        try:
            content = path.read_bytes()
        except OSError as exc:
            raise FileReadError(f"Cannot read {path}: {exc}") from exc
        media_type, _ = mimetypes.guess_type(path.name)
        return CandidateFile(
            name=path.name,
            media_type=media_type or self.FALLBACK_MEDIA_TYPE,
            content=content,
        )
