"""Image blob → base64 data URI."""
import base64
from dataclasses import dataclass
from pathlib import Path

from scriptscan.errors import EncodingError


@dataclass(frozen=True)
class ImageBlob:
    """An image handed over by the image source: in-memory bytes or a file on disk."""

    mime_type: str
    source: bytes | Path

    @property
    def size(self) -> int:
        match self.source:
            case bytes() as data:
                return len(data)
            case Path() as path:
                try:
                    return path.stat().st_size
                except OSError:
                    return 0

    def read(self) -> bytes:
        match self.source:
            case bytes() as data:
                return data
            case Path() as path:
                return path.read_bytes()


def encode_data_uri(blob: ImageBlob) -> str:
    """Return ``data:<mime>;base64,<payload>``. Raises EncodingError if the blob can't be read."""
    try:
        data = blob.read()
    except OSError as exc:
        raise EncodingError(f"Failed to read image: {exc}") from exc
    payload = base64.standard_b64encode(data).decode()
    return f"data:{blob.mime_type};base64,{payload}"
