"""Image encoding helpers.

Images cross every boundary of the application as base64 text. These helpers
convert between that representation, files on disk, and PIL images for
display.
"""

from __future__ import annotations

import base64
import binascii
import logging
import mimetypes
from datetime import datetime
from io import BytesIO
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from lamina.core.models import GeneratedArtifact, TemplateAsset

logger = logging.getLogger(__name__)

# File extensions used when exporting artifacts
_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
}


def encode_bytes(data: bytes) -> str:
    """Encode raw image bytes as base64 text."""
    return base64.b64encode(data).decode("ascii")


def decode_base64(image_base64: str) -> bytes:
    """Decode base64 text back to raw bytes.

    Raises:
        ValueError: If the text is not valid base64
    """
    try:
        return base64.b64decode(image_base64, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"Invalid base64 image data: {e}") from e


def detect_mime_type(data: bytes, filename: str = "") -> str | None:
    """Detect an image's mime type from its content, then from its name.

    Returns:
        The mime type, or None if the data is not a recognisable image
    """
    try:
        with Image.open(BytesIO(data)) as image:
            mime_type = Image.MIME.get(image.format or "")
            if mime_type:
                return mime_type
    except (UnidentifiedImageError, OSError):
        logger.debug(f"Pillow could not identify {filename or 'image data'}")

    guessed, _ = mimetypes.guess_type(filename)
    if guessed and guessed.startswith("image/"):
        return guessed
    return None


def read_template_file(path: str | Path) -> TemplateAsset:
    """Read an uploaded template image fully into memory and encode it.

    Args:
        path: Path of the uploaded file

    Returns:
        TemplateAsset with base64 content and detected mime type

    Raises:
        ValueError: If the file is not an image
    """
    path = Path(path)
    data = path.read_bytes()
    mime_type = detect_mime_type(data, path.name)
    if mime_type is None:
        raise ValueError(f"{path.name} is not a supported image file")

    logger.info(f"Loaded template {path.name} ({mime_type}, {len(data)} bytes)")
    return TemplateAsset(image_base64=encode_bytes(data), mime_type=mime_type, filename=path.name)


def decode_image(image_base64: str) -> Image.Image:
    """Decode base64 image data into a PIL image for display."""
    image = Image.open(BytesIO(decode_base64(image_base64)))
    image.load()
    return image


def export_artifact(
    artifact: GeneratedArtifact, outputs_dir: Path, name: str, now: datetime | None = None
) -> Path:
    """Write an artifact to disk so it can be downloaded.

    Args:
        artifact: Artifact to export
        outputs_dir: Target directory (created if missing)
        name: File name stem, e.g. ``lamina-generada``
        now: Timestamp for the file name (defaults to the current time)

    Returns:
        Path of the written file
    """
    timestamp = (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
    extension = _EXTENSIONS.get(artifact.mime_type, ".jpg")
    outputs_dir.mkdir(parents=True, exist_ok=True)

    path = outputs_dir / f"{name}-{timestamp}{extension}"
    path.write_bytes(decode_base64(artifact.image_base64))
    logger.info(f"Exported {artifact.stage.value} lamina to {path}")
    return path


def prune_exports(outputs_dir: Path, keep: int, prefix: str = "lamina-") -> list[Path]:
    """Remove the oldest exported files so at most ``keep`` remain.

    Only files whose name starts with ``prefix`` are considered.

    Returns:
        Paths that were removed
    """
    if not outputs_dir.is_dir():
        return []

    exports = sorted(
        (path for path in outputs_dir.iterdir() if path.is_file() and path.name.startswith(prefix)),
        key=lambda path: (path.stat().st_mtime, path.name),
        reverse=True,
    )
    removed = []
    for path in exports[keep:]:
        try:
            path.unlink()
        except FileNotFoundError:
            # Removed by a concurrent prune
            continue
        removed.append(path)

    if removed:
        logger.info(f"Removed {len(removed)} old exported laminas from {outputs_dir}")
    return removed
