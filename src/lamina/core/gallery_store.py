"""Saved-lamina persistence.

The saved collection lives in a single JSON file (the one storage key of the
application). Its format is an array of::

    {"id": "lamina-1712345678901", "type": "normal" | "improved",
     "imageBase64": "...", "savedAt": 1712345678901}

The store is simple:

- the collection is loaded once per process and shared by every UI session
- every mutation rewrites the entire file, there are no partial updates
- new records are prepended; the gallery view sorts by ``savedAt`` anyway
- mutations hold a process-wide lock and re-read the file first, so saves
  from different sessions (or stores on the same file) are never lost

Loading is best-effort. A missing file is an empty gallery, and a file that
cannot be decoded is logged and treated as an empty gallery too.
"""

from __future__ import annotations

import json
import logging
import threading
import time
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from lamina.core.errors import StorageDecodeError
from lamina.core.models import ArtifactStage, SavedImage

logger = logging.getLogger(__name__)

_COLLECTION_ADAPTER = TypeAdapter(list[SavedImage])


def decode_saved_images(raw: str) -> list[SavedImage]:
    """Decode the stored JSON text into SavedImage records.

    Raises:
        StorageDecodeError: If the text is not a valid saved collection
    """
    try:
        return _COLLECTION_ADAPTER.validate_json(raw)
    except ValidationError as e:
        raise StorageDecodeError(f"Saved lamina collection is invalid: {e}") from e


def encode_saved_images(images: list[SavedImage]) -> str:
    """Encode SavedImage records into the stored JSON text."""
    return json.dumps([image.to_storage() for image in images], indent=2)


def load_saved_images(path: Path) -> list[SavedImage]:
    """Load the saved collection, falling back to an empty one.

    Args:
        path: Path of the collection file

    Returns:
        Saved records in persisted order; empty if the file is absent or
        cannot be decoded
    """
    if not path.exists():
        return []

    try:
        raw = path.read_text(encoding="utf-8")
        return decode_saved_images(raw)
    except (StorageDecodeError, OSError, UnicodeDecodeError) as e:
        logger.warning(f"Failed to load saved laminas from {path}, starting empty: {e}")
        return []


def save_saved_images(path: Path, images: list[SavedImage]) -> None:
    """Persist the full collection, replacing any previous content."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as handle:
        handle.write(encode_saved_images(images))


def add_saved_image(
    images: list[SavedImage],
    image_base64: str,
    image_type: ArtifactStage | str,
    now_ms: int | None = None,
) -> tuple[list[SavedImage], SavedImage]:
    """Create a record and prepend it to the collection.

    The id is derived from the save time. If that id is already taken, a
    numeric suffix is appended so ids stay unique within the collection.

    Args:
        images: Current collection
        image_base64: Encoded image
        image_type: ``normal`` or ``improved``
        now_ms: Save time in milliseconds (defaults to the current time)

    Returns:
        Tuple of (new collection, created record)
    """
    saved_at = now_ms if now_ms is not None else int(time.time() * 1000)
    type_value = image_type.value if isinstance(image_type, ArtifactStage) else image_type

    existing_ids = {image.id for image in images}
    image_id = f"lamina-{saved_at}"
    suffix = 1
    while image_id in existing_ids:
        image_id = f"lamina-{saved_at}-{suffix}"
        suffix += 1

    record = SavedImage(id=image_id, type=type_value, image_base64=image_base64, saved_at=saved_at)
    return [record, *images], record


def remove_saved_image(images: list[SavedImage], image_id: str) -> list[SavedImage]:
    """Return the collection without the record ``image_id``, order preserved."""
    return [image for image in images if image.id != image_id]


def partition_saved_images(
    images: list[SavedImage],
) -> tuple[list[SavedImage], list[SavedImage]]:
    """Split the collection into the two gallery views.

    Returns:
        Tuple of (normal, improved), each sorted newest first
    """
    normal = [image for image in images if image.type == ArtifactStage.NORMAL.value]
    improved = [image for image in images if image.type == ArtifactStage.IMPROVED.value]
    normal.sort(key=lambda image: image.saved_at, reverse=True)
    improved.sort(key=lambda image: image.saved_at, reverse=True)
    return normal, improved


class SavedImageStore:
    """In-memory saved collection kept in sync with its JSON file.

    Every mutator re-reads the file, applies its change and writes the full
    collection back while holding a class-level lock shared by all
    instances. Records written by another store on the same file are kept.

    Attributes:
        path: Path of the collection file
    """

    # Shared by all instances: Gradio runs handlers of different sessions
    # on different worker threads
    _write_lock = threading.Lock()

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._images: list[SavedImage] = []

    @property
    def images(self) -> list[SavedImage]:
        """Saved records in persisted order (a copy)."""
        return list(self._images)

    def load(self) -> list[SavedImage]:
        """Replace the in-memory collection with the persisted one."""
        with SavedImageStore._write_lock:
            self._images = load_saved_images(self.path)
        logger.info(f"Loaded {len(self._images)} saved laminas from {self.path}")
        return self.images

    def save(self) -> None:
        """Write the in-memory collection to disk."""
        with SavedImageStore._write_lock:
            save_saved_images(self.path, self._images)

    def add(
        self, image_base64: str, image_type: ArtifactStage | str, now_ms: int | None = None
    ) -> SavedImage:
        """Prepend a new record and persist the collection."""
        with SavedImageStore._write_lock:
            current = load_saved_images(self.path)
            self._images, record = add_saved_image(current, image_base64, image_type, now_ms)
            save_saved_images(self.path, self._images)
        logger.info(f"Saved lamina {record.id} ({record.type})")
        return record

    def delete(self, image_id: str) -> bool:
        """Remove a record by id and persist the collection.

        Returns:
            True if a record was removed
        """
        with SavedImageStore._write_lock:
            current = load_saved_images(self.path)
            remaining = remove_saved_image(current, image_id)
            self._images = remaining
            if len(remaining) == len(current):
                logger.warning(f"Saved lamina not found: {image_id}")
                return False
            save_saved_images(self.path, remaining)

        logger.info(f"Deleted saved lamina {image_id}")
        return True

    def get(self, image_id: str) -> SavedImage | None:
        """Return the record with ``image_id``, if present."""
        for image in self._images:
            if image.id == image_id:
                return image
        return None

    def galleries(self) -> tuple[list[SavedImage], list[SavedImage]]:
        """Return the (normal, improved) gallery partitions."""
        return partition_saved_images(self._images)

    def __len__(self) -> int:
        return len(self._images)
