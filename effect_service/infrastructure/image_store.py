"""Image Store - local filesystem home for effect images.

Invariants:
    - One file per effect: <root>/<effect_id><ext>
    - save() returns the public reference <url_prefix><effect_id><ext>
    - remove() only ever touches files directly under root (basename of the reference)
    - Filesystem failures surface as ImageStorageError

Design Decisions:
    - Write to a temp file in the same directory, then os.replace: readers never see a
      half-written image
"""

import logging
import os
import tempfile
from pathlib import Path, PurePosixPath

from effect_service.core.domain_types import EffectId
from effect_service.core.errors import ErrorContext, ImageStorageError

logger = logging.getLogger(__name__)


class LocalImageStore:
    """Stores uploaded effect images on disk."""

    def __init__(self, root: str | Path, url_prefix: str) -> None:
        self._root = Path(root)
        self._url_prefix = url_prefix if url_prefix.endswith("/") else url_prefix + "/"

    @property
    def root(self) -> Path:
        return self._root

    def save(self, effect_id: EffectId, filename: str | None, content: bytes) -> str:
        """Persist `content` for `effect_id`, keeping the upload's extension."""
        name = f"{effect_id}{PurePosixPath(filename or '').suffix.lower()}"
        try:
            self._root.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(dir=self._root, delete=False) as tmp:
                tmp.write(content)
            os.replace(tmp.name, self._root / name)
        except OSError as e:
            logger.error(
                f"Failed to store image for effect {effect_id}: {e}",
                extra={"effect_id": str(effect_id), "operation": "image_save"},
            )
            raise ImageStorageError(
                "An error occurred while uploading the image.",
                ErrorContext(effect_id=str(effect_id), operation="image_save"),
            ) from e
        logger.info(
            f"Stored image {name} ({len(content)} bytes)",
            extra={"effect_id": str(effect_id), "operation": "image_save"},
        )
        return f"{self._url_prefix}{name}"

    def remove(self, reference: str) -> bool:
        """Delete the file behind `reference`. False when there was nothing to delete."""
        if not reference:
            return False
        path = self._root / PurePosixPath(reference).name
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.error(
                f"Failed to remove image {path.name}: {e}",
                extra={"operation": "image_remove"},
            )
            raise ImageStorageError(
                "An error occurred while removing the image.",
                ErrorContext(operation="image_remove"),
            ) from e
        logger.info(f"Removed image {path.name}", extra={"operation": "image_remove"})
        return True
