from __future__ import annotations

import logging
import os
import secrets
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from werkzeug.datastructures import FileStorage

from ..core.constants import ALLOWED_IMAGE_EXTENSIONS
from ..core.exceptions import StorageError, ValidationError

logger = logging.getLogger(__name__)

INVALID_UPLOAD_MESSAGE = "Chưa gửi ảnh hoặc định dạng ảnh không hợp lệ"


class LocalImageStorage:
    """Saves uploaded images under one folder and returns the stored filename.

    Stored names are ``<epoch-ms>-<random><ext>``; the client's name is only used
    for its extension.
    """

    def __init__(self, upload_folder: str | Path, *, subfolder: Optional[str] = None):
        root = Path(upload_folder)
        self._folder = root / subfolder if subfolder else root
        self._subfolder = subfolder

    @property
    def folder(self) -> Path:
        return self._folder

    def _extension(self, file: FileStorage) -> str:
        ext = os.path.splitext(file.filename or "")[1].lower()
        if ext not in ALLOWED_IMAGE_EXTENSIONS:
            raise ValidationError(INVALID_UPLOAD_MESSAGE)
        return ext

    def save(self, file: Optional[FileStorage]) -> str:
        if file is None or not file.filename:
            raise ValidationError(INVALID_UPLOAD_MESSAGE)

        ext = self._extension(file)
        name = f"{int(time.time() * 1000)}-{secrets.randbelow(10**9)}{ext}"

        try:
            self._folder.mkdir(parents=True, exist_ok=True)
            file.save(str(self._folder / name))
        except OSError as e:
            logger.error("could not store upload %s: %s", name, e)
            raise StorageError("Không lưu được ảnh") from e

        logger.info("stored upload %s", name)
        return f"{self._subfolder}/{name}" if self._subfolder else name

    def save_optional(self, file: Optional[FileStorage]) -> Optional[str]:
        """Like save(), but an absent file field means "no image"."""

        if file is None or not file.filename:
            return None
        return self.save(file)

    def discard(self, name: Optional[str]) -> None:
        """Remove a file returned by save(); missing files are ignored."""

        if not name:
            return
        path = self._folder / Path(name).name
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("could not remove upload %s: %s", name, e)
            return
        logger.info("removed upload %s", name)

    @contextmanager
    def stored(self, file: Optional[FileStorage]) -> Iterator[Optional[str]]:
        """Save ``file`` for the duration of a write; delete it if the write fails."""

        name = self.save_optional(file)
        try:
            yield name
        except Exception:
            self.discard(name)
            raise
