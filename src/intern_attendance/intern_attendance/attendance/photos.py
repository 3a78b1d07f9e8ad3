from __future__ import annotations

import secrets
import time
from pathlib import Path

from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from ..core.constants import DEFAULT_MAX_PHOTO_BYTES
from ..core.exceptions import ValidationError

ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png"}
ALLOWED_MIMETYPES = {"image/jpeg", "image/jpg", "image/png"}


class PhotoStore:
    """Keeps uploaded attendance photos in a local folder served under /uploads."""

    def __init__(self, folder: str | Path, *, max_bytes: int = DEFAULT_MAX_PHOTO_BYTES, url_prefix: str = "/uploads"):
        self._folder = Path(folder)
        self._max_bytes = int(max_bytes)
        self._url_prefix = url_prefix.rstrip("/")

    @property
    def folder(self) -> Path:
        return self._folder

    def save(self, upload: FileStorage) -> str:
        filename = secure_filename(upload.filename or "")
        ext = Path(filename).suffix.lower()
        if ext not in ALLOWED_EXTENSIONS or (upload.mimetype or "").lower() not in ALLOWED_MIMETYPES:
            raise ValidationError("Hanya file gambar (JPG, PNG) yang diizinkan")

        data = upload.read()
        if not data:
            raise ValidationError("File foto kosong.")
        if len(data) > self._max_bytes:
            raise ValidationError(f"Ukuran foto maksimal {self._max_bytes // (1024 * 1024)}MB")

        self._folder.mkdir(parents=True, exist_ok=True)
        stored = f"absensi-{int(time.time() * 1000)}-{secrets.randbelow(10**9)}{ext}"
        (self._folder / stored).write_bytes(data)
        return f"{self._url_prefix}/{stored}"
