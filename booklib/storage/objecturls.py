"""Short-lived local object references for payload bytes.

On a non-native host a payload is handed to viewers as a temporary
``file://`` URI instead of an embedded data URI. References live until
revoked or until the registry is closed.
"""

import mimetypes
import shutil
import tempfile
import threading
import uuid
from pathlib import Path


class ObjectUrlRegistry:
    """Temporary files exposed as ``file://`` URIs."""

    def __init__(self, base_dir: Path | None = None):
        self._base_dir = base_dir
        self._dir: Path | None = None
        self._urls: dict[str, Path] = {}
        self._lock = threading.RLock()

    def _directory(self) -> Path:
        if self._dir is None:
            self._dir = Path(tempfile.mkdtemp(prefix="booklib_objects_", dir=self._base_dir))
        return self._dir

    def create(self, data: bytes, mime_type: str) -> str:
        """Write bytes to a temporary file and return its URI."""
        suffix = mimetypes.guess_extension(mime_type) or ".bin"
        with self._lock:
            path = self._directory() / f"{uuid.uuid4().hex}{suffix}"
            path.write_bytes(data)
            url = path.as_uri()
            self._urls[url] = path
            return url

    def revoke(self, url: str) -> bool:
        """Delete the file behind a URI; returns False for unknown URIs."""
        with self._lock:
            path = self._urls.pop(url, None)
        if path is None:
            return False
        path.unlink(missing_ok=True)
        return True

    def revoke_all(self) -> None:
        """Delete every outstanding reference."""
        with self._lock:
            self._urls.clear()
            if self._dir is not None:
                shutil.rmtree(self._dir, ignore_errors=True)
                self._dir = None

    def __len__(self) -> int:
        return len(self._urls)
