"""Atomic JSON document writes shared by the file-backed stores."""

import json
import tempfile
from pathlib import Path
from typing import Any


def load_document(path: Path) -> dict[str, Any]:
    """Load a JSON object from path, returning an empty dict if absent."""
    if not path.exists():
        return {}
    with open(path) as f:
        return json.load(f)


def save_document(path: Path, document: dict[str, Any]) -> None:
    """Write a JSON object atomically (temp file then rename)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    temp_fd, temp_path = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
    try:
        with open(temp_fd, "w") as f:
            json.dump(document, f, indent=2, sort_keys=True)

        Path(temp_path).replace(path)
    except Exception:
        Path(temp_path).unlink(missing_ok=True)
        raise
