"""File-area capability rooted at a local directory."""

import asyncio
from pathlib import Path


class DirectoryFileArea:
    """Async file operations confined to a root directory.

    Paths are relative to the root; content is written and read as text.
    """

    def __init__(self, root: Path):
        self.root = Path(root)

    def resolve(self, path: str) -> Path:
        """Resolve a relative path inside the root.

        Raises:
            ValueError: If the path escapes the root directory.
        """
        root = self.root.resolve()
        target = (root / path).resolve()
        if target != root and root not in target.parents:
            raise ValueError(f"Path escapes file area: {path}")
        return target

    async def ensure_directory(self, path: str) -> None:
        """Create a directory (and parents); existing directories are fine."""
        target = self.resolve(path)
        await asyncio.to_thread(target.mkdir, parents=True, exist_ok=True)

    async def write_file(
        self, path: str, content: str, encoding: str | None = None
    ) -> None:
        """Write text content, creating parent directories as needed."""
        target = self.resolve(path)

        def _write() -> None:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding=encoding or "utf-8")

        await asyncio.to_thread(_write)

    async def read_file(self, path: str) -> str | bytes:
        """Read file content as text."""
        target = self.resolve(path)
        return await asyncio.to_thread(target.read_text, encoding="utf-8")

    async def delete_file(self, path: str) -> None:
        """Delete a file.

        Raises:
            FileNotFoundError: If the file does not exist.
        """
        target = self.resolve(path)
        await asyncio.to_thread(target.unlink)
