"""Thin filesystem abstraction used by the CRUD generator."""

from __future__ import annotations

from pathlib import Path


class Filesystem:
    """Creates directories and writes rendered files.

    OS errors (permissions, full disk, ...) are not caught here and reach the
    caller unchanged.
    """

    def exists(self, path: str | Path) -> bool:
        return Path(path).exists()

    def mkdir(self, path: str | Path, mode: int = 0o777) -> Path:
        """Create *path* and any missing parents.  No-op if it exists."""
        dir_path = Path(path)
        dir_path.mkdir(mode=mode, parents=True, exist_ok=True)
        return dir_path

    def write(self, path: str | Path, content: str) -> Path:
        """Write *content* to *path*, creating parent dirs and overwriting."""
        out = Path(path)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(content, encoding="utf-8")
        return out
