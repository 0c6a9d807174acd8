"""Logical resource lookup for skeleton themes.

Resources are addressed as ``@<namespace>/<relative/path>``, for example
``@skeleton/crud/default``.  Each namespace maps to an ordered list of root
directories; the first root that contains the relative path wins, so
user-supplied skeleton directories registered ahead of the packaged one can
override (or add) individual themes.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from .errors import ResourceNotFoundError


# ---------------------------------------------------------------------------
# Packaged resources
# ---------------------------------------------------------------------------

SKELETON_NAMESPACE = "skeleton"

PACKAGED_SKELETON_DIR = Path(__file__).parent / "skeleton"


# ---------------------------------------------------------------------------
# ResourceLocator
# ---------------------------------------------------------------------------


class ResourceLocator:
    """Resolves ``@namespace/...`` logical paths to filesystem paths."""

    def __init__(self, namespaces: dict[str, Iterable[str | Path]] | None = None) -> None:
        self.namespaces: dict[str, list[Path]] = {}
        for name, roots in (namespaces or {}).items():
            for root in roots:
                self.add_root(name, root)

    @classmethod
    def default(cls, skeleton_dirs: Iterable[str | Path] = ()) -> "ResourceLocator":
        """Locator for the packaged skeletons.

        Each entry of *skeleton_dirs* is an alternative skeleton directory
        (containing ``crud/<theme>/``) searched before the packaged one, in
        the given order.
        """
        locator = cls()
        for skeleton_dir in skeleton_dirs:
            locator.add_root(SKELETON_NAMESPACE, skeleton_dir)
        locator.add_root(SKELETON_NAMESPACE, PACKAGED_SKELETON_DIR)
        return locator

    def add_root(self, namespace: str, root: str | Path) -> None:
        """Append *root* to the search list of *namespace*."""
        self.namespaces.setdefault(namespace, []).append(Path(root))

    # -- Lookup ------------------------------------------------------------

    def locate(self, *logical_paths: str) -> list[Path]:
        """Resolve every logical path, in order.

        Raises:
            ResourceNotFoundError: For the first path that does not exist in
                any root of its namespace.
            ValueError: If a path is malformed or names an unknown namespace.
        """
        return [self.locate_one(p) for p in logical_paths]

    def locate_one(self, logical_path: str) -> Path:
        """Resolve a single logical path."""
        namespace, relative = self._split(logical_path)
        candidates = [root / relative for root in self.namespaces[namespace]]
        for candidate in candidates:
            if candidate.exists():
                return candidate
        raise ResourceNotFoundError(logical_path, candidates)

    def _split(self, logical_path: str) -> tuple[str, str]:
        if not logical_path.startswith("@"):
            raise ValueError(f'A resource name must start with @ ("{logical_path}" given).')
        namespace, _, relative = logical_path[1:].partition("/")
        if namespace not in self.namespaces:
            raise ValueError(f'Unknown resource namespace "{namespace}" in "{logical_path}".')
        if ".." in Path(relative).parts:
            raise ValueError(f'File name "{logical_path}" contains invalid characters (..).')
        return namespace, relative
