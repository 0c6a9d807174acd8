"""Exceptions raised by the CRUD scaffolder.

Every failure during a ``generate`` call is fatal for that call.  The
generator never catches these itself except for the theme fallback in
:meth:`~crudgen.scaffolder.generator.CrudGenerator.locate_resource`.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path


class GeneratorError(Exception):
    """Base class for all scaffolder errors."""


class ConfigurationError(GeneratorError):
    """Raised when entity metadata cannot be scaffolded (e.g. bad identifier)."""


class AlreadyExistsError(GeneratorError):
    """Raised when the controller target file is already on disk."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        super().__init__(
            f"Unable to generate the controller as it already exists: {self.path}"
        )


class ResourceNotFoundError(GeneratorError):
    """Raised when a logical resource or skeleton template cannot be found."""

    def __init__(self, logical_path: str, searched: Iterable[str | Path] = ()) -> None:
        self.logical_path = logical_path
        self.searched = [str(p) for p in searched]
        message = f'Unable to find resource "{logical_path}"'
        if self.searched:
            message += f" (looked in: {', '.join(self.searched)})"
        super().__init__(message)
