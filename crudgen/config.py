"""crudgen configuration.

Typed settings for the CRUD generator.  All settings use Pydantic v2 models
so they can be validated at construction time and serialised to/from JSON,
YAML or environment variables without boiler-plate.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

from crudgen.scaffolder.models import ConfigFormat


_TRUTHY = {"1", "true", "yes", "on"}


class GeneratorConfig(BaseModel):
    """Settings shared by every ``generate`` call of one generator.

    Instances are typically created once by the CLI entry point (from flags,
    a config file and the environment) and handed to
    :meth:`crudgen.scaffolder.generator.CrudGenerator.from_config`.
    """

    skeleton_theme: str = Field(default="default", description="Selected skeleton theme")
    default_skeleton_theme: str = Field(
        default="default", description="Theme used for templates the selected theme lacks"
    )
    sub_dir: str = Field(default="", description="Controller/view subdirectory inside the bundle")
    skeleton_dirs: list[Path] = Field(
        default_factory=list,
        description="Extra skeleton directories searched before the packaged one",
    )
    format: ConfigFormat = Field(default=ConfigFormat.YAML)
    with_write: bool = Field(default=False)

    @field_validator("format", mode="before")
    @classmethod
    def _normalize_format(cls, value: Any) -> ConfigFormat:
        return ConfigFormat.normalize(value)

    @field_validator("sub_dir", mode="before")
    @classmethod
    def _strip_sub_dir(cls, value: Any) -> str:
        return str(value or "").strip("/")

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file.

        Returns:
            The path where the file was written.
        """
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "GeneratorConfig":
        """Load a previously-saved JSON configuration."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_file(cls, path: str | Path) -> "GeneratorConfig":
        """Load a configuration from a ``.json``, ``.yaml`` or ``.yml`` file."""
        file_path = Path(path)
        raw = file_path.read_text(encoding="utf-8")
        if file_path.suffix.lower() in (".yaml", ".yml"):
            data = yaml.safe_load(raw) or {}
        else:
            data = json.loads(raw)
        return cls.model_validate(data)

    @classmethod
    def from_env(cls) -> "GeneratorConfig":
        """Build a ``GeneratorConfig`` from environment variables.

        Recognised variables (all optional):
            CRUDGEN_THEME, CRUDGEN_DEFAULT_THEME, CRUDGEN_SUB_DIR,
            CRUDGEN_SKELETON_DIRS (``os.pathsep``-separated),
            CRUDGEN_FORMAT, CRUDGEN_WITH_WRITE.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("CRUDGEN_THEME"):
            kwargs["skeleton_theme"] = os.environ["CRUDGEN_THEME"]
        if os.environ.get("CRUDGEN_DEFAULT_THEME"):
            kwargs["default_skeleton_theme"] = os.environ["CRUDGEN_DEFAULT_THEME"]
        if os.environ.get("CRUDGEN_SUB_DIR"):
            kwargs["sub_dir"] = os.environ["CRUDGEN_SUB_DIR"]
        if os.environ.get("CRUDGEN_FORMAT"):
            kwargs["format"] = os.environ["CRUDGEN_FORMAT"]
        if os.environ.get("CRUDGEN_WITH_WRITE"):
            kwargs["with_write"] = os.environ["CRUDGEN_WITH_WRITE"].strip().lower() in _TRUTHY

        dirs_str = os.environ.get("CRUDGEN_SKELETON_DIRS", "")
        kwargs["skeleton_dirs"] = [Path(d) for d in dirs_str.split(os.pathsep) if d.strip()]

        return cls(**kwargs)

    def merged(self, **overrides: Any) -> "GeneratorConfig":
        """Return a copy with every non-``None`` override applied."""
        updates = {k: v for k, v in overrides.items() if v is not None}
        return self.model_validate({**self.model_dump(), **updates})
