"""Pydantic v2 models for the CRUD scaffolder.

Describes the inputs of a generation run (the target bundle, the entity name
and its field metadata) and the immutable :class:`GenerationRequest` that the
generator threads through every emission step.
"""

from __future__ import annotations

import re
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from .errors import ConfigurationError


# ---------------------------------------------------------------------------
# Action sets
# ---------------------------------------------------------------------------

READ_ACTIONS: tuple[str, ...] = ("list", "filter", "show")
WRITE_ACTIONS: tuple[str, ...] = READ_ACTIONS + ("new", "edit", "delete")

# Actions rendered as per-row links in the list view.
RECORD_ACTIONS: tuple[str, ...] = ("show", "edit")


def select_actions(with_write: bool) -> tuple[str, ...]:
    """Return the action set for a read-only or read-write scaffold."""
    return WRITE_ACTIONS if with_write else READ_ACTIONS


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class ConfigFormat(str, Enum):
    """Routing configuration dialect."""
    YAML = "yaml"
    XML = "xml"
    PHP = "php"
    ANNOTATION = "annotation"

    @classmethod
    def normalize(cls, value: Any) -> "ConfigFormat":
        """Map *value* onto a known format, falling back to ``yaml``."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.YAML


# Formats that produce a standalone routing file.  Annotation routes live in
# the controller itself.
ROUTING_FORMATS: frozenset[ConfigFormat] = frozenset(
    {ConfigFormat.YAML, ConfigFormat.XML, ConfigFormat.PHP}
)


# ---------------------------------------------------------------------------
# Bundle & entity
# ---------------------------------------------------------------------------

class Bundle(BaseModel):
    """The project unit that receives the generated files."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Logical bundle name, e.g. 'BlogBundle'")
    path: Path = Field(..., description="Root directory of the bundle")
    namespace: str = Field(default="", description="Bundle namespace, e.g. 'Acme\\BlogBundle'")


_SEGMENT_SEPARATORS = re.compile(r"[\\.]")


class EntityDescriptor(BaseModel):
    """Namespace-qualified entity name, e.g. ``Blog\\Post``.

    Both ``\\`` and ``.`` are accepted as namespace separators.
    """
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)

    @classmethod
    def parse(cls, name: "str | EntityDescriptor") -> "EntityDescriptor":
        """Build a descriptor, raising ``ConfigurationError`` on empty names."""
        if isinstance(name, cls):
            return name
        if not name or not [s for s in _SEGMENT_SEPARATORS.split(name) if s]:
            raise ConfigurationError(f"Invalid entity name: {name!r}")
        return cls(name=name)

    @property
    def segments(self) -> list[str]:
        return [s for s in _SEGMENT_SEPARATORS.split(self.name) if s]

    @property
    def entity_class(self) -> str:
        return self.segments[-1]

    @property
    def entity_namespace(self) -> str:
        return "\\".join(self.segments[:-1])

    @property
    def namespace_path(self) -> str:
        return "/".join(self.segments[:-1])

    @property
    def entity_path(self) -> str:
        return "/".join(self.segments)

    @property
    def singular(self) -> str:
        return self.entity_class.lower()

    @property
    def plural(self) -> str:
        # Naive on purpose: "Box" -> "boxs".
        return self.singular + "s"

    @property
    def routing_basename(self) -> str:
        """File stem of the routing configuration, e.g. ``blog_post``."""
        return "_".join(self.segments).lower()

    def __str__(self) -> str:
        return self.name


# ---------------------------------------------------------------------------
# Field metadata
# ---------------------------------------------------------------------------

class FieldMapping(BaseModel):
    """A single mapped field of the entity."""
    field_name: str = Field(..., description="Property name on the entity")
    type: str = Field(default="string", description="Storage type, e.g. 'string', 'integer'")
    column_name: Optional[str] = Field(default=None, description="Column name in storage")
    length: Optional[int] = Field(default=None)
    precision: Optional[int] = Field(default=None)
    scale: Optional[int] = Field(default=None)
    nullable: bool = Field(default=False)
    unique: bool = Field(default=False)
    id: bool = Field(default=False, description="Whether the field belongs to the identifier")


class EntityMetadata(BaseModel):
    """Mapping metadata for one entity."""
    name: str = Field(default="", description="Fully qualified entity name")
    identifier: list[str] = Field(default_factory=list)
    field_mappings: dict[str, FieldMapping] = Field(default_factory=dict)

    @property
    def fields(self) -> list[FieldMapping]:
        """Field mappings in declaration order."""
        return list(self.field_mappings.values())

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EntityMetadata":
        """Build metadata from a loosely-shaped JSON/YAML document.

        ``fields`` may be a list of field dicts (keyed by ``name`` or
        ``field_name``) or bare field names, or a mapping of field name to a
        field dict, a bare type string or nothing.  When ``identifier`` is
        absent it is derived from fields flagged ``id: true``.

        Raises:
            ConfigurationError: If a field entry has any other shape.
        """
        raw_fields = data.get("fields", data.get("field_mappings")) or []
        mappings: dict[str, FieldMapping] = {}

        if isinstance(raw_fields, dict):
            items = list(raw_fields.items())
        elif isinstance(raw_fields, list):
            items = []
            for entry in raw_fields:
                if isinstance(entry, str):
                    entry = {"name": entry}
                if not isinstance(entry, dict):
                    raise ConfigurationError(f"Invalid field entry: {entry!r}")
                items.append((entry.get("field_name", entry.get("name")), entry))
        else:
            raise ConfigurationError(f"Invalid fields definition: {raw_fields!r}")

        for name, entry in items:
            if entry is None:
                entry = {}
            elif isinstance(entry, str):
                entry = {"type": entry}
            if not isinstance(name, str) or not name or not isinstance(entry, dict):
                raise ConfigurationError(f"Invalid field entry for {name!r}: {entry!r}")
            payload = {k: v for k, v in entry.items() if k not in ("name", "field_name")}
            mappings[name] = FieldMapping(field_name=name, **payload)

        identifier = data.get("identifier")
        if identifier is None:
            identifier = [m.field_name for m in mappings.values() if m.id]
        elif isinstance(identifier, str):
            identifier = [identifier]

        for name in identifier:
            if name in mappings and not mappings[name].id:
                mappings[name] = mappings[name].model_copy(update={"id": True})

        return cls(
            name=data.get("name", data.get("entity", "")),
            identifier=list(identifier),
            field_mappings=mappings,
        )


# ---------------------------------------------------------------------------
# Generation request
# ---------------------------------------------------------------------------

class GenerationRequest(BaseModel):
    """Everything one ``generate`` call needs, computed up-front."""
    model_config = ConfigDict(frozen=True)

    bundle: Bundle
    entity: EntityDescriptor
    metadata: EntityMetadata
    actions: tuple[str, ...]
    format: ConfigFormat
    route_prefix: str = ""
    route_name_prefix: str = ""
