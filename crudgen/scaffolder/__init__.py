"""crudgen scaffolder -- generates CRUD files for a single entity.

This module takes an entity's mapping metadata and renders a controller,
its views, a routing file and a test stub into a target bundle, using the
selected skeleton theme with a fallback to the default theme.

Quick usage::

    from crudgen.scaffolder import Bundle, CrudGenerator, EntityMetadata
    from crudgen.config import GeneratorConfig

    metadata = EntityMetadata.from_dict({
        "identifier": ["id"],
        "fields": {"id": "integer", "title": "string"},
    })
    generator = CrudGenerator.from_config(GeneratorConfig())
    written = generator.generate(
        Bundle(name="BlogBundle", path="/tmp/BlogBundle"),
        "Blog\\\\Post",
        metadata,
        format="yaml",
        route_prefix="blog/post",
        with_write=True,
    )
"""

from crudgen.scaffolder.errors import (
    AlreadyExistsError,
    ConfigurationError,
    GeneratorError,
    ResourceNotFoundError,
)
from crudgen.scaffolder.filesystem import Filesystem
from crudgen.scaffolder.generator import CrudGenerator, ThemedResource
from crudgen.scaffolder.locator import ResourceLocator
from crudgen.scaffolder.models import (
    Bundle,
    ConfigFormat,
    EntityDescriptor,
    EntityMetadata,
    FieldMapping,
    GenerationRequest,
)
from crudgen.scaffolder.templates import TemplateRenderer

__all__ = [
    "AlreadyExistsError",
    "Bundle",
    "ConfigFormat",
    "ConfigurationError",
    "CrudGenerator",
    "EntityDescriptor",
    "EntityMetadata",
    "FieldMapping",
    "Filesystem",
    "GenerationRequest",
    "GeneratorError",
    "ResourceLocator",
    "ResourceNotFoundError",
    "TemplateRenderer",
    "ThemedResource",
]
