"""Shared pytest fixtures for the crudgen test suite.

Provides reusable fixtures for:
- Temporary bundle directories
- Entity metadata (single id, composite key, wrong identifier)
- Generators wired to the packaged skeletons or to recording fakes
- A custom skeleton theme that overrides only some templates
"""

from __future__ import annotations

from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest

from crudgen.scaffolder import (
    Bundle,
    CrudGenerator,
    EntityMetadata,
    Filesystem,
    ResourceLocator,
    TemplateRenderer,
)


# ---------------------------------------------------------------------------
# Bundles
# ---------------------------------------------------------------------------

@pytest.fixture
def bundle_dir(tmp_path: Path) -> Path:
    """Empty bundle root directory (auto-cleanup)."""
    root = tmp_path / "BlogBundle"
    root.mkdir()
    yield root


@pytest.fixture
def bundle(bundle_dir: Path) -> Bundle:
    return Bundle(name="BlogBundle", path=bundle_dir, namespace="Acme\\BlogBundle")


# ---------------------------------------------------------------------------
# Metadata
# ---------------------------------------------------------------------------

@pytest.fixture
def post_metadata_dict() -> dict[str, Any]:
    """Raw metadata document for a ``Blog\\Post`` entity."""
    return {
        "name": "Blog\\Post",
        "identifier": ["id"],
        "fields": [
            {"name": "id", "type": "integer"},
            {"name": "title", "type": "string", "length": 255},
            {"name": "body", "type": "text", "nullable": True},
            {"name": "published_at", "type": "datetime", "nullable": True},
        ],
    }


@pytest.fixture
def post_metadata(post_metadata_dict: dict[str, Any]) -> EntityMetadata:
    return EntityMetadata.from_dict(post_metadata_dict)


@pytest.fixture
def composite_key_metadata() -> EntityMetadata:
    return EntityMetadata.from_dict({
        "identifier": ["id", "locale"],
        "fields": {"id": "integer", "locale": "string", "title": "string"},
    })


@pytest.fixture
def wrong_identifier_metadata() -> EntityMetadata:
    return EntityMetadata.from_dict({
        "identifier": ["uuid"],
        "fields": {"uuid": "guid", "title": "string"},
    })


# ---------------------------------------------------------------------------
# Generators
# ---------------------------------------------------------------------------

@pytest.fixture
def generator() -> CrudGenerator:
    """Generator using the real filesystem and the packaged skeletons."""
    return CrudGenerator(Filesystem(), ResourceLocator.default(), TemplateRenderer())


@pytest.fixture
def recording_renderer() -> MagicMock:
    """A mock TemplateRenderer whose output names the rendered template."""
    renderer = MagicMock(spec=TemplateRenderer)

    def mock_render(template_name: str, context: dict[str, Any], search_path=None) -> str:
        return f"# Rendered from {template_name}\n"

    renderer.render.side_effect = mock_render
    return renderer


@pytest.fixture
def recording_generator(recording_renderer: MagicMock) -> CrudGenerator:
    """Generator with a real filesystem but a recording renderer."""
    return CrudGenerator(Filesystem(), ResourceLocator.default(), recording_renderer)


# ---------------------------------------------------------------------------
# Custom skeleton theme
# ---------------------------------------------------------------------------

@pytest.fixture
def custom_skeleton_dir(tmp_path: Path) -> Path:
    """Skeleton dir with a ``custom`` theme overriding two templates only."""
    theme = tmp_path / "skeleton" / "crud" / "custom"
    (theme / "views").mkdir(parents=True)
    (theme / "controller.py.j2").write_text(
        "# custom controller for {{ entity_class }}\n", encoding="utf-8"
    )
    (theme / "views" / "list.html.j2").write_text(
        "custom list of {{ entity_plural }}\n", encoding="utf-8"
    )
    return tmp_path / "skeleton"
