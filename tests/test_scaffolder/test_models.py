"""Tests for the scaffolder data models (crudgen.scaffolder.models).

Tests cover:
- EntityDescriptor naming (class, namespace, singular/plural, paths)
- ConfigFormat normalization
- Action sets
- EntityMetadata.from_dict for list- and mapping-shaped documents
- GenerationRequest immutability
"""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from crudgen.scaffolder.errors import ConfigurationError
from crudgen.scaffolder.models import (
    READ_ACTIONS,
    ROUTING_FORMATS,
    WRITE_ACTIONS,
    Bundle,
    ConfigFormat,
    EntityDescriptor,
    EntityMetadata,
    FieldMapping,
    GenerationRequest,
    select_actions,
)


# ---------------------------------------------------------------------------
# EntityDescriptor
# ---------------------------------------------------------------------------


class TestEntityDescriptor:
    @pytest.mark.unit
    def test_namespaced_name(self):
        entity = EntityDescriptor.parse("Blog\\Post")
        assert entity.entity_class == "Post"
        assert entity.entity_namespace == "Blog"
        assert entity.singular == "post"
        assert entity.plural == "posts"

    @pytest.mark.unit
    def test_naive_plural(self):
        assert EntityDescriptor.parse("Box").plural == "boxs"
        assert EntityDescriptor.parse("Category").plural == "categorys"

    @pytest.mark.unit
    def test_bare_name(self):
        entity = EntityDescriptor.parse("Box")
        assert entity.entity_class == "Box"
        assert entity.entity_namespace == ""
        assert entity.namespace_path == ""
        assert entity.entity_path == "Box"

    @pytest.mark.unit
    def test_deep_namespace_paths(self):
        entity = EntityDescriptor.parse("Shop\\Catalog\\ProductImage")
        assert entity.entity_namespace == "Shop\\Catalog"
        assert entity.namespace_path == "Shop/Catalog"
        assert entity.entity_path == "Shop/Catalog/ProductImage"
        assert entity.routing_basename == "shop_catalog_productimage"
        assert entity.singular == "productimage"

    @pytest.mark.unit
    def test_dot_separator(self):
        entity = EntityDescriptor.parse("Blog.Post")
        assert entity.entity_class == "Post"
        assert entity.entity_namespace == "Blog"

    @pytest.mark.unit
    def test_parse_returns_existing_descriptor(self):
        entity = EntityDescriptor.parse("Post")
        assert EntityDescriptor.parse(entity) is entity

    @pytest.mark.unit
    @pytest.mark.parametrize("name", ["", "\\", ".."])
    def test_empty_names_rejected(self, name):
        with pytest.raises(ConfigurationError):
            EntityDescriptor.parse(name)

    @pytest.mark.unit
    def test_str(self):
        assert str(EntityDescriptor.parse("Blog\\Post")) == "Blog\\Post"


# ---------------------------------------------------------------------------
# ConfigFormat & actions
# ---------------------------------------------------------------------------


class TestConfigFormat:
    @pytest.mark.unit
    @pytest.mark.parametrize("value", ["yaml", "xml", "php", "annotation"])
    def test_known_formats(self, value):
        assert ConfigFormat.normalize(value).value == value

    @pytest.mark.unit
    @pytest.mark.parametrize("value", ["yml", "json", "XML", "", None, 3])
    def test_unknown_formats_become_yaml(self, value):
        assert ConfigFormat.normalize(value) is ConfigFormat.YAML

    @pytest.mark.unit
    def test_enum_passthrough(self):
        assert ConfigFormat.normalize(ConfigFormat.PHP) is ConfigFormat.PHP

    @pytest.mark.unit
    def test_routing_formats(self):
        assert ConfigFormat.ANNOTATION not in ROUTING_FORMATS
        assert {f.value for f in ROUTING_FORMATS} == {"yaml", "xml", "php"}


class TestActions:
    @pytest.mark.unit
    def test_read_only(self):
        assert select_actions(False) == ("list", "filter", "show")
        assert select_actions(False) == READ_ACTIONS

    @pytest.mark.unit
    def test_read_write(self):
        assert select_actions(True) == ("list", "filter", "show", "new", "edit", "delete")
        assert select_actions(True) == WRITE_ACTIONS


# ---------------------------------------------------------------------------
# EntityMetadata
# ---------------------------------------------------------------------------


class TestEntityMetadata:
    @pytest.mark.unit
    def test_from_list(self, post_metadata_dict):
        metadata = EntityMetadata.from_dict(post_metadata_dict)
        assert metadata.name == "Blog\\Post"
        assert metadata.identifier == ["id"]
        assert list(metadata.field_mappings) == ["id", "title", "body", "published_at"]
        assert metadata.field_mappings["title"].length == 255
        assert metadata.field_mappings["body"].nullable is True
        assert metadata.field_mappings["id"].id is True
        assert metadata.field_mappings["title"].id is False

    @pytest.mark.unit
    def test_from_mapping_with_type_shorthand(self):
        metadata = EntityMetadata.from_dict({
            "identifier": "id",
            "fields": {"id": "integer", "title": {"type": "string", "unique": True}},
        })
        assert metadata.identifier == ["id"]
        assert metadata.field_mappings["id"].type == "integer"
        assert metadata.field_mappings["title"].unique is True

    @pytest.mark.unit
    def test_identifier_derived_from_flags(self):
        metadata = EntityMetadata.from_dict({
            "fields": [
                {"field_name": "id", "type": "integer", "id": True},
                {"field_name": "name"},
            ],
        })
        assert metadata.identifier == ["id"]
        assert metadata.field_mappings["name"].type == "string"

    @pytest.mark.unit
    def test_no_identifier_is_not_an_error_here(self):
        metadata = EntityMetadata.from_dict({"fields": {"title": "string"}})
        assert metadata.identifier == []

    @pytest.mark.unit
    def test_fields_keep_order(self):
        metadata = EntityMetadata.from_dict({
            "identifier": ["id"],
            "fields": {"z": "string", "id": "integer", "a": "string"},
        })
        assert [f.field_name for f in metadata.fields] == ["z", "id", "a"]

    @pytest.mark.unit
    def test_mapping_entry_without_value(self):
        metadata = EntityMetadata.from_dict({
            "identifier": ["id"],
            "fields": {"id": None, "title": "string"},
        })
        assert metadata.field_mappings["id"].type == "string"
        assert metadata.field_mappings["id"].id is True
        assert [f.field_name for f in metadata.fields] == ["id", "title"]

    @pytest.mark.unit
    def test_list_of_bare_names(self):
        metadata = EntityMetadata.from_dict({"identifier": ["id"], "fields": ["id", "title"]})
        assert list(metadata.field_mappings) == ["id", "title"]
        assert metadata.field_mappings["title"].type == "string"

    @pytest.mark.unit
    def test_empty_fields(self):
        assert EntityMetadata.from_dict({"fields": None}).fields == []

    @pytest.mark.unit
    @pytest.mark.parametrize("fields", [
        [1, 2],
        [{"type": "string"}],
        {"id": ["integer"]},
        "id,title",
    ])
    def test_malformed_fields_rejected(self, fields):
        with pytest.raises(ConfigurationError):
            EntityMetadata.from_dict({"identifier": ["id"], "fields": fields})

    @pytest.mark.unit
    def test_field_defaults(self):
        field = FieldMapping(field_name="title")
        assert field.type == "string"
        assert field.column_name is None
        assert field.nullable is False


# ---------------------------------------------------------------------------
# Bundle & GenerationRequest
# ---------------------------------------------------------------------------


class TestFrozenModels:
    @pytest.mark.unit
    def test_bundle_is_frozen(self, tmp_path):
        bundle = Bundle(name="BlogBundle", path=tmp_path)
        with pytest.raises(ValidationError):
            bundle.name = "Other"
        assert bundle.namespace == ""
        assert isinstance(bundle.path, Path)

    @pytest.mark.unit
    def test_request_is_frozen(self, bundle, post_metadata):
        request = GenerationRequest(
            bundle=bundle,
            entity=EntityDescriptor.parse("Post"),
            metadata=post_metadata,
            actions=READ_ACTIONS,
            format=ConfigFormat.YAML,
        )
        with pytest.raises(ValidationError):
            request.route_prefix = "changed"
