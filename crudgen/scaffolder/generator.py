"""CRUD controller generator.

Given a bundle and an entity's field metadata, emits a controller, the
list/filter/show/new/edit views, a functional test stub and a routing
configuration file.  All rendering is delegated to :class:`TemplateRenderer`
and all file I/O to :class:`Filesystem`; templates are looked up in the
selected skeleton theme first, then in the default theme.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from .errors import AlreadyExistsError, ConfigurationError, ResourceNotFoundError
from .filesystem import Filesystem
from .locator import SKELETON_NAMESPACE, ResourceLocator
from .models import (
    RECORD_ACTIONS,
    ROUTING_FORMATS,
    Bundle,
    ConfigFormat,
    EntityDescriptor,
    EntityMetadata,
    GenerationRequest,
    select_actions,
)
from .templates import TemplateRenderer

if TYPE_CHECKING:
    from crudgen.config import GeneratorConfig


# ---------------------------------------------------------------------------
# Layout of the generated files inside the bundle
# ---------------------------------------------------------------------------

CONTROLLER_DIR = "Controller"
VIEWS_DIR = "Resources/views"
TESTS_DIR = "Tests/Controller"
ROUTING_DIR = "Resources/config/routing"

VIEW_SUFFIX = ".html"

THEME_DIR = "@" + SKELETON_NAMESPACE + "/crud/{theme}"


# ---------------------------------------------------------------------------
# Themed template reference
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ThemedResource:
    """A skeleton template name plus the theme directories to search."""

    search_path: tuple[Path, ...]
    name: str

    def resolve(self) -> Path:
        """Return the file that will be rendered for this template."""
        for directory in self.search_path:
            candidate = directory / self.name
            if candidate.is_file():
                return candidate
        raise ResourceNotFoundError(
            self.name, [d / self.name for d in self.search_path]
        )


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------


class CrudGenerator:
    """Generates a CRUD controller and its companion files for one entity.

    The instance only holds collaborators and theme settings; everything
    specific to a call travels in a :class:`GenerationRequest`, so one
    generator can serve any number of ``generate`` calls.
    """

    def __init__(
        self,
        filesystem: Filesystem,
        locator: ResourceLocator,
        renderer: TemplateRenderer,
        skeleton_theme: str = "default",
        default_skeleton_theme: str = "default",
        sub_dir: str = "",
    ) -> None:
        self.filesystem = filesystem
        self.locator = locator
        self.renderer = renderer
        self.skeleton_theme = skeleton_theme
        self.default_skeleton_theme = default_skeleton_theme
        self.sub_dir = sub_dir

    @classmethod
    def from_config(cls, config: "GeneratorConfig") -> "CrudGenerator":
        """Build a generator with the stock collaborators."""
        return cls(
            Filesystem(),
            ResourceLocator.default(config.skeleton_dirs),
            TemplateRenderer(),
            skeleton_theme=config.skeleton_theme,
            default_skeleton_theme=config.default_skeleton_theme,
            sub_dir=config.sub_dir,
        )

    # -- Public API --------------------------------------------------------

    def generate(
        self,
        bundle: Bundle,
        entity: str | EntityDescriptor,
        metadata: EntityMetadata,
        format: str | ConfigFormat | None,
        route_prefix: str,
        with_write: bool,
    ) -> list[Path]:
        """Generate the CRUD files for *entity* inside *bundle*.

        Args:
            bundle: Target bundle.
            entity: Namespace-qualified entity name, e.g. ``"Blog\\Post"``.
            metadata: The entity's mapping metadata.
            format: Routing configuration format (yaml, xml, php or
                annotation).  Anything else is treated as yaml.
            route_prefix: URL prefix of the generated routes.
            with_write: Whether to generate the new/edit/delete actions.

        Returns:
            Paths of the written files, in the order they were written.

        Raises:
            ConfigurationError: If the entity does not have exactly one
                identifier field named ``id``.
            AlreadyExistsError: If the controller file already exists.
            ResourceNotFoundError: If a skeleton template is missing from
                both the selected and the default theme.
        """
        check_identifier(metadata)
        request = self.build_request(
            bundle, entity, metadata, format, route_prefix, with_write
        )

        written = [self.generate_controller(request)]

        view_dir = self.view_dir(request)
        if not self.filesystem.exists(view_dir):
            self.filesystem.mkdir(view_dir, 0o777)

        written.append(self.generate_list_view(request, view_dir))
        if "filter" in request.actions:
            written.append(self.generate_filter_view(request, view_dir))
        if "show" in request.actions:
            written.append(self.generate_show_view(request, view_dir))
        if "new" in request.actions:
            written.append(self.generate_new_view(request, view_dir))
        if "edit" in request.actions:
            written.append(self.generate_edit_view(request, view_dir))

        written.append(self.generate_test_class(request))

        routing = self.generate_configuration(request)
        if routing is not None:
            written.append(routing)

        return written

    def build_request(
        self,
        bundle: Bundle,
        entity: str | EntityDescriptor,
        metadata: EntityMetadata,
        format: str | ConfigFormat | None,
        route_prefix: str,
        with_write: bool,
    ) -> GenerationRequest:
        """Compute the action set, route-name prefix and normalized format."""
        route_prefix = route_prefix or ""
        return GenerationRequest(
            bundle=bundle,
            entity=EntityDescriptor.parse(entity),
            metadata=metadata,
            actions=select_actions(with_write),
            format=ConfigFormat.normalize(format),
            route_prefix=route_prefix,
            route_name_prefix=route_name_prefix(route_prefix),
        )

    # -- Theme resolution --------------------------------------------------

    def locate_resource(self, name: str) -> ThemedResource:
        """Return the search path for skeleton template *name*.

        The selected theme is tried together with the default theme first.
        Only when the selected theme itself cannot be found is the lookup
        retried with the default theme alone; a missing default theme is an
        error.
        """
        themed = THEME_DIR.format(theme=self.skeleton_theme)
        default = THEME_DIR.format(theme=self.default_skeleton_theme)
        try:
            dirs = self.locator.locate(themed, default)
        except ResourceNotFoundError as exc:
            if exc.logical_path != themed:
                raise
            dirs = self.locator.locate(default)
        return ThemedResource(search_path=tuple(_unique(dirs)), name=name)

    def render_theme_file(
        self,
        resource: ThemedResource,
        target: Path,
        variables: dict[str, Any],
    ) -> Path:
        content = self.renderer.render(resource.name, variables, resource.search_path)
        return self.filesystem.write(target, content)

    # -- Target paths ------------------------------------------------------

    def controller_path(self, request: GenerationRequest) -> Path:
        return _join(
            request.bundle.path,
            CONTROLLER_DIR,
            self.sub_dir,
            request.entity.namespace_path,
            f"{request.entity.entity_class}Controller.py",
        )

    def view_dir(self, request: GenerationRequest) -> Path:
        return _join(
            request.bundle.path, VIEWS_DIR, self.sub_dir, request.entity.entity_path
        )

    def test_path(self, request: GenerationRequest) -> Path:
        return _join(
            request.bundle.path,
            TESTS_DIR,
            request.entity.namespace_path,
            f"{request.entity.entity_class}ControllerTest.py",
        )

    def routing_path(self, request: GenerationRequest) -> Path:
        return _join(
            request.bundle.path,
            ROUTING_DIR,
            f"{request.entity.routing_basename}.{request.format.value}",
        )

    # -- Emission steps ----------------------------------------------------

    def generate_controller(self, request: GenerationRequest) -> Path:
        target = self.controller_path(request)
        if self.filesystem.exists(target):
            raise AlreadyExistsError(target)

        entity = request.entity
        return self.render_theme_file(self.locate_resource("controller.py.j2"), target, {
            "actions": request.actions,
            "route_prefix": request.route_prefix,
            "route_name_prefix": request.route_name_prefix,
            "bundle": request.bundle.name,
            "entity": entity.name,
            "entity_path": entity.entity_path,
            "entity_class": entity.entity_class,
            "entity_singular": entity.singular,
            "entity_plural": entity.plural,
            "namespace": request.bundle.namespace,
            "entity_namespace": entity.entity_namespace,
            "sub_dir": self.sub_dir,
            "format": request.format.value,
        })

    def generate_test_class(self, request: GenerationRequest) -> Path:
        entity = request.entity
        return self.render_theme_file(
            self.locate_resource("tests/test.py.j2"), self.test_path(request), {
                "route_prefix": request.route_prefix,
                "route_name_prefix": request.route_name_prefix,
                "entity": entity.name,
                "entity_class": entity.entity_class,
                "namespace": request.bundle.namespace,
                "entity_namespace": entity.entity_namespace,
                "actions": request.actions,
            },
        )

    def generate_configuration(self, request: GenerationRequest) -> Path | None:
        """Write the routing file, or return ``None`` for annotation routing."""
        if request.format not in ROUTING_FORMATS:
            return None

        entity = request.entity
        resource = self.locate_resource(f"config/routing.{request.format.value}.j2")
        return self.render_theme_file(resource, self.routing_path(request), {
            "actions": request.actions,
            "route_prefix": request.route_prefix,
            "route_name_prefix": request.route_name_prefix,
            "bundle": request.bundle.name,
            "entity": entity.name,
            "entity_path": entity.entity_path,
            "entity_class": entity.entity_class,
            "entity_singular": entity.singular,
            "sub_dir": self.sub_dir,
        })

    def generate_list_view(self, request: GenerationRequest, view_dir: Path) -> Path:
        entity = request.entity
        filter_template_name = "/".join(
            part
            for part in (request.bundle.name, self.sub_dir, entity.entity_path, "filter" + VIEW_SUFFIX)
            if part
        )
        return self.render_theme_file(
            self.locate_resource("views/list.html.j2"), view_dir / ("list" + VIEW_SUFFIX), {
                "bundle": request.bundle.name,
                "sub_dir": self.sub_dir,
                "entity": entity.name,
                "entity_singular": entity.singular,
                "entity_plural": entity.plural,
                "fields": request.metadata.fields,
                "actions": request.actions,
                "record_actions": record_actions(request.actions),
                "route_prefix": request.route_prefix,
                "route_name_prefix": request.route_name_prefix,
                "filter_template_name": filter_template_name,
            },
        )

    def generate_filter_view(self, request: GenerationRequest, view_dir: Path) -> Path:
        entity = request.entity
        return self.render_theme_file(
            self.locate_resource("views/filter.html.j2"), view_dir / ("filter" + VIEW_SUFFIX), {
                "bundle": request.bundle.name,
                "sub_dir": self.sub_dir,
                "route_prefix": request.route_prefix,
                "route_name_prefix": request.route_name_prefix,
                "entity": entity.name,
                "entity_singular": entity.singular,
                "entity_plural": entity.plural,
                "actions": request.actions,
            },
        )

    def generate_show_view(self, request: GenerationRequest, view_dir: Path) -> Path:
        entity = request.entity
        return self.render_theme_file(
            self.locate_resource("views/show.html.j2"), view_dir / ("show" + VIEW_SUFFIX), {
                "entity": entity.name,
                "entity_singular": entity.singular,
                "entity_plural": entity.plural,
                "fields": request.metadata.fields,
                "actions": request.actions,
                "route_prefix": request.route_prefix,
                "route_name_prefix": request.route_name_prefix,
            },
        )

    def generate_new_view(self, request: GenerationRequest, view_dir: Path) -> Path:
        return self.render_theme_file(
            self.locate_resource("views/new.html.j2"),
            view_dir / ("new" + VIEW_SUFFIX),
            _form_view_context(request),
        )

    def generate_edit_view(self, request: GenerationRequest, view_dir: Path) -> Path:
        return self.render_theme_file(
            self.locate_resource("views/edit.html.j2"),
            view_dir / ("edit" + VIEW_SUFFIX),
            _form_view_context(request),
        )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def check_identifier(metadata: EntityMetadata) -> None:
    """Reject entities without exactly one identifier field named ``id``."""
    if len(metadata.identifier) > 1:
        raise ConfigurationError(
            "The CRUD generator does not support entity classes with multiple primary keys."
        )
    if "id" not in metadata.identifier:
        raise ConfigurationError(
            'The CRUD generator expects the entity object has a primary key field named "id".'
        )


def route_name_prefix(route_prefix: str) -> str:
    """``"admin/blog"`` -> ``"admin_blog"``."""
    return route_prefix.replace("/", "_")


def record_actions(actions: tuple[str, ...] | list[str]) -> list[str]:
    """Actions rendered as per-record links in the list view, in order."""
    return [action for action in actions if action in RECORD_ACTIONS]


def _form_view_context(request: GenerationRequest) -> dict[str, Any]:
    entity = request.entity
    return {
        "route_prefix": request.route_prefix,
        "route_name_prefix": request.route_name_prefix,
        "entity": entity.name,
        "entity_singular": entity.singular,
        "entity_plural": entity.plural,
        "actions": request.actions,
    }


def _join(root: str | Path, *segments: str) -> Path:
    """Join path segments onto *root*, skipping empty ones."""
    return Path(root).joinpath(*[s for s in segments if s])


def _unique(paths: list[Path]) -> list[Path]:
    seen: list[Path] = []
    for path in paths:
        if path not in seen:
            seen.append(path)
    return seen
