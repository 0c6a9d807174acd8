"""crudgen -- CRUD scaffolding for entity-backed bundles.

Generates a controller, list/filter/show/new/edit views, a routing
configuration file and a functional test stub from an entity's field
metadata, using themable Jinja2 skeletons.
"""

__version__ = "0.1.0"
