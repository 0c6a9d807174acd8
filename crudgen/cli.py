"""Command-line entry point for the CRUD generator.

Usage::

    python -m crudgen "Blog\\Post" --metadata post.yaml --bundle-path ./src/BlogBundle
    python -m crudgen "Blog\\Post" -m post.json --format annotation --with-write
"""

from __future__ import annotations

import argparse
import re
import sys
from pathlib import Path
from typing import Sequence

import yaml

from crudgen.config import GeneratorConfig
from crudgen.scaffolder import Bundle, ConfigFormat, CrudGenerator, EntityMetadata, GeneratorError
from crudgen.utils import (
    console,
    load_structured,
    print_error,
    print_file_list,
    print_success,
    print_summary_table,
    print_warning,
)


KNOWN_FORMATS = frozenset(f.value for f in ConfigFormat)


def default_route_prefix(entity: str) -> str:
    """Route prefix used when none is given: ``Blog\\Post`` -> ``blog_post``."""
    return re.sub(r"[\\./]", "_", entity).lower()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="crudgen",
        description="Generate a CRUD controller, views, routing and tests for an entity",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  crudgen 'Blog\\Post' -m post.yaml --bundle-path ./src/BlogBundle\n"
            "  crudgen 'Blog\\Post' -m post.json --format xml --with-write\n"
            "  crudgen Post -m post.yaml --theme admin --skeleton-dir ./skeleton\n"
        ),
    )

    parser.add_argument(
        "entity",
        help="Namespace-qualified entity name, e.g. 'Blog\\Post'",
    )
    parser.add_argument(
        "--metadata", "-m",
        required=True,
        help="JSON or YAML file describing the entity fields and identifier",
    )
    parser.add_argument(
        "--bundle-path",
        default=".",
        help="Root directory of the target bundle (default: .)",
    )
    parser.add_argument(
        "--bundle-name",
        default=None,
        help="Bundle name (default: name of the bundle directory)",
    )
    parser.add_argument(
        "--bundle-namespace",
        default=None,
        help="Bundle namespace (default: the bundle name)",
    )
    parser.add_argument(
        "--format",
        default=None,
        help="Routing configuration format: yaml, xml, php or annotation (default: yaml)",
    )
    parser.add_argument(
        "--route-prefix",
        default=None,
        help="Route prefix (default: derived from the entity name)",
    )
    parser.add_argument(
        "--with-write",
        action="store_true",
        default=None,
        help="Also generate the new, edit and delete actions",
    )
    parser.add_argument("--theme", default=None, help="Skeleton theme (default: default)")
    parser.add_argument(
        "--default-theme",
        default=None,
        help="Fallback theme for templates missing from --theme (default: default)",
    )
    parser.add_argument(
        "--sub-dir",
        default=None,
        help="Subdirectory for the controller and views inside the bundle",
    )
    parser.add_argument(
        "--skeleton-dir",
        action="append",
        default=None,
        help="Extra skeleton directory containing crud/<theme>/ (repeatable)",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="JSON or YAML file with generator settings",
    )
    return parser


def load_config(args: argparse.Namespace) -> GeneratorConfig:
    """Resolve settings: CLI flags > config file > environment > defaults."""
    config = GeneratorConfig.from_env()
    if args.config:
        file_config = GeneratorConfig.from_file(args.config)
        config = config.merged(**file_config.model_dump(exclude_unset=True))
    return config.merged(
        skeleton_theme=args.theme,
        default_skeleton_theme=args.default_theme,
        sub_dir=args.sub_dir,
        skeleton_dirs=[Path(d) for d in args.skeleton_dir] if args.skeleton_dir else None,
        format=args.format,
        with_write=args.with_write,
    )


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point for ``python -m crudgen``.  Returns the exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    metadata_path = Path(args.metadata)
    if not metadata_path.exists():
        print_error(f"Error: Metadata file not found: {metadata_path}")
        return 1

    if args.format and args.format not in KNOWN_FORMATS:
        print_warning(f"Unknown format \"{args.format}\", using yaml.")

    try:
        config = load_config(args)
        metadata = EntityMetadata.from_dict(load_structured(metadata_path))

        bundle_path = Path(args.bundle_path).resolve()
        bundle_name = args.bundle_name or bundle_path.name
        bundle = Bundle(
            name=bundle_name,
            path=bundle_path,
            namespace=args.bundle_namespace or bundle_name,
        )
        route_prefix = (
            args.route_prefix if args.route_prefix is not None else default_route_prefix(args.entity)
        )

        print_summary_table({
            "Entity": args.entity,
            "Bundle": f"{bundle.name} ({bundle.path})",
            "Format": config.format.value,
            "Route prefix": route_prefix or "/",
            "Actions": "read/write" if config.with_write else "read-only",
            "Theme": f"{config.skeleton_theme} (fallback: {config.default_skeleton_theme})",
        }, title="CRUD generation")

        generator = CrudGenerator.from_config(config)
        written = generator.generate(
            bundle,
            args.entity,
            metadata,
            config.format,
            route_prefix,
            config.with_write,
        )
    except (GeneratorError, OSError, ValueError, yaml.YAMLError) as exc:
        print_error(f"Error: {exc}")
        return 1

    print_file_list(written, root=bundle.path, title="Generated files")
    print_success(f"Generated CRUD for {args.entity} ({len(written)} files).")
    console.print()
    return 0


if __name__ == "__main__":
    sys.exit(main())
