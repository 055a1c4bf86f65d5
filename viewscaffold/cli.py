"""Command line interface for viewscaffold.

Examples::

    viewscaffold view ./Shop --controller Products --action Create \
        --template create --model Shop.Models.Product
    viewscaffold view ./Shop --controller-file Controllers/ProductController.cs --cursor 420
    viewscaffold crud ./Shop Shop.Models.Product
    viewscaffold defaults ./Shop
    viewscaffold properties Shop.Models.Product --root ./Shop
    viewscaffold locate --view Views/Products/Edit.cshtml --root ./Shop
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from viewscaffold.config import Config
from viewscaffold.errors import ScaffoldError
from viewscaffold.parser.cache import ExtractionCache
from viewscaffold.parser.controller import detect_controller_info
from viewscaffold.parser.extractor import ModelPropertyExtractor
from viewscaffold.parser.navigation import find_model_directive, locate_model_definition
from viewscaffold.scaffolder.generator import TemplateType, ViewGenerationOptions, ViewGenerator
from viewscaffold.utils import (
    build_properties_table,
    configure_logging,
    console,
    print_error,
    print_success,
    print_summary_table,
    print_warning,
    relative_to_or_self,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="viewscaffold",
        description="Scaffold ASP.NET Core MVC Razor views from C# model classes",
    )
    parser.add_argument("--config", default=None, help="JSON configuration file")
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    view = sub.add_parser("view", help="Generate a single view")
    view.add_argument("workspace", help="Workspace or project directory")
    view.add_argument("--controller", default=None, help="Controller name without suffix")
    view.add_argument("--action", default=None, help="Action name (default: detected or Index)")
    view.add_argument(
        "--controller-file",
        default=None,
        help="Controller source file to detect the controller and action from",
    )
    view.add_argument(
        "--cursor", type=int, default=0, help="Character offset inside --controller-file"
    )
    view.add_argument(
        "--template",
        choices=[t.value for t in TemplateType],
        default=TemplateType.EMPTY.value,
        help="View template (default: empty)",
    )
    view.add_argument("--model", default=None, help="Fully qualified model type")
    _add_layout_arguments(view)

    crud = sub.add_parser("crud", help="Generate Index/Create/Edit/Details/Delete views")
    crud.add_argument("workspace", help="Workspace or project directory")
    crud.add_argument("model", help="Fully qualified model type, e.g. Shop.Models.Product")
    crud.add_argument(
        "--controller", default=None, help="Controller name (default: plural of the model)"
    )
    _add_layout_arguments(crud)

    defaults = sub.add_parser("defaults", help="Generate _ViewStart, _ViewImports, _Layout, Error")
    defaults.add_argument("workspace", help="Workspace or project directory")

    properties = sub.add_parser("properties", help="Show the properties extracted from a model")
    properties.add_argument("model", help="Fully qualified model type")
    properties.add_argument("--root", default=".", help="Directory to search (default: .)")

    locate = sub.add_parser("locate", help="Find the file declaring a model")
    target = locate.add_mutually_exclusive_group(required=True)
    target.add_argument("model", nargs="?", default=None, help="Fully qualified model type")
    target.add_argument("--view", default=None, help="Razor view whose @model to resolve")
    locate.add_argument("--root", default=".", help="Directory to search (default: .)")

    return parser


def _add_layout_arguments(parser: argparse.ArgumentParser) -> None:
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--layout", default=None, help="Layout page (default: configured layout)")
    group.add_argument("--no-layout", action="store_true", help="Render without a layout")
    parser.add_argument(
        "--no-overwrite", action="store_true", help="Fail instead of replacing existing views"
    )


def _layout_choice(args: argparse.Namespace) -> Optional[str]:
    if args.no_layout:
        return ""
    return args.layout


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


async def _cmd_view(args: argparse.Namespace, generator: ViewGenerator) -> int:
    controller = args.controller
    action = args.action
    active_file = None

    if args.controller_file:
        source_path = Path(args.controller_file)
        try:
            source = source_path.read_text(encoding="utf-8-sig")
        except OSError as exc:
            print_error(f"Cannot read controller file {source_path}: {exc}")
            return 1
        info = detect_controller_info(source, source_path.name, args.cursor)
        controller = controller or info.controller_name
        action = action or info.action_name
        active_file = str(source_path)

    if not controller:
        print_error("A controller name is required (--controller or --controller-file)")
        return 1

    options = ViewGenerationOptions(
        workspace_path=args.workspace,
        controller_name=controller,
        action_name=action or "Index",
        template_type=TemplateType(args.template),
        model_type=args.model,
        layout_page=_layout_choice(args),
        active_file=active_file,
        overwrite=not args.no_overwrite,
    )
    path = await generator.generate_view(options)
    print_success(f"View {path.name} created at {path}")
    return 0


async def _cmd_crud(args: argparse.Namespace, generator: ViewGenerator) -> int:
    paths = await generator.scaffold_crud(
        args.workspace,
        args.model,
        controller_name=args.controller,
        layout_page=_layout_choice(args),
        overwrite=not args.no_overwrite,
    )
    workspace = Path(args.workspace)
    print_summary_table(
        {p.name: str(relative_to_or_self(p, workspace)) for p in paths}, title="CRUD views"
    )
    print_success(f"CRUD views for {args.model} created successfully")
    return 0


async def _cmd_defaults(args: argparse.Namespace, generator: ViewGenerator) -> int:
    paths = await generator.generate_default_templates(args.workspace)
    workspace = Path(args.workspace)
    print_summary_table(
        {p.name: str(relative_to_or_self(p, workspace)) for p in paths},
        title="Default MVC templates",
    )
    print_success("Default MVC templates created successfully!")
    return 0


def _cmd_properties(args: argparse.Namespace, extractor: ModelPropertyExtractor) -> int:
    props = extractor.extract_properties(args.model, args.root)
    if not props:
        print_warning(f"No properties found for {args.model} under {args.root}")
        return 0
    console.print(build_properties_table(props, title=args.model))
    return 0


def _cmd_locate(args: argparse.Namespace, config: Config) -> int:
    model_type = args.model
    if args.view:
        view_path = Path(args.view)
        try:
            view_source = view_path.read_text(encoding="utf-8-sig")
        except OSError as exc:
            print_error(f"Cannot read view {view_path}: {exc}")
            return 1
        model_type = find_model_directive(view_source)
        if model_type is None:
            print_error(f"No @model directive found in {view_path}")
            return 1

    location = locate_model_definition(model_type, args.root, config.parser)
    console.print(f"{location.path}:{location.line}")
    return 0


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def _load_config(args: argparse.Namespace) -> Config:
    config = Config.load(Path(args.config)) if args.config else Config.from_env()
    if args.verbose:
        config = config.model_copy(update={"enable_logging": True})
    return config


def run(argv: Optional[Sequence[str]] = None) -> int:
    """Parse *argv*, run the selected command and return its exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = _load_config(args)
    except (OSError, ValueError) as exc:
        print_error(f"Error: cannot load configuration: {exc}")
        return 1
    configure_logging(config.enable_logging)

    cache = ExtractionCache(
        max_entries=config.cache.max_entries,
        expiration_seconds=config.cache.expiration_seconds,
    )
    extractor = ModelPropertyExtractor(cache=cache, config=config.parser)
    generator = ViewGenerator(config=config, extractor=extractor)

    try:
        if args.command == "view":
            return asyncio.run(_cmd_view(args, generator))
        if args.command == "crud":
            return asyncio.run(_cmd_crud(args, generator))
        if args.command == "defaults":
            return asyncio.run(_cmd_defaults(args, generator))
        if args.command == "properties":
            return _cmd_properties(args, extractor)
        return _cmd_locate(args, config)
    except ScaffoldError as exc:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print_error(f"Error: {exc}")
        return 1
    except ValueError as exc:
        print_error(f"Error: {exc}")
        return 1


def main() -> None:
    """CLI entry point for ``viewscaffold`` and ``python -m viewscaffold``."""
    sys.exit(run())


if __name__ == "__main__":
    main()
