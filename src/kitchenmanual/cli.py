from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from collections.abc import Callable
from pathlib import Path

from .config import SORT_KEYS, TIME_FORMATS, EffectiveConfig, config_to_toml, resolve_config
from .domain import Recipe
from .errors import (
    ConfigError,
    KitchenManualError,
    MissingFileError,
    ValidationError,
)
from .listing import list_recipes, load_recipe
from .validate import validate_recipe


PROJECT_TEMPLATE = """# vault_path = "~/Notes/Kitchen"
recipes_dir = "Recipes"

[display]
# time_format = "minutes"
# sort = "name"
"""


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(getattr(args, "verbose", False))

    if not args.command:
        parser.print_help()
        return 1

    handlers: dict[str, Callable[[argparse.Namespace], int]] = {
        "list": _cmd_list,
        "show": _cmd_show,
        "validate": _cmd_validate,
        "config": _cmd_config,
        "init": _cmd_init,
    }

    handler = handlers.get(args.command)
    if handler is None:  # pragma: no cover
        return 1  # pragma: no cover

    try:
        return handler(args)
    except KitchenManualError as exc:
        print(str(exc), file=sys.stderr)
        return _exit_code(exc)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="kitchenmanual", parents=[_common_parser()])
    # options given after the subcommand must not reset those given before it
    common = _common_parser(argparse.SUPPRESS)
    sub = parser.add_subparsers(dest="command")

    listing = sub.add_parser("list", parents=[common])
    listing.add_argument("--json", action="store_true")

    show = sub.add_parser("show", parents=[common])
    show.add_argument("recipe_name")
    show.add_argument("--json", action="store_true")

    validate = sub.add_parser("validate")
    validate.add_argument("paths", nargs="+")

    sub.add_parser("config", parents=[common])

    init = sub.add_parser("init")
    init.add_argument("path", nargs="?", default=".")
    init.add_argument("--force", action="store_true")

    return parser


def _common_parser(argument_default: str | None = None) -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False, argument_default=argument_default)
    common.add_argument("--vault", dest="vault_path")
    common.add_argument("--project")
    common.add_argument("--profile")
    common.add_argument("--recipes-dir")
    common.add_argument("--time-format", choices=TIME_FORMATS)
    common.add_argument("--sort", choices=SORT_KEYS)
    common.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return common


def _cmd_list(args: argparse.Namespace) -> int:
    cfg = _resolve_cfg(args)
    entries = list_recipes(cfg)
    if args.json:
        payload = [dict(entry.recipe.to_dict(), path=str(entry.path)) for entry in entries]
        print(json.dumps(payload, indent=2))
    else:
        for entry in entries:
            print(f"{entry.recipe.name}: {len(entry.recipe.vegetables)} vegetables")
    return 0


def _cmd_show(args: argparse.Namespace) -> int:
    cfg = _resolve_cfg(args)
    entry = load_recipe(cfg, args.recipe_name)
    if args.json:
        print(json.dumps(entry.recipe.to_dict(), indent=2))
    else:
        for line in format_recipe(entry.recipe, cfg):
            print(line)
    return 0


def _cmd_validate(args: argparse.Namespace) -> int:
    for raw in args.paths:
        path = Path(raw)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise MissingFileError(f"Cannot read recipe note: {path}") from exc
        except UnicodeDecodeError as exc:
            raise ValidationError(f"{path}: recipe note is not valid UTF-8") from exc
        validate_recipe(text, str(path))
        print(f"ok: {path}")
    return 0


def _cmd_config(args: argparse.Namespace) -> int:
    cfg = _resolve_cfg(args)
    print(config_to_toml(cfg))
    return 0


def _cmd_init(args: argparse.Namespace) -> int:
    root = os.path.abspath(args.path)
    os.makedirs(root, exist_ok=True)
    config_path = os.path.join(root, "kitchenmanual.toml")
    if os.path.exists(config_path) and not args.force:
        raise ConfigError(f"{config_path} already exists (use --force to overwrite)")
    with open(config_path, "w", encoding="utf-8") as fh:
        fh.write(PROJECT_TEMPLATE)
    print(config_path)
    return 0


def format_recipe(recipe: Recipe, cfg: EffectiveConfig) -> list[str]:
    lines = [recipe.name]
    if recipe.description:
        lines.append(f"  {recipe.description}")
    lines.append("Vegetables:")
    for vegetable, quantity in sorted(recipe.vegetables.items(), key=lambda item: item[0].value):
        lines.append(f"  - {vegetable.value}: {quantity}")
    if recipe.equipment:
        lines.append("Equipment: " + ", ".join(recipe.equipment))
    if recipe.time_minutes is not None:
        lines.append("Time: " + format_duration(recipe.time_minutes, cfg.display.time_format))
    if recipe.notes:
        lines.append("Notes:")
        lines.extend(f"  {line}" for line in recipe.notes.splitlines())
    return lines


def format_duration(minutes: int, time_format: str) -> str:
    if time_format != "hours" or minutes < 60:
        return f"{minutes} min"
    hours, rest = divmod(minutes, 60)
    if not rest:
        return f"{hours} h"
    return f"{hours} h {rest} min"


def _resolve_cfg(args: argparse.Namespace) -> EffectiveConfig:
    return resolve_config(_cli_args_dict(args))


def _cli_args_dict(args: argparse.Namespace) -> dict[str, object]:
    return vars(args).copy()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _exit_code(exc: KitchenManualError) -> int:
    if isinstance(exc, ConfigError):
        return 2
    if isinstance(exc, MissingFileError):
        return 3
    if isinstance(exc, ValidationError):
        return 4
    return 1
