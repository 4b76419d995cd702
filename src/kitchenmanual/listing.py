from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path

from .config import EffectiveConfig
from .domain import Recipe
from .errors import MissingFileError, ValidationError
from .paths import resolve_vault_paths
from .validate import parse_recipe


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecipeEntry:
    recipe: Recipe
    path: Path


def list_recipes(cfg: EffectiveConfig) -> list[RecipeEntry]:
    vault = resolve_vault_paths(cfg)
    entries: list[RecipeEntry] = []
    if not vault.recipes_dir.exists():
        logger.debug("Recipes folder %s does not exist", vault.recipes_dir)
        return entries

    for path in sorted(vault.recipes_dir.rglob("*.md")):
        recipe = _read_recipe(path)
        if recipe is not None:
            entries.append(RecipeEntry(recipe=recipe, path=path))

    if cfg.display.sort == "name":
        entries.sort(key=lambda entry: (entry.recipe.name.casefold(), str(entry.path)))
    return entries


def load_recipe(cfg: EffectiveConfig, name: str) -> RecipeEntry:
    wanted = name.strip().casefold()
    for entry in list_recipes(cfg):
        if entry.recipe.name.casefold() == wanted or entry.path.stem.casefold() == wanted:
            return entry
    raise MissingFileError(f"Recipe not found: {name}")


def _read_recipe(path: Path) -> Recipe | None:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Skipping unreadable recipe note %s: %s", path, exc)
        return None

    try:
        return parse_recipe(text, str(path))
    except ValidationError as exc:
        logger.warning("Skipping invalid recipe note: %s", exc)
        return None
