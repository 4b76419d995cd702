from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .config import EffectiveConfig


@dataclass(frozen=True)
class VaultPaths:
    vault_root: Path
    recipes_dir: Path


def resolve_vault_paths(cfg: EffectiveConfig) -> VaultPaths:
    root = Path(cfg.vault_path).expanduser()
    recipes = Path(cfg.recipes_dir)
    return VaultPaths(
        vault_root=root,
        recipes_dir=recipes if recipes.is_absolute() else root / recipes,
    )
