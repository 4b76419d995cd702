from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import os
import tomllib
from typing import Any, Optional

from .errors import ConfigError


TIME_FORMATS = ("minutes", "hours")
SORT_KEYS = ("name", "path")


@dataclass(frozen=True)
class DisplayConfig:
    time_format: str = "minutes"
    sort: str = "name"


@dataclass(frozen=True)
class EffectiveConfig:
    vault_path: str
    recipes_dir: str
    default_project: Optional[str]
    display: DisplayConfig
    project_dir: str


def _config_root() -> Path:
    return Path(os.path.expanduser("~/.config/kitchenmanual"))


def load_global_config() -> dict[str, Any]:
    path = _config_root() / "config.toml"
    if not path.exists():
        return {}
    return _load_toml(path)


def load_profile(profile: str) -> Optional[str]:
    path = _config_root() / "projects.d" / f"{profile}.toml"
    if not path.exists():
        return None
    data = _load_toml(path)
    project = data.get("project")
    if not project:
        raise ConfigError(f"Profile {profile!r} missing 'project' key")
    return str(project)


def load_project_config(project_dir: str) -> dict[str, Any]:
    path = Path(project_dir) / "kitchenmanual.toml"
    if not path.exists():
        return {}
    return _load_toml(path)


def _load_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as fh:
            return tomllib.load(fh)
    except OSError as exc:
        raise ConfigError(f"Failed to read config: {path}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in config: {path}") from exc


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def merge_config(cli: dict[str, Any], project: dict[str, Any], global_cfg: dict[str, Any]) -> dict[str, Any]:
    merged = _deep_merge(global_cfg, project)
    return _deep_merge(merged, cli)


def resolve_config(cli_args: dict[str, Any]) -> EffectiveConfig:
    global_cfg = load_global_config()
    profile = cli_args.get("profile")
    project_dir = cli_args.get("project")
    if not project_dir and profile:
        project_dir = load_profile(profile)
    if not project_dir:
        project_dir = global_cfg.get("default_project") or os.getcwd()

    project_cfg = load_project_config(project_dir)
    merged = merge_config(_cli_to_dict(cli_args), project_cfg, global_cfg)

    vault_path = merged.get("vault_path")
    if not vault_path:
        raise ConfigError("vault_path is required (set in config or via --vault)")

    display_cfg = merged.get("display", {})
    if not isinstance(display_cfg, dict):
        raise ConfigError("[display] must be a table")

    return EffectiveConfig(
        vault_path=str(vault_path),
        recipes_dir=str(merged.get("recipes_dir", "Recipes")),
        default_project=merged.get("default_project"),
        display=DisplayConfig(
            time_format=_normalize_choice(display_cfg.get("time_format"), TIME_FORMATS),
            sort=_normalize_choice(display_cfg.get("sort"), SORT_KEYS),
        ),
        project_dir=str(project_dir),
    )


def _cli_to_dict(cli_args: dict[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key in ("vault_path", "recipes_dir", "default_project"):
        if cli_args.get(key) is not None:
            out[key] = cli_args[key]

    display: dict[str, Any] = {}
    for key in ("time_format", "sort"):
        if cli_args.get(key) is not None:
            display[key] = cli_args[key]
    if display:
        out["display"] = display

    return out


def config_to_toml(cfg: EffectiveConfig) -> str:
    lines = [
        f"vault_path = {cfg.vault_path!r}",
        f"recipes_dir = {cfg.recipes_dir!r}",
    ]
    if cfg.default_project:
        lines.append(f"default_project = {cfg.default_project!r}")
    lines.append("")
    lines.append("[display]")
    lines.append(f"time_format = {cfg.display.time_format!r}")
    lines.append(f"sort = {cfg.display.sort!r}")
    return "\n".join(lines) + "\n"


def _normalize_choice(value: Any, choices: tuple[str, ...]) -> str:
    text = str(value or "").strip().lower()
    if text in choices:
        return text
    return choices[0]
