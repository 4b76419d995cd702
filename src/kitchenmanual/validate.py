from __future__ import annotations

from typing import Any

import yaml

from .domain import FRONTMATTER_RE, Recipe, RecipeNote, normalize_items
from .errors import InvalidArgument, ValidationError


def parse_recipe(md: str, source_path: str) -> Recipe:
    note = _read_note_strict(md, source_path)

    name = note.first_value("name", "title")
    if name is None:
        raise ValidationError(f"{source_path}: missing required frontmatter key 'name'")
    if isinstance(name, bool) or not isinstance(name, (str, int)):
        raise ValidationError(f"{source_path}: name must be text")

    vegetables = note.frontmatter.get("vegetables")
    if vegetables is None:
        vegetables = {}
    if not isinstance(vegetables, dict):
        raise ValidationError(f"{source_path}: vegetables must be a mapping of vegetable to quantity")

    try:
        return Recipe(
            name=str(name),
            vegetables=vegetables,
            description=note.text_field("description"),
            equipment=normalize_items(note.frontmatter.get("equipment")),
            time_minutes=note.first_value("time_minutes", "time"),
            notes=note.text_field("notes"),
        )
    except InvalidArgument as exc:
        raise ValidationError(f"{source_path}: {exc}") from exc


def validate_recipe(md: str, source_path: str) -> None:
    parse_recipe(md, source_path)


def _read_note_strict(md: str, source_path: str) -> RecipeNote:
    match = FRONTMATTER_RE.match(md)
    if not match:
        raise ValidationError(f"{source_path}: missing YAML frontmatter")

    try:
        data: Any = yaml.safe_load(match.group(1)) or {}
    except yaml.YAMLError as exc:
        raise ValidationError(f"{source_path}: invalid YAML frontmatter") from exc

    if not isinstance(data, dict):
        raise ValidationError(f"{source_path}: frontmatter must be a mapping")
    return RecipeNote(frontmatter=data, body=md[match.end() :])


__all__ = ["parse_recipe", "validate_recipe"]
