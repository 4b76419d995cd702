from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

from ..errors import InvalidArgument


class Vegetable(str, Enum):
    ASPARAGUS = "asparagus"
    BEETROOT = "beetroot"
    BELL_PEPPER = "bell pepper"
    BROCCOLI = "broccoli"
    CABBAGE = "cabbage"
    CARROT = "carrot"
    CAULIFLOWER = "cauliflower"
    CELERY = "celery"
    CUCUMBER = "cucumber"
    EGGPLANT = "eggplant"
    GARLIC = "garlic"
    LEEK = "leek"
    LETTUCE = "lettuce"
    MUSHROOM = "mushroom"
    ONION = "onion"
    PEA = "pea"
    POTATO = "potato"
    PUMPKIN = "pumpkin"
    SPINACH = "spinach"
    TOMATO = "tomato"
    ZUCCHINI = "zucchini"


VEGETABLE_TOKENS = frozenset(member.value for member in Vegetable)

VEGETABLE_ALIASES = {
    "aubergine": "eggplant",
    "aubergines": "eggplant",
    "courgette": "zucchini",
    "courgettes": "zucchini",
    "zucchinis": "zucchini",
    "capsicum": "bell pepper",
    "capsicums": "bell pepper",
    "pepper": "bell pepper",
    "peppers": "bell pepper",
    "beet": "beetroot",
    "beets": "beetroot",
    "tomatoes": "tomato",
    "potatoes": "potato",
    "squash": "pumpkin",
    "cos": "lettuce",
}


def parse_vegetable(value: Any) -> Vegetable:
    if isinstance(value, Vegetable):
        return value
    if not isinstance(value, str):
        raise InvalidArgument(f"Vegetable must be text, got {value!r}")

    token = _normalize_token(value)
    token = VEGETABLE_ALIASES.get(token, token)
    if token not in VEGETABLE_TOKENS and token.endswith("s"):
        token = token[:-1]
    if token not in VEGETABLE_TOKENS:
        raise InvalidArgument(f"Unknown vegetable: {value!r}")
    return Vegetable(token)


@dataclass(frozen=True)
class Recipe:
    """One dish: its display name and the vegetables it needs.

    Text keys in ``vegetables`` are resolved through :func:`parse_vegetable`.
    The stored mapping is a read-only view over a private copy, so neither
    the caller's input nor the returned view can change the recipe.
    Pickling and copying rebuild from a plain dict; use :meth:`to_dict`
    rather than ``dataclasses.asdict``, which cannot copy the view.
    """

    name: str
    vegetables: Mapping[Vegetable, int] = field(hash=False)
    description: str | None = None
    equipment: tuple[str, ...] = ()
    time_minutes: int | None = None
    notes: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise InvalidArgument("Recipe name must be non-empty text")
        if self.time_minutes is not None and not _is_positive_int(self.time_minutes):
            raise InvalidArgument(f"time_minutes must be a positive integer, got {self.time_minutes!r}")

        object.__setattr__(self, "vegetables", MappingProxyType(_normalize_vegetables(self.vegetables)))
        object.__setattr__(self, "equipment", _normalize_equipment(self.equipment))
        object.__setattr__(self, "description", _optional_text(self.description, "description"))
        object.__setattr__(self, "notes", _optional_text(self.notes, "notes"))

    def __reduce__(self) -> tuple[Any, ...]:
        return (
            type(self),
            (self.name, dict(self.vegetables), self.description, self.equipment, self.time_minutes, self.notes),
        )

    @property
    def total_quantity(self) -> int:
        return sum(self.vegetables.values())

    def to_dict(self) -> dict[str, Any]:
        ordered = sorted(self.vegetables.items(), key=lambda item: item[0].value)
        return {
            "name": self.name,
            "vegetables": {vegetable.value: quantity for vegetable, quantity in ordered},
            "description": self.description,
            "equipment": list(self.equipment),
            "time_minutes": self.time_minutes,
            "notes": self.notes,
        }


def _normalize_vegetables(vegetables: Any) -> dict[Vegetable, int]:
    if not isinstance(vegetables, Mapping):
        raise InvalidArgument("Recipe vegetables must be a mapping of vegetable to quantity")

    normalized: dict[Vegetable, int] = {}
    for key, quantity in vegetables.items():
        vegetable = parse_vegetable(key)
        if vegetable in normalized:
            raise InvalidArgument(f"Duplicate vegetable: {vegetable.value}")
        if not _is_positive_int(quantity):
            raise InvalidArgument(
                f"Quantity for {vegetable.value} must be a positive integer, got {quantity!r}"
            )
        normalized[vegetable] = quantity
    return normalized


def _normalize_equipment(equipment: Any) -> tuple[str, ...]:
    if isinstance(equipment, str) or not isinstance(equipment, (list, tuple)):
        raise InvalidArgument("Recipe equipment must be a list of text items")

    items: list[str] = []
    for item in equipment:
        if not isinstance(item, str) or not item.strip():
            raise InvalidArgument(f"Equipment items must be non-empty text, got {item!r}")
        items.append(item.strip())
    return tuple(items)


def _optional_text(value: Any, field_name: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidArgument(f"Recipe {field_name} must be text, got {value!r}")
    return value.strip() or None


def _is_positive_int(value: Any) -> bool:
    # bool is an int subclass
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def _normalize_token(text: str) -> str:
    return " ".join(text.replace("_", " ").replace("-", " ").lower().split())
