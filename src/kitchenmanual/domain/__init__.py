from .models import VEGETABLE_ALIASES, Recipe, Vegetable, parse_vegetable
from .notes import FRONTMATTER_RE, RecipeNote, extract_sections, normalize_items

__all__ = [
    "FRONTMATTER_RE",
    "Recipe",
    "RecipeNote",
    "VEGETABLE_ALIASES",
    "Vegetable",
    "extract_sections",
    "normalize_items",
    "parse_vegetable",
]
