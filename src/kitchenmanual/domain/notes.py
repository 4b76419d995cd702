from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Any


FRONTMATTER_RE = re.compile(r"^\ufeff?\s*---\r?\n(.*?)\r?\n---\r?\n", re.DOTALL)


@dataclass(frozen=True)
class RecipeNote:
    frontmatter: dict[str, Any]
    body: str

    @property
    def sections(self) -> dict[str, str]:
        return extract_sections(self.body)

    def first_value(self, *keys: str) -> Any:
        for key in keys:
            value = self.frontmatter.get(key)
            if value is not None:
                return value
        return None

    def text_field(self, key: str) -> Any:
        """Frontmatter value for ``key``, else the body section titled after it."""
        value = self.frontmatter.get(key)
        if value is not None:
            return value
        return self.sections.get(key.capitalize()) or None


def extract_sections(md: str, heading_level: int = 2) -> dict[str, str]:
    prefix = "#" * heading_level + " "
    sections: dict[str, list[str]] = {}
    current: str | None = None

    for line in md.splitlines():
        if line.startswith(prefix):
            current = line[len(prefix) :].strip()
            sections[current] = []
            continue
        if current is not None:
            sections[current].append(line)

    return {name: "\n".join(lines).strip() for name, lines in sections.items()}


def normalize_items(value: Any) -> list[Any]:
    if isinstance(value, list):
        return value
    if value is None:
        return []
    return [value]
