"""Project category taxonomy and keyword-based classification."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Sequence

OTHER_CATEGORY = "other"
DEFAULT_ICON = "Package"
DEFAULT_CATEGORY_LABEL = "Project"


class CategoryTableError(ValueError):
    """Raised when the category table violates its invariants."""


@dataclass(frozen=True, slots=True)
class CategoryDefinition:
    """A single entry in the project taxonomy."""

    name: str
    display_name: str
    description: str
    keywords: tuple[str, ...]
    icon: str
    aliases: tuple[str, ...]

    def matches(self, token: str) -> bool:
        return token == self.name or token in self.aliases

    def keyword_score(self, text: str) -> int:
        """Count distinct keywords found as substrings of *text*."""

        return sum(1 for keyword in self.keywords if keyword in text)

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "displayName": self.display_name,
            "description": self.description,
            "keywords": list(self.keywords),
            "icon": self.icon,
            "aliases": list(self.aliases),
        }


def _category_token(value: object) -> str:
    # Non-text input (JSON numbers, booleans, null) never names a category.
    return value.strip().lower() if isinstance(value, str) else ""


class CategoryTable:
    """Ordered, validated collection of category definitions."""

    def __init__(self, definitions: Iterable[CategoryDefinition]) -> None:
        self._definitions: tuple[CategoryDefinition, ...] = tuple(definitions)
        self._by_name: dict[str, CategoryDefinition] = {}
        self._lookup: dict[str, str] = {}
        self._validate()

    def _validate(self) -> None:
        for definition in self._definitions:
            if definition.name in self._by_name:
                raise CategoryTableError(f"Duplicate category name '{definition.name}'")
            self._by_name[definition.name] = definition
            for token in (definition.name, *definition.aliases):
                owner = self._lookup.get(token)
                if owner is not None and owner != definition.name:
                    raise CategoryTableError(
                        f"Alias '{token}' is claimed by both '{owner}' and '{definition.name}'"
                    )
                self._lookup[token] = definition.name

        others = [definition for definition in self._definitions if definition.name == OTHER_CATEGORY]
        if len(others) != 1:
            raise CategoryTableError(f"Category '{OTHER_CATEGORY}' must be defined exactly once")
        if self._definitions[-1].name != OTHER_CATEGORY:
            raise CategoryTableError(f"Category '{OTHER_CATEGORY}' must be the last entry")
        if others[0].keywords:
            raise CategoryTableError(f"Category '{OTHER_CATEGORY}' must not define keywords")

    def __iter__(self) -> Iterator[CategoryDefinition]:
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def get(self, name: str) -> CategoryDefinition | None:
        return self._by_name.get(name)

    def definitions(self) -> Sequence[CategoryDefinition]:
        return self._definitions

    def names(self) -> list[str]:
        return [definition.name for definition in self._definitions]

    def normalize(self, value: object) -> str:
        return self._lookup.get(_category_token(value), OTHER_CATEGORY)

    def is_known(self, value: object) -> bool:
        return _category_token(value) in self._lookup

    def auto_detect(self, project_name: str, project_path: str) -> str:
        search_text = f"{project_name} {project_path}".lower()
        best_name = OTHER_CATEGORY
        best_score = 0
        for definition in self._definitions:
            if definition.name == OTHER_CATEGORY:
                continue
            score = definition.keyword_score(search_text)
            # Strictly greater keeps the earliest definition on ties.
            if score > best_score:
                best_name = definition.name
                best_score = score
        return best_name


CATEGORY_TABLE = CategoryTable(
    [
        CategoryDefinition(
            name="documentation",
            display_name="Documentation",
            description="Documentation, guides, and knowledge bases",
            keywords=("doc", "docs", "guide", "wiki", "knowledge", "readme", "manual"),
            icon="BookOpen",
            aliases=("docs", "documentation", "guides", "manuals"),
        ),
        CategoryDefinition(
            name="backend",
            display_name="Backend Services",
            description="Backend APIs, services, and server-side applications",
            keywords=("backend", "api", "server", "service", "worker", "job", "queue"),
            icon="Server",
            aliases=("backend", "backend-services", "api", "services"),
        ),
        CategoryDefinition(
            name="frontend",
            display_name="Frontend Applications",
            description="Web applications, UIs, and client-side projects",
            keywords=("frontend", "web", "app", "ui", "dashboard", "portal", "site"),
            icon="Layout",
            aliases=("frontend", "web-app", "webapp", "ui", "website"),
        ),
        CategoryDefinition(
            name="tools",
            display_name="Developer Tools",
            description="CLI tools, utilities, and development aids",
            keywords=("cli", "tool", "util", "helper", "automation", "script"),
            icon="Wrench",
            aliases=("tools", "utilities", "cli-tools", "dev-tools"),
        ),
        CategoryDefinition(
            name="infrastructure",
            display_name="Infrastructure",
            description="DevOps, deployment, and infrastructure projects",
            keywords=("infra", "deploy", "devops", "ci", "cd", "docker", "k8s"),
            icon="Cloud",
            aliases=("infrastructure", "infra", "devops", "deployment"),
        ),
        CategoryDefinition(
            name="workspace",
            display_name="Workspace Configuration",
            description="Workspace settings, configurations, and metadata",
            keywords=("workspace", "config", "settings", "meta", "claude"),
            icon="Folder",
            aliases=("workspace", "workspace-config", "settings"),
        ),
        CategoryDefinition(
            name="ai-agents",
            display_name="AI & Agents",
            description="AI services, agents, and machine learning projects",
            keywords=("ai", "agent", "claude", "gpt", "ml", "llm", "bot"),
            icon="Bot",
            aliases=("ai", "agents", "ai-agents", "ml"),
        ),
        CategoryDefinition(
            name="ecommerce",
            display_name="E-Commerce",
            description="Online stores, shopping platforms, and retail applications",
            keywords=("store", "shop", "ecommerce", "cart", "product", "retail"),
            icon="ShoppingCart",
            aliases=("ecommerce", "e-commerce", "store", "shop"),
        ),
        CategoryDefinition(
            name=OTHER_CATEGORY,
            display_name="Other",
            description="Miscellaneous projects",
            keywords=(),
            icon=DEFAULT_ICON,
            aliases=("other", "misc", "miscellaneous"),
        ),
    ]
)


def title_case_slug(value: str) -> str:
    """Turn ``kebab-case`` or ``snake_case`` into space separated Title Case."""

    words = value.replace("-", " ").replace("_", " ").split(" ")
    return " ".join(word[:1].upper() + word[1:] for word in words)


def normalize_category(value: object) -> str:
    return CATEGORY_TABLE.normalize(value)


def auto_detect_category(project_name: str, project_path: str) -> str:
    return CATEGORY_TABLE.auto_detect(project_name, project_path)


def generate_description(project_name: str, category: str) -> str:
    definition = CATEGORY_TABLE.get(category)
    label = definition.display_name if definition else DEFAULT_CATEGORY_LABEL
    return f"{title_case_slug(project_name)} - {label}"


def get_category_icon(category: str) -> str:
    definition = CATEGORY_TABLE.get(category)
    return definition.icon if definition else DEFAULT_ICON


def get_category_definition(name: str) -> CategoryDefinition | None:
    return CATEGORY_TABLE.get(name)


def get_all_categories() -> list[CategoryDefinition]:
    return list(CATEGORY_TABLE)


def is_valid_category(value: object) -> bool:
    """Return whether *value* names a category or one of its aliases."""

    return CATEGORY_TABLE.is_known(value)


__all__ = [
    "CATEGORY_TABLE",
    "CategoryDefinition",
    "CategoryTable",
    "CategoryTableError",
    "OTHER_CATEGORY",
    "auto_detect_category",
    "generate_description",
    "get_all_categories",
    "get_category_definition",
    "get_category_icon",
    "is_valid_category",
    "normalize_category",
    "title_case_slug",
]
