"""Category schemas for the insight canvases.

Static configuration: which categories a canvas has, their labels, and the
one-level parent/child grouping used when rendering. Nesting never changes
the board's data model; a child category keeps its own ordered list.
"""

from dataclasses import dataclass, field

from app.core.exceptions import SchemaError, UnknownCanvasError


@dataclass(frozen=True)
class Category:
    """One named, ordered bucket of blocks."""

    key: str
    label: str
    description: str = ""
    parent: str | None = None
    seed_key: str = ""
    seed_limit: int | None = None
    max_blocks: int | None = None

    def __post_init__(self):
        if not self.seed_key:
            object.__setattr__(self, "seed_key", self.key)


@dataclass(frozen=True)
class LayoutGroup:
    """A top-level category and the categories nested under it."""

    category: Category
    children: tuple[Category, ...] = ()


@dataclass(frozen=True)
class CategorySchema:
    """Declaration-ordered categories for one canvas.

    Validated on construction:
        - category keys are unique
        - seed keys are unique
        - parents exist and are themselves top-level (depth is exactly one)
    """

    name: str
    title: str
    categories: tuple[Category, ...]
    seed_blank: bool = False
    _by_key: dict[str, Category] = field(init=False, repr=False, compare=False)
    _by_seed_key: dict[str, str] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        by_key: dict[str, Category] = {}
        by_seed_key: dict[str, str] = {}
        for category in self.categories:
            if category.key in by_key:
                raise SchemaError(f"Duplicate category key '{category.key}' in '{self.name}'")
            if category.seed_key in by_seed_key:
                raise SchemaError(f"Duplicate seed key '{category.seed_key}' in '{self.name}'")
            by_key[category.key] = category
            by_seed_key[category.seed_key] = category.key

        for category in self.categories:
            if category.parent is None:
                continue
            if category.parent == category.key:
                raise SchemaError(f"Category '{category.key}' cannot be its own parent")
            parent = by_key.get(category.parent)
            if parent is None:
                raise SchemaError(f"Unknown parent '{category.parent}' for '{category.key}'")
            if parent.parent is not None:
                raise SchemaError(
                    f"Category '{category.key}' nests under '{parent.key}', which is already nested"
                )

        object.__setattr__(self, "_by_key", by_key)
        object.__setattr__(self, "_by_seed_key", by_seed_key)

    def keys(self) -> list[str]:
        return [c.key for c in self.categories]

    def has(self, key: str) -> bool:
        return key in self._by_key

    def get(self, key: str) -> Category | None:
        return self._by_key.get(key)

    def resolve_seed_key(self, name: str) -> str | None:
        """Map a logical seed name (``existingAlternatives``) or a category key to a category key."""
        if name in self._by_seed_key:
            return self._by_seed_key[name]
        if name in self._by_key:
            return name
        return None

    def layout(self) -> list[LayoutGroup]:
        """Rendering groups: each top-level category with its nested children."""
        groups = []
        for category in self.categories:
            if category.parent is not None:
                continue
            children = tuple(c for c in self.categories if c.parent == category.key)
            groups.append(LayoutGroup(category=category, children=children))
        return groups


DECONSTRUCT = CategorySchema(
    name="deconstruct",
    title="Idea Deconstruction",
    categories=(
        Category(
            key="problem",
            label="Problem",
            description="What problem are you solving?",
            seed_key="problem",
            seed_limit=5,
        ),
        Category(
            key="alternatives",
            label="Existing Alternatives",
            description="Current solutions people use",
            parent="problem",
            seed_key="existingAlternatives",
            seed_limit=5,
        ),
        Category(
            key="segments",
            label="Customer Segments",
            description="Who are your potential customers?",
            seed_key="customerSegments",
            seed_limit=5,
        ),
        Category(
            key="early-adopters",
            label="Early Adopter Segment",
            description="First customers willing to try your solution",
            parent="segments",
            seed_key="earlyAdopters",
            seed_limit=5,
        ),
        Category(
            key="job-to-be-done",
            label="Job to be Done",
            description="What job is the customer hiring your product to do?",
            seed_key="jobToBeDone",
            seed_limit=1,
            max_blocks=1,
        ),
    ),
)

SYNTHESIS = CategorySchema(
    name="synthesis",
    title="Synthesis",
    categories=(
        Category(key="push", label="Push Forces", description="Switching triggers & problems"),
        Category(key="pull", label="Pull Forces", description="Desired outcomes"),
        Category(key="inertia", label="Inertia", description="Resistance to change"),
        Category(key="friction", label="Friction", description="Pain points with current solution"),
        Category(key="pattern", label="Patterns", description="Common insights across interviews"),
    ),
    seed_blank=True,
)

SCHEMAS: dict[str, CategorySchema] = {
    DECONSTRUCT.name: DECONSTRUCT,
    SYNTHESIS.name: SYNTHESIS,
}


def get_schema(canvas: str) -> CategorySchema:
    """Return the category schema for a canvas name.

    Raises:
        UnknownCanvasError: If no schema is registered under that name
    """
    schema = SCHEMAS.get(canvas)
    if schema is None:
        raise UnknownCanvasError(canvas)
    return schema
