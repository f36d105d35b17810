"""Category hierarchy utilities.

Categories are stored flat, each with an optional ``parent_id``. This
module converts between the flat form and a forest of nested nodes, and
indexes the result for lookups by id, slug and name.

Example:
    tree = build_tree(categories)
    for category, level in flatten(tree):
        print("-" * level, category.name)
"""

from dataclasses import replace
from typing import Iterable

from storefront.domain.entities import Category
from storefront.domain.exceptions import CategoryCycleError


def flatten(tree: Iterable[Category], level: int = 0) -> list[tuple[Category, int]]:
    """Flatten a category forest depth-first, parents before children.

    Args:
        tree: Root nodes to flatten.
        level: Depth assigned to the given roots.

    Returns:
        List of (category, level) pairs in pre-order.

    Raises:
        CategoryCycleError: If a node is reachable from itself.
    """
    result: list[tuple[Category, int]] = []
    _flatten_into(list(tree), level, result, set(), set())
    return result


def _flatten_into(
    nodes: list[Category],
    level: int,
    result: list[tuple[Category, int]],
    path: set[str],
    emitted: set[str],
) -> None:
    for node in nodes:
        if node.id in path or node.id in emitted:
            raise CategoryCycleError(node.id)
        result.append((node, level))
        emitted.add(node.id)
        path.add(node.id)
        _flatten_into(node.children, level + 1, result, path, emitted)
        path.discard(node.id)


def build_tree(categories: Iterable[Category]) -> list[Category]:
    """Build a forest from a flat list using ``parent_id`` references.

    The input is not mutated; nodes in the result are copies with fresh
    ``children`` lists. Categories whose parent does not resolve are
    treated as roots. Sibling order follows input order.

    Args:
        categories: Flat categories.

    Returns:
        Root categories with nested children.

    Raises:
        CategoryCycleError: If the parent references form a cycle.
    """
    nodes: dict[str, Category] = {}
    for category in categories:
        nodes[category.id] = replace(category, children=[])

    _check_acyclic(nodes)

    roots: list[Category] = []
    for node in nodes.values():
        parent = nodes.get(node.parent_id) if node.parent_id else None
        if parent is not None:
            parent.children.append(node)
        else:
            roots.append(node)
    return roots


def _check_acyclic(nodes: dict[str, Category]) -> None:
    safe: set[str] = set()
    for start in nodes:
        chain: set[str] = set()
        current: str | None = start
        while current is not None and current in nodes and current not in safe:
            if current in chain:
                raise CategoryCycleError(current)
            chain.add(current)
            current = nodes[current].parent_id
        safe.update(chain)


def would_create_cycle(
    categories: Iterable[Category],
    category_id: str,
    new_parent_id: str | None,
) -> bool:
    """Check whether re-parenting a category would create a cycle.

    True when the new parent is the category itself or one of its
    descendants.
    """
    if new_parent_id is None:
        return False
    parents = {c.id: c.parent_id for c in categories}
    current: str | None = new_parent_id
    seen: set[str] = set()
    while current is not None and current not in seen:
        if current == category_id:
            return True
        seen.add(current)
        current = parents.get(current)
    return False


def find_by_slug(tree: Iterable[Category], slug: str) -> Category | None:
    """Find a category anywhere in a forest by slug."""
    for category, _ in flatten(tree):
        if category.slug == slug:
            return category
    return None


class CategoryTree:
    """Indexed view over a set of categories.

    Example usage:
        tree = CategoryTree(await repository.list_categories())
        electronics = tree.get_by_slug("electronics")
        ids = tree.descendant_ids(electronics.id)
    """

    def __init__(self, categories: Iterable[Category]) -> None:
        """Build the forest and lookup indexes.

        Args:
            categories: Flat categories.
        """
        self._roots = build_tree(categories)
        self._flat = flatten(self._roots)
        self._by_id: dict[str, Category] = {c.id: c for c, _ in self._flat}
        self._levels: dict[str, int] = {c.id: level for c, level in self._flat}

    @property
    def roots(self) -> list[Category]:
        return self._roots

    def flattened(self) -> list[tuple[Category, int]]:
        return list(self._flat)

    def get_by_id(self, category_id: str) -> Category | None:
        return self._by_id.get(category_id)

    def get_by_slug(self, slug: str) -> Category | None:
        return find_by_slug(self._roots, slug)

    def level_of(self, category_id: str) -> int | None:
        return self._levels.get(category_id)

    def find(self, identifier: str) -> Category | None:
        """Find a category by id, slug or case-insensitive name."""
        if identifier in self._by_id:
            return self._by_id[identifier]
        lowered = identifier.lower()
        for category, _ in self._flat:
            if category.slug == lowered or category.name.lower() == lowered:
                return category
        return None

    def name_of(self, category_id: str) -> str:
        """Category name, falling back to the id when unknown."""
        category = self._by_id.get(category_id)
        return category.name if category else category_id

    def descendant_ids(self, category_id: str) -> list[str]:
        """Ids of all descendants of a category (excluding itself)."""
        category = self._by_id.get(category_id)
        if category is None:
            return []
        return [c.id for c, _ in flatten(category.children)]

    def search(self, query: str) -> list[Category]:
        """Search categories by name (case-insensitive)."""
        query_lower = query.lower()
        return [c for c, _ in self._flat if query_lower in c.name.lower()]
