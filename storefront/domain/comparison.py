"""Product comparison set."""

from dataclasses import dataclass, field
from enum import Enum

from storefront.domain.entities import Product

MAX_COMPARISON_ITEMS = 4


class AddOutcome(str, Enum):
    """Result of adding a product to the comparison set."""

    ADDED = "added"
    ALREADY_PRESENT = "already_present"
    CAPACITY_REACHED = "capacity_reached"


@dataclass(frozen=True)
class AddResult:
    """Outcome of an add, with a user-facing warning when rejected."""

    outcome: AddOutcome
    warning: str | None = None

    @property
    def added(self) -> bool:
        return self.outcome is AddOutcome.ADDED


@dataclass
class ComparisonSet:
    """Bounded, id-unique list of product snapshots."""

    capacity: int = MAX_COMPARISON_ITEMS
    _products: list[Product] = field(default_factory=list)

    @property
    def products(self) -> list[Product]:
        return list(self._products)

    @property
    def can_add_more(self) -> bool:
        return len(self._products) < self.capacity

    def contains(self, product_id: str) -> bool:
        return any(p.id == product_id for p in self._products)

    def add(self, product: Product) -> AddResult:
        """Add a product unless present or at capacity.

        Exceeding capacity is not an error: the set is left unchanged and
        the result carries a warning.
        """
        if self.contains(product.id):
            return AddResult(AddOutcome.ALREADY_PRESENT)
        if not self.can_add_more:
            return AddResult(
                AddOutcome.CAPACITY_REACHED,
                warning=f"You can compare up to {self.capacity} products at a time",
            )
        self._products.append(product)
        return AddResult(AddOutcome.ADDED)

    def remove(self, product_id: str) -> None:
        self._products = [p for p in self._products if p.id != product_id]

    def clear(self) -> None:
        self._products.clear()

    def __len__(self) -> int:
        return len(self._products)
