"""Sample catalog generator with deterministic seeding.

Generates a small category hierarchy and realistic products for demos
and local development. Uses seeded random for reproducibility: the same
config always yields the same categories, products, prices and stock.
"""

import hashlib
import random
from dataclasses import dataclass, field
from typing import Iterator

from storefront.catalog.variants import assign_persisted_ids, generate_variants
from storefront.domain.entities import Category, Product
from storefront.domain.value_objects import Attribute, Specification, slugify


# ============================================================================
# Constants
# ============================================================================

# Synthetic brand names (fictional companies)
BRANDS = [
    "Acme",
    "Contoso",
    "Northwind",
    "Fabrikam",
    "Tailwind",
    "Globex",
    "Initech",
]

# (parent, child) names; parents without children are listed with None
TAXONOMY: list[tuple[str, str | None]] = [
    ("Electronics", "Laptops"),
    ("Electronics", "Headphones"),
    ("Electronics", "Speakers"),
    ("Clothing", "Shirts"),
    ("Clothing", "Shoes"),
    ("Home", "Furniture"),
    ("Books", None),
]

# Price ranges by category name (in dollars)
PRICE_RANGES: dict[str, tuple[int, int]] = {
    "Laptops": (599, 2499),
    "Headphones": (29, 399),
    "Speakers": (49, 799),
    "Shirts": (19, 89),
    "Shoes": (49, 249),
    "Furniture": (99, 1999),
    "Books": (9, 49),
    "default": (9, 99),
}

# Variation attributes by category name
CATEGORY_ATTRIBUTES: dict[str, list[Attribute]] = {
    "Shirts": [
        Attribute(name="Color", values=("Black", "White", "Navy")),
        Attribute(name="Size", values=("S", "M", "L", "XL")),
    ],
    "Shoes": [
        Attribute(name="Size", values=("US 8", "US 9", "US 10", "US 11")),
    ],
    "Furniture": [
        Attribute(name="Color", values=("Oak", "Walnut")),
    ],
}

ADJECTIVES = [
    "Premium",
    "Classic",
    "Essential",
    "Pro",
    "Ultra",
    "Compact",
    "Deluxe",
    "Everyday",
]

PRODUCT_TEMPLATES: dict[str, list[str]] = {
    "Laptops": ["{brand} {adj} Laptop 15\"", "{brand} Notebook {adj}"],
    "Headphones": ["{brand} {adj} Headphones", "{brand} Wireless {adj} Earbuds"],
    "Speakers": ["{brand} {adj} Speaker", "{brand} Portable {adj} Sound"],
    "Shirts": ["{brand} {adj} T-Shirt", "{brand} {adj} Polo"],
    "Shoes": ["{brand} {adj} Sneakers", "{brand} {adj} Runners"],
    "Furniture": ["{brand} {adj} Desk", "{brand} {adj} Bookshelf"],
    "Books": ["The {adj} Guide by {brand} Press", "{adj} Stories Vol. {n}"],
    "default": ["{brand} {adj} Item"],
}


# ============================================================================
# Generator Configuration
# ============================================================================


@dataclass
class GeneratorConfig:
    """Configuration for sample catalog generation.

    Attributes:
        seed: Random seed for reproducibility.
        products_per_category: Number of products per leaf category.
        include_variants: Whether to generate variable products.
    """

    seed: int = 42
    products_per_category: int = 5
    include_variants: bool = True

    @classmethod
    def small(cls) -> "GeneratorConfig":
        """Config for a small catalog (~30 products)."""
        return cls(seed=42, products_per_category=5)

    @classmethod
    def full(cls) -> "GeneratorConfig":
        """Config for a larger catalog (~120 products)."""
        return cls(seed=42, products_per_category=20)


@dataclass
class SampleCatalog:
    """Generated categories and products."""

    categories: list[Category] = field(default_factory=list)
    products: list[Product] = field(default_factory=list)

    @property
    def variant_count(self) -> int:
        return sum(len(p.variants) for p in self.products)


# ============================================================================
# Catalog Generator
# ============================================================================


def _deterministic_id(*args: str | int) -> str:
    data = "|".join(str(a) for a in args)
    return hashlib.md5(data.encode()).hexdigest()


class CatalogGenerator:
    """Generates sample catalogs with deterministic seeding.

    Example usage:
        catalog = CatalogGenerator(GeneratorConfig.small()).generate()
        print(len(catalog.products), catalog.variant_count)
    """

    def __init__(self, config: GeneratorConfig | None = None) -> None:
        self.config = config or GeneratorConfig.small()

    def generate_categories(self) -> list[Category]:
        """Build the fixed taxonomy, parents before children."""
        by_name: dict[str, Category] = {}
        for parent_name, child_name in TAXONOMY:
            for name, parent in ((parent_name, None), (child_name, parent_name)):
                if name is None or name in by_name:
                    continue
                by_name[name] = Category(
                    id=_deterministic_id(self.config.seed, "category", name),
                    name=name,
                    slug=slugify(name),
                    parent_id=by_name[parent].id if parent else None,
                    description=f"Shop our selection of {name.lower()}.",
                )
        return list(by_name.values())

    def _leaf_categories(self, categories: list[Category]) -> list[Category]:
        parents = {c.parent_id for c in categories if c.parent_id}
        return [c for c in categories if c.id not in parents]

    def _generate_product(self, category: Category, index: int) -> Product:
        """Generate a single product for a leaf category."""
        rng = random.Random(_deterministic_id(self.config.seed, category.name, index))

        brand = rng.choice(BRANDS)
        adj = rng.choice(ADJECTIVES)
        template = rng.choice(PRODUCT_TEMPLATES.get(category.name, PRODUCT_TEMPLATES["default"]))
        name = f"{template.format(brand=brand, adj=adj, n=index + 1)} {index + 1:02d}"

        low, high = PRICE_RANGES.get(category.name, PRICE_RANGES["default"])
        price = rng.randint(low, high) + 0.99
        discount_price = round(price * 0.8, 2) if rng.random() < 0.3 else None

        in_stock = rng.random() > 0.1
        product_id = _deterministic_id(self.config.seed, "product", category.id, index)
        sku = f"{category.name[:3].upper()}-{index:03d}"

        product = Product(
            id=product_id,
            name=name,
            slug=slugify(name),
            description=f"High-quality {category.name.lower()} from {brand}. "
                        f"Part of our {adj.lower()} collection.",
            price=price,
            discount_price=discount_price,
            categories=[category.parent_id, category.id] if category.parent_id else [category.id],
            image=f"https://picsum.photos/seed/{product_id[:8]}/400/400",
            sku=sku,
            brand=brand,
            in_stock=in_stock,
            stock_quantity=rng.randint(10, 200) if in_stock else 0,
            rating=round(rng.uniform(3.0, 5.0), 1),
            review_count=rng.randint(0, 250),
            today_offer=discount_price is not None and rng.random() < 0.5,
            featured=rng.random() < 0.2,
            specifications=[Specification(key="Brand", value=brand)],
        )

        attributes = CATEGORY_ATTRIBUTES.get(category.name)
        if self.config.include_variants and attributes:
            product.type = "variable"
            product.attributes = list(attributes)
            product.variants = assign_persisted_ids(
                generate_variants(attributes, price=price, discount_price=discount_price)
            )
            for position, variant in enumerate(product.variants):
                variant.sku = f"{sku}-{position + 1:02d}"
                variant.stock_quantity = rng.randint(0, 50)
                variant.in_stock = variant.stock_quantity > 0

        return product

    def generate_products(self, categories: list[Category]) -> Iterator[Product]:
        """Yield products for every leaf category."""
        for category in self._leaf_categories(categories):
            for index in range(self.config.products_per_category):
                yield self._generate_product(category, index)

    def generate(self) -> SampleCatalog:
        """Generate the complete sample catalog."""
        categories = self.generate_categories()
        return SampleCatalog(
            categories=categories,
            products=list(self.generate_products(categories)),
        )
