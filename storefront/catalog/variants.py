"""Attribute-driven variant generation.

A variable product defines attributes such as Color and Size. The
generator produces one variant per combination of attribute values,
preserving attribute order in both the variant name and its attribute
list:

    Color: Red, Blue
    Size:  S, M, L
    ->  Red - S, Red - M, Red - L, Blue - S, Blue - M, Blue - L
"""

from collections.abc import Sequence

import structlog

from storefront.domain.entities import Variant
from storefront.domain.exceptions import InvalidAttributeError, InvalidVariantError
from storefront.domain.value_objects import (
    Attribute,
    PendingVariantId,
    PersistedVariantId,
    VariantAttribute,
)

logger = structlog.get_logger()

NAME_SEPARATOR = " - "


def validate_attributes(attributes: Sequence[Attribute]) -> None:
    """Check that every attribute has a name and non-empty values.

    Raises:
        InvalidAttributeError: On the first malformed attribute.
    """
    for index, attribute in enumerate(attributes):
        if not attribute.name.strip():
            raise InvalidAttributeError("Attribute name cannot be empty", index)
        if not attribute.values:
            raise InvalidAttributeError(
                f"Attribute '{attribute.name}' must have at least one value", index
            )
        if any(not value.strip() for value in attribute.values):
            raise InvalidAttributeError(
                f"Attribute '{attribute.name}' has an empty value", index
            )


def generate_combinations(attributes: Sequence[Attribute]) -> list[list[VariantAttribute]]:
    """Cartesian product of attribute values, in attribute order.

    Starts from a single empty combination and, for each attribute,
    branches every partial combination once per value.
    """
    combinations: list[list[VariantAttribute]] = [[]]
    for attribute in attributes:
        combinations = [
            [*combination, VariantAttribute(name=attribute.name, value=value)]
            for combination in combinations
            for value in attribute.values
        ]
    return combinations


def generate_variants(
    attributes: Sequence[Attribute],
    price: float = 0,
    discount_price: float | None = None,
) -> list[Variant]:
    """Generate one pending variant per attribute combination.

    Args:
        attributes: Ordered attribute definitions.
        price: Default price for each variant.
        discount_price: Default discount price for each variant.

    Returns:
        Exactly prod(len(values)) variants.

    Raises:
        InvalidAttributeError: If any attribute is malformed.
    """
    if not attributes:
        raise InvalidAttributeError("Add at least one attribute before generating variants")
    validate_attributes(attributes)

    variants = [
        Variant(
            id=PendingVariantId.generate(),
            name=NAME_SEPARATOR.join(attr.value for attr in combination),
            price=price,
            discount_price=discount_price,
            in_stock=True,
            stock_quantity=0,
            attributes=combination,
        )
        for combination in generate_combinations(attributes)
    ]
    logger.info(
        "Variants generated",
        attribute_count=len(attributes),
        variant_count=len(variants),
    )
    return variants


def validate_variants(variants: Sequence[Variant], attributes: Sequence[Attribute]) -> None:
    """Validate submitted variants against the product's attributes.

    Each variant needs a name, a positive price, non-negative stock, one
    non-empty value per product attribute and no others.

    Raises:
        InvalidVariantError: On the first invalid variant.
    """
    expected = {attr.name for attr in attributes}
    allowed = {attr.name: set(attr.values) for attr in attributes}

    for index, variant in enumerate(variants):
        if not variant.name.strip():
            raise InvalidVariantError("name is required", index)
        if variant.price <= 0:
            raise InvalidVariantError("price must be positive", index)
        if variant.discount_price and variant.discount_price > variant.price:
            raise InvalidVariantError("discount price exceeds price", index)
        if variant.stock_quantity < 0:
            raise InvalidVariantError("stock quantity cannot be negative", index)
        names = [attr.name for attr in variant.attributes]
        if any(not attr.name.strip() or not attr.value.strip() for attr in variant.attributes):
            raise InvalidVariantError("attribute name and value are required", index)
        if len(names) != len(set(names)) or set(names) != expected:
            raise InvalidVariantError(
                f"attributes {sorted(names)} do not match product attributes {sorted(expected)}",
                index,
            )
        for attr in variant.attributes:
            if attr.value not in allowed[attr.name]:
                raise InvalidVariantError(
                    f"'{attr.value}' is not an allowed value of '{attr.name}'", index
                )


def assign_persisted_ids(variants: Sequence[Variant]) -> list[Variant]:
    """Give pending variants a persisted id; persisted ones keep theirs."""
    for variant in variants:
        if not variant.is_persisted:
            variant.id = PersistedVariantId.generate()
    return list(variants)
