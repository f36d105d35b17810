"""Domain exceptions.

All domain-level errors that represent business rule violations.
These exceptions are raised by entities, the catalog utilities and the
application services; the API layer maps them to HTTP responses.
"""

from typing import Any


class DomainError(Exception):
    """Base class for all domain exceptions.

    All domain errors should inherit from this class to allow
    catching domain-specific errors at the application layer.
    """

    error_code: str = "DOMAIN_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize domain error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(DomainError):
    """Base class for rejected input (maps to 400)."""

    error_code = "VALIDATION_ERROR"


class NotFoundError(DomainError):
    """Base class for missing resources (maps to 404)."""

    error_code = "NOT_FOUND"


# ============================================================================
# Category Errors
# ============================================================================


class CategoryNotFoundError(NotFoundError):
    """Raised when a category does not exist."""

    error_code = "CATEGORY_NOT_FOUND"

    def __init__(self, category_id: str) -> None:
        super().__init__(
            f"Category not found: {category_id}",
            details={"category_id": category_id},
        )


class CategoryCycleError(ValidationError):
    """Raised when a category parent graph contains a cycle."""

    error_code = "CATEGORY_CYCLE"

    def __init__(self, category_id: str) -> None:
        super().__init__(
            f"Category hierarchy contains a cycle at {category_id}",
            details={"category_id": category_id},
        )


class CategoryHasChildrenError(ValidationError):
    """Raised when deleting a category that still has subcategories."""

    error_code = "CATEGORY_HAS_CHILDREN"

    def __init__(self, category_id: str, child_count: int) -> None:
        super().__init__(
            "Cannot delete category that has subcategories. "
            "Please delete or reassign subcategories first.",
            details={"category_id": category_id, "child_count": child_count},
        )


class DuplicateSlugError(ValidationError):
    """Raised when a generated slug collides with an existing one."""

    error_code = "DUPLICATE_SLUG"

    def __init__(self, entity_type: str, slug: str) -> None:
        super().__init__(
            f"A {entity_type} with this name already exists",
            details={"entity_type": entity_type, "slug": slug},
        )


# ============================================================================
# Product Errors
# ============================================================================


class ProductNotFoundError(NotFoundError):
    """Raised when a product does not exist."""

    error_code = "PRODUCT_NOT_FOUND"

    def __init__(self, identifier: str) -> None:
        super().__init__(
            f"Product not found: {identifier}",
            details={"product": identifier},
        )


class UnknownCategoryError(ValidationError):
    """Raised when a product references a category that does not exist."""

    error_code = "UNKNOWN_CATEGORY"

    def __init__(self, category_id: str) -> None:
        super().__init__(
            f"Category not found: {category_id}",
            details={"category_id": category_id},
        )


class MissingFieldError(ValidationError):
    """Raised when required fields are absent."""

    error_code = "MISSING_FIELD"

    def __init__(self, message: str, fields: list[str]) -> None:
        super().__init__(message, details={"fields": fields})


class DiscountExceedsPriceError(ValidationError):
    """Raised when a discount price is greater than the regular price."""

    error_code = "DISCOUNT_EXCEEDS_PRICE"

    def __init__(self, price: float, discount_price: float) -> None:
        super().__init__(
            "Discount price cannot be greater than regular price",
            details={"price": price, "discount_price": discount_price},
        )


class InvalidAttributeError(ValidationError):
    """Raised when an attribute definition is malformed.

    Variant generation refuses to proceed when any attribute has an
    empty name or no usable values.
    """

    error_code = "INVALID_ATTRIBUTE"

    def __init__(self, reason: str, attribute_index: int | None = None) -> None:
        super().__init__(
            reason,
            details={"attribute_index": attribute_index},
        )


class InvalidVariantError(ValidationError):
    """Raised when a variant does not match the product's attributes."""

    error_code = "INVALID_VARIANT"

    def __init__(self, reason: str, variant_index: int | None = None) -> None:
        super().__init__(
            f"Invalid variant: {reason}",
            details={"variant_index": variant_index},
        )


class MediaValidationError(ValidationError):
    """Raised when an uploaded file is rejected."""

    error_code = "INVALID_MEDIA"

    def __init__(self, filename: str, reason: str) -> None:
        super().__init__(reason, details={"filename": filename})


class InvalidReviewError(ValidationError):
    """Raised when a review submission is incomplete or out of range."""

    error_code = "INVALID_REVIEW"


# ============================================================================
# Cart Errors
# ============================================================================


class VariantNotFoundError(NotFoundError):
    """Raised when a product has no variant with the given id."""

    error_code = "VARIANT_NOT_FOUND"

    def __init__(self, product_id: str, variant_id: str) -> None:
        super().__init__(
            f"Variant {variant_id} not found for product {product_id}",
            details={"product_id": product_id, "variant_id": variant_id},
        )


class VariantRequiredError(ValidationError):
    """Raised when adding a variable product without choosing a variant."""

    error_code = "VARIANT_REQUIRED"

    def __init__(self, product_id: str) -> None:
        super().__init__(
            "Please select a variant before adding this product to the cart",
            details={"product_id": product_id},
        )


class OutOfStockError(ValidationError):
    """Raised when adding an out-of-stock product or variant to the cart."""

    error_code = "OUT_OF_STOCK"

    def __init__(self, product_id: str, variant_id: str | None = None) -> None:
        super().__init__(
            "This item is out of stock",
            details={"product_id": product_id, "variant_id": variant_id},
        )


class CartItemNotFoundError(NotFoundError):
    """Raised when a cart line is not found."""

    error_code = "CART_ITEM_NOT_FOUND"

    def __init__(self, product_id: str, variant_id: str | None = None) -> None:
        super().__init__(
            f"Item {product_id}"
            + (f" ({variant_id})" if variant_id else "")
            + " not found in cart",
            details={"product_id": product_id, "variant_id": variant_id},
        )
