"""Value Objects for the domain layer.

Value objects are immutable objects that are defined by their attributes
rather than identity. They are interchangeable when their values are equal.
"""

import re
from dataclasses import dataclass
from typing import Any, Literal, Self
from uuid import uuid4

from storefront.domain.base import ValueObject


# ============================================================================
# Variant Identifiers
# ============================================================================


@dataclass(frozen=True)
class PendingVariantId(ValueObject):
    """Identifier of a variant generated client-side and not yet saved.

    Pending ids are replaced with persisted ids when the product is saved.
    """

    client_id: str

    @classmethod
    def generate(cls) -> Self:
        """Generate a new pending id."""
        return cls(client_id=uuid4().hex)

    @property
    def is_persisted(self) -> bool:
        return False

    def __str__(self) -> str:
        return self.client_id


@dataclass(frozen=True)
class PersistedVariantId(ValueObject):
    """Identifier of a variant that has been stored."""

    id: str

    @classmethod
    def generate(cls) -> Self:
        """Generate a new persisted id."""
        return cls(id=uuid4().hex)

    @property
    def is_persisted(self) -> bool:
        return True

    def __str__(self) -> str:
        return self.id


VariantId = PendingVariantId | PersistedVariantId


def variant_id_to_dict(variant_id: VariantId) -> dict[str, str]:
    """Serialize a variant id as a tagged dictionary."""
    if isinstance(variant_id, PersistedVariantId):
        return {"kind": "persisted", "id": variant_id.id}
    return {"kind": "pending", "id": variant_id.client_id}


def variant_id_from_dict(data: dict[str, Any] | None) -> VariantId:
    """Deserialize a tagged variant id.

    Missing or malformed data yields a fresh pending id.
    """
    if not data or not data.get("id"):
        return PendingVariantId.generate()
    if data.get("kind") == "persisted":
        return PersistedVariantId(id=str(data["id"]))
    return PendingVariantId(client_id=str(data["id"]))


# ============================================================================
# Catalog Values
# ============================================================================


@dataclass(frozen=True)
class Specification(ValueObject):
    """A key/value specification row (e.g. "Weight": "1.2 kg")."""

    key: str
    value: str

    def to_dict(self) -> dict[str, str]:
        return {"key": self.key, "value": self.value}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(key=str(data.get("key", "")), value=str(data.get("value", "")))


@dataclass(frozen=True)
class MediaItem(ValueObject):
    """An image or video attached to a product or variant."""

    url: str
    type: Literal["image", "video"] = "image"
    name: str | None = None
    size: int | None = None
    mime_type: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "type": self.type,
            "name": self.name,
            "size": self.size,
            "mime_type": self.mime_type,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            url=str(data["url"]),
            type="video" if data.get("type") == "video" else "image",
            name=data.get("name"),
            size=data.get("size"),
            mime_type=data.get("mime_type") or data.get("mimeType"),
        )


@dataclass(frozen=True)
class Attribute(ValueObject):
    """A product-level axis of variation with its allowed values."""

    name: str
    values: tuple[str, ...]

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "values": list(self.values)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            name=str(data.get("name", "")),
            values=tuple(str(v) for v in data.get("values") or ()),
        )


@dataclass(frozen=True)
class VariantAttribute(ValueObject):
    """The value a variant takes for one product attribute."""

    name: str
    value: str

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "value": self.value}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(name=str(data.get("name", "")), value=str(data.get("value", "")))


@dataclass(frozen=True)
class Dimensions(ValueObject):
    """Package dimensions."""

    width: float = 0
    height: float = 0
    depth: float = 0

    def to_dict(self) -> dict[str, float]:
        return {"width": self.width, "height": self.height, "depth": self.depth}

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> Self:
        data = data or {}
        return cls(
            width=float(data.get("width") or 0),
            height=float(data.get("height") or 0),
            depth=float(data.get("depth") or 0),
        )


# ============================================================================
# Helpers
# ============================================================================


def slugify(name: str) -> str:
    """Derive a URL slug from a display name.

    Lowercases, drops punctuation, and collapses whitespace, underscores
    and dashes into single dashes.
    """
    slug = name.lower().strip()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"[\s_-]+", "-", slug)
    return slug.strip("-")


def effective_price(price: float, discount_price: float | None) -> float:
    """Price a customer pays: the discount price when set, else the list price."""
    if discount_price:
        return discount_price
    return price
