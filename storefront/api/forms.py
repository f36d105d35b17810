"""Multipart product form parsing.

The admin product form posts scalar fields, JSON-encoded list fields and
files (``mainImage``, ``mediaFiles``, ``variantImage-{i}``). This module
turns that form into ``ProductInput`` and ``MediaChanges``.
"""

import json
import math
import re
from typing import Any

from starlette.datastructures import FormData, UploadFile

from storefront.application.product_service import MediaChanges, ProductInput
from storefront.domain.entities import Variant
from storefront.domain.exceptions import ValidationError
from storefront.domain.value_objects import (
    Attribute,
    Dimensions,
    MediaItem,
    PendingVariantId,
    Specification,
    VariantAttribute,
    variant_id_from_dict,
)
from storefront.infrastructure.media import MediaUpload

VARIANT_IMAGE_FIELD = re.compile(r"^variantImage-(\d+)$")


def _text(form: FormData, name: str) -> str:
    value = form.get(name)
    return value.strip() if isinstance(value, str) else ""


def _flag(form: FormData, name: str) -> bool:
    return _text(form, name) == "true"


def _finite(value: Any, name: str, cast: type = float) -> Any:
    """Convert to a finite number; NaN and infinities are rejected."""
    try:
        number = float(value)
        if not math.isfinite(number):
            raise ValueError(f"{value!r} is not finite")
        return cast(number)
    except (TypeError, ValueError, OverflowError) as e:
        raise ValidationError(
            f"Invalid number for {name}", {"field": name, "value": str(value)}
        ) from e


def _number(form: FormData, name: str, cast: type = float) -> Any:
    raw = _text(form, name)
    if not raw:
        return cast(0)
    return _finite(raw, name, cast)


def _json(form: FormData, name: str, default: Any) -> Any:
    raw = _text(form, name)
    if not raw:
        return default
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON in {name}", {"field": name}) from e


def _dimensions(form: FormData) -> Dimensions:
    data = _json(form, "dimensions", None) or {}
    if not isinstance(data, dict):
        raise ValidationError("Invalid JSON in dimensions", {"field": "dimensions"})
    return Dimensions(
        **{
            axis: _finite(data.get(axis) or 0, f"dimensions.{axis}")
            for axis in ("width", "height", "depth")
        }
    )


def _pick(data: dict[str, Any], *keys: str, default: Any = None) -> Any:
    """First present key, accepting both snake_case and camelCase names."""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def variant_from_form(data: dict[str, Any]) -> Variant:
    """Build a variant from its submitted JSON object."""
    raw_id = _pick(data, "id", "_id")
    if isinstance(raw_id, dict):
        variant_id = variant_id_from_dict(raw_id)
    elif raw_id:
        variant_id = PendingVariantId(client_id=str(raw_id))
    else:
        variant_id = PendingVariantId.generate()

    discount = _pick(data, "discount_price", "discountPrice")
    return Variant(
        id=variant_id,
        name=str(data.get("name") or ""),
        sku=str(data.get("sku") or ""),
        price=_finite(data.get("price") or 0, "variants.price"),
        discount_price=_finite(discount, "variants.discountPrice") if discount else None,
        in_stock=bool(_pick(data, "in_stock", "inStock", default=True)),
        stock_quantity=_finite(
            _pick(data, "stock_quantity", "stockQuantity", default=0), "variants.stockQuantity", int
        ),
        attributes=[VariantAttribute.from_dict(a) for a in data.get("attributes") or []],
        specifications=[Specification.from_dict(s) for s in data.get("specifications") or []],
        media=[MediaItem.from_dict(m) for m in data.get("media") or [] if m.get("url")],
        image=data.get("image") or None,
    )


async def to_media_upload(value: Any) -> MediaUpload | None:
    """Read a submitted file; empty or missing slots yield None."""
    if not isinstance(value, UploadFile) or not value.filename:
        return None
    data = await value.read()
    if not data:
        return None
    return MediaUpload(
        filename=value.filename,
        content_type=value.content_type or "application/octet-stream",
        data=data,
    )


async def parse_product_form(form: FormData) -> tuple[ProductInput, MediaChanges]:
    """Parse the admin product form.

    Raises:
        ValidationError: If a numeric or JSON field is malformed.
    """
    try:
        variants = [variant_from_form(v) for v in _json(form, "variants", [])]
        attributes = [Attribute.from_dict(a) for a in _json(form, "attributes", [])]
        specifications = [
            Specification.from_dict(s) for s in _json(form, "specifications", [])
        ]
    except (TypeError, ValueError, AttributeError) as e:
        raise ValidationError(
            "Invalid attributes, specifications or variants", {"error": str(e)}
        ) from e

    discount_price = _number(form, "discountPrice")
    data = ProductInput(
        name=_text(form, "name"),
        description=_text(form, "description"),
        price=_number(form, "price"),
        discount_price=discount_price or None,
        categories=[str(c) for c in _json(form, "categories", [])],
        type="variable" if _text(form, "type") == "variable" else "simple",
        image_url=_text(form, "imageUrl") or None,
        sku=_text(form, "sku"),
        brand=_text(form, "brand"),
        in_stock=_flag(form, "inStock"),
        stock_quantity=_number(form, "stockQuantity", int),
        rating=_number(form, "rating"),
        weight=_number(form, "weight"),
        dimensions=_dimensions(form),
        shipping_class=_text(form, "shippingClass"),
        has_guarantee=_flag(form, "hasGuarantee"),
        has_referral=_flag(form, "hasReferal"),
        has_exchange=_flag(form, "hasChange"),
        seo_title=_text(form, "seoTitle"),
        seo_description=_text(form, "seoDescription"),
        attributes=attributes,
        specifications=specifications,
        variants=variants,
        today_offer=_flag(form, "todayOffer"),
        featured=_flag(form, "FeaturedProduct"),
    )

    changes = MediaChanges(
        main_image=await to_media_upload(form.get("mainImage")),
        media_to_remove=[str(url) for url in _json(form, "mediaToRemove", [])],
    )
    for value in form.getlist("mediaFiles"):
        upload = await to_media_upload(value)
        if upload is not None:
            changes.media_files.append(upload)
    for key in form.keys():
        match = VARIANT_IMAGE_FIELD.match(key)
        if match:
            upload = await to_media_upload(form.get(key))
            if upload is not None:
                changes.variant_images[int(match.group(1))] = upload

    return data, changes
