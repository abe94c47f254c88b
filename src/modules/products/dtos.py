"""Product DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
DTOs are immutable (``frozen=True``).

- ``VariantDTO``: a single ``name``/``value`` product option.
- ``CreateProductDTO``: input for product creation.
- ``UpdateProductDTO``: input for partial product updates.
"""

from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

from pydantic import AnyHttpUrl, BaseModel, ConfigDict, TypeAdapter, field_validator

_url_adapter = TypeAdapter(AnyHttpUrl)


def _validate_image_urls(urls: List[str]) -> List[str]:
    cleaned = []
    for url in urls:
        url = url.strip()
        if not url:
            continue
        try:
            _url_adapter.validate_python(url)
        except ValueError as exc:
            raise ValueError(f"Invalid image URL: {url}") from exc
        cleaned.append(url)
    return cleaned


def _require_text(value: str, message: str) -> str:
    if not value or not value.strip():
        raise ValueError(message)
    return value.strip()


class VariantDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    value: str

    @field_validator("name")
    @classmethod
    def name_required(cls, v: str) -> str:
        return _require_text(v, "Variant name is required.")

    @field_validator("value")
    @classmethod
    def value_required(cls, v: str) -> str:
        return _require_text(v, "Variant value is required.")


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CreateProductDTO(BaseModel):
    """Immutable DTO for product creation requests.

    Validates:
    - ``product_name`` and ``description`` are non-blank.
    - ``price`` is greater than zero.
    - ``quantity`` is non-negative.
    - at least one image URL is supplied.
    """

    model_config = ConfigDict(frozen=True)

    product_name: str
    description: str
    price: Decimal
    images: List[str]
    quantity: int = 0
    variants: List[VariantDTO] = []

    @field_validator("product_name")
    @classmethod
    def name_required(cls, v: str) -> str:
        return _require_text(v, "Product name is required.")

    @field_validator("description")
    @classmethod
    def description_required(cls, v: str) -> str:
        return _require_text(v, "Description is required.")

    @field_validator("price")
    @classmethod
    def price_must_be_positive(cls, v: Decimal) -> Decimal:
        if v <= 0:
            raise ValueError("Price must be a positive number.")
        return v

    @field_validator("quantity", mode="before")
    @classmethod
    def blank_quantity_is_zero(cls, v):
        return 0 if v in (None, "") else v

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Quantity cannot be negative.")
        return v

    @field_validator("images")
    @classmethod
    def at_least_one_image(cls, v: List[str]) -> List[str]:
        cleaned = _validate_image_urls(v)
        if not cleaned:
            raise ValueError("Please add at least one product image.")
        return cleaned


class UpdateProductDTO(BaseModel):
    """Immutable DTO for product update requests.

    All fields are optional: only supplied fields will be updated.
    """

    model_config = ConfigDict(frozen=True)

    product_name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Decimal] = None
    images: Optional[List[str]] = None
    quantity: Optional[int] = None
    variants: Optional[List[VariantDTO]] = None

    @field_validator("product_name")
    @classmethod
    def name_not_blank(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else _require_text(v, "Product name is required.")

    @field_validator("description")
    @classmethod
    def description_not_blank(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else _require_text(v, "Description is required.")

    @field_validator("price")
    @classmethod
    def price_must_be_positive(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        if v is not None and v <= 0:
            raise ValueError("Price must be a positive number.")
        return v

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_non_negative(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 0:
            raise ValueError("Quantity cannot be negative.")
        return v

    @field_validator("images")
    @classmethod
    def images_not_emptied(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        if v is None:
            return None
        cleaned = _validate_image_urls(v)
        if not cleaned:
            raise ValueError("Please add at least one product image.")
        return cleaned

    def changes(self) -> dict:
        """Supplied fields only, ready to merge into a product."""
        return self.model_dump(exclude_none=True)
