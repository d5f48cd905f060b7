"""Pydantic schemas for request/response validation."""
from typing import List

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Accepts and emits camelCase keys, as Shopify Flow sends them."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True


# ============================================================================
# Request Schemas
# ============================================================================

class SelectedOption(CamelModel):
    name: str
    value: str


class VariantLookupRequest(CamelModel):
    handle: str
    selected_options: List[SelectedOption] = Field(..., min_length=1)

    @field_validator("handle")
    @classmethod
    def handle_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("handle must not be empty")
        return value


class SyncStockRequest(VariantLookupRequest):
    pass


class DecreaseStockRequest(VariantLookupRequest):
    decrease_by: int = 1

    @field_validator("decrease_by", mode="before")
    @classmethod
    def default_decrease_by(cls, value):
        """Numbers and numeric strings are truncated toward zero (2.7 and "2.7" give 2).

        Anything else (missing, null, booleans, non-numeric text) falls back to 1.
        """
        if value is None or isinstance(value, bool):
            return 1
        try:
            if isinstance(value, str):
                return int(float(value.strip()))
            return int(value)
        except (TypeError, ValueError, OverflowError):
            return 1

    @field_validator("decrease_by")
    @classmethod
    def decrease_by_positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("decreaseBy must be greater than 0")
        return value


# ============================================================================
# Response Schemas
# ============================================================================

class VariantIdResponse(CamelModel):
    variant_id: str


class DecreaseStockResponse(CamelModel):
    message: str
    variant_gid: str
    product_handle: str
    options: List[SelectedOption]
    old_stock: int
    new_stock: int
    decreased_by: int


class SyncStockResponse(CamelModel):
    message: str
    product_handle: str
    inventory_source_handle: str
    options: List[SelectedOption]
    metafield_owner_gid: str
    new_stock: int


class MessageResponse(BaseModel):
    message: str
