# assortment/schemas/catalog.py
"""
Catalog schemas: the inventory records callers hand to the engine.

Prices are caller-facing major units (e.g. 12.50); the solver converts them
to minor units at the boundary.
"""
from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from assortment.utils.money import quantize


class CatalogItem(BaseModel):
    """A stock line: one item type with a unit price and an available quantity."""

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True, coerce_numbers_to_str=True)

    # Numeric ids from JSON catalogs are kept as their string form
    id: str
    name: str = ""
    unit_price: float = Field(
        ge=0,
        allow_inf_nan=False,
        validation_alias=AliasChoices("unit_price", "unitPrice", "purchasePrice", "price"),
    )
    quantity: int = Field(ge=0)

    # Caller-side metadata; the solver never reads these
    ref: Optional[str] = None
    category: Optional[str] = None
    purchase_date: Optional[date] = Field(
        default=None,
        validation_alias=AliasChoices("purchase_date", "purchaseDate"),
    )

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("CatalogItem.id must be non-empty.")
        return v

    @property
    def unit_price_minor(self) -> int:
        return quantize(self.unit_price)

    def is_solvable(self) -> bool:
        """Zero-quantity and zero-price items never take part in a solve."""
        return self.quantity > 0 and self.unit_price_minor > 0
