# assortment/schemas/remote.py
"""
Wire schemas for the remote approximate solver.

Request:  {"candidateItems": [{"id", "name", "unitPrice", "quantity"}], "target": <number>}
Response: [{"id", "unitPrice", "name"?}, ...]  one entry per unit, ids may repeat
"""
from __future__ import annotations

from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, StrictStr, field_validator

from assortment.schemas.catalog import CatalogItem
from assortment.utils.money import to_float


class RemoteCandidateItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str = ""
    unit_price: float = Field(alias="unitPrice")
    quantity: int

    @classmethod
    def from_catalog_item(cls, item: CatalogItem) -> "RemoteCandidateItem":
        # Send the quantized price so the remote side sees what validation will compare against
        return cls(id=item.id, name=item.name, unit_price=to_float(item.unit_price_minor), quantity=item.quantity)


class RemoteSolveRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    candidate_items: List[RemoteCandidateItem] = Field(alias="candidateItems", default_factory=list)
    target: float

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)


class RemoteUnit(BaseModel):
    """One unit as reported by the remote solver (untrusted)."""

    model_config = ConfigDict(extra="ignore")

    id: StrictStr
    unit_price: float = Field(
        validation_alias=AliasChoices("unitPrice", "unit_price", "price"),
        ge=0,
        allow_inf_nan=False,
    )
    name: Optional[str] = None

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("unit id must be non-empty")
        return v
