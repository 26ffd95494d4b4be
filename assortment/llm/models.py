# assortment/llm/models.py

from __future__ import annotations

from typing import Any, List

from pydantic import BaseModel, model_validator

from assortment.schemas.remote import RemoteCandidateItem


class AssortmentPromptInput(BaseModel):
    candidate_items: List[RemoteCandidateItem]
    target: float


class AssortmentSuggestion(BaseModel):
    """Loose envelope around the model's answer; entries are validated later, strictly."""

    items: List[Any]

    @model_validator(mode="before")
    @classmethod
    def _accept_bare_list(cls, data: Any) -> Any:
        # JSON mode forces an object at top level, but some models still return a bare array
        if isinstance(data, list):
            return {"items": data}
        return data
