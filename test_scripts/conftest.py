# Shared fixtures for the selection engine tests
from __future__ import annotations

import asyncio
from types import SimpleNamespace
from typing import Any, Callable, List, Optional

import pytest

from assortment.schemas.catalog import CatalogItem
from assortment.schemas.remote import RemoteSolveRequest


def make_item(item_id: str, price: float, quantity: int, **kwargs: Any) -> CatalogItem:
    return CatalogItem(id=item_id, name=kwargs.pop("name", f"Item {item_id}"), unit_price=price, quantity=quantity, **kwargs)


class FakeTransport:
    """In-memory remote solver backend that records how it was used."""

    name = "fake"

    def __init__(
        self,
        response: Any = None,
        *,
        delay_s: float = 0.0,
        error: Optional[BaseException] = None,
        responder: Optional[Callable[[RemoteSolveRequest], Any]] = None,
    ) -> None:
        self.response = response if response is not None else []
        self.delay_s = delay_s
        self.error = error
        self.responder = responder
        self.requests: List[RemoteSolveRequest] = []
        self.entered = 0
        self.closed = 0

    async def __aenter__(self) -> "FakeTransport":
        self.entered += 1
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.closed += 1

    async def solve(self, request: RemoteSolveRequest) -> Any:
        self.requests.append(request)
        if self.delay_s:
            await asyncio.sleep(self.delay_s)
        if self.error is not None:
            raise self.error
        if self.responder is not None:
            return self.responder(request)
        return self.response


class FakeCompletions:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeOpenAI:
    """Stands in for AsyncOpenAI: only chat.completions.create() and close()."""

    def __init__(self, content=None, error=None):
        self.completions = FakeCompletions(content, error)
        self.chat = SimpleNamespace(completions=self.completions)
        self.closed = False

    async def close(self):
        self.closed = True


@pytest.fixture
def item_factory() -> Callable[..., CatalogItem]:
    return make_item


@pytest.fixture
def scenario_catalog() -> List[CatalogItem]:
    return [make_item("A", 3.00, 2), make_item("B", 7.00, 1)]
