# test_scripts/test_api.py

from __future__ import annotations

import json

import pytest
from fastapi.testclient import TestClient

from assortment.api.deps import get_dispatcher, get_llm_transport
from assortment.config import settings
from assortment.llm.client import LLMRemoteSolverTransport
from assortment.main import create_app
from assortment.services.selection_dispatcher import SelectionDispatcher, SolverPolicy

from conftest import FakeOpenAI

SECRET = "test-secret"
HEADERS = {"X-ASSORTMENT-SECRET": SECRET}

CATALOG = [
    {"id": "A", "name": "Alpha", "unitPrice": 3.0, "quantity": 2},
    {"id": "B", "name": "Beta", "unitPrice": 7.0, "quantity": 1},
]


@pytest.fixture
def app(monkeypatch):
    monkeypatch.setattr(settings, "ASSORTMENT_API_SECRET", SECRET)
    app = create_app()
    app.dependency_overrides[get_dispatcher] = lambda: SelectionDispatcher(policy=SolverPolicy())
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    return TestClient(app)


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"ok": True}


def test_missing_or_wrong_secret_is_unauthorized(client):
    assert client.post("/selection/solve", json={"items": CATALOG, "target": 10}).status_code == 401
    bad = {"X-ASSORTMENT-SECRET": "nope"}
    assert client.post("/selection/solve", json={"items": CATALOG, "target": 10}, headers=bad).status_code == 401


def test_unconfigured_secret_fails_closed(client, monkeypatch):
    monkeypatch.setattr(settings, "ASSORTMENT_API_SECRET", "")
    resp = client.post("/selection/solve", json={"items": CATALOG, "target": 10}, headers=HEADERS)
    assert resp.status_code == 500


def test_solve_returns_selected_outcome(client):
    resp = client.post("/selection/solve", json={"items": CATALOG, "target": 10.0}, headers=HEADERS)
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "selected"
    assert body["path"] == "local"
    assert [u["id"] for u in body["units"]] == ["A", "B"]
    assert body["total_minor"] == 1000


def test_solve_failures_are_typed_not_http_errors(client):
    resp = client.post(
        "/selection/solve",
        json={"items": [{"id": "A", "unitPrice": -1, "quantity": 1}], "target": 10.0},
        headers=HEADERS,
    )
    assert resp.status_code == 200
    assert resp.json()["status"] == "failed"
    assert resp.json()["reason"] == "invalid_input"


def test_approximate_serves_remote_contract(app, client):
    fake = FakeOpenAI(json.dumps({"items": [{"id": "B", "unitPrice": 7.0}, {"id": "A", "unitPrice": 3.0}]}))
    app.dependency_overrides[get_llm_transport] = lambda: LLMRemoteSolverTransport(
        api_key="", model="m", timeout_s=1.0, client=fake
    )

    body = {"candidateItems": [{"id": "A", "name": "Alpha", "unitPrice": 3.0, "quantity": 2}], "target": 10.0}
    resp = client.post("/selection/approximate", json=body, headers=HEADERS)

    assert resp.status_code == 200
    assert resp.json() == [
        {"id": "B", "name": None, "unitPrice": 7.0},
        {"id": "A", "name": None, "unitPrice": 3.0},
    ]
    assert fake.closed


def test_approximate_with_no_candidates_skips_the_model(app, client):
    fake = FakeOpenAI("should not be read")
    app.dependency_overrides[get_llm_transport] = lambda: LLMRemoteSolverTransport(
        api_key="", model="m", timeout_s=1.0, client=fake
    )
    resp = client.post("/selection/approximate", json={"candidateItems": [], "target": 10.0}, headers=HEADERS)
    assert resp.json() == []
    assert fake.completions.calls == []


def test_approximate_bad_model_output_is_bad_gateway(app, client):
    fake = FakeOpenAI("definitely not json")
    app.dependency_overrides[get_llm_transport] = lambda: LLMRemoteSolverTransport(
        api_key="", model="m", timeout_s=1.0, client=fake
    )
    body = {"candidateItems": [{"id": "A", "unitPrice": 3.0, "quantity": 2}], "target": 10.0}
    assert client.post("/selection/approximate", json=body, headers=HEADERS).status_code == 502


def test_invoice_fill(client):
    body = {"items": CATALOG, "gross_total": 12.0, "invoice_date": "2026-03-01", "vat_rate": 0.2}
    resp = client.post("/invoices/fill", json=body, headers=HEADERS)

    assert resp.status_code == 200
    draft = resp.json()
    assert draft["net_target"] == 10.0
    assert draft["net_total"] == 10.0
    assert draft["gross_total"] == 12.0
    assert [(line["id"], line["quantity"]) for line in draft["lines"]] == [("A", 1), ("B", 1)]


def test_invoice_fill_rejects_zero_total(client):
    body = {"items": CATALOG, "gross_total": 0, "invoice_date": "2026-03-01"}
    assert client.post("/invoices/fill", json=body, headers=HEADERS).status_code == 400


def test_approximate_without_api_key_is_service_unavailable(client, monkeypatch):
    monkeypatch.setattr(settings, "OPENAI_API_KEY", "")
    body = {"candidateItems": [{"id": "A", "unitPrice": 3.0, "quantity": 2}], "target": 10.0}
    assert client.post("/selection/approximate", json=body, headers=HEADERS).status_code == 503
