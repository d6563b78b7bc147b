# tests/test_api_generate_endpoint.py
import os
import time

import pytest
from fastapi.testclient import TestClient

from saas_architect.app import app
from saas_architect import app as app_module
from saas_architect import db as dbmod
from saas_architect.db import GenerationStore, PersistenceError
from saas_architect.orchestrator import GenerationOrchestrator

TEST_DB_URL = "sqlite:///./test_api.db"
TEST_DB_FILE = "./test_api.db"

VALID_PAYLOAD = {
    "idea": "A 35+ character description of a tool",
    "roles": ["Admin", "User"],
    "monetization": "freemium",
    "tenantType": "single",
    "techStack": [],
}


@pytest.fixture(autouse=True)
def no_provider_orchestrator(monkeypatch):
    """Fresh DB and an orchestrator with no providers configured."""
    if os.path.exists(TEST_DB_FILE):
        os.remove(TEST_DB_FILE)
    dbmod.reconfigure(TEST_DB_URL)
    dbmod.init_db()
    monkeypatch.setattr(app_module, "orchestrator", GenerationOrchestrator([], GenerationStore()))
    yield
    dbmod.engine.dispose()
    if os.path.exists(TEST_DB_FILE):
        os.remove(TEST_DB_FILE)


@pytest.fixture
def client():
    return TestClient(app)


def test_generate_without_credentials_returns_mock(client):
    r = client.post("/api/generate", json=VALID_PAYLOAD)
    assert r.status_code == 201
    j = r.json()
    assert j["isMock"] is True
    assert j["id"]

    data = j["data"]
    assert data["_source"] == "mock"
    assert data["_isMock"] is True
    features = data["mvp_features"]
    for base in ("User authentication and authorization", "Core feature based on your idea",
                 "Dashboard for users", "Basic CRUD operations", "Responsive UI design"):
        assert base in features
    assert "Free tier with usage limits and quota tracking" in features
    assert "Upgrade flow from free to paid plan" in features

    tables = [t["table_name"] for t in data["database_schema"]]
    assert "users" in tables
    assert "usage_limits" in tables
    assert "tenants" not in tables


def test_generated_record_is_retrievable(client):
    payload = dict(VALID_PAYLOAD, techStack=["Next.js", "Prisma"])
    created = client.post("/api/generate", json=payload).json()

    r = client.get(f"/api/generation/{created['id']}")
    assert r.status_code == 200
    rec = r.json()
    assert rec["id"] == created["id"]
    assert rec["idea"] == payload["idea"]
    assert rec["roles_input"] == "Admin, User"
    assert rec["monetization_type"] == "freemium"
    assert rec["tenant_type"] == "single"
    assert rec["tech_stack"] == ["Next.js", "Prisma"]
    assert rec["ai_response"] == created["data"]
    assert rec["created_at"]


def test_generation_not_found(client):
    r = client.get("/api/generation/nonexistent-id")
    assert r.status_code == 404
    assert r.json()["error_code"] == "E_NOT_FOUND"


def test_list_generations_newest_first(client):
    first = client.post("/api/generate", json=VALID_PAYLOAD).json()
    time.sleep(0.01)
    second = client.post("/api/generate", json=dict(VALID_PAYLOAD, monetization="marketplace")).json()

    r = client.get("/api/generations")
    assert r.status_code == 200
    ids = [rec["id"] for rec in r.json()]
    assert ids == [second["id"], first["id"]]


def test_list_generations_empty(client):
    r = client.get("/api/generations")
    assert r.status_code == 200
    assert r.json() == []


@pytest.mark.parametrize("override,field", [
    ({"idea": "too short"}, "idea"),
    ({"idea": "   short idea padded with spaces      "}, "idea"),
    ({"roles": []}, "roles"),
    ({"roles": ["Admin", "  "]}, "roles"),
    ({"monetization": "donations"}, "monetization"),
    ({"tenantType": "hybrid"}, "tenantType"),
    ({"techStack": "Next.js"}, "techStack"),
])
def test_invalid_input_rejected_with_field_detail(client, override, field):
    r = client.post("/api/generate", json=dict(VALID_PAYLOAD, **override))
    assert r.status_code == 400
    j = r.json()
    assert j["error_code"] == "E_VALIDATION"
    assert any(e["field"].startswith(field) for e in j["details"]["errors"])


def test_missing_fields_rejected(client):
    r = client.post("/api/generate", json={"idea": VALID_PAYLOAD["idea"]})
    assert r.status_code == 400
    fields = {e["field"] for e in r.json()["details"]["errors"]}
    assert {"roles", "monetization", "tenantType"} <= fields


def test_invalid_input_never_reaches_orchestrator(client, monkeypatch):
    calls = []

    async def fake_generate(req):
        calls.append(req)
        return {}

    monkeypatch.setattr(app_module.orchestrator, "generate", fake_generate)
    r = client.post("/api/generate", json=dict(VALID_PAYLOAD, roles=[]))
    assert r.status_code == 400
    assert calls == []


def test_persistence_failure_is_reported(client, monkeypatch):
    class FailingStore(GenerationStore):
        def create(self, fields):
            raise PersistenceError("Failed to save generation: disk full")

    monkeypatch.setattr(app_module, "orchestrator", GenerationOrchestrator([], FailingStore()))
    r = client.post("/api/generate", json=VALID_PAYLOAD)
    assert r.status_code == 400
    j = r.json()
    assert j["error_code"] == "E_GENERATION_FAILED"
    assert "disk full" in j["message"]


def test_idea_is_stored_as_sent(client):
    idea = "  " + VALID_PAYLOAD["idea"] + "  "
    created = client.post("/api/generate", json=dict(VALID_PAYLOAD, idea=idea)).json()
    rec = client.get(f"/api/generation/{created['id']}").json()
    assert rec["idea"] == idea


def test_read_failure_is_internal_error(client, monkeypatch):
    class BrokenReadStore(GenerationStore):
        def find_by_id(self, generation_id):
            raise PersistenceError("Failed to read generation: bad row")

        def find_all(self):
            raise PersistenceError("Failed to list generations: bad row")

    monkeypatch.setattr(app_module, "orchestrator", GenerationOrchestrator([], BrokenReadStore()))
    for path in ("/api/generation/some-id", "/api/generations"):
        r = client.get(path)
        assert r.status_code == 500
        assert r.json()["error_code"] == "E_INTERNAL"


def test_openapi_documents_response_models(client):
    paths = client.get("/openapi.json").json()["paths"]
    generate = paths["/api/generate"]["post"]["responses"]
    assert "201" in generate
    assert generate["201"]["content"]["application/json"]["schema"]["$ref"].endswith("/GenerateResponse")
    lookup = paths["/api/generation/{generation_id}"]["get"]["responses"]["200"]
    assert lookup["content"]["application/json"]["schema"]["$ref"].endswith("/GenerationRecordOut")
    listing = paths["/api/generations"]["get"]["responses"]["200"]
    assert listing["content"]["application/json"]["schema"]["items"]["$ref"].endswith("/GenerationRecordOut")
