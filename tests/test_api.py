"""HTTP-level tests: routing, status codes and the response envelope."""
from datetime import datetime, timedelta
from unittest.mock import AsyncMock

import pytest

from interface_compiler.config import settings
from interface_compiler.database import get_db
from interface_compiler.errors import ProviderQuotaExceeded
from interface_compiler.main import app
from interface_compiler.routes.generate import get_generation_service
from interface_compiler.services.generation import GenerationService

from conftest import FakeProvider

MISSING_ID = "0123456789abcdef01234567"


def _create(client, name, components, description=None):
    body = {"name": name, "components": components}
    if description is not None:
        body["description"] = description
    return client.post("/schemas", json=body)


def _use_provider(provider):
    app.dependency_overrides[get_generation_service] = lambda: GenerationService(provider)


# ---------------------------------------------------------------------------
# Health & routing
# ---------------------------------------------------------------------------


class TestHealthAndRouting:

    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {
            "status": "OK",
            "message": "Dynamic Interface Compiler API is running",
        }

    def test_unknown_route(self, client):
        resp = client.get("/nope")
        assert resp.status_code == 404
        assert resp.json() == {"success": False, "error": "Route not found"}

    def test_method_not_allowed(self, client):
        resp = client.patch("/schemas")
        assert resp.status_code == 405
        assert resp.json()["success"] is False


# ---------------------------------------------------------------------------
# Schema CRUD
# ---------------------------------------------------------------------------


class TestSchemaCrud:

    def test_create_and_get(self, client, form_components):
        resp = _create(client, "Contact form", form_components, "A simple form")
        assert resp.status_code == 201
        body = resp.json()
        assert body["success"] is True
        assert body["message"] == "Schema created successfully"
        created = body["schema"]
        assert set(created) == {"id", "name", "description", "components", "createdAt", "updatedAt"}

        resp = client.get(f"/schemas/{created['id']}")
        assert resp.status_code == 200
        fetched = resp.json()["schema"]
        assert fetched["name"] == "Contact form"
        assert fetched["description"] == "A simple form"
        assert fetched["components"] == form_components

    def test_legacy_schema_key(self, client, form_components):
        resp = client.post("/schemas", json={"name": "Legacy", "schema": form_components})
        assert resp.status_code == 201
        assert resp.json()["schema"]["components"] == form_components

    def test_duplicate_trimmed_name(self, client, form_components):
        assert _create(client, "Signup", form_components).status_code == 201
        resp = _create(client, "  Signup ", form_components)
        assert resp.status_code == 409
        assert resp.json() == {
            "success": False,
            "error": "A schema with this name already exists",
        }

    @pytest.mark.parametrize("body, error", [
        ({"components": [{"type": "text"}]}, "Name is required and must be a non-empty string"),
        ({"name": "  ", "components": [{"type": "text"}]}, "Name is required and must be a non-empty string"),
        ({"name": "x"}, "Schema is required and must be a non-empty array"),
        ({"name": "x", "components": []}, "Schema is required and must be a non-empty array"),
        ({"name": "x", "components": [{"type": "text"}, {"type": "video"}]},
         "Invalid component type at index 1: video"),
    ])
    def test_create_invalid_input(self, client, body, error):
        resp = client.post("/schemas", json=body)
        assert resp.status_code == 400
        assert resp.json() == {"success": False, "error": error}

    def test_malformed_json_body(self, client):
        resp = client.post(
            "/schemas", content="{not json", headers={"Content-Type": "application/json"},
        )
        assert resp.status_code == 400
        assert resp.json()["error"] == "Validation error"

    def test_update_full_replace(self, client, form_components):
        schema_id = _create(client, "Page", form_components, "old").json()["schema"]["id"]
        new_components = [{"type": "image", "src": "https://picsum.photos/400/300", "alt": "hero"}]

        resp = client.put(f"/schemas/{schema_id}", json={"name": "Page", "components": new_components})
        assert resp.status_code == 200
        assert resp.json()["message"] == "Schema updated successfully"

        fetched = client.get(f"/schemas/{schema_id}").json()["schema"]
        assert fetched["components"] == new_components
        assert fetched["description"] == ""

    def test_update_conflict(self, client, form_components):
        _create(client, "One", form_components)
        two = _create(client, "Two", form_components).json()["schema"]["id"]
        resp = client.put(f"/schemas/{two}", json={"name": "One", "components": form_components})
        assert resp.status_code == 409

    def test_update_missing(self, client, form_components):
        resp = client.put(f"/schemas/{MISSING_ID}", json={"name": "x", "components": form_components})
        assert resp.status_code == 404
        assert resp.json()["error"] == "Schema not found"

    def test_delete_then_get(self, client, form_components):
        schema_id = _create(client, "Temp", form_components).json()["schema"]["id"]

        resp = client.delete(f"/schemas/{schema_id}")
        assert resp.status_code == 200
        assert resp.json() == {"success": True, "message": "Schema deleted successfully"}

        assert client.get(f"/schemas/{schema_id}").status_code == 404
        assert client.delete(f"/schemas/{schema_id}").status_code == 404

    def test_list_newest_first_capped(self, client):
        for i in range(52):
            _create(client, f"s{i}", [{"type": "text", "content": str(i)}])

        resp = client.get("/schemas")
        assert resp.status_code == 200
        schemas = resp.json()["schemas"]
        assert len(schemas) == 50
        assert schemas[0]["name"] == "s51"
        assert schemas[-1]["name"] == "s2"
        assert "components" not in schemas[0]
        assert set(schemas[0]) == {"id", "name", "description", "createdAt", "updatedAt"}

    def test_list_empty(self, client):
        assert client.get("/schemas").json() == {"success": True, "schemas": []}


class TestMalformedIds:
    """Bad ids are rejected before the database is queried."""

    @pytest.fixture
    def db(self, client):
        session = AsyncMock()
        app.dependency_overrides[get_db] = lambda: session
        return session

    @pytest.mark.parametrize("bad_id", ["abc", "0123456789abcdef0123456"])
    def test_every_id_route(self, client, db, bad_id):
        body = {"name": "x", "components": [{"type": "text"}]}
        responses = [
            client.get(f"/schemas/{bad_id}"),
            client.put(f"/schemas/{bad_id}", json=body),
            client.delete(f"/schemas/{bad_id}"),
        ]
        for resp in responses:
            assert resp.status_code == 400
            assert resp.json() == {"success": False, "error": "Invalid schema ID format"}
        db.get.assert_not_called()
        db.execute.assert_not_called()


class TestStoreFailures:

    def test_unexpected_error_is_generic(self, client):
        session = AsyncMock()
        session.execute.side_effect = RuntimeError("connection refused")
        app.dependency_overrides[get_db] = lambda: session

        resp = client.get("/schemas")
        assert resp.status_code == 500
        assert resp.json() == {"success": False, "error": "Failed to fetch schemas"}

    def test_details_in_development(self, client, monkeypatch):
        monkeypatch.setattr(settings, "ENVIRONMENT", "development")
        session = AsyncMock()
        session.execute.side_effect = RuntimeError("connection refused")
        app.dependency_overrides[get_db] = lambda: session

        resp = client.get("/schemas")
        assert resp.status_code == 500
        assert resp.json()["details"] == "connection refused"


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------


class TestGenerateSchema:

    def test_success(self, client):
        _use_provider(FakeProvider('```json\n[{"type": "text", "content": "Hi"}]\n```'))
        resp = client.post("/generate-schema", json={"prompt": "say hi"})
        assert resp.status_code == 200
        assert resp.json() == {
            "success": True,
            "schema": [{"type": "text", "content": "Hi"}],
            "prompt": "say hi",
        }

    def test_generated_schema_is_not_saved(self, client):
        _use_provider(FakeProvider('[{"type": "text"}]'))
        client.post("/generate-schema", json={"prompt": "anything"})
        assert client.get("/schemas").json()["schemas"] == []

    @pytest.mark.parametrize("body", [{}, {"prompt": ""}, {"prompt": 7}])
    def test_bad_prompt(self, client, body):
        _use_provider(FakeProvider('[{"type": "text"}]'))
        resp = client.post("/generate-schema", json=body)
        assert resp.status_code == 400
        assert resp.json() == {
            "success": False,
            "error": "Prompt is required and must be a string",
        }

    def test_malformed_generation(self, client):
        _use_provider(FakeProvider("I would rather not."))
        resp = client.post("/generate-schema", json={"prompt": "a form"})
        assert resp.status_code == 500
        assert resp.json() == {
            "success": False,
            "error": "AI generated invalid response format",
        }

    def test_quota_exceeded(self, client):
        _use_provider(FakeProvider(error=ProviderQuotaExceeded(details="429")))
        resp = client.post("/generate-schema", json={"prompt": "a form"})
        assert resp.status_code == 500
        assert resp.json()["error"] == "API quota exceeded"

    def test_missing_api_key(self, client):
        resp = client.post("/generate-schema", json={"prompt": "a form"})
        assert resp.status_code == 500
        assert resp.json()["error"] == "Invalid API key configuration"
        assert "details" not in resp.json()


class TestNonStandardJson:

    def test_generation_with_nan(self, client):
        _use_provider(FakeProvider('[{"type": "text", "content": NaN}]'))
        resp = client.post("/generate-schema", json={"prompt": "a heading"})
        assert resp.status_code == 500
        assert resp.json() == {
            "success": False,
            "error": "AI generated invalid response format",
        }

    def test_create_with_nan(self, client):
        resp = client.post(
            "/schemas",
            content='{"name": "nan", "components": [{"type": "text", "w": NaN}]}',
            headers={"Content-Type": "application/json"},
        )
        assert resp.status_code == 400
        assert resp.json() == {
            "success": False,
            "error": "Schema must contain only finite numbers",
        }
        assert client.get("/schemas").json()["schemas"] == []


class TestTimestamps:

    @staticmethod
    def _parse(value):
        return datetime.fromisoformat(value.replace("Z", "+00:00"))

    def test_record_timestamps_carry_utc_offset(self, client, form_components):
        created = _create(client, "Stamped", form_components).json()["schema"]
        fetched = client.get(f"/schemas/{created['id']}").json()["schema"]
        for value in (fetched["createdAt"], fetched["updatedAt"]):
            assert self._parse(value).utcoffset() == timedelta(0)

    def test_summary_timestamps_carry_utc_offset(self, client, form_components):
        _create(client, "Listed", form_components)
        summary = client.get("/schemas").json()["schemas"][0]
        assert self._parse(summary["createdAt"]).utcoffset() == timedelta(0)
