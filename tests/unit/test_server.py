"""Unit tests for the HTTP server."""

import httpx
import jwt
import pytest
from fastapi.testclient import TestClient

from dashpipe import __version__
from dashpipe.core.exceptions import AuthError
from dashpipe.core.settings import Settings
from dashpipe.core.storage import InMemoryDataSourceStore, InMemoryRowCache
from dashpipe.server import create_app, verify_token


def upstream(request: httpx.Request) -> httpx.Response:
    """Fake upstream answering the URLs used in these tests."""
    if request.url.path == "/items":
        return httpx.Response(200, json=[{"id": i, "name": f"Item {i}"} for i in range(1, 6)])
    if request.url.path == "/summary":
        return httpx.Response(200, json={"total": 3, "name": "x"})
    if request.url.path == "/sales.csv":
        return httpx.Response(200, text="region,revenue\nNorth,100\nSouth,250\n")
    return httpx.Response(404, text="not here")


@pytest.fixture
def cache():
    return InMemoryRowCache()


@pytest.fixture
def client(cache, auth_secret):
    app = create_app(
        settings=Settings(auth_secret=auth_secret, storage="memory"),
        store=InMemoryDataSourceStore(),
        cache=cache,
        transport=httpx.MockTransport(upstream),
    )
    return TestClient(app)


@pytest.fixture
def auth(make_token):
    return {"Authorization": f"Bearer {make_token('alice')}"}


@pytest.fixture
def other_auth(make_token):
    return {"Authorization": f"Bearer {make_token('bob')}"}


def create_source(client, headers, name="Sales"):
    response = client.post(
        "/data-sources",
        json={
            "name": name,
            "type": "static",
            "connectionConfig": {"type": "static", "dataType": "sales"},
        },
        headers=headers,
    )
    assert response.status_code == 201
    return response.json()["data"]["id"]


# ============================================================================
# Health and Authentication
# ============================================================================


def test_health_needs_no_token(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "service": "dashpipe", "version": __version__}


class TestAuthentication:
    """Tests for bearer token checks."""

    def test_missing_token(self, client):
        response = client.get("/data-sources")
        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}

    def test_wrong_scheme(self, client):
        response = client.get("/data-sources", headers={"Authorization": "Basic abc"})
        assert response.status_code == 401

    def test_forged_token(self, client, make_token):
        token = make_token("alice", secret="some-other-secret-0123456789abcdef")
        response = client.get("/data-sources", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_expired_token(self, client, make_token):
        token = make_token("alice", expires_in=-60)
        response = client.post(
            "/transform-data",
            json={"data": []},
            headers={"Authorization": f"Bearer {token}"},
        )
        assert response.status_code == 401

    def test_every_token_rejected_without_secret(self, make_token):
        app = create_app(settings=Settings(storage="memory"), store=InMemoryDataSourceStore())
        response = TestClient(app).get(
            "/data-sources", headers={"Authorization": f"Bearer {make_token()}"}
        )
        assert response.status_code == 401


class TestVerifyToken:
    """Tests for verify_token."""

    def test_principal_from_sub(self, make_token, auth_secret):
        principal = verify_token(make_token("alice", role="admin"), auth_secret)
        assert principal.user_id == "alice"
        assert principal.claims["role"] == "admin"

    def test_exp_is_required(self, auth_secret):
        token = jwt.encode({"sub": "alice"}, auth_secret, algorithm="HS256")
        with pytest.raises(AuthError, match="Invalid token"):
            verify_token(token, auth_secret)

    def test_user_claim_is_required(self, make_token, auth_secret):
        token = make_token(user_id="")
        with pytest.raises(AuthError, match="no user claim"):
            verify_token(token, auth_secret)


# ============================================================================
# Pipeline Endpoints
# ============================================================================


class TestFetchData:
    """Tests for POST /fetch-data."""

    def test_api_source(self, client, auth):
        response = client.post(
            "/fetch-data",
            json={"config": {"type": "api", "url": "https://upstream.test/items", "limit": 3}},
            headers=auth,
        )
        body = response.json()

        assert response.status_code == 200
        assert [row["id"] for row in body["data"]] == [1, 2, 3]
        assert body["metadata"]["rowCount"] == 3
        assert body["metadata"]["columns"] == ["id", "name"]
        assert body["metadata"]["lastUpdated"].endswith("Z")

    def test_rows_are_cached_by_data_source_id(self, client, auth, cache):
        client.post(
            "/fetch-data",
            json={"dataSourceId": "ds_cached", "config": {"type": "static", "limit": 4}},
            headers=auth,
        )
        assert len(cache.get("alice", "ds_cached").rows) == 4
        assert cache.get("bob", "ds_cached") is None

    def test_object_response_is_cached_unchanged(self, client, auth, cache):
        response = client.post(
            "/fetch-data",
            json={
                "dataSourceId": "d1",
                "config": {"type": "api", "url": "https://upstream.test/summary"},
            },
            headers=auth,
        )

        assert response.json()["data"] == {"total": 3, "name": "x"}
        assert response.json()["metadata"]["rowCount"] == 1
        assert cache.get("alice", "d1").rows == {"total": 3, "name": "x"}

    def test_upstream_error(self, client, auth):
        response = client.post(
            "/fetch-data",
            json={"config": {"type": "api", "url": "https://upstream.test/missing"}},
            headers=auth,
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Failed to fetch data"
        assert response.json()["details"] == "API request failed: 404 Not Found - not here"

    def test_unknown_kind(self, client, auth):
        response = client.post(
            "/fetch-data", json={"config": {"type": "database"}}, headers=auth
        )
        assert response.status_code == 400
        assert response.json()["details"] == "Unsupported data source type: database"

    def test_missing_config_is_invalid_request(self, client, auth):
        response = client.post("/fetch-data", json={}, headers=auth)
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid request"


class TestCachedData:
    """Tests for GET /cached-data/{id}."""

    def test_returns_last_fetch(self, client, auth):
        fetched = client.post(
            "/fetch-data",
            json={
                "dataSourceId": "d1",
                "config": {"type": "api", "url": "https://upstream.test/summary"},
            },
            headers=auth,
        ).json()

        response = client.get("/cached-data/d1", headers=auth)

        assert response.status_code == 200
        assert response.json() == fetched

    def test_other_owner_sees_nothing(self, client, auth, other_auth):
        client.post(
            "/fetch-data",
            json={"dataSourceId": "d1", "config": {"type": "static", "limit": 2}},
            headers=auth,
        )

        response = client.get("/cached-data/d1", headers=other_auth)

        assert response.status_code == 404
        assert response.json() == {"error": "No cached data"}

    def test_nothing_cached(self, client, auth):
        assert client.get("/cached-data/never", headers=auth).status_code == 404

    def test_requires_token(self, client):
        assert client.get("/cached-data/d1").status_code == 401


class TestTransformData:
    """Tests for POST /transform-data."""

    def test_transform(self, client, auth, sales_rows):
        response = client.post(
            "/transform-data",
            json={
                "data": sales_rows,
                "transformConfig": {
                    "filters": [{"column": "region", "operator": "equals", "value": "South"}],
                    "sort": {"column": "revenue", "direction": "desc"},
                },
            },
            headers=auth,
        )
        body = response.json()

        assert response.status_code == 200
        assert [row["id"] for row in body["data"]] == [5, 2]
        assert body["metadata"] == {
            "originalRowCount": 5,
            "transformedRowCount": 2,
            "transformations": ["filters", "sort"],
        }

    def test_non_list_data(self, client, auth):
        response = client.post(
            "/transform-data", json={"data": {"id": 1}, "transformConfig": {}}, headers=auth
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Failed to transform data"


class TestValidateSource:
    """Tests for POST /validate-source."""

    def test_valid_csv(self, client, auth):
        response = client.post(
            "/validate-source",
            json={"config": {"type": "csv", "url": "https://upstream.test/sales.csv"}},
            headers=auth,
        )
        body = response.json()

        assert response.status_code == 200
        assert body["isValid"] is True
        assert body["message"] == "Data source is valid"
        assert body["schema"]["columns"] == [
            {"name": "region", "type": "string", "nullable": False},
            {"name": "revenue", "type": "number", "nullable": False},
        ]
        assert body["sampleData"] == [
            {"region": "North", "revenue": "100"},
            {"region": "South", "revenue": "250"},
        ]

    def test_unreachable_source(self, client, auth):
        response = client.post(
            "/validate-source",
            json={"config": {"type": "json", "url": "https://upstream.test/gone.json"}},
            headers=auth,
        )
        assert response.status_code == 200
        assert response.json() == {
            "isValid": False,
            "schema": None,
            "sampleData": None,
            "message": "Data source validation failed",
        }

    def test_unknown_kind_is_valid(self, client, auth):
        response = client.post(
            "/validate-source", json={"config": {"type": "database"}}, headers=auth
        )
        assert response.json()["isValid"] is True
        assert response.json()["schema"] == {"columns": []}

    def test_invalid_config(self, client, auth):
        response = client.post("/validate-source", json={"config": {"type": "api"}}, headers=auth)
        assert response.status_code == 400
        assert response.json()["isValid"] is False
        assert response.json()["error"] == "Failed to validate data source"


class TestPreviewData:
    """Tests for POST /preview-data."""

    def test_preview(self, client, auth):
        response = client.post(
            "/preview-data",
            json={"config": {"type": "static", "dataType": "users"}, "limit": 3},
            headers=auth,
        )
        body = response.json()

        assert len(body["data"]) == 3
        assert body["metadata"]["isPreview"] is True
        assert body["metadata"]["limit"] == 3
        assert body["metadata"]["columns"][:2] == ["id", "name"]

    def test_default_limit(self, client, auth):
        response = client.post(
            "/preview-data", json={"config": {"type": "static"}}, headers=auth
        )
        assert response.json()["metadata"]["rowCount"] == 10

    def test_unknown_kind_previews_nothing(self, client, auth):
        response = client.post(
            "/preview-data", json={"config": {"type": "database"}}, headers=auth
        )
        assert response.json()["data"] == []


# ============================================================================
# Data Source Records
# ============================================================================


class TestDataSources:
    """Tests for /data-sources."""

    def test_create_and_list(self, client, auth):
        source_id = create_source(client, auth)
        response = client.get("/data-sources", headers=auth)

        sources = response.json()["data"]
        assert [s["id"] for s in sources] == [source_id]
        assert sources[0]["ownerId"] == "alice"
        assert sources[0]["connectionConfig"] == {"type": "static", "dataType": "sales"}

    def test_get_update_delete(self, client, auth):
        source_id = create_source(client, auth)

        response = client.put(
            f"/data-sources/{source_id}", json={"name": "Renamed"}, headers=auth
        )
        assert response.json()["data"]["name"] == "Renamed"
        assert client.get(f"/data-sources/{source_id}", headers=auth).json()["data"]["name"] == "Renamed"

        response = client.delete(f"/data-sources/{source_id}", headers=auth)
        assert response.json() == {"message": "Data source deleted successfully"}
        assert client.get(f"/data-sources/{source_id}", headers=auth).status_code == 404

    def test_other_owners_see_nothing(self, client, auth, other_auth):
        source_id = create_source(client, auth)

        assert client.get("/data-sources", headers=other_auth).json() == {"data": []}
        response = client.get(f"/data-sources/{source_id}", headers=other_auth)
        assert response.status_code == 404
        assert response.json() == {"error": "Data source not found"}
        assert client.delete(f"/data-sources/{source_id}", headers=other_auth).status_code == 404

    def test_name_is_required(self, client, auth):
        response = client.post("/data-sources", json={"type": "static"}, headers=auth)
        assert response.status_code == 400


# ============================================================================
# Imported Rows
# ============================================================================


class TestImportedData:
    """Tests for /data endpoints."""

    def import_rows(self, client, auth, rows, **extra):
        source_id = create_source(client, auth)
        response = client.post(
            "/data/import",
            json={"dataSourceId": source_id, "data": rows, **extra},
            headers=auth,
        )
        assert response.json()["data"]["rowCount"] == len(rows)
        return source_id

    def test_import_and_read(self, client, auth, sales_rows):
        schema = {"columns": [{"name": "id", "type": "number", "nullable": False}]}
        source_id = self.import_rows(client, auth, sales_rows, schema=schema)

        body = client.get(f"/data/{source_id}", headers=auth).json()["data"]
        assert body["rows"] == sales_rows
        assert body["schema"] == schema
        assert body["metadata"]["rowCount"] == 5
        assert body["metadata"]["dataSourceId"] == source_id

    def test_schema_is_null_until_imported(self, client, auth):
        source_id = self.import_rows(client, auth, [{"a": 1}])
        assert client.get(f"/data/{source_id}", headers=auth).json()["data"]["schema"] is None

    def test_update_row(self, client, auth, sales_rows):
        source_id = self.import_rows(client, auth, sales_rows)
        response = client.put(
            f"/data/{source_id}",
            json={"rowIndex": 0, "rowData": {"id": 1, "revenue": 1}},
            headers=auth,
        )
        assert response.json() == {"data": {"message": "Row updated successfully"}}
        rows = client.get(f"/data/{source_id}", headers=auth).json()["data"]["rows"]
        assert rows[0] == {"id": 1, "revenue": 1}

    def test_update_missing_row(self, client, auth, sales_rows):
        source_id = self.import_rows(client, auth, sales_rows)
        response = client.put(
            f"/data/{source_id}",
            json={"rowIndex": 9, "rowData": {}},
            headers=auth,
        )
        assert response.status_code == 404

    def test_clear(self, client, auth, sales_rows):
        source_id = self.import_rows(client, auth, sales_rows)
        response = client.delete(f"/data/{source_id}", headers=auth)
        assert response.json() == {"data": {"message": "Data cleared successfully"}}
        assert client.get(f"/data/{source_id}", headers=auth).json()["data"]["rows"] == []

    def test_query_filters(self, client, auth, sales_rows):
        source_id = self.import_rows(client, auth, sales_rows)
        response = client.post(
            f"/data/{source_id}/query",
            json={"filters": [{"column": "product", "operator": "contains", "value": "b"}]},
            headers=auth,
        )
        body = response.json()["data"]
        assert [row["id"] for row in body["rows"]] == [2, 5]
        assert body["metadata"] == {"totalRows": 5, "filteredRows": 2, "hasMore": False}

    def test_query_window_applies_before_filters(self, client, auth, sales_rows):
        source_id = self.import_rows(client, auth, sales_rows)
        response = client.post(
            f"/data/{source_id}/query",
            json={
                "limit": 2,
                "offset": 1,
                "filters": [{"column": "region", "operator": "equals", "value": "South"}],
            },
            headers=auth,
        )
        body = response.json()["data"]
        assert [row["id"] for row in body["rows"]] == [2]
        assert body["metadata"] == {"totalRows": 2, "filteredRows": 1, "hasMore": True}

    def test_other_owner_cannot_import(self, client, auth, other_auth):
        source_id = create_source(client, auth)
        response = client.post(
            "/data/import",
            json={"dataSourceId": source_id, "data": [{"a": 1}]},
            headers=other_auth,
        )
        assert response.status_code == 404
