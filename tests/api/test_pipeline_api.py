"""API tests for the request pipeline: health, routing, binding and recovery."""

from __future__ import annotations

from fastapi.testclient import TestClient

API_PREFIX = "/api/v1"


def test_health_check(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "message": "GalaxyERP is running"}


def test_api_index_is_public(client: TestClient) -> None:
    with_slash = client.get(f"{API_PREFIX}/")
    without_slash = client.get(API_PREFIX)

    assert with_slash.status_code == 200
    assert without_slash.json() == {"message": "GalaxyERP API v1"}


def test_request_id_is_echoed(client: TestClient) -> None:
    response = client.get("/health", headers={"X-Request-ID": "req-123"})

    assert response.headers["X-Request-ID"] == "req-123"
    assert response.headers["X-Trace-ID"] == "req-123"


def test_request_id_is_generated(client: TestClient) -> None:
    response = client.get("/health")

    assert len(response.headers["X-Request-ID"]) == 36


def test_cors_preflight(client: TestClient) -> None:
    response = client.options(
        f"{API_PREFIX}/accounting/accounts",
        headers={"Origin": "http://localhost:3000", "Access-Control-Request-Method": "POST"},
    )

    assert response.status_code == 200
    assert "access-control-allow-origin" in response.headers


def test_unknown_route_uses_envelope(client: TestClient, auth_headers: dict[str, str]) -> None:
    response = client.get(f"{API_PREFIX}/unknown", headers=auth_headers)

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Not Found", "error": "NOT_FOUND"}


def test_method_not_allowed(client: TestClient) -> None:
    response = client.get(f"{API_PREFIX}/auth/login")

    assert response.status_code == 405
    assert response.json()["success"] is False
    assert response.json()["error"] == "METHOD_NOT_ALLOWED"


def test_malformed_json_body(client: TestClient, auth_headers: dict[str, str]) -> None:
    response = client.post(
        f"{API_PREFIX}/accounting/accounts",
        content=b'{"code": "1001",',
        headers={**auth_headers, "Content-Type": "application/json"},
    )

    assert response.status_code == 400
    payload = response.json()
    assert payload["success"] is False
    assert payload["message"] == "请求数据格式错误"
    assert payload["details"]["error"]


def test_empty_body(client: TestClient) -> None:
    response = client.post(f"{API_PREFIX}/auth/login")

    assert response.status_code == 400
    assert response.json()["message"] == "请求数据格式错误"


def test_non_object_body(client: TestClient, auth_headers: dict[str, str]) -> None:
    response = client.post(f"{API_PREFIX}/accounting/accounts", json=[1, 2], headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["message"] == "请求数据格式错误"
    assert "AccountCreateRequest" in response.json()["details"]["error"]


def test_query_parameter_type_error(client: TestClient, auth_headers: dict[str, str]) -> None:
    response = client.get(f"{API_PREFIX}/accounting/accounts", params={"parent_id": "abc"}, headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["details"]["field_errors"] == {"parent_id": "parent_id格式不正确"}


def test_unexpected_failure_is_contained(app, client: TestClient, log_records: list[dict]) -> None:
    async def broken_handler() -> dict:
        record = None
        return {"name": record.name}

    app.add_api_route("/debug/broken", broken_handler, methods=["GET"])

    crashed = client.get("/debug/broken", headers={"X-Request-ID": "crash-1"})
    after = client.get("/health")

    assert crashed.status_code == 500
    assert crashed.json() == {"success": False, "message": "服务器内部错误", "error": "INTERNAL_ERROR"}
    assert crashed.headers["X-Request-ID"] == "crash-1"
    assert after.status_code == 200

    errors = [record for record in log_records if record["level"].name == "ERROR" and "未处理的异常" in record["message"]]
    assert len(errors) == 1
    assert "AttributeError" in errors[0]["message"]
    assert errors[0]["extra"]["request_id"] == "crash-1"
    assert errors[0]["extra"]["path"] == "/debug/broken"


def test_client_errors_are_logged_as_warnings(
    client: TestClient,
    auth_headers: dict[str, str],
    log_records: list[dict],
) -> None:
    client.delete(f"{API_PREFIX}/accounting/accounts/999999", headers=auth_headers)

    failures = [record for record in log_records if record["extra"].get("error_code") == "NOT_FOUND"]
    assert len(failures) == 1
    assert failures[0]["level"].name == "WARNING"
    assert "科目不存在" in failures[0]["message"]
    assert failures[0]["extra"]["status_code"] == 404
