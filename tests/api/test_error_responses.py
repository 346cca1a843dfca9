"""
tests.api.test_error_responses

Purpose:
    API regression tests for the error envelope produced by the error pipeline.

Covers:
    - Domain error pass-through (404 RESOURCE_NOT_FOUND)
    - Storage-engine error mapping (409 UNIQUE_CONSTRAINT_VIOLATION)
    - Framework HTTP error with a list of messages
    - Request body validation (400 VALIDATION_ERROR), including custom formats
    - Unknown errors in development vs production
    - Exactly one failure log record per failed request
"""

from __future__ import annotations

import logging

ENVELOPE_KEYS = {"success", "statusCode", "code", "message", "errors", "path", "method", "requestId", "timestamp"}


def test_domain_error_passes_through(client) -> None:
    r = client.get("/boom/app-error")
    assert r.status_code == 404

    data = r.json()
    assert ENVELOPE_KEYS <= set(data)
    assert data["success"] is False
    assert data["statusCode"] == 404
    assert data["code"] == "RESOURCE_NOT_FOUND"
    assert data["message"] == "Profile with ID 42 not found"
    assert data["errors"] is None
    assert data["path"] == "/boom/app-error"
    assert data["method"] == "GET"
    assert data["requestId"] == r.headers["x-request-id"]
    assert data["timestamp"].endswith("Z")


def test_unique_violation_maps_to_409(client) -> None:
    r = client.get("/boom/unique")
    assert r.status_code == 409

    data = r.json()
    assert data["code"] == "UNIQUE_CONSTRAINT_VIOLATION"
    assert data["message"] == "A record with this value already exists"
    assert data["errors"] == {
        "code": "23505",
        "message": "duplicate key value violates unique constraint",
        "constraint": "users_email_key",
        "table": "users",
    }


def test_http_error_message_list_is_joined(client) -> None:
    r = client.get("/boom/http-list")
    assert r.status_code == 400

    data = r.json()
    assert data["code"] == "VALIDATION_ERROR"
    assert data["message"] == "field a required, field b invalid"
    assert data["errors"] == ["field a required", "field b invalid"]


def test_unknown_route_is_not_found(client) -> None:
    r = client.get("/does-not-exist")
    assert r.status_code == 404
    assert r.json()["code"] == "NOT_FOUND"


def test_body_validation_is_400_with_field_messages(client) -> None:
    r = client.post("/boom/validate", json={"name": "qr"})
    assert r.status_code == 400

    data = r.json()
    assert data["code"] == "VALIDATION_ERROR"
    assert "qty" in data["message"]
    assert isinstance(data["errors"], list)
    assert data["errors"][0]["loc"] == ["body", "qty"]
    assert "ctx" not in data["errors"][0]


def test_custom_formats_reject_bad_values_with_400(client) -> None:
    r = client.post(
        "/boom/profile",
        json={
            "id": "not-a-uuid",
            "tenant_id": "tenant_abcDEF1234567890",
            "slug": "Bad Slug",
            "phone": "+251912345678",
        },
    )
    assert r.status_code == 400

    data = r.json()
    assert data["code"] == "VALIDATION_ERROR"
    assert sorted(err["loc"][-1] for err in data["errors"]) == ["id", "slug"]


def test_custom_formats_accept_good_values(client) -> None:
    body = {
        "id": "3f2504e0-4f89-11d3-9a0c-0305e82c3301",
        "tenant_id": "tenant_abcDEF1234567890",
        "slug": "my-card",
        "phone": "0912345678",
    }
    r = client.post("/boom/profile", json=body)
    assert r.status_code == 200
    assert r.json() == body


def test_missing_user_is_unauthorized(client) -> None:
    r = client.get("/boom/require-user")
    assert r.status_code == 401
    assert r.json()["code"] == "UNAUTHORIZED"


def test_unknown_error_exposes_debug_outside_production(client_factory) -> None:
    client = client_factory(app_env="development")
    r = client.get("/boom/unknown")
    assert r.status_code == 500

    data = r.json()
    assert data["code"] == "INTERNAL_ERROR"
    assert data["message"] == "secret internals"
    assert data["debug"]["exceptionName"] == "RuntimeError"
    assert "secret internals" in data["debug"]["stack"]


def test_unknown_error_is_redacted_in_production(client_factory) -> None:
    client = client_factory(app_env="production")
    r = client.get("/boom/unknown")
    assert r.status_code == 500

    data = r.json()
    assert data["code"] == "INTERNAL_ERROR"
    assert data["message"] == "Internal server error"
    assert "debug" not in data
    assert "secret internals" not in r.text
    assert r.headers.get("x-request-id")


def test_one_failure_log_record_per_request(client, caplog) -> None:
    caplog.set_level(logging.INFO)
    client.get("/boom/unknown", headers={"x-request-id": "fail-1"})
    client.get("/boom/app-error", headers={"x-request-id": "fail-2"})

    failed = [r for r in caplog.records if r.getMessage() == "request.failed"]
    rejected = [r for r in caplog.records if r.getMessage() == "request.rejected"]

    assert len(failed) == 1
    assert failed[0].levelno == logging.ERROR
    assert failed[0].fields["requestId"] == "fail-1"
    assert failed[0].fields["status"] == 500
    assert failed[0].fields["errorName"] == "RuntimeError"

    assert len(rejected) == 1
    assert rejected[0].levelno == logging.WARNING
    assert rejected[0].fields["errorCode"] == "RESOURCE_NOT_FOUND"
