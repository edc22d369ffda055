from __future__ import annotations

import io
import json

from fastapi.testclient import TestClient

from extcaps.api.server import ServiceConfig, create_app


def _client(**cfg) -> TestClient:
    return TestClient(create_app(ServiceConfig(**cfg)))


def test_health_and_rule_catalog():
    client = _client()

    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"ok": True, "rules": 18}
    assert r.headers.get("x-request-id")

    r2 = client.get("/capabilities")
    assert r2.status_code == 200
    sidebar = next(c for c in r2.json() if c["capability"] == "sidebar")
    assert sidebar["fields"] == ["side_panel.default_path", "sidebar_action.default_panel"]


def test_request_id_is_echoed_when_short():
    client = _client()
    r = client.get("/health", headers={"X-Request-ID": "abc123"})
    assert r.headers["x-request-id"] == "abc123"

    r2 = client.get("/health", headers={"X-Request-ID": "x" * 500})
    assert r2.headers["x-request-id"] != "x" * 500


def test_analyze_json_body_accepts_camel_case_options():
    client = _client()
    r = client.post(
        "/analyze",
        json={
            "manifest": {"devtools_page": "d.html", "action": {"default_popup": "p.html"}},
            "options": {"normalizeNames": True},
        },
    )
    assert r.status_code == 200
    assert r.json()["capabilities"] == [
        {"capability": "popup", "description": "Toolbar popup UI", "id": "action_popup"},
        {"capability": "devtools", "description": "Developer tools panel", "id": "devtools_page"},
    ]


def test_analyze_empty_manifest_returns_fallback_without_nulls():
    client = _client()
    r = client.post("/analyze", json={"manifest": {}})
    assert r.status_code == 200
    assert r.json()["capabilities"] == [
        {"capability": "manifest", "description": "Basic extension manifest configuration"}
    ]


def test_analyze_file_upload():
    client = _client()
    payload = json.dumps({"web_accessible_resources": [{"resources": ["x.js"]}]}).encode("utf-8")
    r = client.post(
        "/analyze-file",
        files={"file": ("manifest.json", io.BytesIO(payload), "application/json")},
        data={"include_compatibility": "true"},
    )
    assert r.status_code == 200
    assert r.json()["capabilities"] == [
        {
            "capability": "web_resources",
            "description": "Web-accessible resources exposed to web pages",
            "compatibility": {"safari": True},
        }
    ]


def test_analyze_file_invalid_json_fallback_and_strict():
    client = _client()
    files = {"file": ("manifest.json", io.BytesIO(b"not json"), "application/json")}

    r = client.post("/analyze-file", files=files)
    assert r.status_code == 200
    assert r.json()["capabilities"][0]["capability"] == "manifest"

    files = {"file": ("manifest.json", io.BytesIO(b"not json"), "application/json")}
    r2 = client.post("/analyze-file", files=files, data={"strict": "true"})
    assert r2.status_code == 400
    assert r2.json()["detail"]["error"] == "invalid_manifest"
    assert r2.json()["detail"]["detail"]


def test_analyze_file_rejects_oversized_upload():
    client = _client(max_upload_bytes=16)
    payload = json.dumps({"devtools_page": "devtools.html", "name": "x" * 64}).encode("utf-8")
    r = client.post(
        "/analyze-file",
        files={"file": ("manifest.json", io.BytesIO(payload), "application/json")},
    )
    assert r.status_code == 413
    assert r.json()["detail"] == {"error": "upload_too_large", "detail": None}


def test_service_config_from_env(monkeypatch):
    monkeypatch.setenv("EXTCAPS_MAX_UPLOAD_BYTES", "2048")
    monkeypatch.setenv("EXTCAPS_LOG_LEVEL", "debug")
    cfg = ServiceConfig.from_env()
    assert cfg.max_upload_bytes == 2048
    assert cfg.log_level == "DEBUG"

    monkeypatch.setenv("EXTCAPS_MAX_UPLOAD_BYTES", "lots")
    assert ServiceConfig.from_env().max_upload_bytes == 1024 * 1024


def test_analyze_file_deep_nesting_strict_is_rejected():
    client = _client()
    payload = ("[" * 100000 + "]" * 100000).encode("utf-8")

    r = client.post(
        "/analyze-file",
        files={"file": ("manifest.json", io.BytesIO(payload), "application/json")},
    )
    assert r.status_code == 200
    assert r.json()["capabilities"][0]["capability"] == "manifest"

    r2 = client.post(
        "/analyze-file",
        files={"file": ("manifest.json", io.BytesIO(payload), "application/json")},
        data={"strict": "true"},
    )
    assert r2.status_code == 400
    assert r2.json()["detail"]["error"] == "invalid_manifest"
