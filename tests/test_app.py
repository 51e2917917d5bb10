"""
ArgBlazer API Test Suite

Tests covering:
- Health endpoint
- Extensions, rank and steps endpoints
- Structured error bodies for invalid and oversized frameworks
- HTML report endpoint
"""
import os
import sys

import pytest
from fastapi.testclient import TestClient

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))


@pytest.fixture
def client():
    from argblazer.app import app
    return TestClient(app)


class TestHealth:
    def test_health(self, client):
        from argblazer.app import MAX_ARGUMENTS
        resp = client.get("/v1/health")
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "ok"
        assert body["max_arguments"] == MAX_ARGUMENTS


class TestExtensionsEndpoint:
    def test_mutual_attack(self, client):
        resp = client.post("/v1/extensions", json={
            "arguments": ["a", "b"],
            "attacks": [["a", "b"], ["b", "a"]],
        })
        assert resp.status_code == 200
        body = resp.json()
        assert body["preferred"] == [["a"], ["b"]]
        assert body["stable"] == [["a"], ["b"]]
        assert body["grounded"] == [[]]
        assert body["num_arguments"] == 2
        assert body["num_attacks"] == 2

    def test_self_attack_has_no_stable(self, client):
        resp = client.post("/v1/extensions", json={
            "arguments": ["a"],
            "attacks": [["a", "a"]],
        })
        body = resp.json()
        assert body["stable"] == []
        assert body["grounded"] == [[]]

    def test_undeclared_argument(self, client):
        resp = client.post("/v1/extensions", json={
            "arguments": ["a"],
            "attacks": [["a", "ghost"]],
        })
        assert resp.status_code == 422
        body = resp.json()
        assert body["status"] == "error"
        assert body["code"] == "invalid_framework"
        assert "ghost" in body["message"]

    def test_empty_framework(self, client):
        resp = client.post("/v1/extensions", json={"arguments": [], "attacks": []})
        assert resp.status_code == 422
        assert resp.json()["code"] == "invalid_framework"

    def test_too_large(self, client):
        from argblazer.app import MAX_ARGUMENTS
        resp = client.post("/v1/extensions", json={
            "arguments": [f"a{i}" for i in range(MAX_ARGUMENTS + 1)],
        })
        assert resp.status_code == 413
        assert resp.json()["code"] == "framework_too_large"


class TestRankEndpoint:
    def test_bottom_fallback(self, client):
        resp = client.post("/v1/rank", json={
            "attacks": [["a", "b"], ["b", "c"]],
            "fallback_first": "a",
            "fallback_last": "c",
            "is_top_side": False,
        })
        assert resp.status_code == 200
        assert resp.json()["rank"] == {"c": 0, "b": 1, "a": 2}

    def test_multiple_roots(self, client):
        resp = client.post("/v1/rank", json={
            "attacks": [["a", "b"], ["b", "c"], ["c", "d"]],
            "roots": ["a", "d"],
        })
        assert resp.json()["rank"] == {"a": 0, "b": 1, "c": 1, "d": 0}


class TestStepsEndpoint:
    def test_steps(self, client):
        resp = client.post("/v1/steps", json={
            "arguments": ["a", {"b": [{"step": 2}]}],
            "attacks": [["b", "a"]],
        })
        assert resp.status_code == 200
        body = resp.json()
        assert body["total_steps"] == 2
        first, second = body["steps"]
        assert first["step"] == 0
        assert first["arguments"] == ["a"]
        assert first["attacks"] == []
        assert first["extensions"]["grounded"] == [["a"]]
        assert second["arguments"] == ["a", "b"]
        assert second["attacks"] == [["b", "a"]]
        assert second["extensions"]["grounded"] == [["b"]]
        assert second["rank_top"] == {"a": 0, "b": 1}
        assert second["rank_bottom"] == {"b": 0, "a": 1}

    def test_undeclared_attack(self, client):
        resp = client.post("/v1/steps", json={
            "arguments": ["a"],
            "attacks": [["a", "b"]],
        })
        assert resp.status_code == 422
        assert resp.json()["code"] == "invalid_framework"


class TestReportEndpoint:
    def test_report(self, client):
        resp = client.post("/v1/report", json={
            "yaml": "exhibit: a small debate\narguments:\n  - a\n  - b\nattacks:\n  - [b, a]\n",
            "title": "Small debate",
        })
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/html")
        assert "Small debate" in resp.text
        assert 'id="step-2"' in resp.text
        assert "a small debate" in resp.text

    def test_invalid_yaml(self, client):
        resp = client.post("/v1/report", json={"yaml": "arguments: [a, b\n"})
        assert resp.status_code == 400
        assert resp.json()["code"] == "invalid_document"

    def test_missing_arguments(self, client):
        resp = client.post("/v1/report", json={"yaml": "attacks: []\n"})
        assert resp.status_code == 400
        assert resp.json()["code"] == "invalid_document"
