from __future__ import annotations

import importlib

import pytest
from fastapi.testclient import TestClient

import pulverizer.main as main_module


@pytest.fixture
def small_limit_client(tmp_path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("PULVERIZER_DB_PATH", str(tmp_path / "limit.db"))
    monkeypatch.setenv("PULVERIZER_MAX_BODY_BYTES", "16")
    module = importlib.reload(main_module)
    with TestClient(module.app) as client:
        yield client


def test_body_over_global_limit_is_rejected(small_limit_client):
    resp = small_limit_client.post("/pulverize", content=b"x" * 17)

    assert resp.status_code == 413
    error = resp.json()["error"]
    assert error["code"] == "E_PAYLOAD_TOO_LARGE"
    assert error["details"]["limit"] == 16


def test_streamed_body_over_limit_is_rejected(small_limit_client):
    def chunks():
        yield b"x" * 10
        yield b"x" * 10

    resp = small_limit_client.post("/shred", content=chunks())

    assert resp.status_code == 413


def test_rejected_body_is_not_recorded(small_limit_client):
    small_limit_client.post("/burn", content=b"x" * 32)

    assert small_limit_client.get("/stats").json() == {"stats": []}


def test_body_within_limit_is_accepted(small_limit_client):
    resp = small_limit_client.post("/pulverize", content=b"x" * 16)

    assert resp.status_code == 200
