"""Testes dos endpoints HTTP do agente (FastAPI TestClient)."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from app.app import create_app
from tests.fakes.agent_fakes import PHONE, TENANT, AgentHarness, build_harness, call


@pytest.fixture
def harness() -> AgentHarness:
    return build_harness()


@pytest.fixture
def client(harness: AgentHarness) -> TestClient:
    return TestClient(create_app(orchestrator=harness.orchestrator))


def _body(text: str, **extra: object) -> dict[str, object]:
    return {"tenantId": TENANT, "customerPhone": PHONE, "text": text, **extra}


class TestPostMessage:
    def test_reply_with_executed_functions(self, client: TestClient, harness: AgentHarness) -> None:
        harness.model.push(call("search_properties", city="Florianópolis"))

        response = client.post("/agent/messages", json=_body("quero casa em floripa"))

        assert response.status_code == 200
        data = response.json()
        assert data["reply"].startswith("Encontrei 2 opções")
        assert data["functionsExecuted"] == ["search_properties"]
        assert isinstance(data["processingTimeMs"], int)

    def test_missing_tenant_is_rejected(self, client: TestClient) -> None:
        response = client.post("/agent/messages", json={"customerPhone": PHONE, "text": "oi"})
        assert response.status_code == 422

    def test_empty_text_gets_reply(self, client: TestClient) -> None:
        response = client.post("/agent/messages", json=_body(""))
        assert response.status_code == 200
        assert response.json()["reply"]
        assert response.json()["functionsExecuted"] == []


class TestClearContext:
    def test_clear_existing_context(self, client: TestClient) -> None:
        client.post("/agent/messages", json=_body("oi"))

        response = client.post(
            "/agent/clear-context", json={"tenantId": TENANT, "customerPhone": PHONE}
        )

        assert response.status_code == 200
        assert response.json() == {"cleared": True}

    def test_clear_missing_context(self, client: TestClient) -> None:
        response = client.post(
            "/agent/clear-context", json={"tenantId": TENANT, "customerPhone": "+5511000000000"}
        )
        assert response.json() == {"cleared": False}
