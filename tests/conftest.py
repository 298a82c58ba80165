"""Shared test fixtures."""

from __future__ import annotations

import copy
from typing import Any

import pytest

from infranodus_mcp.models.graph import GraphResponse, normalize_response

API_BASE = "https://infranodus.test/api/v1"


@pytest.fixture(autouse=True)
def _env_setup(monkeypatch):
    """Set required environment variables for tests."""
    monkeypatch.setenv("INFRANODUS_API_KEY", "test-key")
    monkeypatch.setenv("INFRANODUS_API_BASE", API_BASE)
    monkeypatch.setenv("LOG_FORMAT", "console")


@pytest.fixture
def settings():
    from infranodus_mcp.config import Settings

    return Settings(
        INFRANODUS_API_KEY="test-key",
        INFRANODUS_API_BASE=API_BASE,
        INFRANODUS_TIMEOUT_SECONDS=5.0,
    )


class FakeInfraNodusClient:
    """Stands in for ``InfraNodusClient``; records every call it receives."""

    def __init__(self, payload: Any = None, error: Exception | None = None) -> None:
        self.payload = payload if payload is not None else {}
        self.error = error
        self.calls: list[tuple[str, dict[str, Any]]] = []

    async def send(self, path: str, body: dict[str, Any]) -> GraphResponse:
        self.calls.append((path, body))
        if self.error is not None:
            raise self.error
        return normalize_response(copy.deepcopy(self.payload))


@pytest.fixture
def fake_client_factory():
    return FakeInfraNodusClient


@pytest.fixture
def graph_payload() -> dict:
    """A /graphAndStatements response in the bare (unwrapped) shape."""
    return {
        "statements": [
            {
                "id": 1,
                "content": "Quantum computing uses qubits.",
                "contextId": 7,
                "categories": [],
                "statementHashtags": ["#quantum", "#qubit"],
                "statementCommunities": ["0"],
                "topStatementCommunity": "0",
            }
        ],
        "graph": {
            "graphologyGraph": {
                "attributes": {
                    "modularity": 0.42,
                    "top_nodes": ["quantum", "qubit"],
                    "top_clusters": [
                        {"community": "0", "nodes": [{"nodeName": "quantum", "degree": 3, "bc": 0.5}], "aiName": "Physics"},
                        {"community": "1", "nodes": [{"nodeName": "error", "degree": 1, "bc": 0.1}]},
                    ],
                    "gaps": [{"source": "0", "target": "1", "weight": 1, "concepts": ["quantum", "error"]}],
                    "dotGraphByCluster": {"0": "quantum -> qubit"},
                },
                "nodes": [
                    {"id": "quantum", "label": "quantum", "degree": 3},
                    {"id": "qubit", "label": "qubit", "degree": 2},
                    {"id": "error", "label": "error", "degree": 1},
                ],
                "edges": [
                    {"source": "quantum", "target": "qubit", "id": "e1", "weight": 2},
                    {"source": "quantum", "target": "error", "id": "e2", "weight": 1},
                ],
            },
            "statementHasthags": [],
        },
        "extendedGraphSummary": {
            "contentGaps": ["Physics <-> Error correction"],
            "mainTopics": ["1. Physics: quantum qubit", "2. Errors: error"],
            "mainConcepts": ["quantum", "qubit"],
            "conceptualGateways": ["qubit"],
            "topRelations": ["quantum <-> qubit"],
            "topBigrams": ["quantum computing"],
        },
    }


@pytest.fixture
def advice_payload() -> dict:
    return {
        "aiAdvice": [
            "How could error correction change the reliability of qubits?",
            "What links quantum hardware to algorithm design?",
        ]
    }


@pytest.fixture
def search_payload() -> dict:
    return {
        "userName": "alice",
        "graphNames": ["mygraph", "physics"],
        "graphUrls": [
            "https://infranodus.com/alice/mygraph",
            "https://infranodus.com/alice/physics",
        ],
        "entriesAdded": {
            "ids": ["s1", "s2"],
            "texts": ["Quantum computing uses qubits.", "Qubits are fragile."],
        },
    }
