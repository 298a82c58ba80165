"""Golden-output tests for the response projections."""

from __future__ import annotations

import copy

from infranodus_mcp.models.graph import normalize_response
from infranodus_mcp.tools.transformers import (
    transform_fetch,
    transform_gaps,
    transform_knowledge_graph,
    transform_research_questions,
    transform_responses,
    transform_search,
    transform_text_overview,
    transform_topics,
)


def test_knowledge_graph_golden(graph_payload):
    output = transform_knowledge_graph(normalize_response(graph_payload)).to_payload()

    attrs = graph_payload["graph"]["graphologyGraph"]["attributes"]
    summary = graph_payload["extendedGraphSummary"]
    assert output == {
        "statistics": {"modularity": 0.42, "nodeCount": 3, "edgeCount": 2, "clusterCount": 2},
        "contentGaps": summary["contentGaps"],
        "mainTopicalClusters": summary["mainTopics"],
        "mainConcepts": summary["mainConcepts"],
        "conceptualGateways": summary["conceptualGateways"],
        "topRelations": summary["topRelations"],
        "topBigrams": summary["topBigrams"],
        "knowledgeGraphByCluster": attrs["dotGraphByCluster"],
        "topClusters": attrs["top_clusters"],
        "statements": graph_payload["statements"],
    }


def test_knowledge_graph_defaults_when_graph_absent():
    output = transform_knowledge_graph(normalize_response({})).to_payload()
    assert output == {
        "statistics": {"modularity": 0, "nodeCount": 0, "edgeCount": 0, "clusterCount": 0},
    }


def test_include_graph_strips_nodes_and_edges(graph_payload):
    output = transform_knowledge_graph(normalize_response(graph_payload), include_graph=True).to_payload()

    graph = output["knowledgeGraph"]
    assert "nodes" not in graph
    assert "edges" not in graph
    assert graph["attributes"]["modularity"] == 0.42
    assert graph["attributes"]["top_nodes"] == ["quantum", "qubit"]


def test_include_nodes_and_edges(graph_payload):
    output = transform_knowledge_graph(
        normalize_response(graph_payload), include_graph=True, include_nodes_and_edges=True
    ).to_payload()

    assert len(output["knowledgeGraph"]["nodes"]) == 3
    assert len(output["knowledgeGraph"]["edges"]) == 2


def test_top_clusters_lifted_out_of_nested_graph(graph_payload):
    output = transform_knowledge_graph(normalize_response(graph_payload), include_graph=True).to_payload()

    assert output["topClusters"][0]["aiName"] == "Physics"
    assert "top_clusters" not in output["knowledgeGraph"]["attributes"]
    assert "dotGraphByCluster" not in output["knowledgeGraph"]["attributes"]
    assert output["knowledgeGraphByCluster"] == {"0": "quantum -> qubit"}


def test_transform_does_not_mutate_response(graph_payload):
    response = normalize_response(graph_payload)
    first = transform_knowledge_graph(response, include_graph=True).to_payload()
    second = transform_knowledge_graph(response, include_graph=True).to_payload()

    assert first == second
    assert "top_clusters" in response.graphology_graph["attributes"]


def test_envelope_and_bare_shapes_match(graph_payload):
    bare = normalize_response(copy.deepcopy(graph_payload))
    wrapped = normalize_response({"entriesAndGraphOfContext": copy.deepcopy(graph_payload)})

    assert transform_knowledge_graph(bare, True, True).to_payload() == \
        transform_knowledge_graph(wrapped, True, True).to_payload()
    assert transform_gaps(bare).to_payload() == transform_gaps(wrapped).to_payload()


def test_absent_extended_summary_fields_stay_absent():
    response = normalize_response({"extendedGraphSummary": {"mainTopics": ["a"]}})
    output = transform_knowledge_graph(response).to_payload()

    assert output["mainTopicalClusters"] == ["a"]
    assert "contentGaps" not in output
    assert "topBigrams" not in output


def test_created_graph_metadata_copied():
    response = normalize_response({
        "userName": "alice",
        "graphName": "notes",
        "graphUrl": "https://infranodus.com/alice/notes",
        "isPublic": False,
    })
    output = transform_knowledge_graph(response, include_graph=True).to_payload()

    assert output["userName"] == "alice"
    assert output["graphName"] == "notes"
    assert output["graphUrl"] == "https://infranodus.com/alice/notes"
    assert output["isPublic"] is False


def test_gaps_topics_and_overview(graph_payload):
    response = normalize_response({**graph_payload, "graphSummary": "A text about qubits."})

    assert transform_gaps(response).to_payload() == {"contentGaps": ["Physics <-> Error correction"]}
    assert transform_topics(response).to_payload() == {
        "topicalClusters": ["1. Physics: quantum qubit", "2. Errors: error"],
    }
    assert transform_text_overview(response).to_payload() == {"textOverview": "A text about qubits."}


def test_narrow_projections_empty_when_source_missing():
    response = normalize_response({})

    assert transform_gaps(response).to_payload() == {}
    assert transform_topics(response).to_payload() == {}
    assert transform_text_overview(response).to_payload() == {}
    assert transform_research_questions(response).to_payload() == {}
    assert transform_responses(response).to_payload() == {}
    assert transform_search(response, "q").to_payload() == {}


def test_advice_projections(advice_payload):
    response = normalize_response(advice_payload)

    assert transform_research_questions(response).to_payload() == {"questions": advice_payload["aiAdvice"]}
    assert transform_responses(response).to_payload() == {"responses": advice_payload["aiAdvice"]}


def test_search_results(search_payload):
    output = transform_search(normalize_response(search_payload), "quantum").to_payload()

    assert output == {
        "results": [
            {"id": "alice:mygraph:quantum", "title": "mygraph", "url": "https://infranodus.com/alice/mygraph"},
            {"id": "alice:physics:quantum", "title": "physics", "url": "https://infranodus.com/alice/physics"},
        ]
    }


def test_fetch_result(search_payload):
    output = transform_fetch(
        normalize_response(search_payload), "alice:mygraph:quantum computing", "mygraph"
    ).to_payload()

    assert output == {
        "id": "alice:mygraph:quantum computing",
        "title": "mygraph",
        "text": "Quantum computing uses qubits.\n\nQubits are fragile.",
        "url": "https://infranodus.com/alice/mygraph",
    }


def test_fetch_result_without_matches():
    output = transform_fetch(normalize_response({}), "alice:mygraph", "mygraph").to_payload()
    assert output == {"id": "alice:mygraph", "title": "mygraph"}
