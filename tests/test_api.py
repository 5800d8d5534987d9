import json

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from api.config import Settings
from api.dependencies.services import ServiceContainer
from api.main import create_app
from services.errors import UpstreamCompletionError
from services.identity_service import ALGORITHM, IdentityService
from services.prompts import REPORT_TEMPLATE_VERSION
from services.research_service import ResearchService
from tests.fakes import FakeCompletionClient, FakePaperSearch

SECRET = "api-test-secret"
AUTH = {"Authorization": "Bearer " + jwt.encode({"sub": "user-1"}, SECRET, algorithm=ALGORITHM)}

SUGGESTION = {
    "refinedQuery": "refined",
    "suggestedElements": {"specificity": ["a"], "researchType": ["b"], "practicalApplication": ["c"]},
    "questionVariations": [{"question": "q?", "explanation": "e"}],
    "relatedConcepts": ["concept"],
}


def handler(prompt, **params):
    if prompt.startswith("Provide a very brief"):
        return "- bullet"
    if prompt.startswith("Synthesize"):
        return "overview"
    if prompt.startswith("Analyze this research paper"):
        return "analysis"
    if prompt.startswith("Generate a comprehensive"):
        return "## Report body"
    if prompt.startswith("Summarize this research paper abstract"):
        return "Tiny summary."
    if prompt.startswith("As a research assistant"):
        return json.dumps(SUGGESTION)
    if prompt.startswith("Generate 3-4"):
        raise UpstreamCompletionError("tags down", upstream_status=500)
    raise AssertionError(f"unexpected prompt: {prompt[:40]}")


@pytest.fixture
def harness(sample_papers, report_store):
    search = FakePaperSearch(sample_papers)
    completion = FakeCompletionClient(handler)
    container = ServiceContainer(
        research=ResearchService(
            paper_search=search,
            completion_client=completion,
            report_store=report_store,
        ),
        identity=IdentityService(jwt_secret=SECRET),
    )
    app = create_app(settings=Settings(), services=container)
    return TestClient(app), search, completion


def test_health_is_public(harness):
    client, _, _ = harness

    r = client.get("/health")

    assert r.status_code == 200
    assert r.json() == {"status": "ok", "reportTemplateVersion": REPORT_TEMPLATE_VERSION}


@pytest.mark.parametrize("path", [
    "/api/search-papers",
    "/api/generate-report",
    "/api/analyze-paper",
    "/api/suggest-prompt",
    "/api/save-search",
])
def test_protected_routes_require_bearer_token(harness, path):
    client, search, completion = harness

    r = client.post(path, json={"query": "x"})

    assert r.status_code == 401
    assert r.json() == {"error": "No token provided"}
    assert search.calls == [] and completion.calls == []


def test_invalid_token_is_rejected_before_business_logic(harness):
    client, search, completion = harness

    r = client.post("/api/search-papers", json={"query": "x"}, headers={"Authorization": "Bearer nope"})

    assert r.status_code == 401
    assert r.json() == {"error": "Invalid token"}
    assert search.calls == [] and completion.calls == []


@pytest.mark.parametrize("path", ["/api/search-papers", "/api/generate-report"])
def test_missing_query_is_400(harness, path):
    client, search, completion = harness

    r = client.post(path, json={}, headers=AUTH)

    assert r.status_code == 400
    assert r.json() == {"error": "Query is required"}
    assert search.calls == [] and completion.calls == []


@pytest.mark.parametrize("path, error", [
    ("/api/search-papers", "Query is required"),
    ("/api/generate-report", "Query is required"),
    ("/api/analyze-paper", "Abstract is required"),
])
def test_request_without_body_reports_missing_field(harness, path, error):
    client, search, completion = harness

    r = client.post(path, headers=AUTH)

    assert r.status_code == 400
    assert r.json() == {"error": error}
    assert search.calls == [] and completion.calls == []


def test_search_papers_round_trip(harness, sample_papers):
    client, _, _ = harness

    r = client.post("/api/search-papers", json={"query": "graph learning"}, headers=AUTH)

    assert r.status_code == 200
    body = r.json()
    assert set(body) == {"papers", "summaries", "consolidatedSummary"}
    assert [p["title"] for p in body["papers"]] == [p.title for p in sample_papers]
    assert body["summaries"] == ["- bullet", "- bullet"]
    assert body["consolidatedSummary"] == "overview"


def test_generate_report_returns_saved_record(harness):
    client, _, _ = harness

    r = client.post("/api/generate-report", json={"query": "graph learning"}, headers=AUTH)

    assert r.status_code == 200
    body = r.json()
    assert set(body) == {"report", "papers", "savedReport"}
    assert body["savedReport"]["content"] == body["report"] == "## Report body"
    assert body["savedReport"]["user_id"] == "user-1"
    assert len(body["papers"]) == 2


def test_analyze_paper(harness):
    client, _, _ = harness

    r = client.post("/api/analyze-paper", json={"abstract": "We did things."}, headers=AUTH)

    assert r.status_code == 200
    assert r.json() == {"summary": "Tiny summary."}


def test_analyze_paper_missing_abstract(harness):
    client, _, completion = harness

    r = client.post("/api/analyze-paper", json={}, headers=AUTH)

    assert r.status_code == 400
    assert r.json() == {"error": "Abstract is required"}
    assert completion.calls == []


def test_analyze_paper_missing_choices_is_500(harness):
    client, _, completion = harness
    from services.errors import InvalidCompletionResponse

    def no_choices(prompt, **params):
        raise InvalidCompletionResponse("Completion response contained no choices")

    completion.handler = no_choices
    r = client.post("/api/analyze-paper", json={"abstract": "text"}, headers=AUTH)

    assert r.status_code == 500
    assert r.json() == {"error": "Invalid analysis response: No valid choices in response"}


def test_suggest_prompt_with_failed_tags(harness):
    client, _, _ = harness

    r = client.post("/api/suggest-prompt", json={"initialQuery": "sleep"}, headers=AUTH)

    assert r.status_code == 200
    body = r.json()
    assert body["researchTags"] == []
    assert body["refinedQuery"] == "refined"
    assert body["suggestedElements"] == {"specificity": ["a"], "researchType": ["b"], "practicalApplication": ["c"]}
    assert body["questionVariations"] == [{"question": "q?", "explanation": "e"}]


def test_suggest_prompt_malformed_json_is_500(harness):
    client, _, completion = harness
    completion.handler = lambda prompt, **params: "not json"

    r = client.post("/api/suggest-prompt", json={"initialQuery": "sleep"}, headers=AUTH)

    assert r.status_code == 500
    assert "error" in r.json()


def test_save_search(harness):
    client, _, _ = harness
    payload = {
        "query": "graph learning",
        "papers": [{"title": "A", "authors": ["B"], "abstract": "C", "link": "D"}],
        "consolidatedSummary": "overview",
    }

    r = client.post("/api/save-search", json=payload, headers=AUTH)

    assert r.status_code == 200
    body = r.json()
    assert body["message"] == "Search saved successfully"
    assert body["savedSearch"]["type"] == "search"
    assert body["savedSearch"]["papers"] == payload["papers"]
    assert body["savedSearch"]["content"] == "overview"


def test_malformed_body_is_400(harness):
    client, _, _ = harness

    r = client.post(
        "/api/search-papers",
        content="{not json",
        headers={**AUTH, "Content-Type": "application/json"},
    )

    assert r.status_code == 400
    assert r.json() == {"error": "Invalid request payload"}


def test_save_search_accepts_null_papers(harness):
    client, _, _ = harness

    r = client.post(
        "/api/save-search",
        json={"query": "graph learning", "papers": None, "consolidatedSummary": "overview"},
        headers=AUTH,
    )

    assert r.status_code == 200
    assert r.json()["savedSearch"]["papers"] == []
