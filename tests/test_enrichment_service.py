import asyncio

import pytest

from services.enrichment_service import (
    ANALYSIS_PLACEHOLDERS,
    SUMMARY_PLACEHOLDERS,
    EnrichmentService,
)
from services.errors import InvalidCompletionResponse, UpstreamCompletionError
from services.models import Paper
from tests.fakes import FakeCompletionClient


def _papers(count):
    return [
        Paper(title=f"Paper {i}", authors=[f"Author {i}"], abstract=f"Abstract {i}", link=f"id-{i}")
        for i in range(count)
    ]


def _index_of(prompt):
    # "Title: Paper 3" -> 3
    line = next(l for l in prompt.splitlines() if l.startswith("Title: "))
    return int(line.rsplit(" ", 1)[1])


@pytest.mark.asyncio
async def test_summaries_keep_input_order_when_completions_finish_out_of_order():
    papers = _papers(5)

    async def handler(prompt, **params):
        index = _index_of(prompt)
        # Later papers finish first
        await asyncio.sleep(0.01 * (5 - index))
        return f"summary {index}"

    service = EnrichmentService(FakeCompletionClient(handler))
    summaries = await service.summarize_all(papers)

    assert summaries == [f"summary {i}" for i in range(5)]


@pytest.mark.asyncio
async def test_calls_are_issued_concurrently():
    papers = _papers(4)
    in_flight = 0
    peak = 0

    async def handler(prompt, **params):
        nonlocal in_flight, peak
        in_flight += 1
        peak = max(peak, in_flight)
        await asyncio.sleep(0.01)
        in_flight -= 1
        return "ok"

    await EnrichmentService(FakeCompletionClient(handler)).summarize_all(papers)

    assert peak == 4


@pytest.mark.asyncio
async def test_failed_summaries_become_placeholders_without_breaking_the_batch():
    papers = _papers(5)

    def handler(prompt, **params):
        index = _index_of(prompt)
        if index == 1:
            raise UpstreamCompletionError("boom", upstream_status=500)
        if index == 2:
            raise InvalidCompletionResponse("no choices")
        if index == 3:
            return ""
        if index == 4:
            raise RuntimeError("socket closed")
        return "fine"

    summaries = await EnrichmentService(FakeCompletionClient(handler)).summarize_all(papers)

    assert summaries == [
        "fine",
        SUMMARY_PLACEHOLDERS.api_error,
        SUMMARY_PLACEHOLDERS.invalid_response,
        SUMMARY_PLACEHOLDERS.empty,
        SUMMARY_PLACEHOLDERS.failed,
    ]


@pytest.mark.asyncio
async def test_summary_prompt_truncates_abstract_and_uses_summary_params():
    paper = Paper(title="Long", abstract="x" * 1500 + "TAIL")
    client = FakeCompletionClient()

    await EnrichmentService(client).summarize_all([paper])

    (call,) = client.calls
    assert "x" * 1000 in call["prompt"]
    assert "x" * 1001 not in call["prompt"]
    assert "TAIL" not in call["prompt"]
    assert "max 50 words" in call["prompt"]
    assert call["temperature"] == 0.2
    assert call["max_tokens"] == 100


@pytest.mark.asyncio
async def test_analyses_pair_each_paper_with_its_result():
    papers = _papers(3)

    def handler(prompt, **params):
        index = _index_of(prompt)
        if index == 0:
            raise RuntimeError("connection reset")
        return f"analysis {index}"

    client = FakeCompletionClient(handler)
    analyses = await EnrichmentService(client).analyze_all(papers)

    assert [a.paper for a in analyses] == papers
    assert [a.analysis for a in analyses] == [
        ANALYSIS_PLACEHOLDERS.failed,
        "analysis 1",
        "analysis 2",
    ]
    assert ANALYSIS_PLACEHOLDERS.failed == "Analysis failed due to server error"
    assert all(c["temperature"] == 0.3 and c["max_tokens"] == 500 for c in client.calls)
    assert "Research question" in client.calls[0]["prompt"]


@pytest.mark.asyncio
async def test_empty_batch_makes_no_calls():
    client = FakeCompletionClient()
    service = EnrichmentService(client)

    assert await service.summarize_all([]) == []
    assert await service.analyze_all([]) == []
    assert client.calls == []
