# File: services/enrichment_service.py
import asyncio
import logging
from dataclasses import dataclass
from typing import List, NamedTuple, Optional, Sequence

from clients.completion_client import CompletionClient
from services.errors import InvalidCompletionResponse, UpstreamCompletionError
from services.models import Paper, PaperAnalysis
from services.prompts import GENERATION_PARAMS, SUMMARY_ABSTRACT_CHARS, render

logger = logging.getLogger(__name__)


class Placeholders(NamedTuple):
    api_error: str
    invalid_response: str
    empty: str
    failed: str


SUMMARY_PLACEHOLDERS = Placeholders(
    api_error="Summary failed due to API error",
    invalid_response="Summary failed: No valid response",
    empty="Summary not available",
    failed="Summary generation failed",
)

ANALYSIS_PLACEHOLDERS = Placeholders(
    api_error="Analysis failed due to API error",
    invalid_response="Analysis failed: No valid response from AI",
    empty="Analysis failed",
    failed="Analysis failed due to server error",
)


@dataclass(frozen=True)
class EnrichmentOutcome:
    """Result of one per-paper call: generated text, or the error that replaced it."""
    text: Optional[str] = None
    error: Optional[Exception] = None

    def resolve(self, placeholders: Placeholders) -> str:
        if self.error is None:
            return self.text or placeholders.empty
        if isinstance(self.error, UpstreamCompletionError) and self.error.upstream_status is not None:
            return placeholders.api_error
        if isinstance(self.error, InvalidCompletionResponse):
            return placeholders.invalid_response
        return placeholders.failed


class EnrichmentService:
    """
    Per-paper enrichment. Every paper in a batch is sent concurrently and the
    batch settles only when all calls have; a failed call only affects its own
    slot. Output is always the same length and order as the input.
    """

    def __init__(self, completion_client: CompletionClient):
        self.completion_client = completion_client

    async def _run_batch(self, prompt_name: str, prompts: Sequence[str]) -> List[EnrichmentOutcome]:
        temperature, max_tokens = GENERATION_PARAMS[prompt_name]
        outcomes: List[Optional[EnrichmentOutcome]] = [None] * len(prompts)

        calls = [
            self.completion_client.complete(prompt, temperature=temperature, max_tokens=max_tokens)
            for prompt in prompts
        ]
        results = await asyncio.gather(*calls, return_exceptions=True)

        for index, result in enumerate(results):
            if isinstance(result, Exception):
                logger.warning(f"{prompt_name} failed for item {index}: {result}")
                outcomes[index] = EnrichmentOutcome(error=result)
            elif isinstance(result, BaseException):
                raise result
            else:
                outcomes[index] = EnrichmentOutcome(text=result)

        return outcomes

    async def summarize_all(self, papers: Sequence[Paper]) -> List[str]:
        prompts = [
            render(
                "paper_summary",
                title=paper.title,
                abstract=paper.abstract[:SUMMARY_ABSTRACT_CHARS],
            )
            for paper in papers
        ]
        logger.info(f"📝 Summarizing {len(prompts)} papers in parallel")
        outcomes = await self._run_batch("paper_summary", prompts)
        return [outcome.resolve(SUMMARY_PLACEHOLDERS) for outcome in outcomes]

    async def analyze_all(self, papers: Sequence[Paper]) -> List[PaperAnalysis]:
        prompts = [
            render("paper_analysis", title=paper.title, abstract=paper.abstract)
            for paper in papers
        ]
        logger.info(f"🔬 Analyzing {len(prompts)} papers in parallel")
        outcomes = await self._run_batch("paper_analysis", prompts)
        return [
            PaperAnalysis(paper=paper, analysis=outcome.resolve(ANALYSIS_PLACEHOLDERS))
            for paper, outcome in zip(papers, outcomes)
        ]
