# File: services/research_service.py

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from clients.completion_client import CompletionClient
from services.enrichment_service import EnrichmentService
from services.errors import (
    InvalidCompletionResponse,
    PersistenceError,
    UpstreamCompletionError,
    UpstreamSearchError,
    ValidationError,
)
from services.models import AuthenticatedUser, PromptSuggestion, Report, SearchResult
from services.paper_search_service import PaperSearchService
from services.persistence_service import ReportStore
from services.prompts import GENERATION_PARAMS, render
from services.suggestion_service import SuggestionService
from services.synthesis_service import SynthesisService

logger = logging.getLogger(__name__)

SAVE_SEARCH_MESSAGE = "Search saved successfully"


def _require(value: Optional[str], message: str) -> str:
    if not value or not value.strip():
        raise ValidationError(message)
    return value


def _require_user(user: Optional[AuthenticatedUser]) -> AuthenticatedUser:
    if user is None or not user.id:
        raise PersistenceError("No authenticated user found")
    return user


class ResearchService:
    """
    Request orchestrators. Each method runs one request end to end and either
    returns the full success payload or raises a ResearchDigestError.
    """

    def __init__(
        self,
        paper_search: PaperSearchService,
        completion_client: CompletionClient,
        report_store: ReportStore,
        search_max_results: int = 6,
        report_max_results: int = 5,
    ):
        self.paper_search = paper_search
        self.completion_client = completion_client
        self.report_store = report_store
        self.enrichment = EnrichmentService(completion_client)
        self.synthesis = SynthesisService(completion_client)
        self.suggestions = SuggestionService(completion_client)
        self.search_max_results = search_max_results
        self.report_max_results = report_max_results

    # ------------------------------------------------------------
    # SEARCH: search -> summaries (parallel) -> consolidated overview
    # ------------------------------------------------------------
    async def search_papers(self, query: Optional[str]) -> SearchResult:
        query = _require(query, "Query is required")

        papers = await self.paper_search.fetch_papers(query, self.search_max_results)
        if not papers:
            logger.info(f"No papers found for '{query}'")
            return SearchResult.empty()

        summaries = await self.enrichment.summarize_all(papers)
        consolidated = await self.synthesis.consolidated_overview(papers)

        return SearchResult(
            papers=papers,
            summaries=summaries,
            consolidated_summary=consolidated,
        )

    # ------------------------------------------------------------
    # REPORT: search -> analyses (parallel) -> report -> persist
    # ------------------------------------------------------------
    async def generate_report(
        self,
        query: Optional[str],
        user: Optional[AuthenticatedUser],
        generated_at: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        query = _require(query, "Query is required")

        try:
            papers = await self.paper_search.fetch_papers(query, self.report_max_results)
        except UpstreamSearchError as e:
            logger.error(f"ArXiv fetch error: {e}")
            raise UpstreamSearchError(
                "Failed to fetch papers from arXiv",
                upstream_status=e.upstream_status,
            ) from e

        analyses = await self.enrichment.analyze_all(papers)

        generated_at = generated_at or datetime.now()
        content = await self.synthesis.structured_report(query, analyses, generated_at)
        report = Report(
            query=query,
            generated_at=generated_at,
            content=content,
            source_papers=analyses,
        )

        user = _require_user(user)
        serialized = [item.model_dump() for item in report.source_papers]
        saved = await self.report_store.insert(
            user_id=user.id,
            title=report.query,
            content=report.content,
            papers=serialized,
            record_type="report",
        )

        return {
            "report": report.content,
            "papers": serialized,
            "savedReport": saved,
        }

    # ------------------------------------------------------------
    # SINGLE ABSTRACT SUMMARY
    # ------------------------------------------------------------
    async def analyze_paper(self, abstract: Optional[str]) -> Dict[str, str]:
        abstract = _require(abstract, "Abstract is required")
        temperature, max_tokens = GENERATION_PARAMS["abstract_summary"]

        try:
            summary = await self.completion_client.complete(
                render("abstract_summary", abstract=abstract),
                temperature=temperature,
                max_tokens=max_tokens,
                extra_body={"min_new_tokens": 1},
            )
        except UpstreamCompletionError as e:
            detail = f"{e.upstream_status} - {e.body}" if e.upstream_status is not None else e.message
            raise UpstreamCompletionError(
                f"Failed to generate AI summary: {detail}",
                upstream_status=e.upstream_status,
                body=e.body,
            ) from e
        except InvalidCompletionResponse as e:
            raise InvalidCompletionResponse(
                "Invalid analysis response: No valid choices in response"
            ) from e

        if not summary:
            raise InvalidCompletionResponse("No summary content generated")

        return {"summary": summary}

    async def suggest_prompt(self, initial_query: Optional[str]) -> PromptSuggestion:
        return await self.suggestions.suggest(initial_query or "")

    # ------------------------------------------------------------
    # SAVE SEARCH
    # ------------------------------------------------------------
    async def save_search(
        self,
        query: Optional[str],
        papers: Optional[List[Any]],
        consolidated_summary: Optional[str],
        user: Optional[AuthenticatedUser],
    ) -> Dict[str, Any]:
        user = _require_user(user)

        saved = await self.report_store.insert(
            user_id=user.id,
            title=query,
            content=consolidated_summary,
            papers=papers or [],
            record_type="search",
            created_at=datetime.now(timezone.utc),
        )

        return {"savedSearch": saved, "message": SAVE_SEARCH_MESSAGE}
