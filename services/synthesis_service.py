# File: services/synthesis_service.py
import logging
from datetime import datetime
from typing import Optional, Sequence

from clients.completion_client import CompletionClient
from services.errors import (
    InvalidCompletionResponse,
    ResearchDigestError,
    SynthesisError,
    UpstreamCompletionError,
)
from services.models import Paper, PaperAnalysis
from services.prompts import GENERATION_PARAMS, render

logger = logging.getLogger(__name__)

OVERVIEW_FALLBACK = "Overview not available"


def format_report_date(moment: datetime) -> str:
    return f"{moment.month}/{moment.day}/{moment.year}"


def build_overview_prompt(papers: Sequence[Paper]) -> str:
    joined = "\n\n".join(f"{paper.title}\n{paper.abstract}" for paper in papers)
    return render("consolidated_overview", papers=joined)


def build_report_prompt(query: str, analyses: Sequence[PaperAnalysis], generated_at: datetime) -> str:
    dataset = "\n".join(
        render(
            "report_dataset_entry",
            title=item.paper.title,
            authors=", ".join(item.paper.authors),
            abstract=item.paper.abstract,
            analysis=item.analysis,
        )
        for item in analyses
    )
    return render(
        "structured_report",
        query=query,
        generated_on=format_report_date(generated_at),
        dataset=dataset,
    )


class SynthesisService:
    """
    Cross-paper synthesis. Both operations are single-shot and fatal on
    failure: any upstream problem becomes a SynthesisError for the caller.
    """

    def __init__(self, completion_client: CompletionClient):
        self.completion_client = completion_client

    async def consolidated_overview(self, papers: Sequence[Paper]) -> str:
        temperature, max_tokens = GENERATION_PARAMS["consolidated_overview"]
        prompt = build_overview_prompt(papers)

        try:
            text = await self.completion_client.complete(
                prompt, temperature=temperature, max_tokens=max_tokens
            )
        except UpstreamCompletionError as e:
            raise SynthesisError("Failed to generate consolidated summary") from e
        except InvalidCompletionResponse as e:
            raise SynthesisError("Invalid consolidated summary response") from e

        return text or OVERVIEW_FALLBACK

    async def structured_report(
        self,
        query: str,
        analyses: Sequence[PaperAnalysis],
        generated_at: Optional[datetime] = None,
    ) -> str:
        temperature, max_tokens = GENERATION_PARAMS["structured_report"]
        prompt = build_report_prompt(query, analyses, generated_at or datetime.now())

        try:
            text = await self.completion_client.complete(
                prompt, temperature=temperature, max_tokens=max_tokens
            )
        except ResearchDigestError as e:
            logger.error(f"Report generation error: {e}")
            raise SynthesisError("Failed to generate report content") from e

        if not text:
            logger.error("No report content generated")
            raise SynthesisError("Failed to generate report content")

        return text
