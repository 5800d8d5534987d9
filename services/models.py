# File: services/models.py
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Paper(BaseModel):
    """A single arXiv record. Absent fields are empty, never None."""
    model_config = ConfigDict(frozen=True)

    title: str = ""
    authors: List[str] = Field(default_factory=list)
    abstract: str = ""
    link: str = ""


class PaperAnalysis(BaseModel):
    model_config = ConfigDict(frozen=True)

    paper: Paper
    analysis: str


class Report(BaseModel):
    model_config = ConfigDict(frozen=True)

    query: str
    generated_at: datetime
    content: str
    source_papers: List[PaperAnalysis] = Field(default_factory=list)


class SearchResult(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    papers: List[Paper] = Field(default_factory=list)
    summaries: List[str] = Field(default_factory=list)
    consolidated_summary: str = Field(default="", alias="consolidatedSummary")

    @classmethod
    def empty(cls) -> "SearchResult":
        return cls(papers=[], summaries=[], consolidated_summary="")


class SuggestedElements(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    specificity: List[str] = Field(default_factory=list)
    research_type: List[str] = Field(default_factory=list, alias="researchType")
    practical_application: List[str] = Field(default_factory=list, alias="practicalApplication")


class QuestionVariation(BaseModel):
    question: str = ""
    explanation: str = ""


class PromptSuggestion(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    refined_query: str = Field(default="", alias="refinedQuery")
    suggested_elements: SuggestedElements = Field(default_factory=SuggestedElements, alias="suggestedElements")
    question_variations: List[QuestionVariation] = Field(default_factory=list, alias="questionVariations")
    related_concepts: List[str] = Field(default_factory=list, alias="relatedConcepts")
    research_tags: List[str] = Field(default_factory=list, alias="researchTags")


class AuthenticatedUser(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    email: Optional[str] = None
    claims: Dict[str, Any] = Field(default_factory=dict)
