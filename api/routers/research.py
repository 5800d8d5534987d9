# api/routers/research.py
from typing import Optional

from fastapi import APIRouter, Depends

from api.dependencies.auth import get_current_user
from api.dependencies.services import get_research_service
from api.models.research_models import AbstractRequest, QueryRequest, SuggestPromptRequest
from services.models import AuthenticatedUser
from services.research_service import ResearchService

router = APIRouter()


@router.post("/search-papers")
async def search_papers_endpoint(
    payload: Optional[QueryRequest] = None,
    current_user: AuthenticatedUser = Depends(get_current_user),
    research: ResearchService = Depends(get_research_service),
) -> dict:
    payload = payload or QueryRequest()
    result = await research.search_papers(payload.query)
    return result.model_dump(by_alias=True)


@router.post("/analyze-paper")
async def analyze_paper_endpoint(
    payload: Optional[AbstractRequest] = None,
    current_user: AuthenticatedUser = Depends(get_current_user),
    research: ResearchService = Depends(get_research_service),
) -> dict:
    payload = payload or AbstractRequest()
    return await research.analyze_paper(payload.abstract)


@router.post("/suggest-prompt")
async def suggest_prompt_endpoint(
    payload: Optional[SuggestPromptRequest] = None,
    current_user: AuthenticatedUser = Depends(get_current_user),
    research: ResearchService = Depends(get_research_service),
) -> dict:
    payload = payload or SuggestPromptRequest()
    suggestion = await research.suggest_prompt(payload.initial_query)
    return suggestion.model_dump(by_alias=True)
