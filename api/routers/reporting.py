# File: api/routers/reporting.py
from typing import Optional

from fastapi import APIRouter, Depends

from api.dependencies.auth import get_current_user
from api.dependencies.services import get_research_service
from api.models.research_models import QueryRequest, SaveSearchRequest
from services.models import AuthenticatedUser
from services.research_service import ResearchService

router = APIRouter()


@router.post("/generate-report")
async def generate_report_endpoint(
    payload: Optional[QueryRequest] = None,
    current_user: AuthenticatedUser = Depends(get_current_user),
    research: ResearchService = Depends(get_research_service),
) -> dict:
    payload = payload or QueryRequest()
    return await research.generate_report(payload.query, current_user)


@router.post("/save-search")
async def save_search_endpoint(
    payload: Optional[SaveSearchRequest] = None,
    current_user: AuthenticatedUser = Depends(get_current_user),
    research: ResearchService = Depends(get_research_service),
) -> dict:
    payload = payload or SaveSearchRequest()
    return await research.save_search(
        payload.query,
        payload.papers,
        payload.consolidated_summary,
        current_user,
    )
