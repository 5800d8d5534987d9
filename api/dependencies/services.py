# File: api/dependencies/services.py
import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.engine import Engine

from api.config import Settings
from clients.completion_client import CompletionClient
from database.db import create_db_engine, create_session_factory, init_db
from services.identity_service import IdentityService
from services.paper_search_service import PaperSearchService
from services.persistence_service import ReportStore
from services.research_service import ResearchService

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """Long-lived collaborators, built once at startup and shared by requests."""
    research: ResearchService
    identity: IdentityService
    completion_client: Optional[CompletionClient] = None
    engine: Optional[Engine] = None

    async def aclose(self):
        if self.completion_client is not None:
            await self.completion_client.close()
        if self.engine is not None:
            self.engine.dispose()


def build_container(settings: Settings) -> ServiceContainer:
    engine = create_db_engine(settings.database_url)
    init_db(engine)

    completion_client = CompletionClient(
        api_key=settings.openrouter_api_key,
        model=settings.openrouter_model,
        base_url=settings.openrouter_base_url,
        referer=settings.cors_origin,
        org_id=settings.openrouter_org_id,
        timeout=settings.llm_timeout_seconds,
    )
    research = ResearchService(
        paper_search=PaperSearchService(
            api_url=settings.arxiv_api_url,
            timeout=settings.arxiv_timeout_seconds,
        ),
        completion_client=completion_client,
        report_store=ReportStore(create_session_factory(engine)),
        search_max_results=settings.search_max_results,
        report_max_results=settings.report_max_results,
    )
    identity = IdentityService(
        supabase_url=settings.supabase_url,
        service_role_key=settings.supabase_service_role_key,
        jwt_secret=settings.supabase_jwt_secret,
        expected_aud=settings.expected_aud,
    )
    return ServiceContainer(
        research=research,
        identity=identity,
        completion_client=completion_client,
        engine=engine,
    )


def get_services(request: Request) -> ServiceContainer:
    return request.app.state.services


def get_research_service(services: ServiceContainer = Depends(get_services)) -> ResearchService:
    return services.research
