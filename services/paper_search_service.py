# File: services/paper_search_service.py
import asyncio
import logging
from typing import List, Optional

import requests

from clients.arxiv_client import ARXIV_API_URL, search_arxiv
from services.models import Paper

logger = logging.getLogger(__name__)


class PaperSearchService:
    """
    Shared fetch-and-parse capability used by both the search and the
    report flows. The blocking HTTP call runs in a worker thread.
    """

    def __init__(
        self,
        api_url: str = ARXIV_API_URL,
        timeout: Optional[float] = 10,
        session: Optional[requests.Session] = None,
    ):
        self.api_url = api_url
        self.timeout = timeout
        self.session = session

    async def fetch_papers(self, query: str, max_results: int) -> List[Paper]:
        logger.info(f"📡 Searching arXiv for '{query}' (max {max_results})")
        papers = await asyncio.to_thread(
            search_arxiv,
            query,
            max_results,
            self.api_url,
            self.timeout,
            self.session,
        )
        logger.info(f"📚 arXiv returned {len(papers)} papers")
        return papers
