# clients/arxiv_client.py
import logging
from typing import List, Optional

import requests
from requests.exceptions import RequestException
from defusedxml import ElementTree as ET
from defusedxml.common import DefusedXmlException

from services.errors import UpstreamSearchError
from services.models import Paper

logger = logging.getLogger(__name__)

ARXIV_API_URL = "https://export.arxiv.org/api/query"
ATOM_NS = "{http://www.w3.org/2005/Atom}"


def _text(elem) -> str:
    if elem is None:
        return ""
    return "".join(elem.itertext())


def _author_name(author) -> str:
    name = author.find(f"{ATOM_NS}name")
    if name is not None and name.text:
        return name.text.strip()
    return _text(author).strip()


def parse_arxiv_feed(xml_text: str) -> List[Paper]:
    """
    Parse an Atom feed into Papers, one per <entry>, in feed order.
    Missing sub-elements become empty strings/lists.
    """
    try:
        root = ET.fromstring(xml_text)
    except (ET.ParseError, DefusedXmlException) as e:
        logger.error(f"Failed to parse arXiv API response: {e}")
        raise UpstreamSearchError("Failed to parse arXiv response") from e

    papers = []
    for entry in root.iter(f"{ATOM_NS}entry"):
        title = " ".join(_text(entry.find(f"{ATOM_NS}title")).split())
        abstract = _text(entry.find(f"{ATOM_NS}summary")).strip()
        link = _text(entry.find(f"{ATOM_NS}id")).strip()
        authors = [_author_name(a) for a in entry.findall(f"{ATOM_NS}author")]

        papers.append(Paper(title=title, authors=authors, abstract=abstract, link=link))

    return papers


def search_arxiv(
    query: str,
    max_results: int = 5,
    api_url: str = ARXIV_API_URL,
    timeout: Optional[float] = 10,
    session: Optional[requests.Session] = None,
) -> List[Paper]:
    params = {
        "search_query": f"all:{query}",
        "start": 0,
        "max_results": max_results
    }
    http = session or requests

    try:
        response = http.get(api_url, params=params, timeout=timeout)
    except RequestException as e:
        logger.error(f"arXiv API request failed: {e}")
        raise UpstreamSearchError(f"ArXiv API error: {e}") from e

    if not response.ok:
        logger.error(f"arXiv API returned {response.status_code}: {response.reason}")
        raise UpstreamSearchError(
            f"ArXiv API error: {response.reason}",
            upstream_status=response.status_code,
        )

    return parse_arxiv_feed(response.text)
