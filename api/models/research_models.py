# File: api/models/research_models.py
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class QueryRequest(BaseModel):
    query: Optional[str] = None


class AbstractRequest(BaseModel):
    abstract: Optional[str] = None


class SuggestPromptRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    initial_query: Optional[str] = Field(default=None, alias="initialQuery")


class SaveSearchRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    query: Optional[str] = None
    papers: Optional[List[Any]] = None
    consolidated_summary: Optional[str] = Field(default=None, alias="consolidatedSummary")
