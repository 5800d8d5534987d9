# File: services/suggestion_service.py
import json
import logging
from typing import Any, Dict, List

from clients.completion_client import CompletionClient
from services.errors import (
    InvalidCompletionResponse,
    SuggestionParseError,
    UpstreamCompletionError,
)
from services.models import PromptSuggestion, QuestionVariation, SuggestedElements
from services.prompts import GENERATION_PARAMS, render

logger = logging.getLogger(__name__)


def _string_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


def _question_variations(value: Any) -> List[QuestionVariation]:
    if not isinstance(value, list):
        return []
    variations = []
    for item in value:
        if not isinstance(item, dict):
            continue
        question = item.get("question")
        explanation = item.get("explanation")
        variations.append(QuestionVariation(
            question=question if isinstance(question, str) else "",
            explanation=explanation if isinstance(explanation, str) else "",
        ))
    return variations


def parse_suggestion(payload: Dict[str, Any]) -> PromptSuggestion:
    """
    Build a PromptSuggestion from the model's JSON. Each sub-field is checked on
    its own; a malformed one falls back to its empty default.
    """
    elements = payload.get("suggestedElements")
    if not isinstance(elements, dict):
        elements = {}

    refined = payload.get("refinedQuery")
    return PromptSuggestion(
        refined_query=refined if isinstance(refined, str) else "",
        suggested_elements=SuggestedElements(
            specificity=_string_list(elements.get("specificity")),
            research_type=_string_list(elements.get("researchType")),
            practical_application=_string_list(elements.get("practicalApplication")),
        ),
        question_variations=_question_variations(payload.get("questionVariations")),
        related_concepts=_string_list(payload.get("relatedConcepts")),
    )


def parse_tags(text: str) -> List[str]:
    return [tag.strip() for tag in (text or "").split(",") if tag.strip()]


class SuggestionService:
    def __init__(self, completion_client: CompletionClient):
        self.completion_client = completion_client

    async def suggest(self, initial_query: str) -> PromptSuggestion:
        temperature, max_tokens = GENERATION_PARAMS["prompt_suggestion"]
        prompt = render("prompt_suggestion", initial_query=initial_query)

        try:
            content = await self.completion_client.complete(
                prompt, temperature=temperature, max_tokens=max_tokens
            )
        except UpstreamCompletionError as e:
            raise UpstreamCompletionError(
                "Failed to generate prompt suggestion",
                upstream_status=e.upstream_status,
                body=e.body,
            ) from e
        except InvalidCompletionResponse as e:
            raise InvalidCompletionResponse("Invalid suggestion response") from e

        try:
            payload = json.loads(content or "{}")
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse suggestion JSON: {e}. Content: {content}")
            raise SuggestionParseError(f"Failed to parse prompt suggestion: {e}") from e

        if not isinstance(payload, dict):
            raise SuggestionParseError("Failed to parse prompt suggestion: expected a JSON object")

        suggestion = parse_suggestion(payload)
        tags = await self.research_tags(initial_query)
        return suggestion.model_copy(update={"research_tags": tags})

    async def research_tags(self, query: str) -> List[str]:
        """Auxiliary tag call. Any failure degrades to an empty list."""
        temperature, max_tokens = GENERATION_PARAMS["research_tags"]
        try:
            content = await self.completion_client.complete(
                render("research_tags", query=query),
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except Exception as e:
            logger.warning(f"Tag generation error: {e}")
            return []
        return parse_tags(content)
