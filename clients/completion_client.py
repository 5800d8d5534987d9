# File: clients/completion_client.py
import logging
from typing import Any, Dict, Optional

import httpx
from openai import APIError, APIStatusError, AsyncOpenAI

from services.errors import InvalidCompletionResponse, UpstreamCompletionError

logger = logging.getLogger(__name__)

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_MODEL = "qwen/qwen2.5-vl-72b-instruct:free"


class CompletionClient:
    """
    Thin wrapper over an OpenAI-compatible chat-completions endpoint.

    One attempt per call (``max_retries=0``). Failures surface as:
        UpstreamCompletionError: non-success status or transport failure.
        InvalidCompletionResponse: success status but an undecodable body or
            no list of choices in it.

    A missing message body on the first choice is returned as ``""``; callers
    pick their own fallback text.
    """

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        base_url: str = OPENROUTER_BASE_URL,
        referer: str = "http://localhost:5173",
        org_id: Optional[str] = None,
        timeout: float = 60.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        if not api_key:
            raise ValueError("OPENROUTER_API_KEY not set")

        headers = {"HTTP-Referer": referer}
        if org_id:
            headers["OpenAI-Organization"] = org_id

        self.model = model
        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            default_headers=headers,
            timeout=timeout,
            max_retries=0,
            http_client=http_client,
        )
        logger.info(f"Initialized completion client for model {model} at {base_url}")

    async def complete(
        self,
        prompt: str,
        *,
        temperature: float,
        max_tokens: int,
        extra_body: Optional[Dict[str, Any]] = None,
    ) -> str:
        try:
            response = await self._client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=temperature,
                max_tokens=max_tokens,
                extra_body=extra_body,
            )
        except APIStatusError as e:
            body = e.response.text if e.response is not None else ""
            logger.error(f"Completion API error: {e.status_code} {body}")
            raise UpstreamCompletionError(
                f"Completion API error: {e.status_code}",
                upstream_status=e.status_code,
                body=body,
            ) from e
        except APIError as e:
            logger.error(f"Completion API request failed: {e}")
            raise UpstreamCompletionError(f"Completion API request failed: {e}") from e
        except ValueError as e:
            # success status with a body that does not decode
            logger.error(f"Undecodable completion response: {e}")
            raise InvalidCompletionResponse("Completion response was not valid JSON") from e

        choices = getattr(response, "choices", None)
        if not isinstance(choices, list) or not choices:
            logger.error(f"Invalid completion response: {response!r}")
            raise InvalidCompletionResponse("Completion response contained no choices")

        message = getattr(choices[0], "message", None)
        return getattr(message, "content", None) or ""

    async def close(self) -> None:
        await self._client.close()
