"""Client for the hosted text-completion service.

Used for spell correction, list matching and priority inference on task
titles. The service is a black box: a title and candidate lists go in, a
small JSON object comes out.
"""

from __future__ import annotations

import asyncio
import json
import os
import re
from typing import Any

import httpx

from flowtask.models.config_models import AIConfig
from flowtask.models.item import ListRef, ProcessedText
from flowtask.utils.logger import get_logger
from flowtask.utils.text import detect_urls

PRIORITIES = ("now", "high", "low")

SYSTEM_PROMPT = """You are a helpful assistant that processes task titles. You must:
1. Fix spelling mistakes
2. Capitalize ONLY the first letter and proper nouns (names, places)
3. Do NOT capitalize common words like: with, to, from, at, in, on, for, and, the, a, an
4. NEVER change URLs, domains, or email addresses - keep them exactly as typed
5. Match the task to the most appropriate list based on content and keywords
6. Determine priority based on urgency indicators:
   - "now" for: urgent, ASAP, immediately, today, critical, emergency, important, !!!, ***
   - "high" for: soon, tomorrow, this week, priority, deadline, !, **, HIGH
   - "low" for: everything else (default)

Return ONLY a JSON object in this exact format:
{"correctedText": "corrected task text", "listId": "matching-list-id", "priority": "now|high|low"}

NEVER add punctuation. Return ONLY the JSON object, nothing else."""

_FENCE = re.compile(r"```(?:json)?\s*")


class AIServiceError(Exception):
    """The completion service failed or answered with something unusable."""


def build_user_prompt(title: str, lists: list[ListRef]) -> str:
    """Render the user message for one task title."""
    if lists:
        options = "\n".join(f"- {lst.name} (id: {lst.id})" for lst in lists)
        return (
            f'Task: "{title}"\n\nAvailable lists:\n{options}\n\n'
            "Process this task and return the JSON."
        )
    return (
        f'Task: "{title}"\n\nNo lists available. '
        "Process the task and return JSON with correctedText and priority only."
    )


def parse_completion(content: str, title: str, lists: list[ListRef]) -> ProcessedText:
    """Turn the raw completion text into a :class:`ProcessedText`.

    Markdown code fences are stripped. An unknown list id is dropped and an
    unknown priority becomes "low".

    Raises:
        AIServiceError: If the content is not a JSON object
    """
    cleaned = _FENCE.sub("", content or "").strip() or "{}"
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise AIServiceError(f"Completion is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise AIServiceError("Completion is not a JSON object")

    corrected = str(data.get("correctedText") or title).strip()
    list_id = data.get("listId")
    if list_id not in {lst.id for lst in lists}:
        list_id = None
    priority = data.get("priority")
    if priority not in PRIORITIES:
        priority = "low"

    return ProcessedText(
        corrected_text=corrected,
        list_id=list_id,
        priority=priority,
        has_links=bool(detect_urls(corrected)),
    )


class AIService:
    """HTTP client for an OpenAI-compatible chat-completions endpoint."""

    def __init__(self, config: AIConfig | None = None, api_key: str | None = None):
        self.config = config or AIConfig()
        self.base_url = self.config.endpoint.rstrip("/")
        self.timeout = self.config.timeout
        self.api_key = api_key or os.environ.get(self.config.api_key_env)
        self._client: httpx.AsyncClient | None = None

    def _get_headers(self) -> dict[str, str]:
        """Get HTTP headers with authentication."""
        if not self.api_key:
            raise AIServiceError(
                f"No API key configured (set {self.config.api_key_env})"
            )
        return {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                follow_redirects=True,
            )
        self._client.headers.update(self._get_headers())
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def request(self, payload: dict[str, Any], retry: int | None = None) -> httpx.Response:
        """POST to /chat/completions with retries on 5xx and network errors."""
        if retry is None:
            retry = self.config.retry

        client = await self._get_client()
        logger = get_logger()

        last_exception: Exception | None = None
        for attempt in range(retry + 1):
            try:
                response = await client.post("/chat/completions", json=payload)
                response.raise_for_status()
                return response
            except httpx.HTTPStatusError as e:
                # Don't retry client errors (4xx)
                if 400 <= e.response.status_code < 500:
                    raise AIServiceError(
                        f"Completion request rejected: {e.response.status_code}"
                    ) from e
                last_exception = e
            except httpx.RequestError as e:
                last_exception = e

            logger.warning("completion attempt %d failed: %s", attempt + 1, last_exception)
            if attempt < retry:
                await asyncio.sleep(2**attempt)

        raise AIServiceError(f"Completion request failed: {last_exception}") from last_exception

    async def complete(self, messages: list[dict[str, str]]) -> str:
        """Run one chat completion and return the first choice's content."""
        payload = {
            "model": self.config.model,
            "messages": messages,
            "temperature": self.config.temperature,
            "max_tokens": self.config.max_tokens,
        }
        response = await self.request(payload)
        try:
            return response.json()["choices"][0]["message"]["content"] or ""
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise AIServiceError(f"Unexpected completion response: {e}") from e

    async def process_text(self, title: str, lists: list[ListRef] | None = None) -> ProcessedText:
        """Spell-correct *title*, match it to one of *lists* and infer priority."""
        lists = lists or []
        content = await self.complete(
            [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_user_prompt(title, lists)},
            ]
        )
        return parse_completion(content, title, lists)
