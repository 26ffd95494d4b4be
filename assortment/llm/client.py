# assortment/llm/client.py

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, Optional

import openai
from openai import AsyncOpenAI
from pydantic import ValidationError

from assortment.errors import RemoteProtocolError, RemoteTimeoutError, RemoteUnavailableError
from assortment.llm.models import AssortmentPromptInput, AssortmentSuggestion
from assortment.schemas.remote import RemoteSolveRequest

if TYPE_CHECKING:
    from assortment.config import Settings

logger = logging.getLogger(__name__)


class LLMRemoteSolverTransport:
    """Approximate remote solver backed by an OpenAI chat model.

    Used as an async context manager; the API client is created on enter
    and closed on exit.
    """

    name = "llm"

    def __init__(
        self,
        api_key: str,
        model: str,
        timeout_s: float,
        temperature: float = 0.0,
        max_tokens: int = 4096,
        client: Optional[AsyncOpenAI] = None,
    ) -> None:
        if not api_key and client is None:
            raise RemoteUnavailableError("OPENAI_API_KEY is not configured")
        self.api_key = api_key
        self.model = model
        self.timeout_s = timeout_s
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._injected = client
        self._client: Optional[AsyncOpenAI] = None

    @classmethod
    def from_settings(cls, settings: "Settings") -> "LLMRemoteSolverTransport":
        return cls(
            api_key=settings.OPENAI_API_KEY,
            model=settings.OPENAI_MODEL,
            timeout_s=settings.SOLVER_REMOTE_TIMEOUT,
            temperature=settings.OPENAI_TEMPERATURE,
            max_tokens=settings.OPENAI_MAX_TOKENS,
        )

    async def __aenter__(self) -> "LLMRemoteSolverTransport":
        # No SDK-level retries: a timeout is terminal for the request
        self._client = self._injected or AsyncOpenAI(api_key=self.api_key, timeout=self.timeout_s, max_retries=0)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        client, self._client = self._client, None
        if client is not None:
            await client.close()

    async def solve(self, request: RemoteSolveRequest) -> Any:
        """Ask the model for a unit list. Returns the unvalidated list of entries."""
        if self._client is None:
            raise RuntimeError("LLMRemoteSolverTransport used outside 'async with'")

        payload = AssortmentPromptInput(candidate_items=request.candidate_items, target=request.target)

        try:
            resp = await self._client.chat.completions.create(
                model=self.model,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                messages=[
                    {"role": "system", "content": _build_system_prompt()},
                    {"role": "user", "content": _build_user_prompt(payload)},
                ],
                response_format={"type": "json_object"},
                timeout=self.timeout_s,
            )
        except openai.APITimeoutError as exc:
            raise RemoteTimeoutError(f"LLM solver timed out: {exc}") from exc
        except openai.APIError as exc:
            raise RemoteUnavailableError(f"LLM solver call failed: {exc}") from exc

        content = resp.choices[0].message.content if resp.choices else None
        if not content or not content.strip():
            # No answer is "no combination" rather than a protocol error
            return []

        try:
            data = json.loads(content)
            return AssortmentSuggestion.model_validate(data).items
        except (ValueError, ValidationError) as exc:
            logger.exception("llm.solve_parse_error", extra={"backend": self.name})
            raise RemoteProtocolError(f"Failed to parse LLM response: {exc}", raw_payload=content) from exc


def _build_system_prompt() -> str:
    return (
        "You select inventory units whose total price is as close as possible to a target amount. "
        "Return ONLY a JSON object with a single key: items (list). "
        "Each element of items is one unit and must have: id (string, copied exactly from the candidates), "
        "name (string), unitPrice (number, copied exactly from the candidates). "
        "Rules: never use an item more times than its quantity; repeat an element once per unit used; "
        "the total may be slightly above or below the target, prefer the closest; "
        "if no combination can be made, return {\"items\": []}. "
        "Do not include any text outside the JSON."
    )


def _build_user_prompt(payload: AssortmentPromptInput) -> str:
    candidates = [c.model_dump(by_alias=True) for c in payload.candidate_items]
    lines = [
        f"Target total: {payload.target:.2f}",
        f"Available items: {json.dumps(candidates, ensure_ascii=False)}",
    ]
    return "\n".join(lines)


__all__ = ["LLMRemoteSolverTransport"]
