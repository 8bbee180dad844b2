"""Abstract base for all AI providers plus the shared HTTP call helper."""

from __future__ import annotations

import abc
import json
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import httpx

from ..errors import InvalidResponse, ProviderError, Unavailable

if TYPE_CHECKING:
    from ..prompting import Prompt

logger = logging.getLogger(__name__)

# Status codes treated as transient server-side unavailability.
TRANSIENT_STATUS_CODES = frozenset({429, 500, 502, 503, 504})


@dataclass(frozen=True)
class ProviderResult:
    """Immutable result returned by every provider.

    ``structured`` is set when the provider answered in JSON mode and the
    answer already decoded to an object.
    """

    raw_text: str
    model: str
    provider: str
    structured: dict[str, Any] | None = None
    prompt_tokens: int = 0
    completion_tokens: int = 0
    latency_ms: float = 0.0


class BaseProvider(abc.ABC):
    """Contract that every AI provider must implement."""

    name: str = "base"

    @abc.abstractmethod
    async def generate(
        self,
        prompt: Prompt,
        *,
        model: str = "",
        temperature: float = 0.2,
        max_tokens: int = 2048,
        timeout_seconds: float = 60.0,
        json_mode: bool = False,
    ) -> ProviderResult:
        """Send *prompt* (text and media segments) and return a ``ProviderResult``."""


def decode_structured(text: str) -> dict[str, Any] | None:
    """Decode a JSON-mode answer; ``None`` when it is not a bare JSON object."""
    try:
        value = json.loads(text)
    except (json.JSONDecodeError, ValueError):
        return None
    return value if isinstance(value, dict) else None


async def post_json(
    provider: str,
    url: str,
    *,
    headers: dict[str, str],
    payload: dict[str, Any],
    timeout_seconds: float,
) -> dict[str, Any]:
    """POST *payload* and return the decoded JSON body.

    Failures are classified instead of propagated raw: transient HTTP
    statuses become ``Unavailable``, everything else ``ProviderError``.
    """
    try:
        async with httpx.AsyncClient(timeout=timeout_seconds) as client:
            resp = await client.post(url, headers=headers, json=payload)
    except httpx.TimeoutException as exc:
        raise ProviderError(f"{provider} request timed out", provider=provider) from exc
    except httpx.HTTPError as exc:
        raise ProviderError(f"{provider} transport error: {exc}", provider=provider) from exc

    if resp.status_code in TRANSIENT_STATUS_CODES:
        logger.warning("%s returned transient HTTP %d", provider, resp.status_code)
        raise Unavailable(
            f"{provider} returned HTTP {resp.status_code}",
            provider=provider,
            status_code=resp.status_code,
        )
    if resp.is_error:
        raise ProviderError(
            f"{provider} returned HTTP {resp.status_code}",
            provider=provider,
            status_code=resp.status_code,
        )

    try:
        data = resp.json()
    except ValueError as exc:
        raise InvalidResponse(f"{provider} returned a non-JSON body") from exc
    if not isinstance(data, dict):
        raise InvalidResponse(f"{provider} returned an unexpected body")
    return data
