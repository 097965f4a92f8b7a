"""DeepSeek chat-completion client.

One call per couplet. The reply is JSON twice over: the HTTP body is the
completion envelope, and the first message's content is itself a JSON couplet.
Each layer has its own failure message so callers can tell which one broke.
"""
from __future__ import annotations
import json
import logging
from typing import Any

import httpx

from couplet_generator.common.config import Settings
from couplet_generator.common.errors import ConfigurationError, UpstreamError, ValidationError
from couplet_generator.common.schema import Couplet, KeywordPair, Prompts
from couplet_generator.common.templates import build_prompts

LOGGER = logging.getLogger("couplet.client")

COUPLET_FIELDS = ("upper", "lower", "horizontal")


def build_payload(settings: Settings, prompts: Prompts) -> dict[str, Any]:
    return {
        "model": settings.model,
        "messages": [
            {"role": "system", "content": prompts.system},
            {"role": "user", "content": prompts.user},
        ],
        "temperature": settings.temperature,
        "response_format": {"type": "json_object"},
    }


def parse_envelope(text: str) -> Any:
    """Return the first choice's message content from a completion body."""
    try:
        data = json.loads(text)
    except ValueError:
        raise UpstreamError(f"DeepSeek response is not JSON: {text}", body=text) from None

    content = None
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        pass
    if not content and not isinstance(content, (dict, list)):
        raise UpstreamError(f"DeepSeek missing message.content: {text}", body=text)
    return content


def parse_couplet(content: Any) -> Couplet:
    """Decode the model's content and check all three lines are present."""
    try:
        couplet = json.loads(content)
    except (ValueError, TypeError):
        raise UpstreamError(f"Model content is not JSON: {content}") from None

    if not isinstance(couplet, dict):
        couplet = {}
    values = {name: str(couplet.get(name) or "").strip() for name in COUPLET_FIELDS}
    if not all(values.values()):
        raise ValidationError(f"Invalid couplet JSON (need upper/lower/horizontal): {content}")
    return Couplet(**values)


class CompletionClient:
    """
    Sends one prompt pair upstream and returns a validated Couplet.

    Args:
        settings: Process settings holding the API key and endpoint.
        transport: Optional httpx transport, used by tests to stand in for the API.
    """

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.settings = settings
        self.transport = transport

    async def generate(self, keywords: KeywordPair) -> Couplet:
        return await self.complete(build_prompts(keywords))

    async def complete(self, prompts: Prompts) -> Couplet:
        api_key = self.settings.deepseek_api_key
        if not api_key:
            raise ConfigurationError("Missing DEEPSEEK_API_KEY")

        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {api_key}",
        }
        payload = build_payload(self.settings, prompts)

        try:
            async with httpx.AsyncClient(
                timeout=self.settings.upstream_timeout,
                transport=self.transport,
            ) as client:
                r = await client.post(self.settings.api_url, headers=headers, json=payload)
        except httpx.HTTPError as e:
            LOGGER.warning("DeepSeek request failed: %s", e)
            raise UpstreamError(f"DeepSeek request failed: {e}") from e

        text = r.text
        if not r.is_success:
            LOGGER.warning("DeepSeek returned HTTP %s", r.status_code)
            raise UpstreamError(
                f"DeepSeek API error ({r.status_code}): {text}",
                upstream_status=r.status_code,
                body=text,
            )

        try:
            content = parse_envelope(text)
            return parse_couplet(content)
        except (UpstreamError, ValidationError) as e:
            LOGGER.warning("Unusable DeepSeek reply: %s", type(e).__name__)
            raise
