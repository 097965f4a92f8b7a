"""Inbound request shaping for POST /api/generate."""
from __future__ import annotations
import json
import logging
from typing import Any, AsyncIterable, Mapping

from couplet_generator.common.schema import KeywordPair

LOGGER = logging.getLogger("couplet.api")

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
}


async def read_body(chunks: AsyncIterable[bytes], limit: int) -> bytes:
    """
    Buffer a request body up to `limit` bytes.

    Reading stops at the limit and the rest of the stream is left unread;
    an oversized body is never an error.
    """
    buf = bytearray()
    async for chunk in chunks:
        room = limit - len(buf)
        if len(chunk) > room:
            buf.extend(chunk[:room])
            LOGGER.warning("Request body exceeds %d bytes, truncating", limit)
            break
        buf.extend(chunk)
    return bytes(buf)


def coerce_body(value: Any) -> dict[str, Any]:
    """Turn a parsed or raw body into a dict; anything unusable becomes {}."""
    if isinstance(value, Mapping):
        return dict(value)
    if isinstance(value, (bytes, bytearray)):
        value = bytes(value).decode("utf-8", errors="replace")
    if not isinstance(value, str) or not value.strip():
        return {}
    try:
        data = json.loads(value)
    except ValueError:
        LOGGER.debug("Ignoring malformed JSON body")
        return {}
    return data if isinstance(data, dict) else {}


def _first(body: Mapping[str, Any], names: tuple[str, ...]) -> Any:
    for name in names:
        value = body.get(name)
        if value is not None:
            return value
    return None


def extract_keywords(body: Mapping[str, Any], aliases: Mapping[str, tuple[str, ...]]) -> KeywordPair:
    """Pick each keyword from the first alias field that is present."""
    return KeywordPair(
        keyword1=_first(body, aliases.get("keyword1", ())),
        keyword2=_first(body, aliases.get("keyword2", ())),
        horizontal_keyword=_first(body, aliases.get("horizontal_keyword", ())),
    )
