from __future__ import annotations

import asyncio
from typing import AsyncIterator

from couplet_generator.common.config import DEFAULT_KEYWORD_ALIASES
from couplet_generator.serve.api import coerce_body, extract_keywords, read_body


async def _chunks(*parts: bytes) -> AsyncIterator[bytes]:
    for part in parts:
        yield part


def test_read_body_joins_chunks() -> None:
    out = asyncio.run(read_body(_chunks(b'{"k1":', b'"a"}'), limit=100))
    assert out == b'{"k1":"a"}'


def test_read_body_truncates_without_raising() -> None:
    out = asyncio.run(read_body(_chunks(b"abcd", b"efgh", b"ijkl"), limit=6))
    assert out == b"abcdef"


def test_coerce_body_passes_mappings_through() -> None:
    assert coerce_body({"keyword1": "x"}) == {"keyword1": "x"}


def test_coerce_body_decodes_json_bytes() -> None:
    assert coerce_body('{"k1": "湖"}'.encode("utf-8")) == {"k1": "湖"}


def test_coerce_body_degrades_to_empty() -> None:
    assert coerce_body(b"{not json") == {}
    assert coerce_body(b"") == {}
    assert coerce_body(b"[1, 2]") == {}
    assert coerce_body(None) == {}
    assert coerce_body(b'{"k1": "cut') == {}


def test_extract_keywords_prefers_first_alias() -> None:
    body = {"k1": "second", "keyword1": "first", "keyword_2": "two", "h": "横"}
    pair = extract_keywords(body, DEFAULT_KEYWORD_ALIASES)
    assert pair.keyword1 == "first"
    assert pair.keyword2 == "two"
    assert pair.horizontal_keyword == "横"


def test_extract_keywords_skips_null_aliases() -> None:
    pair = extract_keywords({"keyword1": None, "k1": "alias"}, DEFAULT_KEYWORD_ALIASES)
    assert pair.keyword1 == "alias"


def test_extract_keywords_uses_configured_aliases() -> None:
    aliases = {"keyword1": ("first",), "keyword2": ("second",)}
    pair = extract_keywords({"first": "a", "second": "b", "keyword1": "ignored"}, aliases)
    assert (pair.keyword1, pair.keyword2, pair.horizontal_keyword) == ("a", "b", None)


def test_read_body_stops_consuming_after_limit() -> None:
    consumed: list[bytes] = []

    async def endless() -> AsyncIterator[bytes]:
        while True:
            chunk = b"x" * 4
            consumed.append(chunk)
            yield chunk

    out = asyncio.run(read_body(endless(), limit=10))
    assert out == b"x" * 10
    assert len(consumed) == 3
