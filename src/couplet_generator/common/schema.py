"""Pydantic models and dataclasses for request/response types."""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel


@dataclass(frozen=True)
class KeywordPair:
    """Keywords pulled from an inbound request, before sanitizing."""
    keyword1: Any = None
    keyword2: Any = None
    horizontal_keyword: Any = None


@dataclass(frozen=True)
class Prompts:
    system: str
    user: str


class Couplet(BaseModel):
    """A validated couplet; every field is trimmed and non-empty."""
    upper: str
    lower: str
    horizontal: str
