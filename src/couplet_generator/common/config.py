"""Process-wide settings, read once at startup.

Values come from the process environment first and a local .env file second;
the file only fills variables that are unset or empty. Keyword aliases and
verification tokens live in a YAML file so clients can grow new field names
without code changes.
"""
from __future__ import annotations
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import yaml
from dotenv import dotenv_values

from couplet_generator.common.errors import ConfigurationError

LOGGER = logging.getLogger("couplet.config")

DEFAULT_API_URL = "https://api.deepseek.com/chat/completions"
DEFAULT_MODEL = "deepseek-chat"
DEFAULT_MAX_BODY_BYTES = 2_000_000

DEFAULT_KEYWORD_ALIASES: dict[str, tuple[str, ...]] = {
    "keyword1": ("keyword1", "k1", "keyword_1"),
    "keyword2": ("keyword2", "k2", "keyword_2"),
    "horizontal_keyword": ("horizontalKeyword", "horizontal", "h"),
}


@dataclass(frozen=True)
class Settings:
    deepseek_api_key: str | None = None
    api_url: str = DEFAULT_API_URL
    model: str = DEFAULT_MODEL
    temperature: float = 0.9
    upstream_timeout: float | None = None
    host: str = "0.0.0.0"
    port: int = 80
    static_root: Path = Path("public")
    max_body_bytes: int = DEFAULT_MAX_BODY_BYTES
    log_level: str = "INFO"
    keyword_aliases: Mapping[str, tuple[str, ...]] = field(
        default_factory=lambda: dict(DEFAULT_KEYWORD_ALIASES)
    )
    verification_tokens: Mapping[str, str] = field(default_factory=dict)


def read_env(env_file: str | Path | None = ".env") -> dict[str, str]:
    """Merge a .env file under the real environment; non-empty variables win."""
    values: dict[str, str] = {}
    if env_file is not None and Path(env_file).is_file():
        values.update({k: v for k, v in dotenv_values(env_file).items() if v is not None})
    values.update({k: v for k, v in os.environ.items() if v != ""})
    return values


def load_cfg(path: str | Path) -> dict[str, Any]:
    """Load the YAML app config; a missing file means built-in defaults."""
    p = Path(path)
    if not p.is_file():
        LOGGER.debug("No app config at %s, using defaults", p)
        return {}
    with open(p, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"App config {p} must be a mapping")
    return data


def parse_aliases(raw: Any) -> dict[str, tuple[str, ...]]:
    """Validate the keyword_aliases section and merge it over the defaults."""
    aliases = dict(DEFAULT_KEYWORD_ALIASES)
    if raw is None:
        return aliases
    if not isinstance(raw, dict):
        raise ConfigurationError("keyword_aliases must map a slot to a list of field names")
    for slot, names in raw.items():
        if slot not in DEFAULT_KEYWORD_ALIASES:
            raise ConfigurationError(f"Unknown keyword slot: {slot}")
        if isinstance(names, str):
            names = [names]
        if not isinstance(names, list) or not names or not all(isinstance(n, str) for n in names):
            raise ConfigurationError(f"Aliases for {slot} must be a non-empty list of strings")
        aliases[slot] = tuple(names)
    return aliases


def parse_tokens(raw: Any) -> dict[str, str]:
    """Validate verification_tokens: URL path -> file content."""
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigurationError("verification_tokens must map a path to a token")
    tokens: dict[str, str] = {}
    for path, token in raw.items():
        path = str(path)
        if not path.startswith("/"):
            path = "/" + path
        tokens[path] = str(token)
    return tokens


def _optional_float(value: str | None) -> float | None:
    if value is None or not value.strip():
        return None
    return float(value)


def load_settings(
    env_file: str | Path | None = ".env",
    config_path: str | Path | None = None,
) -> Settings:
    """
    Build the Settings object for this process.

    Args:
        env_file: Optional .env file consulted for unset variables.
        config_path: YAML app config; defaults to $APP_CONFIG or configs/app.yaml.
    """
    env = read_env(env_file)
    if config_path is None:
        config_path = env.get("APP_CONFIG", "configs/app.yaml")
    cfg = load_cfg(config_path)

    try:
        return Settings(
            deepseek_api_key=(env.get("DEEPSEEK_API_KEY") or "").strip() or None,
            api_url=env.get("DEEPSEEK_API_URL", DEFAULT_API_URL),
            model=env.get("DEEPSEEK_MODEL", DEFAULT_MODEL),
            temperature=float(env.get("TEMPERATURE", "0.9")),
            upstream_timeout=_optional_float(env.get("UPSTREAM_TIMEOUT")),
            host=env.get("HOST", "0.0.0.0"),
            port=int(env.get("PORT") or 80),
            static_root=Path(env.get("STATIC_ROOT", "public")),
            max_body_bytes=int(env.get("MAX_BODY_BYTES", str(DEFAULT_MAX_BODY_BYTES))),
            log_level=env.get("LOG_LEVEL", "INFO"),
            keyword_aliases=parse_aliases(cfg.get("keyword_aliases")),
            verification_tokens=parse_tokens(cfg.get("verification_tokens")),
        )
    except ValueError as e:
        raise ConfigurationError(f"Invalid numeric setting: {e}") from e
