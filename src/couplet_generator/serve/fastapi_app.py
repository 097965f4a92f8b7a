"""FastAPI app for the couplet generator.

Endpoints:
- GET /                      index.html from the static root
- GET /healthz, GET /check   plain "ok"
- GET <verification path>    configured ownership tokens
- POST /api/generate         { "keyword1": "...", "keyword2": "..." }
- GET /<file>                other static files
"""
from __future__ import annotations
import logging

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import FileResponse, JSONResponse, PlainTextResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from couplet_generator.common.config import Settings, load_settings
from couplet_generator.common.errors import CoupletError, MethodNotAllowed
from couplet_generator.serve.api import CORS_HEADERS, coerce_body, extract_keywords, read_body
from couplet_generator.serve.client import CompletionClient
from couplet_generator.serve.static import content_type, resolve_static

LOGGER = logging.getLogger("couplet.app")

JSON_TYPE = "application/json; charset=utf-8"
ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def json_response(status_code: int, content: dict, headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(content, status_code=status_code, headers=headers, media_type=JSON_TYPE)


def api_response(status_code: int, content: dict, headers: dict[str, str] | None = None) -> JSONResponse:
    """JSON response carrying the permissive CORS headers."""
    return json_response(status_code, content, {**CORS_HEADERS, **(headers or {})})


def create_app(settings: Settings | None = None, transport: httpx.AsyncBaseTransport | None = None) -> FastAPI:
    """
    Build the app around one Settings object.

    Args:
        settings: Process settings; loaded from the environment when omitted.
        transport: Optional httpx transport handed to the completion client.
    """
    if settings is None:
        settings = load_settings()
    completion = CompletionClient(settings, transport=transport)

    app = FastAPI(title="Couplet Generator")
    app.state.settings = settings

    @app.on_event("startup")
    def _check_deployment() -> None:
        """Warn early about a missing API key or page; neither stops the server."""
        if not settings.deepseek_api_key:
            LOGGER.warning("DEEPSEEK_API_KEY is not set; /api/generate will answer 500")
        if resolve_static(settings.static_root, "index.html") is None:
            LOGGER.warning("No index.html under %s", settings.static_root)

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return json_response(exc.status_code, {"error": str(exc.detail)}, exc.headers)

    @app.api_route("/api/generate", methods=ALL_METHODS)
    async def generate(request: Request) -> Response:
        try:
            if request.method == "OPTIONS":
                return api_response(200, {"ok": True})
            if request.method != "POST":
                raise MethodNotAllowed()

            raw = await read_body(request.stream(), settings.max_body_bytes)
            keywords = extract_keywords(coerce_body(raw), settings.keyword_aliases)
            couplet = await completion.generate(keywords)
            return api_response(200, couplet.model_dump())
        except MethodNotAllowed as e:
            return api_response(e.status_code, {"error": e.message}, {"Allow": "POST"})
        except CoupletError as e:
            return api_response(e.status_code, {"error": e.message})
        except Exception as e:
            LOGGER.exception("Unhandled error in /api/generate")
            return api_response(500, {"error": str(e) or "Unknown error"})

    @app.get("/")
    def index() -> Response:
        path = resolve_static(settings.static_root, "index.html")
        if path is None:
            return json_response(404, {"error": "Not Found"})
        return FileResponse(path, media_type=content_type(path))

    @app.get("/healthz")
    @app.get("/check")
    def health() -> PlainTextResponse:
        return PlainTextResponse("ok")

    for token_path, token in settings.verification_tokens.items():
        app.add_api_route(
            token_path,
            _token_endpoint(token),
            methods=["GET"],
            include_in_schema=False,
        )

    @app.get("/{file_path:path}", include_in_schema=False)
    def static_file(file_path: str) -> Response:
        path = resolve_static(settings.static_root, file_path)
        if path is None:
            return json_response(404, {"error": "Not Found"})
        return FileResponse(path, media_type=content_type(path))

    return app


def _token_endpoint(token: str):
    def endpoint() -> PlainTextResponse:
        return PlainTextResponse(token)
    return endpoint
