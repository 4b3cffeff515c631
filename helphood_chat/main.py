from __future__ import annotations

import random
from contextlib import asynccontextmanager
from pathlib import Path

import httpx
from fastapi import FastAPI
from fastapi.routing import APIRoute
from starlette.exceptions import HTTPException as StarletteHTTPException

from helphood_chat.chat.router import CHAT_PATH, chat_http_exception_handler, request_body_schema
from helphood_chat.chat.router import router as chat_router
from helphood_chat.chat.service import ChatService
from helphood_chat.chat.validation import ChatGuard
from helphood_chat.config import Settings
from helphood_chat.config import settings as default_settings
from helphood_chat.infra.llm_client import LLMClient
from helphood_chat.metrics import MetricsMiddleware, metrics_endpoint
from helphood_chat.observability import RequestIdMiddleware, setup_json_logging
from helphood_chat.ops import router as ops_router
from helphood_chat.providers.gemini_llm import GeminiProvider

APP_NAME = "helphood-chat"
APP_DESC = "HelpHood assistant: Gemini answers with a keyword-based local fallback."
APP_VERSION_FILE = Path(__file__).resolve().parents[1] / "VERSION"

log = setup_json_logging()


def read_version_fallback() -> str:
    try:
        return APP_VERSION_FILE.read_text(encoding="utf-8").strip()
    except Exception:
        return "0.0.0"


def build_llm_client(
    cfg: Settings, transport: httpx.AsyncBaseTransport | None = None
) -> LLMClient | None:
    """None when no Gemini key is configured (fallback-only mode)."""
    if not cfg.ai_configured:
        return None
    provider = GeminiProvider(
        api_key=cfg.GEMINI_API_KEY,
        model=cfg.GEMINI_MODEL,
        base_url=cfg.GEMINI_BASE_URL,
        transport=transport,
    )
    return LLMClient(fn_call_model=provider, timeout_secs=cfg.CHAT_TIMEOUT_SECS)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.is_ready = True
    log.info(f'startup service="{APP_NAME}" ai_configured={app.state.chat_service.ai_configured}')
    yield
    app.state.is_ready = False


def create_app(
    cfg: Settings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    llm: LLMClient | None = None,
    rng: random.Random | None = None,
) -> FastAPI:
    """
    Build the service. Settings are read once by the caller and passed in;
    `transport`, `llm` and `rng` exist so tests can stub Gemini and the
    fallback choice.
    """
    cfg = cfg or default_settings

    app = FastAPI(
        title=APP_NAME,
        description=APP_DESC,
        version=read_version_fallback(),
        lifespan=lifespan,
    )
    app.state.settings = cfg
    app.state.is_ready = False
    app.state.chat_guard = ChatGuard(max_message_chars=cfg.CHAT_MAX_MESSAGE_CHARS)
    app.state.chat_service = ChatService(
        llm=llm if llm is not None else build_llm_client(cfg, transport),
        rng=rng,
    )

    app.add_middleware(MetricsMiddleware, skip_predicate=lambda req: req.url.path == "/metrics")
    app.add_middleware(RequestIdMiddleware, logger=log)

    app.add_exception_handler(StarletteHTTPException, chat_http_exception_handler)

    app.include_router(chat_router)
    app.include_router(ops_router)

    # Document the limit this app actually enforces
    for route in app.routes:
        if isinstance(route, APIRoute) and route.path == CHAT_PATH and "POST" in route.methods:
            route.openapi_extra = request_body_schema(cfg.CHAT_MAX_MESSAGE_CHARS)

    @app.get("/health", tags=["core"])
    def health():
        return {"status": "ok"}

    @app.get("/version", tags=["core"])
    def version():
        return {
            "service": APP_NAME,
            "version": read_version_fallback(),
            "host": cfg.APP_HOST,
            "port": cfg.APP_PORT,
            "workers": cfg.APP_WORKERS,
            "ai_configured": app.state.chat_service.ai_configured,
        }

    app.add_api_route("/metrics", metrics_endpoint, methods=["GET"], tags=["core"])
    return app


app = create_app()
