"""FastAPI backend for the bridge dashboard."""

from __future__ import annotations

import time
from contextlib import asynccontextmanager
from typing import Any

import httpx
import structlog
from fastapi import FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from bridgedash.api.schemas import (
    ChainSeriesResponse,
    DiscoveredResponse,
    ErrorResponse,
    HealthResponse,
    StatsResponse,
    TransactionsResponse,
)
from bridgedash.config import UnknownTimeframeError, get_settings
from bridgedash.config.settings import Settings
from bridgedash.fallback import synthetic_messages
from bridgedash.ingestion.hyperlane.client import clamp_from_timestamp, extract_message_list
from bridgedash.pipeline import BridgeDataService

log = structlog.get_logger(__name__)

# Set by run_api() so the app picks up the CLI's profile.
_config_profile: str | None = None

PROXY_TIMEOUT_SEC = 15.0
PROXY_MIN_LIMIT = 100
PROXY_DEFAULT_LIMIT = 250
CACHE_LIVE = "public, s-maxage=300, stale-while-revalidate=600"
CACHE_MOCK = "public, s-maxage=60, stale-while-revalidate=300"


def _error_json(code: str, message: str, status_code: int = 404) -> JSONResponse:
    """Return consistent error JSON: { detail, code }."""
    return JSONResponse(
        status_code=status_code,
        content={"detail": message, "code": code},
    )


def _now_ms() -> int:
    return int(time.time() * 1000)


def create_app(
    settings: Settings | None = None,
    service: BridgeDataService | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> FastAPI:
    """Build the app. Injected service/client are not closed on shutdown."""
    settings = settings or get_settings(_config_profile)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned: list[Any] = []
        if http_client is None:
            client = httpx.AsyncClient(
                timeout=PROXY_TIMEOUT_SEC,
                headers={"Accept": "application/json", "User-Agent": settings.user_agent},
            )
            owned.append(client)
        else:
            client = http_client
        if service is None:
            svc = BridgeDataService.from_settings(settings)
            owned.append(svc)
        else:
            svc = service
        app.state.http_client = client
        app.state.service = svc
        yield
        for resource in owned:
            await resource.aclose()

    app = FastAPI(title="Bridge Dashboard API", version="0.1.0", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    def _chain(chain: str | None) -> str | None:
        if chain is None:
            return settings.default_chain
        if chain.lower() in ("", "all"):
            return None
        return chain

    @app.get("/health", response_model=HealthResponse)
    def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.get(
        "/transactions",
        response_model=TransactionsResponse,
        responses={400: {"description": "Unknown timeframe", "model": ErrorResponse}},
    )
    async def transactions(
        request: Request,
        timeframe: str = Query("24h", description="24h, 7d, 30d, ..."),
        chain: str | None = Query(None, description="Chain name or id; 'all' for every chain"),
        limit: int = Query(100, ge=1, le=5000),
    ):
        """Normalized transfers, newest first."""
        svc: BridgeDataService = request.app.state.service
        try:
            snap = await svc.load(timeframe, _chain(chain))
        except UnknownTimeframeError as e:
            return _error_json("unknown_timeframe", str(e), status_code=400)
        return TransactionsResponse(
            timeframe=timeframe,
            chain=snap.chain,
            transactions=snap.transactions[:limit],
            total=len(snap.transactions),
            status=snap.status,
        )

    @app.get(
        "/stats",
        response_model=StatsResponse,
        responses={400: {"description": "Unknown timeframe", "model": ErrorResponse}},
    )
    async def stats(
        request: Request,
        timeframe: str = Query("24h"),
        chain: str | None = Query(None),
    ):
        """Totals, per-chain summaries and the daily per-asset series."""
        svc: BridgeDataService = request.app.state.service
        try:
            snap = await svc.load(timeframe, _chain(chain))
        except UnknownTimeframeError as e:
            return _error_json("unknown_timeframe", str(e), status_code=400)
        return StatsResponse(timeframe=timeframe, chain=snap.chain, stats=snap.stats, status=snap.status)

    @app.get(
        "/chains/{chain}/series",
        response_model=ChainSeriesResponse,
        responses={400: {"description": "Unknown timeframe", "model": ErrorResponse}},
    )
    async def chain_series(request: Request, chain: str, timeframe: str = Query("24h")):
        """Daily per-asset series for transfers touching one chain."""
        svc: BridgeDataService = request.app.state.service
        try:
            points, status = await svc.chain_series(timeframe, chain)
        except UnknownTimeframeError as e:
            return _error_json("unknown_timeframe", str(e), status_code=400)
        name = points[0].chain if points else chain
        return ChainSeriesResponse(timeframe=timeframe, chain=name, points=points, status=status)

    @app.get("/discovered/assets", response_model=DiscoveredResponse)
    def discovered_assets(request: Request) -> DiscoveredResponse:
        items = request.app.state.service.discovered_assets()
        return DiscoveredResponse(items=items, total=len(items))

    @app.get("/discovered/chains", response_model=DiscoveredResponse)
    def discovered_chains(request: Request) -> DiscoveredResponse:
        items = request.app.state.service.discovered_chains()
        return DiscoveredResponse(items=items, total=len(items))

    def _mock_messages(error: str | None = None) -> JSONResponse:
        messages = synthetic_messages(_now_ms(), count=settings.fallback_count, seed=settings.fallback_seed)
        headers = {"X-Mock-Data": "true", "Cache-Control": CACHE_MOCK}
        if error:
            headers["X-Error"] = error
        return JSONResponse(
            {
                "messages": messages,
                "pagination": {"limit": len(messages), "offset": 0, "total": len(messages)},
            },
            headers=headers,
        )

    @app.get("/hyperlane/messages")
    async def hyperlane_messages(request: Request):
        """Explorer proxy. Upstream trouble is answered with synthetic messages (X-Mock-Data)."""
        params = dict(request.query_params)
        if "fromTimestamp" in params:
            try:
                requested = int(params["fromTimestamp"])
            except ValueError:
                requested = 0
            params["fromTimestamp"] = str(clamp_from_timestamp(requested, _now_ms()))
        try:
            limit = int(params.get("limit", 0))
        except ValueError:
            limit = 0
        if limit < PROXY_MIN_LIMIT:
            params["limit"] = str(PROXY_DEFAULT_LIMIT)

        url = settings.hyperlane_api_base.rstrip("/") + "/messages"
        client: httpx.AsyncClient = request.app.state.http_client
        log.info("proxy_request", url=url, params=params)
        try:
            resp = await client.get(url, params=params, timeout=PROXY_TIMEOUT_SEC)
        except httpx.TimeoutException:
            log.error("proxy_timeout", url=url)
            return _mock_messages(error="timeout")
        except httpx.HTTPError as e:
            log.error("proxy_error", url=url, error=str(e))
            return _mock_messages(error=str(e) or type(e).__name__)
        if resp.status_code != 200:
            log.error("proxy_upstream_status", status=resp.status_code)
            return _mock_messages(error=f"upstream status {resp.status_code}")
        try:
            data = resp.json()
        except ValueError:
            log.error("proxy_bad_json")
            return _mock_messages(error="invalid json")
        if not extract_message_list(data):
            log.warning("proxy_no_messages")
            return _mock_messages()
        return JSONResponse(data, headers={"Cache-Control": CACHE_LIVE})

    return app


def run_api(host: str = "127.0.0.1", port: int = 8000, profile: str | None = None) -> None:
    global _config_profile
    _config_profile = profile
    import uvicorn

    uvicorn.run("bridgedash.api.main:create_app", host=host, port=port, reload=False, factory=True)
