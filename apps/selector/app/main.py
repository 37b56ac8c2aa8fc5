from __future__ import annotations

from typing import List, Optional

from fastapi import FastAPI, HTTPException, Request
from pydantic import BaseModel, Field

from flight_selector import AssignmentResult, FlightSelector, PageReference, SelectorConfig, SelectorView
from shared.limits import RedisRateLimiter
from shared.logging import configure_logging, get_logger
from shared.redis_client import RedisClient

from .config import (
    LOG_LEVEL,
    RATE_LIMIT_PER_MINUTE,
    RECORD_TOOL_TIMEOUT_S,
    RECORD_TOOL_URL,
    SELECTOR_REGISTRY_SIZE,
)
from .registry import SelectorRegistry, record_tool_factory

logger = get_logger(__name__)


class SelectFlightIn(BaseModel):
    flight_id: str = Field(min_length=1, max_length=64)
    session_id: Optional[str] = None


class ClearFlightIn(BaseModel):
    session_id: Optional[str] = None


class RefreshIn(BaseModel):
    session_id: Optional[str] = None


class ToastOut(BaseModel):
    title: str
    message: str
    variant: str


class ActionOut(BaseModel):
    accepted: bool
    ok: bool
    action: Optional[str] = None
    error: Optional[str] = None
    view: SelectorView
    toasts: List[ToastOut]


class NavigateOut(BaseModel):
    page: Optional[PageReference] = None


app = FastAPI(title="flight_selector", version="0.1.0")


@app.on_event("startup")
async def startup() -> None:
    configure_logging(LOG_LEVEL)
    logger.info("flight selector api starting record_tool=%s", RECORD_TOOL_URL)

    app.state.redis = RedisClient.from_env()
    app.state.rate_limiter = RedisRateLimiter(app.state.redis.client(), per_minute=RATE_LIMIT_PER_MINUTE)
    app.state.registry = SelectorRegistry(
        record_tool_factory(RECORD_TOOL_URL, RECORD_TOOL_TIMEOUT_S, SelectorConfig.from_env()),
        max_selectors=SELECTOR_REGISTRY_SIZE,
    )

    ok = await app.state.redis.ping()
    logger.info("redis ping ok=%s", ok)


@app.on_event("shutdown")
async def shutdown() -> None:
    app.state.registry.close()
    await app.state.redis.close()


@app.get("/health")
async def health() -> dict:
    return {"ok": True, "service": "flight_selector"}


def _user_key(req: Request, payload_session_id: Optional[str]) -> str:
    if payload_session_id:
        return f"sess:{payload_session_id}"
    client_host = req.client.host if req.client else "unknown"
    return f"ip:{client_host}"


async def _check_rate(req: Request, session_id: Optional[str], action: str) -> None:
    rl = await app.state.rate_limiter.check(user_key=_user_key(req, session_id), action=action)
    if not rl.allowed:
        raise HTTPException(
            status_code=429,
            detail={
                "error": "rate_limited",
                "limit_per_minute": rl.limit,
                "reset_in_seconds": rl.reset_in_seconds,
            },
        )


async def _selector(record_id: str) -> FlightSelector:
    return await app.state.registry.get(record_id)


def _drain_toasts(selector: FlightSelector) -> List[ToastOut]:
    drain = getattr(selector.notify, "drain", None)
    if drain is None:
        return []
    return [ToastOut(title=t.title, message=t.message, variant=t.variant) for t in drain()]


async def _action_out(selector: FlightSelector, result: AssignmentResult) -> ActionOut:
    if not result.accepted:
        raise HTTPException(
            status_code=409,
            detail={"error": "selector_busy", "message": result.error},
        )
    await selector.wait_idle()
    return ActionOut(
        accepted=True,
        ok=result.ok,
        action=result.action,
        error=result.error,
        view=selector.view(),
        toasts=_drain_toasts(selector),
    )


@app.get("/v1/trips/{record_id}/flight-selector", response_model=SelectorView)
async def get_view(record_id: str) -> SelectorView:
    selector = await _selector(record_id)
    return selector.view()


@app.post("/v1/trips/{record_id}/flight-selector/select", response_model=ActionOut)
async def select_flight(req: Request, record_id: str, body: SelectFlightIn) -> ActionOut:
    await _check_rate(req, body.session_id, "select_flight")
    selector = await _selector(record_id)
    result = await selector.select_flight(body.flight_id)
    return await _action_out(selector, result)


@app.post("/v1/trips/{record_id}/flight-selector/clear", response_model=ActionOut)
async def clear_flight(req: Request, record_id: str, body: Optional[ClearFlightIn] = None) -> ActionOut:
    await _check_rate(req, body.session_id if body else None, "clear_flight")
    selector = await _selector(record_id)
    result = await selector.clear_flight()
    return await _action_out(selector, result)


@app.post("/v1/trips/{record_id}/flight-selector/refresh", response_model=SelectorView)
async def refresh(req: Request, record_id: str, body: Optional[RefreshIn] = None) -> SelectorView:
    await _check_rate(req, body.session_id if body else None, "refresh")
    selector = await _selector(record_id)
    await selector.refresh()
    await selector.wait_idle()
    return selector.view()


@app.post("/v1/trips/{record_id}/flight-selector/navigate-to-ticket", response_model=NavigateOut)
async def navigate_to_ticket(record_id: str) -> NavigateOut:
    selector = await _selector(record_id)
    return NavigateOut(page=selector.navigate_to_ticket())


@app.get("/v1/trips/{record_id}/flight-selector/toasts", response_model=List[ToastOut])
async def toasts(record_id: str) -> List[ToastOut]:
    selector = await _selector(record_id)
    return _drain_toasts(selector)
