"""Endpoints that keep the request/response contract of the former edge functions.

``gemini-chat`` always answers 200; failures are reported as ``{"error": ...}``
so the chat widget can show them inline.
"""

from typing import Any

from fastapi import APIRouter, Depends, Request
from loguru import logger
from pydantic import ValidationError
from sqlmodel import Session

from src.farmconnect.api.http.deps import (
    get_chat_service,
    get_db_session,
    get_market_price_service,
)
from src.farmconnect.api.http.middleware.limiter import rate_limit
from src.farmconnect.core.services import ChatService, MarketPriceService
from src.farmconnect.core.services.assistant import ChatError, ChatRequest
from src.farmconnect.core.services.market import MarketSnapshot
from src.farmconnect.runtime.context import get_config

router = APIRouter(prefix="/functions", tags=["functions"])


@router.post(
    "/gemini-chat",
    dependencies=[Depends(rate_limit(requests=get_config().llm.rate_limit_requests))],
)
async def gemini_chat(
    request: Request,
    chat: ChatService = Depends(get_chat_service),
) -> dict[str, Any]:
    """Body: ``{"messages": [{"role", "content"}], "apiKey"?}``.

    Malformed bodies are answered with ``{"error": ...}`` like other chat failures.
    """
    try:
        body = ChatRequest.model_validate_json(await request.body())
    except ValidationError as e:
        logger.warning("Rejected chat request body: {}", e.errors(include_url=False))
        return {"error": "Invalid request body"}

    try:
        reply = await chat.reply(body.messages, api_key=body.api_key)
    except ChatError as e:
        logger.warning("Chat request failed: {}", e)
        return {"error": str(e)}
    return {"reply": reply}


@router.post("/market-prices", response_model=MarketSnapshot)
async def market_prices(
    session: Session = Depends(get_db_session),
    market: MarketPriceService = Depends(get_market_price_service),
) -> MarketSnapshot:
    return await market.get_prices(session)
