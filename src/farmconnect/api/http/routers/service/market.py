"""Commodity market price endpoints."""

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from src.farmconnect.api.http.deps import get_db_session, get_market_price_service
from src.farmconnect.core.services import MarketPriceService
from src.farmconnect.core.services.market import CategoryAverage, MarketSnapshot
from src.farmconnect.entities.service.market import MarketplaceItem

router = APIRouter(prefix="/market", tags=["market"])


@router.get("/live", response_model=MarketSnapshot)
async def live_prices(
    session: Session = Depends(get_db_session),
    market: MarketPriceService = Depends(get_market_price_service),
) -> MarketSnapshot:
    """Fresh prices, or the best fallback when the provider is unavailable."""
    return await market.get_prices(session)


@router.get("/stored", response_model=list[MarketplaceItem])
def stored_prices(
    limit: int | None = Query(default=None, ge=1, le=500),
    session: Session = Depends(get_db_session),
    market: MarketPriceService = Depends(get_market_price_service),
) -> list[MarketplaceItem]:
    return market.stored(session, limit)


@router.get("/summary", response_model=list[CategoryAverage])
async def price_summary(
    session: Session = Depends(get_db_session),
    market: MarketPriceService = Depends(get_market_price_service),
) -> list[CategoryAverage]:
    """Average modal price per commodity category."""
    return await market.summary(session)
