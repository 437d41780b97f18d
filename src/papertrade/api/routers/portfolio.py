"""Portfolio endpoints."""

from fastapi import APIRouter, Depends, HTTPException

from papertrade.api.deps import get_portfolio_session, get_valuation_service
from papertrade.api.schemas import PortfolioResponse, PortfolioSummaryResponse
from papertrade.services import PortfolioSession, ValuationService

router = APIRouter(prefix="/portfolios", tags=["portfolios"])


@router.post("/{user_id}", response_model=PortfolioResponse)
async def initialize_portfolio(
    user_id: str,
    session: PortfolioSession = Depends(get_portfolio_session),
):
    """Fetch or create the user's portfolio and start a session."""
    portfolio = await session.initialize_portfolio(user_id)
    return PortfolioResponse.from_domain(portfolio)


@router.get("/{user_id}", response_model=PortfolioResponse)
async def get_portfolio(
    user_id: str,
    session: PortfolioSession = Depends(get_portfolio_session),
):
    """Return the in-memory portfolio of an active session."""
    portfolio = session.get_portfolio(user_id)
    if portfolio is None:
        raise HTTPException(status_code=404, detail=f"No active session for {user_id}")
    return PortfolioResponse.from_domain(portfolio)


@router.get("/{user_id}/summary", response_model=PortfolioSummaryResponse)
async def get_summary(
    user_id: str,
    session: PortfolioSession = Depends(get_portfolio_session),
    valuation: ValuationService = Depends(get_valuation_service),
):
    """Mark the user's holdings to market."""
    portfolio = session.get_portfolio(user_id) or await session.initialize_portfolio(user_id)
    return PortfolioSummaryResponse.from_view(valuation.summarize(portfolio))
