"""Trade and transaction history endpoints."""

from fastapi import APIRouter, Depends

from papertrade.api.deps import get_portfolio_session
from papertrade.api.schemas import TradeRequest, TransactionListResponse, TransactionResponse
from papertrade.services import PortfolioSession

router = APIRouter(prefix="/portfolios/{user_id}", tags=["transactions"])


@router.post("/trades", response_model=TransactionResponse, status_code=201)
async def execute_trade(
    user_id: str,
    request: TradeRequest,
    session: PortfolioSession = Depends(get_portfolio_session),
):
    """
    Execute a market-fill trade.

    Returns the recorded transaction; ``sync_pending`` is true when it is
    queued locally for a later sync. Ledger rejections are 400 responses.
    """
    transaction = await session.execute_trade(
        user_id=user_id,
        symbol=request.symbol,
        side=request.side,
        shares=request.shares,
        price=request.price,
    )
    return TransactionResponse.from_domain(transaction)


@router.get("/transactions", response_model=TransactionListResponse)
async def list_transactions(
    user_id: str,
    session: PortfolioSession = Depends(get_portfolio_session),
):
    """Transaction history (remote plus locally pending), newest first."""
    transactions = await session.get_transaction_history(user_id)
    return TransactionListResponse(
        items=[TransactionResponse.from_domain(t) for t in transactions],
        pending=sum(1 for t in transactions if t.sync_pending),
    )
