"""Dependency injection for FastAPI."""

from fastapi import Depends, Request

from papertrade.app_context import AppContext
from papertrade.services import PortfolioSession, SyncCoordinator, ValuationService


def get_context(request: Request) -> AppContext:
    """Provide the AppContext bound to the running application."""
    return request.app.state.context


def get_portfolio_session(context: AppContext = Depends(get_context)) -> PortfolioSession:
    """Provide the PortfolioSession instance."""
    return context.session


def get_sync_coordinator(context: AppContext = Depends(get_context)) -> SyncCoordinator:
    """Provide the SyncCoordinator instance."""
    return context.sync


def get_valuation_service(context: AppContext = Depends(get_context)) -> ValuationService:
    """Provide the ValuationService instance."""
    return context.valuation
