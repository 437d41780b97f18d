"""View models package."""

from papertrade.domain.views.portfolio import Quote, HoldingValuation, PortfolioSummary

__all__ = [
    "Quote",
    "HoldingValuation",
    "PortfolioSummary",
]
