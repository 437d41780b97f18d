"""External collaborator providers."""

from papertrade.providers.auth_provider import AuthCallback, AuthProvider
from papertrade.providers.connectivity import ConnectivityCallback, ConnectivityObserver
from papertrade.providers.market_data_provider import MarketDataProvider
from papertrade.providers.stub_provider import StubMarketDataProvider

__all__ = [
    "AuthCallback",
    "AuthProvider",
    "ConnectivityCallback",
    "ConnectivityObserver",
    "MarketDataProvider",
    "StubMarketDataProvider",
]
