from abc import ABC, abstractmethod
from typing import Dict, List, Optional
from .models import (
    DayPosition,
    Holding,
    MarginInfo,
    OrderRequest,
    OrderResult,
    OrderVariety,
    PriceQuote,
    QuoteDepth,
)

class BrokerClient(ABC):
    """Abstract base class for broker API clients.

    All calls block until the broker answers; timeouts are the client's concern.
    """

    @abstractmethod
    def connect(self, access_token: Optional[str] = None) -> bool:
        """Establish a session with the broker"""
        pass

    @abstractmethod
    def disconnect(self):
        """Drop the broker session"""
        pass

    @abstractmethod
    def is_connected(self) -> bool:
        """Check if a broker session is established"""
        pass

    @abstractmethod
    def get_holdings(self) -> List[Holding]:
        """Get holdings with their opening quantities"""
        pass

    @abstractmethod
    def get_positions(self) -> List[DayPosition]:
        """Get same-day positions"""
        pass

    @abstractmethod
    def get_ltp(self, quote_symbols: List[str]) -> Dict[str, PriceQuote]:
        """Get last traded prices keyed by quote symbol"""
        pass

    @abstractmethod
    def get_quote_depth(self, quote_symbols: List[str]) -> Dict[str, QuoteDepth]:
        """Get order book depth keyed by quote symbol"""
        pass

    @abstractmethod
    def place_order(self, order: OrderRequest, variety: str = OrderVariety.REGULAR) -> OrderResult:
        """Place a single order"""
        pass

    @abstractmethod
    def get_margins(self, segment: Optional[str] = None) -> MarginInfo:
        """Get available funds for a margin segment"""
        pass
