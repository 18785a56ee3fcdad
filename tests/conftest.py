"""
Pytest configuration and shared fixtures for the Kite rebalancer tests.
"""
import pytest
from typing import Dict, List, Optional

from app_config import AppConfig, KiteConfig, RebalanceConfig
from broker_connector_base import (
    BrokerClient,
    DayPosition,
    DepthLevel,
    Holding,
    MarginInfo,
    OrderExecutionError,
    OrderRequest,
    OrderResult,
    OrderVariety,
    PriceQuote,
    QuoteDepth,
)


class FakeBroker(BrokerClient):
    """In-memory broker that records every call"""

    def __init__(self, holdings=None, day_positions=None, prices=None, depths=None,
                 available_cash: float = 1_000_000.0, failing_symbols=(), fetch_error=None):
        self.holdings = holdings or []
        self.day_positions = day_positions or []
        self.prices: Dict[str, float] = prices or {}
        self.depths: Dict[str, QuoteDepth] = depths or {}
        self.available_cash = available_cash
        self.failing_symbols = set(failing_symbols)
        self.fetch_error = fetch_error
        self.ltp_requests: List[List[str]] = []
        self.depth_requests: List[List[str]] = []
        self.placed: List[tuple] = []
        self.connected = True

    def connect(self, access_token: Optional[str] = None) -> bool:
        self.connected = True
        return True

    def disconnect(self):
        self.connected = False

    def is_connected(self) -> bool:
        return self.connected

    def get_holdings(self) -> List[Holding]:
        if self.fetch_error is not None:
            raise self.fetch_error
        return list(self.holdings)

    def get_positions(self) -> List[DayPosition]:
        return list(self.day_positions)

    def get_ltp(self, quote_symbols: List[str]) -> Dict[str, PriceQuote]:
        self.ltp_requests.append(list(quote_symbols))
        return {
            key: PriceQuote(quote_symbol=key, last_price=self.prices[key], instrument_token=index + 1000)
            for index, key in enumerate(quote_symbols)
            if key in self.prices
        }

    def get_quote_depth(self, quote_symbols: List[str]) -> Dict[str, QuoteDepth]:
        self.depth_requests.append(list(quote_symbols))
        return {key: self.depths[key] for key in quote_symbols if key in self.depths}

    def place_order(self, order: OrderRequest, variety: str = OrderVariety.REGULAR) -> OrderResult:
        self.placed.append((variety, order))
        if order.trading_symbol in self.failing_symbols:
            raise OrderExecutionError(f"Insufficient funds for {order.trading_symbol}")
        return OrderResult(order_id=f"OID-{len(self.placed)}", symbol=order.trading_symbol,
                           quantity=order.quantity)

    def get_margins(self, segment: Optional[str] = None) -> MarginInfo:
        return MarginInfo(segment=segment or 'equity', available_cash=self.available_cash)


def make_depth(quote_symbol: str, buy_prices, sell_prices) -> QuoteDepth:
    return QuoteDepth(
        quote_symbol=quote_symbol,
        buy=[DepthLevel(price=price, quantity=10, orders=1) for price in buy_prices],
        sell=[DepthLevel(price=price, quantity=10, orders=1) for price in sell_prices],
    )


@pytest.fixture
def test_config():
    """Test settings configuration."""
    return AppConfig(
        kite=KiteConfig(api_key="test_key", api_secret="test_secret", exchange="NSE"),
        rebalance=RebalanceConfig(benchmark_symbol=None),
    )


@pytest.fixture
def example_broker():
    """A: 10 held at 100.00; B: 5 held plus 5 bought today at 300.00"""
    return FakeBroker(
        holdings=[
            Holding(trading_symbol="A", opening_quantity=10, instrument_token=1),
            Holding(trading_symbol="B", opening_quantity=5, instrument_token=2),
        ],
        day_positions=[DayPosition(trading_symbol="B", quantity=5)],
        prices={"NSE:A": 100.0, "NSE:B": 300.0},
    )
