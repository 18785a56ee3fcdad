"""Turn allocation records into executable orders"""

from typing import Iterable, Optional
import logging

from broker_connector_base import (
    AllocationRecord,
    BrokerClient,
    FetchError,
    InvalidTradeType,
    OrderRequest,
    OrderType,
    ProductType,
    TransactionType,
)


class OrderBuilder:
    """Build MARKET orders, or LIMIT orders priced from order book depth for thin symbols"""

    def __init__(self, broker: BrokerClient, exchange: str, limit_order_symbols: Iterable[str] = (),
                 depth_level: int = 4, product: str = ProductType.CNC,
                 logger: Optional[logging.Logger] = None):
        self.broker = broker
        self.exchange = exchange
        self.limit_order_symbols = frozenset(limit_order_symbols)
        self.depth_level = depth_level
        self.product = product
        self.logger = logger or logging.getLogger(__name__)

    def build_order(self, record: AllocationRecord, trade_type: str) -> OrderRequest:
        """
        Build a BUY or SELL order for an allocation record.

        Raises:
            InvalidTradeType: trade_type is neither BUY nor SELL
            ValueError: the record has no quantity for that side
            FetchError: order book depth could not be read for a LIMIT order
        """
        if trade_type not in (TransactionType.BUY, TransactionType.SELL):
            raise InvalidTradeType(f"Invalid trade type: {trade_type!r}")

        quantity = record.buy_quantity if trade_type == TransactionType.BUY else record.sell_quantity
        if quantity <= 0:
            raise ValueError(f"No {trade_type} quantity for {record.trading_symbol}")

        if record.trading_symbol in self.limit_order_symbols:
            price = self._depth_price(record, trade_type)
            self.logger.debug(f"{record.trading_symbol}: LIMIT {trade_type} {quantity} @ {price:.2f} "
                              f"(depth level {self.depth_level})")
            return OrderRequest(
                trading_symbol=record.trading_symbol,
                exchange=self.exchange,
                quantity=quantity,
                transaction_type=trade_type,
                order_type=OrderType.LIMIT,
                price=price,
                product=self.product,
            )

        return OrderRequest(
            trading_symbol=record.trading_symbol,
            exchange=self.exchange,
            quantity=quantity,
            transaction_type=trade_type,
            order_type=OrderType.MARKET,
            product=self.product,
        )

    def _depth_price(self, record: AllocationRecord, trade_type: str) -> float:
        """Price at the configured level of the opposite side: buys lift offers, sells hit bids"""
        depths = self.broker.get_quote_depth([record.quote_symbol])
        depth = depths.get(record.quote_symbol)
        if depth is None:
            raise FetchError(f"No order book depth returned for {record.quote_symbol}")

        side_name = 'sell' if trade_type == TransactionType.BUY else 'buy'
        levels = depth.sell if trade_type == TransactionType.BUY else depth.buy
        if len(levels) <= self.depth_level:
            raise FetchError(
                f"Order book for {record.quote_symbol} has {len(levels)} {side_name} levels, "
                f"level {self.depth_level} required"
            )
        # Kite pads empty book levels with price 0
        price = levels[self.depth_level].price
        if price <= 0:
            raise FetchError(
                f"Order book for {record.quote_symbol} has no {side_name} price at level {self.depth_level}"
            )
        return price
