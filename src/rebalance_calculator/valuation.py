"""Value holdings at their last traded price"""

from typing import Dict, Iterable, List, Optional
import logging
from broker_connector_base import Holding, PriceQuote
from .quotes import quote_symbol


class ValuationEngine:
    """Current value of each aggregated holding at the last traded price"""

    def __init__(self, holdings: List[Holding], quotes: Dict[str, PriceQuote], exchange: str,
                 excluded_symbols: Iterable[str] = (), logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
        self.exchange = exchange
        self.excluded_symbols = frozenset(excluded_symbols)
        self.quotes = quotes
        self.holdings = {holding.trading_symbol: holding for holding in holdings}
        self._missing_logged = set()

    @property
    def symbols(self) -> List[str]:
        """Trading symbols in holdings order"""
        return list(self.holdings)

    def is_excluded(self, symbol: str) -> bool:
        return symbol in self.excluded_symbols

    def eligible_symbols(self) -> List[str]:
        return [symbol for symbol in self.holdings if not self.is_excluded(symbol)]

    def holding(self, symbol: str) -> Holding:
        return self.holdings[symbol]

    def quote_symbol(self, symbol: str) -> str:
        return quote_symbol(symbol, self.exchange)

    def price_quote(self, symbol: str) -> Optional[PriceQuote]:
        return self.quotes.get(self.quote_symbol(symbol))

    def ltp(self, symbol: str) -> float:
        """Last traded price, 0.0 when the broker returned no quote for the symbol"""
        quote = self.price_quote(symbol)
        if quote is None:
            if symbol not in self._missing_logged:
                self._missing_logged.add(symbol)
                self.logger.warning(f"No price quote for {self.quote_symbol(symbol)}, valuing at 0.00")
            return 0.0
        return float(quote.last_price)

    def holding_quantity(self, symbol: str) -> int:
        holding = self.holdings[symbol]
        if holding.holding_quantity is None:
            return int(holding.opening_quantity)
        return int(holding.holding_quantity)

    def current_value(self, symbol: str) -> float:
        """holding quantity x last traded price"""
        return float(self.holding_quantity(symbol) * self.ltp(symbol))

    def max_current_value(self) -> float:
        """Largest current value among eligible holdings, 0.0 if there are none"""
        max_value = 0.0
        for symbol in self.eligible_symbols():
            max_value = max(max_value, self.current_value(symbol))
        return max_value
