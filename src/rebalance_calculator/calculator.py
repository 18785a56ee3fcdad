"""Buy quantities that lift every holding toward a common target value"""

from typing import Dict, Optional
import logging
import math
from broker_connector_base import AllocationRecord, AllocationResult
from .valuation import ValuationEngine


class TargetAllocator:
    """Calculate buy quantities needed to bring each holding up to the target value"""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def resolve_target_value(self, valuation: ValuationEngine, target_value: Optional[float] = None) -> float:
        """An explicit positive target is used as given, anything else falls back to the max current value"""
        if target_value is not None and target_value > 0:
            return float(target_value)
        max_current_value = valuation.max_current_value()
        self.logger.debug(f"No explicit target value, using max current value {max_current_value:,.2f}")
        return max_current_value

    def allocate(self, valuation: ValuationEngine, target_value: Optional[float] = None) -> AllocationResult:
        """
        Calculate allocation records for every eligible holding.
        Returns AllocationResult with records in holdings order and the total buy amount
        """
        max_current_value = valuation.max_current_value()
        target_value = self.resolve_target_value(valuation, target_value)

        records: Dict[str, AllocationRecord] = {}
        total_buy_amount = 0.0

        for symbol in valuation.symbols:
            if valuation.is_excluded(symbol):
                self.logger.debug(f"Skipping excluded symbol {symbol}")
                continue

            record = self._allocate_symbol(valuation, symbol, target_value)
            records[symbol] = record
            total_buy_amount += record.buy_amount

        return AllocationResult(
            records=records,
            total_buy_amount=total_buy_amount,
            target_value=target_value,
            max_current_value=max_current_value,
        )

    def _allocate_symbol(self, valuation: ValuationEngine, symbol: str, target_value: float) -> AllocationRecord:
        holding = valuation.holding(symbol)
        quote = valuation.price_quote(symbol)
        ltp = valuation.ltp(symbol)
        current_value = valuation.current_value(symbol)
        difference = target_value - current_value

        buy_quantity = self._buy_quantity(difference, ltp)
        buy_amount = buy_quantity * ltp

        instrument_token = quote.instrument_token if quote and quote.instrument_token is not None \
            else holding.instrument_token

        return AllocationRecord(
            trading_symbol=symbol,
            quote_symbol=valuation.quote_symbol(symbol),
            instrument_token=instrument_token,
            opening_quantity=holding.opening_quantity,
            holding_quantity=valuation.holding_quantity(symbol),
            ltp=ltp,
            current_value=current_value,
            difference=difference,
            buy_quantity=buy_quantity,
            buy_amount=buy_amount,
            proposed_value=current_value + buy_amount,
        )

    @staticmethod
    def _buy_quantity(difference: float, ltp: float) -> int:
        """Whole shares that fit in the gap; nothing without a positive gap and price"""
        if difference <= 0 or ltp <= 0:
            return 0
        return int(math.floor(difference / ltp))
