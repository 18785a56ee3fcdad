"""Merge opening holdings with same-day positions"""

from typing import Dict, List, Optional
import logging
from broker_connector_base import DayPosition, Holding


def day_position_deltas(day_positions: List[DayPosition]) -> Dict[str, int]:
    """Symbol -> net day quantity. A later position for the same symbol wins."""
    deltas = {}
    for position in day_positions:
        deltas[position.trading_symbol] = int(position.quantity)
    return deltas


def aggregate_holdings(holdings: List[Holding], day_positions: List[DayPosition],
                       logger: Optional[logging.Logger] = None) -> List[Holding]:
    """
    Return copies of holdings with holding_quantity = opening_quantity + day delta.

    Day positions without a matching holding are ignored.
    """
    logger = logger or logging.getLogger(__name__)
    deltas = day_position_deltas(day_positions)

    aggregated = []
    for holding in holdings:
        delta = deltas.get(holding.trading_symbol, 0)
        holding_quantity = holding.opening_quantity + delta
        if delta:
            logger.debug(f"{holding.trading_symbol}: {holding.opening_quantity} opening "
                         f"{delta:+d} today = {holding_quantity}")
        aggregated.append(holding.model_copy(update={
            'day_quantity': delta,
            'holding_quantity': holding_quantity,
        }))

    held = {holding.trading_symbol for holding in holdings}
    day_only = [symbol for symbol in deltas if symbol not in held]
    if day_only:
        logger.debug(f"Ignoring day positions without holdings: {', '.join(day_only)}")

    return aggregated
