from .calculator import TargetAllocator
from .holdings import aggregate_holdings, day_position_deltas
from .quotes import quote_symbol, quote_symbols
from .valuation import ValuationEngine
from broker_connector_base import AllocationRecord, AllocationResult, Holding, DayPosition, PriceQuote

__version__ = "1.0.0"

__all__ = [
    "TargetAllocator",
    "ValuationEngine",
    "aggregate_holdings",
    "day_position_deltas",
    "quote_symbol",
    "quote_symbols",
    "AllocationRecord",
    "AllocationResult",
    "Holding",
    "DayPosition",
    "PriceQuote",
    "__version__",
]
