"""Exchange-qualified quote symbols"""

from typing import Iterable, List


def quote_symbol(trading_symbol: str, exchange: str) -> str:
    """Address used for price and depth lookups, e.g. NSE:INFY"""
    return f"{exchange}:{trading_symbol}"


def quote_symbols(trading_symbols: Iterable[str], exchange: str) -> List[str]:
    return [quote_symbol(symbol, exchange) for symbol in trading_symbols]
