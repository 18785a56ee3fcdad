"""Zerodha Kite Connect client for holdings, market data and order placement"""

import logging
from typing import Dict, List, Optional
from kiteconnect import KiteConnect

try:
    import broker_connector_base
    from broker_connector_base import (
        BrokerClient,
        BrokerConnectionError,
        ConfigurationError,
        DayPosition,
        DepthLevel,
        FetchError,
        Holding,
        MarginInfo,
        OrderExecutionError,
        OrderRequest,
        OrderResult,
        OrderVariety,
        PriceQuote,
        QuoteDepth,
        SessionInitError,
    )
    from app_config import AppConfig, get_config
except ImportError as e:
    raise ImportError(
        f"Failed to import required packages: {e}. "
        "Ensure broker-connector-base and app-config packages are installed."
    )

class KiteClient(BrokerClient):
    """Blocking Kite Connect client with one session per run"""

    REQUIRED_VALUES = {
        'api_key': 'Kite API key',
        'api_secret': 'Kite API secret',
        'exchange': 'Exchange key',
    }

    def __init__(self, config: Optional[AppConfig] = None, logger: Optional[logging.Logger] = None):
        self.config = config or get_config()
        self.logger = logger or logging.getLogger(__name__)
        self._validate()
        self.kite: Optional[KiteConnect] = None

        self.logger.info(
            f"Initializing KiteClient with broker-connector-base v{broker_connector_base.__version__}"
        )

    def _validate(self):
        """Fail fast when a required credential or setting is missing"""
        for key, name in self.REQUIRED_VALUES.items():
            value = getattr(self.config.kite, key, None)
            if not value or not str(value).strip():
                raise ConfigurationError(
                    f"Required configuration value '{name}' (kite.{key}) is missing or empty"
                )

    def connect(self, access_token: Optional[str] = None) -> bool:
        """Open a Kite session with an access token from the login flow"""
        if self.is_connected():
            return True

        token = access_token or self.config.kite.access_token
        if not token:
            raise SessionInitError("No access token available. Complete the Kite login flow first.")

        try:
            self.kite = KiteConnect(
                api_key=self.config.kite.api_key,
                access_token=token,
                timeout=self.config.kite.request_timeout_seconds,
            )
            profile = self.kite.profile()
        except Exception as e:
            self.kite = None
            self.logger.error(f"Kite session initialization failed: {e}")
            raise SessionInitError(f"Kite session initialization failed: {e}") from e

        self.logger.info(f"Kite session established for user {profile.get('user_id', 'unknown')}")
        return True

    def disconnect(self):
        """Forget the session; the access token itself stays valid for the day"""
        if self.kite is not None:
            self.kite = None
            self.logger.info("Disconnected from Kite")

    def is_connected(self) -> bool:
        return self.kite is not None

    def _session(self) -> KiteConnect:
        if self.kite is None:
            raise BrokerConnectionError("Kite session not initialized. Call connect() first.")
        return self.kite

    def get_holdings(self) -> List[Holding]:
        kite = self._session()
        try:
            raw_holdings = kite.holdings()
            holdings = [Holding.model_validate(raw) for raw in raw_holdings]
        except Exception as e:
            self.logger.error(f"Failed to fetch holdings: {e}")
            raise FetchError(f"Failed to fetch holdings: {e}") from e

        self.logger.info(f"Fetched {len(holdings)} holdings")
        return holdings

    def get_positions(self) -> List[DayPosition]:
        """Same-day positions (the 'day' book of the positions endpoint)"""
        kite = self._session()
        try:
            raw_positions = kite.positions()
            positions = [DayPosition.model_validate(raw) for raw in raw_positions.get('day', [])]
        except Exception as e:
            self.logger.error(f"Failed to fetch positions: {e}")
            raise FetchError(f"Failed to fetch positions: {e}") from e

        self.logger.info(f"Fetched {len(positions)} day positions")
        return positions

    def get_ltp(self, quote_symbols: List[str]) -> Dict[str, PriceQuote]:
        if not quote_symbols:
            return {}

        kite = self._session()
        try:
            raw_quotes = kite.ltp(quote_symbols)
            quotes = {
                key: PriceQuote(
                    quote_symbol=key,
                    last_price=float(raw.get('last_price') or 0.0),
                    instrument_token=raw.get('instrument_token'),
                )
                for key, raw in raw_quotes.items()
            }
        except Exception as e:
            self.logger.error(f"Failed to fetch LTP data: {e}")
            raise FetchError(f"Failed to fetch LTP data: {e}") from e

        missing = [symbol for symbol in quote_symbols if symbol not in quotes]
        if missing:
            self.logger.warning(f"No LTP returned for: {', '.join(missing)}")
        return quotes

    def get_quote_depth(self, quote_symbols: List[str]) -> Dict[str, QuoteDepth]:
        if not quote_symbols:
            return {}

        kite = self._session()
        try:
            raw_quotes = kite.quote(quote_symbols)
            depths = {}
            for key, raw in raw_quotes.items():
                depth = raw.get('depth') or {}
                depths[key] = QuoteDepth(
                    quote_symbol=key,
                    buy=[DepthLevel.model_validate(level) for level in depth.get('buy', [])],
                    sell=[DepthLevel.model_validate(level) for level in depth.get('sell', [])],
                )
        except Exception as e:
            self.logger.error(f"Failed to fetch quote depth: {e}")
            raise FetchError(f"Failed to fetch quote depth: {e}") from e

        return depths

    def place_order(self, order: OrderRequest, variety: str = OrderVariety.REGULAR) -> OrderResult:
        kite = self._session()
        try:
            order_id = kite.place_order(variety=variety, **order.to_kite_params())
        except Exception as e:
            self.logger.error(f"Error executing order {order.transaction_type} "
                              f"{order.quantity} {order.trading_symbol}: {e}")
            raise OrderExecutionError(str(e)) from e

        self.logger.info(f"Placed order {order_id}: {order.transaction_type} {order.quantity} "
                         f"{order.trading_symbol} ({order.order_type})")
        return OrderResult(order_id=str(order_id), symbol=order.trading_symbol, quantity=order.quantity)

    def get_margins(self, segment: Optional[str] = None) -> MarginInfo:
        segment = segment or 'equity'
        kite = self._session()
        try:
            raw = kite.margins(segment=segment)
        except Exception as e:
            self.logger.error(f"Failed to fetch {segment} margins: {e}")
            raise FetchError(f"Failed to fetch {segment} margins: {e}") from e

        available = raw.get('available') or {}
        utilised = raw.get('utilised') or {}
        return MarginInfo(
            segment=segment,
            enabled=bool(raw.get('enabled', True)),
            net=float(raw.get('net') or 0.0),
            available_cash=float(available.get('live_balance', available.get('cash')) or 0.0),
            utilised_debits=float(utilised.get('debits') or 0.0),
        )
