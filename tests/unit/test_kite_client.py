import pytest
from unittest.mock import MagicMock, patch

from app_config import AppConfig, KiteConfig
from broker_connector_base import (
    BrokerConnectionError,
    ConfigurationError,
    FetchError,
    OrderExecutionError,
    OrderRequest,
    SessionInitError,
)
from kite_connector import KiteClient, KiteRebalancer


@pytest.fixture
def mock_kite():
    """Patched KiteConnect SDK instance"""
    with patch("kite_connector.client.KiteConnect") as kite_cls:
        kite = MagicMock()
        kite.profile.return_value = {"user_id": "AB1234"}
        kite_cls.return_value = kite
        yield kite_cls, kite


@pytest.fixture
def client(test_config, mock_kite):
    kite_client = KiteClient(config=test_config)
    kite_client.connect("access-token")
    return kite_client


class TestKiteClientSetup:

    @pytest.mark.parametrize("field", ["api_key", "api_secret", "exchange"])
    def test_missing_required_value(self, field):
        values = {"api_key": "k", "api_secret": "s", "exchange": "NSE"}
        values[field] = ""
        with pytest.raises(ConfigurationError):
            KiteClient(config=AppConfig(kite=KiteConfig(**values)))

    def test_connect_creates_session_with_token(self, test_config, mock_kite):
        kite_cls, kite = mock_kite
        kite_client = KiteClient(config=test_config)

        assert kite_client.connect("access-token") is True

        kite_cls.assert_called_once_with(api_key="test_key", access_token="access-token", timeout=7)
        kite.profile.assert_called_once()
        assert kite_client.is_connected()

    def test_connect_without_token(self, test_config, mock_kite):
        with pytest.raises(SessionInitError):
            KiteClient(config=test_config).connect()

    def test_connect_uses_configured_token(self, mock_kite):
        kite_cls, _ = mock_kite
        config = AppConfig(kite=KiteConfig(api_key="k", api_secret="s", access_token="from-config"))

        KiteClient(config=config).connect()

        assert kite_cls.call_args.kwargs["access_token"] == "from-config"

    def test_rejected_token_is_session_init_error(self, test_config, mock_kite):
        _, kite = mock_kite
        kite.profile.side_effect = Exception("Incorrect `api_key` or `access_token`.")
        kite_client = KiteClient(config=test_config)

        with pytest.raises(SessionInitError):
            kite_client.connect("bad-token")
        assert not kite_client.is_connected()

    def test_calls_require_session(self, test_config, mock_kite):
        with pytest.raises(BrokerConnectionError):
            KiteClient(config=test_config).get_holdings()

    def test_disconnect(self, client):
        client.disconnect()
        assert not client.is_connected()


class TestKiteClientData:

    def test_get_holdings(self, client, mock_kite):
        _, kite = mock_kite
        kite.holdings.return_value = [
            {"tradingsymbol": "INFY", "exchange": "NSE", "instrument_token": 408065,
             "opening_quantity": 10, "quantity": 10, "last_price": 1500.0, "t1_quantity": 0},
        ]

        holdings = client.get_holdings()

        assert len(holdings) == 1
        assert holdings[0].trading_symbol == "INFY"
        assert holdings[0].opening_quantity == 10
        assert holdings[0].instrument_token == 408065

    def test_get_positions_reads_day_book(self, client, mock_kite):
        _, kite = mock_kite
        kite.positions.return_value = {
            "net": [{"tradingsymbol": "INFY", "quantity": 99}],
            "day": [{"tradingsymbol": "INFY", "quantity": 3}],
        }

        positions = client.get_positions()

        assert [(p.trading_symbol, p.quantity) for p in positions] == [("INFY", 3)]

    def test_get_ltp(self, client, mock_kite):
        _, kite = mock_kite
        kite.ltp.return_value = {"NSE:INFY": {"instrument_token": 408065, "last_price": 1510.25}}

        quotes = client.get_ltp(["NSE:INFY", "NSE:MISSING"])

        kite.ltp.assert_called_once_with(["NSE:INFY", "NSE:MISSING"])
        assert quotes["NSE:INFY"].last_price == 1510.25
        assert "NSE:MISSING" not in quotes

    def test_get_ltp_with_no_symbols_skips_request(self, client, mock_kite):
        _, kite = mock_kite
        assert client.get_ltp([]) == {}
        kite.ltp.assert_not_called()

    def test_get_quote_depth(self, client, mock_kite):
        _, kite = mock_kite
        kite.quote.return_value = {
            "NSE:FMCGIETF": {
                "last_price": 60.0,
                "depth": {
                    "buy": [{"price": 59.9 - i / 10, "quantity": 10, "orders": 1} for i in range(5)],
                    "sell": [{"price": 60.0 + i / 10, "quantity": 10, "orders": 1} for i in range(5)],
                },
            }
        }

        depth = client.get_quote_depth(["NSE:FMCGIETF"])["NSE:FMCGIETF"]

        assert len(depth.buy) == 5
        assert depth.sell[4].price == pytest.approx(60.4)

    @pytest.mark.parametrize("method, args", [
        ("holdings", ()),
        ("positions", ()),
        ("ltp", (["NSE:INFY"],)),
        ("quote", (["NSE:INFY"],)),
    ])
    def test_fetch_failures_raise_fetch_error(self, client, mock_kite, method, args):
        _, kite = mock_kite
        getattr(kite, method).side_effect = Exception("Gateway timeout")
        client_method = {
            "holdings": client.get_holdings,
            "positions": client.get_positions,
            "ltp": client.get_ltp,
            "quote": client.get_quote_depth,
        }[method]

        with pytest.raises(FetchError):
            client_method(*args)

    def test_get_margins(self, client, mock_kite):
        _, kite = mock_kite
        kite.margins.return_value = {
            "enabled": True,
            "net": 15000.5,
            "available": {"cash": 20000.0, "live_balance": 15000.5},
            "utilised": {"debits": 4999.5},
        }

        margins = client.get_margins()

        kite.margins.assert_called_once_with(segment="equity")
        assert margins.available_cash == 15000.5
        assert margins.utilised_debits == 4999.5


class TestKiteClientThinBook:

    @pytest.fixture
    def thin_book_kite(self, client, mock_kite):
        _, kite = mock_kite
        kite.holdings.return_value = [
            {"tradingsymbol": "FMCGIETF", "exchange": "NSE", "opening_quantity": 10, "last_price": 60.0},
            {"tradingsymbol": "B", "exchange": "NSE", "opening_quantity": 10, "last_price": 120.0},
        ]
        kite.positions.return_value = {"net": [], "day": []}
        kite.ltp.return_value = {
            "NSE:FMCGIETF": {"instrument_token": 1, "last_price": 60.0},
            "NSE:B": {"instrument_token": 2, "last_price": 120.0},
        }
        # quote() always returns five levels per side, padding empty ones with zeros
        kite.quote.return_value = {
            "NSE:FMCGIETF": {
                "last_price": 60.0,
                "depth": {
                    "buy": [{"price": 59.9, "quantity": 5, "orders": 1}]
                           + [{"price": 0, "quantity": 0, "orders": 0}] * 4,
                    "sell": [{"price": 60.1, "quantity": 5, "orders": 1},
                             {"price": 60.2, "quantity": 5, "orders": 1}]
                            + [{"price": 0, "quantity": 0, "orders": 0}] * 3,
                },
            }
        }
        return client

    def test_zero_padded_depth_never_becomes_a_zero_limit_price(self, thin_book_kite, test_config):
        rebalancer = KiteRebalancer(thin_book_kite, config=test_config)
        snapshot = rebalancer.fetch_portfolio()

        with pytest.raises(FetchError, match="NSE:FMCGIETF"):
            rebalancer.plan_rebalance(snapshot)

    def test_zero_padded_depth_fails_the_preview(self, thin_book_kite, test_config, mock_kite):
        _, kite = mock_kite

        result = KiteRebalancer(thin_book_kite, config=test_config).calculate_rebalance()

        assert not result.success
        assert result.plan is None
        kite.place_order.assert_not_called()


class TestKiteClientOrders:

    def test_place_order(self, client, mock_kite):
        _, kite = mock_kite
        kite.place_order.return_value = "250101000000001"
        order = OrderRequest(trading_symbol="INFY", exchange="NSE", quantity=20, transaction_type="BUY")

        result = client.place_order(order)

        kite.place_order.assert_called_once_with(
            variety="regular",
            tradingsymbol="INFY",
            exchange="NSE",
            quantity=20,
            transaction_type="BUY",
            order_type="MARKET",
            product="CNC",
        )
        assert result.order_id == "250101000000001"
        assert result.symbol == "INFY"
        assert result.quantity == 20

    def test_place_order_failure(self, client, mock_kite):
        _, kite = mock_kite
        kite.place_order.side_effect = Exception("Insufficient funds")
        order = OrderRequest(trading_symbol="INFY", exchange="NSE", quantity=20, transaction_type="BUY")

        with pytest.raises(OrderExecutionError, match="Insufficient funds"):
            client.place_order(order)
