import pytest

from app_config import AppConfig, get_config, load_config, reset_config


@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    for name in ("KITE_API_KEY", "KITE_API_SECRET", "KITE_ACCESS_TOKEN", "KITE_EXCHANGE"):
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


def _write(tmp_path, text):
    path = tmp_path / "config.yaml"
    path.write_text(text)
    return path


class TestLoadConfig:

    def test_load_from_yaml(self, tmp_path):
        path = _write(tmp_path, """
kite:
  api_key: abc
  api_secret: xyz
  exchange: bse
rebalance:
  excluded_symbols: [LIQUIDBEES]
  limit_order_symbols: []
  limit_depth_level: 2
logging:
  level: debug
  format: json
""")
        config = load_config(path)

        assert config.kite.api_key == "abc"
        assert config.kite.exchange == "BSE"
        assert config.rebalance.excluded_symbols == ["LIQUIDBEES"]
        assert config.rebalance.limit_order_symbols == []
        assert config.rebalance.limit_depth_level == 2
        assert config.logging.level == "DEBUG"
        assert config.logging.format == "json"
        assert get_config() is config

    def test_defaults(self):
        config = AppConfig()

        assert config.kite.exchange == "NSE"
        assert config.kite.product == "CNC"
        assert config.kite.order_variety == "regular"
        assert config.rebalance.excluded_symbols == ["SETFNIF50", "NIFTYBEES", "LIQUIDBEES"]
        assert config.rebalance.limit_order_symbols == ["FMCGIETF", "HDFCSENSEX"]
        assert config.rebalance.limit_depth_level == 4
        assert config.rebalance.benchmark_symbol == "NIFTY 50"

    def test_environment_overrides_file(self, tmp_path, monkeypatch):
        path = _write(tmp_path, "kite:\n  api_key: from-file\n  api_secret: from-file\n")
        monkeypatch.setenv("KITE_API_KEY", "from-env")
        monkeypatch.setenv("KITE_ACCESS_TOKEN", "token-from-env")

        config = load_config(path)

        assert config.kite.api_key == "from-env"
        assert config.kite.api_secret == "from-file"
        assert config.kite.access_token == "token-from-env"

    def test_no_file_uses_defaults_and_environment(self, monkeypatch):
        monkeypatch.setenv("KITE_EXCHANGE", "bse")
        config = load_config()
        assert config.kite.exchange == "BSE"
        assert config.kite.api_key == ""

    def test_empty_file(self, tmp_path):
        assert load_config(_write(tmp_path, "")) == AppConfig()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "absent.yaml")

    def test_non_mapping_yaml(self, tmp_path):
        with pytest.raises(ValueError, match="expected a mapping"):
            load_config(_write(tmp_path, "- just\n- a list\n"))

    @pytest.mark.parametrize("text", [
        "rebalance:\n  limit_depth_level: 5\n",
        "kite:\n  product: MIS\n",
        "logging:\n  format: xml\n",
    ])
    def test_invalid_values(self, tmp_path, text):
        with pytest.raises(ValueError, match="Invalid configuration"):
            load_config(_write(tmp_path, text))

    def test_get_config_before_load(self):
        with pytest.raises(RuntimeError):
            get_config()
