import json

import pytest

from config.settings import TrackerConfig, create_config, load_config_file, validate_config

ENV_VARS = [
    "BINANCE_API_URL", "CREDENTIALS_PATH", "LOG_LEVEL", "REQUEST_TIMEOUT",
    "REFRESH_INTERVAL", "DUST_THRESHOLD", "RECV_WINDOW",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    config = TrackerConfig()
    assert config.api_base_url == "https://api.binance.com"
    assert config.refresh_interval == 30
    assert config.quote_asset == "USDT"
    assert config.dust_threshold == 1.0
    assert config.top_coin_symbols == ["BTCUSDT", "ETHUSDT", "SOLUSDT", "XRPUSDT", "BNBUSDT"]
    assert config.validate()


def test_env_overrides_file(tmp_path, monkeypatch):
    path = tmp_path / "tracker.json"
    path.write_text(json.dumps({"api_base_url": "https://file.example", "refresh_interval": 60}))
    monkeypatch.setenv("BINANCE_API_URL", "http://localhost:3000/binance-api")
    monkeypatch.setenv("DUST_THRESHOLD", "0.5")

    config = create_config(config_path=str(path))

    assert config.api_base_url == "http://localhost:3000/binance-api"
    assert config.refresh_interval == 60
    assert config.dust_threshold == 0.5


def test_explicit_overrides_win(monkeypatch):
    monkeypatch.setenv("REFRESH_INTERVAL", "45")
    assert create_config(refresh_interval=5).refresh_interval == 5
    assert create_config(refresh_interval=None).refresh_interval == 45


def test_zero_from_env_is_kept(monkeypatch):
    monkeypatch.setenv("DUST_THRESHOLD", "0")
    monkeypatch.setenv("RECV_WINDOW", "5000")
    config = create_config()
    assert config.dust_threshold == 0.0
    assert config.recv_window == 5000
    assert config.validate()


def test_empty_env_values_are_ignored(monkeypatch):
    monkeypatch.setenv("BINANCE_API_URL", "")
    assert create_config().api_base_url == "https://api.binance.com"


def test_dotenv_in_working_directory_is_loaded(tmp_path, monkeypatch):
    # load_dotenv writes os.environ directly; register the name so teardown removes it
    monkeypatch.setenv("REFRESH_INTERVAL", "")
    monkeypatch.delenv("REFRESH_INTERVAL")
    (tmp_path / ".env").write_text("REFRESH_INTERVAL=90\n")
    monkeypatch.chdir(tmp_path)

    assert create_config().refresh_interval == 90


def test_unknown_file_keys_are_dropped(tmp_path):
    path = tmp_path / "tracker.json"
    path.write_text(json.dumps({"refresh_interval": 15, "no_such_option": True}))
    assert create_config(config_path=str(path)).refresh_interval == 15


def test_missing_or_broken_config_file(tmp_path):
    assert load_config_file(str(tmp_path / "missing.json")) == {}
    broken = tmp_path / "broken.json"
    broken.write_text("{not json")
    assert load_config_file(str(broken)) == {}


@pytest.mark.parametrize("kwargs", [
    {"api_base_url": ""},
    {"api_base_url": "ftp://example.com"},
    {"request_timeout": 0},
    {"refresh_interval": 0},
    {"dust_threshold": -1},
    {"recv_window": 70000},
])
def test_invalid_configs(kwargs):
    assert not TrackerConfig(**kwargs).validate()


def test_validate_strips_trailing_slash():
    config = TrackerConfig(api_base_url="https://api.binance.com/")
    assert validate_config(config)
    assert config.api_base_url == "https://api.binance.com"


def test_save_round_trip(tmp_path):
    path = tmp_path / "out.json"
    TrackerConfig(refresh_interval=12).save(str(path))
    assert load_config_file(str(path))["refresh_interval"] == 12
