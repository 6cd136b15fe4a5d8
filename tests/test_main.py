import pytest

import main

CREDENTIAL_VARS = ["BINANCE_API_KEY", "BINANCE_API_SECRET"]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    # load_dotenv writes os.environ directly; register the names so teardown removes them
    for name in CREDENTIAL_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


def test_credentials_default_from_dotenv(tmp_path, monkeypatch):
    (tmp_path / ".env").write_text("BINANCE_API_KEY=from-dotenv\nBINANCE_API_SECRET=secret-from-dotenv\n")
    monkeypatch.chdir(tmp_path)

    args = main.parse_arguments([])

    assert args.api_key == "from-dotenv"
    assert args.api_secret == "secret-from-dotenv"


def test_process_environment_wins_over_dotenv(tmp_path, monkeypatch):
    (tmp_path / ".env").write_text("BINANCE_API_KEY=from-dotenv\n")
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("BINANCE_API_KEY", "from-shell")

    assert main.parse_arguments([]).api_key == "from-shell"


def test_command_line_wins_over_environment(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("BINANCE_API_KEY", "from-shell")

    args = main.parse_arguments(["--api-key", "from-cli", "--mode", "prices"])

    assert args.api_key == "from-cli"
    assert args.mode == "prices"


def test_no_credentials_anywhere(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    args = main.parse_arguments([])
    assert (args.api_key, args.api_secret) == ("", "")
    assert args.mode == "portfolio"
