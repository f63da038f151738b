import pytest
from scriptscan.config import Config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Ignore any local .env and inherited settings."""
    monkeypatch.setattr("scriptscan.config.load_dotenv", lambda **_: None)
    list(map(
        lambda name: monkeypatch.delenv(name, raising=False),
        [
            "LOG_LEVEL",
            "OPENAI_API_KEY",
            "DEFAULT_LANGUAGE",
            "REQUEST_TIMEOUT",
            "DATA_DIR",
            "HISTORY_MAX_ENTRIES",
        ],
    ))
    monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "bot123:ABC")
    monkeypatch.setenv("ALLOWED_CHAT_ID", "987654321")


def test_config_from_env_success():
    config = Config.from_env()

    assert config.telegram_bot_token == "bot123:ABC"
    assert config.allowed_chat_id == "987654321"


def test_config_missing_token_fails(monkeypatch):
    monkeypatch.delenv("TELEGRAM_BOT_TOKEN", raising=False)

    with pytest.raises(ValueError, match="TELEGRAM_BOT_TOKEN"):
        Config.from_env()


def test_config_missing_chat_id_fails(monkeypatch):
    monkeypatch.setenv("ALLOWED_CHAT_ID", "")

    with pytest.raises(ValueError, match="ALLOWED_CHAT_ID"):
        Config.from_env()


def test_config_immutable():
    config = Config.from_env()

    with pytest.raises(Exception):
        config.openai_api_key = "other"


def test_config_defaults():
    config = Config.from_env()

    assert config.log_level == "INFO"
    assert config.openai_api_key is None
    assert config.default_language == "english"
    assert config.request_timeout is None
    assert config.data_dir == ".scriptscan"
    assert config.history_max_entries == 20


def test_config_reads_optional_fields(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test123")
    monkeypatch.setenv("DEFAULT_LANGUAGE", "Hindi")
    monkeypatch.setenv("REQUEST_TIMEOUT", "45")
    monkeypatch.setenv("DATA_DIR", "/var/lib/scriptscan")
    monkeypatch.setenv("HISTORY_MAX_ENTRIES", "5")

    config = Config.from_env()

    assert config.openai_api_key == "sk-test123"
    assert config.default_language == "hindi"
    assert config.request_timeout == 45.0
    assert config.data_dir == "/var/lib/scriptscan"
    assert config.history_max_entries == 5


def test_config_unknown_language_falls_back_to_english(monkeypatch):
    monkeypatch.setenv("DEFAULT_LANGUAGE", "klingon")
    assert Config.from_env().default_language == "english"


def test_config_blank_openai_key_becomes_none(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "")
    assert Config.from_env().openai_api_key is None


def test_config_blank_timeout_means_no_timeout(monkeypatch):
    monkeypatch.setenv("REQUEST_TIMEOUT", "  ")
    assert Config.from_env().request_timeout is None


@pytest.mark.parametrize("value", ["0", "-3"])
def test_config_rejects_non_positive_timeout(monkeypatch, value):
    monkeypatch.setenv("REQUEST_TIMEOUT", value)
    with pytest.raises(ValueError, match="REQUEST_TIMEOUT"):
        Config.from_env()


def test_config_rejects_non_numeric_timeout(monkeypatch):
    monkeypatch.setenv("REQUEST_TIMEOUT", "soon")
    with pytest.raises(ValueError):
        Config.from_env()


def test_config_rejects_zero_history(monkeypatch):
    monkeypatch.setenv("HISTORY_MAX_ENTRIES", "0")
    with pytest.raises(ValueError, match="HISTORY_MAX_ENTRIES"):
        Config.from_env()
