from __future__ import annotations

from luminance_connector.config import Settings, get_settings


def test_defaults():
    s = Settings()
    assert s.LUMINANCE_BASE_URL == ""
    assert s.LUMINANCE_TOKEN_URL is None
    assert s.DEFAULT_CURRENCY == "USD"
    assert s.MATTER_NAME_PREFIX is None
    assert s.TAG_FILTER_FIELD == "name"
    assert s.TAG_FILTER == "sf_"
    assert s.HTTP_TIMEOUT == 30


def test_base_url_derived_from_token_url():
    s = Settings(LUMINANCE_TOKEN_URL="https://acme.app.luminance.com/auth/oauth2/token")
    assert s.LUMINANCE_BASE_URL == "https://acme.app.luminance.com/api2"
    s = Settings(LUMINANCE_TOKEN_URL="https://acme.app.luminance.com/auth/oauth2/token/")
    assert s.LUMINANCE_BASE_URL == "https://acme.app.luminance.com/api2"


def test_explicit_base_url_wins_and_is_trimmed():
    s = Settings(
        LUMINANCE_BASE_URL="https://eu.example.test/api2/",
        LUMINANCE_TOKEN_URL="https://other.example.test/api2/auth/oauth2/token",
    )
    assert s.LUMINANCE_BASE_URL == "https://eu.example.test/api2"


def test_currency_and_prefix_normalization():
    s = Settings(DEFAULT_CURRENCY=" eur ", MATTER_NAME_PREFIX="   ")
    assert s.DEFAULT_CURRENCY == "EUR"
    assert s.MATTER_NAME_PREFIX is None
    assert Settings(DEFAULT_CURRENCY="").DEFAULT_CURRENCY == "USD"


def test_environment_and_dotenv(monkeypatch, tmp_path):
    monkeypatch.setenv("DEFAULT_CURRENCY", "gbp")
    monkeypatch.setenv("TAG_FILTER", "hs_,sf_")
    s = get_settings()
    assert s.DEFAULT_CURRENCY == "GBP"
    assert s.TAG_FILTER == "hs_,sf_"
    assert get_settings() is s

    # conftest runs each test from tmp_path, so a .env there is picked up.
    (tmp_path / ".env").write_text("MATTER_NAME_PREFIX=Deal\nLOG_LEVEL=DEBUG\n", encoding="utf-8")
    get_settings.cache_clear()
    s = get_settings()
    assert s.MATTER_NAME_PREFIX == "Deal"
    assert s.LOG_LEVEL == "DEBUG"
