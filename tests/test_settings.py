from backend.app.core.settings import get_settings


def test_settings_defaults():
    settings = get_settings()
    assert settings.app_name == "Billing Backend"
    assert isinstance(settings.secret_key, str) and settings.secret_key
    assert isinstance(settings.database_url, str) and settings.database_url
    assert settings.currency_prefix == "R"
    assert settings.pdf_margin_mm == 20.0


def test_settings_is_singleton():
    assert get_settings() is get_settings()
