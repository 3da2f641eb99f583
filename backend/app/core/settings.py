import os


class Settings:
    def __init__(self):
        self.app_name = "Billing Backend"
        self.api_version = "1.0.0"
        self.environment = os.getenv("BILLING_ENVIRONMENT", "development")
        self.secret_key = os.getenv("BILLING_SECRET_KEY", "CHANGE_ME")
        self.SECRET_KEY = self.secret_key
        self.access_token_expire_minutes = int(os.getenv("BILLING_TOKEN_EXPIRE_MINUTES", "30"))
        self.ACCESS_TOKEN_EXPIRE_MINUTES = self.access_token_expire_minutes
        self.database_url = os.getenv("BILLING_DATABASE_URL", "sqlite:///./billing.db")
        self.log_level = os.getenv("BILLING_LOG_LEVEL", "INFO")
        # Literal prefix placed before every rendered amount, e.g. "R 1234.50".
        self.currency_prefix = os.getenv("BILLING_CURRENCY_PREFIX", "R")
        self.pdf_margin_mm = float(os.getenv("BILLING_PDF_MARGIN_MM", "20"))
        self.export_storage_dir = os.getenv("BILLING_EXPORT_STORAGE_DIR", "./exports")
        self.export_base_url = os.getenv("BILLING_EXPORT_BASE_URL", "/exports")


_settings_instance = None


def get_settings():
    """Return a singleton Settings instance."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
