import os


class Settings:
    def __init__(self):
        self.app_name = os.getenv("CRM_APP_NAME", "LeadHub CRM")
        self.api_version = "1.0.0"
        self.environment = os.getenv("CRM_ENV", "development")
        self.secret_key = os.getenv("JWT_SECRET", "CHANGE_ME")
        self.SECRET_KEY = self.secret_key
        # Session tokens live for 7 days
        self.access_token_expire_minutes = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(7 * 24 * 60)))
        self.ACCESS_TOKEN_EXPIRE_MINUTES = self.access_token_expire_minutes
        self.database_url = os.getenv("CRM_DATABASE_URL", "sqlite:///./crm.db")
        self.cors_origins = [
            origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()
        ]
        self.default_admin_email = os.getenv("DEFAULT_ADMIN_EMAIL", "admin@example.com")
        self.default_admin_password = os.getenv("DEFAULT_ADMIN_PASSWORD", "admin123")
        self.log_level = os.getenv("LOG_LEVEL", "INFO")
        self.log_format = os.getenv("LOG_FORMAT", "text")


_settings_instance = None


def get_settings():
    """Return a singleton Settings instance."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
