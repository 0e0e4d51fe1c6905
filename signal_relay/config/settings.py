"""
PURPOSE: Configuration settings for the Signal Relay webhook service.

This module uses Pydantic Settings to load the shared secrets and downstream
service URLs from environment variables and an optional .env file. The values
are read once at process start and handed to the webhook handler explicitly.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    PURPOSE: Central configuration class for Signal Relay.

    Holds the inbound shared secret, the internal key presented to downstream
    services, the Trade and Notification service endpoints, and the server /
    logging options.
    """

    # Inbound Authentication
    # Callers place this value in the `apiKey` field of the JSON body.
    # Left empty, every request is rejected.
    API_SECRET_KEY: str = ""

    # Downstream Services
    INTERNAL_SERVICE_KEY: str = ""
    TRADE_WORKER_URL: str = ""
    TELEGRAM_WORKER_URL: str = ""
    DOWNSTREAM_TIMEOUT_SECONDS: float = 10.0
    FORWARD_CONCURRENTLY: bool = True

    # System Settings
    APP_ENV: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    _REQUIRED_SETTINGS: tuple[str, ...] = (
        "API_SECRET_KEY",
        "INTERNAL_SERVICE_KEY",
        "TRADE_WORKER_URL",
        "TELEGRAM_WORKER_URL",
    )

    def is_development(self) -> bool:
        """
        PURPOSE: Determine whether the app is running in development mode.

        Returns:
            bool: True when APP_ENV indicates development or debug is on.
        """
        return self.APP_ENV.strip().lower() in {"dev", "development"} or self.DEBUG

    def get_missing_settings(self) -> list[str]:
        """
        PURPOSE: Return the required settings that are unset or blank.

        Returns:
            list[str]: Setting names with empty values.
        """
        return [
            name for name in self._REQUIRED_SETTINGS
            if not str(getattr(self, name)).strip()
        ]

    def validate_required(self) -> None:
        """
        PURPOSE: Refuse to start outside development without an inbound secret.

        CALLED BY: create_app()

        A missing API_SECRET_KEY already fails closed at request time; outside
        development it is treated as a deployment error instead.

        Raises:
            ValueError: If API_SECRET_KEY is empty in non-dev mode.
        """
        if self.API_SECRET_KEY.strip() or self.is_development():
            return

        raise ValueError(
            "API_SECRET_KEY is not set. Set it in your .env file or as an "
            "environment variable before running outside development."
        )

    class Config:
        """Pydantic model configuration."""

        env_file: str = ".env"
        env_file_encoding: str = "utf-8"
        case_sensitive: bool = True


settings: Settings = Settings()


def get_settings() -> Settings:
    """
    PURPOSE: FastAPI dependency returning the process-wide settings object.

    CALLED BY: routes_webhook.py via Depends(); overridden in tests.

    Returns:
        Settings: Settings loaded at import time.
    """
    return settings
