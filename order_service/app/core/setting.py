"""
Order Service configuration using shared patterns
"""

from pathlib import Path
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict

# Get the order service directory path
ORDER_SERVICE_DIR = Path(__file__).parent.parent.parent
ENV_FILE = ORDER_SERVICE_DIR / ".env"


class OrderSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "Order Service"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Service specific
    SERVICE_NAME: str = "order-service"

    # Database
    ORDER_DATABASE_URL: str = "sqlite+aiosqlite:///./orders.db"
    DATABASE_POOL_SIZE: int = 20
    DATABASE_MAX_OVERFLOW: int = 40

    # Kafka for events
    KAFKA_BOOTSTRAP_SERVERS: str = "localhost:9092"
    ORDER_EVENTS_QUEUE: str = "order-events"
    KAFKA_CONNECT_MAX_RETRIES: int = 10
    KAFKA_CONNECT_RETRY_DELAY: float = 2.0
    KAFKA_CONNECT_TIMEOUT: float = 30.0

    # Upper bound for a single publish attempt on the request path
    EVENT_PUBLISH_TIMEOUT: float = 5.0

    # CORS
    CORS_ORIGINS: List[str] = ["*"]
    CORS_CREDENTIALS: bool = True
    CORS_METHODS: List[str] = ["GET", "POST", "PATCH", "OPTIONS"]
    CORS_HEADERS: List[str] = ["*"]


# Create a singleton instance
_settings_instance = None


def get_settings() -> OrderSettings:
    """Get settings singleton instance"""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = OrderSettings()
    return _settings_instance
