"""
Notification Service configuration using shared patterns
"""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Get the notification service directory path
NOTIFICATION_SERVICE_DIR = Path(__file__).parent.parent.parent
ENV_FILE = NOTIFICATION_SERVICE_DIR / ".env"


class NotificationServiceSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "Notification Service"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Service specific
    SERVICE_NAME: str = "notification-service"

    # Order service callback target
    ORDER_SERVICE_URL: str = "http://host.docker.internal:8081"
    ORDER_SERVICE_TIMEOUT: float = 10.0
    NOTIFIED_STATUS: str = "NOTIFIED"

    # Kafka for events
    KAFKA_BOOTSTRAP_SERVERS: str = "localhost:9092"
    KAFKA_GROUP_ID: str = "notification-service-consumers"
    ORDER_EVENTS_QUEUE: str = "order-events"

    # Batch consumption
    NOTIFICATION_BATCH_SIZE: int = 10
    NOTIFICATION_POLL_TIMEOUT_MS: int = 1000
    NOTIFICATION_BATCH_CONCURRENCY: int = 1

    # Stand-in for an email/SMS/push provider round trip
    NOTIFICATION_SIMULATED_DELAY: float = 0.1


# Create a singleton instance
_settings_instance = None


def get_settings() -> NotificationServiceSettings:
    """Get settings singleton instance"""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = NotificationServiceSettings()
    return _settings_instance
