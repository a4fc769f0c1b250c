"""
Configuration Management Module

Provides centralized configuration using pydantic-settings for environment-based configuration.
"""

from decimal import Decimal
from pydantic_settings import BaseSettings
from typing import Optional


class AccountServiceConfig(BaseSettings):
    """Account service configuration"""

    # Storage configuration
    storage_backend: str = "sqlite"  # sqlite or memory
    database_path: str = "accounts.db"

    # API configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8085

    # Logging configuration
    log_level: str = "INFO"
    log_format: str = "json"  # json or text

    # Business rules configuration
    vip_minimum_balance: Decimal = Decimal("1000.00")
    pyme_minimum_balance: Decimal = Decimal("500.00")
    free_transaction_limit: int = 10  # Transactions above this count are charged commission

    # Credit card service configuration
    credit_card_url: str = "http://localhost:8087/creditcards/exists"
    credit_card_timeout: float = 5.0
    circuit_breaker_failure_threshold: int = 5
    circuit_breaker_reset_timeout: float = 60.0

    # Fallback alert configuration
    alert_channel: str = "log"  # log, email or webhook
    alert_recipient: str = "support@example.com"
    alert_sender: str = "account-service@example.com"
    smtp_host: str = "localhost"
    smtp_port: int = 25
    alert_webhook_url: Optional[str] = None

    class Config:
        env_prefix = "ACCOUNT_SERVICE_"
        env_file = ".env"
        case_sensitive = False


# Global configuration instance
config = AccountServiceConfig()


def get_config() -> AccountServiceConfig:
    """Get global configuration instance"""
    return config


def reload_config() -> AccountServiceConfig:
    """Reload configuration from environment"""
    global config
    config = AccountServiceConfig()
    return config
