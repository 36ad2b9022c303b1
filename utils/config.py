"""
Configuration management.
"""

import os
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class Config:
    """
    Application configuration.

    Loads from environment variables with sensible defaults.
    """

    # Server
    host: str = field(default_factory=lambda: os.getenv("HOST", "127.0.0.1"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8000")))
    debug: bool = field(default_factory=lambda: os.getenv("DEBUG", "false").lower() == "true")
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())

    # Data
    data_dir: str = field(default_factory=lambda: os.getenv("DATA_DIR", "./data"))
    reports_dir: str = field(default_factory=lambda: os.getenv("REPORTS_DIR", "./reports"))

    # Display
    currency: str = field(default_factory=lambda: os.getenv("CURRENCY", "BDT"))

    # Valuation alerts
    alert_endpoint: Optional[str] = field(
        default_factory=lambda: os.getenv("ALERT_ENDPOINT") or None
    )
    alert_api_key: Optional[str] = field(
        default_factory=lambda: os.getenv("ALERT_API_KEY") or None
    )
    alert_timeout: int = field(default_factory=lambda: int(os.getenv("ALERT_TIMEOUT", "10")))
    # Shared secret a scheduler presents to trigger the alert check
    alert_check_key: Optional[str] = field(
        default_factory=lambda: os.getenv("ALERT_CHECK_KEY") or None
    )

    @classmethod
    def load(cls) -> "Config":
        """Load configuration from environment."""
        return cls()

    @property
    def valuations_path(self) -> str:
        return os.path.join(self.data_dir, "valuations.json")

    @property
    def subscriptions_path(self) -> str:
        return os.path.join(self.data_dir, "subscriptions.json")

    def to_dict(self) -> dict:
        """Convert config to dictionary (secrets omitted)."""
        return {
            "host": self.host,
            "port": self.port,
            "debug": self.debug,
            "log_level": self.log_level,
            "data_dir": self.data_dir,
            "reports_dir": self.reports_dir,
            "currency": self.currency,
            "alert_endpoint": self.alert_endpoint,
            "alert_timeout": self.alert_timeout,
        }
