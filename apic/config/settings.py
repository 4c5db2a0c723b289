"""
apic - settings
"""
import logging
import os
from dataclasses import dataclass

from ..backoff import BackOffSettings

logger = logging.getLogger(__name__)


@dataclass
class Settings:
    """Global settings"""
    # Retry settings ("none" disables retries)
    BACKOFF_KIND: str = "none"
    BACKOFF_INTERVAL: float = 0.5
    MAX_RETRIES: int = 3

    # Transport settings
    TIMEOUT: float = 30.0

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s | %(name)-12s | %(levelname)-8s | %(message)s"

    def backoff_settings(self) -> BackOffSettings | None:
        """Backoff configuration, None when retries are disabled"""
        if self.BACKOFF_KIND.lower() == "none":
            return None
        return BackOffSettings(
            kind=self.BACKOFF_KIND,
            interval=self.BACKOFF_INTERVAL,
            max_retries=self.MAX_RETRIES,
        )

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from APIC_* environment variables"""
        settings = cls()
        settings.BACKOFF_KIND = os.getenv("APIC_BACKOFF_KIND", settings.BACKOFF_KIND)
        settings.LOG_LEVEL = os.getenv("APIC_LOG_LEVEL", settings.LOG_LEVEL)

        try:
            settings.BACKOFF_INTERVAL = float(
                os.getenv("APIC_BACKOFF_INTERVAL", str(settings.BACKOFF_INTERVAL))
            )
            settings.MAX_RETRIES = int(os.getenv("APIC_MAX_RETRIES", str(settings.MAX_RETRIES)))
            settings.TIMEOUT = float(os.getenv("APIC_TIMEOUT", str(settings.TIMEOUT)))
        except (ValueError, TypeError):
            logger.warning("Failed to parse apic settings from env, using defaults")
            defaults = cls()
            settings.BACKOFF_INTERVAL = defaults.BACKOFF_INTERVAL
            settings.MAX_RETRIES = defaults.MAX_RETRIES
            settings.TIMEOUT = defaults.TIMEOUT

        return settings


def configure_logging(config: Settings | None = None) -> None:
    """Apply LOG_LEVEL and LOG_FORMAT to the root logger"""
    config = config or settings
    logging.basicConfig(
        level=config.LOG_LEVEL.upper(),
        format=config.LOG_FORMAT,
    )


# Global settings instance
settings = Settings()
