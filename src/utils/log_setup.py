"""Loguru sink setup"""

import sys
from pathlib import Path

from loguru import logger

from src.config.settings import Settings

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)


def configure_logging(settings: Settings, level: str = None) -> None:
    """
    Replace loguru's default sink with the service sinks.

    Console output is always on. A serialized JSON file sink is added in
    production or when LOG_FORMAT=json.

    Args:
        settings: Loaded service settings
        level: Override for settings.log_level (e.g. DEBUG from --debug)
    """
    level = level or settings.log_level

    logger.remove()
    logger.configure(extra={"service": "gmail-forwarding-service", "correlation_id": "N/A"})
    logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT)

    if settings.log_format == "json" or settings.is_production:
        Path(settings.log_dir).mkdir(parents=True, exist_ok=True)
        logger.add(
            str(Path(settings.log_dir) / "forwarding_json_{time}.log"),
            rotation="1 day",
            retention="7 days",
            level="DEBUG",
            serialize=True,
        )


def mask_secret(value: str, visible: int = 8) -> str:
    """Show only the first few characters of a secret"""
    if not value:
        return value
    if len(value) <= visible:
        return "***"
    return value[:visible] + "..."
