"""
Configuration settings for the clmath engine

Loads environment variables and provides engine-wide defaults.
"""
import os
import sys
from typing import Optional

from dotenv import load_dotenv
from loguru import logger

# Load environment variables from .env file
load_dotenv()


class Settings:
    """Engine settings"""

    # PnL curve defaults
    PNL_CURVE_POINTS: int = int(os.getenv("CLMATH_PNL_CURVE_POINTS", 150))

    # Logging
    LOG_LEVEL: str = os.getenv("CLMATH_LOG_LEVEL", "WARNING").upper()
    LOG_ENABLED: bool = os.getenv("CLMATH_LOG_ENABLED", "False").lower() == "true"


# Create global settings instance
settings = Settings()


def configure_logging(level: Optional[str] = None) -> int:
    """Enable clmath log records and route them to stderr.

    The package disables its own loguru records on import; call this from
    an application entry point to see them.

    Returns:
        The loguru sink id, so callers can ``logger.remove()`` it later.
    """
    logger.enable("clmath")
    return logger.add(sys.stderr, level=(level or settings.LOG_LEVEL).upper())
