"""
Task store configuration module.

This module defines configuration classes for different environments
(development, testing, production). Configuration values are loaded
from environment variables with sensible defaults.
"""

from __future__ import annotations

import os


class Config:
    """Base configuration with default settings."""

    # Root URL of the PostgREST-style API (e.g. ``https://x.supabase.co/rest/v1``).
    API_URL: str = os.environ.get("API_URL", "")
    API_KEY: str = os.environ.get("API_KEY", "")
    API_TIMEOUT: int = int(os.environ.get("API_TIMEOUT", "10"))

    ITEMS_PER_PAGE: int = int(os.environ.get("ITEMS_PER_PAGE", "6"))

    LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO")


class DevelopmentConfig(Config):
    """Development environment configuration."""

    DEBUG: bool = True
    TESTING: bool = False
    LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "DEBUG")


class TestingConfig(Config):
    """Testing environment configuration."""

    DEBUG: bool = True
    TESTING: bool = True

    # Non-routable host so tests never reach a real backend
    API_URL: str = os.environ.get("TEST_API_URL", "http://api.test")
    API_KEY: str = os.environ.get("TEST_API_KEY", "test-anon-key")
    API_TIMEOUT: int = int(os.environ.get("TEST_API_TIMEOUT", "1"))


class ProductionConfig(Config):
    """Production environment configuration."""

    DEBUG: bool = False
    TESTING: bool = False
    LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "WARNING")


# Configuration mapping for easy access
config = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    "default": DevelopmentConfig,
}


def get_config(env: str | None = None) -> type[Config]:
    """
    Get the configuration class for the specified environment.

    Args:
        env: Environment name (development, testing, production).
             If None, uses TASK_STORE_ENV environment variable.

    Returns:
        Configuration class for the specified environment.
    """
    if env is None:
        env = os.environ.get("TASK_STORE_ENV", "development")
    return config.get(env, config["default"])
