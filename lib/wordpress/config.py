"""WordPress connection configuration.

The base URL is resolved once at process start and handed to the API client
and the relay explicitly:

    config = load_config()
    client = WordPressApiClient(config)
"""

import os
from typing import Mapping, Optional

from dotenv import load_dotenv
from loguru import logger
from pydantic import BaseModel, Field

from lib.wordpress.errors import ConfigurationError

# Primary variable first, then the legacy name
BASE_URL_ENV_VARS = ("WORDPRESS_URL", "WORDPRESS_API_URL")
UNSET = ""

REST_PREFIX = "/wp-json/wp/v2"


def resolve_base_url(environ: Optional[Mapping[str, str]] = None) -> str:
    """Resolve the WordPress site URL from the environment.

    Returns UNSET when neither variable is set. Never raises; callers decide
    what a missing URL means for them.
    """
    if environ is None:
        environ = os.environ

    base_url = UNSET
    for name in BASE_URL_ENV_VARS:
        value = (environ.get(name) or "").strip()
        if value:
            base_url = value.rstrip("/")
            break

    if environ.get("APP_ENV", "development") != "production":
        if not base_url:
            logger.warning(
                "WordPress API URL is not set in environment variables. "
                "Please set WORDPRESS_URL"
            )
        else:
            logger.info(f"Using WordPress API URL: {base_url}")

    return base_url


class WordPressConfig(BaseModel):
    """Runtime configuration shared by the API client and the relay."""

    base_url: str = UNSET
    environment: str = "development"
    timeout: float = Field(default=15.0, description="HTTP timeout in seconds")

    # Relay freshness window
    proxy_cache_ttl: float = 60.0
    proxy_cache_max: int = 500

    currency_prefix: str = "K"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_configured(self) -> bool:
        return bool(self.base_url)

    @property
    def api_base(self) -> str:
        """REST root, e.g. https://cms.example.com/wp-json/wp/v2"""
        return f"{self.base_url}{REST_PREFIX}" if self.base_url else UNSET

    def require_base_url(self) -> str:
        if not self.base_url:
            raise ConfigurationError(
                "WordPress API URL is not defined. Please set WORDPRESS_URL "
                "or WORDPRESS_API_URL in your environment variables."
            )
        return self.base_url


def load_config(environ: Optional[Mapping[str, str]] = None) -> WordPressConfig:
    """Build the config from the process environment (and .env when present)."""
    if environ is None:
        load_dotenv()
        environ = os.environ

    config = WordPressConfig(
        base_url=resolve_base_url(environ),
        environment=environ.get("APP_ENV", "development"),
    )
    timeout = environ.get("WORDPRESS_TIMEOUT")
    if timeout:
        config.timeout = float(timeout)
    return config
