"""WordPress content library.

Config, models, REST client and room normalization. No FastAPI here;
the HTTP surface lives in api/content/.
"""

from lib.wordpress.api_client import WordPressApiClient
from lib.wordpress.config import WordPressConfig, load_config, resolve_base_url
from lib.wordpress.errors import (
    ConfigurationError,
    ContentError,
    MalformedResponseError,
    NotFoundError,
    RemoteRequestError,
)
from lib.wordpress.models import ContentItem, NormalizedRoom

__all__ = [
    # Client
    "WordPressApiClient",
    # Config
    "WordPressConfig",
    "load_config",
    "resolve_base_url",
    # Errors
    "ContentError",
    "ConfigurationError",
    "RemoteRequestError",
    "MalformedResponseError",
    "NotFoundError",
    # Models
    "ContentItem",
    "NormalizedRoom",
]
