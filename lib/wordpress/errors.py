"""Error taxonomy for the WordPress content layer."""

from typing import Optional


class ContentError(Exception):
    """Base class for content retrieval failures."""


class ConfigurationError(ContentError):
    """WordPress base URL is not configured."""


class RemoteRequestError(ContentError):
    """Upstream answered with a non-2xx status or could not be reached.

    status is None when the request never produced a response.
    """

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class MalformedResponseError(ContentError):
    """Upstream body could not be parsed as JSON of the expected shape."""


class NotFoundError(ContentError):
    """A slug lookup matched nothing."""

    def __init__(self, post_type: str, slug: str):
        super().__init__(f"No {post_type} found with slug: {slug}")
        self.post_type = post_type
        self.slug = slug
