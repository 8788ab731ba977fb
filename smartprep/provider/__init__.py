from flask import current_app

from smartprep.provider.base import ContentProvider, ProviderError


def get_provider() -> ContentProvider:
    """The provider configured on the running app."""
    return current_app.extensions['content_provider']


__all__ = ["ContentProvider", "ProviderError", "get_provider"]
