"""Content sources producing page and block trees."""

from .base import BaseSource, ContentSourceError, ContentFetchError, ContentAuthError
from .mock import MockSource
from .json_file import JSONFileSource
from .notion import NotionSource

__all__ = [
    "BaseSource",
    "ContentSourceError",
    "ContentFetchError",
    "ContentAuthError",
    "MockSource",
    "JSONFileSource",
    "NotionSource"
]
