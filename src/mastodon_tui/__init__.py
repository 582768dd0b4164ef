"""
Mastodon TUI - A terminal client for browsing Mastodon timelines.
"""

from .client import MastodonAPIError, MastodonClient
from .config import MastodonConfig
from .feeds import FeedState
from .models import Feed, FeedItem, Tab
from .session import Session
from .source import FeedSource, SourceError

__version__ = "0.1.0"
__all__ = [
    "MastodonClient",
    "MastodonAPIError",
    "MastodonConfig",
    "Feed",
    "FeedItem",
    "FeedSource",
    "FeedState",
    "Session",
    "SourceError",
    "Tab",
]
