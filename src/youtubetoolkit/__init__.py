"""YouTube subscriptions and playlists toolkit."""

__version__ = "0.1.0"

# Import all public components
from .api import YouTubeAPI
from .errors import ErrorCollector, MultipleErrors, YouTubeError
from .logging_config import get_logger
from .models import Channel, Playlist, PlaylistItem, Subscription
from .quota import QuotaCounter

__all__ = [
    "Channel",
    "ErrorCollector",
    "MultipleErrors",
    "Playlist",
    "PlaylistItem",
    "QuotaCounter",
    "Subscription",
    "YouTubeAPI",
    "YouTubeError",
    "get_logger",
]
