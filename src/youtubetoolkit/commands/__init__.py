"""Command module initialization."""

from .base import YouTubeCommand
from .playlists import (  # noqa: F401
    AddToPlaylistCommand,
    DeletePlaylistCommand,
    ListPlaylistCommand,
    ListPlaylistsCommand,
    NewPlaylistCommand,
)
from .subscriptions import (  # noqa: F401
    ListSubscriptionsCommand,
    SubscribeCommand,
    UnsubscribeCommand,
)
from .uploads import LastUploadsCommand  # noqa: F401

__all__ = [
    "YouTubeCommand",
    "AddToPlaylistCommand",
    "DeletePlaylistCommand",
    "LastUploadsCommand",
    "ListPlaylistCommand",
    "ListPlaylistsCommand",
    "ListSubscriptionsCommand",
    "NewPlaylistCommand",
    "SubscribeCommand",
    "UnsubscribeCommand",
]
