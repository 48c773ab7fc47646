"""Normalized views of YouTube API resources.

The API returns deeply nested resources. The pipeline only needs a handful of
flat, named fields from each of them, which is what the classes here provide.
Each output item class exposes a ``FIELDS`` table mapping a field name to an
accessor, so output columns can be selected by name at runtime.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Mapping, Type

CHANNEL_URL = "https://www.youtube.com/channel/{}"
VIDEO_URL = "https://www.youtube.com/watch?v={}"


class UnknownFieldError(ValueError):
    """Raised when an output field name does not exist on an item."""

    def __init__(self, kind: str, field: str, available: Iterable[str]):
        self.kind = kind
        self.field = field
        super().__init__(
            f"unknown field '{field}' for {kind}, available fields: {', '.join(available)}"
        )


def _dig(resource: Mapping[str, Any], *keys: str) -> Any:
    """Walk nested dictionaries, returning "" when a key is missing."""
    value: Any = resource
    for key in keys:
        if not isinstance(value, Mapping):
            return ""
        value = value.get(key)
        if value is None:
            return ""
    return value


def _url(template: str, value: str) -> str:
    return template.format(value) if value else ""


class Item:
    """Base class of the normalized items written to a sink."""

    KIND = "item"
    FIELDS: Dict[str, Callable[["Item"], Any]] = {}

    @classmethod
    def field_names(cls) -> List[str]:
        return list(cls.FIELDS)

    @classmethod
    def validate_fields(cls, fields: Iterable[str]) -> List[str]:
        """Check that every field name exists on this item kind.

        Args:
            fields: Requested field names

        Returns:
            The field names as a list

        Raises:
            UnknownFieldError: On the first unknown name
        """
        fields = list(fields)
        for field in fields:
            if field not in cls.FIELDS:
                raise UnknownFieldError(cls.KIND, field, cls.FIELDS)
        return fields

    def value(self, field: str) -> str:
        try:
            accessor = self.FIELDS[field]
        except KeyError:
            raise UnknownFieldError(self.KIND, field, self.FIELDS) from None
        value = accessor(self)
        return "" if value is None else str(value)

    def as_record(self, fields: Iterable[str]) -> List[str]:
        """Project the item to a list of strings, one per requested field."""
        return [self.value(field) for field in fields]

    def as_dict(self) -> Dict[str, Any]:
        """Return every non-empty, non-zero field, keyed by field name."""
        out = {}
        for field, accessor in self.FIELDS.items():
            value = accessor(self)
            if value not in (None, "", 0):
                out[field] = value
        return out


@dataclass(frozen=True)
class Subscription(Item):
    """A channel the user is subscribed to."""

    subscription_id: str = ""
    channel_id: str = ""
    channel_title: str = ""
    channel_thumb_url: str = ""

    KIND = "subscription"

    @property
    def channel_url(self) -> str:
        return _url(CHANNEL_URL, self.channel_id)

    @classmethod
    def from_resource(cls, resource: Mapping[str, Any]) -> "Subscription":
        snippet = resource.get("snippet") or {}
        return cls(
            subscription_id=resource.get("id") or "",
            channel_id=_dig(snippet, "resourceId", "channelId"),
            channel_title=snippet.get("title") or "",
            channel_thumb_url=_dig(snippet, "thumbnails", "default", "url"),
        )


Subscription.FIELDS = {
    "subscription_id": lambda s: s.subscription_id,
    "channel_id": lambda s: s.channel_id,
    "channel_title": lambda s: s.channel_title,
    "channel_url": lambda s: s.channel_url,
    "channel_thumb_url": lambda s: s.channel_thumb_url,
}


@dataclass(frozen=True)
class Playlist(Item):
    """A playlist owned by the user."""

    playlist_id: str = ""
    playlist_title: str = ""
    video_count: int = 0

    KIND = "playlist"

    @classmethod
    def from_resource(cls, resource: Mapping[str, Any]) -> "Playlist":
        return cls(
            playlist_id=resource.get("id") or "",
            playlist_title=_dig(resource, "snippet", "title"),
            video_count=int(_dig(resource, "contentDetails", "itemCount") or 0),
        )


Playlist.FIELDS = {
    "playlist_id": lambda p: p.playlist_id,
    "playlist_title": lambda p: p.playlist_title,
    "video_count": lambda p: p.video_count,
}


@dataclass(frozen=True)
class PlaylistItem(Item):
    """A video inside a playlist."""

    playlist_item_id: str = ""
    video_id: str = ""
    video_title: str = ""
    channel_id: str = ""
    channel_title: str = ""
    published_at: str = ""

    KIND = "playlist_item"

    @property
    def channel_url(self) -> str:
        return _url(CHANNEL_URL, self.channel_id)

    @property
    def video_url(self) -> str:
        return _url(VIDEO_URL, self.video_id)

    @classmethod
    def from_resource(cls, resource: Mapping[str, Any]) -> "PlaylistItem":
        snippet = resource.get("snippet") or {}
        return cls(
            playlist_item_id=resource.get("id") or "",
            video_id=_dig(snippet, "resourceId", "videoId"),
            video_title=snippet.get("title") or "",
            # videoOwner* is the uploader; channel* is the playlist owner
            channel_id=snippet.get("videoOwnerChannelId") or "",
            channel_title=snippet.get("videoOwnerChannelTitle") or "",
            published_at=snippet.get("publishedAt") or "",
        )


PlaylistItem.FIELDS = {
    "playlist_item_id": lambda i: i.playlist_item_id,
    "channel_id": lambda i: i.channel_id,
    "channel_title": lambda i: i.channel_title,
    "channel_url": lambda i: i.channel_url,
    "video_id": lambda i: i.video_id,
    "video_title": lambda i: i.video_title,
    "video_url": lambda i: i.video_url,
    "published_at": lambda i: i.published_at,
}


@dataclass(frozen=True)
class Channel:
    """The parts of a channel needed to find its uploads."""

    channel_id: str
    channel_title: str
    uploads_playlist_id: str

    @classmethod
    def from_resource(cls, resource: Mapping[str, Any]) -> "Channel":
        return cls(
            channel_id=resource.get("id") or "",
            channel_title=_dig(resource, "snippet", "title"),
            uploads_playlist_id=_dig(resource, "contentDetails", "relatedPlaylists", "uploads"),
        )


ITEM_TYPES: Dict[str, Type[Item]] = {
    "subscription": Subscription,
    "playlist": Playlist,
    "playlist_item": PlaylistItem,
    "upload": PlaylistItem,
}
