"""Test doubles and API resource builders."""

from typing import Dict, List, Optional
from unittest.mock import MagicMock

from src.youtubetoolkit.errors import ChannelNotFoundError, SubscriptionNotFoundError
from src.youtubetoolkit.models import Channel, Playlist, PlaylistItem, Subscription
from src.youtubetoolkit.quota import QuotaCounter


def subscription_resource(channel_id: str, title: str, sub_id: Optional[str] = None) -> Dict:
    """Build a subscriptions.list item as returned by the API."""
    return {
        "id": sub_id or f"sub-{channel_id}",
        "snippet": {
            "title": title,
            "resourceId": {"kind": "youtube#channel", "channelId": channel_id},
            "thumbnails": {"default": {"url": f"https://img.example/{channel_id}.jpg"}},
        },
    }


def playlist_item_resource(
    video_id: str,
    published_at: str = "2023-04-01T10:00:00Z",
    channel_id: str = "UC1",
    title: Optional[str] = None,
) -> Dict:
    """Build a playlistItems.list item as returned by the API."""
    return {
        "id": f"pli-{video_id}",
        "snippet": {
            "title": title or f"Video {video_id}",
            "publishedAt": published_at,
            "resourceId": {"kind": "youtube#video", "videoId": video_id},
            "videoOwnerChannelId": channel_id,
            "videoOwnerChannelTitle": f"Channel {channel_id}",
        },
    }


def pages(request_mock: MagicMock, *page_items: List[Dict]) -> None:
    """Make request_mock.execute return one response per page, chained by tokens."""
    responses = []
    for i, items in enumerate(page_items):
        response = {"items": items}
        if i < len(page_items) - 1:
            response["nextPageToken"] = f"page{i + 2}"
        responses.append(response)
    request_mock.execute.side_effect = responses


class FakeYouTube:
    """In-memory stand-in for YouTubeAPI.

    Channels map a channel id to its uploads, newest first, the way the
    uploads playlist of a real channel is ordered.
    """

    def __init__(
        self,
        subscriptions: Optional[List[Subscription]] = None,
        playlists: Optional[List[Playlist]] = None,
        uploads: Optional[Dict[str, List[PlaylistItem]]] = None,
    ):
        self.subscriptions = list(subscriptions or [])
        self.playlists = list(playlists or [])
        self.uploads = dict(uploads or {})
        self.playlist_items: Dict[str, List[PlaylistItem]] = {}
        self.deleted_playlists: List[str] = []
        self.quota = QuotaCounter()

    def list_subscriptions(self):
        yield from self.subscriptions

    def insert_subscription(self, channel_id):
        subscription = Subscription(
            subscription_id=f"sub-{channel_id}",
            channel_id=channel_id,
            channel_title=f"Channel {channel_id}",
        )
        self.subscriptions.append(subscription)
        return subscription

    def delete_subscription(self, channel_id):
        for subscription in self.subscriptions:
            if subscription.channel_id == channel_id:
                self.subscriptions.remove(subscription)
                return subscription.subscription_id
        raise SubscriptionNotFoundError(f"channel '{channel_id}' not in subscriptions")

    def list_playlists(self):
        yield from self.playlists

    def insert_playlist(self, title, privacy_status="private"):
        playlist = Playlist(playlist_id=f"PL{len(self.playlists) + 1}", playlist_title=title)
        self.playlists.append(playlist)
        return playlist

    def delete_playlist(self, playlist_id):
        self.deleted_playlists.append(playlist_id)

    def list_playlist_items(self, playlist_id, predicate):
        items = self.playlist_items.get(playlist_id)
        if items is None:
            items = self.uploads.get(playlist_id.replace("UU", "UC", 1), [])
        for item in items:
            if not predicate(item):
                return
            yield item

    def insert_playlist_item(self, playlist_id, video_id):
        item = PlaylistItem(playlist_item_id=f"pli-{video_id}", video_id=video_id)
        self.playlist_items.setdefault(playlist_id, []).append(item)
        return item

    def get_channel(self, channel_id):
        if channel_id not in self.uploads:
            raise ChannelNotFoundError(f'channel not found for id="{channel_id}"')
        uploads_id = "UU" + channel_id[2:]
        return Channel(channel_id, f"Channel {channel_id}", uploads_id)


