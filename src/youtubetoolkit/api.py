"""YouTube API wrapper."""

import threading
from typing import Callable, Dict, Iterator, Optional

import httplib2
from google.auth.exceptions import GoogleAuthError
from googleapiclient.errors import HttpError

from . import config
from .errors import (
    ChannelNotFoundError,
    PlaylistNotFoundError,
    SubscriptionNotFoundError,
    YouTubeError,
)
from .logging_config import get_logger
from .models import Channel, Playlist, PlaylistItem, Subscription
from .quota import QuotaCounter, with_quota_cost

logger = get_logger(__name__)

PlaylistItemFilter = Callable[[PlaylistItem], bool]


def _reason(error: Exception) -> str:
    """Human readable reason of an API error."""
    if isinstance(error, HttpError):
        reason = getattr(error, "reason", None)
        if reason:
            return str(reason)
    return str(error)


class YouTubeAPI:
    """Wrapper for the YouTube API operations used by the toolkit.

    Every request is charged to ``quota`` before being executed. List methods
    are generators: pages are requested lazily, one at a time, while the
    caller consumes the items.

    The HTTP transport of googleapiclient is not thread-safe. When the wrapper
    is shared by worker threads, pass ``http_factory`` so that each thread
    executes its requests on its own transport.
    """

    def __init__(
        self,
        youtube,
        quota: Optional[QuotaCounter] = None,
        http_factory: Optional[Callable[[], object]] = None,
    ):
        """Initialize API wrapper.

        Args:
            youtube: YouTube API client built by googleapiclient
            quota: Counter charged for every request. A new one is created if None.
            http_factory: Builds an authorized HTTP object; called once per thread
        """
        self.youtube = youtube
        self.quota = quota if quota is not None else QuotaCounter()
        self._http_factory = http_factory
        self._local = threading.local()

    def _thread_http(self):
        if self._http_factory is None:
            return None
        http = getattr(self._local, "http", None)
        if http is None:
            http = self._http_factory()
            self._local.http = http
        return http

    def _execute(self, request, context: str) -> Dict:
        """Execute a request, turning transport errors into YouTubeError.

        Args:
            request: googleapiclient HttpRequest
            context: Description of the operation used in the error message

        Raises:
            PlaylistNotFoundError: If the API reports a missing playlist
            YouTubeError: If the request fails for any other reason
        """
        http = self._thread_http()
        try:
            if http is not None:
                return request.execute(http=http)
            return request.execute()
        except HttpError as e:
            if "playlistNotFound" in str(e):
                raise PlaylistNotFoundError(f"{context}: playlist not found") from e
            raise YouTubeError(f"{context}: {_reason(e)}") from e
        except (OSError, httplib2.HttpLib2Error, GoogleAuthError) as e:
            raise YouTubeError(f"{context}: {str(e)}") from e

    #
    # Subscriptions
    #

    def list_subscriptions(self) -> Iterator[Subscription]:
        """Yield all the user subscriptions, in alphabetical order.

        Raises:
            YouTubeError: If a page request fails
        """
        page_token = None
        while True:
            self.quota.charge("subscriptions.list")
            request = self.youtube.subscriptions().list(
                part="snippet",
                mine=True,
                maxResults=config.PAGE_SIZE,
                order="alphabetical",
                pageToken=page_token,
            )
            response = self._execute(
                request, f"subscriptions list error (page {page_token or '-'})"
            )

            for item in response.get("items", []):
                yield Subscription.from_resource(item)

            page_token = response.get("nextPageToken")
            if not page_token:
                break

    @with_quota_cost("subscriptions.insert")
    def insert_subscription(self, channel_id: str) -> Subscription:
        """Subscribe the user to a channel.

        Args:
            channel_id: ID of the channel to subscribe to

        Returns:
            The created subscription
        """
        request = self.youtube.subscriptions().insert(
            part="snippet",
            body={
                "snippet": {
                    "resourceId": {"kind": "youtube#channel", "channelId": channel_id},
                }
            },
        )
        response = self._execute(request, f"subscription insert error for channel '{channel_id}'")
        return Subscription.from_resource(response)

    def delete_subscription(self, channel_id: str) -> str:
        """Unsubscribe the user from a channel.

        Needs two requests: the subscription id is looked up from the
        channel id first.

        Args:
            channel_id: ID of the subscribed channel

        Returns:
            The ID of the deleted subscription

        Raises:
            SubscriptionNotFoundError: If the user is not subscribed to the channel
            YouTubeError: If a request fails
        """
        self.quota.charge("subscriptions.list")
        request = self.youtube.subscriptions().list(
            part="snippet",
            mine=True,
            maxResults=1,
            forChannelId=channel_id,
        )
        response = self._execute(request, f"subscription delete error (channel '{channel_id}')")
        items = response.get("items", [])
        if len(items) != 1:
            raise SubscriptionNotFoundError(f"channel '{channel_id}' not in subscriptions")

        subscription_id = items[0]["id"]
        self.quota.charge("subscriptions.delete")
        request = self.youtube.subscriptions().delete(id=subscription_id)
        self._execute(
            request,
            f"subscription delete error (channel '{channel_id}', subscription '{subscription_id}')",
        )
        return subscription_id

    #
    # Playlists
    #

    def list_playlists(self) -> Iterator[Playlist]:
        """Yield all the user playlists.

        Raises:
            YouTubeError: If a page request fails
        """
        page_token = None
        while True:
            self.quota.charge("playlists.list")
            request = self.youtube.playlists().list(
                part="snippet,contentDetails",
                mine=True,
                maxResults=config.PAGE_SIZE,
                pageToken=page_token,
            )
            response = self._execute(request, f"playlists list error (page {page_token or '-'})")

            for item in response.get("items", []):
                yield Playlist.from_resource(item)

            page_token = response.get("nextPageToken")
            if not page_token:
                break

    @with_quota_cost("playlists.insert")
    def insert_playlist(self, title: str, privacy_status: str = "private") -> Playlist:
        """Create a new playlist for the user.

        Args:
            title: Title of the new playlist
            privacy_status: "private", "unlisted" or "public"

        Returns:
            The created playlist
        """
        request = self.youtube.playlists().insert(
            part="snippet,status",
            body={
                "snippet": {"title": title},
                "status": {"privacyStatus": privacy_status},
            },
        )
        response = self._execute(request, f"playlist insert error for '{title}'")
        return Playlist.from_resource(response)

    @with_quota_cost("playlists.delete")
    def delete_playlist(self, playlist_id: str) -> None:
        """Delete a user playlist.

        Raises:
            PlaylistNotFoundError: If the playlist does not exist
            YouTubeError: If the request fails
        """
        request = self.youtube.playlists().delete(id=playlist_id)
        self._execute(request, f"playlist delete error for id '{playlist_id}'")

    def list_playlist_items(
        self, playlist_id: str, predicate: PlaylistItemFilter
    ) -> Iterator[PlaylistItem]:
        """Yield the items of a playlist until the predicate rejects one.

        The first rejected item stops the listing: no further page is
        requested. Callers rely on the playlist order for this, e.g. uploads
        playlists are listed newest first.

        Args:
            playlist_id: ID of any playlist readable by the user
            predicate: Called on every item in order; False stops the listing.
                Exceptions raised by it abort the listing and propagate.

        Raises:
            PlaylistNotFoundError: If the playlist does not exist
            YouTubeError: If a page request fails
        """
        page_token = None
        while True:
            self.quota.charge("playlistItems.list")
            request = self.youtube.playlistItems().list(
                part="snippet",
                playlistId=playlist_id,
                maxResults=config.PAGE_SIZE,
                pageToken=page_token,
            )
            response = self._execute(
                request,
                f'playlist items list error (id="{playlist_id}" and page="{page_token or "-"}")',
            )

            for resource in response.get("items", []):
                item = PlaylistItem.from_resource(resource)
                if not predicate(item):
                    logger.debug("Stopped listing %s at video %s", playlist_id, item.video_id)
                    return
                yield item

            page_token = response.get("nextPageToken")
            if not page_token:
                break

    @with_quota_cost("playlistItems.insert")
    def insert_playlist_item(self, playlist_id: str, video_id: str) -> PlaylistItem:
        """Add a video at the top of a playlist.

        Args:
            playlist_id: ID of playlist to add to
            video_id: ID of the video to add

        Returns:
            The created playlist item
        """
        request = self.youtube.playlistItems().insert(
            part="snippet",
            body={
                "snippet": {
                    "playlistId": playlist_id,
                    "position": 0,
                    "resourceId": {"kind": "youtube#video", "videoId": video_id},
                }
            },
        )
        response = self._execute(
            request, f"playlist item insert error (playlist '{playlist_id}', video '{video_id}')"
        )
        return PlaylistItem.from_resource(response)

    #
    # Channels
    #

    @with_quota_cost("channels.list")
    def get_channel(self, channel_id: str) -> Channel:
        """Get the channel with the given ID.

        Raises:
            ChannelNotFoundError: If no channel has this ID
            YouTubeError: If the request fails or returns more than one channel
        """
        request = self.youtube.channels().list(
            part="snippet,contentDetails",
            id=channel_id,
        )
        response = self._execute(request, f'channel list error for id="{channel_id}"')
        items = response.get("items", [])
        if not items:
            raise ChannelNotFoundError(f'channel not found for id="{channel_id}"')
        if len(items) > 1:
            raise YouTubeError(f'expected one channel for id="{channel_id}", got {len(items)}')
        return Channel.from_resource(items[0])
