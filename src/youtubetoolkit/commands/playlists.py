"""Playlist commands."""

from typing import Optional

from ..api import YouTubeAPI
from ..errors import ErrorCollector
from ..logging_config import get_logger
from ..pipeline import StringSource, accept_all, report_errors
from ..sinks import ItemSink
from .base import YouTubeCommand, each_reported

logger = get_logger(__name__)


class ListPlaylistsCommand(YouTubeCommand):
    """Write every playlist of the user."""

    def _run(self, errors: ErrorCollector) -> None:
        self._write(report_errors(self.youtube.list_playlists(), errors), errors)


class NewPlaylistCommand(YouTubeCommand):
    """Create a private playlist and write it to the sink."""

    def __init__(
        self,
        youtube: YouTubeAPI,
        title: str,
        sink: Optional[ItemSink] = None,
        privacy_status: str = "private",
    ) -> None:
        super().__init__(youtube, sink)
        self.title = title
        self.privacy_status = privacy_status

    def validate(self) -> None:
        super().validate()
        if not self.title:
            raise ValueError("Playlist title is required")
        if self.privacy_status not in ("private", "unlisted", "public"):
            raise ValueError(f"Invalid privacy status: {self.privacy_status}")

    def _run(self, errors: ErrorCollector) -> None:
        playlist = self.youtube.insert_playlist(self.title, self.privacy_status)
        logger.info("playlist %s created", playlist.playlist_id)
        self._write([playlist], errors)


class DeletePlaylistCommand(YouTubeCommand):
    """Delete one playlist of the user."""

    def __init__(self, youtube: YouTubeAPI, playlist_id: str) -> None:
        super().__init__(youtube)
        self.playlist_id = playlist_id

    def validate(self) -> None:
        super().validate()
        if not self.playlist_id:
            raise ValueError("Playlist ID is required")

    def _run(self, errors: ErrorCollector) -> None:
        self.youtube.delete_playlist(self.playlist_id)
        logger.info("playlist %s deleted", self.playlist_id)


class ListPlaylistCommand(YouTubeCommand):
    """Write every video of a playlist."""

    def __init__(self, youtube: YouTubeAPI, playlist_id: str, sink: Optional[ItemSink] = None):
        super().__init__(youtube, sink)
        self.playlist_id = playlist_id

    def validate(self) -> None:
        super().validate()
        if not self.playlist_id:
            raise ValueError("Playlist ID is required")

    def _run(self, errors: ErrorCollector) -> None:
        items = self.youtube.list_playlist_items(self.playlist_id, accept_all())
        self._write(report_errors(items, errors), errors)


class AddToPlaylistCommand(YouTubeCommand):
    """Add every video of a source of video ids to a playlist.

    The created playlist items are written to the sink. A video that cannot
    be added is reported and the next one is processed.
    """

    def __init__(
        self,
        youtube: YouTubeAPI,
        playlist_id: str,
        source: StringSource,
        sink: Optional[ItemSink] = None,
    ) -> None:
        super().__init__(youtube, sink)
        self.playlist_id = playlist_id
        self.source = source

    def validate(self) -> None:
        super().validate()
        if not self.playlist_id:
            raise ValueError("Playlist ID is required")
        if not callable(self.source):
            raise ValueError("A source of video ids is required")

    def _insert(self, video_id: str):
        return self.youtube.insert_playlist_item(self.playlist_id, video_id)

    def _run(self, errors: ErrorCollector) -> None:
        items = each_reported(self.source(errors), errors, self._insert, "adding video")
        self._write(items, errors)
