"""Test cases for the YouTube commands."""

import io
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock, patch

import httplib2
import pytest
from google.auth.exceptions import RefreshError

from fakes import FakeYouTube, playlist_item_resource, subscription_resource
from src.youtubetoolkit.api import YouTubeAPI
from src.youtubetoolkit.commands import (
    AddToPlaylistCommand,
    DeletePlaylistCommand,
    LastUploadsCommand,
    ListPlaylistCommand,
    ListPlaylistsCommand,
    ListSubscriptionsCommand,
    NewPlaylistCommand,
    SubscribeCommand,
    UnsubscribeCommand,
    YouTubeCommand,
)
from src.youtubetoolkit.errors import (
    ChannelNotFoundError,
    InputError,
    MultipleErrors,
    SubscriptionNotFoundError,
    YouTubeError,
)
from src.youtubetoolkit.models import Playlist, PlaylistItem, Subscription
from src.youtubetoolkit.pipeline import from_csv, from_string
from src.youtubetoolkit.sinks import CSVSink


def csv_sink(fields):
    out = io.StringIO()
    return out, CSVSink(out, fields)


class TestBaseCommand:
    def test_requires_client(self):
        """Test a command cannot run without an API client."""

        class Noop(YouTubeCommand):
            def _run(self, errors):
                pass

        with pytest.raises(ValueError, match="YouTube API client is required"):
            Noop(None).run()

    def test_unexpected_error_is_wrapped(self):
        """Test non YouTube errors are raised as YouTubeError."""

        class Broken(YouTubeCommand):
            def _run(self, errors):
                raise KeyError("snippet")

        with pytest.raises(YouTubeError) as exc_info:
            Broken(MagicMock()).run()

        assert isinstance(exc_info.value.__cause__, KeyError)

    def test_reported_errors_are_combined(self):
        """Test errors reported during the run are raised together at the end."""

        class Reporting(YouTubeCommand):
            def _run(self, errors):
                errors.add(InputError("one"))
                errors.add(InputError("two"))

        with pytest.raises(MultipleErrors) as exc_info:
            Reporting(MagicMock()).run()

        assert [str(e) for e in exc_info.value] == ["one", "two"]


class TestSubscriptions:
    def test_list_default_fields(self):
        """Test subscriptions are written as channel id and title."""
        youtube = FakeYouTube(
            subscriptions=[
                Subscription("s1", "A", "TA"),
                Subscription("s2", "B", "TB"),
                Subscription("s3", "C", "TC"),
            ]
        )
        out, sink = csv_sink(["channel_id", "channel_title"])

        assert ListSubscriptionsCommand(youtube, sink).run()

        assert out.getvalue() == "A,TA\nB,TB\nC,TC\n"

    def test_list_failure_keeps_written_items(self):
        """Test a failing page still lets earlier items through."""
        youtube = MagicMock()

        def listing():
            yield Subscription("s1", "A", "TA")
            raise YouTubeError("subscriptions list error (page p2): backendError")

        youtube.list_subscriptions.return_value = listing()
        out, sink = csv_sink(["channel_id"])

        with pytest.raises(YouTubeError, match="backendError"):
            ListSubscriptionsCommand(youtube, sink).run()

        assert out.getvalue() == "A\n"

    def test_subscribe_from_csv(self, fake_youtube):
        """Test every channel piped in is subscribed to, in order."""
        out, sink = csv_sink(["subscription_id"])
        source = from_csv(io.StringIO("UC1,One\nUC2,Two\n"))

        SubscribeCommand(fake_youtube, source, sink).run()

        assert [s.channel_id for s in fake_youtube.subscriptions] == ["UC1", "UC2"]
        assert out.getvalue() == "sub-UC1\nsub-UC2\n"

    def test_subscribe_continues_after_failure(self):
        """Test a failed subscription does not stop the next ones."""
        youtube = MagicMock()
        youtube.insert_subscription.side_effect = [
            Subscription("s1", "UC1"),
            YouTubeError("subscription insert error for channel 'UC2': forbidden"),
            Subscription("s3", "UC3"),
        ]
        command = SubscribeCommand(youtube, from_csv(io.StringIO("UC1\nUC2\nUC3\n")))

        with pytest.raises(YouTubeError, match="UC2"):
            command.run()

        assert youtube.insert_subscription.call_count == 3
        assert command.written == 2

    def test_subscribe_reports_malformed_input(self, fake_youtube):
        """Test malformed input lines are reported along with the run."""
        source = from_csv(io.StringIO('"UC1"x,T\nUC2\n'))

        with pytest.raises(InputError, match="csv read error"):
            SubscribeCommand(fake_youtube, source).run()

        assert [s.channel_id for s in fake_youtube.subscriptions] == ["UC2"]

    def test_unsubscribe(self):
        """Test unsubscribing from a channel."""
        youtube = FakeYouTube(subscriptions=[Subscription("s1", "UC1", "One")])

        assert UnsubscribeCommand(youtube, "UC1").run()

        assert youtube.subscriptions == []

    def test_unsubscribe_not_subscribed(self, fake_youtube):
        """Test unsubscribing from a channel the user does not follow."""
        with pytest.raises(SubscriptionNotFoundError):
            UnsubscribeCommand(fake_youtube, "UC1").run()

    def test_unsubscribe_requires_channel(self, fake_youtube):
        """Test a channel id is required."""
        with pytest.raises(ValueError):
            UnsubscribeCommand(fake_youtube, "").run()


class TestPlaylists:
    def test_list(self):
        """Test playlists are written with their video count."""
        youtube = FakeYouTube(playlists=[Playlist("PL1", "One", 3), Playlist("PL2", "Two", 0)])
        out, sink = csv_sink(["playlist_id", "playlist_title", "video_count"])

        ListPlaylistsCommand(youtube, sink).run()

        assert out.getvalue() == "PL1,One,3\nPL2,Two,0\n"

    def test_new_playlist_prints_id(self, fake_youtube):
        """Test the id of a created playlist is written."""
        out, sink = csv_sink(["playlist_id"])

        NewPlaylistCommand(fake_youtube, "Later", sink).run()

        assert out.getvalue() == "PL1\n"
        assert fake_youtube.playlists[0].playlist_title == "Later"

    def test_new_playlist_invalid_privacy(self, fake_youtube):
        """Test an unknown privacy status is rejected."""
        with pytest.raises(ValueError):
            NewPlaylistCommand(fake_youtube, "Later", privacy_status="secret").run()

    def test_delete_playlist(self, fake_youtube):
        """Test deleting a playlist."""
        DeletePlaylistCommand(fake_youtube, "PL1").run()

        assert fake_youtube.deleted_playlists == ["PL1"]

    def test_list_playlist(self, fake_youtube):
        """Test every video of a playlist is written."""
        fake_youtube.playlist_items["PL1"] = [
            PlaylistItem("p1", "v1", "First"),
            PlaylistItem("p2", "v2", "Second"),
        ]
        out, sink = csv_sink(["video_id", "video_title"])

        ListPlaylistCommand(fake_youtube, "PL1", sink).run()

        assert out.getvalue() == "v1,First\nv2,Second\n"

    def test_add_to_playlist(self, fake_youtube):
        """Test videos are added in input order and their item ids written."""
        out, sink = csv_sink(["playlist_item_id"])
        source = from_csv(io.StringIO("v1\nv2\n"))

        AddToPlaylistCommand(fake_youtube, "PL1", source, sink).run()

        assert [i.video_id for i in fake_youtube.playlist_items["PL1"]] == ["v1", "v2"]
        assert out.getvalue() == "pli-v1\npli-v2\n"


def uploads_of(channel_id, now, hours):
    """Uploads of a channel, newest first."""
    return [
        PlaylistItem(
            playlist_item_id=f"{channel_id}-{h}",
            video_id=f"{channel_id}-v{h}",
            channel_id=channel_id,
            published_at=(now - timedelta(hours=h)).strftime("%Y-%m-%dT%H:%M:%SZ"),
        )
        for h in hours
    ]


class TestLastUploads:
    def test_recent_uploads_sorted(self):
        """Test recent uploads of every channel are written once, oldest first."""
        now = datetime.now(timezone.utc).replace(microsecond=0)
        youtube = FakeYouTube(
            uploads={
                "UC1": uploads_of("UC1", now, [1, 3, 7, 9]),
                "UC2": uploads_of("UC2", now, [2, 4, 6, 8]),
            }
        )
        out, sink = csv_sink(["video_id"])
        source = from_csv(io.StringIO("UC1\nUC2\n"))

        LastUploadsCommand(youtube, now - timedelta(hours=5), source, sink, workers=3).run()

        assert out.getvalue().splitlines() == ["UC2-v4", "UC1-v3", "UC2-v2", "UC1-v1"]

    def test_failed_channel_is_reported(self):
        """Test an unknown channel is reported after the others are written."""
        now = datetime.now(timezone.utc).replace(microsecond=0)
        youtube = FakeYouTube(uploads={"UC1": uploads_of("UC1", now, [1, 2])})
        out, sink = csv_sink(["video_id"])
        source = from_csv(io.StringIO("UC1\nUCmissing\n"))

        with pytest.raises(ChannelNotFoundError, match="UCmissing"):
            LastUploadsCommand(youtube, now - timedelta(days=1), source, sink).run()

        assert out.getvalue().splitlines() == ["UC1-v2", "UC1-v1"]

    def test_single_channel(self):
        """Test a single channel given on the command line."""
        now = datetime.now(timezone.utc).replace(microsecond=0)
        youtube = FakeYouTube(uploads={"UC1": uploads_of("UC1", now, [30, 50])})
        out, sink = csv_sink(["video_id"])

        LastUploadsCommand(youtube, now - timedelta(days=7), from_string("UC1"), sink).run()

        assert out.getvalue().splitlines() == ["UC1-v50", "UC1-v30"]

    def test_requires_workers(self, fake_youtube):
        """Test at least one worker is required."""
        command = LastUploadsCommand(
            fake_youtube, datetime.now(timezone.utc), from_string("UC1"), workers=0
        )

        with pytest.raises(ValueError):
            command.run()


class TestTransportFailures:
    def test_subscribe_continues_after_transport_error(self, youtube_client):
        """Test a network failure on one channel does not stop the next ones."""
        execute = youtube_client.subscriptions.return_value.insert.return_value.execute
        execute.side_effect = [
            httplib2.HttpLib2Error("Redirected more times than redirection_limit allows."),
            subscription_resource("UC2", "Two", "sub-UC2"),
            subscription_resource("UC3", "Three", "sub-UC3"),
        ]
        out, sink = csv_sink(["subscription_id"])
        source = from_csv(io.StringIO("UC1\nUC2\nUC3\n"))

        with pytest.raises(YouTubeError, match="UC1"):
            SubscribeCommand(YouTubeAPI(youtube_client), source, sink).run()

        assert execute.call_count == 3
        assert out.getvalue() == "sub-UC2\nsub-UC3\n"

    def test_add_video_continues_after_refresh_error(self, youtube_client):
        """Test an expired login on one video does not stop the next ones."""
        execute = youtube_client.playlistItems.return_value.insert.return_value.execute
        execute.side_effect = [playlist_item_resource("v1"), RefreshError("invalid_grant")]
        out, sink = csv_sink(["playlist_item_id"])
        source = from_csv(io.StringIO("v1\nv2\n"))

        with pytest.raises(YouTubeError, match="invalid_grant"):
            AddToPlaylistCommand(YouTubeAPI(youtube_client), "PL1", source, sink).run()

        assert out.getvalue() == "pli-v1\n"

    def test_failure_is_logged_with_identifier(self):
        """Test each failed identifier is logged with what was being done."""
        youtube = MagicMock()
        error = YouTubeError("forbidden")
        youtube.insert_subscription.side_effect = error

        with patch("src.youtubetoolkit.commands.base.log_error") as mock_log_error:
            with pytest.raises(YouTubeError):
                SubscribeCommand(youtube, from_string("UC1")).run()

        mock_log_error.assert_called_once_with(error, "subscribing to UC1")
