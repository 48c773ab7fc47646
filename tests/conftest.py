"""Common test fixtures and utilities."""

from unittest.mock import MagicMock

import pytest

from fakes import FakeYouTube
from src.youtubetoolkit.api import YouTubeAPI
from src.youtubetoolkit.quota import QuotaCounter


@pytest.fixture
def youtube_client() -> MagicMock:
    """Create a mock googleapiclient YouTube resource.

    Returns:
        MagicMock: Mock client with empty list responses configured
    """
    mock = MagicMock()
    mock.subscriptions.return_value.list.return_value.execute.return_value = {"items": []}
    mock.playlists.return_value.list.return_value.execute.return_value = {"items": []}
    mock.playlistItems.return_value.list.return_value.execute.return_value = {"items": []}
    return mock


@pytest.fixture
def api(youtube_client) -> YouTubeAPI:
    """YouTubeAPI wrapping the mock client."""
    return YouTubeAPI(youtube_client, quota=QuotaCounter())


@pytest.fixture
def fake_youtube() -> FakeYouTube:
    """Empty in-memory YouTube."""
    return FakeYouTube()
