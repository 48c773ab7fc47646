"""Utility functions for YouTube identifiers."""

import re

_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")


def _validated(value: str, kind: str, original: str) -> str:
    if _ID_PATTERN.match(value):
        return value
    raise ValueError(f"Invalid {kind} format: {original}. Must be a YouTube {kind} URL or ID")


def parse_playlist_url(playlist_str: str) -> str:
    """Extract playlist ID from a YouTube playlist URL or return the raw ID.

    Args:
        playlist_str: A YouTube playlist URL or ID

    Returns:
        The playlist ID

    Raises:
        ValueError if the input is not a valid playlist URL or ID
    """
    playlist_str = playlist_str.strip()
    url_match = re.search(r"[?&]list=([^&#]+)", playlist_str)
    if url_match:
        return url_match.group(1)
    return _validated(playlist_str, "playlist", playlist_str)


def parse_video_url(video_str: str) -> str:
    """Extract video ID from a watch, short or youtu.be URL or return the raw ID.

    Raises:
        ValueError if the input is not a valid video URL or ID
    """
    video_str = video_str.strip()
    url_match = re.search(r"[?&]v=([^&#]+)", video_str) or re.search(
        r"(?:youtu\.be/|/shorts/|/embed/)([^?&#/]+)", video_str
    )
    if url_match:
        return _validated(url_match.group(1), "video", video_str)
    return _validated(video_str, "video", video_str)


def parse_channel_url(channel_str: str) -> str:
    """Extract channel ID from a /channel/ URL or return the raw ID.

    Handles (@name) and custom URLs cannot be resolved without an API call and
    are rejected.

    Raises:
        ValueError if the input is not a valid channel URL or ID
    """
    channel_str = channel_str.strip()
    url_match = re.search(r"/channel/([^?&#/]+)", channel_str)
    if url_match:
        return _validated(url_match.group(1), "channel", channel_str)
    return _validated(channel_str, "channel", channel_str)
