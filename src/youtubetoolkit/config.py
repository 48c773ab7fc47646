"""Configuration and environment settings."""

import os
from dotenv import load_dotenv

load_dotenv()

# Directory Settings
DATA_DIR = os.getenv("DATA_DIR", "data")
CREDENTIALS_DIR = os.getenv("CREDENTIALS_DIR", os.path.join(DATA_DIR, "credentials"))

# YouTube API Settings
YOUTUBE_SCOPES = ["https://www.googleapis.com/auth/youtube"]
CLIENT_SECRETS_FILE = os.getenv("GOOGLE_CLIENT_SECRETS_FILE", "client_secret.json")
TOKEN_FILE = os.getenv("YOUTUBETOOLKIT_TOKEN_FILE", os.path.join(CREDENTIALS_DIR, "token.pickle"))
PAGE_SIZE = 50  # maxResults accepted by the list endpoints

# Pipeline Settings
UPLOADS_WORKERS = int(os.getenv("YOUTUBETOOLKIT_WORKERS", "3"))
LAST_UPLOADS_DAYS = 7

# Output fields used when --fields is not given, per item kind
DEFAULT_FIELDS = {
    "subscription": ["channel_id", "channel_title"],
    "playlist": ["playlist_id", "playlist_title", "video_count"],
    "playlist_item": [
        "video_id",
        "video_title",
        "video_url",
        "channel_id",
        "channel_title",
        "channel_url",
    ],
    "upload": ["video_id", "video_title", "published_at", "channel_id", "channel_title"],
}
