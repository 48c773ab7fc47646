"""YouTube API authentication handling."""

import os
import pickle
from typing import Optional

import httplib2
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google_auth_httplib2 import AuthorizedHttp
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient import model
from googleapiclient.discovery import build

from . import config
from .api import YouTubeAPI
from .errors import AuthenticationError
from .logging_config import attach_logger, get_logger
from .quota import QuotaCounter

logger = get_logger(__name__)


def enable_http_debug() -> None:
    """Log every API request and response through the package logger."""
    model.dump_request_response = True
    attach_logger("googleapiclient.model")


def load_credentials(token_file: str):
    """Load pickled credentials, or None if there are none to load."""
    if not os.path.exists(token_file):
        return None
    try:
        with open(token_file, "rb") as token:
            return pickle.load(token)
    except (OSError, pickle.UnpicklingError, EOFError) as e:
        logger.warning("Ignoring unreadable token file %s: %s", token_file, str(e))
        return None


def save_credentials(token_file: str, creds) -> None:
    token_dir = os.path.dirname(token_file)
    if token_dir:
        os.makedirs(token_dir, exist_ok=True)
    with open(token_file, "wb") as token:
        pickle.dump(creds, token)


def authorize(client_secrets_file: str, token_file: str):
    """Return valid OAuth2 credentials for the YouTube API.

    Saved credentials are refreshed when expired. Without usable saved
    credentials the installed-app flow opens the browser on a local server.
    New or refreshed credentials are written back to token_file.

    Raises:
        AuthenticationError: If no valid credentials can be obtained
    """
    creds = load_credentials(token_file)
    if creds and creds.valid:
        return creds

    if creds and creds.expired and creds.refresh_token:
        try:
            creds.refresh(Request())
        except GoogleAuthError as e:
            logger.warning("Token refresh failed, authorizing again: %s", str(e))
            creds = None
    else:
        creds = None

    if creds is None:
        if not os.path.exists(client_secrets_file):
            raise AuthenticationError(f"client secret file not found: {client_secrets_file}")
        try:
            flow = InstalledAppFlow.from_client_secrets_file(
                client_secrets_file, config.YOUTUBE_SCOPES
            )
            creds = flow.run_local_server(port=0)
        except (GoogleAuthError, ValueError, OSError) as e:
            raise AuthenticationError(f"oauth error: {str(e)}") from e

    try:
        save_credentials(token_file, creds)
    except OSError as e:
        raise AuthenticationError(f"save token file error: {str(e)}") from e
    return creds


def http_factory(creds):
    """Return a callable building a new authorized HTTP object for creds."""

    def new_http():
        return AuthorizedHttp(creds, http=httplib2.Http())

    return new_http


def get_youtube_api(
    client_secrets_file: Optional[str] = None,
    token_file: Optional[str] = None,
    debug_http: bool = False,
    quota: Optional[QuotaCounter] = None,
) -> Optional[YouTubeAPI]:
    """
    Get an authenticated YouTube API wrapper.
    Returns None if authentication fails.
    """
    client_secrets_file = client_secrets_file or config.CLIENT_SECRETS_FILE
    token_file = token_file or config.TOKEN_FILE

    if debug_http:
        enable_http_debug()

    try:
        creds = authorize(client_secrets_file, token_file)
    except AuthenticationError as e:
        logger.error("Authentication failed: %s", str(e))
        return None

    try:
        youtube = build("youtube", "v3", credentials=creds)
    except Exception as e:  # pylint: disable=broad-except
        logger.error("Failed to build YouTube service: %s", str(e))
        return None

    return YouTubeAPI(youtube, quota=quota, http_factory=http_factory(creds))
