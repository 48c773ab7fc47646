"""Command-line interface for YouTube subscriptions and playlists."""

import argparse
import sys
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional, TextIO

from tqdm import tqdm

from . import __version__, auth, commands, config
from .api import YouTubeAPI
from .errors import ErrorCollector, YouTubeError
from .logging_config import enable_debug, get_logger
from .models import ITEM_TYPES, UnknownFieldError
from .pipeline import StringSource, from_csv, from_string, map_ids
from .quota import QuotaCounter
from .sinks import CSVSink, ItemSink, JSONLinesSink, NullSink, TableSink
from .utils import parse_channel_url, parse_playlist_url, parse_video_url

logger = get_logger(__name__)

# Builds the command of a parsed command line once the API is available
CommandFactory = Callable[[YouTubeAPI], commands.YouTubeCommand]


def parse_fields(value: str) -> List[str]:
    """Split a comma separated --fields value."""
    return [field.strip() for field in value.split(",") if field.strip()]


def non_negative_int(value: str) -> int:
    """Parse a count that cannot be negative, e.g. --days."""
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be 0 or more, got {value}")
    return number


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(
        prog="youtubetoolkit",
        description="Manage YouTube subscriptions and playlists",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-s",
        "--client-secret",
        default=config.CLIENT_SECRETS_FILE,
        help="OAuth2 client secret JSON file (default: %(default)s)",
    )
    parser.add_argument(
        "-t",
        "--token",
        default=config.TOKEN_FILE,
        help="Login token file (default: %(default)s)",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "-d", "--debug-http", action="store_true", help="Log every HTTP request and response"
    )

    output = parser.add_mutually_exclusive_group()
    output.add_argument(
        "--csv", dest="output", action="store_const", const="csv", help="CSV output (default)"
    )
    output.add_argument(
        "--table", dest="output", action="store_const", const="table", help="Table output"
    )
    output.add_argument(
        "--jsonl", dest="output", action="store_const", const="jsonl", help="JSON Lines output"
    )
    parser.set_defaults(output="csv")
    parser.add_argument(
        "--fields",
        type=parse_fields,
        default=None,
        help="Comma separated fields for CSV/table output. See each command for the fields.",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # Subscriptions
    subs_parser = subparsers.add_parser("subscriptions", help="Manage user subscriptions")
    subs_actions = subs_parser.add_subparsers(dest="action")
    subs_actions.add_parser(
        "list",
        help="List the channels from user subscriptions",
        description=_fields_help("subscription"),
    )
    subs_add = subs_actions.add_parser(
        "add",
        help="Subscribe to a channel",
        description="Subscribe to a channel. To add multiple channels, send to stdin a list "
        "of channel ids (or a CSV with ids in the first column).",
    )
    subs_add.add_argument("channel", nargs="?", help="Channel ID or URL")
    _add_print_id(subs_add, "subscription id of the added channel(s)")
    _add_progress(subs_add)
    subs_del = subs_actions.add_parser("del", help="Unsubscribe from a channel")
    subs_del.add_argument("channel", help="Channel ID or URL")

    # Playlists
    pls_parser = subparsers.add_parser(
        "playlists", help="Manage user playlists", description=_fields_help("playlist")
    )
    pls_actions = pls_parser.add_subparsers(dest="action")
    pls_actions.add_parser(
        "list", help="List all user playlists", description=_fields_help("playlist")
    )
    pls_new = pls_actions.add_parser(
        "new", help="Create a new private playlist and print its id"
    )
    pls_new.add_argument("title", help="Playlist title")
    pls_new.add_argument(
        "--privacy",
        choices=["private", "unlisted", "public"],
        default="private",
        help="Privacy status (default: %(default)s)",
    )
    pls_del = pls_actions.add_parser("del", help="Delete a playlist")
    pls_del.add_argument("playlist", help="Playlist ID or URL")

    # Playlist
    pl_parser = subparsers.add_parser(
        "playlist", help="Manage a playlist", description=_fields_help("playlist_item")
    )
    pl_parser.add_argument("--id", dest="playlist", required=True, help="Playlist ID or URL")
    pl_actions = pl_parser.add_subparsers(dest="action")
    pl_actions.add_parser(
        "list", help="List the videos of the playlist", description=_fields_help("playlist_item")
    )
    pl_add = pl_actions.add_parser(
        "add",
        help="Add a video to the playlist",
        description="Add a video to the playlist. To add multiple videos, send to stdin a "
        "list of video ids (or a CSV with ids in the first column).",
    )
    pl_add.add_argument("video", nargs="?", help="Video ID or URL")
    _add_print_id(pl_add, "playlist item id of the added video(s)")
    _add_progress(pl_add)

    # Last uploads
    uploads_parser = subparsers.add_parser(
        "lastuploads",
        help="List channels' last video uploads",
        description="List channels' last video uploads sorted by the published date (oldest "
        "first). Multiple channel ids are read from stdin (one per line, or a CSV with ids "
        "in the first column). " + _fields_help("upload"),
    )
    uploads_parser.add_argument("channel", nargs="?", help="Channel ID or URL")
    uploads_parser.add_argument(
        "--days",
        type=non_negative_int,
        default=config.LAST_UPLOADS_DAYS,
        help="Days since (default: %(default)s)",
    )
    uploads_parser.add_argument(
        "--workers",
        type=int,
        default=config.UPLOADS_WORKERS,
        help="Channels checked at the same time (default: %(default)s)",
    )
    _add_progress(uploads_parser)

    return parser


def _fields_help(kind: str) -> str:
    item_type = ITEM_TYPES[kind]
    return "Available fields for CSV/table output: {}. Default: {}.".format(
        ", ".join(item_type.field_names()), ", ".join(config.DEFAULT_FIELDS[kind])
    )


def _add_print_id(parser: argparse.ArgumentParser, what: str) -> None:
    parser.add_argument(
        "-i", "--print-id", action="store_true", help=f"Print to stdout the {what}"
    )


def _add_progress(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--progress", action="store_true", help="Show a progress bar of the processed ids"
    )


def stdin_is_piped(stream: Optional[TextIO] = None) -> bool:
    """Check whether data is being piped to stdin."""
    stream = stream if stream is not None else sys.stdin
    return stream is not None and not stream.isatty()


def make_sink(args: argparse.Namespace, kind: str, stream: TextIO) -> ItemSink:
    """Build the sink selected by the output flags.

    Raises:
        UnknownFieldError: If a requested field does not exist for this kind
    """
    item_type = ITEM_TYPES[kind]
    fields = item_type.validate_fields(args.fields or config.DEFAULT_FIELDS[kind])
    if args.output == "table":
        return TableSink(stream, fields)
    if args.output == "jsonl":
        return JSONLinesSink(stream)
    return CSVSink(stream, fields)


def make_id_sink(args: argparse.Namespace, kind: str, id_field: str, stream: TextIO) -> ItemSink:
    """Sink of the created items: their id only, the full item, or nothing."""
    if not getattr(args, "print_id", False):
        return NullSink()
    if args.output == "csv" and not args.fields:
        return CSVSink(stream, [id_field])
    return make_sink(args, kind, stream)


def make_source(
    value: Optional[str], parse: Callable[[str], str], progress: bool, desc: str
) -> StringSource:
    """Source of ids: the command line value, or the lines piped to stdin."""
    if value:
        return from_string(parse(value))

    source = map_ids(from_csv(sys.stdin), parse)
    if not progress:
        return source

    def with_progress(errors: ErrorCollector):
        return tqdm(source(errors), desc=desc, unit="id", file=sys.stderr)

    return with_progress


def build_command(
    args: argparse.Namespace, parsers: dict, stdout: TextIO
) -> Optional[CommandFactory]:
    """Map a parsed command line to a command factory.

    Returns:
        The factory, or None when the help was printed instead

    Raises:
        UnknownFieldError: If --fields names an unknown field
        ValueError: If an id argument is invalid
    """
    command = args.command
    action = getattr(args, "action", None)
    progress = getattr(args, "progress", False)

    if command == "subscriptions":
        if action in (None, "list"):
            sink = make_sink(args, "subscription", stdout)
            return lambda api: commands.ListSubscriptionsCommand(api, sink)
        if action == "add":
            if not args.channel and not stdin_is_piped():
                parsers["subscriptions add"].print_help()
                return None
            source = make_source(args.channel, parse_channel_url, progress, "Subscribing")
            sink = make_id_sink(args, "subscription", "subscription_id", stdout)
            return lambda api: commands.SubscribeCommand(api, source, sink)
        channel_id = parse_channel_url(args.channel)
        return lambda api: commands.UnsubscribeCommand(api, channel_id)

    if command == "playlists":
        if action in (None, "list"):
            sink = make_sink(args, "playlist", stdout)
            return lambda api: commands.ListPlaylistsCommand(api, sink)
        if action == "new":
            if args.output == "csv" and not args.fields:
                sink = CSVSink(stdout, ["playlist_id"])
            else:
                sink = make_sink(args, "playlist", stdout)
            return lambda api: commands.NewPlaylistCommand(api, args.title, sink, args.privacy)
        playlist_id = parse_playlist_url(args.playlist)
        return lambda api: commands.DeletePlaylistCommand(api, playlist_id)

    if command == "playlist":
        playlist_id = parse_playlist_url(args.playlist)
        if action in (None, "list"):
            sink = make_sink(args, "playlist_item", stdout)
            return lambda api: commands.ListPlaylistCommand(api, playlist_id, sink)
        if not args.video and not stdin_is_piped():
            parsers["playlist add"].print_help()
            return None
        source = make_source(args.video, parse_video_url, progress, "Adding videos")
        sink = make_id_sink(args, "playlist_item", "playlist_item_id", stdout)
        return lambda api: commands.AddToPlaylistCommand(api, playlist_id, source, sink)

    if command == "lastuploads":
        if not args.channel and not stdin_is_piped():
            parsers["lastuploads"].print_help()
            return None
        since = datetime.now(timezone.utc) - timedelta(days=args.days)
        source = make_source(args.channel, parse_channel_url, progress, "Checking channels")
        sink = make_sink(args, "upload", stdout)
        workers = args.workers
        return lambda api: commands.LastUploadsCommand(api, since, source, sink, workers)

    return None


def _subparsers(parser: argparse.ArgumentParser) -> dict:
    """Index the sub-command parsers by their command line, e.g. "playlist add"."""
    found = {}

    def walk(current: argparse.ArgumentParser, prefix: str) -> None:
        for action in current._actions:  # pylint: disable=protected-access
            if isinstance(action, argparse._SubParsersAction):  # pylint: disable=protected-access
                for name, sub in action.choices.items():
                    key = f"{prefix} {name}".strip()
                    found[key] = sub
                    walk(sub, key)

    walk(parser, "")
    return found


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point.

    Returns:
        int: Exit code
    """
    parser = create_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        return 1 if e.code == 2 else e.code

    if args.debug:
        enable_debug()

    if not args.command:
        parser.print_help()
        return 1

    try:
        factory = build_command(args, _subparsers(parser), sys.stdout)
    except UnknownFieldError as e:
        logger.error("Invalid --fields: %s", str(e))
        return 1
    except ValueError as e:
        logger.error("Invalid argument: %s", str(e))
        return 1
    if factory is None:
        return 0

    quota = QuotaCounter()
    youtube = auth.get_youtube_api(
        client_secrets_file=args.client_secret,
        token_file=args.token,
        debug_http=args.debug_http,
        quota=quota,
    )
    if not youtube:
        logger.error("Command failed: %s", "Failed to get YouTube service")
        return 1

    try:
        factory(youtube).run()
        return 0
    except YouTubeError as e:
        logger.error("Error: %s", str(e))
        return 1
    except ValueError as e:
        logger.error("Command failed: %s", str(e))
        return 1
    finally:
        logger.info("Quota cost: %d units", quota.used)


if __name__ == "__main__":
    sys.exit(main())
