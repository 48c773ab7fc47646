"""Streaming pipeline stages.

Stages are plain iterators chained together. Each one reports its failures to
the ErrorCollector of the run instead of raising, so one bad identifier or one
malformed input line never stops the rest of the run.
"""

import csv
import queue
import threading
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Iterator, TextIO, TypeVar

from .api import PlaylistItemFilter, YouTubeAPI
from .errors import ErrorCollector, InputError, YouTubeError
from .logging_config import get_logger
from .models import PlaylistItem

logger = get_logger(__name__)

T = TypeVar("T")
R = TypeVar("R")

_DONE = object()

# A source is called with the collector of the run and returns the ids
StringSource = Callable[[ErrorCollector], Iterable[str]]


#
# Sources
#


def literal_source(value: str) -> Iterator[str]:
    """Yield a single caller supplied string."""
    yield value


def csv_first_field_source(stream: TextIO, errors: ErrorCollector) -> Iterator[str]:
    """Yield the first field of every CSV record read from stream.

    A plain list with one id per line is valid input too. Blank lines are
    skipped; malformed records are reported and skipped.

    Args:
        stream: Text stream to read, e.g. sys.stdin
        errors: Collector for the read errors
    """
    reader = csv.reader(stream, strict=True)
    while True:
        try:
            record = next(reader)
        except StopIteration:
            return
        except csv.Error as e:
            errors.add(InputError(f"csv read error (line {reader.line_num}): {e}"))
            continue
        if record and record[0]:
            yield record[0]


def from_string(value: str) -> StringSource:
    """Source of a single id, e.g. a command line argument."""

    def source(errors: ErrorCollector) -> Iterator[str]:
        return literal_source(value)

    return source


def from_csv(stream: TextIO) -> StringSource:
    """Source of the ids in the first column of a CSV stream."""

    def source(errors: ErrorCollector) -> Iterator[str]:
        return csv_first_field_source(stream, errors)

    return source


def map_ids(source: StringSource, func: Callable[[str], str]) -> StringSource:
    """Source applying func to every id of source, in order.

    A ValueError raised by func is reported as an input error and the id is
    skipped.
    """

    def mapped(errors: ErrorCollector) -> Iterator[str]:
        for value in source(errors):
            try:
                yield func(value)
            except ValueError as e:
                errors.add(InputError(str(e)))

    return mapped


def report_errors(items: Iterable[T], errors: ErrorCollector) -> Iterator[T]:
    """Pass items through, reporting an upstream failure as the end of the stream.

    Items produced before the failure are still delivered.
    """
    try:
        yield from items
    except Exception as e:  # pylint: disable=broad-except
        errors.add(e)


#
# Fan-out
#


class SharedSource:
    """Iterator wrapper letting several threads claim items one at a time."""

    def __init__(self, items: Iterable[T]):
        self._iterator = iter(items)
        self._lock = threading.Lock()

    def claim(self) -> Any:
        """Take the next item, or the end marker when the source is exhausted."""
        with self._lock:
            return next(self._iterator, _DONE)


def fan_out(
    source: Iterable[T],
    func: Callable[[T], Iterable[R]],
    errors: ErrorCollector,
    workers: int = 3,
    buffer_size: int = 10,
) -> Iterator[R]:
    """Run func on every source item across a pool of worker threads.

    The results of all the workers are merged into the returned iterator, in
    no particular order. The iterator ends only after every worker has run out
    of input and finished its current item.

    Args:
        source: Items to process; each one is claimed by exactly one worker
        func: Called with one item, returns an iterable of results
        errors: Collector for the failures of func and of the source
        workers: Number of worker threads
        buffer_size: Capacity of the merged output queue

    Raises:
        ValueError: If workers is lower than 1
    """
    if workers < 1:
        raise ValueError("at least one worker is required")

    shared = SharedSource(source)
    output: "queue.Queue[Any]" = queue.Queue(maxsize=buffer_size)

    def work() -> None:
        while True:
            try:
                item = shared.claim()
            except Exception as e:  # pylint: disable=broad-except
                errors.add(e)
                return
            if item is _DONE:
                return
            try:
                for result in func(item):
                    output.put(result)
            except Exception as e:  # pylint: disable=broad-except
                errors.add(e)

    threads = [
        threading.Thread(target=work, name=f"fan-out-{i}", daemon=True) for i in range(workers)
    ]

    def join() -> None:
        for thread in threads:
            thread.join()
        output.put(_DONE)

    for thread in threads:
        thread.start()
    threading.Thread(target=join, name="fan-out-join", daemon=True).start()

    while True:
        result = output.get()
        if result is _DONE:
            return
        yield result


#
# Ordering
#


def order_by(items: Iterable[T], key: Callable[[T], Any]) -> Iterator[T]:
    """Yield items sorted by key, oldest first for timestamps.

    The whole input is read before the first item is yielded, so this must
    not be used on unbounded sources.
    """
    buffered = sorted(items, key=key)
    logger.debug("Sorted %d buffered items", len(buffered))
    yield from buffered


#
# Playlist item filters
#


def accept_all() -> PlaylistItemFilter:
    """Filter accepting every playlist item."""

    def predicate(item: PlaylistItem) -> bool:
        return True

    return predicate


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 API timestamp such as 2023-04-01T10:00:00Z."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def published_after(since: datetime) -> PlaylistItemFilter:
    """Filter accepting items published strictly after since.

    Meant for uploads playlists, which list the newest video first: the first
    older item means every following item is older too.

    Args:
        since: Cutoff time; a naive datetime is taken as UTC
    """
    if since.tzinfo is None:
        since = since.replace(tzinfo=timezone.utc)

    def predicate(item: PlaylistItem) -> bool:
        try:
            published = parse_timestamp(item.published_at)
        except ValueError as e:
            raise YouTubeError(f"time error {item.published_at!r}: {e}") from e
        return published > since

    return predicate


#
# Per-identifier work
#


def channel_uploads(
    api: YouTubeAPI, predicate: PlaylistItemFilter
) -> Callable[[str], Iterator[PlaylistItem]]:
    """Build the function listing the uploads of one channel.

    The channel's uploads playlist is resolved first; its items are then
    listed until predicate rejects one.
    """

    def uploads(channel_id: str) -> Iterator[PlaylistItem]:
        logger.info("Checking channel %s", channel_id)
        channel = api.get_channel(channel_id)
        if not channel.uploads_playlist_id:
            raise YouTubeError(f'no uploads playlist for channel id="{channel_id}"')
        yield from api.list_playlist_items(channel.uploads_playlist_id, predicate)

    return uploads
