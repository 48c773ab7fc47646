"""Last uploads command."""

from datetime import datetime
from typing import Optional

from .. import config
from ..api import YouTubeAPI
from ..errors import ErrorCollector
from ..logging_config import get_logger
from ..pipeline import StringSource, channel_uploads, fan_out, order_by, published_after
from ..sinks import ItemSink
from .base import YouTubeCommand

logger = get_logger(__name__)


class LastUploadsCommand(YouTubeCommand):
    """Write the videos uploaded since a given time by a list of channels.

    Channels are checked concurrently by a pool of workers. Videos are written
    sorted by publication time, oldest first, once every channel is done.
    """

    def __init__(
        self,
        youtube: YouTubeAPI,
        since: datetime,
        source: StringSource,
        sink: Optional[ItemSink] = None,
        workers: int = config.UPLOADS_WORKERS,
    ) -> None:
        """Initialize command.

        Args:
            youtube: YouTube API wrapper
            since: Only videos published after this time are written
            source: Channel ids
            sink: Where the videos are written
            workers: Number of channels checked at the same time
        """
        super().__init__(youtube, sink)
        self.since = since
        self.source = source
        self.workers = workers

    def validate(self) -> None:
        super().validate()
        if self.since is None:
            raise ValueError("A start time is required")
        if not callable(self.source):
            raise ValueError("A source of channel ids is required")
        if self.workers < 1:
            raise ValueError("At least one worker is required")

    def _run(self, errors: ErrorCollector) -> None:
        logger.debug("Listing uploads since %s with %d workers", self.since, self.workers)
        uploads = fan_out(
            self.source(errors),
            channel_uploads(self.youtube, published_after(self.since)),
            errors,
            workers=self.workers,
        )
        self._write(order_by(uploads, key=lambda item: item.published_at), errors)
