"""Subscription commands."""

from typing import Iterator, Optional

from ..api import YouTubeAPI
from ..errors import ErrorCollector
from ..logging_config import get_logger
from ..models import Subscription
from ..pipeline import StringSource, report_errors
from ..sinks import ItemSink
from .base import YouTubeCommand, each_reported

logger = get_logger(__name__)


class ListSubscriptionsCommand(YouTubeCommand):
    """Write every channel the user is subscribed to."""

    def _run(self, errors: ErrorCollector) -> None:
        subscriptions = report_errors(self.youtube.list_subscriptions(), errors)
        self._write(subscriptions, errors)


class SubscribeCommand(YouTubeCommand):
    """Subscribe to every channel of a source of channel ids.

    The created subscriptions are written to the sink. A channel that cannot
    be subscribed to is reported and the next one is processed.
    """

    def __init__(
        self, youtube: YouTubeAPI, source: StringSource, sink: Optional[ItemSink] = None
    ) -> None:
        super().__init__(youtube, sink)
        self.source = source

    def validate(self) -> None:
        super().validate()
        if not callable(self.source):
            raise ValueError("A source of channel ids is required")

    def _subscribe(self, errors: ErrorCollector) -> Iterator[Subscription]:
        for subscription in each_reported(
            self.source(errors), errors, self.youtube.insert_subscription, "subscribing to"
        ):
            logger.info("channel %s added", subscription.channel_title or subscription.channel_id)
            yield subscription

    def _run(self, errors: ErrorCollector) -> None:
        self._write(self._subscribe(errors), errors)


class UnsubscribeCommand(YouTubeCommand):
    """Unsubscribe from one channel."""

    def __init__(self, youtube: YouTubeAPI, channel_id: str) -> None:
        super().__init__(youtube)
        self.channel_id = channel_id

    def validate(self) -> None:
        super().validate()
        if not self.channel_id:
            raise ValueError("Channel ID is required")

    def _run(self, errors: ErrorCollector) -> None:
        logger.info("unsubscribing from %s...", self.channel_id)
        self.youtube.delete_subscription(self.channel_id)
        logger.info("unsubscribed from %s", self.channel_id)
