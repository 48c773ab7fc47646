"""Base command class for YouTube operations."""

from typing import Iterable, Iterator, Optional

from ..api import YouTubeAPI
from ..errors import ErrorCollector, YouTubeError, log_error
from ..logging_config import get_logger
from ..sinks import ItemSink, NullSink

# Get logger for this module
logger = get_logger(__name__)


class YouTubeCommand:
    """Base class for YouTube commands.

    A command is one pipeline run. Every stage of the run reports its errors
    to the collector passed to ``_run``; ``run`` raises what the collector
    reduces them to once the whole run is over.
    """

    def __init__(self, youtube: YouTubeAPI, sink: Optional[ItemSink] = None):
        """Initialize command.

        Args:
            youtube: YouTube API wrapper
            sink: Where the produced items are written. Discarded if None.
        """
        self.youtube = youtube
        self.sink = sink if sink is not None else NullSink()
        self.written = 0

    def validate(self) -> None:
        """Validate command parameters.

        Raises:
            ValueError: If parameters are invalid
        """
        if not self.youtube:
            raise ValueError("YouTube API client is required")

    def run(self) -> bool:
        """Run the command.

        Returns:
            bool: True if the run completed without errors

        Raises:
            ValueError: If parameters are invalid
            YouTubeError: The error of the run, a MultipleErrors if several were reported
        """
        self.validate()
        errors = ErrorCollector()
        try:
            self._run(errors)
        except YouTubeError as e:
            errors.add(e)
        except Exception as e:  # pylint: disable=broad-except
            error = YouTubeError(str(e))
            error.__cause__ = e
            errors.add(error)

        error = errors.finish()
        if error is None:
            return True
        if isinstance(error, YouTubeError):
            raise error
        raise YouTubeError(str(error)) from error

    def _run(self, errors: ErrorCollector) -> None:
        """Internal run implementation."""
        raise NotImplementedError

    def _write(self, items: Iterable, errors: ErrorCollector) -> None:
        self.written += self.sink.write(items, errors)


def each_reported(
    source: Iterable[str], errors: ErrorCollector, func, description: str
) -> Iterator:
    """Call func on every id of source, yielding results and reporting failures.

    Args:
        source: Identifiers to process, in order
        errors: Collector for the failures
        func: Called with one identifier
        description: Verb used in the log, e.g. "subscribing to"
    """
    for identifier in source:
        logger.info("%s %s...", description, identifier)
        try:
            result = func(identifier)
        except YouTubeError as e:
            log_error(e, f"{description} {identifier}")
            errors.add(e)
            continue
        yield result
