"""Error handling utilities."""

import threading
from typing import List, Optional

from .logging_config import get_logger

logger = get_logger(__name__)


def log_error(error: Exception, context: Optional[str] = None) -> None:
    """Log an error with optional context.

    Args:
        error: The exception to log
        context: Optional context about where/why the error occurred
    """
    if context:
        logger.error("%s: %s", context, str(error))
    else:
        logger.error("%s", str(error))


class YouTubeError(Exception):
    """Base class for YouTube toolkit errors."""

    pass


class AuthenticationError(YouTubeError):
    """Error raised when the OAuth2 authorization cannot be completed."""

    pass


class ChannelNotFoundError(YouTubeError):
    """Error raised when a channel id does not resolve to a channel."""

    pass


class PlaylistNotFoundError(YouTubeError):
    """Error raised when a playlist is not found."""

    pass


class SubscriptionNotFoundError(YouTubeError):
    """Error raised when a channel is not in the user subscriptions."""

    pass


class InputError(YouTubeError):
    """Error raised when an input record cannot be read."""

    pass


class OutputError(YouTubeError):
    """Error raised when an item cannot be written to the output."""

    pass


class MultipleErrors(YouTubeError):
    """Composite error used when one error is not enough."""

    def __init__(self, errors: List[Exception]):
        """Initialize error.

        Args:
            errors: Collected errors, in the order they were reported
        """
        self.errors = list(errors)
        super().__init__(self._message())

    def _message(self) -> str:
        if len(self.errors) == 1:
            return str(self.errors[0])
        lines = ["multiple errors:"]
        lines.extend(f"- {error}" for error in self.errors)
        return "\n".join(lines)

    def __len__(self) -> int:
        return len(self.errors)

    def __iter__(self):
        return iter(self.errors)


class ErrorCollector:
    """Collects the errors reported by every stage of one pipeline run.

    Any number of threads may call ``add`` concurrently. The owner calls
    ``finish`` exactly once, after every stage is done, to get the outcome of
    the run: ``None``, the single reported error, or a ``MultipleErrors``.
    """

    def __init__(self) -> None:
        self._errors: List[Exception] = []
        self._lock = threading.Lock()
        self._finished = False

    def add(self, error: Optional[Exception]) -> None:
        """Report an error. ``None`` is accepted and ignored.

        Raises:
            RuntimeError: If the collector was already finished
        """
        if error is None:
            return
        with self._lock:
            if self._finished:
                raise RuntimeError("error collector already finished") from error
            self._errors.append(error)
        logger.debug("Collected error: %s", error)

    def __len__(self) -> int:
        with self._lock:
            return len(self._errors)

    def finish(self) -> Optional[Exception]:
        """Close the collector and reduce the collected errors.

        Returns:
            None if nothing was reported, the error itself if only one was,
            otherwise a MultipleErrors holding all of them

        Raises:
            RuntimeError: If called more than once
        """
        with self._lock:
            if self._finished:
                raise RuntimeError("error collector already finished")
            self._finished = True
            errors = list(self._errors)

        if not errors:
            return None
        if len(errors) == 1:
            return errors[0]
        return MultipleErrors(errors)
