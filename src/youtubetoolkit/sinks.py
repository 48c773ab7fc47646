"""Item sinks: where the normalized items of a run are written."""

import csv
import json
from abc import ABC, abstractmethod
from typing import Iterable, List, Sequence, TextIO

from wcwidth import wcswidth

from .errors import ErrorCollector, OutputError
from .logging_config import get_logger
from .models import Item

logger = get_logger(__name__)


class ItemSink(ABC):
    """Consumes a stream of items and writes them somewhere."""

    @abstractmethod
    def write(self, items: Iterable[Item], errors: ErrorCollector) -> int:
        """Write every item, reporting write failures to errors.

        Returns:
            Number of items written
        """


class CSVSink(ItemSink):
    """Writes the selected fields of every item as a CSV row."""

    def __init__(self, stream: TextIO, fields: Sequence[str]):
        self.stream = stream
        self.fields = list(fields)

    def write(self, items: Iterable[Item], errors: ErrorCollector) -> int:
        writer = csv.writer(self.stream, lineterminator="\n")
        written = 0
        for item in items:
            try:
                writer.writerow(item.as_record(self.fields))
                written += 1
            except (OSError, csv.Error) as e:
                errors.add(OutputError(f"csv write error: {e}"))
        try:
            self.stream.flush()
        except OSError as e:
            errors.add(OutputError(f"csv write error: {e}"))
        return written


class TableSink(ItemSink):
    """Writes items as a human readable table with aligned columns."""

    def __init__(self, stream: TextIO, fields: Sequence[str], padding: int = 2):
        self.stream = stream
        self.fields = list(fields)
        self.padding = padding

    @staticmethod
    def _width(text: str) -> int:
        width = wcswidth(text)
        # Non printable characters make wcswidth give up
        return width if width >= 0 else len(text)

    def format_rows(self, rows: List[List[str]]) -> List[str]:
        """Pad every column but the last to the width of its widest cell."""
        widths: List[int] = []
        for row in rows:
            for i, cell in enumerate(row[:-1]):
                width = self._width(cell) + self.padding
                if i == len(widths):
                    widths.append(width)
                elif width > widths[i]:
                    widths[i] = width

        lines = []
        for row in rows:
            cells = [
                cell + " " * (widths[i] - self._width(cell)) for i, cell in enumerate(row[:-1])
            ]
            cells.extend(row[-1:])
            lines.append("".join(cells))
        return lines

    def write(self, items: Iterable[Item], errors: ErrorCollector) -> int:
        # Column widths are only known once every row has been seen
        rows = [item.as_record(self.fields) for item in items]
        written = 0
        for line in self.format_rows(rows):
            try:
                self.stream.write(line + "\n")
                written += 1
            except OSError as e:
                errors.add(OutputError(f"table write error: {e}"))
        try:
            self.stream.flush()
        except OSError as e:
            errors.add(OutputError(f"table write error: {e}"))
        return written


class JSONLinesSink(ItemSink):
    """Writes every item as one JSON object per line."""

    def __init__(self, stream: TextIO):
        self.stream = stream

    def write(self, items: Iterable[Item], errors: ErrorCollector) -> int:
        written = 0
        for item in items:
            try:
                self.stream.write(json.dumps(item.as_dict(), ensure_ascii=False) + "\n")
                written += 1
            except (OSError, TypeError, ValueError) as e:
                errors.add(OutputError(f"jsonl write error: {e}"))
        try:
            self.stream.flush()
        except OSError as e:
            errors.add(OutputError(f"jsonl write error: {e}"))
        return written


class NullSink(ItemSink):
    """Discards every item."""

    def write(self, items: Iterable[Item], errors: ErrorCollector) -> int:
        written = 0
        for _ in items:
            written += 1
        return written
