"""CSV batch import for Task Capture.

Parses a spreadsheet of tasks, one per row, through the natural language
parser. Only the first column is read; a first row mentioning "task",
"title" or "description" is treated as a header.
"""

import csv
import io
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path

from taskcapture.config import settings
from taskcapture.services.parser import ParsedTask, TaskParser, get_task_parser

logger = logging.getLogger(__name__)

HEADER_WORDS = ("task", "title", "description")

SAMPLE_CSV = "\n".join(
    [
        "Task Description",
        "Review project proposal for John by tomorrow P1",
        "Schedule team meeting end of week about quarterly planning",
        "Call client about urgent issue P2",
        "Prepare presentation for Sarah by Friday",
        "Update documentation P3",
        "Fix bug in authentication system by mid August P1",
    ]
)


class CsvImportError(Exception):
    """Raised when a CSV file cannot be read."""


@dataclass
class ImportedTask:
    """One CSV row and what the parser made of it."""

    original_text: str
    parsed: ParsedTask | None
    is_valid: bool
    error: str | None = None


@dataclass
class ImportResult:
    """Result of importing a CSV document."""

    tasks: list[ImportedTask] = field(default_factory=list)

    @property
    def valid_tasks(self) -> list[ParsedTask]:
        return [task.parsed for task in self.tasks if task.is_valid and task.parsed is not None]

    @property
    def valid_count(self) -> int:
        return len(self.valid_tasks)

    @property
    def invalid_count(self) -> int:
        return len(self.tasks) - self.valid_count


class CsvImporter:
    """Parses CSV rows into tasks.

    Args:
        parser: Parser to use. Defaults to the shared TaskParser.
        min_length: Shortest first-column value treated as a task.
            Defaults to settings.csv_min_task_length.
    """

    def __init__(self, parser: TaskParser | None = None, min_length: int | None = None):
        self.parser = parser or get_task_parser()
        self.min_length = settings.csv_min_task_length if min_length is None else min_length

    def import_file(
        self,
        path: Path,
        known_names: Sequence[str] | None = None,
        today: date | None = None,
    ) -> ImportResult:
        """Import tasks from a CSV file.

        Raises:
            CsvImportError: If the file cannot be read as UTF-8 text
        """
        try:
            content = Path(path).read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as e:
            raise CsvImportError(f"Cannot read {path}: {e}") from e

        logger.info(f"Importing tasks from {path}")
        return self.import_text(content, known_names, today)

    def import_text(
        self,
        content: str,
        known_names: Sequence[str] | None = None,
        today: date | None = None,
    ) -> ImportResult:
        """Import tasks from CSV content."""
        rows = [row for row in csv.reader(io.StringIO(content)) if any(cell.strip() for cell in row)]

        if rows and self._is_header(rows[0]):
            rows = rows[1:]

        result = ImportResult()
        for row in rows:
            task_text = row[0].strip() if row else ""
            if len(task_text) < self.min_length:
                continue

            try:
                parsed = self.parser.parse(task_text, known_names, today)
            except Exception as e:
                logger.error(f"Failed to parse task '{task_text}': {e}")
                result.tasks.append(
                    ImportedTask(
                        original_text=task_text,
                        parsed=None,
                        is_valid=False,
                        error="Failed to parse task",
                    )
                )
                continue

            result.tasks.append(ImportedTask(original_text=task_text, parsed=parsed, is_valid=True))

        logger.info(
            f"CSV import complete: {result.valid_count} valid, {result.invalid_count} invalid"
        )
        return result

    @staticmethod
    def _is_header(row: list[str]) -> bool:
        first_line = ",".join(row).lower()
        return any(word in first_line for word in HEADER_WORDS)
