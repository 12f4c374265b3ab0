import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from typing import Any

from taskcapture.services.dates import DateResolver
from taskcapture.services.priority import Priority, PriorityClassifier, UrgencyDetector
from taskcapture.services.roles import SELF_IDENTIFIER, OwnerResolver, SubjectResolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParsedTask:
    title: str
    description: str | None
    owner: str = SELF_IDENTIFIER
    priority: Priority = Priority.P3
    is_urgent: bool = False
    subject: str | None = None
    due_date: date | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "owner": self.owner,
            "subject": self.subject,
            "due_date": self.due_date.isoformat() if self.due_date else None,
            "priority": self.priority.value,
            "is_urgent": self.is_urgent,
        }


class TaskParser:
    """Turns a free-text task into a ParsedTask.

    Each field is resolved independently from the same trimmed text; no
    resolver sees another's output. Parsing never fails: text with nothing
    recognisable yields owner "Me", priority P3, no date, no subject and
    is_urgent False.
    """

    def __init__(self, timezone: str | None = None):
        self.date_resolver = DateResolver(timezone)
        self.priority_classifier = PriorityClassifier()
        self.urgency_detector = UrgencyDetector()
        self.owner_resolver = OwnerResolver()
        self.subject_resolver = SubjectResolver()

    def parse(
        self,
        text: str,
        known_names: Sequence[str] | None = None,
        today: date | None = None,
    ) -> ParsedTask:
        clean_text = text.strip()

        parsed = ParsedTask(
            title=clean_text,
            description=clean_text,
            owner=self.owner_resolver.resolve(clean_text, known_names),
            subject=self.subject_resolver.resolve(clean_text, known_names),
            due_date=self.date_resolver.resolve(clean_text, today),
            priority=self.priority_classifier.classify(clean_text),
            is_urgent=self.urgency_detector.detect(clean_text),
        )
        logger.debug(f"Parsed task: {parsed}")
        return parsed


def format_parsed_task(parsed: ParsedTask) -> str:
    """One-line summary of a parsed task for display.

    Example: "Title: Call mom | Owner: Me | Due: 10/21/2026 | Priority: P3"
    """
    parts = [f"Title: {parsed.title}"]

    if parsed.owner:
        parts.append(f"Owner: {parsed.owner}")

    if parsed.subject:
        parts.append(f"Subject: {parsed.subject}")

    if parsed.due_date:
        due = parsed.due_date
        parts.append(f"Due: {due.month}/{due.day}/{due.year}")

    parts.append(f"Priority: {parsed.priority.value}")

    if parsed.is_urgent:
        parts.append("URGENT")

    return " | ".join(parts)


# Module-level singleton
_task_parser: TaskParser | None = None


def get_task_parser(timezone: str | None = None) -> TaskParser:
    """Get the shared TaskParser instance.

    Args:
        timezone: Optional timezone to use. Only used on first call.
    """
    global _task_parser
    if _task_parser is None:
        _task_parser = TaskParser(timezone)
    return _task_parser


def reset_task_parser() -> None:
    """Reset the singleton (useful for testing)."""
    global _task_parser
    _task_parser = None


def parse_task(
    text: str,
    known_names: Sequence[str] | None = None,
    today: date | None = None,
) -> ParsedTask:
    """Parse a natural language task with the shared parser."""
    return get_task_parser().parse(text, known_names, today)
