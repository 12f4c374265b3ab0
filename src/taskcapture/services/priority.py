"""Priority and urgency detection for Task Capture."""

import re
from enum import Enum


class Priority(str, Enum):
    """Task priority levels, P1 being the highest."""

    P1 = "P1"
    P2 = "P2"
    P3 = "P3"
    P4 = "P4"


DEFAULT_PRIORITY = Priority.P3


class PriorityClassifier:
    """Picks a priority level from explicit keywords in the text.

    Levels are checked from P1 down to P4 and the first match wins, so
    "p1, not p2" is P1. Text without any keyword gets the default (P3).
    """

    PRIORITY_PATTERNS: list[tuple[Priority, re.Pattern[str]]] = [
        (Priority.P1, re.compile(r"\b(p1|priority\s*1|high\s*priority|urgent\s*priority)\b", re.IGNORECASE)),
        (Priority.P2, re.compile(r"\b(p2|priority\s*2|medium\s*priority)\b", re.IGNORECASE)),
        (Priority.P3, re.compile(r"\b(p3|priority\s*3|normal\s*priority|low\s*priority)\b", re.IGNORECASE)),
        (Priority.P4, re.compile(r"\b(p4|priority\s*4|lowest\s*priority)\b", re.IGNORECASE)),
    ]

    def classify(self, text: str) -> Priority:
        for priority, pattern in self.PRIORITY_PATTERNS:
            if pattern.search(text):
                return priority
        return DEFAULT_PRIORITY


class UrgencyDetector:
    """Flags text containing an urgency keyword."""

    URGENCY_KEYWORDS = [
        "urgent",
        "asap",
        "immediately",
        "critical",
        "emergency",
        "rush",
        r"high\s*priority",
        r"needs\s*attention",
    ]

    URGENCY_PATTERN = re.compile(r"\b(" + "|".join(URGENCY_KEYWORDS) + r")\b", re.IGNORECASE)

    def detect(self, text: str) -> bool:
        return self.URGENCY_PATTERN.search(text) is not None
