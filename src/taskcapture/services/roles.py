"""Owner and subject resolution for Task Capture.

The owner is who is responsible for doing the task; the subject is who or
what the task concerns. "Ask Sarah about the budget" is owned by the user
("Me") and has Sarah as its subject; "Sarah should review the budget" is
owned by Sarah.

Both resolvers accept an optional list of known names (people the user has
told us about). Known names are matched case-insensitively and returned
exactly as supplied; generic pattern matches are title-cased.
"""

import logging
import re
from collections.abc import Sequence

logger = logging.getLogger(__name__)

SELF_IDENTIFIER = "Me"

# Stops a captured span: end of text, whitespace or sentence punctuation
_SPAN_END = r"(?=\s|$|[,.!?])"

# Subject captures and the text between a verb and "to" stop after this many characters
_MAX_SPAN = 200
_WORDS = rf"[\w\s]{{1,{_MAX_SPAN}}}?"
_ANY = rf".{{1,{_MAX_SPAN}}}?"


def title_case(text: str) -> str:
    """Upper-case the first letter of every word, leaving the rest as typed."""
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), text)


def _name_pattern(name: str) -> str:
    return rf"(?<!\w){re.escape(name)}(?!\w)"


def _usable_names(known_names: Sequence[str] | None) -> list[str]:
    return [name.strip() for name in known_names or () if name and name.strip()]


class OwnerResolver:
    """Determines who is responsible for a task.

    Resolution order:
    1. Self-reference ("I need to ...", "I am going to ...") -> "Me"
    2. A known name being assigned work ("assign to Sarah", "@Sarah",
       "for Sarah", "Sarah should ...")
    3. "<someone> should/will/needs to/has to/must ..." at the start
    4. Explicit markers: "assign to X", "responsible: X", "owner: X"
    5. "Me"
    """

    SELF_PATTERNS = [
        re.compile(r"^i\s+(need\s+to|have\s+to|must|should|will)\s+", re.IGNORECASE),
        re.compile(r"^i\s+(am\s+going\s+to|plan\s+to)\s+", re.IGNORECASE),
        re.compile(r"\bi\s+(need\s+to|have\s+to|must|should|will|am\s+going\s+to|plan\s+to)\s+", re.IGNORECASE),
    ]

    OBLIGATION = r"(should|will|needs?\s+to|have\s+to|must)"

    SHOULD_DO_PATTERN = re.compile(rf"^([\w\s]+?)\s+{OBLIGATION}\s+", re.IGNORECASE)

    EXPLICIT_PATTERNS: list[tuple[str, re.Pattern[str]]] = [
        ("assign_to", re.compile(rf"\bassign\s*to[\s:]*(\w[\w\s]*?){_SPAN_END}", re.IGNORECASE)),
        ("responsible", re.compile(rf"\bresponsible\s*:\s*(\w[\w\s]*?){_SPAN_END}", re.IGNORECASE)),
        ("owner", re.compile(rf"\bowner\s*:\s*(\w[\w\s]*?){_SPAN_END}", re.IGNORECASE)),
    ]

    def resolve(self, text: str, known_names: Sequence[str] | None = None) -> str:
        for pattern in self.SELF_PATTERNS:
            if pattern.search(text):
                logger.debug("Owner is self-referenced")
                return SELF_IDENTIFIER

        for name in _usable_names(known_names):
            if self._is_assigned(text, name):
                logger.debug(f"Owner is known name: {name}")
                return name

        match = self.SHOULD_DO_PATTERN.search(text)
        if match and match.group(1).strip():
            owner = title_case(match.group(1).strip())
            logger.debug(f"Owner from subject-verb pattern: {owner}")
            return owner

        for key, pattern in self.EXPLICIT_PATTERNS:
            match = pattern.search(text)
            if match and match.group(1).strip():
                owner = title_case(match.group(1).strip())
                logger.debug(f"Owner from {key} pattern: {owner}")
                return owner

        return SELF_IDENTIFIER

    def _is_assigned(self, text: str, name: str) -> bool:
        name_re = _name_pattern(name)
        if not re.search(name_re, text, re.IGNORECASE):
            return False

        assign = rf"(?:\b(?:assign\s*to|for)[\s:]+|@\s*){name_re}"
        should = rf"^{name_re}\s+{self.OBLIGATION}\s+"
        return bool(
            re.search(assign, text, re.IGNORECASE) or re.search(should, text, re.IGNORECASE)
        )


class SubjectResolver:
    """Determines who or what a task is about.

    Known names referenced as a contact ("ask Sarah", "meet with Sarah",
    "send the deck to Sarah") win outright. Otherwise generic patterns are
    tried in order and the first non-empty capture is returned title-cased.
    """

    CONTACT_VERBS = r"(?:ask|tell|contact|call|email|message|remind)"
    MEET_VERBS = r"(?:meet\s+with|meeting\s+with|schedule\s+with)"
    SEND_VERBS = r"(?:send|give|deliver|provide)"

    SUBJECT_PATTERNS: list[tuple[str, re.Pattern[str]]] = [
        (
            "about",
            re.compile(
                rf"\b(?:about|regarding|re[:\s])[\s:]*({_WORDS})"
                r"(?=\s(?:due|by|for|assign|priority|urgent|p[1-4])\b|\s@|$)",
                re.IGNORECASE,
            ),
        ),
        ("project", re.compile(rf"\bproject\s*:\s*(\w[\w\s]*?){_SPAN_END}", re.IGNORECASE)),
        ("category", re.compile(rf"\bcategory\s*:\s*(\w[\w\s]*?){_SPAN_END}", re.IGNORECASE)),
        (
            "contact",
            re.compile(
                rf"\b{CONTACT_VERBS}\s+({_WORDS})(?=\s+(?:to|about|that|if|when|where|why|how)\b|$)",
                re.IGNORECASE,
            ),
        ),
        ("meet_with", re.compile(rf"\b{MEET_VERBS}\s+({_WORDS}){_SPAN_END}", re.IGNORECASE)),
        ("send_to", re.compile(rf"\b{SEND_VERBS}\s+{_ANY}\s+to\s+({_WORDS}){_SPAN_END}", re.IGNORECASE)),
    ]

    TRAILING_CONNECTOR = re.compile(
        r"\b(to|about|that|if|when|where|why|how|the|a|an)\s*$", re.IGNORECASE
    )

    def resolve(self, text: str, known_names: Sequence[str] | None = None) -> str | None:
        for name in _usable_names(known_names):
            if self._is_referenced(text, name):
                logger.debug(f"Subject is known name: {name}")
                return name

        for key, pattern in self.SUBJECT_PATTERNS:
            match = pattern.search(text)
            if not match:
                continue
            subject = self.TRAILING_CONNECTOR.sub("", match.group(1).strip()).strip()
            if subject:
                subject = title_case(subject)
                logger.debug(f"Subject from {key} pattern: {subject}")
                return subject

        return None

    def _is_referenced(self, text: str, name: str) -> bool:
        name_re = _name_pattern(name)
        if not re.search(name_re, text, re.IGNORECASE):
            return False

        contexts = [
            rf"\b{self.CONTACT_VERBS}\s+{name_re}",
            rf"\b{self.MEET_VERBS}\s+{name_re}",
            rf"\b{self.SEND_VERBS}\s+{_ANY}\s+to\s+{name_re}",
        ]
        return any(re.search(context, text, re.IGNORECASE) for context in contexts)
