"""Task Capture services module.

This module provides the natural language task parser, its resolvers, and
the caller-side helpers around it (known names, CSV import). Imports are
lazy so the CLI only loads what a command needs.
"""

from __future__ import annotations

from importlib import import_module
from typing import Any

_EXPORTS: dict[str, tuple[str, str]] = {
    # Parser
    "ParsedTask": ("taskcapture.services.parser", "ParsedTask"),
    "TaskParser": ("taskcapture.services.parser", "TaskParser"),
    "format_parsed_task": ("taskcapture.services.parser", "format_parsed_task"),
    "get_task_parser": ("taskcapture.services.parser", "get_task_parser"),
    "parse_task": ("taskcapture.services.parser", "parse_task"),
    # Dates
    "DateResolver": ("taskcapture.services.dates", "DateResolver"),
    "is_weekend": ("taskcapture.services.dates", "is_weekend"),
    "move_to_next_monday": ("taskcapture.services.dates", "move_to_next_monday"),
    # Priority / urgency
    "Priority": ("taskcapture.services.priority", "Priority"),
    "PriorityClassifier": ("taskcapture.services.priority", "PriorityClassifier"),
    "UrgencyDetector": ("taskcapture.services.priority", "UrgencyDetector"),
    # Roles
    "SELF_IDENTIFIER": ("taskcapture.services.roles", "SELF_IDENTIFIER"),
    "OwnerResolver": ("taskcapture.services.roles", "OwnerResolver"),
    "SubjectResolver": ("taskcapture.services.roles", "SubjectResolver"),
    # Known names
    "KnownNamesStore": ("taskcapture.services.known_names", "KnownNamesStore"),
    "get_known_names_store": ("taskcapture.services.known_names", "get_known_names_store"),
    # CSV import
    "CsvImporter": ("taskcapture.services.csv_import", "CsvImporter"),
    "CsvImportError": ("taskcapture.services.csv_import", "CsvImportError"),
    "ImportResult": ("taskcapture.services.csv_import", "ImportResult"),
}

__all__ = list(_EXPORTS.keys())


def __getattr__(name: str) -> Any:
    if name not in _EXPORTS:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    module_name, attr_name = _EXPORTS[name]
    module = import_module(module_name)
    value = getattr(module, attr_name)
    globals()[name] = value
    return value


def __dir__() -> list[str]:
    return sorted(list(globals().keys()) + list(_EXPORTS.keys()))
