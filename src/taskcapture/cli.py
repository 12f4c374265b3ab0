import argparse
import json
import logging
import sys
from pathlib import Path

from taskcapture.config import settings
from taskcapture.sentry import (
    add_breadcrumb,
    capture_exception,
    init_sentry,
    is_enabled,
    set_tag,
    set_user_context,
)
from taskcapture.sentry import flush as sentry_flush
from taskcapture.services.known_names import get_known_names_store


def setup_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _known_names(user_id: str | None, extra: list[str] | None = None) -> list[str]:
    names = list(get_known_names_store().get_names(user_id))
    for name in extra or []:
        if name.lower() not in (existing.lower() for existing in names):
            names.append(name)
    return names


def parse_command(args: argparse.Namespace) -> None:
    from taskcapture.services.parser import format_parsed_task, parse_task

    text = " ".join(args.text)
    parsed = parse_task(text, _known_names(args.user, args.name))

    if args.json:
        print(json.dumps(parsed.to_dict(), indent=2))
    else:
        print(format_parsed_task(parsed))


def import_command(args: argparse.Namespace) -> None:
    from taskcapture.services.csv_import import CsvImporter, CsvImportError
    from taskcapture.services.parser import format_parsed_task

    path = Path(args.file)
    if path.suffix.lower() != ".csv":
        print("Error: Please select a CSV file")
        sys.exit(1)

    add_breadcrumb(f"Importing {path.name}", category="import")

    try:
        result = CsvImporter().import_file(path, _known_names(args.user))
    except CsvImportError as e:
        print(f"Error: {e}")
        sys.exit(1)

    if args.json:
        print(json.dumps([task.to_dict() for task in result.valid_tasks], indent=2))
        return

    for task in result.tasks:
        if task.is_valid and task.parsed is not None:
            print(f"  [+] {format_parsed_task(task.parsed)}")
        else:
            print(f"  [-] {task.original_text}: {task.error}")

    print()
    print(f"Valid tasks: {result.valid_count}")
    print(f"Invalid tasks: {result.invalid_count}")


def names_command(args: argparse.Namespace) -> None:
    store = get_known_names_store()

    if args.action == "list":
        names = store.get_names(args.user)
        if not names:
            print("No known names")
        for name in names:
            print(name)
        return

    if not args.value:
        print(f"Usage: task-capture names {args.action} NAME")
        sys.exit(1)

    if args.action == "add":
        if store.add_name(args.value, args.user):
            print(f"Added: {args.value.strip()}")
        else:
            print(f"Not added (blank or already known): {args.value}")
    elif args.action == "remove":
        if store.remove_name(args.value, args.user):
            print(f"Removed: {args.value.strip()}")
        else:
            print(f"Not found: {args.value}")


def sample_command(args: argparse.Namespace) -> None:
    from taskcapture.services.csv_import import SAMPLE_CSV

    print(SAMPLE_CSV)


def check_command(args: argparse.Namespace) -> None:
    print("Task Capture Configuration Check\n")

    checks = [
        ("User timezone", settings.user_timezone),
        ("Log level", settings.log_level),
        ("Known names file", str(settings.known_names_path)),
        ("Sentry DSN", "OK" if settings.has_sentry else "MISSING"),
        ("Error tracking", "ON" if is_enabled() else "OFF"),
    ]

    for name, value in checks:
        print(f"  {name}: {value}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Task Capture - natural language task parser")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    parse_parser = subparsers.add_parser("parse", help="Parse a task sentence")
    parse_parser.add_argument("text", nargs="+", help="Task text")
    parse_parser.add_argument(
        "--name", action="append", default=[], help="Extra known name (repeatable)"
    )
    parse_parser.add_argument("--user", help="User whose known names to use")
    parse_parser.add_argument("--json", action="store_true", help="Print JSON")
    parse_parser.set_defaults(handler=parse_command)

    import_parser = subparsers.add_parser("import", help="Parse tasks from a CSV file")
    import_parser.add_argument("file", help="CSV file, task text in the first column")
    import_parser.add_argument("--user", help="User whose known names to use")
    import_parser.add_argument("--json", action="store_true", help="Print JSON")
    import_parser.set_defaults(handler=import_command)

    names_parser = subparsers.add_parser("names", help="Manage known names")
    names_parser.add_argument("action", choices=["list", "add", "remove"])
    names_parser.add_argument("value", nargs="?", help="Name to add or remove")
    names_parser.add_argument("--user", help="User the names belong to")
    names_parser.set_defaults(handler=names_command)

    sample_parser = subparsers.add_parser("sample", help="Print a sample CSV")
    sample_parser.set_defaults(handler=sample_command)

    check_parser = subparsers.add_parser("check", help="Check configuration")
    check_parser.set_defaults(handler=check_command)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging()

    # Disabled if no DSN configured
    init_sentry(
        dsn=settings.sentry_dsn if settings.has_sentry else None,
        environment=settings.sentry_environment,
    )

    handler = getattr(args, "handler", None)
    if handler is None:
        parser.print_help()
        return

    set_tag("command", args.command)
    set_user_context(user_id=getattr(args, "user", None))

    try:
        handler(args)
    except Exception as e:
        capture_exception(e)
        raise
    finally:
        sentry_flush(timeout=2.0)


if __name__ == "__main__":
    main()
