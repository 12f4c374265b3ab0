"""Known-names store for Task Capture.

Keeps the per-user list of people the parser should recognise by name. The
parser itself never reads this store: callers load the names for the
current user and pass them to parse_task().

Names are kept in one JSON file, keyed by user id, with anonymous use
stored under "guest":

    {"guest": ["Sarah"], "user-42": ["Sarah", "Dave"]}
"""

import json
import logging
from pathlib import Path

from taskcapture.config import settings

logger = logging.getLogger(__name__)

GUEST_KEY = "guest"


class KnownNamesStore:
    """File-backed list of known names per user."""

    def __init__(self, path: Path | None = None):
        self.path = path or settings.known_names_path

    @staticmethod
    def _key(user_id: str | None) -> str:
        return user_id or GUEST_KEY

    def _load(self) -> dict[str, list[str]]:
        if not self.path.exists():
            return {}

        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning(f"Ignoring malformed known names file {self.path}: {e}")
            return {}

        if not isinstance(data, dict):
            logger.warning(f"Ignoring known names file {self.path}: expected an object")
            return {}

        names_by_user: dict[str, list[str]] = {}
        for key, names in data.items():
            if not isinstance(names, list):
                logger.warning(f"Skipping known names for {key}: expected a list")
                continue
            valid = [name for name in names if isinstance(name, str)]
            if len(valid) != len(names):
                logger.warning(f"Skipping {len(names) - len(valid)} non-text known names for {key}")
            names_by_user[str(key)] = valid
        return names_by_user

    def _save(self, data: dict[str, list[str]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

    def get_names(self, user_id: str | None = None) -> list[str]:
        """Get the known names for a user, in the order they were added."""
        return self._load().get(self._key(user_id), [])

    def add_name(self, name: str, user_id: str | None = None) -> bool:
        """Add a name for a user.

        Returns:
            True if added, False if blank or already present (case-insensitive)
        """
        name = name.strip()
        if not name:
            return False

        data = self._load()
        names = data.setdefault(self._key(user_id), [])
        if name.lower() in (existing.lower() for existing in names):
            return False

        names.append(name)
        self._save(data)
        logger.info(f"Added known name '{name}' for {self._key(user_id)}")
        return True

    def remove_name(self, name: str, user_id: str | None = None) -> bool:
        """Remove a name for a user.

        Returns:
            True if a name was removed, False if it was not present
        """
        data = self._load()
        key = self._key(user_id)
        names = data.get(key, [])
        remaining = [existing for existing in names if existing.lower() != name.strip().lower()]
        if len(remaining) == len(names):
            return False

        data[key] = remaining
        self._save(data)
        logger.info(f"Removed known name '{name.strip()}' for {key}")
        return True

    def clear(self, user_id: str | None = None) -> None:
        """Remove all names for a user."""
        data = self._load()
        if data.pop(self._key(user_id), None) is not None:
            self._save(data)


# Module-level singleton
_known_names_store: KnownNamesStore | None = None


def get_known_names_store() -> KnownNamesStore:
    """Get the singleton KnownNamesStore instance."""
    global _known_names_store
    if _known_names_store is None:
        _known_names_store = KnownNamesStore()
    return _known_names_store
