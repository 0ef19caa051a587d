"""Local storage for the caller's user ID.

The ID is returned by signup and sent with every operation so the server can
meter free-trial usage. No stored ID means anonymous, unmetered calls.
"""

import json
import logging
from pathlib import Path
from typing import Optional, Protocol, Union

logger = logging.getLogger(__name__)


class UserIdStore(Protocol):
    """Where the client keeps the user ID between calls."""

    def get(self) -> Optional[str]:
        ...

    def set(self, user_id: str) -> None:
        ...

    def clear(self) -> None:
        ...


class MemoryUserIdStore:
    """Keeps the user ID for the lifetime of the process."""

    def __init__(self, user_id: Optional[str] = None) -> None:
        self._user_id = user_id or None

    def get(self) -> Optional[str]:
        return self._user_id

    def set(self, user_id: str) -> None:
        self._user_id = user_id or None

    def clear(self) -> None:
        self._user_id = None


class FileUserIdStore:
    """Persists the user ID as `{"userId": ...}` in a JSON file.

    An unreadable or corrupt file reads as anonymous.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    def get(self) -> Optional[str]:
        if not self._path.exists():
            return None
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("Could not read user ID from %s: %s", self._path, e)
            return None
        if not isinstance(data, dict):
            return None
        user_id = data.get("userId")
        return str(user_id) if user_id else None

    def set(self, user_id: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps({"userId": user_id}), encoding="utf-8")

    def clear(self) -> None:
        try:
            self._path.unlink()
        except FileNotFoundError:
            pass
