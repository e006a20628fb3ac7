"""
Durable session log storage for PingTrack.

Each closed session is one JSON file named after its identity, holding the
ordered sample entries.
"""

import json
import logging
import os
import tempfile
import threading
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional

from ..core.errors import PersistenceError
from ..core.models import LOG_KEY_PREFIX, Session, derive_identity


class LogStore:
    """Stores closed sessions keyed by identity."""

    def __init__(self, directory: Path):
        self.directory = Path(directory)
        self.logger = logging.getLogger(__name__)
        self._lock = threading.Lock()

    def _path(self, identity: str) -> Path:
        if not identity or not identity.startswith(LOG_KEY_PREFIX) or '/' in identity or os.sep in identity:
            raise ValueError(f"Invalid session identity: {identity!r}")
        return self.directory / f"{identity}.json"

    def _keys(self) -> List[str]:
        if not self.directory.exists():
            return []
        return [path.stem for path in self.directory.glob(f"{LOG_KEY_PREFIX}*.json")]

    def exists(self, identity: str) -> bool:
        return self._path(identity).exists()

    def allocate_identity(self, closed_at: datetime, reserved: Iterable[str] = ()) -> str:
        """Identity for a session closed at ``closed_at`` not already in use.

        Sessions closed within the same second get a zero-padded ``-001``,
        ``-002``, ... suffix, which sorts after the plain key and in closing order.
        """
        base = derive_identity(closed_at)
        taken = set(reserved)
        with self._lock:
            taken.update(self._keys())

        identity = base
        counter = 0
        while identity in taken:
            counter += 1
            identity = f"{base}-{counter:03d}"
        return identity

    def save(self, session: Session) -> None:
        """Persist ``session`` under its identity, replacing any previous entry."""
        path = self._path(session.identity)
        payload = json.dumps(session.to_entries(), ensure_ascii=False)

        with self._lock:
            tmp_name = None
            try:
                self.directory.mkdir(parents=True, exist_ok=True)
                fd, tmp_name = tempfile.mkstemp(
                    prefix=f".{session.identity}.", suffix=".tmp", dir=self.directory
                )
                with os.fdopen(fd, 'w', encoding='utf-8') as f:
                    f.write(payload)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_name, path)
            except OSError as e:
                if tmp_name is not None:
                    try:
                        os.unlink(tmp_name)
                    except OSError:
                        pass
                raise PersistenceError(f"Failed to save {session.identity}: {e}") from e

        self.logger.debug(f"Stored {session.identity} at {path}")

    def get(self, identity: str) -> Optional[Session]:
        """Load one stored session, or None if it does not exist."""
        path = self._path(identity)
        with self._lock:
            if not path.exists():
                return None
            return self._load(path)

    def list_all(self) -> List[Session]:
        """All stored sessions, newest identity first."""
        sessions = []
        with self._lock:
            for identity in sorted(self._keys(), reverse=True):
                try:
                    sessions.append(self._load(self._path(identity)))
                except PersistenceError as e:
                    self.logger.error(f"Skipping unreadable log {identity}: {e}")
        return sessions

    def delete(self, identity: str) -> bool:
        """Remove one stored session; returns False if it was not stored."""
        path = self._path(identity)
        with self._lock:
            try:
                path.unlink()
            except FileNotFoundError:
                return False
            except OSError as e:
                raise PersistenceError(f"Failed to delete {identity}: {e}") from e
        self.logger.info(f"Deleted log {identity}")
        return True

    def delete_all(self) -> int:
        """Remove every stored session; returns how many were removed."""
        removed = 0
        with self._lock:
            for identity in self._keys():
                try:
                    self._path(identity).unlink()
                    removed += 1
                except FileNotFoundError:
                    continue
                except OSError as e:
                    raise PersistenceError(f"Failed to delete {identity}: {e}") from e
        self.logger.info(f"Deleted {removed} stored logs")
        return removed

    def _load(self, path: Path) -> Session:
        try:
            with open(path, 'r', encoding='utf-8') as f:
                entries = json.load(f)
            return Session.from_entries(path.stem, entries)
        except (OSError, ValueError, TypeError) as e:
            raise PersistenceError(f"Failed to read {path.name}: {e}") from e
