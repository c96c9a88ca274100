import json
import logging
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional

log = logging.getLogger(__name__)

DEFAULT_SESSION_PATH = Path.home() / ".rentflow" / "session.json"


@dataclass(frozen=True)
class Session:
    access_token: str
    refresh_token: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None


class SessionStore:
    """Where the signed-in session lives. Queried before every request."""

    def get_session(self) -> Optional[Session]:
        raise NotImplementedError

    def save(self, session: Session) -> None:
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError


class MemorySessionStore(SessionStore):
    def __init__(self, session: Optional[Session] = None):
        self._session = session

    def get_session(self):
        return self._session

    def save(self, session):
        self._session = session

    def clear(self):
        self._session = None


class FileSessionStore(SessionStore):
    """JSON file, readable by the owner only."""

    def __init__(self, path=None):
        self.path = Path(path or os.getenv("RENTFLOW_SESSION_FILE") or DEFAULT_SESSION_PATH)

    def get_session(self):
        try:
            data = json.loads(self.path.read_text())
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as e:
            log.warning("Ignoring unreadable session file %s: %s", self.path, e)
            return None
        if not isinstance(data, dict):
            log.warning("Ignoring session file %s: expected an object", self.path)
            return None
        if not data.get("access_token"):
            return None
        return Session(**{k: data.get(k) for k in ("access_token", "refresh_token", "email", "role")})

    def save(self, session):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(asdict(session)))
        os.chmod(self.path, 0o600)

    def clear(self):
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass
