"""Settings from environment variables (and .env at the repo root or cwd)."""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

_REPO_ROOT = Path(__file__).resolve().parent.parent.parent

BACKEND_FILE = "file"
BACKEND_MONGO = "mongo"
BACKEND_MEMORY = "memory"
BACKENDS = (BACKEND_FILE, BACKEND_MONGO, BACKEND_MEMORY)
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def load_env() -> None:
    """Load the first .env found (repo root, then current directory). Existing env vars win."""
    for path in (_REPO_ROOT / ".env", Path.cwd() / ".env"):
        if path.exists():
            load_dotenv(path)
            break


@dataclass(frozen=True)
class Settings:
    backend: str = BACKEND_FILE
    contacts_file: str = "db/contacts.json"
    id_policy: str = "generated"
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db: str = "contacts"
    mongodb_collection: str = "contacts"
    mongodb_timeout_ms: int = 5000
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        backend = os.environ.get("CONTACTS_BACKEND", BACKEND_FILE).strip().lower()
        if backend not in BACKENDS:
            raise ValueError(
                f"CONTACTS_BACKEND must be one of {', '.join(BACKENDS)}, got {backend!r}."
            )
        log_level = os.environ.get("LOG_LEVEL", cls.log_level).strip().upper() or cls.log_level
        if log_level not in LOG_LEVELS:
            raise ValueError(
                f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {log_level!r}."
            )
        default_policy = "objectid" if backend == BACKEND_MONGO else "generated"
        return cls(
            backend=backend,
            contacts_file=os.environ.get("CONTACTS_FILE", cls.contacts_file).strip(),
            id_policy=os.environ.get("CONTACTS_ID_POLICY", "").strip().lower() or default_policy,
            mongodb_uri=os.environ.get("MONGODB_URI", cls.mongodb_uri).strip(),
            mongodb_db=os.environ.get("MONGODB_DB", cls.mongodb_db).strip(),
            mongodb_collection=os.environ.get("MONGODB_COLLECTION", cls.mongodb_collection).strip(),
            mongodb_timeout_ms=int(os.environ.get("MONGODB_TIMEOUT_MS", cls.mongodb_timeout_ms)),
            log_level=log_level,
        )
