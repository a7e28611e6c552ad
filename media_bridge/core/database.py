"""
Persistent settings store.

One sqlite table of key/value pairs. Credential keys are Fernet-encrypted at
rest; the Fernet key itself lives in the OS keyring unless one is supplied.
"""
import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

import keyring
from cryptography.fernet import Fernet, InvalidToken
from keyring.errors import KeyringError

logger = logging.getLogger(__name__)

KEYRING_SERVICE = "MediaBridge"
KEYRING_USERNAME = "settings-key"

SCHEMA_VERSION = 1

# Always stored encrypted, whatever the caller asks for.
SECRET_KEYS = frozenset({"source_token"})


def default_db_path() -> Path:
    return Path.home() / ".media-bridge" / "settings.db"


def load_keyring_key() -> bytes:
    """Fetch the settings key from the OS keyring, creating it on first use."""
    try:
        stored = keyring.get_password(KEYRING_SERVICE, KEYRING_USERNAME)
    except KeyringError as e:
        logger.warning(f"Keyring unavailable, secrets will not survive restarts: {e}")
        return Fernet.generate_key()
    if stored:
        return stored.encode()

    key = Fernet.generate_key()
    try:
        keyring.set_password(KEYRING_SERVICE, KEYRING_USERNAME, key.decode())
        logger.info("Created settings encryption key in OS keyring")
    except KeyringError as e:
        logger.error(f"Could not persist settings key to keyring: {e}")
    return key


class SettingsDatabase:
    """SQLite-backed settings with transparent secret encryption."""

    def __init__(self, db_path: Optional[Path] = None, *, encryption_key: Optional[bytes] = None):
        """
        Args:
            db_path: SQLite file. Defaults to ~/.media-bridge/settings.db
            encryption_key: Fernet key; read from the OS keyring when omitted
        """
        self.db_path = Path(db_path) if db_path is not None else default_db_path()
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.conn: Optional[sqlite3.Connection] = None
        self._fernet = Fernet(encryption_key or load_keyring_key())

    # ------------------------------------------------------------------
    # Connection
    # ------------------------------------------------------------------

    def connect(self):
        self.conn = sqlite3.connect(self.db_path, check_same_thread=False, timeout=30.0)
        self.conn.row_factory = sqlite3.Row
        self._migrate()
        logger.debug(f"Settings database opened at {self.db_path}")

    def _migrate(self):
        version = self.conn.execute("PRAGMA user_version").fetchone()[0]
        if version >= SCHEMA_VERSION:
            return
        with self.conn:
            self.conn.execute("""
                CREATE TABLE IF NOT EXISTS settings (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    encrypted INTEGER NOT NULL DEFAULT 0,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)
            self.conn.execute(f"PRAGMA user_version = {SCHEMA_VERSION}")

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        if self.conn is None:
            self.connect()
        with self.conn:
            yield self.conn

    def close(self):
        if self.conn is not None:
            self.conn.close()
            self.conn = None

    # ------------------------------------------------------------------
    # Values
    # ------------------------------------------------------------------

    def get_config(self, key: str, default: Any = None) -> Any:
        """Stored value for ``key`` (decrypted), or ``default``."""
        with self._transaction() as conn:
            row = conn.execute(
                "SELECT value, encrypted FROM settings WHERE key = ?", (key,)
            ).fetchone()
        if row is None:
            return default
        if not row["encrypted"]:
            return row["value"]
        try:
            return self._fernet.decrypt(row["value"].encode()).decode()
        except InvalidToken:
            logger.error(f"Setting '{key}' cannot be decrypted with the current key")
            return default

    def set_config(self, key: str, value: Any, encrypt: bool = False):
        """
        Store ``value`` as text under ``key``.

        Keys in SECRET_KEYS are encrypted even when ``encrypt`` is False.
        """
        encrypt = encrypt or key in SECRET_KEYS
        text = str(value)
        if encrypt:
            text = self._fernet.encrypt(text.encode()).decode()
        with self._transaction() as conn:
            conn.execute(
                """
                INSERT INTO settings (key, value, encrypted, updated_at)
                VALUES (?, ?, ?, CURRENT_TIMESTAMP)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    encrypted = excluded.encrypted,
                    updated_at = excluded.updated_at
                """,
                (key, text, int(encrypt)),
            )

    def delete_config(self, key: str):
        with self._transaction() as conn:
            conn.execute("DELETE FROM settings WHERE key = ?", (key,))

    def get_all_config(self) -> Dict[str, str]:
        """Plain-text settings only; secrets are never listed."""
        with self._transaction() as conn:
            rows = conn.execute("SELECT key, value FROM settings WHERE encrypted = 0 ORDER BY key").fetchall()
        return {row["key"]: row["value"] for row in rows}
