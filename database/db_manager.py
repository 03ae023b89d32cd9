import json
import logging
import os
import sqlite3
import threading
from typing import Any

from utils.constants import DB_FILE, DEFAULT_CURRENCY

logger = logging.getLogger(__name__)


class DatabaseManager:
    """Per-user key/value store over SQLite.

    Every logical entity (transactions, recurring rules, banks, budget) is a
    JSON document under (user_id, key). Reads fall back to a default and
    writes report success as a bool; neither raises on storage errors.
    """

    def __init__(self, db_path: str | None = None):
        self.db_path = db_path or DB_FILE
        self._conn: sqlite3.Connection | None = None
        self._write_lock = threading.Lock()
        # Held by services across a load-modify-save cycle on a user's keys
        self.writer_lock = threading.RLock()

    def get_connection(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
            if self.db_path != ":memory:":
                self._conn.execute("PRAGMA journal_mode = WAL")
        return self._conn

    def initialize(self):
        """Create schema and seed defaults."""
        conn = self.get_connection()
        self._create_schema(conn)
        self._seed_defaults(conn)
        conn.commit()

    def _create_schema(self, conn: sqlite3.Connection):
        conn.executescript("""
            CREATE TABLE IF NOT EXISTS user_data (
                user_id    TEXT NOT NULL,
                key        TEXT NOT NULL,
                value      TEXT NOT NULL,
                updated_at TEXT NOT NULL DEFAULT (datetime('now')),
                PRIMARY KEY (user_id, key)
            );

            CREATE TABLE IF NOT EXISTS app_settings (
                key   TEXT PRIMARY KEY,
                value TEXT NOT NULL
            );
        """)

    def _seed_defaults(self, conn: sqlite3.Connection):
        defaults = [
            ("currency", DEFAULT_CURRENCY),
            ("schema_version", "1"),
        ]
        for key, value in defaults:
            conn.execute(
                "INSERT OR IGNORE INTO app_settings(key, value) VALUES (?, ?)",
                (key, value),
            )

    # ── Settings ─────────────────────────────────────────────────────────────

    def get_setting(self, key: str, default: str = "") -> str:
        conn = self.get_connection()
        row = conn.execute(
            "SELECT value FROM app_settings WHERE key = ?", (key,)
        ).fetchone()
        return row["value"] if row else default

    def set_setting(self, key: str, value: str):
        conn = self.get_connection()
        conn.execute(
            "INSERT OR REPLACE INTO app_settings(key, value) VALUES (?, ?)",
            (key, value),
        )
        conn.commit()

    # ── User data ────────────────────────────────────────────────────────────

    def load(self, user_id: str, key: str, default: Any = None) -> Any:
        """Return the stored value for (user_id, key), or default if missing or unreadable."""
        try:
            row = self.get_connection().execute(
                "SELECT value FROM user_data WHERE user_id = ? AND key = ?",
                (user_id, key),
            ).fetchone()
        except sqlite3.Error as exc:
            logger.warning("load %s/%s failed: %s", user_id, key, exc)
            return default
        if row is None:
            return default
        try:
            return json.loads(row["value"])
        except ValueError as exc:
            logger.warning("Corrupt JSON under %s/%s, using default: %s", user_id, key, exc)
            return default

    def save(self, user_id: str, key: str, value: Any) -> bool:
        return self.save_many(user_id, {key: value})

    def save_many(self, user_id: str, values: dict[str, Any]) -> bool:
        """Write several keys for one user in a single transaction.

        Either every key is updated or none is.
        """
        try:
            payload = [(user_id, key, json.dumps(value)) for key, value in values.items()]
        except (TypeError, ValueError) as exc:
            logger.warning("Unserializable value for %s/%s: %s", user_id, list(values), exc)
            return False

        with self._write_lock:
            conn = self.get_connection()
            try:
                with conn:
                    conn.executemany(
                        """INSERT INTO user_data(user_id, key, value)
                           VALUES (?, ?, ?)
                           ON CONFLICT(user_id, key)
                           DO UPDATE SET value = excluded.value,
                                         updated_at = datetime('now')""",
                        payload,
                    )
            except sqlite3.Error as exc:
                logger.warning("save %s/%s failed, rolled back: %s", user_id, list(values), exc)
                return False
        return True

    def delete_user(self, user_id: str) -> bool:
        try:
            with self.get_connection() as conn:
                conn.execute("DELETE FROM user_data WHERE user_id = ?", (user_id,))
        except sqlite3.Error as exc:
            logger.warning("delete_user %s failed: %s", user_id, exc)
            return False
        return True

    @staticmethod
    def open_in_folder(data_folder: str | None = None) -> "DatabaseManager":
        """Startup factory: opens (creating if needed) the DB file in data_folder, or CWD."""
        if data_folder:
            os.makedirs(data_folder, exist_ok=True)
            path = os.path.join(data_folder, DB_FILE)
        else:
            path = DB_FILE
        db = DatabaseManager(path)
        db.initialize()
        logger.info("Opened database %s", path)
        return db

    def close(self):
        if self._conn:
            self._conn.close()
            self._conn = None
