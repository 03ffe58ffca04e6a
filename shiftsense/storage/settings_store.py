"""
DuckDB-backed key-value settings store.

Persists the handful of settings saved from the UI between restarts. A single
``app_settings`` table holds key/value pairs; there is no further schema and
no migrations.
"""

import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

import duckdb
import structlog

from .base import SettingsStore, StorageError

logger = structlog.get_logger(__name__)


class DuckDBSettingsStore(SettingsStore):
    """
    Settings store on a local DuckDB file.

    Attributes:
        db_path: Path to the DuckDB database file
        _local: Thread-local storage for per-thread connections
        _lock: Thread lock for schema creation
    """

    def __init__(self, db_path: str = "./data/shiftsense.duckdb"):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self._local = threading.local()
        self._lock = threading.Lock()
        self._initialized = False

        logger.info("settings_store_initialized", db_path=str(self.db_path))
        self._initialize_schema()

    @contextmanager
    def _get_connection(self):
        """
        Get a thread-local DuckDB connection.

        Raises:
            StorageError: If connection cannot be established
        """
        if not hasattr(self._local, "connection"):
            try:
                self._local.connection = duckdb.connect(str(self.db_path))
                logger.debug("duckdb_connection_created", thread_id=threading.get_ident())
            except duckdb.Error as e:
                logger.error("duckdb_connection_failed", error=str(e))
                raise StorageError(f"Failed to connect to DuckDB: {e}") from e

        yield self._local.connection

    def _initialize_schema(self) -> None:
        if self._initialized:
            return

        with self._lock:
            if self._initialized:
                return
            try:
                with self._get_connection() as conn:
                    conn.execute("""
                        CREATE TABLE IF NOT EXISTS app_settings (
                            key VARCHAR PRIMARY KEY,
                            value VARCHAR NOT NULL,
                            updated_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
                        )
                    """)
                self._initialized = True
            except duckdb.Error as e:
                logger.error("settings_schema_failed", error=str(e))
                raise StorageError(f"Failed to initialize settings schema: {e}") from e

    def get(self, key: str) -> Optional[str]:
        try:
            with self._get_connection() as conn:
                row = conn.execute(
                    "SELECT value FROM app_settings WHERE key = ?", [key]
                ).fetchone()
        except duckdb.Error as e:
            logger.error("setting_read_failed", key=key, error=str(e))
            raise StorageError(f"Failed to read setting {key}: {e}") from e
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        try:
            with self._get_connection() as conn:
                conn.execute(
                    """
                    INSERT OR REPLACE INTO app_settings (key, value, updated_at)
                    VALUES (?, ?, CURRENT_TIMESTAMP)
                    """,
                    [key, value],
                )
        except duckdb.Error as e:
            logger.error("setting_write_failed", key=key, error=str(e))
            raise StorageError(f"Failed to write setting {key}: {e}") from e

        logger.info("setting_saved", key=key)

    def close(self) -> None:
        """Close this thread's connection, if one was opened."""
        connection = getattr(self._local, "connection", None)
        if connection is not None:
            connection.close()
            del self._local.connection
