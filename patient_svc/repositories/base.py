"""
Base database connection and initialization.

This module handles database connection management and schema initialization.
Optimized for SQLite concurrency with WAL mode and busy_timeout.

IMPORTANT: Database instantiation should be done through the DI layer.
Use core.dependencies.get_database() instead of instantiating directly.
"""
import sqlite3
import logging
from typing import Optional
from pathlib import Path

from core.config import DATABASE_PATH, DATABASE_BUSY_TIMEOUT

logger = logging.getLogger(__name__)


class Database:
    """
    SQLite database connection manager with concurrency optimizations.

    Features:
    - WAL mode for concurrent readers alongside a writer
    - Busy timeout to handle lock contention gracefully
    - A fresh connection per call, so requests never share one

    Usage:
        # Via dependency injection (recommended):
        from core.dependencies import get_database
        db = get_database()

        # Direct instantiation (for testing):
        db = Database(db_path="/tmp/test.db")
    """

    def __init__(self, db_path: Optional[str] = None, busy_timeout: Optional[int] = None):
        """
        Initialize database connection.

        Args:
            db_path: Path to SQLite database file. Defaults to config DATABASE_PATH.
            busy_timeout: SQLite busy timeout in milliseconds. Defaults to config value.
        """
        self.db_path = db_path or DATABASE_PATH
        self.busy_timeout = busy_timeout if busy_timeout is not None else DATABASE_BUSY_TIMEOUT

        # Ensure database directory exists
        db_dir = Path(self.db_path).parent
        db_dir.mkdir(parents=True, exist_ok=True)

        self._init_db()

    def _configure_connection(self, conn: sqlite3.Connection) -> None:
        """Apply per-connection pragmas."""
        conn.execute(f"PRAGMA busy_timeout = {self.busy_timeout}")
        conn.execute("PRAGMA foreign_keys = ON")

    def _init_db(self) -> None:
        """Initialize database schema and enable WAL mode if not already enabled."""
        conn = sqlite3.connect(self.db_path)
        self._configure_connection(conn)
        cursor = conn.cursor()

        # WAL mode persists in the database file, so this only needs to run once
        cursor.execute("PRAGMA journal_mode = WAL")
        result = cursor.fetchone()
        if result and result[0].lower() == 'wal':
            logger.info(f"SQLite WAL mode enabled for {self.db_path}")
        else:
            logger.warning(f"Failed to enable WAL mode, current mode: {result}")

        # doctor_user_id and slot_id are keys owned by other services;
        # no foreign keys are declared for them.
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS patients (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                patient_name TEXT NOT NULL,
                age INTEGER,
                gender TEXT,
                phone_number TEXT NOT NULL,
                email TEXT,
                address TEXT,
                symptoms TEXT,
                appointment_date TEXT,
                appointment_time TEXT,
                doctor_user_id INTEGER,
                slot_id INTEGER UNIQUE,
                created_at TEXT NOT NULL
            )
        """)
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_patients_phone ON patients (phone_number)"
        )
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_patients_doctor_date "
            "ON patients (doctor_user_id, appointment_date)"
        )

        conn.commit()
        conn.close()

        logger.info(
            f"Database initialized: {self.db_path} "
            f"(busy_timeout={self.busy_timeout}ms)"
        )

    def get_connection(self) -> sqlite3.Connection:
        """
        Get a new database connection with concurrency settings.

        Returns:
            sqlite3.Connection: A new connection; the caller closes it.
        """
        conn = sqlite3.connect(self.db_path)
        self._configure_connection(conn)
        return conn
