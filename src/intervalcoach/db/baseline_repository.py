"""Persistence for the current baseline snapshot.

Only one snapshot per athlete is kept. Each save overwrites the previous
one (last writer wins); invocations for one athlete are serialized by the
scheduler, so no locking is done here.
"""

import json
import logging
import sqlite3
from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import Optional, Union

from ..exceptions import BaselineStorageError
from ..models.baseline import Baseline


logger = logging.getLogger(__name__)


class BaselineRepository(ABC):
    """Storage interface for the current baseline snapshot."""

    @abstractmethod
    def load(self) -> Optional[Baseline]:
        """Return the stored snapshot, or None if nothing was saved yet."""

    @abstractmethod
    def save(self, baseline: Baseline) -> None:
        """Replace the stored snapshot."""


class InMemoryBaselineRepository(BaselineRepository):
    """Process-local repository, used in tests and one-off CLI runs."""

    def __init__(self, baseline: Optional[Baseline] = None) -> None:
        self._payload = baseline.to_dict() if baseline else None

    def load(self) -> Optional[Baseline]:
        if self._payload is None:
            return None
        return Baseline.from_dict(self._payload)

    def save(self, baseline: Baseline) -> None:
        self._payload = baseline.to_dict()


class SqliteBaselineRepository(BaselineRepository):
    """SQLite-backed repository holding one JSON snapshot per athlete."""

    def __init__(self, db_path: Union[str, Path], athlete_id: str = "default") -> None:
        """
        Initialize the repository.

        Args:
            db_path: Path to SQLite database file
            athlete_id: Key of the snapshot row
        """
        self.db_path = Path(db_path)
        self.athlete_id = athlete_id
        self._ensure_table_exists()

    @contextmanager
    def _get_connection(self):
        """Get database connection with context manager.

        Raises:
            BaselineStorageError: If the database cannot be opened or a
                statement fails
        """
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(str(self.db_path))
        except (OSError, sqlite3.Error) as e:
            raise BaselineStorageError(
                message=f"Cannot open baseline database {self.db_path}: {e}",
                details={"db_path": str(self.db_path)},
            ) from e

        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise BaselineStorageError(
                message=f"Baseline database error in {self.db_path}: {e}",
                details={"db_path": str(self.db_path)},
            ) from e
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _ensure_table_exists(self) -> None:
        """Ensure the baseline_snapshots table exists."""
        with self._get_connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS baseline_snapshots (
                    athlete_id TEXT PRIMARY KEY,
                    payload_json TEXT NOT NULL,
                    calculated_at TEXT NOT NULL
                )
            """)

    def load(self) -> Optional[Baseline]:
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT payload_json FROM baseline_snapshots WHERE athlete_id = ?",
                (self.athlete_id,),
            ).fetchone()

        if not row:
            return None

        try:
            return Baseline.from_dict(json.loads(row["payload_json"]))
        except (KeyError, ValueError, TypeError) as e:
            raise BaselineStorageError(
                message=f"Stored baseline for {self.athlete_id} is unreadable: {e}",
                details={"athlete_id": self.athlete_id},
            )

    def save(self, baseline: Baseline) -> None:
        with self._get_connection() as conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO baseline_snapshots
                (athlete_id, payload_json, calculated_at)
                VALUES (?, ?, ?)
                """,
                (
                    self.athlete_id,
                    json.dumps(baseline.to_dict()),
                    baseline.calculated_at.isoformat(),
                ),
            )
        logger.debug(f"Saved baseline snapshot for athlete {self.athlete_id}")
