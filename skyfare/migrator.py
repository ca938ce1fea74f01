"""Opening the cache database and applying pending schema migrations."""

from __future__ import annotations

import sqlite3
from collections.abc import Iterable
from os import PathLike
from types import TracebackType

from . import logs
from .migrations import MIGRATIONS, Migration


class MigrationError(Exception):
    """A migration's SQL could not be applied."""


def connect(path: str | PathLike[str]) -> sqlite3.Connection:
    """Open the SQLite database at ``path`` in autocommit mode and check it."""
    connection = sqlite3.connect(path, isolation_level=None)
    connection.execute("SELECT 1")
    return connection


class DatabaseMigrator:
    """Applies each known migration once, recording it in ``migrations``."""

    def __init__(
        self,
        db_path: str | PathLike[str],
        migrations: Iterable[Migration] = MIGRATIONS,
    ) -> None:
        self.connection = connect(db_path)
        self.migrations = tuple(migrations)

    def close(self) -> None:
        self.connection.close()

    def __enter__(self) -> DatabaseMigrator:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def _create_migrations_table(self) -> None:
        self.connection.execute(
            """
            CREATE TABLE IF NOT EXISTS migrations (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                migration TEXT UNIQUE,
                applied_at DATETIME DEFAULT CURRENT_TIMESTAMP
            )
            """
        )

    def applied_migrations(self) -> set[str]:
        """Names of the migrations already recorded as applied."""
        rows = self.connection.execute("SELECT migration FROM migrations")
        return {name for (name,) in rows}

    def _apply(self, migration: Migration) -> None:
        conn = self.connection
        conn.execute("BEGIN")
        try:
            for statement in migration.statements():
                conn.execute(statement)
        except sqlite3.Error as exc:
            conn.execute("ROLLBACK")
            raise MigrationError(
                f"failed to apply migration {migration.name}: {exc}"
            ) from exc
        try:
            conn.execute("INSERT INTO migrations(migration) VALUES (?)", (migration.name,))
        except sqlite3.Error:
            conn.execute("ROLLBACK")
            raise
        conn.execute("COMMIT")

    def migrate(self) -> None:
        """Apply every migration not yet recorded, in order."""
        self._create_migrations_table()
        applied = self.applied_migrations()
        for migration in self.migrations:
            if migration.name in applied:
                logs.log(f"Skipping migration {migration.name} (already applied)")
                continue
            logs.log(f"Applying migration {migration.name}")
            self._apply(migration)