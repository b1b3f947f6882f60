"""Lists project migrations and records which of them were applied."""

from __future__ import annotations

import fnmatch
import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Iterator, Sequence

from prana.sqlmigr.model import EVERY_DRIVER, Migration, is_not_exist, parse

_SQLITE_DRIVERS = frozenset({"sqlite3", "sqlite"})


def _walk(directory: str | os.PathLike, prefix: str = "") -> Iterator[tuple[str, str]]:
    """Yield (relative path, file name) of every file, in lexical order."""
    entries = sorted(os.scandir(directory), key=lambda entry: entry.name)
    for entry in entries:
        relative = prefix + entry.name
        if entry.is_dir():
            yield from _walk(entry.path, relative + "/")
        else:
            yield relative, entry.name


def _to_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, bytes):
        value = value.decode()
    if isinstance(value, str):
        return datetime.fromisoformat(value)
    raise TypeError(f"cannot read {value!r} as a timestamp")


@dataclass
class Provider:
    """Provides the migrations of a project directory merged with the database."""

    directory: str | os.PathLike
    db: Any
    driver: str = "sqlite3"

    def migrations(self) -> list[Migration]:
        """Return the local migrations with the apply times from the database."""
        local = self._files()
        remote = self._query()
        return self._merge(remote, local)

    def insert(self, item: Migration) -> None:
        """Record ``item`` as applied now."""
        item.created_at = datetime.now().astimezone()
        query = "INSERT INTO migrations(id, description, created_at) VALUES (?, ?, ?)"
        self._execute(query, (item.id, item.description, self._bind_time(item.created_at)))
        self.db.commit()

    def delete(self, item: Migration) -> None:
        """Remove the record of ``item`` from the migrations table."""
        self._execute("DELETE FROM migrations WHERE id = ?", (item.id,))
        self.db.commit()

    def exists(self, item: Migration) -> bool:
        """Tell whether exactly one record of ``item`` exists."""
        try:
            rows = self._execute("SELECT count(id) FROM migrations WHERE id = ?", (item.id,))
        except Exception:
            return False
        return bool(rows) and rows[0][0] == 1

    def _files(self) -> list[Migration]:
        root = Path(self.directory)
        if not root.stat() or not root.is_dir():
            return []

        local: list[Migration] = []
        for path, name in _walk(root):
            if not fnmatch.fnmatchcase(name, "*.sql"):
                continue

            migration = parse(path)
            if not self._supported(migration.drivers):
                continue

            if local and migration.equal(local[-1]):
                local[-1].drivers.extend(migration.drivers)
                continue

            local.append(migration)
        return local

    def _supported(self, drivers: Sequence[str]) -> bool:
        return any(driver in (EVERY_DRIVER, self.driver) for driver in drivers)

    def _query(self) -> list[Migration]:
        query = "SELECT id, description, created_at FROM migrations ORDER BY id ASC"
        try:
            rows = self._execute(query)
        except Exception as err:
            if is_not_exist(err):
                return []
            raise
        return [
            Migration(id=row[0], description=row[1], created_at=_to_datetime(row[2]))
            for row in rows
        ]

    def _merge(self, remote: list[Migration], local: list[Migration]) -> list[Migration]:
        for index, applied in enumerate(remote):
            if index >= len(local):
                raise ValueError(f"migration '{applied}' has no file")
            current = local[index]

            if applied.id != current.id:
                raise ValueError(
                    "mismatched migration id. "
                    f"Expected: '{applied.id}' but has '{current.id}'"
                )
            if applied.description != current.description:
                raise ValueError(
                    "mismatched migration description. "
                    f"Expected: '{applied.description}' but has '{current.description}'"
                )

            current.created_at = applied.created_at
        return local

    def _rebind(self, query: str) -> str:
        if self.driver in _SQLITE_DRIVERS:
            return query
        return query.replace("?", "%s")

    def _bind_time(self, moment: datetime) -> Any:
        if self.driver in _SQLITE_DRIVERS:
            return moment.isoformat(sep=" ")
        return moment

    def _execute(self, query: str, params: Sequence[Any] = ()) -> list[tuple]:
        cursor = self.db.cursor()
        try:
            cursor.execute(self._rebind(query), tuple(params))
            return list(cursor.fetchall()) if cursor.description else []
        finally:
            cursor.close()