"""Migration records, migration file names and the roles that act on them."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import IO, Protocol

EVERY_DRIVER = "sql"

_ID_FORMAT = "%Y%m%d%H%M%S"
_ID_PATTERN = re.compile(r"\d{14}")
_KNOWN_DRIVERS = frozenset({"sqlite3", "sqlite", "postgres", "postgresql", "mysql"})


@dataclass
class Migration:
    """A single migration: its id, description, apply time and drivers."""

    id: str
    description: str = ""
    created_at: datetime | None = None
    drivers: list[str] = field(default_factory=list)

    def filenames(self) -> list[str]:
        """Return one file name for each driver of the migration."""
        names = []
        for driver in self.drivers:
            if driver == EVERY_DRIVER:
                parts = [self.id, self.description]
            else:
                parts = [self.id, self.description, driver]
            names.append("_".join(parts) + ".sql")
        return names

    def equal(self, other: Migration) -> bool:
        """Tell whether two migrations share id and description."""
        return self.id == other.id and self.description == other.description

    def __str__(self) -> str:
        return f"{self.id}_{self.description}"


@dataclass
class Content:
    """The readable bodies of the up and down routines of a migration."""

    up_command: IO[str]
    down_command: IO[str]


class RunnerError(Exception):
    """A statement of a migration failed to execute."""

    def __init__(self, err: BaseException, statement: str) -> None:
        super().__init__(err, statement)
        self.err = err
        self.statement = statement

    def __str__(self) -> str:
        return f"{self.err}: {self.statement.split(chr(10))[0]}"


class MigrationRunner(Protocol):
    """Runs or reverts a migration."""

    def run(self, item: Migration) -> None:
        """Apply the up routine of ``item``."""

    def revert(self, item: Migration) -> None:
        """Apply the down routine of ``item``."""


class MigrationProvider(Protocol):
    """Provides migrations and records which ones were applied."""

    def migrations(self) -> list[Migration]:
        """Return every known migration."""

    def insert(self, item: Migration) -> None:
        """Record ``item`` as applied."""

    def delete(self, item: Migration) -> None:
        """Forget that ``item`` was applied."""

    def exists(self, item: Migration) -> bool:
        """Tell whether ``item`` is recorded as applied."""


class MigrationGenerator(Protocol):
    """Writes migration files."""

    def create(self, migration: Migration) -> None:
        """Write an empty migration file."""

    def write(self, migration: Migration, content: Content | None) -> None:
        """Write a migration file with the given content."""


def _path_driver(name: str) -> str:
    suffix = name.rsplit("_", 1)[-1]
    return suffix if suffix in _KNOWN_DRIVERS else EVERY_DRIVER


def parse(path: str) -> Migration:
    """Build a migration from a file path like ``20060102150405_name.sql``."""
    name = os.path.splitext(os.path.basename(path))[0]
    parts = name.split("_", 1)
    message = f"migration '{path}' has an invalid file name"

    if len(parts) != 2:
        raise ValueError(message)

    identifier, description = parts
    if not _ID_PATTERN.fullmatch(identifier):
        raise ValueError(message)
    try:
        datetime.strptime(identifier, _ID_FORMAT)
    except ValueError:
        raise ValueError(message) from None

    driver = _path_driver(name)
    if driver != EVERY_DRIVER:
        description = description.replace(f"_{driver}", "")

    return Migration(id=identifier, description=description, drivers=[driver])


def is_not_exist(err: BaseException) -> bool:
    """Tell whether ``err`` reports a missing migrations table."""
    message = str(err)
    return (
        message == "no such table: migrations"
        or message == 'pq: relation "migrations" does not exist'
        or message.endswith("migrations' doesn't exist")
    )