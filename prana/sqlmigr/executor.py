"""Coordinates creating, applying and reverting migrations."""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from prana.inflection import underscore
from prana.sqlmigr.model import (
    EVERY_DRIVER,
    Content,
    Migration,
    MigrationGenerator,
    MigrationProvider,
    MigrationRunner,
    is_not_exist,
    parse,
)

# January 1970th of year 1, carried over into later months as the calendar does.
_SETUP_MOMENT = datetime(1, 1, 1, tzinfo=timezone.utc) + timedelta(days=1969)

_SETUP_UP = (
    "CREATE TABLE IF NOT EXISTS migrations (\n"
    " id          VARCHAR(15) NOT NULL PRIMARY KEY,\n"
    " description TEXT        NOT NULL,\n"
    " created_at  TIMESTAMP   NOT NULL\n"
    ");\n"
    "\n"
)
_SETUP_DOWN = "DROP TABLE IF EXISTS migrations;\n"


def _format_id(moment: datetime) -> str:
    return (
        f"{moment.year:04d}{moment.month:02d}{moment.day:02d}"
        f"{moment.hour:02d}{moment.minute:02d}{moment.second:02d}"
    )


@dataclass
class Executor:
    """Groups the operations on the migrations of a project."""

    provider: MigrationProvider
    runner: MigrationRunner
    generator: MigrationGenerator
    logger: logging.Logger | None = None

    def setup(self) -> None:
        """Write the migration that creates the migrations table."""
        migration = Migration(
            id=_format_id(_SETUP_MOMENT),
            description="setup",
            drivers=[EVERY_DRIVER],
            created_at=datetime.now().astimezone(),
        )
        content = Content(io.StringIO(_SETUP_UP), io.StringIO(_SETUP_DOWN))
        self.generator.write(migration, content)

    def create(self, name: str) -> Migration:
        """Create an empty migration file named after ``name``."""
        now = datetime.now(timezone.utc)
        migration = parse(f"{_format_id(now)}_{underscore(name.lower())}.sql")
        migration.created_at = now
        self.generator.create(migration)
        return migration

    def run(self, step: int) -> int:
        """Apply up to ``step`` pending migrations; a negative step applies all."""
        count = 0
        for migration in self.migrations():
            if step == 0:
                break
            if migration.created_at is not None:
                continue

            self._log("Running migration '%s'", migration)
            self.runner.run(migration)
            self.provider.insert(migration)

            step -= 1
            count += 1
        return count

    def run_all(self) -> int:
        """Apply every pending migration."""
        return self.run(-1)

    def revert(self, step: int) -> int:
        """Revert up to ``step`` applied migrations, newest first."""
        count = 0
        for migration in reversed(self.migrations()):
            if step == 0:
                break
            if migration.created_at is None:
                continue

            self._log("Reverting migration '%s'", migration)
            self.runner.revert(migration)
            try:
                self.provider.delete(migration)
            except Exception as err:
                if is_not_exist(err):
                    return count
                raise

            step -= 1
            count += 1
        return count

    def revert_all(self) -> int:
        """Revert every applied migration."""
        return self.revert(-1)

    def migrations(self) -> list[Migration]:
        """Return all migrations known to the provider."""
        return self.provider.migrations()

    def _log(self, message: str, *args: object) -> None:
        if self.logger is not None:
            self.logger.info(message, *args)