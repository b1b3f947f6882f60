"""Writes migration files into a directory."""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from prana.sqlmigr.model import Content, Migration

_DAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def _rfc1123(moment: datetime | None) -> str:
    if moment is None:
        moment = datetime(1, 1, 1, tzinfo=timezone.utc)
    zone = moment.tzname() or "UTC"
    return (
        f"{_DAYS[moment.weekday()]}, {moment.day:02d} {_MONTHS[moment.month - 1]} "
        f"{moment.year:04d} {moment.hour:02d}:{moment.minute:02d}:{moment.second:02d} {zone}"
    )


@dataclass
class Generator:
    """Creates new migration files in ``directory``."""

    directory: str | os.PathLike

    def create(self, migration: Migration) -> None:
        """Write an empty migration file."""
        self.write(migration, None)

    def write(self, migration: Migration, content: Content | None) -> None:
        """Write a migration file for each driver; existing files are an error."""
        parts = [
            f"-- Auto-generated at {_rfc1123(migration.created_at)}\n",
            "-- Please do not change the name attributes\n",
            "\n",
            "-- name: up\n",
            content.up_command.read() if content is not None else "\n",
            "-- name: down\n",
            content.down_command.read() if content is not None else "\n",
        ]
        data = "".join(parts).encode()

        for filename in migration.filenames():
            self._write(filename, data)

    def _write(self, filename: str, data: bytes) -> None:
        directory = Path(self.directory)
        directory.mkdir(parents=True, exist_ok=True)
        descriptor = os.open(directory / filename, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
        with os.fdopen(descriptor, "wb") as handle:
            handle.write(data)