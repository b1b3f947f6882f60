"""Presents migrations as log records or as a table."""

from __future__ import annotations

import logging
import os
from datetime import datetime
from typing import Iterable, TextIO

from prana.sqlmigr.model import Migration

_MAX_COL_WIDTH = 50
_YELLOW = "\x1b[33m"
_GREEN = "\x1b[32m"
_RESET = "\x1b[0m"

_DAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def _unix_date(moment: datetime) -> str:
    zone = moment.tzname() or "UTC"
    return (
        f"{_DAYS[moment.weekday()]} {_MONTHS[moment.month - 1]} {moment.day:>2} "
        f"{moment.hour:02d}:{moment.minute:02d}:{moment.second:02d} {zone} {moment.year:04d}"
    )


def flog(logger: logging.Logger, migrations: Iterable[Migration]) -> None:
    """Log one record per migration with its fields attached."""
    for migration in migrations:
        status, timestamp = "pending", ""
        if migration.created_at is not None:
            status, timestamp = "executed", _unix_date(migration.created_at)

        fields = {
            "Id": migration.id,
            "Description": migration.description,
            "Status": status,
            "Drivers": ", ".join(migration.drivers),
            "CreatedAt": timestamp,
        }
        logger.info("Migration", extra=fields)


def _uses_color(stream: TextIO) -> bool:
    isatty = getattr(stream, "isatty", None)
    return "NO_COLOR" not in os.environ and callable(isatty) and isatty()


def _truncate(text: str) -> str:
    if len(text) <= _MAX_COL_WIDTH:
        return text
    return text[: _MAX_COL_WIDTH - 3] + "..."


def ftable(stream: TextIO, migrations: Iterable[Migration]) -> None:
    """Write the migrations to ``stream`` as a two column table."""
    colored = _uses_color(stream)

    def paint(text: str, color: str) -> str:
        return f"{color}{text}{_RESET}" if colored else text

    rows: list[tuple[str, ...]] = []
    for migration in migrations:
        if migration.created_at is None:
            status, timestamp = paint("pending", _YELLOW), "--"
        else:
            status = paint("executed", _GREEN)
            timestamp = _unix_date(migration.created_at)

        rows.extend(
            [
                ("Id", _truncate(migration.id)),
                ("Description", _truncate(migration.description)),
                ("Status", status),
                ("Drivers", _truncate(", ".join(migration.drivers))),
                ("Created At", _truncate(timestamp)),
                ("",),
            ]
        )

    width = max((len(row[0]) for row in rows if len(row) > 1), default=0)
    lines = [f"{row[0]:<{width}}\t{row[1]}" if len(row) > 1 else row[0] for row in rows]
    stream.write("\n".join(lines) + "\n")