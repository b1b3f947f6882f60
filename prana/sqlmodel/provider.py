"""Schema providers that read table metadata from PostgreSQL, MySQL and SQLite."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Sequence

from prana.sqlmodel.model import (
    BOOL_DEF,
    BYTE_DEF,
    BYTE_SLICE_DEF,
    FLOAT32_DEF,
    FLOAT64_DEF,
    HSTORE_DEF,
    INT16_DEF,
    INT32_DEF,
    INT64_DEF,
    INT8_DEF,
    INT_DEF,
    JSON_DEF,
    STRING_DEF,
    TIME_DEF,
    UINT16_DEF,
    UINT32_DEF,
    UINT64_DEF,
    UINT8_DEF,
    UINT_DEF,
    UUID_DEF,
    Column,
    ColumnType,
    Schema,
    Table,
    contains,
)

_SQLITE_TYPE = re.compile(r"([a-z\s]*)\(([0-9]*),?([0-9]*)\)")

_UNSIGNED_TYPES = {
    "smallint": UINT16_DEF,
    "mediumint": UINT32_DEF,
    "int": UINT_DEF,
    "integer": UINT_DEF,
    "bigint": UINT64_DEF,
}

_TYPES = {
    "mediumint": INT32_DEF,
    **dict.fromkeys(
        ("binary", "varbinary", "tinyblob", "blob", "mediumblob", "longblob"), BYTE_DEF
    ),
    **dict.fromkeys(("bigint", "bigserial"), INT64_DEF),
    **dict.fromkeys(("int", "integer", "serial"), INT_DEF),
    **dict.fromkeys(("smallint", "smallserial"), INT16_DEF),
    **dict.fromkeys(("decimal", "numeric", "double precision"), FLOAT64_DEF),
    "real": FLOAT32_DEF,
    **dict.fromkeys(
        (
            "bit",
            "interval",
            "uuint",
            "bit varying",
            "character",
            "money",
            "character varying",
            "cidr",
            "inet",
            "macaddr",
            "text",
            "xml",
        ),
        STRING_DEF,
    ),
    "char": BYTE_DEF,
    **dict.fromkeys(("json", "jsonb"), JSON_DEF),
    "bytea": BYTE_SLICE_DEF,
    "boolean": BOOL_DEF,
    **dict.fromkeys(
        (
            "abstime",
            "date",
            "time",
            "datetime",
            "timestamp",
            "timestamp without time zone",
            "timestamp with time zone",
            "time without time zone",
            "time with time zone",
        ),
        TIME_DEF,
    ),
    "uuid": UUID_DEF,
}


def sanitize(name: str) -> str:
    """Lower ``name`` and drop any double quotes."""
    return name.lower().replace('"', "")


def translate(column_type: ColumnType) -> str:
    """Return the field type that holds values of ``column_type``."""
    nullable = column_type.is_nullable
    name = sanitize(column_type.name)

    if name == "tinyint":
        if column_type.underlying == "tinyint(1)":
            return BOOL_DEF.pick(nullable)
        definition = UINT8_DEF if column_type.is_unsigned else INT8_DEF
        return definition.pick(nullable)

    if column_type.is_unsigned and name in _UNSIGNED_TYPES:
        return _UNSIGNED_TYPES[name].pick(nullable)

    return _TYPES.get(name, STRING_DEF).pick(nullable)


def _rows(db: Any, query: str, params: Sequence[Any] = ()) -> list[tuple]:
    cursor = db.cursor()
    try:
        cursor.execute(query, tuple(params))
        return list(cursor.fetchall())
    finally:
        cursor.close()


def _atoi(text: str) -> int:
    return int(text) if text.isdigit() else 0


@dataclass
class PostgreSQLProvider:
    """Reads schema metadata from a PostgreSQL connection."""

    db: Any

    def close(self) -> None:
        """Close the connection to the database."""
        self.db.close()

    def tables(self, schema: str) -> list[str]:
        """Return the table names of ``schema``, ``public`` when empty."""
        query = (
            "SELECT table_name FROM information_schema.tables "
            "WHERE table_schema = %s "
            "ORDER BY table_name"
        )
        return [row[0] for row in _rows(self.db, query, (self._name_of(schema),))]

    def schema(self, schema: str, *args: str) -> Schema:
        """Return the definition of the given tables of ``schema``."""
        schema = self._name_of(schema)
        query = (
            "SELECT column_name, data_type, udt_name, is_nullable = 'YES' AS is_nullable, "
            "CASE WHEN numeric_precision IS NULL THEN 0 ELSE numeric_precision END, "
            "CASE WHEN numeric_scale IS NULL THEN 0 ELSE numeric_scale END, "
            "CASE WHEN character_maximum_length IS NULL THEN 0 ELSE character_maximum_length END "
            "FROM information_schema.columns "
            "WHERE table_schema = %s AND table_name = %s "
            "ORDER BY table_schema, table_name, ordinal_position"
        )

        tables = []
        for name in args:
            primary_key = self._primary_key(schema, name)
            table = Table(name=name, driver="postgresql")

            for row in _rows(self.db, query, (schema, name)):
                column_name, type_name, underlying, nullable, precision, scale, length = row
                column_type = ColumnType(
                    name=type_name,
                    underlying=underlying,
                    is_nullable=bool(nullable),
                    precision=int(precision),
                    precision_scale=int(scale),
                    char_max_length=int(length),
                    is_primary_key=contains(primary_key, column_name),
                )
                table.columns.append(
                    Column(
                        name=column_name,
                        type=column_type,
                        scan_type=self._translate(column_type),
                    )
                )
            tables.append(table)

        if not tables:
            raise ValueError("No tables found")

        return Schema(
            name=schema,
            driver="postgresql",
            tables=tables,
            is_default=schema == "public",
        )

    def _primary_key(self, schema: str, table: str) -> list[str]:
        query = (
            "SELECT c.column_name "
            "FROM information_schema.key_column_usage AS c "
            "LEFT JOIN information_schema.table_constraints AS t "
            "ON t.constraint_name = c.constraint_name "
            "WHERE t.table_schema = %s AND t.table_name = %s "
            "AND t.constraint_type = 'PRIMARY KEY' "
            "ORDER BY c.column_name"
        )
        return [row[0] for row in _rows(self.db, query, (schema, table))]

    @staticmethod
    def _name_of(schema: str) -> str:
        return schema or "public"

    @staticmethod
    def _translate(column_type: ColumnType) -> str:
        if sanitize(column_type.name) != "user-defined":
            return translate(column_type)
        if sanitize(column_type.underlying) == "hstore":
            return HSTORE_DEF.pick(column_type.is_nullable)
        return STRING_DEF.pick(column_type.is_nullable)


@dataclass
class SQLiteProvider:
    """Reads schema metadata from a SQLite connection."""

    db: Any

    def close(self) -> None:
        """Close the connection to the database."""
        self.db.close()

    def tables(self, schema: str) -> list[str]:
        """Return every table name; SQLite has a single schema."""
        query = "SELECT DISTINCT tbl_name FROM sqlite_master ORDER BY tbl_name"
        return [row[0] for row in _rows(self.db, query)]

    def schema(self, schema: str, *args: str) -> Schema:
        """Return the definition of the given tables."""
        tables = []
        for name in args:
            table = Table(name=name, driver="sqlite")
            for row in _rows(self.db, f"pragma table_info({name})"):
                _, column_name, declared, not_null, _, pk = row
                column_type = self._create(declared or "", not_null, pk)
                table.columns.append(
                    Column(name=column_name, type=column_type, scan_type=translate(column_type))
                )
            tables.append(table)

        if not tables:
            raise ValueError("No tables found")

        return Schema(name="default", driver="sqlite", tables=tables, is_default=True)

    @staticmethod
    def _create(declared: str, not_null: int, pk: int) -> ColumnType:
        type_name = declared
        length = precision = scale = 0

        match = _SQLITE_TYPE.search(declared)
        if match:
            type_name, first, second = match.groups()
            if type_name == "bit":
                precision = _atoi(first)
            elif not second.strip():
                length = _atoi(first)
            else:
                precision = _atoi(first)
                scale = _atoi(second)

        return ColumnType(
            name=type_name,
            underlying=type_name,
            is_primary_key=pk == 1,
            is_nullable=not_null == 0,
            char_max_length=length,
            precision=precision,
            precision_scale=scale,
        )


@dataclass
class MySQLProvider:
    """Reads schema metadata from a MySQL connection."""

    db: Any

    def close(self) -> None:
        """Close the connection to the database."""
        self.db.close()

    def tables(self, schema: str) -> list[str]:
        """Return the base table names of ``schema``, the current database when empty."""
        if not schema:
            schema = self._database()

        query = (
            "SELECT table_name FROM information_schema.tables "
            "WHERE table_schema = %s and table_type = %s "
            "ORDER BY table_name"
        )
        return [row[0] for row in _rows(self.db, query, (schema, "BASE TABLE"))]

    def schema(self, schema: str, *args: str) -> Schema:
        """Return the definition of the given tables of ``schema``."""
        database = self._database()
        if not schema:
            schema = database

        query = (
            "SELECT column_name, data_type, REPLACE(column_type, ' unsigned', ''), "
            "is_nullable = 'YES' AS is_nullable, "
            "INSTR(column_type, 'unsigned') > 0 AS is_unsigned, "
            "CASE WHEN numeric_precision IS NULL THEN 0 ELSE numeric_precision END, "
            "CASE WHEN numeric_scale IS NULL THEN 0 ELSE numeric_scale END, "
            "CASE WHEN character_maximum_length IS NULL THEN 0 ELSE character_maximum_length END "
            "FROM information_schema.columns "
            "WHERE table_schema = %s AND table_name = %s "
            "ORDER BY table_schema, table_name, ordinal_position"
        )

        tables = []
        for name in args:
            table = Table(name=name, driver="mysql")
            primary_key = self._primary_key(schema, name)

            for row in _rows(self.db, query, (schema, name)):
                column_name, type_name, underlying, nullable, unsigned, precision, scale, length = row
                column_type = ColumnType(
                    name=type_name,
                    underlying=underlying,
                    is_nullable=bool(nullable),
                    is_unsigned=bool(unsigned),
                    precision=int(precision),
                    precision_scale=int(scale),
                    char_max_length=int(length),
                    is_primary_key=contains(primary_key, column_name),
                )
                table.columns.append(
                    Column(name=column_name, type=column_type, scan_type=translate(column_type))
                )
            tables.append(table)

        if not tables:
            raise ValueError("No tables found")

        return Schema(name=schema, driver="mysql", tables=tables, is_default=schema == database)

    def _database(self) -> str:
        rows = _rows(self.db, "SELECT database()")
        if not rows:
            raise LookupError("no rows in result set")
        return rows[0][0]

    def _primary_key(self, schema: str, table: str) -> list[str]:
        query = (
            "SELECT c.column_name "
            "FROM information_schema.key_column_usage AS c "
            "INNER JOIN information_schema.table_constraints AS t "
            "ON t.constraint_name = c.constraint_name "
            "WHERE c.table_schema = %s AND c.table_name = %s AND "
            "t.table_schema = %s AND t.table_name = %s AND t.constraint_type = 'PRIMARY KEY' "
            "ORDER BY c.column_name"
        )
        return [row[0] for row in _rows(self.db, query, (schema, table, schema, table))]