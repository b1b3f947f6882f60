"""Schema, table and column descriptions used to generate code."""

from __future__ import annotations

import bisect
import os
from dataclasses import dataclass, field
from typing import Any, Protocol, Sequence, TextIO


@dataclass(frozen=True)
class TypeDef:
    """A target type with its nullable counterpart."""

    type: str
    nullable_type: str = ""

    def pick(self, nullable: bool) -> str:
        """Return the nullable type when ``nullable`` is true, else the plain type."""
        return self.nullable_type if nullable else self.type


INT_DEF = TypeDef("int", "schema.NullInt")
UINT_DEF = TypeDef("Uint", "schema.NullUint")
INT16_DEF = TypeDef("int16", "schema.NullInt16")
INT64_DEF = TypeDef("int64", "schema.NullInt64")
INT8_DEF = TypeDef("int8", "schema.NullInt8")
UINT8_DEF = TypeDef("uint8", "schema.NullUint8")
UINT16_DEF = TypeDef("uint16", "schema.NullUint16")
UINT32_DEF = TypeDef("uint32", "schema.NullUint32")
INT32_DEF = TypeDef("int32", "schema.NullInt32")
UINT64_DEF = TypeDef("uint64", "schema.NullUint64")
FLOAT32_DEF = TypeDef("float32", "schema.NullFloat32")
FLOAT64_DEF = TypeDef("float64", "schema.NullFloat64")
STRING_DEF = TypeDef("string", "schema.NullString")
BYTE_DEF = TypeDef("byte", "schema.NullByte")
BYTE_SLICE_DEF = TypeDef("[]byte", "schema.NullBytes")
BOOL_DEF = TypeDef("bool", "schema.NullBool")
TIME_DEF = TypeDef("time.Time", "schema.NullTime")
UUID_DEF = TypeDef("schema.UUID", "schema.NullUUID")
JSON_DEF = TypeDef("[]byte", "schema.NullJSON")
HSTORE_DEF = TypeDef("hstore.Hstore", "hstore.Hstore")


@dataclass
class ColumnType:
    """The database type of a column and its constraints."""

    name: str = ""
    underlying: str = ""
    is_primary_key: bool = False
    is_nullable: bool = False
    is_unsigned: bool = False
    char_max_length: int = 0
    precision: int = 0
    precision_scale: int = 0

    def db_type(self) -> str:
        """Return the type as written in a column definition."""
        name = self.name
        if name.casefold() == "user-defined":
            name = self.underlying

        if self.char_max_length > 0:
            return f"{name}({self.char_max_length})"
        if self.precision > 0 and self.precision_scale == 0:
            return f"{name}({self.precision})"
        if self.precision > 0 and self.precision_scale > 0:
            return f"{name}({self.precision}, {self.precision_scale})"
        return name

    def __str__(self) -> str:
        name = self.db_type()
        if self.is_primary_key:
            name += " PRIMARY KEY"
        name += " NULL" if self.is_nullable else " NOT NULL"
        return name.upper()


@dataclass
class ColumnModel:
    """The field generated for a column."""

    has_documentation: bool = False
    name: str = ""
    type: str = ""
    tag: str = ""


@dataclass
class Column:
    """A database column."""

    name: str = ""
    type: ColumnType = field(default_factory=ColumnType)
    scan_type: str = ""
    model: ColumnModel = field(default_factory=ColumnModel)


@dataclass
class TableModel:
    """The type and routine names generated for a table."""

    has_documentation: bool = False
    type: str = ""
    package: str = ""
    insert_routine: str = ""
    insert_columns: str = ""
    insert_values: str = ""
    select_by_pk_routine: str = ""
    select_all_routine: str = ""
    delete_by_pk_routine: str = ""
    update_by_pk_routine: str = ""
    update_by_pk_columns: str = ""
    primary_key_condition: str = ""
    primary_key_params: str = ""
    primary_key_entity_params: str = ""
    primary_key_args: str = ""
    primary_key: dict[str, str] = field(default_factory=dict)


@dataclass
class Table:
    """A database table and its columns."""

    name: str = ""
    driver: str = ""
    model: TableModel = field(default_factory=TableModel)
    columns: list[Column] = field(default_factory=list)


@dataclass
class SchemaModel:
    """The package generated for a schema."""

    package: str = ""
    has_documentation: bool = False


@dataclass
class Schema:
    """A database schema and its tables."""

    name: str = ""
    driver: str = ""
    tables: list[Table] = field(default_factory=list)
    is_default: bool = False
    model: SchemaModel = field(default_factory=SchemaModel)


@dataclass
class Spec:
    """Options of a code generation run."""

    filename: str = ""
    template: str = ""
    directory: str | os.PathLike = "."
    schema: str = ""
    tables: list[str] = field(default_factory=list)
    ignore_tables: list[str] = field(default_factory=list)


@dataclass
class GeneratorContext:
    """What a generator renders and where it writes the result."""

    template: str
    writer: TextIO
    schema: Schema


class SchemaProvider(Protocol):
    """Describes the schema of a database."""

    def tables(self, schema: str) -> list[str]:
        """Return the table names of ``schema``."""

    def schema(self, schema: str, *args: str) -> Schema:
        """Return the definition of ``schema`` for the given tables."""

    def close(self) -> None:
        """Close the connection to the database."""


class Generator(Protocol):
    """Generates models or scripts from a schema."""

    def generate(self, ctx: GeneratorContext) -> None:
        """Render ``ctx.schema`` with ``ctx.template`` into ``ctx.writer``."""


class TagBuilder(Protocol):
    """Builds a field tag for a column."""

    def build(self, column: Column) -> str:
        """Return the tag for ``column``."""


def contains(items: Sequence[Any], item: Any) -> bool:
    """Tell whether ``item`` is in the sorted sequence ``items``."""
    index = bisect.bisect_left(items, item)
    return index < len(items) and items[index] == item