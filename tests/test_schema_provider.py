import sqlite3

import pytest

from prana.sqlmodel.model import ColumnType
from prana.sqlmodel.provider import (
    MySQLProvider,
    PostgreSQLProvider,
    SQLiteProvider,
    sanitize,
    translate,
)


class FakeCursor:
    def __init__(self, connection):
        self.connection = connection
        self.rows = []

    def execute(self, query, params=()):
        self.connection.calls.append((query, tuple(params)))
        self.rows = self.connection.respond(query, tuple(params))

    def fetchall(self):
        return list(self.rows)

    def close(self):
        pass


class FakeConnection:
    def __init__(self, respond):
        self.respond = respond
        self.calls = []
        self.closed = False

    def cursor(self):
        return FakeCursor(self)

    def close(self):
        self.closed = True


# translate / sanitize


@pytest.mark.parametrize(
    "column_type, expected",
    [
        (ColumnType(name="tinyint", underlying="tinyint(1)", is_unsigned=True), "bool"),
        (
            ColumnType(name="tinyint", underlying="tinyint(1)", is_unsigned=True, is_nullable=True),
            "schema.NullBool",
        ),
        (ColumnType(name="tinyint", underlying="tinyint(2)", is_unsigned=True), "uint8"),
        (ColumnType(name="tinyint", underlying="tinyint(2)"), "int8"),
        (ColumnType(name="tinyint", underlying="tinyint(1)"), "bool"),
        (ColumnType(name="smallint", is_unsigned=True), "uint16"),
        (ColumnType(name="mediumint", is_unsigned=True), "uint32"),
        (ColumnType(name="int", is_unsigned=True, is_nullable=True), "schema.NullUint"),
        (ColumnType(name="bigint", is_unsigned=True), "uint64"),
        (ColumnType(name="mediumint"), "int32"),
        (ColumnType(name="varbinary", is_nullable=True), "schema.NullByte"),
        (ColumnType(name="bigserial"), "int64"),
        (ColumnType(name="serial"), "int"),
        (ColumnType(name="smallserial"), "int16"),
        (ColumnType(name="double precision"), "float64"),
        (ColumnType(name="real", is_nullable=True), "schema.NullFloat32"),
        (ColumnType(name="money"), "string"),
        (ColumnType(name="char"), "byte"),
        (ColumnType(name="jsonb"), "[]byte"),
        (ColumnType(name="jsonb", is_nullable=True), "schema.NullJSON"),
        (ColumnType(name="bytea", is_nullable=True), "schema.NullBytes"),
        (ColumnType(name='"Boolean"'), "bool"),
        (ColumnType(name="timestamp with time zone"), "time.Time"),
        (ColumnType(name="abstime", is_nullable=True), "schema.NullTime"),
        (ColumnType(name="uuid"), "schema.UUID"),
        (ColumnType(name="uuid", is_nullable=True), "schema.NullUUID"),
        (ColumnType(name="something-else"), "string"),
    ],
)
def test_translate(column_type, expected):
    assert translate(column_type) == expected


def test_sanitize_lowers_and_strips_quotes():
    assert sanitize('"HStore"') == "hstore"


# SQLite


@pytest.fixture
def sqlite_db(tmp_path):
    connection = sqlite3.connect(str(tmp_path / "prana.db"))
    yield connection
    connection.close()


def test_sqlite_tables(sqlite_db):
    sqlite_db.execute("CREATE TABLE your_table(id serial)")
    sqlite_db.execute("CREATE TABLE my_table(id serial)")
    provider = SQLiteProvider(db=sqlite_db)
    assert provider.tables("public") == ["my_table", "your_table"]
    assert provider.tables("") == ["my_table", "your_table"]


def test_sqlite_schema_columns(sqlite_db):
    sqlite_db.execute(
        "CREATE TABLE test ("
        " varbit_field_null varbit(20) NULL,"
        " bit_varying_field_not_null bit varying(20) NOT NULL,"
        " numeric_field numeric(10,2) NOT NULL,"
        " bit_field bit(3) NOT NULL,"
        " bytea_field_null bytea NULL,"
        " uuid_field_not_null uuid NOT NULL,"
        " timestamp_field_not_null timestamp NOT NULL"
        ")"
    )
    schema = SQLiteProvider(db=sqlite_db).schema("", "test")

    assert schema.name == "default"
    assert schema.driver == "sqlite"
    assert schema.is_default is True
    assert len(schema.tables) == 1

    table = schema.tables[0]
    assert table.name == "test"
    columns = {column.name: column for column in table.columns}
    assert len(columns) == 7

    varbit = columns["varbit_field_null"]
    assert varbit.type.name == "varbit"
    assert varbit.type.char_max_length == 20
    assert varbit.type.is_nullable is True
    assert varbit.scan_type == "schema.NullString"

    varying = columns["bit_varying_field_not_null"]
    assert varying.type.name == "bit varying"
    assert varying.scan_type == "string"

    numeric = columns["numeric_field"]
    assert numeric.type.precision == 10
    assert numeric.type.precision_scale == 2
    assert numeric.type.char_max_length == 0
    assert numeric.scan_type == "float64"

    bit = columns["bit_field"]
    assert bit.type.precision == 3
    assert bit.type.char_max_length == 0
    assert bit.scan_type == "string"

    assert columns["bytea_field_null"].scan_type == "schema.NullBytes"
    assert columns["uuid_field_not_null"].scan_type == "schema.UUID"
    assert columns["timestamp_field_not_null"].scan_type == "time.Time"


def test_sqlite_schema_primary_key(sqlite_db):
    sqlite_db.execute("CREATE TABLE my_table(id serial primary key)")
    schema = SQLiteProvider(db=sqlite_db).schema("", "my_table")
    table = schema.tables[0]
    assert table.name == "my_table"
    assert len(table.columns) == 1
    assert table.columns[0].name == "id"
    assert table.columns[0].type.is_primary_key is True


def test_sqlite_schema_without_tables(sqlite_db):
    with pytest.raises(ValueError, match="No tables found"):
        SQLiteProvider(db=sqlite_db).schema("public")


def test_sqlite_closed_database(tmp_path):
    connection = sqlite3.connect(str(tmp_path / "closed.db"))
    connection.close()
    provider = SQLiteProvider(db=connection)
    with pytest.raises(sqlite3.ProgrammingError):
        provider.tables("public")
    with pytest.raises(sqlite3.ProgrammingError):
        provider.schema("public", "test")


def test_sqlite_close(tmp_path):
    connection = sqlite3.connect(str(tmp_path / "prana.db"))
    SQLiteProvider(db=connection).close()
    with pytest.raises(sqlite3.ProgrammingError):
        connection.execute("SELECT 1")


# PostgreSQL


def postgres_responder(fail_on=None):
    def respond(query, params):
        if fail_on and fail_on in query:
            raise RuntimeError("oh no!")
        if "information_schema.tables" in query:
            return [("my_table",), ("your_table",)]
        if "key_column_usage" in query:
            return [("id",)]
        if "information_schema.columns" in query:
            return [
                ("id", "integer", "int4", False, 32, 0, 0),
                ("mood", "USER-DEFINED", "mood", True, 0, 0, 0),
                ("tags", "USER-DEFINED", "hstore", False, 0, 0, 0),
                ("name", "character varying", "varchar", True, 0, 0, 200),
            ]
        return []

    return respond


def test_postgres_tables_defaults_to_public():
    connection = FakeConnection(postgres_responder())
    tables = PostgreSQLProvider(db=connection).tables("")
    assert tables == ["my_table", "your_table"]
    assert connection.calls[0][1] == ("public",)


def test_postgres_schema():
    connection = FakeConnection(postgres_responder())
    schema = PostgreSQLProvider(db=connection).schema("", "test")

    assert schema.name == "public"
    assert schema.driver == "postgresql"
    assert schema.is_default is True

    table = schema.tables[0]
    assert table.name == "test"
    assert table.driver == "postgresql"
    columns = {column.name: column for column in table.columns}
    assert columns["id"].type.is_primary_key is True
    assert columns["id"].scan_type == "int"
    assert columns["mood"].type.is_primary_key is False
    assert columns["mood"].scan_type == "schema.NullString"
    assert columns["tags"].scan_type == "hstore.Hstore"
    assert columns["name"].type.char_max_length == 200
    assert columns["name"].scan_type == "schema.NullString"


def test_postgres_schema_not_default():
    connection = FakeConnection(postgres_responder())
    schema = PostgreSQLProvider(db=connection).schema("reports", "test")
    assert schema.name == "reports"
    assert schema.is_default is False


def test_postgres_schema_without_tables():
    with pytest.raises(ValueError, match="No tables found"):
        PostgreSQLProvider(db=FakeConnection(postgres_responder())).schema("public")


def test_postgres_columns_query_fails():
    connection = FakeConnection(postgres_responder(fail_on="information_schema.columns"))
    with pytest.raises(RuntimeError, match="oh no!"):
        PostgreSQLProvider(db=connection).schema("public", "test")


def test_postgres_close():
    connection = FakeConnection(postgres_responder())
    PostgreSQLProvider(db=connection).close()
    assert connection.closed is True


# MySQL


def mysql_responder(fail_on=None):
    def respond(query, params):
        if fail_on and fail_on in query:
            raise RuntimeError("oh no!")
        if query == "SELECT database()":
            return [("prana",)]
        if "information_schema.tables" in query:
            return [("my_table",), ("your_table",)]
        if "table_constraints" in query:
            return [("id",)]
        if "information_schema.columns" in query:
            return [
                ("flag", "tinyint", "tinyint(1)", 1, 1, 3, 0, 0),
                ("small", "tinyint", "tinyint(2)", 0, 1, 3, 0, 0),
                ("medium", "mediumint", "mediumint(9)", 1, 0, 7, 0, 0),
                ("id", "int", "int(10)", 0, 1, 10, 0, 0),
                ("data", "varbinary", "varbinary(20)", 0, 0, 0, 0, 20),
            ]
        return []

    return respond


def test_mysql_tables_uses_current_database():
    connection = FakeConnection(mysql_responder())
    tables = MySQLProvider(db=connection).tables("")
    assert tables == ["my_table", "your_table"]
    assert connection.calls[-1][1] == ("prana", "BASE TABLE")


def test_mysql_schema():
    connection = FakeConnection(mysql_responder())
    schema = MySQLProvider(db=connection).schema("", "test")

    assert schema.name == "prana"
    assert schema.driver == "mysql"
    assert schema.is_default is True

    columns = {column.name: column for column in schema.tables[0].columns}
    assert columns["flag"].scan_type == "schema.NullBool"
    assert columns["small"].scan_type == "uint8"
    assert columns["medium"].scan_type == "schema.NullInt32"
    assert columns["id"].scan_type == "Uint"
    assert columns["id"].type.is_primary_key is True
    assert columns["id"].type.is_unsigned is True
    assert columns["data"].scan_type == "byte"
    assert columns["data"].type.char_max_length == 20


def test_mysql_schema_not_default():
    schema = MySQLProvider(db=FakeConnection(mysql_responder())).schema("other", "test")
    assert schema.name == "other"
    assert schema.is_default is False


def test_mysql_schema_without_tables():
    with pytest.raises(ValueError, match="No tables found"):
        MySQLProvider(db=FakeConnection(mysql_responder())).schema("")


def test_mysql_primary_key_query_fails():
    connection = FakeConnection(mysql_responder(fail_on="information_schema.table_constraints"))
    with pytest.raises(RuntimeError, match="oh no!"):
        MySQLProvider(db=connection).schema("public", "test")


def test_mysql_columns_query_fails():
    connection = FakeConnection(mysql_responder(fail_on="information_schema.columns"))
    with pytest.raises(RuntimeError, match="oh no!"):
        MySQLProvider(db=connection).schema("public", "test")


def test_mysql_database_unavailable():
    connection = FakeConnection(mysql_responder(fail_on="database()"))
    with pytest.raises(RuntimeError, match="oh no!"):
        MySQLProvider(db=connection).tables("")


def test_mysql_close():
    connection = FakeConnection(mysql_responder())
    MySQLProvider(db=connection).close()
    assert connection.closed is True