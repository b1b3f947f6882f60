# prana

A small library for keeping a relational database schema under control. It
has no dependencies outside the standard library.

- `prana.sqlmigr` names, writes and lists SQL migration scripts and decides
  which of them to apply or revert, and in which order.
- `prana.sqlmodel` reads table and column metadata from PostgreSQL, MySQL or
  SQLite connections and turns it into model descriptions and struct field tags.
- `prana.inflection` holds the word helpers both use: `camelize`,
  `camelize_down_first`, `singularize` and `underscore`.

## Installation

```
pip install .
```

## Migration scripts

A migration script is a file named `<timestamp>_<description>.sql`, for example
`20060102150405_schema.sql`, where the timestamp is `YYYYMMDDhhmmss`. A script
meant for one driver only carries the driver name as a suffix, as in
`20060102150405_schema_sqlite3.sql`. Each script holds two named sections:

```sql
-- name: up
CREATE TABLE users (id TEXT);

-- name: down
DROP TABLE users;
```

`prana.sqlmigr.model.parse` turns a file name into a `Migration`, and raises
`ValueError` for a name that does not have this shape:

```python
from prana.sqlmigr.model import parse

migration = parse("20060102150405_my_schema_sqlite3.sql")
migration.id           # "20060102150405"
migration.description  # "my_schema"
migration.drivers      # ["sqlite3"]
migration.filenames()  # ["20060102150405_my_schema_sqlite3.sql"]
```

A `Migration` whose `created_at` is `None` is pending; one with a time has been
applied. `is_not_exist(err)` tells whether an error from SQLite, PostgreSQL or
MySQL means that the `migrations` table is missing.

### Writing scripts

`prana.sqlmigr.generator.Generator(directory)` writes scripts into a directory,
creating it if needed. `create(migration)` writes a script with empty sections;
`write(migration, content)` fills the sections from the two readable streams of
a `Content`. One file is written for each driver of the migration, and a file
that already exists is never overwritten (`FileExistsError`).

### Listing migrations

`prana.sqlmigr.provider.Provider(directory, db, driver="sqlite3")` takes a
DB-API connection:

- `migrations()` walks the directory for `*.sql` files in name order, skips
  those written for other drivers, joins files that differ only in driver into
  one migration, and takes the apply times from the `migrations` table. A
  missing table counts as nothing applied. A file whose name cannot be parsed,
  or a recorded migration that does not match the file at the same position,
  raises `ValueError`.
- `insert(item)` records a migration as applied now; `delete(item)` removes the
  record; `exists(item)` tells whether exactly one record is there.

For the `sqlite3` and `sqlite` drivers queries use `?` placeholders; for any
other driver they use `%s`.

### Applying and reverting

`prana.sqlmigr.executor.Executor(provider, runner, generator, logger=None)`
ties the pieces together:

- `setup()` writes the script that creates the `migrations` table;
- `create(name)` writes a new, empty script stamped with the current UTC time
  and returns its `Migration`;
- `run(step)` and `run_all()` apply pending migrations oldest first, recording
  each one, and return how many were applied;
- `revert(step)` and `revert_all()` undo applied migrations newest first and
  return how many were reverted;
- `migrations()` returns what the provider lists.

A negative step means all of them. Each step is logged at info level when a
`logging.Logger` is given.

The runner is any object with `run(item)` and `revert(item)` methods (the
`MigrationRunner` protocol in `prana.sqlmigr.model`). The package does not
include one: executing the `up` and `down` sections of a script against a
database is left to the caller. A minimal runner for SQLite could be:

```python
import re
import sqlite3
from pathlib import Path

from prana.sqlmigr.executor import Executor
from prana.sqlmigr.generator import Generator
from prana.sqlmigr.provider import Provider


class SQLiteRunner:
    def __init__(self, directory, db):
        self.directory = Path(directory)
        self.db = db

    def _section(self, item, name):
        text = (self.directory / item.filenames()[0]).read_text()
        sections = re.split(r"^-- name: (\w+)\s*$", text, flags=re.MULTILINE)
        return dict(zip(sections[1::2], sections[2::2]))[name]

    def run(self, item):
        self.db.executescript(self._section(item, "up"))

    def revert(self, item):
        self.db.executescript(self._section(item, "down"))


db = sqlite3.connect("app.db")
executor = Executor(
    provider=Provider("migrations", db),
    runner=SQLiteRunner("migrations", db),
    generator=Generator("migrations"),
)
executor.setup()
executor.create("add users")
executor.run_all()
```

### Showing migrations

`prana.sqlmigr.printer.flog(logger, migrations)` logs one `Migration` record
per migration with `Id`, `Description`, `Status`, `Drivers` and `CreatedAt`
attached as record attributes. `ftable(stream, migrations)` writes them as a
two-column table; the status is coloured only when the stream is a terminal and
`NO_COLOR` is not set.

## Models from a schema

The classes in `prana.sqlmodel.model` describe a schema: `Schema`, `Table`,
`Column` and `ColumnType`, with `SchemaModel`, `TableModel` and `ColumnModel`
for the generated view of each. `ColumnType.db_type()` gives the type as written
in a column definition (such as `varchar(200)` or `numeric(10, 20)`), and
`str(column_type)` adds `PRIMARY KEY` and `NULL`/`NOT NULL` in upper case.

### Reading metadata

`prana.sqlmodel.provider` has `PostgreSQLProvider`, `MySQLProvider` and
`SQLiteProvider`, each built on a DB-API connection:

- `tables(schema)` lists table names (PostgreSQL defaults to `public`, MySQL to
  the current database; SQLite has a single schema);
- `schema(schema, *tables)` describes the given tables, marks primary key
  columns and sets each column's `scan_type`; it raises `ValueError("No tables
  found")` when no table names are given;
- `close()` closes the connection.

`translate(column_type)` maps a database type to a field type name such as
`int64`, `string`, `time.Time` or, for nullable columns, `schema.NullString`;
`sanitize(name)` lowers a type name and drops double quotes.

### Filling in the model

`prana.sqlmodel.model_provider.ModelProvider(config, provider, tag_builder)`
wraps a schema provider. Its `schema()` prefixes table names with the schema
name for a non-default schema and fills in type and field names, primary key
conditions and parameters, and the names of the `select-all-…`,
`select-…-by-pk`, `insert-…`, `update-…-by-pk` and `delete-…-by-pk` routines.
`ModelProviderConfig` sets the package name, whether to use named (`:name`)
or positional (`?`) parameters, and `include_doc`.

### Field tags

`prana.sqlmodel.builder` has `SQLXTagBuilder`, `GORMTagBuilder`,
`JSONTagBuilder`, `XMLTagBuilder` and `ValidateTagBuilder`.
`CompositeTagBuilder(builders)` joins their non-blank tags in backquotes, and
`NoopTagBuilder(tag="")` returns a fixed tag.

### Running a generation

`prana.sqlmodel.executor.Executor(generator, provider)` takes a `Spec`: it lists
the tables when none are given, drops `ignore_tables`, asks the provider for the
schema and passes it to the generator in a `GeneratorContext`. `write(writer,
spec)` sends the output to a text stream; `create(spec)` writes it to a file in
`spec.directory` (named after the schema when it is not the default one) and
returns the file's relative path, or `""` when nothing was generated.

The generator is any object with a `generate(ctx)` method (the `Generator`
protocol in `prana.sqlmodel.model`). The package does not include a template
renderer that turns a schema into source code or SQL routine files; that part
is left to the caller.

## What is not included

There is no command-line tool, no migration runner and no template-based code
generator. The package provides the naming, bookkeeping, ordering and metadata
parts; executing SQL scripts and rendering output are done by objects the
caller supplies.

## Running the tests

```
pip install .[test]
pytest
```