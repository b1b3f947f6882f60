"""Fills schema definitions with the names used by generated models and routines."""

from __future__ import annotations

from dataclasses import dataclass

from prana.inflection import camelize, camelize_down_first, singularize
from prana.sqlmodel.model import (
    Column,
    ColumnModel,
    Schema,
    SchemaModel,
    SchemaProvider,
    Table,
    TableModel,
    TagBuilder,
)


@dataclass
class ModelProviderConfig:
    """Options of a model provider."""

    package: str = ""
    use_named_params: bool = False
    include_doc: bool = False


@dataclass
class ModelProvider:
    """Wraps a schema provider and adds model information to what it returns."""

    config: ModelProviderConfig
    provider: SchemaProvider
    tag_builder: TagBuilder

    def tables(self, schema: str) -> list[str]:
        """Return the table names of ``schema`` from the wrapped provider."""
        return self.provider.tables(schema)

    def schema(self, name: str, *args: str) -> Schema:
        """Return the schema of the given tables with its model filled in."""
        schema = self.provider.schema(name, *args)

        schema.model = SchemaModel(
            package=self.config.package,
            has_documentation=self.config.include_doc,
        )

        for table in schema.tables:
            table.name = self._table_name(schema, table)
            table.model = TableModel(
                has_documentation=self.config.include_doc,
                type=self._type_name(table),
                package=schema.model.package,
                primary_key={},
            )

            for column in table.columns:
                column.model = ColumnModel(
                    has_documentation=self.config.include_doc,
                    name=self._field_name(column),
                    type=column.scan_type,
                    tag=self.tag_builder.build(column),
                )

            self._set_primary_key(table)
            table.model.select_all_routine = f"select-all-{self._command_name(table.name, False)}"
            table.model.select_by_pk_routine = f"select-{self._command_name(table.name, True)}-by-pk"
            self._set_insert_routine(table)
            table.model.delete_by_pk_routine = f"delete-{self._command_name(table.name, True)}-by-pk"
            table.model.update_by_pk_routine = f"update-{self._command_name(table.name, True)}-by-pk"
            table.model.update_by_pk_columns = self._update_columns(table)

        return schema

    def close(self) -> None:
        """Close the wrapped provider."""
        self.provider.close()

    def _condition(self, column: Column) -> str:
        if self.config.use_named_params:
            return f"{column.name} = :{column.name}"
        return f"{column.name} = ?"

    def _set_primary_key(self, table: Table) -> None:
        conditions: list[str] = []
        arguments: list[str] = []
        entity_params: list[str] = []
        params: list[str] = []

        for column in table.columns:
            if not column.type.is_primary_key:
                continue

            entity_params.append(f"entity.{column.model.name}")
            conditions.append(self._condition(column))

            param = camelize_down_first(column.name)
            params.append(param)
            table.model.primary_key[column.name] = param
            arguments.append(f"{param} {column.scan_type}")

        table.model.primary_key_condition = " AND ".join(conditions)
        table.model.primary_key_args = ", ".join(arguments)
        table.model.primary_key_entity_params = ", ".join(entity_params)
        table.model.primary_key_params = ", ".join(params)

    def _set_insert_routine(self, table: Table) -> None:
        if not table.columns:
            return

        columns = ", ".join(column.name for column in table.columns)
        if self.config.use_named_params:
            values = ", ".join(f":{column.name}" for column in table.columns)
        else:
            values = ", ".join("?" for _ in table.columns)

        table.model.insert_routine = f"insert-{self._command_name(table.name, True)}"
        table.model.insert_columns = columns
        table.model.insert_values = values

    def _update_columns(self, table: Table) -> str:
        return ", ".join(
            self._condition(column) for column in table.columns if not column.type.is_primary_key
        )

    @staticmethod
    def _command_name(name: str, singular: bool) -> str:
        name = name.replace(".", "-").replace("_", "-")
        return singularize(name) if singular else name

    @staticmethod
    def _table_name(schema: Schema, table: Table) -> str:
        if schema.is_default:
            return table.name
        return f"{schema.name}.{table.name}"

    @staticmethod
    def _type_name(table: Table) -> str:
        return singularize(camelize(table.name.replace(".", " ")))

    @staticmethod
    def _field_name(column: Column) -> str:
        return camelize(column.name).replace("Id", "ID")