"""Runs code generation for a database schema."""

from __future__ import annotations

import io
import os
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

from prana.sqlmodel.model import Generator, GeneratorContext, Schema, SchemaProvider, Spec, contains


def _filter(ignore: list[str], tables: list[str]) -> list[str]:
    ignore.sort()
    return [table for table in tables if not contains(ignore, table)]


@dataclass
class Executor:
    """Generates code from the schema a provider describes."""

    generator: Generator
    provider: SchemaProvider

    def write(self, writer: TextIO, spec: Spec) -> None:
        """Write the generated code to ``writer``."""
        self._write(writer, spec)

    def create(self, spec: Spec) -> str:
        """Write the generated code to a file and return its relative path.

        Returns an empty string when nothing was generated.
        """
        buffer = io.StringIO()
        schema = self._write(buffer, spec)

        body = buffer.getvalue()
        if not body:
            return ""

        path = self._file_of(self._name_of(schema), spec.filename)
        directory = Path(spec.directory)
        directory.mkdir(parents=True, exist_ok=True)
        (directory / path).write_text(body)
        return path

    def _write(self, writer: TextIO, spec: Spec) -> Schema:
        schema = self._schema_of(spec)
        ctx = GeneratorContext(template=spec.template, writer=writer, schema=schema)
        self.generator.generate(ctx)
        return schema

    def _schema_of(self, spec: Spec) -> Schema:
        if not spec.tables:
            spec.tables = self.provider.tables(spec.schema)

        spec.tables = _filter(spec.ignore_tables, spec.tables)
        return self.provider.schema(spec.schema, *spec.tables)

    @staticmethod
    def _file_of(schema: str, filename: str) -> str:
        if schema:
            return schema + os.path.splitext(filename)[1]
        return filename

    @staticmethod
    def _name_of(schema: Schema) -> str:
        return "" if schema.is_default else schema.name