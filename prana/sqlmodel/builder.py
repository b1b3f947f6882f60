"""Builders of struct field tags for table columns."""

from __future__ import annotations

from dataclasses import dataclass, field

from prana.sqlmodel.model import Column, TagBuilder


@dataclass
class CompositeTagBuilder:
    """Joins the non-blank tags of several builders."""

    builders: list[TagBuilder] = field(default_factory=list)

    def build(self, column: Column) -> str:
        """Return the joined tags of all builders in backquotes."""
        tags = [tag for tag in (b.build(column).strip() for b in self.builders) if tag]
        return "`" + " ".join(tags) + "`"


class SQLXTagBuilder:
    """Builds tags for the sqlx mapper."""

    def build(self, column: Column) -> str:
        """Return the db tag of ``column``."""
        options = [column.name]
        if column.type.is_primary_key:
            options.append("primary_key")
        options.append("null" if column.type.is_nullable else "not_null")
        if column.type.char_max_length > 0:
            options.append(f"size={column.type.char_max_length}")
        return f'db:"{",".join(options)}"'


class GORMTagBuilder:
    """Builds tags for the gorm mapper."""

    def build(self, column: Column) -> str:
        """Return the gorm tag of ``column``."""
        options = [f"column:{column.name}", f"type:{column.type.db_type().lower()}"]
        if column.type.is_primary_key:
            options.append("primary_key")
        options.append("null" if column.type.is_nullable else "not null")
        if column.type.char_max_length > 0:
            options.append(f"size:{column.type.char_max_length}")
        if column.type.precision > 0:
            options.append(f"precision:{column.type.precision}")
        return f'gorm:"{";".join(options)}"'


class JSONTagBuilder:
    """Builds JSON tags."""

    def build(self, column: Column) -> str:
        """Return the json tag of ``column``."""
        return f'json:"{column.name}"'


class XMLTagBuilder:
    """Builds XML tags."""

    def build(self, column: Column) -> str:
        """Return the xml tag of ``column``."""
        return f'xml:"{column.name}"'


class ValidateTagBuilder:
    """Builds validation tags."""

    def build(self, column: Column) -> str:
        """Return the validate tag of ``column``."""
        options = []
        if not column.type.is_nullable:
            options.append("required")
            if column.scan_type.casefold() == "string":
                options.append("gt=0")
        if column.type.char_max_length > 0:
            options.append(f"max={column.type.char_max_length}")
        if not options:
            options.append("-")
        return f'validate:"{",".join(options)}"'


@dataclass
class NoopTagBuilder:
    """Builds the same fixed tag for every column, empty by default."""

    tag: str = ""

    def build(self, column: Column) -> str:
        """Return the fixed tag, whatever ``column`` is."""
        return self.tag