"""SQL migration scripts and schema-driven model descriptions."""

__version__ = "0.1.0"