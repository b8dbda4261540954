"""SQLite storage, layered configuration, logging and response helpers for recording work, requirements and issues."""

__version__ = "0.1.0"