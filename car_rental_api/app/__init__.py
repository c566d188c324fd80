"""
Application package initializer.

The project is organised into layers: ``core`` (configuration,
logging, database, security, errors), ``models`` (data-store records
and their SQLite implementation), ``schemas`` (API payloads),
``services`` (business logic) and ``api`` (versioned routers).
"""

from .main import app  # noqa: F401
