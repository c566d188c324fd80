"""
Pydantic schema definitions for API payloads.

Schemas are kept separate from the data-store records in ``models`` to
decouple the API representation from persistence.
"""
