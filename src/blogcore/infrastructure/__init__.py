"""Infrastructure layer — the SQLite-backed post store.

This layer depends on stdlib, SQLAlchemy, and the domain models it persists.
It must never import from services or config.
"""
