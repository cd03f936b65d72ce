"""Domain layer — post records, ids, and form validation.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, or config.
"""
