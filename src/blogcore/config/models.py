"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, blogcore.toml only contains overrides.
An empty (or missing) config file gives a working store at ``./blog.db``.
"""

from __future__ import annotations

from pydantic import BaseModel


class StoreConfig(BaseModel):
    """[store] section."""

    model_config = {"frozen": True}

    filename: str = "blog.db"
