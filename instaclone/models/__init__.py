"""Lightweight models package initialiser.

- Exposes the shared SQLAlchemy `Base`.
- Lazily exposes all domain models via module-level attribute access so importing
  `instaclone.core.database` (which pulls `Base`) doesn't eagerly import every model.
"""

from instaclone.models.base import Base

__all__ = ["Base"]


def __getattr__(name: str):
    import importlib

    _registry = importlib.import_module("instaclone.models.registry")

    if name in _registry.__all__:
        return getattr(_registry, name)
    raise AttributeError(f"module 'instaclone.models' has no attribute {name!r}")
