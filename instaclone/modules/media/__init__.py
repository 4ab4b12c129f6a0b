"""Media storage public exports."""

from .storage import LocalFileStore, StoredObject, get_file_store

__all__ = ["LocalFileStore", "StoredObject", "get_file_store"]
