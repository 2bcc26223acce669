from .base import BaseClient
from .collection_client import CollectionClient

__all__ = ["BaseClient", "CollectionClient"]
