"""Core services: store client, source fallback, chunked fetch, search, sort."""
from discregistry.core.disc_service import DiscService
from discregistry.core.store_client import PostgrestSource

__all__ = ["DiscService", "PostgrestSource"]
