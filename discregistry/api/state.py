"""Shared application state (injected into routes)."""
from discregistry.core.disc_service import DiscService
from discregistry.core.store_client import PostgrestSource


class AppState:
    def __init__(self) -> None:
        self._store: PostgrestSource | None = None
        self._disc_service: DiscService | None = None

    @property
    def store(self) -> PostgrestSource:
        if self._store is None:
            self._store = PostgrestSource()
        return self._store

    @property
    def disc_service(self) -> DiscService:
        if self._disc_service is None:
            self._disc_service = DiscService(self.store)
        return self._disc_service

    async def close(self) -> None:
        if self._store is not None:
            await self._store.aclose()
        self._store = None
        self._disc_service = None


_state = AppState()


def get_state() -> AppState:
    return _state
