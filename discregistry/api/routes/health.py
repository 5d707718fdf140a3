"""Backing store connectivity."""
from fastapi import APIRouter, Depends

from discregistry.api.state import AppState, get_state

router = APIRouter()


@router.get("")
async def health(state: AppState = Depends(get_state)):
    """Return whether the disc table can be read."""
    connected, error = await state.disc_service.check_connection()
    return {"connected": connected, "error": error}
