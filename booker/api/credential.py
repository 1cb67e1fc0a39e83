"""
API key endpoints.

Generate, read, copy and clear the locally stored API key.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from booker.api.records import ConfirmRequest
from booker.services.session import BookerSession, get_booker

router = APIRouter(prefix="/credential", tags=["credential"])


class CredentialResponse(BaseModel):
    """Response model for the stored API key."""

    api_key: str = Field(default="", description="Stored key, empty when none")
    has_key: bool = False
    status: str = Field(default="", description="Status line to show the user")


def _credential_response(booker: BookerSession) -> CredentialResponse:
    api_key = booker.store.credential
    return CredentialResponse(api_key=api_key, has_key=bool(api_key), status=booker.status)


@router.get("", response_model=CredentialResponse)
async def get_credential(
    booker: Annotated[BookerSession, Depends(get_booker)],
) -> CredentialResponse:
    """Get the stored API key."""
    return _credential_response(booker)


@router.post("/generate", response_model=CredentialResponse)
async def generate_credential(
    booker: Annotated[BookerSession, Depends(get_booker)],
) -> CredentialResponse:
    """
    Generate and store a new API key, replacing any existing one.

    Returns 503 if the system has no secure randomness source.
    """
    booker.generate_credential()
    return _credential_response(booker)


@router.post("/copy", response_model=CredentialResponse)
async def copy_credential(
    booker: Annotated[BookerSession, Depends(get_booker)],
) -> CredentialResponse:
    """Return the stored key for copying; a no-op when there is none."""
    booker.copy_credential()
    return _credential_response(booker)


@router.post("/clear", response_model=CredentialResponse)
async def clear_credential(
    request: ConfirmRequest,
    booker: Annotated[BookerSession, Depends(get_booker)],
) -> CredentialResponse:
    """Clear the stored API key. Requires `confirm: true`."""
    booker.clear_credential(request.confirm)
    return _credential_response(booker)
