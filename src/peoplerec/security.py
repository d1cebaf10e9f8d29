import os
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import APIKeyHeader

API_KEY_HEADER_NAME = "X-API-Key"

# Set by the session gateway after it authenticates the end user.
REQUESTER_HEADER_NAME = "X-Requester-Id"

api_key_header = APIKeyHeader(name=API_KEY_HEADER_NAME, auto_error=False)
requester_header = APIKeyHeader(name=REQUESTER_HEADER_NAME, auto_error=False)


def get_api_key() -> str | None:
    return os.environ.get("API_KEY")


def api_key_matches(api_key: str | None) -> bool:
    expected_key = get_api_key()
    return bool(expected_key) and api_key == expected_key


async def verify_api_key(
    api_key: Annotated[str | None, Depends(api_key_header)],
) -> str | None:
    if not api_key_matches(api_key):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing API key",
        )
    return api_key


async def verify_api_key_structured(
    api_key: Annotated[str | None, Depends(api_key_header)],
) -> str | None:
    """Like :func:`verify_api_key`, but fails with a ``{kind, message}`` detail."""
    if not api_key_matches(api_key):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"kind": "Unauthenticated", "message": "Invalid or missing API key"},
        )
    return api_key


async def get_requester_uid(
    requester_uid: Annotated[str | None, Depends(requester_header)],
) -> str:
    """Return the authenticated end user's identity, or fail with 401."""
    if not requester_uid or not requester_uid.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"kind": "Unauthenticated", "message": "User must be authenticated"},
        )
    return requester_uid.strip()


RequireApiKey = Annotated[str, Depends(verify_api_key)]
RequesterUid = Annotated[str, Depends(get_requester_uid)]
