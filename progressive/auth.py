"""Caller identity as asserted by the upstream authentication layer."""
from typing import Annotated

from fastapi import Header, HTTPException


async def get_current_owner(
    x_user_id: Annotated[int | None, Header(ge=1)] = None,
) -> int:
    """FastAPI dependency returning the authenticated owner id."""
    if x_user_id is None:
        raise HTTPException(status_code=401, detail="Authentication required")
    return x_user_id
