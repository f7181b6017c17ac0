from fastapi import Header, HTTPException
from typing import Optional

from .config import get_settings


async def get_api_key(x_api_key: Optional[str] = Header(None, alias="x-api-key")):
    """
    Validate API key from x-api-key header.
    When THREATLENS_API_KEY is unset the API is open (local development).
    """
    expected = get_settings().api_key
    if expected and x_api_key != expected:
        raise HTTPException(status_code=403, detail="Invalid API Key")
    return x_api_key
