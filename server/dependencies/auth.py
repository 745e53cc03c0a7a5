from fastapi import Header, Query, Request

from shared.helper.errors import AppError, AuthError
from shared.models.apikey import APIKeyRecord


async def verify_api_key(
    request: Request,
    x_ai_api_key: str | None = Header(default=None, alias="X-AI-API-Key"),
    api_key_param: str | None = Query(default=None, alias="apiKey"),
) -> APIKeyRecord:
    """Resolve the caller's API key and attach the record to the request.

    The key is read from the X-AI-API-Key header, falling back to the apiKey
    query parameter. The resolved record is stored on
    ``request.state.api_key_record`` for downstream handlers.

    Args:
        request (Request): The FastAPI request object (provides app.state.apikey_store).
        x_ai_api_key (str | None): Value of the X-AI-API-Key header.
        api_key_param (str | None): Value of the apiKey query parameter.

    Returns:
        APIKeyRecord: The active key record.

    Raises:
        AuthError: 401 if the key is missing, unknown or inactive.
        AppError: 500 if the key store fails unexpectedly.
    """
    api_key = x_ai_api_key or api_key_param
    if not api_key:
        raise AuthError("X-AI-API-Key header required")

    try:
        record = await request.app.state.apikey_store.do_resolve_key(api_key)
    except Exception:
        request.app.state.logging.exception("API key validation error")
        raise AppError("Internal error", status_code=500)

    if record is None or not record.active:
        raise AuthError("Invalid or inactive API key")

    request.state.api_key_record = record
    return record
