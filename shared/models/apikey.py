from pydantic import BaseModel


class APIKeyRecord(BaseModel):
    """A per-container API key as kept by the key store.

    The gateway only reads records and touches last_used_at.
    """

    id: str
    container_id: str
    api_key: str
    user_id: str | None = None
    label: str | None = None
    active: bool = True
    created_at: str | None = None
    last_used_at: str | None = None
