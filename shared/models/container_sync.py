from pydantic import BaseModel


class ContainerSyncResult(BaseModel):
    """What one container directory received during a logic-file sync."""

    container_id: str
    updated: list[str] = []
    backups: list[str] = []
    errors: list[str] = []
