"""Pydantic models for the public invocation path."""

from pydantic import BaseModel, ConfigDict, Field


class InvokeRequest(BaseModel):
    """Body of POST /public/invoke."""

    model_config = ConfigDict(populate_by_name=True)

    message: str | None = None
    session_id: str | None = Field(default=None, alias="sessionId")


class ContainerReply(BaseModel):
    """What a container returns for a chat message: {success, message | error}."""

    success: bool
    message: str | None = None
    error: str | None = None


class InvokeResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    response: str | None
    container_id: str = Field(alias="containerId")
