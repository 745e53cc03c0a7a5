"""Pydantic models for the document store.

Hierarchy:
  Document              — a stored upload, persisted in doc_store.json with camelCase keys.
  AddDocumentResult     — returned by DocStore.add_document (document plus its derived chunks).
  DeleteDocumentResult  — returned by DocStore.delete_document.
  ClearDocumentsResult  — returned by DocStore.clear_all_documents.
"""

from pydantic import BaseModel, ConfigDict, Field


class Document(BaseModel):
    """A stored text document. Immutable once written."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    text: str
    tags: list[str] = []
    created_at: str = Field(alias="createdAt")
    chunk_count: int = Field(alias="chunkCount")


class AddDocumentResult(BaseModel):
    id: str
    chunks: list[str]
    doc: Document


class DeleteDocumentResult(BaseModel):
    success: bool
    doc: Document | None = None
    message: str | None = None


class ClearDocumentsResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    deleted_count: int = Field(alias="deletedCount")


class DocumentUploadRequest(BaseModel):
    """Body of POST /public/documents."""

    title: str | None = None
    text: str
    tags: list[str] = []
