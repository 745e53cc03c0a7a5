"""Public, API-key-gated routes.

Every route resolves the caller's key first (X-AI-API-Key header or apiKey
query parameter); the key decides which container the call is routed to and
whose documents are visible.
"""

import pydantic
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from server.dependencies.auth import verify_api_key
from shared.helper.errors import AppError, NotFoundError, ValidationError
from shared.models.document import DocumentUploadRequest
from shared.models.invoke import InvokeRequest
from shared.stores.docstore.DocStore import DocStore

router = APIRouter(prefix="/public", tags=["public"], dependencies=[Depends(verify_api_key)])


def _get_doc_store(request: Request) -> DocStore:
    record = request.state.api_key_record
    return request.app.state.doc_stores.get_store(record.container_id)


@router.post("/invoke")
async def invoke(request: Request) -> JSONResponse:
    """Forward a chat message to the container bound to the caller's API key.

    Body: ``{"message": str, "sessionId"?: str}``. A missing or non-JSON body
    is treated as empty and rejected for lacking a message.

    Returns:
        JSONResponse: {success: true, response, containerId}.
    """
    try:
        payload = await request.json()
    except ValueError:
        payload = {}
    if not isinstance(payload, dict):
        payload = {}

    try:
        body = InvokeRequest.model_validate(payload)
    except pydantic.ValidationError as e:
        field = ".".join(str(part) for part in e.errors()[0]["loc"]) or "body"
        raise ValidationError(f"{field} must be a string")

    try:
        result = await request.app.state.invoke_service.do_invoke(request.state.api_key_record, body)
    except AppError:
        raise
    except Exception:
        request.app.state.logging.exception("Public invoke error")
        raise AppError("Internal server error", status_code=500)

    return JSONResponse(content=result.model_dump(by_alias=True))


@router.get("/documents")
def list_documents(request: Request) -> dict:
    documents = _get_doc_store(request).list_documents()
    return {"success": True, "documents": [d.model_dump(by_alias=True) for d in documents]}


@router.post("/documents")
def add_document(request: Request, body: DocumentUploadRequest) -> dict:
    """Store a text document for the caller's container.

    Returns:
        dict: {success, id, chunkCount, doc}.
    """
    if not body.text.strip():
        raise ValidationError("text is required")
    result = _get_doc_store(request).add_document(text=body.text, title=body.title, tags=body.tags)
    return {
        "success": True,
        "id": result.id,
        "chunkCount": len(result.chunks),
        "doc": result.doc.model_dump(by_alias=True),
    }


@router.get("/documents/{doc_id}")
def get_document(request: Request, doc_id: str) -> dict:
    doc = _get_doc_store(request).get_document_by_id(doc_id)
    if doc is None:
        raise NotFoundError("Document not found")
    return {"success": True, "doc": doc.model_dump(by_alias=True)}


@router.delete("/documents/{doc_id}")
def delete_document(request: Request, doc_id: str) -> dict:
    result = _get_doc_store(request).delete_document(doc_id)
    if not result.success:
        raise NotFoundError(result.message or "Document not found")
    return {"success": True, "doc": result.doc.model_dump(by_alias=True)}


@router.delete("/documents")
def clear_documents(request: Request) -> dict:
    return _get_doc_store(request).clear_all_documents().model_dump(by_alias=True)
