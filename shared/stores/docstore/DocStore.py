"""File-backed document store for retrieval context.

Documents live in ``<base_dir>/doc_store.json`` as ``{"documents": [...]}``.
The store keeps the full text of each upload; chunks are derived on demand
and only their count is persisted.
"""

import os
import re
import time
import uuid
from datetime import datetime, timezone

from shared.helper.HelperConfig import HelperConfig
from shared.helper.errors import ValidationError
from shared.models.document import AddDocumentResult, ClearDocumentsResult, DeleteDocumentResult, Document
from shared.stores.JsonFileStore import JsonFileStore

STORE_FILENAME = "doc_store.json"
MAX_CHUNK_CHARS = 1200

_WHITESPACE = re.compile(r"\s+")
_SENTENCE_END = re.compile(r"(?<=[.!?])\s+")


def normalize_text(text: str) -> str:
    """Collapse every whitespace run to a single space and trim."""
    return _WHITESPACE.sub(" ", text).strip()


def chunk_text(text: str, max_chars: int = MAX_CHUNK_CHARS) -> list[str]:
    """Split a document's text into retrieval-sized chunks.

    The text is whitespace-normalised first. If it fits in ``max_chars`` it is
    returned as a single chunk. Otherwise it is split after sentence-ending
    punctuation and sentences are packed greedily; the accumulator is flushed
    whenever the next sentence would overflow it. A single sentence longer
    than ``max_chars`` becomes its own oversized chunk.

    Args:
        text (str): The raw document text.
        max_chars (int): Upper bound on chunk length.

    Returns:
        list[str]: Ordered chunks. Joining them with single spaces gives back the normalised text.
    """
    if not text or not isinstance(text, str):
        return []
    cleaned = normalize_text(text)
    if not cleaned:
        return []
    if len(cleaned) <= max_chars:
        return [cleaned]

    chunks: list[str] = []
    current = ""
    for sentence in _SENTENCE_END.split(cleaned):
        candidate = f"{current} {sentence}".strip()
        if len(candidate) > max_chars:
            if current:
                chunks.append(current)
            current = sentence
        else:
            current = candidate
    if current:
        chunks.append(current)
    return chunks


def _make_document_id() -> str:
    """Millisecond timestamp plus a random suffix. Unique in practice, not guaranteed."""
    return f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:10]}"


class DocStore:
    """Stores uploaded documents for one container."""

    def __init__(self, helper_config: HelperConfig, base_dir: str) -> None:
        self.logging = helper_config.get_logger()
        self.base_dir = base_dir
        self.store_path = os.path.join(base_dir, STORE_FILENAME)
        self._file = JsonFileStore(
            logger=self.logging,
            store_path=self.store_path,
            collection_key="documents",
        )

    ##########################################
    ################ WRITE ###################
    ##########################################

    def add_document(self, text: str, title: str | None = None, tags: list[str] | None = None) -> AddDocumentResult:
        """Store a new document and return it together with its chunks.

        Args:
            text (str): Full document text; stored as given.
            title (str | None): Display title. Defaults to "Document <n>".
            tags (list[str] | None): Free-form labels.

        Returns:
            AddDocumentResult: The new id, the derived chunks and the stored document.

        Raises:
            ValidationError: If text is not a string.
            StorageError: If the store file cannot be written.
        """
        if not isinstance(text, str):
            raise ValidationError("text must be a string")

        chunks = chunk_text(text)
        with self._file.transaction() as documents:
            doc = Document(
                id=_make_document_id(),
                title=title or f"Document {len(documents) + 1}",
                text=text,
                tags=list(tags or []),
                created_at=datetime.now(timezone.utc).isoformat(),
                chunk_count=len(chunks),
            )
            documents.append(doc.model_dump(by_alias=True))

        self.logging.info("Stored document %s (%r) with %d chunk(s).", doc.id, doc.title, len(chunks))
        return AddDocumentResult(id=doc.id, chunks=chunks, doc=doc)

    def delete_document(self, doc_id: str) -> DeleteDocumentResult:
        """Remove one document by id. A missing id is reported, not raised."""
        with self._file.transaction() as documents:
            index = next((i for i, d in enumerate(documents) if d.get("id") == doc_id), None)
            if index is not None:
                removed = Document.model_validate(documents.pop(index))

        if index is None:
            return DeleteDocumentResult(success=False, message="Document not found")
        self.logging.info("Deleted document %s.", doc_id)
        return DeleteDocumentResult(success=True, doc=removed)

    def clear_all_documents(self) -> ClearDocumentsResult:
        """Remove every document and report how many there were."""
        with self._file.transaction() as documents:
            count = len(documents)
            documents.clear()
        self.logging.info("Cleared %d document(s) from %s.", count, self.store_path)
        return ClearDocumentsResult(success=True, deleted_count=count)

    ##########################################
    ################# READ ###################
    ##########################################

    def list_documents(self) -> list[Document]:
        return [Document.model_validate(d) for d in self._file.read()]

    def get_all_documents(self) -> list[Document]:
        return self.list_documents()

    def get_document_by_id(self, doc_id: str) -> Document | None:
        for d in self._file.read():
            if d.get("id") == doc_id:
                return Document.model_validate(d)
        return None

    def get_document_text(self, doc_id: str) -> str | None:
        doc = self.get_document_by_id(doc_id)
        return doc.text if doc else None
