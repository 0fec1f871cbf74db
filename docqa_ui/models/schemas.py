"""Pydantic models for the Document Q&A UI."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class DocumentStatus(str, Enum):
    """Lifecycle of a document on the backend."""

    UPLOADING = "uploading"
    PROCESSING = "processing"
    READY = "ready"
    ERROR = "error"


class Document(BaseModel):
    """Document metadata as returned by the backend."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., description="Unique identifier for the document")
    title: str = Field(..., description="Document title")
    file_type: str = Field(..., description="File extension, e.g. txt")
    size: int = Field(..., description="File size in bytes")
    pages: int = Field(..., description="Page count")
    status: DocumentStatus = Field(..., description="Processing status")
    created_at: str = Field(..., description="ISO-8601 creation time")
    updated_at: str = Field(..., description="ISO-8601 last update time")


class SourceChunk(BaseModel):
    """A cited excerpt of the document."""

    chunk_index: int
    content: str
    page_number: int


class TokenUsage(BaseModel):
    """Token counters reported by the completion endpoint."""

    prompt_tokens: int = Field(..., ge=0)
    completion_tokens: int = Field(..., ge=0)
    total_tokens: int = Field(..., ge=0)


class AIResponse(BaseModel):
    """Answer produced by the hosted model."""

    model_config = ConfigDict(protected_namespaces=())

    answer: str
    model: str
    usage: Optional[TokenUsage] = None


class QAResponse(BaseModel):
    """Answer to a question about a document."""

    model_config = ConfigDict(extra="ignore")

    answer: str = Field(..., description="Answer to the question")
    sources: List[SourceChunk] = Field(default_factory=list)
    document_title: str = ""
    ai_response: Optional[AIResponse] = None
    processing_time: Optional[int] = Field(
        None,
        description="Client-measured elapsed time in milliseconds"
    )


class QuestionRequest(BaseModel):
    """Request body for document questions."""

    document_id: str = Field(..., description="ID of the document to query")
    question: str = Field(..., description="Question about the document")
    chunk_count: int = Field(
        3,
        description="Number of chunks the backend should retrieve"
    )


class UploadStatus(str, Enum):
    """Lifecycle of one client-side upload."""

    PENDING = "pending"
    UPLOADING = "uploading"
    SUCCESS = "success"
    ERROR = "error"


class SelectedFile(BaseModel):
    """A file picked by the user, held in memory."""

    model_config = ConfigDict(frozen=True)

    name: str
    content: bytes
    content_type: str = "text/plain"

    @property
    def size(self) -> int:
        return len(self.content)


class UploadTask(BaseModel):
    """Client-local upload state of a single file."""

    model_config = ConfigDict(frozen=True)

    file: SelectedFile
    title: str
    status: UploadStatus = UploadStatus.PENDING
    progress: int = Field(0, ge=0, le=100)
    error: Optional[str] = None
    document: Optional[Document] = None
