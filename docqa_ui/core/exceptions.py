"""Custom exceptions for the Document Q&A UI."""

from typing import Any, Iterable


class DocumentQAException(Exception):
    """Base exception for the Document Q&A UI."""
    def __init__(self, detail: Any = None) -> None:
        """Initialize the exception.

        Args:
            detail: User-facing error message
        """
        self.detail = detail
        super().__init__(detail)


class UploadError(DocumentQAException):
    """Raised when the backend rejects or fails a document upload."""
    def __init__(
        self,
        message: str = "Failed to upload document. Please try again."
    ) -> None:
        super().__init__(detail=message)


class QuestionError(DocumentQAException):
    """Raised when the backend fails to answer a question."""
    def __init__(
        self,
        message: str = "Failed to get answer. Please try again."
    ) -> None:
        super().__init__(detail=message)


class AIGenerationError(DocumentQAException):
    """Raised when the hosted model fails to generate an answer."""
    def __init__(
        self,
        message: str = "Failed to generate AI response. Please try again."
    ) -> None:
        super().__init__(detail=message)


class SummaryError(DocumentQAException):
    """Raised when the hosted model fails to generate a summary."""
    def __init__(
        self,
        message: str = "Failed to generate document summary. Please try again."
    ) -> None:
        super().__init__(detail=message)


class InvalidFileTypeError(DocumentQAException):
    """Raised when a file with a non-allowed type is selected."""
    def __init__(self, allowed_types: Iterable[str]) -> None:
        """Initialize the exception.

        Args:
            allowed_types: Allowed file extensions
        """
        allowed = ", ".join(sorted(allowed_types))
        super().__init__(
            detail=f"File type not allowed. Allowed types: {allowed}"
        )


class FileSizeLimitError(DocumentQAException):
    """Raised when file size exceeds limit."""
    def __init__(self, max_size: int) -> None:
        """Initialize the exception.

        Args:
            max_size: Maximum allowed file size in bytes
        """
        super().__init__(
            detail=f"File too large. Max size: {max_size} bytes"
        )


class LLMConfigError(DocumentQAException):
    """Raised when the hosted model is used without a credential."""
    def __init__(self, message: str = "LLM configuration error") -> None:
        super().__init__(detail=message)
