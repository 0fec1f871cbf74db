"""Built-in data served in mock mode and used as the listing fallback."""

from typing import List

from docqa_ui.models.schemas import Document, QAResponse, SourceChunk

SAMPLE_DOCUMENT_TITLE = "Sample Research Paper.txt"

MOCK_DOCUMENTS: List[Document] = [
    Document(
        id="1",
        title=SAMPLE_DOCUMENT_TITLE,
        file_type="txt",
        size=15420,
        pages=8,
        status="ready",
        created_at="2024-01-15T10:30:00Z",
        updated_at="2024-01-15T10:35:00Z",
    ),
    Document(
        id="2",
        title="Project Documentation.txt",
        file_type="txt",
        size=8932,
        pages=5,
        status="processing",
        created_at="2024-01-14T14:20:00Z",
        updated_at="2024-01-14T14:25:00Z",
    ),
    Document(
        id="3",
        title="Meeting Notes.txt",
        file_type="txt",
        size=3456,
        pages=2,
        status="ready",
        created_at="2024-01-13T09:15:00Z",
        updated_at="2024-01-13T09:18:00Z",
    ),
]

MOCK_QA_RESPONSE = QAResponse(
    answer=(
        "Based on the document content, the main topic discusses artificial "
        "intelligence and machine learning applications in modern software "
        "development. The document emphasizes the importance of "
        "understanding data structures and algorithms when implementing AI "
        "solutions."
    ),
    sources=[
        SourceChunk(
            chunk_index=0,
            content=(
                "Artificial intelligence has become a cornerstone of modern "
                "software development, enabling applications to process and "
                "understand data in ways that were previously impossible..."
            ),
            page_number=1,
        ),
        SourceChunk(
            chunk_index=2,
            content=(
                "Machine learning algorithms require careful consideration "
                "of data structures and computational complexity to ensure "
                "optimal performance..."
            ),
            page_number=3,
        ),
    ],
    document_title=SAMPLE_DOCUMENT_TITLE,
)

# Context handed to the hosted model when mock mode answers for real
MOCK_CONTEXT = (
    "Artificial intelligence has become a cornerstone of modern software "
    "development, enabling applications to process and understand data in "
    "ways that were previously impossible. Machine learning algorithms "
    "require careful consideration of data structures and computational "
    "complexity to ensure optimal performance.\n\n"
    "The document discusses various AI applications including natural "
    "language processing, computer vision, and predictive analytics. It "
    "emphasizes the importance of proper data preprocessing and model "
    "validation techniques."
)

MOCK_AI_SOURCES: List[SourceChunk] = [
    SourceChunk(
        chunk_index=0,
        content=(
            "Artificial intelligence has become a cornerstone of modern "
            "software development..."
        ),
        page_number=1,
    ),
    SourceChunk(
        chunk_index=2,
        content=(
            "Machine learning algorithms require careful consideration of "
            "data structures..."
        ),
        page_number=3,
    ),
]


def mock_documents() -> List[Document]:
    """Return a fresh copy of the built-in document set."""
    return [doc.model_copy() for doc in MOCK_DOCUMENTS]
