"""Request client for the document Q&A backend, with a mock-data mode."""

import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, List, Optional

import httpx

from docqa_ui.core.config import ClientConfig
from docqa_ui.core.exceptions import QuestionError, UploadError
from docqa_ui.models.schemas import (
    Document,
    DocumentStatus,
    QAResponse,
    QuestionRequest,
    SelectedFile,
)
from docqa_ui.services.llm import TogetherAIClient
from docqa_ui.services.mock_data import (
    MOCK_AI_SOURCES,
    MOCK_CONTEXT,
    MOCK_QA_RESPONSE,
    SAMPLE_DOCUMENT_TITLE,
    mock_documents,
)

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[Any]]

LIST_DELAY = 0.5
UPLOAD_DELAY = 1.0
ANSWER_DELAY = 2.0


def _utc_now_iso() -> str:
    now = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
    return now.replace("+00:00", "Z")


def file_extension(filename: str, default: str = "txt") -> str:
    """Return the text after the last dot of a file name."""
    if "." not in filename:
        return default
    return filename.rsplit(".", 1)[-1] or default


class MockBackend:
    """Serves built-in data after artificial delays."""

    def __init__(
        self,
        ai_client: Optional[TogetherAIClient] = None,
        sleep: Sleep = asyncio.sleep
    ) -> None:
        self.ai_client = ai_client
        self.sleep = sleep

    async def list_documents(self) -> List[Document]:
        # Simulate network delay
        await self.sleep(LIST_DELAY)
        return mock_documents()

    async def upload_document(
        self,
        file: SelectedFile,
        title: str
    ) -> Document:
        await self.sleep(UPLOAD_DELAY)
        now = _utc_now_iso()
        return Document(
            id=str(int(time.time() * 1000)),
            title=title,
            file_type=file_extension(file.name),
            size=file.size,
            pages=1,
            status=DocumentStatus.PROCESSING,
            created_at=now,
            updated_at=now,
        )

    async def ask_question(
        self,
        document_id: str,
        question: str,
        chunk_count: int
    ) -> QAResponse:
        if self.ai_client is not None:
            try:
                ai_response = await self.ai_client.generate_answer(
                    question, MOCK_CONTEXT, SAMPLE_DOCUMENT_TITLE
                )
                return QAResponse(
                    answer=ai_response.answer,
                    sources=[s.model_copy() for s in MOCK_AI_SOURCES],
                    document_title=SAMPLE_DOCUMENT_TITLE,
                    ai_response=ai_response,
                )
            except Exception as e:
                logger.warning(
                    "Together AI failed, using fallback mock response: %s", e
                )

        await self.sleep(ANSWER_DELAY)
        return MOCK_QA_RESPONSE.model_copy(deep=True)


class HttpBackend:
    """Talks to the real backend over HTTP."""

    def __init__(self, base_url: str, http_client: httpx.AsyncClient) -> None:
        self.base_url = base_url.rstrip("/")
        self.http_client = http_client

    async def _make_request(
        self,
        method: str,
        endpoint: str,
        **kwargs: Any
    ) -> Any:
        url = f"{self.base_url}{endpoint}"
        try:
            response = await self.http_client.request(method, url, **kwargs)
            response.raise_for_status()
            return response.json()
        except Exception as e:
            logger.error(f"API request failed for {endpoint}: {str(e)}")
            raise

    async def list_documents(self) -> List[Document]:
        try:
            data = await self._make_request("GET", "/documents/")
            return [
                Document.model_validate(item)
                for item in data.get("results") or []
            ]
        except Exception as e:
            # Listing always falls back to mock data
            logger.warning(f"Failed to fetch documents: {str(e)}")
            return mock_documents()

    async def upload_document(
        self,
        file: SelectedFile,
        title: str
    ) -> Document:
        try:
            data = await self._make_request(
                "POST",
                "/documents/",
                files={"file": (file.name, file.content, file.content_type)},
                data={"title": title},
            )
            return Document.model_validate(data)
        except Exception as e:
            logger.error(f"Failed to upload document: {str(e)}")
            raise UploadError() from e

    async def ask_question(
        self,
        document_id: str,
        question: str,
        chunk_count: int
    ) -> QAResponse:
        payload = QuestionRequest(
            document_id=document_id,
            question=question,
            chunk_count=chunk_count,
        )
        try:
            data = await self._make_request(
                "POST", "/questions/", json=payload.model_dump()
            )
            return QAResponse.model_validate(data)
        except Exception as e:
            logger.error(f"Failed to ask question: {str(e)}")
            raise QuestionError() from e


class ApiClient:
    """Lists, uploads and queries documents against mock or live data."""

    def __init__(
        self,
        config: ClientConfig,
        http_client: Optional[httpx.AsyncClient] = None,
        ai_client: Optional[TogetherAIClient] = None,
        sleep: Sleep = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic
    ) -> None:
        """Initialize the client.

        Args:
            config: Base URL, mock toggle and model settings
            http_client: HTTP client for live mode; one is created if omitted
            ai_client: Adapter used by mock mode to answer for real
            sleep: Awaitable used for the mock latency
            clock: Monotonic clock in seconds for processing_time
        """
        self.config = config
        self.clock = clock
        self._owns_http_client = False

        if config.use_mock_data:
            self.backend: Any = MockBackend(ai_client=ai_client, sleep=sleep)
            self.http_client = http_client
        else:
            if http_client is None:
                http_client = httpx.AsyncClient()
                self._owns_http_client = True
            self.http_client = http_client
            self.backend = HttpBackend(config.base_url, http_client)

        logger.debug(
            "ApiClient using %s backend at %s",
            "mock" if config.use_mock_data else "live",
            config.base_url
        )

    @property
    def is_mock(self) -> bool:
        return self.config.use_mock_data

    async def list_documents(self) -> List[Document]:
        """List documents, falling back to built-in data on failure."""
        return await self.backend.list_documents()

    async def upload_document(
        self,
        file: SelectedFile,
        title: str
    ) -> Document:
        """Upload a file under the given title.

        Raises:
            UploadError: If the backend upload fails
        """
        return await self.backend.upload_document(file, title)

    async def ask_question(
        self,
        document_id: str,
        question: str,
        chunk_count: int = 3
    ) -> QAResponse:
        """Ask a question about a document.

        The returned response always carries the elapsed time of this call
        in milliseconds.

        Raises:
            QuestionError: If the backend fails to answer
        """
        start_time = self.clock()
        response = await self.backend.ask_question(
            document_id, question, chunk_count
        )
        elapsed_ms = max(0, int(round((self.clock() - start_time) * 1000)))
        return response.model_copy(update={"processing_time": elapsed_ms})

    async def aclose(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_http_client and self.http_client is not None:
            await self.http_client.aclose()

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
