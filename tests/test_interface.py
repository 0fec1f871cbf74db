from pathlib import Path
from typing import Any, List, Optional

import httpx
import pytest

from conftest import FakeTogether, make_completion
from docqa_ui.core.config import ClientConfig, Settings
from docqa_ui.core.logger import ErrorLogger
from docqa_ui.models.schemas import UploadStatus
from docqa_ui.services.api_client import ApiClient
from docqa_ui.services.llm import TogetherAIClient
from docqa_ui.ui.interface import (
    NO_READY_DOCUMENTS,
    DocumentQAInterface,
    create_interface,
)


async def no_delay(seconds: float) -> None:
    return None


def make_interface(
    tmp_path: Path,
    config: Optional[ClientConfig] = None,
    ai_client: Optional[TogetherAIClient] = None,
    http_client: Optional[httpx.AsyncClient] = None
) -> DocumentQAInterface:
    config = config or ClientConfig(use_mock_data=True)
    api_client = ApiClient(
        config, http_client=http_client, ai_client=ai_client, sleep=no_delay
    )
    return DocumentQAInterface(
        api_client=api_client,
        ai_client=ai_client,
        error_logger=ErrorLogger(tmp_path, logger_name="test.interface"),
        app_settings=Settings(),
    )


@pytest.fixture  # type: ignore[misc]
def interface(tmp_path: Path) -> DocumentQAInterface:
    return make_interface(tmp_path)


async def test_load_documents_offers_ready_documents(
    interface: DocumentQAInterface
) -> None:
    rows, picker, documents = await interface.load_documents()

    assert len(rows) == 3
    assert len(documents) == 3
    assert picker["choices"] == [
        ("Sample Research Paper.txt", "1"),
        ("Meeting Notes.txt", "3"),
    ]
    assert picker["value"] == "1"


async def test_ask_requires_document_and_question(
    interface: DocumentQAInterface
) -> None:
    assert await interface.ask(None, "Q?", 3) == NO_READY_DOCUMENTS
    assert await interface.ask("1", "   ", 3) == "Please ask a question."


async def test_ask_in_mock_mode(interface: DocumentQAInterface) -> None:
    answer = await interface.ask("1", "What is the topic?", 3)
    assert answer.startswith("Based on the document content")
    assert "Page 1" in answer
    assert "Answered in" in answer


async def test_ask_failure_shows_inline_message(tmp_path: Path) -> None:
    http_client = httpx.AsyncClient(
        transport=httpx.MockTransport(lambda request: httpx.Response(500))
    )
    interface = make_interface(
        tmp_path,
        config=ClientConfig(base_url="http://backend.test", use_mock_data=False),
        http_client=http_client,
    )

    answer = await interface.ask("1", "Q?", 3)

    assert answer == "⚠️ Failed to get answer. Please try again."


def test_select_files_queues_and_rejects(
    interface: DocumentQAInterface,
    tmp_path: Path
) -> None:
    good = tmp_path / "report.v2.txt"
    good.write_text("numbers", encoding="utf-8")
    bad = tmp_path / "image.png"
    bad.write_bytes(b"\x89PNG")

    rows, message, orchestrator = interface.select_files(
        [str(good), str(bad)], None
    )

    assert len(rows) == 1
    assert rows[0][2] == "report.v2"
    assert "image.png" in message
    assert orchestrator.tasks[0].file.content == b"numbers"


async def test_upload_all_applies_edited_titles(
    interface: DocumentQAInterface,
    tmp_path: Path
) -> None:
    path = tmp_path / "draft.txt"
    path.write_text("hello", encoding="utf-8")
    rows, _, orchestrator = interface.select_files([str(path)], None)
    rows[0][2] = "Final title"

    updates: List[Any] = []
    async for update in interface.upload_all(rows, orchestrator):
        updates.append(update)

    final_rows, status, orchestrator = updates[-1]
    assert orchestrator.tasks[0].status == UploadStatus.SUCCESS
    assert orchestrator.tasks[0].document.title == "Final title"
    assert final_rows[0][4] == "100%"
    assert status.startswith("Upload Complete!")


async def test_upload_all_without_files(interface: DocumentQAInterface) -> None:
    updates = [u async for u in interface.upload_all(None, None)]
    assert updates[0][1] == "No files to upload."


async def test_summary_without_credential(interface: DocumentQAInterface) -> None:
    message = await interface.summarize(None, "text", "Doc")
    assert "not configured" in message


async def test_summary_requires_content(tmp_path: Path) -> None:
    ai_client = TogetherAIClient(client=FakeTogether())
    interface = make_interface(tmp_path, ai_client=ai_client)

    message = await interface.summarize(None, "  ", "Doc")

    assert message == (
        "⚠️ Document content not available for summary generation."
    )


async def test_summary_from_file(tmp_path: Path) -> None:
    fake = FakeTogether(make_completion(
        "A short summary.",
        usage={"prompt_tokens": 50, "completion_tokens": 10, "total_tokens": 60},
    ))
    interface = make_interface(
        tmp_path, ai_client=TogetherAIClient(model="org/small", client=fake)
    )
    path = tmp_path / "notes.txt"
    path.write_text("Meeting notes content", encoding="utf-8")

    message = await interface.summarize(str(path), "", "")

    assert message.startswith("A short summary.")
    assert "60 tokens used" in message
    prompt = fake.completions.calls[0]["prompt"]
    assert "Document Title: notes.txt" in prompt
    assert "Meeting notes content" in prompt


async def test_summary_failure_message(tmp_path: Path) -> None:
    ai_client = TogetherAIClient(client=FakeTogether(error=RuntimeError("down")))
    interface = make_interface(tmp_path, ai_client=ai_client)

    message = await interface.summarize(None, "content", "Doc")

    assert message == "⚠️ Failed to generate document summary. Please try again."


async def test_connection_status(tmp_path: Path) -> None:
    assert await make_interface(tmp_path).test_connection() == "❌ Not Configured"

    ok = make_interface(
        tmp_path,
        ai_client=TogetherAIClient(client=FakeTogether(make_completion("OK"))),
    )
    assert await ok.test_connection() == "✅ Connected"

    failing = make_interface(
        tmp_path,
        ai_client=TogetherAIClient(client=FakeTogether(error=RuntimeError())),
    )
    assert await failing.test_connection() == "❌ Failed"


def test_handle_error_records_exception(
    interface: DocumentQAInterface
) -> None:
    message = interface.handle_error(ValueError("broken"), {"function": "x"})

    assert message.endswith("broken")
    assert interface.error_logger is not None
    summary = interface.error_logger.get_error_summary()
    assert summary["error_types"]["ValueError"] == 1


def test_settings_markdown_lists_models(interface: DocumentQAInterface) -> None:
    text = interface.settings_markdown()
    assert "Not Configured" in text
    assert "Mixtral 8x7B" in text
    assert "TOGETHER_API_KEY" in text


def test_create_interface_without_credential(tmp_path: Path) -> None:
    app_settings = Settings(
        TOGETHER_API_KEY="",
        USE_MOCK_DATA="true",
        LOG_DIR=str(tmp_path),
    )
    interface = create_interface(app_settings)

    assert interface.ai_client is None
    assert interface.api_client.is_mock


def test_build_layout(interface: DocumentQAInterface) -> None:
    demo = interface.build()
    assert demo.title == "Document Q&A System"
