from datetime import datetime, timezone

import pytest

from docqa_ui.models.schemas import (
    AIResponse,
    QAResponse,
    SelectedFile,
    SourceChunk,
    TokenUsage,
    UploadStatus,
    UploadTask,
)
from docqa_ui.services.mock_data import mock_documents
from docqa_ui.ui.formatting import (
    document_rows,
    format_answer,
    format_file_size,
    format_relative_time,
    format_summary,
    model_description,
    model_short_name,
    upload_rows,
)

NOW = datetime(2024, 1, 15, 10, 40, tzinfo=timezone.utc)


@pytest.mark.parametrize("size,expected", [  # type: ignore[misc]
    (0, "0 Bytes"),
    (512, "512 Bytes"),
    (1024, "1 KB"),
    (15420, "15.06 KB"),
    (8932, "8.72 KB"),
    (10 * 1024 * 1024, "10 MB"),
    (5 * 1024 ** 4, "5120 GB"),
])
def test_format_file_size(size: int, expected: str) -> None:
    assert format_file_size(size) == expected


@pytest.mark.parametrize("timestamp,expected", [  # type: ignore[misc]
    ("2024-01-15T10:39:50Z", "less than a minute ago"),
    ("2024-01-15T10:39:00Z", "1 minute ago"),
    ("2024-01-15T10:35:00Z", "5 minutes ago"),
    ("2024-01-15T09:40:00Z", "about 1 hour ago"),
    ("2024-01-15T05:40:00Z", "about 5 hours ago"),
    ("2024-01-14T10:40:00Z", "1 day ago"),
    ("2024-01-12T10:40:00Z", "3 days ago"),
    ("2022-01-15T10:40:00Z", "about 2 years ago"),
])
def test_format_relative_time(timestamp: str, expected: str) -> None:
    assert format_relative_time(timestamp, NOW) == expected


def test_format_relative_time_keeps_unparseable_value() -> None:
    assert format_relative_time("yesterday", NOW) == "yesterday"


def test_model_names() -> None:
    assert model_short_name("meta-llama/Llama-2-70b-chat-hf") == "Llama-2-70b-chat-hf"
    assert model_short_name("plain-model") == "plain-model"
    assert model_description("mistralai/Mixtral-8x7B-Instruct-v0.1") == "High performance"
    assert model_description("someone/unknown") == "Custom model"


def test_document_rows() -> None:
    rows = document_rows(mock_documents(), NOW)
    assert rows[0] == [
        "1",
        "Sample Research Paper.txt",
        "txt",
        "15.06 KB",
        "8",
        "✅ ready",
        "5 minutes ago",
    ]
    assert rows[1][5] == "⏳ processing"


def test_upload_rows() -> None:
    file = SelectedFile(name="a.txt", content=b"abc")
    rows = upload_rows([
        UploadTask(file=file, title="a"),
        UploadTask(file=file, title="a", status=UploadStatus.UPLOADING, progress=40),
        UploadTask(file=file, title="a", status=UploadStatus.SUCCESS, progress=100),
        UploadTask(file=file, title="a", status=UploadStatus.ERROR, error="Nope"),
    ])
    assert rows[0] == ["a.txt", "3 Bytes", "a", "📄 pending", "0%", ""]
    assert rows[1][4] == "40%"
    assert rows[2][5].startswith("Document uploaded successfully!")
    assert rows[3][5] == "Nope"


def test_format_answer_with_sources_and_usage() -> None:
    response = QAResponse(
        answer="It is about AI.",
        sources=[SourceChunk(chunk_index=2, content="AI text", page_number=3)],
        document_title="Paper.txt",
        ai_response=AIResponse(
            answer="It is about AI.",
            model="meta-llama/Llama-2-70b-chat-hf",
            usage=TokenUsage(prompt_tokens=1, completion_tokens=2, total_tokens=3),
        ),
        processing_time=1500,
    )
    text = format_answer(response)

    assert text.startswith("It is about AI.")
    assert "**Sources from Paper.txt:**" in text
    assert "- Page 3 (chunk 2): AI text" in text
    assert "Answered in 1.5s" in text
    assert "`Llama-2-70b-chat-hf`" in text
    assert "3 tokens used" in text


def test_format_summary() -> None:
    summary = AIResponse(answer="First.\n\nSecond.", model="org/model")
    text = format_summary(summary)
    assert text.startswith("First.\n\nSecond.")
    assert "AI Generated Summary" in text
    assert "`model`" in text
    assert "tokens used" not in text
