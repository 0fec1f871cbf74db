"""Display helpers shared by the Gradio views."""

import math
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from docqa_ui.core.config import Settings
from docqa_ui.models.schemas import (
    AIResponse,
    Document,
    DocumentStatus,
    QAResponse,
    UploadStatus,
    UploadTask,
)

SIZE_UNITS = ["Bytes", "KB", "MB", "GB"]

DOCUMENT_STATUS_ICONS = {
    DocumentStatus.READY: "✅",
    DocumentStatus.PROCESSING: "⏳",
    DocumentStatus.UPLOADING: "🔄",
    DocumentStatus.ERROR: "❌",
}

UPLOAD_STATUS_ICONS = {
    UploadStatus.PENDING: "📄",
    UploadStatus.UPLOADING: "📤",
    UploadStatus.SUCCESS: "✅",
    UploadStatus.ERROR: "❌",
}

DOCUMENT_HEADERS = ["ID", "Title", "Type", "Size", "Pages", "Status", "Updated"]
UPLOAD_HEADERS = ["File", "Size", "Title", "Status", "Progress", "Message"]


def format_file_size(size: int) -> str:
    """Human readable size, e.g. ``15420`` -> ``15.06 KB``."""
    if size <= 0:
        return "0 Bytes"
    i = min(int(math.floor(math.log(size) / math.log(1024))),
            len(SIZE_UNITS) - 1)
    value = f"{size / math.pow(1024, i):.2f}".rstrip("0").rstrip(".")
    return f"{value} {SIZE_UNITS[i]}"


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}" if count == 1 else f"{count} {unit}s"


def format_relative_time(
    timestamp: str,
    now: Optional[datetime] = None
) -> str:
    """Describe how long ago an ISO-8601 timestamp was."""
    try:
        moment = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
    except ValueError:
        return timestamp
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)

    minutes = round(abs((now - moment).total_seconds()) / 60)
    if minutes < 1:
        text = "less than a minute"
    elif minutes < 45:
        text = _plural(minutes, "minute")
    elif minutes < 90:
        text = "about 1 hour"
    elif minutes < 1440:
        text = f"about {round(minutes / 60)} hours"
    elif minutes < 2520:
        text = "1 day"
    elif minutes < 43200:
        text = _plural(round(minutes / 1440), "day")
    elif minutes < 86400:
        text = f"about {_plural(round(minutes / 43200), 'month')}"
    elif minutes < 525600:
        text = _plural(round(minutes / 43200), "month")
    else:
        text = f"about {_plural(minutes // 525600, 'year')}"
    return f"{text} ago"


def model_short_name(model: str) -> str:
    """``meta-llama/Llama-2-70b-chat-hf`` -> ``Llama-2-70b-chat-hf``."""
    return model.split("/")[-1]


def model_description(model: str) -> str:
    return Settings.MODEL_DESCRIPTIONS.get(model, "Custom model")


def document_rows(
    documents: Iterable[Document],
    now: Optional[datetime] = None
) -> List[List[str]]:
    rows = []
    for doc in documents:
        status = DocumentStatus(doc.status)
        rows.append([
            doc.id,
            doc.title,
            doc.file_type,
            format_file_size(doc.size),
            str(doc.pages),
            f"{DOCUMENT_STATUS_ICONS[status]} {status.value}",
            format_relative_time(doc.updated_at, now),
        ])
    return rows


def upload_rows(tasks: Iterable[UploadTask]) -> List[List[str]]:
    rows = []
    for task in tasks:
        if task.status == UploadStatus.SUCCESS:
            message = (
                "Document uploaded successfully! It's now being processed."
            )
        elif task.status == UploadStatus.ERROR:
            message = task.error or "Upload failed. Please try again."
        else:
            message = ""
        rows.append([
            task.file.name,
            format_file_size(task.file.size),
            task.title,
            f"{UPLOAD_STATUS_ICONS[task.status]} {task.status.value}",
            f"{task.progress}%",
            message,
        ])
    return rows


def format_usage(ai_response: AIResponse) -> str:
    parts = [f"Model: `{model_short_name(ai_response.model)}`"]
    if ai_response.usage:
        parts.append(f"{ai_response.usage.total_tokens} tokens used")
    return " · ".join(parts)


def format_answer(response: QAResponse) -> str:
    """Render an answer with its citations as Markdown."""
    lines = [response.answer, ""]
    if response.sources:
        title = response.document_title or "document"
        lines.append(f"**Sources from {title}:**")
        for source in response.sources:
            lines.append(
                f"- Page {source.page_number} "
                f"(chunk {source.chunk_index}): {source.content}"
            )
        lines.append("")

    footer = []
    if response.processing_time is not None:
        footer.append(f"Answered in {response.processing_time / 1000:.1f}s")
    if response.ai_response is not None:
        footer.append(format_usage(response.ai_response))
    if footer:
        lines.append("_" + " · ".join(footer) + "_")
    return "\n".join(lines).strip()


def format_summary(summary: AIResponse) -> str:
    """Render a generated summary as Markdown."""
    paragraphs = [p for p in summary.answer.split("\n") if p.strip()]
    body = "\n\n".join(paragraphs)
    return f"{body}\n\n_AI Generated Summary · {format_usage(summary)}_"
