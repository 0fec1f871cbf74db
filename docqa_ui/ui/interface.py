"""Gradio interface for the Document Q&A UI."""

import asyncio
import mimetypes
import os
from typing import Any, AsyncIterator, Dict, List, Optional, Tuple

import gradio as gr

from docqa_ui.core.config import Settings, settings as default_settings
from docqa_ui.core.dependencies import (
    build_ai_client,
    build_api_client,
    build_error_logger,
)
from docqa_ui.core.exceptions import DocumentQAException
from docqa_ui.core.logger import ErrorLogger
from docqa_ui.models.schemas import (
    Document,
    DocumentStatus,
    SelectedFile,
    UploadStatus,
)
from docqa_ui.services.api_client import ApiClient
from docqa_ui.services.llm import TogetherAIClient
from docqa_ui.services.uploads import UploadOrchestrator
from docqa_ui.ui.formatting import (
    DOCUMENT_HEADERS,
    UPLOAD_HEADERS,
    document_rows,
    format_answer,
    format_summary,
    model_description,
    upload_rows,
)

NO_READY_DOCUMENTS = (
    "No documents ready. Upload and process documents first to start "
    "asking questions."
)
NO_SUMMARY_CONTENT = "Document content not available for summary generation."
NO_API_KEY = "Together AI API key is not configured."


def read_selected_file(file_path: str) -> SelectedFile:
    """Load a file picked in the browser into memory."""
    content_type = mimetypes.guess_type(file_path)[0] or "text/plain"
    with open(file_path, "rb") as f:
        content = f.read()
    return SelectedFile(
        name=os.path.basename(file_path),
        content=content,
        content_type=content_type,
    )


class DocumentQAInterface:
    """Event handlers and layout of the document Q&A app."""

    def __init__(
        self,
        api_client: ApiClient,
        ai_client: Optional[TogetherAIClient] = None,
        error_logger: Optional[ErrorLogger] = None,
        app_settings: Settings = default_settings
    ) -> None:
        self.api_client = api_client
        self.ai_client = ai_client
        self.error_logger = error_logger
        self.settings = app_settings

    def handle_error(
        self,
        exception: Exception,
        context: Optional[Dict[str, Any]] = None
    ) -> str:
        """Handle and log errors, returning a user-friendly message.

        Args:
            exception: The exception that occurred
            context: Additional context for logging

        Returns:
            A user-friendly error message
        """
        if context is None:
            context = {}

        if self.error_logger is not None:
            self.error_logger.log_error(exception, context, "interface")
        return (
            f"An error occurred while processing your request: "
            f"{str(exception)}"
        )

    def new_orchestrator(self) -> UploadOrchestrator:
        return UploadOrchestrator(
            self.api_client,
            max_file_size=self.settings.MAX_UPLOAD_SIZE,
            allowed_extensions=self.settings.ALLOWED_EXTENSIONS,
        )

    async def load_documents(
        self
    ) -> Tuple[List[List[str]], Any, List[Document]]:
        """Fetch the library and the ready documents for the Q&A picker."""
        documents = await self.api_client.list_documents()
        ready = [
            doc for doc in documents if doc.status == DocumentStatus.READY
        ]
        choices = [(doc.title, doc.id) for doc in ready]
        picker = gr.update(
            choices=choices,
            value=choices[0][1] if choices else None,
        )
        return document_rows(documents), picker, documents

    def select_files(
        self,
        file_paths: Optional[List[str]],
        orchestrator: Optional[UploadOrchestrator]
    ) -> Tuple[List[List[str]], str, UploadOrchestrator]:
        """Queue picked files and report the ones that were rejected."""
        if orchestrator is None:
            orchestrator = self.new_orchestrator()
        if not file_paths:
            return upload_rows(orchestrator.tasks), "", orchestrator

        try:
            files = [read_selected_file(path) for path in file_paths]
        except OSError as e:
            message = self.handle_error(e, {"function": "select_files"})
            return upload_rows(orchestrator.tasks), message, orchestrator

        _, rejected = orchestrator.add_files(files)
        message = "\n".join(
            f"⚠️ {name}: {reason}" for name, reason in rejected
        )
        return upload_rows(orchestrator.tasks), message, orchestrator

    @staticmethod
    def _apply_titles(
        table: Optional[List[List[Any]]],
        orchestrator: UploadOrchestrator
    ) -> None:
        """Copy titles edited in the table back onto pending tasks."""
        if not table:
            return
        for index, (row, task) in enumerate(zip(table, orchestrator.tasks)):
            title = str(row[2]) if len(row) > 2 else task.title
            if task.status == UploadStatus.PENDING and title != task.title:
                orchestrator.update_title(index, title)

    async def upload_all(
        self,
        table: Optional[List[List[Any]]],
        orchestrator: Optional[UploadOrchestrator]
    ) -> AsyncIterator[Tuple[List[List[str]], str, UploadOrchestrator]]:
        """Upload pending files one by one, streaming progress rows."""
        if orchestrator is None or not orchestrator.pending_tasks:
            orchestrator = orchestrator or self.new_orchestrator()
            rows = upload_rows(orchestrator.tasks)
            yield rows, "No files to upload.", orchestrator
            return

        self._apply_titles(table, orchestrator)
        updates: "asyncio.Queue[Any]" = asyncio.Queue()
        orchestrator.on_change = updates.put_nowait
        job = asyncio.create_task(orchestrator.upload_all())
        try:
            while not job.done() or not updates.empty():
                try:
                    tasks = await asyncio.wait_for(updates.get(), timeout=0.1)
                except asyncio.TimeoutError:
                    continue
                yield upload_rows(tasks), "Uploading...", orchestrator
            await job
        finally:
            orchestrator.on_change = None

        if orchestrator.has_successful_uploads:
            status = (
                "Upload Complete! Your documents are being processed. "
                "Refresh the library to see them."
            )
        else:
            status = "No documents were uploaded."
        yield upload_rows(orchestrator.tasks), status, orchestrator

    def clear_uploads(
        self,
        orchestrator: Optional[UploadOrchestrator]
    ) -> Tuple[List[List[str]], str, UploadOrchestrator]:
        orchestrator = orchestrator or self.new_orchestrator()
        orchestrator.clear()
        return [], "", orchestrator

    async def ask(
        self,
        document_id: Optional[str],
        question: str,
        chunk_count: float
    ) -> str:
        """Answer a question about the selected document."""
        if not document_id:
            return NO_READY_DOCUMENTS
        if not question or not question.strip():
            return "Please ask a question."

        try:
            response = await self.api_client.ask_question(
                document_id, question.strip(), int(chunk_count)
            )
            return format_answer(response)
        except DocumentQAException as e:
            return f"⚠️ {e.detail}"
        except Exception as e:
            return self.handle_error(e, {
                "function": "ask",
                "document_id": document_id,
                "question": question,
            })

    async def summarize(
        self,
        file_path: Optional[str],
        content: str,
        title: str
    ) -> str:
        """Summarize an uploaded file or pasted text."""
        if self.ai_client is None:
            return f"⚠️ {NO_API_KEY}"

        if file_path:
            try:
                selected = read_selected_file(file_path)
            except OSError as e:
                return self.handle_error(e, {"function": "summarize"})
            content = selected.content.decode("utf-8", errors="replace")
            title = title or selected.name
        if not content or not content.strip():
            return f"⚠️ {NO_SUMMARY_CONTENT}"

        try:
            summary = await self.ai_client.generate_summary(
                content, title or "Untitled document"
            )
            return format_summary(summary)
        except DocumentQAException as e:
            return f"⚠️ {e.detail}"

    async def test_connection(self) -> str:
        """Probe the completion endpoint."""
        if self.ai_client is None:
            return "❌ Not Configured"
        if await self.ai_client.test_connection():
            return "✅ Connected"
        return "❌ Failed"

    def settings_markdown(self) -> str:
        config = self.api_client.config
        configured = bool(config.model_credential)
        lines = [
            "### AI Configuration",
            f"**API Key Status:** {'Configured' if configured else 'Not Configured'}",
            f"**Current Model:** `{config.model_name}` "
            f"({model_description(config.model_name)})",
            f"**Data Source:** {'mock data' if config.use_mock_data else config.base_url}",
            "",
            "**Available Models:**",
        ]
        for model_id, name in self.settings.AVAILABLE_MODELS.items():
            marker = " ✔" if model_id == config.model_name else ""
            lines.append(
                f"- {name} (`{model_id}`): {model_description(model_id)}{marker}"
            )
        if not configured:
            lines += [
                "",
                "To enable AI-powered responses, set `TOGETHER_API_KEY` "
                "(and optionally `TOGETHER_MODEL`) in the environment or "
                "`.env` file and restart the app.",
            ]
        return "\n".join(lines)

    def build(self) -> gr.Blocks:
        """Lay out the app."""
        max_mb = self.settings.MAX_UPLOAD_SIZE / 1024 / 1024
        with gr.Blocks(title="Document Q&A System") as demo:
            gr.Markdown(
                """
                # Document Intelligence Platform
                Upload your documents and ask AI-powered questions about them.

                Supported file types: TXT · Maximum file size: {max_mb:g}MB
                """.format(max_mb=max_mb)
            )
            documents_state = gr.State([])
            uploads_state = gr.State(None)

            with gr.Tab("Document Library"):
                refresh_btn = gr.Button("Refresh")
                documents_table = gr.Dataframe(
                    headers=DOCUMENT_HEADERS,
                    interactive=False,
                    type="array",
                )

            with gr.Tab("Upload"):
                file_input = gr.File(
                    label="Upload Documents",
                    file_count="multiple",
                    file_types=[f".{ext}" for ext in self.settings.ALLOWED_EXTENSIONS],
                    type="filepath",
                )
                upload_table = gr.Dataframe(
                    headers=UPLOAD_HEADERS,
                    label="Files to Upload (edit titles before uploading)",
                    interactive=True,
                    type="array",
                )
                upload_status = gr.Textbox(
                    label="Upload Status",
                    interactive=False
                )
                with gr.Row():
                    upload_btn = gr.Button("Upload Files", variant="primary")
                    clear_btn = gr.Button("Clear")

            with gr.Tab("Q&A"):
                document_picker = gr.Dropdown(
                    label="Document",
                    choices=[],
                    interactive=True,
                )
                question_input = gr.Textbox(
                    label="Question",
                    placeholder="Ask a question about the document...",
                    lines=2
                )
                chunk_slider = gr.Slider(
                    minimum=1,
                    maximum=10,
                    value=3,
                    step=1,
                    label="Source chunks",
                )
                ask_btn = gr.Button("Ask Question", variant="primary")
                answer_output = gr.Markdown()

            with gr.Tab("Summary"):
                summary_file = gr.File(
                    label="Text file",
                    file_types=[".txt"],
                    type="filepath",
                )
                summary_title = gr.Textbox(label="Document Title")
                summary_text = gr.Textbox(
                    label="Or paste document content",
                    lines=6
                )
                summary_btn = gr.Button(
                    "Generate Summary",
                    interactive=self.ai_client is not None
                )
                summary_output = gr.Markdown()

            with gr.Tab("AI Settings"):
                gr.Markdown(self.settings_markdown())
                with gr.Row():
                    test_btn = gr.Button(
                        "Test Connection",
                        interactive=self.ai_client is not None
                    )
                    connection_status = gr.Textbox(
                        label="Connection Status",
                        interactive=False
                    )

            demo.load(
                fn=self.load_documents,
                outputs=[documents_table, document_picker, documents_state]
            )
            refresh_btn.click(
                fn=self.load_documents,
                outputs=[documents_table, document_picker, documents_state]
            )
            file_input.upload(
                fn=self.select_files,
                inputs=[file_input, uploads_state],
                outputs=[upload_table, upload_status, uploads_state]
            )
            upload_btn.click(
                fn=self.upload_all,
                inputs=[upload_table, uploads_state],
                outputs=[upload_table, upload_status, uploads_state],
                show_progress="full"
            )
            clear_btn.click(
                fn=self.clear_uploads,
                inputs=[uploads_state],
                outputs=[upload_table, upload_status, uploads_state]
            )
            ask_btn.click(
                fn=self.ask,
                inputs=[document_picker, question_input, chunk_slider],
                outputs=answer_output,
                show_progress="full"
            )
            summary_btn.click(
                fn=self.summarize,
                inputs=[summary_file, summary_text, summary_title],
                outputs=summary_output,
                show_progress="full"
            )
            test_btn.click(fn=self.test_connection, outputs=connection_status)

        return demo


def create_interface(app_settings: Settings = default_settings) -> DocumentQAInterface:
    """Wire services from settings into the interface."""
    config = app_settings.client_config()
    ai_client = build_ai_client(config)
    return DocumentQAInterface(
        api_client=build_api_client(config, ai_client=ai_client),
        ai_client=ai_client,
        error_logger=build_error_logger(app_settings),
        app_settings=app_settings,
    )


def launch_interface(app_settings: Settings = default_settings) -> None:
    """Launch the Gradio interface."""
    demo = create_interface(app_settings).build()

    # Try the next ports if the configured one is taken
    first_port = app_settings.UI_PORT
    last_port = first_port + 9
    for port in range(first_port, last_port + 1):
        try:
            demo.launch(
                share=False,
                server_name="0.0.0.0",
                server_port=port,
                show_error=True
            )
            break
        except OSError:
            if port == last_port:
                raise OSError(
                    f"Could not find an available port in range "
                    f"{first_port}-{last_port}"
                )
            continue
