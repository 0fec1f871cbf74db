"""Client-side upload queue with per-file progress tracking."""

import asyncio
import logging
import re
import uuid
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from docqa_ui.core.exceptions import (
    DocumentQAException,
    FileSizeLimitError,
    InvalidFileTypeError,
)
from docqa_ui.models.schemas import SelectedFile, UploadStatus, UploadTask
from docqa_ui.services.api_client import ApiClient, file_extension

logger = logging.getLogger(__name__)

PROGRESS_INTERVAL = 0.2
PROGRESS_STEP = 10
PROGRESS_CAP = 90
MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB
ALLOWED_EXTENSIONS = ("txt",)

_EXTENSION_RE = re.compile(r"\.[^/.]+$")

Rejection = Tuple[str, str]


def title_from_filename(filename: str) -> str:
    """Strip the final extension: ``report.v2.txt`` -> ``report.v2``."""
    return _EXTENSION_RE.sub("", filename)


class UploadOrchestrator:
    """Tracks selected files and uploads them one at a time."""

    def __init__(
        self,
        api_client: ApiClient,
        on_change: Optional[Callable[[List[UploadTask]], None]] = None,
        progress_interval: float = PROGRESS_INTERVAL,
        max_file_size: int = MAX_FILE_SIZE,
        allowed_extensions: Sequence[str] = ALLOWED_EXTENSIONS
    ) -> None:
        self.api_client = api_client
        self.on_change = on_change
        self.progress_interval = progress_interval
        self.max_file_size = max_file_size
        self.allowed_extensions = {ext.lower() for ext in allowed_extensions}
        self._ids: List[str] = []
        self._tasks: List[UploadTask] = []
        self.is_uploading = False

    @property
    def tasks(self) -> List[UploadTask]:
        return list(self._tasks)

    @property
    def pending_tasks(self) -> List[UploadTask]:
        return [t for t in self._tasks if t.status == UploadStatus.PENDING]

    @property
    def has_successful_uploads(self) -> bool:
        return any(t.status == UploadStatus.SUCCESS for t in self._tasks)

    def _replace(self, ids: List[str], tasks: List[UploadTask]) -> None:
        """Swap in a whole new task list and notify the listener."""
        self._ids = ids
        self._tasks = tasks
        if self.on_change is not None:
            self.on_change(list(tasks))

    def _update(
        self,
        task_id: str,
        change: Callable[[UploadTask], UploadTask]
    ) -> Optional[UploadTask]:
        if task_id not in self._ids:
            return None
        position = self._ids.index(task_id)
        updated = change(self._tasks[position])
        tasks = list(self._tasks)
        tasks[position] = updated
        self._replace(list(self._ids), tasks)
        return updated

    def validate_file(self, file: SelectedFile) -> None:
        """Check a file against the accepted type and size.

        Raises:
            InvalidFileTypeError: If the file is not plain text
            FileSizeLimitError: If the file is larger than the limit
        """
        ext = file_extension(file.name, default="").lower()
        if ext not in self.allowed_extensions:
            raise InvalidFileTypeError(self.allowed_extensions)
        if file.size > self.max_file_size:
            raise FileSizeLimitError(self.max_file_size)

    def add_files(
        self,
        files: Iterable[SelectedFile]
    ) -> Tuple[List[UploadTask], List[Rejection]]:
        """Queue accepted files as pending tasks.

        Returns:
            Tuple of (added tasks, (filename, reason) for rejected files)
        """
        added: List[UploadTask] = []
        added_ids: List[str] = []
        rejected: List[Rejection] = []

        for file in files:
            try:
                self.validate_file(file)
            except DocumentQAException as e:
                logger.info("Rejected %s: %s", file.name, e.detail)
                rejected.append((file.name, str(e.detail)))
                continue
            added.append(
                UploadTask(file=file, title=title_from_filename(file.name))
            )
            added_ids.append(uuid.uuid4().hex)

        if added:
            self._replace(self._ids + added_ids, self._tasks + added)
        return added, rejected

    def update_title(self, index: int, title: str) -> None:
        """Edit the title of a task before it is uploaded."""
        if self._tasks[index].status != UploadStatus.PENDING:
            raise ValueError("Only pending files can be renamed")
        self._update(
            self._ids[index],
            lambda t: t.model_copy(update={"title": title})
        )

    def remove_task(self, index: int) -> None:
        """Drop a pending task from the queue."""
        if self._tasks[index].status != UploadStatus.PENDING:
            raise ValueError("Only pending files can be removed")
        ids = self._ids[:index] + self._ids[index + 1:]
        tasks = self._tasks[:index] + self._tasks[index + 1:]
        self._replace(ids, tasks)

    def clear(self) -> None:
        """Forget every task."""
        self._replace([], [])

    async def _tick_progress(self, task_id: str) -> None:
        """Advance synthetic progress while the upload is outstanding."""
        def advance(task: UploadTask) -> UploadTask:
            if task.status != UploadStatus.UPLOADING:
                return task
            progress = min(task.progress + PROGRESS_STEP, PROGRESS_CAP)
            return task.model_copy(update={"progress": progress})

        while True:
            await asyncio.sleep(self.progress_interval)
            self._update(task_id, advance)

    async def _upload(self, task_id: str) -> Optional[UploadTask]:
        if task_id not in self._ids:
            return None
        current = self._tasks[self._ids.index(task_id)]
        # Only pending tasks start an upload; success and error are final
        if current.status != UploadStatus.PENDING:
            logger.info(
                "Skipping %s, already %s", current.file.name, current.status.value
            )
            return current

        started = self._update(
            task_id,
            lambda t: t.model_copy(
                update={
                    "status": UploadStatus.UPLOADING,
                    "progress": 0,
                    "error": None,
                }
            )
        )
        if started is None:
            return None

        ticker = asyncio.create_task(self._tick_progress(task_id))
        try:
            document = await self.api_client.upload_document(
                started.file, started.title
            )
        except Exception as e:
            if isinstance(e, DocumentQAException):
                message = str(e.detail)
            else:
                message = str(e) or "Upload failed"
            logger.error(f"Upload of {started.file.name} failed: {message}")
            return self._update(
                task_id,
                lambda t: t.model_copy(
                    update={
                        "status": UploadStatus.ERROR,
                        "progress": 0,
                        "error": message,
                    }
                )
            )
        finally:
            ticker.cancel()
            await asyncio.gather(ticker, return_exceptions=True)

        logger.info("Uploaded %s as document %s", started.title, document.id)
        return self._update(
            task_id,
            lambda t: t.model_copy(
                update={
                    "status": UploadStatus.SUCCESS,
                    "progress": 100,
                    "document": document,
                }
            )
        )

    async def upload_task(self, index: int) -> Optional[UploadTask]:
        """Upload one task and return its final state."""
        return await self._upload(self._ids[index])

    async def upload_all(self) -> List[UploadTask]:
        """Upload every pending task strictly one after another."""
        if self.is_uploading:
            logger.warning("Upload already in progress")
            return self.tasks

        pending_ids = [
            task_id
            for task_id, task in zip(self._ids, self._tasks)
            if task.status == UploadStatus.PENDING
        ]
        self.is_uploading = True
        try:
            # Sequential to avoid overwhelming the backend
            for task_id in pending_ids:
                await self._upload(task_id)
        finally:
            self.is_uploading = False
        return self.tasks
