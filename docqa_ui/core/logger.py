"""Error logging and tracking for the Document Q&A UI."""
import logging
import os
from pathlib import Path
from datetime import datetime
import json
from typing import Any, Dict, TypedDict, Union


class ErrorStats(TypedDict):
    total_errors: int
    error_types: Dict[str, int]
    error_sources: Dict[str, int]
    last_updated: str


class ErrorLogger:
    def __init__(
        self,
        log_dir: Union[str, Path] = "logs",
        logger_name: str = "docqa_ui.errors"
    ) -> None:
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)

        self.logger = logging.getLogger(logger_name)
        self.logger.setLevel(logging.ERROR)

        self._setup_file_handler()
        self._setup_error_tracking()

    def _setup_file_handler(self) -> None:
        """Set up file handler for logging."""
        log_file = self.log_dir / f"errors_{datetime.now():%Y%m%d}.log"
        # Avoid stacking handlers when several loggers share a name
        for existing in self.logger.handlers:
            if (
                isinstance(existing, logging.FileHandler)
                and existing.baseFilename == os.path.abspath(log_file)
            ):
                return

        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setLevel(logging.ERROR)

        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        handler.setFormatter(formatter)
        self.logger.addHandler(handler)

    def _setup_error_tracking(self) -> None:
        """Set up error tracking file."""
        self.error_file = self.log_dir / "error_tracking.json"
        if not self.error_file.exists():
            initial_stats: ErrorStats = {
                "total_errors": 0,
                "error_types": {},
                "error_sources": {},
                "last_updated": str(datetime.now())
            }
            self._save_error_tracking(initial_stats)

    def log_error(
        self,
        error: Exception,
        context: Dict[str, Any],
        source: str
    ) -> None:
        """Log an error with the UI context it happened in.

        Args:
            error: The exception that was raised
            context: Handler details such as the function name
            source: Which part of the UI reported it
        """
        error_type = type(error).__name__
        error_msg = str(error)

        self.logger.error(
            "Error in %s: %s - %s | context=%s",
            source, error_type, error_msg,
            json.dumps(context, default=str, sort_keys=True)
        )

        self._update_error_tracking(error_type, source)

    def _update_error_tracking(self, error_type: str, source: str) -> None:
        """Bump the per-type and per-source counters."""
        tracking = self._load_error_tracking()

        tracking["total_errors"] += 1
        types = tracking["error_types"]
        types[error_type] = types.get(error_type, 0) + 1
        # Files written before per-source counts existed lack the key
        sources = tracking.setdefault("error_sources", {})
        sources[source] = sources.get(source, 0) + 1
        tracking["last_updated"] = str(datetime.now())

        self._save_error_tracking(tracking)

    def _load_error_tracking(self) -> ErrorStats:
        """Load error tracking data."""
        with open(self.error_file, encoding="utf-8") as f:
            data: ErrorStats = json.load(f)
        return data

    def _save_error_tracking(self, data: ErrorStats) -> None:
        """Save error tracking data."""
        with open(self.error_file, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

    def get_error_summary(self) -> ErrorStats:
        """Get summary of errors."""
        return self._load_error_tracking()
