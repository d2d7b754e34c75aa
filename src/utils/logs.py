"""Structured logging setup for jobs."""
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

from src.config import settings


class JSONFormatter(logging.Formatter):
    def format(self, record):
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName
        }
        if hasattr(record, "duration"):
            log_entry["duration_seconds"] = record.duration
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, ensure_ascii=False)


def setup_job_logging(job_name: str, log_dir: Optional[Union[str, Path]] = None,
                      level: int = logging.INFO) -> Path:
    """
    Send job logs to a JSON-lines file and the console.

    Args:
        job_name: Log file stem (e.g. "import_leads")
        log_dir: Directory for the log file (default: settings.log_dir)
        level: Root logger level

    Returns:
        Path of the JSON log file
    """
    log_dir = Path(log_dir) if log_dir else settings.log_dir
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"{job_name}.log"

    # Setup file handler with JSON formatter
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setFormatter(JSONFormatter())

    # Setup console handler with standard format
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    return log_file
