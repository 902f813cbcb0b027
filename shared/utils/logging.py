"""JSON-formatted logging utilities.

Log files are JSON lines so race logs can be loaded straight into an
analytics tool:
- rizzword_<timestamp>.log: every log record
- exchanges.jsonl: one line per solver call (prompt, response, latency)
- races.jsonl: one line per finished race (ranked results)
"""

import json
import logging
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from rich.logging import RichHandler

EXCHANGES_FILE = "exchanges.jsonl"
RACES_FILE = "races.jsonl"

# Solver calls run in worker threads; serialise appends to shared files
_write_lock = threading.Lock()


class JSONFormatter(logging.Formatter):
    """Format log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        base = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "name": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            base["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(base)


def setup_logging(log_dir: Path, verbose: bool = False) -> Path:
    """Configure root logging: JSON lines to a file, rich output to the console.

    Returns the path of the log file.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"rizzword_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
    root.setLevel(logging.DEBUG)

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setFormatter(JSONFormatter())
    file_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    root.addHandler(file_handler)

    console_handler = RichHandler(show_path=False, rich_tracebacks=True)
    console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    root.addHandler(console_handler)

    # Keep HTTP client chatter out of the race log
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    return log_file


def _append_jsonl(path: Path, record: Dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with _write_lock:
        with open(path, "a", encoding="utf-8") as f:
            f.write(json.dumps(record) + "\n")


def log_exchange(
    log_dir: Path,
    model_name: str,
    prompt: str,
    response: str,
    metadata: Optional[Dict[str, Any]] = None,
) -> None:
    """Append one solver exchange to exchanges.jsonl."""
    _append_jsonl(
        Path(log_dir) / EXCHANGES_FILE,
        {
            "ts": datetime.now(timezone.utc).isoformat(),
            "model": model_name,
            "prompt": prompt,
            "response": response,
            **(metadata or {}),
        },
    )


def log_summary(log_dir: Path, run_id: str, results: List[Dict[str, Any]]) -> None:
    """Append the ranked results of a finished race to races.jsonl."""
    _append_jsonl(
        Path(log_dir) / RACES_FILE,
        {
            "ts": datetime.now(timezone.utc).isoformat(),
            "run_id": run_id,
            "results": results,
        },
    )
