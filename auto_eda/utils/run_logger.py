"""
Per-run JSONL event log, written next to the run's other artifacts.
"""
import json
import logging
import os
from datetime import datetime
from typing import Any, Dict

from auto_eda.utils.run_workspace import EVENTS_FILE

logger = logging.getLogger(__name__)


def _events_path(output_dir: str) -> str:
    return os.path.join(output_dir, EVENTS_FILE)


def _append_event(output_dir: str, record: Dict[str, Any]) -> None:
    record = {"event": record.pop("event"), "timestamp": datetime.utcnow().isoformat(), **record}
    line = json.dumps(record, ensure_ascii=False, default=str)
    with open(_events_path(output_dir), "a", encoding="utf-8", errors="backslashreplace") as f:
        f.write(line + "\n")


def init_run_log(output_dir: str, metadata: Dict[str, Any]) -> str:
    os.makedirs(output_dir, exist_ok=True)
    _append_event(output_dir, {"event": "run_start", "metadata": metadata})
    return _events_path(output_dir)


def log_run_event(output_dir: str, event: str, payload: Dict[str, Any] | None = None) -> None:
    """Appends one event; a failed write is logged and does not stop the run."""
    try:
        _append_event(output_dir, {"event": event, "payload": payload or {}})
    except OSError as exc:
        logger.warning("RUN_LOG_WRITE_FAILED event=%s error=%s", event, exc)


def finalize_run_log(output_dir: str, summary: Dict[str, Any]) -> None:
    log_run_event(output_dir, "run_end", summary)
