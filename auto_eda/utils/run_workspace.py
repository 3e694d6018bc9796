"""
Run output directory utilities.

Each run writes into its own directory keyed by dataset name and timestamp so
artifacts from different runs never mix.
"""
import os
import re
from datetime import datetime
from typing import Any, Dict, Optional

DEFAULT_OUTPUT_ROOT = "auto_eda_output"

DATASET_FILE = "dataset.pkl"
PLAN_FILE = "analysis_plan.txt"
SUMMARY_FILE = "data_summary.txt"
REPORT_FILE = "analysis_summary.md"
EVENTS_FILE = "run_events.jsonl"


def _safe_name(name: str) -> str:
    cleaned = re.sub(r"[^0-9A-Za-z_.-]+", "_", str(name)).strip("_")
    return cleaned or "dataset"


def init_output_dir(
    data_name: str,
    output_dir: Optional[str] = None,
    base_dir: Optional[str] = None,
    now: Optional[datetime] = None,
) -> str:
    """
    Creates (if needed) and returns the output directory for a run.

    Args:
        data_name: Dataset identifier used in the directory name.
        output_dir: Explicit directory; used as-is when given.
        base_dir: Root for generated directories (env AUTO_EDA_OUTPUT_ROOT or auto_eda_output).
        now: Timestamp override.

    Returns:
        The output directory path.
    """
    if not output_dir:
        root = base_dir or os.getenv("AUTO_EDA_OUTPUT_ROOT") or DEFAULT_OUTPUT_ROOT
        timestamp = (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
        output_dir = os.path.join(root, f"{_safe_name(data_name)}_{timestamp}")
    os.makedirs(output_dir, exist_ok=True)
    return output_dir


def task_artifact_paths(output_dir: str, task_index: int) -> Dict[str, str]:
    return {
        "code_file": os.path.join(output_dir, f"task_{task_index}_code.py"),
        "output_file": os.path.join(output_dir, f"task_{task_index}_output.txt"),
        "plot_file": os.path.join(output_dir, f"task_{task_index}_plot.png"),
    }


def write_text_artifact(output_dir: str, filename: str, text: str) -> str:
    path = os.path.join(output_dir, filename)
    with open(path, "w", encoding="utf-8", errors="backslashreplace") as f:
        f.write(text if text.endswith("\n") else text + "\n")
    return path


def save_dataset_snapshot(data: Any, output_dir: str) -> str:
    path = os.path.join(output_dir, DATASET_FILE)
    data.to_pickle(path)
    return path
