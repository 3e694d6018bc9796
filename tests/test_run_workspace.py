import json
import os
from datetime import datetime

import pandas as pd

from auto_eda.utils.run_logger import finalize_run_log, init_run_log, log_run_event
from auto_eda.utils.run_workspace import (
    init_output_dir,
    save_dataset_snapshot,
    task_artifact_paths,
    write_text_artifact,
)


def test_generated_dir_uses_name_and_timestamp(tmp_path):
    path = init_output_dir("my data", base_dir=str(tmp_path), now=datetime(2024, 1, 2, 3, 4, 5))
    assert path == os.path.join(str(tmp_path), "my_data_20240102_030405")
    assert os.path.isdir(path)


def test_output_root_from_env(tmp_path, monkeypatch):
    monkeypatch.setenv("AUTO_EDA_OUTPUT_ROOT", str(tmp_path / "root"))
    path = init_output_dir("iris", now=datetime(2024, 1, 1))
    assert path.startswith(str(tmp_path / "root"))


def test_explicit_dir_is_used_as_is(tmp_path):
    target = tmp_path / "explicit"
    assert init_output_dir("ignored", output_dir=str(target)) == str(target)
    assert target.is_dir()


def test_artifacts(tmp_path):
    paths = task_artifact_paths(str(tmp_path), 4)
    assert os.path.basename(paths["plot_file"]) == "task_4_plot.png"
    write_text_artifact(str(tmp_path), "analysis_plan.txt", "1. a")
    assert (tmp_path / "analysis_plan.txt").read_text(encoding="utf-8") == "1. a\n"
    snapshot = save_dataset_snapshot(pd.DataFrame({"a": [1]}), str(tmp_path))
    assert pd.read_pickle(snapshot)["a"].tolist() == [1]


def test_event_log_is_jsonl(tmp_path):
    init_run_log(str(tmp_path), {"data_name": "iris"})
    log_run_event(str(tmp_path), "task_complete", {"task": 1, "success": True})
    finalize_run_log(str(tmp_path), {"status": "complete"})
    records = [json.loads(line) for line in (tmp_path / "run_events.jsonl").read_text(encoding="utf-8").splitlines()]
    assert [r["event"] for r in records] == ["run_start", "task_complete", "run_end"]
    assert records[0]["metadata"]["data_name"] == "iris"
    assert records[1]["payload"]["success"] is True
