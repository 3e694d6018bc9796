import numpy as np
import pandas as pd

from auto_eda.utils.dataset_summary import build_data_summary


def test_header_and_column_lines():
    df = pd.DataFrame({"age": [31, 45, np.nan], "city": pd.Series(["Madrid", None, "Lima"], dtype=object)})
    lines = build_data_summary(df, "people").splitlines()
    assert lines[:4] == ["Dataset: people", "Dimensions: 3 rows x 2 columns", "Rows: 3", "Columns: 2"]
    assert lines[4].startswith("$ age  <float64> 31, 45, NA")
    assert lines[5].startswith("$ city <object> Madrid, NA, Lima")


def test_long_frames_are_truncated_per_line():
    df = pd.DataFrame({"text": ["x" * 40] * 20})
    line = build_data_summary(df, "wide").splitlines()[-1]
    assert len(line) <= 100
    assert line.endswith("…")


def test_duplicate_column_names():
    df = pd.DataFrame([[1, "a"]], columns=["v", "v"])
    lines = build_data_summary(df, "dup").splitlines()
    assert lines[4].startswith("$ v <int64> 1")
    assert lines[5].startswith("$ v <")
    assert lines[5].endswith(" a")
