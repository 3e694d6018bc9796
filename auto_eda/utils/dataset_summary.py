from typing import List

import pandas as pd

MAX_PREVIEW_VALUES = 8
MAX_LINE_WIDTH = 100


def _format_value(value) -> str:
    if value is None or (pd.api.types.is_scalar(value) and pd.isna(value)):
        return "NA"
    if isinstance(value, float):
        return f"{value:g}"
    return str(value)


def _column_line(name: str, series: pd.Series, name_width: int) -> str:
    values = ", ".join(_format_value(v) for v in series.head(MAX_PREVIEW_VALUES).tolist())
    line = f"$ {str(name).ljust(name_width)} <{series.dtype}> {values}"
    if len(line) > MAX_LINE_WIDTH:
        line = line[: MAX_LINE_WIDTH - 1] + "…"
    return line


def build_data_summary(df: pd.DataFrame, data_name: str) -> str:
    """
    Compact, column-per-line overview of a DataFrame for the planning prompt.

    Example:
        Dataset: iris
        Dimensions: 150 rows x 5 columns
        Rows: 150
        Columns: 5
        $ sepal_length <float64> 5.1, 4.9, 4.7, ...
    """
    rows, cols = df.shape
    lines: List[str] = [
        f"Dataset: {data_name}",
        f"Dimensions: {rows} rows x {cols} columns",
        f"Rows: {rows}",
        f"Columns: {cols}",
    ]
    name_width = max((len(str(c)) for c in df.columns), default=0)
    for pos, col in enumerate(df.columns):
        lines.append(_column_line(col, df.iloc[:, pos], name_width))
    return "\n".join(lines)
