import argparse
import logging
import os
import sys
from typing import List, Optional

import pandas as pd

from auto_eda.graph.graph import run_auto_eda


def _load_demo_dataset() -> pd.DataFrame:
    from sklearn.datasets import load_iris

    df = load_iris(as_frame=True).frame
    df.attrs["name"] = "iris"
    return df


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Multi-model automated exploratory data analysis")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--csv", type=str, help="Path to a CSV file to analyse.")
    source.add_argument("--demo", action="store_true", help="Run on the iris demo dataset.")
    parser.add_argument("--name", type=str, default=None, help="Dataset name used in prompts and the report.")
    parser.add_argument("--max-attempts", type=int, default=3, help="Attempts per task.")
    parser.add_argument("--generation-model", type=str, default="claude", help="Model for planning and code generation.")
    parser.add_argument("--review-model", type=str, default="gpt-4o", help="Model for code review.")
    parser.add_argument("--output-dir", type=str, default=None, help="Explicit output directory.")
    parser.add_argument("--debug", action="store_true", help="Print generated code.")
    parser.add_argument("--no-auto-install", action="store_true", help="Do not suggest installing missing packages.")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    if args.demo:
        data = _load_demo_dataset()
    else:
        data = pd.read_csv(args.csv)
        data.attrs["name"] = os.path.splitext(os.path.basename(args.csv))[0]

    run = run_auto_eda(
        data,
        data_name=args.name,
        max_attempts=args.max_attempts,
        generation_model=args.generation_model,
        review_model=args.review_model,
        output_dir=args.output_dir,
        debug=args.debug,
        auto_install=not args.no_auto_install,
    )
    return 0 if run is not None else 2


if __name__ == "__main__":
    sys.exit(main())
