#!/usr/bin/python3
# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Run a best-subset regression search on a CSV file and print the report.

    pcregress flows.csv --dependent Q_OUT --index-col date --months "4 5 6"
"""

import argparse
import logging
import sys
from typing import List, Optional

import numpy as np
import pandas as pd

from .exceptions import DataError, NoModelFound
from .report import format_report, summary_frame
from .search import SearchConfig, search
from .series import parse_months, sample_from_series

logger = logging.getLogger(__name__)


def verbosity_to_level(verbosity: int) -> int:
    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    return logging.WARNING


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pcregress",
        description="Rank regression equations over combinations of independent variables.",
    )
    parser.add_argument("csv", help="input CSV file, one column per series")
    parser.add_argument("-y", "--dependent", required=True, help="dependent column")
    parser.add_argument(
        "-x",
        "--independent",
        nargs="+",
        help="independent columns (default: every other column)",
    )
    parser.add_argument("--index-col", help="column holding dates / row labels")
    parser.add_argument("--missing", type=float, default=np.nan, help="missing-value sentinel")
    parser.add_argument("--start", help="analysis period start (inclusive)")
    parser.add_argument("--end", help="analysis period end (inclusive)")
    parser.add_argument("--months", help='months to analyze, e.g. "4, 5 6" ("*" = all)')
    parser.add_argument("-k", "--max-combinations", type=int, default=20)
    parser.add_argument("-t", "--critical-t", type=float, default=1.2)
    parser.add_argument("--confidence", type=float, help="use Student's t at this confidence level")
    parser.add_argument("--min-observations", type=int, default=6)
    parser.add_argument("--max-components", type=int)
    parser.add_argument("--max-variables", type=int)
    parser.add_argument("--max-evaluations", type=int)
    parser.add_argument("--time-budget", type=float, help="seconds")
    parser.add_argument("--workers", type=int, default=1)
    parser.add_argument("--summary", action="store_true", help="print only the summary table")
    parser.add_argument("-v", "--verbose", action="count", default=0)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=verbosity_to_level(args.verbose),
        format="%(levelname)s %(name)s: %(message)s",
    )

    index_col = args.index_col
    frame = pd.read_csv(args.csv, index_col=index_col, parse_dates=bool(index_col))
    if args.dependent not in frame.columns:
        logger.error(f"dependent column {args.dependent!r} not found")
        return 2
    independent = args.independent or [c for c in frame.columns if c != args.dependent]
    missing_cols = [c for c in independent if c not in frame.columns]
    if missing_cols:
        logger.error(f"independent column(s) not found: {missing_cols}")
        return 2

    try:
        config = SearchConfig(
            max_stored_combinations=args.max_combinations,
            critical_t=args.critical_t,
            confidence_level=args.confidence,
            min_observations=args.min_observations,
            max_components=args.max_components,
            max_variables=args.max_variables,
            max_evaluations=args.max_evaluations,
            time_budget=args.time_budget,
            workers=args.workers,
        )
        sample = sample_from_series(
            frame[args.dependent],
            frame[independent],
            start=args.start,
            end=args.end,
            months=parse_months(args.months),
            missing=args.missing,
        )
        result = search(sample, config)
    except (DataError, ValueError) as e:
        logger.error(str(e))
        return 2
    except NoModelFound as e:
        logger.error(str(e))
        return 1

    if args.summary:
        sys.stdout.write(summary_frame(result).to_string() + "\n")
    else:
        sys.stdout.write(format_report(result))
    return 0


if __name__ == "__main__":
    sys.exit(main())
