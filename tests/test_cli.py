# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import logging

import numpy as np
import pandas as pd
import pytest

from pcregress.cli import build_parser, main, verbosity_to_level


@pytest.fixture
def csv_path(tmp_path):
    rng = np.random.default_rng(0)
    n = 48
    snow = rng.uniform(0, 50, n)
    rain = rng.uniform(0, 10, n)
    flow = 3.0 + 0.8 * snow + 0.5 * rain + rng.normal(size=n)
    frame = pd.DataFrame(
        {
            "date": pd.date_range("2000-01-01", periods=n, freq="MS"),
            "flow": flow,
            "snow": snow,
            "rain": rain,
        }
    )
    frame.loc[2, "rain"] = -999.0
    path = tmp_path / "flows.csv"
    frame.to_csv(path, index=False)
    return path


def test_report(csv_path, capsys):
    code = main([str(csv_path), "-y", "flow", "--index-col", "date", "--missing", "-999"])
    out = capsys.readouterr().out
    assert code == 0
    assert "EQUATION SUMMARY:" in out
    assert "RANK 1" in out


def test_summary_only(csv_path, capsys):
    code = main([str(csv_path), "-y", "flow", "-x", "snow", "--summary"])
    out = capsys.readouterr().out
    assert code == 0
    assert "standard_error" in out
    assert "RANK 1" not in out


def test_months(csv_path, capsys):
    code = main(
        [str(csv_path), "-y", "flow", "--index-col", "date", "--months", "3 4 5 6", "-x", "snow"]
    )
    assert code == 0
    assert "Number of observations used = 16" in capsys.readouterr().out


def test_no_model(csv_path, capsys):
    assert main([str(csv_path), "-y", "flow", "-x", "snow", "rain", "-t", "1e9"]) == 1
    assert capsys.readouterr().out == ""


def test_missing_column(csv_path):
    assert main([str(csv_path), "-y", "nope"]) == 2
    assert main([str(csv_path), "-y", "flow", "-x", "snow", "nope"]) == 2


def test_months_without_dates(csv_path):
    assert main([str(csv_path), "-y", "flow", "-x", "snow", "--months", "4"]) == 2


def test_parser_defaults():
    args = build_parser().parse_args(["data.csv", "-y", "flow"])
    assert args.max_combinations == 20
    assert args.critical_t == 1.2
    assert args.min_observations == 6
    assert args.workers == 1
    assert np.isnan(args.missing)


@pytest.mark.parametrize(
    "verbosity, level", [(0, logging.WARNING), (1, logging.INFO), (2, logging.DEBUG), (3, logging.DEBUG)]
)
def test_verbosity_to_level(verbosity, level):
    assert verbosity_to_level(verbosity) == level
