# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import numpy as np
import pandas as pd
import pytest

from pcregress.exceptions import DataError
from pcregress.series import parse_months, sample_from_series
from pcregress.subset import VariableSubset


def monthly(periods=60, seed=0):
    rng = np.random.default_rng(seed)
    index = pd.date_range("2000-01-01", periods=periods, freq="MS")
    x = pd.DataFrame(
        {"snow": rng.uniform(0, 50, periods), "rain": rng.uniform(0, 10, periods)},
        index=index,
    )
    y = pd.Series(3.0 + 0.8 * x["snow"] + rng.normal(size=periods), index=index, name="flow")
    return y, x


@pytest.mark.parametrize(
    "text, expected",
    [
        (None, None),
        ("", None),
        ("*", None),
        ("  * ", None),
        ("4", [4]),
        ("4, 5 6", [4, 5, 6]),
        ("12,1", [12, 1]),
    ],
)
def test_parse_months(text, expected):
    assert parse_months(text) == expected


@pytest.mark.parametrize("text", ["0", "13", "april", "4;5"])
def test_parse_months_invalid(text):
    with pytest.raises(DataError):
        parse_months(text)


def test_full_period():
    y, x = monthly()
    sample = sample_from_series(y, x)
    assert sample.n_observations == 60
    assert sample.names == ("snow", "rain")
    assert sample.labels[0] == pd.Timestamp("2000-01-01")
    np.testing.assert_array_equal(sample.y, y.to_numpy())
    np.testing.assert_array_equal(sample.X, x.to_numpy())


def test_month_selection():
    y, x = monthly()
    sample = sample_from_series(y, x, months=[4, 5, 6])
    assert sample.n_observations == 15
    assert {label.month for label in sample.labels} == {4, 5, 6}


def test_analysis_period():
    y, x = monthly()
    sample = sample_from_series(y, x, start="2001-01-01", end="2002-12-01")
    assert sample.n_observations == 24
    assert sample.labels[0] == pd.Timestamp("2001-01-01")
    assert sample.labels[-1] == pd.Timestamp("2002-12-01")


def test_period_and_months_combine():
    y, x = monthly()
    sample = sample_from_series(y, x, start="2001-01-01", end="2002-12-01", months=[1])
    assert sample.n_observations == 2


def test_sentinel_becomes_missing():
    y, x = monthly()
    x.iloc[3, 1] = -999.0
    y.iloc[5] = -999.0
    sample = sample_from_series(y, x, missing=-999.0)
    assert np.isnan(sample.X[3, 1])
    assert np.isnan(sample.y[5])
    assert sample.usable_rows(VariableSubset.of([1], 2)).sum() == 58
    assert sample.usable_rows(VariableSubset.of([0], 2)).sum() == 59


def test_independent_series_are_aligned():
    y, x = monthly()
    short = x["rain"].iloc[12:]
    sample = sample_from_series(y, [x["snow"], short])
    assert sample.names == ("snow", "rain")
    assert np.all(np.isnan(sample.X[:12, 1]))
    assert not np.any(np.isnan(sample.X[12:, 1]))


def test_unnamed_series_get_default_names():
    y, x = monthly()
    sample = sample_from_series(y, [x["snow"].rename(None)])
    assert sample.names == ("X1",)


def test_dependent_is_sorted():
    y, x = monthly()
    sample = sample_from_series(y.iloc[::-1], x)
    assert list(sample.labels) == sorted(sample.labels)
    np.testing.assert_array_equal(sample.y, y.to_numpy())


def test_months_need_dates():
    y, x = monthly()
    with pytest.raises(DataError):
        sample_from_series(y.reset_index(drop=True), x.reset_index(drop=True), months=[4])


def test_rejects_non_series():
    _, x = monthly()
    with pytest.raises(DataError):
        sample_from_series(x.to_numpy()[:, 0], x)
    with pytest.raises(DataError):
        sample_from_series(x["snow"], [])
