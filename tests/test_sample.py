# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import numpy as np
import pytest

from pcregress.exceptions import DataError
from pcregress.sample import Sample
from pcregress.subset import VariableSubset


def test_create_copies_and_freezes():
    y = np.arange(6.0)
    X = np.arange(12.0).reshape(6, 2)
    sample = Sample.create(y, X)
    y[0] = 99.0
    assert sample.y[0] == 0.0
    assert sample.names == ("X1", "X2")
    assert sample.labels == tuple(range(6))
    with pytest.raises(ValueError):
        sample.X[0, 0] = 1.0


def test_one_dimensional_x_is_a_single_column():
    sample = Sample.create(np.arange(6.0), np.arange(6.0))
    assert sample.n_variables == 1
    assert sample.n_observations == 6


@pytest.mark.parametrize(
    "y,X",
    [
        ([], [[1.0]]),
        ([1.0, 2.0], [[1.0], [2.0], [3.0]]),
        ([[1.0, 2.0]], [[1.0], [2.0]]),
        ([1.0, 2.0], np.empty((2, 0))),
        (["a", "b"], [[1.0], [2.0]]),
    ],
)
def test_malformed_samples_raise_data_error(y, X):
    with pytest.raises(DataError):
        Sample.create(y, X)


def test_names_and_labels_must_match_shape():
    with pytest.raises(DataError):
        Sample.create(np.arange(3.0), np.ones((3, 2)), names=["a"])
    with pytest.raises(DataError):
        Sample.create(np.arange(3.0), np.ones((3, 2)), labels=[1, 2])


def test_usable_rows_with_sentinels():
    y = np.array([1.0, -999.0, 3.0, 4.0])
    X = np.array([[1.0, 2.0], [1.0, 2.0], [-1.0, 2.0], [1.0, -1.0]])
    sample = Sample.create(y, X, y_missing=-999.0, x_missing=-1.0)
    both = VariableSubset.of([0, 1], 2)
    np.testing.assert_array_equal(sample.usable_rows(both), [True, False, False, False])
    first = VariableSubset.of([0], 2)
    np.testing.assert_array_equal(sample.usable_rows(first), [True, False, False, True])


def test_usable_rows_with_nan():
    y = np.array([1.0, np.nan, 3.0])
    X = np.array([[1.0], [2.0], [np.nan]])
    sample = Sample.create(y, X)
    np.testing.assert_array_equal(
        sample.usable_rows(VariableSubset.of([0], 1)), [True, False, False]
    )


def test_correlation_signs():
    t = np.arange(10.0)
    X = np.column_stack([t, -t, np.ones(10)])
    sample = Sample.create(2.0 * t + 1.0, X)
    np.testing.assert_array_equal(sample.correlation_signs(), [1, -1, -1])


@pytest.mark.parametrize(
    "bad, missing",
    [
        (np.nan, -999.0),
        (np.inf, -999.0),
        (-np.inf, np.nan),
    ],
)
def test_non_finite_values_other_than_the_marker_raise(bad, missing):
    y = np.arange(8.0)
    X = np.column_stack([np.arange(8.0), np.arange(8.0) ** 2])
    X[5, 0] = bad
    with pytest.raises(DataError):
        Sample.create(y, X, y_missing=missing, x_missing=missing)

    y[2] = bad
    with pytest.raises(DataError):
        Sample.create(y, X[:, 1], y_missing=missing, x_missing=missing)


def test_infinite_marker_is_missing():
    y = np.array([1.0, 2.0, np.inf, 4.0])
    sample = Sample.create(y, np.arange(4.0), y_missing=np.inf)
    np.testing.assert_array_equal(
        sample.usable_rows(VariableSubset.of([0], 1)), [True, True, False, True]
    )
