# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import logging

import numpy as np
import pytest

from pcregress.exceptions import DimensionMismatch
from pcregress.matrix import (
    InverseMode,
    index_sort,
    inverse,
    multiply,
    solve,
    transpose,
)
from pcregress.utils import random_nonsingular

TEST_ITERATIONS = 25
logger = logging.getLogger(__name__)


def test_inverse_round_trip_random_nonsingular():
    for i in range(TEST_ITERATIONS):
        n = 2 + i % 9
        A = random_nonsingular(n, seed=i)
        result = inverse(A)
        logger.debug(f"\nA:\n{A}\ninverse:\n{result.inverse}\n")
        assert not result.singular
        np.testing.assert_allclose(result.inverse @ A, np.eye(n), atol=1e-9)
        np.testing.assert_allclose(A @ result.inverse, np.eye(n), atol=1e-9)


def test_inverse_determinant_matches_numpy():
    rng = np.random.default_rng(7)
    for _ in range(TEST_ITERATIONS):
        A = rng.normal(size=(6, 6))
        result = inverse(A)
        assert np.isclose(result.determinant, np.linalg.det(A), rtol=1e-9)


def test_inverse_does_not_modify_input():
    A = random_nonsingular(4, seed=3)
    before = A.copy()
    inverse(A)
    np.testing.assert_array_equal(A, before)


def test_permutation_matrix_determinant_sign():
    P = np.array([[0.0, 1.0], [1.0, 0.0]])
    result = inverse(P)
    assert result.determinant == -1.0
    np.testing.assert_allclose(result.inverse, P)


def test_singular_matrix_is_flagged():
    result = inverse(np.array([[1.0, 2.0], [2.0, 4.0]]))
    assert result.singular
    assert result.inverse is None
    assert result.determinant is None

    assert inverse(np.zeros((3, 3))).singular


def test_augmented_inverse_and_solutions():
    rng = np.random.default_rng(11)
    A = random_nonsingular(5, seed=11)
    b = rng.normal(size=5)
    result = inverse(np.column_stack([A, b]), mode=InverseMode.INVERSE_AND_SOLUTIONS)
    np.testing.assert_allclose(result.solution, np.linalg.solve(A, b), atol=1e-10)
    np.testing.assert_allclose(result.inverse, np.linalg.inv(A), atol=1e-10)
    assert np.isclose(result.determinant, np.linalg.det(A), rtol=1e-9)


def test_solutions_only_skips_inverse():
    A = random_nonsingular(4, seed=2)
    b = np.arange(1.0, 5.0)
    result = inverse(np.column_stack([A, b]), mode=InverseMode.SOLUTIONS_ONLY)
    assert result.inverse is None
    np.testing.assert_allclose(A @ result.solution, b, atol=1e-10)


def test_solve_wrapper():
    A = random_nonsingular(3, seed=5)
    x0 = np.array([1.0, -2.0, 0.5])
    np.testing.assert_allclose(solve(A, A @ x0), x0, atol=1e-10)
    assert solve(np.ones((2, 2)), np.ones(2)) is None


def test_inverse_shape_checks():
    with pytest.raises(DimensionMismatch):
        inverse(np.ones((2, 3)))
    with pytest.raises(DimensionMismatch):
        inverse(np.eye(2), mode=InverseMode.SOLUTIONS_ONLY)
    with pytest.raises(DimensionMismatch):
        inverse(np.empty((0, 0)))


def test_multiply_matrix_and_vector():
    A = np.arange(6.0).reshape(2, 3)
    B = np.arange(12.0).reshape(3, 4)
    np.testing.assert_allclose(multiply(A, B), A @ B)
    v = np.array([1.0, 0.0, -1.0])
    np.testing.assert_allclose(multiply(A, v), A @ v)


def test_multiply_dimension_mismatch():
    with pytest.raises(DimensionMismatch):
        multiply(np.ones((2, 3)), np.ones((2, 3)))
    with pytest.raises(DimensionMismatch):
        multiply(np.ones((2, 3)), np.ones(2))


def test_transpose():
    A = np.arange(6.0).reshape(2, 3)
    At = transpose(A)
    np.testing.assert_array_equal(At, A.T)
    At[0, 0] = 99.0
    assert A[0, 0] == 0.0
    with pytest.raises(DimensionMismatch):
        transpose(np.empty((0, 3)))


def test_index_sort_is_stable():
    order = index_sort([3.0, 1.0, 2.0, 1.0])
    assert order.tolist() == [1, 3, 2, 0]
    assert index_sort([]).tolist() == []
