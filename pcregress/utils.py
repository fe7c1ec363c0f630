# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

from typing import Optional, Sequence

import numpy as np

PIVOT_EPS: float = 1e-10


def permutation_sign(perm: Sequence[int]) -> float:
    """Return +1 or –1 depending on permutation parity."""
    visited = [False] * len(perm)
    cycles = 0
    for i in range(len(perm)):
        if not visited[i]:
            cycles += 1
            j = i
            while not visited[j]:
                visited[j] = True
                j = perm[j]
    swaps = len(perm) - cycles  # n − #cycles
    return -1.0 if swaps & 1 else 1.0


def sign(value: float) -> int:
    """+1 for values >= 0, -1 otherwise (NaN counts as negative)."""
    return 1 if value >= 0 else -1


def is_missing(values: np.ndarray, sentinel: float) -> np.ndarray:
    """Boolean mask of entries equal to the sentinel (NaN-aware)."""
    values = np.asarray(values, dtype=float)
    if np.isnan(sentinel):
        return np.isnan(values)
    return values == sentinel


def random_nonsingular(n: int, seed: Optional[int] = None) -> np.ndarray:
    """
    Random orthogonal matrix with its columns scaled by strictly
    non-zero factors, so the result is guaranteed invertible.

    Returns
    -------
    Matrix with float64 dtype
    """
    rng = np.random.default_rng(seed)
    Q, _R = np.linalg.qr(rng.standard_normal((n, n)))
    scales = rng.uniform(0.5, 10.0, size=n)
    return np.asarray(Q * scales)


def random_symmetric(n: int, seed: Optional[int] = None) -> np.ndarray:
    """Dense random symmetric matrix (M + Mᵀ) / 2."""
    rng = np.random.default_rng(seed)
    M = rng.standard_normal((n, n))
    return (M + M.T) / 2.0
