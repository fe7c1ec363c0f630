# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Dense matrix helpers used by the regression solver.

The inverse is the Gauss-Jordan complete elimination with the maximum
pivot strategy (Carnahan, Luther & Wilkes, *Applied Numerical Methods*,
1969, pp. 290-291). Everything else is a thin, shape-checked wrapper
around NumPy.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import numpy as np

from .exceptions import DimensionMismatch
from .utils import PIVOT_EPS, permutation_sign

logger = logging.getLogger(__name__)


class InverseMode(Enum):
    INVERSE_ONLY = "inverse"
    INVERSE_AND_SOLUTIONS = "inverse_and_solutions"
    SOLUTIONS_ONLY = "solutions"


@dataclass(frozen=True)
class InverseResult:
    """
    Outcome of `inverse`.

    Attributes
    ----------
    singular : bool
        True when no pivot larger than the threshold was left. All other
        fields are None in that case.
    determinant : float | None
    inverse : (n, n) ndarray | None
        Not computed in SOLUTIONS_ONLY mode.
    solution : (n,) ndarray | None
        Only computed when an augmented matrix was supplied.
    """

    singular: bool
    determinant: Optional[float] = None
    inverse: Optional[np.ndarray] = None
    solution: Optional[np.ndarray] = None


def _as_matrix(A, name: str = "A") -> np.ndarray:
    A = np.asarray(A, dtype=float)
    if A.ndim != 2 or A.size == 0:
        raise DimensionMismatch(f"{name} must be a non-empty 2-D array, got shape {A.shape}")
    return A


def transpose(A: np.ndarray) -> np.ndarray:
    """Return Aᵀ as a new array."""
    return _as_matrix(A).T.copy()


def multiply(A: np.ndarray, B: np.ndarray) -> np.ndarray:
    """
    Matrix × matrix or matrix × vector product.

    Raises
    ------
    DimensionMismatch : if the inner dimensions disagree.
    """
    A = _as_matrix(A)
    B = np.asarray(B, dtype=float)
    if B.ndim not in (1, 2) or B.size == 0:
        raise DimensionMismatch(f"B must be a non-empty vector or matrix, got shape {B.shape}")
    if A.shape[1] != B.shape[0]:
        raise DimensionMismatch(
            f"inner dimensions disagree: {A.shape} x {B.shape}"
        )
    return A @ B


def inverse(
    A: np.ndarray,
    mode: InverseMode = InverseMode.INVERSE_ONLY,
    eps: float = PIVOT_EPS,
) -> InverseResult:
    """
    Gauss-Jordan inverse with maximum pivot strategy.

    At step k the pivot is the largest-magnitude element whose row and
    column have not been used yet. Row and column subscripts of the
    pivots are kept in `irow` / `jcol` and used at the end to unscramble
    the solutions and the inverse. The determinant is the product of the
    pivots, with its sign flipped when the recovered permutation is odd.

    Parameters
    ----------
    A : ndarray
        (n, n) for INVERSE_ONLY, (n, n+1) augmented [A | b] otherwise.
        The input is never modified.
    mode : InverseMode
    eps : float
        A largest available pivot of magnitude <= eps marks the matrix
        as singular.

    Returns
    -------
    InverseResult
    """
    a = _as_matrix(A).copy()
    n = a.shape[0]
    width = n if mode is InverseMode.INVERSE_ONLY else n + 1
    if a.shape[1] != width:
        if mode is InverseMode.INVERSE_ONLY:
            raise DimensionMismatch("Only n by n matrices can be inverted.")
        raise DimensionMismatch(
            "Equation solutions can only be calculated for n by n+1 matrices."
        )

    irow = np.zeros(n, dtype=int)
    jcol = np.zeros(n, dtype=int)
    row_free = np.ones(n, dtype=bool)
    col_free = np.ones(n, dtype=bool)
    others = np.empty(n, dtype=bool)
    keep_cols = np.empty(width, dtype=bool)
    deter = 1.0

    for k in range(n):
        # Search for the pivot among unused rows / columns
        mag = np.abs(a[:, :n])
        mag[~row_free, :] = -1.0
        mag[:, ~col_free] = -1.0
        i, j = divmod(int(np.argmax(mag)), n)
        pivot = a[i, j]

        if abs(pivot) <= eps:
            logger.debug(f"inverse(): pivot {pivot!r} at step {k} below {eps}, singular")
            return InverseResult(singular=True)

        irow[k], jcol[k] = i, j
        row_free[i] = False
        col_free[j] = False
        deter *= pivot

        # Normalize pivot row
        a[i, :] /= pivot
        a[i, j] = 1.0 / pivot

        # Eliminate in every other row and develop the inverse in place
        others[:] = True
        others[i] = False
        keep_cols[:] = True
        keep_cols[j] = False
        factors = a[others, j].copy()
        a[np.ix_(others, keep_cols)] -= np.outer(factors, a[i, keep_cols])
        a[others, j] = -factors / pivot

    # jord[irow[i]] = jcol[i]; its parity fixes the determinant sign
    jord = np.empty(n, dtype=int)
    jord[irow] = jcol
    deter *= permutation_sign(jord.tolist())

    solution = None
    if mode is not InverseMode.INVERSE_ONLY:
        solution = np.empty(n)
        solution[jcol] = a[irow, n]

    if mode is InverseMode.SOLUTIONS_ONLY:
        return InverseResult(singular=False, determinant=float(deter), solution=solution)

    # Unscramble the inverse, first by rows then by columns
    by_rows = np.empty((n, n))
    by_rows[jcol, :] = a[irow, :n]
    inv = np.empty((n, n))
    inv[:, irow] = by_rows[:, jcol]

    return InverseResult(
        singular=False, determinant=float(deter), inverse=inv, solution=solution
    )


def solve(A: np.ndarray, b: np.ndarray) -> Optional[np.ndarray]:
    """Solve Ax = b through the augmented Gauss-Jordan path; None if singular."""
    A = _as_matrix(A)
    b = np.asarray(b, dtype=float).ravel()
    if b.shape[0] != A.shape[0]:
        raise DimensionMismatch(f"b has {b.shape[0]} rows, A has {A.shape[0]}")
    result = inverse(np.column_stack([A, b]), mode=InverseMode.SOLUTIONS_ONLY)
    return None if result.singular else result.solution


def index_sort(values) -> np.ndarray:
    """
    Stable ascending sort that returns the permutation of original
    indices; ties keep their original order.
    """
    values = np.asarray(values, dtype=float).ravel()
    return np.argsort(values, kind="stable")
