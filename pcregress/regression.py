# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .exceptions import DimensionMismatch, InsufficientDataFailure, NumericalFailure
from .matrix import inverse, multiply, transpose

logger = logging.getLogger(__name__)

MIN_RESIDUAL_DOF: int = 4


@dataclass(frozen=True)
class RegressionFit:
    """
    Normal-equation fit of y on a design matrix with an intercept column.

    `errors` follow the forecasting convention: computed minus observed.
    """

    coefficients: np.ndarray
    t_statistics: np.ndarray
    r: float
    standard_error: float
    mse: float
    computed: np.ndarray
    errors: np.ndarray
    n_observations: int

    @property
    def dof(self) -> int:
        return self.n_observations - self.coefficients.shape[0]


def design_matrix(columns: np.ndarray) -> np.ndarray:
    """Prepend a column of ones to an (n,) or (n, m) array."""
    columns = np.asarray(columns, dtype=float)
    if columns.ndim == 1:
        columns = columns[:, None]
    return np.column_stack([np.ones(columns.shape[0]), columns])


def pearson_r(observed: np.ndarray, computed: np.ndarray) -> float:
    """Correlation coefficient from raw sums."""
    n = observed.shape[0]
    so, sf = observed.sum(), computed.sum()
    dum1 = n * (observed @ computed) - so * sf
    dum2 = n * (observed @ observed) - so * so
    dum3 = n * (computed @ computed) - sf * sf
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(dum1 / np.sqrt(dum2 * dum3))


def fit(
    X: np.ndarray, y: np.ndarray, weights: Optional[np.ndarray] = None
) -> RegressionFit:
    """
    Least-squares coefficients b = (XᵀWX)⁻¹ XᵀW y.

    Parameters
    ----------
    X : (n, m+1) ndarray
        Design matrix; column 0 is the intercept column of ones.
    y : (n,) ndarray
    weights : (n,) ndarray | None
        Optional positive observation weights (W = diag(weights)).

    Returns
    -------
    RegressionFit
        t statistics are b_i / sqrt(diag((XᵀWX)⁻¹)_i * MSE); a zero MSE
        gives inf/NaN rather than an error.

    Raises
    ------
    InsufficientDataFailure : fewer than 4 residual degrees of freedom.
    NumericalFailure : XᵀWX is singular, or the fit is not finite.
    """
    X = np.asarray(X, dtype=float)
    y = np.asarray(y, dtype=float).ravel()
    if X.ndim != 2 or X.shape[0] != y.shape[0]:
        raise DimensionMismatch(f"X {X.shape} and y {y.shape} disagree")
    n, nvar = X.shape
    if n - nvar < MIN_RESIDUAL_DOF:
        raise InsufficientDataFailure(
            f"{n} observations leave {n - nvar} residual degrees of freedom, "
            f"need {MIN_RESIDUAL_DOF}"
        )

    Xt = transpose(X)
    if weights is not None:
        weights = np.asarray(weights, dtype=float).ravel()
        if weights.shape[0] != n:
            raise DimensionMismatch(f"weights {weights.shape} and y {y.shape} disagree")
        if np.any(weights <= 0):
            raise ValueError("weights must be strictly positive")
        XtW = Xt * weights
    else:
        XtW = Xt

    result = inverse(multiply(XtW, X))
    if result.singular:
        raise NumericalFailure("matrix inversion failed (XᵀX is singular)")
    xtx_inv = result.inverse

    coefficients = multiply(multiply(xtx_inv, XtW), y)
    computed = multiply(X, coefficients)
    errors = computed - y

    sse = float(errors @ errors) if weights is None else float(weights @ (errors * errors))
    mse = sse / (n - nvar)
    if not (np.all(np.isfinite(coefficients)) and np.isfinite(mse)):
        raise NumericalFailure("non-finite coefficients or mean squared error")
    with np.errstate(divide="ignore", invalid="ignore"):
        t_statistics = coefficients / np.sqrt(np.diag(xtx_inv) * mse)

    return RegressionFit(
        coefficients=coefficients,
        t_statistics=t_statistics,
        r=pearson_r(y, computed),
        standard_error=float(np.sqrt(mse)),
        mse=mse,
        computed=computed,
        errors=errors,
        n_observations=n,
    )
