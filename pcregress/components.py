# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Principal components of the independent variables of one subset.

The correlation matrix is built from raw sums (Pearson), decomposed
with `eigen.jacobi`, and the z-scored data is projected onto the
eigenvectors in descending-eigenvalue order.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .eigen import jacobi
from .exceptions import InsufficientDataFailure, NumericalFailure

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PrincipalComponents:
    """
    Attributes
    ----------
    means : (k,) ndarray
    stds : (k,) ndarray
        Sample standard deviations (n - 1 denominator).
    correlation : (k, k) ndarray
    eigenvalues : (k,) ndarray
        Descending.
    eigenvectors : (k, k) ndarray
        Column j is the loading vector of component j.
    scores : (n, c) ndarray
        Values of the leading c components for every observation.
    """

    means: np.ndarray
    stds: np.ndarray
    correlation: np.ndarray
    eigenvalues: np.ndarray
    eigenvectors: np.ndarray
    scores: np.ndarray

    @property
    def n_components(self) -> int:
        return self.scores.shape[1]

    def back_transform(self, coefficients: np.ndarray, n_components: int) -> np.ndarray:
        """
        Convert [intercept, c_1 … c_m] fitted on the first m components
        into [intercept, b_1 … b_k] for the unstandardized variables.

        The component coefficients are first mapped onto the standardized
        variables through the eigenvectors, then divided by the standard
        deviations; the intercept absorbs the means.
        """
        coefficients = np.asarray(coefficients, dtype=float)
        if coefficients.shape[0] != n_components + 1:
            raise ValueError(
                f"expected {n_components + 1} coefficients, got {coefficients.shape[0]}"
            )
        standardized = self.eigenvectors[:, :n_components] @ coefficients[1:]
        slopes = standardized / self.stds
        intercept = coefficients[0] - float(slopes @ self.means)
        return np.concatenate([[intercept], slopes])


def correlation_matrix(x: np.ndarray) -> np.ndarray:
    """
    Pearson correlation matrix of the columns of x from raw sums.

    Raises
    ------
    NumericalFailure : if a pairwise denominator is zero.
    """
    x = np.asarray(x, dtype=float)
    n, k = x.shape
    sums = x.sum(axis=0)
    sums2 = (x * x).sum(axis=0)
    cross = x.T @ x

    R = np.eye(k)
    for i in range(k):
        for j in range(i + 1, k):
            num = n * cross[i, j] - sums[i] * sums[j]
            dum_i = n * sums2[i] - sums[i] * sums[i]
            dum_j = n * sums2[j] - sums[j] * sums[j]
            denom = np.sqrt(dum_i * dum_j)
            if denom == 0 or not np.isfinite(denom):
                raise NumericalFailure(
                    f"zero denominator correlating columns {i} and {j}"
                )
            R[i, j] = R[j, i] = num / denom
    return R


def principal_components(
    x: np.ndarray, max_components: Optional[int] = None
) -> PrincipalComponents:
    """
    Standardize the columns of x and project them onto the eigenvectors
    of their correlation matrix.

    Parameters
    ----------
    x : (n, k) ndarray
        Usable observations of the selected variables (no missing values).
    max_components : int | None
        Keep the leading min(k, max_components) components.

    Raises
    ------
    NumericalFailure
        A zero-variance column, or the Jacobi iteration did not converge.
    InsufficientDataFailure
        Fewer than two observations.
    """
    x = np.asarray(x, dtype=float)
    if x.ndim != 2:
        raise ValueError("x must be a 2-D array")
    n, k = x.shape
    if n < 2:
        raise InsufficientDataFailure("at least two observations are needed")

    constant = np.ptp(x, axis=0) == 0
    if constant.any():
        raise NumericalFailure(
            f"zero-variance column(s) {np.flatnonzero(constant).tolist()}"
        )

    means = x.mean(axis=0)
    sums = x.sum(axis=0)
    stds = np.sqrt(((x * x).sum(axis=0) - sums * sums / n) / (n - 1))

    R = correlation_matrix(x)
    eig = jacobi(R)
    if not eig.converged:
        raise NumericalFailure(
            f"eigenvalue/eigenvector computation did not converge in {eig.sweeps} sweeps"
        )

    keep = k if max_components is None else max(1, min(k, max_components))
    z = (x - means) / stds
    scores = z @ eig.eigenvectors[:, :keep]

    return PrincipalComponents(
        means=means,
        stds=stds,
        correlation=R,
        eigenvalues=eig.eigenvalues,
        eigenvectors=eig.eigenvectors,
        scores=scores,
    )
