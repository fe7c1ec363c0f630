# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import numpy as np

from .exceptions import DataError
from .subset import VariableSubset
from .utils import is_missing

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Sample:
    """
    One dependent series and a matrix of candidate independent series.

    Use `Sample.create`, which validates the input and makes read-only
    copies of the arrays.
    """

    y: np.ndarray  # (N,)
    X: np.ndarray  # (N, P)
    y_missing: float
    x_missing: float
    names: Tuple[str, ...]
    labels: Tuple[object, ...]

    @classmethod
    def create(
        cls,
        y,
        X,
        y_missing: float = np.nan,
        x_missing: float = np.nan,
        names: Optional[Sequence[str]] = None,
        labels: Optional[Sequence[object]] = None,
    ) -> "Sample":
        """
        Raises
        ------
        DataError : empty input, non-numeric data, mismatched lengths, or
            NaN / inf values that are not the missing-value marker.
        """
        try:
            y = np.array(y, dtype=float)
            X = np.array(X, dtype=float)
        except (TypeError, ValueError) as e:
            raise DataError(f"sample must be numeric: {e}") from e

        if y.ndim != 1 or y.size == 0:
            raise DataError(f"dependent data must be a non-empty 1-D array, got shape {y.shape}")
        if X.ndim == 1:
            X = X[:, None]
        if X.ndim != 2 or X.size == 0:
            raise DataError(f"independent data must be a non-empty 2-D array, got shape {X.shape}")
        if X.shape[0] != y.shape[0]:
            raise DataError(
                f"dependent data has {y.shape[0]} rows, independent data has {X.shape[0]}"
            )

        n, p = X.shape
        names = tuple(names) if names is not None else tuple(f"X{j + 1}" for j in range(p))
        if len(names) != p:
            raise DataError(f"{len(names)} names given for {p} independent variables")
        labels = tuple(labels) if labels is not None else tuple(range(n))
        if len(labels) != n:
            raise DataError(f"{len(labels)} row labels given for {n} observations")

        for side, values, sentinel in (
            ("dependent", y, y_missing),
            ("independent", X, x_missing),
        ):
            bad = ~np.isfinite(values) & ~is_missing(values, sentinel)
            if bad.any():
                raise DataError(
                    f"{side} data has {int(bad.sum())} non-finite value(s) "
                    f"other than the missing-value marker {sentinel!r}"
                )

        y.setflags(write=False)
        X.setflags(write=False)
        logger.debug(f"Sample.create(): {n} observations, {p} candidate variables")
        return cls(
            y=y,
            X=X,
            y_missing=float(y_missing),
            x_missing=float(x_missing),
            names=names,
            labels=labels,
        )

    @property
    def n_observations(self) -> int:
        return self.y.shape[0]

    @property
    def n_variables(self) -> int:
        return self.X.shape[1]

    def usable_rows(self, subset: VariableSubset) -> np.ndarray:
        """Rows where y and every selected column are present."""
        ok = ~is_missing(self.y, self.y_missing)
        for j in subset:
            ok &= ~is_missing(self.X[:, j], self.x_missing)
        return ok

    def correlation_signs(self) -> np.ndarray:
        """
        Sign (+1 / -1) of each variable's raw Pearson correlation with y,
        using the rows where both are present. Zero counts as positive.
        """
        y_ok = ~is_missing(self.y, self.y_missing)
        signs = np.empty(self.n_variables, dtype=int)
        for j in range(self.n_variables):
            ok = y_ok & ~is_missing(self.X[:, j], self.x_missing)
            yy, xx = self.y[ok], self.X[ok, j]
            n = yy.shape[0]
            dum1 = n * (xx @ yy) - xx.sum() * yy.sum()
            dum2 = n * (yy @ yy) - yy.sum() ** 2
            dum3 = n * (xx @ xx) - xx.sum() ** 2
            with np.errstate(divide="ignore", invalid="ignore"):
                r = dum1 / np.sqrt(dum2 * dum3)
            signs[j] = 1 if r >= 0 else -1
        return signs
