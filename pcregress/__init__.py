# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
pcregress
=========

Best-subset regression search: ranks linear equations over combinations
of candidate independent variables, using ordinary least squares for
single variables and principal components regression for larger
combinations.

Public API
~~~~~~~~~~
- Search
    - `search`, `CombinationSearch`, `SearchConfig`, `SearchResult`
- Data
    - `Sample`, `sample_from_series`
- Numerics
    - `inverse`, `jacobi`, `principal_components`, `fit`
- Reporting
    - `format_report`, `summary_frame`
- Errors
    - `DataError`, `NoModelFound`, `NumericalFailure`,
      `InsufficientDataFailure`

Example
-------
>>> import numpy as np, pcregress as pcr
>>> x = np.arange(1.0, 7.0)
>>> result = pcr.search(pcr.Sample.create(2 * x, x[:, None]))
>>> float(round(result.best.coefficients[0], 6))
2.0
"""

from importlib.metadata import version as _pkg_version

from .components import PrincipalComponents, principal_components
from .eigen import EigenResult, EigenStatus, jacobi
from .exceptions import (
    CandidateFailure,
    DataError,
    DimensionMismatch,
    InsufficientDataFailure,
    NoModelFound,
    NumericalFailure,
    RegressionSearchError,
)
from .matrix import InverseMode, InverseResult, index_sort, inverse, multiply, solve, transpose
from .regression import RegressionFit, fit
from .report import format_report, series_frame, summary_frame
from .sample import Sample
from .search import (
    CombinationSearch,
    SearchConfig,
    SearchContext,
    SearchEvent,
    SearchResult,
    evaluate_subset,
    search,
)
from .series import sample_from_series
from .store import CandidateModel, ResultStore
from .subset import VariableSubset
from .tables import critical_t_value

__all__ = [
    "search",
    "CombinationSearch",
    "SearchConfig",
    "SearchContext",
    "SearchEvent",
    "SearchResult",
    "evaluate_subset",
    "Sample",
    "sample_from_series",
    "VariableSubset",
    "CandidateModel",
    "ResultStore",
    "transpose",
    "multiply",
    "inverse",
    "solve",
    "index_sort",
    "InverseMode",
    "InverseResult",
    "jacobi",
    "EigenResult",
    "EigenStatus",
    "principal_components",
    "PrincipalComponents",
    "fit",
    "RegressionFit",
    "critical_t_value",
    "format_report",
    "summary_frame",
    "series_frame",
    "RegressionSearchError",
    "DataError",
    "DimensionMismatch",
    "CandidateFailure",
    "NumericalFailure",
    "InsufficientDataFailure",
    "NoModelFound",
]

# ---------------------------------------------------------------------
# Version string (helps “pip show pcregress”, Sphinx, etc.)
# ---------------------------------------------------------------------
try:  # installed via pip / build backend
    __version__ = _pkg_version(__name__)
except Exception:  # running from a checkout
    __version__ = "0.0.0.dev0"

# ---------------------------------------------------------------------
# Library logging stays silent unless the application configures it.
# ---------------------------------------------------------------------
import logging as _logging

_logging.getLogger(__name__).addHandler(_logging.NullHandler())
