# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Exceptions raised by the regression search.

Only `DataError` and `NoModelFound` escape `search()`. The
`CandidateFailure` family is local to one variable subset: the engine
catches it, discards that subset and carries on.
"""


class RegressionSearchError(Exception):
    """Base class for every error raised by pcregress."""


class DataError(RegressionSearchError, ValueError):
    """The sample is empty or malformed (e.g. mismatched lengths)."""


class DimensionMismatch(RegressionSearchError, ValueError):
    """Matrix shapes are incompatible with the requested operation."""


class CandidateFailure(RegressionSearchError):
    """A single candidate subset could not be evaluated."""


class NumericalFailure(CandidateFailure):
    """Singular matrix, eigen non-convergence or a zero-variance column."""


class InsufficientDataFailure(CandidateFailure):
    """Too few usable observations or residual degrees of freedom."""


class NoModelFound(RegressionSearchError):
    """The search finished but no valid equation was retained."""
