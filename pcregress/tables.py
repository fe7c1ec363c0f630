# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Critical values of Student's t distribution.
"""

from functools import lru_cache

from scipy import stats


@lru_cache(maxsize=1024)
def critical_t_value(confidence: float, dof: int, two_sided: bool = True) -> float:
    """
    Smallest |t| that is significant at the given confidence level.

    Parameters
    ----------
    confidence : float
        Confidence level in (0, 1), e.g. 0.95.
    dof : int
        Residual degrees of freedom (>= 1).
    two_sided : bool
        If True the tail probability 1 - confidence is split across
        both tails.
    """
    if not 0.0 < confidence < 1.0:
        raise ValueError(f"confidence must lie in (0, 1), got {confidence}")
    if dof < 1:
        raise ValueError(f"degrees of freedom must be positive, got {dof}")
    alpha = 1.0 - confidence
    q = 1.0 - alpha / 2.0 if two_sided else confidence
    return float(stats.t.ppf(q, dof))
