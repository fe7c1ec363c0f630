# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Build a `Sample` from pandas time series.

The dependent series defines the observations; independent series are
aligned to its index. An analysis period and a list of calendar months
can restrict the rows that enter the search.
"""

import logging
import re
from typing import Iterable, List, Optional, Sequence, Union

import numpy as np
import pandas as pd

from .exceptions import DataError
from .sample import Sample

logger = logging.getLogger(__name__)


def parse_months(text: Optional[str]) -> Optional[List[int]]:
    """
    Parse a month list such as "4, 5 6". Empty, None or "*" mean all
    months and return None.
    """
    if text is None:
        return None
    text = text.strip()
    if text in ("", "*"):
        return None
    months = []
    for token in re.split(r"[\s,]+", text):
        if not token:
            continue
        try:
            month = int(token)
        except ValueError as e:
            raise DataError(f"invalid month {token!r}") from e
        if not 1 <= month <= 12:
            raise DataError(f"month {month} is outside 1..12")
        months.append(month)
    return months


def _independent_frame(
    independent: Union[pd.DataFrame, Sequence[pd.Series]],
) -> pd.DataFrame:
    if isinstance(independent, pd.DataFrame):
        frame = independent.copy()
    else:
        series = list(independent)
        if not series:
            raise DataError("at least one independent series is required")
        names = [
            s.name if s.name is not None else f"X{j + 1}" for j, s in enumerate(series)
        ]
        frame = pd.concat([s.rename(None) for s in series], axis=1)
        frame.columns = names
    if frame.shape[1] == 0:
        raise DataError("at least one independent series is required")
    frame.columns = [str(c) for c in frame.columns]
    return frame


def sample_from_series(
    dependent: pd.Series,
    independent: Union[pd.DataFrame, Sequence[pd.Series]],
    start=None,
    end=None,
    months: Optional[Iterable[int]] = None,
    missing: float = np.nan,
) -> Sample:
    """
    Parameters
    ----------
    dependent : pd.Series
        Y, indexed by time (any sortable index).
    independent : pd.DataFrame | list[pd.Series]
        Candidate X series; reindexed onto `dependent.index`.
    start, end : index labels | None
        Inclusive analysis period; defaults to the full period.
    months : iterable of int | None
        Only keep rows whose month (1..12) is listed. Requires a
        DatetimeIndex or PeriodIndex.
    missing : float
        Sentinel used for missing values in the inputs. Values absent after
        alignment are always treated as missing.

    Returns
    -------
    Sample with NaN as the missing-value marker on both sides.
    """
    if not isinstance(dependent, pd.Series):
        raise DataError("dependent data must be a pandas Series")
    frame = _independent_frame(independent)

    y = dependent.sort_index()
    frame = frame.reindex(y.index)
    if not np.isnan(missing):
        y = y.replace(missing, np.nan)
        frame = frame.replace(missing, np.nan)

    if start is not None or end is not None:
        y = y.loc[start:end]
        frame = frame.loc[start:end]

    if months is not None:
        months = sorted(set(int(m) for m in months))
        if not isinstance(y.index, (pd.DatetimeIndex, pd.PeriodIndex)):
            raise DataError("month selection requires a DatetimeIndex or PeriodIndex")
        keep = np.asarray(y.index.month.isin(months))
        y = y[keep]
        frame = frame[keep]

    logger.debug(
        f"sample_from_series(): {len(y)} observations, {frame.shape[1]} series"
    )
    return Sample.create(
        y.to_numpy(dtype=float),
        frame.to_numpy(dtype=float),
        names=list(frame.columns),
        labels=list(y.index),
    )
