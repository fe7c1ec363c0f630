# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Tabular and plain-text views of a `SearchResult`.
"""

from datetime import datetime
from typing import List, Optional

import numpy as np
import pandas as pd

from .search import SearchResult
from .store import CandidateModel


def summary_frame(result: SearchResult) -> pd.DataFrame:
    """One row per ranked equation: rank, variables, fit statistics, coefficients."""
    names = list(result.sample.names)
    rows = []
    for rank, model in enumerate(result.models, start=1):
        row = {
            "rank": rank,
            "variables": ", ".join(names[j] for j in model.subset),
            "standard_error": model.standard_error,
            "r": model.r,
            "n_observations": model.n_observations,
            "n_components": model.n_components,
            "intercept": model.intercept,
        }
        row.update(zip(names, model.coefficients))
        rows.append(row)
    columns = [
        "rank",
        "variables",
        "standard_error",
        "r",
        "n_observations",
        "n_components",
        "intercept",
    ] + names
    return pd.DataFrame(rows, columns=columns).set_index("rank")


def series_frame(result: SearchResult, model: CandidateModel) -> pd.DataFrame:
    """Observed, computed and error series for the rows the model used."""
    sample = result.sample
    frame = pd.DataFrame(
        {
            "observed": sample.y,
            "computed": model.computed,
            "error": model.errors,
        },
        index=pd.Index(sample.labels, name="observation"),
    )
    return frame[np.asarray(model.used)]


def _fmt(value: float, width: int = 10, digits: int = 3) -> str:
    return f"{value:{width}.{digits}f}"


def format_report(result: SearchResult, now: Optional[datetime] = None) -> str:
    """
    Equation summary followed by every ranked equation with its
    coefficients, statistics and observed / computed / error series.
    """
    cfg = result.config
    names = list(result.sample.names)
    now = now or datetime.now()
    threshold = (
        f"confidence level {cfg.confidence_level:.3f}"
        if cfg.confidence_level is not None
        else f"critical value of t-statistic = {cfg.critical_t:.2f}"
    )
    max_comp = cfg.max_components or result.sample.n_variables

    lines: List[str] = [
        f"REGRESSION COMBINATION SEARCH     {now:%Y-%m-%d %H:%M:%S}",
        f"Significance: {threshold}",
        f"Maximum number of principal components retained = {max_comp}",
        f"Number of combinations evaluated = {result.stats.evaluated}",
        f"Number of valid combinations = {result.stats.valid}",
    ]
    if result.stats.truncated:
        lines.append("Search stopped early: budget exhausted")

    lines += ["", "", "EQUATION SUMMARY:", ""]
    summary = summary_frame(result)[
        ["variables", "standard_error", "n_observations"]
    ].rename(
        columns={
            "variables": "VARIABLES",
            "standard_error": "STANDARD ERROR",
            "n_observations": "NO. OBS. USED",
        }
    )
    summary.index.name = "RANK"
    lines.append(summary.to_string(float_format=lambda v: f"{v:.3f}"))

    lines += ["", "", "RANKED REGRESSION EQUATIONS:"]
    for rank, model in enumerate(result.models, start=1):
        lines += ["", f"RANK {rank}", f"{'INTERCEPT':>12}{_fmt(model.intercept, 12)}"]
        for j in model.subset:
            lines.append(f"{names[j]:>12}{_fmt(model.coefficients[j], 12)}")
        lines += [
            "",
            f"       Number of observations used = {model.n_observations}",
            f"       Number of principal components used = {model.n_components}",
            f"       CORRELATION COEFFICIENT (R) = {model.r:.3f}",
            f"       STANDARD ERROR = {model.standard_error:.3f}",
            "",
            series_frame(result, model).to_string(float_format=lambda v: f"{v:.2f}"),
        ]
    return "\n".join(lines) + "\n"
