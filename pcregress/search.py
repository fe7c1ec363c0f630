# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Best-subset regression search.

Subsets are grown one variable at a time. Size 1 tries every
variable with ordinary least squares. Size n > 1 extends the first
n-1 variables of each model currently held in the result store with
every other variable and fits the result by principal components
regression, adding components in descending-eigenvalue order while
the newest one stays significant and the back-transformed coefficients
keep the sign of each variable's correlation with y. The search stops
at the first size that leaves no model of that size in the store.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np

from .components import principal_components
from .exceptions import CandidateFailure, InsufficientDataFailure, NoModelFound, NumericalFailure
from .regression import MIN_RESIDUAL_DOF, RegressionFit, design_matrix, fit
from .sample import Sample
from .store import CandidateModel, ResultStore
from .subset import VariableSubset
from .tables import critical_t_value
from .utils import sign

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchConfig:
    """
    Search parameters.

    max_stored_combinations : size K of the best-of-K store.
    critical_t : fixed |t| threshold, used unless confidence_level is set.
    confidence_level : when set, the threshold is looked up per fit from
        Student's t with that fit's residual degrees of freedom.
    min_observations : minimum usable rows for a subset.
    max_components : cap on principal components per combination
        (None means the subset size).
    max_variables : largest subset size to enumerate (None means P).
    max_evaluations, time_budget : optional budgets (candidate count,
        wall-clock seconds); exhausting one ends the search early.
    workers : threads used to evaluate the candidates of one size.
    """

    max_stored_combinations: int = 20
    critical_t: float = 1.2
    confidence_level: Optional[float] = None
    min_observations: int = 6
    max_components: Optional[int] = None
    max_variables: Optional[int] = None
    max_evaluations: Optional[int] = None
    time_budget: Optional[float] = None
    workers: int = 1

    def __post_init__(self):
        if self.max_stored_combinations < 1:
            raise ValueError("max_stored_combinations must be at least 1")
        if self.critical_t < 0:
            raise ValueError("critical_t must be non-negative")
        if self.confidence_level is not None and not 0.0 < self.confidence_level < 1.0:
            raise ValueError("confidence_level must lie in (0, 1)")
        if self.min_observations < MIN_RESIDUAL_DOF + 2:
            raise ValueError(
                f"min_observations must be at least {MIN_RESIDUAL_DOF + 2}"
            )
        for name in ("max_components", "max_variables", "max_evaluations"):
            value = getattr(self, name)
            if value is not None and value < 1:
                raise ValueError(f"{name} must be at least 1")
        if self.time_budget is not None and self.time_budget <= 0:
            raise ValueError("time_budget must be positive")
        if self.workers < 1:
            raise ValueError("workers must be at least 1")

    def threshold(self, dof: int) -> float:
        if self.confidence_level is None:
            return self.critical_t
        return critical_t_value(self.confidence_level, dof)


@dataclass(frozen=True)
class SearchEvent:
    kind: str
    size: int
    subset: Optional[VariableSubset] = None
    detail: Dict[str, Any] = field(default_factory=dict)


Observer = Callable[[SearchEvent], None]


@dataclass(frozen=True)
class SearchContext:
    """Read-only state shared by every evaluation of one search."""

    sample: Sample
    config: SearchConfig
    signs: np.ndarray

    @classmethod
    def create(cls, sample: Sample, config: SearchConfig) -> "SearchContext":
        signs = sample.correlation_signs()
        signs.setflags(write=False)
        return cls(sample=sample, config=config, signs=signs)


@dataclass
class SearchStats:
    generated: int = 0
    evaluated: int = 0
    valid: int = 0
    rejected: int = 0
    failed: int = 0
    largest_size: int = 0
    truncated: bool = False
    elapsed: float = 0.0


@dataclass(frozen=True)
class SearchResult:
    models: List[CandidateModel]  # ranked, best first
    sample: Sample
    config: SearchConfig
    stats: SearchStats

    def __len__(self) -> int:
        return len(self.models)

    def __iter__(self):
        return iter(self.models)

    @property
    def best(self) -> CandidateModel:
        return self.models[0]


def generate_candidates(
    size: int, stored: Sequence[VariableSubset], n_variables: int
) -> List[VariableSubset]:
    """
    Candidate subsets of the given size.

    For size 1 every variable. Otherwise each stored subset with at least
    size-1 variables contributes its first size-1 variables as a prefix,
    extended by each variable not in it; a candidate is dropped when an
    earlier stored subset already shares size-1 variables with it, since
    that subset has produced it.
    """
    if size == 1:
        return [VariableSubset.of([j], n_variables) for j in range(n_variables)]

    candidates = []
    for i, combo in enumerate(stored):
        if len(combo) < size - 1:
            continue
        prefix = combo.prefix(size - 1)
        for j in range(n_variables):
            if j in prefix:
                continue
            candidate = prefix.with_variable(j)
            if any(earlier.overlap(candidate) >= size - 1 for earlier in stored[:i]):
                continue
            candidates.append(candidate)
    return candidates


def _significant_ols(context: SearchContext, x: np.ndarray, y: np.ndarray):
    result = fit(design_matrix(x), y)
    threshold = context.config.threshold(result.dof)
    if np.any(np.abs(result.t_statistics[1:]) < threshold):
        return None, None, 0
    return result, result.coefficients, 0


def _significant_pcr(context: SearchContext, x: np.ndarray, y: np.ndarray, cols):
    pcs = principal_components(x, context.config.max_components)
    n = y.shape[0]
    best: Optional[RegressionFit] = None
    coefficients = None
    kept = 0
    for i in range(1, pcs.n_components + 1):
        if n - i - 1 < MIN_RESIDUAL_DOF:
            break
        result = fit(design_matrix(pcs.scores[:, :i]), y)
        if not abs(result.t_statistics[i]) >= context.config.threshold(result.dof):
            break
        converted = pcs.back_transform(result.coefficients, i)
        if all(sign(converted[k + 1]) == context.signs[j] for k, j in enumerate(cols)):
            best, coefficients, kept = result, converted, i
        else:
            logger.debug(f"coefficient of inappropriate sign with {i} component(s)")
    return best, coefficients, kept


def evaluate_subset(
    context: SearchContext, subset: VariableSubset
) -> Optional[CandidateModel]:
    """
    Fit one subset: OLS for a single variable, principal components
    regression otherwise.

    Returns
    -------
    CandidateModel, or None when the equation fails the significance or
    sign checks.

    Raises
    ------
    InsufficientDataFailure, NumericalFailure
    """
    sample, config = context.sample, context.config
    used = sample.usable_rows(subset)
    n_used = int(used.sum())
    if n_used < config.min_observations:
        raise InsufficientDataFailure(
            f"{n_used} usable observations, need {config.min_observations}"
        )

    cols = list(subset.indices)
    x = sample.X[np.ix_(used, cols)]
    y = sample.y[used]
    constant = np.ptp(x, axis=0) == 0
    if constant.any():
        raise NumericalFailure(
            f"zero-variance column(s) {[cols[k] for k in np.flatnonzero(constant)]}"
        )

    if len(cols) == 1:
        result, coefficients, kept = _significant_ols(context, x, y)
    else:
        result, coefficients, kept = _significant_pcr(context, x, y, cols)
    if result is None:
        return None

    full = np.full(sample.n_variables, np.nan)
    full[cols] = coefficients[1:]
    computed = np.full(sample.n_observations, np.nan)
    computed[used] = result.computed
    errors = np.full(sample.n_observations, np.nan)
    errors[used] = result.errors
    for arr in (full, computed, errors, used):
        arr.setflags(write=False)

    return CandidateModel(
        subset=subset,
        intercept=float(coefficients[0]),
        coefficients=full,
        r=result.r,
        standard_error=result.standard_error,
        n_observations=n_used,
        n_components=kept,
        used=used,
        computed=computed,
        errors=errors,
    )


def _evaluate(
    context: SearchContext, subset: VariableSubset
) -> Tuple[Optional[CandidateModel], Optional[CandidateFailure]]:
    try:
        return evaluate_subset(context, subset), None
    except CandidateFailure as e:
        return None, e


class CombinationSearch:
    """
    Runs one search over a sample.

    Parameters
    ----------
    sample : Sample
    config : SearchConfig | None
    observer : callable | None
        Receives a SearchEvent for every step of the search.
    """

    def __init__(
        self,
        sample: Sample,
        config: Optional[SearchConfig] = None,
        observer: Optional[Observer] = None,
    ):
        self.sample = sample
        self.config = config if config is not None else SearchConfig()
        self.observer = observer

    def _emit(self, kind: str, size: int, subset=None, **detail):
        event = SearchEvent(kind=kind, size=size, subset=subset, detail=detail)
        logger.debug(
            f"{kind} size={size}"
            + (f" [{subset.label()}]" if subset is not None else "")
            + (f" {detail}" if detail else "")
        )
        if self.observer is not None:
            self.observer(event)

    def _out_of_time(self, started: float) -> bool:
        budget = self.config.time_budget
        return budget is not None and time.monotonic() - started >= budget

    def _out_of_budget(self, stats: SearchStats, started: float) -> bool:
        limit = self.config.max_evaluations
        if limit is not None and stats.evaluated >= limit:
            return True
        return self._out_of_time(started)

    def _record(self, store, stats, size, subset, model, failure) -> bool:
        stats.evaluated += 1
        if failure is not None:
            stats.failed += 1
            self._emit(
                "candidate_failed",
                size,
                subset,
                error=type(failure).__name__,
                reason=str(failure),
            )
            return False
        if model is None:
            stats.rejected += 1
            self._emit("candidate_rejected", size, subset)
            return False
        stats.valid += 1
        kept = store.offer(model)
        self._emit(
            "candidate_retained" if kept else "candidate_discarded",
            size,
            subset,
            standard_error=model.standard_error,
            n_components=model.n_components,
        )
        return kept

    def _run_level(self, context, store, stats, size, candidates, started) -> int:
        kept = 0
        if self.config.workers == 1:
            for subset in candidates:
                if self._out_of_budget(stats, started):
                    stats.truncated = True
                    break
                model, failure = _evaluate(context, subset)
                kept += self._record(store, stats, size, subset, model, failure)
            return kept

        if self.config.max_evaluations is not None:
            remaining = self.config.max_evaluations - stats.evaluated
            if remaining < len(candidates):
                candidates = candidates[: max(remaining, 0)]
                stats.truncated = True
        with ThreadPoolExecutor(max_workers=self.config.workers) as pool:
            futures = [pool.submit(_evaluate, context, s) for s in candidates]
            for subset, future in zip(candidates, futures):
                if self._out_of_time(started):
                    stats.truncated = True
                    for pending in futures:
                        pending.cancel()
                    break
                model, failure = future.result()
                kept += self._record(store, stats, size, subset, model, failure)
        return kept

    def run(self) -> SearchResult:
        """
        Raises
        ------
        NoModelFound : no equation survived.
        """
        cfg = self.config
        started = time.monotonic()
        context = SearchContext.create(self.sample, cfg)
        store = ResultStore(cfg.max_stored_combinations)
        stats = SearchStats()
        n_variables = self.sample.n_variables
        limit = min(n_variables, cfg.max_variables or n_variables)

        for size in range(1, limit + 1):
            candidates = generate_candidates(size, store.subsets(), n_variables)
            stats.generated += len(candidates)
            stats.largest_size = size
            self._emit("level_started", size, candidates=len(candidates))

            kept = self._run_level(context, store, stats, size, candidates, started)
            at_size = sum(1 for m in store if len(m.subset) == size)
            logger.info(
                f"size {size}: {len(candidates)} candidates, {kept} retained, "
                f"{at_size} of size {size} in store"
            )
            self._emit("level_finished", size, retained=kept, stored=at_size)

            if stats.truncated:
                logger.warning(
                    f"search budget exhausted after {stats.evaluated} evaluations"
                )
                self._emit("budget_exhausted", size, evaluated=stats.evaluated)
                break
            if at_size == 0:
                break

        stats.elapsed = time.monotonic() - started
        self._emit(
            "search_finished",
            stats.largest_size,
            evaluated=stats.evaluated,
            valid=stats.valid,
            stored=len(store),
        )
        if len(store) == 0:
            raise NoModelFound(
                f"no valid equations found among {stats.evaluated} evaluated combinations"
            )
        return SearchResult(
            models=store.ranked(), sample=self.sample, config=cfg, stats=stats
        )


def search(
    sample: Sample,
    config: Optional[SearchConfig] = None,
    observer: Optional[Observer] = None,
    **overrides,
) -> SearchResult:
    """
    Run a best-subset search.

    Keyword overrides are applied on top of `config` (or the defaults),
    e.g. ``search(sample, max_stored_combinations=5, critical_t=2.0)``.
    """
    config = config if config is not None else SearchConfig()
    if overrides:
        config = replace(config, **overrides)
    return CombinationSearch(sample, config, observer).run()
