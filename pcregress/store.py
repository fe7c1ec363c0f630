# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import logging
import threading
from dataclasses import dataclass
from typing import Iterator, List, Optional

import numpy as np

from .matrix import index_sort
from .subset import VariableSubset

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CandidateModel:
    """
    A fitted equation for one variable subset.

    `coefficients` spans all P candidate variables; unused ones are NaN.
    `computed` and `errors` span all N observations; rows that were not
    used are NaN. `errors` are computed minus observed.
    """

    subset: VariableSubset
    intercept: float
    coefficients: np.ndarray
    r: float
    standard_error: float
    n_observations: int
    n_components: int
    used: np.ndarray
    computed: np.ndarray
    errors: np.ndarray

    @property
    def n_variables(self) -> int:
        return len(self.subset)


class ResultStore:
    """
    Best-of-K collection of candidate models keyed on standard error.

    Entries keep their slot order. While fewer than K models are held,
    every offer is appended; afterwards a model replaces the slot with
    the largest standard error (the first one on ties) only when its own
    standard error is strictly smaller.
    """

    def __init__(self, capacity: int):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._models: List[CandidateModel] = []
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._models)

    def __iter__(self) -> Iterator[CandidateModel]:
        return iter(list(self._models))

    def __getitem__(self, i: int) -> CandidateModel:
        return self._models[i]

    @property
    def full(self) -> bool:
        return len(self._models) >= self.capacity

    def worst_index(self) -> Optional[int]:
        if not self._models:
            return None
        return int(np.argmax([m.standard_error for m in self._models]))

    def offer(self, model: CandidateModel) -> bool:
        """Insert or replace according to the store policy; True if kept."""
        with self._lock:
            if not self.full:
                self._models.append(model)
                return True
            worst = self.worst_index()
            semax = self._models[worst].standard_error
            if model.standard_error < semax:
                logger.debug(
                    f"store: {model.subset.label()} (se={model.standard_error:.6g}) "
                    f"replaces slot {worst} (se={semax:.6g})"
                )
                self._models[worst] = model
                return True
            return False

    def subsets(self) -> List[VariableSubset]:
        with self._lock:
            return [m.subset for m in self._models]

    def ranked(self) -> List[CandidateModel]:
        """Models ordered by ascending standard error, ties in slot order."""
        with self._lock:
            order = index_sort([m.standard_error for m in self._models])
            return [self._models[i] for i in order]
