# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

from dataclasses import dataclass
from typing import Iterable, Iterator, Tuple

import numpy as np


@dataclass(frozen=True, order=True)
class VariableSubset:
    """
    Immutable set of 0-based column indices stored as an integer bitmask.

    Two subsets are equal when they select the same columns out of the
    same number of candidate variables.
    """

    n_variables: int
    mask: int = 0

    def __post_init__(self):
        if self.n_variables < 1:
            raise ValueError("n_variables must be positive")
        if self.mask < 0 or self.mask >> self.n_variables:
            raise ValueError(f"mask {self.mask:#x} exceeds {self.n_variables} variables")

    @classmethod
    def of(cls, indices: Iterable[int], n_variables: int) -> "VariableSubset":
        mask = 0
        for j in indices:
            if not 0 <= j < n_variables:
                raise IndexError(f"variable {j} out of range 0..{n_variables - 1}")
            mask |= 1 << j
        return cls(n_variables, mask)

    @classmethod
    def from_flags(cls, flags) -> "VariableSubset":
        flags = np.asarray(flags, dtype=bool)
        return cls.of(np.flatnonzero(flags).tolist(), flags.shape[0])

    @property
    def indices(self) -> Tuple[int, ...]:
        return tuple(j for j in range(self.n_variables) if self.mask >> j & 1)

    def flags(self) -> np.ndarray:
        out = np.zeros(self.n_variables, dtype=bool)
        out[list(self.indices)] = True
        return out

    def __len__(self) -> int:
        return bin(self.mask).count("1")

    def __iter__(self) -> Iterator[int]:
        return iter(self.indices)

    def __contains__(self, j: object) -> bool:
        return isinstance(j, (int, np.integer)) and 0 <= j < self.n_variables and bool(
            self.mask >> int(j) & 1
        )

    def _check(self, other: "VariableSubset"):
        if other.n_variables != self.n_variables:
            raise ValueError("subsets are drawn from different variable spaces")

    def union(self, other: "VariableSubset") -> "VariableSubset":
        self._check(other)
        return VariableSubset(self.n_variables, self.mask | other.mask)

    def overlap(self, other: "VariableSubset") -> int:
        """Number of variables shared with `other`."""
        self._check(other)
        return bin(self.mask & other.mask).count("1")

    def with_variable(self, j: int) -> "VariableSubset":
        return self.union(VariableSubset.of([j], self.n_variables))

    def prefix(self, k: int) -> "VariableSubset":
        """The first k variables in column order."""
        return VariableSubset.of(self.indices[:k], self.n_variables)

    def label(self) -> str:
        return " ".join(f"X{j + 1}" for j in self.indices)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({list(self.indices)}, n_variables={self.n_variables})"
