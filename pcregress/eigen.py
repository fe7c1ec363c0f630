# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import logging
from dataclasses import dataclass
from enum import Enum

import numpy as np

logger = logging.getLogger(__name__)

MAX_SWEEPS: int = 50


class EigenStatus(Enum):
    CONVERGED = "converged"
    FAIL = "fail"


@dataclass(frozen=True)
class EigenResult:
    eigenvalues: np.ndarray  # (n,) descending
    eigenvectors: np.ndarray  # (n, n), column k pairs with eigenvalues[k]
    status: EigenStatus
    sweeps: int

    @property
    def converged(self) -> bool:
        return self.status is EigenStatus.CONVERGED


def _rotate(g: np.ndarray, h: np.ndarray, s: float, tau: float):
    return g - s * (h + g * tau), h + s * (g - h * tau)


def jacobi(A: np.ndarray, max_sweeps: int = MAX_SWEEPS) -> EigenResult:
    """
    Eigenvalues and eigenvectors of a real symmetric matrix by cyclic
    Jacobi rotations (Press et al., *Numerical Recipes in C*, 1988,
    pp. 364-366).

    Each sweep first sums the absolute upper off-diagonal elements; an
    exact zero means the matrix is diagonal and the decomposition is
    done. During the first three sweeps only elements above
    0.2 * sum / n² are rotated; after the fourth sweep an element too
    small to change either diagonal entry is simply zeroed.

    Parameters
    ----------
    A : (n, n) ndarray
        Symmetric matrix; it is copied, never modified.
    max_sweeps : int
        Number of sweeps before giving up.

    Returns
    -------
    EigenResult
        status FAIL when the off-diagonal sum did not reach zero within
        `max_sweeps`; the arrays then hold the last iterate.
    """
    A = np.asarray(A, dtype=float)
    if A.ndim != 2 or A.size == 0:
        raise ValueError("Can't perform eigen decomposition on an empty matrix.")
    n, m = A.shape
    if n != m:
        raise ValueError("Jacobi eigen decomposition requires a square matrix.")
    if not np.allclose(A, A.T, rtol=1e-12, atol=1e-12):
        raise ValueError("Jacobi eigen decomposition requires a symmetric matrix.")

    a = A.copy()
    v = np.eye(n)
    d = np.diag(a).copy()
    b = d.copy()
    z = np.zeros(n)

    for sweep in range(1, max_sweeps + 1):
        sm = float(np.abs(np.triu(a, 1)).sum())
        if sm == 0.0:
            order = np.argsort(-d, kind="stable")
            logger.debug(f"jacobi(): converged after {sweep - 1} sweeps")
            return EigenResult(
                eigenvalues=d[order],
                eigenvectors=v[:, order],
                status=EigenStatus.CONVERGED,
                sweeps=sweep - 1,
            )

        tresh = 0.2 * sm / (n * n) if sweep < 4 else 0.0

        for ip in range(n - 1):
            for iq in range(ip + 1, n):
                apq = a[ip, iq]
                g = 100.0 * abs(apq)
                if (
                    sweep > 4
                    and abs(d[ip]) + g == abs(d[ip])
                    and abs(d[iq]) + g == abs(d[iq])
                ):
                    a[ip, iq] = 0.0
                    continue
                if abs(apq) <= tresh:
                    continue

                h = d[iq] - d[ip]
                if abs(h) + g == abs(h):
                    t = apq / h
                else:
                    theta = 0.5 * h / apq
                    t = 1.0 / (abs(theta) + np.sqrt(1.0 + theta * theta))
                    if theta < 0.0:
                        t = -t
                c = 1.0 / np.sqrt(1.0 + t * t)
                s = t * c
                tau = s / (1.0 + c)
                h = t * apq
                z[ip] -= h
                z[iq] += h
                d[ip] -= h
                d[iq] += h
                a[ip, iq] = 0.0

                # 0 <= j < ip
                a[:ip, ip], a[:ip, iq] = _rotate(a[:ip, ip], a[:ip, iq], s, tau)
                # ip < j < iq
                a[ip, ip + 1 : iq], a[ip + 1 : iq, iq] = _rotate(
                    a[ip, ip + 1 : iq], a[ip + 1 : iq, iq], s, tau
                )
                # iq < j < n
                a[ip, iq + 1 :], a[iq, iq + 1 :] = _rotate(
                    a[ip, iq + 1 :], a[iq, iq + 1 :], s, tau
                )
                v[:, ip], v[:, iq] = _rotate(v[:, ip], v[:, iq], s, tau)

        b += z
        d = b.copy()
        z[:] = 0.0

    logger.debug(f"jacobi(): no convergence after {max_sweeps} sweeps")
    order = np.argsort(-d, kind="stable")
    return EigenResult(
        eigenvalues=d[order],
        eigenvectors=v[:, order],
        status=EigenStatus.FAIL,
        sweeps=max_sweeps,
    )
