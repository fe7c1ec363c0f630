# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import pytest

from pcregress.tables import critical_t_value


@pytest.mark.parametrize(
    "confidence, dof, two_sided, expected",
    [
        (0.95, 10, True, 2.228),
        (0.95, 10, False, 1.812),
        (0.99, 20, True, 2.845),
        (0.90, 4, True, 2.132),
    ],
)
def test_table_values(confidence, dof, two_sided, expected):
    assert critical_t_value(confidence, dof, two_sided) == pytest.approx(expected, abs=1e-3)


def test_decreases_with_dof():
    values = [critical_t_value(0.95, dof) for dof in (4, 10, 30, 120)]
    assert values == sorted(values, reverse=True)
    assert values[-1] > 1.96


@pytest.mark.parametrize("confidence, dof", [(0.0, 10), (1.0, 10), (0.95, 0)])
def test_invalid(confidence, dof):
    with pytest.raises(ValueError):
        critical_t_value(confidence, dof)
