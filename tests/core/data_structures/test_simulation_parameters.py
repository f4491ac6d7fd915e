# Copyright (c) 2025 Chair for Design Automation, TUM
# All rights reserved.
#
# SPDX-License-Identifier: MIT
#
# Licensed under the MIT License

"""Tests for simulation parameters classes.

This module contains unit tests for the Observable and TEBDSimParams classes. It verifies that:
  - An Observable is correctly initialized from operators, operator names and metric names, and that
    two-site observables and the entropy require a nearest-neighbor bond.
  - TEBDSimParams instances carry the correct defaults and reject out-of-range options.
"""

from __future__ import annotations

import numpy as np
import pytest

from mqt.timeevo.core.data_structures.observer import ExpectationObserver, NoTimeEvolutionObserver
from mqt.timeevo.core.data_structures.simulation_parameters import Observable, TEBDSimParams
from mqt.timeevo.core.libraries.operator_library import X, Z


def test_observable_creation_valid() -> None:
    """Test that an Observable is created correctly from an operator instance."""
    obs = Observable(X(), 0)
    assert obs.name == "x"
    assert obs.operator is not None
    assert np.array_equal(obs.operator.matrix, np.array([[0, 1], [1, 0]]))
    assert obs.sites == 0
    assert obs.results == []


def test_observable_from_name() -> None:
    """Test that operator names are looked up in the OperatorLibrary."""
    obs = Observable("Sz", 2)
    assert obs.name == "sz"
    assert obs.operator is not None
    assert np.allclose(obs.operator.matrix, np.diag([0.5, -0.5]))


def test_observable_metrics() -> None:
    """Test the max_bond and entropy metrics."""
    max_bond = Observable("max_bond")
    assert max_bond.name == "max_bond"
    assert max_bond.operator is None

    entropy = Observable("entropy", [1, 2])
    assert entropy.operator is None
    assert entropy.sites == [1, 2]


def test_observable_two_site() -> None:
    """Two-site operators are measured on a nearest-neighbor bond."""
    obs = Observable(Z() @ Z(), [0, 1])
    assert obs.operator is not None
    assert obs.operator.interaction == 2


@pytest.mark.parametrize("sites", [None, 0, [0, 2], [1, 0], [0, 1, 2]])
def test_observable_invalid_bond(sites: int | list[int] | None) -> None:
    """Two-site observables and the entropy on anything else than a bond raise ValueError."""
    with pytest.raises(ValueError, match="nearest-neighbor bond"):
        Observable(Z() @ Z(), sites)
    with pytest.raises(ValueError, match="nearest-neighbor bond"):
        Observable("entropy", sites)


def test_observable_unknown_name() -> None:
    """Unknown operator names raise ValueError."""
    with pytest.raises(ValueError, match="not found"):
        Observable("magnetization", 0)


def test_tebd_simparams_defaults() -> None:
    """Test the default parameters for TEBDSimParams."""
    params = TEBDSimParams()
    assert isinstance(params.observer, NoTimeEvolutionObserver)
    assert params.orthogonalize == 0
    assert params.max_bond_dim == 4096
    assert params.threshold == 0.0
    assert params.show_progress is False


def test_tebd_simparams_custom() -> None:
    """Test that explicitly passed options are stored."""
    observer = ExpectationObserver([Observable("z")], measurement_period=0.1)
    params = TEBDSimParams(observer, orthogonalize=10, max_bond_dim=50, threshold=1e-8, show_progress=True)
    assert params.observer is observer
    assert params.orthogonalize == 10
    assert params.max_bond_dim == 50
    assert params.threshold == 1e-8
    assert params.show_progress is True


def test_tebd_simparams_invalid() -> None:
    """Out-of-range options raise ValueError."""
    with pytest.raises(ValueError, match="max_bond_dim"):
        TEBDSimParams(max_bond_dim=0)
    with pytest.raises(ValueError, match="threshold"):
        TEBDSimParams(threshold=-1e-3)
    with pytest.raises(ValueError, match="orthogonalize"):
        TEBDSimParams(orthogonalize=-1)
