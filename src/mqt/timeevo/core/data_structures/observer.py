# Copyright (c) 2025 Chair for Design Automation, TUM
# All rights reserved.
#
# SPDX-License-Identifier: MIT
#
# Licensed under the MIT License

"""Observers of a time evolution.

An observer is the only way a running TEBD evolution reports back to the caller. It announces the time
interval at which it wants to see the state, receives the state at these times and may ask the evolution
to stop early, e.g. once an imaginary-time evolution has converged to the ground state.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

import numpy as np

from .bond_operator import BondOperator

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .bond_operator import GateList
    from .networks import MPS
    from .simulation_parameters import Observable

logger = logging.getLogger(__name__)


def measure_energy(state: MPS, gates: GateList) -> float:
    """Energy of a nearest-neighbor Hamiltonian.

    Args:
        state: The state to measure.
        gates: The bond terms h_{b,b+1} of the Hamiltonian (not exponentiated).

    Returns:
        float: sum_b <h_{b,b+1}>.
    """
    return float(np.sum(state.measure_bonds(gates.matrices, gates.bonds)).real)


class TimeEvolutionObserver(ABC):
    """Interface between a time evolution and the caller."""

    @abstractmethod
    def measurement_period(self) -> complex:
        """Time between two measurements, 0 to measure after every elementary step.

        Must be an integer multiple of the time step of the evolution.
        """

    @abstractmethod
    def record(self, state: MPS, time: complex) -> None:
        """Receive the state at the given simulated time."""

    @abstractmethod
    def should_stop(self, state: MPS) -> bool:
        """Return True to end the evolution after the last recording."""


class NoTimeEvolutionObserver(TimeEvolutionObserver):
    """Observer that never measures and never stops the evolution."""

    def measurement_period(self) -> complex:
        return 0

    def record(self, state: MPS, time: complex) -> None:
        pass

    def should_stop(self, state: MPS) -> bool:
        return False


class ExpectationObserver(TimeEvolutionObserver):
    """Records observables and, optionally, the energy during a time evolution.

    Attributes:
        observables: The observables, each collecting one result per recording.
        times: The simulated times of the recordings.
        energies: The energy at each recording if a Hamiltonian was given.
        energy_tol: Stop once the relative energy change between two recordings is below this value.
    """

    def __init__(
        self,
        observables: Sequence[Observable] = (),
        measurement_period: complex = 0,
        hamiltonian: BondOperator | GateList | None = None,
        energy_tol: float = 0.0,
    ) -> None:
        """Initializes the observer.

        Args:
            observables: Observables measured at every recording.
            measurement_period: Time between recordings, 0 records after every step.
            hamiltonian: Hamiltonian whose energy is recorded.
            energy_tol: Relative energy tolerance for early termination, 0 disables it.

        Raises:
            ValueError: If `energy_tol` is set without a Hamiltonian.
        """
        if energy_tol > 0 and hamiltonian is None:
            msg = "energy_tol requires a Hamiltonian to measure the energy."
            raise ValueError(msg)
        self.observables = list(observables)
        self._measurement_period = measurement_period
        self.gates = hamiltonian.gates() if isinstance(hamiltonian, BondOperator) else hamiltonian
        self.energy_tol = energy_tol
        self.times: list[complex] = []
        self.energies: list[float] = []

    def measurement_period(self) -> complex:
        return self._measurement_period

    def record(self, state: MPS, time: complex) -> None:
        self.times.append(time)
        for observable in self.observables:
            observable.results.append(self._measure(state, observable))
        if self.gates is not None:
            self.energies.append(measure_energy(state, self.gates))

    def should_stop(self, state: MPS) -> bool:
        if self.energy_tol <= 0 or len(self.energies) < 2:
            return False
        previous, current = self.energies[-2:]
        converged = abs(current - previous) < self.energy_tol * max(abs(current), 1e-300)
        if converged:
            logger.debug("Energy converged to %.12f at t=%s", current, self.times[-1])
        return converged

    @staticmethod
    def _measure(state: MPS, observable: Observable) -> float | np.ndarray:
        if observable.name == "max_bond":
            return state.get_max_bond()
        if observable.name == "entropy":
            assert isinstance(observable.sites, list)
            return float(state.get_entropy(observable.sites[0]))
        assert observable.operator is not None
        if observable.operator.interaction == 2:
            assert isinstance(observable.sites, list)
            return float(state.expect_bond(observable.operator.matrix, observable.sites[0]).real)
        if observable.sites is None:
            return state.measure_local(observable.operator.matrix)
        site = observable.sites[0] if isinstance(observable.sites, list) else observable.sites
        return float(state.expect_site(observable.operator.matrix, site).real)
