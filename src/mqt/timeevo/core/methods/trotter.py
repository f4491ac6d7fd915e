# Copyright (c) 2025 Chair for Design Automation, TUM
# All rights reserved.
#
# SPDX-License-Identifier: MIT
#
# Licensed under the MIT License

"""Trotter decompositions of the time-evolution operator.

For a nearest-neighbor Hamiltonian H = sum_b h_{b,b+1} split into the odd bonds H_o and the even bonds H_e,
this module turns one time step dt into layers of two-site gates. The layers are returned in three groups:

  - start: applied once before a bunch of consecutive time steps,
  - bulk: applied once per time step inside a bunch,
  - end: applied once to close a bunch (it completes the last time step of the bunch).

Splitting the sequence this way lets consecutive time steps share the half-step layers at their
boundary, so they are only paid once per bunch.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..data_structures.bond_operator import GateList


class TrotterScheme(Enum):
    """Enumerates the available Trotter decompositions.

    TEBD2:
        Second order even-odd decomposition
        U(dt) = exp(-i dt/2 H_o) exp(-i dt H_e) exp(-i dt/2 H_o).
        The Trotter error per time step is O(dt^2).
    TEBD2Sweep:
        Second order bond-by-bond decomposition. The exponentials exp(-i dt/2 h_{b,b+1}) are applied
        sweeping from left to right and then a second time sweeping from right to left.
        The Trotter error per time step is O(dt^2).
    TEBD4:
        Fourth order decomposition U(tau1) U(tau2) U(tau3) U(tau2) U(tau1) of TEBD2 steps
        with tau1 = tau2 = dt / (4 - 4^(1/3)) and tau3 = dt - 4 tau1.
        The Trotter error per time step is O(dt^4).
    """

    TEBD2 = "tebd2"
    TEBD2Sweep = "tebd2sweep"
    TEBD4 = "tebd4"


Layers = list["GateList"]


def tebd2_gates(dt: complex, gates: GateList) -> tuple[Layers, Layers, Layers]:
    """Second order even-odd decomposition.

    Args:
        dt: The time step.
        gates: The bond Hamiltonians.

    Returns:
        tuple: The start, bulk and end layers.
    """
    u_half = gates.odd().exp(dt / 2)
    bulk = [gates.even().exp(dt), gates.odd().exp(dt)]
    return [u_half], bulk, [bulk[0], u_half]


def tebd2_sweep_gates(dt: complex, gates: GateList) -> tuple[Layers, Layers, Layers]:
    """Second order bond-by-bond decomposition.

    Each time step is symmetric by itself, so there are no boundary layers.

    Args:
        dt: The time step.
        gates: The bond Hamiltonians.

    Returns:
        tuple: The start, bulk and end layers.
    """
    u_half = gates.exp(dt / 2)
    return [], [u_half, u_half], []


def tebd4_gates(dt: complex, gates: GateList) -> tuple[Layers, Layers, Layers]:
    """Fourth order decomposition.

    The half odd-bond steps of consecutive TEBD2 factors (and of consecutive time steps) are merged,
    which leaves ten layers per time step alternating between even and odd bonds.

    Args:
        dt: The time step.
        gates: The bond Hamiltonians.

    Returns:
        tuple: The start, bulk and end layers.
    """
    tau1 = dt / (4 - 4 ** (1 / 3))
    tau2 = tau1
    tau3 = dt - 2 * tau1 - 2 * tau2

    even = gates.even()
    odd = gates.odd()
    sequence = [
        (tau1, even),
        (tau1, odd),
        (tau2, even),
        ((tau2 + tau3) / 2, odd),
        (tau3, even),
        ((tau2 + tau3) / 2, odd),
        (tau2, even),
        (tau2, odd),
        (tau1, even),
    ]
    bulk = [sublattice.exp(tau) for tau, sublattice in sequence]
    end = [*bulk, odd.exp(tau1 / 2)]
    bulk.append(odd.exp(tau1))
    return [odd.exp(tau1 / 2)], bulk, end


def time_evolution_gates(dt: complex, gates: GateList, scheme: TrotterScheme) -> tuple[Layers, Layers, Layers]:
    """Gate layers of one time step for the given Trotter scheme.

    Args:
        dt: The time step. Complex values are allowed, e.g. dt = -1j * tau for imaginary-time evolution.
        gates: The bond Hamiltonians h_{b,b+1}. They are not modified.
        scheme: The Trotter decomposition.

    Returns:
        tuple: The start, bulk and end layers.

    Raises:
        ValueError: If the scheme is unknown.
    """
    if scheme is TrotterScheme.TEBD2:
        return tebd2_gates(dt, gates)
    if scheme is TrotterScheme.TEBD2Sweep:
        return tebd2_sweep_gates(dt, gates)
    if scheme is TrotterScheme.TEBD4:
        return tebd4_gates(dt, gates)
    msg = f"Unknown Trotter scheme {scheme!r}."
    raise ValueError(msg)
