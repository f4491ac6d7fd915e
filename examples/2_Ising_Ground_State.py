# Copyright (c) 2025 Chair for Design Automation, TUM
# All rights reserved.
#
# SPDX-License-Identifier: MIT
#
# Licensed under the MIT License

"""Example: Ground state of the critical Ising chain by imaginary-time evolution.

The Ising chain H = -J sum Sz Sz - h sum Sx is critical at h = J/2. Starting from a product state, the
chain is evolved in imaginary time t = -i tau with decreasing time steps. Each run stops as soon as the
relative energy change between two recordings falls below a tolerance. The final energy is compared with
the exact ground-state energy of the open chain.

Usage:
    Run this module as a script to print the energies of the individual runs.
"""

from __future__ import annotations

import numpy as np

from mqt.timeevo.core.data_structures.bond_operator import BondOperator
from mqt.timeevo.core.data_structures.networks import MPS
from mqt.timeevo.core.data_structures.observer import ExpectationObserver
from mqt.timeevo.core.data_structures.simulation_parameters import Observable, TEBDSimParams
from mqt.timeevo.core.methods.trotter import TrotterScheme
from mqt.timeevo.tebd import tebd

L = 20
J = 1.0
h = 0.5
H_0 = BondOperator()
H_0.init_ising(L, J, h)
exact = 0.25 - 0.25 / np.sin(np.pi / (4 * L + 2))

state = MPS(L, state="ones")

if __name__ == "__main__":
    for tau in (0.1, 0.05, 0.01):
        max_bond = Observable("max_bond")
        observer = ExpectationObserver([max_bond], -1j * 10 * tau, hamiltonian=H_0, energy_tol=1e-10)
        sim_params = TEBDSimParams(observer, orthogonalize=10, max_bond_dim=64, threshold=1e-10)
        tebd(state, H_0, -1j * tau, -1j * 2000 * tau, TrotterScheme.TEBD2, sim_params)
        print(
            f"tau={tau:<5} steps={round(abs(observer.times[-1]) / tau):<6} E={observer.energies[-1]:.10f} "
            f"error={observer.energies[-1] - exact:.2e} max_bond={max_bond.results[-1]}"
        )
