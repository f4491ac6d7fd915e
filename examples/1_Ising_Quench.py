# Copyright (c) 2025 Chair for Design Automation, TUM
# All rights reserved.
#
# SPDX-License-Identifier: MIT
#
# Licensed under the MIT License

"""Example: Quench dynamics of the transverse-field Ising chain with TEBD.

A chain prepared in the domain-wall state |000111...> is evolved in real time under the Ising Hamiltonian
H = -J sum Sz Sz - h sum Sx with the fourth order Trotter decomposition. The local magnetization <Sz> is
recorded at a fixed measurement period and displayed as a heatmap, together with the entanglement entropy
of the central bond.

Usage:
    Run this module as a script to execute the simulation and display the results.
"""

from __future__ import annotations

import logging

import matplotlib.pyplot as plt

from mqt.timeevo.core.data_structures.bond_operator import BondOperator
from mqt.timeevo.core.data_structures.networks import MPS
from mqt.timeevo.core.data_structures.observer import ExpectationObserver
from mqt.timeevo.core.data_structures.simulation_parameters import Observable, TEBDSimParams
from mqt.timeevo.core.methods.trotter import TrotterScheme
from mqt.timeevo.tebd import tebd

# Define the system Hamiltonian
L = 16
J = 1
h = 0.8
H_0 = BondOperator()
H_0.init_ising(L, J, h)

# Define the initial state
state = MPS(L, state="wall")

# Define the observer and the simulation parameters
T = 10
dt = 0.05
measurement_period = 0.1
magnetization = Observable("sz")
entropy = Observable("entropy", [L // 2 - 1, L // 2])
observer = ExpectationObserver([magnetization, entropy], measurement_period, hamiltonian=H_0)
sim_params = TEBDSimParams(observer, orthogonalize=20, max_bond_dim=64, threshold=1e-10, show_progress=True)

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    tebd(state, H_0, dt, T, TrotterScheme.TEBD4, sim_params)

    fig, (ax_sz, ax_entropy) = plt.subplots(1, 2, figsize=(10, 4))
    im = ax_sz.imshow(magnetization.results, aspect="auto", extent=[0, L, T, 0], vmin=-0.5, vmax=0.5, cmap="RdBu")
    ax_sz.set_xlabel("Site")
    ax_sz.set_ylabel("t")
    cbar = fig.colorbar(im, ax=ax_sz)
    cbar.ax.set_title("$\\langle S^z \\rangle$")

    times = [t.real for t in observer.times]
    ax_entropy.plot(times, entropy.results)
    ax_entropy.set_xlabel("t")
    ax_entropy.set_ylabel("$S_{L/2}$")

    print(f"Energy drift: {observer.energies[-1] - observer.energies[0]:.2e}")
    plt.show()
