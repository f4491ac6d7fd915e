# Copyright (c) 2025 Chair for Design Automation, TUM
# All rights reserved.
#
# SPDX-License-Identifier: MIT
#
# Licensed under the MIT License

"""Time evolution of Matrix Product States with TEBD.

This module implements the driver of a Time-Evolving Block Decimation (TEBD) run. The requested time
interval is split into elementary Trotter steps, which are grouped into bunches so that the boundary
layers of the chosen Trotter scheme are only applied once per bunch. Between bunches the state is
re-orthogonalized and handed to the observer at the configured cadences. The sweep direction of the gate
layers alternates after every layer throughout the whole run.

The evolution is strictly sequential: every gate layer, re-orthogonalization and observer call completes
before the next one is issued. Configuration errors are raised before the state is touched; errors raised
by the observer or during gate application propagate unchanged and leave the state partially evolved.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from tqdm import tqdm

from .core.data_structures.bond_operator import BondOperator
from .core.data_structures.simulation_parameters import TEBDSimParams
from .core.methods.gate_application import SweepDirection, apply_gate_layer
from .core.methods.scheduler import bunch_size, measurement_steps, num_steps
from .core.methods.trotter import TrotterScheme, time_evolution_gates

if TYPE_CHECKING:
    from .core.data_structures.bond_operator import GateList
    from .core.data_structures.networks import MPS
    from .core.data_structures.observer import TimeEvolutionObserver
    from .core.methods.trotter import Layers

__all__ = ["tebd"]

logger = logging.getLogger(__name__)


class _StepObserver:
    """Forwards elementary steps to the observer at the measurement cadence.

    A step is recorded if it is a multiple of the measurement period (every step if no period is set)
    and has not been recorded before. Termination is only checked after a recording.
    """

    def __init__(self, observer: TimeEvolutionObserver, dt: complex, mstep: int) -> None:
        self.observer = observer
        self.dt = dt
        self.mstep = mstep
        self.last_step = 0

    def __call__(self, state: MPS, step: int) -> bool:
        if step == self.last_step or (self.mstep > 0 and step % self.mstep != 0):
            return False
        self.last_step = step
        self.observer.record(state, step * self.dt)
        return self.observer.should_stop(state)


def _apply_layers(
    state: MPS, layers: Layers, sim_params: TEBDSimParams, direction: SweepDirection
) -> SweepDirection:
    for layer in layers:
        apply_gate_layer(state, layer, sim_params, direction)
        direction = direction.flipped()
    return direction


def tebd(
    state: MPS,
    hamiltonian: BondOperator | GateList,
    dt: complex,
    total_time: complex,
    scheme: TrotterScheme = TrotterScheme.TEBD2,
    sim_params: TEBDSimParams | None = None,
) -> MPS:
    """Evolve an MPS in time with TEBD.

    Args:
        state: The state to evolve. It is modified in place.
        hamiltonian: The nearest-neighbor Hamiltonian, either as BondOperator or as its bond terms.
        dt: The time step. Use dt = -1j * tau together with total_time = -1j * T for imaginary-time evolution,
            and a negative dt together with a negative total_time to evolve backwards.
        total_time: The time to evolve for. Must be a non-negative integer multiple of dt.
        scheme: The Trotter decomposition, by default TrotterScheme.TEBD2.
        sim_params: Observer, re-orthogonalization period and truncation settings.

    Returns:
        MPS: The evolved state (the same object as `state`).

    Raises:
        ConfigurationError: If total_time or the measurement period of the observer is not
            commensurate with dt.
    """
    if sim_params is None:
        sim_params = TEBDSimParams()
    observer = sim_params.observer

    nsteps = num_steps(total_time, dt)
    mstep = measurement_steps(observer.measurement_period(), dt)
    gates = hamiltonian.gates() if isinstance(hamiltonian, BondOperator) else hamiltonian
    if len(gates) != state.length - 1:
        msg = f"Hamiltonian with {len(gates)} bonds does not fit an MPS of length {state.length}."
        raise ValueError(msg)

    start_layers, bulk_layers, end_layers = time_evolution_gates(dt, gates, scheme)
    nbunch = bunch_size(
        nsteps, mstep, sim_params.orthogonalize, boundary_free=not start_layers and not end_layers
    )
    logger.info("TEBD with %s: %d steps of dt=%s, bunches of %d", scheme.name, nsteps, dt, nbunch)

    observe = _StepObserver(observer, dt, mstep)
    step = 0
    direction = SweepDirection.FROM_LEFT
    with tqdm(total=nsteps, desc="Running TEBD", ncols=80, disable=not sim_params.show_progress) as pbar:
        while step < nsteps:
            direction = _apply_layers(state, start_layers, sim_params, direction)

            stop = False
            for _ in range(nbunch - 1):
                direction = _apply_layers(state, bulk_layers, sim_params, direction)
                step += 1
                pbar.update(1)
                if observe(state, step):
                    stop = True
                    break
            if stop:
                logger.debug("Observer stopped the evolution inside a bunch at step %d", step)
                break

            # complete the last time step of the bunch
            direction = _apply_layers(state, end_layers, sim_params, direction)
            if end_layers:
                step += 1
                pbar.update(1)

            if sim_params.orthogonalize > 0 and step % sim_params.orthogonalize == 0:
                logger.debug("Re-orthogonalizing at step %d", step)
                state.reorthogonalize()

            if observe(state, step):
                logger.debug("Observer stopped the evolution at step %d", step)
                break
    return state
