# Copyright (c) 2025 Chair for Design Automation, TUM
# All rights reserved.
#
# SPDX-License-Identifier: MIT
#
# Licensed under the MIT License

"""Two-site gate application.

This module applies two-site gates, and whole layers of them, to an MPS. Each gate is applied at the
orthogonality center: the two site tensors are merged, the gate is contracted with the combined physical
leg and the result is split again by a truncated SVD. The sweep direction decides in which order the
gates of a layer are applied and on which side of the bond the orthogonality center is left, so that
consecutive gates of a layer only require short QR shifts.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

import opt_einsum as oe

from .decompositions import merge_mps_tensors, truncated_two_site_split

if TYPE_CHECKING:
    import numpy as np
    from numpy.typing import NDArray

    from ..data_structures.bond_operator import GateList
    from ..data_structures.networks import MPS
    from ..data_structures.simulation_parameters import TEBDSimParams


class SweepDirection(Enum):
    """Order in which the gates of a layer are applied."""

    FROM_LEFT = "fromleft"
    FROM_RIGHT = "fromright"

    def flipped(self) -> SweepDirection:
        """The opposite direction."""
        return SweepDirection.FROM_RIGHT if self is SweepDirection.FROM_LEFT else SweepDirection.FROM_LEFT


def apply_two_site_gate(
    state: MPS,
    gate: NDArray[np.complex128],
    bond: int,
    sim_params: TEBDSimParams,
    direction: SweepDirection,
) -> float:
    """Apply a two-site gate to the sites (bond, bond+1) of an MPS in place.

    The orthogonality center is moved onto the bond first. After the truncated split it sits on
    the right site for SweepDirection.FROM_LEFT and on the left site for SweepDirection.FROM_RIGHT.
    The kept singular values are renormalized, so the state stays normalized also for non-unitary gates.

    Args:
        state: The MPS to update.
        gate: Matrix of shape (d0*d1, d0*d1) in the product basis of the two sites.
        bond: Left site of the bond.
        sim_params: Truncation settings (threshold, max_bond_dim).
        direction: The sweep direction of the enclosing layer.

    Returns:
        float: The relative weight discarded by the truncation.

    Raises:
        ValueError: If the bond does not exist or the gate does not fit the physical dimensions.
    """
    if bond not in range(state.length - 1):
        msg = f"Bond {bond} does not exist in an MPS of length {state.length}."
        raise ValueError(msg)
    phys_dims = (state.physical_dimensions[bond], state.physical_dimensions[bond + 1])
    if gate.shape != (phys_dims[0] * phys_dims[1],) * 2:
        msg = f"Gate of shape {gate.shape} does not act on sites of dimensions {phys_dims}."
        raise ValueError(msg)

    if direction is SweepDirection.FROM_LEFT:
        state.move_orthogonality_center(bond)
    else:
        state.move_orthogonality_center(bond + 1)

    theta = merge_mps_tensors(state.tensors[bond], state.tensors[bond + 1])
    theta = oe.contract("ab, bcd->acd", gate, theta)

    svd_distribution = "right" if direction is SweepDirection.FROM_LEFT else "left"
    left_tensor, right_tensor, discarded_weight = truncated_two_site_split(
        theta, phys_dims, sim_params.threshold, sim_params.max_bond_dim, svd_distribution
    )
    state.tensors[bond], state.tensors[bond + 1] = left_tensor, right_tensor
    state.orthogonality_center = bond + 1 if direction is SweepDirection.FROM_LEFT else bond
    return discarded_weight


def apply_gate_layer(state: MPS, layer: GateList, sim_params: TEBDSimParams, direction: SweepDirection) -> MPS:
    """Apply all gates of a layer to an MPS in place.

    Gates are applied in ascending bond order for SweepDirection.FROM_LEFT and in
    descending bond order for SweepDirection.FROM_RIGHT.

    Args:
        state: The MPS to update.
        layer: The gates, one per bond.
        sim_params: Truncation settings.
        direction: The sweep direction.

    Returns:
        MPS: The updated state (the same object as `state`).
    """
    pairs = list(layer)
    if direction is SweepDirection.FROM_RIGHT:
        pairs.reverse()
    for bond, gate in pairs:
        apply_two_site_gate(state, gate, bond, sim_params, direction)
    return state
