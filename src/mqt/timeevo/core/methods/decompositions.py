# Copyright (c) 2025 Chair for Design Automation, TUM
# All rights reserved.
#
# SPDX-License-Identifier: MIT
#
# Licensed under the MIT License

"""Tensor Network Decompositions.

This module implements the QR decomposition used to move the orthogonality center of an MPS
and the truncated SVD used to split a two-site tensor back into two MPS tensors after a gate was applied.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import opt_einsum as oe

if TYPE_CHECKING:
    from numpy.typing import NDArray

# Singular values below this fraction of the largest one are numerically zero and always discarded.
ZERO_SINGULAR_VALUE = 1e-14


def right_qr(mps_tensor: NDArray[np.complex128]) -> tuple[NDArray[np.complex128], NDArray[np.complex128]]:
    """Right QR.

    Performs the QR decomposition of an MPS tensor moving to the right.

    Args:
        mps_tensor: The tensor to be decomposed.

    Returns:
        q_tensor: The Q tensor with the left virtual leg and the physical
            leg (phys,left,new).
        r_mat: The R matrix with the right virtual leg (new,right).
    """
    old_shape = mps_tensor.shape
    qr_shape = (old_shape[0] * old_shape[1], old_shape[2])
    mps_tensor = mps_tensor.reshape(qr_shape)
    q_mat, r_mat = np.linalg.qr(mps_tensor)
    new_shape = (old_shape[0], old_shape[1], -1)
    q_tensor = q_mat.reshape(new_shape)
    return q_tensor, r_mat


def truncation_rank(s_vec: NDArray[np.float64], threshold: float, max_bond_dim: int | None) -> int:
    """Number of singular values kept by a truncation.

    Singular values are discarded from the smallest upwards as long as the sum of the squares of the
    discarded values, relative to the total weight, does not exceed `threshold`. Numerically zero singular
    values are always discarded, at least one value is always kept and at most `max_bond_dim` values are kept.

    Args:
        s_vec: Singular values in descending order.
        threshold: Maximal relative discarded weight.
        max_bond_dim: Maximum bond dimension, or None for no cap.

    Returns:
        int: The number of leading singular values to keep.
    """
    if len(s_vec) == 0 or s_vec[0] == 0:
        return 1
    keep = int(np.count_nonzero(s_vec > ZERO_SINGULAR_VALUE * s_vec[0]))
    total_weight = np.sum(s_vec**2)
    discard = 0.0
    for idx, s_val in enumerate(reversed(s_vec[:keep])):
        discard += s_val**2
        if discard > threshold * total_weight:
            keep -= idx
            break
    else:
        keep = 1
    if max_bond_dim is not None:
        keep = min(keep, max_bond_dim)
    return max(keep, 1)


def truncated_two_site_split(
    theta: NDArray[np.complex128],
    physical_dimensions: tuple[int, int],
    threshold: float,
    max_bond_dim: int | None,
    svd_distribution: str,
) -> tuple[NDArray[np.complex128], NDArray[np.complex128], float]:
    """Split a two-site tensor into two MPS tensors with a truncated SVD.

    The input tensor has a composite physical index of dimension d0*d1 and the two outer virtual legs,
    i.e. its shape is (d0*d1, D0, D2). It is split into
      - a left tensor of shape (d0, D0, k)
      - a right tensor of shape (d1, k, D2)
    where k is the number of singular values kept by `truncation_rank`.

    `svd_distribution` decides which tensor absorbs the singular values and thus where the orthogonality
    center ends up:
        - "left"  : the left tensor carries the singular values.
        - "right" : the right tensor carries the singular values.

    The kept singular values are always rescaled to unit norm.

    Args:
        theta: Two-site tensor of shape (d0*d1, D0, D2).
        physical_dimensions: The physical dimensions (d0, d1).
        threshold: Maximal discarded weight.
        max_bond_dim: Maximum bond dimension, or None for no cap.
        svd_distribution: "left" or "right".

    Returns:
        tuple: The left tensor, the right tensor and the discarded weight.

    Raises:
        ValueError: If the physical dimensions do not match the tensor or the distribution is unknown.
    """
    d0, d1 = physical_dimensions
    if theta.shape[0] != d0 * d1:
        msg = f"Composite physical dimension {theta.shape[0]} does not match {d0} x {d1}."
        raise ValueError(msg)

    left_dim, right_dim = theta.shape[1], theta.shape[2]
    # (d0, d1, D0, D2) -> (d0, D0, d1, D2)
    theta_mat = theta.reshape(d0, d1, left_dim, right_dim).transpose((0, 2, 1, 3))
    theta_mat = theta_mat.reshape(d0 * left_dim, d1 * right_dim)
    u_mat, s_vec, v_mat = np.linalg.svd(theta_mat, full_matrices=False)

    keep = truncation_rank(s_vec, threshold, max_bond_dim)
    total_weight = float(np.sum(s_vec**2))
    discarded_weight = float(np.sum(s_vec[keep:] ** 2))
    s_vec = s_vec[:keep]
    kept_norm = np.linalg.norm(s_vec)
    if kept_norm > 0:
        s_vec = s_vec / kept_norm
    if total_weight > 0:
        discarded_weight /= total_weight

    left_tensor = u_mat[:, :keep].reshape(d0, left_dim, keep)
    right_tensor = v_mat[:keep, :].reshape(keep, d1, right_dim)

    if svd_distribution == "left":
        left_tensor = left_tensor * s_vec
    elif svd_distribution == "right":
        right_tensor = right_tensor * s_vec[:, None, None]
    else:
        msg = "svd_distribution parameter must be left or right."
        raise ValueError(msg)

    # physical leg first
    right_tensor = right_tensor.transpose((1, 0, 2))
    return left_tensor, right_tensor, discarded_weight


def merge_mps_tensors(
    left_tensor: NDArray[np.complex128], right_tensor: NDArray[np.complex128]
) -> NDArray[np.complex128]:
    """Merge two neighboring MPS tensors into one.

    The tensors are contracted over their common bond and the two physical legs are combined into one.

    Args:
        left_tensor: Left MPS tensor of shape (d0, D0, D1).
        right_tensor: Right MPS tensor of shape (d1, D1, D2).

    Returns:
        NDArray[np.complex128]: The merged tensor of shape (d0*d1, D0, D2).
    """
    merged_tensor = oe.contract("abc,dce->adbe", left_tensor, right_tensor)
    merged_shape = merged_tensor.shape
    return merged_tensor.reshape((merged_shape[0] * merged_shape[1], merged_shape[2], merged_shape[3]))
