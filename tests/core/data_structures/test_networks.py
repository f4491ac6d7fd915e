# Copyright (c) 2025 Chair for Design Automation, TUM
# All rights reserved.
#
# SPDX-License-Identifier: MIT
#
# Licensed under the MIT License

"""Tests for the MPS class.

This module provides unit tests for the Matrix Product State data structure. It verifies the construction
of product states, the bookkeeping of the orthogonality center (shifting, setting, moving and
re-orthogonalizing), scalar products and norms, local and bond expectation values, entanglement entropies,
the validity and canonical-form checks and the conversion to a dense state vector.
"""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING

import numpy as np
import pytest

from mqt.timeevo.core.data_structures.networks import MPS
from mqt.timeevo.core.libraries.operator_library import X, Z

if TYPE_CHECKING:
    from numpy.typing import NDArray


def crandn(
    size: int | tuple[int, ...], *args: int, seed: np.random.Generator | int | None = None
) -> NDArray[np.complex128]:
    """Draw random samples from the standard complex normal distribution.

    Args:
        size (int |Tuple[int,...]): The size/shape of the output array.
        *args (int): Additional dimensions for the output array.
        seed (Generator | int): The seed for the random number generator.

    Returns:
        NDArray[np.complex128]: The array of random complex numbers.
    """
    if isinstance(size, int) and len(args) > 0:
        size = (size, *list(args))
    elif isinstance(size, int):
        size = (size,)
    rng = np.random.default_rng(seed)
    # 1 / sqrt(2) is a normalization factor
    return np.asarray((rng.standard_normal(size) + 1j * rng.standard_normal(size)) / np.sqrt(2), dtype=np.complex128)


def random_mps(shapes: list[tuple[int, int, int]], *, normalize: bool = True) -> MPS:
    """Create a random MPS with the given shapes.

    Args:
        shapes (List[Tuple[int, int, int]]): The shapes of the tensors in the
            MPS.
        normalize (bool): Whether to normalize the MPS.

    Returns:
        MPS: The random MPS.
    """
    tensors = [crandn(shape) for shape in shapes]
    mps = MPS(len(shapes), tensors=tensors, physical_dimensions=[shape[0] for shape in shapes])
    if normalize:
        mps.normalize()
    return mps


SHAPES = [(2, 1, 2), (2, 2, 4), (2, 4, 2), (2, 2, 1)]


@pytest.mark.parametrize("state", ["zeros", "ones", "x+", "x-", "Neel", "wall", "basis"])
def test_mps_initialization(state: str) -> None:
    """Test that MPS initializes product states with trivial bonds and the orthogonality center on site 0.

    Args:
        state (str): The default state to initialize.
    """
    length = 4
    basis_string = "1001"
    if state == "basis":
        mps = MPS(length=length, state=state, basis_string=basis_string)
    else:
        mps = MPS(length=length, state=state)

    assert mps.length == length
    assert mps.physical_dimensions == [2] * length
    assert mps.orthogonality_center == 0
    assert mps.get_max_bond() == 1

    for i, tensor in enumerate(mps.tensors):
        assert tensor.shape == (2, 1, 1)
        vec = tensor[:, 0, 0]
        if state == "zeros":
            expected = np.array([1, 0], dtype=complex)
        elif state == "ones":
            expected = np.array([0, 1], dtype=complex)
        elif state == "x+":
            expected = np.array([1, 1], dtype=complex) / np.sqrt(2)
        elif state == "x-":
            expected = np.array([1, -1], dtype=complex) / np.sqrt(2)
        elif state == "Neel":
            expected = np.array([1, 0], dtype=complex) if i % 2 else np.array([0, 1], dtype=complex)
        elif state == "wall":
            expected = np.array([1, 0], dtype=complex) if i < length // 2 else np.array([0, 1], dtype=complex)
        else:
            expected = np.zeros(2, dtype=complex)
            expected[int(basis_string[i])] = 1
        np.testing.assert_allclose(vec, expected)


def test_mps_random_state_is_normalized() -> None:
    """Test that the random product state has unit norm."""
    mps = MPS(length=5, state="random")
    assert np.isclose(mps.norm(), 1)
    assert np.isclose(mps.scalar_product(mps), 1)


def test_mps_qudit_basis_state() -> None:
    """Test basis states on sites of different dimensions."""
    mps = MPS(length=3, physical_dimensions=[3, 2, 4], state="basis", basis_string="203")
    vec = mps.to_vec()
    assert vec.shape == (24,)
    assert np.isclose(vec[2 * 8 + 0 * 4 + 3], 1)
    assert np.isclose(np.linalg.norm(vec), 1)


def test_mps_invalid_state() -> None:
    """Test that an unknown state string raises ValueError."""
    with pytest.raises(ValueError, match="Invalid state string"):
        MPS(length=3, state="y+")


def test_mps_custom_tensors() -> None:
    """Test that custom tensors are kept and carry no orthogonality center."""
    mps = random_mps(SHAPES, normalize=False)
    assert mps.orthogonality_center is None
    assert mps.bond_dimensions() == [2, 4, 2]
    assert mps.get_max_bond() == 4
    mps.check_if_valid_mps()


def test_flip_network() -> None:
    """Flipping twice restores the network and flipping maps the orthogonality center."""
    mps = random_mps(SHAPES)
    original = copy.deepcopy(mps)
    assert mps.orthogonality_center == 0

    mps.flip_network()
    assert mps.flipped
    assert mps.orthogonality_center == 3
    assert mps.tensors[0].shape == (2, 1, 2)
    assert mps.tensors[1].shape == (2, 2, 4)
    mps.flip_network()
    assert mps.almost_equal(original)
    assert mps.orthogonality_center == 0


def test_shift_orthogonality_center_right() -> None:
    """Test shifting the orthogonality center to the right through the whole chain."""
    mps = random_mps(SHAPES)
    vec = mps.to_vec()
    for site in range(3):
        mps.shift_orthogonality_center_right(site)
        assert mps.check_canonical_form() == [site + 1]
        assert mps.orthogonality_center == site + 1
    # a shift at the last site does not change the state
    mps.shift_orthogonality_center_right(3)
    assert mps.orthogonality_center == 3
    assert np.allclose(mps.to_vec(), vec)


def test_shift_orthogonality_center_left() -> None:
    """Test shifting the orthogonality center to the left through the whole chain."""
    mps = random_mps(SHAPES)
    mps.set_canonical_form(3)
    vec = mps.to_vec()
    for site in range(3, 0, -1):
        mps.shift_orthogonality_center_left(site)
        assert mps.check_canonical_form() == [site - 1]
        assert mps.orthogonality_center == site - 1
    assert np.allclose(mps.to_vec(), vec)


@pytest.mark.parametrize("desired_center", [0, 1, 2, 3])
def test_set_canonical_form(desired_center: int) -> None:
    """Test that set_canonical_form brings the MPS into mixed canonical form around the given site."""
    mps = random_mps(SHAPES, normalize=False)
    vec = mps.to_vec()
    mps.set_canonical_form(desired_center)
    assert mps.check_canonical_form() == [desired_center]
    assert mps.orthogonality_center == desired_center
    assert np.allclose(mps.to_vec(), vec)


@pytest.mark.parametrize(("start", "target"), [(0, 3), (3, 1), (2, 2)])
def test_move_orthogonality_center(start: int, target: int) -> None:
    """Test moving a known orthogonality center with QR shifts."""
    mps = random_mps(SHAPES)
    mps.set_canonical_form(start)
    mps.move_orthogonality_center(target)
    assert mps.orthogonality_center == target
    assert mps.check_canonical_form() == [target]


def test_move_orthogonality_center_unknown() -> None:
    """An unknown orthogonality center is established from scratch."""
    mps = random_mps(SHAPES, normalize=False)
    mps.move_orthogonality_center(2)
    assert mps.check_canonical_form() == [2]


def test_normalize() -> None:
    """Test that both normal forms give unit norm with the center at the corresponding end."""
    mps = random_mps(SHAPES, normalize=False)
    mps.normalize(form="B")
    assert np.isclose(mps.norm(), 1)
    assert mps.orthogonality_center == 0

    mps = random_mps(SHAPES, normalize=False)
    mps.normalize(form="A")
    assert np.isclose(abs(mps.scalar_product(mps)), 1)
    assert mps.orthogonality_center == 3

    with pytest.raises(ValueError, match="Unknown canonical form"):
        mps.normalize(form="C")


def test_reorthogonalize() -> None:
    """Re-orthogonalization restores the canonical form without changing the state."""
    mps = random_mps(SHAPES)
    # spoil the canonical form while keeping the represented state
    mps.tensors[1] = mps.tensors[1] * 2
    mps.tensors[2] = mps.tensors[2] / 2
    vec = mps.to_vec()

    mps.reorthogonalize()
    assert mps.orthogonality_center == 0
    assert mps.check_canonical_form() == [0]
    assert np.allclose(mps.to_vec(), vec)


def test_scalar_product() -> None:
    """Test the scalar product against the dense state vectors."""
    psi = random_mps(SHAPES)
    phi = random_mps(SHAPES)
    assert np.isclose(psi.scalar_product(phi), np.vdot(psi.to_vec(), phi.to_vec()))
    assert np.isclose(psi.scalar_product(psi), 1)

    zeros = MPS(length=3, state="zeros")
    ones = MPS(length=3, state="ones")
    assert np.isclose(zeros.scalar_product(ones), 0)


def test_norm() -> None:
    """Test the norm with and without a known orthogonality center."""
    mps = random_mps(SHAPES, normalize=False)
    expected = np.linalg.norm(mps.to_vec())
    assert np.isclose(mps.norm(), expected)
    mps.set_canonical_form(1)
    assert np.isclose(mps.norm(), expected)


def test_expect_site() -> None:
    """Test single-site expectation values on product states and against a dense calculation."""
    assert np.isclose(MPS(length=3, state="zeros").expect_site(Z().matrix, 1), 1)
    assert np.isclose(MPS(length=3, state="x+").expect_site(X().matrix, 2), 1)

    mps = random_mps(SHAPES)
    vec = mps.to_vec()
    op = np.kron(np.kron(np.eye(2), Z().matrix), np.eye(4))
    assert np.isclose(mps.expect_site(Z().matrix, 1), np.vdot(vec, op @ vec))
    # the state itself is left untouched
    assert mps.orthogonality_center == 0


def test_measure_local() -> None:
    """Test measuring a single-site operator on every site."""
    mps = MPS(length=4, state="Neel")
    results = mps.measure_local(Z().matrix)
    np.testing.assert_allclose(results, [-1, 1, -1, 1])


def test_expect_bond() -> None:
    """Test two-site expectation values against a dense calculation."""
    mps = random_mps(SHAPES)
    vec = mps.to_vec()
    zz = np.kron(Z().matrix, Z().matrix)
    xx = np.kron(X().matrix, X().matrix)
    expected = [np.vdot(vec, np.kron(np.kron(np.eye(2**b), zz), np.eye(2 ** (2 - b))) @ vec) for b in range(3)]
    for bond in range(3):
        assert np.isclose(mps.expect_bond(zz, bond), expected[bond])

    results = mps.measure_bonds([zz, xx], [0, 2])
    assert np.isclose(results[0], expected[0])
    assert np.isclose(results[1], np.vdot(vec, np.kron(np.eye(4), xx) @ vec))


def test_get_entropy() -> None:
    """Test the entanglement entropy of product and Bell-pair states."""
    assert np.isclose(MPS(length=3, state="x+").get_entropy(1), 0)

    left = np.zeros((2, 1, 2), dtype=complex)
    left[0, 0, 0] = left[1, 0, 1] = 1 / np.sqrt(2)
    right = np.zeros((2, 2, 1), dtype=complex)
    right[0, 0, 0] = right[1, 1, 0] = 1
    bell = MPS(length=2, tensors=[left, right])
    assert np.isclose(bell.get_entropy(0), np.log(2))


def test_check_if_valid_mps() -> None:
    """Test that inconsistent bond dimensions are detected."""
    random_mps(SHAPES).check_if_valid_mps()
    broken = MPS(length=2, tensors=[crandn(2, 1, 2), crandn(2, 3, 1)])
    with pytest.raises(AssertionError):
        broken.check_if_valid_mps()


def test_check_canonical_form_none() -> None:
    """Tests that no canonical form is detected for an MPS in a non-canonical state."""
    mps = random_mps([(2, 1, 2), (2, 2, 3), (2, 3, 1)], normalize=False)
    assert mps.check_canonical_form() == []


def test_check_canonical_form_full() -> None:
    """Test the very special case that all canonical forms are true."""
    delta_left = np.eye(2, dtype=np.complex128).reshape(2, 1, 2)
    delta_right = np.eye(2, dtype=np.complex128).reshape(2, 2, 1)
    delta_mid = np.zeros((2, 2, 2), dtype=np.complex128)
    delta_mid[0, 0, 0] = 1
    delta_mid[1, 1, 1] = 1
    mps = MPS(length=3, tensors=[delta_left, delta_mid, delta_right])
    assert mps.check_canonical_form() == [0, 1, 2]


def test_convert_to_vector() -> None:
    """The first site is the most significant index of the state vector."""
    mps = MPS(length=3, state="basis", basis_string="100")
    vec = mps.to_vec()
    expected = np.zeros(8, dtype=complex)
    expected[4] = 1
    np.testing.assert_allclose(vec, expected)

    plus = MPS(length=3, state="x+").to_vec()
    np.testing.assert_allclose(plus, np.full(8, 1 / np.sqrt(8)))
