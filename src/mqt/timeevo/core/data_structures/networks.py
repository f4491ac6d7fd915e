# Copyright (c) 2025 Chair for Design Automation, TUM
# All rights reserved.
#
# SPDX-License-Identifier: MIT
#
# Licensed under the MIT License

"""Tensor Network Data Structures.

This module implements the Matrix Product State (MPS) class that TEBD acts on. Besides the construction
of product states it provides the canonical-form bookkeeping that two-site gate application relies on
(shifting, setting and re-establishing the orthogonality center), scalar products and local expectation
values, as well as validity checks used by the tests.
"""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING

import numpy as np
import opt_einsum as oe

from ..methods.decompositions import merge_mps_tensors, right_qr

if TYPE_CHECKING:
    from numpy.typing import NDArray


class MPS:
    """Matrix Product State (MPS) class for representing quantum states.

    The index order of every site tensor is (sigma, chi_l-1, chi_l).

    Attributes:
    length (int): The number of sites in the MPS.
    tensors (list[NDArray[np.complex128]]): List of rank-3 tensors representing the MPS.
    physical_dimensions (list[int]): List of physical dimensions for each site.
    flipped (bool): Indicates if the network has been flipped.
    orthogonality_center (int | None): Site of the orthogonality center if it is known, None otherwise.
        All tensors left of it are left-isometries, all tensors right of it right-isometries.
    """

    def __init__(
        self,
        length: int,
        tensors: list[NDArray[np.complex128]] | None = None,
        physical_dimensions: list[int] | int | None = None,
        state: str = "zeros",
        basis_string: str | None = None,
    ) -> None:
        """Initializes a Matrix Product State (MPS).

        Args:
            length: Number of sites in the MPS.
            tensors: Predefined tensors representing the MPS. Must match `length` if provided.
                If None, tensors are initialized according to `state`. Predefined tensors are not assumed
                to be in any canonical form.
            physical_dimensions: Physical dimension for each site. Defaults to spin-1/2 sites (dimension 2).
            state: Initial product state. Valid options include:
                - "zeros": All sites in |0⟩ (spin up).
                - "ones": All sites in |1⟩ (spin down).
                - "x+": Each site in (|0⟩ + |1⟩)/√2.
                - "x-": Each site in (|0⟩ - |1⟩)/√2.
                - "Neel": Alternating pattern |1010...⟩.
                - "wall": Domain wall in the middle of the chain |000111⟩.
                - "random": Each site in a random real superposition.
                - "basis": Computational basis state given by `basis_string`.
                Default is "zeros".
            basis_string: String such as "0101" used with state="basis". Digits above 1 address the higher
                levels of qudit sites.

        Raises:
            ValueError: If the provided `state` parameter does not match any valid initialization string.
        """
        self.flipped = False
        self.length = length
        if physical_dimensions is None:
            self.physical_dimensions = [2] * length
        elif isinstance(physical_dimensions, int):
            self.physical_dimensions = [physical_dimensions] * length
        else:
            self.physical_dimensions = list(physical_dimensions)
        assert len(self.physical_dimensions) == length

        if tensors is not None:
            assert len(tensors) == length
            self.tensors = list(tensors)
            self.orthogonality_center: int | None = None
            return

        self.tensors = []
        if state == "basis":
            assert basis_string is not None, "basis_string must be provided for 'basis' state initialization."
            self.init_mps_from_basis(basis_string, self.physical_dimensions)
            self.orthogonality_center = 0
            return

        rng = np.random.default_rng()
        for i, d in enumerate(self.physical_dimensions):
            vector = np.zeros(d, dtype=complex)
            if state == "zeros":
                vector[0] = 1
            elif state == "ones":
                vector[1] = 1
            elif state == "x+":
                vector[0] = 1 / np.sqrt(2)
                vector[1] = 1 / np.sqrt(2)
            elif state == "x-":
                vector[0] = 1 / np.sqrt(2)
                vector[1] = -1 / np.sqrt(2)
            elif state == "Neel":
                if i % 2:
                    vector[0] = 1
                else:
                    vector[1] = 1
            elif state == "wall":
                if i < length // 2:
                    vector[0] = 1
                else:
                    vector[1] = 1
            elif state == "random":
                vector[:] = rng.random(d)
                vector /= np.linalg.norm(vector)
            else:
                msg = "Invalid state string"
                raise ValueError(msg)
            self.tensors.append(vector.reshape(d, 1, 1))

        # A normalized product state is canonical with respect to every site.
        self.orthogonality_center = 0

    def init_mps_from_basis(self, basis_string: str, physical_dimensions: list[int]) -> None:
        """Initialize a list of MPS tensors representing a product state from a basis string.

        Args:
            basis_string: A string like "0101" indicating the computational basis state.
            physical_dimensions: The physical dimension of each site.
        """
        assert len(basis_string) == len(physical_dimensions)
        for site, char in enumerate(basis_string):
            idx = int(char)
            tensor = np.zeros((physical_dimensions[site], 1, 1), dtype=complex)
            tensor[idx, 0, 0] = 1.0
            self.tensors.append(tensor)

    def bond_dimensions(self) -> list[int]:
        """Virtual bond dimensions between neighboring sites.

        Returns:
            list[int]: Entry i is the dimension of the bond between sites i and i+1.
        """
        return [tensor.shape[2] for tensor in self.tensors[:-1]]

    def get_max_bond(self) -> int:
        """Maximum virtual bond dimension of the network.

        Returns:
            int: The largest bond dimension, 1 for a product state.
        """
        return max(self.bond_dimensions(), default=1)

    def flip_network(self) -> None:
        """Flip MPS.

        Flips the bond dimensions in the network so that we can do operations
        from right to left rather than coding it twice.
        """
        new_tensors = []
        for tensor in self.tensors:
            new_tensor = np.transpose(tensor, (0, 2, 1))
            new_tensors.append(new_tensor)

        new_tensors.reverse()
        self.tensors = new_tensors
        self.physical_dimensions = self.physical_dimensions[::-1]
        if self.orthogonality_center is not None:
            self.orthogonality_center = self.length - 1 - self.orthogonality_center
        self.flipped = not self.flipped

    def almost_equal(self, other: MPS) -> bool:
        """Checks if the tensors of this MPS are almost equal to the other MPS.

        Args:
            other (MPS): The other MPS to compare with.

        Returns:
            bool: True if all tensors agree in shape and value up to numerical tolerance.
        """
        if self.length != other.length:
            return False
        for i in range(self.length):
            if self.tensors[i].shape != other.tensors[i].shape:
                return False
            if not np.allclose(self.tensors[i], other.tensors[i]):
                return False
        return True

    def shift_orthogonality_center_right(self, current_orthogonality_center: int) -> None:
        """Shifts orthogonality center right.

        Performs a QR decomposition of the center tensor and absorbs the R factor into the right neighbor.
        On the last site the R factor is kept in place so that neither norm nor phase of the state change.

        Args:
            current_orthogonality_center (int): current center
        """
        if current_orthogonality_center == self.length - 1:
            self.orthogonality_center = current_orthogonality_center
            return
        tensor = self.tensors[current_orthogonality_center]
        site_tensor, bond_tensor = right_qr(tensor)
        self.tensors[current_orthogonality_center] = site_tensor
        self.tensors[current_orthogonality_center + 1] = oe.contract(
            "ij, ajc->aic", bond_tensor, self.tensors[current_orthogonality_center + 1]
        )
        self.orthogonality_center = current_orthogonality_center + 1

    def shift_orthogonality_center_left(self, current_orthogonality_center: int) -> None:
        """Shifts orthogonality center left.

        This function flips the network, performs a right shift, then flips the network again.

        Args:
            current_orthogonality_center (int): current center
        """
        self.flip_network()
        self.shift_orthogonality_center_right(self.length - current_orthogonality_center - 1)
        self.flip_network()

    def set_canonical_form(self, orthogonality_center: int) -> None:
        """Sets canonical form of MPS.

        Left and right normalizes an MPS around a selected site.
        NOTE: Slow method compared to shifting based on known form and should be avoided.

        Args:
            orthogonality_center (int): site of matrix MPS around which we normalize
        """

        def sweep_decomposition(orthogonality_center: int) -> None:
            for site in range(orthogonality_center):
                self.shift_orthogonality_center_right(site)

        sweep_decomposition(orthogonality_center)
        self.flip_network()
        flipped_orthogonality_center = self.length - 1 - orthogonality_center
        sweep_decomposition(flipped_orthogonality_center)
        self.flip_network()
        self.orthogonality_center = orthogonality_center

    def move_orthogonality_center(self, target: int) -> None:
        """Move the orthogonality center to `target`.

        Uses single QR shifts when the current center is known and falls back to
        `set_canonical_form` otherwise.

        Args:
            target: The new orthogonality center.
        """
        if self.orthogonality_center is None:
            self.set_canonical_form(target)
            return
        while self.orthogonality_center < target:
            self.shift_orthogonality_center_right(self.orthogonality_center)
        while self.orthogonality_center > target:
            self.shift_orthogonality_center_left(self.orthogonality_center)

    def normalize(self, form: str = "B") -> None:
        """Normalize MPS.

        Brings the network into left ("A") or right ("B") canonical form and divides it by its norm.

        Args:
            form (str): The form to normalize the network to. Default is "B".

        Raises:
            ValueError: If the form is neither "A" nor "B".
        """
        if form == "B":
            self.set_canonical_form(0)
            site = 0
        elif form == "A":
            self.set_canonical_form(self.length - 1)
            site = self.length - 1
        else:
            msg = f"Unknown canonical form {form!r}, expected 'A' or 'B'."
            raise ValueError(msg)
        self.tensors[site] = self.tensors[site] / np.linalg.norm(self.tensors[site])

    def reorthogonalize(self) -> None:
        """Re-establish the canonical form of the MPS.

        Sweeps the orthogonality center from the left end across the whole chain and back to the first site
        with QR decompositions. This removes the loss of orthogonality that accumulates over many
        truncated gate applications without changing the represented state.
        """
        self.orthogonality_center = None
        self.set_canonical_form(self.length - 1)
        self.move_orthogonality_center(0)

    def scalar_product(self, other: MPS) -> np.complex128:
        """Compute the scalar (inner) product <self|other> between two Matrix Product States.

        The corresponding tensors of both states are contracted site by site from left to right.

        Args:
            other (MPS): The second Matrix Product State.

        Returns:
            np.complex128: The resulting scalar product as a complex number.
        """
        assert self.length == other.length
        result = None
        for idx in range(self.length):
            theta = oe.contract("abc,ade->bdce", np.conj(self.tensors[idx]), other.tensors[idx])
            result = theta if idx == 0 else oe.contract("abcd,cdef->abef", result, theta)
        assert result is not None
        return np.complex128(np.squeeze(result))

    def norm(self) -> np.float64:
        """Norm of the MPS.

        Returns:
            np.float64: sqrt(<psi|psi>).
        """
        if self.orthogonality_center is not None:
            return np.float64(np.linalg.norm(self.tensors[self.orthogonality_center]))
        return np.float64(np.sqrt(abs(self.scalar_product(self))))

    def expect_site(self, operator: NDArray[np.complex128], site: int) -> np.complex128:
        """Expectation value of a single-site operator.

        Args:
            operator: Matrix of shape (d, d) acting on `site`.
            site: The site index.

        Returns:
            np.complex128: <psi|O|psi> / <psi|psi>.
        """
        assert site in range(self.length), f"Observable acting on non-existing site: {site}"
        temp_state = copy.deepcopy(self)
        temp_state.move_orthogonality_center(site)
        return temp_state._local_expect(operator, site)

    def expect_bond(self, operator: NDArray[np.complex128], bond: int) -> np.complex128:
        """Expectation value of a two-site operator on the bond (bond, bond+1).

        Args:
            operator: Matrix of shape (d0*d1, d0*d1) in the product basis of the two sites.
            bond: Left site of the bond.

        Returns:
            np.complex128: <psi|O|psi> / <psi|psi>.
        """
        assert bond in range(self.length - 1), f"Observable acting on non-existing bond: {bond}"
        temp_state = copy.deepcopy(self)
        temp_state.move_orthogonality_center(bond)
        return temp_state._bond_expect(operator, bond)

    def measure_local(self, operator: NDArray[np.complex128]) -> NDArray[np.float64]:
        """Measure a single-site operator on every site.

        The orthogonality center of a working copy is walked through the chain once.

        Args:
            operator: Matrix of shape (d, d).

        Returns:
            NDArray[np.float64]: Real parts of the expectation values, one per site.
        """
        temp_state = copy.deepcopy(self)
        results = np.zeros(self.length, dtype=np.float64)
        for site in range(self.length):
            temp_state.move_orthogonality_center(site)
            results[site] = temp_state._local_expect(operator, site).real
        return results

    def measure_bonds(self, operators: list[NDArray[np.complex128]], bonds: list[int]) -> NDArray[np.complex128]:
        """Measure two-site operators on the given bonds.

        Args:
            operators: One matrix per bond.
            bonds: Left sites of the bonds in ascending order.

        Returns:
            NDArray[np.complex128]: The expectation values in the order of `bonds`.
        """
        temp_state = copy.deepcopy(self)
        results = np.zeros(len(bonds), dtype=np.complex128)
        for i, (operator, bond) in enumerate(zip(operators, bonds)):
            temp_state.move_orthogonality_center(bond)
            results[i] = temp_state._bond_expect(operator, bond)
        return results

    def get_entropy(self, bond: int) -> np.float64:
        """Von Neumann entanglement entropy across the bond (bond, bond+1).

        Args:
            bond: Left site of the bond.

        Returns:
            np.float64: The bipartite entanglement entropy.
        """
        assert bond in range(self.length - 1), "Entropy is defined on a bond (two adjacent sites)."
        temp_state = copy.deepcopy(self)
        temp_state.move_orthogonality_center(bond)
        tensor = temp_state.tensors[bond]
        mat = tensor.reshape(tensor.shape[0] * tensor.shape[1], tensor.shape[2])
        s = np.linalg.svd(mat, compute_uv=False)
        s2 = s.astype(np.float64) ** 2
        norm = np.sum(s2)
        if norm == 0:
            return np.float64(0.0)
        p = s2 / norm
        p = p[p > 0]
        return np.float64(-np.sum(p * np.log(p)))

    def _local_expect(self, operator: NDArray[np.complex128], site: int) -> np.complex128:
        # requires the orthogonality center on `site`
        tensor = self.tensors[site]
        value = oe.contract("abc,ad,dbc->", np.conj(tensor), operator, tensor)
        return np.complex128(value / np.vdot(tensor, tensor))

    def _bond_expect(self, operator: NDArray[np.complex128], bond: int) -> np.complex128:
        # requires the orthogonality center on `bond`
        theta = merge_mps_tensors(self.tensors[bond], self.tensors[bond + 1])
        value = oe.contract("abc,ad,dbc->", np.conj(theta), operator, theta)
        return np.complex128(value / np.vdot(theta, theta))

    def check_if_valid_mps(self) -> None:
        """MPS validity check.

        Check that the bond dimensions between consecutive tensors are consistent and
        that both boundary bonds are trivial.
        """
        assert self.tensors[0].shape[1] == 1
        right_bond = self.tensors[0].shape[2]
        for tensor in self.tensors[1::]:
            assert tensor.shape[1] == right_bond
            right_bond = tensor.shape[2]
        assert right_bond == 1

    def check_canonical_form(self) -> list[int]:
        """Checks canonical form of MPS.

        Returns all sites around which the MPS is in mixed-canonical form, i.e. all sites i such that
        every tensor left of i is a left-isometry and every tensor right of i is a right-isometry.

        Returns:
            list[int]: The possible orthogonality centers, empty if the MPS is in no canonical form.
        """
        a_truth = [False for _ in range(self.length)]
        b_truth = [False for _ in range(self.length)]

        for i, tensor in enumerate(self.tensors):
            mat = oe.contract("ijk, ijl->kl", np.conj(tensor), tensor)
            if np.allclose(mat, np.eye(mat.shape[0], dtype=complex)):
                a_truth[i] = True

        for i, tensor in enumerate(self.tensors):
            mat = oe.contract("ijk, ilk->jl", tensor, np.conj(tensor))
            if np.allclose(mat, np.eye(mat.shape[0], dtype=complex)):
                b_truth[i] = True

        return [i for i in range(self.length) if all(a_truth[:i]) and all(b_truth[i + 1 :])]

    def to_vec(self) -> NDArray[np.complex128]:
        r"""Converts the MPS to a full state vector representation.

        The first site is the most significant index of the vector.

        Returns:
                A one-dimensional NumPy array of length \(\prod_{\ell=1}^L d_\ell\)
                representing the state vector.
        """
        vec = self.tensors[0].transpose(1, 0, 2).reshape(-1, self.tensors[0].shape[2])
        for tensor in self.tensors[1:]:
            vec = np.tensordot(vec, tensor, axes=([-1], [1]))
            vec = vec.reshape(-1, vec.shape[-1])
        return vec.reshape(-1)
