# Copyright (c) 2025 Chair for Design Automation, TUM
# All rights reserved.
#
# SPDX-License-Identifier: MIT
#
# Licensed under the MIT License

"""Nearest-neighbor Hamiltonians split into bond terms.

This module provides the BondOperator class, which stores a nearest-neighbor Hamiltonian
H = sum_b h_{b,b+1} as a list of two-site and single-site terms, and the GateList class, the ordered
list of two-site matrices (one per bond) that the Trotter decompositions act on. Single-site terms are
distributed onto the bonds such that every site term is counted exactly once:
site b contributes to bond b, and the last site additionally to the last bond.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Union, overload

import numpy as np
from scipy.linalg import expm

from ..libraries.operator_library import BaseOperator, OperatorLibrary

if TYPE_CHECKING:
    from collections.abc import Iterator

    from numpy.typing import NDArray

OperatorLike = Union[str, BaseOperator, "NDArray[np.complex128]"]


class GateList:
    """Ordered list of two-site operators, one per bond.

    Bond b acts on the sites (b, b+1). The matrices are given in the product basis of the two sites,
    i.e. the row index is sigma_b * d_{b+1} + sigma_{b+1}.

    Attributes:
        bonds: The bond label of each entry, strictly ascending.
        matrices: The two-site matrices, one per bond.
    """

    def __init__(self, matrices: list[NDArray[np.complex128]], bonds: list[int] | None = None) -> None:
        """Initializes a GateList.

        Args:
            matrices: The two-site matrices.
            bonds: The bonds they act on. Defaults to 0, 1, ..., len(matrices) - 1.

        Raises:
            ValueError: If the number of bonds does not match the number of matrices,
                the bonds are not strictly ascending or a matrix is not square.
        """
        if bonds is None:
            bonds = list(range(len(matrices)))
        if len(bonds) != len(matrices):
            msg = f"Got {len(matrices)} matrices for {len(bonds)} bonds."
            raise ValueError(msg)
        if any(b1 >= b2 for b1, b2 in zip(bonds, bonds[1:])):
            msg = "Bonds of a GateList must be strictly ascending."
            raise ValueError(msg)
        for mat in matrices:
            if mat.ndim != 2 or mat.shape[0] != mat.shape[1]:
                msg = "Bond operators must be square matrices."
                raise ValueError(msg)
        self.bonds = list(bonds)
        self.matrices = list(matrices)

    def __len__(self) -> int:
        """Number of bonds in the list."""
        return len(self.matrices)

    @overload
    def __getitem__(self, index: int) -> NDArray[np.complex128]: ...

    @overload
    def __getitem__(self, index: slice) -> GateList: ...

    def __getitem__(self, index: int | slice) -> NDArray[np.complex128] | GateList:
        """Positional access.

        An integer returns the matrix at that position, a slice returns a new GateList
        that keeps the bond labels of the selected entries.
        """
        if isinstance(index, slice):
            return GateList(self.matrices[index], self.bonds[index])
        return self.matrices[index]

    def __iter__(self) -> Iterator[tuple[int, NDArray[np.complex128]]]:
        """Iterate over (bond, matrix) pairs in ascending bond order."""
        return iter(zip(self.bonds, self.matrices))

    def odd(self) -> GateList:
        """Bonds 1, 3, 5, ... counting from one, i.e. the bonds (0,1), (2,3), ...

        Returns:
            GateList: The odd sublattice of bonds.
        """
        return self[0::2]

    def even(self) -> GateList:
        """Bonds 2, 4, 6, ... counting from one, i.e. the bonds (1,2), (3,4), ...

        Returns:
            GateList: The even sublattice of bonds.
        """
        return self[1::2]

    def exp(self, coefficient: complex) -> GateList:
        """Exponentiate every bond operator.

        Args:
            coefficient: Time step tau. Each entry h becomes exp(-i * tau * h); an imaginary tau
                gives the non-unitary gates of imaginary-time evolution.

        Returns:
            GateList: A new list with the same bonds. The original list is not modified.
        """
        return GateList([expm(-1j * coefficient * mat) for mat in self.matrices], self.bonds)


class BondOperator:
    """Nearest-neighbor Hamiltonian stored as bond terms.

    Attributes:
        length: Number of sites of the chain.
        physical_dimension: Local dimension of every site.
        two_site_terms: For every bond, a list of (coefficient, op_left, op_right).
        site_terms: For every site, a list of (coefficient, op).
    """

    def __init__(self) -> None:
        """Initializes an empty BondOperator. Use one of the init_* methods to define the chain."""
        self.length = 0
        self.physical_dimension = 2
        self.two_site_terms: list[list[tuple[complex, NDArray[np.complex128], NDArray[np.complex128]]]] = []
        self.site_terms: list[list[tuple[complex, NDArray[np.complex128]]]] = []

    def init_zero(self, length: int, physical_dimension: int = 2) -> None:
        """Zero Hamiltonian on a chain.

        Its gates are identities, so evolving with it leaves any state unchanged.

        Args:
            length: The number of sites (at least two).
            physical_dimension: The local dimension of every site.

        Raises:
            ValueError: If the chain has less than two sites.
        """
        if length < 2:
            msg = "A BondOperator needs at least two sites."
            raise ValueError(msg)
        self.length = length
        self.physical_dimension = physical_dimension
        self.two_site_terms = [[] for _ in range(length - 1)]
        self.site_terms = [[] for _ in range(length)]

    def init_ising(self, length: int, J: float, h: float) -> None:  # noqa: N803
        """Transverse-field Ising chain with spin-1/2 operators.

        H = -J sum_i S^z_i S^z_{i+1} - h sum_i S^x_i

        The critical point is at h = J / 2.

        Args:
            length: The number of sites.
            J: The coupling constant for the interaction.
            h: The transverse field.
        """
        self.init_zero(length)
        for bond in range(length - 1):
            self.add_two_site_term(-J, "Sz", "Sz", bond)
        for site in range(length):
            self.add_site_term(-h, "Sx", site)

    def init_heisenberg(self, length: int, Jx: float, Jy: float, Jz: float, h: float) -> None:  # noqa: N803
        """Heisenberg chain with Pauli operators.

        H = -sum_i (Jx X_i X_{i+1} + Jy Y_i Y_{i+1} + Jz Z_i Z_{i+1}) - h sum_i Z_i

        Args:
            length: The number of sites.
            Jx: The coupling constant for the X interaction.
            Jy: The coupling constant for the Y interaction.
            Jz: The coupling constant for the Z interaction.
            h: The magnetic field strength.
        """
        self.init_zero(length)
        for bond in range(length - 1):
            self.add_two_site_term(-Jx, "x", "x", bond)
            self.add_two_site_term(-Jy, "y", "y", bond)
            self.add_two_site_term(-Jz, "z", "z", bond)
        for site in range(length):
            self.add_site_term(-h, "z", site)

    def add_two_site_term(self, coefficient: complex, op_left: OperatorLike, op_right: OperatorLike, bond: int) -> None:
        """Add coefficient * op_left ⊗ op_right on the sites (bond, bond+1).

        Args:
            coefficient: Prefactor of the term.
            op_left: Operator on site `bond`, as library name, BaseOperator or matrix.
            op_right: Operator on site `bond + 1`.
            bond: The bond index.

        Raises:
            ValueError: If the bond does not exist.
        """
        if bond not in range(self.length - 1):
            msg = f"Bond {bond} does not exist in a chain of {self.length} sites."
            raise ValueError(msg)
        self.two_site_terms[bond].append((coefficient, self._resolve(op_left), self._resolve(op_right)))

    def add_site_term(self, coefficient: complex, op: OperatorLike, site: int) -> None:
        """Add coefficient * op on a single site.

        Args:
            coefficient: Prefactor of the term.
            op: Operator as library name, BaseOperator or matrix.
            site: The site index.

        Raises:
            ValueError: If the site does not exist.
        """
        if site not in range(self.length):
            msg = f"Site {site} does not exist in a chain of {self.length} sites."
            raise ValueError(msg)
        self.site_terms[site].append((coefficient, self._resolve(op)))

    def gates(self) -> GateList:
        """Collect the terms into one two-site operator per bond.

        Returns:
            GateList: h_{b,b+1} for b = 0, ..., length - 2.
        """
        d = self.physical_dimension
        identity = np.eye(d, dtype=complex)
        matrices = []
        for bond in range(self.length - 1):
            mat = np.zeros((d * d, d * d), dtype=complex)
            for coefficient, op_left, op_right in self.two_site_terms[bond]:
                mat += coefficient * np.kron(op_left, op_right)
            for coefficient, op in self.site_terms[bond]:
                mat += coefficient * np.kron(op, identity)
            if bond == self.length - 2:
                for coefficient, op in self.site_terms[bond + 1]:
                    mat += coefficient * np.kron(identity, op)
            matrices.append(mat)
        return GateList(matrices)

    def _resolve(self, op: OperatorLike) -> NDArray[np.complex128]:
        if isinstance(op, str):
            mat = OperatorLibrary.from_name(op, self.physical_dimension).matrix
        elif isinstance(op, BaseOperator):
            mat = op.matrix
        else:
            mat = np.asarray(op, dtype=complex)
        if mat.shape != (self.physical_dimension, self.physical_dimension):
            msg = f"Operator of shape {mat.shape} does not act on a site of dimension {self.physical_dimension}."
            raise ValueError(msg)
        return mat
