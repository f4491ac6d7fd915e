# Copyright (c) 2025 Chair for Design Automation, TUM
# All rights reserved.
#
# SPDX-License-Identifier: MIT
#
# Licensed under the MIT License

"""Library of local operators.

This module defines the single-site operators from which bond Hamiltonians and observables are built.
Each operator is implemented as a class derived from BaseOperator and carries its matrix representation
and physical dimension. The OperatorLibrary class aggregates the operators so that they can be looked up
by name (e.g. "Sz", "x" or "destroy").
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from numpy.typing import NDArray


class BaseOperator:
    """Base class representing a local operator.

    Attributes:
        name: The name of the operator.
        matrix: The matrix representation of the operator.
        physical_dimension: Dimension of the local Hilbert space the operator acts on.
        interaction: Number of sites the operator acts on (1 for site operators, 2 for bond operators).
    """

    name = "custom"

    def __init__(self, mat: NDArray[np.complex128], interaction: int = 1) -> None:
        """Initializes a BaseOperator instance with the given matrix.

        Args:
            mat: The matrix representation of the operator.
            interaction: Number of sites the operator acts on.

        Raises:
            ValueError: If the matrix is not square.
            ValueError: If the matrix size is not a power of the local dimension.
        """
        mat = np.asarray(mat, dtype=complex)
        if mat.ndim != 2 or mat.shape[0] != mat.shape[1]:
            msg = "Matrix must be square"
            raise ValueError(msg)

        physical_dimension = round(mat.shape[0] ** (1 / interaction))
        if physical_dimension**interaction != mat.shape[0]:
            msg = f"Matrix of size {mat.shape[0]} cannot act on {interaction} sites of equal dimension."
            raise ValueError(msg)

        self.matrix = mat
        self.interaction = interaction
        self.physical_dimension = physical_dimension

    def __add__(self, other: BaseOperator) -> BaseOperator:
        """Adds two operators acting on the same number of sites.

        Raises:
            ValueError: If the operators have different interaction levels.
        """
        if self.interaction != other.interaction:
            msg = "Cannot add operators with different interaction"
            raise ValueError(msg)
        return BaseOperator(self.matrix + other.matrix, self.interaction)

    def __mul__(self, other: complex) -> BaseOperator:
        """Scales the operator by a scalar."""
        return BaseOperator(self.matrix * other, self.interaction)

    def __rmul__(self, other: complex) -> BaseOperator:
        """Scales the operator by a scalar (right multiplication)."""
        return self.__mul__(other)

    def __matmul__(self, other: BaseOperator) -> BaseOperator:
        """Tensor product of two operators.

        The result acts on the sites of `self` followed by the sites of `other`.
        """
        return BaseOperator(np.kron(self.matrix, other.matrix), self.interaction + other.interaction)

    def dag(self) -> BaseOperator:
        """Returns the conjugate transpose of the operator."""
        return BaseOperator(np.conj(self.matrix).T, self.interaction)


class Id(BaseOperator):
    """Identity on a d-level site."""

    name = "id"

    def __init__(self, d: int = 2) -> None:
        """Initializes the identity.

        Args:
            d: Physical dimension.
        """
        super().__init__(np.eye(d))


class X(BaseOperator):
    """Pauli-X."""

    name = "x"

    def __init__(self) -> None:
        """Initializes the Pauli-X operator."""
        super().__init__(np.array([[0, 1], [1, 0]]))


class Y(BaseOperator):
    """Pauli-Y."""

    name = "y"

    def __init__(self) -> None:
        """Initializes the Pauli-Y operator."""
        super().__init__(np.array([[0, -1j], [1j, 0]]))


class Z(BaseOperator):
    """Pauli-Z."""

    name = "z"

    def __init__(self) -> None:
        """Initializes the Pauli-Z operator."""
        super().__init__(np.array([[1, 0], [0, -1]]))


class Sx(BaseOperator):
    """Spin-1/2 operator S^x = X/2."""

    name = "sx"

    def __init__(self) -> None:
        """Initializes the S^x operator."""
        super().__init__(0.5 * np.array([[0, 1], [1, 0]]))


class Sy(BaseOperator):
    """Spin-1/2 operator S^y = Y/2."""

    name = "sy"

    def __init__(self) -> None:
        """Initializes the S^y operator."""
        super().__init__(0.5 * np.array([[0, -1j], [1j, 0]]))


class Sz(BaseOperator):
    """Spin-1/2 operator S^z = Z/2."""

    name = "sz"

    def __init__(self) -> None:
        """Initializes the S^z operator."""
        super().__init__(0.5 * np.array([[1, 0], [0, -1]]))


class Sp(BaseOperator):
    """Spin-1/2 raising operator S^+ = S^x + i S^y."""

    name = "sp"

    def __init__(self) -> None:
        """Initializes the S^+ operator."""
        super().__init__(np.array([[0, 1], [0, 0]]))


class Sm(BaseOperator):
    """Spin-1/2 lowering operator S^- = S^x - i S^y."""

    name = "sm"

    def __init__(self) -> None:
        """Initializes the S^- operator."""
        super().__init__(np.array([[0, 0], [1, 0]]))


class Destroy(BaseOperator):
    """Bosonic annihilation operator truncated to d levels."""

    name = "destroy"

    def __init__(self, d: int = 2) -> None:
        """Initializes the annihilation operator.

        Args:
            d: Physical dimension.
        """
        super().__init__(np.diag(np.sqrt(np.arange(1, d)), k=1))


class Create(BaseOperator):
    """Bosonic creation operator truncated to d levels."""

    name = "create"

    def __init__(self, d: int = 2) -> None:
        """Initializes the creation operator.

        Args:
            d: Physical dimension.
        """
        super().__init__(np.diag(np.sqrt(np.arange(1, d)), k=-1))


class Number(BaseOperator):
    """Bosonic number operator truncated to d levels."""

    name = "number"

    def __init__(self, d: int = 2) -> None:
        """Initializes the number operator.

        Args:
            d: Physical dimension.
        """
        super().__init__(np.diag(np.arange(d)))


class OperatorLibrary:
    """A collection of local operator classes.

    Attributes:
        id: Identity.
        x: Pauli-X.
        y: Pauli-Y.
        z: Pauli-Z.
        sx: Spin-1/2 S^x.
        sy: Spin-1/2 S^y.
        sz: Spin-1/2 S^z.
        sp: Spin-1/2 raising operator.
        sm: Spin-1/2 lowering operator.
        destroy: Bosonic annihilation operator.
        create: Bosonic creation operator.
        number: Bosonic number operator.
    """

    id = Id
    x = X
    y = Y
    z = Z
    sx = Sx
    sy = Sy
    sz = Sz
    sp = Sp
    sm = Sm
    destroy = Destroy
    create = Create
    number = Number

    _dimensionful = frozenset({"id", "destroy", "create", "number"})

    @classmethod
    def from_name(cls, name: str, d: int = 2) -> BaseOperator:
        """Look up an operator by its (case-insensitive) name.

        Args:
            name: Operator name, e.g. "Sz", "x" or "destroy".
            d: Physical dimension, used by the operators that are defined for arbitrary d.

        Returns:
            BaseOperator: A fresh instance of the operator.

        Raises:
            ValueError: If no operator with that name exists or it does not match the dimension.
        """
        key = name.lower()
        operator_class = getattr(cls, key, None)
        if not isinstance(operator_class, type) or not issubclass(operator_class, BaseOperator):
            msg = f"Operator {name!r} not found in OperatorLibrary."
            raise ValueError(msg)
        operator = operator_class(d) if key in cls._dimensionful else operator_class()
        if operator.physical_dimension != d:
            msg = f"Operator {name!r} is only defined for physical dimension {operator.physical_dimension}, not {d}."
            raise ValueError(msg)
        return operator
