# Copyright (c) 2025 Chair for Design Automation, TUM
# All rights reserved.
#
# SPDX-License-Identifier: MIT
#
# Licensed under the MIT License

"""Simulation Parameters for TEBD time evolution.

This module provides the Observable class, describing a quantity to be measured during a time evolution,
and the TEBDSimParams class, which bundles the options of a TEBD run: the observer that records
measurements, the re-orthogonalization period, and the truncation settings (maximum bond dimension and
discarded-weight threshold) passed on to every two-site gate application.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from ..libraries.operator_library import BaseOperator, OperatorLibrary
from .observer import NoTimeEvolutionObserver

if TYPE_CHECKING:
    from .observer import TimeEvolutionObserver

METRICS = frozenset({"max_bond", "entropy"})


class Observable:
    """Observable class.

    A quantity to be measured at the recording times of an ExpectationObserver.

    Attributes:
    ----------
    name : str
        Name of the operator or metric.
    operator : BaseOperator | None
        The operator measured, None for metrics.
    sites : int | list[int] | None
        A site for single-site operators (None measures every site), a bond [i, i+1] for
        two-site operators and the entropy metric.
    results : list
        One entry per recording time.
    """

    def __init__(self, operator: BaseOperator | str, sites: int | list[int] | None = None) -> None:
        """Initializes an Observable instance.

        Parameters
        ----------
        operator :
            The operator or the name of an operator in the OperatorLibrary. The metric names
            "max_bond" (largest bond dimension) and "entropy" (entanglement entropy of a bond) are accepted as well.
        sites :
            The site or bond on which this observable is measured.

        Raises:
        ------
        ValueError
            If a two-site observable is not given a nearest-neighbor bond.
        """
        self.operator: BaseOperator | None
        if isinstance(operator, str) and operator in METRICS:
            self.name = operator
            self.operator = None
        else:
            if isinstance(operator, str):
                operator = OperatorLibrary.from_name(operator)
            self.name = operator.name
            self.operator = operator

        needs_bond = self.name == "entropy" or (self.operator is not None and self.operator.interaction == 2)
        if needs_bond and (not isinstance(sites, list) or len(sites) != 2 or sites[1] - sites[0] != 1):
            msg = f"Observable {self.name!r} must be measured on a nearest-neighbor bond [i, i+1], got {sites!r}."
            raise ValueError(msg)
        self.sites = sites
        self.results: list[float | np.ndarray] = []


class TEBDSimParams:
    """TEBD Simulation Parameters.

    A class to represent the options of a TEBD time evolution.

    Attributes:
    -----------
    observer :
        The observer recording measurements and deciding on early termination.
    orthogonalize :
        Re-orthogonalize the MPS every `orthogonalize` elementary steps, 0 disables it.
    max_bond_dim :
        The maximum bond dimension kept after every gate application.
    threshold :
        Maximal relative discarded weight of a single truncation.
    show_progress :
        Show a progress bar over the elementary steps.
    """

    def __init__(
        self,
        observer: TimeEvolutionObserver | None = None,
        orthogonalize: int = 0,
        max_bond_dim: int = 4096,
        threshold: float = 0.0,
        *,
        show_progress: bool = False,
    ) -> None:
        """TEBD simulation parameters initialization.

        Parameters
        ----------
        observer :
            Observer of the evolution, by default an observer that measures nothing.
        orthogonalize :
            Re-orthogonalization period in elementary steps, by default 0 (never).
        max_bond_dim :
            Maximum bond dimension allowed, by default 4096.
        threshold :
            Discarded-weight threshold of the SVD truncation, by default 0 (only numerically zero
            singular values are dropped).
        show_progress :
            Flag indicating whether a progress bar is shown, by default False.

        Raises:
        ------
        ValueError
            If one of the numerical options is out of range.
        """
        if max_bond_dim < 1:
            msg = f"max_bond_dim must be positive, got {max_bond_dim}."
            raise ValueError(msg)
        if threshold < 0:
            msg = f"threshold must be non-negative, got {threshold}."
            raise ValueError(msg)
        if orthogonalize < 0:
            msg = f"orthogonalize must be non-negative, got {orthogonalize}."
            raise ValueError(msg)
        self.observer = observer if observer is not None else NoTimeEvolutionObserver()
        self.orthogonalize = orthogonalize
        self.max_bond_dim = max_bond_dim
        self.threshold = threshold
        self.show_progress = show_progress
