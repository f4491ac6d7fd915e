# Copyright (c) 2025 Chair for Design Automation, TUM
# All rights reserved.
#
# SPDX-License-Identifier: MIT
#
# Licensed under the MIT License

"""Step counting and bunching of Trotter steps.

A TEBD evolution over a total time T with time step dt consists of T/dt elementary steps. Consecutive steps
are grouped into bunches: the boundary layers of a Trotter scheme are applied once per bunch and the state
only corresponds to a physical time at the end of a bunch. Bunches therefore have to end at every
measurement time and at every re-orthogonalization, which fixes the bunch size to a common divisor of the
respective step counts.
"""

from __future__ import annotations

from math import gcd


class ConfigurationError(ValueError):
    """Raised when time step, total time and measurement period do not fit together."""


# Ratios of times within this relative distance of an integer are treated as that integer.
RATIO_TOLERANCE = 1e-9


def _integer_ratio(numerator: complex, denominator: complex) -> int | None:
    ratio = complex(numerator) / complex(denominator)
    nearest = round(ratio.real)
    scale = max(1.0, abs(ratio))
    if abs(ratio.real - nearest) > RATIO_TOLERANCE * scale or abs(ratio.imag) > RATIO_TOLERANCE * scale:
        return None
    return nearest


def num_steps(total_time: complex, dt: complex) -> int:
    """Number of elementary steps of an evolution.

    Args:
        total_time: The total (possibly imaginary) evolution time.
        dt: The time step.

    Returns:
        int: total_time / dt.

    Raises:
        ConfigurationError: If dt is zero or total_time is not a non-negative integer multiple of dt.
    """
    if dt == 0:
        msg = "The time step must be non-zero."
        raise ConfigurationError(msg)
    nsteps = _integer_ratio(total_time, dt)
    if nsteps is None or nsteps < 0:
        msg = f"Total time {total_time} is not a non-negative integer multiple of the time step {dt}."
        raise ConfigurationError(msg)
    return nsteps


def measurement_steps(measurement_period: complex, dt: complex) -> int:
    """Number of elementary steps between two measurements.

    Args:
        measurement_period: Time between two measurements, 0 if no period is requested.
        dt: The time step.

    Returns:
        int: measurement_period / dt, or 0 if no period is requested.

    Raises:
        ConfigurationError: If the period is not a positive integer multiple of dt.
    """
    if measurement_period == 0:
        return 0
    mstep = _integer_ratio(measurement_period, dt) if dt != 0 else None
    if mstep is None or mstep <= 0:
        msg = f"Measurement time step {measurement_period} incommensurate with time-evolution time step {dt}."
        raise ConfigurationError(msg)
    return mstep


def bunch_size(nsteps: int, mstep: int, orthogonalize: int, *, boundary_free: bool) -> int:
    """Number of elementary steps per bunch.

    The inner loop of the evolution runs `bunch_size - 1` bulk steps per bunch. Schemes with boundary
    layers complete one more step with their end layers; boundary-free schemes have no such closing step,
    which is why their bunch size is increased by one.

    Args:
        nsteps: Total number of elementary steps.
        mstep: Steps between measurements, 0 if every step may be bunched.
        orthogonalize: Re-orthogonalization period in steps, 0 disables it.
        boundary_free: True if the scheme has neither start nor end layers.

    Returns:
        int: The bunch size.

    Raises:
        ConfigurationError: If the re-orthogonalization period is negative.
    """
    if orthogonalize < 0:
        msg = f"The re-orthogonalization period must be non-negative, got {orthogonalize}."
        raise ConfigurationError(msg)
    nbunch = gcd(mstep, nsteps) if mstep > 0 else nsteps
    if orthogonalize > 0:
        nbunch = gcd(nbunch, orthogonalize)
    if boundary_free:
        nbunch += 1
    return nbunch
