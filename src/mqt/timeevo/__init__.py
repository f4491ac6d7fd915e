# Copyright (c) 2025 Chair for Design Automation, TUM
# All rights reserved.
#
# SPDX-License-Identifier: MIT
#
# Licensed under the MIT License

"""MQT TimeEvo init file.

MQT TimeEvo is a package for the real- and imaginary-time evolution of one-dimensional quantum many-body
states, stored as Matrix Product States, with Trotterized gate sequences (TEBD).
"""

from __future__ import annotations

from ._version import version as __version__
from ._version import version_tuple as version_info

__all__ = ["__version__", "version_info"]
