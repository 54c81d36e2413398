# -*- coding: utf-8 -*-
"""
TOPSMerge Vocabulary - Enumerations shared across the merge engine.

Defines the supported TOPSAR acquisition modes and the band kinds the
engine can merge.  Values are plain strings so they serialize cleanly in
logs and band names.

Author
------
Duane Smalley, PhD
duane.d.smalley@gmail.com

License
-------
MIT License
Copyright (c) 2024 geoint.org
See LICENSE file for full text.

Created
-------
2026-10-19

Modified
--------
2026-10-19
"""

from enum import Enum


class AcquisitionMode(Enum):
    """Supported TOPSAR acquisition modes.

    The mode fixes the number of subswaths in the product.
    """

    IW = "IW"
    EW = "EW"

    @property
    def num_subswaths(self) -> int:
        """Number of subswaths acquired in this mode.

        Returns
        -------
        int
            3 for Interferometric Wide swath, 5 for Extra Wide swath.
        """
        return 3 if self is AcquisitionMode.IW else 5

    def subswath_names(self):
        """Ordered subswath names for this mode (``'IW1'``, ``'IW2'``, ...)."""
        return [f"{self.value}{i + 1}" for i in range(self.num_subswaths)]


class BandKind(Enum):
    """Kinds of band the engine merges.

    ``SLC`` is the uncalibrated complex product stored as paired
    in-phase/quadrature 16-bit integers.  The remaining kinds are
    calibrated real-valued intensities stored as 32-bit floats.
    """

    SLC = "SLC"
    SIGMA0 = "Sigma0"
    GAMMA0 = "Gamma0"
    BETA0 = "Beta0"
    DN = "DN"

    @property
    def is_complex(self) -> bool:
        """Whether samples are ``(i, q)`` integer pairs."""
        return self is BandKind.SLC


#: Calibrated kinds in the order the output bands are created.
CALIBRATED_KINDS = (
    BandKind.SIGMA0,
    BandKind.BETA0,
    BandKind.GAMMA0,
    BandKind.DN,
)
