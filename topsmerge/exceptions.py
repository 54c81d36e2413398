# -*- coding: utf-8 -*-
"""
TOPSMerge Exception Hierarchy - Domain-specific exceptions for deburst/merge.

Provides a small exception hierarchy that lets callers catch merge-engine
errors distinctly from Python built-in exceptions. All exceptions subclass
both ``TopsMergeError`` and the appropriate built-in exception for
compatibility with generic handlers.

Author
------
Steven Siebert

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

# Standard library
from typing import Any, Optional


class TopsMergeError(Exception):
    """Base exception for all TOPSMerge errors."""


class ValidationError(TopsMergeError, ValueError):
    """Invalid input data, parameters, or configuration.

    Raised for shape mismatches, out-of-range parameters, and other
    input validation failures.
    """


class GeometryError(TopsMergeError, RuntimeError):
    """Geometry inconsistency between a query and the declared coverage.

    Raised when a coordinate query falls outside every subswath, burst,
    or tie-point cell that should contain it.  Signals a defect in the
    upstream metadata rather than a recoverable condition.

    Parameters
    ----------
    message : str
        Human-readable description.
    subswath : str, optional
        Name of the subswath the query was resolved against.
    coordinate : Any, optional
        The offending coordinate (pixel, time, or slant-range time).
    """

    def __init__(
        self,
        message: str,
        subswath: Optional[str] = None,
        coordinate: Any = None,
    ) -> None:
        super().__init__(message)
        self.subswath = subswath
        self.coordinate = coordinate


class TileComputationError(GeometryError):
    """Aggregate failure of one output tile.

    The destination buffer of the failed tile is left unmodified; the
    whole tile is expected to be recomputed on retry.

    Parameters
    ----------
    message : str
        Human-readable description.
    region : Any
        The target tile region that failed.
    subswath : str, optional
        Subswath context of the underlying failure.
    coordinate : Any, optional
        Coordinate context of the underlying failure.
    """

    def __init__(
        self,
        message: str,
        region: Any,
        subswath: Optional[str] = None,
        coordinate: Any = None,
    ) -> None:
        super().__init__(message, subswath=subswath, coordinate=coordinate)
        self.region = region


class UnsupportedAcquisitionError(TopsMergeError, ValueError):
    """Acquisition mode, mission, or product type is not a TOPSAR SLC layout.

    Raised while building the geometry table, before any tile work.
    """


class MissingBandError(TopsMergeError, KeyError):
    """An expected source band is absent for a selected polarization."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message.
        return str(self.args[0]) if self.args else ''


class DependencyError(TopsMergeError, ImportError):
    """Missing optional dependency required for a specific module.

    Raised when a module requires an optional package (rasterio) that
    is not installed.
    """
