# -*- coding: utf-8 -*-
"""
Burst Locator - Resolve an output azimuth line to source burst lines.

Consecutive TOPS bursts overlap in azimuth time, so an output line can
fall inside one burst or inside the overlap of two neighbours.  The
locator returns both candidates together with the midpoint time that
splits the overlap; the later burst is used from the midpoint onwards.

A line that falls in no burst of a subswath yields ``None``: that
subswath contributes nothing to the output row.

Dependencies
------------
numpy

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

# Standard library
from typing import NamedTuple, Optional, Tuple

# TOPSMerge internal
from topsmerge.geometry.tables import (
    SubSwathGeometry,
    TargetGeometry,
    java_round,
)


class BurstResolution(NamedTuple):
    """Candidate source lines of one output line in one subswath.

    Attributes
    ----------
    target_time : float
        Azimuth time of the output line (fractional days).
    line0 : int
        Source line in the earlier (or only) matching burst.
    burst0 : int
        Index of the earlier (or only) matching burst.
    line1 : int, optional
        Source line in the later burst when two bursts overlap.
    burst1 : int, optional
        Index of the later burst when two bursts overlap.
    mid_time : float, optional
        Mean of the earlier burst's last-line time and the later
        burst's first-line time.
    """

    target_time: float
    line0: int
    burst0: int
    line1: Optional[int] = None
    burst1: Optional[int] = None
    mid_time: Optional[float] = None

    @property
    def in_overlap(self) -> bool:
        """Whether two consecutive bursts cover the output line."""
        return self.line1 is not None

    @property
    def source_line(self) -> int:
        """Source line selected by the midpoint rule.

        The earlier burst owns ``[.., mid_time)``, the later burst owns
        ``[mid_time, ..)``.
        """
        if self.line1 is not None and self.target_time >= self.mid_time:
            return self.line1
        return self.line0

    @property
    def max_line(self) -> int:
        """Largest candidate source line."""
        return self.line0 if self.line1 is None else max(self.line0,
                                                         self.line1)


def locate_burst_lines(
    target_time: float,
    subswath: SubSwathGeometry,
) -> Optional[BurstResolution]:
    """Find the burst line(s) of ``subswath`` covering ``target_time``.

    A burst matches when ``burst_first <= target_time < burst_last``.
    At most two bursts match, since bursts overlap only with their
    immediate neighbour.

    Parameters
    ----------
    target_time : float
        Azimuth time of the output line (fractional days).
    subswath : SubSwathGeometry
        Subswath whose burst table is searched.

    Returns
    -------
    BurstResolution or None
        None when no burst covers the time.
    """
    first = subswath.burst_first_line_time
    last = subswath.burst_last_line_time
    matches = []
    for i in range(subswath.num_bursts):
        if first[i] <= target_time < last[i]:
            line = i * subswath.lines_per_burst + java_round(
                (target_time - first[i]) / subswath.azimuth_time_interval
            )
            matches.append((line, i))
            if len(matches) == 2:
                break

    if not matches:
        return None
    line0, burst0 = matches[0]
    if len(matches) == 1:
        return BurstResolution(target_time, line0, burst0)

    line1, burst1 = matches[1]
    mid_time = (last[burst0] + first[burst1]) / 2.0
    return BurstResolution(target_time, line0, burst0,
                           line1, burst1, float(mid_time))


def resolve_target_line(
    target_y: int,
    subswath: SubSwathGeometry,
    target: TargetGeometry,
) -> Optional[BurstResolution]:
    """Resolve output line ``target_y`` against ``subswath``'s bursts."""
    return locate_burst_lines(target.line_time(target_y), subswath)


def source_line_for_target_line(
    target_y: int,
    subswath: SubSwathGeometry,
    target: TargetGeometry,
) -> Optional[int]:
    """Selected source line for output line ``target_y``, or None."""
    resolution = resolve_target_line(target_y, subswath, target)
    return None if resolution is None else resolution.source_line


def azimuth_line_range(
    subswath: SubSwathGeometry,
    target: TargetGeometry,
) -> Tuple[int, int]:
    """Output line span ``(y_min, y_max)`` covered by ``subswath``.

    Both bounds are truncated toward zero and ``y_max`` is inclusive.
    """
    y_min = int((subswath.first_line_time - target.first_line_time)
                / target.line_time_interval)
    y_max = int((subswath.last_line_time - target.first_line_time)
                / target.line_time_interval)
    return y_min, y_max
