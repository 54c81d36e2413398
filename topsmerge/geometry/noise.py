# -*- coding: utf-8 -*-
"""
Noise Tables - Interpolate annotated range noise at target pixels.

Noise vectors are consumed only as a tie-break between two subswaths
covering the same output pixel: the subswath with the lower noise power
wins.  Each vector is linearly interpolated over its pixel breakpoints
(clamped at both ends), then the two vectors bracketing the source line
are blended linearly.

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
from typing import Optional, Sequence, Union

# Third-party
import numpy as np

# TOPSMerge internal
from topsmerge.exceptions import ValidationError
from topsmerge.geometry.mapper import sample_index_in_source
from topsmerge.geometry.tables import (
    NoiseVector,
    SubSwathGeometry,
    TargetGeometry,
)


def interpolate_noise(
    vectors: Sequence[NoiseVector],
    source_x: Union[float, np.ndarray],
    source_y: int,
) -> np.ndarray:
    """Bilinear noise power at source sample(s) ``source_x`` on line ``source_y``.

    Parameters
    ----------
    vectors : Sequence[NoiseVector]
        Noise vectors ordered by line.
    source_x : float or np.ndarray
        Source sample index or indices.
    source_y : int
        Source line.

    Returns
    -------
    np.ndarray
        Noise power, same shape as ``np.atleast_1d(source_x)``.

    Raises
    ------
    ValidationError
        If ``vectors`` is empty.
    """
    if not vectors:
        raise ValidationError("No noise vectors to interpolate")

    sx = np.atleast_1d(np.asarray(source_x, dtype=np.float64))
    lines = [v.line for v in vectors]

    if source_y < lines[0]:
        v0 = v1 = vectors[0]
        dy = 0.0
    elif source_y >= lines[-1]:
        v0 = v1 = vectors[-1]
        dy = 0.0
    else:
        k = int(np.searchsorted(lines, source_y, side='right')) - 1
        v0, v1 = vectors[k], vectors[k + 1]
        dy = (source_y - v0.line) / (v1.line - v0.line)

    n0 = np.interp(sx, v0.pixels, v0.values)
    if v1 is v0:
        return n0
    n1 = np.interp(sx, v1.pixels, v1.values)
    return (1.0 - dy) * n0 + dy * n1


def subswath_noise(
    target_x: Union[int, np.ndarray],
    target_time: float,
    subswath: SubSwathGeometry,
    polarization: str,
    target: TargetGeometry,
) -> Optional[np.ndarray]:
    """Noise power of ``subswath`` at target column(s) on one output line.

    The source line is counted from the first noise vector's time at the
    target line interval.

    Returns
    -------
    np.ndarray or None
        None when the subswath carries no noise vectors for
        ``polarization``.
    """
    vectors = subswath.noise.get(polarization)
    if not vectors:
        return None
    sx = sample_index_in_source(target_x, subswath, target)
    sy = int((target_time - vectors[0].time) / target.line_time_interval)
    return interpolate_noise(vectors, sx, sy)
