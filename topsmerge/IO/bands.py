# -*- coding: utf-8 -*-
"""
Band Identity - Explicit band descriptors and storage-name resolution.

The geometry and merge code identify bands by ``BandIdentity`` (kind +
polarization) only.  Storage names such as ``'i_IW1_VV'`` or
``'Sigma0_VV'`` are produced and parsed here, at the I/O boundary.

Naming conventions
------------------
- Source, uncalibrated: ``i_<swath>_<pol>`` and ``q_<swath>_<pol>``
- Source, calibrated: ``<Kind>_<swath>_<pol>`` (``Sigma0_IW2_VH``)
- Target: ``i_<pol>``, ``q_<pol>``, ``<Kind>_<pol>``

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
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

# TOPSMerge internal
from topsmerge.exceptions import MissingBandError, ValidationError
from topsmerge.vocabulary import BandKind, CALIBRATED_KINDS

_POLARIZATIONS = ('HH', 'HV', 'VH', 'VV')

_SOURCE_NAME = re.compile(
    r'^(?P<prefix>i|q|Sigma0|Gamma0|Beta0|DN)_'
    r'(?P<swath>[A-Z]{2}\d)_(?P<pol>[HV]{2})$'
)


@dataclass(frozen=True)
class BandIdentity:
    """A merged band: what it holds and for which polarization.

    Parameters
    ----------
    kind : BandKind
        ``BandKind.SLC`` for the complex i/q pair, otherwise a
        calibrated intensity kind.
    polarization : str
        Polarization channel (``'VV'``, ``'VH'``, ``'HH'``, ``'HV'``).

    Raises
    ------
    ValidationError
        If the polarization is not one of the four linear channels.
    """

    kind: BandKind
    polarization: str

    def __post_init__(self) -> None:
        pol = str(self.polarization).upper()
        if pol not in _POLARIZATIONS:
            raise ValidationError(
                f"Unknown polarization {self.polarization!r}; "
                f"expected one of {_POLARIZATIONS}"
            )
        object.__setattr__(self, 'polarization', pol)
        if not isinstance(self.kind, BandKind):
            object.__setattr__(self, 'kind', BandKind(self.kind))

    def __str__(self) -> str:
        return f"{self.kind.value}_{self.polarization}"


def _prefixes(kind: BandKind) -> Tuple[str, ...]:
    return ('i', 'q') if kind is BandKind.SLC else (kind.value,)


def target_band_names(band: BandIdentity) -> Tuple[str, ...]:
    """Storage name(s) of ``band`` in the merged product.

    Returns
    -------
    tuple of str
        ``('i_VV', 'q_VV')`` for SLC, ``('Sigma0_VV',)`` otherwise.
    """
    return tuple(f"{p}_{band.polarization}" for p in _prefixes(band.kind))


def source_band_names(band: BandIdentity, subswath: str) -> Tuple[str, ...]:
    """Storage name(s) of ``band`` in subswath ``subswath`` of the source."""
    return tuple(f"{p}_{subswath}_{band.polarization}"
                 for p in _prefixes(band.kind))


def parse_source_band_name(
    name: str,
) -> Optional[Tuple[str, BandIdentity, str]]:
    """Split a source band name into subswath, band and component.

    Parameters
    ----------
    name : str
        Source band name, e.g. ``'q_IW2_VH'``.

    Returns
    -------
    tuple or None
        ``(subswath, BandIdentity, prefix)`` where ``prefix`` is the
        leading name component (``'i'``, ``'q'``, ``'Sigma0'``, ...),
        or None when the name does not follow the convention.
    """
    match = _SOURCE_NAME.match(name)
    if match is None:
        return None
    prefix = match.group('prefix')
    kind = BandKind.SLC if prefix in ('i', 'q') else BandKind(prefix)
    return (match.group('swath'),
            BandIdentity(kind, match.group('pol')),
            prefix)


def calibration_kinds_present(band_names: Iterable[str]) -> List[BandKind]:
    """Calibrated band kinds found in ``band_names``, in output order."""
    names = list(band_names)
    return [kind for kind in CALIBRATED_KINDS
            if any(kind.value in name for name in names)]


def polarizations_present(band_names: Iterable[str]) -> List[str]:
    """Sorted polarizations found in conventionally named source bands."""
    pols = set()
    for name in band_names:
        parsed = parse_source_band_name(name)
        if parsed is not None:
            pols.add(parsed[1].polarization)
    return sorted(pols)


def select_output_bands(
    calibrated: bool,
    band_names: Sequence[str],
    polarizations: Optional[Sequence[str]] = None,
) -> List[BandIdentity]:
    """Decide which merged bands to produce.

    Parameters
    ----------
    calibrated : bool
        Whether the source bands are calibrated intensities.
    band_names : Sequence[str]
        All band names of the source product.
    polarizations : Sequence[str], optional
        Selected polarizations.  Defaults to every polarization found
        in the source band names.

    Returns
    -------
    List[BandIdentity]
        One SLC band per polarization when uncalibrated; otherwise one
        band per calibration kind present, per polarization.

    Raises
    ------
    MissingBandError
        If no polarization can be found, or a calibrated source carries
        no calibration band.
    """
    pols = ([p.upper() for p in polarizations] if polarizations
            else polarizations_present(band_names))
    if not pols:
        raise MissingBandError(
            "No polarization selected and none found in source bands"
        )

    if not calibrated:
        return [BandIdentity(BandKind.SLC, pol) for pol in pols]

    kinds = calibration_kinds_present(band_names)
    if not kinds:
        raise MissingBandError(
            "Source is flagged as calibrated but carries no "
            "Sigma0, Beta0, Gamma0 or DN band"
        )
    return [BandIdentity(kind, pol) for pol in pols for kind in kinds]
