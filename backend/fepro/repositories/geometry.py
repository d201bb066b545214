"""
Storage codec for contractor coordinates.

The contractors.coordinates column holds EWKT text that PostGIS casts to
geometry, e.g. ``SRID=4326;POINT(37.6173 55.7558)``. Note the axis order:
WKT points are (x y), i.e. longitude first.
"""
from __future__ import annotations

import re

from ..config.constants import SRID
from ..models.contractor import Coordinates

_NUMBER = r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?"
_POINT_RE = re.compile(
    rf"^\s*(?:SRID=(?P<srid>\d+)\s*;)?\s*POINT\s*\(\s*(?P<x>{_NUMBER})\s+(?P<y>{_NUMBER})\s*\)\s*$",
    re.IGNORECASE,
)


def to_ewkt(coordinates: Coordinates | None) -> str | None:
    """Serialize coordinates to the stored EWKT form."""
    if coordinates is None:
        return None
    return f"SRID={SRID};POINT({float(coordinates.lng)!r} {float(coordinates.lat)!r})"


def from_ewkt(text: str | None) -> Coordinates | None:
    """Parse stored EWKT or plain WKT point text.

    Raises:
        ValueError: if the text is not a point with the expected SRID.
    """
    if text is None or not text.strip():
        return None
    match = _POINT_RE.match(text)
    if match is None:
        raise ValueError(f"Not a WKT point: {text!r}")
    srid = match.group("srid")
    if srid is not None and int(srid) != SRID:
        raise ValueError(f"Unsupported SRID {srid}, expected {SRID}")
    return Coordinates(lat=float(match.group("y")), lng=float(match.group("x")))
