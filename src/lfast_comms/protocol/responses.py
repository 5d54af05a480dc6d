"""Typed records for telemetry the peer sends back."""

from __future__ import annotations

from dataclasses import dataclass

from .parser import MessageParser


@dataclass
class AltAzResponse:
    """Parsed azimuth/elevation report."""

    az_position: float
    el_position: float

    def __repr__(self) -> str:
        return (
            f"AltAzResponse(az_position={self.az_position!r}, "
            f"el_position={self.el_position!r})"
        )


def parse_altaz_response(response: MessageParser) -> AltAzResponse | None:
    """Parse an ``AzPosition``/``ElPosition`` report.

    Returns ``None`` if the message failed to parse or either field is
    missing or not a number.
    """
    if not response.succeeded():
        return None

    az = response.lookup("AzPosition", float)
    el = response.lookup("ElPosition", float)
    if az is None or el is None:
        return None
    return AltAzResponse(az_position=az, el_position=el)
