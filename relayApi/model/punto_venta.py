from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel

METRIC_FIELDS = ("nps", "fillfoundrate", "damage_rate", "out_of_stock")


def point_to_ewkt(point: Optional[Tuple[float, float]]) -> Optional[str]:
    """Render a (lon, lat) pair the way PostGIS accepts it through PostgREST."""
    if point is None:
        return None
    lon, lat = point
    return f"SRID=4326;POINT({lon} {lat})"


class PuntoVenta(BaseModel):
    """A point-of-sale record, keyed by its unique name."""

    nombre: str
    geom: Optional[Tuple[float, float]] = None
    nps: Optional[float] = None
    fillfoundrate: Optional[float] = None
    damage_rate: Optional[float] = None
    out_of_stock: Optional[float] = None

    def to_row(self) -> Dict[str, Any]:
        # geom is always sent so a malformed point clears it; metrics only when known
        row: Dict[str, Any] = {"nombre": self.nombre, "geom": point_to_ewkt(self.geom)}
        for name in METRIC_FIELDS:
            value = getattr(self, name)
            if value is not None:
                row[name] = value
        return row


@dataclass
class LoadSummary:
    total: int = 0
    upserted: int = 0
    failed: int = 0
