import csv
import json
import logging
import math
import re
from typing import Any, Dict, Iterable, List, Optional, Tuple

from pydantic import ValidationError

from relayApi.model.punto_venta import METRIC_FIELDS, LoadSummary, PuntoVenta
from relayApi.service.errors import DatastoreError
from relayApi.service.supabase_service import SupabaseStore

logger = logging.getLogger(__name__)

_NUMBER = r"[-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?"
POINT_PATTERN = re.compile(
    rf"^\s*(?:SRID=\d+;)?\s*POINT\s*\(\s*({_NUMBER})\s+({_NUMBER})\s*\)\s*$",
    re.IGNORECASE,
)


def parse_point(text: Optional[str]) -> Optional[Tuple[float, float]]:
    """``"POINT(lon lat)"`` -> ``(lon, lat)``; None when absent or malformed."""
    if not text:
        return None
    match = POINT_PATTERN.match(text)
    if not match:
        return None
    return float(match.group(1)), float(match.group(2))


def parse_metric(value: Optional[str]) -> Optional[float]:
    if value is None:
        return None
    value = value.strip().replace(",", ".")
    if not value:
        return None
    try:
        number = float(value)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def punto_from_csv_row(row: Dict[str, Optional[str]]) -> PuntoVenta:
    nombre = (row.get("nombre") or "").strip()
    if not nombre:
        raise ValueError("row has no 'nombre'")
    metrics = {name: parse_metric(row.get(name)) for name in METRIC_FIELDS}
    return PuntoVenta(nombre=nombre, geom=parse_point(row.get("geom")), **metrics)


def punto_from_feature(feature: Dict[str, Any]) -> PuntoVenta:
    properties = feature.get("properties") or {}
    nombre = properties.get("nombre") or properties.get("name")
    if not nombre:
        raise ValueError("feature has no 'nombre' property")

    geometry = feature.get("geometry") or {}
    coordinates = geometry.get("coordinates")
    geom = None
    if geometry.get("type") == "Point" and coordinates and len(coordinates) >= 2:
        geom = (float(coordinates[0]), float(coordinates[1]))
    return PuntoVenta(nombre=str(nombre).strip(), geom=geom)


def read_csv_rows(path: str) -> List[Dict[str, Optional[str]]]:
    with open(path, newline="", encoding="utf-8-sig") as f:
        return list(csv.DictReader(f))


def read_features(path: str) -> List[Dict[str, Any]]:
    with open(path, encoding="utf-8") as f:
        collection = json.load(f)
    features = collection.get("features") if isinstance(collection, dict) else None
    if not isinstance(features, list):
        raise ValueError(f"{path} is not a GeoJSON FeatureCollection")
    return features


async def _upsert_each(store: SupabaseStore, items: Iterable, build, source: str) -> LoadSummary:
    summary = LoadSummary()
    for index, item in enumerate(items, start=1):
        summary.total += 1
        try:
            punto = build(item)
            await store.upsert_punto(punto.to_row())
        except (ValueError, TypeError, AttributeError, ValidationError, DatastoreError) as e:
            summary.failed += 1
            logger.warning("%s item %d skipped: %s", source, index, e)
            continue
        summary.upserted += 1

    logger.info(
        "%s load finished: %d items, %d upserted, %d failed",
        source, summary.total, summary.upserted, summary.failed,
    )
    return summary


async def load_csv(store: SupabaseStore, path: str) -> LoadSummary:
    return await _upsert_each(store, read_csv_rows(path), punto_from_csv_row, "CSV")


async def load_geojson(store: SupabaseStore, path: str) -> LoadSummary:
    return await _upsert_each(store, read_features(path), punto_from_feature, "GeoJSON")
