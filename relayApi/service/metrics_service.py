"""Derived point-of-sale metrics from zero-shot label scores.

Each metric is the mean of its source labels' scores as a percentage. Labels
missing from the classification, or carrying a non-numeric score, are left out
of the mean; a metric with no usable source scores is 0. A 0 therefore means
"no signal", not "good".
"""

import math
from typing import Dict, Iterable, List, Mapping

from relayApi.model.clasificacion_response import Clasificacion, Metricas

METRIC_LABELS: Dict[str, List[str]] = {
    "nps": ["Satisfacción del cliente", "Buena atención del personal"],
    "fillfoundrate": ["Surtido completo de productos", "Alta afluencia de clientes"],
    "damage_rate": ["Producto dañado o defectuoso"],
    "out_of_stock": ["Producto faltante o no disponible", "Problemas de surtido"],
}


def _is_number(value) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not math.isnan(value)


def average(values: Iterable) -> float:
    numbers = [v for v in values if _is_number(v)]
    if not numbers:
        return 0.0
    return sum(numbers) / len(numbers)


def as_percentage(value: float) -> float:
    return round(value * 100, 2)


def scores_by_label(clasificacion: Clasificacion) -> Dict[str, float]:
    return dict(zip(clasificacion.labels, clasificacion.scores))


def compute_metrics(scores: Mapping[str, float]) -> Metricas:
    values = {
        name: as_percentage(average(scores.get(label) for label in labels))
        for name, labels in METRIC_LABELS.items()
    }
    return Metricas(**values)


def missing_formula_labels(candidate_labels: Iterable[str]) -> List[str]:
    """Formula labels that the classifier is never asked about."""
    candidates = set(candidate_labels)
    missing = []
    for labels in METRIC_LABELS.values():
        for label in labels:
            if label not in candidates and label not in missing:
                missing.append(label)
    return missing
