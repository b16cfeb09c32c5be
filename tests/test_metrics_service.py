"""Tests for the label score -> metrics mapping."""

import math

import pytest

from relayApi.config import DEFAULT_CANDIDATE_LABELS
from relayApi.model.clasificacion_response import Clasificacion
from relayApi.service.metrics_service import (
    average,
    compute_metrics,
    missing_formula_labels,
    scores_by_label,
)


class TestAverage:
    def test_empty_is_zero(self):
        assert average([]) == 0.0

    def test_skips_non_numeric(self):
        assert average([0.5, None, "0.9", True, math.nan, 0.7]) == pytest.approx(0.6)

    def test_all_absent_is_zero(self):
        assert average([None, None]) == 0.0


class TestComputeMetrics:
    def test_end_to_end_scores(self):
        """Only the nps labels are present, the rest read 0."""
        metricas = compute_metrics({
            "Satisfacción del cliente": 0.9,
            "Buena atención del personal": 0.8,
        })
        assert metricas.nps == 85.0
        assert metricas.fillfoundrate == 0.0
        assert metricas.damage_rate == 0.0
        assert metricas.out_of_stock == 0.0

    def test_average_of_both_labels(self):
        metricas = compute_metrics({
            "Surtido completo de productos": 0.3,
            "Alta afluencia de clientes": 0.6,
            "Producto faltante o no disponible": 0.12345,
            "Problemas de surtido": 0.54321,
        })
        assert metricas.fillfoundrate == round((0.3 + 0.6) / 2 * 100, 2)
        assert metricas.out_of_stock == round((0.12345 + 0.54321) / 2 * 100, 2)

    def test_damage_rate_is_single_score(self):
        metricas = compute_metrics({"Producto dañado o defectuoso": 0.123456})
        assert metricas.damage_rate == 12.35

    def test_one_absent_label_uses_the_other(self):
        metricas = compute_metrics({"Satisfacción del cliente": 0.4})
        assert metricas.nps == 40.0

    def test_empty_scores(self):
        metricas = compute_metrics({})
        assert metricas.model_dump() == {
            "nps": 0.0,
            "fillfoundrate": 0.0,
            "damage_rate": 0.0,
            "out_of_stock": 0.0,
        }

    def test_non_numeric_score_does_not_raise(self):
        metricas = compute_metrics({"Producto dañado o defectuoso": None})
        assert metricas.damage_rate == 0.0


def test_scores_by_label_zips_parallel_arrays():
    clasificacion = Clasificacion(labels=["a", "b"], scores=[0.1, 0.2])
    assert scores_by_label(clasificacion) == {"a": 0.1, "b": 0.2}


class TestMissingFormulaLabels:
    def test_default_labels_cover_every_metric(self):
        assert missing_formula_labels(DEFAULT_CANDIDATE_LABELS) == []

    def test_reports_labels_not_in_candidates(self):
        labels = [l for l in DEFAULT_CANDIDATE_LABELS if l != "Surtido completo de productos"]
        assert missing_formula_labels(labels) == ["Surtido completo de productos"]
