"""
Tests for diet periods and dry-matter / as-fed projection
"""
from decimal import Decimal
from types import SimpleNamespace as NS

import pytest

from models.lote import Lote
from services.ration_period_service import (
    daily_ration,
    find_active_period,
    plan_ration,
    project_lot_ration,
    replace_periods,
    validate_period_coverage,
)
from utils.errors import NotFoundError, ValidationError


def periodo(inicio, fim, dieta_id=1, ingestao="2.0"):
    return NS(dia_inicial=inicio, dia_final=fim, dieta_id=dieta_id, ingestao_ms_pct_pv=Decimal(ingestao))


def lote(dias=90, animais=100):
    return NS(
        quantidade_animais=animais,
        peso_medio_entrada=Decimal("350"),
        gmd_projetado=Decimal("1.5"),
        dias_planejados=dias,
    )


DIETAS = {1: NS(nome="Dieta A", ms_media=Decimal("50"), custo_kg=Decimal("0.5"))}


class TestPeriodCoverage:
    def test_accepts_full_partition(self):
        validate_period_coverage([periodo(1, 20), periodo(21, 60), periodo(61, 90)], 90)

    def test_rejects_short_last_period(self):
        with pytest.raises(ValidationError, match="coverage mismatch"):
            validate_period_coverage([periodo(1, 20), periodo(21, 60), periodo(61, 89)], 90)

    def test_rejects_gap(self):
        with pytest.raises(ValidationError, match="coverage mismatch"):
            validate_period_coverage([periodo(1, 20), periodo(22, 90)], 90)

    def test_rejects_overlap(self):
        with pytest.raises(ValidationError, match="coverage mismatch"):
            validate_period_coverage([periodo(1, 20), periodo(20, 90)], 90)

    def test_rejects_not_starting_on_day_one(self):
        with pytest.raises(ValidationError, match="coverage mismatch"):
            validate_period_coverage([periodo(2, 90)], 90)

    def test_rejects_empty(self):
        with pytest.raises(ValidationError, match="coverage mismatch"):
            validate_period_coverage([], 90)


class TestPlanRation:
    def test_totals_for_three_days(self):
        """Pesos 350, 351.5, 353 -> MS 21.09 kg/cab; MN (50% MS) 42.18 kg/cab"""
        plano = plan_ration([periodo(1, 3)], lote(dias=3), DIETAS)

        assert [d.peso_kg for d in plano.dias] == [Decimal("350.00"), Decimal("351.50"), Decimal("353.00")]
        assert plano.dias[0].ms_kg == Decimal("7.000")
        assert plano.dias[0].mn_kg == Decimal("14.000")
        assert plano.ms_kg_cabeca == Decimal("21.09")
        assert plano.mn_kg_cabeca == Decimal("42.18")
        assert plano.ms_kg_lote == Decimal("2109.00")
        assert plano.mn_kg_lote == Decimal("4218.00")
        assert plano.custo_lote == Decimal("2109.00")

    def test_period_days_sum_to_planned_duration(self):
        periodos = [periodo(1, 20), periodo(21, 60, ingestao="2.2"), periodo(61, 90, ingestao="2.4")]
        plano = plan_ration(periodos, lote(), DIETAS)
        assert sum(p.dias for p in plano.periodos) == 90
        assert len(plano.dias) == 90

    def test_zero_dry_matter_is_rejected(self):
        dietas = {1: NS(nome="Sem MS", ms_media=Decimal("0"), custo_kg=Decimal("0"))}
        with pytest.raises(ValidationError):
            plan_ration([periodo(1, 3)], lote(dias=3), dietas)

    def test_unknown_diet(self):
        with pytest.raises(NotFoundError):
            plan_ration([periodo(1, 3, dieta_id=99)], lote(dias=3), DIETAS)

    def test_rejects_zero_headcount(self):
        with pytest.raises(ValidationError):
            plan_ration([periodo(1, 3)], lote(dias=3, animais=0), DIETAS)


class TestDailyRation:
    def test_day_ten(self):
        """Dia 10: 363.5 kg × 2% = 7.27 kg MS; 14.54 kg MN/cab; 1454 kg no lote"""
        racao = daily_ration([periodo(1, 90)], lote(), DIETAS, 10)
        assert racao.peso_kg == Decimal("363.50")
        assert racao.ms_kg_cabeca == Decimal("7.270")
        assert racao.mn_kg_cabeca == Decimal("14.540")
        assert racao.mn_kg_lote == Decimal("1454.00")

    def test_active_period(self):
        periodos = [periodo(1, 20), periodo(21, 90)]
        assert find_active_period(periodos, 20) is periodos[0]
        assert find_active_period(periodos, 21) is periodos[1]
        with pytest.raises(NotFoundError):
            find_active_period(periodos, 91)


class TestLotRation:
    def test_project_lot_ration_from_database(self, db, feedlot):
        plano = project_lot_ration(db, feedlot.lote_id)
        assert len(plano.dias) == 90
        assert [p.dieta_nome for p in plano.periodos] == ["Adaptação", "Terminação", "Terminação"]

    def test_replace_periods(self, db, feedlot):
        novos = replace_periods(db, feedlot.lote_id, [
            {"dieta_id": feedlot.terminacao_id, "dia_inicial": 31, "dia_final": 90, "ingestao_ms_pct_pv": "2.3"},
            {"dieta_id": feedlot.adaptacao_id, "dia_inicial": 1, "dia_final": 30, "ingestao_ms_pct_pv": "2.0"},
        ])
        assert [(p.dia_inicial, p.dia_final) for p in novos] == [(1, 30), (31, 90)]
        assert len(db.get(Lote, feedlot.lote_id).periodos) == 2

    def test_replace_periods_keeps_old_ones_on_mismatch(self, db, feedlot):
        with pytest.raises(ValidationError, match="coverage mismatch"):
            replace_periods(db, feedlot.lote_id, [
                {"dieta_id": feedlot.adaptacao_id, "dia_inicial": 1, "dia_final": 89, "ingestao_ms_pct_pv": "2.0"},
            ])
        assert len(db.get(Lote, feedlot.lote_id).periodos) == 3
