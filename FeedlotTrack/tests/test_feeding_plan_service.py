"""
Tests for building and saving the daily feeding plan
"""
from datetime import date
from decimal import Decimal

import pytest

from enums.enums import (
    ComportamentoManhaEnum as Comp,
    FaseDietaEnum as Fase,
    SituacaoCochoEnum as Sit,
    TipoLeituraEnum,
)
from models.planejamento import PlanejamentoTrato
from services.bunk_reading_service import register_morning_reading
from services.feeding_plan_service import build_feeding_plan, get_feeding_plan, save_feeding_plan
from services.feeding_schedule_service import ScheduleOverride, remove_event
from utils.errors import ValidationError

DIA_10 = date(2026, 1, 10)
DIA_11 = date(2026, 1, 11)


class TestBuildFeedingPlan:
    def test_simple_reading_uses_base_ration(self, db, feedlot):
        """Dia 10: 363.5 kg × 2% / 50% MS × 100 animais = 1454 kg"""
        draft = build_feeding_plan(db, feedlot.lote_id, DIA_10, TipoLeituraEnum.simples)
        assert draft.dias_cocho == 10
        assert draft.peso_medio_projetado == Decimal("363.5")
        assert draft.quantidade_base_kg == Decimal("1454")
        assert draft.total_kg == Decimal("1454")
        assert draft.dieta_id == feedlot.adaptacao_id
        assert draft.fase_dieta == Fase.adaptacao_crescimento
        assert [t.quantidade_kg for t in draft.tratos] == [
            Decimal("484.62"), Decimal("484.62"), Decimal("484.76"),
        ]
        assert draft.alertas == ()

    def test_smart_reading_adjusts_the_total(self, db, feedlot):
        register_morning_reading(
            db, feedlot.lote_id, DIA_10,
            fase=Fase.adaptacao_crescimento,
            comportamento=Comp.deitados_calmos,
            situacao=Sit.muitas_sobras,
        )
        draft = build_feeding_plan(db, feedlot.lote_id, DIA_10, TipoLeituraEnum.inteligente)
        assert draft.percentual_ajuste == Decimal("-10")
        assert draft.nota_cocho == Decimal("3")
        assert draft.quantidade_base_kg == Decimal("1454")
        assert draft.total_kg == Decimal("1308.60")
        assert draft.leitura_cocho_id is not None

    def test_smart_reading_without_reading_falls_back_to_base(self, db, feedlot):
        draft = build_feeding_plan(db, feedlot.lote_id, DIA_10)
        assert draft.total_kg == Decimal("1454")
        assert any("Sem leitura de cocho" in a for a in draft.alertas)

    def test_day_beyond_planned_duration(self, db, feedlot):
        with pytest.raises(ValidationError):
            build_feeding_plan(db, feedlot.lote_id, date(2026, 4, 1), TipoLeituraEnum.simples)


class TestSaveFeedingPlan:
    def test_save_and_carry_forward(self, db, feedlot):
        override = ScheduleOverride(vagao_id=feedlot.vagao_id, tratos=[("06:00", 50), ("16:00", 50)])
        draft = build_feeding_plan(db, feedlot.lote_id, DIA_10, TipoLeituraEnum.simples, override)
        plano = save_feeding_plan(db, feedlot.lote_id, DIA_10, draft)
        assert plano.numero_tratos == 2
        assert plano.quantidade_ajustada_kg == Decimal("1454")

        seguinte = build_feeding_plan(db, feedlot.lote_id, DIA_11, TipoLeituraEnum.simples)
        assert seguinte.vagao_id == feedlot.vagao_id
        assert [(t.horario, t.percentual) for t in seguinte.tratos] == [
            ("06:00", Decimal("50")), ("16:00", Decimal("50")),
        ]
        # dia 11: 365 kg × 2% / 50% × 100 = 1460 kg
        assert [t.quantidade_kg for t in seguinte.tratos] == [Decimal("730"), Decimal("730")]

    def test_save_is_an_upsert(self, db, feedlot):
        draft = build_feeding_plan(db, feedlot.lote_id, DIA_10, TipoLeituraEnum.simples)
        save_feeding_plan(db, feedlot.lote_id, DIA_10, draft)

        novo = build_feeding_plan(
            db, feedlot.lote_id, DIA_10, TipoLeituraEnum.simples,
            ScheduleOverride(tratos=[("08:00", 100)]),
        )
        plano = save_feeding_plan(db, feedlot.lote_id, DIA_10, novo)

        assert db.query(PlanejamentoTrato).count() == 1
        assert [t.horario for t in plano.tratos] == ["08:00"]
        assert get_feeding_plan(db, feedlot.lote_id, DIA_10).planejamento_id == plano.planejamento_id

    def test_invalid_sum_is_not_saved(self, db, feedlot):
        draft = remove_event(build_feeding_plan(db, feedlot.lote_id, DIA_10, TipoLeituraEnum.simples), 1)
        with pytest.raises(ValidationError):
            save_feeding_plan(db, feedlot.lote_id, DIA_10, draft)
        assert db.query(PlanejamentoTrato).count() == 0

    def test_draft_for_another_day_is_rejected(self, db, feedlot):
        draft = build_feeding_plan(db, feedlot.lote_id, DIA_10, TipoLeituraEnum.simples)
        with pytest.raises(ValidationError):
            save_feeding_plan(db, feedlot.lote_id, DIA_11, draft)

    def test_reading_type_follows_the_previous_plan(self, db, feedlot):
        draft = build_feeding_plan(db, feedlot.lote_id, DIA_10, TipoLeituraEnum.simples)
        save_feeding_plan(db, feedlot.lote_id, DIA_10, draft)

        seguinte = build_feeding_plan(db, feedlot.lote_id, DIA_11)
        assert seguinte.tipo_leitura == TipoLeituraEnum.simples
        assert not any("Sem leitura de cocho" in a for a in seguinte.alertas)

        inteligente = build_feeding_plan(db, feedlot.lote_id, DIA_11, TipoLeituraEnum.inteligente)
        assert inteligente.tipo_leitura == TipoLeituraEnum.inteligente
