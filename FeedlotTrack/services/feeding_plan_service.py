# services/feeding_plan_service.py
"""
Planejamento de tratos do dia para um lote.

quantidade_base_kg     = MN projetada do lote no dia de cocho (curva de peso × período ativo)
quantidade_ajustada_kg = base × (1 + ajuste/100)   (leitura inteligente concluída no dia)
                       = base                      (leitura simples ou sem leitura)
Os tratos copiam o vagão, horários e percentuais do planejamento anterior.
"""
from __future__ import annotations

from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from enums.enums import TipoLeituraEnum
from models.leitura_cocho import LeituraCocho
from models.planejamento import PlanejamentoTrato, TratoPlanejado
from services.feeding_schedule_service import (
    PlanoTratoDraft,
    ScheduleOverride,
    carry_forward,
    validate_for_save,
)
from services.lote_service import dietas_lookup, get_lote_or_404, get_vagao_or_404
from services.ration_period_service import daily_ration
from services.weight_curve_service import day_of_feed, weight_on_day
from utils.errors import NotFoundError, ValidationError
from utils.logging_config import get_logger
from utils.transactions import insert_or_fetch, uow

logger = get_logger("feeding_plan")

KG_Q = Decimal("0.01")
CEM = Decimal("100")


def _fetch_plan(db: Session, lote_id: int, data: date) -> Optional[PlanejamentoTrato]:
    return (
        db.query(PlanejamentoTrato)
        .filter(PlanejamentoTrato.lote_id == lote_id, PlanejamentoTrato.data_planejamento == data)
        .one_or_none()
    )


def get_feeding_plan(db: Session, lote_id: int, data: date) -> PlanejamentoTrato:
    plano = _fetch_plan(db, lote_id, data)
    if plano is None:
        raise NotFoundError(f"plan_not_found: lote {lote_id} sem planejamento em {data.isoformat()}.")
    return plano


def latest_plan_before(db: Session, lote_id: int, data: date) -> Optional[PlanejamentoTrato]:
    return (
        db.query(PlanejamentoTrato)
        .filter(PlanejamentoTrato.lote_id == lote_id, PlanejamentoTrato.data_planejamento < data)
        .order_by(PlanejamentoTrato.data_planejamento.desc())
        .first()
    )


def build_feeding_plan(
    db: Session,
    lote_id: int,
    data: date,
    tipo_leitura: Optional[TipoLeituraEnum] = None,
    override: Optional[ScheduleOverride] = None,
) -> PlanoTratoDraft:
    """
    Rascunho do planejamento; nada é gravado. Sem `tipo_leitura`, repete o do
    planejamento anterior do lote (inteligente se não houver).
    """
    lote = get_lote_or_404(db, lote_id)
    dia = day_of_feed(lote.data_entrada, data)
    if dia > lote.dias_planejados:
        raise ValidationError(
            f"dia de cocho {dia} além do planejado para o lote ({lote.dias_planejados} dias)."
        )

    periodos = list(lote.periodos)
    dietas = dietas_lookup(db, (p.dieta_id for p in periodos))
    racao = daily_ration(periodos, lote, dietas, dia)
    dieta = dietas[racao.dieta_id]
    base = racao.mn_kg_lote
    ajustada = base

    anterior = latest_plan_before(db, lote_id, data)
    if tipo_leitura is None:
        tipo_leitura = anterior.tipo_leitura if anterior is not None else TipoLeituraEnum.inteligente

    alertas: list[str] = []
    leitura: Optional[LeituraCocho] = None
    if tipo_leitura == TipoLeituraEnum.inteligente:
        leitura = (
            db.query(LeituraCocho)
            .filter(LeituraCocho.lote_id == lote_id, LeituraCocho.data_referencia == data)
            .one_or_none()
        )
        if leitura is not None and leitura.concluida:
            fator = 1 + Decimal(str(leitura.percentual_ajuste)) / CEM
            ajustada = max(Decimal("0"), base * fator).quantize(KG_Q)
            alertas.extend(leitura.alertas or [])
        else:
            leitura = None
            alertas.append(
                f"ℹ️ Sem leitura de cocho concluída em {data.isoformat()}: usando a quantidade base."
            )

    draft = carry_forward(anterior, ajustada, override)
    return replace(
        draft,
        lote_id=lote_id,
        data_planejamento=data,
        tipo_leitura=tipo_leitura,
        dieta_id=racao.dieta_id,
        periodo_id=getattr(racao.periodo, "periodo_id", None),
        dias_cocho=dia,
        fase_dieta=leitura.fase_dieta if leitura is not None else dieta.fase_dieta,
        peso_medio_projetado=racao.peso_kg,
        quantidade_base_kg=base,
        leitura_cocho_id=leitura.leitura_cocho_id if leitura is not None else None,
        nota_cocho=leitura.nota_cocho if leitura is not None else None,
        percentual_ajuste=leitura.percentual_ajuste if leitura is not None else None,
        alertas=tuple(alertas),
    )


def save_feeding_plan(db: Session, lote_id: int, data: date, draft: PlanoTratoDraft) -> PlanejamentoTrato:
    """Valida o rascunho (soma 100% ± tolerância) e grava/atualiza o planejamento do dia."""
    validate_for_save(draft)
    if draft.lote_id is not None and draft.lote_id != lote_id:
        raise ValidationError(f"rascunho pertence ao lote {draft.lote_id}, não ao lote {lote_id}.")
    if draft.data_planejamento is not None and draft.data_planejamento != data:
        raise ValidationError(
            f"rascunho é de {draft.data_planejamento.isoformat()}, não de {data.isoformat()}."
        )

    lote = get_lote_or_404(db, lote_id)
    if draft.vagao_id is not None:
        get_vagao_or_404(db, draft.vagao_id)

    dias_cocho = draft.dias_cocho or day_of_feed(lote.data_entrada, data)
    peso = draft.peso_medio_projetado
    if peso is None:
        peso = weight_on_day(lote.peso_medio_entrada, lote.gmd_projetado, dias_cocho)
    base = draft.quantidade_base_kg if draft.quantidade_base_kg is not None else draft.total_kg

    campos = dict(
        vagao_id=draft.vagao_id,
        dieta_id=draft.dieta_id,
        periodo_id=draft.periodo_id,
        tipo_leitura=draft.tipo_leitura,
        dias_cocho=dias_cocho,
        fase_dieta=draft.fase_dieta,
        peso_medio_projetado=peso,
        quantidade_base_kg=base,
        quantidade_ajustada_kg=draft.total_kg,
        leitura_cocho_id=draft.leitura_cocho_id,
        nota_cocho=draft.nota_cocho,
        percentual_ajuste=draft.percentual_ajuste,
    )

    with uow(db):
        plano, criado = insert_or_fetch(
            db,
            fetch=lambda: _fetch_plan(db, lote_id, data),
            build=lambda: PlanejamentoTrato(lote_id=lote_id, data_planejamento=data, **campos),
        )
        for k, v in campos.items():
            setattr(plano, k, v)
        plano.tratos.clear()
        db.flush()
        plano.tratos.extend(
            TratoPlanejado(
                ordem=t.ordem,
                horario=t.horario,
                percentual=t.percentual,
                quantidade_kg=t.quantidade_kg,
            )
            for t in draft.tratos
        )

    db.refresh(plano)
    logger.info(
        "Planejamento lote %s (%s) %s: %s kg em %d tratos",
        lote_id, data, "criado" if criado else "atualizado", plano.quantidade_ajustada_kg, plano.numero_tratos,
    )
    return plano
