# services/bunk_reading_service.py
from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from config.settings import settings
from enums.enums import (
    ComportamentoManhaEnum,
    FaseDietaEnum,
    LeituraNoturnaEnum,
    SituacaoCochoEnum,
)
from models.leitura_cocho import LeituraCocho
from services.bunk_score_service import calculate_bunk_score
from services.consumption_service import project_consumption
from services.lote_service import get_lote_or_404
from services.reading_validation_service import validate_reading
from services.weight_curve_service import day_of_feed
from utils.datetime_utils import next_day, now_local
from utils.errors import NotFoundError, StateError, ValidationError
from utils.logging_config import get_logger
from utils.transactions import insert_or_fetch, uow

logger = get_logger("bunk_reading")


def _fetch_reading(db: Session, lote_id: int, data_referencia: date) -> Optional[LeituraCocho]:
    return (
        db.query(LeituraCocho)
        .filter(LeituraCocho.lote_id == lote_id, LeituraCocho.data_referencia == data_referencia)
        .one_or_none()
    )


def _upsert_reading(db: Session, lote_id: int, data_referencia: date) -> LeituraCocho:
    leitura, _ = insert_or_fetch(
        db,
        fetch=lambda: _fetch_reading(db, lote_id, data_referencia),
        build=lambda: LeituraCocho(lote_id=lote_id, data_referencia=data_referencia, alertas=[]),
    )
    return leitura


def _ensure_mutable(leitura: Optional[LeituraCocho], correcao: bool) -> None:
    if leitura is not None and leitura.concluida and not correcao:
        raise StateError(
            f"reading_completed: leitura de {leitura.data_referencia.isoformat()} já está concluída; "
            "use correcao=True para corrigir."
        )


def get_reading(db: Session, lote_id: int, data_referencia: date) -> LeituraCocho:
    leitura = _fetch_reading(db, lote_id, data_referencia)
    if leitura is None:
        raise NotFoundError(
            f"reading_not_found: lote {lote_id} sem leitura de cocho em {data_referencia.isoformat()}."
        )
    return leitura


def previous_scores(db: Session, lote_id: int, data_referencia: date, dias: int) -> List[Optional[Decimal]]:
    """
    Notas dos `dias` dias anteriores, do mais recente para o mais antigo.
    Dias sem leitura concluída aparecem como None.
    """
    inicio = data_referencia - timedelta(days=dias)
    rows = (
        db.query(LeituraCocho.data_referencia, LeituraCocho.nota_cocho)
        .filter(
            LeituraCocho.lote_id == lote_id,
            LeituraCocho.data_referencia >= inicio,
            LeituraCocho.data_referencia < data_referencia,
        )
        .all()
    )
    por_data: Dict[date, Optional[Decimal]] = {d: n for d, n in rows}
    return [por_data.get(data_referencia - timedelta(days=i)) for i in range(1, dias + 1)]


def _has_later_reading(db: Session, lote_id: int, data_referencia: date) -> bool:
    return (
        db.query(LeituraCocho.leitura_cocho_id)
        .filter(
            LeituraCocho.lote_id == lote_id,
            LeituraCocho.data_referencia > data_referencia,
            LeituraCocho.nota_cocho.isnot(None),
        )
        .first()
        is not None
    )


def register_night_reading(
    db: Session,
    lote_id: int,
    data: date,
    leitura_noturna: LeituraNoturnaEnum,
    correcao: bool = False,
) -> LeituraCocho:
    """
    `data` é a noite da observação; a leitura fica na linha da manhã
    seguinte (data_referencia = data + 1), que a leitura diurna completa.
    """
    get_lote_or_404(db, lote_id)
    data_referencia = next_day(data)
    _ensure_mutable(_fetch_reading(db, lote_id, data_referencia), correcao)

    with uow(db):
        leitura = _upsert_reading(db, lote_id, data_referencia)
        _ensure_mutable(leitura, correcao)
        leitura.leitura_noturna = leitura_noturna
        leitura.leitura_noturna_em = now_local()

    db.refresh(leitura)
    logger.info("Leitura noturna lote %s (%s): %s", lote_id, data_referencia, leitura_noturna.value)
    return leitura


def register_morning_reading(
    db: Session,
    lote_id: int,
    data: date,
    fase: FaseDietaEnum,
    comportamento: ComportamentoManhaEnum,
    situacao: SituacaoCochoEnum,
    dias_de_cocho: Optional[int] = None,
    kg_anterior_por_cabeca=None,
    num_animais: Optional[int] = None,
    observacoes: Optional[str] = None,
    correcao: bool = False,
) -> LeituraCocho:
    """
    Completa a leitura do dia: nota de cocho, validação da trajetória e
    projeção do novo consumo. Atualiza o consumo atual do lote, a menos que
    já exista leitura concluída em data posterior.
    """
    lote = get_lote_or_404(db, lote_id)
    if dias_de_cocho is None:
        dias_de_cocho = day_of_feed(lote.data_entrada, data)

    existente = _fetch_reading(db, lote_id, data)
    _ensure_mutable(existente, correcao)

    # Na correção o consumo do lote já reflete esta leitura; a base é a da leitura original
    corrigindo = existente is not None and existente.concluida
    if kg_anterior_por_cabeca is None:
        kg_anterior_por_cabeca = existente.kg_anterior_por_cabeca if corrigindo else lote.kg_por_cabeca_atual
    if kg_anterior_por_cabeca is None:
        raise ValidationError(
            f"lote {lote_id} sem consumo atual registrado; informe kg_anterior_por_cabeca."
        )
    n = num_animais
    if n is None:
        n = existente.num_animais if corrigindo else lote.quantidade_animais

    noturna = existente.leitura_noturna if existente is not None else None

    score = calculate_bunk_score(fase, noturna, comportamento, situacao, dias_de_cocho)
    historico = previous_scores(db, lote_id, data, max(settings.READING_EXTREME_REPEAT_DAYS, 1))
    alertas_validacao = validate_reading(fase, score.nota, historico)
    projecao = project_consumption(kg_anterior_por_cabeca, score.percentual_ajuste, n)

    with uow(db):
        leitura = _upsert_reading(db, lote_id, data)
        _ensure_mutable(leitura, correcao)

        leitura.fase_dieta = fase
        leitura.dias_de_cocho = dias_de_cocho
        leitura.comportamento_manha = comportamento
        leitura.situacao_cocho_manha = situacao
        leitura.leitura_manha_em = now_local()

        leitura.nota_cocho = score.nota
        leitura.percentual_ajuste = score.percentual_ajuste
        leitura.kg_anterior_por_cabeca = projecao.kg_anterior_por_cabeca
        leitura.kg_novo_por_cabeca = projecao.kg_novo_por_cabeca
        leitura.delta_kg_por_cabeca = projecao.delta_kg_por_cabeca
        leitura.num_animais = projecao.num_animais
        leitura.total_kg_anterior = projecao.total_kg_anterior
        leitura.total_kg_novo = projecao.total_kg_novo
        leitura.total_delta_kg = projecao.total_delta_kg
        leitura.alertas = [*score.alertas, *alertas_validacao, *projecao.alertas]
        if observacoes is not None:
            leitura.observacoes = observacoes

        if not _has_later_reading(db, lote_id, data):
            lote.kg_por_cabeca_atual = projecao.kg_novo_por_cabeca

    db.refresh(leitura)
    logger.info(
        "Leitura diurna lote %s (%s): nota %s, ajuste %s%%, %s -> %s kg/cab",
        lote_id, data, score.nota, score.percentual_ajuste,
        projecao.kg_anterior_por_cabeca, projecao.kg_novo_por_cabeca,
    )
    for alerta in leitura.alertas:
        if alerta.startswith(("⚠️", "❌")):
            logger.warning("Lote %s (%s): %s", lote_id, data, alerta)
    return leitura
