"""
Planejamento nutricional por períodos de dieta.

Cada lote tem uma sequência de períodos (dia_inicial..dia_final, inclusivos)
que deve cobrir exatamente [1, dias_planejados], sem lacunas nem sobreposição.

Fórmulas (por cabeça, dia a dia):
- ms_kg = peso(dia) × (ingestao_ms_pct_pv / 100)
- mn_kg = ms_kg / (ms_media / 100)
Totais do lote = totais por cabeça × quantidade_animais.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Mapping, Protocol, Sequence

from sqlalchemy.orm import Session

from models.lote import PeriodoAlimentacao
from services.lote_service import dietas_lookup, get_lote_or_404
from services.weight_curve_service import weight_curve, weight_on_day
from utils.errors import NotFoundError, ValidationError
from utils.logging_config import get_logger
from utils.transactions import uow

logger = get_logger("ration")

KG_Q = Decimal("0.001")
TOTAL_Q = Decimal("0.01")
CEM = Decimal("100")


class PeriodoLike(Protocol):
    dia_inicial: int
    dia_final: int
    dieta_id: int
    ingestao_ms_pct_pv: Any


class LoteLike(Protocol):
    quantidade_animais: int
    peso_medio_entrada: Any
    gmd_projetado: Any
    dias_planejados: int


class DietaLike(Protocol):
    nome: str
    ms_media: Any
    custo_kg: Any


@dataclass(frozen=True, slots=True)
class RationDay:
    dia: int
    peso_kg: Decimal
    ms_kg: Decimal
    mn_kg: Decimal


@dataclass(frozen=True, slots=True)
class RationPeriodTotals:
    dia_inicial: int
    dia_final: int
    dieta_id: int
    dieta_nome: str
    ingestao_ms_pct_pv: Decimal
    dias: int
    ms_kg_cabeca: Decimal
    mn_kg_cabeca: Decimal
    ms_kg_lote: Decimal
    mn_kg_lote: Decimal
    custo_lote: Decimal


@dataclass(frozen=True, slots=True)
class RationPlan:
    quantidade_animais: int
    dias_planejados: int
    dias: list[RationDay] = field(default_factory=list)
    periodos: list[RationPeriodTotals] = field(default_factory=list)
    ms_kg_cabeca: Decimal = Decimal("0")
    mn_kg_cabeca: Decimal = Decimal("0")
    ms_kg_lote: Decimal = Decimal("0")
    mn_kg_lote: Decimal = Decimal("0")
    custo_lote: Decimal = Decimal("0")


@dataclass(frozen=True, slots=True)
class DailyRation:
    dia: int
    periodo: Any
    dieta_id: int
    peso_kg: Decimal
    ms_kg_cabeca: Decimal
    mn_kg_cabeca: Decimal
    mn_kg_lote: Decimal


# ==================== VALIDAÇÕES ====================

def validate_period_coverage(periodos: Sequence[PeriodoLike], dias_planejados: int) -> None:
    """
    Os períodos (na ordem recebida) devem começar no dia 1, ser contíguos e
    terminar exatamente em `dias_planejados`.
    """
    if dias_planejados <= 0:
        raise ValidationError("dias_planejados deve ser > 0")
    if not periodos:
        raise ValidationError("coverage mismatch: lote sem períodos de alimentação")

    esperado = 1
    for idx, p in enumerate(periodos, start=1):
        if p.dia_final < p.dia_inicial:
            raise ValidationError(
                f"coverage mismatch: período {idx} termina ({p.dia_final}) antes de começar ({p.dia_inicial})"
            )
        if p.dia_inicial != esperado:
            raise ValidationError(
                f"coverage mismatch: período {idx} começa no dia {p.dia_inicial}, esperado dia {esperado}"
            )
        esperado = p.dia_final + 1

    cobertos = sum(p.dia_final - p.dia_inicial + 1 for p in periodos)
    if cobertos != dias_planejados:
        raise ValidationError(
            f"coverage mismatch: períodos cobrem {cobertos} dias, lote planejado para {dias_planejados}"
        )


def _validate_lote(lote: LoteLike) -> None:
    if lote.quantidade_animais is None or lote.quantidade_animais <= 0:
        raise ValidationError("quantidade_animais deve ser > 0")
    if Decimal(str(lote.peso_medio_entrada)) <= 0:
        raise ValidationError("peso_medio_entrada deve ser > 0")


def _ms_fraction(dieta: DietaLike) -> Decimal:
    ms = Decimal(str(dieta.ms_media))
    if ms <= 0:
        raise ValidationError(f"dieta '{dieta.nome}' com matéria seca inválida ({ms}%)")
    return ms / CEM


def _ingestao_fraction(periodo: PeriodoLike) -> Decimal:
    pct = Decimal(str(periodo.ingestao_ms_pct_pv))
    if pct <= 0:
        raise ValidationError(f"ingestão de MS inválida ({pct}% do PV) no período {periodo.dia_inicial}-{periodo.dia_final}")
    return pct / CEM


def _get_dieta(dietas: Mapping[int, DietaLike], dieta_id: int) -> DietaLike:
    dieta = dietas.get(dieta_id)
    if dieta is None:
        raise NotFoundError(f"dieta_not_found: dieta {dieta_id} não encontrada")
    return dieta


# ==================== CÁLCULOS ====================

def intake_for_weight(peso_kg: Decimal, ingestao_ms_pct_pv, ms_media) -> tuple[Decimal, Decimal]:
    """(ms_kg, mn_kg) por cabeça para um peso vivo."""
    ms_pct = Decimal(str(ms_media))
    if ms_pct <= 0:
        raise ValidationError(f"matéria seca inválida ({ms_pct}%)")
    ms_kg = peso_kg * Decimal(str(ingestao_ms_pct_pv)) / CEM
    mn_kg = ms_kg / (ms_pct / CEM)
    return ms_kg, mn_kg


def plan_ration(
    periodos: Sequence[PeriodoLike],
    lote: LoteLike,
    dietas: Mapping[int, DietaLike],
) -> RationPlan:
    """Projeção dia a dia de MS/MN por cabeça, totais por período e totais do lote."""
    _validate_lote(lote)
    validate_period_coverage(periodos, lote.dias_planejados)

    n = Decimal(lote.quantidade_animais)
    dias: list[RationDay] = []
    totais: list[RationPeriodTotals] = []
    ms_total = Decimal("0")
    mn_total = Decimal("0")
    custo_total = Decimal("0")

    for p in periodos:
        dieta = _get_dieta(dietas, p.dieta_id)
        ms_frac = _ms_fraction(dieta)
        ing_frac = _ingestao_fraction(p)
        custo_kg = Decimal(str(dieta.custo_kg or 0))

        ms_periodo = Decimal("0")
        mn_periodo = Decimal("0")
        for dia, peso in weight_curve(lote.peso_medio_entrada, lote.gmd_projetado, p.dia_inicial, p.dia_final):
            ms_kg = peso * ing_frac
            mn_kg = ms_kg / ms_frac
            ms_periodo += ms_kg
            mn_periodo += mn_kg
            dias.append(RationDay(dia=dia, peso_kg=peso, ms_kg=ms_kg.quantize(KG_Q), mn_kg=mn_kg.quantize(KG_Q)))

        custo_periodo = mn_periodo * n * custo_kg
        totais.append(
            RationPeriodTotals(
                dia_inicial=p.dia_inicial,
                dia_final=p.dia_final,
                dieta_id=p.dieta_id,
                dieta_nome=dieta.nome,
                ingestao_ms_pct_pv=Decimal(str(p.ingestao_ms_pct_pv)),
                dias=p.dia_final - p.dia_inicial + 1,
                ms_kg_cabeca=ms_periodo.quantize(TOTAL_Q),
                mn_kg_cabeca=mn_periodo.quantize(TOTAL_Q),
                ms_kg_lote=(ms_periodo * n).quantize(TOTAL_Q),
                mn_kg_lote=(mn_periodo * n).quantize(TOTAL_Q),
                custo_lote=custo_periodo.quantize(TOTAL_Q),
            )
        )
        ms_total += ms_periodo
        mn_total += mn_periodo
        custo_total += custo_periodo

    return RationPlan(
        quantidade_animais=lote.quantidade_animais,
        dias_planejados=lote.dias_planejados,
        dias=dias,
        periodos=totais,
        ms_kg_cabeca=ms_total.quantize(TOTAL_Q),
        mn_kg_cabeca=mn_total.quantize(TOTAL_Q),
        ms_kg_lote=(ms_total * n).quantize(TOTAL_Q),
        mn_kg_lote=(mn_total * n).quantize(TOTAL_Q),
        custo_lote=custo_total.quantize(TOTAL_Q),
    )


def find_active_period(periodos: Sequence[PeriodoLike], dia: int) -> PeriodoLike:
    for p in periodos:
        if p.dia_inicial <= dia <= p.dia_final:
            return p
    raise NotFoundError(f"period_not_found: nenhum período de alimentação cobre o dia {dia}")


def daily_ration(
    periodos: Sequence[PeriodoLike],
    lote: LoteLike,
    dietas: Mapping[int, DietaLike],
    dia: int,
) -> DailyRation:
    """
    Quantidade base (MN) do lote em um dia de cocho: ponto de partida do
    planejamento de tratos.
    """
    _validate_lote(lote)
    validate_period_coverage(periodos, lote.dias_planejados)
    periodo = find_active_period(periodos, dia)
    dieta = _get_dieta(dietas, periodo.dieta_id)
    _ingestao_fraction(periodo)

    peso = weight_on_day(lote.peso_medio_entrada, lote.gmd_projetado, dia)
    ms_kg, mn_kg = intake_for_weight(peso, periodo.ingestao_ms_pct_pv, dieta.ms_media)
    return DailyRation(
        dia=dia,
        periodo=periodo,
        dieta_id=periodo.dieta_id,
        peso_kg=peso,
        ms_kg_cabeca=ms_kg.quantize(KG_Q),
        mn_kg_cabeca=mn_kg.quantize(KG_Q),
        mn_kg_lote=(mn_kg * Decimal(lote.quantidade_animais)).quantize(TOTAL_Q),
    )


# ==================== OPERAÇÕES SOBRE O LOTE ====================

def project_lot_ration(db: Session, lote_id: int) -> RationPlan:
    """Tabela de ração projetada do lote inteiro a partir dos períodos gravados."""
    lote = get_lote_or_404(db, lote_id)
    periodos = list(lote.periodos)
    dietas = dietas_lookup(db, (p.dieta_id for p in periodos))
    return plan_ration(periodos, lote, dietas)


def replace_periods(db: Session, lote_id: int, periodos: Sequence[Mapping[str, Any]]) -> list[PeriodoAlimentacao]:
    """
    Substitui todos os períodos do lote. A nova lista é validada (cobertura e
    dietas existentes) antes de qualquer escrita.
    """
    lote = get_lote_or_404(db, lote_id)
    novos = [
        PeriodoAlimentacao(
            lote_id=lote.lote_id,
            dieta_id=p["dieta_id"],
            dia_inicial=p["dia_inicial"],
            dia_final=p["dia_final"],
            ingestao_ms_pct_pv=Decimal(str(p["ingestao_ms_pct_pv"])),
        )
        for p in sorted(periodos, key=lambda p: p["dia_inicial"])
    ]
    validate_period_coverage(novos, lote.dias_planejados)
    for p in novos:
        _ingestao_fraction(p)
    dietas = dietas_lookup(db, (p.dieta_id for p in novos))
    for p in novos:
        _ms_fraction(_get_dieta(dietas, p.dieta_id))

    with uow(db):
        lote.periodos.clear()
        db.flush()
        lote.periodos.extend(novos)

    db.refresh(lote)
    logger.info("Períodos do lote %s substituídos (%d períodos)", lote_id, len(novos))
    return list(lote.periodos)
