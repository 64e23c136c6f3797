"""
Montagem dos tratos do dia a partir da quantidade total (kg MN do lote).

Os rascunhos são imutáveis: cada operação devolve um novo PlanoTratoDraft
com as quantidades recalculadas. Durante a edição a soma dos percentuais
pode ficar diferente de 100; só `validate_for_save` exige 100 ± tolerância.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from datetime import date
from decimal import Decimal
from typing import Any, Iterable, Optional, Sequence

from config.settings import settings
from enums.enums import FaseDietaEnum, TipoLeituraEnum
from utils.errors import ValidationError

KG_Q = Decimal("0.01")
PCT_Q = Decimal("0.01")
CEM = Decimal("100")

HORARIOS_PADRAO = ("07:00", "12:00", "17:00")
PERCENTUAIS_PADRAO = (Decimal("33.33"), Decimal("33.33"), Decimal("33.34"))
HORARIO_NOVO_TRATO = "12:00"

_HORARIO_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


@dataclass(frozen=True, slots=True)
class TratoDraft:
    ordem: int
    horario: str
    percentual: Decimal
    quantidade_kg: Decimal


@dataclass(frozen=True, slots=True)
class PlanoTratoDraft:
    total_kg: Decimal
    tratos: tuple[TratoDraft, ...]
    vagao_id: Optional[int] = None

    # Contexto preenchido por build_feeding_plan
    lote_id: Optional[int] = None
    data_planejamento: Optional[date] = None
    tipo_leitura: TipoLeituraEnum = TipoLeituraEnum.simples
    dieta_id: Optional[int] = None
    periodo_id: Optional[int] = None
    dias_cocho: Optional[int] = None
    fase_dieta: Optional[FaseDietaEnum] = None
    peso_medio_projetado: Optional[Decimal] = None
    quantidade_base_kg: Optional[Decimal] = None
    leitura_cocho_id: Optional[int] = None
    nota_cocho: Optional[Decimal] = None
    percentual_ajuste: Optional[Decimal] = None
    alertas: tuple[str, ...] = field(default_factory=tuple)

    @property
    def soma_percentual(self) -> Decimal:
        return sum((t.percentual for t in self.tratos), Decimal("0"))

    @property
    def numero_tratos(self) -> int:
        return len(self.tratos)


@dataclass(frozen=True, slots=True)
class ScheduleOverride:
    """Configuração explícita: os campos informados prevalecem sobre o plano anterior."""
    vagao_id: Optional[int] = None
    tratos: Optional[Sequence[tuple[str, Any]]] = None  # [(horario, percentual)]
    tipo_leitura: Optional[TipoLeituraEnum] = None


# ==================== HELPERS ====================

def _pct(value) -> Decimal:
    pct = Decimal(str(value))
    if pct < 0 or pct > CEM:
        raise ValidationError(f"percentual deve estar entre 0 e 100 (recebido {pct})")
    return pct.quantize(PCT_Q)


def _horario(value: str) -> str:
    if not isinstance(value, str) or not _HORARIO_RE.match(value):
        raise ValidationError(f"horário inválido: {value!r} (use HH:MM)")
    return value


def _total(value) -> Decimal:
    total = Decimal(str(value))
    if total < 0:
        raise ValidationError(f"quantidade total não pode ser negativa ({total})")
    return total.quantize(KG_Q)


def _quantidade(percentual: Decimal, total: Decimal) -> Decimal:
    return (percentual / CEM * total).quantize(KG_Q)


def _build_tratos(itens: Iterable[tuple[str, Decimal]], total: Decimal) -> tuple[TratoDraft, ...]:
    return tuple(
        TratoDraft(ordem=i, horario=h, percentual=p, quantidade_kg=_quantidade(p, total))
        for i, (h, p) in enumerate(itens, start=1)
    )


def _with_tratos(plano: PlanoTratoDraft, itens: Iterable[tuple[str, Decimal]]) -> PlanoTratoDraft:
    return replace(plano, tratos=_build_tratos(itens, plano.total_kg))


def _get_trato(plano: PlanoTratoDraft, ordem: int) -> TratoDraft:
    for t in plano.tratos:
        if t.ordem == ordem:
            return t
    raise ValidationError(f"trato {ordem} não existe no planejamento")


# ==================== OPERAÇÕES ====================

def create_default(total_kg, vagao_id: Optional[int] = None) -> PlanoTratoDraft:
    total = _total(total_kg)
    return PlanoTratoDraft(
        total_kg=total,
        tratos=_build_tratos(zip(HORARIOS_PADRAO, PERCENTUAIS_PADRAO), total),
        vagao_id=vagao_id,
    )


def _horario_livre(plano: PlanoTratoDraft) -> str:
    """12:00 se estiver livre; senão a próxima hora cheia livre depois do último trato."""
    ocupados = {t.horario for t in plano.tratos}
    if HORARIO_NOVO_TRATO not in ocupados:
        return HORARIO_NOVO_TRATO
    inicio = int(plano.tratos[-1].horario[:2]) + 1
    for passo in range(24):
        candidato = f"{(inicio + passo) % 24:02d}:00"
        if candidato not in ocupados:
            return candidato
    raise ValidationError("não há horário livre para um novo trato")


def add_event(plano: PlanoTratoDraft, horario: Optional[str] = None, percentual=None) -> PlanoTratoDraft:
    """
    Novo trato no fim da lista. Sem horário usa 12:00 ou a próxima hora cheia livre;
    sem percentual, recebe o que falta para 100%.
    """
    if horario is None:
        horario = _horario_livre(plano)
    if percentual is None:
        percentual = max(Decimal("0"), CEM - plano.soma_percentual)
    itens = [(t.horario, t.percentual) for t in plano.tratos]
    itens.append((_horario(horario), _pct(percentual)))
    return _with_tratos(plano, itens)


def remove_event(plano: PlanoTratoDraft, ordem: int) -> PlanoTratoDraft:
    _get_trato(plano, ordem)
    if len(plano.tratos) <= 1:
        raise ValidationError("o planejamento precisa de pelo menos 1 trato")
    itens = [(t.horario, t.percentual) for t in plano.tratos if t.ordem != ordem]
    return _with_tratos(plano, itens)


def update_event(
    plano: PlanoTratoDraft,
    ordem: int,
    percentual=None,
    horario: Optional[str] = None,
) -> PlanoTratoDraft:
    _get_trato(plano, ordem)
    novo_pct = None if percentual is None else _pct(percentual)
    novo_horario = None if horario is None else _horario(horario)
    itens = [
        (
            novo_horario if (t.ordem == ordem and novo_horario is not None) else t.horario,
            novo_pct if (t.ordem == ordem and novo_pct is not None) else t.percentual,
        )
        for t in plano.tratos
    ]
    return _with_tratos(plano, itens)


def set_total(plano: PlanoTratoDraft, total_kg) -> PlanoTratoDraft:
    total = _total(total_kg)
    return replace(
        plano,
        total_kg=total,
        tratos=_build_tratos(((t.horario, t.percentual) for t in plano.tratos), total),
    )


def validate_for_save(plano: PlanoTratoDraft) -> PlanoTratoDraft:
    if not plano.tratos:
        raise ValidationError("o planejamento precisa de pelo menos 1 trato")
    if plano.total_kg <= 0:
        raise ValidationError("quantidade total do planejamento deve ser > 0")

    horarios = [t.horario for t in plano.tratos]
    for h in horarios:
        _horario(h)
    if len(set(horarios)) != len(horarios):
        raise ValidationError("horários de trato repetidos")
    for t in plano.tratos:
        _pct(t.percentual)

    soma = plano.soma_percentual
    if abs(soma - CEM) > settings.SCHEDULE_PERCENT_TOLERANCE:
        raise ValidationError(f"a soma dos percentuais deve ser 100% (atual {soma}%)")
    return plano


def carry_forward(
    anterior: Any,
    novo_total,
    override: Optional[ScheduleOverride] = None,
) -> PlanoTratoDraft:
    """
    Planejamento do novo dia a partir do anterior.

    Prioridade: campos do `override` > plano anterior > padrão de 3 tratos.
    Vagão, tipo de leitura, horários e percentuais seguem essa ordem; as
    quantidades são sempre recalculadas sobre `novo_total`.
    `anterior` pode ser um PlanejamentoTrato gravado ou um PlanoTratoDraft.
    """
    total = _total(novo_total)
    override = override or ScheduleOverride()

    vagao_id = override.vagao_id
    if vagao_id is None and anterior is not None:
        vagao_id = anterior.vagao_id

    tipo_leitura = override.tipo_leitura
    if tipo_leitura is None and anterior is not None:
        tipo_leitura = getattr(anterior, "tipo_leitura", None)

    if override.tratos is not None:
        itens = [(_horario(h), _pct(p)) for h, p in override.tratos]
        if not itens:
            raise ValidationError("o planejamento precisa de pelo menos 1 trato")
    elif anterior is not None and anterior.tratos:
        ordenados = sorted(anterior.tratos, key=lambda t: t.ordem)
        itens = [(t.horario, Decimal(str(t.percentual))) for t in ordenados]
    else:
        itens = list(zip(HORARIOS_PADRAO, PERCENTUAIS_PADRAO))

    return PlanoTratoDraft(
        total_kg=total,
        tratos=_build_tratos(itens, total),
        vagao_id=vagao_id,
        tipo_leitura=tipo_leitura or TipoLeituraEnum.simples,
    )
