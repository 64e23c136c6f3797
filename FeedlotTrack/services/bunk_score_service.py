"""
Nota de cocho e percentual de ajuste do trato.

Escala do manual de leitura de cocho:
    nota baixa  -> cocho limpo / animais com fome  -> aumentar o trato
    nota alta   -> sobras no cocho / animais calmos -> reduzir o trato

Passos do cálculo:
1. Nota base pela tabela (situação do cocho × comportamento da manhã).
2. Leitura noturna: cocho vazio na véspera + cocho limpo pela manhã desce meia nota.
   Nota -2 só é aceita com cocho vazio na véspera (senão fica em -1).
3. Fase da dieta: adaptação/crescimento usa a faixa inteira (-2 .. 3);
   terminação não aceita nota negativa (0.5 .. 2).
4. Ajuste (%) = 5 × (1 - nota).
5. Recepção (dias de cocho < BUNK_EARLY_DAYS_THRESHOLD): ajuste × BUNK_EARLY_DAYS_DAMPING.
6. Clamp final em [BUNK_ADJUSTMENT_MIN_PCT, BUNK_ADJUSTMENT_MAX_PCT].
"""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Optional, Tuple

from config.settings import settings
from enums.enums import (
    ComportamentoManhaEnum as Comp,
    FaseDietaEnum,
    LeituraNoturnaEnum,
    SituacaoCochoEnum as Sit,
)
from utils.errors import ValidationError

PCT_Q = Decimal("0.01")
D = Decimal

# Faixa de notas aceita em cada fase (mínimo, máximo)
FAIXA_NOTA: Dict[FaseDietaEnum, Tuple[Decimal, Decimal]] = {
    FaseDietaEnum.adaptacao_crescimento: (D("-2"), D("3")),
    FaseDietaEnum.terminacao: (D("0.5"), D("2")),
}

# Nota base por (situação do cocho, comportamento da manhã).
TABELA_NOTA: Dict[Tuple[Sit, Comp], Decimal] = {
    (Sit.limpo_lambido, Comp.maioria_em_pe_muita_fome): D("-2"),
    (Sit.limpo_lambido, Comp.alguns_em_pe_fome): D("-1"),
    (Sit.limpo_lambido, Comp.alguns_em_pe): D("-0.5"),
    (Sit.limpo_lambido, Comp.deitados_calmos): D("0"),

    (Sit.limpo_sem_lambida, Comp.maioria_em_pe_muita_fome): D("-1.5"),
    (Sit.limpo_sem_lambida, Comp.alguns_em_pe_fome): D("-0.5"),
    (Sit.limpo_sem_lambida, Comp.alguns_em_pe): D("0"),
    (Sit.limpo_sem_lambida, Comp.deitados_calmos): D("0.5"),

    (Sit.pouca_sobra, Comp.maioria_em_pe_muita_fome): D("-1"),
    (Sit.pouca_sobra, Comp.alguns_em_pe_fome): D("0"),
    (Sit.pouca_sobra, Comp.alguns_em_pe): D("0.5"),
    (Sit.pouca_sobra, Comp.deitados_calmos): D("1"),

    (Sit.com_sobras, Comp.maioria_em_pe_muita_fome): D("0"),
    (Sit.com_sobras, Comp.alguns_em_pe_fome): D("1"),
    (Sit.com_sobras, Comp.alguns_em_pe): D("1.5"),
    (Sit.com_sobras, Comp.deitados_calmos): D("2"),

    (Sit.muitas_sobras, Comp.maioria_em_pe_muita_fome): D("1"),
    (Sit.muitas_sobras, Comp.alguns_em_pe_fome): D("2"),
    (Sit.muitas_sobras, Comp.alguns_em_pe): D("2.5"),
    (Sit.muitas_sobras, Comp.deitados_calmos): D("3"),
}

COCHO_LIMPO = (Sit.limpo_lambido, Sit.limpo_sem_lambida)
COCHO_COM_SOBRAS = (Sit.com_sobras, Sit.muitas_sobras)
COM_FOME = (Comp.maioria_em_pe_muita_fome, Comp.alguns_em_pe_fome)

NOTA_MINIMA_SEM_COCHO_VAZIO = D("-1")
DIAS_TERMINACAO_ALERTA = 30


def _check_table() -> None:
    faltando = [(s.value, c.value) for s in Sit for c in Comp if (s, c) not in TABELA_NOTA]
    if faltando:
        raise RuntimeError(f"Tabela de nota de cocho incompleta: {faltando}")
    if set(FAIXA_NOTA) != set(FaseDietaEnum):
        raise RuntimeError("Faixa de nota não definida para todas as fases da dieta")


_check_table()


@dataclass(frozen=True, slots=True)
class BunkScore:
    nota: Decimal
    percentual_ajuste: Decimal
    alertas: list[str] = field(default_factory=list)


def adjustment_for_score(nota: Decimal) -> Decimal:
    """Percentual de ajuste correspondente a uma nota (sem amortecimento nem clamp)."""
    return D("5") * (D("1") - nota)


def _nota_base(
    fase: FaseDietaEnum,
    noturna: Optional[LeituraNoturnaEnum],
    comportamento: Comp,
    situacao: Sit,
    alertas: list[str],
) -> Decimal:
    nota = TABELA_NOTA[(situacao, comportamento)]
    cocho_vazio_na_vespera = noturna == LeituraNoturnaEnum.vazio

    if cocho_vazio_na_vespera and situacao in COCHO_LIMPO:
        nota -= D("0.5")

    if nota < NOTA_MINIMA_SEM_COCHO_VAZIO and not cocho_vazio_na_vespera:
        # na terminação a faixa da fase já sobe a nota para 0.5
        if fase == FaseDietaEnum.adaptacao_crescimento:
            alertas.append(
                f"ℹ️ Nota {nota} exige cocho vazio na leitura noturna; nota limitada a {NOTA_MINIMA_SEM_COCHO_VAZIO}."
            )
        nota = NOTA_MINIMA_SEM_COCHO_VAZIO
    return nota


def _alertas_da_observacao(
    fase: FaseDietaEnum,
    noturna: Optional[LeituraNoturnaEnum],
    comportamento: Comp,
    situacao: Sit,
    dias_de_cocho: int,
) -> list[str]:
    alertas: list[str] = []
    if situacao in COCHO_COM_SOBRAS and comportamento == Comp.deitados_calmos:
        alertas.append("⚠️ Risco de excesso de trato: sobras no cocho com animais deitados e calmos. Reduzir fornecimento.")
    if situacao == Sit.limpo_lambido and comportamento in COM_FOME:
        alertas.append("⚠️ Possível subalimentação: cocho lambido e animais demonstrando fome.")
    if situacao in COCHO_COM_SOBRAS and comportamento in COM_FOME:
        alertas.append("⚠️ Sobras no cocho com animais com fome: verificar aceitação da dieta (mistura, qualidade, água).")
    if noturna == LeituraNoturnaEnum.vazio and situacao in COCHO_COM_SOBRAS:
        alertas.append("⚠️ Leitura noturna (cocho vazio) inconsistente com sobras pela manhã: conferir os registros.")
    if noturna == LeituraNoturnaEnum.cheio and situacao == Sit.limpo_lambido:
        alertas.append("⚠️ Cocho cheio à noite e lambido pela manhã: conferir os registros.")
    if (
        fase == FaseDietaEnum.terminacao
        and dias_de_cocho > DIAS_TERMINACAO_ALERTA
        and situacao == Sit.limpo_lambido
        and comportamento in COM_FOME
    ):
        alertas.append(
            f"ℹ️ Terminação com {dias_de_cocho} dias de cocho: aumentos devem ser graduais, avaliar ganho e acabamento."
        )
    return alertas


def calculate_bunk_score(
    fase: FaseDietaEnum,
    noturna: Optional[LeituraNoturnaEnum],
    comportamento: Comp,
    situacao: Sit,
    dias_de_cocho: int,
) -> BunkScore:
    if dias_de_cocho is None or dias_de_cocho < 1:
        raise ValidationError(f"dias_de_cocho deve ser >= 1 (recebido {dias_de_cocho})")

    alertas = _alertas_da_observacao(fase, noturna, comportamento, situacao, dias_de_cocho)
    nota = _nota_base(fase, noturna, comportamento, situacao, alertas)

    minimo, maximo = FAIXA_NOTA[fase]
    if nota < minimo or nota > maximo:
        nota = min(max(nota, minimo), maximo)

    ajuste = adjustment_for_score(nota)

    if dias_de_cocho < settings.BUNK_EARLY_DAYS_THRESHOLD and ajuste != 0:
        ajuste = ajuste * settings.BUNK_EARLY_DAYS_DAMPING
        alertas.append(
            f"ℹ️ Recepção ({dias_de_cocho} dias de cocho): ajuste reduzido pelo fator {settings.BUNK_EARLY_DAYS_DAMPING}."
        )

    limite_min = settings.BUNK_ADJUSTMENT_MIN_PCT
    limite_max = settings.BUNK_ADJUSTMENT_MAX_PCT
    if ajuste < limite_min or ajuste > limite_max:
        ajuste = min(max(ajuste, limite_min), limite_max)
        alertas.append(f"ℹ️ Ajuste limitado à faixa de {limite_min}% a {limite_max}%.")

    if nota == D("1"):
        alertas.append("✅ Situação ideal: manter a quantidade fornecida.")

    return BunkScore(nota=nota, percentual_ajuste=ajuste.quantize(PCT_Q), alertas=alertas)
