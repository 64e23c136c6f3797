"""
Validação da trajetória de notas de cocho de um lote.

Gera apenas alertas (nunca bloqueia a gravação da leitura):
- salto maior que READING_SCORE_JUMP_THRESHOLD em relação ao dia anterior;
- nota extrema da fase repetida por READING_EXTREME_REPEAT_DAYS dias seguidos;
- nota -2 em dois dias consecutivos;
- nota <= -1 (aumento acima de 10%);
- nota negativa na terminação.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Optional, Sequence

from config.settings import settings
from enums.enums import FaseDietaEnum
from services.bunk_score_service import FAIXA_NOTA


def _d(value) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def validate_reading(
    fase: FaseDietaEnum,
    nota,
    notas_anteriores: Optional[Sequence] = None,
) -> list[str]:
    """
    `notas_anteriores` vem do dia mais recente para o mais antigo; valores
    None (dias sem leitura concluída) interrompem as sequências.
    """
    nota = _d(nota)
    anteriores = [None if n is None else _d(n) for n in (notas_anteriores or [])]
    alertas: list[str] = []

    if fase == FaseDietaEnum.terminacao and nota < 0:
        alertas.append(f"❌ Nota {nota} não é aceita na terminação (mínimo 0.5). Revisar a leitura.")

    anterior = anteriores[0] if anteriores else None
    if anterior is not None:
        salto = abs(nota - anterior)
        if salto > settings.READING_SCORE_JUMP_THRESHOLD:
            alertas.append(
                f"⚠️ Variação brusca de nota ({anterior} → {nota}): confirmar a leitura antes de ajustar o trato."
            )
        if nota == Decimal("-2") and anterior == Decimal("-2"):
            alertas.append("⚠️ Nota -2 por dois dias seguidos: avaliar se a quantidade base está subestimada.")

    minimo, maximo = FAIXA_NOTA[fase]
    if nota in (minimo, maximo):
        repeticoes = settings.READING_EXTREME_REPEAT_DAYS
        seguidas = 1
        for n in anteriores:
            if n != nota:
                break
            seguidas += 1
        if seguidas >= repeticoes:
            alertas.append(
                f"⚠️ Nota extrema {nota} repetida por {seguidas} dias: possível erro de observação."
            )

    if nota <= Decimal("-1"):
        alertas.append("⚠️ Aumento maior que 10%: usar com cautela e confirmar na próxima leitura.")

    return alertas
