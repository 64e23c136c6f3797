"""
Curva de peso vivo projetado ao longo do ciclo de confinamento.

Fórmula:
peso(dia) = peso_entrada + GMD × (dia - 1)      (dia 1 = dia de entrada)
"""
from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Iterator

from utils.errors import ValidationError

PESO_Q = Decimal("0.01")


def _to_decimal(value, field_name: str) -> Decimal:
    try:
        return Decimal(str(value))
    except (ArithmeticError, ValueError, TypeError):
        raise ValidationError(f"{field_name} inválido: {value!r}")


def weight_on_day(peso_entrada, gmd, dia: int) -> Decimal:
    """Peso vivo projetado (kg) no dia `dia` do ciclo."""
    if dia < 1:
        raise ValidationError(f"dia deve ser >= 1 (recebido {dia})")
    peso = _to_decimal(peso_entrada, "peso_entrada") + _to_decimal(gmd, "gmd") * Decimal(dia - 1)
    return peso.quantize(PESO_Q)


class WeightCurve:
    """
    Sequência (dia, peso) preguiçosa, finita e reiniciável: cada iteração
    gera os valores de novo a partir dos mesmos parâmetros.
    """

    def __init__(self, peso_entrada, gmd, dia_inicio: int, dia_fim: int):
        if dia_inicio < 1:
            raise ValidationError(f"dia_inicio deve ser >= 1 (recebido {dia_inicio})")
        if dia_fim < dia_inicio:
            raise ValidationError(f"dia_fim ({dia_fim}) menor que dia_inicio ({dia_inicio})")
        self.peso_entrada = _to_decimal(peso_entrada, "peso_entrada")
        self.gmd = _to_decimal(gmd, "gmd")
        self.dia_inicio = dia_inicio
        self.dia_fim = dia_fim

    def __iter__(self) -> Iterator[tuple[int, Decimal]]:
        for dia in range(self.dia_inicio, self.dia_fim + 1):
            yield dia, weight_on_day(self.peso_entrada, self.gmd, dia)


def weight_curve(peso_entrada, gmd, dia_inicio: int, dia_fim: int) -> WeightCurve:
    return WeightCurve(peso_entrada, gmd, dia_inicio, dia_fim)


def day_of_feed(data_entrada: date, data: date) -> int:
    """Dia de cocho de `data` para um lote que entrou em `data_entrada` (entrada = dia 1)."""
    if data < data_entrada:
        raise ValidationError(f"data {data.isoformat()} anterior à entrada do lote ({data_entrada.isoformat()})")
    return (data - data_entrada).days + 1
