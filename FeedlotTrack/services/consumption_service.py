"""
Projeção de consumo a partir do ajuste da leitura de cocho.

novo     = max(0, anterior × (1 + ajuste/100))     (3 casas, kg/cabeça)
delta    = novo - anterior
totais   = valores por cabeça × número de animais  (2 casas, kg/lote)
"""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from config.settings import settings
from utils.errors import ValidationError

KG_Q = Decimal("0.001")
TOTAL_Q = Decimal("0.01")
CEM = Decimal("100")


@dataclass(frozen=True, slots=True)
class ConsumptionProjection:
    kg_anterior_por_cabeca: Decimal
    kg_novo_por_cabeca: Decimal
    delta_kg_por_cabeca: Decimal
    num_animais: int
    total_kg_anterior: Decimal
    total_kg_novo: Decimal
    total_delta_kg: Decimal
    alertas: list[str] = field(default_factory=list)


def project_consumption(kg_anterior_por_cabeca, percentual_ajuste, num_animais: int) -> ConsumptionProjection:
    anterior = Decimal(str(kg_anterior_por_cabeca))
    pct = Decimal(str(percentual_ajuste))
    if anterior < 0:
        raise ValidationError(f"consumo anterior por cabeça não pode ser negativo ({anterior})")
    if num_animais is None or num_animais <= 0:
        raise ValidationError(f"num_animais deve ser > 0 (recebido {num_animais})")

    novo = max(Decimal("0"), anterior * (1 + pct / CEM)).quantize(KG_Q)
    anterior = anterior.quantize(KG_Q)
    delta = novo - anterior

    n = Decimal(num_animais)
    total_anterior = (anterior * n).quantize(TOTAL_Q)
    total_novo = (novo * n).quantize(TOTAL_Q)

    alertas: list[str] = []
    if anterior > 0:
        queda_pct = (anterior - novo) / anterior * CEM
        if queda_pct > settings.CONSUMPTION_LARGE_DROP_PCT:
            alertas.append(
                f"⚠️ Queda de {queda_pct.quantize(TOTAL_Q)}% no consumo em uma única leitura: confirmar antes de aplicar."
            )

    return ConsumptionProjection(
        kg_anterior_por_cabeca=anterior,
        kg_novo_por_cabeca=novo,
        delta_kg_por_cabeca=delta,
        num_animais=num_animais,
        total_kg_anterior=total_anterior,
        total_kg_novo=total_novo,
        total_delta_kg=total_novo - total_anterior,
        alertas=alertas,
    )
