from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field, condecimal

from schemas.shared import ORMModel

# =====================================================
# 🟢 INPUT SCHEMAS
# =====================================================


class PeriodoIn(BaseModel):
    dieta_id: int = Field(..., gt=0)
    dia_inicial: int = Field(..., ge=1)
    dia_final: int = Field(..., ge=1, description="Inclusivo")
    ingestao_ms_pct_pv: condecimal(gt=0, le=10, max_digits=5, decimal_places=2) = Field(
        ..., description="Ingestão de matéria seca em % do peso vivo"
    )


class PeriodosReplace(BaseModel):
    """Lista completa de períodos; substitui os atuais do lote."""
    periodos: List[PeriodoIn] = Field(..., min_length=1)


# =====================================================
# 🟣 OUTPUT SCHEMAS
# =====================================================


class PeriodoOut(ORMModel):
    periodo_id: int
    lote_id: int
    dieta_id: int
    dia_inicial: int
    dia_final: int
    ingestao_ms_pct_pv: float


class PontoCurvaPeso(BaseModel):
    dia: int
    peso_kg: float


class CurvaPesoOut(BaseModel):
    lote_id: int
    peso_medio_entrada: float
    gmd_projetado: float
    pontos: List[PontoCurvaPeso]


class RationDayOut(ORMModel):
    dia: int
    peso_kg: float
    ms_kg: float
    mn_kg: float


class RationPeriodOut(ORMModel):
    dia_inicial: int
    dia_final: int
    dieta_id: int
    dieta_nome: str
    ingestao_ms_pct_pv: float
    dias: int
    ms_kg_cabeca: float
    mn_kg_cabeca: float
    ms_kg_lote: float
    mn_kg_lote: float
    custo_lote: float


class RationPlanOut(ORMModel):
    quantidade_animais: int
    dias_planejados: int
    dias: List[RationDayOut]
    periodos: List[RationPeriodOut]
    ms_kg_cabeca: float
    mn_kg_cabeca: float
    ms_kg_lote: float
    mn_kg_lote: float
    custo_lote: float
