from __future__ import annotations

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field, condecimal

from enums.enums import FaseDietaEnum, TipoLeituraEnum
from schemas.shared import HorarioStr, ORMModel

# =====================================================
# 🟢 INPUT SCHEMAS
# =====================================================


class TratoIn(BaseModel):
    horario: HorarioStr
    percentual: condecimal(ge=0, le=100, max_digits=5, decimal_places=2)


class PlanejamentoRequest(BaseModel):
    """
    Campos omitidos vêm do planejamento anterior do lote
    (ou do padrão 07:00/12:00/17:00 se não houver).
    """
    tipo_leitura: Optional[TipoLeituraEnum] = Field(
        None, description="Omitido: o do planejamento anterior (inteligente se não houver)"
    )
    vagao_id: Optional[int] = Field(None, gt=0)
    tratos: Optional[List[TratoIn]] = Field(None, min_length=1)
    total_kg: Optional[condecimal(gt=0, max_digits=12, decimal_places=2)] = Field(
        None, description="Substitui a quantidade ajustada calculada"
    )


# =====================================================
# 🟣 OUTPUT SCHEMAS
# =====================================================


class TratoOut(ORMModel):
    ordem: int
    horario: str
    percentual: float
    quantidade_kg: float


class PlanoTratoDraftOut(ORMModel):
    lote_id: Optional[int] = None
    data_planejamento: Optional[date] = None
    tipo_leitura: TipoLeituraEnum
    vagao_id: Optional[int] = None
    dieta_id: Optional[int] = None
    periodo_id: Optional[int] = None
    dias_cocho: Optional[int] = None
    fase_dieta: Optional[FaseDietaEnum] = None
    peso_medio_projetado: Optional[float] = None
    quantidade_base_kg: Optional[float] = None
    total_kg: float
    leitura_cocho_id: Optional[int] = None
    nota_cocho: Optional[float] = None
    percentual_ajuste: Optional[float] = None
    soma_percentual: float
    numero_tratos: int
    tratos: List[TratoOut]
    alertas: List[str] = []


class PlanejamentoOut(ORMModel):
    planejamento_id: int
    lote_id: int
    data_planejamento: date
    tipo_leitura: TipoLeituraEnum
    vagao_id: Optional[int] = None
    dieta_id: Optional[int] = None
    periodo_id: Optional[int] = None
    dias_cocho: int
    fase_dieta: Optional[FaseDietaEnum] = None
    peso_medio_projetado: float
    quantidade_base_kg: float
    quantidade_ajustada_kg: float
    leitura_cocho_id: Optional[int] = None
    nota_cocho: Optional[float] = None
    percentual_ajuste: Optional[float] = None
    numero_tratos: int
    tratos: List[TratoOut]
