from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, condecimal

from enums.enums import BatidaStatusEnum
from schemas.shared import ORMModel

# =====================================================
# 🟢 INPUT SCHEMAS
# =====================================================


class IngredientePersonalizado(BaseModel):
    insumo_id: int = Field(..., gt=0)
    quantidade_kg: condecimal(gt=0, max_digits=12, decimal_places=2)


class BatidaCreate(BaseModel):
    dieta_id: int = Field(..., gt=0)
    quantidade_kg: condecimal(gt=0, max_digits=12, decimal_places=2)
    vagao_id: Optional[int] = Field(None, gt=0)
    data_hora: Optional[datetime] = None
    observacoes: Optional[str] = Field(None, max_length=255)
    ingredientes_personalizados: Optional[List[IngredientePersonalizado]] = Field(
        None, min_length=1, description="Substitui a composição da dieta"
    )


# =====================================================
# 🟣 OUTPUT SCHEMAS
# =====================================================


class BatidaOut(ORMModel):
    batida_id: int
    codigo: str
    dieta_id: int
    vagao_id: Optional[int] = None
    quantidade_kg: float
    data_hora: datetime
    status: BatidaStatusEnum
    observacoes: Optional[str] = None
    ingredientes_personalizados: Optional[List[dict]] = None
    created_at: datetime
    updated_at: datetime
