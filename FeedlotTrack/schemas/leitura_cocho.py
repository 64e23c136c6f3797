from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field, condecimal

from enums.enums import (
    ComportamentoManhaEnum,
    FaseDietaEnum,
    LeituraNoturnaEnum,
    SituacaoCochoEnum,
)
from schemas.shared import ORMModel

# =====================================================
# 🟢 INPUT SCHEMAS
# =====================================================


class LeituraNoturnaCreate(BaseModel):
    """`data` é a noite da observação; a leitura vale para a manhã seguinte."""
    data: date
    leitura_noturna: LeituraNoturnaEnum
    correcao: bool = Field(False, description="Permite alterar uma leitura já concluída")


class LeituraDiurnaCreate(BaseModel):
    data: date
    fase_dieta: FaseDietaEnum
    comportamento_manha: ComportamentoManhaEnum
    situacao_cocho_manha: SituacaoCochoEnum
    dias_de_cocho: Optional[int] = Field(None, ge=1, description="Se omitido, calculado pela data de entrada do lote")
    kg_anterior_por_cabeca: Optional[condecimal(ge=0, max_digits=10, decimal_places=3)] = Field(
        None, description="Se omitido, usa o consumo atual do lote"
    )
    num_animais: Optional[int] = Field(None, gt=0)
    observacoes: Optional[str] = Field(None, max_length=255)
    correcao: bool = False


# =====================================================
# 🟣 OUTPUT SCHEMAS
# =====================================================


class LeituraCochoOut(ORMModel):
    leitura_cocho_id: int
    lote_id: int
    data_referencia: date

    leitura_noturna: Optional[LeituraNoturnaEnum] = None
    leitura_noturna_em: Optional[datetime] = None

    fase_dieta: Optional[FaseDietaEnum] = None
    dias_de_cocho: Optional[int] = None
    comportamento_manha: Optional[ComportamentoManhaEnum] = None
    situacao_cocho_manha: Optional[SituacaoCochoEnum] = None
    leitura_manha_em: Optional[datetime] = None

    nota_cocho: Optional[float] = None
    percentual_ajuste: Optional[float] = None
    kg_anterior_por_cabeca: Optional[float] = None
    kg_novo_por_cabeca: Optional[float] = None
    delta_kg_por_cabeca: Optional[float] = None
    num_animais: Optional[int] = None
    total_kg_anterior: Optional[float] = None
    total_kg_novo: Optional[float] = None
    total_delta_kg: Optional[float] = None
    alertas: List[str] = []
    observacoes: Optional[str] = None

    concluida: bool
