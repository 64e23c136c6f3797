from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field, condecimal

from schemas.shared import ORMModel


class EntradaEstoqueCreate(BaseModel):
    insumo_id: int = Field(..., gt=0)
    quantidade_kg: condecimal(gt=0, max_digits=12, decimal_places=2)
    valor_total: condecimal(ge=0, max_digits=14, decimal_places=2) = 0
    data_entrada: Optional[date] = None
    observacoes: Optional[str] = Field(None, max_length=255)


class EntradaEstoqueOut(ORMModel):
    entrada_estoque_id: int
    insumo_id: int
    data_entrada: date
    quantidade_kg: float
    valor_total: float
    observacoes: Optional[str] = None
    created_at: datetime


class SaldoEstoqueOut(BaseModel):
    insumo_id: int
    nome: str
    entradas_kg: float
    saidas_kg: float
    saldo_kg: float
    preco_medio_kg: float
    abaixo_minimo: bool
