# models/vagao.py
from __future__ import annotations

from decimal import Decimal

from sqlalchemy import Boolean, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from utils.db import Base, BigIntId


class Vagao(Base):
    __tablename__ = "vagao"

    vagao_id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)
    nome: Mapped[str] = mapped_column(String(80), nullable=False)
    capacidade_kg: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    ativo: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
