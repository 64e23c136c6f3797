# models/estoque.py
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import BigInteger, Boolean, Date, DateTime, ForeignKey, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from utils.db import Base, BigIntId
from utils.datetime_utils import now_local


class Insumo(Base):
    __tablename__ = "insumo"

    insumo_id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)
    nome: Mapped[str] = mapped_column(String(120), nullable=False)
    estoque_minimo: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"), nullable=False)
    ativo: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), default=now_local, nullable=False)


class EntradaEstoque(Base):
    __tablename__ = "entrada_estoque"

    entrada_estoque_id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)
    insumo_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("insumo.insumo_id"), nullable=False, index=True)

    data_entrada: Mapped[date] = mapped_column(Date, nullable=False)
    quantidade_kg: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    valor_total: Mapped[Decimal] = mapped_column(Numeric(14, 2), default=Decimal("0"), nullable=False)
    observacoes: Mapped[str | None] = mapped_column(String(255))

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), default=now_local, nullable=False)

    insumo: Mapped["Insumo"] = relationship("Insumo")


class SaidaEstoque(Base):
    __tablename__ = "saida_estoque"

    saida_estoque_id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)
    insumo_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("insumo.insumo_id"), nullable=False, index=True)
    batida_id: Mapped[int | None] = mapped_column(BigInteger, ForeignKey("batida.batida_id"), index=True)

    data_hora: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    quantidade: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)  # kg
    valor_estimado: Mapped[Decimal] = mapped_column(Numeric(14, 2), default=Decimal("0"), nullable=False)
    saldo_apos_saida: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    observacoes: Mapped[str | None] = mapped_column(String(255))

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), default=now_local, nullable=False)

    insumo: Mapped["Insumo"] = relationship("Insumo")
