# models/lote.py
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    BigInteger, Date, DateTime, ForeignKey, Integer, Numeric, String,
    Enum as SQLEnum,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from enums.enums import LoteStatusEnum
from utils.db import Base, BigIntId
from utils.datetime_utils import now_local


class Lote(Base):
    __tablename__ = "lote"

    lote_id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)
    nome: Mapped[str] = mapped_column(String(120), nullable=False)
    status: Mapped[LoteStatusEnum] = mapped_column(
        SQLEnum(LoteStatusEnum), default=LoteStatusEnum.ATIVO, nullable=False
    )

    quantidade_animais: Mapped[int] = mapped_column(Integer, nullable=False)
    data_entrada: Mapped[date] = mapped_column(Date, nullable=False)
    peso_medio_entrada: Mapped[Decimal] = mapped_column(Numeric(8, 2), nullable=False)   # kg
    gmd_projetado: Mapped[Decimal] = mapped_column(Numeric(6, 3), nullable=False)        # kg/dia
    dias_planejados: Mapped[int] = mapped_column(Integer, nullable=False)
    # Atualizado a cada leitura diurna com o novo consumo projetado
    kg_por_cabeca_atual: Mapped[Decimal | None] = mapped_column(Numeric(8, 3))

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), default=now_local, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False), default=now_local, onupdate=now_local, nullable=False
    )

    periodos: Mapped[list["PeriodoAlimentacao"]] = relationship(
        "PeriodoAlimentacao",
        back_populates="lote",
        cascade="all, delete-orphan",
        order_by="PeriodoAlimentacao.dia_inicial",
    )


class PeriodoAlimentacao(Base):
    __tablename__ = "periodo_alimentacao"

    periodo_id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)
    lote_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("lote.lote_id"), nullable=False, index=True)
    dieta_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("dieta.dieta_id"), nullable=False)

    dia_inicial: Mapped[int] = mapped_column(Integer, nullable=False)
    dia_final: Mapped[int] = mapped_column(Integer, nullable=False)  # inclusivo
    ingestao_ms_pct_pv: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)  # % do PV em MS

    lote: Mapped["Lote"] = relationship("Lote", back_populates="periodos")
    dieta: Mapped["Dieta"] = relationship("Dieta")
