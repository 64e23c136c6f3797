# models/batida.py
from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    BigInteger, DateTime, ForeignKey, JSON, Numeric, String, Enum as SQLEnum,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from enums.enums import BatidaStatusEnum
from utils.db import Base, BigIntId
from utils.datetime_utils import now_local


class Batida(Base):
    __tablename__ = "batida"

    batida_id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)
    codigo: Mapped[str] = mapped_column(String(30), unique=True, nullable=False)

    dieta_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("dieta.dieta_id"), nullable=False, index=True)
    vagao_id: Mapped[int | None] = mapped_column(BigInteger, ForeignKey("vagao.vagao_id"))

    quantidade_kg: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    data_hora: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    status: Mapped[BatidaStatusEnum] = mapped_column(
        SQLEnum(BatidaStatusEnum), default=BatidaStatusEnum.PREPARANDO, nullable=False, index=True
    )
    observacoes: Mapped[str | None] = mapped_column(String(255))
    # [{"insumo_id": int, "quantidade_kg": str}] substitui a composição da dieta
    ingredientes_personalizados: Mapped[list | None] = mapped_column(JSON)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), default=now_local, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False), default=now_local, onupdate=now_local, nullable=False
    )

    dieta: Mapped["Dieta"] = relationship("Dieta")
    vagao: Mapped["Vagao"] = relationship("Vagao")
