# models/planejamento.py
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    BigInteger, Date, DateTime, ForeignKey, Integer, Numeric, String,
    UniqueConstraint, Enum as SQLEnum,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from enums.enums import FaseDietaEnum, TipoLeituraEnum
from utils.db import Base, BigIntId
from utils.datetime_utils import now_local


class PlanejamentoTrato(Base):
    __tablename__ = "planejamento_trato"
    __table_args__ = (
        UniqueConstraint("lote_id", "data_planejamento", name="uq_planejamento_trato_lote_data"),
    )

    planejamento_id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)
    lote_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("lote.lote_id"), nullable=False, index=True)
    data_planejamento: Mapped[date] = mapped_column(Date, nullable=False)

    vagao_id: Mapped[int | None] = mapped_column(BigInteger, ForeignKey("vagao.vagao_id"))
    dieta_id: Mapped[int | None] = mapped_column(BigInteger, ForeignKey("dieta.dieta_id"))
    periodo_id: Mapped[int | None] = mapped_column(BigInteger, ForeignKey("periodo_alimentacao.periodo_id"))

    tipo_leitura: Mapped[TipoLeituraEnum] = mapped_column(
        SQLEnum(TipoLeituraEnum), default=TipoLeituraEnum.inteligente, nullable=False
    )
    dias_cocho: Mapped[int] = mapped_column(Integer, nullable=False)
    fase_dieta: Mapped[FaseDietaEnum | None] = mapped_column(SQLEnum(FaseDietaEnum))
    peso_medio_projetado: Mapped[Decimal] = mapped_column(Numeric(8, 2), nullable=False)

    quantidade_base_kg: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    quantidade_ajustada_kg: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    # Preenchidos quando uma leitura inteligente ajustou o planejamento
    leitura_cocho_id: Mapped[int | None] = mapped_column(BigInteger, ForeignKey("leitura_cocho.leitura_cocho_id"))
    nota_cocho: Mapped[Decimal | None] = mapped_column(Numeric(4, 2))
    percentual_ajuste: Mapped[Decimal | None] = mapped_column(Numeric(6, 2))

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), default=now_local, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False), default=now_local, onupdate=now_local, nullable=False
    )

    tratos: Mapped[list["TratoPlanejado"]] = relationship(
        "TratoPlanejado",
        back_populates="planejamento",
        cascade="all, delete-orphan",
        order_by="TratoPlanejado.ordem",
    )

    @property
    def numero_tratos(self) -> int:
        return len(self.tratos)


class TratoPlanejado(Base):
    __tablename__ = "trato_planejado"

    trato_planejado_id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)
    planejamento_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("planejamento_trato.planejamento_id"), nullable=False, index=True
    )
    ordem: Mapped[int] = mapped_column(Integer, nullable=False)
    horario: Mapped[str] = mapped_column(String(5), nullable=False)  # HH:MM
    percentual: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)
    quantidade_kg: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    planejamento: Mapped["PlanejamentoTrato"] = relationship("PlanejamentoTrato", back_populates="tratos")
