# models/dieta.py
from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    BigInteger, Boolean, DateTime, ForeignKey, Integer, Numeric, String,
    Enum as SQLEnum,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from enums.enums import FaseDietaEnum, TipoIngredienteEnum
from utils.db import Base, BigIntId
from utils.datetime_utils import now_local


class Dieta(Base):
    __tablename__ = "dieta"

    dieta_id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)
    nome: Mapped[str] = mapped_column(String(120), nullable=False)
    ms_media: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)   # % de matéria seca
    custo_kg: Mapped[Decimal] = mapped_column(Numeric(10, 4), default=Decimal("0"), nullable=False)  # R$/kg MN
    fase_dieta: Mapped[FaseDietaEnum | None] = mapped_column(SQLEnum(FaseDietaEnum))
    ativo: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), default=now_local, nullable=False)

    ingredientes: Mapped[list["IngredienteDieta"]] = relationship(
        "IngredienteDieta",
        back_populates="dieta",
        cascade="all, delete-orphan",
        order_by="IngredienteDieta.ordem",
    )


class IngredienteDieta(Base):
    __tablename__ = "ingrediente_dieta"

    ingrediente_dieta_id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)
    dieta_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("dieta.dieta_id"), nullable=False, index=True)

    tipo: Mapped[TipoIngredienteEnum] = mapped_column(SQLEnum(TipoIngredienteEnum), nullable=False)
    insumo_id: Mapped[int | None] = mapped_column(BigInteger, ForeignKey("insumo.insumo_id"))
    pre_mistura_id: Mapped[int | None] = mapped_column(BigInteger, ForeignKey("pre_mistura.pre_mistura_id"))

    percentual_mistura: Mapped[Decimal] = mapped_column(Numeric(6, 3), nullable=False)  # % na MN
    ordem: Mapped[int] = mapped_column(Integer, default=1, nullable=False)

    dieta: Mapped["Dieta"] = relationship("Dieta", back_populates="ingredientes")
    insumo: Mapped["Insumo"] = relationship("Insumo")
    pre_mistura: Mapped["PreMistura"] = relationship("PreMistura")


class PreMistura(Base):
    __tablename__ = "pre_mistura"

    pre_mistura_id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)
    nome: Mapped[str] = mapped_column(String(120), nullable=False)
    ativo: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    ingredientes: Mapped[list["IngredientePreMistura"]] = relationship(
        "IngredientePreMistura",
        back_populates="pre_mistura",
        cascade="all, delete-orphan",
        order_by="IngredientePreMistura.ordem",
    )


class IngredientePreMistura(Base):
    __tablename__ = "ingrediente_pre_mistura"

    ingrediente_pre_mistura_id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)
    pre_mistura_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("pre_mistura.pre_mistura_id"), nullable=False, index=True
    )
    insumo_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("insumo.insumo_id"), nullable=False)
    percentual_mistura: Mapped[Decimal] = mapped_column(Numeric(6, 3), nullable=False)
    ordem: Mapped[int] = mapped_column(Integer, default=1, nullable=False)

    pre_mistura: Mapped["PreMistura"] = relationship("PreMistura", back_populates="ingredientes")
    insumo: Mapped["Insumo"] = relationship("Insumo")
