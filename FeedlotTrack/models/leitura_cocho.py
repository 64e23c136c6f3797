# models/leitura_cocho.py
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    BigInteger, Date, DateTime, ForeignKey, Integer, JSON, Numeric, String,
    UniqueConstraint, Enum as SQLEnum,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from enums.enums import (
    ComportamentoManhaEnum,
    FaseDietaEnum,
    LeituraNoturnaEnum,
    SituacaoCochoEnum,
)
from utils.db import Base, BigIntId
from utils.datetime_utils import now_local


class LeituraCocho(Base):
    """
    Leitura inteligente de cocho. Uma linha por (lote, data de referência):
    a metade noturna é gravada na véspera e a metade diurna completa a linha
    na manhã da data de referência.
    """
    __tablename__ = "leitura_cocho"
    __table_args__ = (
        UniqueConstraint("lote_id", "data_referencia", name="uq_leitura_cocho_lote_data"),
    )

    leitura_cocho_id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)
    lote_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("lote.lote_id"), nullable=False, index=True)
    data_referencia: Mapped[date] = mapped_column(Date, nullable=False)

    # Metade noturna
    leitura_noturna: Mapped[LeituraNoturnaEnum | None] = mapped_column(SQLEnum(LeituraNoturnaEnum))
    leitura_noturna_em: Mapped[datetime | None] = mapped_column(DateTime(timezone=False))

    # Metade diurna
    fase_dieta: Mapped[FaseDietaEnum | None] = mapped_column(SQLEnum(FaseDietaEnum))
    dias_de_cocho: Mapped[int | None] = mapped_column(Integer)
    comportamento_manha: Mapped[ComportamentoManhaEnum | None] = mapped_column(SQLEnum(ComportamentoManhaEnum))
    situacao_cocho_manha: Mapped[SituacaoCochoEnum | None] = mapped_column(SQLEnum(SituacaoCochoEnum))
    leitura_manha_em: Mapped[datetime | None] = mapped_column(DateTime(timezone=False))

    # Resultado do cálculo
    nota_cocho: Mapped[Decimal | None] = mapped_column(Numeric(4, 2))
    percentual_ajuste: Mapped[Decimal | None] = mapped_column(Numeric(6, 2))
    kg_anterior_por_cabeca: Mapped[Decimal | None] = mapped_column(Numeric(10, 3))
    kg_novo_por_cabeca: Mapped[Decimal | None] = mapped_column(Numeric(10, 3))
    delta_kg_por_cabeca: Mapped[Decimal | None] = mapped_column(Numeric(10, 3))
    num_animais: Mapped[int | None] = mapped_column(Integer)
    total_kg_anterior: Mapped[Decimal | None] = mapped_column(Numeric(14, 2))
    total_kg_novo: Mapped[Decimal | None] = mapped_column(Numeric(14, 2))
    total_delta_kg: Mapped[Decimal | None] = mapped_column(Numeric(14, 2))
    alertas: Mapped[list] = mapped_column(JSON, default=list, nullable=False)

    observacoes: Mapped[str | None] = mapped_column(String(255))

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), default=now_local, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False), default=now_local, onupdate=now_local, nullable=False
    )

    lote: Mapped["Lote"] = relationship("Lote")

    @property
    def noturna_registrada(self) -> bool:
        return self.leitura_noturna is not None

    @property
    def concluida(self) -> bool:
        """Metade diurna presente e nota calculada."""
        return self.leitura_manha_em is not None and self.nota_cocho is not None
