# services/inventory_service.py
"""
Estoque de insumos calculado pelo razão de movimentações:

saldo       = Σ entradas.quantidade_kg - Σ saidas.quantidade
preço médio = Σ entradas.valor_total / Σ entradas.quantidade_kg
"""
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Dict, Iterable, Optional, Protocol

from sqlalchemy import func
from sqlalchemy.orm import Session

from models.estoque import EntradaEstoque, Insumo, SaidaEstoque
from utils.datetime_utils import now_local, today_local
from utils.errors import NotFoundError, StockError, ValidationError
from utils.logging_config import get_logger
from utils.transactions import uow

logger = get_logger("inventory")

KG_Q = Decimal("0.01")
PRECO_Q = Decimal("0.0001")
ZERO = Decimal("0")


class InventoryGateway(Protocol):
    """Colaborador de estoque usado na aprovação de batidas."""

    def lock(self, insumo_ids: Iterable[int]) -> Dict[int, Insumo]: ...

    def available_stock(self, insumo_id: int) -> Decimal: ...

    def deduct(
        self,
        insumo_id: int,
        kg: Decimal,
        *,
        batida_id: Optional[int] = None,
        data_hora: Optional[datetime] = None,
        observacoes: Optional[str] = None,
    ) -> SaidaEstoque: ...


def get_insumo_or_404(db: Session, insumo_id: int) -> Insumo:
    insumo = db.get(Insumo, insumo_id)
    if insumo is None:
        raise NotFoundError(f"insumo_not_found: insumo {insumo_id} não existe.")
    return insumo


def _entradas(db: Session, insumo_id: int) -> tuple[Decimal, Decimal]:
    qtd, valor = (
        db.query(
            func.coalesce(func.sum(EntradaEstoque.quantidade_kg), 0),
            func.coalesce(func.sum(EntradaEstoque.valor_total), 0),
        )
        .filter(EntradaEstoque.insumo_id == insumo_id)
        .one()
    )
    return Decimal(str(qtd)), Decimal(str(valor))


def _saidas(db: Session, insumo_id: int) -> Decimal:
    qtd = (
        db.query(func.coalesce(func.sum(SaidaEstoque.quantidade), 0))
        .filter(SaidaEstoque.insumo_id == insumo_id)
        .scalar()
    )
    return Decimal(str(qtd))


class LedgerInventory:
    """InventoryGateway sobre as tabelas entrada_estoque / saida_estoque."""

    def __init__(self, db: Session):
        self.db = db

    def lock(self, insumo_ids: Iterable[int]) -> Dict[int, Insumo]:
        """
        Trava as linhas de insumo (SELECT ... FOR UPDATE) na ordem do id para
        serializar aprovações concorrentes que consomem os mesmos insumos.
        """
        ids = sorted(set(insumo_ids))
        if not ids:
            return {}
        rows = (
            self.db.query(Insumo)
            .filter(Insumo.insumo_id.in_(ids))
            .order_by(Insumo.insumo_id)
            .with_for_update()
            .all()
        )
        return {i.insumo_id: i for i in rows}

    def available_stock(self, insumo_id: int) -> Decimal:
        entradas, _ = _entradas(self.db, insumo_id)
        return (entradas - _saidas(self.db, insumo_id)).quantize(KG_Q)

    def average_price(self, insumo_id: int) -> Decimal:
        qtd, valor = _entradas(self.db, insumo_id)
        if qtd <= 0:
            return ZERO
        return (valor / qtd).quantize(PRECO_Q)

    def deduct(
        self,
        insumo_id: int,
        kg: Decimal,
        *,
        batida_id: Optional[int] = None,
        data_hora: Optional[datetime] = None,
        observacoes: Optional[str] = None,
    ) -> SaidaEstoque:
        kg = Decimal(str(kg)).quantize(KG_Q)
        if kg <= 0:
            raise ValidationError(f"quantidade de saída deve ser > 0 (recebido {kg})")

        insumo = get_insumo_or_404(self.db, insumo_id)
        saldo = self.available_stock(insumo_id)
        if kg > saldo:
            raise StockError([
                {
                    "insumo_id": insumo_id,
                    "insumo_nome": insumo.nome,
                    "necessario_kg": kg,
                    "disponivel_kg": saldo,
                    "faltante_kg": kg - saldo,
                }
            ])

        saida = SaidaEstoque(
            insumo_id=insumo_id,
            batida_id=batida_id,
            data_hora=data_hora or now_local(),
            quantidade=kg,
            valor_estimado=(kg * self.average_price(insumo_id)).quantize(KG_Q),
            saldo_apos_saida=saldo - kg,
            observacoes=observacoes,
        )
        self.db.add(saida)
        self.db.flush()
        return saida


# ==================== OPERAÇÕES ====================

def register_stock_entry(
    db: Session,
    insumo_id: int,
    quantidade_kg,
    valor_total=ZERO,
    data_entrada: Optional[date] = None,
    observacoes: Optional[str] = None,
) -> EntradaEstoque:
    qtd = Decimal(str(quantidade_kg)).quantize(KG_Q)
    valor = Decimal(str(valor_total)).quantize(KG_Q)
    if qtd <= 0:
        raise ValidationError(f"quantidade_kg deve ser > 0 (recebido {qtd})")
    if valor < 0:
        raise ValidationError(f"valor_total não pode ser negativo (recebido {valor})")
    get_insumo_or_404(db, insumo_id)

    with uow(db):
        entrada = EntradaEstoque(
            insumo_id=insumo_id,
            data_entrada=data_entrada or today_local(),
            quantidade_kg=qtd,
            valor_total=valor,
            observacoes=observacoes,
        )
        db.add(entrada)

    db.refresh(entrada)
    logger.info("Entrada de estoque: insumo %s +%s kg", insumo_id, qtd)
    return entrada


def stock_balance(db: Session, insumo_id: int) -> dict:
    insumo = get_insumo_or_404(db, insumo_id)
    entradas, valor = _entradas(db, insumo_id)
    saidas = _saidas(db, insumo_id)
    saldo = (entradas - saidas).quantize(KG_Q)
    return {
        "insumo_id": insumo.insumo_id,
        "nome": insumo.nome,
        "entradas_kg": entradas.quantize(KG_Q),
        "saidas_kg": saidas.quantize(KG_Q),
        "saldo_kg": saldo,
        "preco_medio_kg": (valor / entradas).quantize(PRECO_Q) if entradas > 0 else ZERO,
        "abaixo_minimo": saldo < Decimal(str(insumo.estoque_minimo or 0)),
    }
