from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session

from schemas.estoque import EntradaEstoqueCreate, EntradaEstoqueOut, SaldoEstoqueOut
from services.inventory_service import register_stock_entry, stock_balance
from utils.db import get_db

router = APIRouter(prefix="/estoque", tags=["estoque"])


@router.post("/entradas", response_model=EntradaEstoqueOut, status_code=status.HTTP_201_CREATED)
def post_stock_entry(body: EntradaEstoqueCreate, db: Session = Depends(get_db)):
    return register_stock_entry(
        db,
        insumo_id=body.insumo_id,
        quantidade_kg=body.quantidade_kg,
        valor_total=body.valor_total,
        data_entrada=body.data_entrada,
        observacoes=body.observacoes,
    )


@router.get("/{insumo_id}/saldo", response_model=SaldoEstoqueOut)
def get_stock_balance(insumo_id: int = Path(..., gt=0), db: Session = Depends(get_db)):
    return stock_balance(db, insumo_id)
