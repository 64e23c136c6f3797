from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session

from schemas.batida import BatidaCreate, BatidaOut
from services.batch_service import (
    approve_batch,
    cancel_batch,
    create_batch,
    delete_batch,
    get_batch_or_404,
)
from utils.db import get_db

router = APIRouter(prefix="/batidas", tags=["batidas"])


@router.post("", response_model=BatidaOut, status_code=status.HTTP_201_CREATED)
def post_batch(body: BatidaCreate, db: Session = Depends(get_db)):
    personalizados = (
        [i.model_dump() for i in body.ingredientes_personalizados]
        if body.ingredientes_personalizados is not None
        else None
    )
    return create_batch(
        db,
        dieta_id=body.dieta_id,
        quantidade_kg=body.quantidade_kg,
        vagao_id=body.vagao_id,
        data_hora=body.data_hora,
        observacoes=body.observacoes,
        ingredientes_personalizados=personalizados,
    )


@router.get("/{batida_id}", response_model=BatidaOut)
def get_batch(batida_id: int = Path(..., gt=0), db: Session = Depends(get_db)):
    return get_batch_or_404(db, batida_id)


@router.post("/{batida_id}/aprovar", response_model=BatidaOut)
def post_approve(batida_id: int = Path(..., gt=0), db: Session = Depends(get_db)):
    return approve_batch(db, batida_id)


@router.post("/{batida_id}/cancelar", response_model=BatidaOut)
def post_cancel(batida_id: int = Path(..., gt=0), db: Session = Depends(get_db)):
    return cancel_batch(db, batida_id)


@router.delete("/{batida_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_batch(batida_id: int = Path(..., gt=0), db: Session = Depends(get_db)):
    delete_batch(db, batida_id)
