from datetime import date

from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session

from schemas.leitura_cocho import LeituraCochoOut, LeituraDiurnaCreate, LeituraNoturnaCreate
from services.bunk_reading_service import get_reading, register_morning_reading, register_night_reading
from utils.db import get_db

router = APIRouter(prefix="/leituras-cocho", tags=["leituras-cocho"])


@router.post("/{lote_id}/noturna", response_model=LeituraCochoOut, status_code=201)
def post_night_reading(
    lote_id: int = Path(..., gt=0),
    body: LeituraNoturnaCreate = ...,
    db: Session = Depends(get_db),
):
    return register_night_reading(db, lote_id, body.data, body.leitura_noturna, correcao=body.correcao)


@router.post("/{lote_id}/diurna", response_model=LeituraCochoOut, status_code=201)
def post_morning_reading(
    lote_id: int = Path(..., gt=0),
    body: LeituraDiurnaCreate = ...,
    db: Session = Depends(get_db),
):
    return register_morning_reading(
        db,
        lote_id,
        body.data,
        fase=body.fase_dieta,
        comportamento=body.comportamento_manha,
        situacao=body.situacao_cocho_manha,
        dias_de_cocho=body.dias_de_cocho,
        kg_anterior_por_cabeca=body.kg_anterior_por_cabeca,
        num_animais=body.num_animais,
        observacoes=body.observacoes,
        correcao=body.correcao,
    )


@router.get("/{lote_id}/{data_referencia}", response_model=LeituraCochoOut)
def get_reading_endpoint(
    lote_id: int = Path(..., gt=0),
    data_referencia: date = Path(...),
    db: Session = Depends(get_db),
):
    return get_reading(db, lote_id, data_referencia)
