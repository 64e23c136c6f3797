from datetime import date

from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session

from schemas.planejamento import PlanejamentoOut, PlanejamentoRequest, PlanoTratoDraftOut
from services.feeding_plan_service import build_feeding_plan, get_feeding_plan, save_feeding_plan
from services.feeding_schedule_service import ScheduleOverride, set_total
from utils.db import get_db

router = APIRouter(prefix="/planejamentos", tags=["planejamentos"])


def _draft(db: Session, lote_id: int, data: date, body: PlanejamentoRequest):
    override = ScheduleOverride(
        vagao_id=body.vagao_id,
        tratos=[(t.horario, t.percentual) for t in body.tratos] if body.tratos is not None else None,
    )
    draft = build_feeding_plan(db, lote_id, data, body.tipo_leitura, override)
    if body.total_kg is not None:
        draft = set_total(draft, body.total_kg)
    return draft


@router.post("/{lote_id}/{data}/rascunho", response_model=PlanoTratoDraftOut)
def post_draft(
    lote_id: int = Path(..., gt=0),
    data: date = Path(...),
    body: PlanejamentoRequest = PlanejamentoRequest(),
    db: Session = Depends(get_db),
):
    """Calcula o planejamento do dia sem gravar (a soma dos percentuais pode estar fora de 100%)."""
    return PlanoTratoDraftOut.model_validate(_draft(db, lote_id, data, body))


@router.put("/{lote_id}/{data}", response_model=PlanejamentoOut)
def put_plan(
    lote_id: int = Path(..., gt=0),
    data: date = Path(...),
    body: PlanejamentoRequest = PlanejamentoRequest(),
    db: Session = Depends(get_db),
):
    return save_feeding_plan(db, lote_id, data, _draft(db, lote_id, data, body))


@router.get("/{lote_id}/{data}", response_model=PlanejamentoOut)
def get_plan(
    lote_id: int = Path(..., gt=0),
    data: date = Path(...),
    db: Session = Depends(get_db),
):
    return get_feeding_plan(db, lote_id, data)
