from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from schemas.lote import CurvaPesoOut, PeriodoOut, PeriodosReplace, RationPlanOut
from services.lote_service import get_lote_or_404
from services.ration_period_service import project_lot_ration, replace_periods
from services.weight_curve_service import weight_curve
from utils.db import get_db

router = APIRouter(prefix="/lotes", tags=["lotes"])


@router.get("/{lote_id}/curva-peso", response_model=CurvaPesoOut)
def get_weight_curve(
    lote_id: int = Path(..., gt=0),
    dia_inicio: int = Query(1, ge=1),
    dia_fim: int | None = Query(None, ge=1),
    db: Session = Depends(get_db),
):
    lote = get_lote_or_404(db, lote_id)
    curva = weight_curve(lote.peso_medio_entrada, lote.gmd_projetado, dia_inicio, dia_fim or lote.dias_planejados)
    return {
        "lote_id": lote.lote_id,
        "peso_medio_entrada": float(lote.peso_medio_entrada),
        "gmd_projetado": float(lote.gmd_projetado),
        "pontos": [{"dia": dia, "peso_kg": float(peso)} for dia, peso in curva],
    }


@router.get("/{lote_id}/racao", response_model=RationPlanOut)
def get_ration_projection(
    lote_id: int = Path(..., gt=0),
    db: Session = Depends(get_db),
):
    return RationPlanOut.model_validate(project_lot_ration(db, lote_id))


@router.put("/{lote_id}/periodos", response_model=list[PeriodoOut])
def put_periods(
    lote_id: int = Path(..., gt=0),
    body: PeriodosReplace = ...,
    db: Session = Depends(get_db),
):
    return replace_periods(db, lote_id, [p.model_dump() for p in body.periodos])
