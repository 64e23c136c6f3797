# services/lote_service.py
from __future__ import annotations

from typing import Dict, Iterable

from sqlalchemy.orm import Session

from models.dieta import Dieta
from models.lote import Lote
from models.vagao import Vagao
from utils.errors import NotFoundError


def get_lote_or_404(db: Session, lote_id: int) -> Lote:
    lote = db.get(Lote, lote_id)
    if lote is None:
        raise NotFoundError(f"lote_not_found: lote {lote_id} não existe.")
    return lote


def get_dieta_or_404(db: Session, dieta_id: int) -> Dieta:
    dieta = db.get(Dieta, dieta_id)
    if dieta is None:
        raise NotFoundError(f"dieta_not_found: dieta {dieta_id} não existe.")
    return dieta


def get_vagao_or_404(db: Session, vagao_id: int) -> Vagao:
    vagao = db.get(Vagao, vagao_id)
    if vagao is None:
        raise NotFoundError(f"vagao_not_found: vagão {vagao_id} não existe.")
    return vagao


def dietas_lookup(db: Session, dieta_ids: Iterable[int]) -> Dict[int, Dieta]:
    ids = set(dieta_ids)
    if not ids:
        return {}
    rows = db.query(Dieta).filter(Dieta.dieta_id.in_(ids)).all()
    return {d.dieta_id: d for d in rows}
