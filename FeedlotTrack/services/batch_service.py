# services/batch_service.py
"""
Ciclo de vida da batida (mistura de ração preparada no vagão).

PREPARANDO -> CONCLUIDA  (baixa os insumos no estoque)
PREPARANDO -> CANCELADA  (sem efeito no estoque)
CONCLUIDA e CANCELADA são terminais.
"""
from __future__ import annotations

from collections import defaultdict
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional, Sequence

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from enums.enums import BatidaStatusEnum, TipoIngredienteEnum
from models.batida import Batida
from models.dieta import Dieta
from models.estoque import Insumo
from services.inventory_service import InventoryGateway, LedgerInventory
from services.lote_service import get_dieta_or_404, get_vagao_or_404
from utils.datetime_utils import now_local, to_local_naive
from utils.errors import NotFoundError, StateError, StockError, ValidationError
from utils.logging_config import get_logger
from utils.transactions import uow

logger = get_logger("batch")

KG_Q = Decimal("0.01")
CEM = Decimal("100")
_CODIGO_TENTATIVAS = 5

TRANSICOES: Dict[BatidaStatusEnum, frozenset] = {
    BatidaStatusEnum.PREPARANDO: frozenset({BatidaStatusEnum.CONCLUIDA, BatidaStatusEnum.CANCELADA}),
    BatidaStatusEnum.CONCLUIDA: frozenset(),
    BatidaStatusEnum.CANCELADA: frozenset(),
}

if set(TRANSICOES) != set(BatidaStatusEnum):
    raise RuntimeError("Tabela de transições da batida incompleta")


def _ensure_transition(batida: Batida, destino: BatidaStatusEnum) -> None:
    if destino not in TRANSICOES[batida.status]:
        raise StateError(
            f"batch_invalid_transition: batida {batida.codigo} está {batida.status.value}; "
            f"não pode passar para {destino.value}."
        )


def get_batch_or_404(db: Session, batida_id: int) -> Batida:
    batida = db.get(Batida, batida_id)
    if batida is None:
        raise NotFoundError(f"batch_not_found: batida {batida_id} não existe.")
    return batida


# ==================== REQUISITOS DE INSUMOS ====================

def _validate_custom_ingredients(itens: Sequence[Mapping[str, Any]]) -> List[dict]:
    normalizados = []
    for item in itens:
        qtd = Decimal(str(item["quantidade_kg"]))
        if qtd <= 0:
            raise ValidationError(f"quantidade do insumo {item['insumo_id']} deve ser > 0")
        normalizados.append({"insumo_id": int(item["insumo_id"]), "quantidade_kg": str(qtd.quantize(KG_Q))})
    if not normalizados:
        raise ValidationError("ingredientes_personalizados não pode ser uma lista vazia")
    return normalizados


def _diet_requirements(dieta: Dieta, quantidade_kg: Decimal) -> Dict[int, Decimal]:
    if not dieta.ingredientes:
        raise ValidationError(f"dieta '{dieta.nome}' não tem ingredientes cadastrados")

    requisitos: Dict[int, Decimal] = defaultdict(Decimal)
    for ing in dieta.ingredientes:
        kg = quantidade_kg * Decimal(str(ing.percentual_mistura)) / CEM
        if ing.tipo == TipoIngredienteEnum.insumo:
            requisitos[ing.insumo_id] += kg
        else:
            pre = ing.pre_mistura
            if pre is None or not pre.ingredientes:
                raise ValidationError(f"pré-mistura {ing.pre_mistura_id} da dieta '{dieta.nome}' sem ingredientes")
            for comp in pre.ingredientes:
                requisitos[comp.insumo_id] += kg * Decimal(str(comp.percentual_mistura)) / CEM
    return requisitos


def resolve_requirements(db: Session, batida: Batida) -> Dict[int, Decimal]:
    """
    Quilos de cada insumo que a batida consome: ingredientes personalizados,
    ou composição da dieta × quantidade com pré-misturas expandidas.
    """
    if batida.ingredientes_personalizados:
        requisitos: Dict[int, Decimal] = defaultdict(Decimal)
        for item in batida.ingredientes_personalizados:
            requisitos[int(item["insumo_id"])] += Decimal(str(item["quantidade_kg"]))
    else:
        requisitos = _diet_requirements(batida.dieta, Decimal(str(batida.quantidade_kg)))

    ids = set(requisitos)
    existentes = {i for (i,) in db.query(Insumo.insumo_id).filter(Insumo.insumo_id.in_(ids)).all()}
    faltando = sorted(ids - existentes)
    if faltando:
        raise NotFoundError(f"insumo_not_found: insumos {faltando} não existem.")

    return {k: v.quantize(KG_Q) for k, v in sorted(requisitos.items()) if v > 0}


# ==================== OPERAÇÕES ====================

def _next_codigo(db: Session, data_hora: datetime) -> str:
    prefixo = f"BT-{data_hora:%Y%m%d}-"
    ultimo = (
        db.query(Batida.codigo)
        .filter(Batida.codigo.like(f"{prefixo}%"))
        .order_by(Batida.codigo.desc())
        .first()
    )
    seq = int(ultimo[0].rsplit("-", 1)[1]) + 1 if ultimo else 1
    return f"{prefixo}{seq:03d}"


def create_batch(
    db: Session,
    dieta_id: int,
    quantidade_kg,
    vagao_id: Optional[int] = None,
    data_hora: Optional[datetime] = None,
    observacoes: Optional[str] = None,
    ingredientes_personalizados: Optional[Sequence[Mapping[str, Any]]] = None,
) -> Batida:
    qtd = Decimal(str(quantidade_kg)).quantize(KG_Q)
    if qtd <= 0:
        raise ValidationError(f"quantidade_kg deve ser > 0 (recebido {qtd})")
    get_dieta_or_404(db, dieta_id)
    if vagao_id is not None:
        vagao = get_vagao_or_404(db, vagao_id)
        if qtd > vagao.capacidade_kg:
            raise ValidationError(
                f"wagon_capacity_exceeded: {qtd} kg excede a capacidade do vagão {vagao.nome} ({vagao.capacidade_kg} kg)."
            )
    personalizados = (
        _validate_custom_ingredients(ingredientes_personalizados)
        if ingredientes_personalizados is not None
        else None
    )
    momento = to_local_naive(data_hora) if data_hora else now_local()

    with uow(db):
        # Dois cadastros simultâneos podem gerar o mesmo código; o UNIQUE decide
        for tentativa in range(1, _CODIGO_TENTATIVAS + 1):
            batida = Batida(
                codigo=_next_codigo(db, momento),
                dieta_id=dieta_id,
                vagao_id=vagao_id,
                quantidade_kg=qtd,
                data_hora=momento,
                status=BatidaStatusEnum.PREPARANDO,
                observacoes=observacoes,
                ingredientes_personalizados=personalizados,
            )
            try:
                with db.begin_nested():
                    db.add(batida)
                    db.flush()
                break
            except IntegrityError:
                if tentativa == _CODIGO_TENTATIVAS:
                    raise
                logger.warning("Código de batida %s em uso, gerando outro", batida.codigo)

    db.refresh(batida)
    logger.info("Batida %s criada (%s kg, dieta %s)", batida.codigo, qtd, dieta_id)
    return batida


def approve_batch(
    db: Session,
    batida_id: int,
    inventory: Optional[InventoryGateway] = None,
) -> Batida:
    """
    Conclui a batida e baixa os insumos em uma única transação.

    A troca de status é condicional (UPDATE ... WHERE status = PREPARANDO):
    de duas aprovações concorrentes só uma passa, e o estoque é baixado uma vez.
    Com qualquer insumo insuficiente a transação é desfeita e a batida
    continua PREPARANDO.
    """
    batida = get_batch_or_404(db, batida_id)
    _ensure_transition(batida, BatidaStatusEnum.CONCLUIDA)
    requisitos = resolve_requirements(db, batida)
    codigo = batida.codigo
    inventory = inventory or LedgerInventory(db)

    with uow(db):
        result = db.execute(
            update(Batida)
            .where(Batida.batida_id == batida_id, Batida.status == BatidaStatusEnum.PREPARANDO)
            .values(status=BatidaStatusEnum.CONCLUIDA, updated_at=now_local())
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise StateError(f"batch_invalid_transition: batida {codigo} já foi concluída ou cancelada.")

        insumos = inventory.lock(requisitos)
        faltas = []
        for insumo_id, necessario in requisitos.items():
            disponivel = inventory.available_stock(insumo_id)
            if necessario > disponivel:
                faltas.append({
                    "insumo_id": insumo_id,
                    "insumo_nome": insumos[insumo_id].nome if insumo_id in insumos else str(insumo_id),
                    "necessario_kg": necessario,
                    "disponivel_kg": disponivel,
                    "faltante_kg": necessario - disponivel,
                })
        if faltas:
            logger.warning("Batida %s sem estoque suficiente: %s", codigo, [f["insumo_nome"] for f in faltas])
            raise StockError(faltas)

        for insumo_id, necessario in requisitos.items():
            inventory.deduct(insumo_id, necessario, batida_id=batida_id, observacoes=f"Batida {codigo}")

    db.refresh(batida)
    logger.info("Batida %s concluída (%d insumos baixados)", codigo, len(requisitos))
    return batida


def cancel_batch(db: Session, batida_id: int) -> Batida:
    batida = get_batch_or_404(db, batida_id)
    _ensure_transition(batida, BatidaStatusEnum.CANCELADA)
    codigo = batida.codigo

    with uow(db):
        result = db.execute(
            update(Batida)
            .where(Batida.batida_id == batida_id, Batida.status == BatidaStatusEnum.PREPARANDO)
            .values(status=BatidaStatusEnum.CANCELADA, updated_at=now_local())
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise StateError(f"batch_invalid_transition: batida {codigo} já foi concluída ou cancelada.")

    db.refresh(batida)
    logger.info("Batida %s cancelada", codigo)
    return batida


def delete_batch(db: Session, batida_id: int) -> None:
    batida = get_batch_or_404(db, batida_id)
    if batida.status == BatidaStatusEnum.CONCLUIDA:
        raise StateError(
            f"batch_completed: batida {batida.codigo} já baixou estoque e não pode ser excluída."
        )
    codigo = batida.codigo
    with uow(db):
        db.delete(batida)
    logger.info("Batida %s excluída", codigo)
